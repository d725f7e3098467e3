"""Turn RPC / contract failures into a one-line reason for the logs."""

from __future__ import annotations

from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError

ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")  # Error(string)
PANIC_SELECTOR = bytes.fromhex("4e487b71")  # Panic(uint256)

PANIC_CODES = {
    0x00: "generic compiler panic",
    0x01: "assertion failed",
    0x11: "arithmetic overflow or underflow",
    0x12: "division or modulo by zero",
    0x21: "invalid enum value",
    0x22: "invalid storage byte array",
    0x31: "pop on empty array",
    0x32: "array index out of bounds",
    0x41: "out of memory",
    0x51: "call to uninitialised function",
}


class TransactionFailedError(RuntimeError):
    """Raised when a mined transaction reports status 0."""


def _as_bytes(value: Any) -> bytes | None:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value) or None
    if isinstance(value, str):
        v = value.strip()
        if v.startswith("0x") and len(v) > 2:
            try:
                return bytes.fromhex(v[2:])
            except ValueError:
                return None
    if isinstance(value, dict):
        # Some nodes nest the payload one level deeper: {"data": {"data": "0x..."}}
        return _as_bytes(value.get("data"))
    return None


def _rpc_error(exc: BaseException) -> dict[str, Any]:
    resp = getattr(exc, "rpc_response", None)
    if isinstance(resp, dict) and isinstance(resp.get("error"), dict):
        return resp["error"]
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0]
    return {}


def revert_data(exc: BaseException) -> bytes | None:
    """Structured revert payload carried by the exception, if any."""
    data = _as_bytes(getattr(exc, "data", None))
    if data:
        return data
    return _as_bytes(_rpc_error(exc).get("data"))


def error_message(exc: BaseException) -> str | None:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message.strip()
    rpc_message = _rpc_error(exc).get("message")
    if isinstance(rpc_message, str) and rpc_message.strip():
        return rpc_message.strip()
    text = str(exc).strip()
    return text or None


def decode_revert_reason(data: bytes) -> str:
    """Human readable reason for raw revert data."""
    if not data:
        return "reverted without a reason"

    selector, body = data[:4], data[4:]
    try:
        if selector == ERROR_STRING_SELECTOR:
            # Same layout as `string`; the payload need not be valid UTF-8.
            (raw_reason,) = decode(["bytes"], body)
            return f"reverted: {raw_reason.decode('utf-8', errors='replace')}"
        if selector == PANIC_SELECTOR:
            (code,) = decode(["uint256"], body)
            return f"panic 0x{code:02x}: {PANIC_CODES.get(code, 'unknown panic code')}"
    except DecodingError:
        return f"undecodable revert data 0x{data.hex()}"

    return f"reverted with custom error 0x{selector.hex()}"


def describe_error(exc: BaseException) -> str:
    """
    Classify a failed iteration step.

    Structured revert data wins, then any plain message, then the raw error.
    """
    data = revert_data(exc)
    if data:
        return decode_revert_reason(data)

    message = error_message(exc)
    if message:
        return message

    return repr(exc)
