from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Direction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    NONE = "NONE"


class RouteStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


class OutcomeStatus(str, Enum):
    TRADED = "TRADED"
    SKIPPED = "SKIPPED"
    DRY_RUN = "DRY_RUN"
    FAILED = "FAILED"


@dataclass(frozen=True)
class TrackedAsset:
    id: str
    symbol: str | None = None
    name: str | None = None
    decimals: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "symbol": self.symbol, "name": self.name, "decimals": self.decimals}


@dataclass(frozen=True)
class VaultSnapshot:
    vault_address: str
    comptroller_id: str | None
    tracked_assets: tuple[TrackedAsset, ...] = ()
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "vault_address": self.vault_address,
            "name": self.name,
            "comptroller_id": self.comptroller_id,
            "tracked_assets": [a.to_dict() for a in self.tracked_assets],
        }


@dataclass(frozen=True)
class AssetPair:
    """The single configured pair: the primary reserve asset and what it trades against."""

    primary: str
    secondary: str


@dataclass(frozen=True)
class TradeIntent:
    direction: Direction
    incoming_asset_id: str | None = None
    outgoing_asset_id: str | None = None
    outgoing_amount: int = 0

    @property
    def is_trade(self) -> bool:
        return self.direction != Direction.NONE


@dataclass(frozen=True)
class PricedRoute:
    status: RouteStatus
    output_amount: int | None = None
    hop_addresses: tuple[str, ...] | None = None
    hop_fees: tuple[int, ...] | None = None
    message: str | None = None

    @property
    def is_complete(self) -> bool:
        return (
            self.status == RouteStatus.OK
            and self.output_amount is not None
            and bool(self.hop_addresses)
            and bool(self.hop_fees)
        )

    @classmethod
    def ok(cls, output_amount: int, hop_addresses: tuple[str, ...], hop_fees: tuple[int, ...]) -> PricedRoute:
        return cls(
            status=RouteStatus.OK,
            output_amount=int(output_amount),
            hop_addresses=tuple(hop_addresses),
            hop_fees=tuple(int(f) for f in hop_fees),
        )

    @classmethod
    def error(cls, message: str) -> PricedRoute:
        return cls(status=RouteStatus.ERROR, message=message)


@dataclass(frozen=True)
class EncodedSwapCall:
    adapter_address: str
    integration_manager_address: str
    comptroller_address: str
    payload: bytes
    sender_address: str
    calldata: bytes = b""

    def to_transaction(self) -> dict[str, Any]:
        """Base transaction fields shared by simulation, estimation and submission."""
        return {
            "from": self.sender_address,
            "to": self.comptroller_address,
            "data": "0x" + self.calldata.hex(),
            "value": 0,
        }


@dataclass(frozen=True)
class SubmissionResult:
    transaction_hash: str
    gas_used: int

    def to_dict(self) -> dict[str, Any]:
        return {"transaction_hash": self.transaction_hash, "gas_used": int(self.gas_used)}


@dataclass(frozen=True)
class IterationOutcome:
    status: OutcomeStatus
    reason: str = ""
    result: SubmissionResult | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def traded(cls, result: SubmissionResult) -> IterationOutcome:
        return cls(status=OutcomeStatus.TRADED, reason="submitted", result=result)

    @classmethod
    def skipped(cls, reason: str, **details: Any) -> IterationOutcome:
        return cls(status=OutcomeStatus.SKIPPED, reason=reason, details=details)

    @classmethod
    def dry_run(cls, reason: str, **details: Any) -> IterationOutcome:
        return cls(status=OutcomeStatus.DRY_RUN, reason=reason, details=details)

    @classmethod
    def failed(cls, reason: str) -> IterationOutcome:
        return cls(status=OutcomeStatus.FAILED, reason=reason)
