from __future__ import annotations

import logging
import os
from typing import Any

import requests

from src.utils.config_loader import require_env

logger = logging.getLogger(__name__)


class GasPriceError(RuntimeError):
    """Raised when a gas oracle returns nothing usable."""


class EtherscanGasOracle:
    """
    Mainnet gas price from the Etherscan gas tracker.

    `speed` picks the tier: "safe", "propose" or "fast" (most likely to be
    included within a couple of blocks).
    """

    _FIELDS = {"safe": "SafeGasPrice", "propose": "ProposeGasPrice", "fast": "FastGasPrice"}

    def __init__(self, url: str, *, chain_id: int = 1, speed: str = "fast", api_key: str | None = None, timeout: float = 10):
        if speed not in self._FIELDS:
            raise ValueError(f"Unsupported Etherscan gas speed: {speed}")
        self.url = url
        self.chain_id = int(chain_id)
        self.speed = speed
        self.api_key = api_key if api_key is not None else (os.getenv("ETHERSCAN_API_KEY") or "").strip()
        self.timeout = timeout
        self.session = requests.Session()

    def get_gas_price_gwei(self) -> float:
        params: dict[str, Any] = {"chainid": self.chain_id, "module": "gastracker", "action": "gasoracle"}
        if self.api_key:
            params["apikey"] = self.api_key
        resp = self.session.get(self.url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        body = resp.json()

        result = body.get("result")
        if str(body.get("status")) != "1" or not isinstance(result, dict):
            raise GasPriceError(f"Etherscan gas oracle error: {body.get('message')} {result}")
        try:
            return float(result[self._FIELDS[self.speed]])
        except (KeyError, TypeError, ValueError) as e:
            raise GasPriceError(f"Etherscan gas oracle returned no {self.speed} price: {result}") from e


class PolygonGasStationOracle:
    """Polygon gas price from the Polygon gas station (v2), `maxFee` of the chosen tier."""

    _TIERS = ("safeLow", "standard", "fast")

    def __init__(self, url: str, *, speed: str = "fast", timeout: float = 10):
        if speed not in self._TIERS:
            raise ValueError(f"Unsupported Polygon gas station speed: {speed}")
        self.url = url
        self.speed = speed
        self.timeout = timeout
        self.session = requests.Session()

    def get_gas_price_gwei(self) -> float:
        resp = self.session.get(self.url, timeout=self.timeout)
        resp.raise_for_status()
        body = resp.json()
        try:
            return float(body[self.speed]["maxFee"])
        except (KeyError, TypeError, ValueError) as e:
            raise GasPriceError(f"Polygon gas station returned no {self.speed} price: {body}") from e


def create_gas_oracle(network_cfg: dict[str, Any]):
    """Build the gas oracle configured for a network block of config.yaml."""
    oracle_cfg = network_cfg.get("gas_oracle") or {}
    kind = str(oracle_cfg.get("kind", "")).strip()
    timeout = float(oracle_cfg.get("timeout_seconds", 10))

    if kind == "etherscan":
        # The v2 gas tracker rejects keyless requests.
        return EtherscanGasOracle(
            str(oracle_cfg["url"]),
            api_key=require_env("ETHERSCAN_API_KEY"),
            chain_id=int(network_cfg.get("chain_id", 1)),
            speed=str(oracle_cfg.get("speed", "fast")),
            timeout=timeout,
        )
    if kind == "polygon_gas_station":
        return PolygonGasStationOracle(
            str(oracle_cfg["url"]),
            speed=str(oracle_cfg.get("speed", "fast")),
            timeout=timeout,
        )
    raise ValueError(f"Unsupported gas oracle kind: {kind or '<missing>'}")
