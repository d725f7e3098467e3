from __future__ import annotations

import logging
import os
import threading
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_cache_lock = threading.Lock()
# Validated configs keyed by resolved path; overrides are applied before caching.
_cache: dict[Path, dict[str, Any]] = {}

SUPPORTED_NETWORKS = ("ETHEREUM", "POLYGON")

CONFIG_PATH_ENV = "ENZYME_BOT_CONFIG"

_TRUTHY = {"1", "true", "yes", "on"}


def default_config_path() -> Path:
    """`$ENZYME_BOT_CONFIG` when set, else `config/config.yaml` next to `src/`."""
    override = (os.getenv(CONFIG_PATH_ENV) or "").strip()
    if override:
        return Path(override).expanduser()
    return Path(__file__).resolve().parents[2] / "config" / "config.yaml"


def require_env(name: str) -> str:
    """Return a required environment variable, failing fast when it is unset or blank."""
    value = (os.getenv(name) or "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def _apply_env_overrides(cfg: dict[str, Any]) -> None:
    """
    Override selected YAML settings with environment variables.

    Secrets never live in the YAML; these overrides only cover operational knobs
    and per-network contract addresses.
    """
    if os.getenv("ENZYME_BOT_NETWORK"):
        cfg["network"] = os.environ["ENZYME_BOT_NETWORK"]

    scheduler = cfg.setdefault("scheduler", {})
    if os.getenv("ENZYME_BOT_INTERVAL_SECONDS"):
        scheduler["interval_seconds"] = int(os.environ["ENZYME_BOT_INTERVAL_SECONDS"])

    trading = cfg.setdefault("trading", {})
    if os.getenv("ENZYME_BOT_DRY_RUN"):
        trading["dry_run"] = os.environ["ENZYME_BOT_DRY_RUN"].strip().lower() in _TRUTHY
    if os.getenv("ENZYME_BOT_TRADE_SIZE_BPS"):
        trading["trade_size_bps"] = int(os.environ["ENZYME_BOT_TRADE_SIZE_BPS"])

    for name, net in (cfg.get("networks") or {}).items():
        if not isinstance(net, dict):
            continue
        enzyme = net.setdefault("enzyme", {})
        if os.getenv(f"{name}_INTEGRATION_MANAGER"):
            enzyme["integration_manager"] = os.environ[f"{name}_INTEGRATION_MANAGER"]
        if os.getenv(f"{name}_UNISWAP_V3_ADAPTER"):
            enzyme["uniswap_v3_adapter"] = os.environ[f"{name}_UNISWAP_V3_ADAPTER"]


def validate_config(cfg: dict[str, Any]) -> None:
    """
    Fail fast if the configuration is missing required sections.

    Contract addresses are allowed to be blank here: a missing adapter or
    integration manager only skips iterations, it does not stop the bot.
    """
    required_top = ["network", "scheduler", "trading", "networks"]
    missing = [k for k in required_top if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config sections: {', '.join(missing)}")

    network = str(cfg["network"]).strip().upper()
    if network not in SUPPORTED_NETWORKS:
        raise ValueError(f"Unsupported network: {network} (expected one of {', '.join(SUPPORTED_NETWORKS)})")
    cfg["network"] = network

    net = (cfg.get("networks") or {}).get(network)
    if not isinstance(net, dict):
        raise ValueError(f"Missing networks.{network} in config")
    for k in ["chain_id", "uniswap", "gas_oracle"]:
        if k not in net:
            raise ValueError(f"Missing networks.{network}.{k} in config")

    trading = cfg.get("trading") or {}
    for k in ["primary_asset", "secondary_asset"]:
        if not str(trading.get(k) or "").strip():
            raise ValueError(f"Missing trading.{k} in config")

    size = int(trading.get("trade_size_bps", 5000))
    if size <= 0 or size > 10000:
        raise ValueError("trading.trade_size_bps must be between 1 and 10000")

    interval = float((cfg.get("scheduler") or {}).get("interval_seconds", 60))
    if interval <= 0:
        raise ValueError("scheduler.interval_seconds must be > 0")


def network_config(cfg: dict[str, Any]) -> dict[str, Any]:
    """The block under `networks` for the selected network."""
    return cfg["networks"][cfg["network"]]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {path}") from None

    cfg = yaml.safe_load(text) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path} must hold a YAML mapping, got {type(cfg).__name__}")
    return cfg


def load_config(config_path: str | Path | None = None, *, force_reload: bool = False) -> dict[str, Any]:
    """
    Read, override and validate a config file, caching the result per path.

    Callers get a deep copy; `force_reload` re-reads the file and re-applies
    the environment (used by tests and after editing secrets).
    """
    path = Path(config_path or default_config_path()).resolve()

    with _cache_lock:
        if force_reload or path not in _cache:
            cfg = _read_yaml(path)
            _apply_env_overrides(cfg)
            validate_config(cfg)
            _cache[path] = cfg
            logger.info("Loaded config from %s (network: %s)", path, cfg["network"])
        return deepcopy(_cache[path])
