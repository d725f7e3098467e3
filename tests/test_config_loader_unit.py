import pytest
import yaml

from src.utils.config_loader import default_config_path, load_config, network_config, require_env, validate_config

_OVERRIDE_VARS = [
    "ENZYME_BOT_CONFIG",
    "ENZYME_BOT_NETWORK",
    "ENZYME_BOT_INTERVAL_SECONDS",
    "ENZYME_BOT_DRY_RUN",
    "ENZYME_BOT_TRADE_SIZE_BPS",
    "ETHEREUM_INTEGRATION_MANAGER",
    "ETHEREUM_UNISWAP_V3_ADAPTER",
    "POLYGON_INTEGRATION_MANAGER",
    "POLYGON_UNISWAP_V3_ADAPTER",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _OVERRIDE_VARS:
        monkeypatch.delenv(name, raising=False)


def _base():
    return {
        "network": "ethereum",
        "scheduler": {"interval_seconds": 60},
        "trading": {"primary_asset": "0xaa", "secondary_asset": "0xbb", "trade_size_bps": 5000},
        "networks": {
            "ETHEREUM": {
                "chain_id": 1,
                "enzyme": {"integration_manager": "", "uniswap_v3_adapter": ""},
                "uniswap": {"quoter": "0xq"},
                "gas_oracle": {"kind": "etherscan", "url": "https://example.invalid"},
            }
        },
    }


def _write(tmp_path, cfg):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


def test_repo_config_file_is_valid():
    cfg = load_config(default_config_path(), force_reload=True)
    assert cfg["network"] in {"ETHEREUM", "POLYGON"}
    assert network_config(cfg)["chain_id"] in {1, 137}
    assert cfg["scheduler"]["interval_seconds"] == 60


def test_validate_config_normalises_network_name():
    cfg = _base()
    validate_config(cfg)
    assert cfg["network"] == "ETHEREUM"


def test_validate_config_rejects_missing_sections():
    cfg = _base()
    del cfg["trading"]
    with pytest.raises(ValueError, match=r"Missing required config sections: trading"):
        validate_config(cfg)


def test_validate_config_rejects_unknown_network():
    cfg = _base()
    cfg["network"] = "SOLANA"
    with pytest.raises(ValueError, match=r"Unsupported network"):
        validate_config(cfg)


def test_validate_config_requires_selected_network_block():
    cfg = _base()
    cfg["network"] = "POLYGON"
    with pytest.raises(ValueError, match=r"Missing networks.POLYGON"):
        validate_config(cfg)


def test_validate_config_rejects_bad_trade_size():
    cfg = _base()
    cfg["trading"]["trade_size_bps"] = 20000
    with pytest.raises(ValueError, match=r"trade_size_bps"):
        validate_config(cfg)


def test_load_config_applies_env_overrides(tmp_path, monkeypatch):
    path = _write(tmp_path, _base())
    monkeypatch.setenv("ENZYME_BOT_INTERVAL_SECONDS", "15")
    monkeypatch.setenv("ENZYME_BOT_DRY_RUN", "true")
    monkeypatch.setenv("ETHEREUM_UNISWAP_V3_ADAPTER", "0xadapter")

    cfg = load_config(path, force_reload=True)
    assert cfg["scheduler"]["interval_seconds"] == 15
    assert cfg["trading"]["dry_run"] is True
    assert cfg["networks"]["ETHEREUM"]["enzyme"]["uniswap_v3_adapter"] == "0xadapter"


def test_load_config_returns_independent_copies(tmp_path):
    path = _write(tmp_path, _base())
    first = load_config(path, force_reload=True)
    first["trading"]["primary_asset"] = "mutated"
    assert load_config(path)["trading"]["primary_asset"] == "0xaa"


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml", force_reload=True)


def test_require_env(monkeypatch):
    monkeypatch.setenv("ENZYME_VAULT_ADDRESS", "  0xvault ")
    assert require_env("ENZYME_VAULT_ADDRESS") == "0xvault"

    monkeypatch.setenv("ENZYME_VAULT_ADDRESS", "   ")
    with pytest.raises(ValueError, match=r"Missing required environment variable: ENZYME_VAULT_ADDRESS"):
        require_env("ENZYME_VAULT_ADDRESS")


def test_config_path_can_come_from_the_environment(tmp_path, monkeypatch):
    cfg = _base()
    cfg["scheduler"]["interval_seconds"] = 5
    path = _write(tmp_path, cfg)
    monkeypatch.setenv("ENZYME_BOT_CONFIG", str(path))

    assert default_config_path() == path
    assert load_config(force_reload=True)["scheduler"]["interval_seconds"] == 5


def test_load_config_rejects_non_mapping_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must hold a YAML mapping"):
        load_config(path, force_reload=True)
