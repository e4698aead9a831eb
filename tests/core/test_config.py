import logging
from pathlib import Path
from typing import Any

import pytest
import tomli_w
import tomllib

from solkit.core.config import CONFIG_FILENAME, ConfigManager, ConfigurationError, SolKitConfig
from solkit.solana.constants import DEVNET, MAINNET, TESTNET
from solkit.solana.keypair import Keypair


def make_manager(tmp_path: Path, **kwargs: Any) -> ConfigManager:
    kwargs.setdefault("environ", {})
    return ConfigManager(config_dir=tmp_path, **kwargs)


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = make_manager(tmp_path).load()

    assert config.network == "mainnet"
    assert config.endpoint() == MAINNET
    assert config.timeout_seconds is None
    assert config.subscription_timeout_seconds == 30.0
    assert not (tmp_path / CONFIG_FILENAME).exists()


def test_save_and_reload(tmp_path: Path) -> None:
    manager = make_manager(tmp_path)
    manager.save(SolKitConfig(network="devnet", timeout_seconds=5.0))

    data = tomllib.loads((tmp_path / CONFIG_FILENAME).read_text())
    assert data["network"] == "devnet"
    assert "rpc_url" not in data

    config = manager.load()
    assert config.endpoint() == DEVNET
    assert config.timeout_seconds == 5.0


def test_update_persists_changes(tmp_path: Path) -> None:
    manager = make_manager(tmp_path)
    manager.save(SolKitConfig(network="devnet"))

    updated = manager.update(network="testnet", log_level=None)

    assert updated.network == "testnet"
    assert manager.load().endpoint() == TESTNET


def test_override_file_merges_over_base(tmp_path: Path) -> None:
    override_path = tmp_path / "project.toml"
    override_path.write_text(tomli_w.dumps({"rpc_url": "https://rpc.example.com"}))
    manager = make_manager(tmp_path, override_config_path=override_path)
    manager.save(SolKitConfig(network="devnet"))

    endpoint = manager.load().endpoint()

    assert endpoint.http == "https://rpc.example.com"
    assert endpoint.ws == "wss://rpc.example.com"


def test_env_overrides_take_precedence(tmp_path: Path) -> None:
    manager = make_manager(
        tmp_path,
        environ={"SOLKIT_NETWORK": "testnet", "SOLKIT_WS_URL": "wss://stream.example.com"},
    )
    manager.save(SolKitConfig(network="devnet"))

    endpoint = manager.load().endpoint()

    assert endpoint.http == TESTNET.http
    assert endpoint.ws == "wss://stream.example.com"


def test_process_environment_is_used_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLKIT_NETWORK", "devnet")

    config = ConfigManager(config_dir=tmp_path).load()

    assert config.endpoint() == DEVNET


def test_unknown_network_rejected(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(tomli_w.dumps({"network": "moonnet"}))

    with pytest.raises(ConfigurationError):
        make_manager(tmp_path).load()


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("network = ")

    with pytest.raises(ConfigurationError):
        make_manager(tmp_path).load()


def test_load_keypair_from_configured_path(tmp_path: Path) -> None:
    keypair = Keypair.generate()
    keypair_path = tmp_path / "id.json"
    keypair.save_to_json(keypair_path)
    manager = make_manager(tmp_path)
    manager.save(SolKitConfig(keypair_path=str(keypair_path)))

    assert manager.load_keypair() == keypair


def test_load_keypair_requires_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        make_manager(tmp_path).load_keypair()


def test_configure_logging_uses_configured_level(tmp_path: Path) -> None:
    manager = make_manager(tmp_path, environ={"SOLKIT_LOG_LEVEL": "debug"})

    logger = manager.configure_logging()
    try:
        assert logger.name == "solkit"
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)


def test_unknown_log_level_rejected(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(tomli_w.dumps({"log_level": "chatty"}))

    with pytest.raises(ConfigurationError):
        make_manager(tmp_path).load()
