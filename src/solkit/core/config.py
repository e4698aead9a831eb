"""Configuration management for SolKit."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from solkit.solana.constants import Endpoint
from solkit.solana.keypair import Keypair

from .logs import configure_logging

DEFAULT_CONFIG_DIR = Path(os.environ.get("SOLKIT_HOME", Path.home() / ".solkit"))
CONFIG_FILENAME = "config.toml"

ENV_OVERRIDES = {
    "SOLKIT_NETWORK": "network",
    "SOLKIT_RPC_URL": "rpc_url",
    "SOLKIT_WS_URL": "ws_url",
    "SOLKIT_KEYPAIR_PATH": "keypair_path",
    "SOLKIT_LOG_LEVEL": "log_level",
}


class ConfigurationError(RuntimeError):
    """Raised when configuration loading fails."""


class SolKitConfig(BaseModel):
    """Persisted SolKit configuration settings."""

    config_version: int = 1
    network: str = "mainnet"
    # Custom URLs take precedence over the network preset
    rpc_url: str | None = None
    ws_url: str | None = None
    timeout_seconds: float | None = None
    subscription_timeout_seconds: float = 30.0
    keypair_path: str | None = None
    log_level: str = "WARNING"

    @field_validator("network", "log_level")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        if value.upper() not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{value}'")
        return value

    @model_validator(mode="after")
    def _check_network(self) -> SolKitConfig:
        if not self.rpc_url:
            Endpoint.for_network(self.network)
        return self

    def endpoint(self) -> Endpoint:
        """Resolve the HTTP/WebSocket pair these settings point at."""
        if self.rpc_url:
            return Endpoint.custom(self.rpc_url, self.ws_url, name=self.network)
        preset = Endpoint.for_network(self.network)
        if self.ws_url:
            return Endpoint(name=preset.name, http=preset.http, ws=self.ws_url)
        return preset


class ConfigManager:
    """Handles loading and persisting SolKit configuration.

    Values are layered: ``config.toml`` in the config directory, then an
    optional override file, then ``SOLKIT_*`` environment variables.
    """

    def __init__(
        self,
        config_dir: Path | None = None,
        override_config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config_dir = config_dir or DEFAULT_CONFIG_DIR
        self.config_path = self.config_dir / CONFIG_FILENAME
        self.override_config_path = override_config_path
        self._environ = os.environ if environ is None else environ

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> SolKitConfig:
        data: dict[str, Any] = self._read_config_dict(self.config_path)
        if self.override_config_path:
            data = self._merge_dicts(data, self._read_config_dict(self.override_config_path))
        data = self._merge_dicts(data, self._env_overrides())
        try:
            return SolKitConfig(**data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    def save(self, config: SolKitConfig) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(tomli_w.dumps(config.model_dump(exclude_none=True)))

    def update(self, **updates: object) -> SolKitConfig:
        """Persist `updates` on top of the stored file (env vars are not written)."""
        current = self._read_config_dict(self.config_path)
        current = current.copy() if current else {}
        current.update({key: value for key, value in updates.items() if value is not None})
        try:
            config = SolKitConfig(**current)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
        self.save(config)
        return config

    def load_keypair(self, config: SolKitConfig | None = None) -> Keypair:
        config = config or self.load()
        if not config.keypair_path:
            raise ConfigurationError("No keypair_path configured")
        return Keypair.load_from_json(Path(config.keypair_path).expanduser())

    def configure_logging(self, config: SolKitConfig | None = None, *, log_file: Path | None = None) -> logging.Logger:
        """Apply the configured ``log_level`` to the ``solkit`` logger."""
        config = config or self.load()
        return configure_logging(config.log_level, log_file=log_file)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for env_name, field_name in ENV_OVERRIDES.items():
            value = self._environ.get(env_name)
            if value:
                overrides[field_name] = value
        return overrides

    def _read_config_dict(self, path: Path | None) -> dict[str, Any]:
        if path is None:
            return {}
        if not path.exists():
            return {}
        try:
            return tomllib.loads(path.read_text())
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Failed to load config from {path}: {exc}") from exc

    def _merge_dicts(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        result = deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "CONFIG_FILENAME",
    "ConfigManager",
    "ConfigurationError",
    "SolKitConfig",
]
