"""Core services for SolKit."""

from .config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG_DIR,
    ConfigManager,
    ConfigurationError,
    SolKitConfig,
)
from .logs import SecretRedactionFilter, configure_logging, redact

__all__ = [
    "ConfigManager",
    "SolKitConfig",
    "ConfigurationError",
    "DEFAULT_CONFIG_DIR",
    "CONFIG_FILENAME",
    "SecretRedactionFilter",
    "configure_logging",
    "redact",
]
