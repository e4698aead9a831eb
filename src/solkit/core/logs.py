"""Logging setup with redaction of secret key material."""

from __future__ import annotations

import logging
import re
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# 64-byte secret keys and signatures encode to 86-88 Base58 characters;
# 32-byte public keys (32-44 characters) are left readable.
_SECRET_PATTERN = re.compile(r"\b[1-9A-HJ-NP-Za-km-z]{64,90}\b")


def _mask(token: str) -> str:
    return f"{token[:4]}…{token[-4:]}"


def redact(text: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        return _mask(match.group(0))

    return _SECRET_PATTERN.sub(_replace, text)


class SecretRedactionFilter(logging.Filter):
    """Masks long Base58 tokens in formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        sanitized = redact(message)
        if sanitized != message:
            record.msg = sanitized
            record.args = None
        return True


def configure_logging(level: str | int = "WARNING", *, log_file: Path | None = None) -> logging.Logger:
    """Configure the ``solkit`` logger and return it."""
    if isinstance(level, str):
        resolved = logging.getLevelNamesMapping().get(level.strip().upper())
        if resolved is None:
            raise ValueError(f"Unknown log level '{level}'")
    else:
        resolved = level

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    package_logger = logging.getLogger("solkit")
    package_logger.setLevel(resolved)

    handlers = list(root_logger.handlers)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(resolved)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        handlers.append(handler)
    for handler in handlers:
        if not any(isinstance(existing, SecretRedactionFilter) for existing in handler.filters):
            handler.addFilter(SecretRedactionFilter())
    return package_logger


__all__ = ["LOG_FORMAT", "SecretRedactionFilter", "configure_logging", "redact"]
