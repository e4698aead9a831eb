"""Error types raised by the Solana helpers."""

from __future__ import annotations

from typing import Any

# Filesystem failures (missing file, directory path, permissions) surface as
# the builtin OSError subclasses unchanged.
FileAccessError = OSError


class SolKitError(RuntimeError):
    """Base class for SolKit failures."""


class InvalidEncoding(SolKitError, ValueError):
    """Raised when Base58/Base64 input cannot be decoded."""


class KeypairError(SolKitError):
    """Raised when keypair material cannot be constructed."""


class BadSecretKeySize(KeypairError):
    """Raised when a secret key is not 64 bytes long."""

    def __init__(self, message: str = "Bad secret key size") -> None:
        super().__init__(message)


class KeyMismatch(KeypairError):
    """Raised when a public key does not belong to the secret key."""

    def __init__(self, message: str = "Provided secretKey is invalid") -> None:
        super().__init__(message)


class MalformedDocument(KeypairError, ValueError):
    """Raised when a persisted keypair file is not a valid document."""


class InvalidMnemonic(KeypairError):
    """Raised when a recovery phrase fails its checksum."""


class TransportError(SolKitError):
    """Raised when the RPC node cannot be reached or answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(TransportError):
    """Raised when the RPC node answers with a body that is not JSON."""


class SubscriptionError(SolKitError):
    """Raised when the node rejects a subscription request."""

    def __init__(self, message: str, *, code: int | None = None, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


__all__ = [
    "FileAccessError",
    "SolKitError",
    "InvalidEncoding",
    "KeypairError",
    "BadSecretKeySize",
    "KeyMismatch",
    "MalformedDocument",
    "InvalidMnemonic",
    "TransportError",
    "ResponseParseError",
    "SubscriptionError",
]
