"""Ed25519 keypairs with JSON persistence."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from mnemonic import Mnemonic

from .codec import base58_decode, base58_encode
from .errors import BadSecretKeySize, InvalidMnemonic, KeyMismatch, MalformedDocument

logger = logging.getLogger(__name__)

PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64
MNEMONIC_STRENGTH = 256
MNEMONIC_LANGUAGE = "english"


def _derive_public_key(seed: bytes) -> bytes:
    private_key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


@dataclass(frozen=True)
class Keypair:
    """An immutable Ed25519 keypair.

    ``secret_key`` uses the conventional 64-byte packing: the 32-byte signing
    seed followed by the 32-byte public key. ``public_key`` is always the key
    derived from the seed.
    """

    public_key: bytes
    secret_key: bytes

    def __post_init__(self) -> None:
        if len(self.secret_key) != SECRET_KEY_LENGTH:
            raise BadSecretKeySize()
        if len(self.public_key) != PUBLIC_KEY_LENGTH:
            raise KeyMismatch(f"Public key must be {PUBLIC_KEY_LENGTH} bytes")
        if _derive_public_key(self.secret_key[:32]) != self.public_key:
            raise KeyMismatch()

    def __repr__(self) -> str:
        return f"Keypair(public_key={self.public_key_base58!r})"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def generate(cls) -> Keypair:
        private_key = ed25519.Ed25519PrivateKey.generate()
        return cls._from_private_key(private_key)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> Keypair:
        """Build a keypair from 64 bytes of secret key material.

        Only the first 32 bytes (the seed) are used to derive the public key;
        the trailing half is stored as given.
        """
        secret_key = bytes(secret_key)
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise BadSecretKeySize()
        return cls(public_key=_derive_public_key(secret_key[:32]), secret_key=secret_key)

    @classmethod
    def from_mnemonic(cls, phrase: str, *, passphrase: str = "") -> Keypair:
        """Derive a keypair from a BIP-39 recovery phrase."""
        normalized = " ".join(phrase.strip().lower().split())
        mnemonic = Mnemonic(MNEMONIC_LANGUAGE)
        if not mnemonic.check(normalized):
            raise InvalidMnemonic("Invalid recovery phrase checksum.")
        seed = mnemonic.to_seed(normalized, passphrase=passphrase)[:32]
        return cls._from_private_key(ed25519.Ed25519PrivateKey.from_private_bytes(seed))

    @classmethod
    def _from_private_key(cls, private_key: ed25519.Ed25519PrivateKey) -> Keypair:
        seed = private_key.private_bytes(
            encoding=Encoding.Raw,
            format=PrivateFormat.Raw,
            encryption_algorithm=NoEncryption(),
        )
        public_key = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return cls(public_key=public_key, secret_key=seed + public_key)

    # ------------------------------------------------------------------
    # Encodings
    # ------------------------------------------------------------------
    @property
    def public_key_base58(self) -> str:
        return base58_encode(self.public_key)

    @property
    def secret_key_base58(self) -> str:
        return base58_encode(self.secret_key)

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------
    def sign(self, message: bytes) -> bytes:
        private_key = ed25519.Ed25519PrivateKey.from_private_bytes(self.secret_key[:32])
        return private_key.sign(message)

    def verify(self, message: bytes, signature: bytes) -> bool:
        public_key = ed25519.Ed25519PublicKey.from_public_bytes(self.public_key)
        try:
            public_key.verify(signature, message)
        except InvalidSignature:
            return False
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save_to_json(self, path: str | os.PathLike[str]) -> None:
        """Write ``{"public_key", "secret_key"}`` (both Base58) to `path`.

        Filesystem errors propagate unchanged.
        """
        payload = {
            "public_key": self.public_key_base58,
            "secret_key": self.secret_key_base58,
        }
        with open(os.fspath(path), "w", encoding="utf-8") as handle:
            json.dump(payload, handle)
        logger.debug("Saved keypair %s to %s", self.public_key_base58, path)

    @classmethod
    def load_from_json(cls, path: str | os.PathLike[str]) -> Keypair:
        with open(os.fspath(path), "rb") as handle:
            raw = handle.read()
        try:
            data: Any = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedDocument(f"Keypair file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedDocument(f"Keypair file {path} must contain a JSON object")

        public_key_b58 = data.get("public_key")
        secret_key_b58 = data.get("secret_key")
        if not isinstance(public_key_b58, str) or not isinstance(secret_key_b58, str):
            raise MalformedDocument(f"Keypair file {path} requires string 'public_key' and 'secret_key' fields")

        stored_public_key = base58_decode(public_key_b58)
        keypair = cls.from_secret_key(base58_decode(secret_key_b58))
        if keypair.public_key != stored_public_key:
            raise KeyMismatch()
        logger.debug("Loaded keypair %s from %s", keypair.public_key_base58, path)
        return keypair


def generate_mnemonic(strength: int = MNEMONIC_STRENGTH) -> str:
    """Return a fresh BIP-39 recovery phrase for `Keypair.from_mnemonic`."""
    return Mnemonic(MNEMONIC_LANGUAGE).generate(strength=strength)


__all__ = ["Keypair", "generate_mnemonic", "PUBLIC_KEY_LENGTH", "SECRET_KEY_LENGTH"]
