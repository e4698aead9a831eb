"""Base58 and Base64 codecs for raw key and transaction bytes."""

from __future__ import annotations

import base64
import binascii

from .errors import InvalidEncoding

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: index for index, char in enumerate(BASE58_ALPHABET)}


def base58_encode(data: bytes) -> str:
    """Encode `data` with the Bitcoin Base58 alphabet.

    Leading zero bytes become leading ``"1"`` characters. The empty byte
    string encodes to ``"1"``.
    """
    if not data:
        return BASE58_ALPHABET[0]

    num = int.from_bytes(data, "big")
    encoded: list[str] = []
    while num > 0:
        num, remainder = divmod(num, 58)
        encoded.append(BASE58_ALPHABET[remainder])

    zeros = len(data) - len(data.lstrip(b"\x00"))
    return BASE58_ALPHABET[0] * zeros + "".join(reversed(encoded))


def base58_decode(value: str) -> bytes:
    """Decode a Base58 string; the empty string decodes to a single zero byte."""
    if not value:
        return b"\x00"

    num = 0
    for char in value:
        try:
            num = num * 58 + _BASE58_INDEX[char]
        except KeyError as exc:
            raise InvalidEncoding(f"Invalid base58 character {char!r}") from exc

    full_bytes = num.to_bytes((num.bit_length() + 7) // 8, "big")
    zeros = len(value) - len(value.lstrip(BASE58_ALPHABET[0]))
    return b"\x00" * zeros + full_bytes


def base64_encode(data: bytes | str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("ascii")


def base64_decode(value: str) -> bytes:
    """Decode padded standard Base64, rejecting foreign characters."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncoding(f"Invalid base64 input: {exc}") from exc


__all__ = [
    "BASE58_ALPHABET",
    "base58_encode",
    "base58_decode",
    "base64_encode",
    "base64_decode",
]
