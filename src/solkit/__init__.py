"""SolKit: a Solana JSON-RPC client with Ed25519 keypair helpers."""

from __future__ import annotations

from .solana import (
    DEVNET,
    MAINNET,
    TESTNET,
    Endpoint,
    Keypair,
    SolanaRPCClient,
    base58_decode,
    base58_encode,
    base64_decode,
    base64_encode,
)

__version__ = "0.1.5"

__all__ = [
    "__version__",
    "Endpoint",
    "MAINNET",
    "TESTNET",
    "DEVNET",
    "Keypair",
    "SolanaRPCClient",
    "base58_encode",
    "base58_decode",
    "base64_encode",
    "base64_decode",
]
