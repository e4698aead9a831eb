"""Solana RPC client, keypairs and codecs."""

from .codec import base58_decode, base58_encode, base64_decode, base64_encode
from .constants import (
    DEVNET,
    LAMPORTS_PER_SOL,
    MAINNET,
    PACKET_DATA_SIZE,
    SYSTEM_PROGRAM_ID,
    TESTNET,
    Endpoint,
    InstructionType,
)
from .errors import (
    BadSecretKeySize,
    FileAccessError,
    InvalidEncoding,
    InvalidMnemonic,
    KeyMismatch,
    KeypairError,
    MalformedDocument,
    ResponseParseError,
    SolKitError,
    SubscriptionError,
    TransportError,
)
from .keypair import Keypair, generate_mnemonic
from .rpc import SolanaRPCClient
from .subscriptions import SubscriptionManager

__all__ = [
    "base58_encode",
    "base58_decode",
    "base64_encode",
    "base64_decode",
    "Endpoint",
    "MAINNET",
    "TESTNET",
    "DEVNET",
    "SYSTEM_PROGRAM_ID",
    "PACKET_DATA_SIZE",
    "LAMPORTS_PER_SOL",
    "InstructionType",
    "SolKitError",
    "InvalidEncoding",
    "KeypairError",
    "BadSecretKeySize",
    "KeyMismatch",
    "MalformedDocument",
    "InvalidMnemonic",
    "FileAccessError",
    "TransportError",
    "ResponseParseError",
    "SubscriptionError",
    "Keypair",
    "generate_mnemonic",
    "SolanaRPCClient",
    "SubscriptionManager",
]
