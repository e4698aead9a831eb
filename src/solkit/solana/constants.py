"""Cluster endpoints and protocol constants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
PACKET_DATA_SIZE = 1232
LAMPORTS_PER_SOL = 1_000_000_000


@dataclass(frozen=True, slots=True)
class Endpoint:
    """HTTP and WebSocket URLs for one cluster."""

    name: str
    http: str
    ws: str

    @classmethod
    def for_network(cls, network: str) -> Endpoint:
        key = network.strip().lower()
        try:
            return _NETWORKS[key]
        except KeyError as exc:
            known = ", ".join(sorted(_NETWORKS))
            raise ValueError(f"Unknown network '{network}'. Expected one of: {known}") from exc

    @classmethod
    def custom(cls, http: str, ws: str | None = None, *, name: str = "custom") -> Endpoint:
        if ws is None:
            if http.startswith("https://"):
                ws = "wss://" + http[len("https://") :]
            elif http.startswith("http://"):
                ws = "ws://" + http[len("http://") :]
            else:
                raise ValueError(f"Cannot derive a WebSocket URL from '{http}'")
        return cls(name=name, http=http, ws=ws)


MAINNET = Endpoint(
    name="mainnet",
    http="https://api.mainnet-beta.solana.com",
    ws="wss://api.mainnet-beta.solana.com",
)
TESTNET = Endpoint(
    name="testnet",
    http="https://api.testnet.solana.com",
    ws="wss://api.testnet.solana.com",
)
DEVNET = Endpoint(
    name="devnet",
    http="https://api.devnet.solana.com",
    ws="wss://api.devnet.solana.com",
)

_NETWORKS: dict[str, Endpoint] = {
    "mainnet": MAINNET,
    "mainnet-beta": MAINNET,
    "testnet": TESTNET,
    "devnet": DEVNET,
}


class InstructionType(IntEnum):
    """System program instruction indices."""

    CREATE_ACCOUNT = 0
    ASSIGN = 1
    TRANSFER = 2
    CREATE_ACCOUNT_WITH_SEED = 3
    ADVANCE_NONCE_ACCOUNT = 4
    WITHDRAW_NONCE_ACCOUNT = 5
    INITIALIZE_NONCE_ACCOUNT = 6
    AUTHORIZE_NONCE_ACCOUNT = 7
    ALLOCATE = 8
    ALLOCATE_WITH_SEED = 9
    ASSIGN_WITH_SEED = 10
    TRANSFER_WITH_SEED = 11


__all__ = [
    "Endpoint",
    "MAINNET",
    "TESTNET",
    "DEVNET",
    "SYSTEM_PROGRAM_ID",
    "PACKET_DATA_SIZE",
    "LAMPORTS_PER_SOL",
    "InstructionType",
]
