"""Declarative table of the Solana JSON-RPC surface.

Each entry maps a Python attribute name (``get_balance``) to the wire method
(``getBalance``) and its parameter layout. `SolanaRPCClient` generates one
method per entry, so arity rules live here and nowhere else.

Parameter layout rules:

* ``args`` are required and always sent, in order.
* ``optional_args`` follow ``args`` and are dropped when ``None``.
* ``options=True`` appends a trailing configuration object, ``{}`` when the
  caller passes none.
* A method with no parameters at all omits ``params`` from the envelope.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"
OPTIONS_ARG = "options"


@dataclass(frozen=True, slots=True)
class MethodSpec:
    """Parameter layout of a single JSON-RPC method."""

    rpc_name: str
    args: tuple[str, ...] = ()
    optional_args: tuple[str, ...] = ()
    options: bool = False
    json_args: tuple[str, ...] = ()
    doc: str = ""

    @property
    def arg_names(self) -> tuple[str, ...]:
        names = self.args + self.optional_args
        if self.options:
            names += (OPTIONS_ARG,)
        return names

    def build_params(self, *args: Any, **kwargs: Any) -> list[Any] | None:
        """Bind call arguments and return the ``params`` array (or None)."""
        values = self._bind(args, kwargs)
        params: list[Any] = [self._encode(name, values[name]) for name in self.args]
        for name in self.optional_args:
            value = values.get(name)
            if value is not None:
                params.append(self._encode(name, value))
        if self.options:
            options = values.get(OPTIONS_ARG)
            params.append(dict(options) if options else {})
        return params or None

    def signature(self) -> inspect.Signature:
        """Signature of the generated client method, ``self`` included."""
        parameters = [inspect.Parameter("self", inspect.Parameter.POSITIONAL_OR_KEYWORD)]
        for name in self.args:
            parameters.append(inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD))
        for name in self.optional_args:
            parameters.append(inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD, default=None))
        if self.options:
            parameters.append(inspect.Parameter(OPTIONS_ARG, inspect.Parameter.POSITIONAL_OR_KEYWORD, default=None))
        return inspect.Signature(parameters)

    def _bind(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> dict[str, Any]:
        names = self.arg_names
        if len(args) > len(names):
            raise TypeError(f"{self.rpc_name} takes at most {len(names)} arguments ({len(args)} given)")
        values = dict(zip(names, args))
        for key, value in kwargs.items():
            if key not in names:
                raise TypeError(f"{self.rpc_name} got an unexpected keyword argument '{key}'")
            if key in values:
                raise TypeError(f"{self.rpc_name} got multiple values for argument '{key}'")
            values[key] = value
        missing = [name for name in self.args if name not in values]
        if missing:
            raise TypeError(f"{self.rpc_name} missing required arguments: {', '.join(missing)}")
        return values

    def _encode(self, name: str, value: Any) -> Any:
        if name in self.json_args and not isinstance(value, str):
            return json.dumps(value, separators=(",", ":"))
        return value


@dataclass(frozen=True, slots=True)
class SubscriptionSpec:
    """A ``<x>Subscribe`` / ``<x>Unsubscribe`` pair."""

    subscribe: MethodSpec

    @property
    def rpc_name(self) -> str:
        return self.subscribe.rpc_name

    @property
    def unsubscribe_name(self) -> str:
        return self.rpc_name.replace("Subscribe", "Unsubscribe")

    @property
    def notification_name(self) -> str:
        return self.rpc_name.replace("Subscribe", "Notification")


def _m(rpc_name: str, *args: str, optional: tuple[str, ...] = (), options: bool = True, **extra: Any) -> MethodSpec:
    return MethodSpec(rpc_name=rpc_name, args=args, optional_args=optional, options=options, **extra)


HTTP_METHODS: dict[str, MethodSpec] = {
    "get_account_info": _m("getAccountInfo", "pubkey", doc="Return all information associated with an account."),
    "get_balance": _m("getBalance", "pubkey", doc="Return the lamport balance of an account."),
    "get_block": _m("getBlock", "slot", doc="Return identity and transaction information about a confirmed block."),
    "get_block_commitment": _m("getBlockCommitment", "slot", options=False),
    "get_block_height": _m("getBlockHeight"),
    "get_block_production": _m("getBlockProduction"),
    "get_blocks": _m("getBlocks", "start_slot", optional=("end_slot",)),
    "get_blocks_with_limit": _m("getBlocksWithLimit", "start_slot", "limit"),
    "get_block_time": _m("getBlockTime", "slot", options=False),
    "get_cluster_nodes": _m("getClusterNodes", options=False),
    "get_epoch_info": _m("getEpochInfo"),
    "get_epoch_schedule": _m("getEpochSchedule", options=False),
    "get_fee_for_message": _m("getFeeForMessage", "message"),
    "get_first_available_block": _m("getFirstAvailableBlock", options=False),
    "get_genesis_hash": _m("getGenesisHash", options=False),
    "get_health": _m("getHealth", options=False),
    "get_highest_snapshot_slot": _m("getHighestSnapshotSlot", options=False),
    "get_identity": _m("getIdentity", options=False),
    "get_inflation_governor": _m("getInflationGovernor"),
    "get_inflation_rate": _m("getInflationRate", options=False),
    "get_inflation_reward": _m("getInflationReward", "addresses"),
    "get_largest_accounts": _m("getLargestAccounts"),
    "get_latest_blockhash": _m("getLatestBlockhash"),
    "get_leader_schedule": _m("getLeaderSchedule", optional=("slot",)),
    "get_max_retransmit_slot": _m("getMaxRetransmitSlot", options=False),
    "get_max_shred_insert_slot": _m("getMaxShredInsertSlot", options=False),
    "get_minimum_balance_for_rent_exemption": _m("getMinimumBalanceForRentExemption", "data_length"),
    "get_multiple_accounts": _m("getMultipleAccounts", "pubkeys"),
    "get_program_accounts": _m("getProgramAccounts", "program_id"),
    "get_recent_performance_samples": _m("getRecentPerformanceSamples", optional=("limit",), options=False),
    "get_recent_prioritization_fees": _m("getRecentPrioritizationFees", optional=("addresses",), options=False),
    "get_signatures_for_address": _m("getSignaturesForAddress", "address"),
    "get_signature_statuses": _m("getSignatureStatuses", "signatures"),
    "get_slot": _m("getSlot", doc="Return the slot that has reached the given or default commitment level."),
    "get_slot_leader": _m("getSlotLeader"),
    "get_slot_leaders": _m("getSlotLeaders", "start_slot", "limit", options=False),
    "get_stake_minimum_delegation": _m("getStakeMinimumDelegation"),
    "get_supply": _m("getSupply", doc="Return information about the current supply."),
    "get_token_account_balance": _m("getTokenAccountBalance", "pubkey"),
    "get_token_accounts_by_delegate": _m("getTokenAccountsByDelegate", "delegate", "filter"),
    "get_token_accounts_by_owner": _m("getTokenAccountsByOwner", "owner", "filter"),
    "get_token_largest_accounts": _m("getTokenLargestAccounts", "mint"),
    "get_token_supply": _m("getTokenSupply", "mint"),
    "get_transaction": _m("getTransaction", "signature", doc="Return transaction details for a confirmed transaction."),
    "get_transaction_count": _m("getTransactionCount"),
    "get_version": _m("getVersion", options=False, doc="Return the Solana version running on the node."),
    "get_vote_accounts": _m("getVoteAccounts"),
    "is_blockhash_valid": _m("isBlockhashValid", "blockhash"),
    "minimum_ledger_slot": _m("minimumLedgerSlot", options=False),
    "request_airdrop": _m("requestAirdrop", "pubkey", "lamports", doc="Request an airdrop of lamports to a pubkey."),
    "send_transaction": _m(
        "sendTransaction",
        "transaction",
        json_args=("transaction",),
        doc="Submit a signed transaction. Non-string payloads are sent as compact JSON.",
    ),
    "simulate_transaction": _m("simulateTransaction", "transaction", json_args=("transaction",)),
}

SUBSCRIPTION_METHODS: dict[str, SubscriptionSpec] = {
    "account": SubscriptionSpec(_m("accountSubscribe", "pubkey")),
    "block": SubscriptionSpec(_m("blockSubscribe", "filter")),
    "logs": SubscriptionSpec(_m("logsSubscribe", "filter")),
    "program": SubscriptionSpec(_m("programSubscribe", "program_id")),
    "root": SubscriptionSpec(_m("rootSubscribe", options=False)),
    "signature": SubscriptionSpec(_m("signatureSubscribe", "signature")),
    "slot": SubscriptionSpec(_m("slotSubscribe", options=False)),
    "slots_updates": SubscriptionSpec(_m("slotsUpdatesSubscribe", options=False)),
    "vote": SubscriptionSpec(_m("voteSubscribe", options=False)),
}


def build_envelope(method: str, request_id: int, params: list[Any] | None) -> dict[str, Any]:
    """Return a JSON-RPC 2.0 request; ``params`` is omitted when None."""
    envelope: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method, "id": request_id}
    if params is not None:
        envelope["params"] = list(params)
    return envelope


def find_subscription(rpc_name: str) -> SubscriptionSpec | None:
    """Look up a subscription pair by its ``<x>Subscribe`` wire name."""
    for spec in SUBSCRIPTION_METHODS.values():
        if spec.rpc_name == rpc_name:
            return spec
    return None


__all__ = [
    "MethodSpec",
    "SubscriptionSpec",
    "HTTP_METHODS",
    "SUBSCRIPTION_METHODS",
    "JSONRPC_VERSION",
    "build_envelope",
    "find_subscription",
]
