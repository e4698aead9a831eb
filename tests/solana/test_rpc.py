from __future__ import annotations

import inspect
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from solkit.core.config import SolKitConfig
from solkit.solana.constants import DEVNET, MAINNET, TESTNET, Endpoint
from solkit.solana.errors import ResponseParseError, TransportError
from solkit.solana.rpc import SolanaRPCClient

TEST_PUBKEY = "11111111111111111111111111111111"
TEST_SIGNATURE = "5KKsV3aA6w5x2hKbjp9oJQjQFedNmnYfcB5J4wjKfXLLr"
SUCCESS = {"jsonrpc": "2.0", "id": 1, "result": {"test": "data"}}
ERROR = {"jsonrpc": "2.0", "id": 1, "error": {"code": -1, "message": "Test error"}}


class RecordingHandler:
    def __init__(self, status_code: int = 200, payload: Any = SUCCESS, *, text: str | None = None) -> None:
        self.status_code = status_code
        self.payload = payload
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text, request=request)
        return httpx.Response(self.status_code, json=self.payload, request=request)

    def body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    endpoint: Endpoint = MAINNET,
) -> SolanaRPCClient:
    return SolanaRPCClient(endpoint, transport=httpx.MockTransport(handler))


def test_defaults_to_mainnet() -> None:
    client = SolanaRPCClient()

    assert client.endpoint == MAINNET
    assert client.endpoint.http == "https://api.mainnet-beta.solana.com"
    client.close()


def test_accepts_custom_endpoint() -> None:
    with SolanaRPCClient(TESTNET) as client:
        assert client.endpoint is TESTNET


def test_get_balance_posts_exact_envelope() -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    result = client.get_balance(TEST_PUBKEY)

    assert result == SUCCESS
    assert len(handler.requests) == 1
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.scheme == "https"
    assert request.url.host == "api.mainnet-beta.solana.com"
    assert request.headers["content-type"] == "application/json"
    assert request.content == (
        b'{"jsonrpc":"2.0","method":"getBalance","id":1,"params":["11111111111111111111111111111111",{}]}'
    )


def test_get_account_info_with_options() -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    result = client.get_account_info(TEST_PUBKEY, {"encoding": "base64"})

    assert result["result"]["test"] == "data"
    assert handler.body()["params"] == [TEST_PUBKEY, {"encoding": "base64"}]


def test_options_accepted_by_keyword() -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    client.get_account_info(TEST_PUBKEY, options={"commitment": "finalized"})

    assert handler.body()["params"] == [TEST_PUBKEY, {"commitment": "finalized"}]


@pytest.mark.parametrize(
    ("method", "args", "rpc_name", "params"),
    [
        ("get_account_info", (TEST_PUBKEY,), "getAccountInfo", [TEST_PUBKEY, {}]),
        ("get_block", (12345,), "getBlock", [12345, {}]),
        ("get_transaction", (TEST_SIGNATURE,), "getTransaction", [TEST_SIGNATURE, {}]),
        ("request_airdrop", (TEST_PUBKEY, 1_000_000), "requestAirdrop", [TEST_PUBKEY, 1_000_000, {}]),
        ("get_slot", (), "getSlot", [{}]),
        ("get_supply", (), "getSupply", [{}]),
        ("get_token_account_balance", (TEST_PUBKEY,), "getTokenAccountBalance", [TEST_PUBKEY, {}]),
        ("get_token_supply", (TEST_PUBKEY,), "getTokenSupply", [TEST_PUBKEY, {}]),
        ("get_block_time", (12345,), "getBlockTime", [12345]),
        ("get_blocks", (5,), "getBlocks", [5, {}]),
        ("get_blocks", (5, 10), "getBlocks", [5, 10, {}]),
        ("get_slot_leaders", (100, 10), "getSlotLeaders", [100, 10]),
    ],
)
def test_method_table_shapes_params(method: str, args: tuple[Any, ...], rpc_name: str, params: list[Any]) -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    result = getattr(client, method)(*args)

    assert result == SUCCESS
    assert handler.body() == {"jsonrpc": "2.0", "method": rpc_name, "id": 1, "params": params}


def test_get_version_omits_params() -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    client.get_version()

    assert handler.body() == {"jsonrpc": "2.0", "method": "getVersion", "id": 1}
    assert handler.requests[0].content == b'{"jsonrpc":"2.0","method":"getVersion","id":1}'


def test_send_transaction_serialises_structured_payloads() -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    client.send_transaction({"test": "transaction"})
    client.send_transaction("AQID")

    assert handler.body(0)["params"] == ['{"test":"transaction"}', {}]
    assert handler.body(1)["params"] == ["AQID", {}]


def test_request_ids_are_per_client() -> None:
    handler = RecordingHandler()
    first = make_client(handler)
    second = make_client(handler)

    first.get_slot()
    first.get_slot()
    second.get_slot()

    assert [json.loads(request.content)["id"] for request in handler.requests] == [1, 2, 1]


def test_uses_selected_endpoint() -> None:
    handler = RecordingHandler()
    client = make_client(handler, DEVNET)

    client.get_balance(TEST_PUBKEY)

    assert handler.requests[0].url.host == "api.devnet.solana.com"


def test_rpc_error_is_returned_as_data() -> None:
    client = make_client(RecordingHandler(payload=ERROR))

    result = client.get_account_info(TEST_PUBKEY)

    assert result["error"]["code"] == -1
    assert result["error"]["message"] == "Test error"


def test_http_failure_raises_transport_error() -> None:
    client = make_client(RecordingHandler(status_code=500, text="Internal Server Error"))

    with pytest.raises(TransportError) as excinfo:
        client.get_account_info(TEST_PUBKEY)

    assert excinfo.value.status_code == 500


def test_connection_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(TransportError) as excinfo:
        client.get_balance(TEST_PUBKEY)

    assert excinfo.value.status_code is None


def test_non_json_body_raises_parse_error() -> None:
    client = make_client(RecordingHandler(text="<html>gateway</html>"))

    with pytest.raises(ResponseParseError):
        client.get_balance(TEST_PUBKEY)


def test_call_with_callback_hands_response_over() -> None:
    client = make_client(RecordingHandler())
    seen: list[dict[str, Any]] = []

    returned = client.call_with_callback(lambda response: seen.append(response) or "done", "getAccountInfo", [TEST_PUBKEY, {}])

    assert returned == "done"
    assert seen == [SUCCESS]


def test_generic_call_sends_arbitrary_method() -> None:
    handler = RecordingHandler()
    client = make_client(handler)

    client.call("getHealth")

    assert handler.body() == {"jsonrpc": "2.0", "method": "getHealth", "id": 1}


def test_generated_methods_validate_arguments() -> None:
    client = make_client(RecordingHandler())

    with pytest.raises(TypeError):
        client.get_balance()
    with pytest.raises(TypeError):
        client.get_version({"unexpected": True})
    with pytest.raises(TypeError):
        client.get_balance(TEST_PUBKEY, bogus=1)


def test_generated_methods_expose_signatures() -> None:
    signature = inspect.signature(SolanaRPCClient.request_airdrop)

    assert list(signature.parameters) == ["self", "pubkey", "lamports", "options"]
    assert SolanaRPCClient.get_balance.__name__ == "get_balance"
    assert "callback" in inspect.signature(SolanaRPCClient.account_subscribe).parameters


def test_from_config_uses_custom_urls() -> None:
    config = SolKitConfig(network="localnet", rpc_url="http://127.0.0.1:8899", timeout_seconds=3.0)

    client = SolanaRPCClient.from_config(config)

    assert client.endpoint.http == "http://127.0.0.1:8899"
    assert client.endpoint.ws == "ws://127.0.0.1:8899"
    assert client.timeout == 3.0
    client.close()
