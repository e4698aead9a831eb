"""Solana JSON-RPC client over HTTP and WebSocket."""

from __future__ import annotations

import inspect
import itertools
import json
import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from .constants import MAINNET, Endpoint
from .errors import ResponseParseError, TransportError
from .methods import HTTP_METHODS, SUBSCRIPTION_METHODS, MethodSpec, SubscriptionSpec, build_envelope
from .subscriptions import ConnectFn, NotificationCallback, SubscriptionManager

if TYPE_CHECKING:
    from solkit.core.config import SolKitConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")
ResponseCallback = Callable[[dict[str, Any]], T]

DEFAULT_SUBSCRIPTION_TIMEOUT = 30.0


class SolanaRPCClient:
    """Thin wrapper around Solana's JSON-RPC interface.

    Every entry of `HTTP_METHODS` is available as a method returning the
    parsed response body unchanged (``{"result": ...}`` or
    ``{"error": ...}``). Every entry of `SUBSCRIPTION_METHODS` is available as
    ``<name>_subscribe(..., callback=fn)`` / ``<name>_unsubscribe(id)``.

    Non-2xx answers and connection failures raise `TransportError`; JSON-RPC
    error objects are returned to the caller as data.
    """

    def __init__(
        self,
        endpoint: Endpoint = MAINNET,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        ws_connect: ConnectFn | None = None,
        subscription_timeout: float = DEFAULT_SUBSCRIPTION_TIMEOUT,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.subscription_timeout = subscription_timeout
        client_options: dict[str, Any] = {
            "headers": {"Content-Type": "application/json"},
            "transport": transport,
        }
        if timeout is not None:
            client_options["timeout"] = timeout
        self._http = httpx.Client(**client_options)
        self._ws_connect = ws_connect
        self._subscriptions: SubscriptionManager | None = None
        self._subscriptions_lock = threading.Lock()
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: SolKitConfig, **kwargs: Any) -> SolanaRPCClient:
        kwargs.setdefault("timeout", config.timeout_seconds)
        kwargs.setdefault("subscription_timeout", config.subscription_timeout_seconds)
        return cls(config.endpoint(), **kwargs)

    def __repr__(self) -> str:
        return f"SolanaRPCClient(endpoint={self.endpoint.name!r}, http={self.endpoint.http!r})"

    def __enter__(self) -> SolanaRPCClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    def next_request_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def build_request(self, method: str, params: list[Any] | None = None) -> dict[str, Any]:
        return build_envelope(method, self.next_request_id(), params)

    def call(self, method: str, params: list[Any] | None = None) -> dict[str, Any]:
        """POST a JSON-RPC request and return the parsed response body."""
        payload = self.build_request(method, params)
        body = json.dumps(payload, separators=(",", ":"))
        logger.debug("RPC %s #%s -> %s", method, payload["id"], self.endpoint.http)
        try:
            response = self._http.post(self.endpoint.http, content=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportError(f"RPC request {method} failed with HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"RPC request {method} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseParseError(
                f"Invalid JSON in RPC response to {method}",
                status_code=response.status_code,
            ) from exc

        if isinstance(data, dict) and "error" in data:
            logger.debug("RPC %s returned error %s", method, data["error"])
        return data

    def call_with_callback(
        self,
        callback: ResponseCallback[T],
        method: str,
        params: list[Any] | None = None,
    ) -> T:
        """Perform `call` and hand the parsed response to `callback`."""
        return callback(self.call(method, params))

    # ------------------------------------------------------------------
    # WebSocket
    # ------------------------------------------------------------------
    @property
    def subscriptions(self) -> SubscriptionManager:
        with self._subscriptions_lock:
            if self._subscriptions is None:
                self._subscriptions = SubscriptionManager(
                    self.endpoint.ws,
                    connect=self._ws_connect,
                    timeout=self.subscription_timeout,
                    next_id=self.next_request_id,
                )
            return self._subscriptions

    def subscribe(self, method: str, params: list[Any] | None, callback: NotificationCallback) -> int:
        return self.subscriptions.subscribe(method, params, callback)

    def unsubscribe(self, subscription_id: int, *, method: str | None = None) -> dict[str, Any]:
        return self.subscriptions.unsubscribe(subscription_id, method=method)

    def close(self) -> None:
        with self._subscriptions_lock:
            subscriptions = self._subscriptions
            self._subscriptions = None
        if subscriptions is not None:
            subscriptions.close()
        self._http.close()


def _http_method(name: str, spec: MethodSpec) -> Callable[..., dict[str, Any]]:
    def method(self: SolanaRPCClient, *args: Any, **kwargs: Any) -> dict[str, Any]:
        return self.call(spec.rpc_name, spec.build_params(*args, **kwargs))

    method.__name__ = name
    method.__qualname__ = f"SolanaRPCClient.{name}"
    method.__doc__ = spec.doc or f"Call ``{spec.rpc_name}``."
    method.__signature__ = spec.signature()  # type: ignore[attr-defined]
    return method


def _subscribe_method(name: str, spec: SubscriptionSpec) -> Callable[..., int]:
    def method(self: SolanaRPCClient, *args: Any, callback: NotificationCallback, **kwargs: Any) -> int:
        return self.subscribe(spec.rpc_name, spec.subscribe.build_params(*args, **kwargs), callback)

    signature = spec.subscribe.signature()
    callback_param = inspect.Parameter("callback", inspect.Parameter.KEYWORD_ONLY)
    method.__name__ = name
    method.__qualname__ = f"SolanaRPCClient.{name}"
    method.__doc__ = f"Send ``{spec.rpc_name}``; ``callback`` receives each ``{spec.notification_name}`` result."
    method.__signature__ = signature.replace(  # type: ignore[attr-defined]
        parameters=[*signature.parameters.values(), callback_param]
    )
    return method


def _unsubscribe_method(name: str, spec: SubscriptionSpec) -> Callable[..., dict[str, Any]]:
    def method(self: SolanaRPCClient, subscription_id: int) -> dict[str, Any]:
        return self.unsubscribe(subscription_id, method=spec.unsubscribe_name)

    method.__name__ = name
    method.__qualname__ = f"SolanaRPCClient.{name}"
    method.__doc__ = f"Send ``{spec.unsubscribe_name}`` and stop delivering notifications."
    return method


for _name, _spec in HTTP_METHODS.items():
    setattr(SolanaRPCClient, _name, _http_method(_name, _spec))

for _name, _sub in SUBSCRIPTION_METHODS.items():
    setattr(SolanaRPCClient, f"{_name}_subscribe", _subscribe_method(f"{_name}_subscribe", _sub))
    setattr(SolanaRPCClient, f"{_name}_unsubscribe", _unsubscribe_method(f"{_name}_unsubscribe", _sub))

del _name, _spec, _sub


__all__ = ["SolanaRPCClient", "ResponseCallback"]
