"""WebSocket subscription handling for Solana push notifications."""

from __future__ import annotations

import itertools
import json
import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import connect as websocket_connect

from .errors import SubscriptionError, TransportError
from .methods import build_envelope, find_subscription

logger = logging.getLogger(__name__)

NotificationCallback = Callable[[Any], None]

_STOP = object()


class Connection(Protocol):
    """The subset of `websockets.sync.client.ClientConnection` in use."""

    def send(self, message: str) -> None: ...

    def recv(self) -> str | bytes: ...

    def close(self) -> None: ...


ConnectFn = Callable[[str], Connection]


@dataclass
class _PendingRequest:
    method: str
    callback: NotificationCallback | None = None
    done: threading.Event = field(default_factory=threading.Event)
    response: dict[str, Any] | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class Registration:
    """A confirmed subscription."""

    subscription_id: int
    method: str
    callback: NotificationCallback


class SubscriptionManager:
    """Owns one WebSocket connection and routes notifications to callbacks.

    The connection is opened on the first `subscribe` call. A receive thread
    reads frames in socket order; subscribe confirmations register their
    callback before the next frame is read. Notifications are handed to a
    separate dispatcher thread so a slow callback never stalls the socket.
    """

    def __init__(
        self,
        url: str,
        *,
        connect: ConnectFn | None = None,
        timeout: float = 30.0,
        next_id: Callable[[], int] | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._connect = connect or websocket_connect
        self._counter = itertools.count(1)
        self._counter_lock = threading.Lock()
        self._next_id = next_id or self._allocate_id
        self._lock = threading.RLock()
        self._connection: Connection | None = None
        self._receiver: threading.Thread | None = None
        self._dispatcher: threading.Thread | None = None
        self._pending: dict[int, _PendingRequest] = {}
        self._registrations: dict[int, Registration] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def subscriptions(self) -> dict[int, Registration]:
        with self._lock:
            return dict(self._registrations)

    def subscribe(self, method: str, params: list[Any] | None, callback: NotificationCallback) -> int:
        """Send ``method`` and return the server-assigned subscription id."""
        response = self._request(method, params, callback=callback)
        error = response.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", "Subscription rejected") if isinstance(error, dict) else str(error)
            raise SubscriptionError(f"{method} failed: {message}", code=code, data=error)
        subscription_id = response.get("result")
        if not _is_subscription_id(subscription_id):
            raise SubscriptionError(f"{method} confirmation did not carry a subscription id", data=response)
        logger.debug("Subscribed %s as %s", method, subscription_id)
        return subscription_id

    def unsubscribe(self, subscription_id: int, *, method: str | None = None) -> dict[str, Any]:
        """Drop the local callback, then send the matching ``*Unsubscribe``.

        Raises KeyError when `subscription_id` is not active on this
        connection.
        """
        with self._lock:
            registration = self._registrations.pop(subscription_id)
        if method is None:
            spec = find_subscription(registration.method)
            method = spec.unsubscribe_name if spec else registration.method.replace("Subscribe", "Unsubscribe")
        logger.debug("Unsubscribing %s via %s", subscription_id, method)
        return self._request(method, [subscription_id])

    def close(self) -> None:
        with self._lock:
            connection = self._connection
            receiver = self._receiver
            dispatcher = self._dispatcher
        if connection is None:
            return
        connection.close()
        for thread in (receiver, dispatcher):
            if thread is not None and thread is not threading.current_thread():
                thread.join(self.timeout)
        logger.debug("Closed WebSocket connection to %s", self.url)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _allocate_id(self) -> int:
        with self._counter_lock:
            return next(self._counter)

    def _request(
        self,
        method: str,
        params: list[Any] | None,
        *,
        callback: NotificationCallback | None = None,
    ) -> dict[str, Any]:
        connection = self._ensure_connection()
        request_id = self._next_id()
        pending = _PendingRequest(method=method, callback=callback)
        with self._lock:
            self._pending[request_id] = pending
        try:
            connection.send(json.dumps(build_envelope(method, request_id, params), separators=(",", ":")))
        except (WebSocketException, OSError) as exc:
            with self._lock:
                self._pending.pop(request_id, None)
            raise TransportError(f"WebSocket send of {method} failed: {exc}") from exc

        if not pending.done.wait(self.timeout):
            with self._lock:
                self._pending.pop(request_id, None)
            raise TransportError(f"Timed out waiting for {method} confirmation")
        if pending.error is not None:
            raise pending.error
        if pending.response is None:
            raise TransportError(f"No confirmation received for {method}")
        return pending.response

    def _ensure_connection(self) -> Connection:
        with self._lock:
            if self._connection is not None:
                return self._connection
            try:
                connection = self._connect(self.url)
            except (WebSocketException, OSError) as exc:
                raise TransportError(f"Unable to open WebSocket connection to {self.url}: {exc}") from exc
            notifications: queue.Queue[Any] = queue.Queue()
            self._connection = connection
            self._dispatcher = threading.Thread(
                target=self._dispatch_loop,
                args=(notifications,),
                name="solkit-ws-dispatch",
                daemon=True,
            )
            self._receiver = threading.Thread(
                target=self._receive_loop,
                args=(connection, notifications),
                name="solkit-ws-receive",
                daemon=True,
            )
            self._dispatcher.start()
            self._receiver.start()
            logger.debug("Opened WebSocket connection to %s", self.url)
            return connection

    def _receive_loop(self, connection: Connection, notifications: queue.Queue[Any]) -> None:
        try:
            while True:
                raw = connection.recv()
                try:
                    message = json.loads(raw)
                except ValueError:
                    logger.warning("Skipping non-JSON WebSocket frame: %r", raw)
                    continue
                if isinstance(message, dict):
                    self._handle_frame(message, notifications)
                else:
                    logger.debug("Ignoring WebSocket frame: %r", message)
        except (ConnectionClosed, OSError) as exc:
            logger.debug("WebSocket connection to %s ended: %s", self.url, exc)
        except Exception:  # noqa: BLE001
            logger.exception("WebSocket receive loop for %s failed", self.url)
        finally:
            self._on_disconnect(connection, notifications)

    def _handle_frame(self, message: dict[str, Any], notifications: queue.Queue[Any]) -> None:
        params = message.get("params")
        if "method" in message and isinstance(params, dict) and "subscription" in params:
            subscription_id = params["subscription"]
            if _is_subscription_id(subscription_id):
                notifications.put((subscription_id, params.get("result")))
            else:
                logger.warning("Dropping notification with invalid subscription id: %r", message)
            return

        request_id = message.get("id")
        if not _is_request_id(request_id):
            logger.warning("Dropping WebSocket frame without a usable id: %r", message)
            return
        with self._lock:
            pending = self._pending.pop(request_id, None)
            if pending is None:
                logger.warning("Dropping WebSocket frame with unknown id: %r", message)
                return
            result = message.get("result")
            if pending.callback is not None and "error" not in message and _is_subscription_id(result):
                self._registrations[result] = Registration(
                    subscription_id=result,
                    method=pending.method,
                    callback=pending.callback,
                )
        pending.response = message
        pending.done.set()

    def _dispatch_loop(self, notifications: queue.Queue[Any]) -> None:
        while True:
            item = notifications.get()
            if item is _STOP:
                return
            subscription_id, result = item
            with self._lock:
                registration = self._registrations.get(subscription_id)
            if registration is None:
                logger.debug("Dropping notification for inactive subscription %s", subscription_id)
                continue
            try:
                registration.callback(result)
            except Exception:  # noqa: BLE001
                logger.exception("Callback for subscription %s raised", subscription_id)

    def _on_disconnect(self, connection: Connection, notifications: queue.Queue[Any]) -> None:
        try:
            connection.close()
        except (WebSocketException, OSError) as exc:
            logger.debug("Closing WebSocket connection to %s failed: %s", self.url, exc)
        pending: list[_PendingRequest] = []
        with self._lock:
            if self._connection is connection:
                self._connection = None
                self._registrations.clear()
                pending = list(self._pending.values())
                self._pending.clear()
        for request in pending:
            request.error = TransportError(f"WebSocket closed before {request.method} was confirmed")
            request.done.set()
        notifications.put(_STOP)


def _is_subscription_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_request_id(value: Any) -> bool:
    return isinstance(value, str) or _is_subscription_id(value)


__all__ = ["SubscriptionManager", "Registration", "Connection", "ConnectFn", "NotificationCallback"]
