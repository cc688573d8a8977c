"""Synchronous JSON-RPC 2.0 client over an injected HTTP transport."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx

from httprpc.config.loader import load_transport_config
from httprpc.core.errors import (
    IdMismatchError,
    InvalidRequestError,
    MalformedResponseError,
    MissingResponseError,
    TransportError,
    UnknownResponseIdError,
)
from httprpc.rpc.factory import MessageFactory
from httprpc.rpc.protocol import decode_body, serialize_request
from httprpc.rpc.transport import EventHooks, HttpxTransport, RawHttpResponse, Transport
from httprpc.rpc.types import Params, Request, RequestId, Response

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """JSON-RPC 2.0 client.

    Every notify/call/call_all performs exactly one exchange through the
    transport. Nothing is retried and transport failures propagate as
    TransportError.

    Usage:
        with JsonRpcClient.from_url("http://127.0.0.1:8765/rpc") as client:
            response = client.call(1, "add", [1, 2])
            print(response.result)

            responses = client.call_all([
                client.request(2, "add", [3, 4]),
                client.notification("log", {"level": "info"}),
                client.request(3, "subtract", {"a": 9, "b": 2}),
            ])
    """

    def __init__(self, transport: Transport, factory: MessageFactory | None = None) -> None:
        """Initialize the client.

        Args:
            transport: Performs the HTTP exchange. The client does not own it
                unless built with from_url().
            factory: Builds requests and responses. Defaults to a new MessageFactory.
        """
        self._transport = transport
        self._factory = factory or MessageFactory()

    @classmethod
    def from_url(
        cls,
        url: str,
        config: dict[str, Any] | None = None,
        config_path: Path | None = None,
        factory: MessageFactory | None = None,
        client: httpx.Client | None = None,
        event_hooks: EventHooks | None = None,
    ) -> "JsonRpcClient":
        """Create a client with an httpx transport built from merged defaults.

        Args:
            url: Endpoint URL.
            config: Overrides for the default transport configuration, e.g.
                {"timeout": 5, "headers": {"X-Trace": "on"}}.
            config_path: Optional JSON config file applied before the overrides.
            factory: Optional MessageFactory.
            client: Optional preconfigured httpx.Client (auth, proxies, mounts).
                It stays open when this client is closed.
            event_hooks: httpx hooks for the transport's own client, e.g.
                {"request": [sign], "response": [audit]}.

        Raises:
            ConfigError: If the merged configuration is invalid, or both
                client and event_hooks are given.
        """
        transport_config = load_transport_config(url, overrides=config, path=config_path)
        transport = HttpxTransport(transport_config, client=client, event_hooks=event_hooks)
        return cls(transport, factory)

    @property
    def factory(self) -> MessageFactory:
        return self._factory

    @property
    def transport(self) -> Transport:
        return self._transport

    def close(self) -> None:
        """Close the transport if it supports closing."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "JsonRpcClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # === Request builders ===

    def notification(self, method: str, params: Params | None = None) -> Request:
        """Build a notification for use with send() or call_all()."""
        return self._factory.create_notification(method, params)

    def request(self, request_id: RequestId, method: str, params: Params | None = None) -> Request:
        """Build a call for use with send() or call_all()."""
        return self._factory.create_call(request_id, method, params)

    # === Exchanges ===

    def notify(self, method: str, params: Params | None = None) -> None:
        """Send a notification. The response body is never interpreted.

        Raises:
            TransportError: On connection failure or a non-2xx status.
        """
        self._send_notification(self._factory.create_notification(method, params))

    def call(self, request_id: RequestId, method: str, params: Params | None = None) -> Response:
        """Send a call and return its response.

        Error responses are returned, not raised; use Response.raise_for_error().

        Raises:
            InvalidIdError: If request_id is invalid (nothing is sent).
            TransportError: On connection failure, or a non-2xx status without
                a JSON-RPC error body.
            MalformedResponseError: If the body isn't a valid response.
            IdMismatchError: If the response id differs from request_id.
        """
        return self._send_call(self._factory.create_call(request_id, method, params))

    def call_all(self, requests: Iterable[Request]) -> list[Response]:
        """Send a batch and return the responses in the order of its calls.

        Responses are matched to calls by id; the order of the array returned
        by the server is irrelevant. Notifications get no response.

        Raises:
            EmptyBatchError: If requests is empty (nothing is sent).
            InvalidRequestError: If a member is a batch or call ids repeat.
            TransportError: On connection failure or a non-2xx status.
            MalformedResponseError: If the body isn't an array of valid responses.
            UnknownResponseIdError: If an entry matches no call, or a call twice.
            MissingResponseError: If calls were left unanswered.
        """
        return self._send_batch(self._factory.create_batch(requests))

    def send_all(self, requests: Iterable[Request]) -> list[Response]:
        """Alias of call_all()."""
        return self.call_all(requests)

    def send(self, request: Request) -> Response | list[Response] | None:
        """Send a prebuilt request of any kind.

        Returns:
            None for a notification, a Response for a call, and a list of
            Responses for a batch.
        """
        if request.is_notification:
            self._send_notification(request)
            return None
        if request.is_call:
            return self._send_call(request)
        return self._send_batch(request)

    def invoke(self, method: str, params: Params | None = None) -> Any:
        """Call a method with the next id from the factory and return its result.

        Raises:
            RpcError: If the server returned an error response.
        """
        response = self.call(self._factory.next_id(), method, params)
        return response.raise_for_error()

    # === Internals ===

    def _send_notification(self, request: Request) -> None:
        logger.debug("RPC notify: method=%s", request.method)
        raw = self._transport.send(serialize_request(request))
        if not raw.is_success:
            raise TransportError(
                f"HTTP {raw.status_code} for notification '{request.method}'",
                status_code=raw.status_code,
                body=raw.body,
            )

    def _send_call(self, request: Request) -> Response:
        logger.debug("RPC call: method=%s, id=%s", request.method, request.id)
        raw = self._transport.send(serialize_request(request))

        if not raw.is_success:
            response = self._error_response_in(raw)
            if response is None:
                raise TransportError(
                    f"HTTP {raw.status_code} for call '{request.method}'",
                    status_code=raw.status_code,
                    body=raw.body,
                )
        else:
            if not raw.body.strip():
                raise MalformedResponseError(f"Empty response body for call id {request.id!r}")
            response = self._factory.create_response(
                decode_body(raw.body), raw.status_code, raw.headers
            )

        if response.id != request.id:
            raise IdMismatchError(request.id, response)
        return response

    def _send_batch(self, batch: Request) -> list[Response]:
        calls = batch.calls
        _check_unique_ids(calls)

        logger.debug("RPC batch: %d requests, %d calls", len(batch.requests), len(calls))
        raw = self._transport.send(serialize_request(batch))

        if not raw.is_success:
            raise TransportError(
                f"HTTP {raw.status_code} for batch of {len(batch.requests)} requests",
                status_code=raw.status_code,
                body=raw.body,
                response=self._error_response_in(raw),
            )

        responses = self._decode_batch(raw)
        return _correlate(calls, responses)

    def _decode_batch(self, raw: RawHttpResponse) -> list[Response]:
        if not raw.body.strip():
            return []

        data = decode_body(raw.body)
        if isinstance(data, dict):
            # The server rejected the batch as a whole
            single = self._factory.create_response(data, raw.status_code, raw.headers)
            if single.error is not None:
                raise MalformedResponseError(
                    "Expected a batch array, got a single error response: "
                    f"{single.error.code} {single.error.message}"
                )
        return self._factory.create_batch_responses(data, raw.status_code, raw.headers)

    def _error_response_in(self, raw: RawHttpResponse) -> Response | None:
        """Return the JSON-RPC error response carried by a failed exchange, if any."""
        if not raw.body.strip():
            return None
        try:
            response = self._factory.create_response(
                decode_body(raw.body), raw.status_code, raw.headers
            )
        except MalformedResponseError:
            return None
        return response if response.is_error else None


def _check_unique_ids(calls: tuple[Request, ...]) -> None:
    seen: set[RequestId] = set()
    for call in calls:
        if call.id in seen:
            raise InvalidRequestError(
                f"Duplicate call id {call.id!r} in batch; responses can't be correlated"
            )
        seen.add(call.id)


def _correlate(calls: tuple[Request, ...], responses: list[Response]) -> list[Response]:
    """Match responses to calls by id and return them in call order."""
    expected = {call.id for call in calls}
    by_id: dict[RequestId, Response] = {}

    for response in responses:
        if response.id not in expected:
            raise UnknownResponseIdError(response.id)
        if response.id in by_id:
            raise UnknownResponseIdError(response.id, "more than one response for this id")
        by_id[response.id] = response

    ordered: list[Response] = []
    missing: list[RequestId] = []
    for call in calls:
        if call.id in by_id:
            ordered.append(by_id[call.id])
        else:
            missing.append(call.id)

    if missing:
        raise MissingResponseError(missing, ordered)

    logger.debug("Correlated %d responses", len(ordered))
    return ordered
