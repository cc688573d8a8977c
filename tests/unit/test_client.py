"""Unit tests for JsonRpcClient."""

import json
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from httprpc.client import JsonRpcClient
from httprpc.core.errors import (
    ConfigError,
    EmptyBatchError,
    IdMismatchError,
    InvalidIdError,
    InvalidRequestError,
    MalformedResponseError,
    MissingResponseError,
    RpcError,
    TransportError,
    UnknownResponseIdError,
)
from httprpc.rpc.factory import MessageFactory
from httprpc.rpc.transport import HttpxTransport, RawHttpResponse
from httprpc.rpc.types import Request, RequestKind


def _raw(data: Any, status_code: int = 200) -> RawHttpResponse:
    return RawHttpResponse(
        status_code=status_code,
        headers={"content-type": "application/json"},
        body=json.dumps(data).encode("utf-8"),
    )


def _result(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


# === Single calls ===


class TestCall:
    """Tests for JsonRpcClient.call."""

    def test_call_success(self, make_transport):
        """call sends one request and returns the matching response."""
        transport = make_transport(_raw(_result(1, 3)))
        client = JsonRpcClient(transport)

        response = client.call(1, "add", [1, 2])

        assert response.id == 1
        assert response.result == 3
        assert transport.sent == [{"jsonrpc": "2.0", "method": "add", "params": [1, 2], "id": 1}]

    def test_call_returns_error_response(self, make_transport):
        """Error responses are returned, not raised."""
        transport = make_transport(_raw(_error("a", -32601, "Method not found")))
        client = JsonRpcClient(transport)

        response = client.call("a", "nope")

        assert response.is_error
        assert response.error.code == -32601
        with pytest.raises(RpcError):
            response.raise_for_error()

    def test_call_id_mismatch(self, make_transport):
        """A response with a different id raises IdMismatchError."""
        transport = make_transport(_raw(_result(6, "stale")))
        client = JsonRpcClient(transport)

        with pytest.raises(IdMismatchError) as exc_info:
            client.call(5, "get")

        assert exc_info.value.expected == 5
        assert exc_info.value.actual == 6
        assert exc_info.value.response.result == "stale"

    def test_call_id_type_matters(self, make_transport):
        """String "1" does not match integer 1."""
        transport = make_transport(_raw(_result("1", None)))
        client = JsonRpcClient(transport)

        with pytest.raises(IdMismatchError):
            client.call(1, "get")

    def test_call_invalid_id_sends_nothing(self, make_transport):
        """An invalid id is rejected before any transport activity."""
        transport = make_transport()
        client = JsonRpcClient(transport)

        with pytest.raises(InvalidIdError):
            client.call(None, "get")  # type: ignore[arg-type]

        assert transport.payloads == []

    def test_call_empty_body(self, make_transport):
        """An empty 2xx body is malformed for a call."""
        transport = make_transport(RawHttpResponse(status_code=200, body=b""))
        client = JsonRpcClient(transport)

        with pytest.raises(MalformedResponseError, match="Empty"):
            client.call(1, "get")

    def test_call_non_json_body(self, make_transport):
        """A non-JSON body is malformed."""
        transport = make_transport(RawHttpResponse(status_code=200, body=b"<html>"))
        client = JsonRpcClient(transport)

        with pytest.raises(MalformedResponseError, match="Invalid JSON"):
            client.call(1, "get")

    def test_call_http_error_without_rpc_body(self, make_transport):
        """A non-2xx status without a JSON-RPC error raises TransportError."""
        transport = make_transport(RawHttpResponse(status_code=502, body=b"Bad Gateway"))
        client = JsonRpcClient(transport)

        with pytest.raises(TransportError) as exc_info:
            client.call(1, "get")

        assert exc_info.value.status_code == 502
        assert exc_info.value.body == b"Bad Gateway"

    def test_call_http_error_with_rpc_error_body(self, make_transport):
        """A non-2xx status carrying a JSON-RPC error is returned as a response."""
        transport = make_transport(_raw(_error(1, -32603, "Internal error"), status_code=500))
        client = JsonRpcClient(transport)

        response = client.call(1, "get")

        assert response.error.code == -32603
        assert response.status_code == 500

    def test_call_http_error_with_result_body(self, make_transport):
        """A non-2xx status with a success body is still a transport failure."""
        transport = make_transport(_raw(_result(1, "ok"), status_code=503))
        client = JsonRpcClient(transport)

        with pytest.raises(TransportError):
            client.call(1, "get")


# === Notifications ===


class TestNotify:
    """Tests for JsonRpcClient.notify."""

    def test_notify_returns_none(self, make_transport):
        """notify sends a request without id and returns None."""
        transport = make_transport(RawHttpResponse(status_code=204))
        client = JsonRpcClient(transport)

        assert client.notify("log", {"msg": "hi"}) is None
        assert transport.sent == [{"jsonrpc": "2.0", "method": "log", "params": {"msg": "hi"}}]

    def test_notify_ignores_body(self, make_transport):
        """Whatever the server sends back is not interpreted."""
        transport = make_transport(RawHttpResponse(status_code=200, body=b"not json at all"))
        client = JsonRpcClient(transport)

        assert client.notify("log") is None

    def test_notify_http_error(self, make_transport):
        """A non-2xx status raises TransportError."""
        transport = make_transport(RawHttpResponse(status_code=500, body=b"oops"))
        client = JsonRpcClient(transport)

        with pytest.raises(TransportError) as exc_info:
            client.notify("log")

        assert exc_info.value.status_code == 500


# === Batches ===


class TestCallAll:
    """Tests for JsonRpcClient.call_all."""

    def test_empty_batch_sends_nothing(self, make_transport):
        """call_all([]) raises EmptyBatchError without using the transport."""
        transport = make_transport()
        client = JsonRpcClient(transport)

        with pytest.raises(EmptyBatchError):
            client.call_all([])

        assert transport.payloads == []

    def test_reordered_responses_follow_call_order(self, make_transport):
        """Responses are returned in request order, not wire order."""
        transport = make_transport(
            _raw([_result(3, "c"), _result(1, "a"), _result(2, "b")])
        )
        client = JsonRpcClient(transport)

        responses = client.call_all([
            client.request(1, "m"),
            client.request(2, "m"),
            client.request(3, "m"),
        ])

        assert [r.id for r in responses] == [1, 2, 3]
        assert [r.result for r in responses] == ["a", "b", "c"]

    def test_single_exchange_with_ordered_payload(self, make_transport):
        """The whole batch goes out as one array, in input order."""
        transport = make_transport(_raw([_result(1, None), _result(2, None)]))
        client = JsonRpcClient(transport)

        client.call_all([
            client.request(1, "a", [1]),
            client.notification("b"),
            client.request(2, "c", {"k": "v"}),
        ])

        assert transport.sent == [[
            {"jsonrpc": "2.0", "method": "a", "params": [1], "id": 1},
            {"jsonrpc": "2.0", "method": "b"},
            {"jsonrpc": "2.0", "method": "c", "params": {"k": "v"}, "id": 2},
        ]]

    def test_notification_gets_no_response(self, make_transport):
        """With 2 calls and 1 notification, each call gets exactly one response."""
        transport = make_transport(_raw([_result("y", 2), _result("x", 1)]))
        client = JsonRpcClient(transport)

        responses = client.call_all([
            client.request("x", "m"),
            client.notification("n"),
            client.request("y", "m"),
        ])

        assert len(responses) == 2
        assert [(r.id, r.result) for r in responses] == [("x", 1), ("y", 2)]

    def test_mixed_success_and_error(self, make_transport):
        """Error entries are correlated like results."""
        transport = make_transport(_raw([_error(2, -32602, "Invalid params"), _result(1, "ok")]))
        client = JsonRpcClient(transport)

        responses = client.call_all([client.request(1, "a"), client.request(2, "b")])

        assert not responses[0].is_error
        assert responses[1].error.message == "Invalid params"

    def test_only_notifications_empty_body(self, make_transport):
        """A batch of notifications answered with no body yields no responses."""
        transport = make_transport(RawHttpResponse(status_code=204, body=b""))
        client = JsonRpcClient(transport)

        assert client.call_all([client.notification("a"), client.notification("b")]) == []

    def test_unknown_response_id(self, make_transport):
        """An entry with an id that wasn't sent raises UnknownResponseIdError."""
        transport = make_transport(_raw([_result(1, "a"), _result(99, "?")]))
        client = JsonRpcClient(transport)

        with pytest.raises(UnknownResponseIdError) as exc_info:
            client.call_all([client.request(1, "m")])

        assert exc_info.value.response_id == 99

    def test_response_to_notification_is_unknown(self, make_transport):
        """A null-id entry can't be attributed to anything."""
        transport = make_transport(
            _raw([_result(1, "a"), _error(None, -32600, "Invalid Request")])
        )
        client = JsonRpcClient(transport)

        with pytest.raises(UnknownResponseIdError):
            client.call_all([client.request(1, "m"), client.notification("n")])

    def test_duplicate_response_id(self, make_transport):
        """Two entries for the same call raise UnknownResponseIdError."""
        transport = make_transport(_raw([_result(1, "a"), _result(1, "b")]))
        client = JsonRpcClient(transport)

        with pytest.raises(UnknownResponseIdError, match="more than one"):
            client.call_all([client.request(1, "m")])

    def test_missing_response(self, make_transport):
        """Unanswered calls raise MissingResponseError with partial results."""
        transport = make_transport(_raw([_result(2, "b")]))
        client = JsonRpcClient(transport)

        with pytest.raises(MissingResponseError) as exc_info:
            client.call_all([
                client.request(1, "m"),
                client.request(2, "m"),
                client.request(3, "m"),
            ])

        assert exc_info.value.missing_ids == [1, 3]
        assert [r.id for r in exc_info.value.responses] == [2]

    def test_duplicate_call_ids_rejected_before_sending(self, make_transport):
        """Calls sharing an id can't be correlated and are rejected up front."""
        transport = make_transport()
        client = JsonRpcClient(transport)

        with pytest.raises(InvalidRequestError, match="Duplicate"):
            client.call_all([client.request(1, "a"), client.request(1, "b")])

        assert transport.payloads == []

    def test_hand_built_call_without_id_sends_nothing(self, make_transport):
        """A Request built directly is held to the same id rules."""
        transport = make_transport()
        client = JsonRpcClient(transport)

        with pytest.raises(InvalidIdError):
            client.call_all([Request(kind=RequestKind.CALL, method="m")])

        assert transport.payloads == []

    def test_hand_built_notification_with_id_sends_nothing(self, make_transport):
        """A notification can't smuggle an id onto the wire."""
        transport = make_transport()
        client = JsonRpcClient(transport)

        with pytest.raises(InvalidRequestError, match="notification"):
            client.send(Request(kind=RequestKind.NOTIFICATION, method="m", id=7))

        assert transport.payloads == []

    def test_params_mutated_after_building_not_sent(self, make_transport):
        """The payload reflects params as they were when the request was built."""
        transport = make_transport(_raw([_result(1, "ok")]))
        client = JsonRpcClient(transport)
        params = [1]
        request = client.request(1, "m", params)
        params.append(2)

        client.call_all([request])

        assert transport.sent[0][0]["params"] == [1]

    def test_malformed_element_fails_batch(self, make_transport):
        """One malformed entry fails the whole batch."""
        transport = make_transport(_raw([_result(1, "a"), {"jsonrpc": "2.0", "id": 2}]))
        client = JsonRpcClient(transport)

        with pytest.raises(MalformedResponseError, match="Batch element 1"):
            client.call_all([client.request(1, "a"), client.request(2, "b")])

    def test_single_error_object_instead_of_array(self, make_transport):
        """A whole-batch rejection is reported with the server's message."""
        transport = make_transport(_raw(_error(None, -32600, "Invalid Request")))
        client = JsonRpcClient(transport)

        with pytest.raises(MalformedResponseError, match="Invalid Request"):
            client.call_all([client.request(1, "a")])

    def test_http_error_attaches_rpc_error(self, make_transport):
        """A non-2xx batch response raises TransportError with any RPC error attached."""
        transport = make_transport(_raw(_error(None, -32700, "Parse error"), status_code=400))
        client = JsonRpcClient(transport)

        with pytest.raises(TransportError) as exc_info:
            client.call_all([client.request(1, "a")])

        assert exc_info.value.status_code == 400
        assert exc_info.value.response.error.code == -32700

    def test_send_all_alias(self, make_transport):
        """send_all behaves like call_all."""
        transport = make_transport(_raw([_result(1, "a")]))
        client = JsonRpcClient(transport)

        assert [r.result for r in client.send_all([client.request(1, "m")])] == ["a"]


# === Generic send ===


class TestSend:
    """Tests for JsonRpcClient.send dispatch by request kind."""

    def test_send_notification(self, make_transport):
        """Notifications return None."""
        transport = make_transport(_raw(_result(1, "ignored")))
        client = JsonRpcClient(transport)

        assert client.send(client.notification("log")) is None

    def test_send_call(self, make_transport):
        """Calls return one Response."""
        transport = make_transport(_raw(_result(4, "four")))
        client = JsonRpcClient(transport)

        response = client.send(client.request(4, "m"))
        assert response.result == "four"

    def test_send_batch(self, make_transport):
        """Batches return correlated Responses."""
        transport = make_transport(_raw([_result(2, "b"), _result(1, "a")]))
        client = JsonRpcClient(transport)
        batch = client.factory.create_batch([client.request(1, "m"), client.request(2, "m")])

        responses = client.send(batch)
        assert [r.result for r in responses] == ["a", "b"]


# === Convenience and lifecycle ===


class TestInvoke:
    """Tests for JsonRpcClient.invoke."""

    def test_invoke_assigns_ids(self, make_transport):
        """invoke uses the factory's id counter and returns the result."""
        transport = make_transport(_raw(_result(1, "a")), _raw(_result(2, "b")))
        client = JsonRpcClient(transport)

        assert client.invoke("m") == "a"
        assert client.invoke("m", [1]) == "b"
        assert [p["id"] for p in transport.sent] == [1, 2]

    def test_invoke_raises_rpc_error(self, make_transport):
        """Error responses become RpcError."""
        transport = make_transport(_raw(_error(7, -32000, "Server error")))
        client = JsonRpcClient(transport, MessageFactory(first_id=7))

        with pytest.raises(RpcError) as exc_info:
            client.invoke("m")

        assert exc_info.value.code == -32000


class TestLifecycle:
    """Tests for construction and closing."""

    def test_context_manager_closes_transport(self, make_transport):
        """Leaving the with-block closes the transport."""
        transport = make_transport()
        with JsonRpcClient(transport) as client:
            assert client.transport is transport
        assert transport.closed

    def test_close_without_close_method(self):
        """Transports without close() are left alone."""

        class Minimal:
            def send(self, payload: bytes) -> RawHttpResponse:
                return RawHttpResponse(status_code=204)

        client = JsonRpcClient(Minimal())
        client.close()

    def test_from_url_builds_httpx_transport(self):
        """from_url merges overrides into the default transport config."""
        client = JsonRpcClient.from_url("http://127.0.0.1:8765/rpc", config={"timeout": 5})
        try:
            assert isinstance(client.transport, HttpxTransport)
            assert client.transport.config.timeout == 5
            assert client.transport.config.base_url == "http://127.0.0.1:8765/rpc"
        finally:
            client.close()

    def test_end_to_end_over_httpx(self):
        """A batch round-trips through HttpxTransport and httpx.MockTransport."""

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            answers = [
                {"jsonrpc": "2.0", "id": item["id"], "result": item["method"].upper()}
                for item in body
                if "id" in item
            ]
            return httpx.Response(200, json=list(reversed(answers)))

        with httpx.Client(transport=httpx.MockTransport(handler)) as http_client:
            with JsonRpcClient.from_url("http://rpc.test/api", client=http_client) as client:
                responses = client.call_all([
                    client.request(1, "first"),
                    client.notification("quiet"),
                    client.request(2, "second"),
                ])

            assert not http_client.is_closed

        assert [r.result for r in responses] == ["FIRST", "SECOND"]

    def test_from_url_event_hooks_fire(self):
        """Hooks passed to from_url see every exchange."""
        seen: list[Any] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(200, json=_result(body["id"], "pong"))

        real_client = httpx.Client

        def mock_client(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        hooks = {
            "request": [lambda request: seen.append(json.loads(request.content)["method"])],
            "response": [lambda response: seen.append(response.status_code)],
        }
        with patch("httprpc.rpc.transport.httpx.Client", side_effect=mock_client):
            client = JsonRpcClient.from_url("http://rpc.test/api", event_hooks=hooks)

        with client:
            assert client.invoke("ping") == "pong"

        assert seen == ["ping", 200]

    def test_from_url_rejects_client_with_hooks(self):
        """Hooks can't be attached to a caller's httpx client."""
        with httpx.Client() as http_client:
            with pytest.raises(ConfigError):
                JsonRpcClient.from_url(
                    "http://rpc.test/api", client=http_client, event_hooks={"request": [print]}
                )
