"""Typed exception hierarchy for httprpc.

Errors fall into four groups:

- RequestError: caller misuse, detected before any network activity.
- ProtocolError: the server broke the JSON-RPC contract.
- TransportError: the HTTP exchange itself failed.
- RpcError: a well-formed error response, raised only on explicit request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from httprpc.rpc.types import Response


class HttpRpcError(Exception):
    """Base class for all httprpc errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(HttpRpcError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class LoadError(HttpRpcError):
    """Raised when a config file can't be read or parsed."""


# === Caller misuse ===


class RequestError(HttpRpcError):
    """Base class for invalid request construction."""


class InvalidIdError(RequestError):
    """Raised when a call id is null, empty, or not a string/integer."""

    def __init__(self, request_id: Any) -> None:
        self.request_id = request_id
        super().__init__(
            f"Request id must be a non-empty string or an integer, got: {request_id!r}"
        )


class EmptyBatchError(RequestError):
    """Raised when a batch contains no requests."""

    def __init__(self) -> None:
        super().__init__("Batch must contain at least one request")


class InvalidRequestError(RequestError):
    """Raised for a bad method name, bad params, or a nested batch."""


# === Server contract violations ===


class ProtocolError(HttpRpcError):
    """Base class for responses that violate the JSON-RPC 2.0 contract."""


class MalformedResponseError(ProtocolError):
    """Raised when a response body is not a valid JSON-RPC 2.0 response."""


class IdMismatchError(ProtocolError):
    """Raised when a single call's response carries a different id."""

    def __init__(self, expected: str | int, response: Response) -> None:
        self.expected = expected
        self.actual = response.id
        self.response = response
        super().__init__(
            f"Response id {response.id!r} does not match request id {expected!r}"
        )


class UnknownResponseIdError(ProtocolError):
    """Raised when a batch entry can't be matched to exactly one outgoing call."""

    def __init__(self, response_id: Any, reason: str = "no matching call in batch") -> None:
        self.response_id = response_id
        super().__init__(f"Unexpected response id {response_id!r}: {reason}")


class MissingResponseError(ProtocolError):
    """Raised when calls in a batch received no response.

    Attributes:
        missing_ids: Ids of the calls left unanswered, in request order.
        responses: Responses that were correlated, in request order.
    """

    def __init__(self, missing_ids: list[str | int], responses: list[Response]) -> None:
        self.missing_ids = missing_ids
        self.responses = responses
        ids = ", ".join(repr(i) for i in missing_ids)
        super().__init__(f"No response received for call id(s): {ids}")


# === Transport ===


class TransportError(HttpRpcError):
    """Raised when the HTTP exchange fails.

    Attributes:
        status_code: HTTP status when the server answered, else None.
        body: Raw response body when the server answered, else None.
        response: JSON-RPC error response found in the body, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: bytes | None = None,
        response: Response | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.response = response
        super().__init__(message)


# === Error responses ===


class RpcError(HttpRpcError):
    """A JSON-RPC error object returned by the server."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.data = data
        super().__init__(message)

    def __str__(self) -> str:
        return f"RPC error {self.code}: {self.message}"
