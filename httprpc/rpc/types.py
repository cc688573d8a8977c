"""JSON-RPC 2.0 message types.

Requests and responses are frozen dataclasses. A Request checks on
construction that its id, params and members agree with its kind, and keeps
its own copy of params. Responses are built by the protocol decoder.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from httprpc.core.errors import EmptyBatchError, InvalidIdError, InvalidRequestError, RpcError

JSONRPC_VERSION = "2.0"

RequestId = str | int
Params = Sequence[Any] | Mapping[str, Any]


class RequestKind(Enum):
    """Variant tag for a request."""

    NOTIFICATION = "notification"
    CALL = "call"
    BATCH = "batch"


@dataclass(frozen=True)
class Request:
    """JSON-RPC 2.0 request.

    Attributes:
        kind: Whether this is a notification, a call, or a batch container.
        method: Name of the method to invoke. Empty for batches.
        params: Optional positional or named parameters, copied into a tuple
            or a read-only mapping.
        id: Request identifier. Only set for calls.
        requests: Member requests. Only set for batches.
        jsonrpc: Protocol version, always "2.0".
    """

    kind: RequestKind
    method: str = ""
    params: Params | None = None
    id: RequestId | None = None
    requests: tuple[Request, ...] = ()
    jsonrpc: str = JSONRPC_VERSION

    def __post_init__(self) -> None:
        """Validate fields against the kind and freeze params.

        Raises:
            InvalidIdError: If a call has no valid id.
            EmptyBatchError: If a batch has no members.
            InvalidRequestError: For any other inconsistency.
        """
        if self.kind is RequestKind.BATCH:
            self._check_batch()
            return

        if self.requests:
            raise InvalidRequestError(f"A {self.kind.value} can't have member requests")
        if not isinstance(self.method, str) or not self.method:
            raise InvalidRequestError(f"method must be a non-empty string, got: {self.method!r}")
        object.__setattr__(self, "params", _freeze_params(self.params))

        if self.kind is RequestKind.CALL:
            if not _is_valid_id(self.id):
                raise InvalidIdError(self.id)
        elif self.id is not None:
            raise InvalidRequestError(f"A notification never carries an id, got: {self.id!r}")

    def _check_batch(self) -> None:
        if self.method or self.params is not None or self.id is not None:
            raise InvalidRequestError("A batch only holds member requests")

        members = tuple(self.requests)
        if not members:
            raise EmptyBatchError()
        for position, request in enumerate(members):
            if not isinstance(request, Request):
                raise InvalidRequestError(
                    f"Batch element {position} is not a Request: {type(request).__name__}"
                )
            if request.is_batch:
                raise InvalidRequestError(
                    f"Batch element {position} is a batch; nesting is not allowed"
                )
        object.__setattr__(self, "requests", members)

    @property
    def is_notification(self) -> bool:
        return self.kind is RequestKind.NOTIFICATION

    @property
    def is_call(self) -> bool:
        return self.kind is RequestKind.CALL

    @property
    def is_batch(self) -> bool:
        return self.kind is RequestKind.BATCH

    @property
    def calls(self) -> tuple[Request, ...]:
        """Requests that expect a response: the member calls of a batch, or self."""
        if self.is_batch:
            return tuple(r for r in self.requests if r.is_call)
        if self.is_call:
            return (self,)
        return ()

    def to_dict(self) -> dict[str, Any]:
        """Wire representation of a single (non-batch) request."""
        data: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
        }

        if self.params is not None:
            data["params"] = (
                dict(self.params) if isinstance(self.params, Mapping) else list(self.params)
            )

        if self.id is not None:
            data["id"] = self.id

        return data


def _is_valid_id(value: Any) -> bool:
    """True for integers (not bools) and non-empty strings."""
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return bool(value)
    return isinstance(value, int)


def _freeze_params(params: Any) -> Params | None:
    if params is None:
        return None
    if isinstance(params, Mapping):
        return MappingProxyType(dict(params))
    # str and bytes are sequences but never valid params
    if isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray)):
        return tuple(params)
    raise InvalidRequestError(f"params must be an array or object, got: {type(params).__name__}")


@dataclass(frozen=True)
class ResponseError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


@dataclass(frozen=True)
class Response:
    """JSON-RPC 2.0 response.

    Attributes:
        id: Request identifier from the original call.
        result: Result of the method call (mutually exclusive with error).
        error: Error object if the method failed (mutually exclusive with result).
        jsonrpc: Protocol version, always "2.0".
        status_code: HTTP status of the exchange that carried this response.
        headers: HTTP headers of that exchange.
    """

    id: RequestId | None
    result: Any = None
    error: ResponseError | None = None
    jsonrpc: str = JSONRPC_VERSION
    status_code: int = field(default=200, compare=False)
    headers: Mapping[str, str] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def raise_for_error(self) -> Any:
        """Return the result, or raise RpcError if this is an error response."""
        if self.error is not None:
            raise RpcError(self.error.code, self.error.message, self.error.data)
        return self.result

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
        }

        if self.error is not None:
            data["error"] = self.error.to_dict()
        else:
            data["result"] = self.result

        return data
