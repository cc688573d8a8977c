"""JSON-RPC 2.0 serialization and response parsing.

Requests are emitted as compact JSON with keys in the conventional order
(jsonrpc, method, params, id). Responses are validated strictly: anything that
isn't a well-formed JSON-RPC 2.0 response raises MalformedResponseError.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from httprpc.core.errors import InvalidRequestError, MalformedResponseError
from httprpc.rpc.types import JSONRPC_VERSION, Request, Response, ResponseError

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000  # Server error range: -32000 to -32099

_SEPARATORS = (",", ":")


def _dumps(data: Any) -> bytes:
    return json.dumps(data, separators=_SEPARATORS, ensure_ascii=False).encode("utf-8")


# === Request serialization ===


def serialize_request(request: Request) -> bytes:
    """Serialize a Request to compact JSON.

    Args:
        request: The Request to serialize. Batches serialize as their array.

    Returns:
        UTF-8 encoded JSON (no trailing newline).
    """
    if request.is_batch:
        return serialize_batch(request.requests)
    return _dumps(request.to_dict())


def serialize_batch(requests: Sequence[Request]) -> bytes:
    """Serialize requests into a single JSON array, preserving order.

    Raises:
        InvalidRequestError: If any element is itself a batch.
    """
    items = []
    for position, request in enumerate(requests):
        if request.is_batch:
            raise InvalidRequestError(f"Batch element {position} is a batch; nesting is not allowed")
        items.append(request.to_dict())
    return _dumps(items)


def serialize_response(response: Response) -> bytes:
    """Serialize a Response to compact JSON."""
    return _dumps(response.to_dict())


# === Response parsing ===


def decode_body(body: bytes | str) -> Any:
    """Decode a raw HTTP body as JSON.

    Raises:
        MalformedResponseError: If the body isn't valid JSON.
    """
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"Invalid JSON: {e}") from e


def response_from_object(
    data: Any,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Build a Response from one decoded JSON object.

    Args:
        data: A decoded JSON value, expected to be a response object.
        status_code: HTTP status of the carrying exchange.
        headers: HTTP headers of the carrying exchange.

    Returns:
        A validated Response.

    Raises:
        MalformedResponseError: If required fields are missing or invalid.
    """
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Response must be a JSON object, got: {type(data).__name__}")

    jsonrpc = data.get("jsonrpc")
    if jsonrpc != JSONRPC_VERSION:
        raise MalformedResponseError(f"jsonrpc must be '2.0', got: {jsonrpc!r}")

    # id is required in responses, but may be null
    if "id" not in data:
        raise MalformedResponseError("Response must have 'id' field")
    response_id = data["id"]
    if response_id is not None and (
        isinstance(response_id, bool) or not isinstance(response_id, (str, int))
    ):
        raise MalformedResponseError(
            f"id must be string, integer, or null, got: {type(response_id).__name__}"
        )

    has_result = "result" in data
    has_error = "error" in data

    if has_result and has_error:
        raise MalformedResponseError("Response cannot have both 'result' and 'error'")
    if not has_result and not has_error:
        raise MalformedResponseError("Response must have either 'result' or 'error'")

    error = None
    if has_error:
        error = _error_from_object(data["error"])

    return Response(
        jsonrpc=jsonrpc,
        id=response_id,
        result=data.get("result"),
        error=error,
        status_code=status_code,
        headers=dict(headers or {}),
    )


def _error_from_object(error: Any) -> ResponseError:
    if not isinstance(error, dict):
        raise MalformedResponseError(f"error must be an object, got: {type(error).__name__}")
    if "code" not in error or "message" not in error:
        raise MalformedResponseError("error must have 'code' and 'message' fields")

    code = error["code"]
    if isinstance(code, bool) or not isinstance(code, int):
        raise MalformedResponseError(f"error code must be an integer, got: {code!r}")
    message = error["message"]
    if not isinstance(message, str):
        raise MalformedResponseError(f"error message must be a string, got: {type(message).__name__}")

    return ResponseError(code=code, message=message, data=error.get("data"))


def parse_response(
    body: bytes | str,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Parse a raw HTTP body into a single Response.

    Raises:
        MalformedResponseError: If the body is not one valid response object.
    """
    return response_from_object(decode_body(body), status_code, headers)


def responses_from_array(
    data: Any,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> list[Response]:
    """Build Responses from a decoded batch array.

    Fail-fast: the first malformed element aborts the whole batch.

    Raises:
        MalformedResponseError: If data isn't an array or any element is invalid.
    """
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Batch response must be a JSON array, got: {type(data).__name__}"
        )

    responses = []
    for index, item in enumerate(data):
        try:
            responses.append(response_from_object(item, status_code, headers))
        except MalformedResponseError as e:
            raise MalformedResponseError(f"Batch element {index}: {e.message}") from e
    return responses


def parse_batch_response(
    body: bytes | str,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> list[Response]:
    """Parse a raw HTTP body into a list of Responses.

    An empty body is an empty batch: servers send nothing back when every
    request in the batch was a notification.

    Raises:
        MalformedResponseError: If the body isn't an array of valid responses.
    """
    if not body.strip():
        return []
    return responses_from_array(decode_body(body), status_code, headers)
