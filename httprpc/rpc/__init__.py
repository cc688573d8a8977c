"""JSON-RPC 2.0 message model, factory and transport.

Example usage:
    factory = MessageFactory()
    request = factory.create_call(1, "add", [1, 2])
    serialize_request(request)
    # b'{"jsonrpc":"2.0","method":"add","params":[1,2],"id":1}'
"""

from httprpc.rpc.factory import MessageFactory
from httprpc.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    decode_body,
    parse_batch_response,
    parse_response,
    response_from_object,
    responses_from_array,
    serialize_batch,
    serialize_request,
    serialize_response,
)
from httprpc.rpc.transport import EventHooks, HttpxTransport, RawHttpResponse, Transport
from httprpc.rpc.types import (
    JSONRPC_VERSION,
    Request,
    RequestKind,
    Response,
    ResponseError,
)

__all__ = [
    # Types
    "JSONRPC_VERSION",
    "Request",
    "RequestKind",
    "Response",
    "ResponseError",
    # Factory
    "MessageFactory",
    # Serialization
    "serialize_request",
    "serialize_batch",
    "serialize_response",
    # Parsing
    "decode_body",
    "parse_response",
    "parse_batch_response",
    "response_from_object",
    "responses_from_array",
    # Transport
    "Transport",
    "RawHttpResponse",
    "EventHooks",
    "HttpxTransport",
    # Error codes
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "SERVER_ERROR",
]
