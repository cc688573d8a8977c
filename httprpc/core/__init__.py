"""Core errors and utilities."""

from httprpc.core.errors import (
    ConfigError,
    EmptyBatchError,
    HttpRpcError,
    IdMismatchError,
    InvalidIdError,
    InvalidRequestError,
    LoadError,
    MalformedResponseError,
    MissingResponseError,
    ProtocolError,
    RequestError,
    RpcError,
    TransportError,
    UnknownResponseIdError,
)
from httprpc.core.utils import deep_merge

__all__ = [
    "HttpRpcError",
    "ConfigError",
    "LoadError",
    "RequestError",
    "InvalidIdError",
    "EmptyBatchError",
    "InvalidRequestError",
    "ProtocolError",
    "MalformedResponseError",
    "IdMismatchError",
    "UnknownResponseIdError",
    "MissingResponseError",
    "TransportError",
    "RpcError",
    "deep_merge",
]
