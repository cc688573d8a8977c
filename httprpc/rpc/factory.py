"""Construction of JSON-RPC requests and responses.

MessageFactory builds Request and Response objects. Request construction
validates its own fields; the factory adds id generation on top. The client
receives one as a constructor dependency so that id generation can be swapped
without touching the client.
"""

import itertools
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from httprpc.rpc.protocol import response_from_object, responses_from_array
from httprpc.rpc.types import Params, Request, RequestId, RequestKind, Response


class MessageFactory:
    """Builds validated requests and responses."""

    def __init__(self, first_id: int = 1) -> None:
        self._ids = itertools.count(first_id)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Return the next id from this factory's counter. Safe across threads."""
        with self._lock:
            return next(self._ids)

    def create_notification(self, method: str, params: Params | None = None) -> Request:
        """Build a notification (no id, no response expected)."""
        return Request(
            kind=RequestKind.NOTIFICATION,
            method=method,
            params=params,
        )

    def create_call(
        self,
        request_id: RequestId,
        method: str,
        params: Params | None = None,
    ) -> Request:
        """Build a call.

        Raises:
            InvalidIdError: If request_id is None, empty, or not a str/int.
            InvalidRequestError: If method or params are invalid.
        """
        return Request(
            kind=RequestKind.CALL,
            method=method,
            params=params,
            id=request_id,
        )

    def create_batch(self, requests: Iterable[Request]) -> Request:
        """Build a batch container.

        Raises:
            EmptyBatchError: If requests is empty.
            InvalidRequestError: If any member is not a Request or is itself a batch.
        """
        return Request(kind=RequestKind.BATCH, requests=tuple(requests))

    def create_response(
        self,
        data: Any,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Build a Response from a decoded JSON object."""
        return response_from_object(data, status_code, headers)

    def create_batch_responses(
        self,
        data: Any,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> list[Response]:
        """Build Responses from a decoded JSON array (fail-fast on bad elements)."""
        return responses_from_array(data, status_code, headers)

