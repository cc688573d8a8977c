"""Shared pytest fixtures and configuration for pytest."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from httprpc.rpc.transport import RawHttpResponse


class RecordingTransport:
    """Fake Transport that replays canned responses and records payloads."""

    def __init__(self, responses: list[RawHttpResponse]) -> None:
        self._responses = list(responses)
        self.payloads: list[bytes] = []
        self.closed = False

    def send(self, payload: bytes) -> RawHttpResponse:
        self.payloads.append(payload)
        return self._responses.pop(0)

    def close(self) -> None:
        self.closed = True

    @property
    def sent(self) -> list[Any]:
        """Payloads decoded as JSON."""
        return [json.loads(p) for p in self.payloads]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Return a builder for RecordingTransport replaying the given responses."""

    def _make(*responses: RawHttpResponse) -> RecordingTransport:
        return RecordingTransport(list(responses))

    return _make
