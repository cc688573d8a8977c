"""HTTP transport for JSON-RPC payloads.

The client only depends on the Transport protocol: anything with a
send(payload) -> RawHttpResponse method will do. HttpxTransport is the
default implementation on top of httpx.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from httprpc.config.schema import TransportConfig
from httprpc.core.errors import ConfigError, TransportError

logger = logging.getLogger(__name__)

EventHooks = Mapping[str, Sequence[Callable[..., Any]]]


@dataclass(frozen=True)
class RawHttpResponse:
    """The undecoded result of one HTTP exchange."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Performs one HTTP exchange per call."""

    def send(self, payload: bytes) -> RawHttpResponse:
        """POST a serialized JSON-RPC payload and return the raw response.

        Raises:
            TransportError: If no HTTP response was received.
        """
        ...


class HttpxTransport:
    """Transport backed by a synchronous httpx.Client.

    Usage:
        config = load_transport_config("http://127.0.0.1:8765/rpc")
        with HttpxTransport(config) as transport:
            raw = transport.send(b'{"jsonrpc":"2.0","method":"ping","id":1}')
    """

    def __init__(
        self,
        config: TransportConfig,
        client: httpx.Client | None = None,
        event_hooks: EventHooks | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Validated transport configuration.
            client: Optional preconfigured httpx.Client. When given, the caller
                owns it and close() leaves it open.
            event_hooks: httpx request/response hooks for the client this
                transport creates, e.g. {"request": [log_request]}.

        Raises:
            ConfigError: If event_hooks is combined with a preconfigured client.
        """
        if client is not None and event_hooks:
            raise ConfigError("event_hooks can't be combined with a preconfigured client")

        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=config.timeout,
            verify=config.verify,
            follow_redirects=config.follow_redirects,
            event_hooks={name: list(hooks) for name, hooks in (event_hooks or {}).items()},
        )
        logger.debug("HttpxTransport initialized: url=%s, timeout=%s", config.base_url, config.timeout)

    @property
    def config(self) -> TransportConfig:
        return self._config

    def send(self, payload: bytes) -> RawHttpResponse:
        url = self._config.base_url
        try:
            response = self._client.post(url, content=payload, headers=self._config.headers)
        except httpx.ConnectError as e:
            logger.warning("Connection failed to %s: %s", url, e)
            raise TransportError(f"Connection failed: {e}") from e
        except httpx.TimeoutException as e:
            logger.warning("Request timed out: url=%s, timeout=%s", url, self._config.timeout)
            raise TransportError(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("HTTP exchange failed with %s: %s", url, e)
            raise TransportError(f"HTTP exchange failed: {e}") from e

        logger.debug("HTTP %d from %s (%d bytes)", response.status_code, url, len(response.content))
        return RawHttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    def close(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
