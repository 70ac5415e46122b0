"""JSON-RPC connection to the target node."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator
from urllib.parse import urlsplit

import requests
from web3 import Web3

from .config import DEFAULT_RPC_TIMEOUT
from .errors import NodeConnectionError

_LOGGER = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Strip path and credentials so API keys embedded in RPC URLs stay out of logs."""

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return "<invalid url>"
    try:
        port = parts.port
    except ValueError:
        return "<invalid url>"
    host = parts.hostname if port is None else f"{parts.hostname}:{port}"
    return f"{parts.scheme}://{host}"


class NodeClient:
    """Thin wrapper around a :class:`~web3.Web3` instance and its HTTP session."""

    def __init__(self, w3: Any, session: Any) -> None:
        self.w3 = w3
        self._session = session
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def is_connected(self) -> bool:
        return bool(self.w3.is_connected())

    def chain_id(self) -> int:
        return int(self.w3.eth.chain_id)

    def pending_nonce(self, address: str) -> int:
        """Return the next unused nonce including transactions still in the mempool."""

        return int(self.w3.eth.get_transaction_count(address, "pending"))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._session.close()


@contextmanager
def connect(
    rpc_url: str,
    *,
    timeout: float = DEFAULT_RPC_TIMEOUT,
    session_factory: Callable[[], Any] = requests.Session,
    web3_factory: Callable[[Any], Any] = Web3,
) -> Iterator[NodeClient]:
    """Open a connection to ``rpc_url`` that is released on every exit path.

    ``timeout`` bounds each HTTP request made through the provider.

    Raises:
        NodeConnectionError: If the node cannot be reached.
    """

    if timeout <= 0:
        raise ValueError("timeout must be positive")

    display_url = redact_url(rpc_url)
    session = session_factory()
    client = None
    try:
        provider = Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}, session=session)
        client = NodeClient(web3_factory(provider), session)
        try:
            connected = client.is_connected()
        except (requests.RequestException, OSError) as exc:
            raise NodeConnectionError(f"failed to connect to {display_url}: {exc}") from exc
        if not connected:
            raise NodeConnectionError(f"node at {display_url} is not reachable")
        _LOGGER.info("Connected to %s", display_url)
        yield client
    finally:
        if client is not None:
            client.close()
        else:
            session.close()
        _LOGGER.debug("Closed connection to %s", display_url)


__all__ = ["NodeClient", "connect", "redact_url"]
