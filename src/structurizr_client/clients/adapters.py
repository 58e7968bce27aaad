"""HTTP adapter whose in-flight requests can be aborted through a CancelToken.

``requests`` gives no handle on the socket while ``Session.send`` waits for the
response headers. The adapter below swaps in urllib3 connection classes that
register a cancel callback for the duration of ``getresponse()``; the callback
shuts the socket down so the blocked read returns at once and surfaces as a
connection error, which the transport then reports as a cancellation.

The token is passed through a thread-local set by :func:`cancellation_scope`,
because ``Session.send`` forwards only a fixed set of arguments to the adapter.
"""

from __future__ import annotations

import logging
import socket
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

from ..cancellation import CancelToken

logger = logging.getLogger(__name__)

_local = threading.local()


def current_cancel_token() -> Optional[CancelToken]:
    return getattr(_local, "cancel_token", None)


@contextmanager
def cancellation_scope(cancel_token: Optional[CancelToken]) -> Iterator[None]:
    """Make ``cancel_token`` visible to connections used by this thread."""
    previous = current_cancel_token()
    _local.cancel_token = cancel_token
    try:
        yield
    finally:
        _local.cancel_token = previous


class _CancellableConnectionMixin:
    sock: Optional[socket.socket]

    def getresponse(self, *args, **kwargs):
        cancel_token = current_cancel_token()
        if cancel_token is None:
            return super().getresponse(*args, **kwargs)

        unregister = cancel_token.on_cancel(self._abort)
        try:
            return super().getresponse(*args, **kwargs)
        finally:
            unregister()

    def _abort(self) -> None:
        sock = self.sock
        if sock is None:
            return
        logger.debug("Aborting in-flight request")
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            # Already closed by the peer or by urllib3
            logger.debug("Socket shutdown failed: %s", exc)


class CancellableHTTPConnection(_CancellableConnectionMixin, HTTPConnection):
    pass


class CancellableHTTPSConnection(_CancellableConnectionMixin, HTTPSConnection):
    pass


class CancellableHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = CancellableHTTPConnection


class CancellableHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = CancellableHTTPSConnection


class CancellableHTTPAdapter(HTTPAdapter):
    """:class:`HTTPAdapter` building pools of cancellable connections.

    Requests routed through a proxy use urllib3's proxy pools and can only be
    interrupted once the response headers have arrived.
    """

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            "http": CancellableHTTPConnectionPool,
            "https": CancellableHTTPSConnectionPool,
        }
