"""Authentication strategies for the workspace API.

Both strategies are ``requests`` auth callables: they receive the fully prepared
request (URL, headers and serialized body) and add the headers the server
expects. A client instance is configured with exactly one of them.

Admin key scheme::

    X-Authorization: <admin api key>

HMAC scheme::

    X-Authorization: <key>:<base64(hex HMAC-SHA256(secret, canonical string))>
    Nonce: <milliseconds since epoch>
    Content-MD5: <base64(hex MD5(body))>        # only when a body is sent

where the canonical string is method, path, body checksum, content type and
nonce, each terminated by a newline, in that order.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Union
from urllib.parse import unquote, urlsplit

from requests import PreparedRequest
from requests.auth import AuthBase

from ..exceptions import AuthConfigError
from .signing import checksum, concat, encode, sign

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "X-Authorization"
NONCE_HEADER = "Nonce"
CONTENT_MD5_HEADER = "Content-MD5"

Clock = Callable[[], Union[int, float]]


def default_clock() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class AdminKeyAuth(AuthBase):
    """Send the static admin API key verbatim."""

    def __init__(self, api_key: str):
        if not api_key:
            raise AuthConfigError("An admin API key is required for admin authentication")
        self.api_key = api_key

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        if not self.api_key:
            raise AuthConfigError("An admin API key is required for admin authentication")
        r.headers[AUTHORIZATION_HEADER] = self.api_key
        return r

    def __repr__(self) -> str:
        return "AdminKeyAuth(api_key='***')"


class HmacAuth(AuthBase):
    """Sign each request with a workspace key and secret."""

    def __init__(self, key: str, secret: str, clock: Optional[Clock] = None):
        if not key:
            raise AuthConfigError("An API key is required for HMAC authentication")
        if not secret:
            raise AuthConfigError("An API secret is required for HMAC authentication")
        self.key = key
        self.secret = secret
        self.clock = clock or default_clock

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        body = _read_body(r)
        nonce = str(int(self.clock()))
        body_checksum = checksum(body)
        message = concat(
            r.method or "",
            unquote(urlsplit(r.url or "").path),
            body_checksum,
            r.headers.get("Content-Type", ""),
            nonce,
        )

        if body:
            r.headers[CONTENT_MD5_HEADER] = encode(body_checksum)
        r.headers[AUTHORIZATION_HEADER] = f"{self.key}:{encode(sign(self.secret, message))}"
        r.headers[NONCE_HEADER] = nonce
        logger.debug("Signed %s %s with nonce %s", r.method, r.url, nonce)
        return r

    def __repr__(self) -> str:
        return f"HmacAuth(key={self.key!r}, secret='***')"


def _read_body(r: PreparedRequest) -> bytes:
    """Return the request body as bytes, leaving it transmittable afterwards.

    A file-like or iterable body is consumed and replaced with the equivalent
    bytes so the checksum covers exactly what goes over the wire.
    """
    body = r.body
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")

    if hasattr(body, "read"):
        data = body.read()
    else:
        data = b"".join(chunk.encode("utf-8") if isinstance(chunk, str) else chunk for chunk in body)
    if isinstance(data, str):
        data = data.encode("utf-8")

    r.body = data
    r.headers.pop("Transfer-Encoding", None)
    r.prepare_content_length(data)
    return data
