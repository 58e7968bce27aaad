"""Request authentication for the workspace API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .signing import checksum, concat, encode, sign
from .strategies import (
    AUTHORIZATION_HEADER,
    CONTENT_MD5_HEADER,
    NONCE_HEADER,
    AdminKeyAuth,
    Clock,
    HmacAuth,
    default_clock,
)

if TYPE_CHECKING:
    from requests.auth import AuthBase

    from ..config import ClientConfig


def build_auth(
    config: "ClientConfig",
    key: Optional[str] = None,
    secret: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> "AuthBase":
    """Select the auth strategy for a client.

    Workspace credentials select the HMAC scheme; otherwise the admin API key
    from ``config`` is used.
    """
    if key is not None or secret is not None:
        return HmacAuth(key or "", secret or "", clock=clock)
    return AdminKeyAuth(config.admin_api_key or "")


__all__ = [
    "AUTHORIZATION_HEADER",
    "CONTENT_MD5_HEADER",
    "NONCE_HEADER",
    "AdminKeyAuth",
    "Clock",
    "HmacAuth",
    "build_auth",
    "checksum",
    "concat",
    "default_clock",
    "encode",
    "sign",
]
