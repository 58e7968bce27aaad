"""Checksum and keyed-signature helpers for the HMAC request scheme."""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Union


def checksum(content: Union[str, bytes]) -> str:
    """Return the hexadecimal MD5 checksum of ``content``."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.md5(content).hexdigest()


def encode(content: str) -> str:
    """Return the base64 encoding of the UTF-8 bytes of ``content``."""
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def sign(secret: str, content: str) -> str:
    """Return the hexadecimal HMAC-SHA256 of ``content`` keyed with ``secret``."""
    digest = hmac.new(secret.encode("utf-8"), content.encode("utf-8"), hashlib.sha256)
    return digest.hexdigest()


def concat(*values: str) -> str:
    """Join ``values`` with every element terminated by a newline."""
    return "".join(f"{value}\n" for value in values)
