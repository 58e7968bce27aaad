"""Request building and blocking HTTP transport for the workspace API.

One :class:`Transport` owns one ``requests.Session``. TLS verification is fixed
on that session when the transport is created, so individual calls cannot turn
it off. Every response body is read to the end and the response closed on every
path, including errors, so the pooled connection can be reused.

A cancelled token aborts the call while it waits for response headers (through
:class:`~structurizr_client.clients.adapters.CancellableHTTPAdapter`) and while
the body is being read.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import urljoin

import requests
from pydantic import BaseModel
from requests.auth import AuthBase

from ..auth import AUTHORIZATION_HEADER
from ..cancellation import CancelToken
from ..config import ClientConfig, ConfigValidationError
from ..exceptions import OperationCancelledError, TransportError
from .adapters import CancellableHTTPAdapter, cancellation_scope
from .classifier import classify_response

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json; charset=UTF-8"
_CHUNK_SIZE = 8192
_REDACTED_HEADERS = {AUTHORIZATION_HEADER.lower(), "authorization"}


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` safe to log."""
    return {k: ("***" if k.lower() in _REDACTED_HEADERS else v) for k, v in headers.items()}


def serialize_body(body: Any) -> bytes:
    """Serialize a request body to the JSON bytes that will be transmitted."""
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True).encode("utf-8")
    return json.dumps(body).encode("utf-8")


class Transport:
    """Builds, signs and sends requests against a configured base address."""

    def __init__(
        self,
        config: ClientConfig,
        auth: AuthBase,
        session: Optional[requests.Session] = None,
    ):
        if not config.base_url:
            raise ConfigValidationError("Base URL is required to create a transport")

        self._config = config
        self._auth = auth
        self._base_url = config.base_url.rstrip("/") + "/"

        if session is None:
            session = requests.Session()
            adapter = CancellableHTTPAdapter(max_retries=0)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        session.verify = not config.tls_insecure
        self._session = session

        if config.tls_insecure:
            logger.warning("TLS certificate verification is disabled for %s", config.base_url)

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def verify(self) -> bool:
        return bool(self._session.verify)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def build_request(self, method: str, path: str, body: Any = None) -> requests.PreparedRequest:
        """Resolve ``path``, serialize ``body`` and sign the result.

        The auth strategy runs after the body has been serialized, so checksums
        and signatures cover the exact bytes that are sent.
        """
        url = urljoin(self._base_url, path)
        headers = {
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }

        data: Optional[bytes] = None
        if body is not None:
            data = serialize_body(body)
            headers["Content-Type"] = JSON_CONTENT_TYPE
            logger.debug("Raw body to be sent over wire: %s", data.decode("utf-8", errors="replace"))

        request = requests.Request(method=method.upper(), url=url, headers=headers, data=data, auth=self._auth)
        prepared = self._session.prepare_request(request)
        logger.debug("Request: %s %s headers=%s", prepared.method, prepared.url, redact_headers(prepared.headers))
        return prepared

    def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        response_model: Optional[Type[ModelT]] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> Union[ModelT, requests.Response]:
        """Send a request and classify the response.

        Blocks until the exchange completes, the configured timeout elapses or
        ``cancel_token`` is cancelled/expired. No retries are attempted.

        The deadline bounds each socket operation, and the token is checked
        again after every body chunk, so a server trickling the body stops the
        call at the first chunk received after the deadline.

        Returns:
            The decoded ``response_model`` instance, or the drained
            ``requests.Response`` when no model is given.

        Raises:
            OperationCancelledError: The token was cancelled or its deadline passed
            TransportError: The connection failed
            APIError: Non-2xx response (see :func:`classify_response`)
            DecodeError: The success body did not match ``response_model``
        """
        operation = f"{method.upper()} {path}"
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(operation)

        request = self.build_request(method, path, body)
        timeout = self._timeout(cancel_token, operation)

        try:
            with cancellation_scope(cancel_token):
                response = self._session.send(request, stream=True, timeout=timeout, allow_redirects=False)
        except (requests.RequestException, OSError, ValueError) as exc:
            raise self._request_failure(operation, exc, cancel_token) from exc

        unregister = cancel_token.on_cancel(response.close) if cancel_token is not None else None
        try:
            content = self._drain(response, operation, cancel_token)
        finally:
            if unregister is not None:
                unregister()
            response.close()

        if cancel_token is not None:
            cancel_token.raise_if_cancelled(operation)

        logger.debug("Response for %s: %s %s", operation, response.status_code, content[:500])
        decoded = classify_response(
            response.status_code,
            content,
            response_model,
            method=request.method or method.upper(),
            path=path,
        )
        if response_model is None:
            return response
        return decoded

    def _timeout(self, cancel_token: Optional[CancelToken], operation: str) -> float:
        timeout = self._config.timeout
        if cancel_token is not None:
            remaining = cancel_token.remaining()
            if remaining is not None:
                if remaining <= 0:
                    raise OperationCancelledError(f"{operation} deadline exceeded", context={"reason": "deadline"})
                timeout = min(timeout, remaining)
        return timeout

    def _drain(self, response: requests.Response, operation: str, cancel_token: Optional[CancelToken]) -> bytes:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled(operation)
                chunks.append(chunk)
        except (requests.RequestException, OSError, ValueError) as exc:
            raise self._request_failure(operation, exc, cancel_token) from exc

        content = b"".join(chunks)
        # Keep the body available through response.content after the stream is closed.
        response._content = content
        response._content_consumed = True
        return content

    @staticmethod
    def _request_failure(
        operation: str, exc: BaseException, cancel_token: Optional[CancelToken]
    ) -> Exception:
        if cancel_token is not None and (cancel_token.cancelled or cancel_token.expired):
            reason = "cancelled" if cancel_token.cancelled else "deadline"
            return OperationCancelledError(f"{operation} {reason}: {exc}", context={"reason": reason})
        if isinstance(exc, requests.Timeout):
            return TransportError(f"{operation} timed out: {exc}", context={"reason": "timeout"})
        return TransportError(f"{operation} failed: {exc}")
