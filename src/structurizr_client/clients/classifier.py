"""Map HTTP status codes and bodies to decoded models or typed errors."""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import APIError, BadRequestError, DecodeError, ServerUnavailableError, UnauthorizedError
from ..models import ErrorEnvelope

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_BODY_PREVIEW = 500


def error_kind(status_code: int) -> Optional[Type[APIError]]:
    """Return the error class for ``status_code``, or None for non-error codes."""
    if status_code >= 500:
        return ServerUnavailableError
    if status_code == 401:
        return UnauthorizedError
    if 400 <= status_code < 500:
        return BadRequestError
    return None


def decode_error_envelope(body: bytes) -> Tuple[str, Optional[Exception]]:
    """Extract the server message from an error body.

    Returns:
        Tuple of (message, decode_error). On failure the message is empty and the
        decoding exception is returned instead of raised.
    """
    try:
        envelope = ErrorEnvelope.model_validate_json(body or b"")
    except ValidationError as exc:
        return "", exc
    return envelope.message, None


def classify_response(
    status_code: int,
    body: bytes,
    response_model: Optional[Type[ModelT]] = None,
    *,
    method: str = "",
    path: str = "",
) -> Optional[ModelT]:
    """Decode a successful response or raise the matching error.

    Raises:
        ServerUnavailableError: 5xx
        UnauthorizedError: 401
        BadRequestError: any other 4xx
        DecodeError: success body does not match ``response_model``
    """
    kind = error_kind(status_code)
    if kind is not None:
        logger.debug("Handling error response for %s %s (%s): %s", method, path, status_code, body[:_BODY_PREVIEW])
        message, decode_error = decode_error_envelope(body)
        if decode_error is not None:
            logger.debug(
                "Error decoding error envelope from response for %s %s with: %s", method, path, decode_error
            )
        raise kind(
            status_code,
            message,
            decode_error=decode_error,
            context={"method": method, "path": path},
        )

    if response_model is None:
        return None

    try:
        decoded = response_model.model_validate_json(body or b"")
    except ValidationError as exc:
        logger.debug("Failed decoding response for %s %s with: %s", method, path, exc)
        raise DecodeError(
            f"Failed to decode {response_model.__name__} from response for {method} {path}: {exc}",
            context={
                "method": method,
                "path": path,
                "status_code": status_code,
                "body": body[:_BODY_PREVIEW].decode("utf-8", errors="replace"),
            },
        ) from exc

    logger.debug("Decoded %s from response for %s %s", response_model.__name__, method, path)
    return decoded
