"""Exception hierarchy for the Structurizr workspace client.

Every error raised by this package derives from :class:`StructurizrClientError`
and carries a ``context`` dictionary. Layers above the transport may add keys to
``context`` (for example the provisioning step and workspace id) but keep the
original exception type, so callers can still tell an HTTP 401 from a 5xx or from
a failed content push.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class StructurizrClientError(Exception):
    """Base exception for all Structurizr client errors.

    Attributes:
        message: Human-readable error message
        context: Dictionary with error details such as the HTTP method, path,
            workspace id or provisioning step.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class AuthConfigError(StructurizrClientError):
    """A credential or signing secret required by the auth strategy is missing."""


class TransportError(StructurizrClientError):
    """The HTTP exchange failed before a response was received."""


class OperationCancelledError(StructurizrClientError):
    """The caller cancelled the operation or its deadline expired."""


class DecodeError(StructurizrClientError):
    """A success response body did not match the expected shape."""


class NotFoundError(StructurizrClientError):
    """A workspace was not present in the list returned by the server."""


class WorkspaceIdError(StructurizrClientError):
    """A workspace identifier could not be parsed."""


class APIError(StructurizrClientError):
    """Base class for non-2xx responses from the workspace API.

    The rendered message follows the layout used by the server tooling::

        <kind> \\n\\n\\terror details: \\n\\t\\tsummary: <server message>\\n

    or, when the error body could not be decoded::

        <kind> \\n\\n\\n\\tplease see the log for error details\\n

    Attributes:
        status_code: HTTP status code of the response
        server_message: ``message`` field of the decoded error body, or ``""``
        decode_error: Exception raised while decoding the error body, if any
    """

    kind = "api error"

    def __init__(
        self,
        status_code: int,
        server_message: str = "",
        *,
        decode_error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.server_message = server_message
        self.decode_error = decode_error
        super().__init__(self._render(), context=context)

    def _render(self) -> str:
        if self.server_message:
            details = f"\terror details: \n\t\tsummary: {self.server_message}\n"
        else:
            details = "\n\tplease see the log for error details\n"
        return f"{self.kind} \n\n{details}"


class BadRequestError(APIError):
    """HTTP 4xx other than 401."""

    kind = "bad request"


class UnauthorizedError(APIError):
    """HTTP 401."""

    kind = "unauthorized"


class ServerUnavailableError(APIError):
    """HTTP 5xx."""

    kind = "system unavailable"


class ContentPushFailedError(StructurizrClientError):
    """The external content push failed.

    Attributes:
        output: Combined stdout/stderr of the push command, verbatim
        returncode: Exit status of the command, or ``None`` if it never ran
    """

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        returncode: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.output = output
        self.returncode = returncode
        full_message = f"{message}\nOutput: {output}" if output else message
        super().__init__(full_message, context=context)


class RollbackFailedError(StructurizrClientError):
    """A content push failed and the compensating delete failed too.

    The workspace identified by ``workspace_id`` may still exist on the server
    without its content.

    Attributes:
        workspace_id: Identifier of the possibly dangling workspace
        push_error: The original push failure
        rollback_error: The error raised by the compensating delete
    """

    def __init__(
        self,
        workspace_id: int,
        push_error: ContentPushFailedError,
        rollback_error: BaseException,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.workspace_id = workspace_id
        self.push_error = push_error
        self.rollback_error = rollback_error
        message = (
            f"Failed to update Workspace (id: {workspace_id}) with error: {push_error}\n"
            f"Failed to rollback Workspace (id: {workspace_id}) creation with error: {rollback_error}\n"
            f"Workspace {workspace_id} may still exist on the server without content."
        )
        super().__init__(message, context=context)
