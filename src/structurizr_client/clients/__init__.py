"""HTTP and CLI clients for the Structurizr workspace service."""

from .adapters import CancellableHTTPAdapter, cancellation_scope
from .classifier import classify_response, decode_error_envelope, error_kind
from .cli import CommandExecutor, CommandResult, StructurizrCLI, SubprocessExecutor, redact_args
from .transport import Transport, redact_headers, serialize_body
from .workspaces import WorkspacesClient, workspace_path

__all__ = [
    "CancellableHTTPAdapter",
    "CommandExecutor",
    "CommandResult",
    "StructurizrCLI",
    "SubprocessExecutor",
    "Transport",
    "WorkspacesClient",
    "cancellation_scope",
    "classify_response",
    "decode_error_envelope",
    "error_kind",
    "redact_args",
    "redact_headers",
    "serialize_body",
    "workspace_path",
]
