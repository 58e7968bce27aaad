"""Structurizr workspace client.

Client library for the Structurizr workspace API: admin-key and HMAC request
authentication, workspace list/create/delete with typed errors, and a
provisioning service that creates a workspace, pushes content into it through
the Structurizr CLI and rolls the creation back if the push fails.
"""

from __future__ import annotations

from .cancellation import CancelToken
from .clients import StructurizrCLI, Transport, WorkspacesClient
from .config import CLIConfig, ClientConfig
from .constants import __version__
from .exceptions import (
    APIError,
    AuthConfigError,
    BadRequestError,
    ContentPushFailedError,
    DecodeError,
    NotFoundError,
    OperationCancelledError,
    RollbackFailedError,
    ServerUnavailableError,
    StructurizrClientError,
    TransportError,
    UnauthorizedError,
    WorkspaceIdError,
)
from .factory import create_provisioner, create_workspaces_client
from .models import GenericResponse, Workspace, Workspaces
from .services import ProvisioningResult, ProvisioningState, WorkspaceProvisioner

__all__ = [
    "__version__",
    "APIError",
    "AuthConfigError",
    "BadRequestError",
    "CLIConfig",
    "CancelToken",
    "ClientConfig",
    "ContentPushFailedError",
    "DecodeError",
    "GenericResponse",
    "NotFoundError",
    "OperationCancelledError",
    "ProvisioningResult",
    "ProvisioningState",
    "RollbackFailedError",
    "ServerUnavailableError",
    "StructurizrCLI",
    "StructurizrClientError",
    "Transport",
    "TransportError",
    "UnauthorizedError",
    "Workspace",
    "WorkspaceIdError",
    "WorkspaceProvisioner",
    "Workspaces",
    "WorkspacesClient",
    "create_provisioner",
    "create_workspaces_client",
]
