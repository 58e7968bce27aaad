"""Workspace services built on the HTTP and CLI clients."""

from .protocols import ContentPusher, WorkspacesAPI
from .provisioning import ProvisioningResult, ProvisioningState, WorkspaceProvisioner, parse_workspace_id

__all__ = [
    "ContentPusher",
    "ProvisioningResult",
    "ProvisioningState",
    "WorkspaceProvisioner",
    "WorkspacesAPI",
    "parse_workspace_id",
]
