"""Protocol contracts for the collaborators of the provisioning service.

These protocols decouple the orchestrator from the concrete HTTP and CLI
clients so tests and embedding tools can supply their own implementations.
"""

from __future__ import annotations

from typing import Optional, Protocol, Union

from ..cancellation import CancelToken
from ..models import GenericResponse, Workspace, Workspaces


class WorkspacesAPI(Protocol):
    """Workspace CRUD operations (see :class:`~structurizr_client.clients.WorkspacesClient`)."""

    def list_workspaces(self, cancel_token: Optional[CancelToken] = None) -> Workspaces: ...

    def create_workspace(self, cancel_token: Optional[CancelToken] = None) -> Union[Workspace, str]: ...

    def delete_workspace(self, workspace_id: int, cancel_token: Optional[CancelToken] = None) -> GenericResponse: ...

    def get_workspace(self, workspace_id: int, cancel_token: Optional[CancelToken] = None) -> Workspace: ...


class ContentPusher(Protocol):
    """Uploads workspace content using the workspace's own credentials."""

    def push_workspace(
        self,
        workspace_id: int,
        key: str,
        secret: str,
        passphrase: str,
        source: str,
        cancel_token: Optional[CancelToken] = None,
    ) -> str: ...
