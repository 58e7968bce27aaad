"""Workspace list/create/delete operations over the REST API.

There is no get-by-id endpoint on the server. :meth:`WorkspacesClient.get_workspace`
lists every workspace and scans for the id, so each "read one" costs a full list
request.
"""

from __future__ import annotations

import logging
from typing import Optional, Union
from urllib.parse import quote

from ..cancellation import CancelToken
from ..constants import WORKSPACE_GET_UPDATE_DELETE_PATH, WORKSPACE_LIST_CREATE_PATH
from ..exceptions import NotFoundError
from ..models import GenericResponse, Workspace, Workspaces
from .classifier import classify_response
from .transport import Transport

logger = logging.getLogger(__name__)

_LOCATION_STATUSES = {201, 301, 302, 303, 307, 308}


def workspace_path(workspace_id: Union[int, str]) -> str:
    """Return the item path for ``workspace_id`` with the id path-escaped."""
    return WORKSPACE_GET_UPDATE_DELETE_PATH.format(id=quote(str(workspace_id), safe=""))


class WorkspacesClient:
    """CRUD operations on workspaces, authenticated with the transport's strategy."""

    def __init__(self, transport: Transport):
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    def list_workspaces(self, cancel_token: Optional[CancelToken] = None) -> Workspaces:
        """List all workspaces."""
        return self._transport.send(
            "GET", WORKSPACE_LIST_CREATE_PATH, response_model=Workspaces, cancel_token=cancel_token
        )

    def create_workspace(self, cancel_token: Optional[CancelToken] = None) -> Union[Workspace, str]:
        """Create a new workspace; the server assigns every field.

        Returns:
            The created workspace, or the ``Location`` header value when the
            server answers with a 201/redirect and an empty body.
        """
        response = self._transport.send("POST", WORKSPACE_LIST_CREATE_PATH, cancel_token=cancel_token)

        location = response.headers.get("Location")
        if not response.content.strip() and location and response.status_code in _LOCATION_STATUSES:
            logger.debug("Have %s, returning Location header: %s", response.status_code, location)
            return location

        return classify_response(
            response.status_code,
            response.content,
            Workspace,
            method="POST",
            path=WORKSPACE_LIST_CREATE_PATH,
        )

    def delete_workspace(self, workspace_id: int, cancel_token: Optional[CancelToken] = None) -> GenericResponse:
        """Delete a workspace."""
        return self._transport.send(
            "DELETE", workspace_path(workspace_id), response_model=GenericResponse, cancel_token=cancel_token
        )

    def get_workspace(self, workspace_id: int, cancel_token: Optional[CancelToken] = None) -> Workspace:
        """Return one workspace by listing all of them and scanning for ``workspace_id``.

        Raises:
            NotFoundError: The list is empty or contains no matching id
        """
        workspaces = self.list_workspaces(cancel_token=cancel_token)

        if not workspaces.workspaces:
            raise NotFoundError("workspaces not found on remote server", context={"workspace_id": workspace_id})

        workspace = workspaces.find_by_id(workspace_id)
        if workspace is None:
            raise NotFoundError("workspace not found", context={"workspace_id": workspace_id})

        return workspace

    def close(self) -> None:
        self._transport.close()
