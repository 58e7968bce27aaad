"""Provision a workspace and populate its content, rolling back on failure.

The server offers no transaction spanning "create" and "push content", so the
provisioner compensates instead::

    ABSENT --create--> CREATED --push--> CONTENT_PUSHED
                          |
                          +--push fails--> ROLLING_BACK --delete ok----> ABSENT
                                                       --delete fails--> ROLLBACK_FAILED

The state only lives for the duration of one :meth:`WorkspaceProvisioner.provision`
call. Creation is serialized process-wide through ``_CREATE_LOCK`` because the
server's behaviour under concurrent creation is unspecified; reads, pushes and
deletes are not serialized.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TypeVar, Union

from ..cancellation import CancelToken
from ..config import ConfigurationError
from ..exceptions import (
    ContentPushFailedError,
    RollbackFailedError,
    StructurizrClientError,
    WorkspaceIdError,
)
from ..models import GenericResponse, Workspace
from .protocols import ContentPusher, WorkspacesAPI

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Held only while a create request is in flight.
_CREATE_LOCK = threading.Lock()


class ProvisioningState(Enum):
    """Logical state of a workspace during one provisioning call."""

    ABSENT = "absent"
    CREATED = "created"
    CONTENT_PUSHED = "content_pushed"
    ROLLING_BACK = "rolling_back"
    ROLLBACK_FAILED = "rollback_failed"


@dataclass(frozen=True)
class ProvisioningResult:
    """Outcome of a successful provisioning call."""

    workspace: Workspace
    state: ProvisioningState


def parse_workspace_id(value: Union[str, int]) -> int:
    """Parse a workspace id from user input or a ``Location`` header.

    Accepts a bare id (``"42"``) or a URL/path ending in the id
    (``"https://host/api/workspace/42"``).

    Raises:
        WorkspaceIdError: If no positive integer id can be found
    """
    if isinstance(value, int) and not isinstance(value, bool):
        workspace_id = value
    else:
        text = str(value).strip().rstrip("/")
        candidate = text.rsplit("/", 1)[-1]
        try:
            workspace_id = int(candidate)
        except ValueError as exc:
            raise WorkspaceIdError(
                f"Failed to parse Workspace (id: {value}) with error: {exc}", context={"value": str(value)}
            ) from exc

    if workspace_id <= 0:
        raise WorkspaceIdError(f"Workspace id must be a positive integer, got {workspace_id}", context={"value": str(value)})
    return workspace_id


class WorkspaceProvisioner:
    """Create, populate, refresh and remove workspaces.

    Args:
        api: Workspace CRUD client authenticated with admin credentials
        pusher: Content pusher; required only when a content source is supplied
    """

    def __init__(self, api: WorkspacesAPI, pusher: Optional[ContentPusher] = None):
        self._api = api
        self._pusher = pusher

    def provision(
        self,
        source: Optional[str] = None,
        passphrase: str = "",
        cancel_token: Optional[CancelToken] = None,
    ) -> ProvisioningResult:
        """Create a workspace and, when ``source`` is given, push its content.

        After a successful push the workspace is read again so fields changed by
        the push (name, description) are current.

        Raises:
            ContentPushFailedError: The push failed and the workspace was deleted again;
                a pusher error of another type is wrapped and kept as ``__cause__``
            RollbackFailedError: The push failed and the compensating delete failed;
                the workspace may still exist
            StructurizrClientError: Create or refresh failed (original type kept,
                ``context["step"]`` names the step)
        """
        if source and self._pusher is None:
            raise ConfigurationError("A content pusher is required to provision a workspace from a source")

        workspace = self._create(cancel_token)
        state = self._transition(workspace.id, ProvisioningState.ABSENT, ProvisioningState.CREATED)

        if not source:
            return ProvisioningResult(workspace=workspace, state=state)

        try:
            self._push(workspace, source, passphrase, cancel_token)
        except ContentPushFailedError as push_error:
            self._rollback(workspace, push_error)
            raise
        except Exception as exc:
            # Pushers other than the CLI may fail with any error type
            push_error = ContentPushFailedError(
                f"error pushing content into Workspace {workspace.id}: {exc}",
                context={**getattr(exc, "context", {}), "step": "push", "workspace_id": workspace.id},
            )
            push_error.__cause__ = exc
            self._rollback(workspace, push_error)
            raise push_error from exc

        refreshed = self._step(
            "refresh", workspace.id, lambda: self._api.get_workspace(workspace.id, cancel_token=cancel_token)
        )
        state = self._transition(workspace.id, state, ProvisioningState.CONTENT_PUSHED)
        return ProvisioningResult(workspace=refreshed, state=state)

    def update(
        self,
        workspace: Workspace,
        source: str,
        passphrase: str = "",
        cancel_token: Optional[CancelToken] = None,
    ) -> Workspace:
        """Push new content into an existing workspace and return it re-read.

        No rollback is attempted: the workspace existed before the call.
        """
        if self._pusher is None:
            raise ConfigurationError("A content pusher is required to update a workspace")

        self._push(workspace, source, passphrase, cancel_token)
        return self._step(
            "refresh", workspace.id, lambda: self._api.get_workspace(workspace.id, cancel_token=cancel_token)
        )

    def read(self, workspace_id: int, cancel_token: Optional[CancelToken] = None) -> Workspace:
        """Return a workspace by id (lists all workspaces and filters)."""
        return self._step("read", workspace_id, lambda: self._api.get_workspace(workspace_id, cancel_token=cancel_token))

    def delete(self, workspace_id: int, cancel_token: Optional[CancelToken] = None) -> GenericResponse:
        return self._step(
            "delete", workspace_id, lambda: self._api.delete_workspace(workspace_id, cancel_token=cancel_token)
        )

    def _create(self, cancel_token: Optional[CancelToken]) -> Workspace:
        with _CREATE_LOCK:
            created = self._step("create", None, lambda: self._api.create_workspace(cancel_token=cancel_token))

        if isinstance(created, Workspace):
            logger.info("Created Workspace %s", created.id)
            return created

        logger.debug("Workspace created at %s, reading it back", created)
        try:
            workspace_id = parse_workspace_id(created)
        except WorkspaceIdError as exc:
            exc.context.update(step="create")
            raise
        logger.info("Created Workspace %s", workspace_id)
        return self._step("read", workspace_id, lambda: self._api.get_workspace(workspace_id, cancel_token=cancel_token))

    def _push(self, workspace: Workspace, source: str, passphrase: str, cancel_token: Optional[CancelToken]) -> None:
        logger.debug("Pushing %s into Workspace %s", source, workspace.id)
        try:
            self._pusher.push_workspace(
                workspace.id,
                workspace.api_key.get_secret_value(),
                workspace.api_secret.get_secret_value(),
                passphrase,
                source,
                cancel_token=cancel_token,
            )
        except StructurizrClientError as exc:
            exc.context.update(step="push", workspace_id=workspace.id)
            raise

    def _rollback(self, workspace: Workspace, push_error: ContentPushFailedError) -> None:
        """Delete ``workspace`` after a failed push, or raise RollbackFailedError.

        The delete is issued without the caller's cancel token so an expired
        deadline does not skip the compensation.
        """
        state = self._transition(workspace.id, ProvisioningState.CREATED, ProvisioningState.ROLLING_BACK)
        logger.warning("Rolling back Workspace %s after failed content push: %s", workspace.id, push_error.message)

        try:
            self._api.delete_workspace(workspace.id)
        except Exception as rollback_error:
            state = self._transition(workspace.id, state, ProvisioningState.ROLLBACK_FAILED)
            logger.error("Failed to rollback Workspace %s creation: %s", workspace.id, rollback_error)
            raise RollbackFailedError(
                workspace.id,
                push_error,
                rollback_error,
                context={"step": "rollback", "workspace_id": workspace.id, "state": state.value},
            ) from push_error

        state = self._transition(workspace.id, state, ProvisioningState.ABSENT)
        push_error.context["state"] = state.value

    @staticmethod
    def _step(step: str, workspace_id: Optional[int], call: Callable[[], T]) -> T:
        try:
            return call()
        except StructurizrClientError as exc:
            exc.context.setdefault("step", step)
            if workspace_id is not None:
                exc.context.setdefault("workspace_id", workspace_id)
            raise

    @staticmethod
    def _transition(workspace_id: Any, current: ProvisioningState, target: ProvisioningState) -> ProvisioningState:
        logger.debug("Workspace %s: %s -> %s", workspace_id, current.value, target.value)
        return target
