"""Pydantic models for workspace API payloads.

Wire names are camelCase (``apiKey``, ``publicUrl``); attributes are
snake_case. Workspace keys and secrets are :class:`~pydantic.SecretStr` so they
never show up in ``repr()`` or log output.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class WireModel(BaseModel):
    """Base model accepting both wire aliases and attribute names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Workspace(WireModel):
    """A workspace as returned by the server.

    The identifier, key and secret are assigned by the server on creation and
    never change afterwards.
    """

    id: int
    name: str = ""
    description: str = ""
    api_key: SecretStr = Field(default=SecretStr(""), alias="apiKey")
    api_secret: SecretStr = Field(default=SecretStr(""), alias="apiSecret")
    public_url: str = Field(default="", alias="publicUrl")
    private_url: str = Field(default="", alias="privateUrl")
    shareable_url: str = Field(default="", alias="shareableUrl")

    @field_validator("name", "description", "public_url", "private_url", "shareable_url", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Workspaces(WireModel):
    """Body of ``GET /api/workspace``."""

    workspaces: List[Workspace] = Field(default_factory=list)

    @field_validator("workspaces", mode="before")
    @classmethod
    def _null_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def find_by_id(self, workspace_id: int) -> Optional[Workspace]:
        """Return the workspace with ``workspace_id`` using a linear scan, or None."""
        for workspace in self.workspaces:
            if workspace.id == workspace_id:
                return workspace
        return None

    def __len__(self) -> int:
        return len(self.workspaces)


class GenericResponse(WireModel):
    """Acknowledgement body of delete and other write operations."""

    success: bool = False
    message: str = ""
    revision: Optional[int] = None

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value: Any) -> Any:
        return "" if value is None else value


class ErrorEnvelope(WireModel):
    """Error body of the shape ``{"success": false, "message": "..."}``."""

    success: bool = False
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value: Any) -> Any:
        return "" if value is None else value
