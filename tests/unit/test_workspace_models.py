"""Tests for the workspace wire models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from structurizr_client.models import GenericResponse, Workspace, Workspaces


def test_workspace_from_wire_json():
    workspace = Workspace.model_validate_json(
        '{"id": 5, "name": "Bank", "description": null, "apiKey": "k", "apiSecret": "s",'
        ' "publicUrl": "https://p", "privateUrl": "https://q", "shareableUrl": "https://r", "extra": 1}'
    )

    assert workspace.id == 5
    assert workspace.description == ""
    assert workspace.api_secret.get_secret_value() == "s"
    assert workspace.public_url == "https://p"
    assert workspace.shareable_url == "https://r"


def test_secrets_hidden_from_repr():
    workspace = Workspace(id=1, api_key="the-key", api_secret="the-secret")

    assert "the-secret" not in repr(workspace)
    assert "the-key" not in repr(workspace)


def test_workspace_is_immutable():
    workspace = Workspace(id=1)

    with pytest.raises(ValidationError):
        workspace.id = 2


def test_find_by_id():
    workspaces = Workspaces(workspaces=[Workspace(id=1), Workspace(id=2, name="two")])

    assert workspaces.find_by_id(2).name == "two"
    assert workspaces.find_by_id(3) is None
    assert len(workspaces) == 2


def test_generic_response_defaults():
    response = GenericResponse.model_validate_json('{"success": true, "message": null, "revision": 4}')

    assert response.success is True
    assert response.message == ""
    assert response.revision == 4
    assert GenericResponse.model_validate_json("{}").success is False
