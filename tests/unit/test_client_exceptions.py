"""Tests for the exception hierarchy and rendered messages."""

from __future__ import annotations

import pytest

from structurizr_client.exceptions import (
    APIError,
    BadRequestError,
    ContentPushFailedError,
    RollbackFailedError,
    ServerUnavailableError,
    StructurizrClientError,
    UnauthorizedError,
)


@pytest.mark.parametrize(
    "cls,kind",
    [
        (BadRequestError, "bad request"),
        (UnauthorizedError, "unauthorized"),
        (ServerUnavailableError, "system unavailable"),
    ],
)
def test_api_error_message_with_summary(cls, kind):
    error = cls(400, "Workspace 3 does not exist")

    assert str(error) == f"{kind} \n\n\terror details: \n\t\tsummary: Workspace 3 does not exist\n"
    assert isinstance(error, APIError)
    assert isinstance(error, StructurizrClientError)


def test_api_error_message_without_summary():
    error = UnauthorizedError(401)

    assert str(error) == "unauthorized \n\n\n\tplease see the log for error details\n"
    assert error.context == {}


def test_context_is_mutable_per_instance():
    first = StructurizrClientError("one")
    second = StructurizrClientError("two")

    first.context["step"] = "create"

    assert second.context == {}


def test_content_push_failure_includes_output():
    error = ContentPushFailedError("error running Structurizr CLI: exit status 1", output="line 1\nline 2", returncode=1)

    assert str(error) == "error running Structurizr CLI: exit status 1\nOutput: line 1\nline 2"
    assert error.output == "line 1\nline 2"


def test_content_push_failure_without_output():
    assert str(ContentPushFailedError("error running Structurizr CLI: deadline exceeded")) == (
        "error running Structurizr CLI: deadline exceeded"
    )


def test_rollback_failure_message():
    push_error = ContentPushFailedError("push failed")
    error = RollbackFailedError(4, push_error, ServerUnavailableError(503))

    lines = str(error).splitlines()
    assert lines[0] == "Failed to update Workspace (id: 4) with error: push failed"
    assert lines[1] == "Failed to rollback Workspace (id: 4) creation with error: system unavailable "
    assert str(error).endswith("Workspace 4 may still exist on the server without content.")
