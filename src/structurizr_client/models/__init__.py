"""Data models for the workspace API."""

from .workspace import ErrorEnvelope, GenericResponse, WireModel, Workspace, Workspaces

__all__ = ["ErrorEnvelope", "GenericResponse", "WireModel", "Workspace", "Workspaces"]
