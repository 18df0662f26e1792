"""Exception types raised by the state-source and object-store adapters."""

from __future__ import annotations


class TfSyncError(Exception):
    """Base class for all tfsync errors."""


class ConfigurationError(TfSyncError):
    """A required client or provider setting is missing."""


class StateSourceError(TfSyncError):
    """Reading state from Terraform Cloud/Enterprise failed."""


class StateNotFoundError(StateSourceError):
    """The workspace has no current state version."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(f"no current state version for workspace '{workspace_id}'")
        self.workspace_id = workspace_id


class ObjectStoreError(TfSyncError):
    """An object-store call failed."""


class WriteValidationError(ObjectStoreError):
    """A write was rejected before any network call."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__(", ".join(problems))
        self.problems = problems
