"""Resource ABC and resource type registration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .diagnostics import Diagnostics, Result

R = TypeVar("R")

_resource_registry: dict[str, type] = {}


def resource(type_name: str):
    """Register a Resource class under its configuration type name."""

    def decorator(cls):
        cls.type_name = type_name
        _resource_registry[type_name] = cls
        return cls

    return decorator


class Resource(ABC, Generic[R]):
    """Base class for resources driven through the host lifecycle.

    Every operation returns a Result; failures are reported as error
    diagnostics rather than raised.
    """

    type_name: str = ""
    record_type: type = object

    def validate(self) -> Diagnostics:
        """Check that the resource is wired up; defaults to no problems."""
        return Diagnostics()

    @abstractmethod
    def create(self, record: R) -> Result[R | None]:
        """Create the resource described by the planned record."""

    @abstractmethod
    def read(self, record: R) -> Result[R | None]:
        """Refresh the record from the remote systems."""

    @abstractmethod
    def update(self, record: R) -> Result[R | None]:
        """Apply the planned record to an existing resource."""

    @abstractmethod
    def delete(self, record: R) -> Result[None]:
        """Delete the resource."""

    @abstractmethod
    def import_state(self, import_id: str) -> Result[R | None]:
        """Build a record for an existing resource from its identifier."""
