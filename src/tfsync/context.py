"""Runtime execution context for sync operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .records import SyncRecord
    from .resource import Resource


class Context:
    """Resource and options passed to each sync operation."""

    def __init__(self, resource: Resource[SyncRecord], *, dry_run: bool = False) -> None:
        self.resource = resource
        self.dry_run = dry_run
