"""Sync operations — drive resource lifecycle calls from a desired record."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .context import Context
from .diagnostics import Result
from .records import SyncRecord, build_id

logger = logging.getLogger(__name__)


class SyncOp(ABC):
    """Wraps a SyncRecord with conditional lifecycle logic."""

    def __init__(self, record: SyncRecord) -> None:
        self.record = record

    @property
    def name(self) -> str:
        return self.record.id or build_id(self.record.workspace_id, self.record.bucket, self.record.key)

    @abstractmethod
    def __call__(self, ctx: Context) -> Result[SyncRecord | None]: ...


class Present(SyncOp):
    """Create only if the record has never been created."""

    def __call__(self, ctx: Context) -> Result[SyncRecord | None]:
        if self.record.id is not None:
            logger.debug("Skipping %s; already exists", self.name)
            return Result(self.record)
        if ctx.dry_run:
            logger.info("[DRY RUN] Would create %s", self.name)
            return Result(self.record)
        logger.info("Creating %s", self.name)
        return ctx.resource.create(self.record)


class Ensure(SyncOp):
    """Create if missing; update when the stored object has drifted."""

    def __call__(self, ctx: Context) -> Result[SyncRecord | None]:
        if self.record.id is None:
            return Present(self.record)(ctx)

        current = ctx.resource.read(self.record)
        if not current.ok:
            return current
        if not current.value.drifted:
            logger.debug("Skipping %s; up to date", self.name)
            return current
        if ctx.dry_run:
            logger.info("[DRY RUN] Would update %s", self.name)
            return current

        logger.info("Updating %s", self.name)
        updated = ctx.resource.update(current.value)
        current.diagnostics.extend(updated.diagnostics)
        return Result(updated.value, current.diagnostics)


class Absent(SyncOp):
    """Delete if the record was created."""

    def __call__(self, ctx: Context) -> Result[SyncRecord | None]:
        if self.record.id is None:
            logger.debug("Skipping removal of %s; not present", self.name)
            return Result(None)
        if ctx.dry_run:
            logger.info("[DRY RUN] Would delete %s", self.name)
            return Result(self.record)
        logger.info("Deleting %s", self.name)
        return ctx.resource.delete(self.record)
