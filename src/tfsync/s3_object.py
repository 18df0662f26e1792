"""S3 object resource — mirror a workspace's current state into an S3 object."""

from __future__ import annotations

import logging

from .diagnostics import Diagnostics, Result
from .digest import sha256_hex
from .errors import ObjectStoreError, StateSourceError
from .records import SyncRecord, parse_id
from .resource import Resource, resource
from .state import StateSource, get_state_file
from .store import ObjectStore, PutObjectOptions

logger = logging.getLogger(__name__)


@resource("tfsync_s3_object")
class S3ObjectResource(Resource[SyncRecord]):
    """Synchronize TFE workspace state into an S3 object.

    Create and update write the current state and record its digest for both
    sides; read digests the state and the stored object independently so
    that drift shows up as differing digests. A workspace without state is
    never written when ``ignore_empty`` is set.
    """

    record_type = SyncRecord

    def __init__(
        self,
        state_source: StateSource | None,
        object_store: ObjectStore | None,
        *,
        soft_delete: bool = False,
    ) -> None:
        self.state_source = state_source
        self.object_store = object_store
        self.soft_delete = soft_delete

    def validate(self) -> Diagnostics:
        diags = Diagnostics()
        if self.object_store is None:
            diags.add_error("provider", "nil s3 client")
        elif self.state_source is None:
            diags.add_error("provider", "nil tfe client")
        return diags

    def _fetch_state(
        self, record: SyncRecord, operation: str, diags: Diagnostics
    ) -> tuple[bytes | None, bool]:
        try:
            return get_state_file(self.state_source, record.workspace_id, record.ignore_empty)
        except StateSourceError as exc:
            diags.add_error("tfe client", f"{operation} {_describe(record)}: {exc}")
            return None, False

    def _write(self, planned: SyncRecord, operation: str) -> Result[SyncRecord | None]:
        diags = self.validate()
        if diags.has_error():
            return Result(None, diags)

        data = planned.model_copy(deep=True)
        state, ignored = self._fetch_state(data, operation, diags)
        if diags.has_error():
            return Result(None, diags)

        data.with_id()
        if ignored:
            logger.info("No state for '%s'; skipping write", data.id)
            return Result(data.mark_ignored(), diags)

        # the written object is the source bytes, so both digests match
        digest = sha256_hex(state)
        data.mark_synced(digest, digest)

        options = PutObjectOptions(
            bucket=data.bucket,
            key=data.key,
            contents=state,
            kms_key_id=data.kms_key_id,
            tags=dict(data.tags),
        )
        logger.info("Writing state of '%s' to s3://%s/%s", data.workspace_id, data.bucket, data.key)
        try:
            self.object_store.put_object(options)
        except ObjectStoreError as exc:
            diags.add_error("s3 client", f"{operation} {_describe(data)}: {exc}")
            return Result(None, diags)

        return Result(data, diags)

    def create(self, record: SyncRecord) -> Result[SyncRecord | None]:
        return self._write(record, "create")

    def read(self, record: SyncRecord) -> Result[SyncRecord | None]:
        diags = self.validate()
        if diags.has_error():
            return Result(None, diags)

        data = record.model_copy(deep=True)
        state, ignored = self._fetch_state(data, "read", diags)
        if diags.has_error():
            return Result(None, diags)

        data.with_id()
        if ignored:
            return Result(data.mark_ignored(), diags)

        try:
            contents = self.object_store.get_object(data.bucket, data.key)
        except ObjectStoreError as exc:
            diags.add_error("s3 client", f"read {_describe(data)}: {exc}")
            return Result(None, diags)

        data.mark_synced(sha256_hex(state), sha256_hex(contents))
        if data.drifted:
            logger.debug("Object s3://%s/%s differs from workspace state", data.bucket, data.key)
        return Result(data, diags)

    def update(self, record: SyncRecord) -> Result[SyncRecord | None]:
        return self._write(record, "update")

    def delete(self, record: SyncRecord) -> Result[None]:
        diags = self.validate()
        if diags.has_error():
            return Result(None, diags)

        if self.soft_delete or record.soft_delete:
            diags.add_warning("using soft delete", f"bucket: {record.bucket}, key: {record.key}")
            return Result(None, diags)

        logger.info("Deleting s3://%s/%s", record.bucket, record.key)
        try:
            self.object_store.delete_object(record.bucket, record.key)
        except ObjectStoreError as exc:
            diags.add_error("s3 client", f"delete {_describe(record)}: {exc}")
        return Result(None, diags)

    def import_state(self, import_id: str) -> Result[SyncRecord | None]:
        diags = self.validate()
        if diags.has_error():
            return Result(None, diags)

        data = SyncRecord(id=import_id)
        try:
            data.workspace_id, data.bucket, data.key = parse_id(import_id)
        except ValueError:
            logger.debug("Import id '%s' is not workspace_id/bucket/key", import_id)
        return Result(data, diags)


def _describe(record: SyncRecord) -> str:
    return f"workspace '{record.workspace_id}' -> s3://{record.bucket}/{record.key}"
