"""Tests for tfsync.ops."""

from __future__ import annotations

import logging

import pytest

from tfsync.context import Context
from tfsync.digest import sha256_hex
from tfsync.ops import Absent, Ensure, Present
from tfsync.records import SyncRecord

LOCATION = ("mirror", "state.json")


@pytest.fixture
def planned() -> SyncRecord:
    return SyncRecord(workspace_id="ws-123", bucket="mirror", key="state.json")


@pytest.fixture
def created(planned) -> SyncRecord:
    return planned.model_copy(update={"id": "ws-123/mirror/state.json"})


def _ctx(resource, dry_run: bool = False) -> Context:
    return Context(resource, dry_run=dry_run)


class TestPresent:
    def test_creates_new_record(self, s3_resource, object_store, planned):
        result = Present(planned)(_ctx(s3_resource))
        assert result.value.id == "ws-123/mirror/state.json"
        assert len(object_store.puts) == 1

    def test_skips_existing_record(self, s3_resource, object_store, created):
        result = Present(created)(_ctx(s3_resource))
        assert result.value is created
        assert object_store.calls == 0

    def test_dry_run_skips_create(self, s3_resource, object_store, state_source, planned):
        Present(planned)(_ctx(s3_resource, dry_run=True))
        assert object_store.calls == 0
        assert state_source.calls == []


class TestEnsure:
    def test_creates_new_record(self, s3_resource, object_store, planned):
        Ensure(planned)(_ctx(s3_resource))
        assert len(object_store.puts) == 1

    def test_updates_on_drift(self, s3_resource, object_store, created, state_contents):
        object_store.objects[LOCATION] = b"stale"
        result = Ensure(created)(_ctx(s3_resource))
        assert result.ok
        assert len(object_store.puts) == 1
        assert object_store.objects[LOCATION] == state_contents
        assert result.value.bucket_contents_sha256 == sha256_hex(state_contents)

    def test_skips_when_in_sync(self, s3_resource, object_store, created, state_contents):
        object_store.objects[LOCATION] = state_contents
        result = Ensure(created)(_ctx(s3_resource))
        assert result.value.drifted is False
        assert object_store.puts == []

    def test_skips_ignored(self, s3_resource, object_store, created):
        record = created.model_copy(update={"workspace_id": "ws-empty", "ignore_empty": True})
        result = Ensure(record)(_ctx(s3_resource))
        assert result.value.ignored is True
        assert object_store.calls == 0

    def test_returns_read_errors(self, s3_resource, object_store, created):
        result = Ensure(created)(_ctx(s3_resource))
        assert result.ok is False
        assert object_store.puts == []

    def test_dry_run_skips_update(self, s3_resource, object_store, created):
        object_store.objects[LOCATION] = b"stale"
        result = Ensure(created)(_ctx(s3_resource, dry_run=True))
        assert result.value.drifted is True
        assert object_store.puts == []


class TestAbsent:
    def test_deletes_existing_record(self, s3_resource, object_store, created):
        object_store.objects[LOCATION] = b"{}"
        Absent(created)(_ctx(s3_resource))
        assert object_store.deletes == [LOCATION]
        assert LOCATION not in object_store.objects

    def test_skips_new_record(self, s3_resource, object_store, planned):
        result = Absent(planned)(_ctx(s3_resource))
        assert result.value is None
        assert object_store.calls == 0

    def test_dry_run_skips_delete(self, s3_resource, object_store, created):
        Absent(created)(_ctx(s3_resource, dry_run=True))
        assert object_store.deletes == []

    def test_soft_delete_warns(self, s3_resource, object_store, created):
        record = created.model_copy(update={"soft_delete": True})
        result = Absent(record)(_ctx(s3_resource))
        assert object_store.deletes == []
        assert len(result.diagnostics.warnings) == 1


class TestSyncOpLogging:
    def test_present_logs_skip(self, caplog, s3_resource, created):
        with caplog.at_level(logging.DEBUG, logger="tfsync.ops"):
            Present(created)(_ctx(s3_resource))
        assert "already exists" in caplog.text

    def test_ensure_logs_skip(self, caplog, s3_resource, object_store, created, state_contents):
        object_store.objects[LOCATION] = state_contents
        with caplog.at_level(logging.DEBUG, logger="tfsync.ops"):
            Ensure(created)(_ctx(s3_resource))
        assert "up to date" in caplog.text

    def test_absent_logs_skip(self, caplog, s3_resource, planned):
        with caplog.at_level(logging.DEBUG, logger="tfsync.ops"):
            Absent(planned)(_ctx(s3_resource))
        assert "not present" in caplog.text

    def test_present_logs_dry_run(self, caplog, s3_resource, planned):
        with caplog.at_level(logging.INFO, logger="tfsync.ops"):
            Present(planned)(_ctx(s3_resource, dry_run=True))
        assert "DRY RUN" in caplog.text

    def test_ensure_logs_dry_run(self, caplog, s3_resource, object_store, created):
        object_store.objects[LOCATION] = b"stale"
        with caplog.at_level(logging.INFO, logger="tfsync.ops"):
            Ensure(created)(_ctx(s3_resource, dry_run=True))
        assert "DRY RUN" in caplog.text

    def test_absent_logs_dry_run(self, caplog, s3_resource, created):
        with caplog.at_level(logging.INFO, logger="tfsync.ops"):
            Absent(created)(_ctx(s3_resource, dry_run=True))
        assert "DRY RUN" in caplog.text
