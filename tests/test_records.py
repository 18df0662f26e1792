"""Tests for tfsync.records."""

from __future__ import annotations

import pytest

from tfsync.records import SyncRecord, build_id, parse_id


class TestBuildId:
    def test_format(self):
        assert build_id("ws-1", "bucket", "path/to/key") == "ws-1/bucket/path/to/key"

    def test_deterministic(self):
        assert build_id("ws-1", "b", "k") == build_id("ws-1", "b", "k")

    def test_differs_per_component(self):
        ids = {build_id("ws-1", "b", "k"), build_id("ws-2", "b", "k"), build_id("ws-1", "c", "k"), build_id("ws-1", "b", "j")}
        assert len(ids) == 4


class TestParseId:
    def test_splits_components(self):
        assert parse_id("ws-1/bucket/key") == ("ws-1", "bucket", "key")

    def test_key_may_contain_slashes(self):
        assert parse_id("ws-1/bucket/env/prod/terraform.tfstate") == (
            "ws-1",
            "bucket",
            "env/prod/terraform.tfstate",
        )

    @pytest.mark.parametrize("value", ["", "ws-1", "ws-1/bucket", "ws-1//key", "/bucket/key"])
    def test_invalid_raises(self, value):
        with pytest.raises(ValueError, match="invalid identifier"):
            parse_id(value)


class TestSyncRecord:
    def test_defaults(self):
        rec = SyncRecord(workspace_id="ws-1", bucket="b", key="k")
        assert rec.id is None
        assert rec.ignored is False
        assert rec.ignore_empty is False
        assert rec.soft_delete is False
        assert rec.tags == {}

    def test_with_id_recomputes(self):
        rec = SyncRecord(workspace_id="ws-1", bucket="b", key="k").with_id()
        assert rec.id == "ws-1/b/k"
        rec.key = "other"
        assert rec.with_id().id == "ws-1/b/other"

    def test_mark_ignored_clears_digests(self):
        rec = SyncRecord(workspace_id="ws-1", bucket="b", key="k")
        rec.mark_synced("aa", "bb")
        rec.mark_ignored()
        assert rec.ignored is True
        assert rec.state_contents_sha256 is None
        assert rec.bucket_contents_sha256 is None

    def test_ignored_with_digest_rejected(self):
        with pytest.raises(ValueError, match="ignored record"):
            SyncRecord(ignored=True, state_contents_sha256="aa")

    def test_mark_synced_clears_ignored(self):
        rec = SyncRecord().mark_ignored()
        rec.mark_synced("aa", "aa")
        assert rec.ignored is False
        assert rec.state_contents_sha256 == "aa"


class TestDrifted:
    def test_equal_digests(self):
        assert SyncRecord().mark_synced("aa", "aa").drifted is False

    def test_different_digests(self):
        assert SyncRecord().mark_synced("aa", "bb").drifted is True

    def test_ignored_never_drifted(self):
        assert SyncRecord().mark_ignored().drifted is False

    def test_unknown_digests(self):
        assert SyncRecord().drifted is False
