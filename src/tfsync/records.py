"""SyncRecord — the record exchanged with the host on every lifecycle call."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


def build_id(workspace_id: str, bucket: str, key: str) -> str:
    """Return the composite identifier for a workspace/bucket/key triple."""
    return f"{workspace_id}/{bucket}/{key}"


def parse_id(record_id: str) -> tuple[str, str, str]:
    """Split an identifier produced by :func:`build_id`.

    The workspace id and bucket never contain ``/``, so everything after the
    second separator is the object key.
    """
    parts = record_id.split("/", 2)
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"invalid identifier '{record_id}'; expected workspace_id/bucket/key")
    return parts[0], parts[1], parts[2]


class SyncRecord(BaseModel):
    """Desired and observed state of one workspace-to-object mirror."""

    id: str | None = None
    workspace_id: str = ""
    bucket: str = ""
    key: str = ""
    kms_key_id: str | None = None
    ignore_empty: bool = False
    ignored: bool = False
    soft_delete: bool = False
    state_contents_sha256: str | None = None
    bucket_contents_sha256: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_ignored_digests(self) -> SyncRecord:
        if self.ignored and (self.state_contents_sha256 or self.bucket_contents_sha256):
            raise ValueError("an ignored record cannot carry content digests")
        return self

    def with_id(self) -> SyncRecord:
        """Recompute ``id`` from the workspace id, bucket and key."""
        self.id = build_id(self.workspace_id, self.bucket, self.key)
        return self

    def mark_ignored(self) -> SyncRecord:
        """Flag the record as ignored and clear both digests."""
        self.ignored = True
        self.state_contents_sha256 = None
        self.bucket_contents_sha256 = None
        return self

    def mark_synced(self, state_sha256: str, bucket_sha256: str) -> SyncRecord:
        self.ignored = False
        self.state_contents_sha256 = state_sha256
        self.bucket_contents_sha256 = bucket_sha256
        return self

    @property
    def drifted(self) -> bool:
        """True when both digests are known and differ."""
        if self.ignored or self.state_contents_sha256 is None:
            return False
        return self.state_contents_sha256 != self.bucket_contents_sha256
