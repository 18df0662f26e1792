"""Shared fakes for tfsync tests."""

from __future__ import annotations

import pytest

from tfsync.errors import ObjectStoreError, StateNotFoundError
from tfsync.s3_object import S3ObjectResource
from tfsync.state import StateSource
from tfsync.store import ObjectStore, PutObjectOptions


class FakeStateSource(StateSource):
    """In-memory workspace states; unknown workspaces have no state."""

    def __init__(self, states: dict[str, bytes] | None = None, error: Exception | None = None) -> None:
        self.states = states or {}
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    def fetch_current_state(self, workspace_id: str) -> bytes:
        self.calls.append(workspace_id)
        if self.error is not None:
            raise self.error
        if workspace_id not in self.states:
            raise StateNotFoundError(workspace_id)
        return self.states[workspace_id]

    def close(self) -> None:
        self.closed = True


class FakeObjectStore(ObjectStore):
    """In-memory objects keyed by (bucket, key), recording every call."""

    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None) -> None:
        self.objects = objects or {}
        self.error: ObjectStoreError | None = None
        self.gets: list[tuple[str, str]] = []
        self.puts: list[PutObjectOptions] = []
        self.deletes: list[tuple[str, str]] = []

    def get_object(self, bucket: str, key: str) -> bytes:
        self.gets.append((bucket, key))
        if self.error is not None:
            raise self.error
        if (bucket, key) not in self.objects:
            raise ObjectStoreError(f"failed to get object: NoSuchKey {bucket}/{key}")
        return self.objects[(bucket, key)]

    def put_object(self, options: PutObjectOptions) -> None:
        self.puts.append(options)
        if self.error is not None:
            raise self.error
        self.objects[(options.bucket, options.key)] = options.contents

    def delete_object(self, bucket: str, key: str) -> None:
        self.deletes.append((bucket, key))
        if self.error is not None:
            raise self.error
        self.objects.pop((bucket, key), None)

    @property
    def calls(self) -> int:
        return len(self.gets) + len(self.puts) + len(self.deletes)


STATE = b'{"version": 4, "serial": 7, "resources": []}'


@pytest.fixture
def state_source() -> FakeStateSource:
    return FakeStateSource({"ws-123": STATE})


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def s3_resource(state_source, object_store) -> S3ObjectResource:
    return S3ObjectResource(state_source, object_store)


@pytest.fixture
def state_contents() -> bytes:
    return STATE
