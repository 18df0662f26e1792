"""Provider — configure shared clients and hand them to resources."""

from __future__ import annotations

import logging

from .diagnostics import Diagnostics, Result
from .errors import ObjectStoreError, TfSyncError
from .resource import Resource, _resource_registry
from .settings import ProviderConfig
from .state import StateSource, TfeStateSource
from .store import ObjectStore, S3ObjectStore

logger = logging.getLogger(__name__)

PROVIDER_NAME = "tfsync"


class Provider:
    """Owns the clients shared by every resource of one configuration.

    Clients may be injected directly; anything not injected is built from
    the provider settings by :meth:`configure`.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        *,
        state_source: StateSource | None = None,
        object_store: ObjectStore | None = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.state_source = state_source
        self.object_store = object_store

    @property
    def resources(self) -> list[str]:
        """Return the registered resource type names."""
        return sorted(_resource_registry)

    def configure(self) -> Result[None]:
        """Create the TFE and S3 clients that are not already set."""
        logger.info("Configuring %s provider", PROVIDER_NAME)
        diags = Diagnostics()

        if self.state_source is None:
            try:
                self.state_source = TfeStateSource.from_config(self.config)
            except TfSyncError as exc:
                diags.add_error("tfe client", f"failed to create tfe client: {exc}")
                return Result(None, diags)

        if self.object_store is None:
            try:
                self.object_store = S3ObjectStore.from_config(self.config)
            except ObjectStoreError as exc:
                diags.add_error("aws client", f"failed to load AWS configuration: {exc}")
                return Result(None, diags)

        logger.info("Configured %s provider", PROVIDER_NAME)
        return Result(None, diags)

    def new_resource(self, type_name: str) -> Resource:
        """Return a resource of ``type_name`` wired with the shared clients."""
        if type_name not in _resource_registry:
            raise ValueError(f"Unknown resource type: '{type_name}'")
        resource_cls = _resource_registry[type_name]
        logger.debug("Creating resource '%s' -> %s", type_name, resource_cls.__name__)
        return resource_cls(
            self.state_source,
            self.object_store,
            soft_delete=self.config.soft_delete,
        )

    def close(self) -> None:
        if self.state_source is not None:
            self.state_source.close()

    def __enter__(self) -> Provider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
