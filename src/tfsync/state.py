"""State-source adapter — read the current state file of a TFE workspace."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx

from .errors import ConfigurationError, StateNotFoundError, StateSourceError

if TYPE_CHECKING:
    from .settings import ProviderConfig

logger = logging.getLogger(__name__)

_API_PATH = "/api/v2/"
_JSONAPI = "application/vnd.api+json"

CONNECT_RETRIES = 3


class StateSource(ABC):
    """Source of versioned workspace state snapshots."""

    @abstractmethod
    def fetch_current_state(self, workspace_id: str) -> bytes:
        """Return the bytes of the workspace's current state version.

        Raises StateNotFoundError when the workspace has no current version
        and StateSourceError for any other failure.
        """

    def close(self) -> None:
        """Release any underlying connections."""


class TfeStateSource(StateSource):
    """State source backed by the Terraform Cloud/Enterprise v2 API."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: ProviderConfig, **kwargs: Any) -> TfeStateSource:
        """Build an authenticated client from the provider settings.

        Extra keyword arguments are passed to ``httpx.Client``. The default
        transport retries failed connections; HTTP error responses, including
        429 rate limits, are not retried and surface as StateSourceError.
        """
        if not config.tfe_token:
            raise ConfigurationError("TFE token is not set; set TFE_TOKEN or tfe_token")
        base_url = config.tfe_address.rstrip("/") + _API_PATH
        logger.debug("Creating TFE client for %s", base_url)
        client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {config.tfe_token}",
                "Accept": _JSONAPI,
                "Content-Type": _JSONAPI,
            },
            timeout=kwargs.pop("timeout", 30.0),
            transport=kwargs.pop("transport", None) or httpx.HTTPTransport(retries=CONNECT_RETRIES),
            follow_redirects=True,
            **kwargs,
        )
        return cls(client)

    def _download_url(self, workspace_id: str) -> str:
        try:
            resp = self._client.get(f"workspaces/{workspace_id}/current-state-version")
        except httpx.HTTPError as exc:
            raise StateSourceError(f"failed to get state version: {exc}") from exc

        if resp.status_code == 404:
            raise StateNotFoundError(workspace_id)

        try:
            resp.raise_for_status()
            url = resp.json()["data"]["attributes"]["hosted-state-download-url"]
        except httpx.HTTPStatusError as exc:
            raise StateSourceError(f"failed to get state version: {exc}") from exc
        except (ValueError, KeyError, TypeError) as exc:
            raise StateSourceError(f"malformed state version response: {exc}") from exc

        if not url:
            raise StateSourceError(f"state version for workspace '{workspace_id}' has no download url")
        return url

    def download(self, url: str) -> bytes:
        """Download the raw state file at ``url``."""
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise StateSourceError(f"failed to download state: {exc}") from exc
        return resp.content

    def fetch_current_state(self, workspace_id: str) -> bytes:
        logger.debug("Reading current state version of '%s'", workspace_id)
        url = self._download_url(workspace_id)
        return self.download(url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TfeStateSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def get_state_file(
    source: StateSource,
    workspace_id: str,
    ignore_empty: bool,
) -> tuple[bytes | None, bool]:
    """Fetch the current state, returning ``(contents, ignored)``.

    A missing state version is reported as ``(None, True)`` when
    ``ignore_empty`` is set; otherwise StateNotFoundError propagates.
    """
    try:
        return source.fetch_current_state(workspace_id), False
    except StateNotFoundError:
        if not ignore_empty:
            raise
        logger.debug("No state for workspace '%s'; ignoring", workspace_id)
        return None, True
