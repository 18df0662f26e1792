"""Object-store adapter — read, write and delete state objects in S3."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import boto3
import botocore.session
from botocore.config import Config
from botocore.credentials import (
    AssumeRoleWithWebIdentityCredentialFetcher,
    CredentialProvider,
    DeferredRefreshableCredentials,
)
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ObjectStoreError, WriteValidationError
from .tags import encode_tags

if TYPE_CHECKING:
    from .settings import ProviderConfig

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"
_SESSION_NAME = "tfsync"


@dataclass
class PutObjectOptions:
    """Parameters of a single object write."""

    bucket: str
    key: str
    contents: bytes
    kms_key_id: str | None = None
    tags: dict[str, str] = field(default_factory=dict)

    def validate(self) -> list[str]:
        """Return the problems that prevent this write; empty when valid."""
        problems = []
        if not self.bucket:
            problems.append("empty bucket")
        if not self.key:
            problems.append("empty key")
        if not self.contents:
            problems.append("empty contents")
        return problems


class ObjectStore(ABC):
    """A bucket/key addressed object store."""

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """Return the full contents of an object."""

    @abstractmethod
    def put_object(self, options: PutObjectOptions) -> None:
        """Write an object; rejects invalid options before any network call."""

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object unconditionally."""


class S3ObjectStore(ObjectStore):
    """Object store backed by an S3 (or S3-compatible) client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: ProviderConfig) -> S3ObjectStore:
        """Create an S3 client in the configured region.

        When ``assume_role_with_web_identity`` is set, the client uses
        STS credentials for the configured role, renewed before they expire.
        """
        web_identity = config.assume_role_with_web_identity
        if web_identity is None:
            session = boto3.session.Session(region_name=config.region)
        else:
            session = web_identity_session(
                config.region, web_identity.role_arn, web_identity.web_identity_token_file
            )
        try:
            client = session.client(
                "s3",
                config=Config(retries={"max_attempts": 3, "mode": "standard"}),
            )
        except BotoCoreError as exc:
            raise ObjectStoreError(f"failed to create s3 client: {exc}") from exc
        logger.info("Configured S3 client in region '%s'", client.meta.region_name)
        return cls(client)

    @property
    def region(self) -> str | None:
        return self._client.meta.region_name

    def get_object(self, bucket: str, key: str) -> bytes:
        logger.debug("Getting s3://%s/%s", bucket, key)
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"failed to get object: {exc}") from exc

        body = resp["Body"]
        try:
            return body.read()
        except (BotoCoreError, OSError) as exc:
            raise ObjectStoreError(f"failed to read body: {exc}") from exc
        finally:
            body.close()

    def put_object(self, options: PutObjectOptions) -> None:
        problems = options.validate()
        if problems:
            raise WriteValidationError(problems)

        params: dict[str, Any] = {
            "Bucket": options.bucket,
            "Key": options.key,
            "Body": options.contents,
            "ContentLength": len(options.contents),
            "ContentType": CONTENT_TYPE,
            "ChecksumAlgorithm": "SHA256",
        }
        if options.kms_key_id:
            params["ServerSideEncryption"] = "aws:kms"
            params["SSEKMSKeyId"] = options.kms_key_id
        if options.tags:
            params["Tagging"] = encode_tags(options.tags)

        logger.debug("Putting s3://%s/%s (%d bytes)", options.bucket, options.key, len(options.contents))
        try:
            self._client.put_object(**params)
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"failed s3 put object: {exc}") from exc

    def delete_object(self, bucket: str, key: str) -> None:
        logger.debug("Deleting s3://%s/%s", bucket, key)
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(f"failed to delete s3 object: {exc}") from exc



class TokenFileLoader:
    """Read a web identity token file on every call, picking up rotations."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __call__(self) -> str:
        try:
            return self.path.read_text().strip()
        except OSError as exc:
            raise ObjectStoreError(f"failed to read web identity token file: {exc}") from exc


class _WebIdentityProvider(CredentialProvider):
    """Credential provider yielding refreshable assume-role credentials."""

    METHOD = "assume-role-with-web-identity"

    def __init__(self, fetcher: AssumeRoleWithWebIdentityCredentialFetcher) -> None:
        super().__init__()
        self._fetcher = fetcher

    def load(self) -> DeferredRefreshableCredentials:
        return DeferredRefreshableCredentials(
            refresh_using=self._fetcher.fetch_credentials,
            method=self.METHOD,
        )


def web_identity_session(
    region: str | None,
    role_arn: str,
    token_file: str,
) -> boto3.session.Session:
    """Return a session whose credentials come from ``role_arn`` via STS.

    Nothing is fetched here: the token file is read and STS is called on the
    first request, and again whenever the credentials near expiry.
    """
    if not Path(token_file).is_file():
        raise ObjectStoreError(f"web identity token file not found: {token_file}")

    # STS is called unsigned from a separate session, outside the chain below
    sts_session = botocore.session.Session()
    core_session = botocore.session.Session()
    if region:
        sts_session.set_config_variable("region", region)
        core_session.set_config_variable("region", region)

    fetcher = AssumeRoleWithWebIdentityCredentialFetcher(
        client_creator=sts_session.create_client,
        web_identity_token_loader=TokenFileLoader(token_file),
        role_arn=role_arn,
        extra_args={"RoleSessionName": _SESSION_NAME},
    )
    resolver = core_session.get_component("credential_provider")
    resolver.providers.insert(0, _WebIdentityProvider(fetcher))

    logger.debug("Using web identity credentials for role '%s'", role_arn)
    return boto3.session.Session(botocore_session=core_session, region_name=region)
