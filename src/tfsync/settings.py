"""Provider-wide settings shared by every resource."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

DEFAULT_TFE_ADDRESS = "https://app.terraform.io"


class WebIdentityConfig(BaseModel):
    """Assume-role-with-web-identity settings for the S3 client."""

    model_config = {"extra": "forbid"}

    role_arn: str
    web_identity_token_file: str


class ProviderConfig(BaseModel):
    """Settings established once when the provider is configured."""

    model_config = {"extra": "forbid"}

    region: str | None = None
    assume_role_with_web_identity: WebIdentityConfig | None = None
    soft_delete: bool = False
    tfe_address: str = Field(
        default_factory=lambda: os.environ.get("TFE_ADDRESS", DEFAULT_TFE_ADDRESS)
    )
    tfe_token: str | None = Field(default_factory=lambda: os.environ.get("TFE_TOKEN"))
