"""Object tag encoding for S3 ``Tagging`` headers."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, quote_plus


def encode_tags(tags: Mapping[str, str]) -> str:
    """Encode tags as URL-escaped ``key=value`` pairs joined by ``&``."""
    return "&".join(f"{quote_plus(k)}={quote_plus(v)}" for k, v in tags.items())


def decode_tags(tagging: str) -> dict[str, str]:
    """Decode a tagging string produced by :func:`encode_tags`."""
    return dict(parse_qsl(tagging, keep_blank_values=True))
