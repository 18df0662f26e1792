"""HCL configuration — load provider and resource blocks into typed records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any, TypeVar, overload

import hcl2
import jinja2
from lark.exceptions import LarkError
from pydantic import BaseModel, ValidationError

from .provider import PROVIDER_NAME
from .resolve import Resolver
from .resource import _resource_registry
from .settings import ProviderConfig

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# attributes the host computes; never accepted from configuration
_COMPUTED_ATTRS = frozenset({"id", "ignored", "state_contents_sha256", "bucket_contents_sha256"})


def load(
    file: Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load and parse a single HCL file, rendering Jinja2 templates with context."""
    text = file.read_text()
    ctx = context if context is not None else {}
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        text = env.from_string(text).render(ctx)
    except jinja2.TemplateError as exc:
        raise ValueError(f"{file}: {exc}") from exc
    try:
        return hcl2.loads(text)
    except LarkError as exc:
        raise ValueError(f"{file}: {exc}") from exc


def _block_attrs(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize one parsed block body into keyword arguments.

    Nested blocks arrive as single-item lists; parser bookkeeping keys
    (``__is_block__`` and friends) are dropped.
    """
    attrs: dict[str, Any] = {}
    for key, value in data.items():
        if key.startswith("__"):
            continue
        if isinstance(value, list) and len(value) == 1 and isinstance(value[0], dict):
            value = _block_attrs(value[0])
        attrs[key] = value
    return attrs


def _build(model: type[M], attrs: dict[str, Any], where: str) -> M:
    try:
        return model(**attrs)
    except ValidationError as exc:
        raise ValueError(f"{where}: {exc}") from exc


class Configuration(Mapping[str, BaseModel]):
    """Parsed provider settings and resource records, keyed by address.

    Addresses follow Terraform's ``<type>.<name>`` form, e.g.
    ``tfsync_s3_object.main``.
    """

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        self._context = context or {}
        self._provider: ProviderConfig | None = None
        self._records: dict[str, BaseModel] = {}

    @property
    def provider(self) -> ProviderConfig:
        """Return the provider settings, or the defaults if none were loaded."""
        if self._provider is None:
            return ProviderConfig()
        return self._provider

    def load(self, path: str | Path) -> None:
        """Load a single HCL file."""
        path = Path(path)
        logger.debug("Loading configuration from %s", path)
        self.add(load(path, context=self._context), source=str(path))

    def scan(self, path: str | Path, *, recurse: bool = True) -> None:
        """Load every ``.hcl`` file below ``path`` in sorted order."""
        path = Path(path)
        files = sorted(path.rglob("*.hcl") if recurse else path.glob("*.hcl"))
        logger.debug("Found %d configuration file(s) in %s", len(files), path)
        for file in files:
            self.load(file)

    def add(self, data: dict[str, Any], *, source: str = "<data>") -> None:
        """Extract provider and resource blocks from a parsed data dict.

        Raises ValueError for unknown providers or resource types, duplicate
        blocks, computed attributes and invalid values.
        """
        for block in data.get("provider", []):
            for name, body in block.items():
                if name != PROVIDER_NAME:
                    raise ValueError(f"{source}: unknown provider '{name}'")
                if self._provider is not None:
                    raise ValueError(f"{source}: duplicate provider '{name}'")
                attrs = self._resolve(_block_attrs(body), source)
                self._provider = _build(ProviderConfig, attrs, f"{source}: provider '{name}'")
                logger.debug("Found provider '%s'", name)

        for block in data.get("resource", []):
            for type_name, named in block.items():
                if type_name not in _resource_registry:
                    raise ValueError(f"{source}: unknown resource type '{type_name}'")
                record_type = _resource_registry[type_name].record_type
                for name, body in named.items():
                    if name.startswith("__"):
                        continue
                    address = f"{type_name}.{name}"
                    if address in self._records:
                        raise ValueError(f"{source}: duplicate resource '{address}'")
                    attrs = self._resolve(_block_attrs(body), source)
                    computed = sorted(_COMPUTED_ATTRS & attrs.keys())
                    if computed:
                        raise ValueError(f"{source}: '{address}' sets computed attribute(s): {', '.join(computed)}")
                    self._records[address] = _build(record_type, attrs, f"{source}: '{address}'")
                    logger.debug("Found resource '%s'", address)

    def _resolve(self, attrs: dict[str, Any], source: str) -> dict[str, Any]:
        try:
            return Resolver().resolve(attrs)
        except ValueError as exc:
            raise ValueError(f"{source}: {exc}") from exc

    def __getitem__(self, address: str) -> BaseModel:
        return self._records[address]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @overload
    def get(self, address: str) -> BaseModel | None: ...
    @overload
    def get(self, address: str, default: BaseModel) -> BaseModel: ...
    @overload
    def get(self, address: str, default: None) -> BaseModel | None: ...
    def get(self, address: str, default: Any = None) -> BaseModel | None:
        return self._records.get(address, default)

    def filter(self, addresses: Iterable[str]) -> list[BaseModel]:
        """Return records matching the given addresses, preserving input order."""
        return [r for a in addresses if (r := self._records.get(a)) is not None]

    def __repr__(self) -> str:
        has_provider = self._provider is not None
        return f"Configuration(provider={has_provider}, resources={len(self._records)})"
