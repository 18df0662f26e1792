"""Resolver — expand ${env.NAME} and ${CWD} in parsed configuration values."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

_REFERENCE = re.compile(r"\$(\$)?\{\s*([^{}]*?)\s*\}")


class Resolver:
    """Expand environment and working-directory references in string values.

    ``${env.NAME}`` becomes the variable's value (empty, with a warning, when
    unset), ``${CWD}`` the working directory, and ``$${...}`` is kept as a
    literal ``${...}``. Any other reference is an error.
    """

    def __init__(self, environ: Mapping[str, str] | None = None, cwd: str | None = None) -> None:
        self._environ = os.environ if environ is None else environ
        self._cwd = cwd

    def lookup(self, ref: str) -> str:
        """Return the value of a single reference such as ``env.HOME``."""
        if ref == "CWD":
            return self._cwd if self._cwd is not None else os.getcwd()

        scope, _, name = ref.partition(".")
        if scope != "env" or not name:
            raise ValueError(f"undefined variable '{ref}'")
        if name not in self._environ:
            logger.warning("Environment variable '%s' is not set", name)
            return ""
        return self._environ[name]

    def resolve_value(self, value: str) -> str:
        if "${" not in value:
            return value

        def _expand(m: re.Match) -> str:  # type: ignore[type-arg]
            if m.group(1):
                return "${" + m.group(2) + "}"
            return self.lookup(m.group(2))

        return _REFERENCE.sub(_expand, value)

    def resolve(self, data: Any) -> Any:
        """Expand references in every string nested in dicts and lists."""
        if isinstance(data, dict):
            return {k: self.resolve(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self.resolve(item) for item in data]
        if isinstance(data, str):
            return self.resolve_value(data)
        return data
