"""Raw input sources: protocol plus mapping, environment and YAML adapters.

A source is anything that yields ``(dotted_path, raw_value)`` pairs. Sources
do no validation of their own; unknown paths and bad value types are caught
by the loader so every adapter fails the same way.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterator, Mapping, Protocol, runtime_checkable

import yaml

from ._schema import FIELD_PATHS
from ._types import SecretsError


@runtime_checkable
class SecretsSource(Protocol):
    """Abstraction over where raw secret values come from."""

    name: str

    def items(self) -> Iterator[tuple[str, Any]]:
        ...


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Walk nested dicts, joining keys with dots.

    Flat keys that already contain dots pass through unchanged, so
    ``{"l1": {"l1_rpc_url": u}}`` and ``{"l1.l1_rpc_url": u}`` are equivalent.
    """
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from _flatten(value, path)
        else:
            yield path, value


class MappingSource:
    """Dict-backed source, flat or nested.

    >>> src = MappingSource({"database": {"server_url": "postgres://db"}})
    >>> list(src.items())
    [('database.server_url', 'postgres://db')]
    """

    def __init__(self, data: Mapping[str, Any] | None = None, name: str = "mapping") -> None:
        self._data: dict[str, Any] = dict(data or {})
        self.name = name

    def items(self) -> Iterator[tuple[str, Any]]:
        return _flatten(self._data)

    # -- Mutation helpers for test setup ------------------------------------

    def set(self, path: str, value: Any) -> None:
        self._data[path] = value


class EnvSource:
    """Reads ``{PREFIX_}GROUP_FIELD`` environment variables.

    ``database.server_url`` maps to ``DATABASE_SERVER_URL`` and
    ``da.avail.seed_phrase`` to ``DA_AVAIL_SEED_PHRASE``. Only known paths are
    looked up, so stray variables in the environment are ignored.
    """

    def __init__(
        self,
        prefix: str = "",
        environ: Mapping[str, str] | None = None,
        name: str = "env",
    ) -> None:
        self.prefix = prefix
        self._environ = os.environ if environ is None else environ
        self.name = name

    def env_key(self, path: str) -> str:
        key = path.replace(".", "_").upper()
        return f"{self.prefix}_{key}".upper() if self.prefix else key

    def items(self) -> Iterator[tuple[str, Any]]:
        for path in FIELD_PATHS:
            value = self._environ.get(self.env_key(path))
            if value is not None:
                yield path, value


class YamlFileSource:
    """Reads a nested YAML secrets document, e.g.::

        l1:
          l1_rpc_url: https://rpc.example.com
        da:
          celestia:
            private_key: "0x..."
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.name = str(self.path)

    def items(self) -> Iterator[tuple[str, Any]]:
        with self.path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                # The parser's own message can quote the offending line.
                mark = getattr(e, "problem_mark", None)
                where = f" at line {mark.line + 1}" if mark is not None else ""
                raise SecretsError(f"{self.path}: invalid YAML{where}") from None
        if not isinstance(data, Mapping):
            raise SecretsError(f"{self.path}: top-level YAML node must be a mapping")
        return _flatten(data)
