"""Merge an ordered list of raw sources into one ``SecretsBundle``.

Precedence is last-write-wins per leaf field: a later source only replaces
the fields it actually supplies, and a later empty string clears a field.
Data availability fields of different backends are all kept; deciding
whether that is a conflict is left to the validator.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Union

from ._schema import SecretsBundle, field_spec
from ._sources import MappingSource, SecretsSource
from ._types import InvalidValueTypeError, Secret, UnknownPathError

logger = logging.getLogger(__name__)

SourceLike = Union[SecretsSource, Mapping[str, Any]]


def _as_source(source: SourceLike, index: int) -> SecretsSource:
    if isinstance(source, Mapping):
        return MappingSource(source, name=f"source[{index}]")
    return source


def _normalize(path: str, value: Any) -> str | None:
    """Coerce a raw value to a non-empty string or ``None`` (absent)."""
    if value is None:
        return None
    if isinstance(value, Secret):
        value = value.secret_value
    if not isinstance(value, str):
        raise InvalidValueTypeError(path, type(value).__name__)
    return value if value.strip() else None


def merge_raw(sources: Iterable[SourceLike]) -> dict[str, str | None]:
    """Merge sources into ``{path: value_or_None}``.

    Raises ``UnknownPathError`` on the first unrecognised path; nothing is
    returned in that case.
    """
    merged: dict[str, str | None] = {}
    for index, raw in enumerate(sources):
        source = _as_source(raw, index)
        count = 0
        for path, value in source.items():
            try:
                field_spec(path)
            except UnknownPathError:
                raise UnknownPathError(path, source=source.name) from None
            merged[path] = _normalize(path, value)
            count += 1
        logger.debug("Read %d secrets field(s) from source %r", count, source.name)
    return merged


def load_secrets(sources: Iterable[SourceLike]) -> SecretsBundle:
    """Build a ``SecretsBundle`` from *sources*, later sources overriding earlier ones.

    Plain dicts are accepted as sources and may be flat
    (``{"l1.l1_rpc_url": ...}``) or nested (``{"l1": {"l1_rpc_url": ...}}``).
    """
    sources = list(sources)
    merged = merge_raw(sources)

    bundle = SecretsBundle()
    for path, value in merged.items():
        bundle.set(path, value)

    logger.info(
        "Loaded secrets from %d source(s); %d field(s) set",
        len(sources),
        len(bundle.present_paths()),
    )
    return bundle
