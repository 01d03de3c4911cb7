"""``resolve()``: fold an ordered list of sources into one read-only mapping.

Precedence is positional: every source overrides the keys of the sources
before it. File sources see the variables resolved so far (and only those)
when interpolating ``$NAME`` / ``${NAME}``::

    env = resolve([".env", ".env.local", os.environ])
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from ._sources import FileSource, RawSource, as_source

logger = logging.getLogger(__name__)


def _skippable(source: object, skip_missing: bool) -> bool:
    """Return ``True`` if *source* is a missing file the caller allowed to be absent."""
    if not isinstance(source, FileSource):
        return False
    return (source.optional or skip_missing) and not source.exists()


def resolve(sources: Iterable[RawSource], *, skip_missing: bool = False) -> Mapping[str, str]:
    """Resolve *sources* left to right into a read-only ``{name: value}`` mapping.

    Parameters
    ----------
    sources:
        Paths to ``.env`` files, ready-made mappings (``os.environ``), or
        ``Source`` objects. Later entries win.
    skip_missing:
        Skip file sources that do not exist instead of raising
        ``SourceUnavailableError``. Individual ``FileSource(optional=True)``
        entries are skipped regardless.

    Raises ``ParseError`` or ``SourceUnavailableError`` without returning a
    partial mapping.
    """
    resolved: dict[str, str] = {}

    for raw in sources:
        source = as_source(raw)

        if _skippable(source, skip_missing):
            logger.warning("Skipping missing env source %s", source.name)
            continue

        variables = source.read(MappingProxyType(resolved))
        resolved.update(variables)
        logger.debug("Loaded %d variable(s) from %s", len(variables), source.name)

    return MappingProxyType(resolved)
