"""Source protocol and the two built-in source kinds."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Protocol, Union, runtime_checkable

from ._parser import parse
from ._types import SourceUnavailableError


@runtime_checkable
class Source(Protocol):
    """Anything the resolver can fold into its accumulator.

    ``read`` receives the variables resolved by strictly earlier sources and
    returns the variables this source defines.
    """

    name: str

    def read(self, known: Mapping[str, str]) -> Mapping[str, str]:
        ...


@dataclass(frozen=True)
class FileSource:
    """A ``.env``-syntax file.

    ``optional`` sources that do not exist are skipped by the resolver;
    ``strict`` makes malformed lines a ``ParseError``.
    """

    path: Path
    optional: bool = False
    strict: bool = False
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    @property
    def name(self) -> str:
        return str(self.path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        try:
            with open(self.path, encoding=self.encoding) as handle:
                return handle.read()
        except FileNotFoundError as exc:
            raise SourceUnavailableError(self.name, "file does not exist") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(self.name, str(exc)) from exc

    def read(self, known: Mapping[str, str]) -> Mapping[str, str]:
        return parse(self.read_text(), known, strict=self.strict, source=self.name)


@dataclass(frozen=True)
class MappingSource:
    """A ready-made ``{name: value}`` mapping, e.g. the process environment.

    The mapping is copied on construction so later changes to the original
    do not leak into resolution.
    """

    variables: Mapping[str, str]
    name: str = "<mapping>"

    def __post_init__(self) -> None:
        for key, value in self.variables.items():
            if not isinstance(value, str):
                raise TypeError(
                    f"{self.name}: value for {key!r} must be str, got {type(value).__name__}"
                )
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    def read(self, known: Mapping[str, str]) -> Mapping[str, str]:
        return self.variables


RawSource = Union[str, "os.PathLike[str]", Mapping[str, str], Source]


def process_environment() -> MappingSource:
    """Snapshot ``os.environ`` as an explicit source."""
    return MappingSource(dict(os.environ), name="<os.environ>")


def as_source(raw: RawSource) -> Source:
    """Normalize a path, mapping, or source object into a ``Source``."""
    if isinstance(raw, (FileSource, MappingSource)):
        return raw
    if isinstance(raw, (str, os.PathLike)):
        return FileSource(Path(raw))
    if raw is os.environ:
        return process_environment()
    if isinstance(raw, Mapping):
        return MappingSource(raw)
    if isinstance(raw, Source):
        return raw
    raise TypeError(f"Unsupported env source: {raw!r}")
