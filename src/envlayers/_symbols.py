"""Symbolic value types: atoms, module references, and the symbol registry."""

from __future__ import annotations

import importlib
import re
from dataclasses import dataclass
from types import ModuleType
from typing import Annotated, Iterable, Iterator

_MODULE_PATH = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*")


@dataclass(frozen=True)
class Atom:
    """A named symbol. ``Atom("")`` is the empty symbol."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ModuleRef:
    """A dotted reference to an importable module.

    ``ModuleRef("")`` stands for the root namespace and cannot be loaded.
    """

    path: str

    def __post_init__(self) -> None:
        if self.path and not _MODULE_PATH.fullmatch(self.path):
            raise ValueError(f"{self.path!r} is not a valid module path")

    @property
    def is_root(self) -> bool:
        return not self.path

    def load(self) -> ModuleType:
        if self.is_root:
            raise ImportError("The root namespace placeholder is not importable")
        return importlib.import_module(self.path)

    def __str__(self) -> str:
        return self.path


class SymbolRegistry:
    """Set of known symbol names, consulted by the ``existing_atom`` type.

    >>> registry = SymbolRegistry(["info", "debug"])
    >>> "info" in registry
    True
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: set[str] = set(names)

    def register(self, name: str) -> Atom:
        self._names.add(name)
        return Atom(name)

    def __contains__(self, name: object) -> bool:
        if isinstance(name, Atom):
            name = name.name
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)


class _RegistryCheck:
    """``Annotated`` marker: the atom must be present in the symbol registry."""

    def __repr__(self) -> str:
        return "REGISTRY_CHECK"


REGISTRY_CHECK = _RegistryCheck()

# Field annotation for ``EnvConfig`` groups that resolves as ``existing_atom``.
ExistingAtom = Annotated[Atom, REGISTRY_CHECK]
