"""Layered ``.env`` resolution with typed, fail-fast accessors.

Parses ``.env`` files, merges them with other mappings (later sources win),
and coerces the resulting strings into native types on lookup.
"""

from ._version import __version__
from ._accessor import ConversionSpec, Env, Modifier, TypeTag, get
from ._casters import Choices, Csv
from ._env_config import EnvConfig
from ._parser import dumps, parse
from ._resolver import resolve
from ._sources import FileSource, MappingSource, Source, process_environment
from ._symbols import Atom, ExistingAtom, ModuleRef, SymbolRegistry
from ._types import ConversionError, EnvError, ParseError, Secret, SourceUnavailableError

__all__ = [
    "__version__",
    # Core
    "parse",
    "dumps",
    "resolve",
    "get",
    "Env",
    "ConversionSpec",
    "TypeTag",
    "Modifier",
    # Sources
    "Source",
    "FileSource",
    "MappingSource",
    "process_environment",
    # Symbols
    "Atom",
    "ExistingAtom",
    "ModuleRef",
    "SymbolRegistry",
    # Errors
    "EnvError",
    "ParseError",
    "SourceUnavailableError",
    "ConversionError",
    # Typed groups
    "EnvConfig",
    "Secret",
    # Helpers
    "Csv",
    "Choices",
]
