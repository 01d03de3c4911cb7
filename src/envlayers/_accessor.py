"""Core ``get()`` function: typed lookups over a resolved mapping.

A conversion spec is a type tag with an optional modifier suffix:

* ``"integer"`` -- empty or missing gives the type's zero value (``0``)
* ``"integer?"`` -- empty or missing gives ``None``
* ``"integer!"`` -- empty or missing raises ``ConversionError``

Non-empty values are converted the same way under all three modifiers. A
callable may be passed instead of a tag to run a custom conversion.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Union

from ._casters import BUILTIN_CASTERS
from ._symbols import Atom, ModuleRef, SymbolRegistry
from ._types import ConversionError


class TypeTag(str, Enum):
    ATOM = "atom"
    EXISTING_ATOM = "existing_atom"
    BOOLEAN = "boolean"
    CHARLIST = "charlist"
    INTEGER = "integer"
    FLOAT = "float"
    MODULE = "module"
    STRING = "string"


class Modifier(str, Enum):
    DEFAULT = ""
    NULLABLE = "?"
    STRICT = "!"


# ---------------------------------------------------------------------------
# Zero values and casters
# ---------------------------------------------------------------------------


def _zero(tag: TypeTag) -> Any:
    """Return a fresh zero value for *tag*."""
    if tag in (TypeTag.ATOM, TypeTag.EXISTING_ATOM):
        return Atom("")
    if tag is TypeTag.BOOLEAN:
        return False
    if tag is TypeTag.CHARLIST:
        return []
    if tag is TypeTag.INTEGER:
        return 0
    if tag is TypeTag.FLOAT:
        return 0.0
    if tag is TypeTag.MODULE:
        return ModuleRef("")
    return ""


_CASTERS: dict[TypeTag, Callable[[str], Any]] = {
    tag: BUILTIN_CASTERS[tag.value] for tag in TypeTag if tag is not TypeTag.EXISTING_ATOM
}


# ---------------------------------------------------------------------------
# Conversion spec
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConversionSpec:
    """A type tag plus the modifier deciding what empty input turns into."""

    type: TypeTag
    modifier: Modifier = Modifier.DEFAULT

    def __post_init__(self) -> None:
        # Plain strings are accepted and normalized to the enum members.
        try:
            tag = TypeTag(self.type)
        except ValueError:
            valid = ", ".join(t.value for t in TypeTag)
            raise ValueError(
                f"Unknown conversion type {self.type!r}. Must be one of: {valid}"
            ) from None
        try:
            modifier = Modifier(self.modifier)
        except ValueError:
            raise ValueError(
                f"Unknown modifier {self.modifier!r}. Must be '', '?' or '!'"
            ) from None
        object.__setattr__(self, "type", tag)
        object.__setattr__(self, "modifier", modifier)

    @classmethod
    def parse(cls, text: str) -> "ConversionSpec":
        """Build a spec from ``"integer"``, ``"integer?"`` or ``"integer!"``."""
        modifier = Modifier.DEFAULT
        if text[-1:] in (Modifier.NULLABLE.value, Modifier.STRICT.value):
            modifier = Modifier(text[-1])
            text = text[:-1]
        return cls(text, modifier)

    def __str__(self) -> str:
        return f"{self.type.value}{self.modifier.value}"


SpecLike = Union[str, ConversionSpec, Callable[[str], Any]]


def _resolve_spec(spec: SpecLike) -> ConversionSpec | Callable[[str], Any]:
    """Return the ``ConversionSpec`` or custom callable behind *spec*."""
    if isinstance(spec, ConversionSpec):
        return spec
    if isinstance(spec, str):
        return ConversionSpec.parse(spec)
    if callable(spec):
        return spec
    raise TypeError(f"Expected a type spec string, ConversionSpec or callable, got {spec!r}")


def _describe(function: Callable[..., Any]) -> str:
    name = getattr(function, "__qualname__", None) or repr(function)
    module = getattr(function, "__module__", None)
    return f"{module}.{name}" if module else name


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def _convert_custom(key: str, raw: str, function: Callable[[str], Any]) -> Any:
    try:
        return function(raw)
    except ConversionError as exc:
        raise ConversionError(
            exc.message,
            variable=key,
            type=exc.type or _describe(function),
            reason="custom",
        ) from exc
    except Exception as exc:
        raise ConversionError(
            f"{type(exc).__name__}: {exc}",
            variable=key,
            type=_describe(function),
            reason="custom",
        ) from exc


def _convert_existing_atom(key: str, raw: str, registry: SymbolRegistry | None) -> Atom:
    if registry is None:
        raise ConversionError(
            "no symbol registry was supplied",
            variable=key,
            type=TypeTag.EXISTING_ATOM.value,
            reason="unregistered",
        )
    if raw not in registry:
        raise ConversionError(
            f"{raw!r} is not a registered symbol",
            variable=key,
            type=TypeTag.EXISTING_ATOM.value,
            reason="unregistered",
        )
    return Atom(raw)


def _convert(key: str, raw: str, tag: TypeTag, registry: SymbolRegistry | None) -> Any:
    if tag is TypeTag.EXISTING_ATOM:
        return _convert_existing_atom(key, raw, registry)
    try:
        return _CASTERS[tag](raw)
    except ValueError as exc:
        raise ConversionError(str(exc), variable=key, type=tag.value, reason="invalid") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get(
    variables: Mapping[str, str],
    key: str,
    spec: SpecLike = "string",
    *,
    registry: SymbolRegistry | None = None,
) -> Any:
    """Read *key* from *variables* and coerce it according to *spec*.

    Parameters
    ----------
    variables:
        A resolved mapping, usually the result of ``resolve()``.
    key:
        Variable name. A missing key is treated exactly like an empty value.
    spec:
        ``"<type>"``, ``"<type>?"``, ``"<type>!"``, a ``ConversionSpec``, or a
        custom ``str -> value`` callable. Custom callables receive the raw
        string (``""`` when missing) and any exception they raise is
        re-raised as ``ConversionError`` naming *key*.
    registry:
        Known symbols for the ``existing_atom`` type.
    """
    raw = variables.get(key, "")
    resolved = _resolve_spec(spec)

    if not isinstance(resolved, ConversionSpec):
        return _convert_custom(key, raw, resolved)

    if raw == "":
        if resolved.modifier is Modifier.NULLABLE:
            return None
        if resolved.modifier is Modifier.STRICT:
            raise ConversionError(
                "value is empty or not set",
                variable=key,
                type=resolved.type.value,
                reason="empty",
            )
        return _zero(resolved.type)

    return _convert(key, raw, resolved.type, registry)


class Env:
    """A resolved mapping bundled with its symbol registry.

    >>> env = Env({"PORT": "8000"})
    >>> env("PORT", "integer!")
    8000
    """

    def __init__(
        self,
        variables: Mapping[str, str],
        registry: SymbolRegistry | None = None,
    ) -> None:
        self.variables = variables
        self.registry = registry

    def __call__(self, key: str, spec: SpecLike = "string") -> Any:
        return get(self.variables, key, spec, registry=self.registry)

    def __contains__(self, key: object) -> bool:
        return key in self.variables

    def __repr__(self) -> str:
        return f"Env({len(self.variables)} variables)"
