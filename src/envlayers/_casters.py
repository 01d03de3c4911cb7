"""Cast helpers for environment values.

The built-in casters turn a non-empty raw string into one target type and
raise ``ValueError`` when they cannot. ``Csv`` and ``Choices`` are
ready-made custom conversion functions that raise ``ConversionError``.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Union

from ._symbols import Atom, ModuleRef
from ._types import ConversionError

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


# ---------------------------------------------------------------------------
# Built-in casters
# ---------------------------------------------------------------------------


def _cast_bool(value: str) -> bool:
    """Cast ``"true"`` / ``"false"`` (any case) to ``bool``.

    Raises ``ValueError`` for anything else.
    """
    lower = value.lower()
    if lower == "true":
        return True
    if lower == "false":
        return False
    raise ValueError(f"Cannot cast {value!r} to boolean, expected 'true' or 'false'")


def _cast_int(value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"Cannot cast {value!r} to integer")
    return int(value)


def _cast_float(value: str) -> float:
    if not _FLOAT.fullmatch(value):
        raise ValueError(f"Cannot cast {value!r} to float")
    result = float(value)
    if math.isinf(result):
        raise ValueError(f"Cannot cast {value!r} to float, value is out of range")
    return result


def _cast_module(value: str) -> ModuleRef:
    return ModuleRef(value)


def _cast_charlist(value: str) -> list[str]:
    return list(value)


# Keyed by type tag value; ``existing_atom`` needs a registry and is handled
# by the accessor.
BUILTIN_CASTERS: dict[str, Callable[[str], Any]] = {
    "atom": Atom,
    "boolean": _cast_bool,
    "charlist": _cast_charlist,
    "integer": _cast_int,
    "float": _cast_float,
    "module": _cast_module,
    "string": str,
}

ItemCast = Union[str, Callable[[str], Any]]


def _item_caster(item: ItemCast) -> tuple[str, Callable[[str], Any]]:
    """Return a label and callable for a per-element cast."""
    if isinstance(item, str):
        try:
            return item, BUILTIN_CASTERS[item]
        except KeyError:
            valid = ", ".join(BUILTIN_CASTERS)
            raise ValueError(f"Unknown element type {item!r}. Must be one of: {valid}") from None
    return getattr(item, "__name__", repr(item)), item


# ---------------------------------------------------------------------------
# Csv
# ---------------------------------------------------------------------------


class Csv:
    """Split a delimited variable into a list of typed elements.

    *item* is a built-in type name (``"integer"``, ``"boolean"``, ...) or a
    callable applied to each non-empty element.

    >>> Csv()("a, b, c")
    ['a', 'b', 'c']
    >>> Csv("integer", container=tuple)("1,2,3")
    (1, 2, 3)
    """

    def __init__(
        self,
        item: ItemCast = "string",
        *,
        delimiter: str = ",",
        strip: bool = True,
        container: Callable[[list], Any] = list,
    ) -> None:
        self.label, self._cast = _item_caster(item)
        self.delimiter = delimiter
        self.strip = strip
        self.container = container

    @property
    def type(self) -> str:
        return f"csv[{self.label}]"

    def __call__(self, value: str) -> Any:
        parts = value.split(self.delimiter)
        if self.strip:
            parts = [p.strip() for p in parts]

        elements = []
        for position, part in enumerate(p for p in parts if p):
            try:
                elements.append(self._cast(part))
            except ValueError as exc:
                raise ConversionError(
                    f"element {position} ({part!r}): {exc}", type=self.type
                ) from exc
        return self.container(elements)

    def __repr__(self) -> str:
        return f"Csv({self.label!r}, delimiter={self.delimiter!r})"


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class Choices:
    """Accept only one of a fixed set of values.

    Matching happens after *item* casting; ``ignore_case`` compares
    string values case-insensitively and returns the declared spelling.

    >>> Choices(["debug", "info", "warning"])("info")
    'info'
    >>> Choices([1, 2, 3], item="integer")("2")
    2
    """

    def __init__(
        self,
        choices: Iterable[Any],
        item: ItemCast = "string",
        *,
        ignore_case: bool = False,
    ) -> None:
        self.choices = list(choices)
        self.label, self._cast = _item_caster(item)
        self.ignore_case = ignore_case

    @property
    def type(self) -> str:
        return f"choices[{self.label}]"

    def _fold(self, value: Any) -> Any:
        return value.lower() if self.ignore_case and isinstance(value, str) else value

    def __call__(self, value: str) -> Any:
        try:
            casted = self._cast(value)
        except ValueError as exc:
            raise ConversionError(str(exc), type=self.type) from exc

        for choice in self.choices:
            if self._fold(choice) == self._fold(casted):
                return choice
        raise ConversionError(
            f"{casted!r} is not a valid choice. Must be one of {self.choices}",
            type=self.type,
        )

    def __repr__(self) -> str:
        return f"Choices({self.choices!r})"
