"""Foundation types for envlayers.

Provides the exception hierarchy and the Secret wrapper type.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EnvError(Exception):
    """Base exception for envlayers errors."""

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "message": str(self)}


class ParseError(EnvError):
    """Raised when a ``.env`` source cannot be tokenized.

    ``line`` is the 1-based line where the offending construct started.
    """

    def __init__(self, message: str, *, source: str | None = None, line: int | None = None) -> None:
        self.source = source
        self.line = line
        self.message = message
        location = source or "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "ParseError",
            "source": self.source,
            "line": self.line,
            "message": self.message,
        }


class SourceUnavailableError(EnvError):
    """Raised when a declared file source cannot be opened or read."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"Cannot read env source '{source}': {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SourceUnavailableError",
            "source": self.source,
            "message": self.message,
        }


class ConversionError(EnvError):
    """Raised when a variable cannot be coerced to the requested type.

    ``reason`` is one of ``"empty"``, ``"invalid"``, ``"unregistered"`` or
    ``"custom"``. Custom conversion functions may raise this without a
    ``variable``; the accessor re-raises it with the name filled in.
    """

    def __init__(
        self,
        message: str,
        *,
        variable: str | None = None,
        type: str | None = None,
        reason: str = "invalid",
    ) -> None:
        self.variable = variable
        self.type = type
        self.reason = reason
        self.message = message
        super().__init__(self._format())

    def _format(self) -> str:
        if self.variable is None:
            return self.message
        return f"Environment variable '{self.variable}' ({self.type}): {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "ConversionError",
            "variable": self.variable,
            "type": self.type,
            "reason": self.reason,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Secret
# ---------------------------------------------------------------------------


class Secret(Generic[T]):
    """Wraps a value so it is redacted in ``repr`` / ``str`` output.

    Access the real value via ``.secret_value``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)

    @property
    def secret_value(self) -> T:
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        return "Secret('***')"

    def __str__(self) -> str:
        return "***"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Secret):
            return bool(self._value == other._value)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        args = get_args(source_type)
        inner_type = args[0] if args else Any
        inner_schema = handler.generate_schema(inner_type)

        def _wrap(value: Any) -> "Secret[Any]":
            return Secret(value)

        def _serialize(value: "Secret[Any]", _info: Any) -> str:
            return "***"

        # Already-wrapped values pass through; anything else is validated as
        # the inner type first so ``Secret[int]`` still rejects "abc".
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(Secret),
                core_schema.no_info_after_validator_function(_wrap, inner_schema),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize,
                info_arg=True,
            ),
        )
