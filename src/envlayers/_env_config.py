"""Typed config groups using Pydantic BaseModel.

Subclass ``EnvConfig`` and declare fields + a ``Meta`` inner class to map
environment variables automatically::

    class AwsConfig(EnvConfig):
        class Meta:
            env_prefix = "AWS"

        enabled: bool = False
        s3_bucket: str = "default-bucket"
        timeout: float | None
        region: ExistingAtom = Atom("us-east-1")
        secret_key: Secret[str]

    cfg = AwsConfig.load(resolve([".env", os.environ]))
    cfg.s3_bucket       # read from AWS_S3_BUCKET
    cfg.timeout         # None when AWS_TIMEOUT is empty or unset
    cfg.secret_key      # Secret instance, repr shows '***'
"""

from __future__ import annotations

import types
from typing import Annotated, Any, Mapping, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict
from pydantic.fields import FieldInfo

from ._accessor import ConversionSpec, Modifier, TypeTag, get
from ._symbols import REGISTRY_CHECK, Atom, ModuleRef, SymbolRegistry
from ._types import Secret

_TAG_BY_TYPE: dict[Any, TypeTag] = {
    str: TypeTag.STRING,
    bool: TypeTag.BOOLEAN,
    int: TypeTag.INTEGER,
    float: TypeTag.FLOAT,
    Atom: TypeTag.ATOM,
    ModuleRef: TypeTag.MODULE,
    list[str]: TypeTag.CHARLIST,
}


def _unwrap(annotation: Any) -> tuple[Any, bool, list[Any]]:
    """Strip ``Optional[...]``, ``Annotated[...]`` and ``Secret[...]`` from *annotation*.

    Returns the inner type, whether ``None`` is allowed, and any
    ``Annotated`` metadata found along the way.
    """
    nullable = False
    metadata: list[Any] = []
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        nullable = len(args) < len(get_args(annotation))
        annotation = args[0] if len(args) == 1 else annotation
    if get_origin(annotation) is Annotated:
        annotation, *extra = get_args(annotation)
        metadata.extend(extra)
    if get_origin(annotation) is Secret:
        args = get_args(annotation)
        annotation = args[0] if args else str
    return annotation, nullable, metadata


def _spec_for(field: FieldInfo) -> tuple[ConversionSpec | None, bool]:
    """Map a field to a conversion spec and its nullability.

    The spec is ``None`` when Pydantic should cast the raw string itself.
    """
    inner, nullable, metadata = _unwrap(field.annotation)
    metadata.extend(field.metadata)

    if inner is Atom and REGISTRY_CHECK in metadata:
        tag: TypeTag | None = TypeTag.EXISTING_ATOM
    else:
        tag = _TAG_BY_TYPE.get(inner)

    if tag is None:
        return None, nullable
    return ConversionSpec(tag, Modifier.NULLABLE if nullable else Modifier.DEFAULT), nullable


class EnvConfig(BaseModel):
    """Base class for declarative, typed groups of environment variables."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    class Meta:
        env_prefix: str = ""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        env_prefix = getattr(cls.Meta, "env_prefix", "")
        return f"{env_prefix}_{field_name}".upper() if env_prefix else field_name.upper()

    @classmethod
    def load(
        cls,
        variables: Mapping[str, str],
        *,
        registry: SymbolRegistry | None = None,
    ) -> "EnvConfig":
        """Read every field from *variables* and return a validated instance.

        Resolution per field:
        1. Empty or missing variable on a required ``Optional[...]`` field:
           ``None``
        2. Any other empty or missing variable: omitted, so Pydantic uses the
           field default or raises ``ValidationError`` for required fields
        3. Annotation with a known type tag: coerced with ``get()``, raising
           ``ConversionError`` on invalid text. ``ExistingAtom`` fields are
           checked against *registry*
        4. Anything else: the raw string is handed to Pydantic
        """
        raw_data: dict[str, Any] = {}

        for field_name, field in cls.model_fields.items():
            key = cls.env_key(field_name)
            raw = variables.get(key, "")
            spec, nullable = _spec_for(field)

            if raw == "":
                if nullable and field.is_required():
                    raw_data[field_name] = None
                continue

            if spec is None:
                raw_data[field_name] = raw
            else:
                raw_data[field_name] = get(variables, key, spec, registry=registry)

        return cls.model_validate(raw_data)
