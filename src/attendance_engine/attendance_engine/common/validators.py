from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import MissingField, ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise MissingField(field_name)
    return str(value).strip()


def parse_choice(enum_cls: Type[E], value, error: Type[ValidationError]) -> E:
    """Coerce a raw value (or an enum member) into ``enum_cls``.

    Unknown values raise ``error`` so each workflow reports its own kind.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except (ValueError, AttributeError):
        raise error(f"Unsupported value: {value!r}")
