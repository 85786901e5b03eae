"""Argument guards shared by the storage entries."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Type, TypeVar

from appstorage.engine.errors import StorageArgumentError

E = TypeVar("E", bound=Enum)


def ensure_not_empty(value: Optional[str], parameter: str) -> str:
    """
    Reject None, "" and strings starting with the NUL character.

    Raises StorageArgumentError naming ``parameter``; returns the value
    otherwise.
    """
    if value is None:
        raise StorageArgumentError(f"'{parameter}' cannot be None", parameter=parameter)
    if not isinstance(value, str):
        raise StorageArgumentError(
            f"'{parameter}' must be a string, got {type(value).__name__}",
            parameter=parameter,
        )
    if len(value) == 0 or value[0] == "\0":
        raise StorageArgumentError(
            f"'{parameter}' cannot be an empty string or start with the null character",
            parameter=parameter,
        )
    return value


def coerce_option(enum_cls: Type[E], value: Any, parameter: str) -> E:
    """Accept an enum member or its string value; reject anything else."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise StorageArgumentError(
            f"Unrecognized {enum_cls.__name__} value for '{parameter}': {value!r} "
            f"(allowed: {allowed})",
            parameter=parameter,
        ) from None
