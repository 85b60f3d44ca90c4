from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any, FrozenSet, Iterable, Optional, Type
from uuid import UUID

from models.uber import NULL_VALUE


# -----------------------------------------------------------------------------
# Single value types
# -----------------------------------------------------------------------------
# Atomic types whose string form terminates recursion
SINGLE_VALUE_TYPES: FrozenSet[Type[Any]] = frozenset({
    str,
    int,
    float,
    complex,
    bool,
    Decimal,
    Fraction,
    datetime,
    date,
    time,
    timedelta,
    UUID,
    Enum,
    PurePath,
})


class SingleValueTypes:
    """
    Registry of the types treated as scalar leaves. Subclasses of a
    registered type are scalar too.
    """

    def __init__(self, types: Iterable[Type[Any]] = SINGLE_VALUE_TYPES) -> None:
        self._types = tuple(types)

    def register(self, *value_types: Type[Any]) -> "SingleValueTypes":
        """Return a registry that also treats `value_types` as scalar."""
        return SingleValueTypes(self._types + value_types)

    def __contains__(self, value_type: Type[Any]) -> bool:
        return issubclass(value_type, self._types)

    def to_scalar_value(self, content: Any) -> Optional[Any]:
        """
        Scalar form of `content`, or None when it is a container that must be
        walked. A literal None yields NULL_VALUE so it is still rendered.
        """
        if content is None:
            return NULL_VALUE
        if type(content) in self:
            return to_scalar_string(content)
        return None


DEFAULT_SINGLE_VALUE_TYPES = SingleValueTypes()


def is_single_value_type(value_type: Type[Any]) -> bool:
    return value_type in DEFAULT_SINGLE_VALUE_TYPES


def to_scalar_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def get_content_as_scalar_value(content: Any) -> Optional[Any]:
    return DEFAULT_SINGLE_VALUE_TYPES.to_scalar_value(content)
