"""Shared value types for object-reflector."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final


class Missing:
    """Marker for a mirrored property that has no value yet.

    Reading such a property raises AttributeError (attribute objects)
    or KeyError (Record), the same as reading a name that was never set.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = Missing()


@dataclass(frozen=True, slots=True)
class Accessor:
    """Get/set pair installed on one name of one record.

    get() returns the current value or MISSING.
    set(value) receives every assignment made through the record.
    """

    get: Callable[[], Any]
    set: Callable[[Any], Any]
