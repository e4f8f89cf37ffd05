"""
Explicit slot states for attribute and association storage.

A slot is either ``Unset`` (never supplied) or ``Value(v)`` (supplied, even
when ``v`` is ``None`` or ``False``). Keeping the state explicit instead of
overloading ``None`` is what lets a model tell "supplied as nil" apart from
"absent", which in turn decides whether a declared default applies.

Examples:
    >>> slot = Value(False)
    >>> slot.is_set()
    True
    >>> UNSET.unwrap_or("fallback")
    'fallback'

    Pattern matching:

    >>> match slot:
    ...     case Value(v):
    ...         print(v)
    ...     case Unset():
    ...         print("unset")
    False

Tags:
    slot, sentinel, tagged-state, modelspine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Unset:
    """Slot that was never supplied."""

    def is_set(self) -> bool:
        return False

    def unwrap_or(self, default: Any) -> Any:
        return default

    def __repr__(self) -> str:
        return "UNSET"


@dataclass(frozen=True, slots=True)
class Value(Generic[T]):
    """Slot holding an explicitly supplied value."""

    value: T

    def is_set(self) -> bool:
        return True

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Value({self.value!r})"


UNSET = Unset()

Slot = Union[Unset, Value[Any]]


__all__ = ["Unset", "Value", "UNSET", "Slot"]
