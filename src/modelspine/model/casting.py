"""
Type coercion for raw attribute values.

Remote APIs hand back loosely typed payloads: numbers as strings, booleans as
``"true"``, timestamps in whatever format the upstream service prefers, a bare
scalar where a list was expected. ``cast()`` turns each raw value into the
semantic type its attribute declares, deterministically and without ever
raising.

Manifesto:
    - **Total functions:** Malformed input becomes the type's empty value,
      never an exception
    - **Closed set of types:** ``AttributeType`` is an enum and ``cast()`` is a
      single exhaustive ``match``
    - **Absolute times:** Every concrete time value is timezone-aware; naive
      inputs are read as UTC
    - **time is not timestamp:** ``time`` keeps ``None`` and ``""`` as they
      are, ``timestamp`` always yields a concrete datetime (epoch for empty)

Architecture:
    ::

        ┌────────────┬───────────┬───────────┬──────────────────────────────┐
        │ type       │ None      │ ""        │ other                        │
        ├────────────┼───────────┼───────────┼──────────────────────────────┤
        │ boolean    │ None      │ None      │ "true"/True → True           │
        │            │           │           │ "false"/False → False        │
        │ float      │ None      │ None      │ numeric → float              │
        │ integer    │ None      │ None      │ numeric → truncated int      │
        │ string     │ ""        │ ""        │ canonical str form           │
        │ time       │ None      │ ""        │ → aware datetime             │
        │ timestamp  │ EPOCH     │ EPOCH     │ → aware datetime             │
        │ array      │ []        │ []        │ sequence → list, else [x]    │
        │ identity   │ as is     │ as is     │ as is                        │
        └────────────┴───────────┴───────────┴──────────────────────────────┘

Examples:
    >>> cast(AttributeType.INTEGER, "1.5")
    1
    >>> cast(AttributeType.BOOLEAN, "foo") is None
    True
    >>> cast(AttributeType.ARRAY, 1.5)
    [1.5]
    >>> cast(AttributeType.TIMESTAMP, None) == EPOCH
    True

Guardrails:
    ❌ DON'T: Unify ``time`` and ``timestamp`` empty handling
    ✅ DO: Keep ``time`` nil/empty preserving; callers compare on it

    ❌ DON'T: Treat ``True``/``False`` as the numbers 1 and 0
    ✅ DO: Numeric casts reject bools (``bool`` is an ``int`` subclass)

Tags:
    coercion, casting, types, datetime, modelspine

Doc-Types:
    - API Reference
    - Type Coercion Rules
"""

from __future__ import annotations

import math
import numbers
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, assert_never

from dateutil import parser as date_parser

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_NUMERIC_TYPES = (numbers.Real, Decimal)


class AttributeType(str, Enum):
    """Semantic attribute types understood by ``cast()``."""

    STRING = "string"
    BOOLEAN = "boolean"
    FLOAT = "float"
    INTEGER = "integer"
    TIME = "time"
    TIMESTAMP = "timestamp"
    ARRAY = "array"
    IDENTITY = "identity"


def cast(attribute_type: AttributeType, value: Any) -> Any:
    """Coerce ``value`` to ``attribute_type``. Never raises for any value."""
    match attribute_type:
        case AttributeType.STRING:
            return to_string(value)
        case AttributeType.BOOLEAN:
            return to_boolean(value)
        case AttributeType.FLOAT:
            return to_float(value)
        case AttributeType.INTEGER:
            return to_integer(value)
        case AttributeType.TIME:
            return to_time(value)
        case AttributeType.TIMESTAMP:
            return to_timestamp(value)
        case AttributeType.ARRAY:
            return to_array(value)
        case AttributeType.IDENTITY:
            return value
        case _:
            assert_never(attribute_type)


def empty_value(attribute_type: AttributeType) -> Any:
    """Natural value of an attribute that was never supplied."""
    return cast(attribute_type, None)


# =============================================================================
# SCALARS
# =============================================================================


def to_boolean(value: Any) -> bool | None:
    if value is True or (isinstance(value, str) and value == "true"):
        return True
    if value is False or (isinstance(value, str) and value == "false"):
        return False
    return None


def _to_number(value: Any) -> numbers.Real | None:
    """Numeric view of ``value``, or None when it is not numeric-parseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, _NUMERIC_TYPES):
        return value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    # int() first so large integral strings keep full precision
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def to_float(value: Any) -> float | None:
    number = _to_number(value)
    if number is None:
        return None
    try:
        return float(number)
    except (OverflowError, ValueError):
        return None


def to_integer(value: Any) -> int | None:
    number = _to_number(value)
    if number is None:
        return None
    if isinstance(number, int):
        return number
    try:
        return int(math.trunc(number))
    except (OverflowError, ValueError):
        return None


def to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# =============================================================================
# TIMES
# =============================================================================


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=UTC)
    return value


def _coerce_datetime(value: Any) -> datetime | None:
    """Best-effort conversion of ``value`` to an aware datetime."""
    if isinstance(value, datetime):
        return _aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, bool):
        return None
    if isinstance(value, _NUMERIC_TYPES):
        try:
            return datetime.fromtimestamp(float(value), UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        try:
            return _aware(date_parser.parse(value))
        except (ValueError, OverflowError):
            return None

    # Foreign wire types: pandas/pendulum style, then xmlrpc.client.DateTime style
    to_pydatetime = getattr(value, "to_pydatetime", None)
    if callable(to_pydatetime):
        try:
            converted = to_pydatetime()
        except (TypeError, ValueError, OverflowError):
            return None
        return _aware(converted) if isinstance(converted, datetime) else None
    timetuple = getattr(value, "timetuple", None)
    if callable(timetuple):
        try:
            return datetime(*timetuple()[:6], tzinfo=UTC)
        except (TypeError, ValueError, OverflowError):
            return None
    return None


def to_time(value: Any) -> datetime | str | None:
    if value is None or (isinstance(value, str) and value == ""):
        return value
    return _coerce_datetime(value)


def to_timestamp(value: Any) -> datetime:
    if value is None or (isinstance(value, str) and value == ""):
        return EPOCH
    result = _coerce_datetime(value)
    return result if result is not None else EPOCH


# =============================================================================
# COLLECTIONS
# =============================================================================


def to_array(value: Any) -> list[Any]:
    if value is None or (isinstance(value, str) and value == ""):
        return []
    if isinstance(value, _SEQUENCE_TYPES):
        return list(value)
    return [value]


__all__ = [
    "AttributeType",
    "EPOCH",
    "cast",
    "empty_value",
    "to_array",
    "to_boolean",
    "to_float",
    "to_integer",
    "to_string",
    "to_time",
    "to_timestamp",
]
