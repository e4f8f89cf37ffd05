"""
Structured error types for modelspine.

Provides a small hierarchy of typed errors carrying category and context
metadata so that schema mistakes surface with enough information to fix them.

The engine itself is total over its declared inputs: raw values never raise,
they coerce to the type's empty value. What remains are configuration errors,
detected once when a schema is built, and the occasional runtime misuse
(reading an undeclared attribute, resolving an identity association on an
instance that has no service).

Manifesto:
    - **Fail at declaration, not at ingestion:** Alias collisions and unknown
      service accessors are rejected by ``SchemaBuilder.build()``
    - **Typed hierarchy:** Callers catch ``SchemaError`` or ``ModelError``,
      never a bare ``Exception``
    - **Rich context:** Errors name the model, attribute and key involved
    - **Collaborator failures are not ours:** Errors raised by a lookup
      collaborator propagate untouched

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        ModelError                            │
        │              (category, context, cause)                      │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ConfigError              UnknownAttributeError              │
        │  (CONFIG)                 (SCHEMA, also AttributeError)      │
        │     │                                                        │
        │  SchemaError ─────┬── AliasCollisionError                    │
        │  (SCHEMA)         ├── DuplicateDeclarationError              │
        │                   └── UnknownAccessorError                   │
        │                                                              │
        │  ServiceUnavailableError (LOOKUP)                            │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = AliasCollisionError("alias 'keys' already maps to 'key'")
    >>> error.with_context(model="server", key="keys").context.key
    'keys'
    >>> error.category
    <ErrorCategory.SCHEMA: 'SCHEMA'>

Tags:
    error-handling, exception-hierarchy, error-context, modelspine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    - **SCHEMA:** A schema declaration or lookup against a schema is wrong
    - **CONFIG:** Settings or wiring (service, collaborators) are wrong
    - **LOOKUP:** Association resolution could not reach a collaborator
    - **INTERNAL / UNKNOWN:** Everything else
    """

    SCHEMA = "SCHEMA"
    CONFIG = "CONFIG"
    LOOKUP = "LOOKUP"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured context attached to a ModelError.

    Attributes:
        model: Name of the schema/model involved
        attribute: Canonical attribute name
        association: Association name
        key: Raw input key or alias
        metadata: Additional key-value pairs
    """

    model: str | None = None
    attribute: str | None = None
    association: str | None = None
    key: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["model", "attribute", "association", "key"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ModelError(Exception):
    """
    Base exception for all modelspine errors.

    Subclasses set ``default_category`` so that callers and log processors can
    route them without inspecting the message.

    Examples:
        >>> error = ModelError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'ModelError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ModelError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SchemaError("duplicate attribute").with_context(
                model="server", attribute="name"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ModelError):
    """Wiring or settings error. Never recoverable by retrying."""

    default_category = ErrorCategory.CONFIG


class SchemaError(ConfigError):
    """A schema declaration is invalid."""

    default_category = ErrorCategory.SCHEMA


class AliasCollisionError(SchemaError):
    """An alias (or name) maps to more than one attribute or association."""

    pass


class DuplicateDeclarationError(SchemaError):
    """An attribute, association or identity was declared twice."""

    pass


class UnknownAccessorError(SchemaError):
    """An association names a collection accessor the service does not have."""

    def __init__(self, accessor: str, service: type, message: str | None = None):
        super().__init__(
            message or f"Service {service.__name__} has no collection accessor '{accessor}'"
        )
        self.accessor = accessor
        self.service = service


class ServiceUnavailableError(ConfigError):
    """An identity association was read on an instance without a service."""

    default_category = ErrorCategory.LOOKUP


# =============================================================================
# RUNTIME MISUSE
# =============================================================================


class UnknownAttributeError(ModelError, AttributeError):
    """
    Read or write of a name the schema does not declare.

    Also an ``AttributeError`` so ``getattr(model, name, default)`` and
    ``hasattr`` keep working on model instances.
    """

    default_category = ErrorCategory.SCHEMA

    def __init__(self, name: str, model: str | None = None):
        owner = f"'{model}'" if model else "model"
        super().__init__(f"{owner} has no attribute or association '{name}'")
        self.name = name
        self.context.attribute = name
        self.context.model = model


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, ModelError):
        return error.category
    if isinstance(error, (KeyError, AttributeError)):
        return ErrorCategory.SCHEMA
    if isinstance(error, LookupError):
        return ErrorCategory.LOOKUP
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ModelError",
    "ConfigError",
    "SchemaError",
    "AliasCollisionError",
    "DuplicateDeclarationError",
    "UnknownAccessorError",
    "ServiceUnavailableError",
    "UnknownAttributeError",
    "categorize_error",
]
