"""modelspine core -- cross-cutting primitives shared by the model layer.

Architecture::

    errors.py       Structured error hierarchy (ModelError, SchemaError, ...)
    logging.py      Structured logging (structlog)
    settings.py     ModelSettings (pydantic-settings, MODELSPINE_ prefix)
    protocols.py    LookupCollection / ServiceHolder contracts
"""

from modelspine.core.errors import (
    AliasCollisionError,
    ConfigError,
    DuplicateDeclarationError,
    ErrorCategory,
    ErrorContext,
    ModelError,
    SchemaError,
    ServiceUnavailableError,
    UnknownAccessorError,
    UnknownAttributeError,
    categorize_error,
)
from modelspine.core.logging import configure_logging, get_logger
from modelspine.core.protocols import LookupCollection, ServiceHolder

__all__ = [
    "AliasCollisionError",
    "ConfigError",
    "DuplicateDeclarationError",
    "ErrorCategory",
    "ErrorContext",
    "ModelError",
    "SchemaError",
    "ServiceUnavailableError",
    "UnknownAccessorError",
    "UnknownAttributeError",
    "categorize_error",
    "configure_logging",
    "get_logger",
    "LookupCollection",
    "ServiceHolder",
]
