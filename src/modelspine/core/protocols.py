"""
Canonical protocol definitions for modelspine.

The engine never constructs the objects it resolves associations through.
It only relies on their shape:

    protocols.py
    ├── LookupCollection  — ``get(identity)`` returning a model or a not-found marker
    └── ServiceHolder     — anything exposing a ``service`` attribute

A service is simply an object with one attribute (or zero-argument method)
per collection accessor named in the schema; that naming is dynamic, so it is
checked against the service class when the schema is built rather than
expressed here.

Guardrails:
    ❌ DON'T: Catch or translate errors raised by ``LookupCollection.get``
    ✅ DO: Let them propagate; recovery policy belongs to the caller

Tags:
    protocol, lookup, service, modelspine, contracts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LookupCollection(Protocol):
    """Identity lookup collaborator used by identity-style associations."""

    def get(self, identity: Any) -> Any:
        """Return the model for ``identity`` or an opaque not-found marker."""
        ...


@runtime_checkable
class ServiceHolder(Protocol):
    """Owner of a service exposing collection accessors."""

    @property
    def service(self) -> Any: ...


__all__ = ["LookupCollection", "ServiceHolder"]
