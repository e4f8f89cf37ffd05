"""
Lazy, memoized association resolution.

An association links one model to another (or to a list of others). The raw
payload carries either the related object itself (``ReferenceStyle.OBJECT``)
or only its identity (``ReferenceStyle.IDENTITY``). Identities are turned into
models on first read through the owning instance's service, and the result is
cached until the next ingestion or direct assignment.

Architecture:
    ::

        merge_attributes({"volumes": ["v-1", "v-2"]})
              │  store_raw()        (no lookup, cache entry dropped)
              ▼
        ┌───────────────────────────────────────────────────────────┐
        │ AssociationResolver (one per model instance)               │
        │   raw:   name → Unset | Value(raw payload)                 │
        │   cache: name → Unset | Value(resolved)                    │
        └───────────────────────────────────────────────────────────┘
              │  get()   cache hit → return cached
              ▼          cache miss → resolve, cache, return
        ┌───────────────┬──────────────────────┬─────────────────────┐
        │               │ OBJECT               │ IDENTITY            │
        ├───────────────┼──────────────────────┼─────────────────────┤
        │ SINGLE        │ raw or None          │ None → None         │
        │               │                      │ id → coll.get(id)   │
        │ MULTIPLE      │ raw list or []       │ [coll.get(id) ...]  │
        └───────────────┴──────────────────────┴─────────────────────┘

    ``coll`` is ``owner.service.<spec.collection>`` (called when it is a
    method). It is looked up once per resolution and only when at least one
    identity is present.

Guardrails:
    ❌ DON'T: Catch errors raised by the collaborator
    ✅ DO: Let lookup failures propagate to the caller

    ❌ DON'T: Resolve identities during ingestion
    ✅ DO: Store raw values; resolve on first read

Tags:
    associations, lazy-loading, memoization, identity-map, modelspine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Any

from modelspine.core.errors import ServiceUnavailableError, UnknownAccessorError
from modelspine.core.logging import get_logger
from modelspine.core.protocols import LookupCollection, ServiceHolder
from modelspine.model.casting import to_array
from modelspine.model.schema import AssociationSpec, Cardinality, ReferenceStyle, Schema
from modelspine.model.slots import UNSET, Slot, Value

logger = get_logger(__name__)


def lookup_collection(owner: ServiceHolder, spec: AssociationSpec) -> LookupCollection:
    """Fetch the collaborator for ``spec`` from ``owner.service``."""
    service = getattr(owner, "service", None)
    if service is None:
        raise ServiceUnavailableError(
            f"Cannot resolve '{spec.name}' without a service"
        ).with_context(association=spec.name)

    try:
        accessor = getattr(service, spec.collection)
    except AttributeError:
        raise UnknownAccessorError(spec.collection, type(service)).with_context(
            association=spec.name
        ) from None

    if isinstance(accessor, LookupCollection):
        return accessor
    return accessor()


class AssociationResolver:
    """Raw slots and resolution cache for every association of one instance."""

    __slots__ = ("_schema", "_raw", "_cache")

    def __init__(self, schema: Schema):
        self._schema = schema
        self._raw: dict[str, Slot] = {}
        self._cache: dict[str, Slot] = {}

    def store_raw(self, name: str, value: Any) -> None:
        """Keep an ingested payload untouched; the next read resolves it."""
        self._raw[name] = Value(value)
        self._cache.pop(name, None)

    def assign(self, name: str, value: Any) -> None:
        """Direct assignment is treated as already resolved."""
        self._cache[name] = Value(value)

    def is_resolved(self, name: str) -> bool:
        return self._cache.get(name, UNSET).is_set()

    def get(self, owner: Any, name: str) -> Any:
        match self._cache.get(name, UNSET):
            case Value(value):
                return value

        spec = self._schema.associations[name]
        result = self._resolve(owner, spec)
        self._cache[name] = Value(result)
        return result

    def peek(self, name: str) -> Any:
        """Current value without contacting any collaborator."""
        match self._cache.get(name, UNSET):
            case Value(value):
                return value
        spec = self._schema.associations[name]
        match self._raw.get(name, UNSET):
            case Value(value):
                return value
        return [] if spec.many else None

    def copy(self) -> AssociationResolver:
        clone = AssociationResolver(self._schema)
        clone._raw = dict(self._raw)
        clone._cache = dict(self._cache)
        return clone

    def _resolve(self, owner: Any, spec: AssociationSpec) -> Any:
        raw = self._raw.get(spec.name, UNSET).unwrap_or(None)

        match (spec.cardinality, spec.reference):
            case (Cardinality.SINGLE, ReferenceStyle.OBJECT):
                return raw
            case (Cardinality.SINGLE, ReferenceStyle.IDENTITY):
                if raw is None:
                    return None
                result = lookup_collection(owner, spec).get(raw)
                self._log_resolved(spec, 1)
                return result
            case (Cardinality.MULTIPLE, ReferenceStyle.OBJECT):
                return raw if isinstance(raw, list) else to_array(raw)
            case (Cardinality.MULTIPLE, ReferenceStyle.IDENTITY):
                identities = to_array(raw)
                if not identities:
                    return []
                collection = lookup_collection(owner, spec)
                results = [collection.get(identity) for identity in identities]
                self._log_resolved(spec, len(results))
                return results
        raise AssertionError(f"Unhandled association kind: {spec!r}")

    def _log_resolved(self, spec: AssociationSpec, lookups: int) -> None:
        logger.debug(
            "association_resolved",
            model=self._schema.name,
            association=spec.name,
            collection=spec.collection,
            lookups=lookups,
        )


__all__ = ["AssociationResolver", "lookup_collection"]
