"""
Model instances: typed attribute storage over a declared schema.

A ``Model`` subclass binds a ``Schema`` and gets attribute-style access to
every declared attribute and association. Raw API payloads go in through
``merge_attributes()``; reads always return a value of the declared type.

Manifesto:
    - **Three states per attribute:** never supplied, supplied (possibly as
      ``None``), or defaulted. Only the first one falls back to a default
    - **Defaults are for new objects:** Once the identity is known the
      instance mirrors a remote resource, and unset attributes read as the
      type's empty value instead of a client-side default
    - **Reads never raise** for declared names
    - **No eager I/O:** Ingesting identities never contacts a collaborator

Architecture:
    ::

        raw mapping
            │ merge_attributes()
            ▼
        ┌──────────────┐  association name?  ┌──────────────────────┐
        │ normalize key│ ──────────────────▶ │ AssociationResolver  │
        └──────┬───────┘                     │  store_raw()          │
               │ alias table                 └──────────────────────┘
               ▼
        ┌──────────────┐  squash? ──▶ mapping[squash key]
        │ AttributeSpec│
        └──────┬───────┘
               │ cast(spec.type, value)
               ▼
        slots[name] = Value(coerced)

        read(name):
            Value(v)                     → v
            Unset, new object, default   → default (factory called fresh)
            Unset otherwise              → empty_value(type)

Examples:
    >>> schema = (
    ...     SchemaBuilder("server")
    ...     .identity("id")
    ...     .attribute("flavor", aliases="flavorRef", squash="id")
    ...     .attribute("state", default="BUILDING")
    ...     .build()
    ... )
    >>> class Server(Model):
    ...     schema = schema
    >>> server = Server({"flavorRef": {"id": "m1.small"}})
    >>> server.flavor
    'm1.small'
    >>> server.state
    'BUILDING'
    >>> server.merge_attributes({"id": "srv-1"}).state is None
    True

Guardrails:
    ❌ DON'T: Name an attribute after a ``Model`` member (``copy``, ``read``...)
    ✅ DO: Pick another canonical name and alias the wire key to it

    ❌ DON'T: Share one instance across threads while merging into it
    ✅ DO: Serialize mutation of an instance yourself

Tags:
    model, attributes, defaults, ingestion, modelspine

Doc-Types:
    - API Reference
    - Model Declaration Guide
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from modelspine.core.errors import SchemaError, UnknownAttributeError
from modelspine.core.logging import get_logger
from modelspine.model.associations import AssociationResolver
from modelspine.model.casting import cast, empty_value
from modelspine.model.schema import AttributeSpec, Schema, normalize_key
from modelspine.model.slots import UNSET, Slot, Value

logger = get_logger(__name__)


def squash(mapping: Mapping[Any, Any], key: str) -> Any:
    """Value at ``key`` in ``mapping``, matching str, bytes or Enum shaped keys."""
    if key in mapping:
        return mapping[key]
    for inner_key, inner_value in mapping.items():
        if normalize_key(inner_key) == key:
            return inner_value
    return None


class Model:
    """
    Base class for schema-backed resource models.

    Subclasses set the ``schema`` class attribute. The service used to
    resolve identity associations is passed to the constructor or provided
    by overriding the ``service`` property.

    Args:
        attributes: Optional raw mapping merged right away
        service: Object exposing the collection accessors named by the
            schema's associations
    """

    schema: ClassVar[Schema]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        schema = cls.__dict__.get("schema")
        if schema is None:
            return
        if not isinstance(schema, Schema):
            raise SchemaError(
                f"{cls.__name__}.schema must be a Schema, got {type(schema).__name__}"
            )
        declared = schema.attributes.keys() | schema.associations.keys()
        reserved = sorted(name for name in declared if name == "schema" or hasattr(Model, name))
        if reserved:
            raise SchemaError(
                f"{cls.__name__} declares names reserved by Model: {', '.join(reserved)}"
            ).with_context(model=schema.name)

    def __init__(self, attributes: Mapping[Any, Any] | None = None, *, service: Any = None):
        schema = getattr(type(self), "schema", None)
        if not isinstance(schema, Schema):
            raise SchemaError(f"{type(self).__name__} has no schema")
        object.__setattr__(self, "_slots", {})
        object.__setattr__(self, "_associations", AssociationResolver(schema))
        object.__setattr__(self, "_service", service)
        if attributes:
            self.merge_attributes(attributes)

    # ── Service ──────────────────────────────────────────────────

    @property
    def service(self) -> Any:
        return self._service

    @service.setter
    def service(self, value: Any) -> None:
        object.__setattr__(self, "_service", value)

    # ── Ingestion ────────────────────────────────────────────────

    def merge_attributes(self, attributes: Mapping[Any, Any]) -> Model:
        """Merge a raw payload into this instance and return it.

        Association keys are stored unresolved; attribute keys go through
        the alias table, the squash rule and the attribute's caster. Keys
        the schema does not know are ignored.
        """
        schema = self.schema
        for raw_key, value in attributes.items():
            key = normalize_key(raw_key)
            if key in schema.associations:
                self._associations.store_raw(key, value)
                continue
            name = schema.resolve_key(key)
            if name is None:
                logger.debug("attribute_ignored", model=schema.name, key=key)
                continue
            self._store(schema.attributes[name], value)
        return self

    def _store(self, spec: AttributeSpec, value: Any) -> None:
        if spec.squash is not None and isinstance(value, Mapping):
            value = squash(value, spec.squash)
        self._slots[spec.name] = Value(cast(spec.type, value))

    # ── Attributes ───────────────────────────────────────────────

    def _attribute_spec(self, name: str) -> AttributeSpec:
        spec = self.schema.attribute(name)
        if spec is None:
            raise UnknownAttributeError(name, self.schema.name)
        return spec

    def read(self, name: str) -> Any:
        """Supplied value, else default (new objects only), else the empty value."""
        spec = self._attribute_spec(name)
        match self._slots.get(name, UNSET):
            case Value(value):
                return value
        if spec.has_default and not self.persisted:
            return spec.resolve_default()
        return empty_value(spec.type)

    def write(self, name: str, value: Any) -> None:
        """Cast and store ``value`` as if it had been merged under ``name``."""
        self._store(self._attribute_spec(name), value)

    def is_supplied(self, name: str) -> bool:
        self._attribute_spec(name)
        return self._slots.get(name, UNSET).is_set()

    @property
    def attributes(self) -> dict[str, Any]:
        """Only the attributes that were explicitly supplied."""
        return {name: slot.value for name, slot in self._slots.items()}

    def all_attributes(self) -> dict[str, Any]:
        """Every declared attribute, resolved with the read rules."""
        return {name: self.read(name) for name in self.schema.attributes}

    @property
    def identity(self) -> Any:
        if self.schema.identity is None:
            return None
        return self.read(self.schema.identity)

    @property
    def persisted(self) -> bool:
        """True once the identity attribute holds a non-None value."""
        if self.schema.identity is None:
            return False
        slot: Slot = self._slots.get(self.schema.identity, UNSET)
        return slot.unwrap_or(None) is not None

    # ── Associations ─────────────────────────────────────────────

    def _check_association(self, name: str) -> None:
        if name not in self.schema.associations:
            raise UnknownAttributeError(name, self.schema.name)

    def get_association(self, name: str) -> Any:
        """Resolve (once) and return an association."""
        self._check_association(name)
        return self._associations.get(self, name)

    def set_association(self, name: str, value: Any) -> None:
        """Store an already-resolved value, bypassing any lookup."""
        self._check_association(name)
        self._associations.assign(name, value)

    def all_associations(self) -> dict[str, Any]:
        """Current association values; never contacts a collaborator."""
        return {name: self._associations.peek(name) for name in self.schema.associations}

    def all_associations_and_attributes(self) -> dict[str, Any]:
        return {**self.all_attributes(), **self.all_associations()}

    # ── Object protocol ──────────────────────────────────────────

    def copy(self) -> Model:
        """Shallow copy bound to the same service.

        The attribute table and the association raw/cache tables are copied,
        so storing into either instance leaves the other untouched. Stored
        values themselves are not copied: a list held by an ``array``
        attribute or a resolved many-association is the same object in both.
        """
        clone = type(self).__new__(type(self))
        object.__setattr__(clone, "_slots", dict(self._slots))
        object.__setattr__(clone, "_associations", self._associations.copy())
        object.__setattr__(clone, "_service", self._service)
        return clone

    __copy__ = copy

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        schema = getattr(type(self), "schema", None)
        if schema is None:
            raise AttributeError(name)
        if name in schema.attributes:
            return self.read(name)
        if name in schema.associations:
            return self.get_association(name)
        raise UnknownAttributeError(name, schema.name)

    def __setattr__(self, name: str, value: Any) -> None:
        schema = self.schema
        if name in schema.attributes:
            self.write(name, value)
        elif name in schema.associations:
            self.set_association(name, value)
        else:
            object.__setattr__(self, name, value)

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self.schema.attributes, *self.schema.associations})

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.attributes.items())
        return f"<{type(self).__name__} {fields}>"


__all__ = ["Model", "squash"]
