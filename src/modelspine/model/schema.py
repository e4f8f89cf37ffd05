"""
Declarative model schemas: attributes, aliases, squash keys and associations.

A ``Schema`` is the immutable description of one resource kind. It is built
once, at import time, through ``SchemaBuilder`` and then shared by every
instance of the model that uses it. All configuration mistakes (two
attributes claiming the same alias, an association pointing at a collection
accessor the service does not have) are reported by ``build()``, so ingestion
never has to deal with them.

Manifesto:
    - **Declared once, read many:** No mutation after ``build()``
    - **Explicit absence:** ``default=MISSING`` is "no default"; ``None`` and
      ``False`` are real defaults
    - **One alias, one owner:** An input key resolves to at most one attribute
    - **Fail at declaration:** Collisions and bad accessors raise ``SchemaError``

Architecture:
    ::

        SchemaBuilder("server", service=ComputeService)
          .identity("id")
          .attribute("flavor", aliases="flavorRef", squash="id")
          .attribute("created_at", type="timestamp")
          .association("volumes", "volumes", magnitude="many", type="identity")
          .build()
              │
              ▼
        ┌──────────────────────────────────────────────────────────────┐
        │ Schema                                                        │
        │   attributes:   {name → AttributeSpec}       (ordered)        │
        │   associations: {name → AssociationSpec}     (ordered)        │
        │   aliases:      {input key → canonical name} (read-only)      │
        │   identity:     "id"                                          │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> schema = (
    ...     SchemaBuilder("flavor")
    ...     .identity("id")
    ...     .attribute("ram", type="integer", aliases=["memory", None])
    ...     .build()
    ... )
    >>> schema.resolve_key("memory")
    'ram'
    >>> dict(schema.aliases)
    {'memory': 'ram'}

Tags:
    schema, declarative, aliases, associations, modelspine

Doc-Types:
    - API Reference
    - Schema Declaration Guide
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import MISSING, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from modelspine.core.errors import (
    AliasCollisionError,
    DuplicateDeclarationError,
    SchemaError,
    UnknownAccessorError,
)
from modelspine.core.logging import get_logger
from modelspine.model.casting import AttributeType

logger = get_logger(__name__)


class Cardinality(str, Enum):
    """How many models an association points at."""

    SINGLE = "one"
    MULTIPLE = "many"


class ReferenceStyle(str, Enum):
    """What the raw payload carries for an association."""

    OBJECT = "object"
    IDENTITY = "identity"


def normalize_key(key: Any) -> str:
    """Canonical string form of an input key (str, bytes, Enum or other)."""
    if isinstance(key, Enum):
        return normalize_key(key.value)
    if isinstance(key, str):
        return key
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return str(key)


@dataclass(frozen=True, slots=True)
class AttributeSpec:
    """One declared attribute."""

    name: str
    type: AttributeType = AttributeType.IDENTITY
    aliases: tuple[str, ...] = ()
    squash: str | None = None
    # dataclasses reads a bare MISSING default as "required"
    default: Any = field(default_factory=lambda: MISSING)
    default_factory: Callable[[], Any] | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not None

    def resolve_default(self) -> Any:
        """Declared default; factories are called on every resolution."""
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


@dataclass(frozen=True, slots=True)
class AssociationSpec:
    """One declared association."""

    name: str
    collection: str
    cardinality: Cardinality = Cardinality.SINGLE
    reference: ReferenceStyle = ReferenceStyle.OBJECT

    @property
    def many(self) -> bool:
        return self.cardinality is Cardinality.MULTIPLE

    @property
    def by_identity(self) -> bool:
        return self.reference is ReferenceStyle.IDENTITY


class Schema:
    """Immutable attribute/association table for one model kind."""

    __slots__ = ("name", "_attributes", "_associations", "_aliases", "identity")

    def __init__(
        self,
        name: str,
        attributes: Iterable[AttributeSpec],
        associations: Iterable[AssociationSpec],
        aliases: Mapping[str, str],
        identity: str | None,
    ):
        self.name = name
        self._attributes = MappingProxyType({spec.name: spec for spec in attributes})
        self._associations = MappingProxyType({spec.name: spec for spec in associations})
        self._aliases = MappingProxyType(dict(aliases))
        self.identity = identity

    @property
    def attributes(self) -> Mapping[str, AttributeSpec]:
        return self._attributes

    @property
    def associations(self) -> Mapping[str, AssociationSpec]:
        return self._associations

    @property
    def aliases(self) -> Mapping[str, str]:
        """Alias → canonical name (canonical names themselves are not listed)."""
        return self._aliases

    def resolve_key(self, key: Any) -> str | None:
        """Canonical attribute name for an input key, or None if unknown."""
        key = normalize_key(key)
        if key in self._attributes:
            return key
        return self._aliases.get(key)

    def attribute(self, name: str) -> AttributeSpec | None:
        return self._attributes.get(name)

    def association(self, name: str) -> AssociationSpec | None:
        return self._associations.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes or name in self._associations

    def __repr__(self) -> str:
        return (
            f"Schema({self.name!r}, attributes={list(self._attributes)}, "
            f"associations={list(self._associations)})"
        )


def _coerce_enum(enum_cls: type[Enum], value: Any, option: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(member.value) for member in enum_cls)
        raise SchemaError(f"Invalid {option} {value!r}; expected one of {allowed}") from None


def _alias_list(aliases: Any) -> tuple[str, ...]:
    """Accept a single key or an iterable of keys; drop None entries."""
    if aliases is None:
        return ()
    if isinstance(aliases, (str, bytes, Enum)) or not isinstance(aliases, Iterable):
        aliases = [aliases]
    return tuple(normalize_key(alias) for alias in aliases if alias is not None)


class SchemaBuilder:
    """
    Fluent builder producing an immutable ``Schema``.

    Args:
        name: Model kind name, used in logs and error context
        service: Optional service class; when given, every association's
            collection accessor must exist on it
    """

    def __init__(self, name: str, *, service: type | None = None):
        self.name = name
        self.service = service
        self._attributes: list[AttributeSpec] = []
        self._associations: list[AssociationSpec] = []
        self._identity: str | None = None

    def identity(
        self,
        name: str,
        *,
        aliases: Any = None,
        type: AttributeType | str = AttributeType.IDENTITY,
    ) -> SchemaBuilder:
        """Declare the identity attribute that marks an instance as persisted."""
        if self._identity is not None:
            raise DuplicateDeclarationError(
                f"Identity already declared as '{self._identity}'"
            ).with_context(model=self.name, attribute=name)
        self.attribute(name, aliases=aliases, type=type)
        self._identity = name
        return self

    def attribute(
        self,
        name: str,
        *,
        aliases: Any = None,
        squash: Any = None,
        type: AttributeType | str = AttributeType.IDENTITY,
        default: Any = MISSING,
        default_factory: Callable[[], Any] | None = None,
    ) -> SchemaBuilder:
        """Declare an attribute.

        Args:
            name: Canonical attribute name
            aliases: Single key or iterable of alternate input keys
            squash: Inner key extracted when the raw value is a mapping
            type: ``AttributeType`` or its string value
            default: Static default, returned as is on new instances
            default_factory: Zero-argument callable evaluated on every read
        """
        if default is not MISSING and default_factory is not None:
            raise SchemaError(
                "Cannot declare both default and default_factory"
            ).with_context(model=self.name, attribute=name)
        if default_factory is not None and not callable(default_factory):
            raise SchemaError("default_factory must be callable").with_context(
                model=self.name, attribute=name
            )
        self._attributes.append(
            AttributeSpec(
                name=normalize_key(name),
                type=_coerce_enum(AttributeType, type, "attribute type"),
                aliases=_alias_list(aliases),
                squash=None if squash is None else normalize_key(squash),
                default=default,
                default_factory=default_factory,
            )
        )
        return self

    def association(
        self,
        name: str,
        collection: str,
        *,
        magnitude: Cardinality | str = Cardinality.SINGLE,
        type: ReferenceStyle | str = ReferenceStyle.OBJECT,
    ) -> SchemaBuilder:
        """Declare an association resolved through ``service.<collection>``."""
        self._associations.append(
            AssociationSpec(
                name=normalize_key(name),
                collection=collection,
                cardinality=_coerce_enum(Cardinality, magnitude, "magnitude"),
                reference=_coerce_enum(ReferenceStyle, type, "association type"),
            )
        )
        return self

    def build(self) -> Schema:
        """Validate every declaration and freeze the result."""
        owners: dict[str, str] = {}

        def claim(key: str, owner: str) -> None:
            existing = owners.get(key)
            if existing is None:
                owners[key] = owner
                return
            if existing == owner and key != owner:
                return  # same alias listed twice for one attribute
            error_cls = DuplicateDeclarationError if key == owner == existing else AliasCollisionError
            raise error_cls(
                f"'{key}' of '{owner}' already maps to '{existing}'"
            ).with_context(model=self.name, key=key)

        for spec in [*self._attributes, *self._associations]:
            claim(spec.name, spec.name)

        aliases: dict[str, str] = {}
        for spec in self._attributes:
            for alias in spec.aliases:
                if alias == spec.name:
                    continue
                claim(alias, spec.name)
                aliases[alias] = spec.name

        if self.service is not None:
            for spec in self._associations:
                if not hasattr(self.service, spec.collection):
                    raise UnknownAccessorError(spec.collection, self.service).with_context(
                        model=self.name, association=spec.name
                    )

        schema = Schema(
            self.name,
            attributes=self._attributes,
            associations=self._associations,
            aliases=aliases,
            identity=self._identity,
        )
        logger.debug(
            "schema_built",
            model=self.name,
            attributes=len(schema.attributes),
            associations=len(schema.associations),
            aliases=len(schema.aliases),
        )
        return schema


__all__ = [
    "AssociationSpec",
    "AttributeSpec",
    "Cardinality",
    "ReferenceStyle",
    "Schema",
    "SchemaBuilder",
    "normalize_key",
]
