"""modelspine model layer -- schemas, coercion, instances and associations.

Architecture::

    casting.py        AttributeType + cast() (total coercion functions)
    slots.py          Unset / Value slot states
    schema.py         AttributeSpec, AssociationSpec, Schema, SchemaBuilder
    associations.py   AssociationResolver (lazy, memoized lookups)
    instance.py       Model base class (merge_attributes, read, all_attributes)
"""

from modelspine.model.associations import AssociationResolver, lookup_collection
from modelspine.model.casting import EPOCH, AttributeType, cast, empty_value
from modelspine.model.instance import Model, squash
from modelspine.model.schema import (
    AssociationSpec,
    AttributeSpec,
    Cardinality,
    ReferenceStyle,
    Schema,
    SchemaBuilder,
    normalize_key,
)
from modelspine.model.slots import UNSET, Unset, Value

__all__ = [
    "AssociationResolver",
    "lookup_collection",
    "EPOCH",
    "AttributeType",
    "cast",
    "empty_value",
    "Model",
    "squash",
    "AssociationSpec",
    "AttributeSpec",
    "Cardinality",
    "ReferenceStyle",
    "Schema",
    "SchemaBuilder",
    "normalize_key",
    "UNSET",
    "Unset",
    "Value",
]
