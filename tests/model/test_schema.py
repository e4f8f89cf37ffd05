"""Tests for modelspine.model.schema -- declaration and build-time validation."""

from dataclasses import MISSING

import pytest

from modelspine.core.errors import (
    AliasCollisionError,
    DuplicateDeclarationError,
    SchemaError,
    UnknownAccessorError,
)
from modelspine.model.casting import AttributeType
from modelspine.model.schema import (
    Cardinality,
    ReferenceStyle,
    SchemaBuilder,
    normalize_key,
)

from tests._support.fakes import ATTRIBUTE_TEST_SCHEMA, FakeService


class TestAliases:
    """Alias table construction."""

    def test_no_alias_is_created_for_none(self):
        assert dict(ATTRIBUTE_TEST_SCHEMA.aliases) == {"keys": "key"}

    def test_none_entries_are_dropped_from_lists(self):
        schema = SchemaBuilder("m").attribute("ram", aliases=["memory", None, "mem"]).build()
        assert dict(schema.aliases) == {"memory": "ram", "mem": "ram"}

    def test_resolve_canonical_and_alias(self):
        assert ATTRIBUTE_TEST_SCHEMA.resolve_key("key") == "key"
        assert ATTRIBUTE_TEST_SCHEMA.resolve_key("keys") == "key"
        assert ATTRIBUTE_TEST_SCHEMA.resolve_key("unknown") is None

    def test_alias_equal_to_own_name_is_ignored(self):
        schema = SchemaBuilder("m").attribute("name", aliases=["name", "Name"]).build()
        assert dict(schema.aliases) == {"Name": "name"}

    def test_alias_table_is_read_only(self):
        with pytest.raises(TypeError):
            ATTRIBUTE_TEST_SCHEMA.aliases["other"] = "key"


class TestBuildValidation:
    """Configuration errors surface from build(), not from ingestion."""

    def test_alias_collision_between_attributes(self):
        builder = (
            SchemaBuilder("m")
            .attribute("a", aliases="x")
            .attribute("b", aliases="x")
        )
        with pytest.raises(AliasCollisionError) as exc_info:
            builder.build()
        assert exc_info.value.context.key == "x"
        assert exc_info.value.context.model == "m"

    def test_alias_colliding_with_attribute_name(self):
        builder = SchemaBuilder("m").attribute("a").attribute("b", aliases="a")
        with pytest.raises(AliasCollisionError):
            builder.build()

    def test_alias_colliding_with_association_name(self):
        builder = SchemaBuilder("m").attribute("a", aliases="owner").association("owner", "owners")
        with pytest.raises(AliasCollisionError):
            builder.build()

    def test_duplicate_attribute(self):
        builder = SchemaBuilder("m").attribute("a").attribute("a")
        with pytest.raises(DuplicateDeclarationError):
            builder.build()

    def test_duplicate_identity(self):
        with pytest.raises(DuplicateDeclarationError):
            SchemaBuilder("m").identity("id").identity("uuid")

    def test_unknown_collection_accessor(self):
        builder = SchemaBuilder("m", service=FakeService).association("x", "no_such_collection")
        with pytest.raises(UnknownAccessorError) as exc_info:
            builder.build()
        assert exc_info.value.accessor == "no_such_collection"
        assert exc_info.value.context.association == "x"

    def test_accessor_not_checked_without_service(self):
        schema = SchemaBuilder("m").association("x", "no_such_collection").build()
        assert "x" in schema.associations

    def test_default_and_factory_are_exclusive(self):
        with pytest.raises(SchemaError):
            SchemaBuilder("m").attribute("a", default=1, default_factory=list)

    def test_invalid_type(self):
        with pytest.raises(SchemaError, match="attribute type"):
            SchemaBuilder("m").attribute("a", type="decimal")

    def test_invalid_magnitude(self):
        with pytest.raises(SchemaError, match="magnitude"):
            SchemaBuilder("m").association("a", "as", magnitude="few")


class TestSpecs:
    def test_attribute_types_from_strings(self):
        assert ATTRIBUTE_TEST_SCHEMA.attribute("time").type is AttributeType.TIME
        assert ATTRIBUTE_TEST_SCHEMA.attribute("key").type is AttributeType.IDENTITY

    def test_default_presence(self):
        assert ATTRIBUTE_TEST_SCHEMA.attribute("another_default").has_default
        assert ATTRIBUTE_TEST_SCHEMA.attribute("another_default").default is False
        assert not ATTRIBUTE_TEST_SCHEMA.attribute("bool").has_default
        assert ATTRIBUTE_TEST_SCHEMA.attribute("bool").default is MISSING

    def test_none_default_is_a_default(self):
        schema = SchemaBuilder("m").attribute("a", default=None).build()
        assert schema.attribute("a").has_default

    def test_default_factory_called_each_time(self):
        schema = SchemaBuilder("m").attribute("tags", default_factory=list).build()
        spec = schema.attribute("tags")
        assert spec.resolve_default() == []
        assert spec.resolve_default() is not spec.resolve_default()

    def test_association_options(self):
        many = ATTRIBUTE_TEST_SCHEMA.association("many_identities")
        assert many.cardinality is Cardinality.MULTIPLE
        assert many.reference is ReferenceStyle.IDENTITY
        assert many.many and many.by_identity

        one = ATTRIBUTE_TEST_SCHEMA.association("one_object")
        assert one.cardinality is Cardinality.SINGLE
        assert one.reference is ReferenceStyle.OBJECT

    def test_identity_name(self):
        assert ATTRIBUTE_TEST_SCHEMA.identity == "id"
        assert "id" in ATTRIBUTE_TEST_SCHEMA.attributes

    def test_declaration_order_is_kept(self):
        assert list(ATTRIBUTE_TEST_SCHEMA.attributes)[:3] == ["id", "key", "time"]

    def test_contains(self):
        assert "one_object" in ATTRIBUTE_TEST_SCHEMA
        assert "float" in ATTRIBUTE_TEST_SCHEMA
        assert "nope" not in ATTRIBUTE_TEST_SCHEMA


class TestNormalizeKey:
    def test_shapes(self):
        from enum import Enum

        class Key(Enum):
            ID = "id"

        assert normalize_key("id") == "id"
        assert normalize_key(b"id") == "id"
        assert normalize_key(Key.ID) == "id"
        assert normalize_key(5) == "5"
