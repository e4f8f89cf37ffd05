"""
Fake collaborators and sample models shared by the model tests.

``AttributeTestModel`` declares one attribute per semantic type plus the four
association kinds. ``FakeService`` hands out ``CountingCollection`` objects so
tests can assert exactly how many lookups a read triggered.
"""

from __future__ import annotations

from typing import Any

from modelspine import Model, SchemaBuilder


class CountingCollection:
    """Lookup collaborator returning fresh models and recording every call."""

    def __init__(self, model_cls: type[Model]):
        self.model_cls = model_cls
        self.lookups: list[Any] = []

    def get(self, identity: Any) -> Model:
        self.lookups.append(identity)
        return self.model_cls({"id": identity})


class SingleAssociationModel(Model):
    schema = (
        SchemaBuilder("single_association")
        .identity("id")
        .attribute("name", type="string")
        .build()
    )


class MultipleAssociationsModel(Model):
    schema = (
        SchemaBuilder("multiple_associations")
        .identity("id")
        .attribute("name", type="string")
        .build()
    )


class FakeService:
    """Service exposing one collection accessor per association collection."""

    def __init__(self):
        self.single = CountingCollection(SingleAssociationModel)
        self.multiple = CountingCollection(MultipleAssociationsModel)
        self.accessor_calls = 0

    def single_associations(self) -> CountingCollection:
        self.accessor_calls += 1
        return self.single

    def multiple_associations(self) -> CountingCollection:
        self.accessor_calls += 1
        return self.multiple


ATTRIBUTE_TEST_SCHEMA = (
    SchemaBuilder("attribute_test", service=FakeService)
    .identity("id")
    .attribute("key", aliases="keys", squash="id")
    .attribute("time", type="time")
    .attribute("bool", type="boolean")
    .attribute("float", type="float")
    .attribute("integer", type="integer")
    .attribute("string", type="string")
    .attribute("timestamp", type="timestamp")
    .attribute("array", type="array")
    .attribute("default", default="default_value")
    .attribute("another_default", default=False)
    .association("one_object", "single_associations")
    .association("many_objects", "multiple_associations", magnitude="many")
    .association("one_identity", "single_associations", type="identity")
    .association(
        "many_identities", "multiple_associations", type="identity", magnitude="many"
    )
    .build()
)


class AttributeTestModel(Model):
    schema = ATTRIBUTE_TEST_SCHEMA
