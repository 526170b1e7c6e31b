#!/usr/bin/env python3
import re
from datetime import datetime

import pytest

from collectory.core.errors import (
    DuplicateFieldError,
    LastFieldRemovalError,
    RequiredFieldRemovalError,
    SchemaValidationError,
    UnknownFieldError,
)
from collectory.core.schema.field_definition import FieldDefinition
from collectory.core.schema.field_type import FieldType
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.schema.validation_rules import ValidationRules


# --- Helpers --- #

def _library_fields() -> dict:
    return {
        "title": {"type": "text", "required": True, "validation": {"minLength": 1, "maxLength": 200}},
        "pages": {"type": "number", "required": False, "validation": {"minValue": 1}},
        "read_on": {"type": "date", "required": False, "description": "When I finished it"},
        "owned": {"type": "boolean", "required": True},
    }


@pytest.fixture
def schema() -> MetadataSchema:
    return MetadataSchema.create(_library_fields())


# --- Creation --- #

def test_create_single_required_field():
    s = MetadataSchema.create({"title": {"type": "text", "required": True}})
    assert s.has_field("title") is True
    assert s.is_field_required("title") is True
    assert s.get_required_fields() == ["title"]
    assert s.version == 1
    assert isinstance(s.last_modified, datetime)


def test_create_empty_raises():
    with pytest.raises(SchemaValidationError, match="MetadataSchema must contain at least one field definition"):
        MetadataSchema.create({})


@pytest.mark.parametrize("bad", ["1title", "_title", "my-field", "my field", "", "tïtle"])
def test_create_invalid_field_name_raises(bad):
    expected = re.escape(f"Invalid field name: {bad}. Must be alphanumeric with underscores only")
    with pytest.raises(SchemaValidationError, match=expected):
        MetadataSchema.create({bad: {"type": "text"}})


@pytest.mark.parametrize("good", ["a", "Title", "release_year", "field2", "A_1_b"])
def test_create_accepts_identifier_names(good):
    assert MetadataSchema.create({good: {"type": "text"}}).has_field(good)


@pytest.mark.parametrize("bad_type", ["string", "int", None, "list"])
def test_create_invalid_field_type_raises(bad_type):
    expected = re.escape(f"Invalid field type: {bad_type}. Must be one of: text, number, date, boolean")
    with pytest.raises(SchemaValidationError, match=expected):
        MetadataSchema.create({"x": {"type": bad_type}})


def test_create_malformed_definition_raises():
    with pytest.raises(SchemaValidationError, match="Invalid definition for field x"):
        MetadataSchema.create({"x": {"type": "text", "unexpected": 1}})
    with pytest.raises(SchemaValidationError, match="Invalid definition for field x"):
        MetadataSchema.create({"x": "text"})


def test_create_rejects_invalid_rules():
    with pytest.raises(SchemaValidationError, match="Invalid pattern"):
        MetadataSchema.create({"code": {"type": "text", "validation": {"pattern": "(["}}})


def test_create_requires_mapping():
    with pytest.raises(SchemaValidationError, match="must be a mapping"):
        MetadataSchema.create([("title", {"type": "text"})])  # type: ignore[arg-type]


def test_type_is_normalized():
    s = MetadataSchema.create({"n": {"type": " Number "}})
    assert s.get_field("n").type is FieldType.NUMBER


def test_required_defaults_to_false():
    s = MetadataSchema.create({"n": {"type": "number"}})
    assert s.is_field_required("n") is False
    assert s.get_required_fields() == []


# --- Round-trip & reads --- #

def test_get_all_fields_reconstructs_input(schema):
    source = _library_fields()
    rebuilt = {fd.name: fd for fd in schema.get_all_fields()}
    assert set(rebuilt) == set(source)
    for name, definition in source.items():
        fd = rebuilt[name]
        assert fd.type.value == definition["type"]
        assert fd.required == definition["required"]
        assert fd.description == definition.get("description")
        expected_rules = ValidationRules.model_validate(definition["validation"]) if "validation" in definition else None
        assert fd.validation == expected_rules


def test_reads_are_idempotent(schema):
    first = (schema.get_field("title"), schema.has_field("title"), schema.get_required_fields())
    second = (schema.get_field("title"), schema.has_field("title"), schema.get_required_fields())
    assert first == second
    assert schema.version == 1


def test_unknown_field_lookups_are_total(schema):
    assert schema.get_field("nope") is None
    assert schema.has_field("nope") is False
    assert schema.is_field_required("nope") is False


def test_required_fields_set_matches_definitions(schema):
    assert schema.required_fields == frozenset({"title", "owned"})
    assert schema.required_fields <= set(schema.fields)


def test_fields_mapping_is_read_only(schema):
    with pytest.raises(TypeError):
        schema.fields["x"] = FieldDefinition(name="x", type="text")  # type: ignore[index]


def test_caller_dict_mutation_does_not_leak():
    src = {"title": {"type": "text"}}
    s = MetadataSchema.create(src)
    src["other"] = {"type": "number"}
    assert not s.has_field("other")


def test_container_protocol(schema):
    assert "title" in schema
    assert len(schema) == 4
    assert list(schema) == ["title", "pages", "read_on", "owned"]


# --- add_field --- #

def test_add_field_returns_new_version(schema):
    s2 = schema.add_field("isbn", {"type": "text", "validation": {"pattern": r"^\d{13}$"}})
    assert s2.version == schema.version + 1
    assert s2.has_field("isbn")
    assert not schema.has_field("isbn")
    assert s2.last_modified >= schema.last_modified


def test_add_required_field_updates_required_set(schema):
    s2 = schema.add_field("author", {"type": "text", "required": True})
    assert s2.is_field_required("author")
    assert "author" not in schema.required_fields


def test_add_field_accepts_field_definition(schema):
    fd = FieldDefinition(name="ignored", type=FieldType.BOOLEAN, required=True)
    s2 = schema.add_field("signed", fd)
    assert s2.get_field("signed").name == "signed"
    assert s2.get_field("signed").type is FieldType.BOOLEAN


def test_add_duplicate_field_raises(schema):
    with pytest.raises(DuplicateFieldError, match="Field title already exists"):
        schema.add_field("title", {"type": "text"})


def test_add_field_validates_name_and_type(schema):
    with pytest.raises(SchemaValidationError, match="Invalid field name"):
        schema.add_field("9lives", {"type": "number"})
    with pytest.raises(SchemaValidationError, match="Invalid field type"):
        schema.add_field("cats", {"type": "integer"})


# --- remove_field --- #

def test_remove_optional_field(schema):
    s2 = schema.remove_field("pages")
    assert s2.version == schema.version + 1
    assert not s2.has_field("pages")
    assert schema.has_field("pages")


def test_remove_unknown_field_raises(schema):
    with pytest.raises(UnknownFieldError, match="Field nope does not exist"):
        schema.remove_field("nope")


def test_remove_required_field_raises(schema):
    with pytest.raises(RequiredFieldRemovalError, match="Cannot remove required field title"):
        schema.remove_field("title")
    assert schema.has_field("title")


def test_remove_last_field_raises():
    s = MetadataSchema.create({"only_field": {"type": "text", "required": False}})
    with pytest.raises(LastFieldRemovalError, match="Cannot remove the last field from schema"):
        s.remove_field("only_field")
    assert s.has_field("only_field")


def test_version_increments_across_chain(schema):
    s = schema.add_field("a", {"type": "text"}).add_field("b", {"type": "number"}).remove_field("a")
    assert s.version == 4


# --- redefine --- #

def test_redefine_continues_version_line(schema):
    s2 = schema.add_field("extra", {"type": "text"})
    s3 = s2.redefine({"name": {"type": "text", "required": True}})
    assert s3.version == s2.version + 1
    assert [fd.name for fd in s3.get_all_fields()] == ["name"]


def test_redefine_validates_like_create(schema):
    with pytest.raises(SchemaValidationError, match="at least one field"):
        schema.redefine({})


# --- Persistence --- #

def test_to_data_from_data_round_trip(schema):
    evolved = schema.add_field("isbn", {"type": "text"})
    restored = MetadataSchema.from_data(evolved.to_data())
    assert restored == evolved
    assert restored.version == 2


def test_from_data_skips_schema_rules():
    # trusted state: an empty field set is accepted as-is
    s = MetadataSchema.from_data({"fields": {}, "version": 7})
    assert len(s) == 0
    assert s.version == 7


def test_invalid_type_message_lists_every_valid_type():
    with pytest.raises(SchemaValidationError) as exc:
        MetadataSchema.create({"x": {"type": "colour"}})
    listed = str(exc.value).split("Must be one of: ", 1)[1].split(", ")
    assert listed == [ft.value for ft in FieldType.valid_types()]
    assert "invalid" not in listed


def test_schemas_compare_by_content_and_are_unhashable(schema):
    assert schema == MetadataSchema.from_data(schema.to_data())
    with pytest.raises(TypeError):
        hash(schema)
