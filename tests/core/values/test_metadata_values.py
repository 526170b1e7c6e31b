#!/usr/bin/env python3
import math
from datetime import date, datetime, timezone
from fractions import Fraction

import pytest

from collectory.core.errors import (
    MissingRequiredFieldError,
    NullRequiredFieldError,
    RequiredValueRemovalError,
    TypeMismatchError,
    UnknownFieldError,
    ValidationRuleError,
)
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.values.metadata_values import MetadataValues


# --- Fixtures --- #

@pytest.fixture
def schema() -> MetadataSchema:
    return MetadataSchema.create({
        "title": {"type": "text", "required": True},
        "code": {"type": "text", "validation": {"minLength": 3, "maxLength": 5, "pattern": r"^[A-Z]+\d*$"}},
        "price": {"type": "number", "validation": {"minValue": 0, "maxValue": 1000}},
        "number_field": {"type": "number"},
        "bought_on": {"type": "date"},
        "signed": {"type": "boolean"},
    })


@pytest.fixture
def values(schema) -> MetadataValues:
    return MetadataValues.create({"title": "Dune", "number_field": 42}, schema)


# --- create: required / unknown --- #

def test_missing_required_field():
    s = MetadataSchema.create({"title": {"type": "text", "required": True}})
    with pytest.raises(MissingRequiredFieldError, match="Required field 'title' is missing"):
        MetadataValues.create({}, s)


def test_null_required_field(schema):
    with pytest.raises(NullRequiredFieldError, match="Required field 'title' cannot be null"):
        MetadataValues.create({"title": None}, schema)


def test_unknown_field_rejected():
    s = MetadataSchema.create({"title": {"type": "text", "required": True}})
    with pytest.raises(UnknownFieldError, match="Field 'extra' is not defined in schema"):
        MetadataValues.create({"title": "X", "extra": 1}, s)


def test_required_checked_before_unknown(schema):
    with pytest.raises(MissingRequiredFieldError):
        MetadataValues.create({"extra": 1}, schema)


def test_optional_none_is_dropped(schema):
    v = MetadataValues.create({"title": "X", "price": None}, schema)
    assert not v.has_value("price")
    assert v.get_all_values() == {"title": "X"}


# --- create: type checks --- #

@pytest.mark.parametrize("field,value,msg", [
    ("title", 12, "Field 'title' must be a string, got int"),
    ("number_field", "12", "Field 'number_field' must be a valid number"),
    ("number_field", True, "Field 'number_field' must be a valid number"),
    ("number_field", float("nan"), "Field 'number_field' must be a valid number"),
    ("bought_on", "2024-01-01", "Field 'bought_on' must be a valid date"),
    ("bought_on", 1700000000, "Field 'bought_on' must be a valid date"),
    ("signed", 1, "Field 'signed' must be a boolean"),
    ("signed", "true", "Field 'signed' must be a boolean"),
])
def test_type_mismatch(schema, field, value, msg):
    payload = {"title": "T", field: value}
    with pytest.raises(TypeMismatchError, match=msg) as exc:
        MetadataValues.create(payload, schema)
    assert exc.value.field_name == field


@pytest.mark.parametrize("field,value", [
    ("number_field", 0),
    ("number_field", -3.5),
    ("number_field", math.inf),
    ("number_field", 10 ** 400),
    ("number_field", Fraction(1, 3)),
    ("bought_on", date(2024, 2, 29)),
    ("bought_on", datetime(2024, 2, 29, 10, 30, tzinfo=timezone.utc)),
    ("signed", False),
])
def test_type_accepted(schema, field, value):
    v = MetadataValues.create({"title": "T", field: value}, schema)
    assert v.get_value(field) == value


# --- create: rules --- #

def test_number_below_minimum():
    s = MetadataSchema.create({
        "price": {"type": "number", "required": False, "validation": {"minValue": 0, "maxValue": 1000}},
    })
    with pytest.raises(ValidationRuleError, match="Field 'price' must be at least 0") as exc:
        MetadataValues.create({"price": -5}, s)
    assert exc.value.rule == "minValue"
    assert exc.value.bound == 0


def test_number_above_maximum(schema):
    with pytest.raises(ValidationRuleError, match="Field 'price' must be at most 1000"):
        MetadataValues.create({"title": "T", "price": 1000.01}, schema)


def test_number_bounds_inclusive(schema):
    assert MetadataValues.create({"title": "T", "price": 0}, schema).get_value("price") == 0
    assert MetadataValues.create({"title": "T", "price": 1000}, schema).get_value("price") == 1000


@pytest.mark.parametrize("code,msg", [
    ("AB", "Field 'code' must be at least 3 characters long"),
    ("ABCDEF", "Field 'code' must be at most 5 characters long"),
    ("abc", "Field 'code' does not match required pattern"),
])
def test_text_rules(schema, code, msg):
    with pytest.raises(ValidationRuleError, match=msg):
        MetadataValues.create({"title": "T", "code": code}, schema)


def test_pattern_uses_search_semantics():
    s = MetadataSchema.create({"isbn": {"type": "text", "validation": {"pattern": r"\d{3}"}}})
    assert MetadataValues.create({"isbn": "ISBN-978"}, s).get_value("isbn") == "ISBN-978"


def test_rules_for_other_types_are_ignored():
    s = MetadataSchema.create({"n": {"type": "number", "validation": {"maxLength": 1}}})
    assert MetadataValues.create({"n": 12345}, s).get_value("n") == 12345


# --- check (collecting mode) --- #

def test_check_collects_every_failure(schema):
    result = MetadataValues.check({"code": "a", "price": -1, "extra": 1, "signed": "no"}, schema)
    assert not result.is_valid()
    assert result.messages == [
        "Required field 'title' is missing",
        "Field 'extra' is not defined in schema",
        "Field 'code' must be at least 3 characters long",
        "Field 'code' does not match required pattern",
        "Field 'price' must be at least 0",
        "Field 'signed' must be a boolean",
    ]


def test_check_valid(schema):
    result = MetadataValues.check({"title": "ok"}, schema)
    assert result.is_valid()
    assert len(result) == 0


# --- reads & immutability --- #

def test_reads(values):
    assert values.get_value("title") == "Dune"
    assert values.has_value("title")
    assert values.get_value("price") is None
    assert not values.has_value("price")
    assert values.get_all_values() == {"title": "Dune", "number_field": 42}
    assert values.get_value("title") == values.get_value("title")


def test_get_all_values_is_a_copy(values):
    snapshot = values.get_all_values()
    snapshot["title"] = "changed"
    assert values.get_value("title") == "Dune"


def test_values_mapping_is_read_only(values):
    with pytest.raises(TypeError):
        values.values["title"] = "x"  # type: ignore[index]


# --- update_value --- #

def test_update_value_returns_new_instance(values, schema):
    updated = values.update_value("price", 10, schema)
    assert updated.get_value("price") == 10
    assert not values.has_value("price")
    assert updated.get_value("title") == "Dune"


def test_update_value_type_mismatch_leaves_original(values, schema):
    with pytest.raises(TypeMismatchError, match="Field 'number_field' must be a valid number"):
        values.update_value("number_field", "not a number", schema)
    assert values.get_value("number_field") == 42


def test_update_value_rule_violation(values, schema):
    with pytest.raises(ValidationRuleError, match="must be at most 1000"):
        values.update_value("price", 5000, schema)


def test_update_unknown_field(values, schema):
    with pytest.raises(UnknownFieldError, match="Field 'ghost' is not defined in schema"):
        values.update_value("ghost", 1, schema)


def test_update_value_none(values, schema):
    with pytest.raises(NullRequiredFieldError):
        values.update_value("title", None, schema)
    cleared = values.update_value("number_field", None, schema)
    assert not cleared.has_value("number_field")


# --- remove_value --- #

def test_remove_value(values, schema):
    removed = values.remove_value("number_field", schema)
    assert not removed.has_value("number_field")
    assert values.has_value("number_field")


def test_remove_absent_value_is_noop(values, schema):
    assert values.remove_value("price", schema) is values


def test_remove_required_value_raises(values, schema):
    with pytest.raises(RequiredValueRemovalError, match="Cannot remove required field 'title'"):
        values.remove_value("title", schema)
    assert values.has_value("title")


# --- persistence & helpers --- #

def test_to_data_and_from_data(schema):
    v = MetadataValues.create({"title": "T", "bought_on": date(2024, 5, 1), "signed": True}, schema)
    data = v.to_data()
    assert data == {"values": {"title": "T", "bought_on": "2024-05-01", "signed": True}}
    restored = MetadataValues.from_data(data, schema)
    assert restored == v
    assert restored.get_value("bought_on") == date(2024, 5, 1)
    assert restored.update_value("price", 1, schema).get_value("bought_on") == date(2024, 5, 1)


def test_from_data_without_schema_keeps_persisted_form(schema):
    data = MetadataValues.create({"title": "T", "bought_on": date(2024, 5, 1)}, schema).to_data()
    assert MetadataValues.from_data(data).get_value("bought_on") == "2024-05-01"


def test_from_data_with_schema_rejects_bad_date(schema):
    with pytest.raises(TypeMismatchError, match="Field 'bought_on' must be a valid date"):
        MetadataValues.from_data({"values": {"title": "T", "bought_on": "2024-13-01"}}, schema)


def test_from_data_accepts_bare_mapping_without_validation(schema):
    v = MetadataValues.from_data({"anything": 1})
    assert v.get_value("anything") == 1


def test_without_unknown(values):
    narrowed_schema = MetadataSchema.create({"title": {"type": "text", "required": True}})
    narrowed = values.without_unknown(narrowed_schema)
    assert narrowed.get_all_values() == {"title": "Dune"}
    assert narrowed.without_unknown(narrowed_schema) is narrowed


def test_huge_integers_obey_range_rules(schema):
    with pytest.raises(ValidationRuleError, match="Field 'price' must be at most 1000"):
        MetadataValues.create({"title": "T", "price": 10 ** 400}, schema)
    with pytest.raises(ValidationRuleError, match="Field 'price' must be at least 0"):
        MetadataValues.create({"title": "T", "price": -(10 ** 400)}, schema)
    assert MetadataValues.check({"title": "T", "number_field": 10 ** 400}, schema).is_valid()


def test_values_compare_by_content_and_are_unhashable(values, schema):
    assert values == MetadataValues.create({"title": "Dune", "number_field": 42}, schema)
    with pytest.raises(TypeError):
        hash(values)
