#!/usr/bin/env python3
from datetime import date, datetime, timedelta, timezone

import pytest

from collectory.core.errors import TypeMismatchError
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.values.codec import decode_values, encode_values, parse_date


@pytest.fixture
def schema() -> MetadataSchema:
    return MetadataSchema.create({
        "released": {"type": "date"},
        "label": {"type": "text"},
    })


def test_decode_bare_date(schema):
    out = decode_values({"released": "2024-02-29", "label": "2024-02-29"}, schema)
    assert out["released"] == date(2024, 2, 29)
    assert out["label"] == "2024-02-29"


def test_decode_timestamp_with_z(schema):
    out = decode_values({"released": "2024-05-01T09:30:00Z"}, schema)
    assert out["released"] == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def test_decode_timestamp_with_offset():
    dt = parse_date("d", "2024-05-01T09:30:00+02:00")
    assert dt.utcoffset() == timedelta(hours=2)


@pytest.mark.parametrize("text", ["2024-02-30", "not a date", "2023-13-01", ""])
def test_invalid_date_raises(schema, text):
    with pytest.raises(TypeMismatchError, match="Field 'released' must be a valid date"):
        decode_values({"released": text}, schema)


def test_unknown_and_non_string_values_pass_through(schema):
    raw = {"released": 20240101, "other": "2024-01-01"}
    assert decode_values(raw, schema) == raw


def test_encode_values():
    encoded = encode_values({
        "d": date(2024, 5, 1),
        "dt": datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        "n": 3,
        "b": False,
    })
    assert encoded == {"d": "2024-05-01", "dt": "2024-05-01T09:30:00+00:00", "n": 3, "b": False}


def test_decode_inverts_encode(schema):
    typed = {"released": date(1999, 12, 31), "label": "x"}
    assert decode_values(encode_values(typed), schema) == typed
