"""Tests for field path resolution and the field catalog."""

import pytest

from fixfirst.rules.fields import FIELD_CATALOG, MISSING, available_fields, resolve_field_path


def test_resolve_nested_value() -> None:
    assert resolve_field_path({"a": {"b": {"c": 5}}}, "a.b.c") == 5


def test_resolve_through_scalar_is_missing() -> None:
    assert resolve_field_path({"a": {"b": 5}}, "a.b.c") is MISSING


def test_resolve_stops_at_null() -> None:
    assert resolve_field_path({"a": None}, "a.b") is MISSING
    assert resolve_field_path({"a": None}, "a") is None


def test_resolve_on_non_mapping_root() -> None:
    assert resolve_field_path(None, "a") is MISSING
    assert resolve_field_path(7, "a") is MISSING


def test_resolve_sequence_index_and_length() -> None:
    data = {"meta": {"keywords": ["seo", "audit"], "title": "Home"}}
    assert resolve_field_path(data, "meta.keywords.1") == "audit"
    assert resolve_field_path(data, "meta.keywords.5") is MISSING
    assert resolve_field_path(data, "meta.keywords.length") == 2
    assert resolve_field_path(data, "meta.title.length") == 4


@pytest.mark.parametrize("key", ["01", "²", "١", "-1", "+1", " 1"])
def test_non_canonical_index_is_missing(key: str) -> None:
    assert resolve_field_path({"a": ["x", "y"]}, f"a.{key}") is MISSING


def test_stored_length_key_wins_over_computed() -> None:
    assert resolve_field_path({"meta": {"title": {"length": 70}}}, "meta.title.length") == 70


def test_catalog_shape() -> None:
    fields = available_fields()
    assert len(fields) == len(FIELD_CATALOG) == 22
    assert fields["performance.score"] == {
        "type": "number",
        "description": "Performance score (0-100)",
    }
    assert fields["meta.keywords"]["type"] == "array"
    assert fields["structuredData.present"]["type"] == "boolean"
