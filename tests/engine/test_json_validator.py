"""Unit tests for the JSON type-narrowing decoders."""

from __future__ import annotations

import pytest

from ngschematics.engine import json_validator as jv


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), (False, False), (1, None), ("true", None), (None, None)],
)
def test_as_bool(value: object, expected: bool | None) -> None:
    assert jv.as_bool(value) is expected


def test_as_number_excludes_booleans() -> None:
    assert jv.as_number(3) == 3
    assert jv.as_number(2.5) == 2.5
    assert jv.as_number(True) is None
    assert jv.as_number("3") is None


def test_as_string() -> None:
    assert jv.as_string("") == ""
    assert jv.as_string(["a"]) is None


def test_as_list_with_item_type() -> None:
    assert jv.as_list([1, "a"]) == [1, "a"]
    assert jv.as_list(["a", "b"], "string") == ["a", "b"]
    assert jv.as_list(["a", 1], "string") is None
    assert jv.as_list({"a": 1}) is None
    assert jv.as_string_list([]) == []


def test_as_object() -> None:
    assert jv.as_object({"a": 1}) == {"a": 1}
    assert jv.as_object([("a", 1)]) is None


def test_as_scalar_strings_renders_cli_values() -> None:
    assert jv.as_scalar_strings(["OnPush", 2, True, False, 1.5, {"a": 1}, None]) == [
        "OnPush",
        "2",
        "true",
        "false",
        "1.5",
    ]
    assert jv.as_scalar_strings("OnPush") is None


def test_get_path() -> None:
    raw = {"cli": {"defaultCollection": "@angular/material"}, "projects": ["not", "an", "object"]}
    assert jv.get_path(raw, "cli", "defaultCollection") == "@angular/material"
    assert jv.get_path(raw, "cli", "missing") is None
    assert jv.get_path(raw, "projects", "app") is None
    assert jv.get_path("not an object", "cli") is None
    assert jv.get_path(raw) is raw
