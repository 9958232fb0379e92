"""
Unit tests for Go identifier helpers.
"""

import pytest

from gomorph.gosrc.naming import (
    capitalize_first_letter,
    lowercase_first_letter,
    overloaded_name,
    safe_identifier,
    split_type_arguments,
    to_identifier,
    type_name_fragment,
)


class TestFirstLetter:
    """Tests for first-letter case flipping."""

    def test_capitalize(self):
        assert capitalize_first_letter("area") == "Area"
        assert capitalize_first_letter("Area") == "Area"
        assert capitalize_first_letter("") == ""

    def test_lowercase(self):
        assert lowercase_first_letter("Point") == "point"
        assert lowercase_first_letter("") == ""

    def test_to_identifier_follows_visibility(self):
        assert to_identifier("getValue", True) == "GetValue"
        assert to_identifier("GetValue", False) == "getValue"


class TestSafeIdentifier:
    """Java names that collide with Go keywords."""

    @pytest.mark.parametrize("name", ["type", "range", "func", "map", "chan"])
    def test_keywords_are_suffixed(self, name):
        assert safe_identifier(name) == name + "_"

    def test_plain_names_unchanged(self):
        assert safe_identifier("value") == "value"


class TestTypeNameFragment:
    """Go types turned into identifier fragments for overload mangling."""

    @pytest.mark.parametrize(
        "go_type,expected",
        [
            ("int", "Int"),
            ("float64", "Float64"),
            ("[]string", "StringSlice"),
            ("[][]int", "IntSliceSlice"),
            ("map[string]int", "MapStringInt"),
            ("map[string][]int", "MapStringIntSlice"),
            ("interface{}", "Any"),
            ("*Node", "Node"),
            ("...int", "Int"),
            ("Box[int, string]", "BoxIntString"),
            ("internal.STNode", "STNode"),
        ],
    )
    def test_fragments(self, go_type, expected):
        assert type_name_fragment(go_type) == expected

    def test_split_type_arguments_respects_nesting(self):
        assert split_type_arguments("K, map[A]B, C") == ["K", "map[A]B", "C"]
        assert split_type_arguments("Pair[A, B], int") == ["Pair[A, B]", "int"]


class TestOverloadedName:
    """Mangled names for later overloads."""

    def test_without_arguments(self):
        assert overloaded_name("reset", []) == "resetWithoutArgs"

    def test_with_arguments(self):
        assert overloaded_name("bar", ["Baz"]) == "barWithBaz"
        assert overloaded_name("add", ["int", "[]string"]) == "addWithIntStringSlice"
