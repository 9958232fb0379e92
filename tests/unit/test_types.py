"""
Unit tests for the Java to Go type mapper.
"""

import pytest

from gomorph.config.models import MigrationConfig
from gomorph.java.context import MigrationContext
from gomorph.java.errors import GenericArityError
from gomorph.java.syntax import NodeKind, parse_java
from gomorph.java.types import parse_modifiers, parse_type, type_parameter_names


def map_java_type(java_type: str, config: MigrationConfig | None = None) -> str:
    """Map the declared type of a field ``f`` in a throwaway class."""
    tree = parse_java(f"class T {{ {java_type} f; }}")
    ctx = MigrationContext(tree, config=config)
    field = next(n for n in tree.root.walk() if n.kind == NodeKind.FIELD_DECLARATION)
    return parse_type(ctx, field.child_by_field_name("type"))


class TestPrimitiveAndBoxedTypes:
    @pytest.mark.parametrize(
        "java_type,expected",
        [
            ("int", "int"),
            ("long", "int64"),
            ("short", "int16"),
            ("byte", "int8"),
            ("char", "rune"),
            ("float", "float32"),
            ("double", "float64"),
            ("boolean", "bool"),
            ("String", "string"),
            ("Integer", "int"),
            ("Long", "int64"),
            ("Boolean", "bool"),
            ("Object", "interface{}"),
        ],
    )
    def test_mapping(self, java_type, expected):
        assert map_java_type(java_type) == expected


class TestStructuralTypes:
    def test_arrays(self):
        assert map_java_type("int[]") == "[]int"
        assert map_java_type("String[][]") == "[][]string"

    def test_list_like(self):
        assert map_java_type("List<String>") == "[]string"
        assert map_java_type("ArrayList<Integer>") == "[]int"
        assert map_java_type("Deque<Long>") == "[]int64"

    def test_map_like(self):
        assert map_java_type("Map<String, Integer>") == "map[string]int"
        assert map_java_type("HashMap<String, List<Integer>>") == "map[string][]int"

    def test_qualified_generic(self):
        assert map_java_type("java.util.List<String>") == "[]string"

    def test_user_generic(self):
        assert map_java_type("Box<String>") == "Box[string]"
        assert map_java_type("Pair<String, Integer>") == "Pair[string, int]"

    def test_wildcard(self):
        assert map_java_type("List<?>") == "[]any"

    def test_list_with_two_parameters(self):
        with pytest.raises(GenericArityError):
            map_java_type("List<String, Integer>")

    def test_map_with_three_parameters(self):
        with pytest.raises(GenericArityError):
            map_java_type("Map<String, Integer, Long>")


class TestPrefixesAndOverrides:
    def test_strip_prefix(self):
        assert map_java_type("AbstractNode") == "Node"

    def test_prefix_needs_a_following_capital(self):
        assert map_java_type("Abstraction") == "Abstraction"

    def test_internal_prefix(self):
        assert map_java_type("STNode") == "internal.STNode"

    def test_user_mapping_wins(self):
        config = MigrationConfig(type_mappings={"BigDecimal": "float64", "String": "[]byte"})
        assert map_java_type("BigDecimal", config) == "float64"
        assert map_java_type("String", config) == "[]byte"

    def test_custom_prefixes(self):
        config = MigrationConfig(strip_type_prefixes=["Base"], internal_type_prefixes={"Js": "jsvm"})
        assert map_java_type("BaseWidget", config) == "Widget"
        assert map_java_type("JsValue", config) == "jsvm.JsValue"
        assert map_java_type("AbstractNode", config) == "AbstractNode"


class TestModifiers:
    def test_class_modifiers(self):
        tree = parse_java("public abstract class Shape {}")
        node = next(n for n in tree.root.walk() if n.kind == NodeKind.CLASS_DECLARATION)
        mods = parse_modifiers(node)
        assert mods.is_public
        assert mods.is_abstract
        assert not mods.is_static

    def test_package_private(self):
        tree = parse_java("class Shape {}")
        node = next(n for n in tree.root.walk() if n.kind == NodeKind.CLASS_DECLARATION)
        assert not parse_modifiers(node).has_access_modifier

    def test_type_parameter_names_drop_bounds(self):
        tree = parse_java("class Box<K extends Comparable<K>, V> {}")
        node = next(n for n in tree.root.walk() if n.kind == NodeKind.CLASS_DECLARATION)
        assert type_parameter_names(node.child_by_field_name("type_parameters")) == ["K", "V"]
