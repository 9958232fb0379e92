"""
Type mapper and modifier parsing.

Maps Java type expressions to Go type expressions. User overrides from the
configuration are consulted first, then the reserved-prefix rules, then the
built-in tables, then the structural rules for arrays and generics.
"""

from enum import IntFlag
from typing import Optional

from gomorph.java.context import MigrationContext
from gomorph.java.errors import GenericArityError, TypeMappingError, require_field
from gomorph.java.syntax import NodeKind, SyntaxNode

# =============================================================================
# Modifiers
# =============================================================================


class Modifiers(IntFlag):
    NONE = 0
    PUBLIC = 1
    PRIVATE = 2
    PROTECTED = 4
    STATIC = 8
    FINAL = 16
    ABSTRACT = 32
    DEFAULT = 64

    @property
    def is_public(self) -> bool:
        return bool(self & Modifiers.PUBLIC)

    @property
    def is_static(self) -> bool:
        return bool(self & Modifiers.STATIC)

    @property
    def is_abstract(self) -> bool:
        return bool(self & Modifiers.ABSTRACT)

    @property
    def has_access_modifier(self) -> bool:
        return bool(self & (Modifiers.PUBLIC | Modifiers.PRIVATE | Modifiers.PROTECTED))


_MODIFIER_WORDS = {
    "public": Modifiers.PUBLIC,
    "private": Modifiers.PRIVATE,
    "protected": Modifiers.PROTECTED,
    "static": Modifiers.STATIC,
    "final": Modifiers.FINAL,
    "abstract": Modifiers.ABSTRACT,
    "default": Modifiers.DEFAULT,
}


def parse_modifiers(node: SyntaxNode) -> Modifiers:
    """Modifiers of a declaration node; annotations are ignored."""
    modifiers_node = node.first_child_of_kind(NodeKind.MODIFIERS)
    mods = Modifiers.NONE
    if modifiers_node is None:
        return mods
    for child in modifiers_node.children:
        mods |= _MODIFIER_WORDS.get(child.kind, Modifiers.NONE)
    return mods


# =============================================================================
# Type names
# =============================================================================

_BUILTIN_TYPES = {
    "Object": "interface{}",
    "String": "string",
    "CharSequence": "string",
    "Integer": "int",
    "Long": "int64",
    "Short": "int16",
    "Byte": "int8",
    "Character": "rune",
    "Boolean": "bool",
    "Double": "float64",
    "Float": "float32",
}

_PRIMITIVE_TYPES = {
    "int": "int",
    "long": "int64",
    "short": "int16",
    "byte": "int8",
    "char": "rune",
    "float": "float32",
    "double": "float64",
    "boolean": "bool",
}

LIST_TYPES = frozenset(
    {"List", "ArrayList", "LinkedList", "Collection", "Deque", "ArrayDeque", "Queue", "Stack", "Iterable"}
)
MAP_TYPES = frozenset({"Map", "HashMap", "LinkedHashMap", "TreeMap"})

ANY_TYPE = "interface{}"


def _prefixed(name: str, prefix: str) -> bool:
    rest = name[len(prefix):]
    return name.startswith(prefix) and bool(rest) and rest[0].isupper()


def map_type_name(ctx: MigrationContext, name: str) -> str:
    """Map a simple Java type name."""
    if name in ctx.type_mappings:
        return ctx.type_mappings[name]
    if ctx.is_type_parameter(name):
        return name
    if name in ctx.declared_types:
        return ctx.declared_types[name].go_name
    for prefix in ctx.config.strip_type_prefixes:
        if _prefixed(name, prefix):
            return name[len(prefix):]
    for prefix, package in ctx.config.internal_type_prefixes.items():
        if _prefixed(name, prefix):
            return f"{package}.{name}"
    if name in _PRIMITIVE_TYPES:
        return _PRIMITIVE_TYPES[name]
    return _BUILTIN_TYPES.get(name, name)


def _last_type_identifier(node: SyntaxNode) -> Optional[str]:
    name = None
    for child in node.children:
        if child.kind == NodeKind.TYPE_IDENTIFIER:
            name = child.text
    return name


def _generic_type(ctx: MigrationContext, node: SyntaxNode) -> str:
    base_name = None
    type_params: list[str] = []
    for child in node.children:
        if child.kind == NodeKind.TYPE_IDENTIFIER:
            base_name = child.text
        elif child.kind == NodeKind.SCOPED_TYPE_IDENTIFIER:
            base_name = _last_type_identifier(child)
        elif child.kind == NodeKind.TYPE_ARGUMENTS:
            type_params = [parse_type(ctx, arg) for arg in child.named_children]
    if base_name is None:
        raise TypeMappingError("generic type without a base type name", node)

    if base_name in ctx.type_mappings:
        return ctx.type_mappings[base_name]
    if base_name in LIST_TYPES:
        if len(type_params) > 1:
            raise GenericArityError(f"{base_name} can have only one type parameter", node)
        return "[]" + (type_params[0] if type_params else ANY_TYPE)
    if base_name in MAP_TYPES:
        if len(type_params) > 2:
            raise GenericArityError(f"{base_name} can have at most two type parameters", node)
        key = type_params[0] if type_params else ANY_TYPE
        value = type_params[1] if len(type_params) == 2 else ANY_TYPE
        return f"map[{key}]{value}"
    mapped = map_type_name(ctx, base_name)
    if not type_params:
        return mapped
    return f"{mapped}[{', '.join(type_params)}]"


def try_parse_type(ctx: MigrationContext, node: SyntaxNode) -> Optional[str]:
    """
    Map a type node to a Go type.

    Returns:
        The Go type, or None when ``node`` is not a type expression (including
        ``void``, which has no Go counterpart).
    """
    kind = node.kind
    if kind == NodeKind.TYPE_IDENTIFIER:
        return map_type_name(ctx, node.text)
    if kind == NodeKind.SCOPED_TYPE_IDENTIFIER:
        name = _last_type_identifier(node)
        if name is None:
            raise TypeMappingError("scoped type without a type name", node)
        return map_type_name(ctx, name)
    if kind in (NodeKind.INTEGRAL_TYPE, NodeKind.FLOATING_POINT_TYPE, NodeKind.BOOLEAN_TYPE):
        return _PRIMITIVE_TYPES[node.text]
    if kind == NodeKind.ARRAY_TYPE:
        element = require_field(node, "element")
        dimensions = node.child_by_field_name("dimensions")
        depth = dimensions.text.count("[") if dimensions is not None else 1
        return "[]" * depth + parse_type(ctx, element)
    if kind == NodeKind.GENERIC_TYPE:
        return _generic_type(ctx, node)
    if kind == NodeKind.WILDCARD:
        return "any"
    if kind == NodeKind.ANNOTATED_TYPE:
        for child in node.named_children:
            ty = try_parse_type(ctx, child)
            if ty is not None:
                return ty
        raise TypeMappingError("annotated type without a type", node)
    return None


def parse_type(ctx: MigrationContext, node: SyntaxNode) -> str:
    ty = try_parse_type(ctx, node)
    if ty is None:
        raise TypeMappingError(f"unable to map type node {node.kind}: {node.text}", node)
    return ty


def is_slice_type(go_type: Optional[str]) -> bool:
    return bool(go_type) and go_type.startswith("[]")


def is_map_type(go_type: Optional[str]) -> bool:
    return bool(go_type) and go_type.startswith("map[")


def slice_element(go_type: str) -> str:
    return go_type[2:]


def type_parameter_names(node: Optional[SyntaxNode]) -> list[str]:
    """Names declared by a ``type_parameters`` node; bounds are dropped."""
    if node is None:
        return []
    names = []
    for param in node.children_of_kind(NodeKind.TYPE_PARAMETER):
        for child in param.children:
            if child.kind in (NodeKind.TYPE_IDENTIFIER, NodeKind.IDENTIFIER):
                names.append(child.text)
                break
    return names
