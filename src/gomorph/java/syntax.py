"""
Java syntax arena.

tree-sitter produces the concrete syntax tree; this module copies it into an
arena of ``SyntaxNode`` records addressed by integer index. Caches and
failure tables are keyed by those indices, which stay valid for the lifetime
of the ``SyntaxTree`` regardless of how tree-sitter manages its own nodes.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional


class NodeKind(str, Enum):
    """Grammar node kinds the converters dispatch on."""

    PROGRAM = "program"
    ERROR = "ERROR"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    PACKAGE_DECLARATION = "package_declaration"
    IMPORT_DECLARATION = "import_declaration"
    MODULE_DECLARATION = "module_declaration"

    # Declarations
    CLASS_DECLARATION = "class_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    ENUM_DECLARATION = "enum_declaration"
    RECORD_DECLARATION = "record_declaration"
    ANNOTATION_TYPE_DECLARATION = "annotation_type_declaration"
    CLASS_BODY = "class_body"
    INTERFACE_BODY = "interface_body"
    ENUM_BODY = "enum_body"
    ENUM_BODY_DECLARATIONS = "enum_body_declarations"
    ENUM_CONSTANT = "enum_constant"
    FIELD_DECLARATION = "field_declaration"
    CONSTANT_DECLARATION = "constant_declaration"
    METHOD_DECLARATION = "method_declaration"
    CONSTRUCTOR_DECLARATION = "constructor_declaration"
    COMPACT_CONSTRUCTOR_DECLARATION = "compact_constructor_declaration"
    STATIC_INITIALIZER = "static_initializer"
    MODIFIERS = "modifiers"
    SUPERCLASS = "superclass"
    SUPER_INTERFACES = "super_interfaces"
    EXTENDS_INTERFACES = "extends_interfaces"
    TYPE_LIST = "type_list"
    TYPE_PARAMETERS = "type_parameters"
    TYPE_PARAMETER = "type_parameter"
    FORMAL_PARAMETERS = "formal_parameters"
    FORMAL_PARAMETER = "formal_parameter"
    SPREAD_PARAMETER = "spread_parameter"
    RECEIVER_PARAMETER = "receiver_parameter"
    THROWS = "throws"
    VARIABLE_DECLARATOR = "variable_declarator"

    # Types
    TYPE_IDENTIFIER = "type_identifier"
    SCOPED_TYPE_IDENTIFIER = "scoped_type_identifier"
    GENERIC_TYPE = "generic_type"
    TYPE_ARGUMENTS = "type_arguments"
    ARRAY_TYPE = "array_type"
    INTEGRAL_TYPE = "integral_type"
    FLOATING_POINT_TYPE = "floating_point_type"
    BOOLEAN_TYPE = "boolean_type"
    VOID_TYPE = "void_type"
    WILDCARD = "wildcard"
    ANNOTATED_TYPE = "annotated_type"
    DIMENSIONS = "dimensions"
    DIMENSIONS_EXPR = "dimensions_expr"

    # Statements
    BLOCK = "block"
    EXPRESSION_STATEMENT = "expression_statement"
    LOCAL_VARIABLE_DECLARATION = "local_variable_declaration"
    IF_STATEMENT = "if_statement"
    WHILE_STATEMENT = "while_statement"
    DO_STATEMENT = "do_statement"
    FOR_STATEMENT = "for_statement"
    ENHANCED_FOR_STATEMENT = "enhanced_for_statement"
    RETURN_STATEMENT = "return_statement"
    THROW_STATEMENT = "throw_statement"
    TRY_STATEMENT = "try_statement"
    TRY_WITH_RESOURCES_STATEMENT = "try_with_resources_statement"
    RESOURCE_SPECIFICATION = "resource_specification"
    RESOURCE = "resource"
    CATCH_CLAUSE = "catch_clause"
    CATCH_FORMAL_PARAMETER = "catch_formal_parameter"
    CATCH_TYPE = "catch_type"
    FINALLY_CLAUSE = "finally_clause"
    SWITCH_BLOCK = "switch_block"
    SWITCH_BLOCK_STATEMENT_GROUP = "switch_block_statement_group"
    SWITCH_RULE = "switch_rule"
    SWITCH_LABEL = "switch_label"
    YIELD_STATEMENT = "yield_statement"
    BREAK_STATEMENT = "break_statement"
    CONTINUE_STATEMENT = "continue_statement"
    ASSERT_STATEMENT = "assert_statement"
    LABELED_STATEMENT = "labeled_statement"
    EXPLICIT_CONSTRUCTOR_INVOCATION = "explicit_constructor_invocation"
    EMPTY_STATEMENT = ";"

    # Expressions
    IDENTIFIER = "identifier"
    THIS = "this"
    SUPER = "super"
    FIELD_ACCESS = "field_access"
    METHOD_INVOCATION = "method_invocation"
    ARGUMENT_LIST = "argument_list"
    OBJECT_CREATION_EXPRESSION = "object_creation_expression"
    ARRAY_CREATION_EXPRESSION = "array_creation_expression"
    ARRAY_INITIALIZER = "array_initializer"
    ARRAY_ACCESS = "array_access"
    ASSIGNMENT_EXPRESSION = "assignment_expression"
    BINARY_EXPRESSION = "binary_expression"
    UNARY_EXPRESSION = "unary_expression"
    UPDATE_EXPRESSION = "update_expression"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    CAST_EXPRESSION = "cast_expression"
    INSTANCEOF_EXPRESSION = "instanceof_expression"
    TERNARY_EXPRESSION = "ternary_expression"
    SWITCH_EXPRESSION = "switch_expression"
    LAMBDA_EXPRESSION = "lambda_expression"
    METHOD_REFERENCE = "method_reference"
    CLASS_LITERAL = "class_literal"
    DECIMAL_INTEGER_LITERAL = "decimal_integer_literal"
    HEX_INTEGER_LITERAL = "hex_integer_literal"
    OCTAL_INTEGER_LITERAL = "octal_integer_literal"
    BINARY_INTEGER_LITERAL = "binary_integer_literal"
    DECIMAL_FLOATING_POINT_LITERAL = "decimal_floating_point_literal"
    HEX_FLOATING_POINT_LITERAL = "hex_floating_point_literal"
    STRING_LITERAL = "string_literal"
    CHARACTER_LITERAL = "character_literal"
    TRUE = "true"
    FALSE = "false"
    NULL_LITERAL = "null_literal"


COMMENT_KINDS = frozenset({NodeKind.LINE_COMMENT, NodeKind.BLOCK_COMMENT})


@dataclass(eq=False)
class SyntaxNode:
    """One node of the arena. ``id`` is its index in ``SyntaxTree.nodes``."""

    tree: "SyntaxTree" = field(repr=False)
    id: int
    kind: str
    is_named: bool
    start_byte: int
    end_byte: int
    start_point: tuple[int, int]
    end_point: tuple[int, int]
    parent_id: Optional[int] = None
    child_ids: list[int] = field(default_factory=list)
    child_fields: list[Optional[str]] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.tree.source[self.start_byte:self.end_byte].decode("utf-8", errors="replace")

    @property
    def parent(self) -> Optional["SyntaxNode"]:
        if self.parent_id is None:
            return None
        return self.tree.nodes[self.parent_id]

    @property
    def children(self) -> list["SyntaxNode"]:
        return [self.tree.nodes[child_id] for child_id in self.child_ids]

    @property
    def named_children(self) -> list["SyntaxNode"]:
        return [child for child in self.children if child.is_named]

    def children_by_field_name(self, name: str) -> list["SyntaxNode"]:
        return [
            self.tree.nodes[child_id]
            for child_id, field_name in zip(self.child_ids, self.child_fields)
            if field_name == name
        ]

    def child_by_field_name(self, name: str) -> Optional["SyntaxNode"]:
        for child_id, field_name in zip(self.child_ids, self.child_fields):
            if field_name == name:
                return self.tree.nodes[child_id]
        return None

    def children_of_kind(self, kind: str) -> list["SyntaxNode"]:
        return [child for child in self.children if child.kind == kind]

    def first_child_of_kind(self, kind: str) -> Optional["SyntaxNode"]:
        for child in self.children:
            if child.kind == kind:
                return child
        return None

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal of this subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator["SyntaxNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def location(self) -> tuple[int, int]:
        """1-based (row, column) of the first character."""
        return self.start_point[0] + 1, self.start_point[1] + 1

    def to_sexp(self) -> str:
        """S-expression dump of the named structure, tree-sitter style."""
        if not self.is_named:
            return f'("{self.kind}")'
        parts = []
        for child, field_name in zip(self.children, self.child_fields):
            if not child.is_named:
                continue
            prefix = f"{field_name}: " if field_name else ""
            parts.append(prefix + child.to_sexp())
        if not parts:
            return f"({self.kind})"
        return f"({self.kind} {' '.join(parts)})"


class SyntaxTree:
    """Arena holding every node of one parsed compilation unit."""

    def __init__(self, source: bytes):
        self.source = source
        self.nodes: list[SyntaxNode] = []

    @property
    def root(self) -> SyntaxNode:
        return self.nodes[0]

    def node(self, node_id: int) -> SyntaxNode:
        return self.nodes[node_id]

    def __len__(self) -> int:
        return len(self.nodes)

    def _add(self, ts_node, parent_id: Optional[int], field_name: Optional[str]) -> int:
        node_id = len(self.nodes)
        self.nodes.append(
            SyntaxNode(
                tree=self,
                id=node_id,
                kind=ts_node.type,
                is_named=ts_node.is_named,
                start_byte=ts_node.start_byte,
                end_byte=ts_node.end_byte,
                start_point=(ts_node.start_point[0], ts_node.start_point[1]),
                end_point=(ts_node.end_point[0], ts_node.end_point[1]),
                parent_id=parent_id,
            )
        )
        if parent_id is not None:
            parent = self.nodes[parent_id]
            parent.child_ids.append(node_id)
            parent.child_fields.append(field_name)
        return node_id

    @classmethod
    def from_tree_sitter(cls, ts_tree, source: bytes) -> "SyntaxTree":
        """Copy a tree-sitter tree into a new arena, iteratively with a cursor."""
        tree = cls(source)
        cursor = ts_tree.walk()
        ancestors: list[int] = []
        while True:
            parent_id = ancestors[-1] if ancestors else None
            field_name = cursor.field_name if parent_id is not None else None
            node_id = tree._add(cursor.node, parent_id, field_name)
            if cursor.goto_first_child():
                ancestors.append(node_id)
                continue
            while not cursor.goto_next_sibling():
                if not ancestors:
                    return tree
                cursor.goto_parent()
                ancestors.pop()


# =============================================================================
# Parsing (using tree-sitter)
# =============================================================================


class JavaParser:
    """Java parser using tree-sitter, producing ``SyntaxTree`` arenas."""

    def __init__(self):
        self._parser = None

    def _get_parser(self):
        """Lazy initialization of tree-sitter parser."""
        if self._parser is None:
            try:
                import tree_sitter_java as tsjava
                from tree_sitter import Language, Parser

                java_language = Language(tsjava.language())
                self._parser = Parser(java_language)
            except ImportError:
                raise RuntimeError(
                    "tree-sitter-java not installed. Run: pip install tree-sitter-java"
                )
        return self._parser

    def parse_source(self, source_code: str | bytes) -> SyntaxTree:
        """Parse Java source code into an arena."""
        source = source_code.encode("utf-8") if isinstance(source_code, str) else source_code
        ts_tree = self._get_parser().parse(source)
        return SyntaxTree.from_tree_sitter(ts_tree, source)

    def parse_file(self, file_path: Path) -> SyntaxTree:
        """Parse a Java file into an arena."""
        return self.parse_source(file_path.read_bytes())


_default_parser = JavaParser()


def parse_java(source_code: str | bytes) -> SyntaxTree:
    return _default_parser.parse_source(source_code)
