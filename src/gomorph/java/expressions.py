"""
Expression lowering.

Every converter returns ``(expression, hoisted)``: the Go expression plus the
statements that must run before it (assignments used as values, ambiguity
comments, pattern bindings). Self references go through the current
``Receiver`` so the same code serves ordinary methods, interface default
methods, abstract-class default methods and record methods.
"""

import logging
import re
from typing import Callable, Optional

from gomorph.gosrc.model import (
    NIL,
    AssignStatement,
    BinaryExpression,
    CallExpression,
    CallStatement,
    CastExpression,
    CommentStmt,
    CompositeLiteral,
    Expression,
    FieldRef,
    GoExpression,
    GoStatement,
    IncDecStatement,
    IndexExpression,
    Statement,
    TernaryExpression,
    TypeAssertion,
    TypeCheckExpression,
    UnaryExpression,
    VarRef,
)
from gomorph.gosrc.naming import capitalize_first_letter, safe_identifier, to_identifier
from gomorph.java.context import MigrationContext, ReceiverKind
from gomorph.java.errors import StructuralError, UnhandledConstructError, require_field, unhandled_child
from gomorph.java.overloads import (
    Resolution,
    constructor_ambiguity_comment,
    method_ambiguity_comment,
    resolve_constructor,
    resolve_method,
)
from gomorph.java.syntax import COMMENT_KINDS, NodeKind, SyntaxNode
from gomorph.java.types import (
    ANY_TYPE,
    is_map_type,
    is_slice_type,
    map_type_name,
    parse_type,
    slice_element,
)

logger = logging.getLogger(__name__)

ExprResult = tuple[Expression, list[Statement]]

_CONVERSION_TYPES = frozenset({
    "int", "int8", "int16", "int32", "int64", "uint", "uint8", "byte",
    "rune", "float32", "float64", "string", "bool",
})

_OPERATORS = {">>>": ">>", "~": "^"}

_PRINT_FUNCTIONS = {"println": "Println", "print": "Print", "printf": "Printf"}


def convert_expression(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    handler = _HANDLERS.get(node.kind)
    if handler is None:
        raise unhandled_child(node, "expression")
    return handler(ctx, node)


def argument_nodes(node: SyntaxNode) -> list[SyntaxNode]:
    return [child for child in node.named_children if child.kind not in COMMENT_KINDS]


# =============================================================================
# Receiver-aware references
# =============================================================================


def self_expression(ctx: MigrationContext, node: Optional[SyntaxNode] = None) -> Expression:
    if not ctx.receiver.has_self:
        raise StructuralError("reference to this in a static context", node)
    return VarRef(ctx.receiver.self_expr)


def _getter(ctx: MigrationContext, field_name: str) -> Expression:
    return CallExpression(FieldRef(self_expression(ctx), "Get" + capitalize_first_letter(field_name)))


def self_field(ctx: MigrationContext, field_name: str) -> Expression:
    """Read of an instance field of the current receiver."""
    receiver = ctx.receiver
    if receiver.kind == ReceiverKind.ABSTRACT_DEFAULT and field_name in receiver.fields:
        return _getter(ctx, field_name)
    return FieldRef(self_expression(ctx), receiver.fields.get(field_name, field_name))


def resolve_name(ctx: MigrationContext, name: str) -> Expression:
    """A bare identifier: local, field of the receiver, enum constant, or anything else."""
    if ctx.is_local(name):
        return VarRef(safe_identifier(name))
    receiver = ctx.receiver
    if receiver.has_self and name in receiver.fields:
        return self_field(ctx, name)
    if name in ctx.enum_constants:
        return VarRef(ctx.enum_constants[name])
    return VarRef(safe_identifier(name))


def field_setter(ctx: MigrationContext, node: SyntaxNode) -> Optional[Expression]:
    """Setter to call instead of assigning, for fields behind an abstract-class data interface."""
    receiver = ctx.receiver
    if receiver.kind != ReceiverKind.ABSTRACT_DEFAULT:
        return None
    name = None
    if node.kind == NodeKind.IDENTIFIER and not ctx.is_local(node.text):
        name = node.text
    elif node.kind == NodeKind.FIELD_ACCESS:
        target = node.child_by_field_name("object")
        if target is not None and target.kind == NodeKind.THIS:
            name = require_field(node, "field").text
    if name is None or name not in receiver.fields:
        return None
    return FieldRef(self_expression(ctx), "Set" + capitalize_first_letter(name))


def assign_to(ctx: MigrationContext, target_node: SyntaxNode, value: Expression) -> list[Statement]:
    setter = field_setter(ctx, target_node)
    if setter is not None:
        return [CallStatement(CallExpression(setter, [value]))]
    target, hoisted = convert_expression(ctx, target_node)
    return hoisted + [AssignStatement(target, value)]


def declared_kind(ctx: MigrationContext, name: str) -> Optional[str]:
    if ctx.is_local(name):
        return None
    declared = ctx.declared_types.get(name)
    return declared.kind if declared is not None else None


# =============================================================================
# Names and member access
# =============================================================================


def _convert_identifier(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    return resolve_name(ctx, node.text), []


def _convert_this(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    return self_expression(ctx, node), []


def _convert_field_access(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    target = require_field(node, "object")
    field_name = require_field(node, "field").text
    if target.kind == NodeKind.THIS:
        return self_field(ctx, field_name), []
    if target.kind == NodeKind.SUPER:
        return FieldRef(self_expression(ctx, node), field_name), []
    if target.kind == NodeKind.IDENTIFIER:
        kind = declared_kind(ctx, target.text)
        if kind == NodeKind.ENUM_DECLARATION:
            return VarRef(f"{map_type_name(ctx, target.text)}_{field_name}"), []
        if kind is not None:
            return VarRef(field_name), []
    if field_name == "length" and not (target.kind == NodeKind.IDENTIFIER and target.text[:1].isupper()):
        value, hoisted = convert_expression(ctx, target)
        return CallExpression("len", [value]), hoisted
    value, hoisted = convert_expression(ctx, target)
    return FieldRef(value, field_name), hoisted


def _convert_array_access(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    array, hoisted = convert_expression(ctx, require_field(node, "array"))
    index, index_hoisted = convert_expression(ctx, require_field(node, "index"))
    return IndexExpression(array, index), hoisted + index_hoisted


# =============================================================================
# Calls
# =============================================================================


def method_name(ctx: MigrationContext, resolution: Resolution, on_self: bool) -> str:
    if on_self and ctx.receiver.export_methods:
        return capitalize_first_letter(resolution.name)
    if resolution.signature is None:
        if on_self and ctx.receiver.kind in (ReceiverKind.ABSTRACT_DEFAULT, ReceiverKind.INTERFACE_DEFAULT):
            return capitalize_first_letter(resolution.name)
        return resolution.name
    return to_identifier(resolution.name, resolution.signature.public)


def _with_ambiguity(resolution: Resolution, name: str, argc: int, hoisted: list[Statement]) -> list[Statement]:
    if resolution.ambiguous:
        return [method_ambiguity_comment(name, argc)] + hoisted
    return hoisted


def _self_call(
    ctx: MigrationContext, node: SyntaxNode, resolution: Resolution, name: str, args: list[Expression]
) -> Expression:
    receiver = ctx.receiver
    signature = resolution.signature
    if receiver.kind == ReceiverKind.RECORD and not args and name in receiver.components and signature is None:
        return FieldRef(self_expression(ctx, node), receiver.fields[name])
    if (signature is not None and signature.static) or not receiver.has_self:
        return CallExpression(method_name(ctx, resolution, on_self=False), args)
    if name == "name" and not args and signature is None:
        return CallExpression(FieldRef(self_expression(ctx, node), "Name"))
    return CallExpression(FieldRef(self_expression(ctx, node), method_name(ctx, resolution, on_self=True)), args)


def _declares_method(ctx: MigrationContext, name: str, argc: int) -> bool:
    return any(len(signature.argument_types) == argc for signature in ctx.methods.get(name, []))


def _java_idiom(
    ctx: MigrationContext, target: Optional[SyntaxNode], name: str, arg_nodes: list[SyntaxNode]
) -> Optional[ExprResult]:
    """Rewrites for java.lang/java.util calls that have a direct Go spelling."""
    if target is None or target.kind in (NodeKind.THIS, NodeKind.SUPER):
        return None
    argc = len(arg_nodes)
    target_text = target.text

    if target_text == "Arrays" and name == "asList":
        args, hoisted = convert_nodes(ctx, arg_nodes)
        ty = ctx.expected_type if is_slice_type(ctx.expected_type) else "[]" + ANY_TYPE
        return CompositeLiteral(ty, args), hoisted
    if target_text in ("System.out", "System.err") and name in _PRINT_FUNCTIONS:
        args, hoisted = convert_nodes(ctx, arg_nodes)
        ctx.require_import("fmt")
        if target_text == "System.err":
            ctx.require_import("os")
            return CallExpression(f"fmt.F{_PRINT_FUNCTIONS[name].lower()}", [VarRef("os.Stderr"), *args]), hoisted
        return CallExpression(f"fmt.{_PRINT_FUNCTIONS[name]}", args), hoisted

    user_method = name in ctx.methods
    if name == "equals" and argc == 1:
        value, hoisted = convert_expression(ctx, target)
        other, other_hoisted = convert_expression(ctx, arg_nodes[0])
        return BinaryExpression(value, "==", other), hoisted + other_hoisted
    if name == "size" and argc == 0 and not _declares_method(ctx, name, argc):
        value, hoisted = convert_expression(ctx, target)
        return CallExpression("len", [value]), hoisted
    if name == "length" and argc == 0 and not user_method:
        value, hoisted = convert_expression(ctx, target)
        return CallExpression("len", [value]), hoisted
    if name == "isEmpty" and argc == 0 and not user_method:
        value, hoisted = convert_expression(ctx, target)
        return BinaryExpression(CallExpression("len", [value]), "==", GoExpression("0")), hoisted
    if name == "toArray" and not user_method:
        return convert_expression(ctx, target)
    if name == "add" and argc == 1 and not user_method:
        value, hoisted = convert_expression(ctx, target)
        item, item_hoisted = convert_expression(ctx, arg_nodes[0])
        return CallExpression("append", [value, item]), hoisted + item_hoisted
    if name == "name" and argc == 0 and not user_method:
        value, hoisted = convert_expression(ctx, target)
        return CallExpression(FieldRef(value, "Name")), hoisted
    return None


def convert_nodes(ctx: MigrationContext, nodes: list[SyntaxNode]) -> tuple[list[Expression], list[Statement]]:
    values: list[Expression] = []
    hoisted: list[Statement] = []
    for child in nodes:
        value, stmts = convert_expression(ctx, child)
        values.append(value)
        hoisted.extend(stmts)
    return values, hoisted


def _convert_method_invocation(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    name = require_field(node, "name").text
    target = node.child_by_field_name("object")
    arg_nodes = argument_nodes(require_field(node, "arguments"))

    idiom = _java_idiom(ctx, target, name, arg_nodes)
    if idiom is not None:
        return idiom

    args, hoisted = convert_nodes(ctx, arg_nodes)
    argc = len(args)
    resolution = resolve_method(ctx, name, argc)
    hoisted = _with_ambiguity(resolution, name, argc, hoisted)
    if target is None or target.kind == NodeKind.THIS:
        return _self_call(ctx, node, resolution, name, args), hoisted

    if target.kind == NodeKind.SUPER:
        superclass = ctx.receiver.superclass
        base = self_expression(ctx, node)
        if superclass in ctx.abstract_types:
            base = FieldRef(base, superclass + "Methods")
        elif superclass is not None:
            base = FieldRef(base, superclass)
        return CallExpression(FieldRef(base, method_name(ctx, resolution, on_self=True)), args), hoisted

    if target.kind == NodeKind.IDENTIFIER and declared_kind(ctx, target.text) is not None:
        if resolution.signature is not None and resolution.signature.static:
            return CallExpression(method_name(ctx, resolution, on_self=False), args), hoisted

    value, target_hoisted = convert_expression(ctx, target)
    return CallExpression(FieldRef(value, method_name(ctx, resolution, on_self=False)), args), target_hoisted + hoisted


# =============================================================================
# Creation
# =============================================================================


def _simple_type_name(node: SyntaxNode) -> str:
    if node.kind == NodeKind.GENERIC_TYPE:
        return _simple_type_name(node.named_children[0])
    if node.kind == NodeKind.SCOPED_TYPE_IDENTIFIER:
        names = [child.text for child in node.children if child.kind == NodeKind.TYPE_IDENTIFIER]
        return names[-1] if names else node.text
    return node.text


def _container_type(ctx: MigrationContext, go_type: str) -> str:
    """Prefer the declared type of the target when the creation used a diamond."""
    expected = ctx.expected_type
    if go_type.endswith(ANY_TYPE) and expected and expected[:2] == go_type[:2]:
        return expected
    return go_type


def _convert_object_creation(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    type_node = require_field(node, "type")
    if node.first_child_of_kind(NodeKind.CLASS_BODY) is not None:
        raise UnhandledConstructError(f"anonymous class creation of {type_node.text}", node)
    go_type = parse_type(ctx, type_node)
    arg_nodes = argument_nodes(require_field(node, "arguments"))

    if is_slice_type(go_type):
        ty = _container_type(ctx, go_type)
        if not arg_nodes:
            return CallExpression("make", [GoExpression(ty), GoExpression("0")]), []
        arg, hoisted = convert_expression(ctx, arg_nodes[0])
        if arg_nodes[0].kind == NodeKind.DECIMAL_INTEGER_LITERAL:
            return CallExpression("make", [GoExpression(ty), GoExpression("0"), arg]), hoisted
        return CallExpression("append", [CompositeLiteral(ty), arg], variadic=True), hoisted
    if is_map_type(go_type):
        return CallExpression("make", [GoExpression(_container_type(ctx, go_type))]), []

    args, hoisted = convert_nodes(ctx, arg_nodes)
    java_name = _simple_type_name(type_node)
    resolution = resolve_constructor(ctx, map_type_name(ctx, java_name), java_name, len(args))
    if resolution.ambiguous:
        hoisted = [constructor_ambiguity_comment(java_name)] + hoisted
    return CallExpression(resolution.name, args), hoisted


def _dimension_count(node: SyntaxNode) -> tuple[list[SyntaxNode], int]:
    sizes = []
    depth = 0
    for child in node.children:
        if child.kind == NodeKind.DIMENSIONS_EXPR:
            sizes.extend(c for c in child.named_children if c.kind not in COMMENT_KINDS)
            depth += 1
        elif child.kind == NodeKind.DIMENSIONS:
            depth += child.text.count("[")
    return sizes, depth


def _convert_array_creation(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    element = parse_type(ctx, require_field(node, "type"))
    sizes, depth = _dimension_count(node)
    ty = "[]" * max(depth, 1) + element
    initializer = node.child_by_field_name("value")
    if initializer is not None:
        with ctx.expecting(ty):
            return _convert_array_initializer(ctx, initializer)
    if not sizes:
        return NIL, []
    size, hoisted = convert_expression(ctx, sizes[0])
    return CallExpression("make", [GoExpression(ty), size]), hoisted


def _convert_array_initializer(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    ty = ctx.expected_type if is_slice_type(ctx.expected_type) else "[]" + ANY_TYPE
    values: list[Expression] = []
    hoisted: list[Statement] = []
    with ctx.expecting(slice_element(ty)):
        for child in argument_nodes(node):
            value, stmts = convert_expression(ctx, child)
            values.append(value)
            hoisted.extend(stmts)
    return CompositeLiteral(ty, values), hoisted


def _convert_method_reference(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    parts = [child for child in node.children if child.kind not in COMMENT_KINDS]
    if len(parts) == 3 and parts[2].kind == "new" and parts[0].kind == NodeKind.ARRAY_TYPE:
        ty = parse_type(ctx, parts[0])
        return CallExpression("make", [GoExpression(ty), GoExpression("0")]), []
    raise UnhandledConstructError(f"method reference {node.text}", node)


# =============================================================================
# Operators
# =============================================================================


def _convert_assignment(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    left = require_field(node, "left")
    statements = convert_assignment(ctx, node)
    value, hoisted = convert_expression(ctx, left)
    return value, statements + hoisted


def convert_assignment(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    """Assignment as statements; compound operators expand to ``x = x op y``."""
    left = require_field(node, "left")
    operator = require_field(node, "operator").text
    value, hoisted = convert_expression(ctx, require_field(node, "right"))
    if operator != "=":
        current, current_hoisted = convert_expression(ctx, left)
        hoisted.extend(current_hoisted)
        binary = operator[:-1]
        value = BinaryExpression(current, _OPERATORS.get(binary, binary), value)
    return hoisted + assign_to(ctx, left, value)


def _convert_binary(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    left, hoisted = convert_expression(ctx, require_field(node, "left"))
    right, right_hoisted = convert_expression(ctx, require_field(node, "right"))
    operator = require_field(node, "operator").text
    return BinaryExpression(left, _OPERATORS.get(operator, operator), right), hoisted + right_hoisted


def _convert_unary(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    operand, hoisted = convert_expression(ctx, require_field(node, "operand"))
    operator = require_field(node, "operator").text
    if operator == "+":
        return operand, hoisted
    return UnaryExpression(_OPERATORS.get(operator, operator), operand), hoisted


def update_parts(node: SyntaxNode) -> tuple[SyntaxNode, str, bool]:
    """(operand, ``++``/``--``, prefix) of an update expression."""
    operand = None
    operator = None
    prefix = False
    for child in node.children:
        if child.kind in ("++", "--"):
            operator = child.kind
            prefix = operand is None
        elif child.is_named and child.kind not in COMMENT_KINDS:
            operand = child
    if operand is None or operator is None:
        raise StructuralError("malformed update expression", node)
    return operand, operator, prefix


def convert_update(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    operand, operator, _ = update_parts(node)
    if field_setter(ctx, operand) is not None:
        current, hoisted = convert_expression(ctx, operand)
        value = BinaryExpression(current, operator[0], GoExpression("1"))
        return hoisted + assign_to(ctx, operand, value)
    target, hoisted = convert_expression(ctx, operand)
    return hoisted + [IncDecStatement(target, operator)]


def _convert_update(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    operand, _, prefix = update_parts(node)
    if not prefix:
        raise UnhandledConstructError("postfix update used as a value", node)
    statements = convert_update(ctx, node)
    value, hoisted = convert_expression(ctx, operand)
    return value, statements + hoisted


def _convert_parenthesized(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    inner = argument_nodes(node)
    if len(inner) != 1:
        raise StructuralError("parenthesized expression without a single operand", node)
    return convert_expression(ctx, inner[0])


def _convert_cast(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    go_type = parse_type(ctx, require_field(node, "type"))
    value, hoisted = convert_expression(ctx, require_field(node, "value"))
    if go_type in _CONVERSION_TYPES:
        return CastExpression(go_type, value), hoisted
    return TypeAssertion(value, go_type), hoisted


def _convert_instanceof(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    value, hoisted = convert_expression(ctx, require_field(node, "left"))
    type_node = node.child_by_field_name("right")
    if type_node is None:
        raise UnhandledConstructError("instanceof with a record pattern", node)
    go_type = parse_type(ctx, type_node)
    binding = node.child_by_field_name("name")
    if binding is not None:
        name = safe_identifier(binding.text)
        ctx.declare_local(binding.text)
        hoisted = hoisted + [GoStatement(f"{name}, _ := {TypeAssertion(value, go_type).to_source()}")]
    return TypeCheckExpression(value, go_type), hoisted


def _only_comments(statements: list[Statement]) -> bool:
    return all(isinstance(statement, CommentStmt) for statement in statements)


def _convert_ternary(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    condition, hoisted = convert_expression(ctx, require_field(node, "condition"))
    consequence, then_hoisted = convert_expression(ctx, require_field(node, "consequence"))
    alternative, else_hoisted = convert_expression(ctx, require_field(node, "alternative"))
    if not (_only_comments(then_hoisted) and _only_comments(else_hoisted)):
        raise UnhandledConstructError("conditional expression branch needs statements", node)
    ty = ctx.expected_type
    if ty is None and ctx.in_return and ctx.return_shape is not None:
        ty = ctx.return_shape.type
    if ty is None or ty.startswith("("):
        ty = ANY_TYPE
    return TernaryExpression(condition, consequence, alternative, ty), hoisted + then_hoisted + else_hoisted


def _convert_switch_expression(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    raise UnhandledConstructError("switch expression used as a value outside of a return", node)


def _unsupported(description: str) -> Callable[[MigrationContext, SyntaxNode], ExprResult]:
    def convert(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
        raise UnhandledConstructError(f"{description} {node.text}", node)

    return convert


# =============================================================================
# Literals
# =============================================================================

_INTEGER_SUFFIX = re.compile(r"[lL]$")
_FLOAT_SUFFIX = re.compile(r"[fFdD]$")


def _convert_integer(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    text = _INTEGER_SUFFIX.sub("", node.text.replace("_", ""))
    return GoExpression(text), []


def _convert_float(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    text = node.text.replace("_", "")
    if not text.lower().startswith("0x"):
        text = _FLOAT_SUFFIX.sub("", text)
    return GoExpression(text), []


def _convert_string(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    text = node.text
    if text.startswith('"""'):
        body = text[3:-3]
        if body.startswith("\n"):
            body = body[1:]
        return GoExpression("`" + body.replace("`", "` + \"`\" + `") + "`"), []
    return GoExpression(text), []


def _literal(source: str) -> Callable[[MigrationContext, SyntaxNode], ExprResult]:
    def convert(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
        return GoExpression(source), []

    return convert


def _convert_verbatim(ctx: MigrationContext, node: SyntaxNode) -> ExprResult:
    return GoExpression(node.text), []


_HANDLERS: dict[str, Callable[[MigrationContext, SyntaxNode], ExprResult]] = {
    NodeKind.IDENTIFIER: _convert_identifier,
    NodeKind.THIS: _convert_this,
    NodeKind.FIELD_ACCESS: _convert_field_access,
    NodeKind.ARRAY_ACCESS: _convert_array_access,
    NodeKind.METHOD_INVOCATION: _convert_method_invocation,
    NodeKind.OBJECT_CREATION_EXPRESSION: _convert_object_creation,
    NodeKind.ARRAY_CREATION_EXPRESSION: _convert_array_creation,
    NodeKind.ARRAY_INITIALIZER: _convert_array_initializer,
    NodeKind.METHOD_REFERENCE: _convert_method_reference,
    NodeKind.ASSIGNMENT_EXPRESSION: _convert_assignment,
    NodeKind.BINARY_EXPRESSION: _convert_binary,
    NodeKind.UNARY_EXPRESSION: _convert_unary,
    NodeKind.UPDATE_EXPRESSION: _convert_update,
    NodeKind.PARENTHESIZED_EXPRESSION: _convert_parenthesized,
    NodeKind.CAST_EXPRESSION: _convert_cast,
    NodeKind.INSTANCEOF_EXPRESSION: _convert_instanceof,
    NodeKind.TERNARY_EXPRESSION: _convert_ternary,
    NodeKind.SWITCH_EXPRESSION: _convert_switch_expression,
    NodeKind.LAMBDA_EXPRESSION: _unsupported("lambda expression"),
    NodeKind.CLASS_LITERAL: _unsupported("class literal"),
    NodeKind.DECIMAL_INTEGER_LITERAL: _convert_integer,
    NodeKind.HEX_INTEGER_LITERAL: _convert_integer,
    NodeKind.OCTAL_INTEGER_LITERAL: _convert_integer,
    NodeKind.BINARY_INTEGER_LITERAL: _convert_integer,
    NodeKind.DECIMAL_FLOATING_POINT_LITERAL: _convert_float,
    NodeKind.HEX_FLOATING_POINT_LITERAL: _convert_float,
    NodeKind.STRING_LITERAL: _convert_string,
    NodeKind.CHARACTER_LITERAL: _convert_verbatim,
    NodeKind.TRUE: _literal("true"),
    NodeKind.FALSE: _literal("false"),
    NodeKind.NULL_LITERAL: _literal("nil"),
}
