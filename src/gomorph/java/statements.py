"""
Statement lowering.

Converts Java statements into Go IR statements. Hoisted statements produced
by expression lowering are emitted right before the statement that needed
them. Block statements open a new local scope so the expression layer can
tell locals from receiver fields.
"""

import logging
from typing import Callable, Optional

from gomorph.gosrc.model import (
    NIL,
    AssignStatement,
    BlockStatement,
    CallExpression,
    CallStatement,
    CatchClause,
    CommentStmt,
    Expression,
    FieldRef,
    ForStatement,
    GoExpression,
    GoStatement,
    IfStatement,
    LabeledStatement,
    RangeForStatement,
    ReturnStatement,
    Statement,
    SwitchCase,
    SwitchStatement,
    TryStatement,
    UnaryExpression,
    VarDeclaration,
    VarRef,
)
from gomorph.gosrc.naming import safe_identifier
from gomorph.java.context import MigrationContext
from gomorph.java.errors import StructuralError, UnhandledConstructError, require_field, unhandled_child
from gomorph.java.expressions import (
    argument_nodes,
    assign_to,
    convert_assignment,
    convert_expression,
    convert_nodes,
    convert_update,
    self_expression,
)
from gomorph.java.overloads import constructor_ambiguity_comment, resolve_constructor
from gomorph.java.syntax import COMMENT_KINDS, NodeKind, SyntaxNode
from gomorph.java.types import parse_type

logger = logging.getLogger(__name__)

BUILTIN_EXCEPTIONS = frozenset({
    "IllegalArgumentException",
    "IllegalStateException",
    "RuntimeException",
    "UnsupportedOperationException",
    "NullPointerException",
    "IndexOutOfBoundsException",
    "ArithmeticException",
    "Exception",
})

_TERMINATORS = frozenset({
    NodeKind.BREAK_STATEMENT,
    NodeKind.RETURN_STATEMENT,
    NodeKind.THROW_STATEMENT,
    NodeKind.CONTINUE_STATEMENT,
    NodeKind.YIELD_STATEMENT,
})


def convert_statement(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    handler = _HANDLERS.get(node.kind)
    if handler is None:
        raise unhandled_child(node, "statement")
    return handler(ctx, node)


def convert_block(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    """Statements of a ``block`` node, in a fresh local scope."""
    body: list[Statement] = []
    with ctx.block_scope():
        for child in node.named_children:
            if child.kind in COMMENT_KINDS:
                continue
            body.extend(convert_statement(ctx, child))
    return body


def convert_body(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    """Body of a compound statement, which may be a block or a single statement."""
    if node.kind == NodeKind.BLOCK:
        return convert_block(ctx, node)
    with ctx.block_scope():
        return convert_statement(ctx, node)


def _condition(ctx: MigrationContext, node: SyntaxNode) -> tuple[Expression, list[Statement]]:
    return convert_expression(ctx, require_field(node, "condition"))


def _negate(condition: Expression) -> Expression:
    return UnaryExpression("!", condition)


# =============================================================================
# Simple statements
# =============================================================================


def _convert_block_statement(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    return [BlockStatement(convert_block(ctx, node))]


def _convert_empty(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    return []


def _convert_expression_statement(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    children = argument_nodes(node)
    if len(children) != 1:
        raise StructuralError("expression statement without a single expression", node)
    expression = children[0]
    if expression.kind == NodeKind.ASSIGNMENT_EXPRESSION:
        return convert_assignment(ctx, expression)
    if expression.kind == NodeKind.UPDATE_EXPRESSION:
        return convert_update(ctx, expression)
    if expression.kind == NodeKind.SWITCH_EXPRESSION:
        return convert_switch(ctx, expression)
    value, hoisted = convert_expression(ctx, expression)
    if isinstance(value, CallExpression) and value.function == "append" and not value.variadic:
        target = expression.child_by_field_name("object")
        if target is not None:
            return hoisted + assign_to(ctx, target, value)
    if isinstance(value, CallExpression):
        return hoisted + [CallStatement(value)]
    return hoisted + [AssignStatement(VarRef("_"), value)]


def _declared_type(ctx: MigrationContext, node: SyntaxNode) -> Optional[str]:
    type_node = require_field(node, "type")
    if type_node.kind == NodeKind.TYPE_IDENTIFIER and type_node.text == "var":
        return None
    return parse_type(ctx, type_node)


def convert_local_variable_declaration(
    ctx: MigrationContext, node: SyntaxNode, short: bool = False
) -> list[Statement]:
    """
    Convert a local declaration; ``var`` and ``short`` produce ``x := v``.

    Each declarator is declared as a local after its initializer is converted,
    so ``int x = x0`` style shadowing resolves the right-hand side first.
    """
    declared = _declared_type(ctx, node)
    statements: list[Statement] = []
    for declarator in node.children_by_field_name("declarator"):
        name = require_field(declarator, "name").text
        go_type = declared
        dimensions = declarator.child_by_field_name("dimensions")
        if go_type is not None and dimensions is not None:
            go_type = "[]" * dimensions.text.count("[") + go_type
        value_node = declarator.child_by_field_name("value")
        value = None
        if value_node is not None:
            with ctx.expecting(go_type):
                value, hoisted = convert_expression(ctx, value_node)
            statements.extend(hoisted)
        elif go_type is None:
            raise StructuralError(f"local variable {name} has neither type nor initializer", declarator)
        ctx.declare_local(name)
        statements.append(
            VarDeclaration(safe_identifier(name), go_type, value, short=short or go_type is None)
        )
    return statements


def _convert_local_variable_declaration(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    return convert_local_variable_declaration(ctx, node)


def _convert_assert(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    parts = argument_nodes(node)
    if not parts:
        raise StructuralError("assert without a condition", node)
    condition, hoisted = convert_expression(ctx, parts[0])
    if len(parts) > 1:
        message, message_hoisted = convert_expression(ctx, parts[1])
        hoisted.extend(message_hoisted)
    else:
        message = GoExpression('"assertion failed"')
    panic = CallStatement(CallExpression("panic", [message]))
    return hoisted + [IfStatement(_negate(condition), [panic])]


def _jump(keyword: str) -> Callable[[MigrationContext, SyntaxNode], list[Statement]]:
    def convert(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
        label = node.first_child_of_kind(NodeKind.IDENTIFIER)
        if label is None:
            return [GoStatement(keyword)]
        return [GoStatement(f"{keyword} {label.text}")]

    return convert


def _convert_labeled(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    label = node.first_child_of_kind(NodeKind.IDENTIFIER)
    parts = [child for child in argument_nodes(node) if child is not label]
    if label is None or len(parts) != 1:
        raise StructuralError("labeled statement without a label and a statement", node)
    statements = convert_statement(ctx, parts[0])
    if not statements:
        return []
    return statements[:-1] + [LabeledStatement(label.text, statements[-1])]


# =============================================================================
# Control flow
# =============================================================================


def _convert_if(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    condition, hoisted = _condition(ctx, node)
    body = convert_body(ctx, require_field(node, "consequence"))
    alternative = node.child_by_field_name("alternative")
    else_body = convert_body(ctx, alternative) if alternative is not None else None
    return hoisted + [IfStatement(condition, body, else_body)]


def _convert_while(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    condition, hoisted = _condition(ctx, node)
    body = convert_body(ctx, require_field(node, "body"))
    if not hoisted:
        return [ForStatement(body, condition=condition)]
    exit_check = IfStatement(_negate(condition), [GoStatement("break")])
    return [ForStatement(hoisted + [exit_check] + body)]


def _convert_do(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    body = convert_body(ctx, require_field(node, "body"))
    condition, hoisted = _condition(ctx, node)
    exit_check = IfStatement(_negate(condition), [GoStatement("break")])
    return [ForStatement(body + hoisted + [exit_check])]


def _loop_step(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    if node.kind == NodeKind.ASSIGNMENT_EXPRESSION:
        return convert_assignment(ctx, node)
    if node.kind == NodeKind.UPDATE_EXPRESSION:
        return convert_update(ctx, node)
    value, hoisted = convert_expression(ctx, node)
    return hoisted + [CallStatement(value)]


def _convert_for(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    with ctx.block_scope():
        init: list[Statement] = []
        for init_node in node.children_by_field_name("init"):
            if init_node.kind == NodeKind.LOCAL_VARIABLE_DECLARATION:
                init.extend(convert_local_variable_declaration(ctx, init_node, short=True))
            else:
                init.extend(_loop_step(ctx, init_node))

        condition = None
        condition_node = node.child_by_field_name("condition")
        if condition_node is not None:
            condition, hoisted = convert_expression(ctx, condition_node)
            if hoisted:
                raise UnhandledConstructError("for loop condition needs statements", condition_node)

        post: list[Statement] = []
        for update_node in node.children_by_field_name("update"):
            post.extend(_loop_step(ctx, update_node))
        if len(post) > 1:
            raise UnhandledConstructError("for loop with more than one update statement", node)

        body = convert_body(ctx, require_field(node, "body"))

    header_init = init[0] if len(init) == 1 else None
    loop = ForStatement(body, init=header_init, condition=condition, post=post[0] if post else None)
    if len(init) > 1:
        return [BlockStatement(init + [loop])]
    return [loop]


def _convert_enhanced_for(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    name = require_field(node, "name").text
    iterable, hoisted = convert_expression(ctx, require_field(node, "value"))
    with ctx.block_scope([name]):
        body = convert_body(ctx, require_field(node, "body"))
    return hoisted + [RangeForStatement(safe_identifier(name), iterable, body)]


# =============================================================================
# Returns, throws, switches
# =============================================================================


def return_values(ctx: MigrationContext, value: Optional[Expression]) -> ReturnStatement:
    values = [value] if value is not None else []
    if ctx.return_shape is not None and ctx.return_shape.throws:
        values.append(NIL)
    return ReturnStatement(values)


def _return_type(ctx: MigrationContext) -> Optional[str]:
    return ctx.return_shape.type if ctx.return_shape is not None else None


def _convert_return(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    values = argument_nodes(node)
    if not values:
        return [return_values(ctx, None)]
    value_node = values[0]
    if value_node.kind == NodeKind.SWITCH_EXPRESSION:
        with ctx.returning():
            return convert_switch(ctx, value_node)
    with ctx.returning(), ctx.expecting(_return_type(ctx)):
        value, hoisted = convert_expression(ctx, value_node)
    return hoisted + [return_values(ctx, value)]


def _convert_yield(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    if not ctx.in_return:
        raise UnhandledConstructError("yield outside of a returned switch expression", node)
    values = argument_nodes(node)
    if len(values) != 1:
        raise StructuralError("yield without a value", node)
    with ctx.expecting(_return_type(ctx)):
        value, hoisted = convert_expression(ctx, values[0])
    return hoisted + [return_values(ctx, value)]


def _convert_throw(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    values = argument_nodes(node)
    if len(values) != 1:
        raise StructuralError("throw without a value", node)
    value_node = values[0]
    if value_node.kind != NodeKind.OBJECT_CREATION_EXPRESSION:
        value, hoisted = convert_expression(ctx, value_node)
        return hoisted + [CallStatement(CallExpression("panic", [value]))]

    exception = require_field(value_node, "type").text
    if exception not in BUILTIN_EXCEPTIONS:
        logger.debug(f"Passing through throw of {exception} at {node.location}")
        return [GoStatement(node.text)]
    args, hoisted = convert_nodes(ctx, argument_nodes(require_field(value_node, "arguments")))
    if not args:
        message: Expression = GoExpression(f'"{exception}"')
    elif len(args) == 1:
        message = args[0]
    else:
        ctx.require_import("fmt")
        message = CallExpression("fmt.Sprint", args)
    return hoisted + [CallStatement(CallExpression("panic", [message]))]


def _switch_labels(ctx: MigrationContext, label: SyntaxNode) -> Optional[list[Expression]]:
    """Case values of one label, or None for ``default``."""
    values = argument_nodes(label)
    if not values:
        return None
    converted: list[Expression] = []
    for value_node in values:
        value, hoisted = convert_expression(ctx, value_node)
        if hoisted:
            raise UnhandledConstructError("switch label needs statements", value_node)
        converted.append(value)
    return converted


def _rule_body(ctx: MigrationContext, body: SyntaxNode) -> list[Statement]:
    if body.kind == NodeKind.BLOCK:
        return convert_block(ctx, body)
    if body.kind == NodeKind.EXPRESSION_STATEMENT and ctx.in_return:
        parts = argument_nodes(body)
        with ctx.expecting(_return_type(ctx)):
            value, hoisted = convert_expression(ctx, parts[0])
        return hoisted + [return_values(ctx, value)]
    return convert_statement(ctx, body)


def convert_switch(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    """
    Convert a switch statement or a returned switch expression.

    Clauses keep their source order, ``default`` included. Statement groups
    fall through explicitly unless they end in a jump; a trailing unlabeled
    ``break`` is dropped because Go cases do not fall through by default.
    Label-only groups are merged into the next group, since grammar versions
    differ on whether ``case 2: case 3:`` is one group or two.
    """
    value, hoisted = _condition(ctx, node)
    switch = SwitchStatement(value)
    groups = [child for child in require_field(node, "body").named_children if child.kind not in COMMENT_KINDS]
    labels: list[Expression] = []
    is_default = False
    for index, group in enumerate(groups):
        for label in group.children_of_kind(NodeKind.SWITCH_LABEL):
            values = _switch_labels(ctx, label)
            if values is None:
                is_default = True
            else:
                labels.extend(values)

        if group.kind == NodeKind.SWITCH_RULE:
            parts = [c for c in argument_nodes(group) if c.kind != NodeKind.SWITCH_LABEL]
            if len(parts) != 1:
                raise StructuralError("switch rule without a body", group)
            body = _rule_body(ctx, parts[0])
            fallthrough = False
        elif group.kind == NodeKind.SWITCH_BLOCK_STATEMENT_GROUP:
            statements = [
                c for c in argument_nodes(group) if c.kind != NodeKind.SWITCH_LABEL
            ]
            is_last = index == len(groups) - 1
            if not statements and not is_last:
                continue
            body = []
            with ctx.block_scope():
                for statement in statements:
                    body.extend(convert_statement(ctx, statement))
            last = statements[-1] if statements else None
            if last is not None and last.kind == NodeKind.BREAK_STATEMENT and last.first_child_of_kind(NodeKind.IDENTIFIER) is None:
                body = body[:-1]
            ends_in_jump = last is not None and last.kind in _TERMINATORS
            fallthrough = not ends_in_jump and not is_last
        else:
            raise unhandled_child(group, "switch_block")

        # a default clause absorbs any case values sharing its body
        switch.cases.append(SwitchCase([] if is_default else labels, body, fallthrough, default=is_default))
        labels = []
        is_default = False
    return hoisted + [switch]


# =============================================================================
# Exceptions
# =============================================================================


def _references(node: SyntaxNode, name: str) -> bool:
    return any(child.kind == NodeKind.IDENTIFIER and child.text == name for child in node.walk())


def _contains_return(node: SyntaxNode) -> bool:
    stack = list(node.children)
    while stack:
        child = stack.pop()
        if child.kind == NodeKind.RETURN_STATEMENT:
            return True
        if child.kind in (NodeKind.LAMBDA_EXPRESSION, NodeKind.CLASS_BODY):
            continue
        stack.extend(child.children)
    return False


def _catch_clauses(ctx: MigrationContext, node: SyntaxNode) -> list[CatchClause]:
    parameter = node.first_child_of_kind(NodeKind.CATCH_FORMAL_PARAMETER)
    body_node = require_field(node, "body")
    if parameter is None:
        raise StructuralError("catch clause without a parameter", node)
    name = require_field(parameter, "name").text
    catch_type = parameter.first_child_of_kind(NodeKind.CATCH_TYPE)
    if catch_type is None:
        raise StructuralError("catch clause without a type", parameter)
    variable = safe_identifier(name) if _references(body_node, name) else None
    clauses = []
    for type_node in catch_type.named_children:
        if type_node.kind in COMMENT_KINDS:
            continue
        with ctx.block_scope([name]):
            body = convert_block(ctx, body_node)
        clauses.append(CatchClause(parse_type(ctx, type_node), body, variable))
    return clauses


def _resources(ctx: MigrationContext, node: SyntaxNode) -> tuple[list[Statement], list[Expression]]:
    declarations: list[Statement] = []
    closers: list[Expression] = []
    resource_list = node.child_by_field_name("resources")
    if resource_list is None:
        return declarations, closers
    for resource in resource_list.children_of_kind(NodeKind.RESOURCE):
        name_node = resource.child_by_field_name("name")
        if name_node is None:
            value, hoisted = convert_expression(ctx, argument_nodes(resource)[0])
            declarations.extend(hoisted)
            closers.append(value)
            continue
        value, hoisted = convert_expression(ctx, require_field(resource, "value"))
        declarations.extend(hoisted)
        ctx.declare_local(name_node.text)
        name = safe_identifier(name_node.text)
        declarations.append(VarDeclaration(name, value=value, short=True))
        closers.append(VarRef(name))
    return declarations, closers


def _convert_try(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    statements: list[Statement] = []
    body_node = require_field(node, "body")
    if _contains_return(body_node):
        statements.append(CommentStmt(["FIXME: return inside try only leaves the closure"]))
    with ctx.block_scope():
        resources, closers = _resources(ctx, node)
        body = convert_block(ctx, body_node)
    catches: list[CatchClause] = []
    finally_body = None
    for child in node.children:
        if child.kind == NodeKind.CATCH_CLAUSE:
            catches.extend(_catch_clauses(ctx, child))
        elif child.kind == NodeKind.FINALLY_CLAUSE:
            block = child.first_child_of_kind(NodeKind.BLOCK)
            if block is None:
                raise StructuralError("finally clause without a block", child)
            finally_body = convert_block(ctx, block)
    statements.append(TryStatement(body, catches, finally_body, resources, closers))
    return statements


# =============================================================================
# Constructor chaining
# =============================================================================


def _java_type_name(ctx: MigrationContext, go_name: str) -> str:
    for declared in ctx.declared_types.values():
        if declared.go_name == go_name:
            return declared.java_name
    return go_name


def _convert_explicit_constructor_invocation(ctx: MigrationContext, node: SyntaxNode) -> list[Statement]:
    target = require_field(node, "constructor")
    args, hoisted = convert_nodes(ctx, argument_nodes(require_field(node, "arguments")))
    receiver = ctx.receiver
    if target.kind == NodeKind.THIS:
        type_name = receiver.struct_name
    elif target.kind == NodeKind.SUPER:
        type_name = receiver.superclass
        if type_name is None:
            raise StructuralError("super constructor call without a superclass", node)
        if type_name in ctx.abstract_types:
            return hoisted + [CommentStmt([f"FIXME: call to abstract super constructor: {node.text}"])]
    else:
        raise unhandled_child(target, "explicit_constructor_invocation")

    java_name = _java_type_name(ctx, type_name)
    resolution = resolve_constructor(ctx, type_name, java_name, len(args))
    if resolution.ambiguous:
        hoisted.append(constructor_ambiguity_comment(java_name))
    call = CallExpression(resolution.name, args)
    this = self_expression(ctx, node)
    if target.kind == NodeKind.THIS:
        return hoisted + [AssignStatement(this, call)]
    return hoisted + [AssignStatement(FieldRef(this, type_name), call)]


_HANDLERS: dict[str, Callable[[MigrationContext, SyntaxNode], list[Statement]]] = {
    NodeKind.BLOCK: _convert_block_statement,
    NodeKind.EMPTY_STATEMENT: _convert_empty,
    NodeKind.EXPRESSION_STATEMENT: _convert_expression_statement,
    NodeKind.LOCAL_VARIABLE_DECLARATION: _convert_local_variable_declaration,
    NodeKind.IF_STATEMENT: _convert_if,
    NodeKind.WHILE_STATEMENT: _convert_while,
    NodeKind.DO_STATEMENT: _convert_do,
    NodeKind.FOR_STATEMENT: _convert_for,
    NodeKind.ENHANCED_FOR_STATEMENT: _convert_enhanced_for,
    NodeKind.RETURN_STATEMENT: _convert_return,
    NodeKind.YIELD_STATEMENT: _convert_yield,
    NodeKind.THROW_STATEMENT: _convert_throw,
    NodeKind.SWITCH_EXPRESSION: convert_switch,
    NodeKind.TRY_STATEMENT: _convert_try,
    NodeKind.TRY_WITH_RESOURCES_STATEMENT: _convert_try,
    NodeKind.ASSERT_STATEMENT: _convert_assert,
    NodeKind.BREAK_STATEMENT: _jump("break"),
    NodeKind.CONTINUE_STATEMENT: _jump("continue"),
    NodeKind.LABELED_STATEMENT: _convert_labeled,
    NodeKind.EXPLICIT_CONSTRUCTOR_INVOCATION: _convert_explicit_constructor_invocation,
}
