"""
Member conversion shared by the type converters.

Methods, constructors, fields and static initializers look the same no
matter which kind of type declares them; only the receiver differs. The
type converters build the ``Receiver`` and call into here.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from gomorph.gosrc.model import (
    NIL,
    AssignStatement,
    CallExpression,
    CallStatement,
    CommentStmt,
    CompositeLiteral,
    FieldRef,
    Function,
    GoExpression,
    Method,
    ModuleVar,
    Param,
    ReturnStatement,
    Statement,
    StructField,
    VarDeclaration,
    VarRef,
)
from gomorph.gosrc.naming import capitalize_first_letter, safe_identifier, to_identifier
from gomorph.java.context import MethodSignature, MigrationContext, Receiver, ReceiverKind, ReturnShape
from gomorph.java.errors import StructuralError, UnhandledConstructError, require_field
from gomorph.java.expressions import convert_expression
from gomorph.java.overloads import constructor_name
from gomorph.java.signatures import enclosing_type_parameters
from gomorph.java.statements import convert_block
from gomorph.java.syntax import COMMENT_KINDS, NodeKind, SyntaxNode
from gomorph.java.types import parse_modifiers, parse_type, try_parse_type

logger = logging.getLogger(__name__)

ABSTRACT_PANIC = "implemented in concrete class"


def parameter_names(node: SyntaxNode) -> list[str]:
    """Java names of the formal parameters of a method or constructor."""
    names = []
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        return names
    for child in parameters.named_children:
        if child.kind == NodeKind.FORMAL_PARAMETER:
            names.append(require_field(child, "name").text)
        elif child.kind == NodeKind.SPREAD_PARAMETER:
            declarator = child.first_child_of_kind(NodeKind.VARIABLE_DECLARATOR)
            if declarator is not None:
                names.append(require_field(declarator, "name").text)
    return names


def provenance(ctx: MigrationContext, node: SyntaxNode) -> list[str]:
    return [ctx.migration_comment(node)]


def panic_body(message: str) -> list[Statement]:
    return [CallStatement(CallExpression("panic", [GoExpression(f'"{message}"')]))]


def member_label(node: SyntaxNode) -> str:
    """Short label for locations such as ``class Foo.bar``."""
    name = node.child_by_field_name("name")
    if name is not None:
        return name.text
    declarators = node.children_by_field_name("declarator")
    if declarators:
        return ", ".join(require_field(d, "name").text for d in declarators)
    return node.kind


def _ends_in_return(body: list[Statement]) -> bool:
    return bool(body) and isinstance(body[-1], ReturnStatement)


def convert_function_body(
    ctx: MigrationContext,
    node: SyntaxNode,
    signature: MethodSignature,
    receiver: Receiver,
) -> list[Statement]:
    """Body of a method declaration converted under ``receiver``."""
    body_node = node.child_by_field_name("body")
    if body_node is None:
        return panic_body(ABSTRACT_PANIC)
    shape = ReturnShape(signature.value_type, signature.throws)
    type_params = enclosing_type_parameters(node) + signature.type_params
    with ctx.with_receiver(receiver), ctx.type_parameters(type_params):
        with ctx.function_scope(parameter_names(node), shape):
            body = convert_block(ctx, body_node)
    if signature.throws and signature.value_type is None and not _ends_in_return(body):
        body.append(ReturnStatement([NIL]))
    return body


def convert_method(
    ctx: MigrationContext,
    node: SyntaxNode,
    receiver: Receiver,
    receiver_param: Optional[Param],
    export: bool = False,
) -> Function:
    """
    Convert a method declaration to a Go method, or to a function when static.

    Args:
        ctx: Migration context.
        node: The ``method_declaration`` node.
        receiver: How self references are written inside the body.
        receiver_param: Go receiver; ignored for static methods.
        export: Force an exported name, used where Go interfaces are satisfied.

    Returns:
        The ``Method`` or ``Function``; the caller decides where it goes.
    """
    signature = ctx.method_signature(node)
    public = signature.signature.public or export
    name = to_identifier(signature.name, public)
    if signature.static or receiver_param is None:
        body = convert_function_body(ctx, node, signature, Receiver(kind=ReceiverKind.STATIC))
        return Function(
            name=name,
            params=signature.params,
            return_type=signature.return_type,
            body=body,
            public=public,
            comments=provenance(ctx, node),
            type_params=signature.type_params,
        )
    if signature.type_params:
        raise UnhandledConstructError(f"generic instance method {signature.java_name}", node)
    body = convert_function_body(ctx, node, signature, receiver)
    return Method(
        name=name,
        params=signature.params,
        return_type=signature.return_type,
        body=body,
        public=public,
        comments=provenance(ctx, node),
        receiver=receiver_param,
    )


# =============================================================================
# Fields
# =============================================================================


@dataclass
class FieldInfo:
    """One declarator of a field declaration."""

    java_name: str
    go_type: str
    value: Optional[SyntaxNode] = None
    static: bool = False

    @property
    def name(self) -> str:
        return safe_identifier(self.java_name)


def field_declarators(ctx: MigrationContext, node: SyntaxNode) -> list[FieldInfo]:
    static = parse_modifiers(node).is_static
    with ctx.type_parameters(enclosing_type_parameters(node)):
        base_type = parse_type(ctx, require_field(node, "type"))
    fields = []
    for declarator in node.children_by_field_name("declarator"):
        go_type = base_type
        dimensions = declarator.child_by_field_name("dimensions")
        if dimensions is not None:
            go_type = "[]" * dimensions.text.count("[") + go_type
        fields.append(
            FieldInfo(require_field(declarator, "name").text, go_type, declarator.child_by_field_name("value"), static)
        )
    return fields


def module_var(ctx: MigrationContext, info: FieldInfo, name: Optional[str] = None) -> ModuleVar:
    """A static field as a package-level variable."""
    var = ModuleVar(name or info.name, info.go_type)
    if info.value is None:
        return var
    with ctx.with_receiver(Receiver(kind=ReceiverKind.STATIC)), ctx.expecting(info.go_type):
        value, hoisted = convert_expression(ctx, info.value)
    for statement in hoisted:
        if not isinstance(statement, CommentStmt):
            raise UnhandledConstructError("static field initializer needs statements", info.value)
        var.comments.extend(statement.comments)
    var.value = value
    return var


def struct_fields(infos: list[FieldInfo], capitalize: bool = False) -> list[StructField]:
    return [
        StructField(capitalize_first_letter(info.name) if capitalize else info.name, info.go_type, capitalize)
        for info in infos
    ]


def field_initializers(ctx: MigrationContext, infos: list[FieldInfo], this: str = "this") -> list[Statement]:
    """``this.f = v`` for every instance field with an initializer, sorted by field name."""
    statements: list[Statement] = []
    for info in sorted(infos, key=lambda i: i.java_name):
        if info.static or info.value is None:
            continue
        with ctx.expecting(info.go_type):
            value, hoisted = convert_expression(ctx, info.value)
        statements.extend(hoisted)
        statements.append(AssignStatement(FieldRef(VarRef(this), ctx.receiver.fields.get(info.java_name, info.name)), value))
    return statements


# =============================================================================
# Constructors
# =============================================================================


def constructor_preamble(
    ctx: MigrationContext, struct_type: str, field_inits: list[FieldInfo]
) -> list[Statement]:
    """``this := T{}`` followed by the field initializers; must run under the receiver."""
    body: list[Statement] = [VarDeclaration("this", value=CompositeLiteral(struct_type), short=True)]
    inits = field_initializers(ctx, field_inits)
    if inits:
        body.append(CommentStmt(["Default field initializations"]))
        body.extend(inits)
    return body


def convert_constructor(
    ctx: MigrationContext,
    node: SyntaxNode,
    struct_type: str,
    receiver: Receiver,
    fields: list[FieldInfo],
    type_params: list[str],
) -> Function:
    signature = ctx.constructor_signature(node)
    body_node = require_field(node, "body")
    with ctx.with_receiver(receiver), ctx.type_parameters(type_params):
        with ctx.function_scope(parameter_names(node), ReturnShape(struct_type)):
            body = constructor_preamble(ctx, struct_type, fields)
            body.extend(convert_block(ctx, body_node))
    body.append(ReturnStatement([VarRef("this")]))
    return Function(
        name=signature.name,
        params=signature.params,
        return_type=struct_type,
        body=body,
        public=signature.public,
        comments=provenance(ctx, node),
        type_params=type_params,
    )


def default_constructor(
    ctx: MigrationContext,
    java_name: str,
    struct_type: str,
    receiver: Receiver,
    fields: list[FieldInfo],
    public: bool,
    type_params: list[str],
) -> Function:
    name = constructor_name(ctx, public, receiver.struct_name, java_name, [])
    with ctx.with_receiver(receiver), ctx.type_parameters(type_params), ctx.function_scope([]):
        body = constructor_preamble(ctx, struct_type, fields)
    body.append(ReturnStatement([VarRef("this")]))
    return Function(name=name, return_type=struct_type, body=body, public=public, type_params=type_params)


def convert_static_initializer(ctx: MigrationContext, node: SyntaxNode) -> Function:
    block = node.first_child_of_kind(NodeKind.BLOCK)
    if block is None:
        raise StructuralError("static initializer without a block", node)
    with ctx.with_receiver(Receiver(kind=ReceiverKind.STATIC)), ctx.function_scope([]):
        body = convert_block(ctx, block)
    return Function(name="init", body=body, comments=provenance(ctx, node))


def body_members(node: SyntaxNode) -> list[SyntaxNode]:
    """Named members of a class, interface, enum or record body."""
    body = node.child_by_field_name("body")
    if body is None:
        return []
    members = []
    for child in body.named_children:
        if child.kind in COMMENT_KINDS:
            continue
        if child.kind == NodeKind.ENUM_BODY_DECLARATIONS:
            members.extend(c for c in child.named_children if c.kind not in COMMENT_KINDS)
        else:
            members.append(child)
    return members


def generic_type_name(name: str, type_params: list[str]) -> str:
    if not type_params:
        return name
    return f"{name}[{', '.join(type_params)}]"


def implemented_interfaces(ctx: MigrationContext, node: SyntaxNode) -> list[str]:
    """Go names of the interfaces listed in an ``implements`` clause."""
    interfaces = node.child_by_field_name("interfaces")
    if interfaces is None:
        return []
    names = []
    for type_list in interfaces.children_of_kind(NodeKind.TYPE_LIST):
        for child in type_list.named_children:
            ty = try_parse_type(ctx, child)
            if ty is not None:
                names.append(ty)
    return names
