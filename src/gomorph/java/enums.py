"""
Enum declarations.

Enums whose constants carry no arguments and which declare no fields become
a named ``uint`` with an ``iota`` constant block. Enums with state become a
struct plus one package-level variable per constant.
"""

import logging

from gomorph.gosrc.model import (
    CompositeLiteral,
    ConstBlock,
    ConstEntry,
    GoExpression,
    Method,
    ModuleVar,
    Param,
    ReturnStatement,
    Struct,
    SwitchCase,
    SwitchStatement,
    TypeAlias,
    UnaryExpression,
    VarRef,
)
from gomorph.java.context import MigrationContext, Receiver, ReceiverKind
from gomorph.java.errors import UnhandledConstructError, require_field, unhandled_child
from gomorph.java.expressions import argument_nodes, convert_expression
from gomorph.java.members import (
    FieldInfo,
    body_members,
    convert_method,
    convert_static_initializer,
    field_declarators,
    implemented_interfaces,
    member_label,
    module_var,
    struct_fields,
)
from gomorph.java.recovery import try_migrate_member
from gomorph.java.signatures import TYPE_DECLARATIONS
from gomorph.java.syntax import NodeKind, SyntaxNode
from gomorph.java.types import parse_modifiers

logger = logging.getLogger(__name__)


def enum_constants(node: SyntaxNode) -> list[SyntaxNode]:
    return require_field(node, "body").children_of_kind(NodeKind.ENUM_CONSTANT)


_OPAQUE_KINDS = frozenset({
    *TYPE_DECLARATIONS,
    NodeKind.METHOD_DECLARATION,
    NodeKind.CONSTRUCTOR_DECLARATION,
    NodeKind.STATIC_INITIALIZER,
})


def declares_instance_fields(node: SyntaxNode) -> bool:
    """Search the whole enum body, constant bodies included, for a non-static field."""
    stack = list(require_field(node, "body").named_children)
    while stack:
        child = stack.pop()
        if child.kind in _OPAQUE_KINDS:
            continue
        if child.kind == NodeKind.FIELD_DECLARATION and not parse_modifiers(child).is_static:
            return True
        stack.extend(child.named_children)
    return False


def is_simple_enum(node: SyntaxNode) -> bool:
    """True when no instance field is declared anywhere in the enum body."""
    return not declares_instance_fields(node)


class EnumConverter:
    def __init__(self, ctx: MigrationContext, node: SyntaxNode):
        self.ctx = ctx
        self.node = node
        java_name = require_field(node, "name").text
        declared = ctx.declared_types[java_name]
        self.name = declared.go_name
        self.public = declared.public
        self.simple = is_simple_enum(node)
        self.fields: list[FieldInfo] = []
        self.struct = Struct(self.name, public=self.public)

    def constant_name(self, constant: SyntaxNode) -> str:
        return f"{self.name}_{require_field(constant, 'name').text}"

    def location(self, member: SyntaxNode) -> str:
        return f"enum {self.name}.{member_label(member)}"

    def receiver(self) -> Receiver:
        fields = {info.java_name: info.name for info in self.fields if not info.static}
        return Receiver(kind=ReceiverKind.METHOD, fields=fields, struct_name=self.name)

    def convert(self) -> None:
        ctx = self.ctx
        members = [m for m in body_members(self.node) if m.kind != NodeKind.ENUM_CONSTANT]
        ctx.source.structs.append(TypeAlias(self.name, "uint", self.public) if self.simple else self.struct)
        for member in members:
            if member.kind == NodeKind.FIELD_DECLARATION:
                try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_field(m))
        if self.simple:
            self.convert_simple_constants()
        else:
            for constant in enum_constants(self.node):
                try_migrate_member(
                    ctx, self.location(constant), constant, lambda c=constant: self.convert_constant(c)
                )

        for member in members:
            if member.kind != NodeKind.FIELD_DECLARATION:
                try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_member(m))
        for interface in implemented_interfaces(ctx, self.node):
            ctx.source.vars.append(ModuleVar("_", interface, GoExpression(f"new({self.name})")))

    def convert_simple_constants(self) -> None:
        constants = enum_constants(self.node)
        if not constants:
            return
        entries = [ConstEntry(self.constant_name(constants[0]), self.name, GoExpression("iota"))]
        entries.extend(ConstEntry(self.constant_name(constant)) for constant in constants[1:])
        self.ctx.source.const_blocks.append(ConstBlock(entries))
        for constant in constants:
            if constant.child_by_field_name("arguments") is not None:
                logger.debug(f"Dropping constructor arguments of {self.constant_name(constant)}, no fields to hold them")
            if constant.child_by_field_name("body") is not None:
                try_migrate_member(
                    self.ctx, self.location(constant), constant, lambda c=constant: self.reject_constant_body(c)
                )

        cases = [
            SwitchCase(
                [VarRef(self.constant_name(constant))],
                [ReturnStatement([GoExpression(f'"{require_field(constant, "name").text}"')])],
            )
            for constant in constants
        ]
        body = [SwitchStatement(UnaryExpression("*", VarRef("this")), cases), ReturnStatement([GoExpression('""')])]
        self.ctx.source.methods.append(
            Method(
                name="Name",
                return_type="string",
                body=body,
                public=True,
                receiver=Param("this", "*" + self.name),
            )
        )

    def convert_field(self, node: SyntaxNode) -> None:
        infos = field_declarators(self.ctx, node)
        for info in infos:
            if info.static:
                self.ctx.source.vars.append(module_var(self.ctx, info))
        instance = [info for info in infos if not info.static]
        self.struct.fields.extend(struct_fields(instance))
        self.fields.extend(infos)

    def reject_constant_body(self, constant: SyntaxNode) -> None:
        raise UnhandledConstructError(f"enum constant with a body: {self.constant_name(constant)}", constant)

    def convert_constant(self, constant: SyntaxNode) -> None:
        ctx = self.ctx
        if constant.child_by_field_name("body") is not None:
            self.reject_constant_body(constant)
        arguments = constant.child_by_field_name("arguments")
        arg_nodes = argument_nodes(arguments) if arguments is not None else []
        instance = [info for info in self.fields if not info.static]
        if not arg_nodes or len(arg_nodes) != len(instance):
            if arg_nodes:
                logger.warning(
                    f"Enum constant {self.constant_name(constant)} has {len(arg_nodes)} arguments "
                    f"for {len(instance)} fields, leaving it zero-valued"
                )
            ctx.source.vars.append(ModuleVar(self.constant_name(constant), value=CompositeLiteral(self.name)))
            return
        values = []
        with ctx.with_receiver(Receiver(kind=ReceiverKind.STATIC)):
            for info, arg in zip(instance, arg_nodes):
                with ctx.expecting(info.go_type):
                    value, hoisted = convert_expression(ctx, arg)
                if hoisted:
                    raise UnhandledConstructError("enum constant argument needs statements", arg)
                values.append(value)
        literal = CompositeLiteral(self.name, values, [info.name for info in instance])
        ctx.source.vars.append(ModuleVar(self.constant_name(constant), value=literal))

    def convert_member(self, member: SyntaxNode) -> None:
        ctx = self.ctx
        if member.kind == NodeKind.METHOD_DECLARATION:
            function = convert_method(ctx, member, self.receiver(), Param("this", "*" + self.name))
            if isinstance(function, Method):
                ctx.source.methods.append(function)
            else:
                ctx.source.functions.append(function)
        elif member.kind == NodeKind.CONSTRUCTOR_DECLARATION:
            logger.debug(f"Skipping enum constructor of {self.name} at {member.location}")
        elif member.kind == NodeKind.STATIC_INITIALIZER:
            ctx.source.functions.append(convert_static_initializer(ctx, member))
        elif member.kind in TYPE_DECLARATIONS:
            from gomorph.java.migration import convert_type_declaration

            convert_type_declaration(ctx, member)
        elif member.kind == NodeKind.EMPTY_STATEMENT:
            return
        else:
            raise unhandled_child(member, "enum_body")


def convert_enum(ctx: MigrationContext, node: SyntaxNode) -> None:
    EnumConverter(ctx, node).convert()
