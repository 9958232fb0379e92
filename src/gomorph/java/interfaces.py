"""
Interface declarations.

Abstract methods become Go interface methods. Default methods cannot live on
a Go interface, so each one becomes a free function taking the interface
value as its first parameter, named ``<Interface><Method>``.
"""

import logging

from gomorph.gosrc.model import Function, Interface, InterfaceMethod, Param
from gomorph.gosrc.naming import capitalize_first_letter
from gomorph.java.context import MigrationContext, Receiver, ReceiverKind
from gomorph.java.errors import require_field, unhandled_child
from gomorph.java.members import (
    body_members,
    convert_function_body,
    convert_method,
    field_declarators,
    generic_type_name,
    member_label,
    module_var,
    provenance,
)
from gomorph.java.recovery import try_migrate_member
from gomorph.java.signatures import TYPE_DECLARATIONS
from gomorph.java.syntax import NodeKind, SyntaxNode
from gomorph.java.types import try_parse_type, type_parameter_names

logger = logging.getLogger(__name__)


def extended_interfaces(ctx: MigrationContext, node: SyntaxNode) -> list[str]:
    names = []
    for extends in node.children_of_kind(NodeKind.EXTENDS_INTERFACES):
        for type_list in extends.children_of_kind(NodeKind.TYPE_LIST):
            for child in type_list.named_children:
                ty = try_parse_type(ctx, child)
                if ty is not None:
                    names.append(ty)
    return names


class InterfaceConverter:
    def __init__(self, ctx: MigrationContext, node: SyntaxNode):
        self.ctx = ctx
        self.node = node
        java_name = require_field(node, "name").text
        self.name = ctx.declared_types[java_name].go_name
        self.type_params = type_parameter_names(node.child_by_field_name("type_parameters"))
        self.interface = Interface(self.name, public=True, type_params=self.type_params)

    def location(self, member: SyntaxNode) -> str:
        return f"interface {self.name}.{member_label(member)}"

    def convert(self) -> None:
        ctx = self.ctx
        with ctx.type_parameters(self.type_params):
            self.interface.embeds = extended_interfaces(ctx, self.node)
        ctx.source.interfaces.append(self.interface)
        for member in body_members(self.node):
            try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_member(m))

    def convert_member(self, member: SyntaxNode) -> None:
        ctx = self.ctx
        if member.kind == NodeKind.METHOD_DECLARATION:
            self.convert_method(member)
        elif member.kind in (NodeKind.CONSTANT_DECLARATION, NodeKind.FIELD_DECLARATION):
            for info in field_declarators(ctx, member):
                ctx.source.vars.append(module_var(ctx, info))
        elif member.kind in TYPE_DECLARATIONS:
            from gomorph.java.migration import convert_type_declaration

            convert_type_declaration(ctx, member)
        elif member.kind == NodeKind.EMPTY_STATEMENT:
            return
        else:
            raise unhandled_child(member, "interface_body")

    def convert_method(self, node: SyntaxNode) -> None:
        ctx = self.ctx
        signature = ctx.method_signature(node)
        if signature.static:
            with ctx.type_parameters(self.type_params):
                ctx.source.functions.append(convert_method(ctx, node, Receiver(), None))
            return
        method_name = capitalize_first_letter(signature.name)
        if node.child_by_field_name("body") is None:
            self.interface.methods.append(InterfaceMethod(method_name, signature.params, signature.return_type))
            return

        name = self.name + method_name
        receiver = Receiver(kind=ReceiverKind.INTERFACE_DEFAULT, export_methods=True, struct_name=self.name)
        with ctx.type_parameters(self.type_params):
            body = convert_function_body(ctx, node, signature, receiver)
        this = Param("this", generic_type_name(self.name, self.type_params))
        ctx.source.functions.append(
            Function(
                name=name,
                params=[this, *signature.params],
                return_type=signature.return_type,
                body=body,
                public=True,
                comments=provenance(ctx, node),
                type_params=self.type_params,
            )
        )


def convert_interface(ctx: MigrationContext, node: SyntaxNode) -> None:
    InterfaceConverter(ctx, node).convert()
