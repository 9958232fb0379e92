"""
Record declarations.

A record becomes a struct with one exported field per component and a
canonical constructor taking every component. A compact constructor's body
runs before the components are stored, so it can validate or normalize them.
"""

import logging
from typing import Optional

from gomorph.gosrc.model import (
    AssignStatement,
    CompositeLiteral,
    FieldRef,
    Function,
    GoExpression,
    Method,
    ModuleVar,
    Param,
    ReturnStatement,
    Statement,
    Struct,
    StructField,
    VarDeclaration,
    VarRef,
)
from gomorph.gosrc.naming import capitalize_first_letter
from gomorph.java.context import MigrationContext, Receiver, ReceiverKind, ReturnShape
from gomorph.java.errors import require_field, unhandled_child
from gomorph.java.members import (
    body_members,
    convert_constructor,
    convert_method,
    convert_static_initializer,
    field_declarators,
    generic_type_name,
    implemented_interfaces,
    member_label,
    module_var,
    provenance,
)
from gomorph.java.recovery import try_migrate_member
from gomorph.java.signatures import TYPE_DECLARATIONS, parse_parameters
from gomorph.java.statements import convert_block
from gomorph.java.syntax import NodeKind, SyntaxNode
from gomorph.java.types import type_parameter_names

logger = logging.getLogger(__name__)


class RecordConverter:
    def __init__(self, ctx: MigrationContext, node: SyntaxNode):
        self.ctx = ctx
        self.node = node
        java_name = require_field(node, "name").text
        declared = ctx.declared_types[java_name]
        self.name = declared.go_name
        self.public = declared.public
        self.type_params = type_parameter_names(node.child_by_field_name("type_parameters"))
        self.struct_type = generic_type_name(self.name, self.type_params)
        with ctx.type_parameters(self.type_params):
            self.components = parse_parameters(ctx, require_field(node, "parameters"))
        self.component_names = [
            require_field(child, "name").text
            for child in require_field(node, "parameters").named_children
            if child.kind == NodeKind.FORMAL_PARAMETER
        ]

    def location(self, member: SyntaxNode) -> str:
        return f"record {self.name}.{member_label(member)}"

    def receiver(self) -> Receiver:
        return Receiver(
            kind=ReceiverKind.RECORD,
            fields={name: capitalize_first_letter(name) for name in self.component_names},
            struct_name=self.name,
            components=set(self.component_names),
        )

    def convert(self) -> None:
        ctx = self.ctx
        struct = Struct(self.name, public=self.public, type_params=self.type_params)
        struct.fields = [
            StructField(capitalize_first_letter(name), param.type, True)
            for name, param in zip(self.component_names, self.components)
        ]
        ctx.source.structs.append(struct)

        members = body_members(self.node)
        compact: Optional[SyntaxNode] = None
        explicit_canonical = False
        component_types = [param.type for param in self.components]
        for member in members:
            if member.kind == NodeKind.COMPACT_CONSTRUCTOR_DECLARATION:
                compact = member
            elif member.kind == NodeKind.CONSTRUCTOR_DECLARATION and member.id in ctx.constructor_cache:
                if ctx.constructor_cache[member.id].signature.same_arguments(component_types):
                    explicit_canonical = True

        if not explicit_canonical:
            target = compact or self.node
            try_migrate_member(
                ctx, f"record {self.name}.<canonical constructor>", target, lambda: self.add_canonical_constructor(compact)
            )
        for member in members:
            if member.kind != NodeKind.COMPACT_CONSTRUCTOR_DECLARATION:
                try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_member(m))
        if not self.type_params:
            for interface in implemented_interfaces(ctx, self.node):
                ctx.source.vars.append(ModuleVar("_", interface, GoExpression(f"&{self.name}{{}}")))

    def add_canonical_constructor(self, compact: Optional[SyntaxNode]) -> None:
        ctx = self.ctx
        signature = ctx.constructor_signature(compact or self.node)
        body: list[Statement] = [VarDeclaration("this", value=CompositeLiteral(self.struct_type), short=True)]
        comments: list[str] = []
        if compact is not None:
            comments = provenance(ctx, compact)
            with ctx.with_receiver(self.receiver()), ctx.type_parameters(self.type_params):
                with ctx.function_scope(self.component_names, ReturnShape(self.struct_type)):
                    body.extend(convert_block(ctx, require_field(compact, "body")))
        for name, param in zip(self.component_names, self.components):
            body.append(AssignStatement(FieldRef(VarRef("this"), capitalize_first_letter(name)), VarRef(param.name)))
        body.append(ReturnStatement([VarRef("this")]))
        ctx.source.functions.append(
            Function(
                name=signature.name,
                params=signature.params,
                return_type=self.struct_type,
                body=body,
                public=signature.public,
                comments=comments,
                type_params=self.type_params,
            )
        )

    def convert_member(self, member: SyntaxNode) -> None:
        ctx = self.ctx
        if member.kind == NodeKind.METHOD_DECLARATION:
            receiver_param = Param("this", "*" + self.struct_type)
            with ctx.type_parameters(self.type_params):
                function = convert_method(ctx, member, self.receiver(), receiver_param)
            if isinstance(function, Method):
                ctx.source.methods.append(function)
            else:
                ctx.source.functions.append(function)
        elif member.kind == NodeKind.CONSTRUCTOR_DECLARATION:
            ctx.source.functions.append(
                convert_constructor(ctx, member, self.struct_type, self.receiver(), [], self.type_params)
            )
        elif member.kind == NodeKind.FIELD_DECLARATION:
            for info in field_declarators(ctx, member):
                ctx.source.vars.append(module_var(ctx, info))
        elif member.kind == NodeKind.STATIC_INITIALIZER:
            ctx.source.functions.append(convert_static_initializer(ctx, member))
        elif member.kind in TYPE_DECLARATIONS:
            from gomorph.java.migration import convert_type_declaration

            convert_type_declaration(ctx, member)
        elif member.kind == NodeKind.EMPTY_STATEMENT:
            return
        else:
            raise unhandled_child(member, "record_body")


def convert_record(ctx: MigrationContext, node: SyntaxNode) -> None:
    RecordConverter(ctx, node).convert()
