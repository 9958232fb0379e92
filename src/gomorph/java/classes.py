"""
Class declarations.

A concrete class becomes a struct, one constructor function per Java
constructor, and pointer-receiver methods. Abstract classes are handed to
``gomorph.java.abstract``. A class extending an abstract class embeds the
base's data and methods structs and fills in the rest of the Go interface.
"""

import logging
from typing import Optional

from gomorph.gosrc.model import (
    AssignStatement,
    CallExpression,
    CallStatement,
    FieldRef,
    GoExpression,
    Method,
    ModuleVar,
    Param,
    ReturnStatement,
    Struct,
    VarRef,
)
from gomorph.gosrc.naming import capitalize_first_letter, lowercase_first_letter
from gomorph.java.abstract import convert_abstract_class
from gomorph.java.context import AbstractLayout, MigrationContext, Receiver, ReceiverKind
from gomorph.java.errors import require_field, unhandled_child
from gomorph.java.members import (
    FieldInfo,
    body_members,
    convert_constructor,
    convert_method,
    convert_static_initializer,
    default_constructor,
    field_declarators,
    generic_type_name,
    implemented_interfaces,
    member_label,
    module_var,
    panic_body,
    struct_fields,
)
from gomorph.java.recovery import try_migrate_member
from gomorph.java.signatures import TYPE_DECLARATIONS, superclass_type
from gomorph.java.syntax import NodeKind, SyntaxNode
from gomorph.java.types import parse_modifiers, type_parameter_names

logger = logging.getLogger(__name__)


def interface_assertions(ctx: MigrationContext, node: SyntaxNode, struct_name: str) -> list[ModuleVar]:
    """``var _ I = &S{}`` for every implemented interface."""
    return [
        ModuleVar("_", interface, GoExpression(f"&{struct_name}{{}}"))
        for interface in implemented_interfaces(ctx, node)
    ]


def abstract_ancestry(ctx: MigrationContext, superclass: Optional[str]) -> list[AbstractLayout]:
    """Layouts of the abstract superclass chain, nearest first."""
    layouts = []
    seen = set()
    while superclass is not None and superclass in ctx.abstract_layouts and superclass not in seen:
        seen.add(superclass)
        layout = ctx.abstract_layouts[superclass]
        layouts.append(layout)
        superclass = layout.superclass
    return layouts


def convert_nested_declaration(ctx: MigrationContext, node: SyntaxNode) -> None:
    from gomorph.java.migration import convert_type_declaration

    convert_type_declaration(ctx, node)


class ClassConverter:
    """Converts one concrete class declaration into ``ctx.source``."""

    def __init__(self, ctx: MigrationContext, node: SyntaxNode):
        self.ctx = ctx
        self.node = node
        self.java_name = require_field(node, "name").text
        declared = ctx.declared_types[self.java_name]
        self.name = declared.go_name
        self.public = declared.public
        self.type_params = type_parameter_names(node.child_by_field_name("type_parameters"))
        self.struct_type = generic_type_name(self.name, self.type_params)
        with ctx.type_parameters(self.type_params):
            self.superclass = superclass_type(ctx, node)
        self.ancestry = abstract_ancestry(ctx, self.superclass)
        self.fields: list[FieldInfo] = []
        self.struct = Struct(self.name, public=self.public, type_params=self.type_params)

    @property
    def extends_abstract(self) -> bool:
        return bool(self.ancestry)

    def receiver_fields(self) -> dict[str, str]:
        fields = {}
        for layout in reversed(self.ancestry):
            for field_name in layout.fields:
                fields[field_name] = capitalize_first_letter(field_name)
        for info in self.fields:
            if not info.static:
                fields[info.java_name] = info.name
        return fields

    def method_receiver(self) -> Receiver:
        self_name = lowercase_first_letter(self.name)[0] if self.extends_abstract else "this"
        return Receiver(
            kind=ReceiverKind.METHOD,
            self_expr=self_name,
            fields=self.receiver_fields(),
            export_methods=self.extends_abstract,
            struct_name=self.name,
            superclass=self.superclass,
        )

    def constructor_receiver(self) -> Receiver:
        receiver = self.method_receiver()
        receiver.self_expr = "this"
        return receiver

    def location(self, member: SyntaxNode) -> str:
        return f"class {self.name}.{member_label(member)}"

    def convert(self) -> None:
        ctx = self.ctx
        if self.extends_abstract:
            base = self.ancestry[0].name
            self.struct.embeds = [f"{base}Base", f"{base}Methods"]
        elif self.superclass is not None:
            self.struct.embeds = [self.superclass]
        ctx.source.structs.append(self.struct)

        members = body_members(self.node)
        for member in members:
            if member.kind == NodeKind.FIELD_DECLARATION:
                try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_field(m))

        has_constructor = False
        for member in members:
            if member.kind == NodeKind.FIELD_DECLARATION:
                continue
            if member.kind == NodeKind.CONSTRUCTOR_DECLARATION:
                has_constructor = True
            try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_member(m))

        if not has_constructor:
            try_migrate_member(ctx, f"class {self.name}.<default constructor>", self.node, self.add_default_constructor)
        if self.extends_abstract:
            try_migrate_member(ctx, f"class {self.name}.<abstract base>", self.node, self.complete_abstract_interface)
        if not self.type_params:
            ctx.source.vars.extend(interface_assertions(ctx, self.node, self.name))

    def convert_field(self, node: SyntaxNode) -> None:
        infos = field_declarators(self.ctx, node)
        for info in infos:
            if info.static:
                self.ctx.source.vars.append(module_var(self.ctx, info))
        self.struct.fields.extend(struct_fields([info for info in infos if not info.static]))
        self.fields.extend(infos)

    def convert_member(self, member: SyntaxNode) -> None:
        ctx = self.ctx
        if member.kind == NodeKind.METHOD_DECLARATION:
            receiver_param = Param(self.method_receiver().self_expr, "*" + self.struct_type)
            with ctx.type_parameters(self.type_params):
                function = convert_method(ctx, member, self.method_receiver(), receiver_param, self.extends_abstract)
            if isinstance(function, Method):
                ctx.source.methods.append(function)
            else:
                ctx.source.functions.append(function)
        elif member.kind == NodeKind.CONSTRUCTOR_DECLARATION:
            ctx.source.functions.append(
                convert_constructor(
                    ctx, member, self.struct_type, self.constructor_receiver(), self.fields, self.type_params
                )
            )
        elif member.kind == NodeKind.STATIC_INITIALIZER:
            ctx.source.functions.append(convert_static_initializer(ctx, member))
        elif member.kind in TYPE_DECLARATIONS:
            convert_nested_declaration(ctx, member)
        elif member.kind == NodeKind.EMPTY_STATEMENT:
            return
        else:
            raise unhandled_child(member, "class_body")

    def add_default_constructor(self) -> None:
        public = parse_modifiers(self.node).is_public
        self.ctx.source.functions.append(
            default_constructor(
                self.ctx,
                self.java_name,
                self.struct_type,
                self.constructor_receiver(),
                self.fields,
                public,
                self.type_params,
            )
        )

    def _declared_methods(self) -> set[tuple[str, tuple[str, ...]]]:
        declared = set()
        for member in body_members(self.node):
            if member.kind == NodeKind.METHOD_DECLARATION:
                signature = self.ctx.method_signature(member)
                declared.add((signature.java_name, tuple(p.type for p in signature.params)))
        return declared

    def complete_abstract_interface(self) -> None:
        """
        Add what the struct still needs to satisfy the abstract base's interface.

        Inherited default methods get a wrapper that points ``Self`` at the
        receiver before delegating, so the default body dispatches back into
        this struct. Abstract methods nobody implemented get a panic stub.
        """
        ctx = self.ctx
        receiver_name = self.method_receiver().self_expr
        declared = self._declared_methods()
        for layout in self.ancestry:
            methods_field = f"{layout.name}Methods"
            for node_id in layout.default_methods:
                signature = ctx.method_signature(ctx.tree.node(node_id))
                key = (signature.java_name, tuple(p.type for p in signature.params))
                if key in declared:
                    continue
                declared.add(key)
                name = capitalize_first_letter(signature.name)
                holder = FieldRef(VarRef(receiver_name), methods_field)
                variadic = bool(signature.params) and signature.params[-1].type.startswith("...")
                call = CallExpression(FieldRef(holder, name), [VarRef(p.name) for p in signature.params], variadic)
                body = [AssignStatement(FieldRef(holder, "Self"), VarRef(receiver_name))]
                body.append(ReturnStatement([call]) if signature.return_type else CallStatement(call))
                ctx.source.methods.append(
                    Method(
                        name=name,
                        params=signature.params,
                        return_type=signature.return_type,
                        body=body,
                        public=True,
                        receiver=Param(receiver_name, "*" + self.struct_type),
                    )
                )
            for node_id in layout.abstract_methods:
                signature = ctx.method_signature(ctx.tree.node(node_id))
                key = (signature.java_name, tuple(p.type for p in signature.params))
                if key in declared:
                    continue
                declared.add(key)
                ctx.source.methods.append(
                    Method(
                        name=capitalize_first_letter(signature.name),
                        params=signature.params,
                        return_type=signature.return_type,
                        body=panic_body(f"{signature.java_name} is not implemented"),
                        public=True,
                        receiver=Param(receiver_name, "*" + self.struct_type),
                    )
                )
        if not self.type_params:
            ctx.source.vars.append(ModuleVar("_", self.ancestry[0].name, GoExpression(f"&{self.name}{{}}")))


def convert_class(ctx: MigrationContext, node: SyntaxNode) -> None:
    if parse_modifiers(node).is_abstract:
        convert_abstract_class(ctx, node)
        return
    ClassConverter(ctx, node).convert()
