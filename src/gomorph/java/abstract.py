"""
Abstract class decomposition.

Go has no inheritance, so an abstract class ``Foo`` is split into:

- ``FooData``: getter/setter interface for the instance fields,
- ``Foo``: the interface every subclass satisfies (data plus all methods),
- ``FooBase``: struct holding the fields,
- ``FooMethods``: struct holding the default method bodies, which call back
  into the concrete type through ``Self``.
"""

import logging

from gomorph.gosrc.model import (
    AssignStatement,
    FieldRef,
    Interface,
    InterfaceMethod,
    Method,
    Param,
    ReturnStatement,
    Struct,
    StructField,
    VarRef,
)
from gomorph.gosrc.naming import capitalize_first_letter, safe_identifier
from gomorph.java.context import MigrationContext, Receiver, ReceiverKind
from gomorph.java.errors import require_field, unhandled_child
from gomorph.java.members import (
    body_members,
    convert_method,
    convert_static_initializer,
    field_declarators,
    generic_type_name,
    implemented_interfaces,
    member_label,
    module_var,
)
from gomorph.java.recovery import try_migrate_member
from gomorph.java.signatures import TYPE_DECLARATIONS
from gomorph.java.syntax import NodeKind, SyntaxNode
from gomorph.java.types import parse_modifiers, type_parameter_names

logger = logging.getLogger(__name__)


class AbstractClassConverter:
    def __init__(self, ctx: MigrationContext, node: SyntaxNode):
        self.ctx = ctx
        self.node = node
        java_name = require_field(node, "name").text
        self.name = ctx.declared_types[java_name].go_name
        self.layout = ctx.abstract_layouts[self.name]
        self.type_params = type_parameter_names(node.child_by_field_name("type_parameters"))

        self.data = Interface(f"{self.name}Data", public=True, type_params=self.type_params)
        self.interface = Interface(self.name, public=True, type_params=self.type_params)
        self.base = Struct(f"{self.name}Base", public=True, type_params=self.type_params)
        self.methods = Struct(f"{self.name}Methods", public=True, type_params=self.type_params)

    def _generic(self, name: str) -> str:
        return generic_type_name(name, self.type_params)

    def location(self, member: SyntaxNode) -> str:
        return f"abstract class {self.name}.{member_label(member)}"

    def default_receiver(self) -> Receiver:
        return Receiver(
            kind=ReceiverKind.ABSTRACT_DEFAULT,
            self_expr="m.Self",
            fields={name: capitalize_first_letter(name) for name in self.layout.fields},
            export_methods=True,
            struct_name=self.name,
            superclass=self.layout.superclass,
        )

    def convert(self) -> None:
        ctx = self.ctx
        self.interface.embeds = [self._generic(self.data.name)]
        superclass = self.layout.superclass
        if superclass in ctx.abstract_layouts:
            self.interface.embeds.append(superclass)
            self.base.embeds.append(f"{superclass}Base")
            self.methods.embeds.append(f"{superclass}Methods")
        elif superclass is not None:
            self.base.embeds.append(superclass)
        with ctx.type_parameters(self.type_params):
            self.interface.embeds.extend(implemented_interfaces(ctx, self.node))
        self.methods.fields.append(StructField("Self", self._generic(self.name), True))

        ctx.source.interfaces.extend([self.data, self.interface])
        ctx.source.structs.extend([self.base, self.methods])

        members = body_members(self.node)
        for member in members:
            if member.kind == NodeKind.FIELD_DECLARATION:
                try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_field(m))
        for member in members:
            if member.kind != NodeKind.FIELD_DECLARATION:
                try_migrate_member(ctx, self.location(member), member, lambda m=member: self.convert_member(m))

    def convert_field(self, node: SyntaxNode) -> None:
        ctx = self.ctx
        infos = field_declarators(ctx, node)
        receiver = Param("b", "*" + self._generic(self.base.name))
        for info in infos:
            if info.static:
                ctx.source.vars.append(module_var(ctx, info))
                continue
            if info.value is not None:
                logger.debug(f"Dropping initializer of {self.name}.{info.java_name}; set it in the subclass")
            field_name = capitalize_first_letter(info.java_name)
            getter = "Get" + field_name
            setter = "Set" + field_name
            param = Param(safe_identifier(info.java_name), info.go_type)
            self.data.methods.append(InterfaceMethod(getter, return_type=info.go_type))
            self.data.methods.append(InterfaceMethod(setter, [param]))
            self.base.fields.append(StructField(field_name, info.go_type, True))
            ctx.source.methods.append(
                Method(
                    name=getter,
                    return_type=info.go_type,
                    body=[ReturnStatement([FieldRef(VarRef("b"), field_name)])],
                    public=True,
                    receiver=receiver,
                )
            )
            ctx.source.methods.append(
                Method(
                    name=setter,
                    params=[param],
                    body=[AssignStatement(FieldRef(VarRef("b"), field_name), VarRef(param.name))],
                    public=True,
                    receiver=receiver,
                )
            )

    def convert_member(self, member: SyntaxNode) -> None:
        ctx = self.ctx
        if member.kind == NodeKind.METHOD_DECLARATION:
            self.convert_method(member)
        elif member.kind == NodeKind.CONSTRUCTOR_DECLARATION:
            logger.debug(f"Skipping constructor of abstract class {self.name} at {member.location}")
        elif member.kind == NodeKind.STATIC_INITIALIZER:
            ctx.source.functions.append(convert_static_initializer(ctx, member))
        elif member.kind in TYPE_DECLARATIONS:
            from gomorph.java.migration import convert_type_declaration

            convert_type_declaration(ctx, member)
        elif member.kind == NodeKind.EMPTY_STATEMENT:
            return
        else:
            raise unhandled_child(member, "class_body")

    def convert_method(self, node: SyntaxNode) -> None:
        ctx = self.ctx
        signature = ctx.method_signature(node)
        if signature.static:
            with ctx.type_parameters(self.type_params):
                ctx.source.functions.append(convert_method(ctx, node, Receiver(), None))
            return
        name = capitalize_first_letter(signature.name)
        self.interface.methods.append(InterfaceMethod(name, signature.params, signature.return_type))
        if parse_modifiers(node).is_abstract:
            return
        receiver_param = Param("m", "*" + self._generic(self.methods.name))
        ctx.source.methods.append(convert_method(ctx, node, self.default_receiver(), receiver_param, export=True))


def convert_abstract_class(ctx: MigrationContext, node: SyntaxNode) -> None:
    AbstractClassConverter(ctx, node).convert()
