"""
Signature analyzer.

Runs once over the whole tree before any conversion. It records every
declared type, the layout of every abstract class, and the signature of
every method and constructor, so converters can resolve forward references
and overloads without re-deriving anything.
"""

import logging
from typing import Optional

from gomorph.gosrc.model import Param
from gomorph.gosrc.naming import (
    capitalize_first_letter,
    overloaded_name,
    safe_identifier,
    to_identifier,
    type_name_fragment,
)
from gomorph.java.context import (
    AbstractLayout,
    ConstructorSignature,
    DeclaredType,
    MethodSignature,
    MigrationContext,
    Signature,
)
from gomorph.java.errors import MigrationError, StructuralError, require_field
from gomorph.java.syntax import NodeKind, SyntaxNode
from gomorph.java.types import (
    Modifiers,
    map_type_name,
    parse_modifiers,
    parse_type,
    try_parse_type,
    type_parameter_names,
)

logger = logging.getLogger(__name__)

TYPE_DECLARATIONS = frozenset({
    NodeKind.CLASS_DECLARATION,
    NodeKind.INTERFACE_DECLARATION,
    NodeKind.ENUM_DECLARATION,
    NodeKind.RECORD_DECLARATION,
})

_COMMENTS = (NodeKind.LINE_COMMENT, NodeKind.BLOCK_COMMENT)


# =============================================================================
# Bucket registration
# =============================================================================


def _unique(name: str, taken: set[str]) -> str:
    candidate, counter = name, 2
    while candidate in taken:
        candidate = f"{name}{counter}"
        counter += 1
    return candidate


def add_method(
    ctx: MigrationContext,
    java_name: str,
    argument_types: list[str],
    public: bool = False,
    static: bool = False,
) -> Signature:
    """
    Register a method signature under its Java name.

    An entry with the same argument types is reused; otherwise the first
    entry keeps the Java name and later ones get a mangled name.

    Returns:
        The bucket entry the method maps to.
    """
    bucket = ctx.methods.setdefault(java_name, [])
    for existing in bucket:
        if existing.same_arguments(argument_types):
            existing.public = existing.public or public
            return existing
    if bucket:
        name = _unique(overloaded_name(java_name, argument_types), {s.name for s in bucket})
    else:
        name = java_name
    signature = Signature(name, list(argument_types), public, static)
    bucket.append(signature)
    return signature


def default_constructor_name(java_type_name: str, public: bool) -> str:
    return to_identifier("new", public) + capitalize_first_letter(type_name_fragment(java_type_name))


def add_constructor(
    ctx: MigrationContext,
    type_name: str,
    java_type_name: str,
    argument_types: list[str],
    public: bool = False,
    name_parts: Optional[list[str]] = None,
) -> Signature:
    """
    Register a constructor for ``type_name`` (the mapped owner type).

    The name is ``new``/``New`` + type + ``From`` + parameter type fragments,
    or the parts given in ``name_parts`` (records use component names).
    """
    bucket = ctx.constructors.setdefault(type_name, [])
    for existing in bucket:
        if existing.same_arguments(argument_types):
            return existing
    name = default_constructor_name(java_type_name, public)
    parts = name_parts if name_parts is not None else [type_name_fragment(ty) for ty in argument_types]
    if parts:
        name += "From" + "".join(capitalize_first_letter(part) for part in parts)
    name = _unique(name, {s.name for s in bucket})
    signature = Signature(name, list(argument_types), public)
    bucket.append(signature)
    return signature


# =============================================================================
# Declaration helpers
# =============================================================================


def parse_parameters(ctx: MigrationContext, node: SyntaxNode) -> list[Param]:
    """Convert a ``formal_parameters`` node."""
    params = []
    for child in node.named_children:
        if child.kind == NodeKind.FORMAL_PARAMETER:
            name = require_field(child, "name").text
            ty = parse_type(ctx, require_field(child, "type"))
            dimensions = child.child_by_field_name("dimensions")
            if dimensions is not None:
                ty = "[]" * dimensions.text.count("[") + ty
            params.append(Param(safe_identifier(name), ty))
        elif child.kind == NodeKind.SPREAD_PARAMETER:
            ty = None
            name = None
            for part in child.named_children:
                if part.kind == NodeKind.VARIABLE_DECLARATOR:
                    name = require_field(part, "name").text
                elif ty is None:
                    ty = try_parse_type(ctx, part)
            if ty is None or name is None:
                raise StructuralError("spread parameter without type or name", child)
            params.append(Param(safe_identifier(name), "..." + ty))
        elif child.kind in (NodeKind.RECEIVER_PARAMETER, *_COMMENTS):
            continue
        else:
            raise StructuralError(f"unexpected parameter node {child.kind}", child)
    return params


def enclosing_type(node: SyntaxNode) -> Optional[SyntaxNode]:
    for ancestor in node.ancestors():
        if ancestor.kind in TYPE_DECLARATIONS:
            return ancestor
    return None


def enclosing_type_parameters(node: SyntaxNode) -> list[str]:
    names: list[str] = []
    for ancestor in node.ancestors():
        if ancestor.kind in TYPE_DECLARATIONS:
            names.extend(type_parameter_names(ancestor.child_by_field_name("type_parameters")))
    return names


def superclass_type(ctx: MigrationContext, class_node: SyntaxNode) -> Optional[str]:
    superclass = class_node.child_by_field_name("superclass")
    if superclass is None:
        return None
    for child in superclass.named_children:
        ty = try_parse_type(ctx, child)
        if ty is not None:
            return ty
    raise StructuralError("superclass without a type", superclass)


def fold_throws(return_type: Optional[str], throws: bool) -> Optional[str]:
    """Fold a throws clause into the Go result list."""
    if not throws:
        return return_type
    if return_type is None:
        return "error"
    return f"({return_type}, error)"


def declared_go_name(node: SyntaxNode, ctx: MigrationContext) -> str:
    """Go name of a declared type; the rules must match the converters."""
    name = require_field(node, "name").text
    mods = parse_modifiers(node)
    if node.kind == NodeKind.INTERFACE_DECLARATION:
        return capitalize_first_letter(name)
    if node.kind == NodeKind.CLASS_DECLARATION and mods.is_abstract:
        for prefix in ctx.config.strip_type_prefixes:
            rest = name[len(prefix):]
            if name.startswith(prefix) and rest and rest[0].isupper():
                return rest
        return name
    return to_identifier(name, type_is_public(node, mods, ctx))


def type_is_public(node: SyntaxNode, mods: Modifiers, ctx: MigrationContext) -> bool:
    if node.kind == NodeKind.ENUM_DECLARATION:
        return mods.is_public or not mods.has_access_modifier
    if node.kind == NodeKind.CLASS_DECLARATION:
        superclass = node.child_by_field_name("superclass")
        if superclass is not None and superclass_type(ctx, node) in ctx.abstract_types:
            return True
    return mods.is_public


# =============================================================================
# Analyzer
# =============================================================================


class SignatureAnalyzer:
    """Collects declarations from the whole tree in a single traversal."""

    def __init__(self, ctx: MigrationContext):
        self.ctx = ctx

    def run(self) -> None:
        types: list[SyntaxNode] = []
        methods: list[SyntaxNode] = []
        constructors: list[SyntaxNode] = []
        records: list[SyntaxNode] = []
        for node in self.ctx.tree.root.walk():
            if node.kind in TYPE_DECLARATIONS:
                types.append(node)
                if node.kind == NodeKind.RECORD_DECLARATION:
                    records.append(node)
            elif node.kind == NodeKind.METHOD_DECLARATION:
                methods.append(node)
            elif node.kind == NodeKind.CONSTRUCTOR_DECLARATION:
                constructors.append(node)

        for node in types:
            self._guarded(node, self._record_abstract)
        for node in types:
            self._guarded(node, self._record_type)
        for node in methods:
            self._guarded(node, self._record_method)
        for node in constructors:
            self._guarded(node, self._record_constructor)
        for node in records:
            self._guarded(node, self._record_canonical_constructor)
        logger.debug(
            f"Analyzed {len(self.ctx.signature_cache)} methods, "
            f"{len(self.ctx.constructor_cache)} constructors, {len(types)} types"
        )

    def _guarded(self, node: SyntaxNode, step) -> None:
        try:
            step(node)
        except MigrationError as e:
            if self.ctx.strict:
                raise
            if e.node is None:
                e.node = node
            self.ctx.signature_failures.setdefault(node.id, e)
            logger.warning(f"Signature analysis failed for {node.kind} at {node.location}: {e}")

    def _record_abstract(self, node: SyntaxNode) -> None:
        if node.kind != NodeKind.CLASS_DECLARATION or not parse_modifiers(node).is_abstract:
            return
        ctx = self.ctx
        go_name = declared_go_name(node, ctx)
        ctx.abstract_types.add(go_name)
        layout = AbstractLayout(name=go_name)
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.kind == NodeKind.FIELD_DECLARATION:
                if parse_modifiers(member).is_static:
                    continue
                for declarator in member.children_by_field_name("declarator"):
                    layout.fields.append(require_field(declarator, "name").text)
            elif member.kind == NodeKind.METHOD_DECLARATION:
                mods = parse_modifiers(member)
                if mods.is_abstract:
                    layout.abstract_methods.append(member.id)
                elif not mods.is_static:
                    layout.default_methods.append(member.id)
        ctx.abstract_layouts[go_name] = layout

    def _record_type(self, node: SyntaxNode) -> None:
        ctx = self.ctx
        java_name = require_field(node, "name").text
        mods = parse_modifiers(node)
        go_name = declared_go_name(node, ctx)
        ctx.declared_types[java_name] = DeclaredType(
            java_name=java_name,
            go_name=go_name,
            public=type_is_public(node, mods, ctx),
            kind=node.kind,
        )
        if node.kind == NodeKind.ENUM_DECLARATION:
            body = require_field(node, "body")
            for constant in body.children_of_kind(NodeKind.ENUM_CONSTANT):
                constant_name = require_field(constant, "name").text
                ctx.enum_constants.setdefault(constant_name, f"{go_name}_{constant_name}")
        if go_name in ctx.abstract_layouts:
            with ctx.type_parameters(enclosing_type_parameters(node)):
                ctx.abstract_layouts[go_name].superclass = superclass_type(ctx, node)

    def _method_is_public(self, node: SyntaxNode, mods: Modifiers) -> bool:
        owner = enclosing_type(node)
        if mods.is_public or owner is None:
            return mods.is_public
        if owner.kind == NodeKind.INTERFACE_DECLARATION:
            return True
        if owner.kind == NodeKind.CLASS_DECLARATION:
            if parse_modifiers(owner).is_abstract:
                return True
            return superclass_type(self.ctx, owner) in self.ctx.abstract_types
        return False

    def _record_method(self, node: SyntaxNode) -> None:
        ctx = self.ctx
        mods = parse_modifiers(node)
        java_name = require_field(node, "name").text
        owner = enclosing_type(node)
        own_params = type_parameter_names(node.child_by_field_name("type_parameters"))
        with ctx.type_parameters(enclosing_type_parameters(node) + own_params):
            params = parse_parameters(ctx, require_field(node, "parameters"))
            type_node = node.child_by_field_name("type")
            return_type = try_parse_type(ctx, type_node) if type_node is not None else None
            dimensions = node.child_by_field_name("dimensions")
            if return_type is not None and dimensions is not None:
                return_type = "[]" * dimensions.text.count("[") + return_type
        throws = node.first_child_of_kind(NodeKind.THROWS) is not None
        in_interface = owner is not None and owner.kind == NodeKind.INTERFACE_DECLARATION
        has_body = node.child_by_field_name("body") is not None
        public = self._method_is_public(node, mods)
        signature = add_method(ctx, java_name, [p.type for p in params], public, mods.is_static)
        ctx.signature_cache[node.id] = MethodSignature(
            java_name=java_name,
            signature=signature,
            params=params,
            return_type=fold_throws(return_type, throws),
            public=public,
            static=mods.is_static,
            abstract=mods.is_abstract or (in_interface and not has_body),
            default=bool(mods & Modifiers.DEFAULT),
            throws=throws,
            owner=require_field(owner, "name").text if owner is not None else "",
            type_params=own_params,
            value_type=return_type,
        )

    def _owner_type(self, node: SyntaxNode) -> tuple[str, str]:
        owner = enclosing_type(node)
        if owner is None:
            raise StructuralError("constructor outside of a type declaration", node)
        java_name = require_field(owner, "name").text
        return map_type_name(self.ctx, java_name), java_name

    def _record_constructor(self, node: SyntaxNode) -> None:
        ctx = self.ctx
        mods = parse_modifiers(node)
        type_name, java_name = self._owner_type(node)
        with ctx.type_parameters(enclosing_type_parameters(node)):
            params = parse_parameters(ctx, require_field(node, "parameters"))
        signature = add_constructor(ctx, type_name, java_name, [p.type for p in params], mods.is_public)
        ctx.constructor_cache[node.id] = ConstructorSignature(
            type_name=type_name, signature=signature, params=params, public=mods.is_public
        )

    def _record_canonical_constructor(self, node: SyntaxNode) -> None:
        """Records always get a constructor taking every component."""
        ctx = self.ctx
        java_name = require_field(node, "name").text
        type_name = map_type_name(ctx, java_name)
        with ctx.type_parameters(enclosing_type_parameters(node) + type_parameter_names(
            node.child_by_field_name("type_parameters")
        )):
            params = parse_parameters(ctx, require_field(node, "parameters"))
        compact = None
        body = node.child_by_field_name("body")
        if body is not None:
            compact = body.first_child_of_kind(NodeKind.COMPACT_CONSTRUCTOR_DECLARATION)
        mods = parse_modifiers(compact) if compact is not None else Modifiers.NONE
        public = mods.is_public or parse_modifiers(node).is_public
        signature = add_constructor(
            ctx,
            type_name,
            java_name,
            [p.type for p in params],
            public,
            name_parts=[p.name for p in params],
        )
        ctx.constructor_cache[(compact or node).id] = ConstructorSignature(
            type_name=type_name, signature=signature, params=params, public=public
        )


def analyze(ctx: MigrationContext) -> None:
    SignatureAnalyzer(ctx).run()
