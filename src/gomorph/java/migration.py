"""
Translation driver.

``migrate_source`` parses one Java compilation unit, runs the signature
analysis, then converts every top-level declaration under its own failure
boundary. The returned context holds the Go IR and the diagnostics.
"""

import logging
from typing import Optional

from gomorph.config.models import MigrationConfig, MigrationMode
from gomorph.java.classes import convert_class
from gomorph.java.context import MigrationContext
from gomorph.java.enums import convert_enum
from gomorph.java.errors import unhandled_child
from gomorph.java.interfaces import convert_interface
from gomorph.java.recovery import try_migrate_member
from gomorph.java.records import convert_record
from gomorph.java.signatures import analyze
from gomorph.java.syntax import COMMENT_KINDS, NodeKind, SyntaxNode, parse_java

logger = logging.getLogger(__name__)

_CONVERTERS = {
    NodeKind.CLASS_DECLARATION: convert_class,
    NodeKind.INTERFACE_DECLARATION: convert_interface,
    NodeKind.ENUM_DECLARATION: convert_enum,
    NodeKind.RECORD_DECLARATION: convert_record,
}

_IGNORED = frozenset({
    NodeKind.PACKAGE_DECLARATION,
    NodeKind.IMPORT_DECLARATION,
    NodeKind.MODULE_DECLARATION,
    NodeKind.EMPTY_STATEMENT,
    *COMMENT_KINDS,
})

_KEYWORDS = {
    NodeKind.CLASS_DECLARATION: "class",
    NodeKind.INTERFACE_DECLARATION: "interface",
    NodeKind.ENUM_DECLARATION: "enum",
    NodeKind.RECORD_DECLARATION: "record",
    NodeKind.ANNOTATION_TYPE_DECLARATION: "@interface",
}


def convert_type_declaration(ctx: MigrationContext, node: SyntaxNode) -> None:
    converter = _CONVERTERS.get(node.kind)
    if converter is None:
        raise unhandled_child(node, "program")
    converter(ctx, node)


def declaration_location(node: SyntaxNode) -> str:
    keyword = _KEYWORDS.get(node.kind, node.kind)
    name = node.child_by_field_name("name")
    return f"{keyword} {name.text}" if name is not None else keyword


def migrate_tree(ctx: MigrationContext) -> MigrationContext:
    """Analyze and convert the tree held by ``ctx``; the IR lands in ``ctx.root_source``."""
    analyze(ctx)
    for node in ctx.tree.root.children:
        if node.kind in _IGNORED:
            continue
        try_migrate_member(
            ctx, declaration_location(node), node, lambda n=node: convert_type_declaration(ctx, n)
        )
    if ctx.diagnostics:
        logger.warning(f"{ctx.source_path}: {len(ctx.diagnostics)} member(s) could not be migrated")
    else:
        logger.info(f"{ctx.source_path}: migrated cleanly")
    return ctx


def migrate_source(
    java_source: str | bytes,
    source_path: str = "<memory>",
    config: Optional[MigrationConfig] = None,
    mode: MigrationMode = MigrationMode.TOLERANT,
) -> MigrationContext:
    """
    Translate one Java compilation unit.

    Args:
        java_source: Java source text.
        source_path: Path used in provenance comments and diagnostics.
        config: Migration configuration; defaults apply when omitted.
        mode: ``STRICT`` raises on the first failure, ``TOLERANT`` records a
            diagnostic and a placeholder block per failed member.

    Returns:
        The migration context; render with ``ctx.root_source.to_source()``.
    """
    tree = parse_java(java_source)
    ctx = MigrationContext(tree, source_path=source_path, mode=mode, config=config)
    logger.debug(f"Parsed {source_path} into {len(tree)} nodes")
    return migrate_tree(ctx)


def render(ctx: MigrationContext) -> str:
    """Go source text for a migrated context, with the configured license header."""
    return ctx.root_source.to_source(license_header=ctx.config.license_header)
