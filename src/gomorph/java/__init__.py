"""
Java to Go translation engine.

Parses Java with tree-sitter, collects declarations in a single analysis
pass, and lowers every declaration to the Go IR in ``gomorph.gosrc``.
"""

from gomorph.java.context import MigrationContext
from gomorph.java.errors import (
    GenericArityError,
    MigrationError,
    SignatureCacheMiss,
    StructuralError,
    TypeMappingError,
    UnhandledConstructError,
)
from gomorph.java.migration import migrate_source, migrate_tree, render
from gomorph.java.syntax import JavaParser, SyntaxNode, SyntaxTree, parse_java

__all__ = [
    "GenericArityError",
    "JavaParser",
    "MigrationContext",
    "MigrationError",
    "SignatureCacheMiss",
    "StructuralError",
    "SyntaxNode",
    "SyntaxTree",
    "TypeMappingError",
    "UnhandledConstructError",
    "migrate_source",
    "migrate_tree",
    "parse_java",
    "render",
]
