"""
Failure taxonomy of the translation engine.

Every converter failure is a ``MigrationError`` subclass carrying the node it
happened on. The recovery shell turns them into diagnostics in tolerant mode
and lets them propagate in strict mode. Overload ambiguity is not an error
and never appears here.
"""

from typing import Optional

from gomorph.config.models import ErrorCategory
from gomorph.java.syntax import SyntaxNode


class MigrationError(Exception):
    """Base class for failures raised while converting a node."""

    category = ErrorCategory.INTERNAL

    def __init__(self, message: str, node: Optional[SyntaxNode] = None):
        super().__init__(message)
        self.message = message
        self.node = node

    @property
    def node_kind(self) -> str:
        return self.node.kind if self.node is not None else ""


class TypeMappingError(MigrationError):
    """A type expression has no mapping rule."""

    category = ErrorCategory.MAPPING


class GenericArityError(TypeMappingError):
    """A list-like or map-like container was given too many type parameters."""

    pass


class StructuralError(MigrationError):
    """An expected child or field is missing from a node."""

    category = ErrorCategory.STRUCTURAL


class UnhandledConstructError(MigrationError):
    """A node kind has no converter in the current position."""

    category = ErrorCategory.UNHANDLED


class SignatureCacheMiss(RuntimeError):
    """The analysis pass did not record a declaration the migration pass reached."""

    pass


def unhandled_child(node: SyntaxNode, parent_name: str) -> UnhandledConstructError:
    return UnhandledConstructError(f"unhandled {parent_name} child node kind: {node.kind}", node)


def require_field(node: SyntaxNode, field_name: str) -> SyntaxNode:
    """Return the child stored under ``field_name`` or raise ``StructuralError``."""
    child = node.child_by_field_name(field_name)
    if child is None:
        raise StructuralError(f"{node.kind} has no {field_name} field", node)
    return child
