"""
Error recovery shell.

``try_migrate_member`` is the member boundary. In tolerant mode the member is
converted into a staging ``GoSource`` that is merged only on success, so a
failed member never leaves half of its declarations behind. The failure
becomes one diagnostic plus one ``FailedMigration`` block in the root IR.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from gomorph.config.models import ErrorCategory, MigrationDiagnostic
from gomorph.gosrc.model import FailedMigration, GoSource
from gomorph.java.context import MigrationContext
from gomorph.java.errors import MigrationError
from gomorph.java.syntax import SyntaxNode

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class MemberResult(Generic[T]):
    value: Optional[T] = None
    diagnostic: Optional[MigrationDiagnostic] = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


def record_failure(
    ctx: MigrationContext, location: str, node: SyntaxNode, error: Exception
) -> MigrationDiagnostic:
    """Append the diagnostic and the placeholder block for one failed member."""
    if isinstance(error, MigrationError):
        failed_node = error.node or node
        message = error.message
        category = error.category
    else:
        failed_node = node
        message = f"unexpected error: {error!r}"
        category = ErrorCategory.INTERNAL

    diagnostic = MigrationDiagnostic(
        location=location,
        message=message,
        java_source=failed_node.text,
        sexpr=failed_node.to_sexp(),
        node_kind=failed_node.kind,
        category=category,
    )
    ctx.diagnostics.append(diagnostic)
    ctx.root_source.failed_migrations.append(
        FailedMigration(
            location=location,
            error=message,
            java_source=node.text,
            sexpr=failed_node.to_sexp(),
        )
    )
    logger.error(f"Error migrating {location}: {message}")
    return diagnostic


def try_migrate_member(
    ctx: MigrationContext, location: str, node: SyntaxNode, fn: Callable[[], Any]
) -> MemberResult:
    """
    Run one member conversion under a failure boundary.

    Args:
        ctx: Migration context; ``ctx.source`` receives the member's
            declarations on success.
        location: Human-readable location such as ``class Foo.bar``.
        node: The member's syntax node, reported when the failure has none.
        fn: Converts the member. Its return value is passed back.

    Returns:
        ``MemberResult`` holding either the value or the diagnostic.
    """
    if ctx.strict:
        return MemberResult(value=fn())

    staged = GoSource(package_name=ctx.source.package_name)
    with ctx.redirect_source(staged):
        try:
            value = fn()
        except Exception as e:
            failure = e
        else:
            failure = None
    if failure is not None:
        return MemberResult(diagnostic=record_failure(ctx, location, node, failure))
    ctx.source.extend(staged)
    return MemberResult(value=value)
