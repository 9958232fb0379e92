"""
Unit tests for the member failure boundary.
"""

import pytest

from gomorph.config.models import ErrorCategory, MigrationMode
from gomorph.gosrc.model import Function
from gomorph.java.context import MigrationContext
from gomorph.java.errors import StructuralError, UnhandledConstructError
from gomorph.java.recovery import try_migrate_member
from gomorph.java.syntax import NodeKind, parse_java

SOURCE = "class Worker {\n    void run() { go(); }\n}\n"


@pytest.fixture
def method_node():
    tree = parse_java(SOURCE)
    return tree, next(n for n in tree.root.walk() if n.kind == NodeKind.METHOD_DECLARATION)


def context(tree, mode=MigrationMode.TOLERANT) -> MigrationContext:
    return MigrationContext(tree, source_path="Worker.java", mode=mode)


class TestTolerant:
    def test_success_merges_staged_declarations(self, method_node):
        tree, node = method_node
        ctx = context(tree)

        def convert():
            ctx.source.functions.append(Function("run"))
            return "done"

        result = try_migrate_member(ctx, "class Worker.run", node, convert)
        assert result.ok
        assert result.value == "done"
        assert [f.name for f in ctx.root_source.functions] == ["run"]

    def test_failure_discards_partial_output(self, method_node):
        tree, node = method_node
        ctx = context(tree)

        def convert():
            ctx.source.functions.append(Function("half"))
            raise UnhandledConstructError("unhandled statement child node kind: lambda_expression", node)

        result = try_migrate_member(ctx, "class Worker.run", node, convert)
        assert not result.ok
        assert ctx.root_source.functions == []
        assert len(ctx.diagnostics) == 1
        assert len(ctx.root_source.failed_migrations) == 1

        diagnostic = ctx.diagnostics[0]
        assert diagnostic.location == "class Worker.run"
        assert diagnostic.category == ErrorCategory.UNHANDLED
        assert diagnostic.node_kind == NodeKind.METHOD_DECLARATION
        assert diagnostic.java_source == "void run() { go(); }"
        assert diagnostic.sexpr.startswith("(method_declaration")

    def test_error_node_is_reported(self, method_node):
        tree, node = method_node
        ctx = context(tree)
        body = node.child_by_field_name("body")

        def convert():
            raise StructuralError("missing piece", body)

        try_migrate_member(ctx, "class Worker.run", node, convert)
        assert ctx.diagnostics[0].node_kind == "block"
        assert ctx.diagnostics[0].category == ErrorCategory.STRUCTURAL
        assert ctx.root_source.failed_migrations[0].java_source == "void run() { go(); }"

    def test_unexpected_exception_is_internal(self, method_node):
        tree, node = method_node
        ctx = context(tree)

        def convert():
            raise ValueError("boom")

        try_migrate_member(ctx, "class Worker.run", node, convert)
        assert ctx.diagnostics[0].category == ErrorCategory.INTERNAL
        assert "boom" in ctx.diagnostics[0].message


class TestStrict:
    def test_failure_propagates(self, method_node):
        tree, node = method_node
        ctx = context(tree, MigrationMode.STRICT)

        def convert():
            raise UnhandledConstructError("nope", node)

        with pytest.raises(UnhandledConstructError):
            try_migrate_member(ctx, "class Worker.run", node, convert)
        assert ctx.diagnostics == []
