"""
Unit tests for the Go IR and its rendering.
"""

from gomorph.gosrc.model import (
    BinaryExpression,
    CallExpression,
    CallStatement,
    CatchClause,
    CommentStmt,
    ConstBlock,
    ConstEntry,
    FailedMigration,
    Function,
    GoExpression,
    GoSource,
    GoStatement,
    IfStatement,
    Interface,
    InterfaceMethod,
    Method,
    ModuleConst,
    ModuleVar,
    Param,
    ReturnStatement,
    Struct,
    StructField,
    SwitchCase,
    SwitchStatement,
    TryStatement,
    UnaryExpression,
    VarDeclaration,
    VarRef,
)


class TestExpressions:
    def test_nested_binary_is_parenthesized(self):
        inner = BinaryExpression(VarRef("a"), "+", VarRef("b"))
        outer = BinaryExpression(inner, "*", VarRef("c"))
        assert outer.to_source() == "((a + b) * c)"
        assert ReturnStatement([outer]).to_source() == "return (a + b) * c"

    def test_call_arguments_are_bare(self):
        call = CallExpression("f", [BinaryExpression(VarRef("x"), "-", GoExpression("1"))])
        assert call.to_source() == "f(x - 1)"

    def test_variadic_call(self):
        call = CallExpression("append", [VarRef("xs"), VarRef("ys")], variadic=True)
        assert call.to_source() == "append(xs, ys...)"

    def test_double_negation(self):
        assert UnaryExpression("!", UnaryExpression("!", VarRef("ok"))).to_source() == "!(!ok)"


class TestStatements:
    def test_var_declaration_forms(self):
        assert VarDeclaration("x", "int").to_source() == "var x int"
        assert VarDeclaration("x", "int", GoExpression("1")).to_source() == "var x int = 1"
        assert VarDeclaration("x", value=GoExpression("1")).to_source() == "x := 1"
        assert VarDeclaration("x", "int", GoExpression("1"), short=True).to_source() == "x := 1"

    def test_else_if_chain(self):
        inner = IfStatement(VarRef("b"), [GoStatement("two")])
        outer = IfStatement(VarRef("a"), [GoStatement("one")], [inner])
        assert outer.to_source() == "if a {\n\tone\n} else if b {\n\ttwo\n}"

    def test_switch_fallthrough_and_default(self):
        switch = SwitchStatement(
            VarRef("n"),
            [
                SwitchCase([GoExpression("1")], [GoStatement("a")], fallthrough=True),
                SwitchCase([GoExpression("2"), GoExpression("3")], [GoStatement("b")]),
                SwitchCase([], [GoStatement("c")], default=True),
            ],
        )
        assert switch.to_source() == (
            "switch n {\ncase 1:\n\ta\n\tfallthrough\ncase 2, 3:\n\tb\ndefault:\n\tc\n}"
        )

    def test_default_keeps_its_position(self):
        switch = SwitchStatement(
            VarRef("n"),
            [
                SwitchCase([], [GoStatement("a")], fallthrough=True, default=True),
                SwitchCase([GoExpression("1")], [GoStatement("b")]),
            ],
        )
        assert switch.to_source() == "switch n {\ndefault:\n\ta\n\tfallthrough\ncase 1:\n\tb\n}"

    def test_try_renders_closure_with_recover(self):
        statement = TryStatement(
            body=[CallStatement(CallExpression("work"))],
            catches=[CatchClause("IllegalStateException", [GoStatement("handle()")], "e")],
            finally_body=[GoStatement("done()")],
        )
        lines = statement.to_source().splitlines()
        assert lines[0] == "func() {"
        assert lines[1] == "\tdefer func() {"
        assert lines[2] == "\t\tdone()"
        assert "\t\t\tif e, ok := r.(IllegalStateException); ok {" in lines
        assert "\t\t\t\tpanic(r) // re-panic if it's not a handled exception" in lines
        assert lines[-2] == "\twork()"
        assert lines[-1] == "}()"


class TestDeclarations:
    def test_struct_with_embeds(self):
        struct = Struct("Bar", [StructField("count", "int")], embeds=["FooBase", "FooMethods"], public=True)
        assert struct.to_source() == "type Bar struct {\n\tFooBase\n\tFooMethods\n\tcount int\n}"

    def test_empty_struct(self):
        assert Struct("Empty").to_source() == "type Empty struct {}"

    def test_generic_struct(self):
        assert Struct("Box", [StructField("value", "T")], type_params=["T"]).to_source() == (
            "type Box[T any] struct {\n\tvalue T\n}"
        )

    def test_interface(self):
        interface = Interface("Shape", [InterfaceMethod("Area", return_type="float64")], embeds=["ShapeData"])
        assert interface.to_source() == "type Shape interface {\n\tShapeData\n\tArea() float64\n}"

    def test_method_with_provenance_comment(self):
        method = Method(
            name="Area",
            return_type="float64",
            body=[ReturnStatement([GoExpression("0")])],
            comments=["migrated from Shape.java:3:5"],
            receiver=Param("this", "*Circle"),
        )
        assert method.to_source() == (
            "func (this *Circle) Area() float64 {\n\t// migrated from Shape.java:3:5\n\treturn 0\n}"
        )

    def test_const_block(self):
        block = ConstBlock([ConstEntry("Color_RED", "Color", GoExpression("iota")), ConstEntry("Color_GREEN")])
        assert block.to_source() == "const (\n\tColor_RED Color = iota\n\tColor_GREEN\n)"

    def test_module_var_with_comment(self):
        var = ModuleVar("INSTANCE", "Test", GoExpression("NewTest()"), comments=["FIXME: check"])
        assert var.to_source() == "// FIXME: check\nvar INSTANCE Test = NewTest()"


class TestFailedMigration:
    def test_every_line_is_commented(self):
        failed = FailedMigration(
            location="class Foo.bar",
            error="unhandled statement child node kind: lambda_expression\nsecond line",
            java_source="void bar() {\n    run(() -> {});\n}",
            sexpr="(method_declaration)",
        )
        lines = failed.to_source().splitlines()
        assert lines[0] == "// FIXME: Failed to migrate"
        assert lines[1] == "// Location: class Foo.bar"
        assert lines[2] == "// Error: unhandled statement child node kind: lambda_expression"
        assert "// Java source:" in lines
        assert "//     run(() -> {});" in lines
        assert lines[-1] == "// (method_declaration)"
        assert all(line.startswith("//") for line in lines)


class TestGoSource:
    def test_section_order(self):
        source = GoSource(package_name="shapes")
        source.functions.append(Function("NewCircle", return_type="Circle"))
        source.structs.append(Struct("Circle", public=True))
        source.interfaces.append(Interface("Shape", public=True))
        source.vars.append(ModuleVar("_", "Shape", GoExpression("&Circle{}")))
        source.constants.append(ModuleConst("Pi", BinaryExpression(GoExpression("22"), "/", GoExpression("7.0"))))
        source.add_import("fmt")
        source.add_import("fmt")
        text = source.to_source()
        assert text.startswith('package shapes\n\nimport (\n\t"fmt"\n)\n\n')
        assert text.index("type Shape interface") < text.index("type Circle struct")
        assert "const Pi = 22 / 7.0" in text
        assert text.index("type Circle struct") < text.index("const Pi")
        assert text.index("const Pi") < text.index("var _ Shape")
        assert text.index("var _ Shape") < text.index("func NewCircle")
        assert text.endswith("\n")

    def test_license_header_line_endings(self):
        text = GoSource().to_source(license_header="// Copyright\r\n// Example\r\n")
        assert text.startswith("// Copyright\n// Example\n\npackage converted\n")

    def test_extend_appends_after_existing(self):
        root = GoSource()
        root.functions.append(Function("first"))
        staged = GoSource()
        staged.functions.append(Function("second"))
        staged.add_import("os")
        root.extend(staged)
        assert [f.name for f in root.functions] == ["first", "second"]
        assert [i.path for i in root.imports] == ["os"]

    def test_is_empty(self):
        source = GoSource()
        assert source.is_empty()
        source.vars.append(ModuleVar("x", "int"))
        assert not source.is_empty()

    def test_comment_statement(self):
        comment = CommentStmt(["Default field initializations"])
        assert comment.to_source() == "// Default field initializations"
