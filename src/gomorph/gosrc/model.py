"""
Go intermediate representation.

Converters build these dataclasses and append them to a ``GoSource``; nothing
is removed once appended. Every node knows how to render itself with
``to_source()``. Names stored in the IR are final Go identifiers, the
``public`` flags are kept as metadata for callers and tests.
"""

from dataclasses import dataclass, field
from typing import Optional


def _indent(text: str) -> list[str]:
    return ["\t" + line if line else "" for line in text.splitlines()]


def render_block(statements: list["Statement"]) -> list[str]:
    """Render statements one indentation level deeper than their owner."""
    lines: list[str] = []
    for statement in statements:
        lines.extend(_indent(statement.to_source()))
    return lines


def _block_source(header: str, statements: list["Statement"], footer: str = "}") -> str:
    return "\n".join([header + " {", *render_block(statements), footer])


def _type_params_source(type_params: list[str]) -> str:
    if not type_params:
        return ""
    return "[" + ", ".join(f"{name} any" for name in type_params) + "]"


def _comment_lines(text: str) -> list[str]:
    return ["// " + line if line else "//" for line in text.splitlines()] or ["//"]


# =============================================================================
# Expressions
# =============================================================================


class Expression:
    def to_source(self) -> str:
        raise NotImplementedError


@dataclass
class GoExpression(Expression):
    """Raw Go text, used for literals and passthrough."""

    source: str

    def to_source(self) -> str:
        return self.source


@dataclass
class VarRef(Expression):
    name: str

    def to_source(self) -> str:
        return self.name


@dataclass
class FieldRef(Expression):
    """Selector expression ``target.name``."""

    target: Expression
    name: str

    def to_source(self) -> str:
        return f"{self.target.to_source()}.{self.name}"


@dataclass
class CallExpression(Expression):
    function: Expression | str
    args: list[Expression] = field(default_factory=list)
    variadic: bool = False

    def to_source(self) -> str:
        function = self.function if isinstance(self.function, str) else self.function.to_source()
        args = ", ".join(bare_source(arg) for arg in self.args)
        if self.variadic:
            args += "..."
        return f"{function}({args})"


@dataclass
class BinaryExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def to_source(self) -> str:
        return f"({self.bare_source()})"

    def bare_source(self) -> str:
        return f"{self.left.to_source()} {self.operator} {self.right.to_source()}"


@dataclass
class UnaryExpression(Expression):
    operator: str
    operand: Expression

    def to_source(self) -> str:
        operand = self.operand.to_source()
        if isinstance(self.operand, UnaryExpression):
            operand = f"({operand})"
        return f"{self.operator}{operand}"


@dataclass
class CastExpression(Expression):
    type: str
    value: Expression

    def to_source(self) -> str:
        ty = self.type
        if ty.startswith("[]") or ty.startswith("*") or ty.startswith("map["):
            ty = f"({ty})"
        return f"{ty}({bare_source(self.value)})"


@dataclass
class TypeAssertion(Expression):
    """``interface{}(value).(T)``, the Go spelling of a reference downcast."""

    value: Expression
    type: str

    def to_source(self) -> str:
        return f"interface{{}}({bare_source(self.value)}).({self.type})"


@dataclass
class IndexExpression(Expression):
    target: Expression
    index: Expression

    def to_source(self) -> str:
        return f"{self.target.to_source()}[{bare_source(self.index)}]"


@dataclass
class CompositeLiteral(Expression):
    """``T{a, b}`` or, with ``keys``, ``T{k: a, l: b}``."""

    type: str
    elements: list[Expression] = field(default_factory=list)
    keys: list[str] = field(default_factory=list)

    def to_source(self) -> str:
        if self.keys:
            items = [f"{key}: {bare_source(value)}" for key, value in zip(self.keys, self.elements)]
        else:
            items = [bare_source(element) for element in self.elements]
        return f"{self.type}{{{', '.join(items)}}}"


@dataclass
class TypeCheckExpression(Expression):
    """
    ``value instanceof Type`` as a comma-ok type assertion.

    The assertion runs inside a closure that recovers from a panic, so
    asserting on a value that is not an interface degrades to ``false``.
    """

    value: Expression
    type: str

    def to_source(self) -> str:
        return "\n".join([
            "func() (ok bool) {",
            "\tdefer func() {",
            "\t\tif recover() != nil {",
            "\t\t\tok = false",
            "\t\t}",
            "\t}()",
            f"\t_, ok = interface{{}}({bare_source(self.value)}).({self.type})",
            "\treturn",
            "}()",
        ])


@dataclass
class TernaryExpression(Expression):
    condition: Expression
    consequence: Expression
    alternative: Expression
    type: str = "interface{}"

    def to_source(self) -> str:
        return "\n".join([
            f"func() {self.type} {{",
            f"\tif {bare_source(self.condition)} {{",
            f"\t\treturn {bare_source(self.consequence)}",
            "\t}",
            f"\treturn {bare_source(self.alternative)}",
            "}()",
        ])


def bare_source(expression: Expression) -> str:
    """Render without the outer parentheses binary expressions carry."""
    if isinstance(expression, BinaryExpression):
        return expression.bare_source()
    return expression.to_source()


NIL = GoExpression("nil")


# =============================================================================
# Statements
# =============================================================================


class Statement:
    def to_source(self) -> str:
        raise NotImplementedError


@dataclass
class GoStatement(Statement):
    source: str

    def to_source(self) -> str:
        return self.source


@dataclass
class CommentStmt(Statement):
    comments: list[str]

    def to_source(self) -> str:
        lines = []
        for comment in self.comments:
            lines.extend(_comment_lines(comment))
        return "\n".join(lines)


@dataclass
class VarDeclaration(Statement):
    name: str
    type: Optional[str] = None
    value: Optional[Expression] = None
    short: bool = False

    def to_source(self) -> str:
        if self.value is None:
            return f"var {self.name} {self.type}"
        if self.type is None or self.short:
            return f"{self.name} := {bare_source(self.value)}"
        return f"var {self.name} {self.type} = {bare_source(self.value)}"


@dataclass
class AssignStatement(Statement):
    target: Expression
    value: Expression

    def to_source(self) -> str:
        return f"{self.target.to_source()} = {bare_source(self.value)}"


@dataclass
class IncDecStatement(Statement):
    target: Expression
    operator: str

    def to_source(self) -> str:
        return f"{self.target.to_source()}{self.operator}"


@dataclass
class CallStatement(Statement):
    call: Expression

    def to_source(self) -> str:
        return self.call.to_source()


@dataclass
class ReturnStatement(Statement):
    values: list[Expression] = field(default_factory=list)

    def to_source(self) -> str:
        if not self.values:
            return "return"
        return "return " + ", ".join(bare_source(value) for value in self.values)


@dataclass
class BlockStatement(Statement):
    body: list[Statement]

    def to_source(self) -> str:
        return "\n".join(["{", *render_block(self.body), "}"])


@dataclass
class LabeledStatement(Statement):
    label: str
    statement: Statement

    def to_source(self) -> str:
        return f"{self.label}:\n{self.statement.to_source()}"


@dataclass
class IfStatement(Statement):
    condition: Expression
    body: list[Statement]
    else_body: Optional[list[Statement]] = None

    def to_source(self) -> str:
        text = _block_source(f"if {bare_source(self.condition)}", self.body)
        if self.else_body is None:
            return text
        if len(self.else_body) == 1 and isinstance(self.else_body[0], IfStatement):
            return text + " else " + self.else_body[0].to_source()
        return text + " " + _block_source("else", self.else_body)


@dataclass
class ForStatement(Statement):
    body: list[Statement]
    init: Optional[Statement] = None
    condition: Optional[Expression] = None
    post: Optional[Statement] = None

    def to_source(self) -> str:
        condition = bare_source(self.condition) if self.condition is not None else ""
        if self.init is None and self.post is None:
            header = f"for {condition}".rstrip()
        else:
            init = self.init.to_source() if self.init is not None else ""
            post = self.post.to_source() if self.post is not None else ""
            header = f"for {init}; {condition}; {post}".rstrip()
        return _block_source(header, self.body)


@dataclass
class RangeForStatement(Statement):
    value: str
    iterable: Expression
    body: list[Statement]
    key: str = "_"

    def to_source(self) -> str:
        header = f"for {self.key}, {self.value} := range {bare_source(self.iterable)}"
        return _block_source(header, self.body)


@dataclass
class SwitchCase:
    """One clause; ``default`` clauses render without values, wherever they sit."""

    values: list[Expression]
    body: list[Statement]
    fallthrough: bool = False
    default: bool = False

    def header(self) -> str:
        if self.default:
            return "default:"
        return f"case {', '.join(bare_source(value) for value in self.values)}:"


@dataclass
class SwitchStatement(Statement):
    value: Optional[Expression]
    cases: list[SwitchCase] = field(default_factory=list)

    def to_source(self) -> str:
        header = "switch" if self.value is None else f"switch {bare_source(self.value)}"
        lines = [header + " {"]
        for case in self.cases:
            lines.append(case.header())
            lines.extend(render_block(case.body))
            if case.fallthrough:
                lines.append("\tfallthrough")
        lines.append("}")
        return "\n".join(lines)


@dataclass
class CatchClause:
    exception_type: str
    body: list[Statement]
    variable: Optional[str] = None


@dataclass
class TryStatement(Statement):
    """try/catch/finally as an immediately invoked closure with deferred recovery."""

    body: list[Statement]
    catches: list[CatchClause] = field(default_factory=list)
    finally_body: Optional[list[Statement]] = None
    resources: list[Statement] = field(default_factory=list)
    closers: list[Expression] = field(default_factory=list)

    def _recover_block(self) -> list[str]:
        lines = ["defer func() {", "\tif r := recover(); r != nil {"]
        for index, clause in enumerate(self.catches):
            binding = clause.variable or "_"
            keyword = "if" if index == 0 else "} else if"
            lines.append(f"\t\t{keyword} {binding}, ok := r.({clause.exception_type}); ok {{")
            lines.extend("\t\t" + line if line else "" for line in render_block(clause.body))
        lines.extend(["\t\t} else {", "\t\t\tpanic(r) // re-panic if it's not a handled exception", "\t\t}", "\t}", "}()"])
        return lines

    def to_source(self) -> str:
        inner: list[str] = []
        if self.finally_body is not None:
            inner.extend(["defer func() {", *render_block(self.finally_body), "}()"])
        if self.catches:
            inner.extend(self._recover_block())
        for resource in self.resources:
            inner.extend(resource.to_source().splitlines())
        for closer in self.closers:
            inner.append(f"defer {closer.to_source()}.Close()")
        lines = ["func() {", *("\t" + line if line else "" for line in inner)]
        lines.extend(render_block(self.body))
        lines.append("}()")
        return "\n".join(lines)


# =============================================================================
# Declarations
# =============================================================================


@dataclass
class Param:
    name: str
    type: str

    def to_source(self) -> str:
        return f"{self.name} {self.type}"


def _params_source(params: list[Param]) -> str:
    return ", ".join(param.to_source() for param in params)


def _return_source(return_type: Optional[str]) -> str:
    return f" {return_type}" if return_type else ""


@dataclass
class StructField:
    name: str
    type: str
    public: bool = False

    def to_source(self) -> str:
        return f"{self.name} {self.type}"


@dataclass
class Struct:
    name: str
    fields: list[StructField] = field(default_factory=list)
    embeds: list[str] = field(default_factory=list)
    public: bool = False
    type_params: list[str] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)

    def to_source(self) -> str:
        lines = [line for comment in self.comments for line in _comment_lines(comment)]
        body = [*self.embeds, *(f.to_source() for f in self.fields)]
        header = f"type {self.name}{_type_params_source(self.type_params)} struct"
        if not body:
            lines.append(header + " {}")
        else:
            lines.extend([header + " {", *("\t" + line for line in body), "}"])
        return "\n".join(lines)


@dataclass
class TypeAlias:
    """Named type over an underlying type, e.g. ``type Color uint``."""

    name: str
    type: str
    public: bool = False

    def to_source(self) -> str:
        return f"type {self.name} {self.type}"


@dataclass
class InterfaceMethod:
    name: str
    params: list[Param] = field(default_factory=list)
    return_type: Optional[str] = None

    def to_source(self) -> str:
        return f"{self.name}({_params_source(self.params)}){_return_source(self.return_type)}"


@dataclass
class Interface:
    name: str
    methods: list[InterfaceMethod] = field(default_factory=list)
    embeds: list[str] = field(default_factory=list)
    public: bool = False
    type_params: list[str] = field(default_factory=list)

    def to_source(self) -> str:
        header = f"type {self.name}{_type_params_source(self.type_params)} interface"
        body = [*self.embeds, *(method.to_source() for method in self.methods)]
        if not body:
            return header + " {}"
        return "\n".join([header + " {", *("\t" + line for line in body), "}"])


@dataclass
class Function:
    name: str
    params: list[Param] = field(default_factory=list)
    return_type: Optional[str] = None
    body: list[Statement] = field(default_factory=list)
    public: bool = False
    comments: list[str] = field(default_factory=list)
    type_params: list[str] = field(default_factory=list)

    def _signature(self) -> str:
        return (
            f"{self.name}{_type_params_source(self.type_params)}"
            f"({_params_source(self.params)}){_return_source(self.return_type)}"
        )

    def _body_lines(self) -> list[str]:
        lines = ["\t" + line for comment in self.comments for line in _comment_lines(comment)]
        lines.extend(render_block(self.body))
        return lines

    def to_source(self) -> str:
        return "\n".join([f"func {self._signature()} {{", *self._body_lines(), "}"])


@dataclass
class Method(Function):
    receiver: Optional[Param] = None

    def to_source(self) -> str:
        receiver = f"({self.receiver.to_source()}) " if self.receiver else ""
        return "\n".join([f"func {receiver}{self._signature()} {{", *self._body_lines(), "}"])


@dataclass
class ModuleVar:
    name: str
    type: Optional[str] = None
    value: Optional[Expression] = None
    comments: list[str] = field(default_factory=list)

    def to_source(self) -> str:
        lines = [line for comment in self.comments for line in _comment_lines(comment)]
        text = f"var {self.name}"
        if self.type:
            text += f" {self.type}"
        if self.value is not None:
            text += f" = {bare_source(self.value)}"
        lines.append(text)
        return "\n".join(lines)


@dataclass
class ModuleConst:
    name: str
    value: Expression
    type: Optional[str] = None

    def to_source(self) -> str:
        ty = f" {self.type}" if self.type else ""
        return f"const {self.name}{ty} = {bare_source(self.value)}"


@dataclass
class ConstEntry:
    name: str
    type: Optional[str] = None
    value: Optional[Expression] = None

    def to_source(self) -> str:
        text = self.name
        if self.type:
            text += f" {self.type}"
        if self.value is not None:
            text += f" = {self.value.to_source()}"
        return text


@dataclass
class ConstBlock:
    entries: list[ConstEntry] = field(default_factory=list)

    def to_source(self) -> str:
        return "\n".join(["const (", *("\t" + entry.to_source() for entry in self.entries), ")"])


@dataclass
class Import:
    path: str
    alias: Optional[str] = None

    def to_source(self) -> str:
        prefix = f"{self.alias} " if self.alias else ""
        return f'{prefix}"{self.path}"'


@dataclass
class FailedMigration:
    """Placeholder for a member that could not be converted; renders fully commented out."""

    location: str
    error: str
    java_source: str
    sexpr: str

    def to_source(self) -> str:
        lines = ["// FIXME: Failed to migrate", f"// Location: {self.location}"]
        error_lines = self.error.splitlines() or [""]
        lines.append(f"// Error: {error_lines[0]}")
        lines.extend(_comment_lines("\n".join(error_lines[1:])) if len(error_lines) > 1 else [])
        lines.append("// Java source:")
        lines.extend(_comment_lines(self.java_source))
        lines.append("// S-expression:")
        lines.extend(_comment_lines(self.sexpr))
        return "\n".join(lines)


@dataclass
class GoSource:
    """Root of the IR for one translation unit."""

    package_name: str = "converted"
    imports: list[Import] = field(default_factory=list)
    interfaces: list[Interface] = field(default_factory=list)
    structs: list[Struct | TypeAlias] = field(default_factory=list)
    const_blocks: list[ConstBlock] = field(default_factory=list)
    constants: list[ModuleConst] = field(default_factory=list)
    vars: list[ModuleVar] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    failed_migrations: list[FailedMigration] = field(default_factory=list)

    def add_import(self, path: str, alias: Optional[str] = None) -> None:
        if not any(existing.path == path for existing in self.imports):
            self.imports.append(Import(path, alias))

    def extend(self, other: "GoSource") -> None:
        """Append every declaration of ``other`` after the ones already held."""
        for existing in other.imports:
            self.add_import(existing.path, existing.alias)
        self.interfaces.extend(other.interfaces)
        self.structs.extend(other.structs)
        self.const_blocks.extend(other.const_blocks)
        self.constants.extend(other.constants)
        self.vars.extend(other.vars)
        self.functions.extend(other.functions)
        self.methods.extend(other.methods)
        self.failed_migrations.extend(other.failed_migrations)

    def is_empty(self) -> bool:
        return not (
            self.interfaces or self.structs or self.const_blocks or self.constants
            or self.vars or self.functions or self.methods or self.failed_migrations
        )

    def to_source(self, license_header: str = "", package_name: Optional[str] = None) -> str:
        """
        Render the whole unit.

        Args:
            license_header: Text placed before the package clause. Line endings
                are normalized to ``\\n``.
            package_name: Overrides ``self.package_name`` when given.

        Returns:
            Go source text ending with a newline.
        """
        sections: list[str] = []
        header = license_header.replace("\r\n", "\n").replace("\r", "\n").strip("\n")
        if header:
            sections.append(header)
        sections.append(f"package {package_name or self.package_name}")
        if self.imports:
            sections.append(
                "\n".join(["import (", *("\t" + imp.to_source() for imp in self.imports), ")"])
            )
        for group in (
            self.interfaces,
            self.structs,
            self.const_blocks,
            self.constants,
            self.vars,
            self.functions,
            self.methods,
            self.failed_migrations,
        ):
            sections.extend(item.to_source() for item in group)
        return "\n\n".join(sections) + "\n"
