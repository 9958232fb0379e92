"""
Migration context.

One ``MigrationContext`` exists per translation unit. It owns the symbol
tables filled by the analysis pass, the IR root, the diagnostics, and the
small amount of positional state (receiver, local scopes, return shape) the
statement converters need. Every converter takes it as its first argument.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from gomorph.config.models import MigrationConfig, MigrationDiagnostic, MigrationMode
from gomorph.gosrc.model import GoSource, Param
from gomorph.java.errors import MigrationError, SignatureCacheMiss
from gomorph.java.syntax import SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)


# =============================================================================
# Symbol records
# =============================================================================


@dataclass
class Signature:
    """A bucket entry: final Go name plus the mapped parameter types."""

    name: str
    argument_types: list[str]
    public: bool = False
    static: bool = False

    def same_arguments(self, argument_types: list[str]) -> bool:
        return self.argument_types == argument_types


@dataclass
class MethodSignature:
    """Everything the analysis pass learned about one method declaration."""

    java_name: str
    signature: Signature
    params: list[Param]
    return_type: Optional[str]
    public: bool
    static: bool = False
    abstract: bool = False
    default: bool = False
    throws: bool = False
    owner: str = ""
    type_params: list[str] = field(default_factory=list)
    value_type: Optional[str] = None

    @property
    def name(self) -> str:
        return self.signature.name


@dataclass
class ConstructorSignature:
    type_name: str
    signature: Signature
    params: list[Param]
    public: bool

    @property
    def name(self) -> str:
        return self.signature.name


@dataclass
class DeclaredType:
    """A type declared in the translation unit."""

    java_name: str
    go_name: str
    public: bool
    kind: str


@dataclass
class AbstractLayout:
    """Shape of an abstract class, known before any converter runs."""

    name: str
    fields: list[str] = field(default_factory=list)
    abstract_methods: list[int] = field(default_factory=list)
    default_methods: list[int] = field(default_factory=list)
    superclass: Optional[str] = None


# =============================================================================
# Receiver / scope state
# =============================================================================


class ReceiverKind(str, Enum):
    """How ``this``, fields and bare calls are written in the current body."""

    METHOD = "method"
    STATIC = "static"
    INTERFACE_DEFAULT = "interface_default"
    ABSTRACT_DEFAULT = "abstract_default"
    RECORD = "record"


@dataclass
class Receiver:
    kind: ReceiverKind = ReceiverKind.STATIC
    self_expr: str = "this"
    fields: dict[str, str] = field(default_factory=dict)
    export_methods: bool = False
    struct_name: str = ""
    superclass: Optional[str] = None
    components: set[str] = field(default_factory=set)

    @property
    def has_self(self) -> bool:
        return self.kind != ReceiverKind.STATIC


@dataclass
class ReturnShape:
    type: Optional[str]
    throws: bool = False


# =============================================================================
# Context
# =============================================================================


class MigrationContext:
    """Shared state of one translation unit."""

    def __init__(
        self,
        tree: SyntaxTree,
        source_path: str = "",
        mode: MigrationMode = MigrationMode.TOLERANT,
        config: Optional[MigrationConfig] = None,
    ):
        self.tree = tree
        self.source_path = source_path
        self.mode = mode
        self.config = config or MigrationConfig()
        self.type_mappings: dict[str, str] = dict(self.config.type_mappings)

        self.root_source = GoSource(package_name=self.config.package_name)
        self.source = self.root_source
        self.diagnostics: list[MigrationDiagnostic] = []

        self.methods: dict[str, list[Signature]] = {}
        self.constructors: dict[str, list[Signature]] = {}
        self.enum_constants: dict[str, str] = {}
        self.abstract_types: set[str] = set()
        self.abstract_layouts: dict[str, AbstractLayout] = {}
        self.declared_types: dict[str, DeclaredType] = {}

        self.signature_cache: dict[int, MethodSignature] = {}
        self.constructor_cache: dict[int, ConstructorSignature] = {}
        self.signature_failures: dict[int, MigrationError] = {}

        self.receiver = Receiver()
        self.return_shape: Optional[ReturnShape] = None
        self.in_return = False
        self.expected_type: Optional[str] = None
        self._scopes: list[set[str]] = []
        self._type_params: list[set[str]] = []

    @property
    def strict(self) -> bool:
        return self.mode == MigrationMode.STRICT

    def migration_comment(self, node: SyntaxNode) -> str:
        row, column = node.location
        return f"migrated from {self.source_path}:{row}:{column}"

    def require_import(self, path: str) -> None:
        self.root_source.add_import(path)

    # -------------------------------------------------------------------------
    # Analysis results
    # -------------------------------------------------------------------------

    def method_signature(self, node: SyntaxNode) -> MethodSignature:
        if node.id in self.signature_cache:
            return self.signature_cache[node.id]
        if node.id in self.signature_failures:
            raise self.signature_failures[node.id]
        raise SignatureCacheMiss(f"no signature recorded for {node.kind} at {node.location}")

    def constructor_signature(self, node: SyntaxNode) -> ConstructorSignature:
        if node.id in self.constructor_cache:
            return self.constructor_cache[node.id]
        if node.id in self.signature_failures:
            raise self.signature_failures[node.id]
        raise SignatureCacheMiss(f"no constructor recorded for {node.kind} at {node.location}")

    # -------------------------------------------------------------------------
    # Positional state
    # -------------------------------------------------------------------------

    @contextmanager
    def redirect_source(self, staged: GoSource) -> Iterator[GoSource]:
        previous = self.source
        self.source = staged
        try:
            yield staged
        finally:
            self.source = previous

    @contextmanager
    def with_receiver(self, receiver: Receiver) -> Iterator[Receiver]:
        previous = self.receiver
        self.receiver = receiver
        try:
            yield receiver
        finally:
            self.receiver = previous

    @contextmanager
    def function_scope(
        self, params: list[str], return_shape: Optional[ReturnShape] = None
    ) -> Iterator[None]:
        """Fresh local scope and return shape for one function body."""
        previous_scopes, previous_shape = self._scopes, self.return_shape
        previous_return = self.in_return
        self._scopes = [set(params)]
        self.return_shape = return_shape
        self.in_return = False
        try:
            yield
        finally:
            self._scopes = previous_scopes
            self.return_shape = previous_shape
            self.in_return = previous_return

    @contextmanager
    def block_scope(self, names: Optional[list[str]] = None) -> Iterator[None]:
        self._scopes.append(set(names or []))
        try:
            yield
        finally:
            self._scopes.pop()

    def declare_local(self, name: str) -> None:
        if not self._scopes:
            self._scopes.append(set())
        self._scopes[-1].add(name)

    def is_local(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes)

    @contextmanager
    def returning(self, value: bool = True) -> Iterator[None]:
        previous = self.in_return
        self.in_return = value
        try:
            yield
        finally:
            self.in_return = previous

    @contextmanager
    def expecting(self, go_type: Optional[str]) -> Iterator[None]:
        previous = self.expected_type
        self.expected_type = go_type
        try:
            yield
        finally:
            self.expected_type = previous

    @contextmanager
    def type_parameters(self, names: list[str]) -> Iterator[None]:
        self._type_params.append(set(names))
        try:
            yield
        finally:
            self._type_params.pop()

    def is_type_parameter(self, name: str) -> bool:
        return any(name in scope for scope in self._type_params)
