"""
Core configuration models for gomorph.

Defines the settings document and the diagnostic records exchanged between
the engine, the CLI and the JSON report, using Pydantic for validation.
"""

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_PACKAGE_NAME = "converted"
DEFAULT_CONFIG_FILENAME = "gomorph.yaml"


class MigrationMode(str, Enum):
    """How the engine reacts to a member it cannot convert."""

    STRICT = "strict"  # First failure aborts the run
    TOLERANT = "tolerant"  # Failure becomes a diagnostic plus a commented block


class ErrorCategory(str, Enum):
    """Kind of failure recorded in a diagnostic."""

    MAPPING = "mapping"
    STRUCTURAL = "structural"
    UNHANDLED = "unhandled"
    INTERNAL = "internal"


class MigrationConfig(BaseModel):
    """Settings read from ``gomorph.yaml``."""

    package_name: str = Field(
        default=DEFAULT_PACKAGE_NAME, description="Go package clause of the output"
    )
    license_header: str = Field(default="", description="Text prepended to the output")
    type_mappings: dict[str, str] = Field(
        default_factory=dict, description="Java type name -> Go type, checked before built-ins"
    )
    strip_type_prefixes: list[str] = Field(
        default_factory=lambda: ["Abstract", "LexerTerminals"],
        description="Prefixes removed from referenced type names",
    )
    internal_type_prefixes: dict[str, str] = Field(
        default_factory=lambda: {"ST": "internal"},
        description="Prefix -> Go package that types with that prefix live in",
    )


class MigrationDiagnostic(BaseModel):
    """One recovered failure."""

    location: str
    message: str
    java_source: str
    sexpr: str
    node_kind: str
    category: ErrorCategory = ErrorCategory.INTERNAL

    def summary(self) -> str:
        return f"{self.location}: {self.message.splitlines()[0] if self.message else ''}"
