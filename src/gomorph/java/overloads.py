"""
Overload resolution at call and construction sites.

There is no type information at a call site, only the name and the number
of arguments. The policy is best effort and deterministic: when several
candidates share the arity, the first one registered wins and the site is
flagged so the caller can leave a FIXME next to it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from gomorph.gosrc.model import CommentStmt
from gomorph.java.context import MigrationContext, Signature
from gomorph.java.signatures import default_constructor_name

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    name: str
    signature: Optional[Signature] = None
    ambiguous: bool = False

    @property
    def found(self) -> bool:
        return self.signature is not None


def guess_by_arity(candidates: list[Signature], argument_count: int) -> tuple[Optional[Signature], bool]:
    """Pick the candidate for ``argument_count`` arguments, returning (match, ambiguous)."""
    if not candidates:
        return None, False
    if len(candidates) == 1:
        return candidates[0], False
    matches = [c for c in candidates if len(c.argument_types) == argument_count]
    if not matches:
        variadic = [c for c in candidates if c.argument_types and c.argument_types[-1].startswith("...")]
        return (variadic[0], False) if variadic else (None, False)
    return matches[0], len(matches) > 1


def resolve_method(ctx: MigrationContext, name: str, argument_count: int) -> Resolution:
    candidates = ctx.methods.get(name, [])
    signature, ambiguous = guess_by_arity(candidates, argument_count)
    if signature is None:
        return Resolution(name)
    if ambiguous:
        logger.warning(
            f"More than one possible method for {name} with {argument_count} arguments, "
            f"using {signature.name}"
        )
    return Resolution(signature.name, signature, ambiguous)


def resolve_constructor(ctx: MigrationContext, type_name: str, java_type_name: str, argument_count: int) -> Resolution:
    """
    Constructor function to call for ``new Type(args)``.

    Args:
        type_name: Mapped Go type the constructors are registered under.
        java_type_name: The type as written in Java, used for default names.
        argument_count: Number of arguments at the site.
    """
    candidates = ctx.constructors.get(type_name, [])
    signature, ambiguous = guess_by_arity(candidates, argument_count)
    if signature is None:
        declared = ctx.declared_types.get(java_type_name)
        public = declared.public if declared is not None else True
        return Resolution(default_constructor_name(java_type_name, public))
    if ambiguous:
        logger.warning(f"More than one possible constructor for {java_type_name}, using {signature.name}")
    return Resolution(signature.name, signature, ambiguous)


def constructor_name(ctx: MigrationContext, public: bool, type_name: str, java_type_name: str, argument_types: list[str]) -> str:
    """Name of the constructor with exactly ``argument_types``, or the default constructor name."""
    for signature in ctx.constructors.get(type_name, []):
        if signature.same_arguments(argument_types):
            return signature.name
    return default_constructor_name(java_type_name, public)


def method_ambiguity_comment(name: str, argument_count: int) -> CommentStmt:
    return CommentStmt([f"FIXME: more than one possible method for {name} with {argument_count} arguments"])


def constructor_ambiguity_comment(java_type_name: str) -> CommentStmt:
    return CommentStmt([f"FIXME: more than one possible constructor for {java_type_name}"])
