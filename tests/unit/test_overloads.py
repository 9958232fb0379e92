"""
Unit tests for arity-based overload resolution.
"""

from gomorph.java.context import MigrationContext, Signature
from gomorph.java.overloads import (
    guess_by_arity,
    method_ambiguity_comment,
    resolve_constructor,
    resolve_method,
)
from gomorph.java.signatures import add_constructor, add_method
from gomorph.java.syntax import parse_java


def empty_context() -> MigrationContext:
    return MigrationContext(parse_java("class Empty {}"))


class TestGuessByArity:
    def test_no_candidates(self):
        assert guess_by_arity([], 1) == (None, False)

    def test_single_candidate_always_wins(self):
        only = Signature("run", ["int", "int"])
        assert guess_by_arity([only], 0) == (only, False)

    def test_distinct_arity(self):
        one = Signature("add", ["int"])
        two = Signature("addWithIntInt", ["int", "int"])
        assert guess_by_arity([one, two], 2) == (two, False)

    def test_shared_arity_picks_first_and_flags(self):
        ints = Signature("log", ["int"])
        strings = Signature("logWithString", ["string"])
        assert guess_by_arity([ints, strings], 1) == (ints, True)

    def test_variadic_fallback(self):
        plain = Signature("join", ["string"])
        variadic = Signature("joinWithString", ["...string"])
        assert guess_by_arity([plain, variadic], 3) == (variadic, False)

    def test_no_match(self):
        candidates = [Signature("f", ["int"]), Signature("fWithIntInt", ["int", "int"])]
        assert guess_by_arity(candidates, 3) == (None, False)


class TestResolution:
    def test_unknown_method_keeps_name(self):
        resolution = resolve_method(empty_context(), "toString", 0)
        assert resolution.name == "toString"
        assert not resolution.found

    def test_ambiguous_method(self):
        ctx = empty_context()
        add_method(ctx, "log", ["int"])
        add_method(ctx, "log", ["string"])
        resolution = resolve_method(ctx, "log", 1)
        assert resolution.name == "log"
        assert resolution.ambiguous

    def test_unknown_constructor_gets_default_name(self):
        resolution = resolve_constructor(empty_context(), "Widget", "Widget", 0)
        assert resolution.name == "NewWidget"
        assert not resolution.ambiguous

    def test_constructor_by_arity(self):
        ctx = empty_context()
        add_constructor(ctx, "Point", "Point", ["int", "int"], public=True)
        add_constructor(ctx, "Point", "Point", [], public=True)
        assert resolve_constructor(ctx, "Point", "Point", 2).name == "NewPointFromIntInt"
        assert resolve_constructor(ctx, "Point", "Point", 0).name == "NewPoint"

    def test_ambiguity_comment(self):
        comment = method_ambiguity_comment("log", 1)
        assert comment.to_source() == "// FIXME: more than one possible method for log with 1 arguments"
