"""Tests for the type-expression grammar rules."""

from __future__ import annotations

import pytest

from rustsig.grammar import Grammar
from rustsig.lexer import NoMatch
from rustsig.tokens import AssocType, Identifier, Range, RangeKind, Where
from tests.helpers import (
    SLICE_END,
    SLICE_START,
    TUPLE_END,
    TUPLE_START,
    UNIT,
    name,
    nested,
    ptr,
    ref,
    run_rule,
    scalar,
    text,
    ty,
)


def type_like(source: str):
    return run_rule(source, "type_like")


class TestNamedTypes:
    def test_plain(self):
        assert type_like("Foo") == [name("Foo")]

    def test_scalar(self):
        assert type_like("bool") == [scalar("bool")]

    def test_generic(self):
        assert type_like("Option<Foo>") == [
            ty(Identifier("Option"), text("<"), name("Foo"), text(">")),
        ]

    def test_associated_item(self):
        assert type_like("Foo::Err") == [
            ty(name("Foo"), text("::"), AssocType("Err")),
        ]

    def test_dyn(self):
        assert type_like("Box<dyn Foo>") == [
            ty(Identifier("Box"), text("<"), ty(text("dyn "), name("Foo")), text(">")),
        ]

    def test_additional_bounds(self):
        assert type_like("Iterator<Item = T> + Add<Rhs = Self> + Clone") == [
            ty(
                ty(Identifier("Iterator"), text("<"), AssocType("Item"), text(" = "), name("T"), text(">")),
                text(" + "),
                ty(Identifier("Add"), text("<"), AssocType("Rhs"), text(" = "), name("Self"), text(">")),
                text(" + "),
                name("Clone"),
            ),
        ]

    def test_lifetime_argument(self):
        assert type_like("Cow<'a, str>") == [
            ty(Identifier("Cow"), text("<"), text("'a"), text(", "), scalar("str"), text(">")),
        ]

    def test_spaces_before_closing_angle(self):
        assert type_like("Vec<T >") == [
            ty(Identifier("Vec"), text("<"), name("T"), text(" >")),
        ]


class TestReferences:
    def test_plain(self):
        assert type_like("&Foo") == [ty(ref(""), name("Foo"))]

    def test_lifetime(self):
        assert type_like("&'a Foo") == [ty(ref("'a"), text(" "), name("Foo"))]

    def test_mut(self):
        assert type_like("&mut Foo") == [ty(ref("mut"), text(" "), name("Foo"))]

    def test_mut_lifetime(self):
        assert type_like("&mut 'a Foo") == [ty(ref("mut 'a"), text(" "), name("Foo"))]

    def test_slice(self):
        assert type_like("&[Foo]") == [ty(ref(""), ty(SLICE_START, name("Foo"), SLICE_END))]

    def test_dyn(self):
        assert type_like("&dyn Foo") == [ty(ref(""), ty(text("dyn "), name("Foo")))]


class TestPointers:
    def test_const(self):
        assert type_like("*const Foo") == [ty(ptr("const"), text(" "), name("Foo"))]

    def test_mut(self):
        assert type_like("*mut Foo") == [ty(ptr("mut"), text(" "), name("Foo"))]

    def test_slice(self):
        assert type_like("*const [Foo]") == [
            ty(ptr("const"), text(" "), ty(SLICE_START, name("Foo"), SLICE_END)),
        ]

    def test_pointer_needs_qualifier(self):
        with pytest.raises(NoMatch):
            Grammar("*Foo").type_like()


class TestSlices:
    def test_inner_whitespace_is_preserved(self):
        assert type_like("[ Foo ]") == [
            ty(SLICE_START, text(" "), name("Foo"), text(" "), SLICE_END),
        ]

    def test_union_inside_slice(self):
        assert type_like("[Foo | Bar]") == [
            ty(SLICE_START, name("Foo"), text(" | "), name("Bar"), SLICE_END),
        ]


class TestTuples:
    def test_unit(self):
        assert type_like("()") == [ty(UNIT)]

    def test_pair(self):
        assert type_like("(Foo, &Bar)") == [
            ty(TUPLE_START, nested(name("Foo"), text(", "), ty(ref(""), name("Bar"))), TUPLE_END),
        ]

    def test_variadic(self):
        assert type_like("(Foo, ...)") == [
            ty(TUPLE_START, nested(name("Foo"), text(", ...")), TUPLE_END),
        ]


class TestRanges:
    def test_range(self):
        assert type_like("usize.. usize") == [
            ty(scalar("usize"), Range(RangeKind.RANGE), text(" "), scalar("usize")),
        ]

    def test_range_inclusive(self):
        assert type_like("usize..=usize") == [
            ty(scalar("usize"), Range(RangeKind.RANGE_INCLUSIVE), scalar("usize")),
        ]

    def test_range_to(self):
        assert type_like("     .. usize") == [
            ty(text("     "), Range(RangeKind.RANGE_TO), text(" "), scalar("usize")),
        ]

    def test_range_to_inclusive(self):
        assert type_like("     ..=usize") == [
            ty(text("     "), Range(RangeKind.RANGE_TO_INCLUSIVE), scalar("usize")),
        ]

    def test_range_from(self):
        assert type_like("usize..      ") == [
            ty(scalar("usize"), Range(RangeKind.RANGE_FROM), text("      ")),
        ]

    def test_range_full(self):
        assert type_like("     ..      ") == [
            ty(text("     "), Range(RangeKind.RANGE_FULL), text("      ")),
        ]

    @pytest.mark.parametrize("source", ["..=", "usize..="])
    def test_inclusive_range_needs_an_end(self, source):
        with pytest.raises(NoMatch):
            Grammar(source).range_type()


class TestFunctions:
    def test_no_params(self):
        assert type_like("() -> Foo") == [ty(text("("), text(") -> "), name("Foo"))]

    def test_generic_param_and_return(self):
        assert type_like("(Iterator<Item = T>) -> Result<(), T>") == [
            ty(
                text("("),
                nested(ty(Identifier("Iterator"), text("<"), AssocType("Item"), text(" = "), name("T"), text(">"))),
                text(") -> "),
                ty(Identifier("Result"), text("<"), ty(UNIT), text(", "), name("T"), text(">")),
            ),
        ]

    def test_nested_params(self):
        assert type_like("(Foo, &(Bar, &mut 'a [Baz])) -> T") == [
            ty(
                text("("),
                nested(
                    name("Foo"),
                    text(", "),
                    ty(
                        ref(""),
                        ty(
                            TUPLE_START,
                            nested(
                                name("Bar"),
                                text(", "),
                                ty(ref("mut 'a"), text(" "), ty(SLICE_START, name("Baz"), SLICE_END)),
                            ),
                            TUPLE_END,
                        ),
                    ),
                ),
                text(") -> "),
                name("T"),
            ),
        ]


class TestUnion:
    def test_three_alternatives(self):
        assert type_like("Foo | &Bar<T> | (Baz) -> bool") == [
            name("Foo"),
            text(" | "),
            ty(ref(""), ty(Identifier("Bar"), text("<"), name("T"), text(">"))),
            text(" | "),
            ty(text("("), nested(name("Baz")), text(") -> "), scalar("bool")),
        ]


class TestItemAfterName:
    def test_function_param_returning_unit(self):
        assert run_rule(" ((T) -> ())", "item_after_name") == [
            text(" ("),
            nested(ty(text("("), nested(name("T")), text(") -> "), ty(UNIT))),
            text(")"),
        ]

    def test_tuple_return_with_where(self):
        tokens = run_rule(
            " ((&T) -> bool) -> (B, B) where B: Default + Extend<T>",
            "item_after_name",
        )
        assert tokens == [
            text(" ("),
            nested(ty(text("("), nested(ty(ref(""), name("T"))), text(") -> "), scalar("bool"))),
            text(") "),
            text("-> "),
            ty(TUPLE_START, nested(name("B"), text(", "), name("B")), TUPLE_END),
            text(" "),
            Where(),
            text(" "),
            name("B"),
            text(": "),
            name("Default"),
            text(" + "),
            ty(Identifier("Extend"), text("<"), name("T"), text(">")),
        ]

    def test_multiple_constraints(self):
        tokens = run_rule(
            " (S, T) -> S where S: Default + Clone, Tz::Offset: Display",
            "item_after_name",
        )
        assert tokens == [
            text(" ("),
            nested(name("S"), text(", "), name("T")),
            text(") "),
            text("-> "),
            name("S"),
            text(" "),
            Where(),
            text(" "),
            name("S"),
            text(": "),
            name("Default"),
            text(" + "),
            name("Clone"),
            text(", "),
            ty(name("Tz"), text("::"), AssocType("Offset")),
            text(": "),
            name("Display"),
        ]


class TestBacktracking:
    def test_failed_alternative_leaves_cursor(self):
        g = Grammar("(Foo, Bar)")
        assert g.optional(g.fn_type) is None
        assert g.pos == 0

    def test_attempt_reraises_and_restores(self):
        g = Grammar("(Foo")
        with pytest.raises(NoMatch):
            g.attempt(g.single_type_like_token)
        assert g.pos == 0

    def test_choice_takes_first_match(self):
        g = Grammar("()")
        assert g.choice(g.fn_type, g.tuple_type) == [UNIT]

    def test_choice_fails_when_nothing_matches(self):
        g = Grammar("?")
        with pytest.raises(NoMatch):
            g.choice(g.ref_type, g.named_type)
        assert g.pos == 0

    def test_binding_tried_before_plain_type(self):
        assert run_rule("Item = T", "type_param") == [AssocType("Item"), text(" = "), name("T")]

    def test_lifetime_tried_first(self):
        assert run_rule("'a", "type_param") == [text("'a")]


class TestMemo:
    def test_success_is_replayed(self):
        g = Grammar("Vec<T> + Send")
        first = g.named_type()
        end = g.pos
        g.reset(0)
        assert g.named_type() == first
        assert g.pos == end

    def test_replayed_tokens_are_a_fresh_list(self):
        g = Grammar("Foo")
        g.type_like().append(text("x"))
        g.reset(0)
        assert g.type_like() == [name("Foo")]

    def test_failure_is_replayed(self):
        g = Grammar("(Foo")
        for _ in range(2):
            with pytest.raises(NoMatch):
                g.attempt(g.single_type_like_token)
            assert g.pos == 0


class TestNormalization:
    def test_single_type_is_not_double_wrapped(self):
        token = Grammar("Foo").single_type_like_token()
        assert token == name("Foo")

    def test_multi_token_production_is_wrapped(self):
        token = Grammar("&Foo").single_type_like_token()
        assert token == ty(ref(""), name("Foo"))
