"""Recursive-descent grammar for Rust type and signature expressions.

Every rule is a method returning a list of tokens. Rules call each other by
reference, so type expressions can nest inside slices, tuples, function
parameters and generic arguments to any depth. Alternation is ordered and
fully backtracking: each alternative starts from the same cursor position
and a failed one leaves no trace.
"""

from __future__ import annotations

import functools
from typing import Callable, TypeVar

from rustsig.lexer import NoMatch, Scanner, is_primitive
from rustsig.tokens import (
    AssocType,
    Identifier,
    Nested,
    Primitive,
    PrimitiveKind,
    Range,
    RangeKind,
    Text,
    Token,
    TokenStream,
    Type,
    Where,
)

T = TypeVar("T")

Tokens = list[Token]

# (has start, operator, has end) -> range shape
_RANGE_KINDS: dict[tuple[bool, str, bool], RangeKind] = {
    (False, "..", False): RangeKind.RANGE_FULL,
    (False, "..", True): RangeKind.RANGE_TO,
    (False, "..=", True): RangeKind.RANGE_TO_INCLUSIVE,
    (True, "..", False): RangeKind.RANGE_FROM,
    (True, "..", True): RangeKind.RANGE,
    (True, "..=", True): RangeKind.RANGE_INCLUSIVE,
}


def _to_type_token(tokens: Tokens) -> Type:
    """Wrap a production as one Type, without double-wrapping."""
    if len(tokens) == 1 and isinstance(tokens[0], Type):
        return tokens[0]
    return Type(TokenStream(tokens))


def _memoize(rule: Callable[[Grammar], T]) -> Callable[[Grammar], T]:
    """Cache a rule's outcome per start offset.

    Rules depend only on the cursor, so replaying the stored end offset and
    tokens is exact. Each nesting level is then parsed once per rule.
    """
    key = rule.__name__

    @functools.wraps(rule)
    def cached(self: Grammar) -> T:
        start = self.pos
        hit = self._memo.get((key, start))
        if hit is None:
            try:
                result = rule(self)
            except NoMatch as e:
                self._memo[(key, start)] = (e.pos, None)
                raise
            stored = tuple(result) if isinstance(result, list) else result
            self._memo[(key, start)] = (self.pos, stored)
            return result
        end, stored = hit
        if stored is None:
            raise NoMatch(end)
        self.pos = end
        return list(stored) if isinstance(stored, tuple) else stored

    return cached


def _range_tokens(op: str, kind: RangeKind) -> Tokens:
    """Split whitespace touching a range operator into separate Text tokens."""
    tokens: Tokens = []
    leading = op[:len(op) - len(op.lstrip())]
    trailing = op[len(op.rstrip()):]
    if leading:
        tokens.append(Text(leading))
    tokens.append(Range(kind))
    if trailing:
        tokens.append(Text(trailing))
    return tokens


class Grammar(Scanner):
    """Grammar rules over a single source string."""

    def __init__(self, source: str) -> None:
        super().__init__(source)
        # (rule name, start offset) -> (end offset, result or None on failure)
        self._memo: dict[tuple[str, int], tuple[int, object]] = {}

    # ── Combinators ──────────────────────────────────────────────

    def attempt(self, rule: Callable[[], T]) -> T:
        """Run ``rule``; on failure restore the cursor and re-raise."""
        mark = self.mark()
        try:
            return rule()
        except NoMatch:
            self.reset(mark)
            raise

    def optional(self, rule: Callable[[], T]) -> T | None:
        try:
            return self.attempt(rule)
        except NoMatch:
            return None

    def choice(self, *alternatives: Callable[[], T]) -> T:
        """Return the first alternative that matches, in order."""
        for alternative in alternatives:
            result = self.optional(alternative)
            if result is not None:
                return result
        self.fail()

    def many(self, rule: Callable[[], Tokens]) -> Tokens:
        tokens: Tokens = []
        while True:
            mark = self.mark()
            more = self.optional(rule)
            if more is None or self.pos == mark:
                return tokens
            tokens.extend(more)

    def sep1_by_lex(self, rule: Callable[[], Tokens], sep: str) -> Tokens:
        """One or more ``rule`` matches separated by ``lex(sep)``."""
        tokens = rule()
        tokens.extend(self.many(lambda: self.lex(sep) + rule()))
        return tokens

    def optional_tokens(self, rule: Callable[[], Tokens]) -> Tokens:
        return self.optional(rule) or []

    def wrap(self, s: str, token: Token) -> Tokens:
        """Literal ``s`` becomes ``token``; surrounding whitespace stays Text."""
        tokens = self.maybe_spaces()
        self.literal(s)
        tokens.append(token)
        tokens.extend(self.maybe_spaces())
        return tokens

    # ── Type expressions ─────────────────────────────────────────

    @_memoize
    def type_like(self) -> Tokens:
        """Single types joined by ``|`` (a documentation-only union)."""
        return self.sep1_by_lex(self.single_type_like, "|")

    def single_type_like(self) -> Tokens:
        return [self.single_type_like_token()]

    @_memoize
    def single_type_like_token(self) -> Type:
        tokens = self.choice(
            self.ref_type,
            self.ptr_type,
            self.slice_type,
            self.fn_type,
            self.tuple_type,
            self.range_type,
            self.named_type,
        )
        return _to_type_token(tokens)

    def ref_type(self) -> Tokens:
        start = self.mark()
        self.literal("&")
        self.optional(lambda: self.literal("mut"))
        self.optional(self._spaced_lifetime)
        tokens: Tokens = [Primitive(PrimitiveKind.REF, self.source[start + 1:self.pos])]
        tokens.extend(self.maybe_spaces())
        tokens.extend(self.single_type_like())
        return tokens

    def _spaced_lifetime(self) -> str:
        self.spaces()
        return self.lifetime()

    def ptr_type(self) -> Tokens:
        self.literal("*")
        qualifier = self.choice(
            lambda: self.literal("const"),
            lambda: self.literal("mut"),
        )
        tokens: Tokens = [Primitive(PrimitiveKind.PTR, qualifier)]
        tokens.extend(self.maybe_spaces())
        tokens.extend(self.single_type_like())
        return tokens

    def slice_type(self) -> Tokens:
        self.literal("[")
        tokens: Tokens = [Primitive(PrimitiveKind.SLICE_START)]
        tokens.extend(self.maybe_spaces())
        tokens.extend(self.type_like())
        tokens.extend(self.maybe_spaces())
        self.literal("]")
        tokens.append(Primitive(PrimitiveKind.SLICE_END))
        return tokens

    def fn_type(self) -> Tokens:
        start = self.mark()
        self.literal("(")
        self.spaces()
        tokens: Tokens = [Text(self.since(start))]
        tokens.extend(self.nested_type_like_list())
        start = self.mark()
        self.spaces()
        self.literal(")")
        self.spaces()
        self.literal("->")
        self.spaces()
        tokens.append(Text(self.since(start)))
        tokens.extend(self.type_like())
        return tokens

    def tuple_type(self) -> Tokens:
        return self.choice(
            lambda: self.wrap("()", Primitive(PrimitiveKind.UNIT)),
            self._tuple_body,
        )

    def _tuple_body(self) -> Tokens:
        self.literal("(")
        tokens: Tokens = [Primitive(PrimitiveKind.TUPLE_START)]
        tokens.extend(self.maybe_spaces())
        tokens.extend(self.choice(self._variadic_items, self.nested_type_like_list))
        tokens.extend(self.maybe_spaces())
        self.literal(")")
        tokens.append(Primitive(PrimitiveKind.TUPLE_END))
        return tokens

    def _variadic_items(self) -> Tokens:
        """A type followed by the ``, ...`` continuation marker."""
        items = self.type_like()
        start = self.mark()
        self.spaces()
        self.literal(",")
        self.spaces()
        self.literal("...")
        self.spaces()
        items.append(Text(self.since(start)))
        return [Nested(TokenStream(items))]

    def nested_type_like_list(self) -> Tokens:
        """Comma-separated type expressions grouped as one Nested, or nothing."""
        items = self.optional(lambda: self.sep1_by_lex(self.type_like, ","))
        if items is None:
            return []
        return [Nested(TokenStream(items))]

    def range_type(self) -> Tokens:
        start = self.optional(self.named_type)
        op = self.choice(
            lambda: self.lex_str("..="),
            lambda: self.lex_str(".."),
        )
        end = self.optional(self.named_type)
        kind = _RANGE_KINDS.get((start is not None, op.strip(), end is not None))
        if kind is None:
            self.fail()
        tokens: Tokens = list(start or [])
        tokens.extend(_range_tokens(op, kind))
        tokens.extend(end or [])
        return tokens

    @_memoize
    def named_type(self) -> Tokens:
        tokens = self.optional_tokens(lambda: self.lex("dyn "))
        tokens.extend(self.simple_named_type())
        # Associated items
        tokens.extend(self.many(self._assoc_item))
        # Additional bounds
        tokens.extend(self.optional_tokens(self._additional_bounds))
        return tokens

    def _assoc_item(self) -> Tokens:
        return self.lex("::") + [AssocType(self.identifier())]

    def _additional_bounds(self) -> Tokens:
        return self.lex("+") + self.sep1_by_lex(self.simple_named_type, "+")

    def simple_named_type(self) -> Tokens:
        name = self.identifier()
        tokens: Tokens = [
            Primitive(PrimitiveKind.NAMED, name) if is_primitive(name) else Identifier(name)
        ]
        tokens.extend(self.optional_tokens(self._generic_args))
        return [Type(TokenStream(tokens))]

    def _generic_args(self) -> Tokens:
        tokens = self.lex("<")
        tokens.extend(self.sep1_by_lex(self.type_param, ","))
        start = self.mark()
        self.spaces()
        self.literal(">")
        tokens.append(Text(self.since(start)))
        return tokens

    def type_param(self) -> Tokens:
        # A bare name followed by `=` is a binding, not a type.
        return self.choice(
            self.lifetime_param,
            self.assoc_type_param,
            self.type_like,
        )

    def lifetime_param(self) -> Tokens:
        return [Text(self.lifetime())]

    def assoc_type_param(self) -> Tokens:
        tokens: Tokens = [AssocType(self.identifier())]
        tokens.extend(self.lex("="))
        tokens.extend(self.type_like())
        return tokens

    # ── Clauses ──────────────────────────────────────────────────

    def where_clause(self) -> Tokens:
        tokens = self.wrap("where", Where())
        tokens.extend(self.sep1_by_lex(self.single_where_constraint, ","))
        return tokens

    def single_where_constraint(self) -> Tokens:
        tokens = self.single_type_like()
        tokens.extend(self.lex(":"))
        tokens.extend(self.sep1_by_lex(self.simple_named_type, "+"))
        return tokens

    def impl_header(self) -> Tokens:
        """A type optionally followed by ``=> Name = Type, ...`` bindings."""
        tokens = self.single_type_like()
        tokens.extend(self.optional_tokens(self._impl_bindings))
        return tokens

    def _impl_bindings(self) -> Tokens:
        return self.lex("=>") + self.sep1_by_lex(self.assoc_type_param, ",")

    def item_after_name(self) -> Tokens:
        """Parameter list, optional return type, optional where-clause."""
        tokens = self.lex("(")
        tokens.extend(self.nested_type_like_list())
        tokens.extend(self.lex(")"))
        tokens.extend(self.optional_tokens(self._return_type))
        tokens.extend(self.optional_tokens(self.where_clause))
        return tokens

    def _return_type(self) -> Tokens:
        return self.lex("->") + self.single_type_like()
