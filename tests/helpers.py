"""Shared token builders for the rustsig test suite."""

from __future__ import annotations

from pathlib import Path

from rustsig.grammar import Grammar, Tokens
from rustsig.tokens import (
    Identifier,
    Nested,
    Primitive,
    PrimitiveKind,
    Text,
    Token,
    TokenStream,
    Type,
)

SHEETS_DIR = Path(__file__).resolve().parent.parent / "sheets"

SLICE_START = Primitive(PrimitiveKind.SLICE_START)
SLICE_END = Primitive(PrimitiveKind.SLICE_END)
TUPLE_START = Primitive(PrimitiveKind.TUPLE_START)
TUPLE_END = Primitive(PrimitiveKind.TUPLE_END)
UNIT = Primitive(PrimitiveKind.UNIT)


def ty(*tokens: Token) -> Type:
    return Type(TokenStream(tokens))


def nested(*tokens: Token) -> Nested:
    return Nested(TokenStream(tokens))


def name(value: str) -> Type:
    """A bare user type, as the grammar wraps it: Type([Identifier])."""
    return ty(Identifier(value))


def scalar(value: str) -> Type:
    """A bare scalar type: Type([Primitive(NAMED)])."""
    return ty(Primitive(PrimitiveKind.NAMED, value))


def ref(prefix: str) -> Primitive:
    return Primitive(PrimitiveKind.REF, prefix)


def ptr(prefix: str) -> Primitive:
    return Primitive(PrimitiveKind.PTR, prefix)


def text(value: str) -> Text:
    return Text(value)


def run_rule(source: str, rule: str) -> Tokens:
    """Run one grammar rule, asserting it consumes the whole source."""
    grammar = Grammar(source)
    tokens = getattr(grammar, rule)()
    assert grammar.at_end(), f"unparsed content: {source[grammar.pos:]!r}"
    return tokens
