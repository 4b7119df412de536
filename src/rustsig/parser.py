"""Whole-input entry points for the signature parser.

Each entry point runs one grammar rule over the entire input. A match that
leaves any input unconsumed is a failure, as is no match at all; both raise
``ParseError`` without further detail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar, Union

from rustsig.errors import ParseError
from rustsig.grammar import Grammar
from rustsig.lexer import NoMatch
from rustsig.tokens import TokenStream

logger = logging.getLogger(__name__)

T = TypeVar("T")

MODES = ("type", "where", "impl", "trait-impl", "item")


def _parse(rule: Callable[[Grammar], T], text: str, entry: str) -> T:
    grammar = Grammar(text)
    try:
        result = rule(grammar)
    except NoMatch as e:
        logger.debug("%s: no match for %r (failed at offset %d)", entry, text, e.pos)
        raise ParseError(entry, text) from None
    except RecursionError:
        logger.debug("%s: input nested too deeply: %r", entry, text)
        raise ParseError(entry, text) from None
    if not grammar.at_end():
        logger.debug(
            "%s: unconsumed input %r after %r",
            entry, text[grammar.pos:], text[:grammar.pos],
        )
        raise ParseError(entry, text)
    return result


@dataclass(frozen=True)
class ParsedItem:
    """A parsed method signature.

    ``takes_self`` is true unless the name is prefixed with ``::``, which
    marks an associated function without a receiver. ``tokens`` covers
    everything after the name.
    """

    takes_self: bool
    name: str
    tokens: TokenStream

    @classmethod
    def parse(cls, text: str) -> ParsedItem:
        def rule(g: Grammar) -> ParsedItem:
            prefix = g.optional(lambda: g.literal("::"))
            name = g.identifier()
            return cls(
                takes_self=prefix is None,
                name=name,
                tokens=TokenStream(g.item_after_name()),
            )

        return _parse(rule, text, "item")

    def raw(self) -> str:
        prefix = "" if self.takes_self else "::"
        return prefix + self.name + self.tokens.raw()


def parse_type(text: str) -> TokenStream:
    """Parse a single type expression."""
    token = _parse(lambda g: g.single_type_like_token(), text, "type")
    return token.tokens


def parse_constraints(text: str) -> TokenStream:
    """Parse a where-clause, ``where`` keyword included."""
    return TokenStream(_parse(lambda g: g.where_clause(), text, "where"))


def parse_impl(text: str) -> TokenStream:
    """Parse an impl header with optional ``=> Name = Type`` bindings."""
    return TokenStream(_parse(lambda g: g.impl_header(), text, "impl"))


def parse_trait_impl(text: str) -> TokenStream:
    """Parse a trait impl header; same grammar as ``parse_impl``."""
    return TokenStream(_parse(lambda g: g.impl_header(), text, "trait-impl"))


_STREAM_PARSERS: dict[str, Callable[[str], TokenStream]] = {
    "type": parse_type,
    "where": parse_constraints,
    "impl": parse_impl,
    "trait-impl": parse_trait_impl,
}


def parse_as(mode: str, text: str) -> Union[TokenStream, ParsedItem]:
    """Dispatch to the entry point named by ``mode`` (one of ``MODES``)."""
    if mode == "item":
        return ParsedItem.parse(text)
    try:
        parser = _STREAM_PARSERS[mode]
    except KeyError:
        raise ValueError(f"unknown parse mode {mode!r}; expected one of {', '.join(MODES)}") from None
    return parser(text)
