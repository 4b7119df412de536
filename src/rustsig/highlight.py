"""Pygments lexer that highlights parsed Rust signatures.

Unlike a regex lexer, ``SignatureLexer`` runs the real parser and colors
each leaf of the resulting token stream, so a name is classified by its
position in the grammar (binding key, scalar, user type) rather than by
its spelling alone.
"""

from __future__ import annotations

import re
from typing import Iterator

from pygments import highlight as pygments_highlight
from pygments.formatter import Formatter
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.token import (
    Keyword,
    Name,
    Operator,
    Punctuation,
    Text as PlainText,
    _TokenType,
)
from pygments.util import get_choice_opt

from rustsig.errors import ParseError
from rustsig.parser import MODES, ParsedItem, parse_as
from rustsig.tokens import (
    AssocType,
    Identifier,
    LeafToken,
    Primitive,
    PrimitiveKind,
    Range,
    Text,
    TokenStream,
    Where,
)

# Verbatim text: whitespace, lifetimes, keywords, operators, punctuation.
_TEXT_RE = re.compile(
    r"(?P<ws>\s+)"
    r"|(?P<lifetime>'[^\W\d_]+)"
    r"|(?P<keyword>\b(?:mut|const|dyn)\b)"
    r"|(?P<punct>\.\.\.|::)"
    r"|(?P<op>->|=>|\.\.=|\.\.|[|+=&*])"
    r"|(?P<other>.)",
    re.DOTALL,
)

_TEXT_GROUPS: dict[str, _TokenType] = {
    "ws": PlainText.Whitespace,
    "lifetime": Name.Label,
    "keyword": Keyword,
    "punct": Punctuation,
    "op": Operator,
    "other": Punctuation,
}


def _split_text(value: str) -> Iterator[tuple[_TokenType, str]]:
    for m in _TEXT_RE.finditer(value):
        assert m.lastgroup is not None
        yield _TEXT_GROUPS[m.lastgroup], m.group()


def _leaf_tokens(leaf: LeafToken) -> Iterator[tuple[_TokenType, str]]:
    if isinstance(leaf, Identifier):
        yield Name.Class, leaf.value
    elif isinstance(leaf, AssocType):
        yield Name.Attribute, leaf.value
    elif isinstance(leaf, Primitive):
        if leaf.kind == PrimitiveKind.NAMED:
            yield Keyword.Type, leaf.value
        elif leaf.kind in (PrimitiveKind.REF, PrimitiveKind.PTR):
            yield from _split_text(leaf.raw())
        else:
            yield Punctuation, leaf.raw()
    elif isinstance(leaf, Range):
        yield Operator, leaf.raw()
    elif isinstance(leaf, Where):
        yield Keyword, leaf.raw()
    elif isinstance(leaf, Text):
        yield from _split_text(leaf.value)


def _stream_tokens(tokens: TokenStream) -> Iterator[tuple[_TokenType, str]]:
    for leaf in tokens.walk():
        yield from _leaf_tokens(leaf)


class SignatureLexer(Lexer):
    """Highlights one Rust type, where-clause, impl header or method signature.

    Options:

    ``mode``
        Which entry point to parse with: ``type`` (default), ``where``,
        ``impl``, ``trait-impl`` or ``item``.
    """

    name = "Rust signature"
    aliases = ["rustsig"]
    filenames: list[str] = []
    mimetypes = ["text/x-rust-signature"]

    def __init__(self, **options) -> None:
        self.mode = get_choice_opt(options, "mode", list(MODES), "type")
        Lexer.__init__(self, **options)

    def get_tokens_unprocessed(self, text: str) -> Iterator[tuple[int, _TokenType, str]]:
        body = text.rstrip("\n")
        tail = text[len(body):]
        try:
            parsed = parse_as(self.mode, body)
        except ParseError:
            pairs: Iterator[tuple[_TokenType, str]] = iter([(PlainText, body)]) if body else iter(())
        else:
            pairs = self._parsed_tokens(parsed)

        index = 0
        for tokentype, value in pairs:
            yield index, tokentype, value
            index += len(value)
        if tail:
            yield index, PlainText.Whitespace, tail

    @staticmethod
    def _parsed_tokens(parsed: TokenStream | ParsedItem) -> Iterator[tuple[_TokenType, str]]:
        if isinstance(parsed, ParsedItem):
            if not parsed.takes_self:
                yield Punctuation, "::"
            yield Name.Function, parsed.name
            yield from _stream_tokens(parsed.tokens)
        else:
            yield from _stream_tokens(parsed)


def highlight(
    text: str,
    mode: str = "type",
    formatter: Formatter | None = None,
    style: str = "default",
) -> str:
    """Highlight ``text`` parsed as ``mode``; unparseable text comes out plain.

    Without a ``formatter``, output is 256-color terminal text in the named
    Pygments ``style``.
    """
    lexer = SignatureLexer(mode=mode, stripnl=False)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
    return pygments_highlight(text, lexer, formatter)
