"""Lexical primitives for the signature parser.

The grammar is scannerless: rules read directly from the source string
through a ``Scanner`` cursor. Every matcher here either consumes its match
and returns it, or raises ``NoMatch`` with the cursor left where it was.
"""

from __future__ import annotations

from typing import Callable, NoReturn

from rustsig.tokens import Text, Token

PRIMITIVE_TYPES: frozenset[str] = frozenset({
    "bool", "char", "str",
    "i8", "i16", "i32", "i64", "i128", "isize",
    "u8", "u16", "u32", "u64", "u128", "usize",
})


def is_primitive(name: str) -> bool:
    """Scalar type names are matched exactly and case-sensitively."""
    return name in PRIMITIVE_TYPES


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


# str.isspace also accepts the information separators U+001C..U+001F,
# which are not Unicode White_Space.
_NOT_WHITESPACE = frozenset("\x1c\x1d\x1e\x1f")


def _is_space(ch: str) -> bool:
    return ch.isspace() and ch not in _NOT_WHITESPACE


class NoMatch(Exception):
    """A rule failed to match at the current position."""

    def __init__(self, pos: int) -> None:
        self.pos = pos
        super().__init__(f"no match at offset {pos}")


class Scanner:
    """Cursor over an immutable source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    # ── Cursor ───────────────────────────────────────────────────

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def mark(self) -> int:
        return self.pos

    def reset(self, mark: int) -> None:
        self.pos = mark

    def since(self, mark: int) -> str:
        """Return the source consumed since ``mark``."""
        return self.source[mark:self.pos]

    def fail(self) -> NoReturn:
        raise NoMatch(self.pos)

    def _take_while(self, pred: Callable[[str], bool]) -> str:
        start = self.pos
        while self.pos < len(self.source) and pred(self.source[self.pos]):
            self.pos += 1
        return self.source[start:self.pos]

    # ── Matchers ─────────────────────────────────────────────────

    def spaces(self) -> str:
        """Consume a possibly empty run of whitespace."""
        return self._take_while(_is_space)

    def literal(self, s: str) -> str:
        if not self.source.startswith(s, self.pos):
            self.fail()
        self.pos += len(s)
        return s

    def identifier(self) -> str:
        name = self._take_while(_is_ident_char)
        if not name:
            self.fail()
        return name

    def lifetime(self) -> str:
        start = self.pos
        self.literal("'")
        if not self._take_while(str.isalpha):
            self.reset(start)
            self.fail()
        return self.since(start)

    def lex_str(self, s: str) -> str:
        """Match ``s`` with optional whitespace on both sides, return it all."""
        start = self.pos
        self.spaces()
        if not self.source.startswith(s, self.pos):
            self.reset(start)
            self.fail()
        self.pos += len(s)
        self.spaces()
        return self.since(start)

    # ── Token producers ──────────────────────────────────────────

    def lex(self, s: str) -> list[Token]:
        return [Text(self.lex_str(s))]

    def maybe_spaces(self) -> list[Token]:
        """Capture whitespace as a Text token; an empty run yields nothing."""
        ws = self.spaces()
        return [Text(ws)] if ws else []
