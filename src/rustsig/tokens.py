"""Token kinds and the lossless token stream produced by the signature parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Iterator, Union, overload


class PrimitiveKind(Enum):
    REF = auto()
    PTR = auto()
    SLICE_START = auto()
    SLICE_END = auto()
    TUPLE_START = auto()
    TUPLE_END = auto()
    UNIT = auto()
    NAMED = auto()


class RangeKind(Enum):
    RANGE_FULL = auto()
    RANGE_TO = auto()
    RANGE_TO_INCLUSIVE = auto()
    RANGE_FROM = auto()
    RANGE = auto()
    RANGE_INCLUSIVE = auto()

    @property
    def operator(self) -> str:
        if self in (RangeKind.RANGE_TO_INCLUSIVE, RangeKind.RANGE_INCLUSIVE):
            return "..="
        return ".."


# Fixed source text for primitives that carry no captured value
_PRIMITIVE_TEXT: dict[PrimitiveKind, str] = {
    PrimitiveKind.SLICE_START: "[",
    PrimitiveKind.SLICE_END: "]",
    PrimitiveKind.TUPLE_START: "(",
    PrimitiveKind.TUPLE_END: ")",
    PrimitiveKind.UNIT: "()",
}


# ── Leaf tokens ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Text:
    """Verbatim punctuation or whitespace."""

    value: str

    def raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class Identifier:
    """A user-defined type or trait name."""

    value: str

    def raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class AssocType:
    """An associated item selector (``Foo::Err``) or binding key (``Item = T``)."""

    value: str

    def raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class Primitive:
    """Structural marker.

    ``value`` holds the text after the sigil for ``REF``/``PTR``
    (``"mut 'a"`` for ``&mut 'a``) and the scalar name for ``NAMED``.
    Other kinds have a fixed spelling and leave it empty.
    """

    kind: PrimitiveKind
    value: str = ""

    def raw(self) -> str:
        if self.kind == PrimitiveKind.REF:
            return "&" + self.value
        if self.kind == PrimitiveKind.PTR:
            return "*" + self.value
        if self.kind == PrimitiveKind.NAMED:
            return self.value
        return _PRIMITIVE_TEXT[self.kind]


@dataclass(frozen=True)
class Range:
    kind: RangeKind

    def raw(self) -> str:
        return self.kind.operator


@dataclass(frozen=True)
class Where:
    def raw(self) -> str:
        return "where"


# ── Group tokens ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Type:
    """A complete type expression, embeddable as an opaque unit."""

    tokens: TokenStream

    def raw(self) -> str:
        return self.tokens.raw()


@dataclass(frozen=True)
class Nested:
    """A comma-separated grouping such as a parameter list or tuple body."""

    tokens: TokenStream

    def raw(self) -> str:
        return self.tokens.raw()


Token = Union[Text, Identifier, AssocType, Primitive, Range, Where, Type, Nested]

LeafToken = Union[Text, Identifier, AssocType, Primitive, Range, Where]


class TokenStream:
    """Ordered, immutable sequence of tokens.

    Concatenating ``raw()`` of every token reproduces the parsed input
    exactly, whitespace included.
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> TokenStream: ...

    def __getitem__(self, index: int | slice) -> Token | TokenStream:
        if isinstance(index, slice):
            return TokenStream(self._tokens[index])
        return self._tokens[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenStream):
            return self._tokens == other._tokens
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"TokenStream({list(self._tokens)!r})"

    def raw(self) -> str:
        return "".join(token.raw() for token in self._tokens)

    def walk(self) -> Iterator[LeafToken]:
        """Yield leaf tokens depth-first, descending into Type and Nested."""
        for token in self._tokens:
            if isinstance(token, (Type, Nested)):
                yield from token.tokens.walk()
            else:
                yield token
