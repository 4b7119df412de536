"""Lossless parser for Rust type expressions and method signatures."""

from rustsig.errors import ParseError
from rustsig.parser import (
    ParsedItem,
    parse_constraints,
    parse_impl,
    parse_trait_impl,
    parse_type,
)
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

__version__ = "0.1.0"

__all__ = [
    "AssocType",
    "Identifier",
    "Nested",
    "ParseError",
    "ParsedItem",
    "Primitive",
    "PrimitiveKind",
    "Range",
    "RangeKind",
    "Text",
    "Token",
    "TokenStream",
    "Type",
    "Where",
    "parse_constraints",
    "parse_impl",
    "parse_trait_impl",
    "parse_type",
]
