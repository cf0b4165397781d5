"""Type descriptors, their canonical grammar, and display rendering."""

from .lib import (
    LITERAL,
    Compound,
    Constructor,
    KindTag,
    LiteralValue,
    Token,
    TokenType,
    TypeDescriptor,
    TypeRef,
    TypeStringError,
    encode,
    has_handle,
    iter_references,
    kind_tag,
    parse,
    render_type,
    tokenize,
)

__all__ = [
    # Descriptor tree
    "Constructor",
    "LITERAL",
    "TypeRef",
    "KindTag",
    "LiteralValue",
    "Compound",
    "TypeDescriptor",
    "kind_tag",
    # Grammar
    "encode",
    "Token",
    "TokenType",
    "tokenize",
    "parse",
    "TypeStringError",
    # Display
    "render_type",
    "iter_references",
    "has_handle",
]
