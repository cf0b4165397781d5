"""Type descriptors and their canonical string grammar.

Object nodes record each field's type as a descriptor: a registered name, a
bare kind tag, or a compound built from other descriptors. Inside the
compiler descriptors travel as a small tree; node data stores them encoded in
a canonical grammar that display code parses back and renders::

    Array<T>            ->  T[]
    Tuple<[T,U]>        ->  [T, U]
    Union<[T,U]>        ->  T | U
    Record<K,V>         ->  { [key: K]: V }
    Map<K,V>            ->  Map<K, V>
    Set<T>              ->  Set<T>
    Literal<json>       ->  json
    SchemaString        ->  string

Registered names may contain grammar punctuation, so names that would be
ambiguous are encoded as JSON strings and the grammar is read with an explicit
tokenizer rather than pattern matching.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Iterator, Union

from schemaflow.schema import SchemaKind, is_kind_tag, kind_display_name

# =============================================================================
# Descriptor Tree
# =============================================================================


class Constructor(str, Enum):
    """Compound constructors of the grammar (Literal is handled apart)."""

    ARRAY = "Array"
    TUPLE = "Tuple"
    UNION = "Union"
    RECORD = "Record"
    MAP = "Map"
    SET = "Set"


LITERAL = "Literal"

_ARITY = {
    Constructor.ARRAY: 1,
    Constructor.SET: 1,
    Constructor.RECORD: 2,
    Constructor.MAP: 2,
}
_LISTED = frozenset({Constructor.TUPLE, Constructor.UNION})


@dataclass(frozen=True)
class TypeRef:
    """Reference to a node: a registered name or a synthetic id."""

    name: str


@dataclass(frozen=True)
class KindTag:
    """A bare kind tag such as ``SchemaString``."""

    kind: str


@dataclass(frozen=True)
class LiteralValue:
    """A literal JSON value."""

    value: Any


@dataclass(frozen=True)
class Compound:
    """A constructor applied to nested descriptors."""

    constructor: Constructor
    args: tuple[TypeDescriptor, ...]

    def __post_init__(self) -> None:
        arity = _ARITY.get(self.constructor)
        if arity is not None and len(self.args) != arity:
            raise ValueError(
                f"{self.constructor.value} takes {arity} argument(s), "
                f"got {len(self.args)}"
            )


TypeDescriptor = Union[TypeRef, KindTag, LiteralValue, Compound]


def kind_tag(kind: SchemaKind) -> KindTag:
    return KindTag(kind.value)


class TypeStringError(ValueError):
    """Malformed encoded type string."""

    def __init__(self, message: str, text: str = "", position: int | None = None):
        if position is not None:
            message = f"{message} at position {position} in {text!r}"
        super().__init__(message)
        self.text = text
        self.position = position


# =============================================================================
# Encoding
# =============================================================================

_PUNCTUATION = frozenset("<>[],")


def _needs_quoting(name: str) -> bool:
    if not name or is_kind_tag(name):
        return True
    return any(ch in _PUNCTUATION or ch == '"' or ch.isspace() for ch in name)


def _literal_json(value: Any, compact: bool = True) -> str:
    if isinstance(value, Enum):
        value = value.value
    separators = (",", ":") if compact else None
    try:
        return json.dumps(value, separators=separators, ensure_ascii=False)
    except (TypeError, ValueError):
        return json.dumps(str(value), ensure_ascii=False)


def encode(descriptor: TypeDescriptor) -> str:
    """Encode a descriptor tree into the canonical grammar.

    Example:
        >>> encode(Compound(Constructor.ARRAY, (TypeRef("Product"),)))
        'Array<Product>'
    """
    if isinstance(descriptor, TypeRef):
        name = descriptor.name
        return json.dumps(name, ensure_ascii=False) if _needs_quoting(name) else name
    if isinstance(descriptor, KindTag):
        return descriptor.kind
    if isinstance(descriptor, LiteralValue):
        return f"{LITERAL}<{_literal_json(descriptor.value)}>"
    if isinstance(descriptor, Compound):
        inner = ",".join(encode(arg) for arg in descriptor.args)
        if descriptor.constructor in _LISTED:
            inner = f"[{inner}]"
        return f"{descriptor.constructor.value}<{inner}>"
    raise TypeError(f"Not a type descriptor: {descriptor!r}")


# =============================================================================
# Tokenizer
# =============================================================================


class TokenType(str, Enum):
    LT = "<"
    GT = ">"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    IDENT = "ident"
    STRING = "string"
    JSON = "json"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    position: int
    value: Any = None


_JSON_DECODER = json.JSONDecoder()


def tokenize(text: str) -> list[Token]:
    """Split an encoded type string into tokens.

    Identifiers run until punctuation, a quote or whitespace. Quoted names are
    JSON strings. The payload of ``Literal<...>`` is scanned as one JSON value.

    Raises:
        TypeStringError: On an unterminated string or invalid literal.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(text)

    while pos < length:
        ch = text[pos]

        if ch.isspace():
            pos += 1
            continue

        if (
            len(tokens) >= 2
            and tokens[-1].type == TokenType.LT
            and tokens[-2].type == TokenType.IDENT
            and tokens[-2].text == LITERAL
        ):
            try:
                value, end = _JSON_DECODER.raw_decode(text, pos)
            except json.JSONDecodeError as e:
                raise TypeStringError("Invalid literal value", text, pos) from e
            tokens.append(Token(TokenType.JSON, text[pos:end], pos, value))
            pos = end
            continue

        if ch in _PUNCTUATION:
            tokens.append(Token(TokenType(ch), ch, pos))
            pos += 1
            continue

        if ch == '"':
            try:
                value, end = _JSON_DECODER.raw_decode(text, pos)
            except json.JSONDecodeError as e:
                raise TypeStringError("Unterminated quoted name", text, pos) from e
            tokens.append(Token(TokenType.STRING, text[pos:end], pos, value))
            pos = end
            continue

        start = pos
        while pos < length:
            ch = text[pos]
            if ch in _PUNCTUATION or ch == '"' or ch.isspace():
                break
            pos += 1
        tokens.append(Token(TokenType.IDENT, text[start:pos], start))

    return tokens


# =============================================================================
# Parser
# =============================================================================


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def _peek(self) -> Token | None:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _error(self, message: str) -> TypeStringError:
        token = self._peek()
        position = token.position if token else len(self.text)
        return TypeStringError(message, self.text, position)

    def _expect(self, token_type: TokenType) -> Token:
        token = self._peek()
        if token is None or token.type != token_type:
            raise self._error(f"Expected '{token_type.value}'")
        self.index += 1
        return token

    def parse(self) -> TypeDescriptor:
        descriptor = self._descriptor()
        if self._peek() is not None:
            raise self._error("Unexpected trailing input")
        return descriptor

    def _descriptor(self) -> TypeDescriptor:
        token = self._peek()
        if token is None:
            raise self._error("Expected a type")

        if token.type == TokenType.STRING:
            self.index += 1
            return TypeRef(token.value)

        if token.type != TokenType.IDENT:
            raise self._error("Expected a type")
        self.index += 1

        following = self._peek()
        if following is None or following.type != TokenType.LT:
            if is_kind_tag(token.text):
                return KindTag(token.text)
            return TypeRef(token.text)

        self.index += 1
        if token.text == LITERAL:
            payload = self._expect(TokenType.JSON)
            self._expect(TokenType.GT)
            return LiteralValue(payload.value)

        try:
            constructor = Constructor(token.text)
        except ValueError:
            raise TypeStringError(
                f"Unknown constructor {token.text!r}", self.text, token.position
            ) from None

        if constructor in _LISTED:
            args = self._listed()
        else:
            args = [self._descriptor()]
            for _ in range(_ARITY[constructor] - 1):
                self._expect(TokenType.COMMA)
                args.append(self._descriptor())
        self._expect(TokenType.GT)
        return Compound(constructor, tuple(args))

    def _listed(self) -> list[TypeDescriptor]:
        self._expect(TokenType.LBRACKET)
        args: list[TypeDescriptor] = []
        token = self._peek()
        if token is not None and token.type == TokenType.RBRACKET:
            self.index += 1
            return args

        args.append(self._descriptor())
        while True:
            token = self._peek()
            if token is not None and token.type == TokenType.COMMA:
                self.index += 1
                args.append(self._descriptor())
                continue
            self._expect(TokenType.RBRACKET)
            return args


def parse(text: str) -> TypeDescriptor:
    """Parse an encoded type string back into a descriptor tree.

    Raises:
        TypeStringError: If the text is not valid grammar.
    """
    return _Parser(text).parse()


# =============================================================================
# Rendering
# =============================================================================


def _render(descriptor: TypeDescriptor) -> str:
    if isinstance(descriptor, TypeRef):
        return descriptor.name
    if isinstance(descriptor, KindTag):
        return kind_display_name(descriptor.kind)
    if isinstance(descriptor, LiteralValue):
        return _literal_json(descriptor.value, compact=False)
    if not isinstance(descriptor, Compound):
        raise TypeError(f"Not a type descriptor: {descriptor!r}")

    args = [_render(arg) for arg in descriptor.args]
    constructor = descriptor.constructor

    if constructor == Constructor.ARRAY:
        element = descriptor.args[0]
        if isinstance(element, Compound) and element.constructor == Constructor.UNION:
            return f"({args[0]})[]"
        return f"{args[0]}[]"
    if constructor == Constructor.TUPLE:
        return f"[{', '.join(args)}]"
    if constructor == Constructor.UNION:
        return " | ".join(args)
    if constructor == Constructor.RECORD:
        return f"{{ [key: {args[0]}]: {args[1]} }}"
    if constructor == Constructor.MAP:
        return f"Map<{args[0]}, {args[1]}>"
    return f"Set<{args[0]}>"


def render_type(descriptor: TypeDescriptor | str) -> str:
    """Render a descriptor, or its encoded form, as a display string.

    Nested compounds are expanded fully.

    Example:
        >>> render_type("Array<Union<[SchemaString,Product]>>")
        '(string | Product)[]'
    """
    if isinstance(descriptor, str):
        descriptor = parse(descriptor)
    return _render(descriptor)


def iter_references(descriptor: TypeDescriptor) -> Iterator[str]:
    """Yield every node reference in the descriptor, depth first."""
    if isinstance(descriptor, TypeRef):
        yield descriptor.name
    elif isinstance(descriptor, Compound):
        for arg in descriptor.args:
            yield from iter_references(arg)


def has_handle(
    descriptor: TypeDescriptor | str, schemas: Collection[str] | None = None
) -> bool:
    """Check whether a field's type connects to another node.

    Args:
        descriptor: Field type, encoded or as a tree.
        schemas: Node ids the owning node references. When omitted, any
            reference counts.

    Returns:
        True if the field should carry a connector handle.
    """
    if isinstance(descriptor, str):
        descriptor = parse(descriptor)
    for name in iter_references(descriptor):
        if schemas is None or name in schemas:
            return True
    return False


__all__ = [
    "Constructor",
    "LITERAL",
    "TypeRef",
    "KindTag",
    "LiteralValue",
    "Compound",
    "TypeDescriptor",
    "kind_tag",
    "TypeStringError",
    "encode",
    "TokenType",
    "Token",
    "tokenize",
    "parse",
    "render_type",
    "iter_references",
    "has_handle",
]
