"""Runtime type-description model.

This module defines the values users author to describe data shapes and the
resolver that strips modifier wrappers from them. A schema is a single tagged
dataclass: the ``kind`` discriminant names the variant and the remaining
fields carry that variant's payload.

Schema values are compared by identity. Two structurally identical schemas
built independently are distinct, which is what lets the graph compiler
recognize a shared, registered schema wherever it is referenced.

Example:
    >>> from schemaflow.schema import s
    >>> Role = s.enum(["admin", "user"])
    >>> User = s.object({"role": Role, "name": s.string().optional()})
    >>> resolve_base(User.shape["name"]).optional
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

# =============================================================================
# Kind Tags
# =============================================================================

KIND_PREFIX = "Schema"


class SchemaKind(str, Enum):
    """Discriminant naming a schema variant.

    Every tag carries the ``Schema`` prefix; display code strips it and
    lowercases the rest (``SchemaString`` renders as ``string``).
    """

    # Structural
    OBJECT = "SchemaObject"
    ENUM = "SchemaEnum"
    NATIVE_ENUM = "SchemaNativeEnum"

    # Compound
    ARRAY = "SchemaArray"
    TUPLE = "SchemaTuple"
    UNION = "SchemaUnion"
    RECORD = "SchemaRecord"
    MAP = "SchemaMap"
    SET = "SchemaSet"
    LITERAL = "SchemaLiteral"

    # Scalars
    STRING = "SchemaString"
    NUMBER = "SchemaNumber"
    BIGINT = "SchemaBigInt"
    BOOLEAN = "SchemaBoolean"
    DATE = "SchemaDate"
    NULL = "SchemaNull"
    UNDEFINED = "SchemaUndefined"
    ANY = "SchemaAny"
    UNKNOWN = "SchemaUnknown"
    NEVER = "SchemaNever"
    VOID = "SchemaVoid"

    # Not graphed at the top level
    INTERSECTION = "SchemaIntersection"
    PROMISE = "SchemaPromise"

    # Modifier wrappers
    OPTIONAL = "SchemaOptional"
    NULLABLE = "SchemaNullable"
    DEFAULT = "SchemaDefault"
    EFFECTS = "SchemaEffects"


WRAPPER_KINDS = frozenset(
    {
        SchemaKind.OPTIONAL,
        SchemaKind.NULLABLE,
        SchemaKind.DEFAULT,
        SchemaKind.EFFECTS,
    }
)

ENUM_KINDS = frozenset({SchemaKind.ENUM, SchemaKind.NATIVE_ENUM})


def kind_display_name(kind: SchemaKind | str) -> str:
    """Strip the kind prefix and lowercase the rest.

    Example:
        >>> kind_display_name(SchemaKind.BIGINT)
        'bigint'
    """
    tag = kind.value if isinstance(kind, SchemaKind) else kind
    if tag.startswith(KIND_PREFIX):
        tag = tag[len(KIND_PREFIX) :]
    return tag.lower()


def is_kind_tag(text: str) -> bool:
    """Check whether a string is one of the SchemaKind tag values."""
    return text in _KIND_VALUES


_KIND_VALUES = frozenset(kind.value for kind in SchemaKind)


class SchemaCycleError(Exception):
    """A modifier wrapper chain refers back to itself."""

    def __init__(self, message: str, schema: SchemaValue | None = None):
        super().__init__(message)
        self.schema = schema


# =============================================================================
# Schema Value
# =============================================================================


@dataclass(frozen=True, eq=False, repr=False)
class SchemaValue:
    """A runtime description of a data shape.

    Attributes:
        kind: Variant discriminant.
        shape: Field name to schema, for objects.
        members: Ordered member list, for enums and native enums.
        items: Nested schemas. Arrays and sets hold one element, tuples and
            unions hold their options, records and maps hold ``(key, value)``,
            wrappers hold their inner schema.
        value: Literal value, or the effect callable for effects.
        default_factory: Thunk producing the default, for default wrappers.
    """

    kind: SchemaKind
    shape: Mapping[str, SchemaValue] = field(default_factory=dict)
    members: tuple[str, ...] = ()
    items: tuple[SchemaValue, ...] = ()
    value: Any = None
    default_factory: Callable[[], Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", MappingProxyType(dict(self.shape)))
        object.__setattr__(self, "members", tuple(self.members))
        object.__setattr__(self, "items", tuple(self.items))

    def __repr__(self) -> str:
        if self.kind == SchemaKind.OBJECT:
            detail = f"fields={list(self.shape)}"
        elif self.kind in ENUM_KINDS:
            detail = f"members={list(self.members)}"
        elif self.kind == SchemaKind.LITERAL:
            detail = f"value={self.value!r}"
        elif self.items:
            detail = f"items={len(self.items)}"
        else:
            return f"SchemaValue({self.kind.value})"
        return f"SchemaValue({self.kind.value}, {detail})"

    # ------------------------------------------------------------------
    # Payload accessors
    # ------------------------------------------------------------------

    @property
    def inner(self) -> SchemaValue:
        """Wrapped schema of a modifier wrapper."""
        if self.kind not in WRAPPER_KINDS:
            raise TypeError(f"{self.kind.value} is not a wrapper schema")
        return self.items[0]

    @property
    def element(self) -> SchemaValue:
        """Element schema of an array, set or promise."""
        if self.kind not in (SchemaKind.ARRAY, SchemaKind.SET, SchemaKind.PROMISE):
            raise TypeError(f"{self.kind.value} has no element schema")
        return self.items[0]

    @property
    def key_type(self) -> SchemaValue:
        """Key schema of a record or map."""
        if self.kind not in (SchemaKind.RECORD, SchemaKind.MAP):
            raise TypeError(f"{self.kind.value} has no key schema")
        return self.items[0]

    @property
    def value_type(self) -> SchemaValue:
        """Value schema of a record or map."""
        if self.kind not in (SchemaKind.RECORD, SchemaKind.MAP):
            raise TypeError(f"{self.kind.value} has no value schema")
        return self.items[1]

    # ------------------------------------------------------------------
    # Fluent modifiers
    # ------------------------------------------------------------------

    def optional(self) -> SchemaValue:
        return SchemaValue(SchemaKind.OPTIONAL, items=(self,))

    def nullable(self) -> SchemaValue:
        return SchemaValue(SchemaKind.NULLABLE, items=(self,))

    def nullish(self) -> SchemaValue:
        return self.nullable().optional()

    def default(self, value: Any) -> SchemaValue:
        """Wrap with a default. Callables are used as the default thunk."""
        factory = value if callable(value) else (lambda: value)
        return SchemaValue(SchemaKind.DEFAULT, items=(self,), default_factory=factory)

    def transform(self, fn: Callable[[Any], Any]) -> SchemaValue:
        return SchemaValue(SchemaKind.EFFECTS, items=(self,), value=fn)

    def refine(self, check: Callable[[Any], bool]) -> SchemaValue:
        return SchemaValue(SchemaKind.EFFECTS, items=(self,), value=check)

    def array(self) -> SchemaValue:
        return SchemaValue(SchemaKind.ARRAY, items=(self,))

    def or_(self, other: SchemaValue) -> SchemaValue:
        return SchemaValue(SchemaKind.UNION, items=(self, _require_schema(other)))


SchemaDictionary = Mapping[str, SchemaValue]


def _require_schema(value: Any) -> SchemaValue:
    if not isinstance(value, SchemaValue):
        raise TypeError(f"Expected a SchemaValue, got {type(value).__name__}")
    return value


# =============================================================================
# Builder
# =============================================================================


class SchemaBuilder:
    """Factory for schema values, exposed as the module-level ``s``.

    Example:
        >>> Product = s.object({"id": s.string(), "price": s.number()})
        >>> Order = s.object({"items": s.array(Product)})
    """

    def object(self, shape: Mapping[str, SchemaValue]) -> SchemaValue:
        for key, value in shape.items():
            if not isinstance(value, SchemaValue):
                raise TypeError(
                    f"Field '{key}' must be a SchemaValue, got {type(value).__name__}"
                )
        return SchemaValue(SchemaKind.OBJECT, shape=shape)

    def enum(self, members: Iterable[str]) -> SchemaValue:
        members = tuple(members)
        if not members:
            raise ValueError("An enum needs at least one member")
        return SchemaValue(SchemaKind.ENUM, members=tuple(str(m) for m in members))

    def native_enum(self, enum_cls: type[Enum]) -> SchemaValue:
        """Describe a Python Enum class; members are its values as strings."""
        return SchemaValue(
            SchemaKind.NATIVE_ENUM,
            members=tuple(str(member.value) for member in enum_cls),
            value=enum_cls,
        )

    def array(self, element: SchemaValue) -> SchemaValue:
        return SchemaValue(SchemaKind.ARRAY, items=(_require_schema(element),))

    def tuple(self, items: Iterable[SchemaValue]) -> SchemaValue:
        return SchemaValue(
            SchemaKind.TUPLE, items=tuple(_require_schema(i) for i in items)
        )

    def union(self, options: Iterable[SchemaValue]) -> SchemaValue:
        options = tuple(_require_schema(o) for o in options)
        if len(options) < 2:
            raise ValueError("A union needs at least two options")
        return SchemaValue(SchemaKind.UNION, items=options)

    def record(
        self, key_or_value: SchemaValue, value: SchemaValue | None = None
    ) -> SchemaValue:
        """Record with string keys, or with an explicit key schema."""
        if value is None:
            key, value = self.string(), key_or_value
        else:
            key = key_or_value
        return SchemaValue(
            SchemaKind.RECORD, items=(_require_schema(key), _require_schema(value))
        )

    def map(self, key: SchemaValue, value: SchemaValue) -> SchemaValue:
        return SchemaValue(
            SchemaKind.MAP, items=(_require_schema(key), _require_schema(value))
        )

    def set(self, element: SchemaValue) -> SchemaValue:
        return SchemaValue(SchemaKind.SET, items=(_require_schema(element),))

    def literal(self, value: Any) -> SchemaValue:
        return SchemaValue(SchemaKind.LITERAL, value=value)

    def intersection(self, left: SchemaValue, right: SchemaValue) -> SchemaValue:
        return SchemaValue(
            SchemaKind.INTERSECTION,
            items=(_require_schema(left), _require_schema(right)),
        )

    def promise(self, element: SchemaValue) -> SchemaValue:
        return SchemaValue(SchemaKind.PROMISE, items=(_require_schema(element),))

    def string(self) -> SchemaValue:
        return SchemaValue(SchemaKind.STRING)

    def number(self) -> SchemaValue:
        return SchemaValue(SchemaKind.NUMBER)

    def bigint(self) -> SchemaValue:
        return SchemaValue(SchemaKind.BIGINT)

    def boolean(self) -> SchemaValue:
        return SchemaValue(SchemaKind.BOOLEAN)

    def date(self) -> SchemaValue:
        return SchemaValue(SchemaKind.DATE)

    def null(self) -> SchemaValue:
        return SchemaValue(SchemaKind.NULL)

    def undefined(self) -> SchemaValue:
        return SchemaValue(SchemaKind.UNDEFINED)

    def any(self) -> SchemaValue:
        return SchemaValue(SchemaKind.ANY)

    def unknown(self) -> SchemaValue:
        return SchemaValue(SchemaKind.UNKNOWN)

    def never(self) -> SchemaValue:
        return SchemaValue(SchemaKind.NEVER)

    def void(self) -> SchemaValue:
        return SchemaValue(SchemaKind.VOID)


s = SchemaBuilder()


# =============================================================================
# Base-Schema Resolution
# =============================================================================


@dataclass(frozen=True)
class BaseSchema:
    """A schema with its modifier wrappers stripped.

    Attributes:
        schema: The payload schema (never a wrapper).
        optional: An Optional wrapper was stripped.
        nullable: A Nullable wrapper was stripped.
        has_default: A Default wrapper was stripped.
        default_value: Result of the outermost default thunk.
    """

    schema: SchemaValue
    optional: bool = False
    nullable: bool = False
    has_default: bool = False
    default_value: Any = None

    @property
    def kind(self) -> SchemaKind:
        return self.schema.kind

    @property
    def has_modifiers(self) -> bool:
        return self.optional or self.nullable or self.has_default


def resolve_base(schema: SchemaValue) -> BaseSchema:
    """Strip Optional, Nullable, Default and Effects wrappers in any order.

    Args:
        schema: Schema to resolve.

    Returns:
        BaseSchema holding the payload schema and the collected flags. An
        already-base schema is returned unchanged with every flag false.

    Raises:
        SchemaCycleError: If the wrapper chain revisits a wrapper.
    """
    base = schema
    optional = nullable = has_default = False
    default_value: Any = None
    seen: set[SchemaValue] = set()

    while base.kind in WRAPPER_KINDS:
        if base in seen:
            raise SchemaCycleError(
                f"Wrapper chain loops back to {base!r}", schema=schema
            )
        seen.add(base)

        if base.kind == SchemaKind.NULLABLE:
            nullable = True
        elif base.kind == SchemaKind.OPTIONAL:
            optional = True
        elif base.kind == SchemaKind.DEFAULT and not has_default:
            default_value = base.default_factory() if base.default_factory else None
            has_default = True
        base = base.inner

    return BaseSchema(
        schema=base,
        optional=optional,
        nullable=nullable,
        has_default=has_default,
        default_value=default_value,
    )


__all__ = [
    "KIND_PREFIX",
    "SchemaKind",
    "WRAPPER_KINDS",
    "ENUM_KINDS",
    "kind_display_name",
    "is_kind_tag",
    "SchemaCycleError",
    "SchemaValue",
    "SchemaDictionary",
    "SchemaBuilder",
    "s",
    "BaseSchema",
    "resolve_base",
]
