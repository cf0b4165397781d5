"""Schema model: kind tags, schema values, the ``s`` builder and base resolution.

Example usage:
    >>> from schemaflow.schema import s, resolve_base
    >>> Role = s.enum(["admin", "user"])
    >>> resolve_base(Role.optional()).schema is Role
    True
"""

from .lib import (
    ENUM_KINDS,
    KIND_PREFIX,
    WRAPPER_KINDS,
    BaseSchema,
    SchemaBuilder,
    SchemaCycleError,
    SchemaDictionary,
    SchemaKind,
    SchemaValue,
    is_kind_tag,
    kind_display_name,
    resolve_base,
    s,
)

__all__ = [
    # Kind tags
    "KIND_PREFIX",
    "SchemaKind",
    "WRAPPER_KINDS",
    "ENUM_KINDS",
    "kind_display_name",
    "is_kind_tag",
    # Model
    "SchemaValue",
    "SchemaDictionary",
    "SchemaBuilder",
    "s",
    # Resolution
    "BaseSchema",
    "resolve_base",
    "SchemaCycleError",
]
