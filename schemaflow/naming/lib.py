"""Name resolution and synthetic identifiers.

Registered schemas are recognized by identity: a value's name is the first
dictionary key mapped to that exact object. Anything without a name gets a
generated identifier from an ``IdGenerator`` owned by a single compile.
"""

from __future__ import annotations

from schemaflow.schema import SchemaDictionary, SchemaValue


def find_name(dictionary: SchemaDictionary, value: SchemaValue) -> str | None:
    """Return the first key whose mapped value is ``value`` itself.

    Args:
        dictionary: Name to schema registry.
        value: Schema to look up.

    Returns:
        The registered name, or None when the value is anonymous.
    """
    for name, candidate in dictionary.items():
        if candidate is value:
            return name
    return None


def dedupe_dictionary(dictionary: SchemaDictionary) -> dict[str, SchemaValue]:
    """Keep only the first name registered for each schema value.

    Insertion order is preserved.
    """
    seen: set[SchemaValue] = set()
    result: dict[str, SchemaValue] = {}
    for name, value in dictionary.items():
        if value in seen:
            continue
        seen.add(value)
        result[name] = value
    return result


class IdGenerator:
    """Per-prefix counters producing ``"{prefix}-{n}"`` identifiers.

    Counters start at 0 and are private to the instance, so a fresh
    generator per compile keeps generated ids reproducible.

    Example:
        >>> ids = IdGenerator()
        >>> ids.generate("SchemaObject"), ids.generate("SchemaObject")
        ('SchemaObject-0', 'SchemaObject-1')
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def generate(self, prefix: str) -> str:
        counter = self._counters.get(prefix, -1) + 1
        self._counters[prefix] = counter
        return f"{prefix}-{counter}"


__all__ = ["find_name", "dedupe_dictionary", "IdGenerator"]
