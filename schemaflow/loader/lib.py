"""Schema module loading.

A schema module is an ordinary Python file whose module-level
``SchemaValue`` attributes form the dictionary to visualize, in definition
order. When the configured module cannot be loaded, the bundled examples are
used instead and the failure is reported alongside the result.

Example:
    >>> from schemaflow.loader import load_dictionary
    >>> result = load_dictionary("schemas/shop.py")
    >>> result.fallback, list(result.dictionary)[:2]
    (False, ['ProductSchema', 'UserRole'])
"""

from __future__ import annotations

import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from schemaflow.config import get_schema_path
from schemaflow.core import get_logger
from schemaflow.loader import examples
from schemaflow.schema import SchemaValue

logger = get_logger("loader")


class LoadError(Exception):
    """A schema module could not be loaded."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


@dataclass
class LoadResult:
    """Dictionary to compile plus how it was obtained.

    Attributes:
        dictionary: Name to schema registry.
        fallback: The bundled examples replaced a module that failed to load.
        error: Text of the load failure, when there was one.
        schema_path: The schema module that was requested, if any.
    """

    dictionary: dict[str, SchemaValue]
    fallback: bool = False
    error: str | None = None
    schema_path: Path | None = None


def schemas_from_module(module: ModuleType) -> dict[str, SchemaValue]:
    """Collect a module's public SchemaValue attributes in definition order."""
    return {
        name: value
        for name, value in vars(module).items()
        if not name.startswith("_") and isinstance(value, SchemaValue)
    }


def load_examples() -> dict[str, SchemaValue]:
    """Dictionary of the bundled example schemas."""
    return schemas_from_module(examples)


def load_schema_file(path: Path | str) -> dict[str, SchemaValue]:
    """Import a schema module from a file path.

    Args:
        path: Python file defining schemas at module level.

    Returns:
        Name to schema dictionary in definition order.

    Raises:
        LoadError: If the file is missing, fails to import, or defines no
            schemas.
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(f"Schema file not found: {path}", path)

    module_name = f"schemaflow_user_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoadError(f"Not an importable Python module: {path}", path)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise LoadError(f"Failed to import {path}: {e}", path) from e
    finally:
        sys.modules.pop(module_name, None)

    dictionary = schemas_from_module(module)
    if not dictionary:
        raise LoadError(f"No schemas defined in {path}", path)

    logger.debug("Loaded %d schemas from %s", len(dictionary), path)
    return dictionary


def load_dictionary(path: Path | str | None = None) -> LoadResult:
    """Load the dictionary to visualize.

    Args:
        path: Schema module path. Defaults to ``SCHEMAFLOW_SCHEMA_PATH``.
            Without either, the bundled examples are used.

    Returns:
        LoadResult. On a LoadError the examples are returned with
        ``fallback`` set and the error text attached.
    """
    schema_path = get_schema_path(path)
    if schema_path is None:
        return LoadResult(dictionary=load_examples())

    try:
        dictionary = load_schema_file(schema_path)
    except LoadError as e:
        logger.warning(
            "Failed to load schema path: %s, falling back to examples", schema_path
        )
        return LoadResult(
            dictionary=load_examples(),
            fallback=True,
            error=str(e),
            schema_path=schema_path,
        )

    return LoadResult(dictionary=dictionary, schema_path=schema_path)


__all__ = [
    "LoadError",
    "LoadResult",
    "schemas_from_module",
    "load_examples",
    "load_schema_file",
    "load_dictionary",
]
