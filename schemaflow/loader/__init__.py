"""Loading schema dictionaries from user modules, with bundled examples."""

from .lib import (
    LoadError,
    LoadResult,
    load_dictionary,
    load_examples,
    load_schema_file,
    schemas_from_module,
)

__all__ = [
    "LoadError",
    "LoadResult",
    "schemas_from_module",
    "load_examples",
    "load_schema_file",
    "load_dictionary",
]
