"""Centralized configuration management for schemaflow.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from schemaflow.config import EnvVar, get_environment
    >>>
    >>> depth = get_environment(EnvVar.MAX_DEPTH)  # Returns int: 64
    >>> depth = get_environment(EnvVar.MAX_DEPTH, override=8)
    >>>
    >>> for var in list_environment_variables("layout"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    loader: User schema module location
    output: Graph artifact location
    layout: Layered layout options
    compiler: Compiler limits
    logging: Log verbosity
"""

from .lib import (
    LAYOUT_DIRECTIONS,
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_layout_direction,
    get_log_level,
    get_max_depth,
    get_output_path,
    get_schema_path,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    "LAYOUT_DIRECTIONS",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_schema_path",
    "get_output_path",
    "get_layout_direction",
    "get_max_depth",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
