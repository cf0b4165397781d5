"""Centralized environment configuration management for schemaflow.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from schemaflow.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> depth = get_environment(EnvVar.MAX_DEPTH)  # Returns int
    >>> path = get_environment(EnvVar.SCHEMA_PATH)  # Returns Path | None
    >>>
    >>> # Override at runtime
    >>> depth = get_environment(EnvVar.MAX_DEPTH, override=16)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================

LAYOUT_DIRECTIONS = ("TB", "LR")


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "SCHEMAFLOW_MAX_DEPTH").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by schemaflow.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - loader: Where user schema modules are read from
        - output: Where graph artifacts are written
        - layout: Graph layout options
        - compiler: Schema-to-graph compiler limits
        - logging: Log verbosity
    """

    SCHEMA_PATH = EnvConfig(
        name="SCHEMAFLOW_SCHEMA_PATH",
        default=None,
        var_type=Path,
        description="Python module of named schemas to visualize",
        category="loader",
    )
    OUTPUT_PATH = EnvConfig(
        name="SCHEMAFLOW_OUTPUT_PATH",
        default=Path("schemaflow-graph.json"),
        var_type=Path,
        description="Where the compiled graph artifact is written",
        category="output",
    )
    LAYOUT_DIRECTION = EnvConfig(
        name="SCHEMAFLOW_LAYOUT_DIRECTION",
        default="LR",
        var_type=str,
        description="Rank direction for the layered layout (TB or LR)",
        category="layout",
    )
    MAX_DEPTH = EnvConfig(
        name="SCHEMAFLOW_MAX_DEPTH",
        default=64,
        var_type=int,
        description="Maximum schema nesting depth accepted by the compiler",
        category="compiler",
    )
    LOG_LEVEL = EnvConfig(
        name="SCHEMAFLOW_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Logging level name (DEBUG, INFO, WARNING, ...)",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is Path:
        return Path(value) if value else default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, or Path).

    Example:
        >>> get_environment(EnvVar.MAX_DEPTH)
        64
        >>> get_environment(EnvVar.MAX_DEPTH, override=8)
        8
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (loader, output, layout, compiler,
                 logging). None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


# =============================================================================
# Convenience Functions
# =============================================================================


def get_schema_path(override: Path | str | None = None) -> Path | None:
    """Get the user schema module path, if one is configured."""
    if override:
        return Path(override)
    return get_environment(EnvVar.SCHEMA_PATH)


def get_output_path(override: Path | str | None = None) -> Path:
    """Get the graph artifact output path."""
    if override:
        return Path(override)
    return get_environment(EnvVar.OUTPUT_PATH)


def get_layout_direction(override: str | None = None) -> str:
    """Get the layout rank direction.

    Unknown values fall back to the default ("LR").

    Returns:
        "TB" or "LR".
    """
    direction = str(get_environment(EnvVar.LAYOUT_DIRECTION, override)).upper()
    if direction not in LAYOUT_DIRECTIONS:
        return EnvVar.LAYOUT_DIRECTION.value.default
    return direction


def get_max_depth(override: int | None = None) -> int:
    """Get the compiler nesting depth limit (always at least 1)."""
    return max(1, get_environment(EnvVar.MAX_DEPTH, override))


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name, upper-cased."""
    return str(get_environment(EnvVar.LOG_LEVEL, override)).upper()


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
