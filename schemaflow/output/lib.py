"""Output for compiled schema graphs.

Produces the JSON artifact consumed by node-graph canvases and a
human-readable text summary for terminal feedback.
"""

import json
from pathlib import Path
from typing import Any

from schemaflow.config import get_output_path
from schemaflow.core import get_logger
from schemaflow.graph import FieldModifiers, Graph, GraphNode, ObjectNodeData
from schemaflow.loader import LoadResult
from schemaflow.typestring import has_handle, render_type

logger = get_logger("output")


def build_artifact(graph: Graph, load_result: LoadResult | None = None) -> dict[str, Any]:
    """Build the JSON payload for a rendering surface.

    Args:
        graph: Compiled (and usually laid out) graph.
        load_result: How the dictionary was loaded. Omitted means the
            dictionary was supplied directly.

    Returns:
        Dict with ``nodes``, ``edges``, ``fallback``, ``error`` and
        ``schema`` keys.
    """
    payload = graph.to_dict()
    schema_path = load_result.schema_path if load_result else None
    payload.update(
        fallback=bool(load_result and load_result.fallback),
        error=load_result.error if load_result else None,
        schema=str(schema_path) if schema_path is not None else None,
    )
    return payload


def write_artifact(artifact: dict[str, Any], path: Path | str | None = None) -> Path:
    """Write an artifact as indented JSON.

    Args:
        artifact: Payload from ``build_artifact``.
        path: Destination. Defaults to ``SCHEMAFLOW_OUTPUT_PATH``.

    Returns:
        The path written.
    """
    path = get_output_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(artifact, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    logger.info("Wrote graph artifact to %s", path)
    return path


def format_graph_summary(graph: Graph) -> str:
    """Format a graph as a human-readable tree per node.

    Example output:
        UserSchema [object]
        ├── role: UserRole ->
        ├── email: string
        └── products: ProductSchema[] ->
        UserRole [enum]
        └── admin | user

    Fields that connect to another node end with ``->``. Optional fields
    carry a ``?`` and defaults are shown after ``=``.

    Args:
        graph: Compiled graph.

    Returns:
        Formatted summary string.
    """
    lines: list[str] = []
    for node in graph.nodes:
        _format_node(node, lines)
    lines.append(f"{len(graph.nodes)} nodes, {len(graph.edges)} edges")
    return "\n".join(lines)


def _format_node(node: GraphNode, lines: list[str]) -> None:
    """Append one node and its fields or members."""
    data = node.data
    title = node.id if data.label == node.id else f"{data.label} ({node.id})"
    if isinstance(data, ObjectNodeData):
        lines.append(f"{title} [object]")
        children = [
            _format_field(key, encoded, data.schemas, data.modifiers.get(key))
            for key, encoded in data.entries.items()
        ]
    else:
        lines.append(f"{title} [enum]")
        children = [" | ".join(data.items)] if data.items else []

    for i, child in enumerate(children):
        connector = "└── " if i == len(children) - 1 else "├── "
        lines.append(f"{connector}{child}")


def _format_field(
    key: str,
    encoded: str,
    schemas: list[str],
    modifiers: FieldModifiers | None,
) -> str:
    name = key
    type_text = render_type(encoded)
    if modifiers is not None:
        if modifiers.optional:
            name += "?"
        if modifiers.nullable:
            type_text += " | null"
        if modifiers.has_default:
            type_text += f" = {modifiers.default}"
    text = f"{name}: {type_text}"
    if has_handle(encoded, schemas):
        text += " ->"
    return text


__all__ = [
    "build_artifact",
    "write_artifact",
    "format_graph_summary",
]
