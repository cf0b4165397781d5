"""Graph artifact and text summary output."""

from .lib import build_artifact, format_graph_summary, write_artifact

__all__ = [
    "build_artifact",
    "write_artifact",
    "format_graph_summary",
]
