"""Layered layout of compiled schema graphs."""

from .lib import NODE_SPACING, RANK_SPACING, build_digraph, layout_graph, rank_nodes

__all__ = [
    "RANK_SPACING",
    "NODE_SPACING",
    "build_digraph",
    "rank_nodes",
    "layout_graph",
]
