"""Layered layout for compiled schema graphs.

Assigns canvas positions to graph nodes so that references flow in one
direction: a node is ranked after every node that points at it. Reference
cycles are collapsed into strongly connected components first, and the
members of one component share a rank.

Example:
    >>> from schemaflow.layout import layout_graph
    >>> positioned = layout_graph(graph, direction="TB")
    >>> positioned.get_node("User").position
    Position(x=0.0, y=0.0)
"""

from __future__ import annotations

import networkx as nx

from schemaflow.config import LAYOUT_DIRECTIONS, get_layout_direction
from schemaflow.core import get_logger
from schemaflow.graph import Graph, Position

logger = get_logger("layout")

# Distance between consecutive ranks along the flow axis
RANK_SPACING = 320.0
# Distance between neighbouring nodes within a rank
NODE_SPACING = 220.0


def build_digraph(graph: Graph) -> nx.DiGraph:
    """Build a networkx DiGraph of node ids and reference edges.

    Raises:
        ValueError: If an edge references a node id not in the graph.
    """
    digraph = nx.DiGraph()
    digraph.add_nodes_from(graph.node_ids())

    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in digraph:
                raise ValueError(
                    f"Edge '{edge.id}' references unknown node '{endpoint}'"
                )
        digraph.add_edge(edge.source, edge.target)

    return digraph


def rank_nodes(graph: Graph) -> list[list[str]]:
    """Group node ids into ranks.

    Ranks are the topological generations of the component graph. Within a
    rank, ids keep the order of the graph's node list.

    Returns:
        One list of node ids per rank, first rank first.
    """
    digraph = build_digraph(graph)
    if digraph.number_of_nodes() == 0:
        return []

    order = {node_id: index for index, node_id in enumerate(graph.node_ids())}
    condensed = nx.condensation(digraph)

    ranks: list[list[str]] = []
    for generation in nx.topological_generations(condensed):
        rank = [
            node_id
            for component in generation
            for node_id in condensed.nodes[component]["members"]
        ]
        ranks.append(sorted(rank, key=order.__getitem__))
    return ranks


def layout_graph(graph: Graph, direction: str | None = None) -> Graph:
    """Return a copy of the graph with every node positioned.

    Args:
        graph: Compiled graph. It is not modified.
        direction: "LR" places ranks left to right, "TB" top to bottom.
            Defaults to ``SCHEMAFLOW_LAYOUT_DIRECTION``.

    Returns:
        New Graph with the same edges and positioned node copies.

    Raises:
        ValueError: On an unknown direction or a dangling edge.
    """
    if direction is None:
        direction = get_layout_direction()
    direction = direction.upper()
    if direction not in LAYOUT_DIRECTIONS:
        raise ValueError(
            f"Unknown layout direction '{direction}', "
            f"expected one of {', '.join(LAYOUT_DIRECTIONS)}"
        )

    positions: dict[str, Position] = {}
    ranks = rank_nodes(graph)
    for rank_index, rank in enumerate(ranks):
        primary = rank_index * RANK_SPACING
        center = (len(rank) - 1) / 2
        for slot, node_id in enumerate(rank):
            secondary = (slot - center) * NODE_SPACING
            if direction == "LR":
                positions[node_id] = Position(x=primary, y=secondary)
            else:
                positions[node_id] = Position(x=secondary, y=primary)

    logger.debug(
        "Laid out %d nodes in %d ranks (%s)", len(positions), len(ranks), direction
    )
    return Graph(
        nodes=[
            node.model_copy(update={"position": positions[node.id]})
            for node in graph.nodes
        ],
        edges=[edge.model_copy() for edge in graph.edges],
    )


__all__ = [
    "RANK_SPACING",
    "NODE_SPACING",
    "build_digraph",
    "rank_nodes",
    "layout_graph",
]
