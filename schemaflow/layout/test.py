"""Unit tests for the layered layout."""

import pytest

from schemaflow.graph import (
    Graph,
    GraphEdge,
    GraphNode,
    NodeType,
    ObjectNodeData,
    compile_dictionary,
)
from schemaflow.layout import (
    NODE_SPACING,
    RANK_SPACING,
    build_digraph,
    layout_graph,
    rank_nodes,
)


def make_graph(node_ids: list[str], pairs: list[tuple[str, str]]) -> Graph:
    return Graph(
        nodes=[
            GraphNode(id=i, type=NodeType.OBJECT, data=ObjectNodeData(label=i))
            for i in node_ids
        ],
        edges=[
            GraphEdge(id=f"{a}->{b}", source=a, target=b, source_handle="f")
            for a, b in pairs
        ],
    )


class TestRanking:
    """Rank assignment from reference edges."""

    @pytest.mark.unit
    def test_chain(self):
        """Each reference pushes its target one rank later."""
        graph = make_graph(["A", "B", "C"], [("A", "B"), ("B", "C")])
        assert rank_nodes(graph) == [["A"], ["B"], ["C"]]

    @pytest.mark.unit
    def test_siblings_share_rank_in_node_order(self):
        """Targets of one source share a rank, ordered as listed."""
        graph = make_graph(["Root", "Z", "A"], [("Root", "Z"), ("Root", "A")])
        assert rank_nodes(graph) == [["Root"], ["Z", "A"]]

    @pytest.mark.unit
    def test_cycle_collapses_into_one_rank(self):
        """Mutually referencing nodes are placed together."""
        graph = make_graph(
            ["A", "B", "C"], [("A", "B"), ("B", "A"), ("B", "C")]
        )
        assert rank_nodes(graph) == [["A", "B"], ["C"]]

    @pytest.mark.unit
    def test_empty_graph(self):
        """An empty graph has no ranks."""
        assert rank_nodes(Graph()) == []

    @pytest.mark.unit
    def test_dangling_edge_rejected(self):
        """Edges must reference known nodes."""
        graph = make_graph(["A"], [("A", "Missing")])
        with pytest.raises(ValueError, match="Missing"):
            build_digraph(graph)


class TestLayout:
    """Positions assigned by layout_graph."""

    @pytest.mark.unit
    def test_left_to_right(self):
        """LR advances x per rank and spreads siblings along y."""
        graph = make_graph(["A", "B", "C"], [("A", "B"), ("A", "C")])
        positioned = layout_graph(graph, direction="LR")

        a, b, c = (positioned.get_node(i).position for i in ("A", "B", "C"))
        assert (a.x, a.y) == (0.0, 0.0)
        assert b.x == c.x == RANK_SPACING
        assert c.y - b.y == NODE_SPACING

    @pytest.mark.unit
    def test_top_to_bottom(self):
        """TB advances y per rank."""
        graph = make_graph(["A", "B"], [("A", "B")])
        positioned = layout_graph(graph, direction="tb")
        assert positioned.get_node("B").position.y == RANK_SPACING
        assert positioned.get_node("B").position.x == 0.0

    @pytest.mark.unit
    def test_input_untouched(self):
        """The input graph keeps positionless nodes."""
        graph = make_graph(["A", "B"], [("A", "B")])
        positioned = layout_graph(graph, direction="LR")
        assert all(node.position is None for node in graph.nodes)
        assert all(node.position is not None for node in positioned.nodes)
        assert positioned.node_ids() == graph.node_ids()
        assert [e.id for e in positioned.edges] == ["A->B"]

    @pytest.mark.unit
    def test_direction_from_environment(self, monkeypatch):
        """Without an argument the configured direction is used."""
        monkeypatch.setenv("SCHEMAFLOW_LAYOUT_DIRECTION", "TB")
        graph = make_graph(["A", "B"], [("A", "B")])
        assert layout_graph(graph).get_node("B").position.y == RANK_SPACING

    @pytest.mark.unit
    def test_unknown_direction(self):
        """Directions other than TB and LR are rejected."""
        with pytest.raises(ValueError, match="Unknown layout direction"):
            layout_graph(Graph(), direction="RL")

    @pytest.mark.unit
    def test_compiled_examples(self, example_dictionary):
        """A compiled example graph lays out with every node placed."""
        graph = compile_dictionary(example_dictionary)
        positioned = layout_graph(graph, direction="LR")
        positions = {
            (node.position.x, node.position.y) for node in positioned.nodes
        }
        assert len(positions) == len(positioned.nodes)
