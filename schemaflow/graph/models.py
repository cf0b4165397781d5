"""Graph models produced by the schema compiler.

These models are the contract with the layout step and the rendering
surface: node ids are opaque strings and every edge references ids present
in the accompanying node list. They serialize to the JSON shape consumed by
node-graph canvases (``sourceHandle`` keeps its camelCase name).
"""

from enum import Enum

from pydantic import BaseModel, Field

from schemaflow.typestring import render_type


class NodeType(str, Enum):
    """Visual renderer a node is drawn with."""

    OBJECT = "schemaObjectNode"
    ENUM = "schemaEnumNode"


class Position(BaseModel):
    """Canvas coordinates assigned by the layout step."""

    x: float = 0.0
    y: float = 0.0


class FieldModifiers(BaseModel):
    """Modifier flags stripped from a field's schema.

    Attributes:
        optional: The field may be absent.
        nullable: The field may be null.
        has_default: The field declares a default.
        default: JSON text of the default value, when there is one.
    """

    optional: bool = False
    nullable: bool = False
    has_default: bool = False
    default: str | None = None


class ObjectNodeData(BaseModel):
    """Payload of an object node.

    Attributes:
        label: Display title.
        entries: Field name to encoded type descriptor, in declaration order.
        schemas: Ids of the nodes this node's fields point at.
        modifiers: Flags for fields that carry any.
    """

    label: str
    entries: dict[str, str] = Field(default_factory=dict)
    schemas: list[str] = Field(default_factory=list)
    modifiers: dict[str, FieldModifiers] = Field(default_factory=dict)

    model_config = {
        "extra": "forbid",
    }

    def rendered_entries(self) -> dict[str, str]:
        """Field name to display string."""
        return {key: render_type(value) for key, value in self.entries.items()}


class EnumNodeData(BaseModel):
    """Payload of an enum node."""

    label: str
    items: list[str] = Field(default_factory=list)

    model_config = {
        "extra": "forbid",
    }


class GraphNode(BaseModel):
    """A type in the compiled graph.

    Attributes:
        id: Unique node id (registered name or synthetic id).
        type: Renderer for the node.
        data: Object or enum payload.
        position: Canvas position, None until layout runs.
    """

    id: str = Field(..., description="Unique node identifier")
    type: NodeType = Field(..., description="Visual renderer for the node")
    data: ObjectNodeData | EnumNodeData
    position: Position | None = Field(
        default=None, description="Assigned by the layout step"
    )

    model_config = {
        "use_enum_values": True,
    }

    @property
    def label(self) -> str:
        return self.data.label


class GraphEdge(BaseModel):
    """A reference from one node's field to another node.

    Attributes:
        id: Unique edge id.
        source: Id of the referencing node.
        target: Id of the referenced node.
        source_handle: Field key the reference originates from.
        animated: Canvas hint, always on for schema references.
    """

    id: str
    source: str
    target: str
    source_handle: str = Field(..., alias="sourceHandle")
    animated: bool = True

    model_config = {
        "populate_by_name": True,
    }


class Graph(BaseModel):
    """Nodes and edges of one compile."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def extend(self, other: "Graph") -> None:
        self.nodes.extend(other.nodes)
        self.edges.extend(other.edges)

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_from(self, node_id: str) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.source == node_id]

    def to_dict(self) -> dict:
        """JSON-ready dump using the canvas field names."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "NodeType",
    "Position",
    "FieldModifiers",
    "ObjectNodeData",
    "EnumNodeData",
    "GraphNode",
    "GraphEdge",
    "Graph",
]
