"""Schema-to-graph compiler and the graph models it produces.

Example usage:
    >>> from schemaflow.graph import compile_dictionary
    >>> graph = compile_dictionary({"User": User, "Role": Role})
    >>> graph.to_dict()["edges"][0]["sourceHandle"]
    'role'
"""

from .lib import (
    ROOT_LABEL,
    CompileContext,
    GraphCompiler,
    InvariantViolation,
    SchemaDepthError,
    compile_dictionary,
    compile_schema,
    compile_tree,
)
from .models import (
    EnumNodeData,
    FieldModifiers,
    Graph,
    GraphEdge,
    GraphNode,
    NodeType,
    ObjectNodeData,
    Position,
)

__all__ = [
    # Models
    "NodeType",
    "Position",
    "FieldModifiers",
    "ObjectNodeData",
    "EnumNodeData",
    "GraphNode",
    "GraphEdge",
    "Graph",
    # Compiler
    "ROOT_LABEL",
    "CompileContext",
    "GraphCompiler",
    "compile_schema",
    "compile_dictionary",
    "compile_tree",
    # Errors
    "InvariantViolation",
    "SchemaDepthError",
]
