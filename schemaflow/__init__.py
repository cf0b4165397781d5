"""schemaflow: visualize runtime schemas as a graph of types and references.

Example usage:
    >>> from schemaflow import s, compile_dictionary
    >>> Role = s.enum(["admin", "user"])
    >>> User = s.object({"role": Role, "name": s.string()})
    >>> graph = compile_dictionary({"User": User, "Role": Role})
    >>> graph.node_ids()
    ['User', 'Role']
"""

from .graph import Graph, compile_dictionary, compile_schema, compile_tree
from .layout import layout_graph
from .loader import load_dictionary
from .schema import SchemaValue, resolve_base, s
from .typestring import render_type

__version__ = "0.1.0"

__all__ = [
    "s",
    "SchemaValue",
    "resolve_base",
    "render_type",
    "Graph",
    "compile_schema",
    "compile_dictionary",
    "compile_tree",
    "layout_graph",
    "load_dictionary",
]
