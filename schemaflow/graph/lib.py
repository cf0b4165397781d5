"""Schema-to-graph compiler.

Turns a dictionary of named schemas into a graph of object and enum nodes
connected by reference edges:

- Registered schemas are recognized by identity and become nodes named after
  their first dictionary key.
- Anonymous objects and enums nested in a field get a synthetic node whose
  id derives from the parent id and the field key (``Order:meta``).
- Compound field types (arrays, unions, records, ...) are recorded as encoded
  type descriptors; every registered schema found inside them still yields
  an edge, so ``items: Array<Product>`` renders as ``Product[]`` and links
  to ``Product``.
- At most one edge exists per (source, target) pair.

All mutable state lives on a ``GraphCompiler`` built for one compile, which
keeps repeated compiles reproducible.

Example:
    >>> from schemaflow.schema import s
    >>> Role = s.enum(["admin", "user"])
    >>> User = s.object({"role": Role, "name": s.string()})
    >>> graph = compile_dictionary({"User": User, "Role": Role})
    >>> [(e.source, e.target) for e in graph.edges]
    [('User', 'Role')]
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from schemaflow.config import get_max_depth
from schemaflow.core import get_logger
from schemaflow.graph.models import (
    EnumNodeData,
    FieldModifiers,
    Graph,
    GraphEdge,
    GraphNode,
    NodeType,
    ObjectNodeData,
)
from schemaflow.naming import IdGenerator, dedupe_dictionary, find_name
from schemaflow.schema import (
    ENUM_KINDS,
    WRAPPER_KINDS,
    BaseSchema,
    SchemaDictionary,
    SchemaKind,
    SchemaValue,
    resolve_base,
)
from schemaflow.typestring import (
    Compound,
    Constructor,
    LiteralValue,
    TypeDescriptor,
    TypeRef,
    encode,
    kind_tag,
)

logger = get_logger("graph")

ROOT_LABEL = "Root"

_CONSTRUCTORS = {
    SchemaKind.ARRAY: Constructor.ARRAY,
    SchemaKind.TUPLE: Constructor.TUPLE,
    SchemaKind.UNION: Constructor.UNION,
    SchemaKind.RECORD: Constructor.RECORD,
    SchemaKind.MAP: Constructor.MAP,
    SchemaKind.SET: Constructor.SET,
}


class InvariantViolation(Exception):
    """A compiler entry point was called against its contract."""


class SchemaDepthError(Exception):
    """Schema nesting exceeds the configured depth limit."""

    def __init__(self, message: str, depth: int, node_id: str):
        super().__init__(message)
        self.depth = depth
        self.node_id = node_id


@dataclass(frozen=True)
class CompileContext:
    """Identity handed to an anonymous nested compile.

    Attributes:
        id: Synthetic node id chosen by the parent.
        label: Display label (the parent's field key).
    """

    id: str
    label: str


@dataclass
class _FieldScope:
    """Synthetic id allocation for one object field."""

    source_id: str
    key: str
    count: int = 0
    targets: list[str] = field(default_factory=list)

    def candidate(self) -> str:
        base = f"{self.source_id}:{self.key}"
        candidate = base if self.count == 0 else f"{base}:{self.count}"
        self.count += 1
        return candidate

    def reference(self, target: str) -> None:
        if target not in self.targets:
            self.targets.append(target)


def _is_graphable(schema: SchemaValue) -> bool:
    return schema.kind == SchemaKind.OBJECT or schema.kind in ENUM_KINDS


def _wrapper_names(dictionary: SchemaDictionary) -> dict[SchemaValue, str]:
    """Map bases registered only through a wrapper to the first such name."""
    names: dict[SchemaValue, str] = {}
    for name, value in dictionary.items():
        if value.kind not in WRAPPER_KINDS:
            continue
        base = resolve_base(value).schema
        if find_name(dictionary, base) is None:
            names.setdefault(base, name)
    return names


def _default_text(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _modifiers(field_base: BaseSchema) -> FieldModifiers:
    return FieldModifiers(
        optional=field_base.optional,
        nullable=field_base.nullable,
        has_default=field_base.has_default,
        default=_default_text(field_base.default_value)
        if field_base.has_default
        else None,
    )


class GraphCompiler:
    """Compiles schemas against one dictionary.

    One instance corresponds to one compile: it owns the id generator, the
    edge dedup set and the ids handed to anonymous schemas. Compiling the
    same schema twice on one instance emits its node once.

    Args:
        dictionary: Name to schema registry used to recognize references.
        id_generator: Generator for ids of unnamed roots. A fresh one is
            created when omitted.
        max_depth: Nesting limit. Defaults to ``SCHEMAFLOW_MAX_DEPTH``.
    """

    def __init__(
        self,
        dictionary: SchemaDictionary,
        id_generator: IdGenerator | None = None,
        max_depth: int | None = None,
    ):
        self.dictionary = dictionary
        self.max_depth = get_max_depth(max_depth)
        self._ids = id_generator or IdGenerator()
        self._claimed: set[str] = set(dictionary)
        self._emitted: set[str] = set()
        self._anonymous: dict[SchemaValue, str] = {}
        self._edge_pairs: set[tuple[str, str]] = set()
        self._edge_ids: set[str] = set()
        self._wrapper_names = _wrapper_names(dictionary)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._emitted

    def name_of(self, base: SchemaValue) -> str | None:
        """Registered name for a schema, looked up by its resolved base.

        A base registered directly wins over one registered only through a
        wrapper. Either way every reference to the base shares one name.
        """
        name = find_name(self.dictionary, base)
        if name is None:
            name = self._wrapper_names.get(base)
        return name

    def compile(
        self, schema: SchemaValue, context: CompileContext | None = None
    ) -> Graph:
        """Compile one schema and the anonymous structure nested in it.

        Args:
            schema: Schema to compile; wrappers are stripped first.
            context: Id and label for an anonymous nested schema.

        Returns:
            Graph with this schema's nodes and edges. Empty when the
            resolved kind is neither object nor enum, or when its node was
            already emitted by this compiler.
        """
        return self._compile(schema, context, depth=0)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _compile(
        self, schema: SchemaValue, context: CompileContext | None, depth: int
    ) -> Graph:
        value = resolve_base(schema).schema
        name = self.name_of(value)

        if name is not None:
            source_id = name
        elif context is not None:
            source_id = context.id
        elif value in self._anonymous:
            source_id = self._anonymous[value]
        else:
            source_id = self._generate(value.kind.value)
        label = context.label if context is not None else source_id

        self._check_depth(depth, source_id)

        graph = Graph()
        if source_id in self._emitted:
            return graph

        if value.kind in ENUM_KINDS:
            self._claim(source_id, value, name)
            graph.nodes.append(self._enum_node(source_id, label, value))
        elif value.kind == SchemaKind.OBJECT:
            self._claim(source_id, value, name)
            self._compile_object(value, source_id, label, graph, depth)
        else:
            logger.debug(
                "No node for %s: %s is not an object or enum",
                source_id,
                value.kind.value,
            )
        return graph

    def _compile_object(
        self,
        value: SchemaValue,
        source_id: str,
        label: str,
        graph: Graph,
        depth: int,
    ) -> None:
        nested = Graph()
        data = ObjectNodeData(label=label)

        for key, field_schema in value.shape.items():
            field_base = resolve_base(field_schema)
            scope = _FieldScope(source_id, key)
            descriptor = self._describe(field_schema, scope, nested, depth + 1)

            data.entries[key] = encode(descriptor)
            if field_base.has_modifiers:
                data.modifiers[key] = _modifiers(field_base)
            for target in scope.targets:
                if target not in data.schemas:
                    data.schemas.append(target)

        graph.nodes.append(GraphNode(id=source_id, type=NodeType.OBJECT, data=data))
        graph.extend(nested)

    def _describe(
        self, schema: SchemaValue, scope: _FieldScope, out: Graph, depth: int
    ) -> TypeDescriptor:
        """Build a field's descriptor, emitting the edges and nodes it implies."""
        self._check_depth(depth, scope.source_id)

        value = resolve_base(schema).schema
        name = self.name_of(value)
        if name is not None:
            if _is_graphable(value):
                self._add_edge(out, scope.source_id, name, scope.key)
                scope.reference(name)
            return TypeRef(name)

        if _is_graphable(value):
            target = self._anonymous.get(value)
            if target is None:
                target = self._allocate(scope)
                self._anonymous[value] = target
                if value.kind in ENUM_KINDS:
                    self._claim(target, value, None)
                    out.nodes.append(self._enum_node(target, scope.key, value))
                else:
                    context = CompileContext(id=target, label=scope.key)
                    out.extend(self._compile(value, context, depth))
            self._add_edge(out, scope.source_id, target, scope.key)
            scope.reference(target)
            return TypeRef(target)

        if value.kind == SchemaKind.LITERAL:
            return LiteralValue(value.value)

        constructor = _CONSTRUCTORS.get(value.kind)
        if constructor is None:
            return kind_tag(value.kind)

        args = tuple(
            self._describe(item, scope, out, depth + 1) for item in value.items
        )
        return Compound(constructor, args)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_depth(self, depth: int, node_id: str) -> None:
        if depth > self.max_depth:
            raise SchemaDepthError(
                f"Schema nesting under '{node_id}' exceeds the depth limit "
                f"of {self.max_depth}",
                depth=depth,
                node_id=node_id,
            )

    def _claim(self, node_id: str, value: SchemaValue, name: str | None) -> None:
        self._emitted.add(node_id)
        self._claimed.add(node_id)
        if name is None:
            self._anonymous.setdefault(value, node_id)

    def _generate(self, prefix: str) -> str:
        candidate = self._ids.generate(prefix)
        while candidate in self._claimed:
            candidate = self._ids.generate(prefix)
        return candidate

    def _allocate(self, scope: _FieldScope) -> str:
        candidate = scope.candidate()
        while candidate in self._claimed:
            candidate = scope.candidate()
        self._claimed.add(candidate)
        return candidate

    def _enum_node(self, node_id: str, label: str, value: SchemaValue) -> GraphNode:
        return GraphNode(
            id=node_id,
            type=NodeType.ENUM,
            data=EnumNodeData(label=label, items=list(value.members)),
        )

    def _add_edge(self, graph: Graph, source: str, target: str, handle: str) -> None:
        pair = (source, target)
        if pair in self._edge_pairs:
            return
        self._edge_pairs.add(pair)

        edge_id = f"{source}->{target}"
        if edge_id in self._edge_ids:
            edge_id = self._ids.generate(edge_id)
        self._edge_ids.add(edge_id)

        graph.edges.append(
            GraphEdge(id=edge_id, source=source, target=target, source_handle=handle)
        )


# =============================================================================
# Entry Points
# =============================================================================


def compile_schema(
    dictionary: SchemaDictionary,
    schema: SchemaValue,
    context: CompileContext | None = None,
    *,
    id_generator: IdGenerator | None = None,
    max_depth: int | None = None,
) -> Graph:
    """Compile a single schema with a fresh compiler."""
    compiler = GraphCompiler(dictionary, id_generator=id_generator, max_depth=max_depth)
    return compiler.compile(schema, context)


def compile_dictionary(
    dictionary: SchemaDictionary,
    *,
    id_generator: IdGenerator | None = None,
    max_depth: int | None = None,
) -> Graph:
    """Compile every distinct schema of a dictionary into one graph.

    Names sharing a schema value collapse onto the first name. Entries whose
    resolved kind is neither object nor enum contribute no node.

    Args:
        dictionary: Name to schema registry.
        id_generator: Optional generator; a fresh one is used otherwise.
        max_depth: Nesting limit override.

    Returns:
        Graph with all nodes and edges.

    Raises:
        SchemaDepthError: If a schema nests deeper than the limit.
    """
    compiler = GraphCompiler(dictionary, id_generator=id_generator, max_depth=max_depth)
    graph = Graph()
    distinct = dedupe_dictionary(dictionary)
    for value in distinct.values():
        graph.extend(compiler.compile(value))

    logger.info(
        "Compiled %d schemas into %d nodes and %d edges",
        len(distinct),
        len(graph.nodes),
        len(graph.edges),
    )
    return graph


def compile_tree(
    root: SchemaValue,
    dictionary: SchemaDictionary,
    *,
    id_generator: IdGenerator | None = None,
    max_depth: int | None = None,
) -> Graph:
    """Compile an object schema and every registered schema it reaches.

    An unregistered root is labelled ``Root``.

    Raises:
        InvariantViolation: If the root does not resolve to an object.
    """
    base = resolve_base(root).schema
    if base.kind != SchemaKind.OBJECT:
        raise InvariantViolation(
            f"Root schema must be an object, got {base.kind.value}"
        )

    compiler = GraphCompiler(dictionary, id_generator=id_generator, max_depth=max_depth)
    context = None
    if compiler.name_of(base) is None and ROOT_LABEL not in dictionary:
        context = CompileContext(id=ROOT_LABEL, label=ROOT_LABEL)
    graph = compiler.compile(root, context)

    pending = [edge.target for edge in graph.edges]
    while pending:
        target = pending.pop(0)
        if target not in dictionary or compiler.has_node(target):
            continue
        reached = compiler.compile(dictionary[target])
        graph.extend(reached)
        pending.extend(edge.target for edge in reached.edges)

    return graph


__all__ = [
    "ROOT_LABEL",
    "InvariantViolation",
    "SchemaDepthError",
    "CompileContext",
    "GraphCompiler",
    "compile_schema",
    "compile_dictionary",
    "compile_tree",
]
