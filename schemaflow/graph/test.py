"""Unit tests for the schema-to-graph compiler."""

import enum

import pytest

from schemaflow.graph import (
    CompileContext,
    Graph,
    GraphCompiler,
    GraphEdge,
    GraphNode,
    InvariantViolation,
    NodeType,
    ObjectNodeData,
    SchemaDepthError,
    compile_dictionary,
    compile_schema,
    compile_tree,
)
from schemaflow.naming import IdGenerator
from schemaflow.schema import s
from schemaflow.typestring import render_type


def edge_pairs(graph: Graph) -> list[tuple[str, str, str]]:
    return [(e.source, e.target, e.source_handle) for e in graph.edges]


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """End-to-end compiles of small dictionaries."""

    @pytest.mark.unit
    def test_object_referencing_enum(self, user_role_dictionary):
        """A registered enum field yields one edge to the enum node."""
        graph = compile_dictionary(user_role_dictionary)

        assert sorted(graph.node_ids()) == ["Role", "User"]
        assert edge_pairs(graph) == [("User", "Role", "role")]

        user = graph.get_node("User")
        assert user.type == NodeType.OBJECT
        assert user.data.entries == {"role": "Role", "name": "SchemaString"}

        role = graph.get_node("Role")
        assert role.type == NodeType.ENUM
        assert role.data.items == ["admin", "user"]

    @pytest.mark.unit
    def test_array_of_registered_object(self, order_product_dictionary):
        """Array elements that are registered still produce an edge."""
        graph = compile_dictionary(order_product_dictionary)

        assert sorted(graph.node_ids()) == ["Order", "Product"]
        assert edge_pairs(graph) == [("Order", "Product", "items")]
        order = graph.get_node("Order")
        assert render_type(order.data.entries["items"]) == "Product[]"
        assert order.data.rendered_entries() == {"items": "Product[]"}

    @pytest.mark.unit
    def test_anonymous_nested_object(self):
        """An unregistered nested object gets a synthetic node."""
        order = s.object({"meta": s.object({"note": s.string()})})
        graph = compile_dictionary({"Order": order})

        assert graph.node_ids() == ["Order", "Order:meta"]
        meta = graph.get_node("Order:meta")
        assert meta.data.label == "meta"
        assert meta.data.entries == {"note": "SchemaString"}
        assert edge_pairs(graph) == [("Order", "Order:meta", "meta")]
        assert graph.get_node("Order").data.entries["meta"] == "Order:meta"

    @pytest.mark.unit
    def test_two_fields_same_target_collapse(self):
        """Two fields pointing at one schema share a single edge."""
        address = s.object({"street": s.string()})
        customer = s.object({"billing": address, "shipping": address.optional()})
        graph = compile_dictionary({"Customer": customer, "Address": address})

        assert sorted(graph.node_ids()) == ["Address", "Customer"]
        assert edge_pairs(graph) == [("Customer", "Address", "billing")]
        data = graph.get_node("Customer").data
        assert data.entries == {"billing": "Address", "shipping": "Address"}
        assert data.schemas == ["Address"]


# =============================================================================
# Properties
# =============================================================================


class TestNodeEmission:
    """Which dictionary entries become nodes."""

    @pytest.mark.unit
    def test_only_objects_and_enums_become_nodes(self):
        """Scalars, compounds and unsupported kinds emit nothing."""
        dictionary = {
            "Obj": s.object({}),
            "Enum": s.enum(["a"]),
            "Native": s.native_enum(enum.Enum("Color", "RED BLUE")),
            "Name": s.string(),
            "Names": s.array(s.string()),
            "Both": s.intersection(s.object({}), s.object({})),
            "Later": s.promise(s.string()),
        }
        graph = compile_dictionary(dictionary)
        assert graph.node_ids() == ["Obj", "Enum", "Native"]
        assert graph.get_node("Native").data.items == ["1", "2"]

    @pytest.mark.unit
    def test_duplicate_names_keep_first(self):
        """A value registered twice is compiled once under its first name."""
        shared = s.object({"id": s.string()})
        graph = compile_dictionary({"First": shared, "Second": shared})
        assert graph.node_ids() == ["First"]

    @pytest.mark.unit
    def test_structural_twins_stay_distinct(self):
        """Identical structures built separately become separate nodes."""
        graph = compile_dictionary(
            {"A": s.object({"id": s.string()}), "B": s.object({"id": s.string()})}
        )
        assert graph.node_ids() == ["A", "B"]

    @pytest.mark.unit
    def test_wrapped_registration_uses_base_name(self):
        """A registered wrapper of a registered schema adds no node."""
        role = s.enum(["admin"])
        graph = compile_dictionary({"Role": role, "MaybeRole": role.optional()})
        assert graph.node_ids() == ["Role"]

    @pytest.mark.unit
    def test_registered_wrapper_of_anonymous_schema(self):
        """A registered wrapper names its otherwise anonymous payload."""
        role = s.enum(["admin"])
        maybe = role.nullable()
        user = s.object({"role": maybe})
        graph = compile_dictionary({"User": user, "MaybeRole": maybe})
        assert graph.node_ids() == ["User", "MaybeRole"]
        assert edge_pairs(graph) == [("User", "MaybeRole", "role")]
        data = graph.get_node("User").data
        assert data.entries == {"role": "MaybeRole"}
        assert data.modifiers["role"].nullable

    @pytest.mark.unit
    @pytest.mark.parametrize("wrapper_first", [True, False])
    def test_bare_reference_to_wrapper_registered_schema(self, wrapper_first):
        """A bare reference shares the node named through the wrapper."""
        role = s.enum(["admin"])
        entries = [
            ("MaybeRole", role.nullable()),
            ("User", s.object({"role": role})),
        ]
        if not wrapper_first:
            entries.reverse()
        graph = compile_dictionary(dict(entries))

        assert sorted(graph.node_ids()) == ["MaybeRole", "User"]
        enums = [n for n in graph.nodes if n.type == NodeType.ENUM]
        assert [n.id for n in enums] == ["MaybeRole"]
        assert edge_pairs(graph) == [("User", "MaybeRole", "role")]
        assert graph.get_node("User").data.entries == {"role": "MaybeRole"}

    @pytest.mark.unit
    def test_two_wrappers_share_one_node(self):
        """Several registered wrappers of one anonymous base give one node."""
        role = s.enum(["admin"])
        graph = compile_dictionary(
            {"MaybeRole": role.nullable(), "RoleOrNone": role.optional()}
        )
        assert graph.node_ids() == ["MaybeRole"]

    @pytest.mark.unit
    def test_node_ids_unique(self, example_dictionary):
        """Node and edge ids are unique within one compile."""
        graph = compile_dictionary(example_dictionary)
        assert len(set(graph.node_ids())) == len(graph.nodes)
        edge_ids = [e.id for e in graph.edges]
        assert len(set(edge_ids)) == len(edge_ids)

    @pytest.mark.unit
    def test_edges_reference_emitted_nodes(self, example_dictionary):
        """Every edge endpoint is present in the node list."""
        graph = compile_dictionary(example_dictionary)
        ids = set(graph.node_ids())
        for edge in graph.edges:
            assert edge.source in ids
            assert edge.target in ids


class TestEdges:
    """Edge creation and deduplication."""

    @pytest.mark.unit
    def test_one_edge_per_pair(self):
        """Many references to one target produce one edge."""
        tag = s.enum(["new", "sale"])
        item = s.object(
            {
                "primary": tag,
                "all": s.array(tag),
                "lookup": s.record(tag),
                "either": s.union([tag, s.string()]),
            }
        )
        graph = compile_dictionary({"Item": item, "Tag": tag})
        assert edge_pairs(graph) == [("Item", "Tag", "primary")]

    @pytest.mark.unit
    def test_edges_inside_compounds(self):
        """Every registered schema inside a compound is linked."""
        user = s.object({"id": s.string()})
        group = s.object({"id": s.string()})
        member = s.object(
            {"pair": s.tuple([user, group]), "index": s.map(s.string(), user)}
        )
        graph = compile_dictionary({"Member": member, "User": user, "Group": group})
        assert edge_pairs(graph) == [
            ("Member", "User", "pair"),
            ("Member", "Group", "pair"),
        ]
        data = graph.get_node("Member").data
        assert data.entries["pair"] == "Tuple<[User,Group]>"
        assert render_type(data.entries["index"]) == "Map<string, User>"
        assert data.schemas == ["User", "Group"]

    @pytest.mark.unit
    def test_edge_ids(self, user_role_dictionary):
        """Edge ids name both endpoints."""
        graph = compile_dictionary(user_role_dictionary)
        assert graph.edges[0].id == "User->Role"
        assert graph.edges[0].animated

    @pytest.mark.unit
    def test_registered_scalar_is_named_without_edge(self):
        """Named scalars are shown by name but have no node to link to."""
        email = s.string()
        user = s.object({"email": email})
        graph = compile_dictionary({"User": user, "Email": email})
        assert graph.edges == []
        data = graph.get_node("User").data
        assert data.entries == {"email": "Email"}
        assert data.schemas == []


class TestAnonymousStructures:
    """Synthetic ids for unregistered objects and enums."""

    @pytest.mark.unit
    def test_anonymous_enum(self):
        """Unregistered enums become nodes labelled by the field key."""
        user = s.object({"status": s.enum(["active", "banned"]).default("active")})
        graph = compile_dictionary({"User": user})
        status = graph.get_node("User:status")
        assert status.type == NodeType.ENUM
        assert status.data.label == "status"
        assert status.data.items == ["active", "banned"]
        assert edge_pairs(graph) == [("User", "User:status", "status")]

    @pytest.mark.unit
    def test_anonymous_inside_compound(self):
        """Anonymous objects inside compounds get numbered ids per field."""
        point = s.object({"x": s.number()})
        line = s.object({"ends": s.tuple([s.object({"x": s.number()}), point])})
        graph = compile_dictionary({"Line": line})
        assert graph.node_ids() == ["Line", "Line:ends", "Line:ends:1"]
        assert graph.get_node("Line").data.entries["ends"] == (
            "Tuple<[Line:ends,Line:ends:1]>"
        )

    @pytest.mark.unit
    def test_anonymous_value_emitted_once(self):
        """The same anonymous value reached twice keeps its first id."""
        money = s.object({"amount": s.number()})
        invoice = s.object({"total": money, "tax": money})
        graph = compile_dictionary({"Invoice": invoice})
        assert graph.node_ids() == ["Invoice", "Invoice:total"]
        assert graph.get_node("Invoice").data.entries == {
            "total": "Invoice:total",
            "tax": "Invoice:total",
        }
        assert edge_pairs(graph) == [("Invoice", "Invoice:total", "total")]

    @pytest.mark.unit
    def test_synthetic_id_avoids_registered_names(self):
        """A synthetic id never reuses a registered name."""
        clash = s.object({"x": s.number()})
        order = s.object({"meta": s.object({"note": s.string()})})
        graph = compile_dictionary({"Order": order, "Order:meta": clash})
        assert "Order:meta:1" in graph.node_ids()
        assert graph.node_ids().count("Order:meta") == 1

    @pytest.mark.unit
    def test_deeply_nested_ids(self):
        """Nested anonymous ids chain parent ids and keys."""
        root = s.object({"a": s.object({"b": s.object({"c": s.boolean()})})})
        graph = compile_dictionary({"Root": root})
        assert graph.node_ids() == ["Root", "Root:a", "Root:a:b"]
        assert graph.get_node("Root:a:b").data.label == "b"

    @pytest.mark.unit
    def test_deterministic_across_compiles(self, example_dictionary):
        """Fresh compiles of the same input are identical."""
        first = compile_dictionary(example_dictionary)
        second = compile_dictionary(example_dictionary)
        assert first.to_dict() == second.to_dict()


class TestFieldModifiers:
    """Modifier flags recorded on object nodes."""

    @pytest.mark.unit
    def test_modifiers_recorded(self):
        """Only fields with modifiers appear, with their flags."""
        user = s.object(
            {
                "id": s.string(),
                "nickname": s.string().optional(),
                "age": s.number().nullable().default(18),
            }
        )
        data = compile_dictionary({"User": user}).get_node("User").data
        assert set(data.modifiers) == {"nickname", "age"}
        assert data.modifiers["nickname"].optional
        assert not data.modifiers["nickname"].has_default
        assert data.modifiers["age"].nullable
        assert data.modifiers["age"].default == "18"

    @pytest.mark.unit
    def test_wrappers_inside_compounds_are_stripped(self):
        """Element wrappers do not leak into the encoded type."""
        tags = s.object({"tags": s.array(s.string().optional())})
        data = compile_dictionary({"Tags": tags}).get_node("Tags").data
        assert data.entries["tags"] == "Array<SchemaString>"

    @pytest.mark.unit
    def test_literal_field(self):
        """Literal fields render their value."""
        event = s.object({"kind": s.literal("click")})
        data = compile_dictionary({"Event": event}).get_node("Event").data
        assert data.entries["kind"] == 'Literal<"click">'
        assert data.rendered_entries()["kind"] == '"click"'


# =============================================================================
# Entry points
# =============================================================================


class TestEntryPoints:
    """compile_schema, compile_tree and the compiler object."""

    @pytest.mark.unit
    def test_unnamed_root_gets_generated_id(self):
        """An unregistered root without context is keyed by kind."""
        graph = compile_schema({}, s.object({"id": s.string()}))
        assert graph.node_ids() == ["SchemaObject-0"]
        assert graph.nodes[0].data.label == "SchemaObject-0"

    @pytest.mark.unit
    def test_generated_root_id_skips_registered_names(self):
        """A generated root id never takes a registered name."""
        named = s.object({"x": s.string()})
        graph = compile_schema({"SchemaObject-0": named}, s.object({"b": named}))
        assert graph.node_ids() == ["SchemaObject-1"]
        assert edge_pairs(graph) == [("SchemaObject-1", "SchemaObject-0", "b")]

    @pytest.mark.unit
    def test_compile_tree_root_label_taken(self):
        """With Root registered, an unnamed root gets a fresh generated id."""
        named = s.object({"x": s.string()})
        graph = compile_tree(s.object({"b": named}), {"Root": named})
        assert graph.node_ids() == ["SchemaObject-0", "Root"]
        assert edge_pairs(graph) == [("SchemaObject-0", "Root", "b")]
        assert all(e.source != e.target for e in graph.edges)

    @pytest.mark.unit
    def test_context_sets_id_and_label(self):
        """A caller-supplied context names an anonymous schema."""
        graph = compile_schema(
            {}, s.enum(["x"]), CompileContext(id="Parent:field", label="field")
        )
        assert graph.nodes[0].id == "Parent:field"
        assert graph.nodes[0].data.label == "field"

    @pytest.mark.unit
    def test_shared_generator(self):
        """An injected generator is used for unnamed roots."""
        ids = IdGenerator()
        ids.generate("SchemaEnum")
        graph = compile_schema({}, s.enum(["x"]), id_generator=ids)
        assert graph.node_ids() == ["SchemaEnum-1"]

    @pytest.mark.unit
    def test_compiler_emits_once(self, user_role_dictionary):
        """Compiling a schema twice on one compiler emits it once."""
        compiler = GraphCompiler(user_role_dictionary)
        assert len(compiler.compile(user_role_dictionary["Role"]).nodes) == 1
        assert compiler.compile(user_role_dictionary["Role"]).nodes == []
        assert compiler.has_node("Role")

    @pytest.mark.unit
    def test_compile_tree_reaches_referenced_schemas(self, example_dictionary):
        """The tree entry point compiles the root and what it reaches."""
        graph = compile_tree(example_dictionary["MasterSchema"], example_dictionary)
        assert graph.node_ids()[0] == "MasterSchema"
        assert set(graph.node_ids()) == {
            "MasterSchema",
            "UserSchema",
            "ProductSchema",
            "UserRole",
        }

    @pytest.mark.unit
    def test_compile_tree_unregistered_root(self, user_role_dictionary):
        """An unregistered root is labelled Root."""
        root = s.object({"user": user_role_dictionary["User"]})
        graph = compile_tree(root, user_role_dictionary)
        assert graph.node_ids() == ["Root", "User", "Role"]
        assert edge_pairs(graph)[0] == ("Root", "User", "user")

    @pytest.mark.unit
    def test_compile_tree_requires_object(self):
        """A non-object root is a contract violation."""
        with pytest.raises(InvariantViolation, match="must be an object"):
            compile_tree(s.enum(["a"]).optional(), {})

    @pytest.mark.unit
    def test_depth_limit(self):
        """Nesting past the limit raises SchemaDepthError."""
        schema = s.string()
        for _ in range(10):
            schema = s.array(schema)
        with pytest.raises(SchemaDepthError) as exc_info:
            compile_dictionary({"Deep": s.object({"x": schema})}, max_depth=5)
        assert exc_info.value.node_id == "Deep"

    @pytest.mark.unit
    def test_depth_within_limit(self):
        """Nesting within the limit compiles."""
        schema = s.array(s.array(s.string()))
        graph = compile_dictionary({"Grid": s.object({"cells": schema})}, max_depth=5)
        assert graph.get_node("Grid").data.rendered_entries() == {
            "cells": "string[][]"
        }


class TestModels:
    """Serialization of graph models."""

    @pytest.mark.unit
    def test_edge_alias(self):
        """Edges serialize sourceHandle in camelCase."""
        edge = GraphEdge(id="a->b", source="a", target="b", sourceHandle="field")
        assert edge.source_handle == "field"
        assert edge.model_dump(by_alias=True)["sourceHandle"] == "field"

    @pytest.mark.unit
    def test_graph_roundtrip(self, user_role_dictionary):
        """A dumped graph validates back into equal models."""
        graph = compile_dictionary(user_role_dictionary)
        restored = Graph.model_validate(graph.to_dict())
        assert restored.to_dict() == graph.to_dict()
        assert isinstance(restored.get_node("User").data, ObjectNodeData)

    @pytest.mark.unit
    def test_position_defaults_to_none(self):
        """Nodes are positionless until layout."""
        node = GraphNode(
            id="n", type=NodeType.OBJECT, data=ObjectNodeData(label="n")
        )
        assert node.position is None
        assert node.type == "schemaObjectNode"
