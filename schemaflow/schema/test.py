"""Unit tests for the schema model and base resolution."""

from enum import Enum

import pytest

from schemaflow.schema import (
    SchemaCycleError,
    SchemaKind,
    SchemaValue,
    is_kind_tag,
    kind_display_name,
    resolve_base,
    s,
)


class TestKindTags:
    """Tests for SchemaKind helpers."""

    @pytest.mark.unit
    def test_all_tags_carry_prefix(self):
        """Every kind tag starts with the Schema prefix."""
        for kind in SchemaKind:
            assert kind.value.startswith("Schema")

    @pytest.mark.unit
    def test_display_name(self):
        """Prefix is stripped and the rest lowercased."""
        assert kind_display_name(SchemaKind.STRING) == "string"
        assert kind_display_name(SchemaKind.NATIVE_ENUM) == "nativeenum"
        assert kind_display_name("SchemaBigInt") == "bigint"

    @pytest.mark.unit
    def test_is_kind_tag(self):
        """Only real tag values are recognized."""
        assert is_kind_tag("SchemaNumber")
        assert not is_kind_tag("Product")
        assert not is_kind_tag("number")


class TestSchemaValue:
    """Tests for SchemaValue construction and identity."""

    @pytest.mark.unit
    def test_identity_equality(self):
        """Structurally identical schemas are distinct values."""
        a = s.object({"id": s.string()})
        b = s.object({"id": s.string()})
        assert a != b
        assert a == a
        assert len({a, b}) == 2

    @pytest.mark.unit
    def test_shape_is_read_only(self):
        """Object shapes cannot be mutated after construction."""
        obj = s.object({"id": s.string()})
        with pytest.raises(TypeError):
            obj.shape["other"] = s.number()

    @pytest.mark.unit
    def test_shape_preserves_field_order(self):
        """Fields keep their declaration order."""
        obj = s.object({"b": s.string(), "a": s.number(), "c": s.boolean()})
        assert list(obj.shape) == ["b", "a", "c"]

    @pytest.mark.unit
    def test_object_rejects_non_schema_fields(self):
        """Object fields must be schema values."""
        with pytest.raises(TypeError, match="Field 'id'"):
            s.object({"id": str})

    @pytest.mark.unit
    def test_enum_requires_members(self):
        """Empty enums are rejected."""
        with pytest.raises(ValueError):
            s.enum([])

    @pytest.mark.unit
    def test_native_enum_members(self):
        """Native enums list their member values."""

        class Color(Enum):
            RED = "red"
            GREEN = "green"

        schema = s.native_enum(Color)
        assert schema.kind == SchemaKind.NATIVE_ENUM
        assert schema.members == ("red", "green")

    @pytest.mark.unit
    def test_record_defaults_to_string_keys(self):
        """Single-argument records use string keys."""
        record = s.record(s.number())
        assert record.key_type.kind == SchemaKind.STRING
        assert record.value_type.kind == SchemaKind.NUMBER

    @pytest.mark.unit
    def test_union_needs_two_options(self):
        """Unions of fewer than two options are rejected."""
        with pytest.raises(ValueError):
            s.union([s.string()])

    @pytest.mark.unit
    def test_payload_accessor_on_wrong_kind(self):
        """Accessors reject kinds without that payload."""
        with pytest.raises(TypeError):
            _ = s.string().element

    @pytest.mark.unit
    def test_fluent_helpers(self):
        """Fluent helpers wrap the receiver."""
        base = s.string()
        assert base.array().element is base
        assert base.or_(s.number()).kind == SchemaKind.UNION
        assert base.optional().inner is base

    @pytest.mark.unit
    def test_repr(self):
        """Repr summarizes the payload."""
        assert repr(s.enum(["a"])) == "SchemaValue(SchemaEnum, members=['a'])"
        assert repr(s.string()) == "SchemaValue(SchemaString)"


class TestResolveBase:
    """Tests for wrapper stripping."""

    @pytest.mark.unit
    def test_idempotent_on_base(self):
        """A base schema resolves to itself with all flags false."""
        schema = s.object({"id": s.string()})
        base = resolve_base(schema)
        assert base.schema is schema
        assert not base.optional
        assert not base.nullable
        assert not base.has_default
        assert base.default_value is None
        assert resolve_base(base.schema).schema is schema

    @pytest.mark.unit
    def test_strips_wrappers_in_any_order(self):
        """Optional, nullable, default and effects are all stripped."""
        inner = s.string()
        wrapped = inner.nullable().default("x").transform(str.upper).optional()
        base = resolve_base(wrapped)
        assert base.schema is inner
        assert base.optional
        assert base.nullable
        assert base.has_default
        assert base.default_value == "x"

    @pytest.mark.unit
    def test_nullish(self):
        """Nullish sets both flags."""
        base = resolve_base(s.number().nullish())
        assert base.optional and base.nullable

    @pytest.mark.unit
    def test_default_thunk_is_called(self):
        """Callable defaults are evaluated during resolution."""
        base = resolve_base(s.array(s.string()).default(list))
        assert base.default_value == []

    @pytest.mark.unit
    def test_outermost_default_wins(self):
        """The outermost default is the effective one."""
        base = resolve_base(s.number().default(1).default(2))
        assert base.default_value == 2

    @pytest.mark.unit
    def test_refine_is_stripped(self):
        """Refinements are effects and do not set flags."""
        inner = s.string()
        base = resolve_base(inner.refine(lambda v: len(v) > 8))
        assert base.schema is inner
        assert not base.has_modifiers

    @pytest.mark.unit
    def test_self_referential_chain_raises(self):
        """A wrapper that wraps itself is reported instead of looping."""
        loop = SchemaValue(SchemaKind.OPTIONAL, items=(s.string(),))
        object.__setattr__(loop, "items", (loop,))
        with pytest.raises(SchemaCycleError):
            resolve_base(loop)
