"""Unit tests for name resolution and id generation."""

import pytest

from schemaflow.naming import IdGenerator, dedupe_dictionary, find_name
from schemaflow.schema import s


class TestFindName:
    """Tests for identity-based reverse lookup."""

    @pytest.mark.unit
    def test_finds_registered_value(self):
        """The key mapped to the exact object is returned."""
        role = s.enum(["admin"])
        assert find_name({"Role": role}, role) == "Role"

    @pytest.mark.unit
    def test_structural_twin_is_not_found(self):
        """A structurally identical but distinct value has no name."""
        registered = s.object({"id": s.string()})
        twin = s.object({"id": s.string()})
        assert find_name({"Thing": registered}, twin) is None

    @pytest.mark.unit
    def test_first_alias_wins(self):
        """When a value has two names, the first is returned."""
        shared = s.string()
        assert find_name({"A": shared, "B": shared}, shared) == "A"


class TestDedupeDictionary:
    """Tests for dictionary deduplication."""

    @pytest.mark.unit
    def test_drops_later_aliases(self):
        """Later names for the same value are dropped."""
        shared = s.object({})
        other = s.object({})
        result = dedupe_dictionary({"A": shared, "B": other, "C": shared})
        assert list(result) == ["A", "B"]
        assert result["A"] is shared


class TestIdGenerator:
    """Tests for synthetic identifiers."""

    @pytest.mark.unit
    def test_counters_start_at_zero(self):
        """The first id for a prefix ends in 0."""
        assert IdGenerator().generate("edge") == "edge-0"

    @pytest.mark.unit
    def test_per_prefix_counters(self):
        """Each prefix counts independently."""
        ids = IdGenerator()
        assert [ids.generate("a"), ids.generate("b"), ids.generate("a")] == [
            "a-0",
            "b-0",
            "a-1",
        ]

    @pytest.mark.unit
    def test_instances_are_independent(self):
        """Separate generators do not share counters."""
        first = IdGenerator()
        first.generate("x")
        assert IdGenerator().generate("x") == "x-0"
