"""Unit tests for artifact building and text summaries."""

import json
from pathlib import Path

import pytest

from schemaflow.graph import compile_dictionary
from schemaflow.loader import LoadResult
from schemaflow.output import build_artifact, format_graph_summary, write_artifact
from schemaflow.schema import s


class TestBuildArtifact:
    """JSON payload shape."""

    @pytest.mark.unit
    def test_keys(self, user_role_dictionary):
        """The payload carries the graph plus load metadata."""
        artifact = build_artifact(compile_dictionary(user_role_dictionary))
        assert set(artifact) == {"nodes", "edges", "fallback", "error", "schema"}
        assert artifact["fallback"] is False
        assert artifact["error"] is None
        assert artifact["schema"] is None
        assert artifact["edges"][0]["sourceHandle"] == "role"

    @pytest.mark.unit
    def test_fallback_metadata(self, user_role_dictionary):
        """Fallback details from the loader are copied through."""
        result = LoadResult(
            dictionary=user_role_dictionary,
            fallback=True,
            error="Schema file not found: x.py",
            schema_path=Path("x.py"),
        )
        artifact = build_artifact(compile_dictionary(result.dictionary), result)
        assert artifact["fallback"] is True
        assert artifact["error"] == "Schema file not found: x.py"
        assert artifact["schema"] == "x.py"

    @pytest.mark.unit
    def test_json_serializable(self, example_dictionary):
        """The payload survives a JSON round trip unchanged."""
        artifact = build_artifact(compile_dictionary(example_dictionary))
        assert json.loads(json.dumps(artifact)) == artifact


class TestWriteArtifact:
    """Writing artifacts to disk."""

    @pytest.mark.unit
    def test_writes_json(self, tmp_path, user_role_dictionary):
        """The artifact is written as JSON, creating parent directories."""
        artifact = build_artifact(compile_dictionary(user_role_dictionary))
        path = write_artifact(artifact, tmp_path / "out" / "graph.json")
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == artifact

    @pytest.mark.unit
    def test_non_ascii_names_written_as_utf8(self, tmp_path):
        """Names outside ASCII are stored as UTF-8 text."""
        kunde = s.object({"straße": s.string()})
        artifact = build_artifact(compile_dictionary({"Kündé": kunde}))
        path = write_artifact(artifact, tmp_path / "graph.json")

        text = path.read_bytes().decode("utf-8")
        assert '"Kündé"' in text
        assert '"straße"' in text

    @pytest.mark.unit
    def test_default_path_from_environment(self, tmp_path, monkeypatch):
        """Without a path, SCHEMAFLOW_OUTPUT_PATH is used."""
        target = tmp_path / "env.json"
        monkeypatch.setenv("SCHEMAFLOW_OUTPUT_PATH", str(target))
        assert write_artifact({"nodes": [], "edges": []}) == target
        assert target.exists()


class TestFormatGraphSummary:
    """Text tree summaries."""

    @pytest.mark.unit
    def test_object_and_enum(self, user_role_dictionary):
        """Objects list fields, enums list members."""
        summary = format_graph_summary(compile_dictionary(user_role_dictionary))
        assert summary.splitlines() == [
            "User [object]",
            "├── role: Role ->",
            "└── name: string",
            "Role [enum]",
            "└── admin | user",
            "2 nodes, 1 edges",
        ]

    @pytest.mark.unit
    def test_modifiers_and_labels(self):
        """Modifiers are shown and synthetic nodes show their label."""
        order = s.object(
            {
                "note": s.string().optional(),
                "count": s.number().default(1),
                "meta": s.object({"tag": s.string().nullable()}),
            }
        )
        summary = format_graph_summary(compile_dictionary({"Order": order}))
        lines = summary.splitlines()
        assert lines[1] == "├── note?: string"
        assert lines[2] == "├── count: number = 1"
        assert lines[3] == "└── meta: Order:meta ->"
        assert lines[4] == "meta (Order:meta) [object]"
        assert lines[5] == "└── tag: string | null"

    @pytest.mark.unit
    def test_empty_graph(self):
        """An empty graph only reports counts."""
        assert format_graph_summary(compile_dictionary({})) == "0 nodes, 0 edges"
