"""Tests for the schemaflow CLI."""

import json
import textwrap

import pytest

from schemaflow.__main__ import build_parser, main


@pytest.fixture
def shop_module(tmp_path):
    path = tmp_path / "shop.py"
    path.write_text(
        textwrap.dedent(
            """
            from schemaflow.schema import s

            Product = s.object({"id": s.string()})
            Order = s.object({"items": s.array(Product)})
            Audit = s.object({"when": s.date()})
            """
        )
    )
    return path


class TestParser:
    """Argument parsing."""

    @pytest.mark.unit
    def test_defaults(self):
        """Everything is optional."""
        args = build_parser().parse_args([])
        assert args.schema_file is None
        assert args.direction is None
        assert not args.verbose

    @pytest.mark.unit
    def test_direction_case_insensitive(self):
        """Directions are upper-cased before validation."""
        assert build_parser().parse_args(["-d", "tb"]).direction == "TB"

    @pytest.mark.unit
    def test_invalid_direction(self):
        """Unknown directions are rejected by argparse."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--direction", "RL"])


class TestMain:
    """End-to-end CLI runs."""

    @pytest.mark.unit
    def test_writes_artifact(self, shop_module, tmp_path, capsys):
        """A schema module is compiled, summarized and written."""
        output = tmp_path / "graph.json"
        assert main([str(shop_module), "--output", str(output)]) == 0

        artifact = json.loads(output.read_text(encoding="utf-8"))
        assert [n["id"] for n in artifact["nodes"]] == ["Product", "Order", "Audit"]
        assert artifact["fallback"] is False
        assert artifact["schema"] == str(shop_module)
        assert all(n["position"] is not None for n in artifact["nodes"])
        assert "Order [object]" in capsys.readouterr().out

    @pytest.mark.unit
    def test_root_limits_graph(self, shop_module, tmp_path):
        """--root keeps only the reachable schemas."""
        output = tmp_path / "graph.json"
        assert main([str(shop_module), "--root", "Order", "-o", str(output)]) == 0
        artifact = json.loads(output.read_text(encoding="utf-8"))
        assert [n["id"] for n in artifact["nodes"]] == ["Order", "Product"]

    @pytest.mark.unit
    def test_unknown_root(self, shop_module, tmp_path):
        """An unknown root name fails."""
        output = tmp_path / "graph.json"
        assert main([str(shop_module), "--root", "Nope", "-o", str(output)]) == 1
        assert not output.exists()

    @pytest.mark.unit
    def test_fallback_is_not_fatal(self, tmp_path):
        """A broken module falls back to the examples and still succeeds."""
        output = tmp_path / "graph.json"
        assert main([str(tmp_path / "missing.py"), "-o", str(output)]) == 0
        artifact = json.loads(output.read_text(encoding="utf-8"))
        assert artifact["fallback"] is True
        assert "not found" in artifact["error"]
        assert "UserSchema" in [n["id"] for n in artifact["nodes"]]

    @pytest.mark.unit
    def test_depth_error(self, tmp_path):
        """Schemas nested past the limit fail the run."""
        module = tmp_path / "deep.py"
        module.write_text(
            "from schemaflow.schema import s\n"
            "Deep = s.object({'x': s.array(s.array(s.array(s.string())))})\n"
        )
        output = tmp_path / "graph.json"
        assert main([str(module), "--max-depth", "2", "-o", str(output)]) == 1
        assert not output.exists()
