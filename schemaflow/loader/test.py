"""Unit tests for schema module loading."""

import textwrap

import pytest

from schemaflow.loader import (
    LoadError,
    load_dictionary,
    load_examples,
    load_schema_file,
)
from schemaflow.schema import SchemaKind

SHOP_MODULE = """
from schemaflow.schema import s

Product = s.object({"id": s.string()})
Order = s.object({"items": s.array(Product)})
_Hidden = s.object({})
not_a_schema = 42
"""


def write_module(tmp_path, source: str, name: str = "shop.py"):
    path = tmp_path / name
    path.write_text(textwrap.dedent(source))
    return path


class TestLoadSchemaFile:
    """Importing user schema modules."""

    @pytest.mark.unit
    def test_collects_public_schemas_in_order(self, tmp_path):
        """Only public SchemaValue attributes are kept, in definition order."""
        dictionary = load_schema_file(write_module(tmp_path, SHOP_MODULE))
        assert list(dictionary) == ["Product", "Order"]
        assert dictionary["Order"].kind == SchemaKind.OBJECT

    @pytest.mark.unit
    def test_shared_references_keep_identity(self, tmp_path):
        """References inside the module point at the registered value."""
        dictionary = load_schema_file(write_module(tmp_path, SHOP_MODULE))
        items = dictionary["Order"].shape["items"]
        assert items.element is dictionary["Product"]

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        """A missing path raises LoadError carrying the path."""
        path = tmp_path / "nope.py"
        with pytest.raises(LoadError) as exc_info:
            load_schema_file(path)
        assert exc_info.value.path == path

    @pytest.mark.unit
    def test_import_failure(self, tmp_path):
        """Errors raised by the module become LoadError."""
        path = write_module(tmp_path, "raise RuntimeError('boom')\n")
        with pytest.raises(LoadError, match="boom"):
            load_schema_file(path)

    @pytest.mark.unit
    def test_syntax_error(self, tmp_path):
        """Unparseable modules become LoadError."""
        path = write_module(tmp_path, "def broken(:\n")
        with pytest.raises(LoadError, match="Failed to import"):
            load_schema_file(path)

    @pytest.mark.unit
    def test_no_schemas(self, tmp_path):
        """A module without schemas is rejected."""
        path = write_module(tmp_path, "VALUE = 1\n")
        with pytest.raises(LoadError, match="No schemas"):
            load_schema_file(path)


class TestLoadDictionary:
    """Fallback behaviour of load_dictionary."""

    @pytest.mark.unit
    def test_no_path_uses_examples(self, monkeypatch):
        """Without a configured path the examples load without fallback."""
        monkeypatch.delenv("SCHEMAFLOW_SCHEMA_PATH", raising=False)
        result = load_dictionary()
        assert not result.fallback
        assert result.error is None
        assert result.schema_path is None
        assert list(result.dictionary) == list(load_examples())

    @pytest.mark.unit
    def test_loads_given_path(self, tmp_path):
        """A loadable module is returned as is."""
        path = write_module(tmp_path, SHOP_MODULE)
        result = load_dictionary(path)
        assert not result.fallback
        assert result.schema_path == path
        assert list(result.dictionary) == ["Product", "Order"]

    @pytest.mark.unit
    def test_path_from_environment(self, tmp_path, monkeypatch):
        """SCHEMAFLOW_SCHEMA_PATH is used when no path is passed."""
        path = write_module(tmp_path, SHOP_MODULE)
        monkeypatch.setenv("SCHEMAFLOW_SCHEMA_PATH", str(path))
        assert list(load_dictionary().dictionary) == ["Product", "Order"]

    @pytest.mark.unit
    def test_fallback_on_failure(self, tmp_path, caplog):
        """A failing module falls back to the examples and logs a warning."""
        path = tmp_path / "missing.py"
        with caplog.at_level("WARNING"):
            result = load_dictionary(path)

        assert result.fallback
        assert result.schema_path == path
        assert "not found" in result.error
        assert "UserSchema" in result.dictionary
        assert "falling back to examples" in caplog.text


class TestExamples:
    """Bundled example schemas."""

    @pytest.mark.unit
    def test_example_names(self):
        """The examples define products, users, roles and a master schema."""
        assert list(load_examples()) == [
            "ProductSchema",
            "UserRole",
            "UserSchema",
            "MasterSchema",
        ]

    @pytest.mark.unit
    def test_examples_share_values(self):
        """The master schema reuses the registered user and product."""
        dictionary = load_examples()
        master = dictionary["MasterSchema"]
        assert master.shape["user"] is dictionary["UserSchema"]
        assert master.shape["product"] is dictionary["ProductSchema"]
