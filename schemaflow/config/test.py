"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_layout_direction,
    get_log_level,
    get_max_depth,
    get_output_path,
    get_schema_path,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("SCHEMAFLOW_MAX_DEPTH", raising=False)
        assert get_environment(EnvVar.MAX_DEPTH) == 64

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("SCHEMAFLOW_MAX_DEPTH", "99")
        assert get_environment(EnvVar.MAX_DEPTH, override=5) == 5

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("SCHEMAFLOW_MAX_DEPTH", "12")
        result = get_environment(EnvVar.MAX_DEPTH)
        assert result == 12
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("SCHEMAFLOW_MAX_DEPTH", "deep")
        assert get_environment(EnvVar.MAX_DEPTH) == 64

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch):
        """Path variables are converted to Path."""
        monkeypatch.setenv("SCHEMAFLOW_SCHEMA_PATH", "schemas/app.py")
        assert get_environment(EnvVar.SCHEMA_PATH) == Path("schemas/app.py")

    @pytest.mark.unit
    def test_empty_path_returns_default(self, monkeypatch):
        """An empty path value is treated as unset."""
        monkeypatch.setenv("SCHEMAFLOW_SCHEMA_PATH", "")
        assert get_environment(EnvVar.SCHEMA_PATH) is None


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.MAX_DEPTH)
        assert isinstance(info, EnvConfig)
        assert info.name == "SCHEMAFLOW_MAX_DEPTH"
        assert info.var_type is int
        assert info.category == "compiler"

    @pytest.mark.unit
    def test_every_variable_has_a_converted_type(self):
        """Each variable is read as str, int or Path."""
        for var in EnvVar:
            assert get_environment_info(var).var_type in (str, int, Path)


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        assert list_environment_variables("layout") == [EnvVar.LAYOUT_DIRECTION]


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestConvenienceFunctions:
    """Tests for typed helpers."""

    @pytest.mark.unit
    def test_schema_path_override(self, monkeypatch):
        """Explicit schema path wins over the environment."""
        monkeypatch.setenv("SCHEMAFLOW_SCHEMA_PATH", "env.py")
        assert get_schema_path("cli.py") == Path("cli.py")

    @pytest.mark.unit
    def test_schema_path_unset(self, monkeypatch):
        """No schema path configured yields None."""
        monkeypatch.delenv("SCHEMAFLOW_SCHEMA_PATH", raising=False)
        assert get_schema_path() is None

    @pytest.mark.unit
    def test_output_path_default(self, monkeypatch):
        """Output path falls back to the default file name."""
        monkeypatch.delenv("SCHEMAFLOW_OUTPUT_PATH", raising=False)
        assert get_output_path() == Path("schemaflow-graph.json")

    @pytest.mark.unit
    def test_layout_direction_normalized(self, monkeypatch):
        """Direction is upper-cased."""
        monkeypatch.setenv("SCHEMAFLOW_LAYOUT_DIRECTION", "tb")
        assert get_layout_direction() == "TB"

    @pytest.mark.unit
    def test_layout_direction_invalid_falls_back(self):
        """Unknown directions fall back to LR."""
        assert get_layout_direction("diagonal") == "LR"

    @pytest.mark.unit
    def test_max_depth_floor(self):
        """Depth limit is never below one."""
        assert get_max_depth(0) == 1
        assert get_max_depth(10) == 10

    @pytest.mark.unit
    def test_log_level(self, monkeypatch):
        """Log level is read from the environment."""
        monkeypatch.setenv("SCHEMAFLOW_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"
