"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_generate_url,
    get_store_dir,
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
        monkeypatch.delenv("WIDGY_PROVIDER_TIMEOUT", raising=False)
        assert get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT) == 5.0

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("WIDGY_GENERATION_RETRIES", "9")
        assert get_environment(EnvVar.WIDGY_GENERATION_RETRIES, override=1) == 1

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("WIDGY_GENERATION_RETRIES", "4")
        result = get_environment(EnvVar.WIDGY_GENERATION_RETRIES)
        assert result == 4
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("WIDGY_PROVIDER_TIMEOUT", "2.5")
        assert get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT) == 2.5

    @pytest.mark.unit
    def test_invalid_number_falls_back_to_default(self, monkeypatch):
        """Unparseable numbers resolve to the default."""
        monkeypatch.setenv("WIDGY_PROVIDER_TIMEOUT", "soon")
        monkeypatch.setenv("WIDGY_GENERATION_RETRIES", "many")
        assert get_environment(EnvVar.WIDGY_PROVIDER_TIMEOUT) == 5.0
        assert get_environment(EnvVar.WIDGY_GENERATION_RETRIES) == 2

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch, tmp_path):
        """Path values are converted to Path objects."""
        monkeypatch.setenv("WIDGY_STORE_DIR", str(tmp_path))
        assert get_environment(EnvVar.WIDGY_STORE_DIR) == tmp_path

    @pytest.mark.unit
    def test_string_default_none(self, monkeypatch):
        """Optional string variables default to None."""
        monkeypatch.delenv("WIDGY_API_KEY", raising=False)
        assert get_environment(EnvVar.WIDGY_API_KEY) is None


class TestConvenienceFunctions:
    """Tests for convenience helpers."""

    @pytest.mark.unit
    def test_store_dir_override(self, tmp_path):
        """Explicit override wins."""
        assert get_store_dir(tmp_path) == tmp_path

    @pytest.mark.unit
    def test_store_dir_from_env(self, monkeypatch, tmp_path):
        """Environment variable is used when set."""
        monkeypatch.setenv("WIDGY_STORE_DIR", str(tmp_path / "store"))
        assert get_store_dir() == tmp_path / "store"

    @pytest.mark.unit
    def test_store_dir_default(self, monkeypatch):
        """Falls back to the home directory."""
        monkeypatch.delenv("WIDGY_STORE_DIR", raising=False)
        assert get_store_dir() == Path.home() / ".widgy" / "widgets"

    @pytest.mark.unit
    def test_generate_url(self, monkeypatch):
        """Generation URL resolves override > env."""
        monkeypatch.setenv("WIDGY_GENERATE_URL", "https://example.test/gen")
        assert get_generate_url() == "https://example.test/gen"
        assert get_generate_url("https://other.test") == "https://other.test"


class TestIntrospection:
    """Tests for metadata helpers."""

    @pytest.mark.unit
    def test_environment_info(self):
        """Metadata is exposed as EnvConfig."""
        info = get_environment_info(EnvVar.WIDGY_STORE_DIR)
        assert isinstance(info, EnvConfig)
        assert info.name == "WIDGY_STORE_DIR"
        assert info.category == "storage"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Category filtering returns only matching variables."""
        generation = list_environment_variables("generation")
        assert EnvVar.WIDGY_API_KEY in generation
        assert EnvVar.WIDGY_STORE_DIR not in generation
        assert len(list_environment_variables()) == len(EnvVar)
