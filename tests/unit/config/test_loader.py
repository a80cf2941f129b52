"""Unit tests for TOML configuration loader."""

import tomllib
from collections.abc import Callable
from pathlib import Path

import pytest

from governor.config.loader import (
    ConfigurationError,
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
    validate_sections,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_flat_dicts(self) -> None:
        """Flat dictionaries are merged correctly."""
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 20, "z": 30}}
        assert deep_merge(base, override) == {"a": {"x": 1, "y": 20, "z": 30}, "b": 3}

    def test_override_replaces_non_dict(self) -> None:
        assert deep_merge({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[section]\nkey = "value"\nnumber = 42')
        assert load_toml(toml_file) == {"section": {"key": "value", "number": 42}}

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path) -> None:
        invalid_file = tmp_path / "invalid.toml"
        invalid_file.write_text("invalid = [unclosed")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(invalid_file)


class TestGetEnvironment:
    """Tests for get_environment function."""

    def test_returns_env_var_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOVERNOR_ENV", "production")
        assert get_environment() == "production"

    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GOVERNOR_ENV", raising=False)
        assert get_environment() == "development"

    @pytest.mark.parametrize("env", ["../secrets", "prod/eu", ""])
    def test_rejects_path_like_names(self, env: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOVERNOR_ENV", env)
        with pytest.raises(ConfigurationError):
            get_environment()


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(tmp_path))
        assert get_config_dir() == tmp_path

    def test_missing_env_dir_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(tmp_path / "missing"))
        with pytest.raises(FileNotFoundError):
            get_config_dir()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_requires_default_toml(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(test_config_dir))
        with pytest.raises(FileNotFoundError, match="default.toml"):
            load_config()

    def test_merges_environment_file(
        self,
        test_config_dir: Path,
        mock_toml_files: Callable[[dict[str, str]], None],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files(
            {
                "default.toml": "[audit]\nenabled = true\nqueue_size = 1000\n",
                "test.toml": "[audit]\nqueue_size = 10\n",
            }
        )
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("GOVERNOR_ENV", "test")

        assert load_config() == {"audit": {"enabled": True, "queue_size": 10}}

    def test_invalid_default_section_names_file(
        self,
        test_config_dir: Path,
        mock_toml_files: Callable[[dict[str, str]], None],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "[dispatch]\nmax_limit = 500\n"})
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(test_config_dir))

        with pytest.raises(ConfigurationError, match="dispatch") as exc_info:
            load_config()

        assert exc_info.value.source == test_config_dir / "default.toml"

    def test_invalid_overlay_names_overlay_file(
        self,
        test_config_dir: Path,
        mock_toml_files: Callable[[dict[str, str]], None],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files(
            {
                "default.toml": "[audit]\nqueue_size = 1000\n",
                "staging.toml": "[audit]\nqueue_size = 0\n",
            }
        )
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("GOVERNOR_ENV", "staging")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.source == test_config_dir / "staging.toml"

    def test_repository_config_is_valid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        repo_config = Path(__file__).resolve().parents[3] / "config"
        monkeypatch.setenv("GOVERNOR_CONFIG_DIR", str(repo_config))
        monkeypatch.setenv("GOVERNOR_ENV", "development")

        config = load_config()

        assert config["dispatch"]["max_limit"] == 50


class TestValidateSections:
    """Tests for validate_sections function."""

    def test_absent_sections_are_fine(self) -> None:
        validate_sections({"api": {"port": 8000}})

    def test_default_above_max_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="dispatch"):
            validate_sections({"dispatch": {"default_limit": 20, "max_limit": 10}})

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="storage"):
            validate_sections({"storage": {"backend": "sqlite"}})

    def test_section_must_be_table(self) -> None:
        with pytest.raises(ConfigurationError, match="must be a table"):
            validate_sections({"guardrails": 25})
