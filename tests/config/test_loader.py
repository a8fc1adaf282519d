"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error mapping
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from docmark.config.loader import (
    GLOBAL_CONFIG_PATH,
    REPO_CONFIG_NAME,
    _deep_merge,
    _load_yaml,
    load_config,
)
from docmark.config.models import LoggingConfig
from docmark.core.errors import ConfigError, ErrorCode


def _write_repo_config(root: Path, text: str) -> None:
    path = root / REPO_CONFIG_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("render:\n  code_language: csharp\n")

        assert _load_yaml(yaml_file) == {"render": {"code_language": "csharp"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("render:\n  code_language:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is not a config."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_merge_keeps_siblings(self) -> None:
        base = {"render": {"code_language": "cs", "summary_max_length": 80}}
        override = {"render": {"code_language": "csharp"}}

        assert _deep_merge(base, override) == {"render": {"code_language": "csharp", "summary_max_length": 80}}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        with patch("docmark.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)

        assert config.render.summary_max_length == 100
        assert config.documentation.fail_on_malformed_source is False

    def test_repo_yaml_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("render:\n  code_language: vb\n  summary_max_length: 60\n")
        _write_repo_config(tmp_path, "render:\n  code_language: csharp\n")

        with patch("docmark.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.render.code_language == "csharp"
        assert config.render.summary_max_length == 60

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "logging:\n  level: DEBUG\n")

        with (
            patch("docmark.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"DOCMARK__LOGGING__LEVEL": "WARNING"}),
        ):
            config = load_config(tmp_path)

        assert config.logging.level == "WARNING"

    def test_env_sets_nested_flag(self, tmp_path: Path) -> None:
        with (
            patch("docmark.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"DOCMARK__DOCUMENTATION__FAIL_ON_MALFORMED_SOURCE": "true"}),
        ):
            config = load_config(tmp_path)

        assert config.documentation.fail_on_malformed_source is True

    def test_kwargs_override_everything(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "logging:\n  level: DEBUG\n")

        with patch("docmark.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, logging=LoggingConfig(level="ERROR"))

        assert config.logging.level == "ERROR"

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "render:\n  summary_max_length: 2\n")

        with (
            patch("docmark.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "summary_max_length" in exc_info.value.details["field"]


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "docmark" in str(GLOBAL_CONFIG_PATH)
