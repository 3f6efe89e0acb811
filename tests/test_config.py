"""Tests for configuration loading."""

from datetime import timedelta
from pathlib import Path

import pytest

from gitpanel.config import ConfigError, GitPanelConfig, load_config, save_config


class TestLoadConfig:
    """Tests for load_config and save_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that defaults apply when no file exists."""
        config = load_config(tmp_path / ".gitpanel.yml")
        assert config.host == "github.com"
        assert config.refresh_interval_duration == timedelta(seconds=5)
        assert config.grace_period_duration == timedelta(seconds=3)
        assert config.push_timeout_seconds is None
        assert config.token_env == ["GITPANEL_TOKEN", "GITHUB_TOKEN"]

    def test_values_override_defaults(self, tmp_path: Path) -> None:
        """Test that file values are merged over defaults."""
        path = tmp_path / ".gitpanel.yml"
        path.write_text(
            "refresh_interval: 10s\npush_timeout: 2m\ntoken_env: MY_TOKEN\nignore_patterns:\n  - '*.blend1'\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.refresh_interval_duration == timedelta(seconds=10)
        assert config.push_timeout_seconds == 120
        assert config.token_env == ["MY_TOKEN"]
        assert config.ignore_patterns == ["*.blend1"]
        assert config.api_url == "https://api.github.com"

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        """Test that a list at the root is an error."""
        path = tmp_path / ".gitpanel.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_duration_rejected(self) -> None:
        """Test that unparseable durations raise ConfigError."""
        with pytest.raises(ConfigError, match="grace_period"):
            GitPanelConfig.from_dict({"grace_period": "soon"})

    def test_save_round_trip(self, tmp_path: Path) -> None:
        """Test that saved configuration loads back."""
        path = tmp_path / ".gitpanel.yml"
        save_config(GitPanelConfig.from_dict({"host": "ghe.example"}), path)
        assert load_config(path).host == "ghe.example"

    def test_single_string_pattern(self) -> None:
        """Test that a single ignore pattern string is kept whole."""
        config = GitPanelConfig.from_dict({"ignore_patterns": "*.blend1", "token_env": "STUDIO_TOKEN"})
        assert config.ignore_patterns == ["*.blend1"]
        assert config.token_env == ["STUDIO_TOKEN"]

    def test_non_list_patterns_rejected(self) -> None:
        """Test that a scalar that is not a string raises ConfigError."""
        with pytest.raises(ConfigError, match="ignore_patterns"):
            GitPanelConfig.from_dict({"ignore_patterns": 5})
