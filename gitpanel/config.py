"""Configuration handling for GitPanel."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from .util import deep_merge, parse_duration

CONFIG_FILENAME = ".gitpanel.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "host": "github.com",
    "api_url": "https://api.github.com",
    "user_agent": "GitPanel",
    "remote": "origin",
    "branch": "main",
    "refresh_interval": "5s",
    "grace_period": "3s",
    "push_timeout": "0s",  # 0 disables the timeout
    "log_level": "INFO",
    "token_env": ["GITPANEL_TOKEN", "GITHUB_TOKEN"],
    "ignore_patterns": [],
}


class ConfigError(Exception):
    """Raised when configuration could not be loaded or parsed."""


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    """Read ``key`` as a list of strings; a single string becomes a one-item list."""
    value = data.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a string or a list of strings.")
    return [str(item) for item in value]


@dataclass(frozen=True)
class GitPanelConfig:
    host: str = DEFAULT_CONFIG["host"]
    api_url: str = DEFAULT_CONFIG["api_url"]
    user_agent: str = DEFAULT_CONFIG["user_agent"]
    remote: str = DEFAULT_CONFIG["remote"]
    branch: str = DEFAULT_CONFIG["branch"]
    refresh_interval: str = DEFAULT_CONFIG["refresh_interval"]
    grace_period: str = DEFAULT_CONFIG["grace_period"]
    push_timeout: str = DEFAULT_CONFIG["push_timeout"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    token_env: list[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["token_env"]))
    ignore_patterns: list[str] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GitPanelConfig":
        """Construct from a dictionary, applying defaults for missing keys."""
        merged = deep_merge(DEFAULT_CONFIG, data)
        config = cls(
            host=str(merged.get("host")),
            api_url=str(merged.get("api_url")).rstrip("/"),
            user_agent=str(merged.get("user_agent")),
            remote=str(merged.get("remote")),
            branch=str(merged.get("branch")),
            refresh_interval=str(merged.get("refresh_interval")),
            grace_period=str(merged.get("grace_period")),
            push_timeout=str(merged.get("push_timeout")),
            log_level=str(merged.get("log_level", "INFO")),
            token_env=_string_list(merged, "token_env"),
            ignore_patterns=_string_list(merged, "ignore_patterns"),
            raw=merged,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError when a duration value cannot be parsed."""
        for key in ("refresh_interval", "grace_period", "push_timeout"):
            try:
                parse_duration(getattr(self, key))
            except ValueError as exc:
                raise ConfigError(f"Invalid {key}: {exc}") from exc

    @property
    def refresh_interval_duration(self) -> timedelta:
        """Return the status polling interval as a timedelta."""
        return parse_duration(self.refresh_interval)

    @property
    def grace_period_duration(self) -> timedelta:
        """Return how long a finished push stays visible before reverting to idle."""
        return parse_duration(self.grace_period)

    @property
    def push_timeout_seconds(self) -> float | None:
        """Return the push timeout in seconds, or None when disabled."""
        seconds = parse_duration(self.push_timeout).total_seconds()
        return seconds or None


def load_config(path: Path | None = None) -> GitPanelConfig:
    """Load configuration from a file, applying defaults when missing."""
    config_path = path or Path(CONFIG_FILENAME)
    if not config_path.exists():
        return GitPanelConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - depends on broken input
        raise ConfigError(f"Invalid YAML in {config_path}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return GitPanelConfig.from_dict(payload)


def save_config(config: GitPanelConfig, path: Path | None = None) -> None:
    """Write configuration back to disk."""
    config_path = path or Path(CONFIG_FILENAME)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config.raw or DEFAULT_CONFIG, handle, sort_keys=False)
