"""Configuration loading and constants for the dashboard."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml


# Defaults used when config.yaml omits a key
DEFAULT_POLLING_INTERVAL = 60  # seconds
DEFAULT_RUN_COUNT = 30


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or incomplete."""


@dataclass
class DashboardConfig:
    """Settings read from config.yaml plus environment overrides."""

    organization: str = ""
    project: str = ""
    pat: str = ""
    polling_interval: int = DEFAULT_POLLING_INTERVAL
    run_count: int = DEFAULT_RUN_COUNT

    def validate(self) -> None:
        """Raise ConfigError if the config cannot be used to talk to the server."""
        if not self.organization:
            raise ConfigError("organization is not configured")
        if not self.project:
            raise ConfigError("project is not configured")
        if not self.pat:
            raise ConfigError(
                "No personal access token found. Set PIPEWATCH_PAT or add 'pat' to config.yaml"
            )
        if self.polling_interval <= 0:
            raise ConfigError(
                f"polling_interval must be greater than 0, got {self.polling_interval}"
            )


def get_config_dir() -> Path:
    """Get the ~/.pipewatch directory.

    Can be overridden via PIPEWATCH_HOME environment variable (used by tests).
    """
    env_override = os.environ.get("PIPEWATCH_HOME")
    if env_override:
        return Path(env_override)
    return Path.home() / ".pipewatch"


def get_config_path() -> Path:
    """Get path to config.yaml, honouring PIPEWATCH_CONFIG."""
    env_override = os.environ.get("PIPEWATCH_CONFIG")
    if env_override:
        return Path(env_override)
    return get_config_dir() / "config.yaml"


def get_logs_dir() -> Path:
    """Get the directory the dashboard writes its log file to."""
    return get_config_dir() / "logs"


def load_config(path: Path | str | None = None) -> DashboardConfig:
    """Load dashboard configuration.

    Values are resolved in this order (later wins):
    1. Built-in defaults
    2. config.yaml
    3. PIPEWATCH_ORGANIZATION / PIPEWATCH_PROJECT / PIPEWATCH_PAT env vars

    A missing config file is not an error; the environment may supply
    everything.

    Raises:
        ConfigError: If the file exists but is not valid YAML or not a mapping,
            or a numeric setting is not a number.
    """
    config_path = Path(path) if path else get_config_path()

    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping")

    try:
        config = DashboardConfig(
            organization=str(data.get("organization") or ""),
            project=str(data.get("project") or ""),
            pat=str(data.get("pat") or ""),
            polling_interval=int(data.get("polling_interval", DEFAULT_POLLING_INTERVAL)),
            run_count=int(data.get("run_count", DEFAULT_RUN_COUNT)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in {config_path}: {e}") from e

    config.organization = os.environ.get("PIPEWATCH_ORGANIZATION", config.organization)
    config.project = os.environ.get("PIPEWATCH_PROJECT", config.project)
    config.pat = os.environ.get("PIPEWATCH_PAT", config.pat)
    return config
