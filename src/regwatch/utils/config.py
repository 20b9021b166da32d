"""Configuration file support for regwatch."""

from __future__ import annotations

import base64
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from regwatch.models.version import SelectionPolicy
from regwatch.utils.errors import ConfigurationError


class RegistryConfig(BaseModel):
    """Per-registry connection settings."""

    model_config = {"frozen": True}

    host: str = Field(description="Registry hostname")
    insecure: bool = Field(default=False, description="Use plain HTTP")
    username: str | None = Field(default=None, description="Registry username")
    password: str | None = Field(default=None, repr=False, description="Registry password or token")

    @property
    def credentials(self) -> str | None:
        """Basic Authorization header value, when both username and password are set."""
        if not self.username or not self.password:
            return None
        encoded = base64.b64encode(f"{self.username}:{self.password}".encode()).decode()
        return f"Basic {encoded}"


class HttpConfig(BaseModel):
    """HTTP transport configuration."""

    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Connection retry attempts")


class CheckConfig(BaseModel):
    """Update check configuration."""

    max_pages: int = Field(default=10, ge=1, description="Maximum tag list pages to fetch")
    policy: SelectionPolicy = Field(
        default=SelectionPolicy.LATEST,
        description="How the newest version is picked",
    )
    max_workers: int = Field(default=4, ge=1, description="Parallel registries in batch checks")


class RegwatchConfig(BaseModel):
    """Main configuration for regwatch."""

    http: HttpConfig = Field(default_factory=HttpConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)
    registries: list[RegistryConfig] = Field(
        default_factory=list, description="Per-registry settings"
    )

    def registry_for(self, host: str) -> RegistryConfig:
        """Get the settings for a registry host, falling back to anonymous HTTPS."""
        for registry in self.registries:
            if registry.host == host:
                return registry
        return RegistryConfig(host=host)


def get_config_paths() -> list[Path]:
    """Get possible configuration file paths.

    Returns:
        List of paths to check for configuration files
    """
    paths = []

    paths.append(Path.cwd() / ".regwatch.yaml")
    paths.append(Path.cwd() / "regwatch.yaml")

    home = Path.home()
    paths.append(home / ".config" / "regwatch" / "config.yaml")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "regwatch" / "config.yaml")

    return paths


def load_config(config_path: Path | str | None = None) -> RegwatchConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If the file is missing, not YAML, or does not validate
    """
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            return _load_config_file(path)
        raise ConfigurationError(f"Config file not found: {config_path}")

    for path in get_config_paths():
        if path.exists():
            return _load_config_file(path)

    return RegwatchConfig()


def _load_config_file(path: Path) -> RegwatchConfig:
    """Load configuration from a specific file."""
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}") from e

    if data is None:
        return RegwatchConfig()

    try:
        return RegwatchConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(f"Invalid config file {path}: {first['msg']}", config_key=key) from e


def save_config(config: RegwatchConfig, config_path: Path | str | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save to. Defaults to ~/.config/regwatch/config.yaml

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "regwatch" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    return config_path
