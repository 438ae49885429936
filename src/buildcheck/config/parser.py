"""Configuration file parser for buildcheck."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..errors import MetadataError

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

CONFIG_FILE_NAME = ".buildcheck.toml"


@dataclass
class RequirementsConfig:
    """Minimum tool versions accepted for a build."""

    node_min_major: int = 4
    node_recommended_major: int = 6
    npm_min_major: int = 3
    npm_ci_min_major: int = 6
    probe_timeout: Optional[float] = None  # Seconds per interpreter probe


@dataclass
class PathsConfig:
    """Explicit tool paths (may use ${PROJECT_ROOT})."""

    node: Optional[str] = None
    npm: Optional[str] = None


@dataclass
class ElectronConfig:
    """Settings for re-downloading chromedriver and mksnapshot."""

    version: Optional[str] = None  # Overrides electronVersion from package.json
    package_json: str = "package.json"
    stream_output: bool = False


@dataclass
class BuildCheckConfig:
    """Complete buildcheck configuration."""

    requirements: RequirementsConfig = field(default_factory=RequirementsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    electron: ElectronConfig = field(default_factory=ElectronConfig)

    # Project root for resolving paths
    project_root: Path = field(default_factory=Path.cwd)

    def resolve_path(self, path_template: str) -> str:
        """Resolve template variables in paths.

        Supports:
            ${PROJECT_ROOT} - absolute path to project root
        """
        return path_template.replace("${PROJECT_ROOT}", str(self.project_root))


def _optional_seconds(value: Any) -> Optional[float]:
    """Coerce a timeout setting to float; unusable values mean no timeout."""
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .buildcheck.toml in project root.

    Args:
        project_path: Root path of the project

    Returns:
        Path to .buildcheck.toml if found, None otherwise
    """
    config_file = project_path / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def load_environment(project_path: Path) -> bool:
    """Load a project .env file without overriding variables already set.

    Returns:
        True if a .env file was found and loaded
    """
    env_file = project_path / ".env"
    if not env_file.is_file():
        return False
    return load_dotenv(env_file, override=False)


def load_config(project_path: Path) -> BuildCheckConfig:
    """Load configuration from .buildcheck.toml or use defaults.

    Args:
        project_path: Root path of the project

    Returns:
        BuildCheckConfig with loaded or default configuration
    """
    config = BuildCheckConfig(project_root=project_path)

    config_file = find_config_file(project_path)
    if not config_file:
        return config

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        # If TOML parsing fails, return defaults
        return config

    if "requirements" in data:
        req_data = data["requirements"]
        config.requirements.node_min_major = req_data.get("node_min_major", 4)
        config.requirements.node_recommended_major = req_data.get(
            "node_recommended_major", 6
        )
        config.requirements.npm_min_major = req_data.get("npm_min_major", 3)
        config.requirements.npm_ci_min_major = req_data.get("npm_ci_min_major", 6)
        config.requirements.probe_timeout = _optional_seconds(req_data.get("probe_timeout"))

    if "paths" in data:
        paths_data = data["paths"]
        config.paths.node = paths_data.get("node")
        config.paths.npm = paths_data.get("npm")

    if "electron" in data:
        electron_data = data["electron"]
        config.electron.version = electron_data.get("version")
        config.electron.package_json = electron_data.get("package_json", "package.json")
        config.electron.stream_output = electron_data.get("stream_output", False)

    return config


def load_app_metadata(config: BuildCheckConfig) -> Dict[str, Any]:
    """Read the application's package.json.

    Raises:
        MetadataError: If the file is missing or not valid JSON
    """
    package_json = Path(config.resolve_path(config.electron.package_json))
    if not package_json.is_absolute():
        package_json = config.project_root / package_json

    try:
        with open(package_json, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise MetadataError(f"Application metadata not found: {package_json}") from e
    except json.JSONDecodeError as e:
        raise MetadataError(f"Invalid JSON in {package_json}: {e}") from e


def get_electron_version(config: BuildCheckConfig) -> str:
    """Return the pinned Electron version.

    The [electron] version setting wins over electronVersion in package.json.

    Raises:
        MetadataError: If neither source provides a version
    """
    if config.electron.version:
        return config.electron.version

    metadata = load_app_metadata(config)
    version = metadata.get("electronVersion")
    if not version:
        raise MetadataError(
            f"electronVersion is not set in {config.electron.package_json}"
        )
    return str(version)
