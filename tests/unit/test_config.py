"""Unit tests for configuration system."""

import json
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from buildcheck.config import (
    BuildCheckConfig,
    find_config_file,
    get_electron_version,
    load_app_metadata,
    load_config,
    load_environment,
)
from buildcheck.errors import MetadataError


class TestConfigParsing:
    """Test TOML configuration parsing."""

    def test_find_config_file_exists(self):
        """Test finding .buildcheck.toml when it exists."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            project_path = Path(tmp_dir)
            config_file = project_path / ".buildcheck.toml"
            config_file.write_text("[requirements]\nnpm_min_major = 5\n")

            found = find_config_file(project_path)
            assert found == config_file

    def test_find_config_file_missing(self):
        """Test finding .buildcheck.toml when it doesn't exist."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            assert find_config_file(Path(tmp_dir)) is None

    def test_load_config_defaults(self, empty_project_dir):
        """Test loading config uses defaults when no file exists."""
        config = load_config(empty_project_dir)

        assert config.requirements.node_min_major == 4
        assert config.requirements.node_recommended_major == 6
        assert config.requirements.npm_min_major == 3
        assert config.requirements.npm_ci_min_major == 6
        assert config.requirements.probe_timeout is None
        assert config.paths.node is None
        assert config.electron.package_json == "package.json"
        assert config.electron.stream_output is False
        assert config.project_root == empty_project_dir

    def test_load_config_full(self, empty_project_dir):
        (empty_project_dir / ".buildcheck.toml").write_text("""
[requirements]
node_min_major = 8
node_recommended_major = 10
npm_min_major = 5
npm_ci_min_major = 7
probe_timeout = 2.5

[paths]
node = "${PROJECT_ROOT}/bin/node"
npm = "/usr/local/bin/npm"

[electron]
version = "3.1.13"
package_json = "app/package.json"
stream_output = true
""")

        config = load_config(empty_project_dir)

        assert config.requirements.node_min_major == 8
        assert config.requirements.node_recommended_major == 10
        assert config.requirements.npm_min_major == 5
        assert config.requirements.npm_ci_min_major == 7
        assert config.requirements.probe_timeout == 2.5
        assert config.paths.node == "${PROJECT_ROOT}/bin/node"
        assert config.paths.npm == "/usr/local/bin/npm"
        assert config.electron.version == "3.1.13"
        assert config.electron.package_json == "app/package.json"
        assert config.electron.stream_output is True

    def test_probe_timeout_quoted_number(self, empty_project_dir):
        """A quoted timeout is coerced to seconds."""
        (empty_project_dir / ".buildcheck.toml").write_text(
            '[requirements]\nprobe_timeout = "5"\n'
        )

        config = load_config(empty_project_dir)

        assert config.requirements.probe_timeout == 5.0
        assert isinstance(config.requirements.probe_timeout, float)

    @pytest.mark.parametrize("value", ['"soon"', "true", "0", "-1", "[1]"])
    def test_probe_timeout_unusable_means_no_timeout(self, empty_project_dir, value):
        (empty_project_dir / ".buildcheck.toml").write_text(
            f"[requirements]\nprobe_timeout = {value}\n"
        )

        assert load_config(empty_project_dir).requirements.probe_timeout is None

    def test_invalid_toml_falls_back_to_defaults(self, empty_project_dir):
        (empty_project_dir / ".buildcheck.toml").write_text("[requirements\nbroken")

        config = load_config(empty_project_dir)

        assert config.requirements.npm_min_major == 3

    def test_resolve_path(self, empty_project_dir):
        config = BuildCheckConfig(project_root=empty_project_dir)
        assert config.resolve_path("${PROJECT_ROOT}/bin") == f"{empty_project_dir}/bin"
        assert config.resolve_path("/abs/path") == "/abs/path"


class TestAppMetadata:
    """Test reading package.json."""

    def test_electron_version_from_package_json(self, project_dir):
        config = load_config(project_dir)

        assert load_app_metadata(config)["name"] == "app"
        assert get_electron_version(config) == "2.0.18"

    def test_config_version_wins(self, project_dir):
        config = load_config(project_dir)
        config.electron.version = "4.0.0"

        assert get_electron_version(config) == "4.0.0"

    def test_missing_package_json(self, empty_project_dir):
        config = load_config(empty_project_dir)

        with pytest.raises(MetadataError, match="not found"):
            get_electron_version(config)

    def test_invalid_package_json(self, empty_project_dir):
        (empty_project_dir / "package.json").write_text("{not json")
        config = load_config(empty_project_dir)

        with pytest.raises(MetadataError, match="Invalid JSON"):
            load_app_metadata(config)

    def test_missing_electron_version(self, empty_project_dir):
        (empty_project_dir / "package.json").write_text(json.dumps({"name": "app"}))
        config = load_config(empty_project_dir)

        with pytest.raises(MetadataError, match="electronVersion is not set"):
            get_electron_version(config)

    def test_nested_package_json(self, empty_project_dir):
        app_dir = empty_project_dir / "app"
        app_dir.mkdir()
        (app_dir / "package.json").write_text(json.dumps({"electronVersion": "1.8.8"}))
        (empty_project_dir / ".buildcheck.toml").write_text(
            '[electron]\npackage_json = "app/package.json"\n'
        )

        assert get_electron_version(load_config(empty_project_dir)) == "1.8.8"


class TestEnvironmentFile:
    """Test .env loading."""

    def test_no_env_file(self, empty_project_dir):
        assert load_environment(empty_project_dir) is False

    def test_loads_without_override(self, empty_project_dir):
        (empty_project_dir / ".env").write_text(
            "BUILDCHECK_TEST_NEW=from-file\nBUILDCHECK_TEST_SET=from-file\n"
        )

        with patch.dict(os.environ, {"BUILDCHECK_TEST_SET": "from-env"}):
            assert load_environment(empty_project_dir) is True
            assert os.environ["BUILDCHECK_TEST_NEW"] == "from-file"
            assert os.environ["BUILDCHECK_TEST_SET"] == "from-env"
