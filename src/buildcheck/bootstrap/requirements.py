"""Machine requirement checks run before a build.

Verifies that Node, npm and a usable Python are installed in supported
versions. Each check prints one status line and raises on failure.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional

import semver

from ..config import BuildCheckConfig
from ..errors import RequirementError
from ..runtime import AcceptedInterpreter, InterpreterResolver

logger = logging.getLogger(__name__)


def get_command_version(command: str, version_arg: str = "--version") -> str:
    """Run `<command> --version` and return its trimmed stdout.

    Raises:
        RequirementError: If the command cannot be run or exits non-zero
    """
    try:
        result = subprocess.run(
            [command, version_arg],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise RequirementError(f"{command} was not found on PATH.") from e
    except (OSError, subprocess.CalledProcessError) as e:
        raise RequirementError(f"Failed to run `{command} {version_arg}`: {e}") from e

    return result.stdout.strip()


def parse_tool_version(raw: str, tool: str) -> semver.Version:
    """Parse a version such as "v18.16.0" or "9.8.1".

    Raises:
        RequirementError: If the output is not a version
    """
    try:
        return semver.Version.parse(raw.lstrip("v"), optional_minor_and_patch=True)
    except ValueError as e:
        raise RequirementError(f"Could not parse {tool} version from {raw!r}") from e


def get_npm_bin_path(config: BuildCheckConfig, ci: bool = False) -> str:
    """Pick the npm binary to check.

    Outside CI, a project-local npm under script/node_modules/.bin wins
    over the one on PATH.
    """
    if config.paths.npm:
        return config.resolve_path(config.paths.npm)

    npm_bin_name = "npm.cmd" if sys.platform == "win32" else "npm"
    local_npm = Path(config.project_root) / "script" / "node_modules" / ".bin" / npm_bin_name
    if not ci and local_npm.exists():
        return str(local_npm)
    return npm_bin_name


def get_node_bin_path(config: BuildCheckConfig) -> str:
    if config.paths.node:
        return config.resolve_path(config.paths.node)
    return "node"


def verify_node(config: BuildCheckConfig) -> semver.Version:
    """Check the Node runtime version.

    Raises:
        RequirementError: If Node is missing or below the minimum major
    """
    requirements = config.requirements
    raw = get_command_version(get_node_bin_path(config))
    version = parse_tool_version(raw, "node")

    if version.major >= requirements.node_recommended_major:
        print(f"Node:\tv{version}")
    elif version.major >= requirements.node_min_major:
        print(f"Node:\tv{version}")
        print(
            f"\tWarning: Building on Node below version "
            f"{requirements.node_recommended_major} is deprecated. "
            f"Please use Node {requirements.node_recommended_major}.x+ to build.",
            file=sys.stderr,
        )
    else:
        raise RequirementError(
            f"node v{requirements.node_min_major}+ is required to build. "
            f"node v{version} is installed."
        )

    return version


def verify_npm(config: BuildCheckConfig, ci: bool = False) -> semver.Version:
    """Check the npm version (stricter under CI).

    Raises:
        RequirementError: If npm is missing or too old
    """
    npm = get_npm_bin_path(config, ci)
    logger.debug("Checking npm at %s", npm)

    raw = get_command_version(npm)
    version = parse_tool_version(raw, "npm")

    oldest_supported = (
        config.requirements.npm_ci_min_major if ci else config.requirements.npm_min_major
    )
    if version.major < oldest_supported:
        raise RequirementError(
            f"npm v{oldest_supported}+ is required to build. "
            f"npm v{version} was detected."
        )

    print(f"Npm:\tv{version}")
    return version


def verify_python(
    config: BuildCheckConfig,
    resolver: Optional[InterpreterResolver] = None,
) -> AcceptedInterpreter:
    """Check that a Python usable by node-gyp is installed.

    Raises:
        ForcedOverrideRejected: If NODE_GYP_FORCE_PYTHON is not acceptable
        NoAcceptableInterpreterFound: If no candidate is acceptable
    """
    if resolver is None:
        resolver = InterpreterResolver(timeout=config.requirements.probe_timeout)

    accepted = resolver.require()
    print(f"Python:\tv{accepted.version}")
    return accepted


def verify_machine_requirements(config: BuildCheckConfig, ci: bool = False) -> None:
    """Run every machine requirement check in order.

    Raises:
        RequirementError: On the first failing check
    """
    verify_node(config)
    verify_npm(config, ci)
    verify_python(config)
