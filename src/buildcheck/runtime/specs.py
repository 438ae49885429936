"""Declarative candidate lists for interpreter resolution.

Candidates are DATA: each platform family maps to a fixed tuple of
builders, and the resolver only folds over what they produce.
"""

import ntpath
import sys
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .types import CandidateBinary, VersionProbeResult

FORCE_PYTHON_ENV = "NODE_GYP_FORCE_PYTHON"
PYTHON_ENV = "PYTHON"

# Printed by the candidate on stdout
PROBE_ARGS = ["-c", "import platform\nprint(platform.python_version())"]

ACCEPTED_RANGES = "Python 2.7 or 3.5+"


class PlatformFamily(Enum):
    """Platform families with distinct candidate lists."""

    POSIX = "posix"
    WINDOWS = "windows"

    @classmethod
    def current(cls, platform: Optional[str] = None) -> "PlatformFamily":
        """Map a sys.platform value (default: the running one) to a family."""
        platform = sys.platform if platform is None else platform
        return cls.WINDOWS if platform == "win32" else cls.POSIX


CandidateBuilder = Callable[[Mapping[str, str]], List[CandidateBinary]]


def override_candidates(env: Mapping[str, str]) -> List[CandidateBinary]:
    """Candidates sourced from environment overrides."""
    candidates = []

    forced = env.get(FORCE_PYTHON_ENV, "")
    if forced:
        candidates.append(
            CandidateBinary(binary=forced, forced=True, source=FORCE_PYTHON_ENV)
        )

    python = env.get(PYTHON_ENV, "")
    if python:
        candidates.append(CandidateBinary(binary=python, source=PYTHON_ENV))

    return candidates


def command_candidates(env: Mapping[str, str]) -> List[CandidateBinary]:
    """Bare command names looked up on PATH."""
    return [CandidateBinary(binary=name) for name in ("python", "python2", "python3")]


def windows_candidates(env: Mapping[str, str]) -> List[CandidateBinary]:
    """The py launcher and the default install locations under the system drive."""
    drive = env.get("SystemDrive") or "C:"
    root = drive + ntpath.sep
    return [
        CandidateBinary(binary="py.exe", prepend_flag="-2", source="windows_launcher"),
        CandidateBinary(
            binary=ntpath.join(root, "Python27", "python.exe"),
            source="windows_fallback",
        ),
        CandidateBinary(
            binary=ntpath.join(root, "Python37", "python.exe"),
            source="windows_fallback",
        ),
    ]


CANDIDATE_BUILDERS: Dict[PlatformFamily, Tuple[CandidateBuilder, ...]] = {
    PlatformFamily.POSIX: (override_candidates, command_candidates),
    PlatformFamily.WINDOWS: (override_candidates, command_candidates, windows_candidates),
}


def build_candidates(
    family: PlatformFamily, env: Mapping[str, str]
) -> List[CandidateBinary]:
    """Compose the ordered candidate list for a platform family."""
    candidates: List[CandidateBinary] = []
    for builder in CANDIDATE_BUILDERS[family]:
        candidates.extend(builder(env))
    return candidates


def is_acceptable(version: VersionProbeResult) -> bool:
    """Python 2.7, or Python 3.5 and later."""
    if version.major == 2:
        return version.minor == 7
    if version.major == 3:
        return version.minor >= 5
    return False


def forced_override_message(override: str) -> str:
    return (
        f'{FORCE_PYTHON_ENV} is set to: "{override}", but this is not a valid Python.\n'
        f"Please set {FORCE_PYTHON_ENV} to something valid, or unset it entirely.\n"
        f"({ACCEPTED_RANGES} is required to build.)\n"
    )


def not_found_message() -> str:
    return (
        f"{ACCEPTED_RANGES} is required to build.\n"
        "Unable to find such a version of Python.\n"
        f"Set the {PYTHON_ENV} env var to e.g. 'C:/path/to/Python27/python.exe'\n"
        "if your Python is installed in a non-default location.\n"
    )
