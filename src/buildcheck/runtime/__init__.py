"""Python interpreter resolution for native module builds."""

from .resolver import (
    InterpreterResolver,
    normalize_version,
    parse_version,
    resolve_interpreter,
)
from .specs import PlatformFamily, build_candidates, is_acceptable
from .types import (
    AcceptedInterpreter,
    CandidateBinary,
    FailureKind,
    ResolutionFailure,
    ResolutionOutcome,
    VersionProbeResult,
)

__all__ = [
    "InterpreterResolver",
    "resolve_interpreter",
    "normalize_version",
    "parse_version",
    "PlatformFamily",
    "build_candidates",
    "is_acceptable",
    "AcceptedInterpreter",
    "CandidateBinary",
    "FailureKind",
    "ResolutionFailure",
    "ResolutionOutcome",
    "VersionProbeResult",
]
