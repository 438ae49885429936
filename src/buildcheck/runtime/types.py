"""Data types for interpreter resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class CandidateBinary:
    """An interpreter binary tried during resolution.

    Attributes:
        binary: Command name or path to invoke
        prepend_flag: Flag placed before the probe arguments (e.g. "-2" for py.exe)
        forced: Whether rejection must abort resolution immediately
        source: Where the candidate came from (env var name, "literal", ...)
    """

    binary: str
    prepend_flag: Optional[str] = None
    forced: bool = False
    source: str = "literal"

    def __repr__(self) -> str:
        flag = f" {self.prepend_flag}" if self.prepend_flag else ""
        forced = " (forced)" if self.forced else ""
        return f"<CandidateBinary {self.binary}{flag} [{self.source}]{forced}>"


@dataclass(frozen=True)
class VersionProbeResult:
    """Parsed (major, minor) pair reported by a candidate."""

    major: int
    minor: int


class FailureKind(Enum):
    """Why resolution failed."""

    FORCED_OVERRIDE_REJECTED = "forced_override_rejected"
    NO_ACCEPTABLE_INTERPRETER = "no_acceptable_interpreter"


@dataclass(frozen=True)
class AcceptedInterpreter:
    """The first candidate whose version passed the acceptance predicate."""

    candidate: CandidateBinary
    version: str

    def __repr__(self) -> str:
        return f"<AcceptedInterpreter v{self.version} @ {self.candidate.binary}>"


@dataclass(frozen=True)
class ResolutionFailure:
    """No candidate was accepted."""

    kind: FailureKind
    message: str
    rejected_override: Optional[str] = None


ResolutionOutcome = Union[AcceptedInterpreter, ResolutionFailure]
