"""Resolve a usable Python interpreter for native module builds."""

import logging
import os
import re
import subprocess
from typing import Callable, Iterable, List, Mapping, Optional

from ..errors import ForcedOverrideRejected, NoAcceptableInterpreterFound
from .specs import (
    PROBE_ARGS,
    PlatformFamily,
    build_candidates,
    forced_override_message,
    is_acceptable,
    not_found_message,
)
from .types import (
    AcceptedInterpreter,
    CandidateBinary,
    FailureKind,
    ResolutionFailure,
    ResolutionOutcome,
    VersionProbeResult,
)

logger = logging.getLogger(__name__)

_RC_SUFFIX = re.compile(r"rc.*$", re.IGNORECASE | re.DOTALL)
_DIGITS = re.compile(r"\d+")

# Takes argv, environment and timeout; returns stdout bytes or raises.
CommandRunner = Callable[[List[str], Mapping[str, str], Optional[float]], bytes]

# Returns the normalized version string, or None when the candidate is unusable.
Probe = Callable[[CandidateBinary], Optional[str]]


def normalize_version(output: str) -> str:
    """Strip '+' markers and a trailing release-candidate suffix."""
    output = output.replace("+", "")
    output = _RC_SUFFIX.sub("", output)
    return output.strip()


def parse_version(version: str) -> Optional[VersionProbeResult]:
    """Parse the major and minor components of a normalized version string."""
    tokens = version.split(".")
    if len(tokens) < 2:
        return None

    major, minor = tokens[0], tokens[1]
    if not (_DIGITS.fullmatch(major) and _DIGITS.fullmatch(minor)):
        return None

    return VersionProbeResult(major=int(major), minor=int(minor))


def resolve_interpreter(
    candidates: Iterable[CandidateBinary],
    probe: Probe,
) -> ResolutionOutcome:
    """Return the first candidate whose probed version is acceptable.

    Candidates are probed in order and probing stops at the first
    acceptance. A rejected forced candidate ends resolution without
    looking at the rest of the list.

    Args:
        candidates: Ordered candidate list
        probe: Callable returning a normalized version string or None

    Returns:
        AcceptedInterpreter or ResolutionFailure
    """
    for candidate in candidates:
        version = probe(candidate)
        parsed = parse_version(version) if version else None

        if parsed is not None and is_acceptable(parsed):
            logger.debug("Accepted %r (v%s)", candidate, version)
            return AcceptedInterpreter(candidate=candidate, version=version)

        logger.debug("Rejected %r (reported: %r)", candidate, version)

        if candidate.forced:
            return ResolutionFailure(
                kind=FailureKind.FORCED_OVERRIDE_REJECTED,
                message=forced_override_message(candidate.binary),
                rejected_override=candidate.binary,
            )

    return ResolutionFailure(
        kind=FailureKind.NO_ACCEPTABLE_INTERPRETER,
        message=not_found_message(),
    )


def _run_command(argv: List[str], env: Mapping[str, str], timeout: Optional[float]) -> bytes:
    return subprocess.run(
        argv,
        env=dict(env),
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        check=True,
        timeout=timeout,
    ).stdout


class InterpreterResolver:
    """Finds an installed Python usable by native module builds.

    The candidate list depends only on the environment and the platform
    family, so resolving twice with the same inputs yields the same outcome.
    """

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        platform: Optional[PlatformFamily] = None,
        runner: Optional[CommandRunner] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize resolver.

        Args:
            env: Environment to read overrides from and pass to probes
                (default: os.environ)
            platform: Platform family (default: the running platform)
            runner: Command runner used for probing (default: subprocess)
            timeout: Seconds to wait for each probe, or None to wait forever
        """
        self.env = os.environ if env is None else env
        self.platform = platform or PlatformFamily.current()
        self.runner = runner or _run_command
        self.timeout = timeout

    def candidates(self) -> List[CandidateBinary]:
        return build_candidates(self.platform, self.env)

    def probe(self, candidate: CandidateBinary) -> Optional[str]:
        """Ask a candidate for its version.

        Launch failures, non-zero exits and timeouts all count as no output.
        """
        argv = [candidate.binary]
        if candidate.prepend_flag:
            argv.append(candidate.prepend_flag)
        argv.extend(PROBE_ARGS)

        try:
            stdout = self.runner(argv, self.env, self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Could not probe %r: %s", candidate, e)
            return None

        if not stdout:
            return None

        output = stdout.decode(errors="replace") if isinstance(stdout, bytes) else stdout
        return normalize_version(output) or None

    def resolve(self) -> ResolutionOutcome:
        return resolve_interpreter(self.candidates(), self.probe)

    def require(self) -> AcceptedInterpreter:
        """Resolve, raising if no acceptable interpreter is found.

        Raises:
            ForcedOverrideRejected: If the forced override is not acceptable
            NoAcceptableInterpreterFound: If no candidate is acceptable
        """
        outcome = self.resolve()
        if isinstance(outcome, AcceptedInterpreter):
            return outcome

        if outcome.kind is FailureKind.FORCED_OVERRIDE_REJECTED:
            raise ForcedOverrideRejected(outcome)
        raise NoAcceptableInterpreterFound(outcome)
