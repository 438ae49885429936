"""Exceptions raised by build-bootstrap checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runtime.types import ResolutionFailure


class BuildCheckError(Exception):
    """Base class for every fatal bootstrap failure."""


class RequirementError(BuildCheckError):
    """A required tool is missing or older than the supported minimum."""


class InterpreterNotFoundError(RequirementError):
    """No usable Python interpreter could be resolved."""

    def __init__(self, failure: ResolutionFailure):
        self.failure = failure
        super().__init__(failure.message)


class ForcedOverrideRejected(InterpreterNotFoundError):
    """The forced interpreter override does not report an accepted version."""

    @property
    def override(self) -> str:
        return self.failure.rejected_override or ""


class NoAcceptableInterpreterFound(InterpreterNotFoundError):
    """Every candidate was tried and none was accepted."""


class DownloaderNotFoundError(BuildCheckError):
    """A downloader script could not be found in any node_modules directory."""

    def __init__(self, module_path: str, searched: list):
        self.module_path = module_path
        self.searched = searched
        lines = [f"Cannot find module '{module_path}'.", "", "Searched:"]
        lines.extend(f"  {path}" for path in searched)
        lines.extend(["", "Run `npm install` in the project first."])
        super().__init__("\n".join(lines))


class MetadataError(BuildCheckError):
    """Application metadata is missing or incomplete."""
