"""Pytest configuration and shared fixtures."""

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Optional, Union

import pytest


class FakeRunner:
    """Stands in for subprocess when probing interpreter candidates.

    Maps a binary to the stdout it prints, or to an exception raised
    when it is launched. Unknown binaries raise FileNotFoundError.
    """

    def __init__(self, responses: Dict[str, Union[bytes, Exception]]):
        self.responses = responses
        self.calls: List[List[str]] = []

    def __call__(self, argv, env, timeout: Optional[float]) -> bytes:
        self.calls.append(list(argv))
        response = self.responses.get(argv[0])
        if response is None:
            raise FileNotFoundError(argv[0])
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def probed(self) -> List[str]:
        return [argv[0] for argv in self.calls]


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def failing_exit():
    """A probe that launched but exited non-zero."""
    return subprocess.CalledProcessError(1, ["python"])


@pytest.fixture
def project_dir() -> Generator[Path, None, None]:
    """Create a temporary Electron project.

    Creates:
        temp_dir/
            package.json            (electronVersion = 2.0.18)
            script/node_modules/
                electron-chromedriver/download-chromedriver.js
                electron-mksnapshot/download-mksnapshot.js
    """
    with tempfile.TemporaryDirectory() as tmp_dir:
        project_root = Path(tmp_dir)

        (project_root / "package.json").write_text(
            json.dumps({"name": "app", "electronVersion": "2.0.18"})
        )

        node_modules = project_root / "script" / "node_modules"
        chromedriver = node_modules / "electron-chromedriver"
        mksnapshot = node_modules / "electron-mksnapshot"
        chromedriver.mkdir(parents=True)
        mksnapshot.mkdir(parents=True)
        (chromedriver / "download-chromedriver.js").write_text("process.exit(0)\n")
        (mksnapshot / "download-mksnapshot.js").write_text("process.exit(0)\n")

        yield project_root


@pytest.fixture
def empty_project_dir() -> Generator[Path, None, None]:
    """Create an empty temporary directory."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)
