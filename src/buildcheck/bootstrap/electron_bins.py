"""Re-download chromedriver and mksnapshot for the pinned Electron version.

The electron-chromedriver and electron-mksnapshot packages fetch their
binaries for whatever ELECTRON_CUSTOM_VERSION says. When that variable
does not match the version the app is built against, both downloaders
are run again with the variable set.
"""

import asyncio
import codecs
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, MutableMapping, Optional

from ..config import BuildCheckConfig, get_electron_version
from ..errors import DownloaderNotFoundError

logger = logging.getLogger(__name__)

VERSION_ENV = "ELECTRON_CUSTOM_VERSION"

STREAM_CHUNK_SIZE = 4096


class DownloadStatus(Enum):
    """Outcome of one downloader run."""

    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ElectronBinary:
    """A binary shipped by an electron-* npm package."""

    name: str
    downloader: str  # Module path resolved through node_modules


ELECTRON_BINARIES = [
    ElectronBinary(
        name="chromedriver",
        downloader="electron-chromedriver/download-chromedriver.js",
    ),
    ElectronBinary(
        name="mksnapshot",
        downloader="electron-mksnapshot/download-mksnapshot.js",
    ),
]


def needs_redownload(env: Mapping[str, str], wanted_version: str) -> bool:
    return env.get(VERSION_ENV) != wanted_version


def node_modules_dirs(project_root: Path) -> List[Path]:
    """node_modules directories searched for downloader scripts, in order."""
    project_root = Path(project_root).resolve()
    dirs = [project_root / "script" / "node_modules"]
    for directory in [project_root, *project_root.parents]:
        dirs.append(directory / "node_modules")
    return dirs


def resolve_node_module(project_root: Path, module_path: str) -> Path:
    """Find a file inside an installed npm package.

    Raises:
        DownloaderNotFoundError: If no node_modules directory contains it
    """
    searched = []
    for directory in node_modules_dirs(project_root):
        candidate = directory / module_path
        if candidate.is_file():
            return candidate
        searched.append(str(candidate))

    raise DownloaderNotFoundError(module_path, searched)


def get_node_executable(config: BuildCheckConfig, env: Mapping[str, str]) -> str:
    """Node used to run downloaders: config, then npm's own node, then PATH."""
    if config.paths.node:
        return config.resolve_path(config.paths.node)
    return env.get("npm_node_execpath") or "node"


async def _log_stream(stream: Optional[asyncio.StreamReader], level: int) -> None:
    """Forward child output to the log in fixed-size chunks.

    Progress bars redrawn with '\\r' can emit far more than one line's
    worth of data without a newline, so output is never read by line.
    """
    if stream is None:
        return

    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(STREAM_CHUNK_SIZE)
        text = decoder.decode(chunk, final=not chunk)
        for line in text.splitlines():
            if line.strip():
                logger.log(level, "%s", line.rstrip())
        if not chunk:
            break


async def run_downloader(
    binary: ElectronBinary,
    node: str,
    script: Path,
    env: Mapping[str, str],
    stream_output: bool = False,
) -> DownloadStatus:
    """Run one downloader script with Node.

    Args:
        binary: Binary being downloaded
        node: Node executable
        script: Resolved downloader script
        env: Environment for the child process
        stream_output: Log child stdout at INFO and stderr at ERROR

    Returns:
        SUCCESS if the downloader exited with 0, ERROR otherwise
    """
    output = asyncio.subprocess.PIPE if stream_output else asyncio.subprocess.DEVNULL

    try:
        process = await asyncio.create_subprocess_exec(
            node,
            str(script),
            stdout=output,
            stderr=output,
            env=dict(env),
        )
    except OSError as e:
        logger.error("Failed to start %s downloader: %s", binary.name, e)
        status = DownloadStatus.ERROR
    else:
        try:
            if stream_output:
                await asyncio.gather(
                    _log_stream(process.stdout, logging.INFO),
                    _log_stream(process.stderr, logging.ERROR),
                )
        finally:
            returncode = await process.wait()
        status = DownloadStatus.SUCCESS if returncode == 0 else DownloadStatus.ERROR

    logger.info("Done re-downloading %s. Status: %s", binary.name, status.value)
    return status


async def redownload_electron_bins(
    config: BuildCheckConfig,
    env: Optional[MutableMapping[str, str]] = None,
    stream_output: Optional[bool] = None,
    node: Optional[str] = None,
) -> Dict[str, DownloadStatus]:
    """Re-download chromedriver and mksnapshot if the pinned version changed.

    Args:
        config: buildcheck configuration
        env: Environment to check and update (default: os.environ)
        stream_output: Override config.electron.stream_output
        node: Override the Node executable

    Returns:
        Dict mapping binary name to its download status

    Raises:
        MetadataError: If the wanted Electron version is unknown
        DownloaderNotFoundError: If a downloader script is not installed
    """
    env = os.environ if env is None else env
    wanted = get_electron_version(config)
    current = env.get(VERSION_ENV)

    if not needs_redownload(env, wanted):
        logger.info(
            'env var "%s" is already set correctly. '
            "(No need to re-download chromedriver or mksnapshot). Skipping.",
            VERSION_ENV,
        )
        return {binary.name: DownloadStatus.SKIPPED for binary in ELECTRON_BINARIES}

    logger.info(
        "env var %s is either not set, or doesn't match electronVersion "
        '(is: "%s", wanted: "%s"). Re-downloading chromedriver and mksnapshot.',
        VERSION_ENV,
        current,
        wanted,
    )

    scripts = [
        resolve_node_module(config.project_root, binary.downloader)
        for binary in ELECTRON_BINARIES
    ]

    env[VERSION_ENV] = wanted
    node = node or get_node_executable(config, env)
    if stream_output is None:
        stream_output = config.electron.stream_output

    statuses = await asyncio.gather(
        *(
            run_downloader(binary, node, script, env, stream_output)
            for binary, script in zip(ELECTRON_BINARIES, scripts)
        )
    )
    return {binary.name: status for binary, status in zip(ELECTRON_BINARIES, statuses)}
