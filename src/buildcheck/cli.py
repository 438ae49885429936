"""Command line entry point for build-bootstrap checks."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .bootstrap import (
    DownloadStatus,
    redownload_electron_bins,
    verify_machine_requirements,
    verify_python,
)
from .config import BuildCheckConfig, load_config, load_environment
from .errors import BuildCheckError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildcheck",
        description="Check machine requirements and prepare Electron binaries before a build",
    )
    parser.add_argument(
        "--project",
        type=Path,
        default=Path.cwd(),
        help="Project root containing package.json (default: current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser("verify", help="Verify Node, npm and Python versions")
    verify.add_argument("--ci", action="store_true", help="Apply CI minimum versions")

    subparsers.add_parser("find-python", help="Find a Python usable by node-gyp")

    redownload = subparsers.add_parser(
        "redownload-electron-bins",
        help="Re-download chromedriver and mksnapshot if ELECTRON_CUSTOM_VERSION is stale",
    )
    redownload.add_argument(
        "--stream",
        action="store_true",
        default=None,
        help="Log downloader output as it arrives",
    )
    redownload.add_argument("--node", help="Node executable used to run the downloaders")

    return parser


def _redownload(config: BuildCheckConfig, args: argparse.Namespace) -> int:
    statuses = asyncio.run(
        redownload_electron_bins(config, stream_output=args.stream, node=args.node)
    )
    if any(status is DownloadStatus.ERROR for status in statuses.values()):
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    project = args.project.resolve()
    load_environment(project)
    config = load_config(project)

    try:
        if args.command == "verify":
            verify_machine_requirements(config, ci=args.ci)
        elif args.command == "find-python":
            verify_python(config)
        elif args.command == "redownload-electron-bins":
            return _redownload(config, args)
    except BuildCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
