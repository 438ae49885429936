"""Main entry point for the buildcheck CLI."""

import sys

from buildcheck.cli import main

__all__ = ["main"]

if __name__ == "__main__":
    sys.exit(main())
