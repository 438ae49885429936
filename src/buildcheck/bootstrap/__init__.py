"""Bootstrap steps run before building the application."""

from .electron_bins import (
    ELECTRON_BINARIES,
    DownloadStatus,
    ElectronBinary,
    redownload_electron_bins,
    resolve_node_module,
)
from .requirements import (
    verify_machine_requirements,
    verify_node,
    verify_npm,
    verify_python,
)

__all__ = [
    # Machine requirements
    "verify_machine_requirements",
    "verify_node",
    "verify_npm",
    "verify_python",
    # Electron binaries
    "ELECTRON_BINARIES",
    "DownloadStatus",
    "ElectronBinary",
    "redownload_electron_bins",
    "resolve_node_module",
]
