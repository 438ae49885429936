"""Build-bootstrap checks for Electron desktop application builds."""

__version__ = "0.1.0"
