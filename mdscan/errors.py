"""Exception hierarchy for fatal mdscan failures."""

from __future__ import annotations


class MdscanError(RuntimeError):
    """Base class for errors that abort a scan."""


class ConfigError(MdscanError):
    """Raised when the configuration file cannot be parsed."""


class InvalidRoot(MdscanError):
    """Raised when the scan root does not exist or is not a directory."""


__all__ = ["ConfigError", "InvalidRoot", "MdscanError"]
