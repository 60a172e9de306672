"""Exception types raised by dynasym collaborators."""

from typing import Optional


class DynasymError(Exception):
    """Base class for all dynasym errors."""


class AgentError(DynasymError):
    """The debug agent could not be reached or returned a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StaticStoreError(DynasymError):
    """The static-analysis database could not be read or written."""


class DemangleError(DynasymError):
    """A demangling batch failed as a whole."""


class ConfigError(DynasymError):
    """Invalid configuration value."""
