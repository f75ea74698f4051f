"""Exceptions raised by the sync components."""

from typing import Optional


class SyncError(Exception):
    """Base class for every error the sync reports."""


class ConfigError(SyncError, ValueError):
    """A required setting is missing. Fatal before any problem is processed."""


class ProtocolError(SyncError):
    """A service response does not have the expected shape."""


class TransportError(SyncError):
    """A service answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(SyncError):
    """The requested submission or file does not exist."""


class NoSolutionError(SyncError):
    """The problem has no accepted submission."""
