"""Exception types raised by k2000.

`ConfigError` is raised before a session starts, `FileError` and
`TransportError` abort a running session, and `PlotLaunchError` is only
ever logged: the session continues without graphics.
"""

from typing import Optional


class K2000Error(Exception):
    """Base class for all k2000 errors."""


class ConfigError(K2000Error, ValueError):
    """Session configuration rejected."""


class FileError(K2000Error):
    """Log file could not be created or written."""


class TransportError(K2000Error):
    """A write or read on the instrument bus failed.

    Parameters
    ----------
    message : str
        Human readable description
    command : str, optional
        The command that was being sent (or answered) when the bus failed
    code : int, optional
        VISA status code reported by the bus, if any
    """

    def __init__(
        self, message: str, command: Optional[str] = None, code: Optional[int] = None
    ):
        super().__init__(message)
        self.command = command
        self.code = code


class PlotLaunchError(K2000Error):
    """The external plotting process could not be started."""
