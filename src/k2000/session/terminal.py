"""Single key cancellation without waiting for Enter.

While acquiring, the controlling terminal is switched out of canonical
mode with echo and signals off. `poll_key` then checks for a pressed key
without blocking by briefly setting VMIN to 0 around a one byte read.

When stdin is not a terminal (pipes, test runners, cron) nothing is
changed and `poll_key` always returns None.
"""

import os
import sys
import termios
from typing import Optional

from loguru import logger


class TerminalController:
    """Owns the terminal mode for the duration of a session.

    Parameters
    ----------
    fd : int, optional
        File descriptor of the terminal, defaults to stdin
    """

    def __init__(self, fd: Optional[int] = None):
        self.fd = fd
        self._saved: Optional[list] = None
        self._polling: Optional[list] = None
        self._peek: Optional[str] = None

    @property
    def acquired(self) -> bool:
        return self._saved is not None

    def acquire(self) -> Optional[list]:
        """Save the current terminal attributes and enter polling mode.

        Returns the saved attributes (the mode token), or None if the fd is
        not a terminal.
        """
        if self._saved is not None:
            return self._saved
        if self.fd is None:
            try:
                self.fd = sys.stdin.fileno()
            except (AttributeError, OSError, ValueError):
                logger.debug("stdin has no file descriptor, key polling disabled")
                return None
        if not os.isatty(self.fd):
            logger.debug("stdin is not a terminal, key polling disabled")
            return None
        self._saved = termios.tcgetattr(self.fd)
        attrs = termios.tcgetattr(self.fd)
        attrs[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)
        attrs[6][termios.VMIN] = 1
        attrs[6][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSANOW, attrs)
        self._polling = attrs
        return self._saved

    def release(self) -> None:
        """Restore the attributes saved by `acquire`. Safe to call again."""
        saved, self._saved = self._saved, None
        self._polling = None
        if saved is None:
            return
        termios.tcsetattr(self.fd, termios.TCSANOW, saved)

    def kbhit(self) -> bool:
        """True if a key is waiting. Never blocks."""
        if self._peek is not None:
            return True
        if self._polling is None:
            return False
        self._polling[6][termios.VMIN] = 0
        termios.tcsetattr(self.fd, termios.TCSANOW, self._polling)
        try:
            data = os.read(self.fd, 1)
        finally:
            self._polling[6][termios.VMIN] = 1
            termios.tcsetattr(self.fd, termios.TCSANOW, self._polling)
        if data:
            self._peek = data.decode("latin-1")
            return True
        return False

    def read_key(self) -> Optional[str]:
        """Return the buffered key, if any, and clear the buffer."""
        key, self._peek = self._peek, None
        return key

    def poll_key(self) -> Optional[str]:
        if self.kbhit():
            return self.read_key()
        return None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
