"""Append-only log file of one acquisition session.

File layout::

    # k2000 <version>
    # Instrument: <identity>
    # <comment>
    # Acquisition start: <timestamp>
    # min	readout
    <elapsed minutes>	<reading>
    ...
    # Acquisition stop: <timestamp>

Rows are written through the file object's buffer and forced to disk by
`flush`, so an abnormal exit loses at most the rows since the last flush.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from k2000._version import __version__
from k2000.types import FileError, Sample
from k2000.util.defaults import PROGRAM_NAME


def clean_comment(text: str) -> str:
    """Cut a comment at its first line break."""
    for i, char in enumerate(text):
        if char in "\r\n":
            return text[:i]
    return text


class LogWriter:
    """Owns the session's output file.

    Use `LogWriter.open` to create one. `write_footer_and_close` ends the
    file; any later call raises `FileError`.
    """

    def __init__(self, path: Path, fh: TextIO):
        self.path = Path(path)
        self._fh: Optional[TextIO] = fh
        self.rows = 0
        self.flushes = 0

    @classmethod
    def open(cls, path: Path) -> "LogWriter":
        """Create (or truncate) `path` for writing.

        Whether an existing file may be overwritten is decided before this
        is called.
        """
        try:
            fh = open(path, "w", encoding="utf-8", newline="\n")
        except OSError as e:
            logger.error(f"Could not open '{path}' for writing: {e}")
            raise FileError(f"Could not open '{path}' for writing: {e}") from e
        logger.info(f"Writing data to {path}")
        log = cls(path, fh)
        log._write(f"# {PROGRAM_NAME} {__version__}\n")
        return log

    @property
    def closed(self) -> bool:
        return self._fh is None

    def _write(self, text: str) -> None:
        if self._fh is None:
            raise FileError(f"Log file '{self.path}' is already closed")
        try:
            self._fh.write(text)
        except OSError as e:
            raise FileError(f"Could not write to '{self.path}': {e}") from e

    def write_header(self, identity: str, comment: str, start_time: datetime) -> None:
        """Write the rest of the header, the program line is written by `open`."""
        self._write(f"# Instrument: {identity}\n")
        self._write(f"# {clean_comment(comment)}\n")
        self._write(f"# Acquisition start: {start_time.ctime()}\n")
        self._write("# min\treadout\n")

    def append_sample(self, sample: Sample) -> None:
        self._write(sample.as_row())
        self.rows += 1

    def flush(self) -> None:
        if self._fh is None:
            raise FileError(f"Log file '{self.path}' is already closed")
        try:
            self._fh.flush()
            os.fsync(self._fh.fileno())
        except OSError as e:
            raise FileError(f"Could not flush '{self.path}': {e}") from e
        self.flushes += 1
        logger.trace(f"Flushed {self.rows} rows to {self.path}")

    def write_footer_and_close(self, stop_time: datetime) -> None:
        try:
            self._write(f"# Acquisition stop: {stop_time.ctime()}\n")
        finally:
            fh, self._fh = self._fh, None
            if fh is not None:
                try:
                    fh.close()
                except OSError as e:
                    raise FileError(f"Could not close '{self.path}': {e}") from e
        logger.info(f"Closed {self.path} after {self.rows} rows")
