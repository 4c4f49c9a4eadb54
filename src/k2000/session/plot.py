"""Live plot of the log file through a gnuplot subprocess.

Gnuplot re-reads the whole log file on every refresh, so the chart lags the
file by up to one flush cadence. Plotting is optional: if gnuplot cannot
be started, or its pipe breaks, graphics are switched off and acquisition
carries on.
"""

import subprocess
from pathlib import Path
from typing import Optional

from loguru import logger

from k2000.types import PlotLaunchError
from k2000.util.defaults import DEFAULT_GNUPLOT


class PlotPipeline:
    """Command stream to a gnuplot process.

    Parameters
    ----------
    executable : str
        Gnuplot executable (name on PATH or full path)
    """

    def __init__(self, executable: str = DEFAULT_GNUPLOT):
        self.executable = executable
        self.proc: Optional[subprocess.Popen] = None

    @property
    def active(self) -> bool:
        return self.proc is not None

    def start(self) -> "PlotPipeline":
        """Launch gnuplot with a writable stdin.

        Raises
        ------
        PlotLaunchError
            If the process could not be started
        """
        try:
            self.proc = subprocess.Popen(
                [self.executable],
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            self.proc = None
            raise PlotLaunchError(f"Cannot launch {self.executable}: {e}") from e
        logger.info(f"Started {self.executable} (pid {self.proc.pid})")
        return self

    def _send(self, *lines: str) -> None:
        if self.proc is None:
            return
        try:
            for line in lines:
                logger.trace(f"gnuplot: {line}")
                self.proc.stdin.write(line + "\n")
            self.proc.stdin.flush()
        except (BrokenPipeError, OSError, ValueError) as e:
            logger.warning(f"Lost connection to {self.executable}, graphics off: {e}")
            self.stop()

    def setup(self, title: str, ylabel: str) -> None:
        self._send(
            f"set mouse;set mouse labels; set style data lines; set title '{title}'",
            f"set grid xt; set grid yt; set xlabel 'min'; set ylabel '{ylabel}'",
        )

    def refresh(self, path: Path) -> None:
        self._send(f"plot '{path}' with lines title ''")

    def stop(self) -> None:
        """Close the command stream and wait for gnuplot to exit."""
        proc, self.proc = self.proc, None
        if proc is None:
            return
        try:
            proc.stdin.close()
        except OSError as e:
            logger.debug(f"Error closing gnuplot stdin: {e}")
        proc.wait()
        logger.info(f"{self.executable} exited with code {proc.returncode}")
