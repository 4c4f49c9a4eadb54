"""Acquisition session and the resources it owns.

- `AcquisitionSession`: the sampling loop and its termination policy
- `LogWriter`: the data file
- `PlotPipeline`: optional live gnuplot window
- `TerminalController`: single key cancellation
"""

from .logfile import LogWriter, clean_comment
from .plot import PlotPipeline
from .session import AcquisitionSession, SessionResult, SessionState
from .terminal import TerminalController

__all__ = [
    "AcquisitionSession",
    "LogWriter",
    "PlotPipeline",
    "SessionResult",
    "SessionState",
    "TerminalController",
    "clean_comment",
]
