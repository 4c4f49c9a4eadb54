"""The acquisition session: configure, sample, persist, plot, tear down.

A session runs single threaded. Each loop iteration sleeps the configured
interval (none in free-running mode), takes one reading, appends it to the
log and, every `flush_every` samples, flushes the log and refreshes the
plot. Cancellation (timeout or a quit key) is checked once per iteration,
after that iteration's sample has been logged.

A bus read cannot be interrupted: if the instrument hangs without the VISA
timeout firing, the session hangs with it.

Teardown always runs, in this order: flush, footer and close the log,
restore the front panel, preset the instrument, stop gnuplot, close the
bus connection, restore the terminal.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import click
from loguru import logger

from k2000.device import Keithley2000
from k2000.types import (
    CancelReason,
    FileError,
    PlotLaunchError,
    Sample,
    SessionConfig,
    SessionStatus,
    TransportError,
)
from k2000.util.defaults import QUIT_KEYS
from k2000.util.logging import format_error_response

from .logfile import LogWriter
from .plot import PlotPipeline
from .terminal import TerminalController


@dataclass
class SessionState:
    """Mutable loop state, owned by the session."""

    samples: int = 0
    t0: float = 0.0
    cancel: Optional[CancelReason] = None
    status: SessionStatus = SessionStatus.OK
    error: str = ""


@dataclass(frozen=True)
class SessionResult:
    """Outcome of `AcquisitionSession.run`."""

    status: SessionStatus
    samples: int
    cancel: Optional[CancelReason] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == SessionStatus.OK


class AcquisitionSession:
    """Runs one acquisition from instrument setup to teardown.

    Parameters
    ----------
    config : SessionConfig
        Validated settings
    instrument : Keithley2000
        Not yet opened; the session opens and closes it
    terminal : TerminalController, optional
        Defaults to one on stdin
    plot : PlotPipeline, optional
        Defaults to gnuplot from `config.gnuplot` when graphics are enabled
    clock : callable
        Monotonic seconds, used for elapsed time
    sleep : callable
        Pacing sleep
    now : callable
        Wall clock for the log header and footer
    show_progress : bool
        Echo every sample on stdout
    """

    def __init__(
        self,
        config: SessionConfig,
        instrument: Keithley2000,
        terminal: Optional[TerminalController] = None,
        plot: Optional[PlotPipeline] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = datetime.now,
        show_progress: bool = True,
    ):
        self.config = config
        self.instrument = instrument
        self.terminal = terminal if terminal is not None else TerminalController()
        if plot is None and config.graphics:
            plot = PlotPipeline(config.gnuplot)
        self.plot = plot if config.graphics else None
        self.log: Optional[LogWriter] = None
        self._clock = clock
        self._sleep = sleep
        self._now = now
        self._show_progress = show_progress
        self._display_blanked = False
        self._started = False
        self.state = SessionState()

    # =========================================================================
    # public
    # =========================================================================

    def run(self) -> SessionResult:
        """Run the session to completion. Never raises for bus or file errors."""
        if self._started:
            raise RuntimeError("An AcquisitionSession can only be run once")
        self._started = True
        state = self.state
        logger.debug(f"Session config: {self.config.to_dict()}")
        try:
            self._init()
            self._sample_loop()
        except FileError as e:
            self._fail(SessionStatus.FILE_ERROR, e)
        except TransportError as e:
            self._fail(SessionStatus.INSTRUMENT_ERROR, e)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            state.cancel = CancelReason.USER
        finally:
            self._teardown()

        if state.cancel is not None:
            logger.info(f"Acquisition stopped ({state.cancel.value})")
        logger.info(f"Session ended: {state.status.name}, {state.samples} samples")
        return SessionResult(
            status=state.status,
            samples=state.samples,
            cancel=state.cancel,
            error=state.error,
        )

    # =========================================================================
    # states
    # =========================================================================

    def _init(self) -> None:
        cfg = self.config
        self.terminal.acquire()
        self.log = LogWriter.open(cfg.output)

        if self.plot is not None:
            try:
                self.plot.start()
                self.plot.setup(title=str(cfg.output), ylabel=cfg.mode.unit)
            except PlotLaunchError as e:
                logger.warning(f"{e}, will continue without graphics")
                click.echo(f"\n{e}, will continue without graphics.", err=True)
                self.plot = None

        self.instrument.open()
        self.instrument.initialize()
        identity = self.instrument.query_identity()
        if cfg.blank_display:
            self.instrument.set_display(True)
            self._display_blanked = True
        self.instrument.configure_mode(cfg.mode)
        logger.info(f"Measuring {cfg.mode.description} ({cfg.mode.function})")

        self.log.write_header(identity, cfg.comment, self._now())
        self.state.t0 = self._clock()

    def _sample_loop(self) -> None:
        cfg = self.config
        state = self.state
        while state.cancel is None:
            if cfg.interval > 0:
                self._sleep(cfg.interval)

            reading = self.instrument.read_once()
            elapsed = (self._clock() - state.t0) / 60.0
            sample = Sample(elapsed_min=elapsed, reading=reading)
            self.log.append_sample(sample)
            state.samples += 1
            if self._show_progress:
                click.echo(
                    f"{state.samples:10d} {elapsed:10.2f} min    {reading.text}\r",
                    nl=False,
                )

            if state.samples % cfg.flush_every == 0:
                self.log.flush()
                if self.plot is not None:
                    self.plot.refresh(cfg.output)

            if cfg.stop_after > 0 and elapsed > cfg.stop_after:
                state.cancel = CancelReason.TIMEOUT
            else:
                key = self.terminal.poll_key()
                if key is not None and key in QUIT_KEYS:
                    state.cancel = CancelReason.USER

    def _teardown(self) -> None:
        state = self.state

        if self.log is not None and not self.log.closed:
            try:
                self.log.flush()
            except FileError as e:
                logger.error(f"Error flushing log file: {e}")
                if state.status == SessionStatus.OK:
                    self._fail(SessionStatus.FILE_ERROR, e)
            # closes the file even when the footer cannot be written
            try:
                self.log.write_footer_and_close(self._now())
            except FileError as e:
                logger.error(f"Error closing log file: {e}")
                if state.status == SessionStatus.OK:
                    self._fail(SessionStatus.FILE_ERROR, e)

        if self.instrument.is_connected():
            if self._display_blanked:
                try:
                    self.instrument.set_display(False)
                except TransportError as e:
                    logger.warning(f"Could not restore instrument display: {e}")
                self._display_blanked = False
            try:
                self.instrument.shutdown()
            except TransportError as e:
                logger.warning(f"Could not restore instrument defaults: {e}")

        if self.plot is not None:
            try:
                self.plot.stop()
            except OSError as e:
                logger.warning(f"Error stopping gnuplot: {e}")

        self.instrument.close()
        self.terminal.release()

    def _fail(self, status: SessionStatus, error: Exception) -> None:
        logger.error(f"{status.name}: {error}")
        logger.debug(format_error_response())
        click.echo(f"\n{error}", err=True)
        self.state.status = status
        self.state.error = str(error)
