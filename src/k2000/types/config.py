"""Session configuration types."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path

from mashumaro import DataClassDictMixin

from k2000.util.defaults import (
    DEFAULT_FLUSH_EVERY,
    DEFAULT_GNUPLOT,
    DEFAULT_GPIB_ADDRESS,
    DEFAULT_INTERVAL,
    MAX_GPIB_ADDRESS,
    MAX_INTERVAL,
)

from .errors import ConfigError


class MeasurementMode(Enum):
    """The six measurement functions of the Keithley 2000.

    Each member carries the SCPI function name sent with `:func` and the
    y-axis label used for the live plot. The member value is the mode index
    used on the command line.
    """

    DCV = (0, "volt:dc", "V", "DC voltage")
    DCA = (1, "curr:dc", "mA", "DC current")
    OHM = (2, "res", "Ohm", "Resistance")
    TEMP = (3, "temp", "degrees C", "Temperature")
    CONT = (4, "cont", "Ohm", "Continuity")
    DIODE = (5, "diod", "mV", "Diode")

    def __new__(cls, index: int, function: str, unit: str, description: str):
        obj = object.__new__(cls)
        obj._value_ = index
        obj.function = function
        obj.unit = unit
        obj.description = description
        return obj

    @property
    def index(self) -> int:
        return self.value

    @classmethod
    def from_index(cls, index: int) -> "MeasurementMode":
        try:
            return cls(index)
        except ValueError:
            raise ConfigError(f"mode must be 0...{len(cls) - 1} (got {index})")


class SessionStatus(IntEnum):
    """Final status of a session, used as the process exit code."""

    OK = 0
    CONFIG_ERROR = 1
    FILE_ERROR = 4
    INSTRUMENT_ERROR = 5


class CancelReason(Enum):
    """Why a healthy session stopped sampling."""

    TIMEOUT = "timeout"
    USER = "user"


@dataclass(frozen=True, kw_only=True)
class SessionConfig(DataClassDictMixin):
    """Everything an acquisition session needs to know before it starts.

    Attributes
    ----------
    output : Path
        Log file to create
    address : int
        GPIB primary address (0-30)
    resource : str
        Full VISA resource string. Overrides `address` when given.
    mode : MeasurementMode
        Measurement function
    interval : float
        Seconds to sleep before each reading, 0 for free-running (max 60)
    blank_display : bool
        Show an "acquiring" message on the front panel instead of readings
    flush_every : int
        Flush the log (and refresh the plot) every this many samples
    stop_after : float
        Stop after this many minutes, 0 for endless
    comment : str
        Free text written to the log header
    graphics : bool
        Mirror the log to a live gnuplot window
    gnuplot : str
        Gnuplot executable
    """

    output: Path
    address: int = DEFAULT_GPIB_ADDRESS
    resource: str = ""
    mode: MeasurementMode = MeasurementMode.DCV
    interval: float = DEFAULT_INTERVAL
    blank_display: bool = False
    flush_every: int = DEFAULT_FLUSH_EVERY
    stop_after: float = 0.0
    comment: str = ""
    graphics: bool = True
    gnuplot: str = DEFAULT_GNUPLOT

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        validators = {
            "address": (
                0 <= self.address <= MAX_GPIB_ADDRESS,
                f"primary address must be 0...{MAX_GPIB_ADDRESS}",
            ),
            "interval": (
                0 <= self.interval <= MAX_INTERVAL,
                f"interval must be 0...{MAX_INTERVAL} s",
            ),
            "flush_every": (self.flush_every >= 1, "flush cadence must be positive"),
            "stop_after": (self.stop_after >= 0, "timeout must be positive"),
        }
        for param, (valid, message) in validators.items():
            if not valid:
                raise ConfigError(f"{message} (got {getattr(self, param)})")

    @property
    def visa_resource(self) -> str:
        if self.resource:
            return self.resource
        return f"GPIB0::{self.address}::INSTR"
