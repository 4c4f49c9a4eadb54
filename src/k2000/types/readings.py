"""Readings and samples produced by the acquisition loop."""

from dataclasses import dataclass
from typing import Union

# Keithley 2000 response for an out-of-range measurement
OVERFLOW_SENTINEL = "+9.9E37"
OVERFLOW_TEXT = "OVERFLOW"


@dataclass(frozen=True)
class Numeric:
    """A reading as returned by the instrument, kept verbatim."""

    text: str


@dataclass(frozen=True)
class Overflow:
    """The instrument reported an out-of-range value."""

    @property
    def text(self) -> str:
        return OVERFLOW_TEXT


Reading = Union[Numeric, Overflow]


def classify_reading(raw: str) -> Reading:
    """Map a trimmed instrument response onto a `Reading`.

    Only the exact overflow sentinel becomes `Overflow`; anything else is
    kept as text, without parsing or rounding.
    """
    if raw == OVERFLOW_SENTINEL:
        return Overflow()
    return Numeric(raw)


@dataclass(frozen=True)
class Sample:
    """One loop iteration's result.

    Attributes
    ----------
    elapsed_min : float
        Minutes since the session's time anchor
    reading : Reading
        What the instrument answered
    """

    elapsed_min: float
    reading: Reading

    def as_row(self) -> str:
        """Tab separated log file row, newline terminated."""
        return f"{self.elapsed_min:.4f}\t{self.reading.text}\n"
