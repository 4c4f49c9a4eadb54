from __future__ import annotations

import random
from typing import Optional

from pyvisa.constants import StatusCode

from k2000.device.keithley2000 import Keithley2000
from k2000.types import OVERFLOW_SENTINEL, TransportError

_UNIT_SUFFIX = {
    "volt:dc": "VDC",
    "curr:dc": "ADC",
    "res": "OHM",
    "temp": "C",
    "cont": "OHM",
    "diod": "VDC",
}


class MockKeithley2000(Keithley2000):
    """Simulated Keithley 2000, answers at the bus primitive level.

    Parameters
    ----------
    overflow_every : int, optional
        Every n-th reading is the overflow sentinel (0 to never overflow)
    fail_after : int, optional
        Raise a bus error on the reading after this many successful ones
    seed : int, optional
        Seed for the simulated values
    """

    IDENTITY = "KEITHLEY INSTRUMENTS INC.,MODEL 2000,0000000,A19 /A02 (mock)"

    def __init__(
        self,
        visa_address: str = "MOCK0::16::INSTR",
        overflow_every: int = 0,
        fail_after: Optional[int] = None,
        seed: Optional[int] = None,
    ):
        super().__init__(visa_address)
        self.overflow_every = overflow_every
        self.fail_after = fail_after
        self.sent: list[str] = []
        self.reads = 0
        self._connected = False
        self._function = "volt:dc"
        self._pending: Optional[str] = None
        self._rng = random.Random(seed)

    def open(self) -> None:
        self._connected = True

    def close(self) -> None:
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def _write(self, command: str) -> None:
        if not self._connected:
            raise TransportError("Device not connected", command=command)
        self.sent.append(command)
        if command.startswith(":func '"):
            self._function = command.split("'")[1]
        if command == "*idn?":
            self._pending = self.IDENTITY
        elif command == ":read?":
            self._pending = self._next_reading()

    def _read(self, command: str) -> str:
        if self._pending is None:
            self.last_error = int(StatusCode.error_timeout)
            raise TransportError(
                f"Error reading response to '{command}': timeout",
                command=command,
                code=self.last_error,
            )
        response, self._pending = self._pending, None
        return response

    def _next_reading(self) -> Optional[str]:
        if self.fail_after is not None and self.reads >= self.fail_after:
            return None
        self.reads += 1
        if self.overflow_every and self.reads % self.overflow_every == 0:
            return OVERFLOW_SENTINEL
        value = self._rng.gauss(1.0, 0.01)
        return f"{value:+.8E}{_UNIT_SUFFIX.get(self._function, '')}"
