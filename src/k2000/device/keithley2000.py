"""Class for controlling the Keithley 2000 multimeter.

Uses VISA communication (normally GPIB) and the instrument's SCPI command set.
Only what unattended data logging needs is implemented: reset, identity,
function select with continuous triggering, single readings, front panel
text and restoring the power-on defaults.

Every bus failure is raised as `TransportError`, with the command that
failed attached.
"""

from typing import Optional

import pyvisa
from loguru import logger

from k2000.device.device import Device
from k2000.types import MeasurementMode, Reading, TransportError, classify_reading
from k2000.util.defaults import DEFAULT_VISA_TIMEOUT

# SCPI command vocabulary
CMD_INITIALIZE = "*rst;*cls;:form:elem read,unit;*opc"
CMD_IDENTITY = "*idn?"
CMD_SELECT_FUNCTION = ":func '{function}';:init;*opc"
CMD_DISPLAY_TEXT_ON = ":DISP:TEXT:DATA '{text}';:DISP:TEXT:STAT 1"
CMD_DISPLAY_TEXT_OFF = ":DISP:TEXT:STAT 0"
CMD_READ = ":read?"
CMD_RESTORE_DEFAULTS = "syst:pres"

ACQUIRING_MESSAGE = "-ACQUIRING- "


class Keithley2000(Device):
    """Keithley 2000 digital multimeter.

    Parameters
    ----------
    visa_address : str
        VISA resource address, e.g. "GPIB0::16::INSTR"
    resource_manager : pyvisa.ResourceManager, optional
        If None, one is created on `open` and closed again on `close`.
    timeout : int
        Bus I/O timeout in milliseconds

    Attributes
    ----------
    identity : str
        Identity string reported by the instrument, set by `query_identity`
    last_error : int or None
        VISA status code of the most recent bus failure
    """

    required_config = {"visa_address": str}

    def __init__(
        self,
        visa_address: str,
        resource_manager: Optional[pyvisa.ResourceManager] = None,
        timeout: int = DEFAULT_VISA_TIMEOUT,
    ):
        super().__init__(visa_address=visa_address)
        self.rm = resource_manager
        self.inst = None
        self._owns_rm = False
        self._timeout = timeout
        self.identity = ""
        self.last_error: Optional[int] = None

    def open(self) -> None:
        """Open the bus connection to the instrument."""
        try:
            if self.rm is None:
                self.rm = pyvisa.ResourceManager()
                self._owns_rm = True
            self.inst = self.rm.open_resource(self.visa_address)
            self.inst.timeout = self._timeout
            self.inst.read_termination = "\n"
            self.inst.write_termination = "\n"
        except (pyvisa.Error, OSError, ValueError) as e:
            self.last_error = getattr(e, "error_code", None)
            logger.error(f"Error trying to open {self.visa_address}: {e}")
            self.inst = None
            raise TransportError(
                f"Could not open instrument at {self.visa_address}: {e}",
                code=self.last_error,
            ) from e
        logger.info(f"Connected to {self.visa_address}")

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self.inst is not None:
            try:
                self.inst.close()
            except Exception as e:
                logger.error(f"Error closing instrument: {e}")
            finally:
                self.inst = None

        if self._owns_rm and self.rm is not None:
            try:
                self.rm.close()
            except Exception as e:
                logger.error(f"Error closing resource manager: {e}")
            finally:
                self.rm = None
                self._owns_rm = False

    def is_connected(self) -> bool:
        return self.inst is not None

    # =========================================================================
    # bus primitives
    # =========================================================================

    def _write(self, command: str) -> None:
        if self.inst is None:
            raise TransportError("Device not connected", command=command)
        logger.trace(f"Writing: {command}")
        try:
            self.inst.write(command)
        except (pyvisa.Error, OSError) as e:
            self.last_error = getattr(e, "error_code", None)
            logger.error(f"Error sending '{command}': {e}")
            raise TransportError(
                f"Error sending '{command}': {e}", command=command, code=self.last_error
            ) from e

    def _read(self, command: str) -> str:
        """Read one response line, `command` is the query it answers."""
        if self.inst is None:
            raise TransportError("Device not connected", command=command)
        try:
            response = self.inst.read()
        except (pyvisa.Error, OSError) as e:
            self.last_error = getattr(e, "error_code", None)
            logger.error(f"Error reading response to '{command}': {e}")
            raise TransportError(
                f"Error reading response to '{command}': {e}",
                command=command,
                code=self.last_error,
            ) from e
        response = response.rstrip("\r\n")
        logger.trace(f"Read: {response}")
        return response

    def _query(self, command: str) -> str:
        self._write(command)
        return self._read(command)

    # =========================================================================
    # protocol
    # =========================================================================

    def initialize(self) -> None:
        """Reset, clear status and select 'reading,unit' response format."""
        self._write(CMD_INITIALIZE)

    def query_identity(self) -> str:
        self.identity = self._query(CMD_IDENTITY)
        logger.info(f"Instrument: {self.identity}")
        return self.identity

    def configure_mode(self, mode: MeasurementMode) -> None:
        """Select the measurement function and start continuous acquisition."""
        self._write(CMD_SELECT_FUNCTION.format(function=mode.function))

    def set_display(self, blank: bool) -> None:
        """Show a fixed message on the front panel, or return to readings."""
        if blank:
            self._write(CMD_DISPLAY_TEXT_ON.format(text=ACQUIRING_MESSAGE))
        else:
            self._write(CMD_DISPLAY_TEXT_OFF)

    def read_once(self) -> Reading:
        return classify_reading(self._query(CMD_READ))

    def shutdown(self) -> None:
        """Restore the instrument's preset state."""
        self._write(CMD_RESTORE_DEFAULTS)
