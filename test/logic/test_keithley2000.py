from unittest.mock import MagicMock, call

import pytest
import pyvisa
from pyvisa.constants import StatusCode

from k2000.device import Keithley2000, MockKeithley2000
from k2000.types import MeasurementMode, Numeric, Overflow, TransportError


def visa_timeout():
    return pyvisa.errors.VisaIOError(StatusCode.error_timeout)


@pytest.fixture
def rm():
    return MagicMock()


@pytest.fixture
def inst(rm):
    return rm.open_resource.return_value


@pytest.fixture
def dmm(rm):
    dmm = Keithley2000("GPIB0::16::INSTR", resource_manager=rm)
    dmm.open()
    yield dmm
    dmm.close()


class TestConnection:
    def test_open_configures_resource(self, rm, inst):
        dmm = Keithley2000("GPIB0::16::INSTR", resource_manager=rm, timeout=1500)
        dmm.open()
        rm.open_resource.assert_called_once_with("GPIB0::16::INSTR")
        assert inst.timeout == 1500
        assert inst.read_termination == "\n"
        assert dmm.is_connected()

    def test_open_failure(self, rm):
        rm.open_resource.side_effect = visa_timeout()
        dmm = Keithley2000("GPIB0::16::INSTR", resource_manager=rm)
        with pytest.raises(TransportError) as exc_info:
            dmm.open()
        assert exc_info.value.code == StatusCode.error_timeout
        assert not dmm.is_connected()

    def test_close_keeps_borrowed_resource_manager(self, dmm, rm, inst):
        dmm.close()
        inst.close.assert_called_once()
        rm.close.assert_not_called()
        assert not dmm.is_connected()
        dmm.close()  # second close is a no-op

    def test_not_connected(self, rm):
        dmm = Keithley2000("GPIB0::16::INSTR", resource_manager=rm)
        with pytest.raises(TransportError, match="not connected"):
            dmm.read_once()

    def test_context_manager(self, rm, inst):
        with Keithley2000("GPIB0::16::INSTR", resource_manager=rm) as dmm:
            assert dmm.is_connected()
        inst.close.assert_called_once()
        assert not dmm.is_connected()

    def test_address_must_be_string(self, rm):
        with pytest.raises(ValueError, match="visa_address"):
            Keithley2000(16, resource_manager=rm)


class TestCommands:
    def test_initialize(self, dmm, inst):
        dmm.initialize()
        inst.write.assert_called_once_with("*rst;*cls;:form:elem read,unit;*opc")

    def test_identity_strips_terminators(self, dmm, inst):
        inst.read.return_value = "KEITHLEY INSTRUMENTS INC.,MODEL 2000,123,A19\r\n"
        assert dmm.query_identity() == "KEITHLEY INSTRUMENTS INC.,MODEL 2000,123,A19"
        assert dmm.identity.endswith("A19")
        inst.write.assert_called_once_with("*idn?")

    @pytest.mark.parametrize(
        "mode, function",
        [(m, m.function) for m in MeasurementMode],
    )
    def test_configure_mode(self, dmm, inst, mode, function):
        dmm.configure_mode(mode)
        inst.write.assert_called_once_with(f":func '{function}';:init;*opc")

    def test_display(self, dmm, inst):
        dmm.set_display(True)
        dmm.set_display(False)
        assert inst.write.call_args_list == [
            call(":DISP:TEXT:DATA '-ACQUIRING- ';:DISP:TEXT:STAT 1"),
            call(":DISP:TEXT:STAT 0"),
        ]

    def test_shutdown(self, dmm, inst):
        dmm.shutdown()
        inst.write.assert_called_once_with("syst:pres")

    def test_read_numeric(self, dmm, inst):
        inst.read.return_value = "+1.23456789E-03VDC\r"
        assert dmm.read_once() == Numeric("+1.23456789E-03VDC")
        inst.write.assert_called_once_with(":read?")

    def test_read_overflow(self, dmm, inst):
        inst.read.return_value = "+9.9E37"
        assert isinstance(dmm.read_once(), Overflow)


class TestBusErrors:
    def test_write_failure(self, dmm, inst):
        inst.write.side_effect = visa_timeout()
        with pytest.raises(TransportError) as exc_info:
            dmm.read_once()
        assert exc_info.value.command == ":read?"
        assert "Error sending ':read?'" in str(exc_info.value)
        assert dmm.last_error == StatusCode.error_timeout

    def test_read_failure(self, dmm, inst):
        inst.read.side_effect = visa_timeout()
        with pytest.raises(TransportError) as exc_info:
            dmm.query_identity()
        assert exc_info.value.command == "*idn?"
        assert dmm.last_error == StatusCode.error_timeout

    def test_os_error(self, dmm, inst):
        inst.write.side_effect = OSError("bus gone")
        with pytest.raises(TransportError):
            dmm.initialize()


class TestMockKeithley2000:
    def test_dialogue(self):
        dmm = MockKeithley2000(seed=1)
        with dmm:
            dmm.initialize()
            assert "MODEL 2000" in dmm.query_identity()
            dmm.configure_mode(MeasurementMode.OHM)
            reading = dmm.read_once()
        assert reading.text.endswith("OHM")
        assert dmm.sent[:3] == [
            "*rst;*cls;:form:elem read,unit;*opc",
            "*idn?",
            ":func 'res';:init;*opc",
        ]

    def test_overflow_and_failure(self):
        dmm = MockKeithley2000(overflow_every=2, fail_after=2)
        dmm.open()
        assert isinstance(dmm.read_once(), Numeric)
        assert isinstance(dmm.read_once(), Overflow)
        with pytest.raises(TransportError):
            dmm.read_once()

    def test_closed(self):
        with pytest.raises(TransportError):
            MockKeithley2000().read_once()
