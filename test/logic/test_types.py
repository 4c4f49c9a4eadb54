import pytest

from k2000.types import (
    OVERFLOW_TEXT,
    ConfigError,
    MeasurementMode,
    Numeric,
    Overflow,
    Sample,
    SessionConfig,
    SessionStatus,
    classify_reading,
)

EXPECTED_MODES = [
    (0, "volt:dc", "V"),
    (1, "curr:dc", "mA"),
    (2, "res", "Ohm"),
    (3, "temp", "degrees C"),
    (4, "cont", "Ohm"),
    (5, "diod", "mV"),
]


class TestMeasurementMode:
    def test_table_matches(self):
        table = [(m.index, m.function, m.unit) for m in MeasurementMode]
        assert table == EXPECTED_MODES

    @pytest.mark.parametrize("index, function, unit", EXPECTED_MODES)
    def test_from_index(self, index, function, unit):
        mode = MeasurementMode.from_index(index)
        assert mode.function == function
        assert mode.unit == unit

    def test_functions_are_distinct(self):
        functions = [m.function for m in MeasurementMode]
        assert len(set(functions)) == len(MeasurementMode) == 6

    @pytest.mark.parametrize("index", [-1, 6, 42])
    def test_bad_index(self, index):
        with pytest.raises(ConfigError):
            MeasurementMode.from_index(index)


class TestReadings:
    def test_overflow_sentinel(self):
        reading = classify_reading("+9.9E37")
        assert isinstance(reading, Overflow)
        assert reading.text == OVERFLOW_TEXT == "OVERFLOW"

    @pytest.mark.parametrize(
        "raw",
        ["+9.9E36", "+9.90E37", "9.9E37", "+9.9E37VDC", " +9.9E37", "+1.23456789E-03VDC"],
    )
    def test_everything_else_is_verbatim(self, raw):
        reading = classify_reading(raw)
        assert reading == Numeric(raw)
        assert reading.text == raw

    def test_sample_row(self):
        sample = Sample(elapsed_min=1.23456, reading=Numeric("+1.000E+00VDC"))
        assert sample.as_row() == "1.2346\t+1.000E+00VDC\n"

    def test_overflow_row(self):
        assert Sample(0.0, Overflow()).as_row() == "0.0000\tOVERFLOW\n"


class TestSessionConfig:
    def test_defaults(self, tmp_path):
        config = SessionConfig(output=tmp_path / "x.dat")
        assert config.address == 16
        assert config.mode is MeasurementMode.DCV
        assert config.interval == 1.0
        assert config.flush_every == 100
        assert config.stop_after == 0.0
        assert config.graphics
        assert config.visa_resource == "GPIB0::16::INSTR"

    def test_resource_overrides_address(self, tmp_path):
        config = SessionConfig(output=tmp_path / "x.dat", resource="GPIB1::5::INSTR")
        assert config.visa_resource == "GPIB1::5::INSTR"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"address": 31},
            {"address": -1},
            {"interval": 60.1},
            {"interval": -0.1},
            {"flush_every": 0},
            {"stop_after": -1.0},
        ],
    )
    def test_validation(self, tmp_path, kwargs):
        with pytest.raises(ConfigError):
            SessionConfig(output=tmp_path / "x.dat", **kwargs)

    def test_dict_round_trip(self, tmp_path):
        config = SessionConfig(
            output=tmp_path / "x.dat", mode=MeasurementMode.TEMP, comment="bath"
        )
        data = config.to_dict()
        assert data["mode"] == 3
        assert SessionConfig.from_dict(data) == config

    def test_frozen(self, tmp_path):
        config = SessionConfig(output=tmp_path / "x.dat")
        with pytest.raises(AttributeError):
            config.address = 3

    def test_exit_codes(self):
        assert [int(s) for s in SessionStatus] == [0, 1, 4, 5]
