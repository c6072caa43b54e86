"""Tests for value transforms and write coercion."""

import pytest

from climasync.base.constants import DEVICE_LOAD_TYPE_OPTIONS, MODE_OPTIONS
from climasync.base.transforms import (
    celsius_to_fahrenheit,
    decode_mode,
    decode_option,
    decode_schedule,
    dynamic_temperature,
    encode_option,
    encode_vpd,
    is_celsius,
    parse_time,
    round_half_up,
    scale_sensor,
    scale_vpd,
    seconds_to_minutes,
    to_bool,
    to_float,
    to_int,
    to_option,
    to_time,
)
from climasync.errors import SettingValidationError


@pytest.mark.unit
class TestReadingTransforms:
    """Test raw-to-tree conversions."""

    def test_sensor_scaling(self):
        """Sensor readings arrive in hundredths."""
        assert scale_sensor(2350) == 23.5
        assert scale_sensor(5512) == 55.12
        assert scale_sensor(None) is None

    @pytest.mark.parametrize("raw", ["n/a", True, [2350]])
    def test_non_numeric_readings_are_dropped(self, raw):
        assert scale_sensor(raw) is None
        assert scale_vpd(raw) is None

    def test_vpd_scaling(self):
        """VPD thresholds arrive in tenths of kPa."""
        assert scale_vpd(47) == 4.7
        assert scale_vpd(0) == 0.0

    def test_seconds_to_minutes_truncates(self):
        assert seconds_to_minutes(600) == 10
        assert seconds_to_minutes(659) == 10
        assert seconds_to_minutes(None) is None

    def test_schedule_decoding(self):
        """The sentinel disables a schedule and hides its time."""
        assert decode_schedule(90) == (True, "01:30")
        assert decode_schedule(0) == (True, "00:00")
        assert decode_schedule(1439) == (True, "23:59")
        assert decode_schedule(65535) == (False, None)
        assert decode_schedule(None) == (None, None)

    def test_mode_decoding_is_one_based(self):
        assert decode_mode(1) == "Off"
        assert decode_mode(2) == "On"
        assert decode_mode(8) == "VPD"
        assert decode_mode(None) is None

    def test_out_of_range_option_is_skipped(self, caplog):
        """Unknown indices are reported and produce no value."""
        assert decode_mode(9) is None
        assert decode_option(DEVICE_LOAD_TYPE_OPTIONS, 3, "load type") is None
        assert "load type" in caplog.text

    def test_unit_flag(self):
        assert is_celsius(1) is True
        assert is_celsius(0) is False
        assert is_celsius(None) is True


@pytest.mark.unit
class TestWritingTransforms:
    """Test tree-to-raw conversions."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -3

    def test_vpd_encoding(self):
        assert encode_vpd(4.7) == 47
        assert encode_vpd(0.05) == 1

    def test_fahrenheit_companion(self):
        assert celsius_to_fahrenheit(30) == 86
        assert celsius_to_fahrenheit(25) == 77
        assert celsius_to_fahrenheit(0) == 32

    def test_dynamic_temperature_pairs(self):
        """One Celsius step equals two Fahrenheit steps."""
        assert dynamic_temperature(3, celsius=True) == (3, 6)
        assert dynamic_temperature(7, celsius=False) == (3, 7)

    def test_encode_option(self):
        assert encode_option(MODE_OPTIONS, "Cycle") == 5
        with pytest.raises(SettingValidationError):
            encode_option(MODE_OPTIONS, "Turbo")


@pytest.mark.unit
class TestCoercion:
    """Test coercion of loosely typed user writes."""

    @pytest.mark.parametrize("value", [True, 1, "true", "ON", " yes "])
    def test_truthy_values(self, value):
        assert to_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "off", "No"])
    def test_falsy_values(self, value):
        assert to_bool(value) is False

    @pytest.mark.parametrize("value", [2, "maybe", None, 0.5])
    def test_invalid_booleans(self, value):
        with pytest.raises(SettingValidationError):
            to_bool(value)

    def test_int_truncates_and_checks_range(self):
        assert to_int("7.9") == 7
        assert to_int(10, minimum=0, maximum=10) == 10
        with pytest.raises(SettingValidationError):
            to_int(11, minimum=0, maximum=10)
        with pytest.raises(SettingValidationError):
            to_int(True)
        with pytest.raises(SettingValidationError):
            to_int("fast")

    def test_float_rounding(self):
        assert to_float("4.66") == 4.7
        with pytest.raises(SettingValidationError):
            to_float(float("nan"))
        with pytest.raises(SettingValidationError):
            to_float(10.0, minimum=0, maximum=9.9)

    def test_option_by_name_or_index(self):
        assert to_option("cycle", MODE_OPTIONS) == "Cycle"
        assert to_option(" timer to on ", MODE_OPTIONS) == "Timer to On"
        assert to_option(2, MODE_OPTIONS) == "Auto"
        assert to_option("7", MODE_OPTIONS) == "VPD"
        with pytest.raises(SettingValidationError):
            to_option(8, MODE_OPTIONS)
        with pytest.raises(SettingValidationError):
            to_option(True, MODE_OPTIONS)

    def test_time_parsing(self):
        assert parse_time("01:30") == 90
        assert parse_time("0:00") == 0
        assert parse_time("23:59") == 1439
        assert to_time("7:05") == "07:05"

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", 90, "1:3"])
    def test_invalid_times(self, value):
        with pytest.raises(SettingValidationError):
            parse_time(value)
