"""Tests for decoded mode and advanced settings records."""

import pytest

from climasync.base.settings import AdvancedSettings, ModeSettings

from tests.unit.mocks import controller_record, mode_record, port_settings_record


@pytest.mark.unit
class TestModeSettings:
    """Test decoding of a port's mode-settings record."""

    def test_core_fields(self):
        settings = ModeSettings.from_record(mode_record())

        assert settings.active == "On"
        assert settings.is_on is True
        assert settings.on_speed == 5
        assert settings.off_speed == 0

    def test_nodes(self):
        nodes = ModeSettings.from_record(mode_record()).nodes()

        assert nodes["active"] == "On"
        assert nodes["offSpeed"] == 0
        assert "onSpeed" not in nodes
        assert nodes["timer.toOnMinutes"] == 10
        assert nodes["cycle.onMinutes"] == 60
        assert nodes["cycle.offMinutes"] == 30
        assert nodes["schedule.startEnabled"] is True
        assert nodes["schedule.startTime"] == "01:30"
        assert nodes["schedule.endEnabled"] is False
        assert nodes["schedule.endTime"] is None
        assert nodes["auto.settingsMode"] == "Auto"
        assert nodes["auto.tempHighEnabled"] is True
        assert nodes["auto.tempHighTrigger"] == 30
        assert nodes["auto.humidityLowTrigger"] == 40
        assert nodes["vpd.settingsMode"] == "Target"
        assert nodes["vpd.highTrigger"] == 4.7
        assert nodes["vpd.lowTrigger"] == 0.8
        assert nodes["vpd.target"] == 1.2

    def test_missing_fields_are_none(self):
        nodes = ModeSettings.from_record({"atType": 1}).nodes()

        assert nodes["active"] == "Off"
        assert nodes["timer.toOnMinutes"] is None
        assert nodes["vpd.target"] is None

    def test_non_numeric_fields_ignored(self):
        settings = ModeSettings.from_record(
            mode_record(onSpead="5", activeHt=True)
        )
        assert settings.on_speed is None
        assert settings.auto.temp_high_enabled is None


@pytest.mark.unit
class TestAdvancedSettings:
    """Test decoding of advanced settings for controllers and ports."""

    def test_controller_nodes_celsius(self):
        nodes = AdvancedSettings.from_record(controller_record()).controller_nodes()

        assert nodes == {
            "temperatureUnit": "C",
            "temperatureCalibration": 2,
            "humidityCalibration": -3,
            "vpdLeafTemperatureOffset": 1,
            "outsideTemperature": "Lower",
            "outsideHumidity": "Higher",
        }

    def test_controller_nodes_fahrenheit(self):
        record = controller_record(devCompany=0)
        nodes = AdvancedSettings.from_record(record).controller_nodes()

        assert nodes["temperatureUnit"] == "F"
        assert nodes["temperatureCalibration"] == 4
        assert nodes["vpdLeafTemperatureOffset"] == 2

    def test_port_nodes_use_given_unit(self):
        """Port records carry no unit; the controller's applies."""
        record = port_settings_record()

        celsius = AdvancedSettings.from_record(record, unit_flag=1).port_nodes()
        fahrenheit = AdvancedSettings.from_record(record, unit_flag=0).port_nodes()

        assert celsius["dynamicTransitionTemp"] == 3
        assert celsius["dynamicBufferTemp"] == 1
        assert fahrenheit["dynamicTransitionTemp"] == 6
        assert fahrenheit["dynamicBufferTemp"] == 2

    def test_port_nodes(self):
        nodes = AdvancedSettings.from_record(
            port_settings_record(), unit_flag=1
        ).port_nodes()

        assert nodes["deviceType"] == 6
        assert nodes["dynamicResponse"] == "Buffer"
        assert nodes["dynamicTransitionHumidity"] == 4
        assert nodes["dynamicTransitionVPD"] == 0.2
        assert nodes["dynamicBufferVPD"] == 0.3
        assert nodes["sunriseTimerEnabled"] is True
        assert nodes["sunriseTimerMinutes"] == 15

    def test_unknown_unit_skips_temperatures(self):
        nodes = AdvancedSettings.from_record(port_settings_record()).port_nodes()
        assert nodes["dynamicTransitionTemp"] is None

    def test_invalid_load_type_dropped(self):
        settings = AdvancedSettings.from_record(port_settings_record(loadType=3))
        assert settings.device_type is None
