"""Tests for sensor sentinels and report formatting."""

import math

import pytest

from psychrometer.readings import (
    DISCONNECTED_SENTINEL_C,
    REPORT_FIELDS,
    SensorSample,
    format_report,
    is_disconnected,
)


class TestDisconnectedSentinel:
    """Tests for is_disconnected and SensorSample."""

    @pytest.mark.parametrize("value", [None, DISCONNECTED_SENTINEL_C, math.nan, math.inf])
    def test_unusable_values(self, value):
        assert is_disconnected(value)

    @pytest.mark.parametrize("value", [-126.9, -50.0, 0.0, 25.0])
    def test_usable_values(self, value):
        assert not is_disconnected(value)

    def test_sample_usable(self):
        assert SensorSample(dry_bulb_c=25.0, wet_bulb_c=18.0).usable
        assert not SensorSample(dry_bulb_c=25.0, wet_bulb_c=-127.0).usable
        assert not SensorSample(dry_bulb_c=25.0).usable

    def test_disconnected_sensors_named_in_order(self):
        assert SensorSample(dry_bulb_c=25.0, wet_bulb_c=18.0).disconnected_sensors() == []
        assert SensorSample(dry_bulb_c=25.0, wet_bulb_c=-127.0).disconnected_sensors() == [
            "wet-bulb"
        ]
        assert SensorSample().disconnected_sensors() == ["dry-bulb", "wet-bulb"]

    def test_engine_rejects_sentinel_by_range(self, calculator):
        """A sentinel that slips through is caught by the range check."""
        assert calculator.evaluate(DISCONNECTED_SENTINEL_C, 18.0).status.value == "invalid_input"


class TestFormatReport:
    """Tests for format_report."""

    @pytest.fixture
    def report(self, calculator):
        return format_report(calculator.calculate_state(25.0, 18.0))

    def test_field_order(self, report):
        assert list(report) == [label for label, _, _ in REPORT_FIELDS.values()]

    def test_precision(self, report):
        assert report["Dry Bulb"] == "25.00 °C"
        assert report["Wet Bulb"] == "18.00 °C"
        assert len(report["Relative Humidity"].split(".")[1]) == 4
        assert report["Absolute Humidity"].endswith(" kg/kg")
        assert len(report["Absolute Humidity"].split()[0].split(".")[1]) == 5
        assert len(report["Specific Volume"].split()[0].split(".")[1]) == 3

    def test_relative_humidity_has_no_unit(self, report):
        float(report["Relative Humidity"])
