"""
CLI Tests

Exercises the psychrometer command line through typer's CliRunner.
"""

import json

import pytest
from typer.testing import CliRunner

from psychrometer import __version__
from psychrometer.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(env_vars):
    """CLI falls back to PSYCHROMETER_* variables; start from none."""
    return env_vars


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCalc:
    """Tests for `psychrometer calc`."""

    def test_table_output(self):
        result = runner.invoke(app, ["calc", "25", "18"])

        assert result.exit_code == 0
        assert "Relative Humidity" in result.stdout
        assert "Dew Point" in result.stdout
        assert "provenance" in result.stdout

    def test_json_output(self):
        result = runner.invoke(app, ["calc", "25", "18", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "ok"
        assert 0.45 < payload["state"]["relative_humidity"] < 0.55
        assert len(payload["provenance_hash"]) == 64

    def test_negative_temperatures(self):
        result = runner.invoke(app, ["calc", "--json", "--", "-5", "-7"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["state"]["dew_point_c"] < -7.0

    def test_disconnected_sensor(self):
        result = runner.invoke(app, ["calc", "--", "-127", "18"])

        assert result.exit_code == 2
        assert "dry-bulb" in result.stdout

    def test_disconnected_wet_bulb(self):
        result = runner.invoke(app, ["calc", "--", "25", "-127"])

        assert result.exit_code == 2
        assert "wet-bulb" in result.stdout
        assert "dry-bulb" not in result.stdout

    def test_both_sensors_disconnected(self):
        result = runner.invoke(app, ["calc", "--", "-127", "-127"])

        assert result.exit_code == 2
        assert "dry-bulb" in result.stdout
        assert "wet-bulb" in result.stdout

    def test_out_of_range_reading(self):
        result = runner.invoke(app, ["calc", "150", "18"])

        assert result.exit_code == 1
        assert "invalid_input" in result.stdout

    def test_failure_json(self):
        result = runner.invoke(app, ["calc", "40", "5", "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["status"] == "convergence_failure"
        assert payload["state"] is None

    def test_supersaturation_warning(self):
        result = runner.invoke(app, ["calc", "20", "25"])

        assert result.exit_code == 0
        assert "outside [0, 1]" in result.stdout

    def test_pressure_option(self):
        result = runner.invoke(app, ["calc", "25", "18", "--pressure", "90000", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["state"]["atmospheric_pressure_pa"] == 90000.0

    def test_altitude_option(self):
        result = runner.invoke(app, ["calc", "25", "18", "-a", "1500", "--json"])

        assert result.exit_code == 0
        pressure = json.loads(result.stdout)["state"]["atmospheric_pressure_pa"]
        assert pressure == pytest.approx(84556.0, rel=1e-3)

    def test_pressure_and_altitude_conflict(self):
        result = runner.invoke(app, ["calc", "25", "18", "-p", "90000", "-a", "1500"])

        assert result.exit_code == 2
        assert "mutually exclusive" in " ".join(result.stdout.split())

    def test_config_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("atmospheric_pressure_pa: 95000\n")

        result = runner.invoke(app, ["calc", "25", "18", "-c", str(path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["state"]["atmospheric_pressure_pa"] == 95000.0

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["calc", "25", "18", "-c", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 2
        assert "Configuration error" in result.stdout

    def test_unparseable_altitude_in_config_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("altitude_m: high\n")

        result = runner.invoke(app, ["calc", "25", "18", "-c", str(path)])

        assert result.exit_code == 2
        assert "Configuration error" in result.stdout

    def test_environment_pressure(self, env_vars):
        env_vars.setenv("PSYCHROMETER_ATMOSPHERIC_PRESSURE_PA", "97000")

        result = runner.invoke(app, ["calc", "25", "18", "--json"])

        assert json.loads(result.stdout)["state"]["atmospheric_pressure_pa"] == 97000.0

    def test_log_level_option(self):
        result = runner.invoke(app, ["--log-level", "DEBUG", "calc", "25", "18", "--json"])
        assert result.exit_code == 0
