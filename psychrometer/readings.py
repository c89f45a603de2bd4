"""
Sensor-side helpers around the engine.

The engine never recognises sensor sentinels; whoever acquires the
temperatures filters them first with ``is_disconnected``. ``format_report``
renders a derived state with the fixed per-field precision the psychrometer
has always printed (display only, no transport framing).
"""

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from psychrometer.calculations.psychrometrics import PsychrometricState

# Value returned by one-wire temperature sensors that did not answer
DISCONNECTED_SENTINEL_C = -127.0


def is_disconnected(temperature_c: Optional[float]) -> bool:
    """True when a raw sensor value must not reach the engine."""
    if temperature_c is None:
        return True
    if not math.isfinite(temperature_c):
        return True
    return temperature_c == DISCONNECTED_SENTINEL_C


class SensorSample(BaseModel):
    """Raw pair of temperatures from one sampling cycle."""
    dry_bulb_c: Optional[float] = Field(default=None, description="Dry-bulb sensor value (degC)")
    wet_bulb_c: Optional[float] = Field(default=None, description="Wet-bulb sensor value (degC)")

    def disconnected_sensors(self) -> List[str]:
        """Labels of the sensors that returned no usable value, dry bulb first."""
        pairs = (("dry-bulb", self.dry_bulb_c), ("wet-bulb", self.wet_bulb_c))
        return [label for label, value in pairs if is_disconnected(value)]

    @property
    def usable(self) -> bool:
        return not self.disconnected_sensors()


# field -> (label, unit, decimals)
REPORT_FIELDS = {
    "dry_bulb_c": ("Dry Bulb", "°C", 2),
    "wet_bulb_c": ("Wet Bulb", "°C", 2),
    "relative_humidity": ("Relative Humidity", "", 4),
    "dew_point_c": ("Dew Point", "°C", 2),
    "absolute_humidity_kg_kg": ("Absolute Humidity", "kg/kg", 5),
    "partial_pressure_pa": ("Partial Pressure", "Pa", 2),
    "specific_volume_m3_kg": ("Specific Volume", "m³/kg", 3),
    "enthalpy_kj_kg": ("Enthalpy", "kJ/kg", 2),
}


def format_report(state: PsychrometricState) -> Dict[str, str]:
    """
    Format a state for display.

    Returns:
        Mapping of label -> value string with unit, in transmission order
    """
    report = {}
    for field_name, (label, unit, decimals) in REPORT_FIELDS.items():
        value = getattr(state, field_name)
        text = f"{value:.{decimals}f}"
        report[label] = f"{text} {unit}" if unit else text
    return report
