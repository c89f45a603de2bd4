"""
State-Derivation Layer

Saturated absolute humidity and the actual absolute humidity (humidity
ratio W') recovered from a dry-bulb / wet-bulb pair.

KEY FORMULAS IMPLEMENTED:
- Saturated humidity ratio:
      H_s = 0.62198 * f * P_ws / (P - f * P_ws)
- Psychrometer energy balance, dry bulb at or above 0 degC:
      W' = ((2501 - 2.381*t_wb) * H_wb - 1.006*(t_db - t_wb)) /
           (2501 + 1.805*t_db - 4.186*t_wb)
- Psychrometer energy balance, dry bulb below 0 degC (wick iced over):
      W' = ((2501 + 1.805*t_wb - 2.093*t_wb + 334) * H_wb - 1.006*(t_db - t_wb)) /
           (2501 + 1.805*t_db - 2.093*t_wb + 334)

Both branches are the same balance with a different condensed phase on the
wick: liquid water (cp 4.186) or ice (cp 2.093, plus the heat of fusion).
"""

from enum import Enum
from typing import Dict, NamedTuple

from psychrometer.calculations.constants import PsychrometricConstants
from psychrometer.config.schemas import DEFAULT_CONFIG
from psychrometer.exceptions import NumericSingularityError

_K = PsychrometricConstants


class HumidityRegime(str, Enum):
    """Phase of the water on the wet-bulb wick."""
    ABOVE_FREEZING = "above_freezing"
    BELOW_FREEZING = "below_freezing"


class WickCoefficients(NamedTuple):
    condensate_specific_heat: float  # kJ/(kg*K)
    fusion_heat: float  # kJ/kg


HUMIDITY_COEFFICIENTS: Dict[HumidityRegime, WickCoefficients] = {
    HumidityRegime.ABOVE_FREEZING: WickCoefficients(
        condensate_specific_heat=_K.CP_LIQUID_WATER,
        fusion_heat=0.0,
    ),
    HumidityRegime.BELOW_FREEZING: WickCoefficients(
        condensate_specific_heat=_K.CP_ICE,
        fusion_heat=_K.LATENT_HEAT_FUSION,
    ),
}


def humidity_regime(dry_bulb_c: float) -> HumidityRegime:
    """Select the energy-balance regime from the dry-bulb temperature."""
    if dry_bulb_c >= 0:
        return HumidityRegime.ABOVE_FREEZING
    return HumidityRegime.BELOW_FREEZING


def check_denominator(value: float, quantity: str, threshold: float) -> float:
    """
    Reject a denominator whose magnitude is below ``threshold``.

    Returns:
        The value unchanged

    Raises:
        NumericSingularityError: If ``abs(value) < threshold`` or value is nan
    """
    if not abs(value) >= threshold:
        raise NumericSingularityError(
            f"Denominator of {quantity} vanishes ({value!r})",
            quantity=quantity,
            denominator=value,
        )
    return value


def saturated_absolute_humidity(
    enhancement: float,
    saturation_pressure_pa: float,
    atmospheric_pressure_pa: float,
    singularity_threshold: float = DEFAULT_CONFIG.singularity_threshold,
) -> float:
    """
    Calculate the humidity ratio of saturated air.

    Args:
        enhancement: Enhancement factor at the same temperature
        saturation_pressure_pa: Saturated vapor pressure in Pa
        atmospheric_pressure_pa: Total pressure in Pa
        singularity_threshold: Smallest accepted denominator magnitude

    Returns:
        Saturated absolute humidity in kg water / kg dry air

    Raises:
        NumericSingularityError: If f * P_ws reaches the total pressure
    """
    effective_pressure = enhancement * saturation_pressure_pa
    denominator = atmospheric_pressure_pa - effective_pressure
    if denominator <= 0:
        # vapor alone would exceed total pressure: boiling, no dry air left
        raise NumericSingularityError(
            f"Saturation pressure {effective_pressure:.1f} Pa reaches total "
            f"pressure {atmospheric_pressure_pa:.1f} Pa",
            quantity="saturated_absolute_humidity",
            denominator=denominator,
        )
    check_denominator(denominator, "saturated_absolute_humidity", singularity_threshold)
    return _K.EPSILON * effective_pressure / denominator


def absolute_humidity(
    dry_bulb_c: float,
    wet_bulb_c: float,
    saturated_humidity_wet_bulb: float,
    singularity_threshold: float = DEFAULT_CONFIG.singularity_threshold,
) -> float:
    """
    Recover the actual humidity ratio W' from a psychrometer reading.

    Args:
        dry_bulb_c: Dry-bulb temperature in degC
        wet_bulb_c: Wet-bulb temperature in degC
        saturated_humidity_wet_bulb: Saturated humidity ratio at the wet bulb
        singularity_threshold: Smallest accepted denominator magnitude

    Returns:
        Absolute humidity in kg water / kg dry air. Not clamped: a negative
        value flags an inconsistent reading.

    Raises:
        NumericSingularityError: If the energy-balance denominator vanishes
    """
    wick = HUMIDITY_COEFFICIENTS[humidity_regime(dry_bulb_c)]
    latent = _K.LATENT_HEAT_VAPORIZATION_0C + wick.fusion_heat

    numerator = (
        (latent + (_K.CP_WATER_VAPOR - wick.condensate_specific_heat) * wet_bulb_c)
        * saturated_humidity_wet_bulb
        - _K.CP_DRY_AIR * (dry_bulb_c - wet_bulb_c)
    )
    denominator = (
        latent
        + _K.CP_WATER_VAPOR * dry_bulb_c
        - wick.condensate_specific_heat * wet_bulb_c
    )
    check_denominator(denominator, "absolute_humidity", singularity_threshold)
    return numerator / denominator


__all__ = [
    "HumidityRegime",
    "WickCoefficients",
    "HUMIDITY_COEFFICIENTS",
    "humidity_regime",
    "check_denominator",
    "saturated_absolute_humidity",
    "absolute_humidity",
]
