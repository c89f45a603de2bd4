"""
Output-Quantity Layer

Relative humidity, vapor partial pressure, specific volume and enthalpy of
moist air, derived from the absolute humidity W'.

KEY FORMULAS IMPLEMENTED:
- Degree of saturation:  DoS = W' / H_db
- Relative humidity:     RH = DoS / (1 - (1 - DoS) * f_db * P_ws,db / P)
- Partial pressure:      P_w = P * W' / (0.62198 + W') / f_wb          [Pa]
- Specific volume:       v = 0.287055 * (t + 273.15) * (1 + 1.6078*W') / P * 1000   [m3/kg]
- Enthalpy:              h = 1.006 * t + W' * (2501 + 1.805 * t)       [kJ/kg]

Relative humidity is returned as a fraction and is never clamped; values
above 1 or below 0 point at sensor drift and must reach the caller as-is.
"""

from psychrometer.calculations.constants import PsychrometricConstants
from psychrometer.calculations.humidity import check_denominator
from psychrometer.config.schemas import DEFAULT_CONFIG, STANDARD_ATMOSPHERIC_PRESSURE_PA

_K = PsychrometricConstants


def degree_of_saturation(
    saturated_humidity_dry_bulb: float,
    absolute_humidity: float,
    singularity_threshold: float = DEFAULT_CONFIG.singularity_threshold,
) -> float:
    """Ratio of actual to saturated humidity ratio at the dry bulb."""
    check_denominator(saturated_humidity_dry_bulb, "degree_of_saturation", singularity_threshold)
    return absolute_humidity / saturated_humidity_dry_bulb


def relative_humidity(
    saturated_humidity_dry_bulb: float,
    absolute_humidity: float,
    enhancement_dry_bulb: float,
    saturation_pressure_dry_bulb_pa: float,
    atmospheric_pressure_pa: float,
    singularity_threshold: float = DEFAULT_CONFIG.singularity_threshold,
) -> float:
    """
    Calculate relative humidity as a fraction.

    Args:
        saturated_humidity_dry_bulb: Saturated humidity ratio at the dry bulb
        absolute_humidity: Actual humidity ratio W'
        enhancement_dry_bulb: Enhancement factor at the dry bulb
        saturation_pressure_dry_bulb_pa: Saturated vapor pressure at the dry bulb
        atmospheric_pressure_pa: Total pressure in Pa
        singularity_threshold: Smallest accepted denominator magnitude

    Returns:
        Relative humidity (1.0 == saturated), unclamped

    Raises:
        NumericSingularityError: If a denominator vanishes
    """
    dos = degree_of_saturation(
        saturated_humidity_dry_bulb, absolute_humidity, singularity_threshold
    )
    denominator = 1 - (1 - dos) * (
        enhancement_dry_bulb * saturation_pressure_dry_bulb_pa / atmospheric_pressure_pa
    )
    check_denominator(denominator, "relative_humidity", singularity_threshold)
    return dos / denominator


def partial_pressure(
    atmospheric_pressure_pa: float,
    absolute_humidity: float,
    enhancement_wet_bulb: float,
    singularity_threshold: float = DEFAULT_CONFIG.singularity_threshold,
) -> float:
    """
    Calculate the partial pressure of water vapor.

    Args:
        atmospheric_pressure_pa: Total pressure in Pa
        absolute_humidity: Actual humidity ratio W'
        enhancement_wet_bulb: Enhancement factor at the wet bulb

    Returns:
        Vapor partial pressure in Pa
    """
    denominator = _K.EPSILON + absolute_humidity
    check_denominator(denominator, "partial_pressure", singularity_threshold)
    return atmospheric_pressure_pa * absolute_humidity / denominator / enhancement_wet_bulb


def specific_volume(
    dry_bulb_c: float,
    absolute_humidity: float,
    atmospheric_pressure_pa: float = STANDARD_ATMOSPHERIC_PRESSURE_PA,
) -> float:
    """
    Calculate the specific volume of moist air per unit mass of dry air.

    Returns:
        Specific volume in m3/kg dry air
    """
    return (
        _K.R_DRY_AIR
        * (dry_bulb_c + _K.KELVIN_OFFSET)
        * (1 + _K.VAPOR_VOLUME_FACTOR * absolute_humidity)
        / atmospheric_pressure_pa
        * 1000
    )


def enthalpy(dry_bulb_c: float, absolute_humidity: float) -> float:
    """Specific enthalpy of moist air in kJ/kg dry air (0 at 0 degC dry air)."""
    return (
        _K.CP_DRY_AIR * dry_bulb_c
        + absolute_humidity * (_K.LATENT_HEAT_VAPORIZATION_0C + _K.CP_WATER_VAPOR * dry_bulb_c)
    )


__all__ = [
    "degree_of_saturation",
    "relative_humidity",
    "partial_pressure",
    "specific_volume",
    "enthalpy",
]
