"""
Saturation Model

Saturated vapor pressure of water and the enhancement factor of moist air.

KEY FORMULAS IMPLEMENTED:
- Saturation pressure (ASHRAE Handbook Fundamentals, Eq. 5 over ice and
  Eq. 6 over liquid water, merged into one seven-coefficient form):
      ln(P_ws) = C1/T + C2 + C3*T + C4*T^2 + C5*T^3 + C6*T^4 + C7*ln(T)
  with T in kelvin and P_ws in Pa.
- Enhancement factor:
      f = 1 + 0.004 * (P / 101325) + (0.0008 * t - 0.004)^2

The coefficient set is chosen by the sign of the Celsius temperature. The two
sets describe different physical equilibria (vapor over liquid water vs.
vapor over ice), so the curve is discontinuous at 0 degC.
"""

import math
from enum import Enum
from typing import Dict, NamedTuple

from psychrometer.calculations.constants import PsychrometricConstants


class SaturationRegime(str, Enum):
    """Condensed phase the vapor is in equilibrium with."""
    LIQUID = "liquid"
    ICE = "ice"


class SaturationCoefficients(NamedTuple):
    c1: float
    c2: float
    c3: float
    c4: float
    c5: float
    c6: float
    c7: float


SATURATION_COEFFICIENTS: Dict[SaturationRegime, SaturationCoefficients] = {
    # Over liquid water, 0C to 200C
    SaturationRegime.LIQUID: SaturationCoefficients(
        c1=-5800.2206,
        c2=1.3914993,
        c3=-0.048640239,
        c4=0.000041764768,
        c5=-0.000000014452093,
        c6=0.0,
        c7=6.5459673,
    ),
    # Over ice, -100C to 0C
    SaturationRegime.ICE: SaturationCoefficients(
        c1=-5674.5359,
        c2=6.3925247,
        c3=-0.009677843,
        c4=0.00000062215701,
        c5=2.0747825e-09,
        c6=-9.484024e-13,
        c7=4.1635019,
    ),
}


def saturation_regime(temp_c: float) -> SaturationRegime:
    """Select the coefficient regime for a temperature in degC."""
    if temp_c >= 0:
        return SaturationRegime.LIQUID
    return SaturationRegime.ICE


def saturation_pressure_for_regime(temp_c: float, regime: SaturationRegime) -> float:
    """
    Evaluate the saturation correlation with an explicit coefficient set.

    Args:
        temp_c: Temperature in degC
        regime: Which coefficient set to use, regardless of temp_c

    Returns:
        Saturated vapor pressure in Pa
    """
    c = SATURATION_COEFFICIENTS[regime]
    t_k = temp_c + PsychrometricConstants.KELVIN_OFFSET
    return math.exp(
        c.c1 / t_k
        + c.c2
        + c.c3 * t_k
        + c.c4 * t_k * t_k
        + c.c5 * t_k ** 3
        + c.c6 * t_k ** 4
        + c.c7 * math.log(t_k)
    )


def saturated_vapor_pressure(temp_c: float) -> float:
    """
    Calculate saturated vapor pressure of water.

    No range validation happens here: callers bound the input to a plausible
    sensor range first. At or below absolute zero ``math.log`` raises
    ``ValueError``; very large inputs raise ``OverflowError``.

    Args:
        temp_c: Temperature in degrees Celsius

    Returns:
        Saturated vapor pressure in Pa

    Example:
        >>> 2330.0 < saturated_vapor_pressure(20.0) < 2350.0
        True
    """
    return saturation_pressure_for_regime(temp_c, saturation_regime(temp_c))


def enhancement_factor(atmospheric_pressure_pa: float, temp_c: float) -> float:
    """
    Calculate the enhancement factor correcting for non-ideal moist air.

    Args:
        atmospheric_pressure_pa: Total pressure in Pa
        temp_c: Temperature in degC

    Returns:
        Dimensionless factor, >= 1 for non-negative pressure
    """
    return (
        1
        + 0.004 * atmospheric_pressure_pa / PsychrometricConstants.REFERENCE_PRESSURE_PA
        + (0.0008 * temp_c - 0.004) ** 2
    )


__all__ = [
    "SaturationRegime",
    "SaturationCoefficients",
    "SATURATION_COEFFICIENTS",
    "saturation_regime",
    "saturation_pressure_for_regime",
    "saturated_vapor_pressure",
    "enhancement_factor",
]
