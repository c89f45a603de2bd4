"""
Psychrometer: moist-air properties from dry-bulb and wet-bulb temperatures
==========================================================================

Relative humidity, dew point, absolute humidity, vapor partial pressure,
specific volume and enthalpy derived from a two-thermometer psychrometer.

    >>> from psychrometer import PsychrometricCalculator
    >>> state = PsychrometricCalculator().calculate_state(25.0, 18.0)
"""

from ._version import __version__

from psychrometer.calculations import (
    PsychrometricCalculator,
    PsychrometricResult,
    PsychrometricState,
    ResultStatus,
    evaluate_reading,
    psychrometric_state,
)
from psychrometer.config import EngineConfig
from psychrometer.exceptions import (
    CalculationException,
    ConfigurationError,
    ConvergenceFailureError,
    InvalidInputError,
    NumericSingularityError,
    PsychrometerException,
)

__all__ = [
    "__version__",
    "PsychrometricCalculator",
    "PsychrometricResult",
    "PsychrometricState",
    "ResultStatus",
    "evaluate_reading",
    "psychrometric_state",
    "EngineConfig",
    "CalculationException",
    "ConfigurationError",
    "ConvergenceFailureError",
    "InvalidInputError",
    "NumericSingularityError",
    "PsychrometerException",
]
