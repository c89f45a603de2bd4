"""
Psychrometric calculation engine.

Layers, consumed bottom-up:
- saturation: saturated vapor pressure and enhancement factor
- humidity: saturated and actual absolute humidity
- properties / dew_point: output quantities and the dew-point solver
- psychrometrics: calculator chaining the layers for one reading
"""

from psychrometer.calculations.dew_point import (
    DewPointSeedRegime,
    DewPointSolution,
    DewPointSolver,
    SolverState,
    find_dew_point,
    seed_dew_point,
)
from psychrometer.calculations.humidity import (
    HumidityRegime,
    absolute_humidity,
    saturated_absolute_humidity,
)
from psychrometer.calculations.properties import (
    degree_of_saturation,
    enthalpy,
    partial_pressure,
    relative_humidity,
    specific_volume,
)
from psychrometer.calculations.psychrometrics import (
    PsychrometricCalculator,
    PsychrometricInput,
    PsychrometricResult,
    PsychrometricState,
    ResultStatus,
    dew_point_from_temperatures,
    evaluate_reading,
    partial_pressure_from_temperatures,
    psychrometric_state,
)
from psychrometer.calculations.saturation import (
    SaturationRegime,
    enhancement_factor,
    saturated_vapor_pressure,
)

__all__ = [
    "DewPointSeedRegime",
    "DewPointSolution",
    "DewPointSolver",
    "SolverState",
    "find_dew_point",
    "seed_dew_point",
    "HumidityRegime",
    "absolute_humidity",
    "saturated_absolute_humidity",
    "degree_of_saturation",
    "enthalpy",
    "partial_pressure",
    "relative_humidity",
    "specific_volume",
    "PsychrometricCalculator",
    "PsychrometricInput",
    "PsychrometricResult",
    "PsychrometricState",
    "ResultStatus",
    "dew_point_from_temperatures",
    "evaluate_reading",
    "partial_pressure_from_temperatures",
    "psychrometric_state",
    "SaturationRegime",
    "enhancement_factor",
    "saturated_vapor_pressure",
]
