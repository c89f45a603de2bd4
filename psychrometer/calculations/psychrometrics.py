"""
Psychrometric Calculator Module

Derives moist-air properties from a dry-bulb / wet-bulb psychrometer reading
in SI units (degC, Pa, kg/kg, m3/kg, kJ/kg).

The calculator chains the three calculation layers bottom-up:

    (t_db, t_wb)
      -> saturation pressure and enhancement factor at both bulbs
      -> saturated humidity ratios -> absolute humidity W'
      -> relative humidity, partial pressure, specific volume, enthalpy,
         dew point (bounded bisection)

Every call is a pure function of the two temperatures and the immutable
EngineConfig: same input = same output, bit for bit, and the provenance hash
is reproducible.

Two entry points are offered:
- ``calculate_state`` raises typed ``CalculationException`` subclasses.
- ``evaluate`` never raises them; it returns a ``PsychrometricResult`` tagged
  with a ``ResultStatus`` so a sampling loop can carry on.

STANDARDS:
- ASHRAE Handbook of Fundamentals (Psychrometrics chapter), SI edition
"""

import hashlib
import logging
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from psychrometer.calculations.dew_point import DewPointSolution, DewPointSolver
from psychrometer.calculations.humidity import (
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
from psychrometer.calculations.saturation import (
    enhancement_factor,
    saturated_vapor_pressure,
)
from psychrometer.config.schemas import DEFAULT_CONFIG, EngineConfig
from psychrometer.exceptions import (
    CalculationException,
    ConvergenceFailureError,
    InvalidInputError,
    NumericSingularityError,
)

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class ResultStatus(str, Enum):
    """Outcome tag of one evaluated reading."""
    OK = "ok"
    INVALID_INPUT = "invalid_input"
    NUMERIC_SINGULARITY = "numeric_singularity"
    CONVERGENCE_FAILURE = "convergence_failure"


_STATUS_BY_EXCEPTION = (
    (InvalidInputError, ResultStatus.INVALID_INPUT),
    (NumericSingularityError, ResultStatus.NUMERIC_SINGULARITY),
    (ConvergenceFailureError, ResultStatus.CONVERGENCE_FAILURE),
)


# =============================================================================
# PYDANTIC INPUT/OUTPUT MODELS
# =============================================================================

class PsychrometricInput(BaseModel):
    """
    One psychrometer reading.

    Only finiteness is checked here; the accepted range depends on the
    engine configuration and is checked by the calculator. Wet bulb above
    dry bulb is physically suspicious but accepted.
    """
    dry_bulb_c: float = Field(..., description="Dry-bulb temperature in degC")
    wet_bulb_c: float = Field(..., description="Wet-bulb temperature in degC")

    @field_validator('dry_bulb_c', 'wet_bulb_c')
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject nan and infinities."""
        if not math.isfinite(v):
            raise ValueError(f"temperature must be finite, got {v!r}")
        return v


class PsychrometricState(BaseModel):
    """
    Complete moist-air state derived from one reading.

    Relative humidity and absolute humidity are not clamped.
    """
    # Inputs (degC)
    dry_bulb_c: float = Field(..., description="Dry-bulb temperature (degC)")
    wet_bulb_c: float = Field(..., description="Wet-bulb temperature (degC)")

    # Derived outputs
    relative_humidity: float = Field(..., description="Relative humidity as a fraction")
    dew_point_c: float = Field(..., description="Dew point temperature (degC)")
    absolute_humidity_kg_kg: float = Field(
        ...,
        description="Absolute humidity W' (kg water / kg dry air)"
    )
    partial_pressure_pa: float = Field(..., description="Water vapor partial pressure (Pa)")
    specific_volume_m3_kg: float = Field(..., description="Specific volume (m3/kg dry air)")
    enthalpy_kj_kg: float = Field(..., description="Specific enthalpy (kJ/kg dry air)")

    # Intermediates
    atmospheric_pressure_pa: float = Field(..., gt=0.0, description="Total pressure (Pa)")
    saturation_pressure_dry_bulb_pa: float = Field(..., description="P_ws at dry bulb (Pa)")
    saturation_pressure_wet_bulb_pa: float = Field(..., description="P_ws at wet bulb (Pa)")
    enhancement_factor_dry_bulb: float = Field(..., description="Enhancement factor at dry bulb")
    enhancement_factor_wet_bulb: float = Field(..., description="Enhancement factor at wet bulb")
    saturated_humidity_dry_bulb_kg_kg: float = Field(
        ...,
        description="Saturated humidity ratio at dry bulb"
    )
    saturated_humidity_wet_bulb_kg_kg: float = Field(
        ...,
        description="Saturated humidity ratio at wet bulb"
    )
    degree_of_saturation: float = Field(..., description="W' / H_db")
    dew_point_iterations: int = Field(..., ge=0, description="Bisection steps for the dew point")

    def outputs(self) -> Tuple[float, float, float, float, float, float]:
        """The six derived scalars in transmission order."""
        return (
            self.relative_humidity,
            self.dew_point_c,
            self.absolute_humidity_kg_kg,
            self.partial_pressure_pa,
            self.specific_volume_m3_kg,
            self.enthalpy_kj_kg,
        )


class PsychrometricResult(BaseModel):
    """
    Tagged outcome of evaluating one reading.

    ``state`` is set only when ``status`` is OK; otherwise the error fields
    describe the failure.
    """
    status: ResultStatus = Field(..., description="Outcome tag")
    state: Optional[PsychrometricState] = Field(default=None, description="Derived state")
    error_code: Optional[str] = Field(default=None, description="Error code on failure")
    error_message: Optional[str] = Field(default=None, description="Error message on failure")
    error_context: Dict[str, Any] = Field(default_factory=dict, description="Error details")
    provenance_hash: str = Field(..., description="SHA-256 hash for audit trail")
    processing_time_ms: float = Field(..., ge=0.0, description="Processing time in milliseconds")

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.OK


# =============================================================================
# MAIN CALCULATOR CLASS
# =============================================================================

class PsychrometricCalculator:
    """
    Psychrometer (dry-bulb / wet-bulb) calculator.

    Example:
        >>> calc = PsychrometricCalculator()
        >>> state = calc.calculate_state(25.0, 18.0)
        >>> print(f"RH = {state.relative_humidity:.4f}")

        >>> result = calc.evaluate(25.0, float("nan"))
        >>> result.status
        <ResultStatus.INVALID_INPUT: 'invalid_input'>
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the calculator.

        Args:
            config: Engine configuration (default: standard atmosphere)
        """
        self.config = config or DEFAULT_CONFIG
        self.dew_point_solver = DewPointSolver(self.config)
        logger.info(
            f"PsychrometricCalculator initialized with "
            f"pressure={self.config.atmospheric_pressure_pa:.1f} Pa, "
            f"epsilon={self.config.convergence_epsilon}, "
            f"max_iterations={self.config.max_iterations}"
        )

    def _calculate_provenance(
        self,
        function_name: str,
        inputs: Dict[str, Any],
        outputs: Dict[str, Any]
    ) -> str:
        """
        Calculate SHA-256 hash identifying a calculation and its result.

        Args:
            function_name: Name of the calculation function
            inputs: Dictionary of input parameters
            outputs: Dictionary of output values

        Returns:
            SHA-256 hash string
        """
        provenance_data = {
            "standard": "ASHRAE_Psychrometrics_SI",
            "function": function_name,
            "config": {k: str(v) for k, v in self.config.model_dump().items()},
            "inputs": {k: str(v) for k, v in inputs.items()},
            "outputs": {k: str(v) for k, v in outputs.items()}
        }
        provenance_str = str(sorted(provenance_data.items()))
        return hashlib.sha256(provenance_str.encode()).hexdigest()

    # =========================================================================
    # INPUT VALIDATION
    # =========================================================================

    def validate_reading(self, dry_bulb_c: float, wet_bulb_c: float) -> PsychrometricInput:
        """
        Validate a reading before any formula runs.

        Raises:
            InvalidInputError: If a temperature is non-numeric, non-finite or
                outside [min_temperature_c, max_temperature_c]
        """
        try:
            reading = PsychrometricInput(dry_bulb_c=dry_bulb_c, wet_bulb_c=wet_bulb_c)
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else None
            raise InvalidInputError(
                f"Invalid reading: {first['msg']}",
                field=field,
                context={"dry_bulb_c": repr(dry_bulb_c), "wet_bulb_c": repr(wet_bulb_c)},
            ) from e

        low, high = self.config.min_temperature_c, self.config.max_temperature_c
        for field, value in (("dry_bulb_c", reading.dry_bulb_c), ("wet_bulb_c", reading.wet_bulb_c)):
            if value < low or value > high:
                raise InvalidInputError(
                    f"{field}={value} degC outside accepted range [{low}, {high}] degC",
                    field=field,
                    value=value,
                    context={"min_temperature_c": low, "max_temperature_c": high},
                )
        return reading

    # =========================================================================
    # LAYERED CALCULATIONS
    # =========================================================================

    def calculate_saturation(self, temp_c: float) -> Tuple[float, float, float]:
        """
        Saturation quantities at one temperature.

        Returns:
            (saturation pressure Pa, enhancement factor, saturated humidity kg/kg)
        """
        p = self.config.atmospheric_pressure_pa
        p_ws = saturated_vapor_pressure(temp_c)
        f = enhancement_factor(p, temp_c)
        h_s = saturated_absolute_humidity(f, p_ws, p, self.config.singularity_threshold)
        return p_ws, f, h_s

    def calculate_absolute_humidity(self, dry_bulb_c: float, wet_bulb_c: float) -> float:
        """
        Calculate absolute humidity W' from a reading.

        Returns:
            Absolute humidity in kg water / kg dry air
        """
        reading = self.validate_reading(dry_bulb_c, wet_bulb_c)
        _, _, h_wb = self.calculate_saturation(reading.wet_bulb_c)
        return absolute_humidity(
            reading.dry_bulb_c, reading.wet_bulb_c, h_wb, self.config.singularity_threshold
        )

    def calculate_relative_humidity(self, dry_bulb_c: float, wet_bulb_c: float) -> float:
        """
        Calculate relative humidity (fraction, unclamped) from a reading.

        Does not run the dew-point search, so a reading whose dew point cannot
        be found still yields its relative humidity (possibly < 0 or > 1).
        """
        reading = self.validate_reading(dry_bulb_c, wet_bulb_c)
        threshold = self.config.singularity_threshold
        p_ws_db, f_db, h_db = self.calculate_saturation(reading.dry_bulb_c)
        _, _, h_wb = self.calculate_saturation(reading.wet_bulb_c)
        w = absolute_humidity(reading.dry_bulb_c, reading.wet_bulb_c, h_wb, threshold)
        return relative_humidity(
            h_db, w, f_db, p_ws_db, self.config.atmospheric_pressure_pa, threshold
        )

    def calculate_partial_pressure(self, dry_bulb_c: float, wet_bulb_c: float) -> float:
        """Calculate water vapor partial pressure (Pa) from a reading."""
        reading = self.validate_reading(dry_bulb_c, wet_bulb_c)
        p = self.config.atmospheric_pressure_pa
        _, f_wb, h_wb = self.calculate_saturation(reading.wet_bulb_c)
        w = absolute_humidity(
            reading.dry_bulb_c, reading.wet_bulb_c, h_wb, self.config.singularity_threshold
        )
        return partial_pressure(p, w, f_wb, self.config.singularity_threshold)

    def calculate_dew_point(self, dry_bulb_c: float, wet_bulb_c: float) -> DewPointSolution:
        """
        Calculate the dew point from a reading.

        Raises:
            ConvergenceFailureError: If the bisection does not converge
        """
        vapor_pressure = self.calculate_partial_pressure(dry_bulb_c, wet_bulb_c)
        return self.dew_point_solver.solve(self.config.atmospheric_pressure_pa, vapor_pressure)

    def calculate_specific_volume(self, dry_bulb_c: float, absolute_humidity_kg_kg: float) -> float:
        """Specific volume (m3/kg dry air) at the configured pressure."""
        return specific_volume(
            dry_bulb_c, absolute_humidity_kg_kg, self.config.atmospheric_pressure_pa
        )

    def calculate_enthalpy(self, dry_bulb_c: float, absolute_humidity_kg_kg: float) -> float:
        """Specific enthalpy (kJ/kg dry air)."""
        return enthalpy(dry_bulb_c, absolute_humidity_kg_kg)

    # =========================================================================
    # COMPLETE STATE CALCULATION
    # =========================================================================

    def calculate_state(self, dry_bulb_c: float, wet_bulb_c: float) -> PsychrometricState:
        """
        Calculate the complete moist-air state from a psychrometer reading.

        Args:
            dry_bulb_c: Dry-bulb temperature in degC
            wet_bulb_c: Wet-bulb temperature in degC

        Returns:
            PsychrometricState with the six outputs and intermediates

        Raises:
            InvalidInputError: If a temperature is non-finite or out of range
            NumericSingularityError: If a formula denominator vanishes
            ConvergenceFailureError: If the dew-point search fails

        Example:
            >>> calc = PsychrometricCalculator()
            >>> state = calc.calculate_state(25.0, 18.0)
            >>> print(f"Dew point: {state.dew_point_c:.2f} degC")
        """
        reading = self.validate_reading(dry_bulb_c, wet_bulb_c)
        t_db = reading.dry_bulb_c
        t_wb = reading.wet_bulb_c
        p = self.config.atmospheric_pressure_pa
        threshold = self.config.singularity_threshold

        p_ws_db, f_db, h_db = self.calculate_saturation(t_db)
        p_ws_wb, f_wb, h_wb = self.calculate_saturation(t_wb)

        w = absolute_humidity(t_db, t_wb, h_wb, threshold)
        dos = degree_of_saturation(h_db, w, threshold)
        rh = relative_humidity(h_db, w, f_db, p_ws_db, p, threshold)
        p_w = partial_pressure(p, w, f_wb, threshold)
        v = specific_volume(t_db, w, p)
        h = enthalpy(t_db, w)

        dew_point = self.dew_point_solver.solve(p, p_w)

        return PsychrometricState(
            dry_bulb_c=t_db,
            wet_bulb_c=t_wb,
            relative_humidity=rh,
            dew_point_c=dew_point.temperature_c,
            absolute_humidity_kg_kg=w,
            partial_pressure_pa=p_w,
            specific_volume_m3_kg=v,
            enthalpy_kj_kg=h,
            atmospheric_pressure_pa=p,
            saturation_pressure_dry_bulb_pa=p_ws_db,
            saturation_pressure_wet_bulb_pa=p_ws_wb,
            enhancement_factor_dry_bulb=f_db,
            enhancement_factor_wet_bulb=f_wb,
            saturated_humidity_dry_bulb_kg_kg=h_db,
            saturated_humidity_wet_bulb_kg_kg=h_wb,
            degree_of_saturation=dos,
            dew_point_iterations=dew_point.iterations,
        )

    def evaluate(self, dry_bulb_c: float, wet_bulb_c: float) -> PsychrometricResult:
        """
        Evaluate a reading and return a tagged result instead of raising.

        Only the engine's own failure kinds are converted into a status;
        anything else is a programming error and propagates.

        Args:
            dry_bulb_c: Dry-bulb temperature in degC
            wet_bulb_c: Wet-bulb temperature in degC

        Returns:
            PsychrometricResult with status OK and a state, or a failure status
        """
        start_time = datetime.now()
        inputs = {"dry_bulb_c": dry_bulb_c, "wet_bulb_c": wet_bulb_c}

        try:
            state = self.calculate_state(dry_bulb_c, wet_bulb_c)
        except CalculationException as e:
            status = next(
                tag for exc_type, tag in _STATUS_BY_EXCEPTION if isinstance(e, exc_type)
            )
            logger.warning(f"Reading rejected ({status.value}): {e}")
            processing_time = (datetime.now() - start_time).total_seconds() * 1000
            return PsychrometricResult(
                status=status,
                error_code=e.error_code,
                error_message=e.message,
                error_context=e.context,
                provenance_hash=self._calculate_provenance(
                    "evaluate", inputs, {"status": status.value, "error_code": e.error_code}
                ),
                processing_time_ms=processing_time,
            )

        processing_time = (datetime.now() - start_time).total_seconds() * 1000
        provenance_hash = self._calculate_provenance(
            "evaluate",
            inputs,
            {
                "status": ResultStatus.OK.value,
                "relative_humidity": state.relative_humidity,
                "dew_point_c": state.dew_point_c,
                "absolute_humidity_kg_kg": state.absolute_humidity_kg_kg,
                "partial_pressure_pa": state.partial_pressure_pa,
                "specific_volume_m3_kg": state.specific_volume_m3_kg,
                "enthalpy_kj_kg": state.enthalpy_kj_kg,
            }
        )

        return PsychrometricResult(
            status=ResultStatus.OK,
            state=state,
            provenance_hash=provenance_hash,
            processing_time_ms=processing_time,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def psychrometric_state(
    dry_bulb_c: float,
    wet_bulb_c: float,
    config: Optional[EngineConfig] = None
) -> PsychrometricState:
    """
    Calculate the complete moist-air state from a psychrometer reading.

    Convenience function that creates a calculator and performs the calculation.

    Example:
        >>> state = psychrometric_state(25.0, 18.0)
        >>> print(f"Enthalpy: {state.enthalpy_kj_kg:.2f} kJ/kg")
    """
    calc = PsychrometricCalculator(config)
    return calc.calculate_state(dry_bulb_c, wet_bulb_c)


def evaluate_reading(
    dry_bulb_c: float,
    wet_bulb_c: float,
    config: Optional[EngineConfig] = None
) -> PsychrometricResult:
    """
    Evaluate a reading into a tagged result; never raises engine errors.

    Convenience function that creates a calculator and performs the calculation.
    """
    calc = PsychrometricCalculator(config)
    return calc.evaluate(dry_bulb_c, wet_bulb_c)


def dew_point_from_temperatures(
    dry_bulb_c: float,
    wet_bulb_c: float,
    config: Optional[EngineConfig] = None
) -> float:
    """Dew point (degC) straight from a dry-bulb / wet-bulb pair."""
    calc = PsychrometricCalculator(config)
    return calc.calculate_dew_point(dry_bulb_c, wet_bulb_c).temperature_c


def partial_pressure_from_temperatures(
    dry_bulb_c: float,
    wet_bulb_c: float,
    config: Optional[EngineConfig] = None
) -> float:
    """Vapor partial pressure (Pa) straight from a dry-bulb / wet-bulb pair."""
    calc = PsychrometricCalculator(config)
    return calc.calculate_partial_pressure(dry_bulb_c, wet_bulb_c)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Main calculator class
    "PsychrometricCalculator",

    # Enumerations
    "ResultStatus",

    # Models
    "PsychrometricInput",
    "PsychrometricState",
    "PsychrometricResult",

    # Convenience functions
    "psychrometric_state",
    "evaluate_reading",
    "dew_point_from_temperatures",
    "partial_pressure_from_temperatures",
]
