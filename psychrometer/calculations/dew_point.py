"""
Dew-Point Solver

Inverts the saturation model: finds the temperature whose saturated vapor
pressure equals a given vapor partial pressure.

Method:
    1. Seed from the ASHRAE direct dew-point correlation in
       a = ln(P_w / 1000):
           t = 6.54 + 14.526*a + 0.7389*a^2 + 0.09486*a^3 + 0.4569*(P_w/1000)^0.1984
       and, when that estimate is below 0 degC,
           t = 6.09 + 12.608*a + 0.4959*a^2
    2. Bracket [seed - 0.2, seed + 0.2] degC.
    3. If the target pressure is not between the saturation pressures at the
       bracket ends, double the bracket toward the target until it is.
       The frost-point seed drifts by more than 0.2 degC below about -30 degC.
    4. Bisect on saturated_vapor_pressure(midpoint) against the target.
    5. Stop when |P_ws(mid) - P_w| / P_w <= epsilon.

The solver walks an explicit state machine
(SEEDING -> BRACKETING -> ITERATING -> CONVERGED | FAILED). Bracket doublings
and bisection steps share the ``EngineConfig.max_iterations`` budget, so it
can never spin forever.
"""

import logging
import math
from enum import Enum
from typing import Dict, NamedTuple, Optional

from pydantic import BaseModel, Field

from psychrometer.calculations.saturation import saturated_vapor_pressure
from psychrometer.config.schemas import DEFAULT_CONFIG, EngineConfig
from psychrometer.exceptions import ConvergenceFailureError

logger = logging.getLogger(__name__)


class SolverState(str, Enum):
    """Lifecycle of one dew-point search."""
    SEEDING = "seeding"
    BRACKETING = "bracketing"
    ITERATING = "iterating"
    CONVERGED = "converged"
    FAILED = "failed"


class DewPointSeedRegime(str, Enum):
    """Which direct correlation produced the seed."""
    ABOVE_FREEZING = "above_freezing"
    BELOW_FREEZING = "below_freezing"


class SeedCoefficients(NamedTuple):
    c0: float
    c1: float
    c2: float
    c3: float
    power_coefficient: float
    power_exponent: float


DEW_POINT_SEED_COEFFICIENTS: Dict[DewPointSeedRegime, SeedCoefficients] = {
    DewPointSeedRegime.ABOVE_FREEZING: SeedCoefficients(
        c0=6.54,
        c1=14.526,
        c2=0.7389,
        c3=0.09486,
        power_coefficient=0.4569,
        power_exponent=0.1984,
    ),
    DewPointSeedRegime.BELOW_FREEZING: SeedCoefficients(
        c0=6.09,
        c1=12.608,
        c2=0.4959,
        c3=0.0,
        power_coefficient=0.0,
        power_exponent=0.0,
    ),
}


def dew_point_seed_regime(estimate_c: float) -> DewPointSeedRegime:
    """Select the seed correlation from the above-freezing estimate."""
    if estimate_c < 0:
        return DewPointSeedRegime.BELOW_FREEZING
    return DewPointSeedRegime.ABOVE_FREEZING


def _evaluate_seed(regime: DewPointSeedRegime, vapor_pressure_kpa: float) -> float:
    c = DEW_POINT_SEED_COEFFICIENTS[regime]
    a = math.log(vapor_pressure_kpa)
    return (
        c.c0
        + c.c1 * a
        + c.c2 * a ** 2
        + c.c3 * a ** 3
        + c.power_coefficient * vapor_pressure_kpa ** c.power_exponent
    )


def seed_dew_point(vapor_pressure_pa: float) -> float:
    """
    Estimate the dew point directly from the vapor pressure.

    Args:
        vapor_pressure_pa: Vapor partial pressure in Pa, must be > 0

    Returns:
        Approximate dew point in degC
    """
    vapor_pressure_kpa = vapor_pressure_pa / 1000.0
    estimate = _evaluate_seed(DewPointSeedRegime.ABOVE_FREEZING, vapor_pressure_kpa)
    regime = dew_point_seed_regime(estimate)
    if regime is DewPointSeedRegime.BELOW_FREEZING:
        estimate = _evaluate_seed(regime, vapor_pressure_kpa)
    return estimate


class DewPointSolution(BaseModel):
    """Outcome of a converged dew-point search."""

    temperature_c: float = Field(..., description="Dew point temperature in degC")
    state: SolverState = Field(..., description="Final solver state")
    iterations: int = Field(
        ...,
        ge=0,
        description="Bracket doublings plus bisection steps taken"
    )
    bracket_expansions: int = Field(
        default=0,
        ge=0,
        description="Times the seed bracket was doubled before bisecting"
    )
    relative_error: float = Field(
        ...,
        ge=0.0,
        description="|P_ws(t) - P_w| / P_w at the returned temperature"
    )
    seed_c: float = Field(..., description="Initial estimate from the direct correlation")
    lower_bound_c: float = Field(..., description="Final bracket lower bound (degC)")
    upper_bound_c: float = Field(..., description="Final bracket upper bound (degC)")
    target_pressure_pa: float = Field(..., gt=0.0, description="Vapor pressure solved for (Pa)")
    atmospheric_pressure_pa: float = Field(..., description="Total pressure (Pa)")


class DewPointSolver:
    """
    Bounded bisection solver for the dew-point temperature.

    Example:
        >>> solver = DewPointSolver()
        >>> solution = solver.solve(101325.0, 1608.0)
        >>> 13.0 < solution.temperature_c < 16.0
        True
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def solve(self, atmospheric_pressure_pa: float, vapor_pressure_pa: float) -> DewPointSolution:
        """
        Find the dew point for a vapor partial pressure.

        Args:
            atmospheric_pressure_pa: Total pressure in Pa
            vapor_pressure_pa: Target vapor partial pressure in Pa

        Returns:
            DewPointSolution in state CONVERGED

        Raises:
            ConvergenceFailureError: On a degenerate target, a non-finite
                midpoint or pressure, or when the iteration cap is reached
        """
        epsilon = self.config.convergence_epsilon
        half_width = self.config.bracket_half_width_c

        state = SolverState.SEEDING
        seed = lower = upper = midpoint = math.nan
        p_lower = p_upper = math.nan
        relative_error = math.inf
        iterations = 0
        expansions = 0
        failure_reason = ""

        while state in (SolverState.SEEDING, SolverState.BRACKETING, SolverState.ITERATING):
            if state is SolverState.SEEDING:
                if not math.isfinite(vapor_pressure_pa) or vapor_pressure_pa <= 0:
                    failure_reason = f"vapor pressure {vapor_pressure_pa!r} Pa has no dew point"
                    state = SolverState.FAILED
                    continue
                seed = seed_dew_point(vapor_pressure_pa)
                lower, upper = seed - half_width, seed + half_width
                state = SolverState.BRACKETING
                continue

            if state is SolverState.BRACKETING:
                try:
                    p_lower = saturated_vapor_pressure(lower)
                    p_upper = saturated_vapor_pressure(upper)
                except (ValueError, OverflowError) as e:
                    failure_reason = (
                        f"saturation pressure undefined on bracket "
                        f"[{lower!r}, {upper!r}] degC: {e}"
                    )
                    state = SolverState.FAILED
                    continue
                if p_lower <= vapor_pressure_pa <= p_upper:
                    state = SolverState.ITERATING
                    continue

            if iterations >= self.config.max_iterations:
                failure_reason = (
                    f"no convergence after {iterations} iterations "
                    f"(bracket [{lower:.6f}, {upper:.6f}] degC)"
                )
                state = SolverState.FAILED
                continue

            iterations += 1

            if state is SolverState.BRACKETING:
                # target lies outside the bracket: double it on the target side
                width = upper - lower
                if vapor_pressure_pa < p_lower:
                    lower -= width
                else:
                    upper += width
                expansions += 1
                logger.debug(f"Dew-point bracket widened to [{lower:.4f}, {upper:.4f}] degC")
                continue

            midpoint = (lower + upper) / 2.0
            try:
                computed = saturated_vapor_pressure(midpoint)
            except (ValueError, OverflowError) as e:
                failure_reason = f"saturation pressure undefined at {midpoint!r} degC: {e}"
                state = SolverState.FAILED
                continue

            if not (math.isfinite(midpoint) and math.isfinite(computed)):
                failure_reason = f"non-finite midpoint or pressure ({midpoint!r}, {computed!r})"
                state = SolverState.FAILED
                continue

            if computed > vapor_pressure_pa:
                upper = midpoint
            else:
                lower = midpoint

            relative_error = abs(computed - vapor_pressure_pa) / vapor_pressure_pa
            if relative_error <= epsilon:
                state = SolverState.CONVERGED

        if state is SolverState.FAILED:
            logger.warning(f"Dew-point search failed: {failure_reason}")
            raise ConvergenceFailureError(
                f"Dew-point search failed: {failure_reason}",
                iterations=iterations,
                target_pressure_pa=vapor_pressure_pa,
                context={
                    "seed_c": seed,
                    "lower_bound_c": lower,
                    "upper_bound_c": upper,
                    "bracket_half_width_c": half_width,
                    "bracket_expansions": expansions,
                },
            )

        logger.debug(
            f"Dew point {midpoint:.4f} degC converged in {iterations} iterations "
            f"(relative error {relative_error:.2e})"
        )
        return DewPointSolution(
            temperature_c=midpoint,
            state=state,
            iterations=iterations,
            relative_error=relative_error,
            seed_c=seed,
            bracket_expansions=expansions,
            lower_bound_c=lower,
            upper_bound_c=upper,
            target_pressure_pa=vapor_pressure_pa,
            atmospheric_pressure_pa=atmospheric_pressure_pa,
        )


def find_dew_point(
    atmospheric_pressure_pa: float,
    vapor_pressure_pa: float,
    config: Optional[EngineConfig] = None,
) -> DewPointSolution:
    """
    Find the dew point for a vapor partial pressure.

    Convenience function that creates a solver and performs the search.
    """
    return DewPointSolver(config).solve(atmospheric_pressure_pa, vapor_pressure_pa)


__all__ = [
    "SolverState",
    "DewPointSeedRegime",
    "SeedCoefficients",
    "DEW_POINT_SEED_COEFFICIENTS",
    "dew_point_seed_regime",
    "seed_dew_point",
    "DewPointSolution",
    "DewPointSolver",
    "find_dew_point",
]
