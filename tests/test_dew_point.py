"""
Dew-Point Solver Tests

This test suite validates:
- Seed correlations and regime switch
- Convergence to the saturation-pressure inverse
- Bounded iteration and failure reporting
"""

import math

import pytest
from pydantic import ValidationError

from psychrometer.calculations.dew_point import (
    DewPointSeedRegime,
    DewPointSolution,
    DewPointSolver,
    SolverState,
    dew_point_seed_regime,
    find_dew_point,
    seed_dew_point,
)
from psychrometer.calculations.saturation import saturated_vapor_pressure
from psychrometer.config.schemas import EngineConfig
from psychrometer.exceptions import ConvergenceFailureError, is_retriable

P_STD = 101325.0


class TestSeed:
    """Tests for the direct dew-point correlation."""

    def test_regime_switch(self):
        assert dew_point_seed_regime(-0.01) is DewPointSeedRegime.BELOW_FREEZING
        assert dew_point_seed_regime(0.0) is DewPointSeedRegime.ABOVE_FREEZING

    def test_above_freezing_seed(self):
        """1608 Pa is close to a 14.1 degC dew point."""
        assert seed_dew_point(1608.0) == pytest.approx(14.12, abs=0.02)

    def test_below_freezing_seed(self):
        assert seed_dew_point(300.0) == pytest.approx(-8.37, abs=0.02)

    def test_triple_point_uses_frost_correlation(self):
        """The above-freezing estimate is slightly negative at 611.2 Pa."""
        assert seed_dew_point(611.2) == pytest.approx(0.0, abs=0.05)

    @pytest.mark.parametrize("temp_c", [-20.0, -10.0, 5.0, 20.0, 45.0, 80.0])
    def test_seed_within_bracket_of_true_dew_point(self, temp_c):
        seed = seed_dew_point(saturated_vapor_pressure(temp_c))
        assert abs(seed - temp_c) < 0.2


class TestDewPointSolver:
    """Tests for DewPointSolver.solve."""

    @pytest.mark.parametrize("temp_c", [
        -50.0, -45.0, -40.0, -35.0, -20.0, -5.0, 0.5, 14.0, 20.0, 60.0,
    ])
    def test_inverts_saturation_pressure(self, temp_c):
        target = saturated_vapor_pressure(temp_c)
        solution = DewPointSolver().solve(P_STD, target)

        assert solution.state is SolverState.CONVERGED
        assert solution.temperature_c == pytest.approx(temp_c, abs=1e-3)
        assert solution.relative_error <= 5e-6

    def test_returned_temperature_satisfies_threshold(self):
        solution = DewPointSolver().solve(P_STD, 1608.0)
        computed = saturated_vapor_pressure(solution.temperature_c)
        assert abs(computed - 1608.0) / 1608.0 <= 5e-6

    def test_solution_records_search(self):
        solution = find_dew_point(P_STD, 1608.0)

        assert 1 <= solution.iterations < 40
        assert solution.lower_bound_c <= solution.temperature_c <= solution.upper_bound_c
        assert solution.seed_c == pytest.approx(seed_dew_point(1608.0))
        assert solution.target_pressure_pa == 1608.0
        assert solution.atmospheric_pressure_pa == P_STD

    def test_tighter_epsilon_takes_more_steps(self):
        loose = find_dew_point(P_STD, 1608.0, EngineConfig(convergence_epsilon=1e-3))
        tight = find_dew_point(P_STD, 1608.0, EngineConfig(convergence_epsilon=1e-9))
        assert loose.iterations < tight.iterations

    def test_deterministic(self):
        first = find_dew_point(P_STD, 1608.0)
        second = find_dew_point(P_STD, 1608.0)
        assert first.temperature_c == second.temperature_c
        assert first.iterations == second.iterations


class TestBracketExpansion:
    """The seed bracket is widened when it does not contain the root."""

    def test_seed_bracket_holds_root_above_freezing(self):
        solution = find_dew_point(P_STD, 1608.0)
        assert solution.bracket_expansions == 0

    def test_frost_point_seed_drifts_outside_bracket(self):
        """At -40 degC the frost-point correlation is off by about 0.6 degC."""
        target = saturated_vapor_pressure(-40.0)
        assert abs(seed_dew_point(target) - (-40.0)) > 0.2

        solution = find_dew_point(P_STD, target)

        assert solution.state is SolverState.CONVERGED
        assert solution.bracket_expansions >= 1
        assert solution.temperature_c == pytest.approx(-40.0, abs=1e-3)
        assert solution.iterations < 100

    def test_expansions_count_toward_iterations(self):
        solution = find_dew_point(P_STD, saturated_vapor_pressure(-50.0))
        assert solution.bracket_expansions >= 1
        assert solution.iterations > solution.bracket_expansions

    def test_tiny_bracket_widens_to_same_dew_point(self):
        narrow = find_dew_point(P_STD, 1608.0, EngineConfig(bracket_half_width_c=1e-6))
        default = find_dew_point(P_STD, 1608.0)

        assert narrow.state is SolverState.CONVERGED
        assert narrow.bracket_expansions > 0
        assert narrow.temperature_c == pytest.approx(default.temperature_c, abs=1e-3)

    def test_widening_is_logged(self, caplog):
        with caplog.at_level("DEBUG", logger="psychrometer.calculations.dew_point"):
            find_dew_point(P_STD, saturated_vapor_pressure(-40.0))
        assert "bracket widened" in caplog.text


class TestDewPointFailure:
    """Tests for bounded failure of the dew-point search."""

    def test_root_outside_bracket_hits_iteration_cap(self):
        """Widening a tiny bracket needs more steps than a small cap allows."""
        config = EngineConfig(bracket_half_width_c=1e-6, max_iterations=5)

        with pytest.raises(ConvergenceFailureError) as exc_info:
            find_dew_point(P_STD, 1608.0, config)

        error = exc_info.value
        assert error.context["iterations"] == 5
        assert error.context["bracket_expansions"] == 5
        assert error.context["target_pressure_pa"] == 1608.0
        assert error.context["bracket_half_width_c"] == 1e-6
        assert is_retriable(error)

    def test_retry_with_default_bracket_succeeds(self):
        with pytest.raises(ConvergenceFailureError):
            find_dew_point(
                P_STD, 1608.0, EngineConfig(bracket_half_width_c=1e-6, max_iterations=5)
            )
        assert find_dew_point(P_STD, 1608.0).state is SolverState.CONVERGED

    def test_single_iteration_cap(self):
        with pytest.raises(ConvergenceFailureError) as exc_info:
            find_dew_point(P_STD, 1608.0, EngineConfig(max_iterations=1))
        assert exc_info.value.context["iterations"] == 1

    @pytest.mark.parametrize("vapor_pressure", [0.0, -250.0, math.nan, math.inf])
    def test_degenerate_target(self, vapor_pressure):
        with pytest.raises(ConvergenceFailureError) as exc_info:
            find_dew_point(P_STD, vapor_pressure)
        assert exc_info.value.context["iterations"] == 0

    def test_failure_is_logged(self, caplog):
        with caplog.at_level("WARNING", logger="psychrometer.calculations.dew_point"):
            with pytest.raises(ConvergenceFailureError):
                find_dew_point(P_STD, -1.0)
        assert "Dew-point search failed" in caplog.text


class TestDewPointSolution:
    """Tests for the DewPointSolution model."""

    def test_rejects_non_positive_target(self):
        with pytest.raises(ValidationError):
            DewPointSolution(
                temperature_c=0.0,
                state=SolverState.CONVERGED,
                iterations=1,
                relative_error=0.0,
                seed_c=0.0,
                lower_bound_c=-0.2,
                upper_bound_c=0.2,
                target_pressure_pa=0.0,
                atmospheric_pressure_pa=P_STD,
            )
