# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import math

import pytest

from psychrometer.calculations.psychrometrics import PsychrometricCalculator
from psychrometer.config.schemas import EngineConfig


# Documented coefficient sets, written out independently of the package so
# the saturation model can be checked against the raw correlation.
LIQUID_COEFFICIENTS = (
    -5800.2206, 1.3914993, -0.048640239, 4.1764768e-5,
    -1.4452093e-8, 0.0, 6.5459673,
)
ICE_COEFFICIENTS = (
    -5674.5359, 6.3925247, -0.009677843, 6.2215701e-7,
    2.0747825e-9, -9.484024e-13, 4.1635019,
)


def correlation(temp_k, coefficients):
    """Evaluate the seven-coefficient saturation correlation in Pa."""
    c1, c2, c3, c4, c5, c6, c7 = coefficients
    return math.exp(
        c1 / temp_k + c2 + c3 * temp_k + c4 * temp_k ** 2
        + c5 * temp_k ** 3 + c6 * temp_k ** 4 + c7 * math.log(temp_k)
    )


@pytest.fixture
def default_config():
    """Standard-atmosphere engine configuration."""
    return EngineConfig()


@pytest.fixture
def calculator(default_config):
    """Calculator at standard atmosphere."""
    return PsychrometricCalculator(default_config)


@pytest.fixture
def env_vars(monkeypatch):
    """Clear PSYCHROMETER_* variables so tests start from defaults."""
    import os

    for key in list(os.environ):
        if key.startswith("PSYCHROMETER_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def raw_saturation():
    """Raw correlation: ``raw_saturation(temp_c, "liquid" | "ice")`` in Pa."""
    sets = {"liquid": LIQUID_COEFFICIENTS, "ice": ICE_COEFFICIENTS}

    def _evaluate(temp_c, phase):
        return correlation(temp_c + 273.15, sets[phase])

    return _evaluate
