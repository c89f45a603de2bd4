"""
Engine Configuration Schemas
============================

Immutable configuration threaded through every engine entry point.

The defaults reproduce a standard-atmosphere psychrometer (101325 Pa,
relative convergence threshold 5e-6). A different value is obtained by
building a new config, never by mutating a global:

    >>> config = EngineConfig(atmospheric_pressure_pa=95000.0)
    >>> mountain = EngineConfig.at_altitude(1600.0)

Configuration may also be loaded from ``PSYCHROMETER_*`` environment
variables or a YAML file; both paths go through the same validation and
raise ``ConfigurationError`` on bad values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from psychrometer.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

STANDARD_ATMOSPHERIC_PRESSURE_PA = 101325.0
DEFAULT_CONVERGENCE_EPSILON = 5e-6

ENV_PREFIX = "PSYCHROMETER_"

# ASHRAE Handbook Fundamentals, standard atmosphere up to 11 km
_ALTITUDE_LAPSE_FACTOR = 2.25577e-5
_ALTITUDE_EXPONENT = 5.2559


class EngineConfig(BaseModel):
    """Physical constants and solver limits for one engine instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    atmospheric_pressure_pa: float = Field(
        default=STANDARD_ATMOSPHERIC_PRESSURE_PA,
        gt=0.0,
        description="Total atmospheric pressure in Pa"
    )
    convergence_epsilon: float = Field(
        default=DEFAULT_CONVERGENCE_EPSILON,
        gt=0.0,
        lt=1.0,
        description="Relative pressure error at which the dew-point bisection stops"
    )
    max_iterations: int = Field(
        default=100,
        ge=1,
        description="Maximum bracket doublings plus bisection steps before the solver reports failure"
    )
    bracket_half_width_c: float = Field(
        default=0.2,
        gt=0.0,
        description="Initial half width of the dew-point search bracket around the seed (degC)"
    )
    singularity_threshold: float = Field(
        default=1e-9,
        gt=0.0,
        description="Denominator magnitude below which a formula is treated as singular"
    )
    min_temperature_c: float = Field(
        default=-50.0,
        description="Lowest accepted sensor temperature (degC)"
    )
    max_temperature_c: float = Field(
        default=100.0,
        description="Highest accepted sensor temperature (degC)"
    )

    @model_validator(mode='after')
    def validate_temperature_range(self) -> 'EngineConfig':
        """Validate that the accepted temperature range is not empty."""
        if self.min_temperature_c >= self.max_temperature_c:
            raise ValueError(
                f"min_temperature_c ({self.min_temperature_c}) must be lower than "
                f"max_temperature_c ({self.max_temperature_c})"
            )
        if self.min_temperature_c <= -273.15:
            raise ValueError("min_temperature_c must be above absolute zero")
        return self

    @classmethod
    def at_altitude(cls, altitude_m: float, **overrides: Any) -> 'EngineConfig':
        """
        Build a config whose pressure follows the standard atmosphere.

        Formula:
            P = 101325 * (1 - 2.25577e-5 * Z)^5.2559  [Pa]

        Args:
            altitude_m: Elevation above sea level in metres
            **overrides: Any other EngineConfig field

        Returns:
            EngineConfig with the altitude-compensated pressure

        Raises:
            ConfigurationError: If the altitude is outside the formula's domain
        """
        base = 1.0 - _ALTITUDE_LAPSE_FACTOR * altitude_m
        if base <= 0.0:
            raise ConfigurationError(
                f"Altitude {altitude_m} m is outside the standard atmosphere model",
                context={"altitude_m": altitude_m},
            )
        pressure = STANDARD_ATMOSPHERIC_PRESSURE_PA * base ** _ALTITUDE_EXPONENT
        return build_config({**overrides, "atmospheric_pressure_pa": pressure})

    def with_overrides(self, **overrides: Any) -> 'EngineConfig':
        """Return a re-validated copy with some fields replaced."""
        return build_config({**self.model_dump(), **overrides})


def build_config(values: Mapping[str, Any], source: Optional[str] = None) -> EngineConfig:
    """
    Validate a mapping into an EngineConfig.

    Raises:
        ConfigurationError: On unknown keys or invalid values
    """
    try:
        return EngineConfig(**dict(values))
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid engine configuration: {e.error_count()} error(s)",
            context={"errors": [err["msg"] for err in e.errors()]},
            source=source,
        ) from e


# field name -> parser
_ENV_FIELDS = {
    "ATMOSPHERIC_PRESSURE_PA": ("atmospheric_pressure_pa", float),
    "CONVERGENCE_EPSILON": ("convergence_epsilon", float),
    "MAX_ITERATIONS": ("max_iterations", int),
    "BRACKET_HALF_WIDTH_C": ("bracket_half_width_c", float),
    "SINGULARITY_THRESHOLD": ("singularity_threshold", float),
    "MIN_TEMPERATURE_C": ("min_temperature_c", float),
    "MAX_TEMPERATURE_C": ("max_temperature_c", float),
}


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Load configuration from ``PSYCHROMETER_*`` environment variables.

    ``PSYCHROMETER_ALTITUDE_M`` derives the atmospheric pressure unless
    ``PSYCHROMETER_ATMOSPHERIC_PRESSURE_PA`` is also set, which wins.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        Loaded configuration
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    for suffix, (field_name, parser) in _ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[field_name] = parser(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Cannot parse {ENV_PREFIX + suffix}={raw!r}",
                context={"variable": ENV_PREFIX + suffix, "value": raw},
                source="env",
            ) from e

    altitude = environ.get(ENV_PREFIX + "ALTITUDE_M")
    if altitude and "atmospheric_pressure_pa" not in values:
        try:
            altitude_m = float(altitude)
        except ValueError as e:
            raise ConfigurationError(
                f"Cannot parse {ENV_PREFIX}ALTITUDE_M={altitude!r}",
                context={"variable": ENV_PREFIX + "ALTITUDE_M", "value": altitude},
                source="env",
            ) from e
        return EngineConfig.at_altitude(altitude_m, **values)

    logger.debug(f"Loaded {len(values)} engine setting(s) from environment")
    return build_config(values, source="env")


def load_config_from_file(path: Union[str, Path]) -> EngineConfig:
    """
    Load configuration from a YAML mapping.

    An optional top-level ``altitude_m`` key is honoured the same way as the
    environment variable.

    Args:
        path: Path to the YAML file

    Returns:
        Loaded configuration
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(
            f"Config file not found: {path}",
            context={"path": str(path)},
            source="file",
        )

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Config file is not valid YAML: {path}",
                context={"path": str(path)},
                source="file",
            ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file must contain a mapping: {path}",
            context={"path": str(path), "type": type(data).__name__},
            source="file",
        )

    altitude = data.pop("altitude_m", None)
    if altitude is not None and "atmospheric_pressure_pa" not in data:
        try:
            altitude_m = float(altitude)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Cannot parse altitude_m={altitude!r} in {path}",
                context={"path": str(path), "value": repr(altitude)},
                source="file",
            ) from e
        return EngineConfig.at_altitude(altitude_m, **data)

    logger.info(f"Loaded engine configuration from {path}")
    return build_config(data, source="file")


DEFAULT_CONFIG = EngineConfig()
