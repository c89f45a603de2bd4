"""
Psychrometer Configuration Package
==================================

Immutable engine configuration with:
- Type-safe Pydantic schema
- Environment-based loading
- YAML file loading
- Altitude compensation
"""

from psychrometer.config.schemas import (
    DEFAULT_CONFIG,
    DEFAULT_CONVERGENCE_EPSILON,
    STANDARD_ATMOSPHERIC_PRESSURE_PA,
    EngineConfig,
    build_config,
    load_config_from_env,
    load_config_from_file,
)


__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONVERGENCE_EPSILON",
    "STANDARD_ATMOSPHERIC_PRESSURE_PA",
    "EngineConfig",
    "build_config",
    "load_config_from_env",
    "load_config_from_file",
]
