"""
Psychrometric constants.

Values follow the ASHRAE Handbook of Fundamentals (Psychrometrics chapter) in
SI units: degC, Pa, kJ/kg.
"""


class PsychrometricConstants:
    """
    Fixed physical constants shared by the calculation layers.

    Pressure and convergence settings are NOT here; they are per-engine
    configuration (see ``psychrometer.config.EngineConfig``).
    """

    # Temperature conversion
    KELVIN_OFFSET = 273.15

    # Molecular weight ratio (water vapor / dry air)
    EPSILON = 0.62198

    # Reference pressure of the enhancement factor correlation (Pa)
    REFERENCE_PRESSURE_PA = 101325.0

    # Specific heats (kJ/(kg*K))
    CP_DRY_AIR = 1.006
    CP_WATER_VAPOR = 1.805
    CP_LIQUID_WATER = 4.186
    CP_ICE = 2.093

    # Latent heats (kJ/kg)
    LATENT_HEAT_VAPORIZATION_0C = 2501.0
    LATENT_HEAT_FUSION = 334.0

    # Gas constant for dry air (kJ/(kg*K))
    R_DRY_AIR = 0.287055

    # 1/epsilon - 1, vapor contribution to moist-air volume
    VAPOR_VOLUME_FACTOR = 1.6078
