"""
Centralized physical constants and pure formulas of the sky-brightness model.

config.py retains runtime defaults and paths; this package holds the
science. Nothing here logs, does I/O or keeps state.
"""

from skybright.formulas.sky_brightness import (
    AIRMASS_HORIZON_CLAMP,
    BORTLE_THRESHOLDS,
    BRIGHTNESS_PER_NANOLAMBERT,
    MIN_ANGULAR_DISTANCE_DEG,
    NLAMBERT_TO_CDM2,
    REFERENCE_MCD,
)
from skybright.formulas.fast_math import (
    FAST_EXP_MAX_REL_ERROR,
    FAST_EXP_VALID_RANGE,
    fast_exp,
    fast_exp10,
)
from skybright.formulas.extinction import (
    airmass,
    composite_extinction,
)
from skybright.formulas.photometry import (
    classify_bortle,
    luminance_to_mag_arcsec2,
    moon_magnitude,
)

__all__ = [
    # constants
    "AIRMASS_HORIZON_CLAMP",
    "BORTLE_THRESHOLDS",
    "BRIGHTNESS_PER_NANOLAMBERT",
    "MIN_ANGULAR_DISTANCE_DEG",
    "NLAMBERT_TO_CDM2",
    "REFERENCE_MCD",
    # fast math
    "FAST_EXP_MAX_REL_ERROR",
    "FAST_EXP_VALID_RANGE",
    "fast_exp",
    "fast_exp10",
    # extinction
    "airmass",
    "composite_extinction",
    # photometry
    "classify_bortle",
    "luminance_to_mag_arcsec2",
    "moon_magnitude",
]
