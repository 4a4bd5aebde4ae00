"""
Physical constants of the Schaefer sky-brightness model.

Citation: Schaefer, B.E. (1998). To the visual limits. Sky & Telescope,
95(5), 57-60; BASIC program VISLIMIT. Krisciunas, K. & Schaefer, B.E.
(1991). A model of the brightness of moonlight. PASP, 103, 1033-1039.

All brightness intermediates are in the model's linear unit, where
1.11e-15 units equal one nanolambert.
"""

import numpy as np

# Effective wavelength in micrometres (V band).
WAVELENGTH_UM = 0.55

# Magnitude offset of the sky-brightness unit system (V band).
MAG_OFFSET = -11.05

# Ozone and water-vapour absorption coefficients (V band).
OZONE_COEF = 0.031
WATER_VAPOUR_COEF = 0.031

# Dark-night sky brightness at solar minimum, zenith, outside the atmosphere.
DARK_NIGHT_BASE = 1.0e-13

# Colour correction applied to the lunar magnitude (V band: none).
MOON_COLOR_CORRECTION = 0.0

# Apparent V magnitude of the Sun.
SUN_MAGNITUDE = -26.74

# Airmass returned for bodies at or below the geometric horizon.
AIRMASS_HORIZON_CLAMP = 40.0

# Angular distances (degrees) are floored here before the 1/r² scattering
# term is evaluated.
MIN_ANGULAR_DISTANCE_DEG = 1.0

# Moon zenith distances (degrees) bounding the linear horizon fade of the
# moonlight term.
MOON_FADE_START_DEG = 80.0
MOON_FADE_END_DEG = 90.0

# Length of the solar cycle (years) and its reference minimum.
SOLAR_CYCLE_YEARS = 11.0
SOLAR_CYCLE_EPOCH = 1992

# Model brightness unit → nanolambert.
BRIGHTNESS_PER_NANOLAMBERT = 1.11e-15

# Nanolambert → cd/m² (1 nL = 1e-9 / pi * 1e4 cd/m²).
NLAMBERT_TO_CDM2 = 3.183e-6

# Reference luminance for the mag/arcsec² zero point in mcd/m².
# 108,000 cd/m² × 1000 mcd/cd = 108,000,000 mcd/m².
REFERENCE_MCD = 108_000_000

# Bortle scale thresholds: class → (mag_min, mag_max, description).
# Bortle, J.E. (2001). Introducing the Bortle Dark-Sky Scale.
# Updated boundary values from Crumey (2014).
BORTLE_THRESHOLDS = {
    1: (21.75, np.inf, "Excellent dark-sky site"),
    2: (21.50, 21.75, "Typical dark-sky site"),
    3: (21.25, 21.50, "Rural sky"),
    4: (20.50, 21.25, "Rural/suburban transition"),
    5: (19.50, 20.50, "Suburban sky"),
    6: (18.50, 19.50, "Bright suburban sky"),
    7: (18.00, 18.50, "Suburban/urban transition"),
    8: (17.00, 18.00, "City sky"),
    9: (-np.inf, 17.00, "Inner-city sky"),
}
