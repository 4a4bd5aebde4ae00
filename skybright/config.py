"""
Centralized configuration for the skybright sky-luminance model.

Runtime defaults, validated input ranges, sampling parameters and output
paths live here with inline citations justifying each choice. Physical
constants of the model itself live in skybright.formulas.
"""

import os

# ─── TUNABLE SCALE COEFFICIENTS ───────────────────────────────────────────
# Multipliers applied to the twilight, moonlight and dark-night terms.
# A value of 1.0 reproduces Schaefer (1998) unchanged; other values let a
# caller calibrate against measured sky photometry without touching the
# physical model.
# Citation: Schaefer, B.E. (1998). To the visual limits. Sky & Telescope,
#           95(5), 57-60.
DEFAULT_TWILIGHT_SCALE = 1.0
DEFAULT_MOON_SCALE = 1.0
DEFAULT_DARKNIGHT_SCALE = 1.0

# ─── DEFAULT OBSERVING CONDITIONS ─────────────────────────────────────────
# ISA-like mid-latitude defaults used when the caller has no weather feed.
DEFAULT_TEMPERATURE_C = 15.0
DEFAULT_RELATIVE_HUMIDITY = 40.0
DEFAULT_ALTITUDE_M = 0.0

# ─── INPUT VALIDATION RANGES ──────────────────────────────────────────────
# The aerosol term uses ln(RH/100); RH = 0 is undefined and RH = 100
# divides by zero inside the same term, so the gate is (0, 100).
RELATIVE_HUMIDITY_RANGE = (0.0, 100.0)
TEMPERATURE_RANGE_C = (-80.0, 60.0)
# Above ~12 km the aerosol exponential exp(-AL/1500) underflows toward 0
# and the model leaves its calibrated regime.
ALTITUDE_RANGE_M = (-500.0, 12000.0)
MONTH_RANGE = (1, 12)

# ─── SKY MAP SAMPLING ─────────────────────────────────────────────────────
# Grid resolution for sampled sky maps (altitude rows x azimuth columns).
SKY_MAP_ALT_STEPS = 30
SKY_MAP_AZ_STEPS = 72
# Lowest sampled altitude (degrees); the model is unreliable right at the
# horizon where the target airmass approaches the sentinel value.
SKY_MAP_MIN_ALT_DEG = 2.0

# ─── VISUALIZATION PARAMETERS ─────────────────────────────────────────────
MAP_DPI = 150
SKY_MAP_CMAP = "magma"

# ─── OUTPUT PATHS ─────────────────────────────────────────────────────────
DEFAULT_OUTPUT_DIR = os.environ.get("SKYBRIGHT_OUTPUT_DIR", "./outputs")

OUTPUT_DIRS = {
    "csv": "csv",
    "maps": "maps",
}
