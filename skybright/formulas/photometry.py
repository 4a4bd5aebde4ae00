"""
Photometric building blocks shared by the luminance terms, plus
conversions from cd/m² to surface brightness and the Bortle scale.

Citation: Krisciunas, K. & Schaefer, B.E. (1991). A model of the
brightness of moonlight. PASP, 103, 1033-1039.
"""

import numpy as np

from skybright.formulas.fast_math import exact_exp10
from skybright.formulas.sky_brightness import (
    BORTLE_THRESHOLDS,
    MOON_COLOR_CORRECTION,
    REFERENCE_MCD,
)


def moon_magnitude(phase_deg):
    """Apparent V magnitude of the Moon for a phase angle in degrees.

    0° is full moon (-12.73), 180° is new moon. The quartic term models
    the opposition surge.
    """
    phase = np.asarray(phase_deg, dtype=float)
    return -12.73 + 0.026 * np.abs(phase) + 4e-9 * phase ** 4 + MOON_COLOR_CORRECTION


def scattering_function(dist_deg, exp10=exact_exp10):
    """Scattering function for a source at dist_deg from the target.

    Blends the aerosol (Mie) forward-scattering peak, an inverse-square
    term near the source plus an exponential falloff, with the Rayleigh
    term 10^5.36 (1.06 + cos² ρ).
    """
    rho = np.asarray(dist_deg, dtype=float)
    mie = 6.2e7 / rho ** 2 + exp10(6.15 - rho / 40.0)
    rayleigh = exp10(5.36) * (1.06 + np.cos(np.radians(rho)) ** 2)
    return mie + rayleigh


def luminance_to_mag_arcsec2(luminance_cd_m2):
    """Convert luminance (cd/m²) to surface brightness (V mag/arcsec²).

    Args:
        luminance_cd_m2: Luminance, scalar or array.

    Returns:
        mag/arcsec², same shape as input. Zero luminance maps to +inf.
    """
    mcd = np.asarray(luminance_cd_m2, dtype=float) * 1000.0
    with np.errstate(divide="ignore"):
        return -2.5 * np.log10(mcd / REFERENCE_MCD)


def mag_arcsec2_to_luminance(mag_arcsec2):
    return REFERENCE_MCD * 10 ** (-0.4 * np.asarray(mag_arcsec2, dtype=float)) / 1000.0


def classify_bortle(mag_arcsec2):
    """Classify sky brightness on the Bortle scale (1-9).

    Args:
        mag_arcsec2: Sky brightness in mag/arcsec².

    Returns:
        Tuple of (bortle_class, description). NaN gives (None, "unknown").
    """
    mag = float(mag_arcsec2)
    if np.isnan(mag):
        return None, "unknown"
    for bortle_class in range(1, 10):
        low, high, desc = BORTLE_THRESHOLDS[bortle_class]
        if low <= mag < high:
            return bortle_class, desc
    # Only +inf (zero luminance) falls past the table.
    return 1, BORTLE_THRESHOLDS[1][2]
