"""
Atmospheric extinction and airmass.

Extinction components follow the V-band branch of Schaefer (1998)
VISLIMIT. Each returns magnitudes per airmass. Angles are in degrees,
altitude in metres, humidity in percent, temperature in °C.

All functions are pure (no I/O, no side effects) and use the exact
exponential; they run once per prepared session, not per query.
"""

import numpy as np

from skybright.formulas.fast_math import exact_exp, fast_exp
from skybright.formulas.sky_brightness import (
    AIRMASS_HORIZON_CLAMP,
    OZONE_COEF,
    WATER_VAPOUR_COEF,
    WAVELENGTH_UM,
)

# Scale heights (m) of molecular gas and aerosol.
RAYLEIGH_SCALE_HEIGHT_M = 8200.0
AEROSOL_SCALE_HEIGHT_M = 1500.0


def _season_angle(month):
    """Angle in radians that is zero in March and advances 30° per month."""
    return np.radians((month - 3) * 30.0)


def rayleigh_extinction(altitude_m, wavelength_um=WAVELENGTH_UM):
    return (0.1066 * np.exp(-altitude_m / RAYLEIGH_SCALE_HEIGHT_M)
            * (wavelength_um / 0.55) ** -4)


def aerosol_extinction(altitude_m, relative_humidity, month, latitude_deg,
                       wavelength_um=WAVELENGTH_UM):
    """Aerosol scattering coefficient.

    Aerosols swell in humid air (the ln(RH/100) factor) and their loading
    swings with the season, in opposite phase between hemispheres.
    RH <= 0 or RH >= 100 makes the humidity factor undefined.
    """
    hemisphere = 1.0 if latitude_deg > 0.0 else -1.0
    ka = 0.1 * (wavelength_um / 0.55) ** -1.3 * np.exp(-altitude_m / AEROSOL_SCALE_HEIGHT_M)
    humidity_growth = (1.0 - 0.32 / np.log(np.float64(relative_humidity) / 100.0)) ** 1.33
    seasonal = 1.0 + 0.33 * hemisphere * np.sin(_season_angle(month))
    return ka * humidity_growth * seasonal


def ozone_extinction(month, latitude_deg):
    lat = np.radians(latitude_deg)
    ra = _season_angle(month)
    return OZONE_COEF * (3.0 + 0.4 * (lat * np.cos(ra) - np.cos(3.0 * lat))) / 3.0


def water_vapour_extinction(altitude_m, relative_humidity, temperature_c):
    return (WATER_VAPOUR_COEF * 0.94 * (relative_humidity / 100.0)
            * np.exp(temperature_c / 15.0)
            * np.exp(-altitude_m / RAYLEIGH_SCALE_HEIGHT_M))


def composite_extinction(month, latitude_deg, altitude_m, temperature_c,
                         relative_humidity):
    """Total extinction coefficient K (mag per airmass).

    Sum of the Rayleigh, aerosol, ozone and water-vapour components.
    Independent of the viewing direction.

    Args:
        month: Calendar month, 1-12.
        latitude_deg: Site latitude in degrees (sign selects hemisphere).
        altitude_m: Site altitude above sea level in metres.
        temperature_c: Air temperature in °C.
        relative_humidity: Relative humidity in percent.

    Returns:
        float K.
    """
    return float(
        rayleigh_extinction(altitude_m)
        + aerosol_extinction(altitude_m, relative_humidity, month, latitude_deg)
        + ozone_extinction(month, latitude_deg)
        + water_vapour_extinction(altitude_m, relative_humidity, temperature_c)
    )


def _secant_airmass(zenith_dist_deg, exp_fn):
    cos_z = np.cos(np.radians(zenith_dist_deg))
    return 1.0 / (cos_z + 0.025 * exp_fn(-11.0 * cos_z))


def _clamped_airmass(zenith_dist_deg, exp_fn):
    z = np.asarray(zenith_dist_deg, dtype=float)
    # The denominator reaches zero a few degrees below the horizon and is
    # negative beyond; those entries are replaced by the clamp.
    with np.errstate(divide="ignore"):
        return np.where(z >= 90.0, AIRMASS_HORIZON_CLAMP, _secant_airmass(z, exp_fn))


def airmass(zenith_dist_deg):
    """Relative airmass of a body at the given zenith distance (degrees).

    Secant law with a curvature correction that keeps the value finite
    near the horizon (exactly 1/0.025 = 40 at 90°). At or below the
    horizon the value is clamped to AIRMASS_HORIZON_CLAMP.
    """
    x = _clamped_airmass(zenith_dist_deg, exact_exp)
    return float(x) if x.ndim == 0 else x


def target_airmass(zenith_dist_deg, exp=fast_exp):
    """Airmass along a queried direction, using the fast exponential by default.

    Clamped like airmass(), so targets below the horizon see the
    horizon airmass rather than a negative or infinite one.
    """
    return _clamped_airmass(zenith_dist_deg, exp)
