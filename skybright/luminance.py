"""
Sky luminance evaluator.

Evaluates the total sky luminance (cd/m²) of one or many sky directions
against a prepared session. Inputs are angles in radians and may be
scalars or numpy arrays that broadcast together; the empirical formulas
work in degrees internally.

Four contributions are computed in the model's linear brightness unit:

    dark night    airglow baseline, modulated by the solar cycle
    moonlight     lunar light scattered by the atmosphere
    twilight      scattered light from a Sun below the horizon
    daylight      solar light scattered by the atmosphere

and combined as ``dark night + one of (twilight, daylight) + faded
moonlight``. Both the twilight/daylight selection and the moonlight fade
are empirical patches from Schaefer's VISLIMIT, not derived physics.

The hot path uses the fast exponential of skybright.formulas.fast_math;
pass ``exact=True`` to substitute the exact exponential for validation.
"""

from dataclasses import dataclass

import numpy as np

from skybright.formulas.extinction import target_airmass
from skybright.formulas.fast_math import exact_exp, exact_exp10, fast_exp, fast_exp10
from skybright.formulas.photometry import moon_magnitude, scattering_function
from skybright.formulas.sky_brightness import (
    BRIGHTNESS_PER_NANOLAMBERT,
    DARK_NIGHT_BASE,
    MAG_OFFSET,
    MIN_ANGULAR_DISTANCE_DEG,
    MOON_FADE_END_DEG,
    MOON_FADE_START_DEG,
    NLAMBERT_TO_CDM2,
    SOLAR_CYCLE_EPOCH,
    SOLAR_CYCLE_YEARS,
    SUN_MAGNITUDE,
)


@dataclass(frozen=True)
class LuminanceTerms:
    """Per-direction breakdown of the sky brightness, in model units."""

    dark_night: np.ndarray
    moonlight: np.ndarray
    twilight: np.ndarray
    daylight: np.ndarray
    moon_weight: float

    @property
    def twilight_selected(self):
        """True where the twilight term is the one added to the total."""
        return self.daylight > self.twilight

    @property
    def sun_contribution(self):
        return np.where(self.twilight_selected, self.twilight, self.daylight)

    @property
    def total(self):
        return self.dark_night + self.sun_contribution + self.moonlight * self.moon_weight

    @property
    def nanolamberts(self):
        return self.total / BRIGHTNESS_PER_NANOLAMBERT

    @property
    def luminance(self):
        """Total luminance in cd/m²."""
        return _as_output(self.nanolamberts * NLAMBERT_TO_CDM2)


def _as_output(value):
    value = np.asarray(value, dtype=float)
    return float(value) if value.ndim == 0 else value


def moon_fade_weight(moon_zenith_deg):
    """Weight of the moonlight term for a given Moon zenith distance.

    1 while the Moon is higher than 10° above the horizon, falling
    linearly to 0 at the horizon so the Moon does not pop in or out of the
    sky brightness as it rises or sets.
    """
    span = MOON_FADE_END_DEG - MOON_FADE_START_DEG
    return float(np.clip((MOON_FADE_END_DEG - moon_zenith_deg) / span, 0.0, 1.0))


def dark_night_brightness(year, zenith_rad, k, x, exp10=fast_exp10):
    cycle = 1.0 + 0.3 * np.cos(2.0 * np.pi * (year - SOLAR_CYCLE_EPOCH) / SOLAR_CYCLE_YEARS)
    # Van Rhijn layer: airglow brightens toward the horizon.
    van_rhijn = 0.4 + 0.6 / np.sqrt(1.0 - 0.96 * np.sin(zenith_rad) ** 2)
    return DARK_NIGHT_BASE * cycle * van_rhijn * exp10(-0.4 * k * x)


def scattered_brightness(magnitude, dist_deg, k, body_airmass, target_loss,
                         exp10=fast_exp10, scatter_exp10=exact_exp10):
    """Brightness of a body's light scattered toward the target direction.

    Shared by the moonlight and daylight terms. ``target_loss`` is the
    fraction of light scattered out along the target line of sight,
    1 - 10^(-0.4 K X).
    """
    transmission = exp10(-0.4 * k * body_airmass)
    scattering = scattering_function(dist_deg, exp10=scatter_exp10)
    brightness = exact_exp10(-0.4 * (magnitude - MAG_OFFSET + 43.27)) * target_loss
    return brightness * (scattering * transmission + 440000.0 * (1.0 - transmission))


def twilight_brightness(sun_zenith_deg, sun_dist_deg, zenith_deg, k, target_loss):
    sun_height = 90.0 - sun_zenith_deg
    exponent = SUN_MAGNITUDE - MAG_OFFSET + 32.5 - sun_height - zenith_deg / (360.0 * k)
    return exact_exp10(-0.4 * exponent) * (100.0 / sun_dist_deg) * target_loss


def luminance_terms(state, moon_dist, sun_dist, zenith_dist, exact=False):
    """Evaluate the four brightness contributions for the given directions.

    Args:
        state: A prepared session state (see skybright.session.PreparedState).
        moon_dist: Angular distance from target to Moon (radians).
        sun_dist: Angular distance from target to Sun (radians).
        zenith_dist: Zenith distance of the target (radians).
        exact: Use the exact exponential everywhere instead of fast_exp10.

    Returns:
        LuminanceTerms.
    """
    exp10 = exact_exp10 if exact else fast_exp10
    rm = np.maximum(np.degrees(np.asarray(moon_dist, dtype=float)), MIN_ANGULAR_DISTANCE_DEG)
    rs = np.maximum(np.degrees(np.asarray(sun_dist, dtype=float)), MIN_ANGULAR_DISTANCE_DEG)
    zenith_rad = np.asarray(zenith_dist, dtype=float)
    zenith_deg = np.degrees(zenith_rad)
    k = state.extinction

    x = target_airmass(zenith_deg, exp=exact_exp if exact else fast_exp)
    target_loss = 1.0 - exact_exp10(-0.4 * k * x)

    dark_night = dark_night_brightness(state.year, zenith_rad, k, x, exp10=exp10)
    dark_night = dark_night * state.darknight_scale

    moonlight = scattered_brightness(
        moon_magnitude(state.moon_phase_deg), rm, k, state.moon_airmass,
        target_loss, exp10=exp10, scatter_exp10=exact_exp10,
    ) * state.moon_scale

    twilight = twilight_brightness(
        state.sun_zenith_deg, rs, zenith_deg, k, target_loss,
    ) * state.twilight_scale

    daylight = scattered_brightness(
        SUN_MAGNITUDE, rs, k, state.sun_airmass,
        target_loss, exp10=exp10, scatter_exp10=exp10,
    )

    return LuminanceTerms(
        dark_night=dark_night,
        moonlight=moonlight,
        twilight=twilight,
        daylight=daylight,
        moon_weight=moon_fade_weight(state.moon_zenith_deg),
    )


def get_luminance(state, moon_dist, sun_dist, zenith_dist, exact=False):
    """Total sky luminance in cd/m².

    Pure with respect to ``state``. Returns a float for scalar inputs and
    an ndarray when any input is an array.

    The twilight and daylight terms are never summed. Whichever of the two
    is smaller is added: the twilight fit explodes once the Sun is well
    above the horizon, while the daylight term keeps a large 440000
    floor when the Sun's light is fully extinguished at night.
    """
    return luminance_terms(state, moon_dist, sun_dist, zenith_dist, exact=exact).luminance
