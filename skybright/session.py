"""
Observation session: slow-changing inputs and the constants derived from them.

A session is prepared once per update tick (whenever the date, site,
weather or Sun/Moon geometry changes) and then queried for any number of
sky directions:

    session = SkyBrightnessSession()
    session.prepare(year=2020, month=6, moon_phase=math.pi, ...)
    cd_m2 = session.get_luminance(moon_dist, sun_dist, zenith_dist)

Angles cross this boundary in radians. Preparing builds a new immutable
PreparedState and swaps it in with a single assignment, so a query always
reads one consistent snapshot. Ordering re-prepares against in-flight
queries remains the caller's job.

Inputs are not validated here: relative humidity <= 0 or non-finite
values give NaN/inf results. Use skybright.schemas.validate_conditions()
first when the inputs come from an untrusted source.
"""

import logging
import math
from dataclasses import asdict, dataclass

from skybright import config
from skybright import luminance
from skybright.formulas.extinction import airmass, composite_extinction

log = logging.getLogger(__name__)


class SessionNotPreparedError(RuntimeError):
    """Raised when a session is queried before prepare() has run."""


@dataclass(frozen=True)
class PreparedState:
    """Inputs of one prepare() call, in degrees, plus the derived constants."""

    year: int
    month: int
    moon_phase_deg: float  # 0 = full moon, 180 = new moon
    latitude_deg: float
    altitude_m: float
    temperature_c: float
    relative_humidity: float  # percent
    moon_zenith_deg: float
    sun_zenith_deg: float
    twilight_scale: float
    moon_scale: float
    darknight_scale: float
    extinction: float  # composite K, mag per airmass
    moon_airmass: float
    sun_airmass: float

    def to_dict(self):
        return asdict(self)


def build_prepared_state(year, month, moon_phase, latitude, altitude,
                         temperature, relative_humidity, moon_zenith_dist,
                         sun_zenith_dist,
                         twilight_scale=config.DEFAULT_TWILIGHT_SCALE,
                         moon_scale=config.DEFAULT_MOON_SCALE,
                         darknight_scale=config.DEFAULT_DARKNIGHT_SCALE):
    """Derive the session constants from raw inputs (angles in radians)."""
    latitude_deg = math.degrees(latitude)
    moon_zenith_deg = math.degrees(moon_zenith_dist)
    sun_zenith_deg = math.degrees(sun_zenith_dist)

    return PreparedState(
        year=int(year),
        month=int(month),
        moon_phase_deg=math.degrees(moon_phase),
        latitude_deg=latitude_deg,
        altitude_m=float(altitude),
        temperature_c=float(temperature),
        relative_humidity=float(relative_humidity),
        moon_zenith_deg=moon_zenith_deg,
        sun_zenith_deg=sun_zenith_deg,
        twilight_scale=float(twilight_scale),
        moon_scale=float(moon_scale),
        darknight_scale=float(darknight_scale),
        extinction=composite_extinction(
            month, latitude_deg, altitude, temperature, relative_humidity,
        ),
        moon_airmass=airmass(moon_zenith_deg),
        sun_airmass=airmass(sun_zenith_deg),
    )


class SkyBrightnessSession:
    """Holds the prepared state for one observation context."""

    def __init__(self):
        self._state = None

    @property
    def is_prepared(self):
        return self._state is not None

    @property
    def state(self):
        """The current PreparedState.

        Raises:
            SessionNotPreparedError: if prepare() has never run.
        """
        state = self._state
        if state is None:
            raise SessionNotPreparedError(
                "SkyBrightnessSession queried before prepare()"
            )
        return state

    def prepare(self, year, month, moon_phase, latitude, altitude,
                temperature, relative_humidity, moon_zenith_dist,
                sun_zenith_dist,
                twilight_scale=config.DEFAULT_TWILIGHT_SCALE,
                moon_scale=config.DEFAULT_MOON_SCALE,
                darknight_scale=config.DEFAULT_DARKNIGHT_SCALE):
        """Recompute every derived constant from a full set of inputs.

        Returns the session so calls can be chained.
        """
        state = build_prepared_state(
            year, month, moon_phase, latitude, altitude, temperature,
            relative_humidity, moon_zenith_dist, sun_zenith_dist,
            twilight_scale, moon_scale, darknight_scale,
        )
        self._state = state
        log.debug(
            "Prepared session: K=%.4f moon_airmass=%.3f sun_airmass=%.3f "
            "(Zm=%.1f° Zs=%.1f°)",
            state.extinction, state.moon_airmass, state.sun_airmass,
            state.moon_zenith_deg, state.sun_zenith_deg,
        )
        return self

    def get_luminance(self, moon_dist, sun_dist, zenith_dist, exact=False):
        """Sky luminance (cd/m²) for direction(s) given in radians."""
        return luminance.get_luminance(self.state, moon_dist, sun_dist, zenith_dist,
                                       exact=exact)

    def luminance_terms(self, moon_dist, sun_dist, zenith_dist, exact=False):
        return luminance.luminance_terms(self.state, moon_dist, sun_dist, zenith_dist,
                                         exact=exact)


def prepare(session, year, month, moon_phase, latitude, altitude, temperature,
            relative_humidity, moon_zenith_dist, sun_zenith_dist,
            twilight_scale=config.DEFAULT_TWILIGHT_SCALE,
            moon_scale=config.DEFAULT_MOON_SCALE,
            darknight_scale=config.DEFAULT_DARKNIGHT_SCALE):
    """Prepare ``session`` in place. Function form of SkyBrightnessSession.prepare."""
    session.prepare(
        year, month, moon_phase, latitude, altitude, temperature,
        relative_humidity, moon_zenith_dist, sun_zenith_dist,
        twilight_scale, moon_scale, darknight_scale,
    )


def get_luminance(session, moon_dist, sun_dist, zenith_dist, exact=False):
    """Function form of SkyBrightnessSession.get_luminance."""
    return session.get_luminance(moon_dist, sun_dist, zenith_dist, exact=exact)
