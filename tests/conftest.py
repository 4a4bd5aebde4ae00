"""
Shared fixtures for skybright tests.

Provides reference observing contexts (dark night, twilight, daylight,
moonlit sky) and a session factory, so each test module can focus on
one property of the model against known inputs.
"""

import math
import tempfile

import pytest

from skybright.logging_config import reset_logging
from skybright.session import SkyBrightnessSession


# ---------------------------------------------------------------------------
# Reference observing context: 50°N, 100 m, June 2020, new moon below the
# horizon, Sun 19.4° below the horizon.
# ---------------------------------------------------------------------------
DARK_NIGHT = {
    "year": 2020,
    "month": 6,
    "moon_phase": math.pi,
    "latitude": 0.872,
    "altitude": 100.0,
    "temperature": 15.0,
    "relative_humidity": 50.0,
    "moon_zenith_dist": 1.74,
    "sun_zenith_dist": 1.91,
}

# Query straight up, far from both bodies.
ZENITH_QUERY = {"moon_dist": 1.57, "sun_dist": 1.57, "zenith_dist": 0.0}

# K for DARK_NIGHT, worked by hand from the four extinction components.
DARK_NIGHT_EXTINCTION = 0.3851


def deg(value):
    return math.radians(value)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after test."""
    with tempfile.TemporaryDirectory(prefix="skybright_test_") as d:
        yield d


@pytest.fixture
def make_session():
    """Factory: a prepared session from DARK_NIGHT with overrides."""
    def _make(**overrides):
        inputs = {**DARK_NIGHT, **overrides}
        return SkyBrightnessSession().prepare(**inputs)
    return _make


@pytest.fixture
def dark_session(make_session):
    return make_session()


@pytest.fixture
def deep_night_session(make_session):
    """Sun and Moon at the nadir: only the dark-night term is left."""
    return make_session(sun_zenith_dist=math.pi, moon_zenith_dist=math.pi)


@pytest.fixture
def moonlit_session(make_session):
    """Full moon 40° from the zenith, Sun at the nadir."""
    return make_session(moon_phase=0.0, moon_zenith_dist=deg(40.0),
                        sun_zenith_dist=math.pi)


@pytest.fixture
def daylight_session(make_session):
    """Sun at the zenith."""
    return make_session(sun_zenith_dist=0.0)


@pytest.fixture
def civil_twilight_session(make_session):
    """Sun 6° below the horizon."""
    return make_session(sun_zenith_dist=deg(96.0))


@pytest.fixture(autouse=True)
def _isolated_logging():
    yield
    reset_logging()
