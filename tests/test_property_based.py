"""
Property-based tests using Hypothesis for the sky-brightness model.

These tests verify invariants that must hold for ALL valid inputs,
not just the reference scenarios: positivity and finiteness of the
luminance, bounded airmass and fade weight, the twilight/daylight
selection rule and the fast exponential error bound.

Run with: pytest tests/test_property_based.py -v
"""

import math

import numpy as np
import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

valid_conditions = st.fixed_dictionaries({
    "year": st.integers(min_value=1950, max_value=2100),
    "month": st.integers(min_value=1, max_value=12),
    "moon_phase": st.floats(min_value=0.0, max_value=math.pi),
    "latitude": st.floats(min_value=-1.5, max_value=1.5),
    "altitude": st.floats(min_value=0.0, max_value=4000.0),
    "temperature": st.floats(min_value=-30.0, max_value=40.0),
    "relative_humidity": st.floats(min_value=1.0, max_value=99.0),
    "moon_zenith_dist": st.floats(min_value=0.0, max_value=math.pi),
    "sun_zenith_dist": st.floats(min_value=0.0, max_value=math.pi),
})

angle = st.floats(min_value=0.0, max_value=math.pi)
visible_zenith = st.floats(min_value=0.0, max_value=math.radians(85.0))


class TestLuminanceProperties:

    @given(conditions=valid_conditions, moon=angle, sun=angle, zenith=visible_zenith)
    @settings(max_examples=200, deadline=None)
    def test_positive_and_finite(self, conditions, moon, sun, zenith):
        """Every valid context and visible direction gives a finite positive luminance."""
        from skybright import SkyBrightnessSession

        lum = SkyBrightnessSession().prepare(**conditions).get_luminance(moon, sun, zenith)
        assert math.isfinite(lum)
        assert lum > 0

    @given(conditions=valid_conditions, moon=angle, sun=angle, zenith=angle)
    @settings(max_examples=200, deadline=None)
    def test_finite_non_negative_over_whole_sphere(self, conditions, moon, sun, zenith):
        """Targets below the horizon included."""
        from skybright import SkyBrightnessSession

        lum = SkyBrightnessSession().prepare(**conditions).get_luminance(moon, sun, zenith)
        assert math.isfinite(lum)
        assert lum >= 0

    @given(conditions=valid_conditions, moon=angle, sun=angle, zenith=visible_zenith)
    @settings(max_examples=100, deadline=None)
    def test_sun_terms_never_summed(self, conditions, moon, sun, zenith):
        from skybright import SkyBrightnessSession

        terms = SkyBrightnessSession().prepare(**conditions).luminance_terms(moon, sun, zenith)
        assert float(terms.sun_contribution) == float(min(terms.twilight, terms.daylight))
        assert float(terms.total) == pytest.approx(float(
            terms.dark_night + terms.sun_contribution + terms.moonlight * terms.moon_weight
        ))

    @given(conditions=valid_conditions, zenith=visible_zenith)
    @settings(max_examples=100, deadline=None)
    def test_dark_night_scale_never_darkens(self, conditions, zenith):
        """A larger dark-night coefficient never lowers the luminance."""
        from skybright import SkyBrightnessSession

        base = SkyBrightnessSession().prepare(**conditions)
        brighter = SkyBrightnessSession().prepare(**conditions, darknight_scale=2.0)
        assert brighter.get_luminance(1.0, 1.0, zenith) >= base.get_luminance(1.0, 1.0, zenith)

    @given(conditions=valid_conditions, moon=angle, sun=angle, zenith=visible_zenith)
    @settings(max_examples=50, deadline=None)
    def test_vectorised_matches_scalar(self, conditions, moon, sun, zenith):
        from skybright import SkyBrightnessSession

        session = SkyBrightnessSession().prepare(**conditions)
        arr = session.get_luminance(np.array([moon]), np.array([sun]), np.array([zenith]))
        assert arr[0] == pytest.approx(session.get_luminance(moon, sun, zenith))


class TestExtinctionProperties:

    @given(
        month=st.integers(min_value=1, max_value=12),
        lat=st.floats(min_value=-89.0, max_value=89.0),
        temp=st.floats(min_value=-30.0, max_value=40.0),
        rh=st.floats(min_value=1.0, max_value=99.0),
        alt_low=st.floats(min_value=0.0, max_value=5000.0),
        delta=st.floats(min_value=10.0, max_value=3000.0),
    )
    @settings(max_examples=100)
    def test_extinction_falls_with_altitude(self, month, lat, temp, rh, alt_low, delta):
        from skybright.formulas.extinction import composite_extinction

        low = composite_extinction(month, lat, alt_low, temp, rh)
        high = composite_extinction(month, lat, alt_low + delta, temp, rh)
        assert 0 < high < low

    @given(z=st.floats(min_value=0.0, max_value=180.0))
    def test_airmass_bounded(self, z):
        from skybright.formulas.extinction import airmass
        from skybright.formulas.sky_brightness import AIRMASS_HORIZON_CLAMP

        x = airmass(z)
        assert 1.0 - 1e-5 <= x <= AIRMASS_HORIZON_CLAMP


class TestFadeAndFastMathProperties:

    @given(zm=st.floats(min_value=0.0, max_value=180.0))
    def test_fade_weight_in_unit_interval(self, zm):
        from skybright.luminance import moon_fade_weight

        assert 0.0 <= moon_fade_weight(zm) <= 1.0

    @given(
        a=st.floats(min_value=0.0, max_value=180.0),
        b=st.floats(min_value=0.0, max_value=180.0),
    )
    def test_fade_weight_monotonic(self, a, b):
        from skybright.luminance import moon_fade_weight

        assume(a <= b)
        assert moon_fade_weight(a) >= moon_fade_weight(b)

    @given(x=st.floats(min_value=-5.0, max_value=5.0))
    def test_fast_exp_error_bound(self, x):
        from skybright.formulas.fast_math import FAST_EXP_MAX_REL_ERROR, fast_exp

        assert abs(fast_exp(x) / math.exp(x) - 1.0) <= FAST_EXP_MAX_REL_ERROR

    @given(mag=st.floats(allow_nan=False, allow_infinity=True))
    def test_bortle_is_total(self, mag):
        """Every non-NaN magnitude, infinities included, gets a class."""
        from skybright.formulas.photometry import classify_bortle

        assert classify_bortle(mag)[0] in range(1, 10)
