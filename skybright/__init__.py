"""
skybright: apparent sky background luminance for sky rendering.

Two-phase model: prepare a SkyBrightnessSession once per update tick from
date, site, weather and Sun/Moon geometry, then query the luminance
(cd/m²) of any number of sky directions against it.
"""

from skybright.luminance import LuminanceTerms
from skybright.session import (
    PreparedState,
    SessionNotPreparedError,
    SkyBrightnessSession,
    get_luminance,
    prepare,
)

__all__ = [
    "LuminanceTerms",
    "PreparedState",
    "SessionNotPreparedError",
    "SkyBrightnessSession",
    "get_luminance",
    "prepare",
]

__version__ = "0.1.0"
