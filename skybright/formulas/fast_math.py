"""
Fast exponential surrogates for the per-query evaluation path.

``fast_exp`` computes (1 + x/1024)^1024 with ten squarings. It never
overestimates exp(x); the relative error grows roughly as x²/2048 and
stays below FAST_EXP_MAX_REL_ERROR for |x| <= FAST_EXP_VALID_RANGE.

The luminance terms also call it well outside that window. Errors at
those operating points (x in natural-log units):

    x ≈ -14.2   body transmission 10^(-0.4 K X), K = 0.385, X = 40    ≈ 9.4 %
    x ≈ +12.3   Rayleigh constant 10^5.36 in the daylight term        ≈ 7.1 %
    x ≈ +14.1   Mie peak 10^(6.15 - ρ/40) at ρ = 1°, daylight term     ≈ 9.2 %

Results stay finite and positive there. For x < -1024 the base turns
negative and the result is meaningless. Pass ``exact=True`` to the
evaluator where these errors matter.

All functions accept scalars or numpy arrays.
"""

import numpy as np

FAST_EXP_SQUARINGS = 10
FAST_EXP_VALID_RANGE = 5.0
FAST_EXP_MAX_REL_ERROR = 0.0125

_LN10 = np.log(10.0)


def fast_exp(x):
    """Approximate exp(x) by repeated squaring of a first-order term."""
    y = 1.0 + np.asarray(x, dtype=float) / 1024.0
    for _ in range(FAST_EXP_SQUARINGS):
        y = y * y
    return y


def fast_exp10(x):
    """Approximate 10**x through fast_exp."""
    return fast_exp(np.asarray(x, dtype=float) * _LN10)


def exact_exp(x):
    return np.exp(np.asarray(x, dtype=float))


def exact_exp10(x):
    return np.power(10.0, np.asarray(x, dtype=float))
