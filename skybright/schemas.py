"""
Pandera schemas for input validation gates and sampled sky maps.

The luminance model itself never validates its inputs (invalid humidity
or non-finite angles propagate NaN). Callers that take inputs from a
weather feed, a config file or the command line validate them here
first.

Usage:
    from skybright.schemas import validate_conditions
    validate_conditions(year=2020, month=6, ...)  # raises ValueError

    from skybright.schemas import SkySampleSchema
    SkySampleSchema.validate(df)  # raises pa.errors.SchemaError on failure
"""

import math

import numpy as np
import pandas as pd
import pandera as pa
from pandera import Check, Column, DataFrameSchema

from skybright import config

_finite = Check(lambda s: np.isfinite(s), element_wise=False, error="value must be finite")


# ── Observing conditions (prepare() inputs, angles in radians) ──────────

ObservingConditionsSchema = DataFrameSchema(
    columns={
        "year": Column(int, Check.in_range(1000, 3000), nullable=False, coerce=True),
        "month": Column(int, Check.in_range(*config.MONTH_RANGE), nullable=False,
                        coerce=True),
        "moon_phase": Column(float, [_finite, Check.in_range(-math.pi, math.pi)],
                             nullable=False, coerce=True),
        "latitude": Column(float, [_finite, Check.in_range(-math.pi / 2, math.pi / 2)],
                           nullable=False, coerce=True),
        "altitude": Column(float, Check.in_range(*config.ALTITUDE_RANGE_M),
                           nullable=False, coerce=True),
        "temperature": Column(float, Check.in_range(*config.TEMPERATURE_RANGE_C),
                              nullable=False, coerce=True),
        # ln(RH/100) in the aerosol term: both ends of the range are excluded.
        "relative_humidity": Column(
            float,
            Check.in_range(*config.RELATIVE_HUMIDITY_RANGE,
                           include_min=False, include_max=False),
            nullable=False, coerce=True,
        ),
        "moon_zenith_dist": Column(float, [_finite, Check.in_range(0.0, math.pi)],
                                   nullable=False, coerce=True),
        "sun_zenith_dist": Column(float, [_finite, Check.in_range(0.0, math.pi)],
                                  nullable=False, coerce=True),
        "twilight_scale": Column(float, [_finite, Check.greater_than_or_equal_to(0.0)],
                                 nullable=False, coerce=True, required=False),
        "moon_scale": Column(float, [_finite, Check.greater_than_or_equal_to(0.0)],
                             nullable=False, coerce=True, required=False),
        "darknight_scale": Column(float, [_finite, Check.greater_than_or_equal_to(0.0)],
                                  nullable=False, coerce=True, required=False),
    },
    strict=True,
    coerce=True,
    name="ObservingConditionsSchema",
)


# ── Sampled sky map ─────────────────────────────────────────────────────

SkySampleSchema = DataFrameSchema(
    columns={
        "alt_deg": Column(float, Check.in_range(-90.0, 90.0), nullable=False),
        "az_deg": Column(float, Check.in_range(0.0, 360.0, include_max=False),
                         nullable=False),
        "zenith_dist_deg": Column(float, Check.in_range(0.0, 180.0), nullable=False),
        "moon_dist_deg": Column(float, Check.in_range(0.0, 180.0), nullable=False),
        "sun_dist_deg": Column(float, Check.in_range(0.0, 180.0), nullable=False),
        "luminance_cd_m2": Column(float, [_finite, Check.greater_than_or_equal_to(0.0)],
                                  nullable=False),
        "sky_mag_arcsec2": Column(float, nullable=False),
        "bortle_class": Column(int, Check.in_range(1, 9), nullable=False, coerce=True),
    },
    strict=False,
    coerce=False,
    name="SkySampleSchema",
)


# ── Convenience validation functions ────────────────────────────────────

def validate_schema(df, schema, step_name, strict=False):
    """Validate a DataFrame against a Pandera schema.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame to validate.
    schema : pa.DataFrameSchema
        Schema to validate against.
    step_name : str
        Step name used as message prefix.
    strict : bool
        If True, raise on failure. If False, return warnings list.

    Returns
    -------
    list[str]
        Validation warning messages (empty if all pass).

    Raises
    ------
    ValueError
        Only if strict=True and validation fails.
    """
    warnings_list = []

    if df is None:
        msg = f"[{step_name}] DataFrame is None"
        if strict:
            raise ValueError(msg)
        return [msg]

    if len(df) == 0:
        msg = f"[{step_name}] DataFrame is empty (0 rows)"
        if strict:
            raise ValueError(msg)
        return [msg]

    try:
        schema.validate(df, lazy=True)
    except pa.errors.SchemaErrors as exc:
        for failure in exc.failure_cases.itertuples():
            msg = (
                f"[{step_name}] Schema violation: "
                f"column='{failure.column}' check='{failure.check}' "
                f"failure_case={failure.failure_case}"
            )
            warnings_list.append(msg)

        if strict:
            raise ValueError(
                f"[{step_name}] Schema validation failed with "
                f"{len(warnings_list)} errors: " + "; ".join(warnings_list)
            ) from exc

    return warnings_list


def validate_conditions(**inputs):
    """Validate one set of prepare() inputs (angles in radians).

    Keyword names match SkyBrightnessSession.prepare(). The scale
    coefficients are optional.

    Raises
    ------
    ValueError
        If any input is missing, unknown, or out of its valid range.
    """
    validate_schema(pd.DataFrame([inputs]), ObservingConditionsSchema,
                    "validate_conditions", strict=True)
