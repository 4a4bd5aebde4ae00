#!/usr/bin/env python3
"""
Sky-map runner: prepare a session from command-line inputs, sample the
whole sky and write the results.

Steps: validate inputs → prepare session → sample sky → summarize →
write CSV → plot map. Each step runs through run_step(); the run stops at
the first failed step and always writes ``sky_map_run.json``.

Usage:
    # Dark moonless night, 50°N, sea level
    python3 -m skybright.pipeline_runner --year 2020 --month 6 \
        --latitude 50 --sun-alt -19.5 --moon-alt -10 --moon-phase 180

    # Same, through the installed entry point
    skybright-map --year 2020 --month 6 --latitude 50 --sun-alt -8
"""

import argparse
import json
import math
import os
import sys
import time

from skybright import config
from skybright.analysis.sky_map import plot_sky_map, sample_sky, summarize_sky
from skybright.logging_config import get_pipeline_logger, get_run_id, set_run_id, setup_logging
from skybright.pipeline_types import SkyMapRunResult
from skybright.schemas import SkySampleSchema, validate_conditions, validate_schema
from skybright.session import SkyBrightnessSession
from skybright.step_runner import run_step

log = get_pipeline_logger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Compute an all-sky luminance map for one observing context"
    )
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--month", type=int, required=True)
    parser.add_argument("--latitude", type=float, required=True,
                        help="Site latitude in degrees (north positive)")
    parser.add_argument("--altitude", type=float, default=config.DEFAULT_ALTITUDE_M,
                        help="Site altitude above sea level in metres")
    parser.add_argument("--temperature", type=float, default=config.DEFAULT_TEMPERATURE_C,
                        help="Air temperature in °C")
    parser.add_argument("--humidity", type=float, default=config.DEFAULT_RELATIVE_HUMIDITY,
                        help="Relative humidity in percent, 0 < RH < 100")
    parser.add_argument("--sun-alt", type=float, required=True, dest="sun_alt",
                        help="Sun altitude in degrees")
    parser.add_argument("--sun-az", type=float, default=0.0, dest="sun_az",
                        help="Sun azimuth in degrees (N=0, E=90)")
    parser.add_argument("--moon-alt", type=float, default=-90.0, dest="moon_alt",
                        help="Moon altitude in degrees")
    parser.add_argument("--moon-az", type=float, default=0.0, dest="moon_az",
                        help="Moon azimuth in degrees")
    parser.add_argument("--moon-phase", type=float, default=180.0, dest="moon_phase",
                        help="Moon phase angle in degrees (0 = full, 180 = new)")
    parser.add_argument("--twilight-scale", type=float,
                        default=config.DEFAULT_TWILIGHT_SCALE, dest="twilight_scale")
    parser.add_argument("--moon-scale", type=float,
                        default=config.DEFAULT_MOON_SCALE, dest="moon_scale")
    parser.add_argument("--darknight-scale", type=float,
                        default=config.DEFAULT_DARKNIGHT_SCALE, dest="darknight_scale")
    parser.add_argument("--n-alt", type=int, default=config.SKY_MAP_ALT_STEPS, dest="n_alt")
    parser.add_argument("--n-az", type=int, default=config.SKY_MAP_AZ_STEPS, dest="n_az")
    parser.add_argument("--exact", action="store_true", default=False,
                        help="Use the exact exponential instead of the fast surrogate")
    parser.add_argument("--no-plot", action="store_true", default=False, dest="no_plot")
    parser.add_argument("--output-dir", default=config.DEFAULT_OUTPUT_DIR, dest="output_dir")
    return parser.parse_args(argv)


def conditions_from_args(args):
    """Map CLI arguments (degrees) to prepare() keyword inputs (radians)."""
    return {
        "year": args.year,
        "month": args.month,
        "moon_phase": math.radians(args.moon_phase),
        "latitude": math.radians(args.latitude),
        "altitude": args.altitude,
        "temperature": args.temperature,
        "relative_humidity": args.humidity,
        "moon_zenith_dist": math.radians(90.0 - args.moon_alt),
        "sun_zenith_dist": math.radians(90.0 - args.sun_alt),
        "twilight_scale": args.twilight_scale,
        "moon_scale": args.moon_scale,
        "darknight_scale": args.darknight_scale,
    }


def _write_csv(sky_df, output_dir):
    csv_dir = os.path.join(output_dir, config.OUTPUT_DIRS["csv"])
    os.makedirs(csv_dir, exist_ok=True)
    path = os.path.join(csv_dir, "sky_map.csv")
    sky_df.to_csv(path, index=False)
    return path


def _validate(conditions):
    validate_conditions(**conditions)
    return conditions


def _check_samples(sky_df):
    validate_schema(sky_df, SkySampleSchema, "sample_sky", strict=True)
    return sky_df


def run_sky_map(args):
    """Run every step for one set of arguments.

    Returns
    -------
    SkyMapRunResult
    """
    run = SkyMapRunResult(output_dir=args.output_dir, run_id=get_run_id())
    start_time = time.time()
    conditions = conditions_from_args(args)
    session = SkyBrightnessSession()

    # Each of these must succeed before the sky can be summarised or drawn.
    steps = [
        ("validate_conditions", lambda: _validate(conditions),
         lambda c: {"inputs": len(c)}),
        ("prepare_session", lambda: session.prepare(**conditions),
         lambda s: {"extinction": round(s.state.extinction, 4),
                    "moon_airmass": round(s.state.moon_airmass, 3),
                    "sun_airmass": round(s.state.sun_airmass, 3)}),
        ("sample_sky", lambda: _check_samples(sample_sky(
            session, args.sun_alt, args.sun_az, args.moon_alt, args.moon_az,
            n_alt=args.n_alt, n_az=args.n_az, exact=args.exact)),
         lambda df: {"rows": len(df)}),
    ]

    for name, fn, summarize in steps:
        step, value = run_step(name, fn, summarize=summarize)
        if not run.record(step):
            run.total_time_seconds = time.time() - start_time
            return run
    sky_df = value

    run.session = session.state.to_dict()

    step, summary = run_step("summarize_sky", summarize_sky, sky_df)
    if run.record(step):
        run.summary = summary

    step, csv_path = run_step("write_csv", _write_csv, sky_df, args.output_dir,
                              summarize=lambda p: {"path": p})
    run.record(step, csv_path)

    if not args.no_plot:
        map_path = os.path.join(args.output_dir, config.OUTPUT_DIRS["maps"], "sky_map.png")
        title = f"Sky brightness {args.year}-{args.month:02d}, Sun {args.sun_alt:+.1f}°"
        step, _ = run_step("plot_sky_map", plot_sky_map, sky_df, map_path, title=title)
        run.record(step, map_path)

    run.total_time_seconds = time.time() - start_time
    return run


def save_run_result(run, output_dir):
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sky_map_run.json")
    with open(path, "w") as f:
        json.dump(run.to_dict(), f, indent=2, default=str)
    log.info("Run result saved: %s", path)
    return path


def main(argv=None):
    args = parse_args(argv)
    run_id = set_run_id()
    setup_logging(run_dir=args.output_dir)
    log.info("Sky map run %s: %d-%02d lat=%.2f° sun_alt=%.1f° moon_alt=%.1f°",
             run_id, args.year, args.month, args.latitude, args.sun_alt, args.moon_alt)

    run = run_sky_map(args)
    save_run_result(run, args.output_dir)

    if run.failed_steps:
        log.warning("Failed steps: %s", [s.step_name for s in run.failed_steps])
        return 1
    if run.summary:
        log.info("Zenith: %.3e cd/m² (%.2f mag/arcsec², Bortle %d)",
                 run.summary["zenith_luminance_cd_m2"],
                 run.summary["zenith_mag_arcsec2"],
                 run.summary["zenith_bortle_class"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
