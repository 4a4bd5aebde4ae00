"""
Whole-sky luminance maps from a prepared session.

Samples the visible hemisphere on an altitude/azimuth grid, evaluates the
luminance of every sample in one vectorised call, and converts the
result to surface brightness and Bortle class for reporting.

Angles in this module are in degrees; they are converted to radians only
at the session boundary.

LIMITATIONS:
- The Sun and Moon positions passed here must match the zenith distances
  the session was prepared with. A mismatch is logged, not corrected.
- Samples are evaluated at their geometric altitude; refraction is not
  applied.
"""

import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from skybright import config
from skybright.formulas.photometry import classify_bortle, luminance_to_mag_arcsec2
from skybright.logging_config import get_pipeline_logger

log = get_pipeline_logger(__name__)

# Tolerance (degrees) between a body's given altitude and the zenith
# distance stored in the session before a mismatch is reported.
_GEOMETRY_TOLERANCE_DEG = 0.5


def angular_separation(alt1_deg, az1_deg, alt2_deg, az2_deg):
    """Great-circle distance in degrees between two horizontal positions.

    Accepts scalars or arrays that broadcast together.
    """
    a1, a2 = np.radians(alt1_deg), np.radians(alt2_deg)
    daz = np.radians(np.asarray(az1_deg) - np.asarray(az2_deg))
    cos_d = np.sin(a1) * np.sin(a2) + np.cos(a1) * np.cos(a2) * np.cos(daz)
    return np.degrees(np.arccos(np.clip(cos_d, -1.0, 1.0)))


def _check_geometry(name, alt_deg, stored_zenith_deg):
    if abs((90.0 - alt_deg) - stored_zenith_deg) > _GEOMETRY_TOLERANCE_DEG:
        log.warning(
            "%s altitude %.2f° disagrees with prepared zenith distance %.2f°",
            name, alt_deg, stored_zenith_deg,
        )


def sky_grid(n_alt=None, n_az=None, min_alt_deg=None):
    """Altitude/azimuth sample grid as two flat arrays (degrees)."""
    n_alt = n_alt or config.SKY_MAP_ALT_STEPS
    n_az = n_az or config.SKY_MAP_AZ_STEPS
    if min_alt_deg is None:
        min_alt_deg = config.SKY_MAP_MIN_ALT_DEG

    alts = np.linspace(min_alt_deg, 90.0, n_alt)
    azs = np.arange(n_az) * (360.0 / n_az)
    alt_grid, az_grid = np.meshgrid(alts, azs, indexing="ij")
    return alt_grid.ravel(), az_grid.ravel()


def sample_sky(session, sun_alt_deg, sun_az_deg, moon_alt_deg, moon_az_deg,
               n_alt=None, n_az=None, min_alt_deg=None, exact=False):
    """Evaluate sky luminance over the visible hemisphere.

    Args:
        session: A prepared SkyBrightnessSession.
        sun_alt_deg, sun_az_deg: Sun position (degrees).
        moon_alt_deg, moon_az_deg: Moon position (degrees).
        n_alt, n_az: Grid resolution. Default from config.
        min_alt_deg: Lowest sampled altitude. Default from config.
        exact: Evaluate with the exact exponential.

    Returns:
        DataFrame with one row per sample: alt_deg, az_deg,
        zenith_dist_deg, moon_dist_deg, sun_dist_deg, luminance_cd_m2,
        sky_mag_arcsec2, bortle_class.
    """
    state = session.state
    _check_geometry("Sun", sun_alt_deg, state.sun_zenith_deg)
    _check_geometry("Moon", moon_alt_deg, state.moon_zenith_deg)

    alt, az = sky_grid(n_alt, n_az, min_alt_deg)
    zenith_dist = 90.0 - alt
    moon_dist = angular_separation(alt, az, moon_alt_deg, moon_az_deg)
    sun_dist = angular_separation(alt, az, sun_alt_deg, sun_az_deg)

    lum = session.get_luminance(
        np.radians(moon_dist), np.radians(sun_dist), np.radians(zenith_dist),
        exact=exact,
    )
    mag = luminance_to_mag_arcsec2(lum)

    df = pd.DataFrame({
        "alt_deg": alt,
        "az_deg": az,
        "zenith_dist_deg": zenith_dist,
        "moon_dist_deg": moon_dist,
        "sun_dist_deg": sun_dist,
        "luminance_cd_m2": lum,
        "sky_mag_arcsec2": mag,
        "bortle_class": [classify_bortle(m)[0] for m in mag],
    })
    log.debug("Sampled %d sky points (%d x %d)", len(df),
              n_alt or config.SKY_MAP_ALT_STEPS, n_az or config.SKY_MAP_AZ_STEPS)
    return df


def summarize_sky(sky_df):
    """Headline numbers for a sampled sky map.

    Args:
        sky_df: Output of sample_sky().

    Returns:
        dict with zenith, darkest and brightest luminance (cd/m²), the
        zenith surface brightness and its Bortle class.
    """
    if len(sky_df) == 0:
        raise ValueError("Cannot summarize an empty sky map")

    top = sky_df[sky_df["alt_deg"] == sky_df["alt_deg"].max()]
    zenith_lum = float(top["luminance_cd_m2"].mean())
    zenith_mag = float(luminance_to_mag_arcsec2(zenith_lum))
    bortle, desc = classify_bortle(zenith_mag)

    return {
        "n_samples": int(len(sky_df)),
        "zenith_luminance_cd_m2": zenith_lum,
        "zenith_mag_arcsec2": round(zenith_mag, 2),
        "zenith_bortle_class": bortle,
        "zenith_bortle_description": desc,
        "min_luminance_cd_m2": float(sky_df["luminance_cd_m2"].min()),
        "max_luminance_cd_m2": float(sky_df["luminance_cd_m2"].max()),
        "median_luminance_cd_m2": float(sky_df["luminance_cd_m2"].median()),
    }


def plot_sky_map(sky_df, output_path, title=None):
    """Polar all-sky map of surface brightness.

    North up, east to the right, zenith at the
    centre, horizon at the rim.

    Args:
        sky_df: Output of sample_sky().
        output_path: Path to save figure.
        title: Optional figure title.

    Returns:
        output_path.
    """
    fig, ax = plt.subplots(figsize=(8, 8), subplot_kw={"projection": "polar"})
    ax.set_theta_zero_location("N")
    ax.set_theta_direction(-1)

    mag = sky_df["sky_mag_arcsec2"].to_numpy()
    sc = ax.scatter(
        np.radians(sky_df["az_deg"].to_numpy()),
        sky_df["zenith_dist_deg"].to_numpy(),
        c=mag,
        # Reversed so fainter (higher-magnitude) sky is drawn darker.
        cmap=f"{config.SKY_MAP_CMAP}_r",
        s=18,
    )
    ax.set_rlim(0, 90)
    ax.set_yticks([30, 60, 90])
    ax.set_yticklabels(["60°", "30°", "0°"])
    cbar = fig.colorbar(sc, ax=ax, shrink=0.8, pad=0.08)
    cbar.set_label("Sky brightness (mag/arcsec²)")
    ax.set_title(title or "Sky brightness", fontsize=13, pad=18)
    plt.tight_layout()

    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    fig.savefig(output_path, dpi=config.MAP_DPI, bbox_inches="tight")
    plt.close(fig)
    log.info("Saved: %s", output_path)
    return output_path
