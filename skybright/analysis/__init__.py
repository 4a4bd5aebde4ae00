"""Analysis subpackage: whole-sky sampling and reporting on top of the model."""

from skybright.analysis.sky_map import *  # noqa: F401,F403
