"""
Step execution for sky-map runs.

run_step() calls one step of run_sky_map(), times it and turns the outcome
into a StepResult. Failures with a known cause (conditions rejected by the
validation gate, a query on an unprepared session, an output directory that
cannot be written) are logged as one line. Anything else is logged with its
traceback. Neither propagates; the runner decides whether to go on.
"""

import time
import traceback

from skybright.logging_config import get_pipeline_logger
from skybright.pipeline_types import StepResult, StepStatus
from skybright.session import SessionNotPreparedError

log = get_pipeline_logger(__name__)

KNOWN_FAILURES = (ValueError, SessionNotPreparedError, OSError)


def _step_fields(step_name, status, elapsed, summary=None):
    # Merged into the JSON Lines entry by JsonLinesFormatter.
    return {"step": {
        "step_name": step_name,
        "status": status,
        "timing_seconds": round(elapsed, 6),
        "output_summary": summary or {},
    }}


def _failure(step_name, start, exc, known):
    """Build the error result. Must be called inside the except block."""
    elapsed = time.perf_counter() - start
    extra = _step_fields(step_name, StepStatus.ERROR.value, elapsed)
    if known:
        log.error("[%s] error (%.3fs): %s: %s", step_name, elapsed,
                  type(exc).__name__, exc, extra=extra)
    else:
        log.exception("[%s] unexpected error (%.3fs)", step_name, elapsed, extra=extra)
    return StepResult(step_name, StepStatus.ERROR.value, timing_seconds=elapsed,
                      error=traceback.format_exc())


def run_step(step_name, fn, *args, summarize=None, **kwargs):
    """Run ``fn(*args, **kwargs)`` as the step ``step_name``.

    Args:
        step_name: Name stored in the StepResult and the step log line.
        fn: The step's work function.
        summarize: Optional callable mapping fn's return value to a small
            dict kept as the step's output summary. Not called when fn
            returns None.

    Returns:
        (StepResult, value), where value is None if the step failed.
    """
    start = time.perf_counter()
    try:
        value = fn(*args, **kwargs)
    except KNOWN_FAILURES as exc:
        return _failure(step_name, start, exc, known=True), None
    except Exception as exc:
        return _failure(step_name, start, exc, known=False), None

    elapsed = time.perf_counter() - start
    summary = summarize(value) if summarize is not None and value is not None else {}
    log.info("[%s] success (%.3fs) %s", step_name, elapsed, summary,
             extra=_step_fields(step_name, StepStatus.SUCCESS.value, elapsed, summary))
    return StepResult(step_name, StepStatus.SUCCESS.value, summary, elapsed), value
