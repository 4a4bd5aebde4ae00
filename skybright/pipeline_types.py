"""
Run records for the sky-map command.

Every step of run_sky_map() yields a StepResult. SkyMapRunResult collects
them with the prepared session and the sky summary; its to_dict() is what
gets written to ``sky_map_run.json``.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum


class StepStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class StepResult:
    """Outcome of one sky-map step."""

    step_name: str
    status: str
    output_summary: dict = field(default_factory=dict)
    timing_seconds: float = 0.0
    error: str | None = None  # traceback text when status is "error"

    @property
    def ok(self):
        return self.status == StepStatus.SUCCESS.value


@dataclass
class SkyMapRunResult:
    """One sky-map run: the session it used, its steps and its outputs."""

    output_dir: str
    run_id: str = ""
    session: dict = field(default_factory=dict)
    summary: dict = field(default_factory=dict)
    steps: list[StepResult] = field(default_factory=list)
    output_files: list[str] = field(default_factory=list)
    total_time_seconds: float = 0.0
    started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def record(self, step, output_file=None):
        """Append a step; keep ``output_file`` only if the step succeeded.

        Returns step.ok so the runner can stop at the first failure.
        """
        self.steps.append(step)
        if step.ok and output_file is not None:
            self.output_files.append(output_file)
        return step.ok

    @property
    def failed_steps(self):
        return [s for s in self.steps if not s.ok]

    @property
    def all_ok(self):
        return not self.failed_steps

    def to_dict(self):
        d = asdict(self)
        d["all_ok"] = self.all_ok
        return d
