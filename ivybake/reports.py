# --------------------------------------------------------------------
# reports.py: Step results and result aggregation in JSON format.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
import getpass
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from .util import format_dt


# --------------------------------------------------------------------
# pylint: disable=R0201
@dataclass
class Report:
    name: str
    started: Optional[datetime] = None
    finished: Optional[datetime] = None

    def __post_init__(self):
        self.id = str(uuid.uuid4())

    def succeeded(self) -> bool:
        return True

    def failed(self) -> bool:
        return not self.succeeded()

    def generate(self):
        return {
            "type": type(self).__qualname__,
            "name": self.name,
            "id": self.id,
            "started": format_dt(self.started),
            "finished": format_dt(self.finished),
            "succeeded": self.succeeded(),
        }


# --------------------------------------------------------------------
@dataclass
class StepResult(Report):
    """ The outcome of a single task invocation or task definition. """

    ok: bool = True
    message: str = ""

    @classmethod
    def success(cls, name: str, message: str = "", started: Optional[datetime] = None):
        return cls(name, started or datetime.now(), datetime.now(), True, message)

    @classmethod
    def failure(cls, name: str, message: str, started: Optional[datetime] = None):
        return cls(name, started or datetime.now(), datetime.now(), False, message)

    def succeeded(self) -> bool:
        return self.ok

    def generate(self):
        return {**super().generate(), "message": self.message}


# --------------------------------------------------------------------
@dataclass
class RunReport(Report):
    """ The ordered results of a run of commands.

    A run is `halted` when a step failed under a policy that stops the
    run.  Failed steps that were allowed to fail do not fail the run. """

    steps: List[StepResult] = field(default_factory=list)
    halted: bool = False

    def add(self, result: StepResult):
        if self.started is None:
            self.started = result.started
        self.finished = result.finished
        self.steps.append(result)

    def extend(self, report: "RunReport"):
        for result in report.steps:
            self.add(result)
        self.halted = self.halted or report.halted

    @property
    def failures(self) -> List[StepResult]:
        return [step for step in self.steps if step.failed()]

    def succeeded(self) -> bool:
        return not self.halted

    def generate(self):
        return {
            **super().generate(),
            "halted": self.halted,
            "steps": [step.generate() for step in self.steps],
        }


# --------------------------------------------------------------------
@dataclass
class BuildReport(Report):
    run_reports: List[RunReport] = field(default_factory=list)

    @classmethod
    def merge(cls, name: str, reports: Iterable[RunReport]) -> "BuildReport":
        reports = list(reports)
        started = [r.started for r in reports if r.started is not None]
        finished = [r.finished for r in reports if r.finished is not None]
        return cls(
            name,
            min(started) if started else None,
            max(finished) if finished else None,
            reports,
        )

    def succeeded(self) -> bool:
        return all(r.succeeded() for r in self.run_reports)

    def generate(self):
        return {
            **super().generate(),
            "user": getpass.getuser(),
            "runs": [r.generate() for r in self.run_reports],
        }
