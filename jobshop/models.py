"""Core data structures for job-shop instances and solver results.

This module defines:
    Task      -- value type naming one operation (job, task index).
    Instance  -- immutable container with all jobs of one problem.
    ExitCause -- why a solver returned.
    Result    -- output envelope of every solver.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Optional

if TYPE_CHECKING:  # pragma: no cover
    from jobshop.schedule import Schedule

Operation = tuple[int, int]  # (machine, duration)


class Task(NamedTuple):
    """Reference to one operation: ``task``-th operation of ``job``."""

    job: int
    task: int


@dataclass(frozen=True)
class Instance:
    """Immutable representation of a JSSP instance.

    Attributes:
        jobs: Nested tuple: jobs[j][k] -> (machine, duration).
        jobs_number: Number of jobs (J).
        tasks_number: Number of operations in every job.
        machines_number: Number of machines (M).
        name: Optional instance name (file stem when parsed).
    """

    jobs: tuple[tuple[Operation, ...], ...]
    jobs_number: int
    tasks_number: int
    machines_number: int
    name: str = ""

    @classmethod
    def from_jobs(cls, jobs: list[list[Operation]], name: str = "") -> "Instance":
        """Build an instance from a nested ``[(machine, duration), ...]`` list."""
        frozen = tuple(tuple((int(m), int(d)) for m, d in job) for job in jobs)
        tasks_number = len(frozen[0]) if frozen else 0
        machines_number = 1 + max((m for job in frozen for m, _ in job), default=-1)
        return cls(
            jobs=frozen,
            jobs_number=len(frozen),
            tasks_number=tasks_number,
            machines_number=machines_number,
            name=name,
        )

    def machine(self, job: int, task: int) -> int:
        return self.jobs[job][task][0]

    def duration(self, job: int, task: int) -> int:
        return self.jobs[job][task][1]

    def task_with_machine(self, job: int, machine: int) -> int:
        """Index of the operation of ``job`` processed on ``machine``."""
        for task, (m, _) in enumerate(self.jobs[job]):
            if m == machine:
                return task
        raise ValueError(f"job {job} never visits machine {machine}")


class ExitCause(enum.Enum):
    TIMEOUT = "Timeout"
    PROVED_OPTIMAL = "ProvedOptimal"
    BLOCKED = "Blocked"
    NOT_PROVED_OPTIMAL = "NotProvedOptimal"


@dataclass
class Result:
    """Final schedule plus the reason the solver stopped.

    Fields:
        instance: Instance that was solved.
        schedule: Best schedule found.
        cause: Exit cause.
        encoding: Encoding the schedule was decoded from (None for solvers
            that do not keep one).
        history: Best makespan after each search step (starting value first).
    """

    instance: Instance
    schedule: "Schedule"
    cause: ExitCause
    encoding: Optional[object] = None
    history: list[int] = field(default_factory=list)

    @property
    def makespan(self) -> int:
        return self.schedule.makespan()
