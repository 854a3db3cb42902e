"""Job-priority-list encoding.

Concepts
--------
JobNumbers
    A flat list of job ids of length ``jobs_number * tasks_number``. The
    k-th occurrence of a job id stands for that job's k-th operation, so
    technological order is implicit and every list with the right
    multiplicities is feasible. Decoding places operations in list order,
    each as early as its job and machine allow.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Iterable, Optional

from jobshop.errors import InvalidEncoding
from jobshop.models import Instance
from jobshop.schedule import Schedule

if TYPE_CHECKING:  # pragma: no cover
    from jobshop.encodings.resource_order import ResourceOrder


class JobNumbers:
    """Global dispatch priority expressed as a sequence of job ids."""

    def __init__(self, instance: Instance, jobs: Optional[Iterable[int]] = None) -> None:
        self.instance = instance
        self.jobs: list[int] = list(jobs) if jobs is not None else []

    def append(self, job: int) -> None:
        self.jobs.append(job)

    def copy(self) -> "JobNumbers":
        return JobNumbers(self.instance, self.jobs)

    def validate(self) -> bool:
        """Check length and per-job multiplicities.

        Raises:
            InvalidEncoding: If the length is wrong, a job id is out of range
                or a job does not appear exactly ``tasks_number`` times.
        """
        inst = self.instance
        expected = inst.jobs_number * inst.tasks_number
        if len(self.jobs) != expected:
            raise InvalidEncoding(f"expected {expected} entries, got {len(self.jobs)}")
        counts = [0] * inst.jobs_number
        for job in self.jobs:
            if not (0 <= job < inst.jobs_number):
                raise InvalidEncoding(f"job id out of range: {job}")
            counts[job] += 1
        for job, count in enumerate(counts):
            if count != inst.tasks_number:
                raise InvalidEncoding(
                    f"job {job} appears {count} times, expected {inst.tasks_number}"
                )
        return True

    def to_schedule(self) -> Schedule:
        """Decode into a schedule (serial generation, list order).

        Each entry schedules the next operation of its job at
        ``max(job ready, machine ready)``.

        Raises:
            InvalidEncoding: On malformed lists.
        """
        self.validate()
        inst = self.instance
        ready_job = [0] * inst.jobs_number
        ready_machine = [0] * inst.machines_number
        next_task = [0] * inst.jobs_number
        starts = [[0] * inst.tasks_number for _ in range(inst.jobs_number)]
        for job in self.jobs:
            task = next_task[job]
            machine, duration = inst.jobs[job][task]
            start = max(ready_job[job], ready_machine[machine])
            starts[job][task] = start
            ready_job[job] = ready_machine[machine] = start + duration
            next_task[job] += 1
        return Schedule.from_matrix(inst, starts)

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "JobNumbers":
        """List jobs by ascending start time of their operations."""
        return cls(schedule.instance, (tk.job for tk in schedule.ordered_tasks()))

    @classmethod
    def from_resource_order(cls, order: "ResourceOrder") -> "JobNumbers":
        return cls.from_schedule(order.to_schedule())

    @classmethod
    def round_robin(cls, instance: Instance) -> "JobNumbers":
        """``0, 1, ..., n-1`` repeated once per operation index."""
        jobs = [j for _ in range(instance.tasks_number) for j in range(instance.jobs_number)]
        return cls(instance, jobs)

    @classmethod
    def shuffled(cls, instance: Instance, rng: Optional[random.Random] = None) -> "JobNumbers":
        """Uniformly shuffled list with the right multiplicities."""
        if rng is None:
            rng = random.Random()
        jobs = [j for j in range(instance.jobs_number) for _ in range(instance.tasks_number)]
        rng.shuffle(jobs)
        return cls(instance, jobs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JobNumbers):
            return NotImplemented
        return self.instance == other.instance and self.jobs == other.jobs

    def __repr__(self) -> str:
        return f"JobNumbers({self.jobs})"
