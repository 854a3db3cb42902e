"""Timed schedules: start-time matrix, makespan, validity and critical path."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from jobshop.errors import ScheduleInvalid
from jobshop.models import Instance, Task


@dataclass(frozen=True)
class ScheduleOperationRow:
    """Single scheduled operation with timing and identification data.

    Fields:
        start: Start time of the operation.
        end: Completion time (start + duration).
        job: Job identifier.
        task: Index of the operation inside its job (0-based).
        machine: Machine on which the operation is processed.
        duration: Processing time.
    """

    start: int
    end: int
    job: int
    task: int
    machine: int
    duration: int


@dataclass(frozen=True)
class Schedule:
    """Start time of every operation of an instance.

    Fields:
        instance: Problem data.
        starts: starts[job][task] -> start time.
    """

    instance: Instance
    starts: tuple[tuple[int, ...], ...]

    @classmethod
    def from_matrix(cls, instance: Instance, starts: list[list[int]]) -> "Schedule":
        return cls(instance, tuple(tuple(row) for row in starts))

    def start_time(self, job: int, task: int) -> int:
        return self.starts[job][task]

    def end_time(self, job: int, task: int) -> int:
        return self.starts[job][task] + self.instance.duration(job, task)

    def makespan(self) -> int:
        last = self.instance.tasks_number - 1
        return max(
            (self.end_time(j, last) for j in range(self.instance.jobs_number)),
            default=0,
        )

    def rows(self) -> list[ScheduleOperationRow]:
        """Flat list of scheduled operations ordered by start time."""
        out = []
        for job, task in self.ordered_tasks():
            machine, duration = self.instance.jobs[job][task]
            start = self.starts[job][task]
            out.append(
                ScheduleOperationRow(
                    start=start,
                    end=start + duration,
                    job=job,
                    task=task,
                    machine=machine,
                    duration=duration,
                )
            )
        return out

    def ordered_tasks(self) -> list[Task]:
        """All tasks sorted by start time, ties by job then task index."""
        tasks = [
            Task(j, t)
            for j in range(self.instance.jobs_number)
            for t in range(self.instance.tasks_number)
        ]
        tasks.sort(key=lambda tk: (self.starts[tk.job][tk.task], tk.job, tk.task))
        return tasks

    def check_valid(self) -> bool:
        """Verify job precedence and machine exclusion.

        Returns:
            True if both invariants hold.

        Raises:
            ScheduleInvalid: On the first violated constraint.
        """
        inst = self.instance
        for j in range(inst.jobs_number):
            if self.starts[j][0] < 0:
                raise ScheduleInvalid("precedence", f"job {j} starts before time 0")
            for t in range(inst.tasks_number - 1):
                if self.starts[j][t + 1] < self.end_time(j, t):
                    raise ScheduleInvalid(
                        "precedence",
                        f"task ({j},{t + 1}) starts at {self.starts[j][t + 1]} "
                        f"before ({j},{t}) ends at {self.end_time(j, t)}",
                    )
        by_machine: dict[int, list[ScheduleOperationRow]] = {}
        for row in self.rows():
            by_machine.setdefault(row.machine, []).append(row)
        for machine_rows in by_machine.values():
            prev: Optional[ScheduleOperationRow] = None
            for r in machine_rows:
                if prev is not None and r.start < prev.end:
                    raise ScheduleInvalid(
                        "overlap",
                        f"overlap on machine {r.machine}: ({prev.job},{prev.task}) ends at "
                        f"{prev.end}, ({r.job},{r.task}) starts at {r.start}",
                    )
                prev = r
        return True

    def is_valid(self) -> bool:
        try:
            return self.check_valid()
        except ScheduleInvalid:
            return False

    @cached_property
    def _ending_on_machine(self) -> dict[tuple[int, int], Task]:
        ending = {}
        for j in range(self.instance.jobs_number):
            for t in range(self.instance.tasks_number):
                ending[(self.instance.machine(j, t), self.end_time(j, t))] = Task(j, t)
        return ending

    def critical_path(self) -> list[Task]:
        """One longest chain of operations, from a source at time 0 to the sink.

        Starts from the operation with the largest completion time (lowest job
        on ties) and walks backwards. At each step the predecessor is the
        operation on the same machine ending exactly at the current start;
        if there is none, the previous operation of the same job ending
        exactly then. Machine edges win when both qualify.

        Raises:
            ScheduleInvalid: If the schedule has an idle gap that no edge
                explains (only possible for hand-built schedules).
        """
        inst = self.instance
        if inst.jobs_number == 0 or inst.tasks_number == 0:
            return []
        last = inst.tasks_number - 1
        sink_job = max(range(inst.jobs_number), key=lambda j: (self.end_time(j, last), -j))
        current = Task(sink_job, last)
        path = [current]
        while self.start_time(*current) > 0:
            start = self.start_time(*current)
            pred = self._ending_on_machine.get((inst.machine(*current), start))
            if pred is None and current.task > 0:
                if self.end_time(current.job, current.task - 1) == start:
                    pred = Task(current.job, current.task - 1)
            if pred is None:
                raise ScheduleInvalid(
                    "idle",
                    f"no predecessor explains start {start} of ({current.job},{current.task})",
                )
            path.append(pred)
            current = pred
        path.reverse()
        return path

    def __str__(self) -> str:
        lines = [f"makespan={self.makespan()}"]
        per_machine: dict[int, list[str]] = {m: [] for m in range(self.instance.machines_number)}
        for r in self.rows():
            per_machine[r.machine].append(f"({r.job},{r.task})[{r.start}-{r.end}]")
        for m, cells in per_machine.items():
            lines.append(f"M{m}: " + " ".join(cells))
        return "\n".join(lines)
