"""Per-machine order encoding.

Concepts
--------
ResourceOrder
    For every machine, the ordered list of tasks (one per job) it processes.
    This is the encoding the local searches move in: a swap of two
    positions on one machine is a neighbour. Decoding is an event-driven
    simulation in which each machine may only start the next task of its
    list, and only once the task's job predecessor has finished.
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, Optional

from jobshop.errors import DeadlockError, InvalidEncoding
from jobshop.models import Instance, Task
from jobshop.schedule import Schedule

if TYPE_CHECKING:  # pragma: no cover
    from jobshop.encodings.job_numbers import JobNumbers


class ResourceOrder:
    """Local dispatch priority of every machine."""

    def __init__(self, instance: Instance, tasks: Optional[list[list[Task]]] = None) -> None:
        self.instance = instance
        if tasks is None:
            self.tasks: list[list[Task]] = [[] for _ in range(instance.machines_number)]
        else:
            self.tasks = [[Task(*tk) for tk in row] for row in tasks]

    def copy(self) -> "ResourceOrder":
        """Deep copy; rows are fresh lists, tasks are immutable values."""
        clone = ResourceOrder.__new__(ResourceOrder)
        clone.instance = self.instance
        clone.tasks = [list(row) for row in self.tasks]
        return clone

    def swap(self, machine: int, i: int, j: int) -> None:
        row = self.tasks[machine]
        row[i], row[j] = row[j], row[i]

    def index_of(self, task: Task) -> int:
        """Position of ``task`` in the list of the machine that processes it."""
        return self.tasks[self.instance.machine(*task)].index(task)

    def validate(self) -> bool:
        """Check the shape and multiplicities of the encoding.

        Raises:
            InvalidEncoding: If a machine list has the wrong length, holds a
                task processed elsewhere, or lists a job twice.
        """
        inst = self.instance
        if len(self.tasks) != inst.machines_number:
            raise InvalidEncoding(
                f"expected {inst.machines_number} machine lists, got {len(self.tasks)}"
            )
        for machine, row in enumerate(self.tasks):
            if len(row) != inst.jobs_number:
                raise InvalidEncoding(
                    f"machine {machine}: expected {inst.jobs_number} tasks, got {len(row)}"
                )
            seen_jobs = set()
            for job, task in row:
                if not (0 <= job < inst.jobs_number and 0 <= task < inst.tasks_number):
                    raise InvalidEncoding(f"task ({job},{task}) out of range")
                if inst.machine(job, task) != machine:
                    raise InvalidEncoding(
                        f"task ({job},{task}) listed on machine {machine}, "
                        f"runs on {inst.machine(job, task)}"
                    )
                if job in seen_jobs:
                    raise InvalidEncoding(f"job {job} listed twice on machine {machine}")
                seen_jobs.add(job)
        return True

    def to_schedule(self) -> Schedule:
        """Decode by discrete-event simulation.

        At the current time every idle machine whose next listed task is the
        next unfinished task of its job starts it; completions are kept in a
        min-heap and time jumps to the earliest one, which frees its machine.

        Raises:
            InvalidEncoding: On malformed encodings.
            DeadlockError: If machine lists contradict job order so that the
                simulation stalls with tasks left.
        """
        self.validate()
        inst = self.instance
        starts = [[0] * inst.tasks_number for _ in range(inst.jobs_number)]
        # first unfinished task of each job
        job_progress = [0] * inst.jobs_number
        # number of finished tasks of each machine
        machine_progress = [0] * inst.machines_number
        busy = [False] * inst.machines_number
        running: list[tuple[int, int, int]] = []  # (end, machine, job)
        time = 0
        finished = 0
        while True:
            for machine in range(inst.machines_number):
                if busy[machine] or machine_progress[machine] >= inst.jobs_number:
                    continue
                job, task = self.tasks[machine][machine_progress[machine]]
                if task == job_progress[job]:
                    starts[job][task] = time
                    busy[machine] = True
                    heapq.heappush(running, (time + inst.duration(job, task), machine, job))
            if not running:
                break
            time, machine, job = heapq.heappop(running)
            machine_progress[machine] += 1
            job_progress[job] += 1
            busy[machine] = False
            finished += 1
        if finished != inst.jobs_number * inst.tasks_number:
            raise DeadlockError(
                f"dispatch stalled after {finished} of "
                f"{inst.jobs_number * inst.tasks_number} tasks"
            )
        return Schedule.from_matrix(inst, starts)

    def makespan(self) -> int:
        return self.to_schedule().makespan()

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "ResourceOrder":
        """Order each machine's tasks by their start time in ``schedule``."""
        order = cls(schedule.instance)
        for task in schedule.ordered_tasks():
            order.tasks[schedule.instance.machine(*task)].append(task)
        return order

    @classmethod
    def from_job_numbers(cls, encoding: "JobNumbers") -> "ResourceOrder":
        return cls.from_schedule(encoding.to_schedule())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceOrder):
            return NotImplemented
        return self.instance == other.instance and self.tasks == other.tasks

    def __str__(self) -> str:
        return "\n".join(
            f"M{m}: " + " ".join(f"({j},{t})" for j, t in row) for m, row in enumerate(self.tasks)
        )
