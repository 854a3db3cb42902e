"""Greedy list scheduling driven by a dispatch priority rule."""

from __future__ import annotations

import enum
import heapq
import logging
from typing import Callable, NamedTuple

from jobshop.encodings.resource_order import ResourceOrder
from jobshop.models import ExitCause, Instance, Result, Task
from jobshop.schedule import Schedule
from jobshop.solvers.base import Solver

logger = logging.getLogger("jobshop.greedy")


class Priority(enum.Enum):
    """Dispatch rules: shortest/longest (remaining) processing time."""

    SPT = "spt"
    LPT = "lpt"
    SRPT = "srpt"
    LRPT = "lrpt"


class _Candidate(NamedTuple):
    job: int
    task: int
    machine: int
    duration: int
    # total duration of the job's unfinished tasks, this one included
    remaining: int


_PRIORITY_KEYS: dict[Priority, Callable[[_Candidate], int]] = {
    Priority.SPT: lambda c: c.duration,
    Priority.LPT: lambda c: -c.duration,
    Priority.SRPT: lambda c: c.remaining,
    Priority.LRPT: lambda c: -c.remaining,
}


class GreedySolver(Solver):
    """Single-pass dispatch simulation recording a per-machine order.

    Ready tasks sit in a candidate heap ordered by the priority rule (ties:
    lower job first). Each phase drains that heap: a task whose machine is
    idle starts now and is appended to its machine list; otherwise a
    higher-priority task took the machine and it waits in the heap of the
    next phase. Time then jumps to the earliest completion; finished tasks
    free their machines (releasing tasks buffered on them) and make the
    next task of their job ready, as a candidate if its machine is idle or
    buffered on the machine otherwise.
    """

    def __init__(self, priority: Priority = Priority.SPT) -> None:
        self.priority = priority
        self.name = f"greedy_{priority.value}"

    def construct(self, instance: Instance) -> tuple[ResourceOrder, list[list[int]], int]:
        """Run the dispatch simulation.

        Returns:
            ``(order, starts, dispatched)``: the recorded order, the start
            matrix of the simulation and the number of dispatched tasks.
        """
        key = _PRIORITY_KEYS[self.priority]
        order = ResourceOrder(instance)
        starts = [[0] * instance.tasks_number for _ in range(instance.jobs_number)]
        remaining = [sum(d for _, d in job) for job in instance.jobs]
        busy = [False] * instance.machines_number
        pending: list[list[_Candidate]] = [[] for _ in range(instance.machines_number)]
        running: list[tuple[int, int, _Candidate]] = []  # (end, machine, candidate)
        current: list[tuple[int, _Candidate]] = []
        deferred: list[tuple[int, _Candidate]] = []

        def candidate(job: int, task: int) -> _Candidate:
            machine, duration = instance.jobs[job][task]
            return _Candidate(job, task, machine, duration, remaining[job])

        for job in range(instance.jobs_number):
            if instance.tasks_number:
                c = candidate(job, 0)
                heapq.heappush(current, (key(c), c))

        time = 0
        dispatched = 0
        while True:
            while current:
                _, c = heapq.heappop(current)
                if not busy[c.machine]:
                    busy[c.machine] = True
                    starts[c.job][c.task] = time
                    order.tasks[c.machine].append(Task(c.job, c.task))
                    heapq.heappush(running, (time + c.duration, c.machine, c))
                    dispatched += 1
                else:
                    heapq.heappush(deferred, (key(c), c))
            current, deferred = deferred, current

            if not running:
                break

            time = running[0][0]
            finishing: list[_Candidate] = []
            while running and running[0][0] == time:
                _, machine, c = heapq.heappop(running)
                busy[machine] = False
                for waiting in pending[machine]:
                    heapq.heappush(current, (key(waiting), waiting))
                pending[machine].clear()
                remaining[c.job] -= c.duration
                finishing.append(c)

            # successors are examined only after every machine finishing now is idle
            for c in finishing:
                if c.task + 1 < instance.tasks_number:
                    nxt = candidate(c.job, c.task + 1)
                    if not busy[nxt.machine]:
                        heapq.heappush(current, (key(nxt), nxt))
                    else:
                        pending[nxt.machine].append(nxt)
        return order, starts, dispatched

    def solve(self, instance: Instance, deadline: float) -> Result:
        order, starts, dispatched = self.construct(instance)
        total = instance.jobs_number * instance.tasks_number
        if dispatched != total:
            logger.error("[%s] dispatched %d of %d tasks", self.name, dispatched, total)
            return Result(
                instance, Schedule.from_matrix(instance, starts), ExitCause.BLOCKED, encoding=order
            )
        schedule = order.to_schedule()
        logger.info("[%s] %s makespan=%d", self.name, instance.name, schedule.makespan())
        return Result(
            instance,
            schedule,
            ExitCause.NOT_PROVED_OPTIMAL,
            encoding=order,
            history=[schedule.makespan()],
        )
