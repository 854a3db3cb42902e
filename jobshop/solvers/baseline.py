"""Job-priority-list baselines: round robin and random sampling."""

from __future__ import annotations

import logging
import random
from typing import Optional

from jobshop.encodings.job_numbers import JobNumbers
from jobshop.models import ExitCause, Instance, Result
from jobshop.solvers.base import Solver, deadline_passed

logger = logging.getLogger("jobshop.baseline")


class BasicSolver(Solver):
    """Round-robin list ``0, 1, ..., n-1`` repeated for every operation index."""

    name = "basic"

    def solve(self, instance: Instance, deadline: float) -> Result:
        encoding = JobNumbers.round_robin(instance)
        schedule = encoding.to_schedule()
        return Result(
            instance,
            schedule,
            ExitCause.NOT_PROVED_OPTIMAL,
            encoding=encoding,
            history=[schedule.makespan()],
        )


class RandomSolver(Solver):
    """Decode shuffled job lists until the deadline (or ``max_samples``), keep the best.

    Args:
        max_samples: Optional cap on the number of sampled lists.
        seed: Seed of the private ``random.Random``.
    """

    name = "random"

    def __init__(self, max_samples: Optional[int] = None, seed: Optional[int] = None) -> None:
        self.max_samples = max_samples
        self.seed = seed

    def solve(self, instance: Instance, deadline: float) -> Result:
        rng = random.Random(self.seed)
        best = JobNumbers.round_robin(instance)
        best_schedule = best.to_schedule()
        history = [best_schedule.makespan()]
        samples = 0
        while True:
            if deadline_passed(deadline):
                cause = ExitCause.TIMEOUT
                break
            if self.max_samples is not None and samples >= self.max_samples:
                cause = ExitCause.NOT_PROVED_OPTIMAL
                break
            candidate = JobNumbers.shuffled(instance, rng)
            schedule = candidate.to_schedule()
            samples += 1
            if schedule.makespan() < best_schedule.makespan():
                best, best_schedule = candidate, schedule
                history.append(schedule.makespan())
        logger.info(
            "[random] %d samples best=%d cause=%s", samples, best_schedule.makespan(), cause.value
        )
        return Result(instance, best_schedule, cause, encoding=best, history=history)
