"""Common structures and helper functions for solvers."""

from __future__ import annotations

import abc
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from jobshop.encodings.resource_order import ResourceOrder
from jobshop.errors import DeadlockError
from jobshop.models import ExitCause, Instance, Result

logger = logging.getLogger("jobshop")


def deadline_in(seconds: float) -> float:
    """Absolute deadline ``seconds`` from now, on the ``time.perf_counter`` clock."""
    return time.perf_counter() + seconds


def deadline_passed(deadline: float) -> bool:
    return time.perf_counter() >= deadline


def evaluate(order: ResourceOrder) -> Optional[int]:
    """Makespan of ``order``, or None when its machine lists deadlock."""
    try:
        return order.to_schedule().makespan()
    except DeadlockError as e:
        logger.debug("skipping deadlocked candidate: %s", e)
        return None


class Solver(abc.ABC):
    """Strategy producing a :class:`Result` for an instance before a deadline."""

    name: str = "solver"

    @abc.abstractmethod
    def solve(self, instance: Instance, deadline: float) -> Result:
        """Solve ``instance``; ``deadline`` is an absolute ``perf_counter`` value."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


@dataclass
class SearchState:
    """Best solution of a local search and its makespan history."""

    best: ResourceOrder
    best_makespan: int
    history: list[int] = field(default_factory=list)
    iteration: int = 0
    start_time: float = field(default_factory=time.perf_counter)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.best_makespan)

    def update_best(self, order: ResourceOrder, makespan: int) -> bool:
        """Adopt ``order`` if strictly better. Returns True if improved."""
        if makespan < self.best_makespan:
            self.best = order
            self.best_makespan = makespan
            return True
        return False

    def record(self) -> None:
        self.history.append(self.best_makespan)

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.start_time) * 1000)

    def result(self, instance: Instance, cause: ExitCause) -> Result:
        return Result(
            instance=instance,
            schedule=self.best.to_schedule(),
            cause=cause,
            encoding=self.best,
            history=list(self.history),
        )
