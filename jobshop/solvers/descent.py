"""Descent (hill climbing) over the critical-path block neighbourhood."""

from __future__ import annotations

import logging

from jobshop.models import ExitCause, Instance, Result
from jobshop.neighborhood import neighborhood
from jobshop.solvers.base import SearchState, Solver, deadline_passed, evaluate
from jobshop.solvers.greedy import GreedySolver, Priority

logger = logging.getLogger("jobshop.descent")


class DescentSolver(Solver):
    """Improve a greedy solution until no block swap shortens the makespan.

    Each pass computes the swaps of the current best order and probes them
    one by one on a copy of it. A strictly better probe becomes the best at
    once and the remaining swaps of the pass must beat it. A pass without
    improvement ends the search. The deadline is checked before every pass.
    """

    def __init__(self, priority: Priority = Priority.SPT) -> None:
        self.priority = priority
        self.name = f"descent_{priority.value}"

    def solve(self, instance: Instance, deadline: float) -> Result:
        start = GreedySolver(self.priority).solve(instance, deadline)
        if start.cause is ExitCause.BLOCKED:
            return start
        state = SearchState(best=start.encoding, best_makespan=start.makespan)

        while True:
            if deadline_passed(deadline):
                logger.info(
                    "[descent] stop time_limit reached at pass %d best=%d",
                    state.iteration,
                    state.best_makespan,
                )
                return state.result(instance, ExitCause.TIMEOUT)
            state.iteration += 1
            improved = False
            probe = state.best.copy()
            for swap in neighborhood(probe):
                swap.apply_on(probe)
                makespan = evaluate(probe)
                if makespan is not None and state.update_best(probe.copy(), makespan):
                    improved = True
                swap.apply_on(probe)
            state.record()
            logger.debug(
                "[descent] pass %d best=%d improved=%s",
                state.iteration,
                state.best_makespan,
                improved,
            )
            if not improved:
                break

        logger.info(
            "[descent] local optimum after %d passes best=%d (%d ms)",
            state.iteration,
            state.best_makespan,
            state.elapsed_ms(),
        )
        return state.result(instance, ExitCause.NOT_PROVED_OPTIMAL)
