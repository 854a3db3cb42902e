"""Tabu search over the critical-path block neighbourhood."""

from __future__ import annotations

import logging
from collections import deque
from typing import Optional

from jobshop.encodings.fingerprint import OrderFingerprint
from jobshop.encodings.resource_order import ResourceOrder
from jobshop.models import ExitCause, Instance, Result
from jobshop.neighborhood import neighborhood
from jobshop.solvers.base import SearchState, Solver, deadline_passed, evaluate
from jobshop.solvers.greedy import GreedySolver, Priority

logger = logging.getLogger("jobshop.tabu")


class TabuSolver(Solver):
    """Tabu search core loop.

    Notes:
        - Start: greedy order for ``priority``.
        - Every iteration scans all block swaps of the current order and moves
          to the best one whose resulting order is not tabu, even if worse.
        - Memory: fingerprints of the last ``tenure`` adopted orders (FIFO
          queue plus set). ``tenure=0`` disables memory.
        - Fallback: when every neighbour is tabu the current order is kept.
        - Stop: ``max_iterations`` reached, deadline passed (TIMEOUT) or the
          critical path has no block (no move exists).
    """

    def __init__(
        self,
        max_iterations: int = 100,
        tenure: int = 10,
        priority: Priority = Priority.SPT,
        name: Optional[str] = None,
    ) -> None:
        self.max_iterations = max_iterations
        self.tenure = tenure
        self.priority = priority
        self.name = name or f"tabu_{priority.value}"

    def solve(self, instance: Instance, deadline: float) -> Result:
        start = GreedySolver(self.priority).solve(instance, deadline)
        if start.cause is ExitCause.BLOCKED:
            return start
        state = SearchState(best=start.encoding, best_makespan=start.makespan)
        current: ResourceOrder = start.encoding
        current_makespan = start.makespan
        taboo_queue: deque[OrderFingerprint] = deque()
        taboo_set: set[OrderFingerprint] = set()

        for it in range(1, self.max_iterations + 1):
            if deadline_passed(deadline):
                logger.info(
                    "[tabu] stop time_limit reached at iter %d best=%d", it, state.best_makespan
                )
                return state.result(instance, ExitCause.TIMEOUT)
            while taboo_queue and len(taboo_queue) >= self.tenure:
                taboo_set.discard(taboo_queue.popleft())

            swaps = neighborhood(current)
            if not swaps:
                logger.info("[tabu] no moves available iter=%d best=%d", it, state.best_makespan)
                break

            probe = current.copy()
            fingerprint = OrderFingerprint.of(probe)
            best_move: Optional[ResourceOrder] = None
            best_move_makespan = 0
            best_move_fingerprint: Optional[OrderFingerprint] = None
            for swap in swaps:
                swap.apply_on(probe)
                fingerprint.apply_swap(swap)
                if fingerprint not in taboo_set:
                    makespan = evaluate(probe)
                    if makespan is not None and (
                        best_move is None or makespan < best_move_makespan
                    ):
                        best_move = probe.copy()
                        best_move_makespan = makespan
                        best_move_fingerprint = fingerprint.snapshot()
                swap.apply_on(probe)
                fingerprint.apply_swap(swap)

            if best_move is None:
                logger.debug("[tabu] iter %d all moves tabu, keeping current", it)
                best_move_fingerprint = fingerprint.snapshot()
            else:
                current = best_move
                current_makespan = best_move_makespan
            if self.tenure > 0:
                taboo_queue.append(best_move_fingerprint)
                taboo_set.add(best_move_fingerprint)

            state.iteration = it
            state.update_best(current, current_makespan)
            state.record()
            logger.debug(
                "[tabu] iter %d/%d current=%d best=%d",
                it,
                self.max_iterations,
                current_makespan,
                state.best_makespan,
            )

        logger.info(
            "[tabu] finished %d iterations best=%d (%d ms)",
            state.iteration,
            state.best_makespan,
            state.elapsed_ms(),
        )
        return state.result(instance, ExitCause.NOT_PROVED_OPTIMAL)
