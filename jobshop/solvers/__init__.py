"""Solvers for the job-shop problem.

Contains:
- BasicSolver / RandomSolver (job-priority-list baselines)
- GreedySolver (priority list scheduling)
- DescentSolver (hill climbing on critical-path blocks)
- TabuSolver (tabu search on critical-path blocks)

``SOLVERS`` is the fixed registry used by the command-line harness.
"""

from jobshop.solvers.base import Solver, deadline_in, deadline_passed
from jobshop.solvers.baseline import BasicSolver, RandomSolver
from jobshop.solvers.descent import DescentSolver
from jobshop.solvers.greedy import GreedySolver, Priority
from jobshop.solvers.tabu import TabuSolver


def _build_registry() -> dict[str, Solver]:
    registry: dict[str, Solver] = {
        "basic": BasicSolver(),
        "random": RandomSolver(),
    }
    for rule in Priority:
        registry[f"greedy_{rule.value}"] = GreedySolver(rule)
        registry[f"descent_{rule.value}"] = DescentSolver(rule)
        registry[f"tabu_fast_{rule.value}"] = TabuSolver(
            max_iterations=10, tenure=5, priority=rule, name=f"tabu_fast_{rule.value}"
        )
        registry[f"tabu_quality_{rule.value}"] = TabuSolver(
            max_iterations=100, tenure=100, priority=rule, name=f"tabu_quality_{rule.value}"
        )
    return registry


SOLVERS: dict[str, Solver] = _build_registry()


def get_solver(name: str) -> Solver:
    """Look up a registered solver.

    Raises:
        KeyError: With the list of available names if ``name`` is unknown.
    """
    try:
        return SOLVERS[name]
    except KeyError:
        raise KeyError(f"Unknown solver {name!r}; available: {', '.join(SOLVERS)}") from None


__all__ = [
    "SOLVERS",
    "BasicSolver",
    "DescentSolver",
    "GreedySolver",
    "Priority",
    "RandomSolver",
    "Solver",
    "TabuSolver",
    "deadline_in",
    "deadline_passed",
    "get_solver",
]
