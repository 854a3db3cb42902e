"""Exception taxonomy of the package.

``InvalidEncoding`` and ``ScheduleInvalid`` also subclass ``ValueError`` so
code catching the usual ValueError keeps working.
"""


class JobShopError(Exception):
    """Base class for all errors raised by ``jobshop``."""


class InvalidEncoding(JobShopError, ValueError):
    """Candidate solution with wrong multiplicities or out-of-range entries."""


class DeadlockError(InvalidEncoding):
    """Per-machine order whose sequences contradict job order (no dispatch possible)."""


class ScheduleInvalid(JobShopError, ValueError):
    """Decoded schedule violating job precedence or machine exclusion.

    Attributes:
        constraint: ``"precedence"``, ``"overlap"`` or ``"idle"`` (start
            time explained by no predecessor).
    """

    def __init__(self, constraint: str, message: str) -> None:
        super().__init__(message)
        self.constraint = constraint
