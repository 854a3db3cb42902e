"""Job-shop scheduling heuristics.

Exports the data model, the two encodings and the solvers.
"""

from jobshop.encodings import JobNumbers, OrderFingerprint, ResourceOrder  # noqa: F401
from jobshop.errors import (  # noqa: F401
    DeadlockError,
    InvalidEncoding,
    JobShopError,
    ScheduleInvalid,
)
from jobshop.models import ExitCause, Instance, Result, Task  # noqa: F401
from jobshop.parser import load_instance, parse_file, parse_instance  # noqa: F401
from jobshop.schedule import Schedule  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "DeadlockError",
    "ExitCause",
    "Instance",
    "InvalidEncoding",
    "JobNumbers",
    "JobShopError",
    "OrderFingerprint",
    "ResourceOrder",
    "Result",
    "Schedule",
    "ScheduleInvalid",
    "Task",
    "load_instance",
    "parse_file",
    "parse_instance",
]
