"""Solution encodings for the job-shop problem.

Structure:
- job_numbers.py: JobNumbers (global job-priority list)
- resource_order.py: ResourceOrder (per-machine task order)
- fingerprint.py: OrderFingerprint (rolling hash of a ResourceOrder)
"""

from jobshop.encodings.fingerprint import OrderFingerprint
from jobshop.encodings.job_numbers import JobNumbers
from jobshop.encodings.resource_order import ResourceOrder

__all__ = [
    "JobNumbers",
    "OrderFingerprint",
    "ResourceOrder",
]
