"""Rolling hash of a per-machine order, used as tabu memory key.

The order is flattened machine after machine into integer cells
(``job * tasks_number + task + 1``) and hashed as a polynomial

    h = sum(cell[i] * BASE ** (L - 1 - i)) mod MODULUS

so overwriting one cell moves ``h`` by ``(new - old) * BASE ** (L - 1 - i)``
and a swap costs two such updates.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from jobshop.encodings.resource_order import ResourceOrder
    from jobshop.neighborhood import Swap

BASE = 31
MODULUS = (1 << 61) - 1


@lru_cache(maxsize=32)
def _powers(length: int) -> tuple[int, ...]:
    powers = [1] * length
    for i in range(1, length):
        powers[i] = powers[i - 1] * BASE % MODULUS
    return tuple(powers)


class OrderFingerprint:
    """Flattened copy of a per-machine order plus its cached hash.

    Instances kept in a tabu set are snapshots and are never mutated; the
    search mutates only its own working fingerprint.
    """

    __slots__ = ("cells", "row_length", "_hash")

    def __init__(self, cells: list[int], row_length: int, hash_value: int | None = None) -> None:
        self.cells = cells
        self.row_length = row_length
        self._hash = self._full_hash() if hash_value is None else hash_value

    @classmethod
    def of(cls, order: "ResourceOrder") -> "OrderFingerprint":
        tasks_number = order.instance.tasks_number
        cells = [job * tasks_number + task + 1 for row in order.tasks for job, task in row]
        return cls(cells, order.instance.jobs_number)

    def _full_hash(self) -> int:
        h = 0
        for cell in self.cells:
            h = (h * BASE + cell) % MODULUS
        return h

    def set(self, index: int, value: int) -> None:
        old = self.cells[index]
        self.cells[index] = value
        weight = _powers(len(self.cells))[len(self.cells) - 1 - index]
        self._hash = (self._hash + (value - old) * weight) % MODULUS

    def apply_swap(self, swap: "Swap") -> None:
        i = swap.machine * self.row_length + swap.t1
        j = swap.machine * self.row_length + swap.t2
        a, b = self.cells[i], self.cells[j]
        self.set(i, b)
        self.set(j, a)

    def snapshot(self) -> "OrderFingerprint":
        return OrderFingerprint(list(self.cells), self.row_length, self._hash)

    def recompute(self) -> int:
        self._hash = self._full_hash()
        return self._hash

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderFingerprint):
            return NotImplemented
        return self._hash == other._hash and self.cells == other.cells

    def __repr__(self) -> str:
        return f"OrderFingerprint(hash={self._hash}, cells={len(self.cells)})"
