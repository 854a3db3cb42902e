"""Critical-path block neighbourhood (Nowicki & Smutnicki) on per-machine orders.

Design choices
--------------
Blocks:
    A block is a maximal run of consecutive critical-path tasks executed on
    the same machine. Consecutive critical tasks on one machine are also
    adjacent in that machine's list, so a block is stored as a slice
    ``first_task..last_task`` of the list.

Moves:
    Only the first two and the last two tasks of each block are swapped
    (a single swap for two-task blocks). Swapping inside a block cannot
    create a cycle, so every neighbour decodes to a feasible schedule.

Mutation:
    ``Swap.apply_on`` mutates the order in place; applying the same swap a
    second time restores it. Callers probe on a copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from jobshop.encodings.resource_order import ResourceOrder
from jobshop.schedule import Schedule


@dataclass(frozen=True)
class Block:
    """Slice of one machine's list covered by a critical-path block.

    With the order
        machine 0 : (0,1) (1,2) (2,2)
        machine 1 : (0,2) (2,1) (1,1)
    ``Block(machine=1, first_task=0, last_task=1)`` is ``[(0,2) (2,1)]``.
    """

    machine: int
    first_task: int
    last_task: int

    def __len__(self) -> int:
        return self.last_task - self.first_task + 1


@dataclass(frozen=True)
class Swap:
    """Exchange of the tasks at positions ``t1`` and ``t2`` of one machine list."""

    machine: int
    t1: int
    t2: int

    def apply_on(self, order: ResourceOrder) -> None:
        order.swap(self.machine, self.t1, self.t2)


def blocks_of_critical_path(
    order: ResourceOrder, schedule: Optional[Schedule] = None
) -> list[Block]:
    """Return all blocks of the critical path of ``order``.

    Args:
        order: Current solution.
        schedule: Its decoded schedule, if the caller already has it.
    """
    if schedule is None:
        schedule = order.to_schedule()
    instance = order.instance
    blocks: list[Block] = []
    machine = -1
    first_task = 0
    run = 0
    for task in schedule.critical_path():
        m = instance.machine(*task)
        if m != machine:
            if run >= 2:
                blocks.append(Block(machine, first_task, first_task + run - 1))
            machine = m
            first_task = order.index_of(task)
            run = 1
        else:
            run += 1
    if run >= 2:
        blocks.append(Block(machine, first_task, first_task + run - 1))
    return blocks


def neighbors(block: Block) -> list[Swap]:
    """Swaps of the Nowicki-Smutnicki neighbourhood for one block."""
    if block.last_task == block.first_task + 1:
        return [Swap(block.machine, block.first_task, block.last_task)]
    return [
        Swap(block.machine, block.first_task, block.first_task + 1),
        Swap(block.machine, block.last_task - 1, block.last_task),
    ]


def neighborhood(order: ResourceOrder, schedule: Optional[Schedule] = None) -> list[Swap]:
    """All candidate swaps for ``order``, block after block along the path."""
    swaps: list[Swap] = []
    for block in blocks_of_critical_path(order, schedule):
        swaps.extend(neighbors(block))
    return swaps
