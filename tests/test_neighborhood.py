"""Critical-path blocks, swap moves and the order fingerprint."""

from __future__ import annotations

import random

import pytest

from jobshop.encodings import JobNumbers, OrderFingerprint, ResourceOrder
from jobshop.neighborhood import Block, Swap, blocks_of_critical_path, neighborhood, neighbors


@pytest.fixture()
def aaa1_order(aaa1):
    return ResourceOrder(aaa1, [[(0, 0), (1, 1)], [(1, 0), (0, 1)], [(1, 2), (0, 2)]])


def _random_order(instance, seed):
    return ResourceOrder.from_job_numbers(JobNumbers.shuffled(instance, random.Random(seed)))


def test_blocks_of_critical_path(aaa1_order):
    assert blocks_of_critical_path(aaa1_order) == [Block(0, 0, 1), Block(2, 0, 1)]
    assert neighborhood(aaa1_order) == [Swap(0, 0, 1), Swap(2, 0, 1)]


def test_neighbors_of_short_and_long_blocks():
    assert neighbors(Block(3, 2, 3)) == [Swap(3, 2, 3)]
    assert neighbors(Block(0, 2, 4)) == [Swap(0, 2, 3), Swap(0, 3, 4)]
    assert neighbors(Block(1, 0, 5)) == [Swap(1, 0, 1), Swap(1, 4, 5)]
    assert len(Block(1, 0, 5)) == 6


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_blocks_lie_on_one_machine(ft06, seed):
    order = _random_order(ft06, seed)
    path = set(order.to_schedule().critical_path())
    for block in blocks_of_critical_path(order):
        assert len(block) >= 2
        for pos in range(block.first_task, block.last_task + 1):
            assert order.tasks[block.machine][pos] in path


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_swap_twice_is_identity(ft06, seed):
    order = _random_order(ft06, seed)
    original = order.copy()
    for swap in neighborhood(order):
        swap.apply_on(order)
        assert order != original
        swap.apply_on(order)
        assert order == original


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_neighbours_decode(ft06, seed):
    order = _random_order(ft06, seed)
    for swap in neighborhood(order):
        probe = order.copy()
        swap.apply_on(probe)
        assert probe.to_schedule().is_valid()


def test_fingerprint_incremental_update(ft06):
    order = _random_order(ft06, 7)
    fingerprint = OrderFingerprint.of(order)
    for swap in neighborhood(order):
        swap.apply_on(order)
        fingerprint.apply_swap(swap)
        fresh = OrderFingerprint.of(order)
        assert hash(fingerprint) == hash(fresh)
        assert fingerprint == fresh
        expected = hash(fingerprint)
        assert fingerprint.recompute() == expected


def test_fingerprint_snapshot_is_independent(aaa1_order):
    fingerprint = OrderFingerprint.of(aaa1_order)
    snap = fingerprint.snapshot()
    fingerprint.apply_swap(Swap(0, 0, 1))
    assert snap == OrderFingerprint.of(aaa1_order)
    assert snap != fingerprint
    fingerprint.apply_swap(Swap(0, 0, 1))
    assert snap == fingerprint
    assert len({snap, fingerprint}) == 1
