"""Decoding and conversion of the two solution encodings."""

from __future__ import annotations

import random

import pytest

from jobshop.encodings import JobNumbers, ResourceOrder
from jobshop.errors import DeadlockError, InvalidEncoding
from jobshop.models import Task


def _aaa1_order(aaa1, m2=((0, 2), (1, 2))):
    return ResourceOrder(aaa1, [[(0, 0), (1, 1)], [(1, 0), (0, 1)], list(m2)])


@pytest.mark.parametrize(
    "jobs, makespan",
    [
        ([0, 1, 1, 0, 0, 1], 12),
        ([0, 0, 1, 1, 0, 1], 14),
        ([0, 1, 0, 1, 0, 1], 12),
    ],
)
def test_job_numbers_decode(aaa1, jobs, makespan):
    schedule = JobNumbers(aaa1, jobs).to_schedule()
    assert schedule.is_valid()
    assert schedule.makespan() == makespan


def test_job_numbers_start_times(aaa1):
    schedule = JobNumbers(aaa1, [0, 1, 1, 0, 0, 1]).to_schedule()
    assert schedule.starts == ((0, 3, 6), (0, 3, 8))


def test_round_robin(aaa1):
    assert JobNumbers.round_robin(aaa1).jobs == [0, 1, 0, 1, 0, 1]


def test_append_builds_list(aaa1):
    jn = JobNumbers(aaa1)
    for job in [0, 1, 1, 0, 0, 1]:
        jn.append(job)
    assert jn.validate()
    assert jn.to_schedule().makespan() == 12


def test_resource_order_decode(aaa1):
    schedule = _aaa1_order(aaa1).to_schedule()
    assert schedule.is_valid()
    assert schedule.makespan() == 12
    assert _aaa1_order(aaa1).makespan() == 12
    assert _aaa1_order(aaa1, m2=((1, 2), (0, 2))).makespan() == 11


def test_decoding_is_deterministic(ft06):
    order = ResourceOrder.from_job_numbers(JobNumbers.shuffled(ft06, random.Random(3)))
    assert order.to_schedule() == order.to_schedule()


def test_resource_order_from_job_numbers(aaa1):
    jn = JobNumbers(aaa1, [0, 0, 1, 1, 0, 1])
    order = ResourceOrder.from_job_numbers(jn)
    assert order.tasks == [
        [Task(0, 0), Task(1, 1)],
        [Task(0, 1), Task(1, 0)],
        [Task(0, 2), Task(1, 2)],
    ]
    assert order.to_schedule() == jn.to_schedule()


def test_job_numbers_from_resource_order(aaa1):
    jn = JobNumbers.from_resource_order(_aaa1_order(aaa1))
    assert jn.jobs == [0, 1, 0, 1, 0, 1]
    assert jn.to_schedule().makespan() == 12


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_conversions_preserve_makespan(ft06, seed):
    jn = JobNumbers.shuffled(ft06, random.Random(seed))
    schedule = jn.to_schedule()
    order = ResourceOrder.from_job_numbers(jn)
    assert order.validate()
    assert order.to_schedule() == schedule
    back = JobNumbers.from_resource_order(order)
    assert back.to_schedule().makespan() == schedule.makespan()


def test_copy_is_independent(aaa1):
    order = _aaa1_order(aaa1)
    clone = order.copy()
    clone.swap(2, 0, 1)
    assert order != clone
    assert order.tasks[2] == [Task(0, 2), Task(1, 2)]

    jn = JobNumbers.round_robin(aaa1)
    jn_clone = jn.copy()
    jn_clone.jobs.reverse()
    assert jn.jobs == [0, 1, 0, 1, 0, 1]


@pytest.mark.parametrize(
    "jobs",
    [
        [0, 1, 0, 1, 0],  # too short
        [0, 1, 0, 1, 0, 0],  # wrong multiplicities
        [0, 1, 0, 1, 0, 2],  # job id out of range
    ],
)
def test_invalid_job_numbers(aaa1, jobs):
    with pytest.raises(InvalidEncoding):
        JobNumbers(aaa1, jobs).to_schedule()


def test_invalid_resource_order(aaa1):
    wrong_machine = ResourceOrder(aaa1, [[(0, 1), (1, 1)], [(1, 0), (0, 0)], [(0, 2), (1, 2)]])
    with pytest.raises(InvalidEncoding):
        wrong_machine.validate()
    short = ResourceOrder(aaa1, [[(0, 0)], [(1, 0), (0, 1)], [(0, 2), (1, 2)]])
    with pytest.raises(InvalidEncoding):
        short.to_schedule()


def test_cyclic_resource_order_deadlocks(aaa1):
    # m0 waits for (1,1) which needs (1,0) on m1, which waits behind (0,1),
    # which needs (0,0) on m0
    order = ResourceOrder(aaa1, [[(1, 1), (0, 0)], [(0, 1), (1, 0)], [(0, 2), (1, 2)]])
    assert order.validate()
    with pytest.raises(DeadlockError):
        order.to_schedule()
