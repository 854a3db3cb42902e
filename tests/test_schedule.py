from __future__ import annotations

import random

import pytest

from jobshop.encodings import JobNumbers
from jobshop.errors import ScheduleInvalid
from jobshop.models import Instance, Task
from jobshop.schedule import Schedule


def test_valid_schedule(aaa1):
    schedule = Schedule.from_matrix(aaa1, [[0, 3, 6], [0, 3, 8]])
    assert schedule.check_valid()
    assert schedule.makespan() == 12
    assert schedule.end_time(1, 2) == 12


def test_precedence_violation(aaa1):
    schedule = Schedule.from_matrix(aaa1, [[0, 2, 6], [0, 3, 8]])
    with pytest.raises(ScheduleInvalid) as exc:
        schedule.check_valid()
    assert exc.value.constraint == "precedence"
    assert not schedule.is_valid()


def test_overlap_violation(aaa1):
    # (0,2) and (1,2) both run on machine 2 from time 6
    schedule = Schedule.from_matrix(aaa1, [[0, 3, 6], [0, 3, 6]])
    with pytest.raises(ScheduleInvalid) as exc:
        schedule.check_valid()
    assert exc.value.constraint == "overlap"


def test_rows_sorted_by_start(aaa1):
    rows = Schedule.from_matrix(aaa1, [[0, 3, 6], [0, 3, 8]]).rows()
    assert [r.start for r in rows] == sorted(r.start for r in rows)
    assert (rows[0].job, rows[0].task, rows[0].machine) == (0, 0, 0)
    assert rows[-1].end == 12


def test_critical_path_follows_job_and_machine_edges(aaa1):
    schedule = JobNumbers(aaa1, [0, 1, 1, 0, 0, 1]).to_schedule()
    path = schedule.critical_path()
    assert path == [Task(0, 0), Task(0, 1), Task(0, 2), Task(1, 2)]
    assert sum(aaa1.duration(*t) for t in path) == schedule.makespan()


def test_critical_path_prefers_machine_predecessor():
    inst = Instance.from_jobs([[(0, 2), (1, 2)], [(1, 2), (0, 2)]])
    schedule = Schedule.from_matrix(inst, [[0, 2], [0, 2]])
    # both jobs end at 4, job 0 is the sink; (0,1) has both edges ending at 2
    assert schedule.critical_path() == [Task(1, 0), Task(0, 1)]


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_critical_path_spans_the_makespan(ft06, seed):
    schedule = JobNumbers.shuffled(ft06, random.Random(seed)).to_schedule()
    path = schedule.critical_path()
    assert schedule.start_time(*path[0]) == 0
    assert schedule.end_time(*path[-1]) == schedule.makespan()
    for a, b in zip(path, path[1:]):
        assert schedule.end_time(*a) == schedule.start_time(*b)


def test_critical_path_unexplained_gap(aaa1):
    schedule = Schedule.from_matrix(aaa1, [[1, 4, 7], [0, 4, 9]])
    with pytest.raises(ScheduleInvalid) as exc:
        schedule.critical_path()
    assert exc.value.constraint == "idle"


def test_str(aaa1):
    text = str(Schedule.from_matrix(aaa1, [[0, 3, 6], [0, 3, 8]]))
    assert text.splitlines()[0] == "makespan=12"
    assert "M2: (0,2)[6-8] (1,2)[8-12]" in text
