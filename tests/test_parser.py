"""Pytest tests for the instance parser.

Each test creates a temporary instance file and asserts either successful
parsing (structure, names, comments) or the correct exception.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager

import pytest

from jobshop.parser import load_instance, parse_file, parse_instance


@contextmanager
def temp_instance(content: str):
    fd, path = tempfile.mkstemp(text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:  # pragma: no cover
            pass


def test_parse_simple():
    with temp_instance("""2 2\n0 5 1 3\n1 4 0 2\n""") as path:
        inst = parse_file(path)
        assert inst.jobs_number == 2
        assert inst.tasks_number == 2
        assert inst.machines_number == 2
        assert inst.jobs == (((0, 5), (1, 3)), ((1, 4), (0, 2)))
        assert inst.name == os.path.basename(path).rsplit(".", 1)[0]


def test_comments_and_blank_lines_are_ignored():
    text = """# example
2 3 # num-jobs num-tasks

0 3 1 3 2 2  # job 0
1 2 0 2 2 4
"""
    inst = parse_instance(text, name="aaa1")
    assert inst.name == "aaa1"
    assert inst.jobs[0] == ((0, 3), (1, 3), (2, 2))
    assert inst.duration(1, 2) == 4
    assert inst.machine(1, 1) == 0
    assert inst.task_with_machine(1, 2) == 2


def test_bundled_instances(aaa1, ft06):
    assert (aaa1.jobs_number, aaa1.tasks_number) == (2, 3)
    assert (ft06.jobs_number, ft06.tasks_number) == (6, 6)
    assert ft06.name == "ft06"


def test_load_instance_by_name(instances_dir):
    inst = load_instance("aaa1", instances_dir)
    assert inst.name == "aaa1"


def test_load_instance_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_instance("no_such_instance", tmp_path)


@pytest.mark.parametrize(
    "content",
    [
        "",  # empty
        """2\n0 5 1 3\n""",  # invalid header (only one int)
        """a b\n0 5\n""",  # non-integer header
        # insufficient job lines (declares 2 jobs, provides 1)
        """2 1\n0 5\n""",
        """1 2\n0 5 1\n""",  # invalid token count (3 instead of 4)
        """1 2\n0 x 1 3\n""",  # non-integer token
        """1 1\n0 0\n""",  # non-positive processing time
        """1 2\n5 3 1 2\n""",  # machine index out of range
        """1 2\n0 3 0 2\n""",  # machine visited twice
    ],
)
def test_parse_errors(content: str):
    with temp_instance(content) as path:
        with pytest.raises(ValueError):
            parse_file(path)
