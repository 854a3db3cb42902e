"""Parsing of job-shop instance files.

Format
------
Text after ``#`` is ignored, as are blank lines. The first data line holds
``num_jobs num_tasks``; each of the next ``num_jobs`` lines lists the
``machine duration`` pairs of one job in processing order. Machines are
0-based and every job visits each of the ``num_tasks`` machines once::

    # example
    2 3 # num-jobs num-tasks
    0 3 1 3 2 2
    1 2 0 2 2 4
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from jobshop.models import Instance

PathLike = Union[str, os.PathLike]


def _data_lines(text: str) -> list[str]:
    lines = []
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if line:
            lines.append(line)
    return lines


def parse_instance(text: str, name: str = "") -> Instance:
    """Parse instance text.

    Raises:
        ValueError: On a malformed header, missing job lines, an odd or wrong
            number of tokens, a non-positive duration, a machine index out of
            range or a machine visited twice by one job.
    """
    lines = _data_lines(text)
    if not lines:
        raise ValueError("empty instance")
    header = lines[0].split()
    if len(header) != 2:
        raise ValueError(f"invalid header {lines[0]!r}: expected 'num_jobs num_tasks'")
    try:
        jobs_number, tasks_number = (int(x) for x in header)
    except ValueError as e:
        raise ValueError(f"invalid header {lines[0]!r}") from e
    if jobs_number <= 0 or tasks_number <= 0:
        raise ValueError("numbers of jobs and tasks must be positive")
    if len(lines) - 1 < jobs_number:
        raise ValueError(f"expected {jobs_number} job lines, got {len(lines) - 1}")

    jobs: list[list[tuple[int, int]]] = []
    for j, line in enumerate(lines[1 : jobs_number + 1]):
        try:
            tokens = [int(x) for x in line.split()]
        except ValueError as e:
            raise ValueError(f"job {j}: non-integer token in {line!r}") from e
        if len(tokens) != 2 * tasks_number:
            raise ValueError(f"job {j}: expected {2 * tasks_number} numbers, got {len(tokens)}")
        ops = list(zip(tokens[0::2], tokens[1::2]))
        for machine, duration in ops:
            if not (0 <= machine < tasks_number):
                raise ValueError(f"job {j}: machine index out of range: {machine}")
            if duration <= 0:
                raise ValueError(f"job {j}: non-positive duration {duration}")
        if len({m for m, _ in ops}) != tasks_number:
            raise ValueError(f"job {j}: every machine must be visited exactly once")
        jobs.append(ops)
    return Instance(
        jobs=tuple(tuple(job) for job in jobs),
        jobs_number=jobs_number,
        tasks_number=tasks_number,
        machines_number=tasks_number,
        name=name,
    )


def parse_file(path: PathLike) -> Instance:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        return parse_instance(f.read(), name=path.stem)


def load_instance(name_or_path: PathLike, instances_dir: PathLike = "instances") -> Instance:
    """Load an instance given a file path or a bare name looked up in ``instances_dir``."""
    candidate = Path(name_or_path)
    if not candidate.is_file():
        candidate = Path(instances_dir) / str(name_or_path)
    if not candidate.is_file():
        raise FileNotFoundError(f"Instance not found: {name_or_path} (searched {instances_dir})")
    return parse_file(candidate)
