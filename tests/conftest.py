"""Pytest configuration, shared instance fixtures & custom summary hook.

Also ensures the project root is on sys.path so ``import jobshop`` works
without installation.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from jobshop.models import Instance  # noqa: E402
from jobshop.parser import parse_file  # noqa: E402


@pytest.fixture(scope="session")
def instances_dir() -> Path:
    return _root / "instances"


@pytest.fixture(scope="session")
def aaa1(instances_dir: Path) -> Instance:
    """2 jobs x 3 machines example instance."""
    return parse_file(instances_dir / "aaa1")


@pytest.fixture(scope="session")
def ft06(instances_dir: Path) -> Instance:
    return parse_file(instances_dir / "ft06")


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        f"Passed: {passed} | Failed: {failed} | Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
