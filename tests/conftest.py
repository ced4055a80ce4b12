"""
Pytest configuration and fixtures.

Integration tests fail on any WARNING or ERROR log record emitted while they
run: a clean migration is expected to log neither. Unit tests may log freely.
"""

from __future__ import annotations

import csv
import json
import logging
from typing import TYPE_CHECKING, Any

from typing_extensions import override

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from pathlib import Path

CSV_COLUMNS: list[str] = [
    "Issue Id",
    "Summary",
    "Description",
    "Assignee",
    "Tags",
    "Type",
    "Priority",
    "Subsystem",
    "Reporter",
    "State",
    "Created",
]

# Warning records captured per integration test node id
_integration_test_warnings: dict[str, list[logging.LogRecord]] = {}


class IntegrationTestWarningHandler(logging.Handler):
    """Collect WARNING and above records of one integration test."""

    test_nodeid: str

    def __init__(self, test_nodeid: str) -> None:
        super().__init__(level=logging.WARNING)
        self.test_nodeid = test_nodeid

    @override
    def emit(self, record: logging.LogRecord) -> None:
        _integration_test_warnings.setdefault(self.test_nodeid, []).append(record)


@pytest.fixture(autouse=True)
def fail_on_log_warnings_for_integration_tests(request: pytest.FixtureRequest) -> Generator[None]:
    """Capture warnings logged during tests marked ``integration``."""
    if request.node.get_closest_marker("integration") is None:
        yield
        return

    test_nodeid = request.node.nodeid
    _integration_test_warnings[test_nodeid] = []
    handler = IntegrationTestWarningHandler(test_nodeid)
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    try:
        yield
    finally:
        root_logger.removeHandler(handler)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Generator[None]:  # type: ignore[misc]
    """Turn a passed integration test into a failure if it logged warnings."""
    outcome = yield
    report = outcome.get_result()

    if call.when != "call" or report.outcome != "passed":
        return

    warning_records = _integration_test_warnings.pop(item.nodeid, [])
    if warning_records:
        report.outcome = "failed"
        report.longrepr = f"Integration test failed: {len(warning_records)} warning(s) detected:\n" + "\n".join(
            f"  - {r.levelname}: {r.getMessage()} (in {r.name}:{r.lineno})" for r in warning_records
        )


def _make_row(issue_id: str, **overrides: str) -> dict[str, str]:
    row = {
        "Issue Id": issue_id,
        "Summary": f"Summary of {issue_id}",
        "Description": "",
        "Assignee": "alice",
        "Tags": "",
        "Type": "Task",
        "Priority": "Normal",
        "Subsystem": "No subsystem",
        "Reporter": "Bob Builder",
        "State": "Open",
        "Created": "2013-05-21 14:03",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row() -> Callable[..., dict[str, str]]:
    """Return a function building one CSV record with sensible defaults."""
    return _make_row


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[list[dict[str, str]]], Path]:
    """Return a function writing records to a YouTrack-like CSV export."""

    def _write(rows: list[dict[str, str]], name: str = "issues.csv") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            writer.writerows(rows)
        return path

    return _write


@pytest.fixture
def users_file(tmp_path: Path) -> Callable[[list[dict[str, Any]]], Path]:
    """Return a function writing a user mapping file."""

    def _write(entries: list[dict[str, Any]], name: str = "users.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(entries), encoding="utf-8")
        return path

    return _write
