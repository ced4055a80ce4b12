"""Data models exchanged between the YouTrack export, GitLab and the migrator.

All models are immutable. Identity resolution and issue state changes produce
new objects or remote requests; nothing is edited in place once loaded.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .validation import ValidationResult


@dataclass(frozen=True)
class UserMapping:
    """Link between a YouTrack user and a GitLab user.

    YouTrack exports the assignee by login name but the reporter by display
    name, so both keys are kept. ``target_id`` is only known after the entry
    has been resolved against the GitLab user list.
    """

    source_username: str | None
    source_display_name: str | None = None
    target_username: str | None = None
    target_id: int | None = None
    target_private_token: str | None = None


@dataclass(frozen=True)
class TargetUser:
    """A GitLab user as returned by the users API."""

    id: int
    username: str


@dataclass(frozen=True)
class TargetProject:
    """The GitLab project receiving the issues."""

    id: int
    path_with_namespace: str


@dataclass(frozen=True)
class TargetIssue:
    """An issue created on GitLab.

    ``iid`` is the project-scoped number shown to users (``#42``).
    """

    id: int
    iid: int
    project_id: int
    state: str = "opened"


@dataclass(frozen=True)
class SourceIssue:
    """One row of the YouTrack CSV export."""

    issue_id: str
    summary: str
    description: str
    assignee: str
    reporter: str
    created: datetime
    tags: tuple[str, ...] = ()
    type: str = ""
    priority: str = ""
    subsystem: str = ""
    state: str = ""


class RowOutcome(enum.Enum):
    """Terminal state of a single row."""

    SKIPPED = "skipped"
    INSERTED = "inserted"
    INSERTED_AND_CLOSED = "inserted_and_closed"
    INSERTED_CLOSE_FAILED = "inserted_close_failed"
    INSERT_FAILED = "insert_failed"


@dataclass(frozen=True)
class RowResult:
    """What happened to one row during migration."""

    issue_id: str
    outcome: RowOutcome
    target_iid: int | None = None
    error: str | None = None


@dataclass
class MigrationStats:
    """Statistics collected during migration."""

    inserted: int = 0
    closed: int = 0
    close_failed: int = 0
    insert_failed: int = 0
    skipped: int = 0

    def record(self, outcome: RowOutcome) -> None:
        if outcome is RowOutcome.INSERTED:
            self.inserted += 1
        elif outcome is RowOutcome.INSERTED_AND_CLOSED:
            self.inserted += 1
            self.closed += 1
        elif outcome is RowOutcome.INSERTED_CLOSE_FAILED:
            self.inserted += 1
            self.close_failed += 1
        elif outcome is RowOutcome.INSERT_FAILED:
            self.insert_failed += 1
        else:
            self.skipped += 1


@dataclass
class MigrationResult:
    """Result of a migration run."""

    validation: ValidationResult
    rows: list[RowResult] = field(default_factory=list)
    stats: MigrationStats = field(default_factory=MigrationStats)

    @property
    def success(self) -> bool:
        """True when every row was inserted and, where required, closed."""
        return self.validation.ok and self.stats.insert_failed == 0 and self.stats.close_failed == 0
