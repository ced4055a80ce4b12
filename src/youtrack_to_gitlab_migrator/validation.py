"""
Pre-flight validation of the identities used by the export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .users import find_by_source_display_name, find_by_source_username

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import SourceIssue, UserMapping


@dataclass
class ValidationResult:
    """Identities that cannot be mapped, in order of first occurrence."""

    missing_usernames: list[str] = field(default_factory=list)
    """Assignee login names without a mapping."""
    missing_display_names: list[str] = field(default_factory=list)
    """Reporter names without a mapping."""
    unresolved_reporters: list[str] = field(default_factory=list)
    """GitLab usernames of mapped reporters that do not exist on GitLab."""

    @property
    def ok(self) -> bool:
        return not (self.missing_usernames or self.missing_display_names or self.unresolved_reporters)


def _append_once(values: list[str], value: str) -> None:
    if value not in values:
        values.append(value)


def validate(rows: Sequence[SourceIssue], mappings: Sequence[UserMapping]) -> ValidationResult:
    """Check that every assignee and reporter of the export can be mapped.

    Assignees are looked up by login name and reporters by display name. A
    reporter is also reported when its mapping was not matched to a GitLab
    user, since the issue could then not be created on the reporter's behalf.
    """
    result = ValidationResult()

    for row in rows:
        if find_by_source_username(mappings, row.assignee) is None:
            _append_once(result.missing_usernames, row.assignee)

    for row in rows:
        reporter = find_by_source_display_name(mappings, row.reporter)
        if reporter is None:
            _append_once(result.missing_display_names, row.reporter)
        elif reporter.target_id is None:
            _append_once(result.unresolved_reporters, reporter.target_username or row.reporter)

    return result
