"""
Custom exception classes for the YouTrack to GitLab migration tool.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationResult


class MigrationError(Exception):
    """Base exception for migration errors."""


class UnmappedUsersError(MigrationError):
    """Raised when YouTrack users in the export cannot be mapped to GitLab users."""

    def __init__(self, validation: ValidationResult) -> None:
        self.validation: ValidationResult = validation
        super().__init__(
            f"Cannot map {len(validation.missing_usernames)} assignee(s), "
            f"{len(validation.missing_display_names)} reporter(s) and "
            f"{len(validation.unresolved_reporters)} GitLab author(s)"
        )


class IssueCreateError(MigrationError):
    """Raised when GitLab refuses or fails to create an issue."""


class IssueCloseError(MigrationError):
    """Raised when GitLab refuses or fails to close an issue."""
