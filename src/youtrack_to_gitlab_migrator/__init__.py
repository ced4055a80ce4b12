"""
YouTrack to GitLab Migration Tool

Migrates issues exported from YouTrack as CSV to a GitLab project, keeping
authors, assignees, labels and the closed state.
"""

from __future__ import annotations

from .cli import main
from .exceptions import IssueCloseError, IssueCreateError, MigrationError, UnmappedUsersError
from .labels import derive_labels
from .migrator import YouTrackToGitLabMigrator
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "IssueCloseError",
    "IssueCreateError",
    "MigrationError",
    "UnmappedUsersError",
    "YouTrackToGitLabMigrator",
    "derive_labels",
    "main",
    "setup_logging",
]
