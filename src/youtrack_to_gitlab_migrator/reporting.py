"""
Human-readable status output of a migration run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from .models import RowOutcome

if TYPE_CHECKING:
    from .models import MigrationStats, RowResult
    from .validation import ValidationResult

console = Console(highlight=False, emoji=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


def print_row_status(result: RowResult) -> None:
    """Print one colored status line for a migrated row."""
    issue_id = result.issue_id
    if result.outcome is RowOutcome.INSERTED:
        console.print(f"{issue_id}: Inserted successfully. #{result.target_iid}", style="green", markup=False)
    elif result.outcome is RowOutcome.INSERTED_AND_CLOSED:
        console.print(f"{issue_id}: Inserted and closed successfully. #{result.target_iid}", style="green", markup=False)
    elif result.outcome is RowOutcome.INSERTED_CLOSE_FAILED:
        error_console.print(
            f"{issue_id}: Inserted successfully but failed to close. #{result.target_iid}",
            style="yellow",
            markup=False,
        )
    elif result.outcome is RowOutcome.INSERT_FAILED:
        error_console.print(f"{issue_id}: Failed to insert.", style="red", markup=False)


def print_validation_errors(validation: ValidationResult) -> None:
    """List every identity that prevents the migration from starting."""
    for username in validation.missing_usernames:
        error_console.print(f"Error: Cannot map YouTrack user with username: {username}", style="red", markup=False)
    for name in validation.missing_display_names:
        error_console.print(f"Error: Cannot map YouTrack user with name: {name}", style="red", markup=False)
    for username in validation.unresolved_reporters:
        error_console.print(f"Error: Cannot find GitLab user: {username}", style="red", markup=False)


def print_summary(stats: MigrationStats) -> None:
    console.print(
        f"Inserted {stats.inserted} issues ({stats.closed} closed), "
        f"{stats.close_failed} not closed, {stats.insert_failed} failed",
        style="bold",
        markup=False,
    )


def print_dry_run(issue_count: int, project_path: str) -> None:
    console.print(f"Dry run: {issue_count} issues would be migrated to {project_path}", style="bold", markup=False)
