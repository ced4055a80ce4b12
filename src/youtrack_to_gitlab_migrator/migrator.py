"""
Main migration class for YouTrack to GitLab migration.

The run has two phases:

Phase 1: Preconditions
    - Find the GitLab project and list the GitLab users
    - Load the user mapping file and resolve GitLab user ids
    - Read the YouTrack CSV export
    - Validate that every assignee and reporter can be mapped
    Any failure raises MigrationError before GitLab is modified.

Phase 2: Issues
    Rows are migrated one at a time, oldest first, so that GitLab issue
    numbers follow the YouTrack creation order. For each row the issue is
    created on behalf of its reporter and, if the YouTrack state is a closed
    one, closed by its assignee (or the administrator when the assignee has no
    private token). A failing row is reported and skipped; it is neither
    retried nor rolled back. Every create call is paced by a Throttle.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import gitlab_utils as glu
from . import reporting
from .exceptions import IssueCloseError, IssueCreateError, MigrationError, UnmappedUsersError
from .issue_builder import build_description
from .labels import derive_labels, is_closed_state
from .models import MigrationResult, RowOutcome, RowResult
from .source import read_rows
from .throttle import Throttle
from .users import find_by_source_display_name, find_by_source_username, load_user_mappings, resolve_user_ids
from .validation import validate

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from gitlab import Gitlab

    from .config import MigrationConfig
    from .models import SourceIssue, TargetProject, UserMapping

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


def sort_rows(rows: Sequence[SourceIssue]) -> list[SourceIssue]:
    """Sort rows by creation date, oldest first. Ties keep their input order."""
    return sorted(rows, key=lambda row: row.created)


class YouTrackToGitLabMigrator:
    """Main migration class."""

    def __init__(
        self,
        config: MigrationConfig,
        *,
        client_factory: Callable[[str, str], Gitlab] = glu.get_client,
        throttle: Throttle | None = None,
    ) -> None:
        self.config: MigrationConfig = config
        self._client_factory: Callable[[str, str], Gitlab] = client_factory
        self.throttle: Throttle = throttle if throttle is not None else Throttle(config.delay)

        # Clients by token; the admin client creates issues, user clients close them
        self._clients: dict[str, Gitlab] = {}
        self.admin_client: Gitlab = self._client_for(config.admin_token)

        logger.info(f"Initialized migrator for {config.input_file} -> {config.gitlab_url}/{config.project_path}")

    def _client_for(self, token: str) -> Gitlab:
        client = self._clients.get(token)
        if client is None:
            client = self._client_factory(self.config.gitlab_url, token)
            self._clients[token] = client
        return client

    def load_project(self) -> TargetProject:
        """Find the target project.

        Raises:
            MigrationError: If the project cannot be found
        """
        project = glu.find_project(self.admin_client, self.config.project_path)
        if project is None:
            msg = f"Cannot find GitLab project: {self.config.project_path}"
            raise MigrationError(msg)
        logger.info(f"Found GitLab project {project.path_with_namespace} (id {project.id})")
        return project

    def load_mappings(self) -> list[UserMapping]:
        """Load the user mapping file and resolve the GitLab user ids."""
        gitlab_users = glu.list_users(self.admin_client)
        logger.info(f"Found {len(gitlab_users)} GitLab users")
        return resolve_user_ids(load_user_mappings(self.config.users_file), gitlab_users)

    def migrate(self) -> MigrationResult:
        """Execute the full migration.

        Returns:
            MigrationResult with one RowResult per row, oldest first

        Raises:
            MigrationError: If a precondition fails; GitLab is not modified then
            UnmappedUsersError: If users of the export cannot be mapped
        """
        project = self.load_project()
        mappings = self.load_mappings()
        rows = read_rows(self.config.input_file)

        validation = validate(rows, mappings)
        if not validation.ok:
            reporting.print_validation_errors(validation)
            raise UnmappedUsersError(validation)

        result = MigrationResult(validation=validation)
        rows = sort_rows(rows)

        if self.config.dry_run:
            reporting.print_dry_run(len(rows), project.path_with_namespace)
            for row in rows:
                result.rows.append(RowResult(issue_id=row.issue_id, outcome=RowOutcome.SKIPPED))
                result.stats.record(RowOutcome.SKIPPED)
            return result

        logger.info(f"Migrating {len(rows)} issues to {project.path_with_namespace}")
        for row in rows:
            self.throttle.acquire()
            row_result = self.migrate_row(row, project, mappings)
            reporting.print_row_status(row_result)
            result.rows.append(row_result)
            result.stats.record(row_result.outcome)

        reporting.print_summary(result.stats)
        return result

    def migrate_row(self, row: SourceIssue, project: TargetProject, mappings: Sequence[UserMapping]) -> RowResult:
        """Create the GitLab issue for a row and close it if needed.

        Failures are returned as the row's outcome, never raised.
        """
        assignee = find_by_source_username(mappings, row.assignee)
        author = find_by_source_display_name(mappings, row.reporter)
        assignee_id = assignee.target_id if assignee else None
        author_id = author.target_id if author else None

        try:
            issue = glu.create_issue(
                self.admin_client,
                project.id,
                title=row.summary,
                description=build_description(row.description, row.issue_id),
                assignee_id=assignee_id,
                milestone_id=None,
                labels=derive_labels(row.tags, row.type, row.priority, row.subsystem),
                author_id=author_id,
            )
        except IssueCreateError as e:
            logger.debug(f"{row.issue_id}: {e}")
            return RowResult(issue_id=row.issue_id, outcome=RowOutcome.INSERT_FAILED, error=str(e))

        logger.debug(f"{row.issue_id}: created #{issue.iid} (id {issue.id})")

        if not is_closed_state(row.state):
            return RowResult(issue_id=row.issue_id, outcome=RowOutcome.INSERTED, target_iid=issue.iid)

        # Assignee's own token if mapped, else the admin token
        token = (assignee.target_private_token if assignee else None) or self.config.admin_token
        try:
            glu.close_issue(self._client_for(token), issue)
        except IssueCloseError as e:
            logger.debug(f"{row.issue_id}: {e}")
            return RowResult(
                issue_id=row.issue_id,
                outcome=RowOutcome.INSERTED_CLOSE_FAILED,
                target_iid=issue.iid,
                error=str(e),
            )

        return RowResult(issue_id=row.issue_id, outcome=RowOutcome.INSERTED_AND_CLOSED, target_iid=issue.iid)
