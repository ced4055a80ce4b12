from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Final

import requests
from gitlab import Gitlab
from gitlab.exceptions import GitlabError

from . import utils
from .exceptions import IssueCloseError, IssueCreateError, MigrationError
from .models import TargetIssue, TargetProject, TargetUser

if TYPE_CHECKING:
    from gitlab.v4.objects import Project as GitlabProject

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "GITLAB_TOKEN"  # noqa: S105


def get_token(token: str | None = None, pass_path: str | None = None) -> str | None:
    """Get the GitLab admin token from the argument, a pass path or env var GITLAB_TOKEN."""
    if token:
        return token

    if pass_path:
        return utils.get_pass_value(pass_path)

    return os.environ.get(_TOKEN_ENV_VAR) or None


def get_client(url: str, token: str) -> Gitlab:
    """Get a GitLab client for the instance at ``url`` using the token."""
    return Gitlab(url, private_token=token)


def _project(client: Gitlab, project_id: int) -> GitlabProject:
    # lazy: no request, the object only carries the id for sub-resource calls
    return client.projects.get(project_id, lazy=True)


def find_project(client: Gitlab, path_with_namespace: str) -> TargetProject | None:
    """Find a project by its full path (e.g. ``mycorp/myproj``).

    Returns:
        The project, or None if no visible project has exactly this path

    Raises:
        MigrationError: If the projects cannot be listed
    """
    name = path_with_namespace.rsplit("/", 1)[-1]
    try:
        for project in client.projects.list(search=name, search_namespaces=True, iterator=True):
            if project.path_with_namespace == path_with_namespace:
                return TargetProject(id=project.id, path_with_namespace=project.path_with_namespace)
    except (GitlabError, requests.RequestException) as e:
        msg = f"Cannot get list of projects from GitLab {client.url}: {e}"
        raise MigrationError(msg) from e
    return None


def list_users(client: Gitlab) -> list[TargetUser]:
    """List all users of the GitLab instance.

    Raises:
        MigrationError: If the users cannot be listed
    """
    try:
        return [TargetUser(id=user.id, username=user.username) for user in client.users.list(iterator=True)]
    except (GitlabError, requests.RequestException) as e:
        msg = f"Cannot get list of users from GitLab {client.url}: {e}"
        raise MigrationError(msg) from e


def create_issue(
    client: Gitlab,
    project_id: int,
    *,
    title: str,
    description: str,
    assignee_id: int | None,
    milestone_id: int | None,
    labels: str,
    author_id: int | None,
) -> TargetIssue:
    """Create an issue on behalf of ``author_id``.

    The client must authenticate an administrator for the sudo parameter to
    be accepted.

    Raises:
        IssueCreateError: On any error status or transport failure
    """
    data: dict[str, Any] = {"title": title, "description": description, "labels": labels}
    if assignee_id is not None:
        data["assignee_ids"] = [assignee_id]
    if milestone_id is not None:
        data["milestone_id"] = milestone_id

    kwargs: dict[str, Any] = {}
    if author_id is not None:
        kwargs["sudo"] = author_id

    try:
        issue = _project(client, project_id).issues.create(data, **kwargs)
    except (GitlabError, requests.RequestException) as e:
        msg = f"Failed to create issue {title!r} in project {project_id}: {e}"
        raise IssueCreateError(msg) from e

    return TargetIssue(id=issue.id, iid=issue.iid, project_id=issue.project_id, state=issue.state)


def close_issue(client: Gitlab, issue: TargetIssue) -> None:
    """Close an issue as the user authenticated by the client.

    Raises:
        IssueCloseError: On any error status or transport failure
    """
    try:
        _ = _project(client, issue.project_id).issues.update(issue.iid, {"state_event": "close"})
    except (GitlabError, requests.RequestException) as e:
        msg = f"Failed to close issue #{issue.iid} in project {issue.project_id}: {e}"
        raise IssueCloseError(msg) from e
