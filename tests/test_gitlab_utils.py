"""Tests for the GitLab API helpers."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
import requests
from gitlab.exceptions import GitlabCreateError, GitlabListError, GitlabUpdateError

from youtrack_to_gitlab_migrator import gitlab_utils as glu
from youtrack_to_gitlab_migrator.exceptions import IssueCloseError, IssueCreateError, MigrationError
from youtrack_to_gitlab_migrator.models import TargetIssue, TargetProject, TargetUser


def _gitlab_object(**attrs: object) -> Mock:
    obj = Mock()
    for name, value in attrs.items():
        setattr(obj, name, value)
    return obj


@pytest.mark.unit
class TestGetToken:
    def test_explicit_token_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_TOKEN", "env-token")
        assert glu.get_token("cli-token", "gitlab/admin") == "cli-token"

    def test_pass_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_TOKEN", "env-token")
        with patch("youtrack_to_gitlab_migrator.gitlab_utils.utils.get_pass_value", return_value="pass-token") as m:
            assert glu.get_token(None, "gitlab/admin") == "pass-token"
        m.assert_called_once_with("gitlab/admin")

    def test_environment_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_TOKEN", "env-token")
        assert glu.get_token() == "env-token"

    def test_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITLAB_TOKEN", raising=False)
        assert glu.get_token() is None


@pytest.mark.unit
class TestGetClient:
    @patch("youtrack_to_gitlab_migrator.gitlab_utils.Gitlab")
    def test_passes_url_and_token(self, mock_gitlab_class: Mock) -> None:
        client = glu.get_client("https://gitlab.example.com", "secret")

        mock_gitlab_class.assert_called_once_with("https://gitlab.example.com", private_token="secret")
        assert client is mock_gitlab_class.return_value


@pytest.mark.unit
class TestFindProject:
    def test_exact_path_match(self) -> None:
        client = Mock()
        client.projects.list.return_value = iter(
            [
                _gitlab_object(id=1, path_with_namespace="other/myproj"),
                _gitlab_object(id=2, path_with_namespace="mycorp/myproj"),
            ]
        )

        project = glu.find_project(client, "mycorp/myproj")

        assert project == TargetProject(id=2, path_with_namespace="mycorp/myproj")
        client.projects.list.assert_called_once_with(search="myproj", search_namespaces=True, iterator=True)

    def test_not_found(self) -> None:
        client = Mock()
        client.projects.list.return_value = iter([_gitlab_object(id=1, path_with_namespace="mycorp/myproj-old")])

        assert glu.find_project(client, "mycorp/myproj") is None

    def test_api_error(self) -> None:
        client = Mock()
        client.projects.list.side_effect = GitlabListError("Forbidden", 403)

        with pytest.raises(MigrationError, match="Cannot get list of projects"):
            glu.find_project(client, "mycorp/myproj")

    def test_transport_error(self) -> None:
        client = Mock()
        client.projects.list.side_effect = requests.ConnectionError("refused")

        with pytest.raises(MigrationError, match="Cannot get list of projects"):
            glu.find_project(client, "mycorp/myproj")


@pytest.mark.unit
class TestListUsers:
    def test_returns_ids_and_usernames(self) -> None:
        client = Mock()
        client.users.list.return_value = iter(
            [_gitlab_object(id=1, username="root"), _gitlab_object(id=5, username="alice")]
        )

        assert glu.list_users(client) == [TargetUser(1, "root"), TargetUser(5, "alice")]
        client.users.list.assert_called_once_with(iterator=True)

    def test_api_error(self) -> None:
        client = Mock()
        client.users.list.side_effect = GitlabListError("Unauthorized", 401)

        with pytest.raises(MigrationError, match="Cannot get list of users"):
            glu.list_users(client)


@pytest.mark.unit
class TestCreateIssue:
    def setup_method(self) -> None:
        self.client: Mock = Mock()
        self.issues: Mock = self.client.projects.get.return_value.issues
        self.issues.create.return_value = _gitlab_object(id=900, iid=12, project_id=4, state="opened")

    def test_payload_and_sudo(self) -> None:
        issue = glu.create_issue(
            self.client,
            4,
            title="Crash",
            description="boom\nPRJ-1",
            assignee_id=3,
            milestone_id=None,
            labels="bug,type:bug",
            author_id=7,
        )

        assert issue == TargetIssue(id=900, iid=12, project_id=4, state="opened")
        self.client.projects.get.assert_called_once_with(4, lazy=True)
        self.issues.create.assert_called_once_with(
            {"title": "Crash", "description": "boom\nPRJ-1", "labels": "bug,type:bug", "assignee_ids": [3]},
            sudo=7,
        )

    def test_unassigned_without_author(self) -> None:
        _ = glu.create_issue(
            self.client, 4, title="T", description="D", assignee_id=None, milestone_id=2, labels="", author_id=None
        )

        self.issues.create.assert_called_once_with({"title": "T", "description": "D", "labels": "", "milestone_id": 2})

    def test_error_status(self) -> None:
        self.issues.create.side_effect = GitlabCreateError("Bad Request", 400)

        with pytest.raises(IssueCreateError, match="Failed to create issue 'T'"):
            glu.create_issue(
                self.client, 4, title="T", description="D", assignee_id=None, milestone_id=None, labels="", author_id=1
            )

    def test_transport_error(self) -> None:
        self.issues.create.side_effect = requests.Timeout("timed out")

        with pytest.raises(IssueCreateError):
            glu.create_issue(
                self.client, 4, title="T", description="D", assignee_id=None, milestone_id=None, labels="", author_id=1
            )


@pytest.mark.unit
class TestCloseIssue:
    def test_sends_close_event(self) -> None:
        client = Mock()

        glu.close_issue(client, TargetIssue(id=900, iid=12, project_id=4))

        client.projects.get.assert_called_once_with(4, lazy=True)
        client.projects.get.return_value.issues.update.assert_called_once_with(12, {"state_event": "close"})

    def test_error_status(self) -> None:
        client = Mock()
        client.projects.get.return_value.issues.update.side_effect = GitlabUpdateError("Forbidden", 403)

        with pytest.raises(IssueCloseError, match="Failed to close issue #12"):
            glu.close_issue(client, TargetIssue(id=900, iid=12, project_id=4))
