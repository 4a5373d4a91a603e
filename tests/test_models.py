"""Tests for data models."""

import pytest
from pydantic import ValidationError

from gltasks.models import (
    GitLabConfig,
    GitLabIssue,
    GltasksConfig,
    Task,
    TaskChanges,
)
from gltasks.utils import from_epoch_ms, to_epoch_ms, truncate


class TestTask:
    """Tests for Task model."""

    def test_has_issue(self):
        """A task with project and issue id can sync."""
        assert Task(id="t1", project_id="inbox", issue_id="5").has_issue is True

    def test_has_issue_requires_project(self):
        """A task without project cannot sync."""
        assert Task(id="t1", issue_id="5").has_issue is False

    def test_has_issue_requires_issue(self):
        """A task without issue cannot sync."""
        assert Task(id="t1", project_id="inbox").has_issue is False

    def test_defaults(self):
        """Issue fields default to unsynced."""
        task = Task(id="t1")
        assert task.issue_last_updated is None
        assert task.issue_was_updated is False


class TestTaskChanges:
    """Tests for TaskChanges."""

    def test_as_update_only_set_fields(self):
        """Unset fields are not part of the update."""
        changes = TaskChanges(title="#5 Fix bug")
        assert changes.as_update() == {"title": "#5 Fix bug"}

    def test_explicit_none_is_kept(self):
        """Points explicitly set to None clear the task's points."""
        changes = TaskChanges(issue_points=None)
        assert changes.as_update() == {"issue_points": None}

    def test_apply_to(self):
        """Changes are applied to a copy of the task."""
        task = Task(id="t1", title="old", issue_points=2)
        updated = TaskChanges(title="#5 Fix bug", issue_was_updated=True).apply_to(task)
        assert updated.title == "#5 Fix bug"
        assert updated.issue_was_updated is True
        assert updated.issue_points == 2
        assert task.title == "old"


class TestGitLabIssue:
    """Tests for GitLabIssue."""

    def test_parses_api_payload(self):
        """The iid field becomes number and timestamps are parsed."""
        issue = GitLabIssue.model_validate(
            {"id": 99, "iid": 5, "title": "Fix bug", "updated_at": "1970-01-01T00:00:02Z"}
        )
        assert issue.number == 5
        assert to_epoch_ms(issue.updated_at) == 2000
        assert issue.comments == []
        assert issue.weight is None

    def test_display_title(self):
        """display_title prefixes the issue number."""
        issue = GitLabIssue(id=1, iid=5, title="Fix bug", updated_at=from_epoch_ms(0))
        assert issue.display_title == "#5 Fix bug"


class TestGitLabConfig:
    """Tests for GitLabConfig."""

    def test_usable_needs_enabled_and_project(self):
        """Only enabled configs with a project are usable."""
        assert GitLabConfig(is_enabled=True, project="g/r").is_usable is True
        assert GitLabConfig(is_enabled=False, project="g/r").is_usable is False
        assert GitLabConfig(is_enabled=True).is_usable is False

    def test_base_url_must_be_http(self):
        """Base URLs need a scheme."""
        with pytest.raises(ValidationError):
            GitLabConfig(gitlab_base_url="git.example.com")

    def test_empty_base_url_is_none(self):
        """An empty base URL means gitlab.com."""
        assert GitLabConfig(gitlab_base_url="").gitlab_base_url is None

    def test_root_config_default_project(self):
        """Unknown projects resolve to a disabled config."""
        assert GltasksConfig.default().get_gitlab_config("x").is_enabled is False


class TestUtils:
    """Tests for small utilities."""

    def test_truncate_short_text(self):
        """Short text is returned unchanged."""
        assert truncate("#5 Fix bug") == "#5 Fix bug"

    def test_truncate_long_text(self):
        """Long text is cut and marked."""
        assert truncate("abcdefghijklmnopqrstuvwxyz") == "abcdefghijklmnopqrs..."

    def test_epoch_round_trip_naive(self):
        """Naive datetimes are treated as UTC."""
        dt = from_epoch_ms(1500).replace(tzinfo=None)
        assert to_epoch_ms(dt) == 1500
