"""Test doubles and builders shared by the test modules."""

from gltasks.models import GitLabComment, GitLabConfig, GitLabIssue, GitLabUser, Task
from gltasks.utils import from_epoch_ms


class FakeConfigProvider:
    """Config provider streaming a fixed config and counting subscriptions."""

    def __init__(self, cfg: GitLabConfig) -> None:
        self.cfg = cfg
        self.requested: list[str] = []
        self.closed = 0

    async def get_config_for_project(self, project_id: str):
        self.requested.append(project_id)
        try:
            while True:
                yield self.cfg
        finally:
            self.closed += 1


def make_comment(username: str, created_ms: int, comment_id: int = 1) -> GitLabComment:
    return GitLabComment(
        id=comment_id,
        body="comment",
        author=GitLabUser(username=username),
        created_at=from_epoch_ms(created_ms),
    )


def make_issue(
    number: int,
    updated_ms: int,
    title: str = "Fix bug",
    weight: int | None = None,
    comments: list[GitLabComment] | None = None,
) -> GitLabIssue:
    return GitLabIssue(
        id=1000 + number,
        iid=number,
        title=title,
        updated_at=from_epoch_ms(updated_ms),
        weight=weight,
        comments=comments or [],
    )


def make_task(
    issue_id: str | None = "5",
    last_updated: int | None = 1000,
    project_id: str | None = "inbox",
) -> Task:
    return Task(
        id=f"task-{issue_id}",
        project_id=project_id,
        issue_id=issue_id,
        issue_last_updated=last_updated,
    )
