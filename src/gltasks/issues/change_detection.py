"""Remote change detection for issue-linked tasks.

An issue counts as changed when its own ``updated_at`` or any comment
written by someone other than the configured user is newer than the
task's ``issue_last_updated``. Comments by the configured user are the
user's own activity and are ignored.
"""

from ..models import GitLabComment, GitLabIssue, Task, TaskChanges
from ..utils import to_epoch_ms


def comments_by_others(
    comments: list[GitLabComment], filter_username: str | None
) -> list[GitLabComment]:
    """Drop comments written by ``filter_username``.

    Filtering only applies to usernames longer than one character; an
    empty or single-character value keeps every comment.
    """
    if filter_username and len(filter_username) > 1:
        return [c for c in comments if c.author.username != filter_username]
    return list(comments)


def last_remote_update(issue: GitLabIssue, filter_username: str | None) -> int:
    """Latest remote activity on an issue, in epoch ms."""
    updates = sorted(
        [to_epoch_ms(c.created_at) for c in comments_by_others(issue.comments, filter_username)]
        + [to_epoch_ms(issue.updated_at)]
    )
    return updates[-1]


def was_updated(task: Task, issue: GitLabIssue, filter_username: str | None) -> bool:
    """Whether the issue saw remote activity after the task's last sync."""
    return last_remote_update(issue, filter_username) > (task.issue_last_updated or 0)


def get_add_task_data(issue: GitLabIssue) -> TaskChanges:
    """Task fields derived from an issue.

    ``issue_last_updated`` is the issue's own ``updated_at``, never the
    latest comment time, so comments keep flagging the task until the
    issue itself is touched again.
    """
    return TaskChanges(
        title=issue.display_title,
        issue_points=issue.weight,
        issue_was_updated=False,
        issue_last_updated=to_epoch_ms(issue.updated_at),
    )


def get_update_task_data(issue: GitLabIssue) -> TaskChanges:
    """Task fields for an issue that changed remotely."""
    changes = get_add_task_data(issue)
    changes.issue_was_updated = True
    return changes
