"""Task domain model."""

from typing import Any

from pydantic import BaseModel


class Task(BaseModel):
    """A local task record, optionally linked to a GitLab issue."""

    # Task identification
    id: str
    project_id: str | None = None  # Local project the task belongs to

    title: str | None = None

    # Issue link fields
    issue_id: str | None = None  # GitLab issue iid, stored as text
    issue_last_updated: int | None = None  # Epoch ms of the last synced issue state
    issue_points: int | None = None
    issue_was_updated: bool = False  # Highlighted by the UI until acknowledged

    @property
    def has_issue(self) -> bool:
        """Whether the task is linked to a remote issue and can be synced."""
        return bool(self.project_id and self.issue_id)


class TaskChanges(BaseModel):
    """Partial task update proposed from remote issue data.

    Only fields that were explicitly set are part of the update, so
    ``issue_points=None`` (an issue without weight) still clears points.
    """

    title: str | None = None
    issue_points: int | None = None
    issue_last_updated: int | None = None
    issue_was_updated: bool | None = None

    def as_update(self) -> dict[str, Any]:
        """Return only the fields that were set."""
        return self.model_dump(exclude_unset=True)

    def apply_to(self, task: Task) -> Task:
        """Return a copy of ``task`` with the changes applied."""
        return task.model_copy(update=self.as_update())
