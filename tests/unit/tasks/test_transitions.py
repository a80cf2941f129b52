"""Unit tests for the task status state machine."""

from datetime import UTC, datetime

import pytest

from governor.tasks.errors import InvalidTransitionError
from governor.tasks.models import Task, TaskStatus
from governor.tasks.transitions import can_transition, is_dispatch_terminal, transition

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def task() -> Task:
    return Task(organization_id="org-1", title="Write report")


class TestCanTransition:
    @pytest.mark.parametrize(
        ("from_status", "to_status"),
        [
            (TaskStatus.DRAFT, TaskStatus.PENDING),
            (TaskStatus.PENDING, TaskStatus.QUEUED),
            (TaskStatus.QUEUED, TaskStatus.IN_PROGRESS),
            (TaskStatus.IN_PROGRESS, TaskStatus.REVIEW),
            (TaskStatus.IN_PROGRESS, TaskStatus.FAILED),
            (TaskStatus.REVIEW, TaskStatus.COMPLETED),
            (TaskStatus.REVIEW, TaskStatus.IN_PROGRESS),
            (TaskStatus.FAILED, TaskStatus.PENDING),
            (TaskStatus.QUEUED, TaskStatus.CANCELLED),
        ],
    )
    def test_allowed(self, from_status: TaskStatus, to_status: TaskStatus) -> None:
        assert can_transition(from_status, to_status) is True

    @pytest.mark.parametrize(
        ("from_status", "to_status"),
        [
            (TaskStatus.DRAFT, TaskStatus.IN_PROGRESS),
            (TaskStatus.QUEUED, TaskStatus.COMPLETED),
            (TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS),
            (TaskStatus.REVIEW, TaskStatus.CANCELLED),
        ],
    )
    def test_rejected(self, from_status: TaskStatus, to_status: TaskStatus) -> None:
        assert can_transition(from_status, to_status) is False


class TestIsDispatchTerminal:
    def test_completed_and_cancelled_are_terminal(self) -> None:
        assert is_dispatch_terminal(TaskStatus.COMPLETED)
        assert is_dispatch_terminal(TaskStatus.CANCELLED)

    def test_failed_can_be_retried(self) -> None:
        assert not is_dispatch_terminal(TaskStatus.FAILED)


class TestTransition:
    """Tests for transition()."""

    def test_records_history(self, task: Task) -> None:
        moved = transition(
            task, TaskStatus.PENDING, changed_by="user-1", changed_by_type="user", now=NOW
        )

        assert moved.status == TaskStatus.PENDING
        assert moved.updated_at == NOW
        assert len(moved.status_history) == 1
        change = moved.status_history[0]
        assert change.from_status == TaskStatus.DRAFT
        assert change.to_status == TaskStatus.PENDING
        assert change.changed_by == "user-1"
        assert change.changed_by_type == "user"

    def test_original_untouched(self, task: Task) -> None:
        transition(task, TaskStatus.PENDING, now=NOW)
        assert task.status == TaskStatus.DRAFT
        assert task.status_history == []

    def test_invalid_move_raises(self, task: Task) -> None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            transition(task, TaskStatus.COMPLETED)

        assert exc_info.value.from_status == TaskStatus.DRAFT
        assert exc_info.value.to_status == TaskStatus.COMPLETED

    def test_full_lifecycle_timestamps(self, task: Task) -> None:
        later = datetime(2025, 3, 1, 13, 0, tzinfo=UTC)
        moved = transition(task, TaskStatus.PENDING, now=NOW)
        moved = transition(moved, TaskStatus.QUEUED, now=NOW)
        moved = transition(moved, TaskStatus.IN_PROGRESS, now=NOW)
        moved = transition(moved, TaskStatus.REVIEW, now=later)
        moved = transition(moved, TaskStatus.IN_PROGRESS, now=later)
        moved = transition(moved, TaskStatus.REVIEW, now=later)
        moved = transition(moved, TaskStatus.COMPLETED, now=later)

        assert moved.started_at == NOW
        assert moved.completed_at == later
        assert len(moved.status_history) == 7

    def test_reopen_clears_run_timestamps(self, task: Task) -> None:
        failed = task.model_copy(
            update={"status": TaskStatus.FAILED, "started_at": NOW, "completed_at": NOW}
        )

        reopened = transition(failed, TaskStatus.PENDING, now=NOW)

        assert reopened.started_at is None
        assert reopened.completed_at is None
