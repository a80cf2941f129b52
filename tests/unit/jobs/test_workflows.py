"""Unit tests for timer-triggered workflows.

Tests workflow logic, idempotency, and error handling.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from governor.dispatch.models import BatchResult, TaskResult
from governor.jobs.workflows import (
    ProcessQueueInput,
    ProcessScheduledMilestonesWorkflow,
    ProcessTaskQueueWorkflow,
    ScheduledMilestonesInput,
)
from governor.schedule.milestones import Milestone, MilestoneRunResult, MilestoneScheduler
from governor.schedule.models import RecurrenceSpec, RecurrenceType
from governor.schedule.stores.inmemory import InMemoryMilestoneStore
from governor.tasks.models import Task
from governor.tasks.stores.inmemory import InMemoryTaskStore

NOW = datetime(2025, 3, 5, 10, 0, tzinfo=UTC)


@pytest.fixture
def mock_dispatcher():
    """Create a mock dispatcher."""
    dispatcher = AsyncMock()
    dispatcher.process_queue = AsyncMock(
        return_value=BatchResult.from_results(
            [
                TaskResult(task_id="t1", success=True),
                TaskResult(task_id="t2", success=False, error="agent not available"),
            ]
        )
    )
    return dispatcher


@pytest.fixture
def mock_scheduler():
    """Create a mock milestone scheduler."""
    scheduler = AsyncMock()
    scheduler.run_due = AsyncMock(
        return_value=[
            MilestoneRunResult(milestone_id="m1", tasks_created=3),
            MilestoneRunResult(milestone_id="m2", tasks_created=1),
        ]
    )
    return scheduler


class TestProcessTaskQueueWorkflow:
    """Tests for ProcessTaskQueueWorkflow."""

    def test_workflow_name(self):
        assert ProcessTaskQueueWorkflow.WORKFLOW_NAME == "process-task-queue"

    def test_workflow_cron_schedule(self):
        """Test workflow runs every minute."""
        assert ProcessTaskQueueWorkflow.CRON_SCHEDULE == "* * * * *"

    @pytest.mark.asyncio
    async def test_run_reports_batch(self, mock_dispatcher):
        workflow = ProcessTaskQueueWorkflow(mock_dispatcher)

        result = await workflow.run(ProcessQueueInput(limit=5))

        assert result.success is True
        assert result.processed == 2
        assert result.succeeded == 1
        assert result.failed == 1
        assert result.error is None
        mock_dispatcher.process_queue.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_default_limit_passed_as_none(self, mock_dispatcher):
        await ProcessTaskQueueWorkflow(mock_dispatcher).run(ProcessQueueInput())

        mock_dispatcher.process_queue.assert_called_once_with(None)

    @pytest.mark.asyncio
    async def test_run_handles_dispatcher_exception(self, mock_dispatcher):
        """Test workflow handles store exceptions gracefully."""
        mock_dispatcher.process_queue.side_effect = Exception("DB error")
        workflow = ProcessTaskQueueWorkflow(mock_dispatcher)

        result = await workflow.run(ProcessQueueInput())

        assert result.success is False
        assert result.processed == 0
        assert "DB error" in result.error


class TestProcessScheduledMilestonesWorkflow:
    """Tests for ProcessScheduledMilestonesWorkflow."""

    def test_workflow_name(self):
        assert (
            ProcessScheduledMilestonesWorkflow.WORKFLOW_NAME == "process-scheduled-milestones"
        )

    def test_workflow_cron_schedule(self):
        """Test workflow has hourly cron schedule."""
        assert ProcessScheduledMilestonesWorkflow.CRON_SCHEDULE == "0 * * * *"

    @pytest.mark.asyncio
    async def test_run_sums_created_tasks(self, mock_scheduler):
        workflow = ProcessScheduledMilestonesWorkflow(mock_scheduler)

        result = await workflow.run(ScheduledMilestonesInput(now=NOW))

        assert result.success is True
        assert result.milestones_run == 2
        assert result.tasks_created == 4
        mock_scheduler.run_due.assert_called_once_with(NOW)

    @pytest.mark.asyncio
    async def test_partial_failure_is_unsuccessful(self, mock_scheduler):
        mock_scheduler.run_due.return_value = [
            MilestoneRunResult(milestone_id="m1", tasks_created=2),
            MilestoneRunResult(milestone_id="m2", error="DB error"),
        ]

        result = await ProcessScheduledMilestonesWorkflow(mock_scheduler).run(
            ScheduledMilestonesInput(now=NOW)
        )

        assert result.success is False
        assert result.milestones_run == 2
        assert result.tasks_created == 2

    @pytest.mark.asyncio
    async def test_run_handles_scheduler_exception(self, mock_scheduler):
        mock_scheduler.run_due.side_effect = Exception("DB error")

        result = await ProcessScheduledMilestonesWorkflow(mock_scheduler).run(
            ScheduledMilestonesInput()
        )

        assert result.success is False
        assert result.milestones_run == 0
        assert result.error == "DB error"

    @pytest.mark.asyncio
    async def test_idempotency_multiple_runs(self):
        """A second trigger in the same hour finds nothing due."""
        milestone_store = InMemoryMilestoneStore()
        task_store = InMemoryTaskStore()
        milestone = Milestone(
            organization_id="org-1",
            schedule=RecurrenceSpec(type=RecurrenceType.DAILY, hour=9),
            is_schedule_active=True,
            next_run_at=datetime(2025, 3, 5, 9, 0, tzinfo=UTC),
        )
        await milestone_store.save(milestone)
        milestone_store.add_template_task(milestone.id, Task(organization_id="org-1"))
        workflow = ProcessScheduledMilestonesWorkflow(
            MilestoneScheduler(milestone_store, task_store)
        )
        input_data = ScheduledMilestonesInput(now=NOW)

        result1 = await workflow.run(input_data)
        result2 = await workflow.run(input_data)

        assert result1.tasks_created == 1
        assert result2.success is True
        assert result2.milestones_run == 0
        assert len(task_store._tasks) == 1
