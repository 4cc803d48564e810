from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from src.adapter.sheets.schema import PROJECTS, TASKS, TIME_ENTRIES
from src.app.errors import CascadeError, ValidationError
from src.domain.project import ProjectCreate, ProjectUpdate
from src.domain.task import TaskCreate, TaskUpdate
from src.domain.time_entry import TimeEntryCreate, TimeEntryUpdate
from tests.fakes import http_error

START = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def project(store):
    return await store.projects.create(
        ProjectCreate(name="Website", client_id="client-1", hourly_rate=Decimal("80"))
    )


@pytest_asyncio.fixture
async def task(store, project):
    return await store.tasks.create(TaskCreate(project_id=project.id, title="Build pages"))


@pytest.mark.asyncio
class TestTimeEntries:
    """Time entries keep their task's tracked hours current"""

    async def test_hours_are_recomputed_from_entries(self, store, task):
        # Arrange / Act
        await store.time_entries.create(
            TimeEntryCreate(task_id=task.id, start_time=START, end_time=START + timedelta(hours=1))
        )
        await store.time_entries.create(
            TimeEntryCreate(task_id=task.id, start_time=START, duration=1800, is_billable=False)
        )

        # Assert
        refreshed = await store.tasks.get(task.id)
        assert refreshed.actual_hours == 1.5
        assert refreshed.billable_hours == 1.0

    async def test_entry_inherits_project_of_task(self, store, task, project):
        entry = await store.time_entries.create(TimeEntryCreate(task_id=task.id, start_time=START, duration=600))

        assert entry.project_id == project.id
        assert [e.id for e in await store.time_entries.list_by_project(project.id)] == [entry.id]
        assert [e.id for e in await store.time_entries.list_by_task(task.id)] == [entry.id]

    async def test_entry_for_missing_task_is_rejected(self, store):
        with pytest.raises(ValidationError):
            await store.time_entries.create(TimeEntryCreate(task_id="missing", start_time=START, duration=60))

    async def test_span_update_recomputes_duration_and_hours(self, store, task):
        entry = await store.time_entries.create(
            TimeEntryCreate(task_id=task.id, start_time=START, end_time=START + timedelta(hours=1))
        )

        updated = await store.time_entries.update(
            entry.id, TimeEntryUpdate(end_time=START + timedelta(hours=2))
        )

        assert updated.duration == 7200
        assert (await store.tasks.get(task.id)).actual_hours == 2.0

    async def test_delete_entry_recomputes_hours(self, store, task):
        keep = await store.time_entries.create(TimeEntryCreate(task_id=task.id, start_time=START, duration=3600))
        drop = await store.time_entries.create(TimeEntryCreate(task_id=task.id, start_time=START, duration=3600))

        assert await store.time_entries.delete(drop.id) is True

        assert (await store.tasks.get(task.id)).actual_hours == 1.0
        assert [e.id for e in await store.time_entries.list()] == [keep.id]
        assert await store.time_entries.delete(drop.id) is False


@pytest.mark.asyncio
class TestTaskAndProjectCascades:
    """Parent deletes remove children first and report partial progress"""

    async def test_task_delete_removes_its_time_entries(self, store, fake_client, task, project):
        # Arrange
        other = await store.tasks.create(TaskCreate(project_id=project.id, title="Write copy"))
        await store.time_entries.create(TimeEntryCreate(task_id=task.id, start_time=START, duration=60))
        kept = await store.time_entries.create(TimeEntryCreate(task_id=other.id, start_time=START, duration=60))

        # Act
        assert await store.tasks.delete(task.id) is True

        # Assert
        assert [row[0] for row in fake_client.data_rows(TASKS)] == [other.id]
        assert [row[0] for row in fake_client.data_rows(TIME_ENTRIES)] == [kept.id]

    async def test_project_delete_cascades_to_tasks_and_entries(self, store, fake_client, project, task):
        # Arrange
        second = await store.tasks.create(TaskCreate(project_id=project.id, title="Deploy"))
        await store.time_entries.create(TimeEntryCreate(task_id=task.id, start_time=START, duration=60))
        await store.time_entries.create(TimeEntryCreate(task_id=second.id, start_time=START, duration=60))
        other_project = await store.projects.create(ProjectCreate(name="Other", client_id="client-2"))
        other_task = await store.tasks.create(TaskCreate(project_id=other_project.id, title="Keep me"))

        # Act
        assert await store.projects.delete(project.id) is True

        # Assert
        assert [row[0] for row in fake_client.data_rows(PROJECTS)] == [other_project.id]
        assert [row[0] for row in fake_client.data_rows(TASKS)] == [other_task.id]
        assert fake_client.data_rows(TIME_ENTRIES) == []
        assert await store.tasks.list_by_project(project.id) == []

    async def test_project_without_children_deletes_cleanly(self, store, fake_client, project):
        assert await store.projects.delete(project.id) is True

        assert fake_client.data_rows(PROJECTS) == []
        assert await store.projects.delete(project.id) is False

    async def test_project_delete_failure_is_reported_as_cascade_error(self, store, fake_client, project, task):
        # Arrange: deleting the task rows fails after the time entries step ran
        await store.time_entries.create(TimeEntryCreate(task_id=task.id, start_time=START, duration=60))
        original = fake_client.batch_update
        calls = []

        async def flaky(requests):
            calls.append(requests)
            if len(calls) == 2:
                raise http_error(403, "The caller does not have permission")
            return await original(requests)

        fake_client.batch_update = flaky

        # Act
        with pytest.raises(CascadeError) as exc_info:
            await store.projects.delete(project.id)

        # Assert
        error = exc_info.value
        assert error.completed_steps == [f"delete_time_entries:{task.id}"]
        assert error.failed_step == "delete_tasks"
        assert await store.projects.get(project.id) is not None


@pytest.mark.asyncio
class TestProjectAndTaskUpdates:

    async def test_partial_updates_touch_only_given_fields(self, store, project, task, now):
        renamed = await store.projects.update(project.id, ProjectUpdate(name="Website v2"))
        done = await store.tasks.update(task.id, TaskUpdate(tags=["launch"]))

        assert renamed.name == "Website v2"
        assert renamed.hourly_rate == Decimal("80")
        assert renamed.updated_at == now
        assert done.tags == ["launch"]
        assert done.title == "Build pages"
        assert [p.id for p in await store.projects.list_by_client("client-1")] == [project.id]

    async def test_updates_of_missing_rows_return_none(self, store):
        assert await store.projects.update("missing", ProjectUpdate(name="x")) is None
        assert await store.tasks.update("missing", TaskUpdate(title="x")) is None
        assert await store.tasks.delete("missing") is False
