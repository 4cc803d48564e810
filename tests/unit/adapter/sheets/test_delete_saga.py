import pytest

from src.adapter.sheets.saga import DeleteSaga
from src.app.errors import CascadeError, NetworkError


@pytest.mark.asyncio
class TestDeleteSaga:

    async def test_runs_steps_in_order(self):
        # Arrange
        calls = []

        async def step(name, result):
            calls.append(name)
            return result

        saga = DeleteSaga("delete_project")
        saga.add_step("delete_time_entries", lambda: step("delete_time_entries", 3))
        saga.add_step("delete_tasks", lambda: step("delete_tasks", 2))
        saga.add_step("delete_project", lambda: step("delete_project", True))

        # Act
        results = await saga.run()

        # Assert
        assert calls == ["delete_time_entries", "delete_tasks", "delete_project"]
        assert results == [3, 2, True]

    async def test_failure_reports_completed_and_failed_steps(self):
        # Arrange
        async def ok():
            return 1

        async def boom():
            raise NetworkError("connection reset", "delete_Tasks")

        async def never():
            raise AssertionError("must not run")

        saga = DeleteSaga("delete_project")
        saga.add_step("delete_time_entries", ok)
        saga.add_step("delete_tasks", boom)
        saga.add_step("delete_project", never)

        # Act
        with pytest.raises(CascadeError) as exc_info:
            await saga.run()

        # Assert
        error = exc_info.value
        assert error.completed_steps == ["delete_time_entries"]
        assert error.failed_step == "delete_tasks"
        assert isinstance(error.cause, NetworkError)
        assert error.code == "CASCADE_INCOMPLETE"
