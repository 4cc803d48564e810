"""Cascade Delete Saga

Parent deletes touch several tables with no transaction to wrap them. The
saga runs the steps in order and, when one fails, reports exactly which
steps already completed. Nothing is rolled back; every step deletes by id,
so re-running the whole saga after a failure is safe.
"""

import logging
from typing import Any, Awaitable, Callable, List, Tuple

from src.app.errors import CascadeError
from src.adapter.sheets.errors import classify_error

logger = logging.getLogger(__name__)

Step = Callable[[], Awaitable[Any]]


class DeleteSaga:
    """
    Ordered list of delete steps

    Usage:
        saga = DeleteSaga("delete_project")
        saga.add_step("delete_time_entries", delete_entries)
        saga.add_step("delete_tasks", delete_tasks)
        saga.add_step("delete_project", delete_project_row)
        await saga.run()
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.steps: List[Tuple[str, Step]] = []
        self.completed: List[str] = []

    def add_step(self, name: str, action: Step) -> "DeleteSaga":
        self.steps.append((name, action))
        return self

    async def run(self) -> List[Any]:
        """
        Execute every step in order

        Returns:
            Each step's result, in order

        Raises:
            CascadeError: A step failed; ``completed_steps`` lists what ran
        """
        results = []
        for name, action in self.steps:
            try:
                results.append(await action())
            except Exception as exc:
                cause = classify_error(exc, name)
                logger.error(
                    f"{self.operation} stopped at {name} after {len(self.completed)} "
                    f"completed step(s): {cause.message}"
                )
                raise CascadeError(
                    f"{self.operation} failed at step {name}: {cause.message}",
                    operation=self.operation,
                    completed_steps=list(self.completed),
                    failed_step=name,
                    cause=cause,
                ) from exc
            self.completed.append(name)
        return results
