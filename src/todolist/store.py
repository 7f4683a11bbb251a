"""In-memory task store.

Holds two pieces of state: the id counter and a mapping from owner to that
owner's tasks in insertion order. Every operation takes the caller identity
explicitly and only ever looks at that caller's list.

Thread-safety:
- a single lock guards the counter and the whole mapping
- each operation holds it from start to finish
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from todolist.models import Principal, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """Per-owner task lists plus a process-wide id counter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = 0
        self._tasks: dict[Principal, list[Task]] = {}

    def initialize(self) -> None:
        """Reset the counter to 0 and drop every owner's tasks."""
        with self._lock:
            self._counter = 0
            self._tasks.clear()
        logger.info("TaskStore initialized")

    @property
    def next_id(self) -> int:
        """The id the next created task will receive."""
        with self._lock:
            return self._counter

    def count_tasks(self, caller: Principal | None = None) -> int:
        """Count tasks for one caller, or for everyone when ``caller`` is None."""
        with self._lock:
            if caller is None:
                return sum(len(tasks) for tasks in self._tasks.values())
            return len(self._tasks.get(caller, []))

    def add_task(
        self,
        caller: Principal,
        description: str,
        due_date: int | None = None,
        important: bool = False,
    ) -> Task:
        """Create a task owned by ``caller`` and append it to their list."""
        with self._lock:
            task = Task(
                id=self._counter,
                description=description,
                completed=False,
                important=important,
                due_date=due_date,
                owner=caller,
            )
            self._counter += 1
            self._tasks.setdefault(caller, []).append(task)

        logger.debug("Task added id=%s owner=%s important=%s", task.id, caller, important)
        return task

    def get_task(self, caller: Principal, task_id: int) -> Task | None:
        """Return the caller's task with ``task_id``, or None."""
        with self._lock:
            for task in self._tasks.get(caller, []):
                if task.id == task_id:
                    return task
        return None

    def toggle_task_completion(self, caller: Principal, task_id: int) -> bool:
        """Flip ``completed`` on the caller's task. False if there is no such task."""
        with self._lock:
            updated = self._replace(caller, task_id, Task.with_completion_toggled)
        if updated is None:
            return False
        logger.debug("Task id=%s owner=%s completed=%s", task_id, caller, updated.completed)
        return True

    def toggle_task_importance(self, caller: Principal, task_id: int) -> bool:
        """Flip ``important`` on the caller's task. False if there is no such task."""
        with self._lock:
            updated = self._replace(caller, task_id, Task.with_importance_toggled)
        if updated is None:
            return False
        logger.debug("Task id=%s owner=%s important=%s", task_id, caller, updated.important)
        return True

    def get_tasks(self, caller: Principal) -> list[Task]:
        """All of the caller's tasks in insertion order."""
        with self._lock:
            return list(self._tasks.get(caller, []))

    def get_important_tasks(self, caller: Principal) -> list[Task]:
        """The caller's important tasks in insertion order."""
        with self._lock:
            return [task for task in self._tasks.get(caller, []) if task.important]

    def get_completed_tasks(self, caller: Principal) -> list[Task]:
        """The caller's completed tasks in insertion order."""
        with self._lock:
            return [task for task in self._tasks.get(caller, []) if task.completed]

    def delete_task(self, caller: Principal, task_id: int) -> bool:
        """Remove the caller's task with ``task_id``. The counter is not rolled back."""
        with self._lock:
            tasks = self._tasks.get(caller)
            if not tasks:
                return False
            for index, task in enumerate(tasks):
                if task.id == task_id:
                    del tasks[index]
                    break
            else:
                return False

        logger.debug("Task deleted id=%s owner=%s", task_id, caller)
        return True

    # ---- helpers (lock must be held) ----

    def _replace(
        self, caller: Principal, task_id: int, change: Callable[[Task], Task]
    ) -> Task | None:
        tasks = self._tasks.get(caller)
        if not tasks:
            return None
        for index, task in enumerate(tasks):
            if task.id == task_id:
                tasks[index] = change(task)
                return tasks[index]
        return None
