import logging
import threading

from godge.core.errors import NotFoundError
from godge.tasks.base import Task

logger = logging.getLogger(__name__)


class TaskRegistry:
    def __init__(self, tasks: list[Task] | None = None):
        self._lock = threading.Lock()
        self._tasks: dict[str, Task] = {}
        for t in tasks or []:
            self.register(t)

    def register(self, task: Task) -> None:
        with self._lock:
            if task.name in self._tasks:
                logger.info("Task %s re-registered", task.name)
            self._tasks[task.name] = task

    def get(self, name: str) -> Task | None:
        with self._lock:
            return self._tasks.get(name)

    def lookup(self, name: str) -> Task:
        task = self.get(name)
        if task is None:
            raise NotFoundError(f"task {name} not found", task=name)
        return task

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._tasks)

    def all(self) -> list[Task]:
        with self._lock:
            return [self._tasks[n] for n in sorted(self._tasks)]

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
