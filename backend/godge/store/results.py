import threading

from godge.store.enums import ResultStatus
from godge.tasks.base import Outcome


class ResultsStore:
    """Last known status per (user, task). A later record overwrites."""

    def __init__(self):
        self._lock = threading.Lock()
        self._results: dict[str, dict[str, ResultStatus]] = {}

    def record(self, user: str, task: str, outcome: Outcome) -> ResultStatus:
        status = ResultStatus.succeeded if outcome.passed else ResultStatus.failed
        with self._lock:
            self._results.setdefault(user, {})[task] = status
        return status

    def read(self, user: str, task: str) -> ResultStatus | None:
        with self._lock:
            return self._results.get(user, {}).get(task)

    def snapshot(self) -> dict[str, dict[str, ResultStatus]]:
        with self._lock:
            return {u: dict(tasks) for u, tasks in self._results.items()}
