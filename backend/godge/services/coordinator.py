import logging
from dataclasses import dataclass

from godge.core.errors import ServiceUnavailableError
from godge.sandbox.base import Sandbox
from godge.store.results import ResultsStore
from godge.store.users import UserStore
from godge.tasks.base import Outcome, Submission, Task
from godge.tasks.registry import TaskRegistry
from godge.worker.queue import STOPPED, SubmissionQueue

logger = logging.getLogger(__name__)


@dataclass
class Scoreboard:
    tasks: list[str]
    users: list[str]
    # user -> task -> status, "" where the user never submitted
    cells: dict[str, dict[str, str]]


class SubmissionCoordinator:
    """Entry point for submissions; the only writer of the results store."""

    def __init__(
        self,
        registry: TaskRegistry,
        queue: SubmissionQueue,
        results: ResultsStore,
        users: UserStore,
        sandbox: Sandbox,
    ):
        self.registry = registry
        self.queue = queue
        self.results = results
        self.users = users
        self.sandbox = sandbox

    async def submit(
        self,
        username: str,
        task_name: str,
        language: str,
        code: str,
        files: dict[str, str] | None = None,
    ) -> Outcome:
        self.registry.lookup(task_name)
        if not self.queue.running:
            raise ServiceUnavailableError("submission queue is not running")
        sub = Submission(
            username=username,
            task_name=task_name,
            language=language,
            code=code,
            files=dict(files or {}),
            sandbox=self.sandbox,
        )
        outcome = await self.queue.submit(sub)
        if outcome.error == STOPPED:
            raise ServiceUnavailableError(STOPPED)
        status = self.results.record(username, task_name, outcome)
        logger.info(
            "%s submission for %s by %s: %s",
            language,
            task_name,
            username,
            outcome.error or status.value,
            extra={"user": username, "task": task_name, "language": language},
        )
        return outcome

    def register(self, username: str, password: str) -> None:
        self.users.register(username, password)

    def authenticate(self, username: str, password: str) -> bool:
        return self.users.authenticate(username, password)

    def tasks(self) -> list[Task]:
        return self.registry.all()

    def scoreboard(self) -> Scoreboard:
        tasks = self.registry.names()
        users = self.users.usernames()
        cells = {}
        for u in users:
            row = {}
            for t in tasks:
                status = self.results.read(u, t)
                row[t] = status.value if status else ""
            cells[u] = row
        return Scoreboard(tasks=tasks, users=users, cells=cells)
