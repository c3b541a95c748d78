from dataclasses import dataclass, field
from typing import Protocol

from godge.sandbox.base import Sandbox


@dataclass(frozen=True)
class Outcome:
    passed: bool
    error: str = ""

    @classmethod
    def success(cls) -> "Outcome":
        return cls(passed=True)

    @classmethod
    def failure(cls, reason: str) -> "Outcome":
        return cls(passed=False, error=reason)


@dataclass
class Submission:
    username: str
    task_name: str
    language: str
    code: str
    files: dict[str, str] = field(default_factory=dict)
    # shared sandbox client, bound by the coordinator before enqueueing
    sandbox: Sandbox | None = None


class Executor(Protocol):
    def execute(self, submission: Submission) -> Outcome:
        """Run the submission in a fresh sandbox and grade it.

        Implementations tear the sandbox down before returning and report
        every task-level problem as a failed ``Outcome`` instead of raising.
        """
        ...


@dataclass(frozen=True)
class Task:
    name: str
    executor: Executor
    description: str = ""
