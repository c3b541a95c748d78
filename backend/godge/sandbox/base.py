"""Capability interface to the container runtime.

Executors only ever see ``Sandbox`` and the ``SandboxSession`` it yields; the
docker SDK stays behind ``godge.sandbox.docker_sandbox``.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol, Sequence

# exit status of coreutils `timeout` when the limit hits
TIMEOUT_EXIT_CODE = 124
# SIGKILL: the -k grace of `timeout` ran out, or the memory cgroup killed it
KILLED_EXIT_CODE = 137


class SandboxError(Exception):
    """The sandbox could not be provisioned, driven or torn down."""


@dataclass
class ExecResult:
    exit_code: int | None
    stdout: str
    stderr: str
    # output was cut off at the session's byte cap; exit_code is then None
    output_exceeded: bool = False

    @property
    def timed_out(self) -> bool:
        return self.exit_code == TIMEOUT_EXIT_CODE

    @property
    def killed(self) -> bool:
        return self.exit_code == KILLED_EXIT_CODE


class SandboxSession(Protocol):
    def put_files(self, files: dict[str, str]) -> None: ...

    def exec(
        self,
        command: Sequence[str],
        stdin_file: str | None = None,
        time_limit: int | None = None,
    ) -> ExecResult: ...


class Sandbox(Protocol):
    def ping(self) -> None: ...

    def session(self, image: str) -> AbstractContextManager[SandboxSession]: ...
