import threading
import time
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient

from godge.main import create_app
from godge.sandbox.base import ExecResult
from godge.tasks.base import Outcome, Task


class FakeSession:
    def __init__(self, image):
        self.image = image
        self.files = {}
        self.commands = []

    def put_files(self, files):
        self.files.update(files)

    def exec(self, command, stdin_file=None, time_limit=None):
        self.commands.append((tuple(command), stdin_file, time_limit))
        return self.respond(self, tuple(command), stdin_file)

    def respond(self, box, command, stdin_file):
        return ExecResult(0, "", "")


class FakeSandbox:
    """Sandbox double that counts how many sessions are open at once."""

    def __init__(self, respond=None, hold=0.0):
        self._lock = threading.Lock()
        self._respond = respond
        self.hold = hold
        self.active = 0
        self.max_active = 0
        self.opened = 0
        self.closed = 0
        self.sessions = []

    def ping(self):
        pass

    @contextmanager
    def session(self, image):
        with self._lock:
            self.active += 1
            self.opened += 1
            self.max_active = max(self.max_active, self.active)
        box = FakeSession(image)
        if self._respond:
            box.respond = self._respond
        self.sessions.append(box)
        try:
            if self.hold:
                time.sleep(self.hold)
            yield box
        finally:
            with self._lock:
                self.active -= 1
                self.closed += 1


class CodeExecutor:
    """Passes when the submitted code is "OK"."""

    def __init__(self):
        self.calls = []

    def execute(self, submission):
        self.calls.append((submission.username, submission.code))
        with submission.sandbox.session("fake:latest") as box:
            box.put_files({"main": submission.code})
        if submission.code == "OK":
            return Outcome.success()
        return Outcome.failure("wrong answer")


@pytest.fixture
def sandbox():
    return FakeSandbox(hold=0.001)


@pytest.fixture
def executor():
    return CodeExecutor()


@pytest.fixture
def app(sandbox, executor):
    tasks = [
        Task(name="task2", executor=executor),
        Task(name="task1", executor=executor, description="first task"),
    ]
    return create_app(sandbox=sandbox, tasks=tasks)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
