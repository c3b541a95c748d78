from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import CodeExecutor
from godge.core.errors import BadRequestError, NotFoundError
from godge.store.enums import ResultStatus
from godge.store.results import ResultsStore
from godge.store.users import UserStore
from godge.tasks.base import Outcome, Task
from godge.tasks.registry import TaskRegistry


class TestResultsStore:
    def test_unset_reads_none(self):
        store = ResultsStore()
        assert store.read("alice", "task1") is None

    def test_record_overwrites(self):
        store = ResultsStore()
        assert store.record("alice", "task1", Outcome.success()) == ResultStatus.succeeded
        store.record("alice", "task1", Outcome.failure("nope"))
        assert store.read("alice", "task1") == ResultStatus.failed
        assert store.read("alice", "task2") is None
        assert store.read("bob", "task1") is None

    def test_status_values(self):
        assert ResultStatus.succeeded.value == "Succeeded"
        assert ResultStatus.failed.value == "Failed"

    def test_concurrent_writers(self):
        store = ResultsStore()

        def write(i):
            store.record(f"user{i % 10}", f"task{i % 7}", Outcome.success())

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(write, range(500)))
        snap = store.snapshot()
        assert len(snap) == 10
        assert all(len(tasks) == 7 for tasks in snap.values())


class TestUserStore:
    def test_register_and_authenticate(self):
        users = UserStore()
        users.register("alice", "pw1")
        assert "alice" in users
        assert users.authenticate("alice", "pw1")
        assert not users.authenticate("alice", "pw2")

    def test_password_is_not_stored_in_clear(self):
        users = UserStore()
        users.register("alice", "pw1")
        assert users._users["alice"] != "pw1"

    def test_empty_username_rejected(self):
        with pytest.raises(BadRequestError):
            UserStore().register("", "pw")

    def test_duplicate_rejected_and_first_password_kept(self):
        users = UserStore()
        users.register("alice", "pw1")
        with pytest.raises(BadRequestError):
            users.register("alice", "pw2")
        assert users.authenticate("alice", "pw1")
        assert not users.authenticate("alice", "pw2")

    def test_unknown_user(self):
        assert not UserStore().authenticate("ghost", "")

    def test_usernames_sorted(self):
        users = UserStore()
        for name in ["carol", "alice", "bob"]:
            users.register(name, "pw")
        assert users.usernames() == ["alice", "bob", "carol"]


class TestTaskRegistry:
    def test_lookup(self):
        task = Task(name="task1", executor=CodeExecutor())
        registry = TaskRegistry([task])
        assert registry.lookup("task1") is task
        assert "task1" in registry
        assert len(registry) == 1

    def test_missing_task(self):
        registry = TaskRegistry()
        assert registry.get("nope") is None
        with pytest.raises(NotFoundError, match="task nope not found"):
            registry.lookup("nope")

    def test_reregistration_overwrites(self):
        first = Task(name="task1", executor=CodeExecutor(), description="old")
        second = Task(name="task1", executor=CodeExecutor(), description="new")
        registry = TaskRegistry([first, second])
        assert registry.lookup("task1") is second
        assert len(registry) == 1

    def test_listing_is_sorted(self):
        registry = TaskRegistry(
            [Task(name=n, executor=CodeExecutor()) for n in ["sum", "fizzbuzz", "hello"]]
        )
        assert registry.names() == ["fizzbuzz", "hello", "sum"]
        assert [t.name for t in registry.all()] == ["fizzbuzz", "hello", "sum"]
