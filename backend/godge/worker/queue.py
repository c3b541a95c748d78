"""Single-consumer submission pipeline.

Callers ``await submit(...)`` from any number of request handlers; one worker
task takes submissions off an unbounded FIFO queue and runs them one at a
time on a one-thread pool, so the sandbox is never driven by two
submissions at once. The worker resolves a per-submission future with the
outcome and moves on, whatever the outcome was.

There is no cancellation: a caller that goes away does not retract its
submission. Execution time is bounded by the sandbox time limits only.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from godge.tasks.base import Outcome, Submission
from godge.tasks.registry import TaskRegistry

logger = logging.getLogger(__name__)

STOPPED = "submission queue stopped"


@dataclass
class _Pending:
    submission: Submission
    reply: asyncio.Future


class SubmissionQueue:
    def __init__(self, registry: TaskRegistry):
        self.registry = registry
        self.processed = 0
        self.busy = False
        self._queue: asyncio.Queue | None = None
        self._worker: asyncio.Task | None = None
        self._pool: ThreadPoolExecutor | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> None:
        if self.running:
            return
        self._queue = asyncio.Queue()
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="godge-sandbox")
        self._worker = asyncio.create_task(self._run(), name="submission-worker")
        logger.info("Submission worker started")

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        while not self._queue.empty():
            item = self._queue.get_nowait()
            _reply(item, Outcome.failure(STOPPED))
        self._pool.shutdown(wait=False, cancel_futures=True)
        self._worker = None
        logger.info("Submission worker stopped after %d submissions", self.processed)

    async def submit(self, submission: Submission) -> Outcome:
        if not self.running:
            raise RuntimeError("submission queue is not running")
        reply = asyncio.get_running_loop().create_future()
        await self._queue.put(_Pending(submission, reply))
        # the worker owns the submission now; a cancelled caller must not cancel it
        return await asyncio.shield(reply)

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            self.busy = True
            name = item.submission.task_name
            try:
                outcome = await self._execute(item.submission)
            except asyncio.CancelledError:
                _reply(item, Outcome.failure(STOPPED))
                raise
            except Exception as e:
                logger.exception("Worker failed on task %s", name, extra={"task": name})
                outcome = Outcome.failure(f"task {name} failed: {e}")
            finally:
                self.busy = False
                self._queue.task_done()
            self.processed += 1
            _reply(item, outcome)

    async def _execute(self, sub: Submission) -> Outcome:
        task = self.registry.get(sub.task_name)
        if task is None:
            return Outcome.failure(f"task {sub.task_name} not found")
        loop = asyncio.get_running_loop()
        ctx = {"task": sub.task_name, "user": sub.username}
        try:
            outcome = await loop.run_in_executor(self._pool, task.executor.execute, sub)
        except asyncio.CancelledError:
            raise
        # SystemExit from the pool thread lands here too and must not end the worker
        except BaseException as e:
            logger.exception("Executor for task %s raised", sub.task_name, extra=ctx)
            return Outcome.failure(f"task {sub.task_name} failed: {e}")
        if not isinstance(outcome, Outcome):
            logger.error(
                "Executor for task %s returned %r", sub.task_name, outcome, extra=ctx
            )
            return Outcome.failure(
                f"task {sub.task_name} failed: executor returned {type(outcome).__name__}"
            )
        if not outcome.passed:
            return Outcome.failure(f"task {sub.task_name} failed: {outcome.error}")
        return outcome


def _reply(item: _Pending, outcome: Outcome) -> None:
    if not item.reply.done():
        item.reply.set_result(outcome)
