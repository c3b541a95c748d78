"""Task executors.

``StdioExecutor`` feeds each test case on stdin and compares stdout.
``SuiteExecutor`` drops hidden test files next to the submission and
trusts the exit status of a test command. Both open one sandbox session per
submission and never raise for task-level failures.
"""

import logging
from dataclasses import dataclass

from godge.core.config import Settings, get_settings
from godge.sandbox.base import ExecResult, SandboxError, SandboxSession
from godge.tasks.base import Outcome, Submission
from godge.tasks.languages import Language, get_languages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IOCase:
    stdin: str
    expected_stdout: str


@dataclass(frozen=True)
class HiddenTests:
    files: dict[str, str]
    command: tuple[str, ...]


def _normalize(output: str) -> str:
    return "\n".join(line.rstrip() for line in output.strip().splitlines())


def _tail(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) > limit:
        return "..." + text[-limit:]
    return text


def _run_failure(res: ExecResult, limit: int) -> Outcome | None:
    if res.output_exceeded:
        return Outcome.failure("output limit exceeded")
    if res.timed_out:
        return Outcome.failure("time limit exceeded")
    if res.killed:
        return Outcome.failure("killed: time or memory limit exceeded")
    if res.exit_code != 0:
        msg = f"exited with status {res.exit_code}"
        details = _tail(res.stderr or res.stdout, limit)
        return Outcome.failure(f"{msg}: {details}" if details else msg)
    return None


def _compile(box: SandboxSession, lang: Language, settings: Settings) -> Outcome | None:
    if lang.compile is None:
        return None
    res = box.exec(lang.compile, time_limit=settings.COMPILE_TIME_LIMIT_S)
    if res.output_exceeded:
        return Outcome.failure("compilation failed: output limit exceeded")
    if res.timed_out:
        return Outcome.failure("compilation timed out")
    if res.killed:
        return Outcome.failure("compilation killed: time or memory limit exceeded")
    if res.exit_code != 0:
        details = _tail(res.stderr or res.stdout, settings.OUTPUT_LIMIT_CHARS)
        return Outcome.failure(f"compilation failed: {details}")
    return None


def _resolve(
    submission: Submission, languages: dict[str, Language]
) -> tuple[Language | None, Outcome | None]:
    lang = languages.get(submission.language)
    if lang is None:
        return None, Outcome.failure(f"unsupported language {submission.language}")
    if submission.sandbox is None:
        return None, Outcome.failure("no sandbox bound to submission")
    return lang, None


class StdioExecutor:
    def __init__(
        self,
        cases: list[IOCase],
        languages: dict[str, Language] | None = None,
        settings: Settings | None = None,
    ):
        self.cases = cases
        self.settings = settings or get_settings()
        self.languages = languages or get_languages(self.settings)

    def execute(self, submission: Submission) -> Outcome:
        lang, failed = _resolve(submission, self.languages)
        if failed:
            return failed
        files = {**submission.files, lang.source_file: submission.code}
        for i, case in enumerate(self.cases, 1):
            files[f"input_{i}.txt"] = case.stdin
        try:
            with submission.sandbox.session(lang.image) as box:
                box.put_files(files)
                failed = _compile(box, lang, self.settings)
                if failed:
                    return failed
                for i, case in enumerate(self.cases, 1):
                    failed = self._check(box, lang, i, case)
                    if failed:
                        return failed
        except SandboxError as e:
            logger.warning(
                "Sandbox error for %s: %s",
                submission.task_name,
                e,
                extra={"user": submission.username, "task": submission.task_name},
            )
            return Outcome.failure(f"sandbox error: {e}")
        return Outcome.success()

    def _check(
        self, box: SandboxSession, lang: Language, i: int, case: IOCase
    ) -> Outcome | None:
        limit = self.settings.OUTPUT_LIMIT_CHARS
        res = box.exec(lang.run, stdin_file=f"input_{i}.txt")
        failed = _run_failure(res, limit)
        if failed:
            return Outcome.failure(f"test case {i}: {failed.error}")
        got, want = _normalize(res.stdout), _normalize(case.expected_stdout)
        if got != want:
            return Outcome.failure(
                f"test case {i}: expected {_tail(want, limit)!r}, got {_tail(got, limit)!r}"
            )
        return None


class SuiteExecutor:
    def __init__(
        self,
        suites: dict[str, HiddenTests],
        languages: dict[str, Language] | None = None,
        settings: Settings | None = None,
    ):
        self.suites = suites
        self.settings = settings or get_settings()
        self.languages = languages or get_languages(self.settings)

    def execute(self, submission: Submission) -> Outcome:
        suite = self.suites.get(submission.language)
        if suite is None:
            return Outcome.failure(f"unsupported language {submission.language}")
        lang, failed = _resolve(submission, self.languages)
        if failed:
            return failed
        files = {**submission.files, lang.source_file: submission.code, **suite.files}
        try:
            with submission.sandbox.session(lang.image) as box:
                box.put_files(files)
                res = box.exec(suite.command)
        except SandboxError as e:
            logger.warning(
                "Sandbox error for %s: %s",
                submission.task_name,
                e,
                extra={"user": submission.username, "task": submission.task_name},
            )
            return Outcome.failure(f"sandbox error: {e}")
        failed = _run_failure(res, self.settings.OUTPUT_LIMIT_CHARS)
        if failed:
            return Outcome.failure(f"tests failed: {failed.error}")
        return Outcome.success()
