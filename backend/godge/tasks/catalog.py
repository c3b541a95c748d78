"""Built-in exercises registered at startup."""

from godge.core.config import Settings, get_settings
from godge.tasks.base import Task
from godge.tasks.executors import HiddenTests, IOCase, StdioExecutor, SuiteExecutor
from godge.tasks.languages import get_languages

PY_REVERSE_TESTS = """\
from main import reverse

assert reverse("") == ""
assert reverse("a") == "a"
assert reverse("godge") == "egdog"
assert reverse("racecar") == "racecar"
print("ok")
"""

JS_REVERSE_TESTS = """\
const assert = require("assert");
const { reverse } = require("./main.js");

assert.strictEqual(reverse(""), "");
assert.strictEqual(reverse("a"), "a");
assert.strictEqual(reverse("godge"), "egdog");
assert.strictEqual(reverse("racecar"), "racecar");
console.log("ok");
"""


def _fizzbuzz(n: int) -> str:
    out = []
    for i in range(1, n + 1):
        if i % 15 == 0:
            out.append("FizzBuzz")
        elif i % 3 == 0:
            out.append("Fizz")
        elif i % 5 == 0:
            out.append("Buzz")
        else:
            out.append(str(i))
    return "\n".join(out) + "\n"


def default_tasks(settings: Settings | None = None) -> list[Task]:
    settings = settings or get_settings()
    languages = get_languages(settings)

    def stdio(cases):
        return StdioExecutor(cases, languages=languages, settings=settings)

    return [
        Task(
            name="hello-world",
            description='Print "Hello, World!" to standard output.',
            executor=stdio([IOCase(stdin="", expected_stdout="Hello, World!\n")]),
        ),
        Task(
            name="sum",
            description="Read two integers from standard input and print their sum.",
            executor=stdio(
                [
                    IOCase(stdin="2 3\n", expected_stdout="5\n"),
                    IOCase(stdin="-7 7\n", expected_stdout="0\n"),
                    IOCase(stdin="1000000000 1000000000\n", expected_stdout="2000000000\n"),
                ]
            ),
        ),
        Task(
            name="fizzbuzz",
            description=(
                "Read n and print the numbers 1..n, replacing multiples of 3 with "
                "Fizz, of 5 with Buzz and of both with FizzBuzz."
            ),
            executor=stdio(
                [
                    IOCase(stdin="5\n", expected_stdout=_fizzbuzz(5)),
                    IOCase(stdin="15\n", expected_stdout=_fizzbuzz(15)),
                ]
            ),
        ),
        Task(
            name="reverse-string",
            description=(
                "Export a function reverse(s) returning s reversed "
                "(python: def reverse in main.py, javascript: module.exports.reverse)."
            ),
            executor=SuiteExecutor(
                {
                    "python": HiddenTests(
                        files={"test_main.py": PY_REVERSE_TESTS},
                        command=("python", "test_main.py"),
                    ),
                    "javascript": HiddenTests(
                        files={"test_main.js": JS_REVERSE_TESTS},
                        command=("node", "test_main.js"),
                    ),
                },
                languages=languages,
                settings=settings,
            ),
        ),
    ]
