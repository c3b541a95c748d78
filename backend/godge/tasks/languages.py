from dataclasses import dataclass

from godge.core.config import Settings, get_settings


@dataclass(frozen=True)
class Language:
    name: str
    image: str
    source_file: str
    run: tuple[str, ...]
    compile: tuple[str, ...] | None = None


def get_languages(settings: Settings | None = None) -> dict[str, Language]:
    settings = settings or get_settings()
    langs = [
        Language(
            name="python",
            image=settings.PYTHON_IMAGE,
            source_file="main.py",
            run=("python", "main.py"),
        ),
        Language(
            name="javascript",
            image=settings.NODE_IMAGE,
            source_file="main.js",
            run=("node", "main.js"),
        ),
        Language(
            name="go",
            image=settings.GO_IMAGE,
            source_file="main.go",
            compile=("go", "build", "-o", "main", "main.go"),
            run=("./main",),
        ),
    ]
    return {lang.name: lang for lang in langs}
