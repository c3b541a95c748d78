from pathlib import PurePosixPath

from pydantic import BaseModel, Field, field_validator


class SubmissionIn(BaseModel):
    task_name: str
    language: str = Field(default="python")
    code: str
    files: dict[str, str] = Field(default_factory=dict)

    @field_validator("files")
    @classmethod
    def relative_paths(cls, files: dict[str, str]) -> dict[str, str]:
        for path in files:
            p = PurePosixPath(path)
            if not path or p.is_absolute() or ".." in p.parts:
                raise ValueError(f"invalid file path {path!r}")
        return files


class SubmissionOut(BaseModel):
    passed: bool
    error: str = ""
