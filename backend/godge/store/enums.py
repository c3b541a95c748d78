import enum


class ResultStatus(str, enum.Enum):
    succeeded = "Succeeded"
    failed = "Failed"
