from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    APP_NAME: str = "Godge Judge"
    API_PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    # Docker daemon; empty means docker.from_env()
    DOCKER_URL: str = ""
    DOCKER_TIMEOUT_S: int = 60

    # Sandbox defaults
    RUN_TIME_LIMIT_S: int = 5
    COMPILE_TIME_LIMIT_S: int = 30
    RUN_MEMORY: str = "256m"
    RUN_CPUS: str = "0.5"
    RUN_PIDS_LIMIT: int = 64
    SANDBOX_WORKDIR: str = "/work"
    OUTPUT_LIMIT_CHARS: int = 2000
    # hard cap on what one command may write back to this process
    OUTPUT_LIMIT_BYTES: int = 1 << 20

    # Language images
    PYTHON_IMAGE: str = "python:3.12-slim"
    NODE_IMAGE: str = "node:20-slim"
    GO_IMAGE: str = "golang:1.22"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
