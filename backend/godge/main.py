import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from godge.api.routers import auth as r_auth
from godge.api.routers import scoreboard as r_scoreboard
from godge.api.routers import submit as r_submit
from godge.api.routers import tasks as r_tasks
from godge.core.config import get_settings
from godge.core.errors import register_exception_handlers
from godge.core.logging import setup_logging
from godge.sandbox.base import Sandbox
from godge.sandbox.docker_sandbox import DockerSandbox
from godge.services.coordinator import SubmissionCoordinator
from godge.store.results import ResultsStore
from godge.store.users import UserStore
from godge.tasks.base import Task
from godge.tasks.catalog import default_tasks
from godge.tasks.registry import TaskRegistry
from godge.worker.queue import SubmissionQueue

logger = logging.getLogger(__name__)


def create_app(sandbox: Sandbox | None = None, tasks: list[Task] | None = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        box = sandbox
        if box is None:
            box = DockerSandbox.from_settings(settings)
            box.ping()
            removed = box.cleanup()
            if removed:
                logger.info("Removed %d stale sandbox containers", removed)
        # tasks are registered before the worker accepts anything
        registry = TaskRegistry(default_tasks(settings) if tasks is None else tasks)
        queue = SubmissionQueue(registry)
        app.state.queue = queue
        app.state.coordinator = SubmissionCoordinator(
            registry, queue, ResultsStore(), UserStore(), box
        )
        queue.start()
        logger.info("Serving %d tasks", len(registry))
        yield
        await queue.stop()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]
    )
    register_exception_handlers(app)

    app.include_router(r_auth.router, prefix=settings.API_PREFIX)
    app.include_router(r_submit.router, prefix=settings.API_PREFIX)
    app.include_router(r_tasks.router, prefix=settings.API_PREFIX)
    app.include_router(r_scoreboard.router, prefix=settings.API_PREFIX)

    @app.get(f"{settings.API_PREFIX}/health")
    async def health():
        queue: SubmissionQueue = app.state.queue
        return {
            "ok": queue.running,
            "queue": {
                "pending": queue.pending,
                "busy": queue.busy,
                "processed": queue.processed,
            },
        }

    return app


setup_logging(get_settings().LOG_LEVEL)
app = create_app()
