from __future__ import annotations

import logging

from fastapi import FastAPI

from outage_watch.api.routes import router as api_router
from outage_watch.config import Settings, load_settings
from outage_watch.messaging.base import MessagingTransport
from outage_watch.observability.metrics import Metrics
from outage_watch.providers.base import StatusProvider
from outage_watch.providers.registry import build_provider
from outage_watch.scheduler.worker import CheckWorker
from outage_watch.storage.repository import StateRepository


class NullWorker:
    last_run_status = "disabled"
    last_run_started_at = None
    last_run_finished_at = None
    last_error = None

    def is_running(self) -> bool:
        return False


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_worker(
    settings: Settings,
    *,
    repository: StateRepository,
    metrics: Metrics,
    provider: StatusProvider | None = None,
    transport: MessagingTransport | None = None,
) -> CheckWorker:
    return CheckWorker(
        settings=settings,
        provider=provider or build_provider(settings),
        repository=repository,
        metrics=metrics,
        transport=transport,
    )


def create_app(
    settings: Settings | None = None,
    *,
    provider: StatusProvider | None = None,
    transport: MessagingTransport | None = None,
) -> FastAPI:
    app_settings = settings or load_settings()
    configure_logging(app_settings.log_level)

    repository = StateRepository(app_settings.database_path)
    repository.init_db()

    metrics = Metrics()

    worker = (
        build_worker(
            app_settings,
            repository=repository,
            metrics=metrics,
            provider=provider,
            transport=transport,
        )
        if app_settings.enable_scheduler
        else None
    )

    app = FastAPI(title="outage-watch", version="0.1.0")
    app.state.settings = app_settings
    app.state.repository = repository
    app.state.metrics = metrics
    app.state.worker = worker if worker is not None else NullWorker()

    @app.on_event("startup")
    async def _on_startup() -> None:
        if worker is not None:
            await worker.start()

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        if worker is not None:
            await worker.stop()

    app.include_router(api_router)
    return app
