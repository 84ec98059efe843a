from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from vacation.clients import ClientRegistry
from vacation.config import get_settings
from vacation.database import init_db
from vacation.tasks.scheduler import SchedulerManager
from vacation.utils.logging import LOGGER


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = getattr(app.state, "settings", None) or get_settings()
    LOGGER.info(f"Application startup - {settings.app_name}")

    init_db()

    # create_app() may already have enabled the clients (tests pass a transport)
    clients = getattr(app.state, "http_clients", None)
    if clients is None:
        clients = ClientRegistry.enable(settings)
        app.state.http_clients = clients

    scheduler_manager = None
    if settings.scheduler_enabled:
        scheduler_manager = SchedulerManager(clients, settings)
        scheduler_manager.start()
        LOGGER.info(f"Scheduler STARTED (cron={settings.scheduler.daily_job_cron})")

    try:
        yield
    finally:
        LOGGER.info("Application shutdown")
        if scheduler_manager:
            scheduler_manager.shutdown()
        clients.close()
