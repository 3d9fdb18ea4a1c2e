from typing import Callable

from fastapi import FastAPI
from loguru import logger

from registration_service.api.v1.dependencies import notification_dispatcher
from registration_service.core.config import CREATE_TABLES_ON_STARTUP
from registration_service.core.db import Base
from registration_service.core.db.session import engine


async def create_tables() -> None:
    # Importing the models registers their tables on Base.metadata
    import registration_service.api.v1.models.registration  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are in place")


def create_start_app_handler(app: FastAPI) -> Callable:
    async def start_app() -> None:
        if CREATE_TABLES_ON_STARTUP:
            await create_tables()
        start = getattr(notification_dispatcher, "start", None)
        if start is not None:
            await start()

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    async def stop_app() -> None:
        stop = getattr(notification_dispatcher, "stop", None)
        if stop is not None:
            await stop()
        await engine.dispose()

    return stop_app
