from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from sqlalchemy import text
from sqlalchemy.engine import create_engine
from sqlalchemy.engine.url import make_url

from benefit_card.core.config import LogContext, get_settings
from benefit_card.core.error_handlers import register_error_handlers
from benefit_card.core.logging_config import get_logger, configure_logging
from benefit_card.db.base import Base
from benefit_card.db.session import engine
from benefit_card.routers import cards, consumers, purchases

settings = get_settings()
logger = get_logger(__name__)


def get_alembic_config() -> Config:
    root_path = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(root_path / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(root_path / "alembic"))
    # configparser interpolation would choke on '%' in URL-encoded passwords
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    redacted_url = make_url(settings.database_url).render_as_string(hide_password=True)
    logger.debug(
        "Alembic configuration prepared",
        extra={"details": {"event": "alembic_config", "extra": {"database_url": redacted_url}}},
    )
    return alembic_cfg


def sanitize_identifier(identifier: str) -> str:
    return identifier.replace('"', '""')


def create_database_if_not_exists() -> None:
    url = make_url(settings.database_url)
    if not url.get_backend_name().startswith("postgresql"):
        return
    database_name = url.database
    if not database_name:
        logger.warning(
            "Database name missing in URL",
            extra={"details": {"event": "database_setup", "extra": {"url": url.render_as_string(hide_password=True)}}},
        )
        return
    admin_url = url.set(database="postgres", drivername=url.drivername.replace("+asyncpg", ""))
    engine_admin = create_engine(admin_url)
    try:
        with engine_admin.connect() as connection:
            result = connection.execute(
                text("SELECT 1 FROM pg_database WHERE datname=:name"), {"name": database_name}
            ).scalar()
            if not result:
                connection.execution_options(isolation_level="AUTOCOMMIT").execute(
                    text(f"CREATE DATABASE \"{sanitize_identifier(database_name)}\"")
                )
                logger.info(
                    "Database created",
                    extra={"details": {"event": "database_setup", "extra": {"database": database_name}}},
                )
    finally:
        engine_admin.dispose()


async def reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("Database reset executed", extra={"details": {"event": "database_reset"}})


async def apply_migrations() -> None:
    alembic_cfg = get_alembic_config()
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")
    logger.info("Migrations applied", extra={"details": {"event": "database_migrate"}})


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(
        "Startup sequence initiated",
        extra={"details": {"event": "startup", "extra": {"environment": settings.environment, "stage": "init"}}},
    )
    await asyncio.to_thread(create_database_if_not_exists)
    if settings.reset_db_on_start:
        await reset_database()
    if settings.migrate_on_start:
        await apply_migrations()
    # uvicorn may have replaced handlers after import
    configure_logging()
    logger.info(
        "Startup completed",
        extra={"details": {"event": "startup", "extra": {"environment": settings.environment}}},
    )
    yield
    await engine.dispose()
    logger.info("Shutdown completed", extra={"details": {"event": "shutdown"}})


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
register_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable):
    start_time = time.perf_counter()
    request_info = {"method": request.method, "path": request.url.path}

    logger.info(
        "HTTP request started",
        extra={
            "details": LogContext(
                event="request_start",
                extra={
                    **request_info,
                    "user_agent": request.headers.get("user-agent"),
                    "client_ip": request.client.host if request.client else None,
                },
            ).model_dump(exclude_none=True)
        },
    )

    try:
        response = await call_next(request)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Unhandled exception in request",
            extra={
                "details": LogContext(
                    event="request_error",
                    status_code=500,
                    duration_ms=int((time.perf_counter() - start_time) * 1000),
                    extra={**request_info, "error": str(exc), "error_type": type(exc).__name__},
                ).model_dump(exclude_none=True)
            },
        )
        raise

    details = LogContext(
        event="request_completed",
        status_code=response.status_code,
        duration_ms=int((time.perf_counter() - start_time) * 1000),
        extra=request_info,
    ).model_dump(exclude_none=True)
    if response.status_code >= 500:
        logger.error("HTTP request completed", extra={"details": details})
    elif response.status_code >= 400:
        logger.warning("HTTP request completed", extra={"details": details})
    else:
        logger.info("HTTP request completed", extra={"details": details})
    return response


@app.get("/health", tags=["System"])
async def healthcheck():
    logger.info("Health check", extra={"details": {"event": "health"}})
    return {"status": "ok"}


app.include_router(consumers.router)
app.include_router(cards.router)
app.include_router(purchases.router)
