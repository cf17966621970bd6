from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from pydantic import BaseModel

from core import config, db, logs
from users import router as users_router

logger = logging.getLogger("user_service")


class HealthCheckResponse(BaseModel):
    status: str


def create_app(*, database: db.Database | None = None) -> FastAPI:
    """
    Build the application around one database handle.

    The handle is opened in the lifespan hook, so an unreachable database
    fails startup rather than the first request.
    """
    database = database or db.Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.database.connect()
        try:
            yield
        finally:
            await app.state.database.close()

    app = FastAPI(title="User Service", lifespan=lifespan)
    app.state.database = database

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception:
            logger.exception("request_failed method=%s path=%s", request.method, request.url.path)
            raise
        finally:
            logger.info(
                "request method=%s path=%s status=%s duration_ms=%.1f",
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000,
            )

    app.include_router(users_router.router, tags=["users"])

    @app.get("/")
    async def health_check() -> HealthCheckResponse:
        return HealthCheckResponse(status="ok")

    return app


def run() -> None:
    """Entry point for the `user-service` console script."""
    import uvicorn

    config.load_env_file()
    logs.configure_logging()

    host, port = config.host(), config.port()
    logger.info("starting_server host=%s port=%s", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    run()
