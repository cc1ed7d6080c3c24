"""
tasktrack FastAPI application.

Wires the todo router onto an app whose lifespan owns the async engine:
the table is created on startup (there are no migrations) and the pool is
disposed on shutdown.
"""

import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.ext.asyncio import AsyncEngine

from .database import check_pg_health, get_async_pg_engine, get_env_bool_setting, get_env_int_setting
from .models import TodoBase
from .api.routers.todos_router import router as todos_router

logger = logging.getLogger(__name__)

SERVICE_NAME = "tasktrack-api"
SERVICE_VERSION = "1.0.0"

RUN_DDL_ON_STARTUP = get_env_bool_setting("RUN_DDL_ON_STARTUP", True)


async def init_db(engine: AsyncEngine):
    """Create the todo table if it does not exist yet."""
    if not RUN_DDL_ON_STARTUP:
        return
    async with engine.begin() as conn:
        await conn.run_sync(TodoBase.metadata.create_all)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting tasktrack API application...")

    engine = get_async_pg_engine()
    app.state.db_engine = engine
    await init_db(engine)
    logger.info("Database initialized successfully")

    yield

    logger.info("Shutting down tasktrack API application...")
    eng: AsyncEngine = app.state.db_engine
    await eng.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="tasktrack API",
    description="Personal task tracking backed by a single relational table",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(todos_router, tags=["Todos"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@app.get("/readyz")
async def ready_check():
    engine = getattr(app.state, "db_engine", None) or get_async_pg_engine()
    if await check_pg_health(engine):
        return {"status": "ready", "deps": {"db": "ok"}}
    return {"status": "not_ready", "deps": {"db": "error"}}


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/")
async def root():
    return {"message": "Welcome to tasktrack API", "version": SERVICE_VERSION, "docs": "/docs", "health": "/health"}


def run():
    """Console entry point: configure logging and serve with uvicorn."""
    from .logging_setup import setup_logging
    setup_logging()

    import uvicorn
    host = os.getenv("HOST", "0.0.0.0")
    port = get_env_int_setting("PORT", 5000)
    logger.info(f"Server starting on {host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=None,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    run()
