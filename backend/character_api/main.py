"""
Character API - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles the connection pool, middleware, exception
       handlers and routers; run() serves the module-level app with uvicorn.
Who:   uvicorn (`uvicorn character_api.main:app`), the `character-api`
       console script, and the test suite (create_app(pool=...)).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────────┐                  │
    │  │  Request ID  │→│  Access Log  │                  │
    │  └──────────────┘ └──────────────┘                  │
    │                                                     │
    │  Routes:                                            │
    │  ┌─────────┐ ┌─────┐ ┌───┐ ┌─────────┐ ┌──────────┐ │
    │  │ /health │ │ /db │ │ / │ │ /random │ │ /{id}    │ │
    │  └─────────┘ └─────┘ └───┘ └─────────┘ └──────────┘ │
    │                                                     │
    │  app.state.pool: ConnectionPool                     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. One diagnostic connection to the store, logged either way
    3. Begin serving, whether or not the store answered

    Shutdown:
    1. Dispose the connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from character_api import __version__
from character_api.config import Settings, settings as default_settings
from character_api.database import ConnectionPool
from character_api.exceptions import CharacterAPIError
from character_api.middleware.logging import AccessLogMiddleware
from character_api.middleware.request_id import RequestIDMiddleware, request_id_var
from character_api.routes import characters, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # AccessLogMiddleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

async def check_database(pool: ConnectionPool) -> bool:
    """
    Startup diagnostic: open one connection and run SELECT 1.

    Never raises. Returns True when the store answered.
    """
    try:
        await pool.ping()
    except CharacterAPIError as e:
        logger.error("❌ Database connection failed: %s", e.message)
        return False
    except Exception as e:
        logger.error("❌ Database connection failed: %s", e)
        return False
    logger.info("✅ Database connected (%s)", pool.engine.url.render_as_string(hide_password=True))
    return True


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    pool: ConnectionPool = app.state.pool

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Character API %s starting up...", __version__)

    # The service starts listening even if the store is down
    await check_database(pool)

    logger.info("Server ready at http://%s:%d", config.host, config.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Character API shutting down...")
    await pool.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

    Handler hierarchy:
        CharacterAPIError (DatabaseConnectionError, QueryError,
                           EmptyTableError, ...)  → 500 {"error": message}
        Exception (fallback)                      → 500 generic message

    Responses never contain stack traces or exception context; both are
    logged server-side.
    """

    @app.exception_handler(CharacterAPIError)
    async def handle_application_error(request: Request, exc: CharacterAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, exc.code, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "code": exc.code,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "An unexpected error occurred.",
                "code": "internal_server_error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    pool: Optional[ConnectionPool] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded settings.
        pool:     Connection pool to serve from; built from settings when
                  omitted. Building it does not open a connection.

    Returns: Fully configured FastAPI instance.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Character API",
        description="Read-only access to character records, plus health and database diagnostics.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.pool = pool or ConnectionPool.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → AccessLog → route
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # characters last: /{character_id} matches any single segment
    app.include_router(health.router)
    app.include_router(characters.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the application on HOST:PORT."""
    uvicorn.run(
        "character_api.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
