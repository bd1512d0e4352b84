"""
Character API - Health & Diagnostic Routes
===========================================

What:  GET /health (liveness), GET /db (store connectivity check) and
       GET / (HTML status page).
Who:   Called by container health checks, monitoring, and humans in a browser.

Status semantics:
    /health  process answers → 200, no database access at all
    /db      SELECT 1+1 succeeds → 200 {result: 2}; fails → 500 {error}
    /        always 200; the page says whether the store answered
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse

from character_api.database import ConnectionPool, get_pool
from character_api.exceptions import CharacterAPIError
from character_api.schemas.character import (
    DatabaseFailureResponse,
    DatabaseStatusResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()

_PAGE = """
<div style="display:flex;justify-content:center;align-items:center;min-height:100vh;text-align:center;flex-direction:column;">
  {body}
</div>
"""

_LINKS = (
    '<p><a href="/health">/health</a> | <a href="/db">/db</a> | '
    '<a href="/random">/random</a> | <a href="/1">/1</a></p>'
)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service liveness check",
)
async def health_check() -> HealthResponse:
    """Always 200 with uptime and server time; independent of the store."""
    return HealthResponse(
        status="OK",
        message="App is working",
        uptime=max(0.0, time.time() - _start_time),
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/db",
    response_model=DatabaseStatusResponse,
    responses={500: {"description": "Database unreachable", "model": DatabaseFailureResponse}},
    summary="Database connectivity check",
)
async def database_check(pool: ConnectionPool = Depends(get_pool)):
    """
    Runs SELECT 1+1 AS result against the store.

    Returns:
        200 DatabaseStatusResponse on success,
        500 DatabaseFailureResponse when the store cannot be reached or the
        statement fails.
    """
    try:
        row = await pool.ping("SELECT 1+1 AS result")
    except CharacterAPIError as e:
        logger.warning("Database check failed: %s", e.message)
        return JSONResponse(
            status_code=500,
            content=DatabaseFailureResponse(error=e.message).model_dump(),
        )

    return DatabaseStatusResponse(result=int(row["result"]))


@router.get("/", response_class=HTMLResponse, summary="HTML status page")
async def index(pool: ConnectionPool = Depends(get_pool)) -> HTMLResponse:
    """
    Human-facing status page.

    Any failure while probing the store renders the degraded page instead
    of an error response.
    """
    try:
        row = await pool.ping("SELECT 1 AS db_check")
    except Exception as e:
        logger.warning("Status page: database unreachable: %s", str(e))
        body = "<h1>❌ App Running but DB not connected</h1>"
        return HTMLResponse(_PAGE.format(body=body))

    connected = row is not None and row.get("db_check") == 1
    db_status = "Connected ✅" if connected else "Not Connected ❌"
    body = (
        "<h1>✅ Application Running</h1>\n"
        "  <p>Character API is running fine.</p>\n"
        f"  <p>Database status: {db_status}</p>\n"
        f"  {_LINKS}"
    )
    return HTMLResponse(_PAGE.format(body=body))
