"""
Character API - Pydantic Response Schemas
==========================================

What:  Pydantic models for the fixed-shape responses (health, diagnostics,
       errors). They also feed the OpenAPI docs.

Character records themselves have no schema: their columns are owned by
the store and are returned verbatim as JSON objects.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Liveness report returned by GET /health.
    Note:  Never touches the database, so it stays 200 when the store is down.
    """
    status: str = Field(default="OK", description="Always 'OK' when the process answers")
    message: str = Field(default="App is working", description="Human-readable status")
    uptime: float = Field(ge=0, description="Seconds since the process started")
    timestamp: datetime = Field(description="Server time (UTC ISO 8601)")


class DatabaseStatusResponse(BaseModel):
    """Successful connectivity check returned by GET /db."""
    status: str = Field(default="OK")
    message: str = Field(default="Database connected")
    result: int = Field(description="Value of SELECT 1+1 (expected: 2)")


class DatabaseFailureResponse(BaseModel):
    """Failed connectivity check returned by GET /db with HTTP 500."""
    status: str = Field(default="ERROR")
    message: str = Field(default="Database connection failed")
    error: str = Field(description="Why the check failed")


class ErrorResponse(BaseModel):
    """
    What:  Error body for the character endpoints.

    Example:
        {
            "error": "Database connection failed: (2003, \"Can't connect ...\")",
            "code": "connection_error",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error kind")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
