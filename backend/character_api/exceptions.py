"""
Character API - Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the failure modes of the service.
How:   Each exception carries a human-readable message and an optional
       context dict. Global exception handlers (registered in main.py)
       turn them into JSON error responses; the context is logged only.
Who:   Raised by the connection pool and the character service.

Exception Hierarchy:
    CharacterAPIError (base)          → 500
    ├── DatabaseError                 → 500
    │   ├── DatabaseConnectionError   → 500 (store unreachable)
    │   └── QueryError                → 500 (statement failed)
    └── EmptyTableError               → 500 (random pick on 0/1 rows)

A missing record is NOT an exception: lookups return None and the
router renders it as a JSON null with HTTP 200.
"""

from typing import Any, Dict, Optional


class CharacterAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Human-readable description (safe to return in API responses)
        context:  Additional debug info (logged, NOT returned to the client)
        code:     Machine-readable error kind used in JSON error bodies
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DatabaseError(CharacterAPIError):
    """Raised when a database operation fails."""

    code = "database_error"

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseConnectionError(DatabaseError):
    """
    Raised when the pool cannot reach the store.

    When:    Connection refused, DNS failure, bad credentials, unknown
             database, or a connection dropped in the middle of a statement.
    Policy:  Surfaced to the caller as-is; never retried automatically.
    """

    code = "connection_error"

    def __init__(
        self,
        reason: str = "connection refused",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=f"Database connection failed: {reason}", context=context)
        self.reason = reason


class QueryError(DatabaseError):
    """Raised when a statement is malformed or fails during execution."""

    code = "query_error"

    def __init__(
        self,
        reason: str = "statement failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=f"Database query failed: {reason}", context=context)
        self.reason = reason


class EmptyTableError(CharacterAPIError):
    """
    Raised when a random character is requested but the table holds fewer
    than two rows, so the sampling range [1, total - 1] is empty.
    """

    code = "empty_table"

    def __init__(
        self,
        total: int = 0,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["total"] = total
        super().__init__(
            message=f"Cannot pick a random character from a table with {total} row(s)",
            context=ctx,
        )
        self.total = total
