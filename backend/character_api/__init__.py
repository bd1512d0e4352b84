"""
Character API - Application Package Initializer
================================================

What: Marks the `character_api` directory as a Python package.
Who:  Imported by uvicorn (`character_api.main:app`), pytest, and the
      `character-api` console script.

Architecture Note:
    A thin read-only service over a single `characters` table:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, rendering
    ├─────────────────────────────────────┤
    │     Services (Record Accessor)      │  ← id lookup, random selection
    ├─────────────────────────────────────┤
    │   Database (Connection Pool)        │  ← pooled async connections
    └─────────────────────────────────────┘

    Each layer receives the one below it explicitly (the pool lives on
    `app.state` and reaches services through FastAPI dependencies).
"""

__version__ = "1.0.0"
