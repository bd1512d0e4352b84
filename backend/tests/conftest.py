"""
Character API - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   A real in-memory SQLite store (aiosqlite + StaticPool) stands in for
       MySQL; the app is driven through HTTPX's ASGITransport.

Fixture Hierarchy (all function-scoped):
    ├── engine:             empty in-memory SQLite engine
    ├── seeded_pool:        ConnectionPool over `characters` with ids 1..5
    ├── empty_pool:         ConnectionPool over an empty `characters` table
    ├── single_row_pool:    ConnectionPool over a one-row `characters` table
    ├── tableless_pool:     ConnectionPool whose store has no `characters` table
    ├── unreachable_pool:   ConnectionPool whose store cannot be opened
    ├── client:             AsyncClient against an app serving seeded_pool
    └── offline_client:     AsyncClient against an app serving unreachable_pool
"""

import os

# Test settings BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_HOST"] = "db.invalid"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from character_api.database import ConnectionPool
from character_api.main import create_app


CHARACTERS = [
    {"id": 1, "name": "Rick Sanchez", "species": "Human", "status": "Alive"},
    {"id": 2, "name": "Morty Smith", "species": "Human", "status": "Alive"},
    {"id": 3, "name": "Summer Smith", "species": "Human", "status": "Alive"},
    {"id": 4, "name": "Birdperson", "species": "Bird-Person", "status": "Dead"},
    {"id": 5, "name": "Squanchy", "species": "Cat-Person", "status": "Unknown"},
]


async def _create_table(engine, rows):
    async with engine.begin() as conn:
        await conn.execute(
            text(
                "CREATE TABLE characters ("
                " id INTEGER PRIMARY KEY,"
                " name TEXT NOT NULL,"
                " species TEXT,"
                " status TEXT)"
            )
        )
        if rows:
            await conn.execute(
                text(
                    "INSERT INTO characters (id, name, species, status) "
                    "VALUES (:id, :name, :species, :status)"
                ),
                rows,
            )


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite; StaticPool keeps one connection so the data persists."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_pool(engine):
    await _create_table(engine, CHARACTERS)
    return ConnectionPool(engine)


@pytest_asyncio.fixture
async def empty_pool(engine):
    await _create_table(engine, [])
    return ConnectionPool(engine)


@pytest_asyncio.fixture
async def single_row_pool(engine):
    await _create_table(engine, CHARACTERS[:1])
    return ConnectionPool(engine)


@pytest.fixture
def tableless_pool(engine):
    return ConnectionPool(engine)


@pytest_asyncio.fixture
async def unreachable_pool(tmp_path):
    """SQLite cannot create a database file inside a missing directory."""
    missing = tmp_path / "missing" / "characters.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{missing}")
    yield ConnectionPool(engine)
    await engine.dispose()


def _client_for(pool):
    app = create_app(pool=pool)
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(seeded_pool):
    """
    HTTPX AsyncClient talking to an app backed by characters 1..5.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with _client_for(seeded_pool) as c:
        yield c


@pytest_asyncio.fixture
async def offline_client(unreachable_pool):
    """HTTPX AsyncClient talking to an app whose store is down."""
    async with _client_for(unreachable_pool) as c:
        yield c
