"""
Character API - HTTP Endpoint Tests
====================================

What:  End-to-end tests for every route through the ASGI app.
How:   HTTPX AsyncClient + ASGITransport; store is in-memory SQLite with
       characters 1..5 (or an unreachable store for the failure paths).

What we test:
    ✅ /health is always 200, even with the store down
    ✅ /db reports result 2, or 500 with an error message
    ✅ / renders HTML in both the healthy and degraded cases
    ✅ /{id} lookups by leading integer, not-found → null, random fallback
       when the segment has no leading integer or it is zero
    ✅ /random never returns the highest id
    ✅ Store failures render as 500 {"error": ...} without internals
"""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from character_api.main import create_app
from character_api.routes.characters import parse_character_id
from character_api.services.character_service import (
    CharacterService,
    get_character_service,
)

from conftest import _client_for


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_ok(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["message"]
        assert body["uptime"] >= 0
        datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))

    @pytest.mark.asyncio
    async def test_health_ok_when_store_down(self, offline_client):
        response = await offline_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"


class TestDatabaseCheck:

    @pytest.mark.asyncio
    async def test_db_connected(self, client):
        response = await client.get("/db")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["result"] == 2

    @pytest.mark.asyncio
    async def test_db_unreachable(self, offline_client):
        response = await offline_client.get("/db")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "ERROR"
        assert body["message"] == "Database connection failed"
        assert body["error"]
        assert "Traceback" not in body["error"]


class TestIndexPage:

    @pytest.mark.asyncio
    async def test_index_connected(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Application Running" in response.text
        assert "Connected ✅" in response.text
        assert 'href="/random"' in response.text

    @pytest.mark.asyncio
    async def test_index_degraded_when_store_down(self, offline_client):
        response = await offline_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "DB not connected" in response.text


class TestCharacterById:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("character_id", [1, 2, 3, 4, 5])
    async def test_existing_id(self, client, character_id):
        response = await client.get(f"/{character_id}")

        assert response.status_code == 200
        assert response.json()["id"] == character_id

    @pytest.mark.asyncio
    async def test_row_passed_through_verbatim(self, client):
        response = await client.get("/3")

        assert response.json() == {
            "id": 3,
            "name": "Summer Smith",
            "species": "Human",
            "status": "Alive",
        }

    @pytest.mark.asyncio
    async def test_missing_id_is_null_not_error(self, client):
        response = await client.get("/99")

        assert response.status_code == 200
        assert response.text == "null"
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_negative_id_is_looked_up(self, client):
        response = await client.get("/-1")

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("segment", ["abc", "0", ".5", "x3"])
    async def test_unparseable_or_zero_falls_back_to_random(self, client, segment):
        response = await client.get(f"/{segment}")

        assert response.status_code == 200
        assert response.json()["id"] in {1, 2, 3, 4}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("segment, expected_id", [("2abc", 2), ("4.9", 4), ("1_000", 1)])
    async def test_leading_integer_is_used(self, client, segment, expected_id):
        response = await client.get(f"/{segment}")

        assert response.status_code == 200
        assert response.json()["id"] == expected_id

    @pytest.mark.asyncio
    async def test_id_beyond_64_bits_is_null(self, client):
        response = await client.get(
            "/99999999999999999999999", headers={"X-Request-ID": "big-1"}
        )

        assert response.status_code == 200
        assert response.json() is None
        assert response.headers["X-Request-ID"] == "big-1"

    @pytest.mark.asyncio
    async def test_fallback_matches_random_endpoint(self, seeded_pool):
        """With the same draw, /abc and /random return the same record."""
        app = create_app(pool=seeded_pool)
        app.dependency_overrides[get_character_service] = (
            lambda: CharacterService(seeded_pool, rng=lambda: 0.5)
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            fallback = await c.get("/abc")
            random_response = await c.get("/random")

        assert fallback.status_code == random_response.status_code == 200
        assert fallback.json() == random_response.json()
        assert fallback.json()["id"] == 3

    @pytest.mark.asyncio
    async def test_store_down_returns_500_error(self, offline_client):
        response = await offline_client.get("/3")

        assert response.status_code == 500
        body = response.json()
        assert body["error"].startswith("Database connection failed")
        assert body["code"] == "connection_error"

    @pytest.mark.asyncio
    async def test_missing_table_returns_500_error(self, tableless_pool):
        async with _client_for(tableless_pool) as c:
            response = await c.get("/1")

        assert response.status_code == 500
        assert response.json()["code"] == "query_error"
        assert response.json()["error"]


class TestRandomCharacter:

    @pytest.mark.asyncio
    async def test_random_returns_record(self, client):
        response = await client.get("/random")

        assert response.status_code == 200
        assert response.json()["id"] in {1, 2, 3, 4}

    @pytest.mark.asyncio
    async def test_random_never_returns_highest_id(self, client):
        seen = set()
        for _ in range(100):
            response = await client.get("/random")
            assert response.status_code == 200
            seen.add(response.json()["id"])

        assert seen <= {1, 2, 3, 4}
        assert 5 not in seen

    @pytest.mark.asyncio
    async def test_random_on_empty_table_returns_500(self, empty_pool):
        async with _client_for(empty_pool) as c:
            response = await c.get("/random")

        assert response.status_code == 500
        assert response.json()["code"] == "empty_table"
        assert response.json()["error"]

    @pytest.mark.asyncio
    async def test_random_store_down_returns_500(self, offline_client):
        response = await offline_client.get("/random")

        assert response.status_code == 500
        assert response.json()["error"]


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_request_id_header(self, client):
        response = await client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, client):
        response = await client.get("/3", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, offline_client):
        response = await offline_client.get("/random", headers={"X-Request-ID": "err-1"})

        assert response.json()["request_id"] == "err-1"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3),
        (" 7 ", 7),
        ("+4", 4),
        ("-2", -2),
        ("42", 42),
        ("0", None),
        ("00", None),
        ("-0", None),
        ("abc", None),
        ("2abc", 2),
        ("4.9", 4),
        ("1_000", 1),
        ("-3x", -3),
        ("0abc", None),
        (".5", None),
        ("x3", None),
        ("", None),
    ],
)
def test_parse_character_id(raw, expected):
    assert parse_character_id(raw) == expected
