"""
Character API - Character Service (Record Accessor)
====================================================

What:  Reads character records: by id, or one picked at random.
How:   Issues parameterized statements through the injected ConnectionPool.
Who:   Called by the character route handlers.

Random Selection:
    total = SELECT COUNT(*) AS total FROM characters
    id    = 1 + floor(random() * (total - 1))

    The pick is uniform over [1, total - 1]: the highest id is never chosen.
    This matches the behavior clients of the service already observe, and
    it assumes ids are (roughly) dense from 1 to total. Fewer than two rows
    leaves the range empty and raises EmptyTableError.

Consistency:
    fetch_random() runs two independent statements (count, then lookup).
    Rows written between them may make the lookup come back empty.
"""

import logging
import math
import random
from typing import Any, Callable, Dict, Optional

from fastapi import Depends
from sqlalchemy import text

from character_api.database import ConnectionPool, get_pool
from character_api.exceptions import EmptyTableError

logger = logging.getLogger(__name__)

SELECT_BY_ID = text("SELECT * FROM characters WHERE id = :id")
COUNT_ALL = text("SELECT COUNT(*) AS total FROM characters")

# Signed BIGINT bounds; no row can carry an id outside them
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


class CharacterService:
    """
    Record accessor over the `characters` table.

    Args:
        pool: Connection pool used for every statement.
        rng:  Zero-argument callable returning a float in [0, 1).
              Defaults to random.random.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        rng: Callable[[], float] = random.random,
    ):
        self.pool = pool
        self.rng = rng

    async def fetch_by_id(self, character_id: int) -> Optional[Dict[str, Any]]:
        """
        Fetch a single character.

        Returns:
            The row as a dict (all columns, untouched), or None when no row
            has this id. A missing row is not an error.
            Ids outside the signed 64-bit range are not queried.

        Raises:
            DatabaseConnectionError, QueryError
        """
        if not MIN_ID <= character_id <= MAX_ID:
            return None
        return await self.pool.fetch_one(SELECT_BY_ID, {"id": character_id})

    async def count(self) -> int:
        total = await self.pool.fetch_scalar(COUNT_ALL)
        return int(total or 0)

    async def random_id(self) -> int:
        """
        Pick an id uniformly from [1, total - 1].

        Raises:
            EmptyTableError: the table has 0 or 1 rows.
            DatabaseConnectionError, QueryError
        """
        total = await self.count()
        if total < 2:
            raise EmptyTableError(total=total)
        return 1 + math.floor(self.rng() * (total - 1))

    async def fetch_random(self) -> Optional[Dict[str, Any]]:
        character_id = await self.random_id()
        logger.debug("Random character id selected: %d", character_id)
        return await self.fetch_by_id(character_id)


def get_character_service(pool: ConnectionPool = Depends(get_pool)) -> CharacterService:
    """FastAPI dependency building a CharacterService around the app's pool."""
    return CharacterService(pool)
