"""
Character API - Character Route Handlers
=========================================

What:  GET /random and GET /{character_id}.
How:   Resolves the path segment to an id, delegates to CharacterService,
       and returns the row verbatim as JSON.

Id resolution for GET /{character_id}:
    1. Parse: the leading integer of the segment (leading whitespace, an
       optional sign, then ASCII digits). Trailing text is ignored, so "2abc"
       is 2 and "4.9" is 4. No leading digits ("abc", ".5") is a parse failure.
    2. Validate: a parsed value of 0 counts as "no id supplied".
    3. No id → fall back to a random id (same behavior as GET /random).

Not found is not an error: the body is JSON null with HTTP 200.
Store failures propagate as CharacterAPIError and are rendered as
500 {"error": ...} by the handlers registered in main.py.

This router must be included after every fixed-path router, since
/{character_id} matches any single path segment.
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from character_api.schemas.character import ErrorResponse
from character_api.services.character_service import (
    CharacterService,
    get_character_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Characters"])

_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")

_RESPONSES = {
    200: {"description": "Character record, or null when no row has the id"},
    500: {"description": "Store unreachable or query failed", "model": ErrorResponse},
}


def parse_character_id(raw: str) -> Optional[int]:
    """
    Explicit parse-then-validate of a path segment.

    Returns:
        The leading integer of the segment, or None when the segment does not
        start with one or the integer is zero.
    """
    match = _LEADING_INTEGER.match(raw)
    if match is None:
        return None
    value = int(match.group(1))
    if value == 0:
        return None
    return value


def _render(character) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(character))


@router.get("/random", responses=_RESPONSES, summary="Get a random character")
async def get_random_character(
    service: CharacterService = Depends(get_character_service),
) -> JSONResponse:
    character = await service.fetch_random()
    return _render(character)


@router.get("/{character_id}", responses=_RESPONSES, summary="Get a character by id")
async def get_character(
    character_id: str,
    service: CharacterService = Depends(get_character_service),
) -> JSONResponse:
    """
    Fetch a character by id, falling back to a random id when the segment
    does not resolve to one.
    """
    resolved = parse_character_id(character_id)
    if resolved is None:
        logger.debug("Segment %r is not an id; picking a random character", character_id)
        resolved = await service.random_id()

    character = await service.fetch_by_id(resolved)
    return _render(character)
