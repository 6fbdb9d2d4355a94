"""Leaderboard endpoints.

POST /api/leaderboard  - submit a score (stored forever)
GET  /api/leaderboard  - best score per player, ranked
"""

from __future__ import annotations

import logging
import math
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from dependencies import get_leaderboard_store
from services.leaderboard_store import (
    DEFAULT_LIMIT,
    InvalidScoreEntryError,
    LeaderboardStore,
    LeaderboardWriteError,
    MAX_LIMIT,
    clamp_limit,
)

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])
logger = logging.getLogger(__name__)


def parse_limit(raw: str | None) -> int:
    """Lenient ``?limit=``: missing, non-numeric or 0 means the default."""
    try:
        value = float(raw) if raw is not None else 0.0
    except ValueError:
        return DEFAULT_LIMIT
    if math.isnan(value) or value == 0:
        return DEFAULT_LIMIT
    if math.isinf(value):
        return MAX_LIMIT if value > 0 else 1
    return clamp_limit(int(value))


@router.post("")
async def submit_score(
    payload: Any = Body(default=None),
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    try:
        await store.append(payload)
    except InvalidScoreEntryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LeaderboardWriteError as e:
        logger.error("[LEADERBOARD-API] Save failed: %s", e)
        raise HTTPException(status_code=500, detail="Error saving leaderboard")
    return {"success": True}


@router.get("")
async def get_leaderboard(
    limit: str | None = None,
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    ranking = await store.query(parse_limit(limit))
    return {
        "count": len(ranking),
        "leaderboard": [entry.model_dump(by_alias=True) for entry in ranking],
    }
