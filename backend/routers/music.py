"""Guess scoring endpoints.

POST /api/music/match  - score a guessed song against a mood
POST /api/music/check  - does this song have acoustic features at all?
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from dependencies import get_match_engine
from services.match_engine import InvalidMatchRequestError, MatchEngine, MatchResult

router = APIRouter(prefix="/api/music", tags=["music"])
logger = logging.getLogger(__name__)


class MatchRequest(BaseModel):
    artist: str | None = None
    title: str | None = None
    mood_id: str | None = Field(default=None, alias="moodId")


class CheckRequest(BaseModel):
    artist: str | None = None
    title: str | None = None


@router.post("/match", response_model=MatchResult, response_model_exclude_none=True)
async def match_song(req: MatchRequest, engine: MatchEngine = Depends(get_match_engine)):
    """Score a guess. Falls back to the daily score when no data is found."""
    try:
        return await engine.match(req.artist or "", req.title or "", req.mood_id or "")
    except InvalidMatchRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[MATCH-API] Error processing request")
        raise HTTPException(status_code=500, detail=f"Error processing request: {e}")


@router.post("/check")
async def check_song(req: CheckRequest, engine: MatchEngine = Depends(get_match_engine)):
    if not req.artist or not req.title:
        raise HTTPException(status_code=400, detail="Invalid parameters. Required: artist, title")

    logger.info("[MATCH-API] Checking: %s - %s", req.artist, req.title)
    try:
        found = await engine.find_recording_with_features(req.artist, req.title)
    except Exception as e:
        logger.exception("[MATCH-API] Error checking song")
        raise HTTPException(status_code=500, detail=f"Error checking song: {e}")

    if found is None:
        return {
            "found": False,
            "artist": req.artist,
            "title": req.title,
            "message": "Song not found with acoustic features available on AcousticBrainz",
        }

    recording, features = found
    return {
        "found": True,
        "artist": req.artist,
        "title": req.title,
        "musicbrainzId": recording.id,
        "recordingTitle": recording.title,
        "features": features.model_dump(),
    }
