"""Diagnostics: query AcousticBrainz directly for one MBID."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from dependencies import get_match_engine
from services.match_engine import MatchEngine

router = APIRouter(prefix="/api/debug", tags=["debug"])
logger = logging.getLogger(__name__)


class AcousticBrainzDebugRequest(BaseModel):
    mbid: str | None = None


@router.post("/acousticbrainz")
async def debug_acousticbrainz(
    req: AcousticBrainzDebugRequest,
    engine: MatchEngine = Depends(get_match_engine),
):
    if not req.mbid:
        raise HTTPException(status_code=400, detail="Invalid parameter. Required: mbid")

    logger.info("[DEBUG-API] Testing AcousticBrainz with MBID %s", req.mbid)
    try:
        features = await engine.acousticbrainz.fetch_features(req.mbid)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error testing AcousticBrainz: {e}")

    if features is None:
        return {
            "success": False,
            "mbid": req.mbid,
            "message": "MBID not found or has no features on AcousticBrainz",
        }
    return {"success": True, "mbid": req.mbid, "features": features.model_dump()}
