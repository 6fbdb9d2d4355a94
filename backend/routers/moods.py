"""Mood catalog endpoints."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from fastapi import APIRouter, HTTPException, Query

from services.moods import AVAILABLE_MOODS, mood_for_date

router = APIRouter(prefix="/api/moods", tags=["moods"])

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


@router.get("")
async def list_moods():
    return {"moods": [mood.model_dump() for mood in AVAILABLE_MOODS]}


@router.get("/today")
async def todays_mood(day_param: str | None = Query(default=None, alias="date")):
    """Mood of the day for everyone. ``?date=YYYY-MM-DD`` picks another day."""
    if day_param is None:
        day = datetime.now(timezone.utc).date()
    else:
        try:
            day = _parse_date(day_param)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date. Expected YYYY-MM-DD")
    return {"date": day.isoformat(), "mood": mood_for_date(day).model_dump()}


def _parse_date(value: str) -> date:
    if not _ISO_DATE.fullmatch(value):
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    return date.fromisoformat(value)
