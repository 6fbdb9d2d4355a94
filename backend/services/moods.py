"""Mood catalog and mood-of-the-day selection.

The five moods are fixed. Every player gets the same mood on the same
calendar day: the catalog index is the 1-based day of the year modulo
the catalog size.
"""

from __future__ import annotations

import logging
from datetime import date

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Mood(BaseModel):
    id: str
    name: str
    description: str
    emoji: str
    color: str


AVAILABLE_MOODS: list[Mood] = [
    Mood(
        id="chill",
        name="Chill",
        description="Relaxed and calm, perfect for unwinding",
        emoji="😌",
        color="#a8d8ea",
    ),
    Mood(
        id="energetic",
        name="Energetic",
        description="Full of energy, made for moving",
        emoji="⚡",
        color="#ffd93d",
    ),
    Mood(
        id="melancholic",
        name="Melancholic",
        description="Reflective, deep and emotional",
        emoji="🌙",
        color="#6c5ce7",
    ),
    Mood(
        id="joyful",
        name="Joyful",
        description="Happy, fun and upbeat",
        emoji="🎉",
        color="#ff7675",
    ),
    Mood(
        id="focus",
        name="Focus",
        description="Concentrated, productive, determined",
        emoji="🎯",
        color="#00b894",
    ),
]

MOOD_IDS: tuple[str, ...] = tuple(mood.id for mood in AVAILABLE_MOODS)


def get_mood(mood_id: str) -> Mood | None:
    """Look up a mood by id (case-sensitive). Returns None if unknown."""
    for mood in AVAILABLE_MOODS:
        if mood.id == mood_id:
            return mood
    return None


def mood_for_date(day: date) -> Mood:
    """Deterministic daily mood, identical for all players on ``day``."""
    day_of_year = day.timetuple().tm_yday
    mood = AVAILABLE_MOODS[day_of_year % len(AVAILABLE_MOODS)]
    logger.debug("[MOODS] %s (day %d) -> %s", day.isoformat(), day_of_year, mood.id)
    return mood
