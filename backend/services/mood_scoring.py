"""Feature-to-mood scoring and the deterministic fallback score.

Two pure steps turn AcousticBrainz high-level probabilities into a score:

  mood probabilities -> AcousticFeatures -> per-mood scores in [0, 1]

The weights below are fixed constants of the game, not tunables.
When no acoustic data can be found for a guess, ``fallback_score`` gives
a stable 0-99 score derived only from the mood and the calendar date.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from pydantic import BaseModel

NEUTRAL_FEATURE = 0.5


class MoodProbabilities(BaseModel):
    """Raw high-level descriptor probabilities for one recording."""

    happy: float = 0.0
    relaxed: float = 0.0
    sad: float = 0.0
    acoustic: float = 0.0
    aggressive: float = 0.0
    party: float = 0.0
    instrumental: float = 0.0


class AcousticFeatures(BaseModel):
    energy: float | None = None
    danceability: float | None = None
    acousticness: float | None = None
    instrumentalness: float | None = None
    valence: float | None = None


def features_from_probabilities(probs: MoodProbabilities) -> AcousticFeatures:
    return AcousticFeatures(
        energy=probs.party * 0.8 + probs.aggressive * 0.2,
        danceability=probs.party,
        acousticness=probs.acoustic,
        instrumentalness=probs.instrumental,
        valence=probs.happy,
    )


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def calculate_mood_scores(features: AcousticFeatures) -> dict[str, float]:
    """Score every mood in [0, 1]. Missing features count as neutral (0.5)."""

    def value(name: str) -> float:
        raw = getattr(features, name)
        return NEUTRAL_FEATURE if raw is None else raw

    energy = value("energy")
    danceability = value("danceability")
    acousticness = value("acousticness")
    instrumentalness = value("instrumentalness")
    valence = value("valence")

    return {
        "chill": _clamp_unit(acousticness * 0.6 + (1 - energy) * 0.4),
        "energetic": _clamp_unit(energy * 0.7 + danceability * 0.3),
        "melancholic": _clamp_unit((1 - valence) * 0.6 + acousticness * 0.4),
        "joyful": _clamp_unit(valence * 0.7 + danceability * 0.3),
        "focus": _clamp_unit(instrumentalness * 0.8 + (1 - energy) * 0.2),
    }


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike ``round``."""
    return math.floor(value + 0.5)


def to_percentage(score: float) -> int:
    return round_half_up(score * 100)


def _string_hash(text: str) -> int:
    """31-multiplier rolling hash wrapped to a signed 32-bit int.

    Runs over UTF-16 code units so non-BMP characters hash as surrogate pairs.
    """
    encoded = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + code_unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def fallback_score(mood_id: str, day: str) -> int:
    """Deterministic 0-99 score for ``mood_id`` on ``day`` (YYYY-MM-DD)."""
    return abs(_string_hash(f"{mood_id}|{day}")) % 100


def today_utc() -> str:
    return datetime.now(timezone.utc).date().isoformat()
