"""Guess scoring: MusicBrainz lookup -> AcousticBrainz features -> mood score.

Flow for one guess (artist, title, mood):
  1. Search MusicBrainz for candidate recordings.
  2. Walk candidates in relevance order, fetching AcousticBrainz data for
     each, and stop at the first one with usable features. One fetch is
     in flight at a time.
  3. Score the features against the requested mood.

Any failure along the way ends in the daily fallback score instead of an
error, so a well-formed guess always gets a result.
"""

from __future__ import annotations

import logging
from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from services.acousticbrainz_service import AcousticBrainzService
from services.mood_scoring import (
    AcousticFeatures,
    calculate_mood_scores,
    fallback_score,
    to_percentage,
    today_utc,
)
from services.moods import get_mood
from services.musicbrainz_service import MusicBrainzService, Recording

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "not found"


class InvalidMatchRequestError(ValueError):
    """Raised before any lookup when artist, title or mood is missing."""


class MatchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    match_percentage: int
    source: Literal["acousticbrainz", "fallback"]
    features: AcousticFeatures | None = None
    recording_id: str | None = None
    message: str | None = None


class MatchEngine:
    """Scores a guessed song against a mood."""

    def __init__(
        self,
        musicbrainz: MusicBrainzService,
        acousticbrainz: AcousticBrainzService,
        today_fn: Callable[[], str] = today_utc,
    ):
        self.musicbrainz = musicbrainz
        self.acousticbrainz = acousticbrainz
        self._today = today_fn

    async def find_recording_with_features(
        self, artist: str, title: str
    ) -> tuple[Recording, AcousticFeatures] | None:
        """First recording (in search order) that has acoustic features."""
        recordings = await self.musicbrainz.search_recordings(artist, title)
        if not recordings:
            return None

        total = len(recordings)
        for i, recording in enumerate(recordings, start=1):
            logger.info(
                "[MATCH] Trying recording %d/%d: %r (ID: %s)",
                i,
                total,
                recording.title,
                recording.id,
            )
            features = await self.acousticbrainz.fetch_features(recording.id)
            if features is not None and features.energy is not None:
                logger.info("[MATCH] Selected: %r (ID: %s)", recording.title, recording.id)
                return recording, features
            logger.info("[MATCH] No features for %s, trying next...", recording.id)

        logger.warning("[MATCH] None of %d recordings has acoustic features", total)
        return None

    def fallback(self, mood_id: str) -> MatchResult:
        return MatchResult(
            match_percentage=fallback_score(mood_id, self._today()),
            source="fallback",
            message=FALLBACK_MESSAGE,
        )

    async def match(self, artist: str, title: str, mood_id: str) -> MatchResult:
        if not artist or not title or not mood_id:
            raise InvalidMatchRequestError("Invalid parameters. Required: artist, title, moodId")

        logger.info("[MATCH] New guess: artist=%r title=%r mood=%s", artist, title, mood_id)

        found = await self.find_recording_with_features(artist, title)
        if found is None:
            result = self.fallback(mood_id)
            logger.info("[MATCH] Using fallback score %d%% (%s)", result.match_percentage, mood_id)
            return result

        recording, features = found
        if get_mood(mood_id) is None:
            logger.warning("[MATCH] Unknown mood %r, scoring 0", mood_id)
        scores = calculate_mood_scores(features)
        match_percentage = to_percentage(scores.get(mood_id, 0.0))
        logger.info("[MATCH] Scores: %s", scores)
        logger.info("[MATCH] Final match: %d%% (%s)", match_percentage, mood_id)

        return MatchResult(
            match_percentage=match_percentage,
            source="acousticbrainz",
            features=features,
            recording_id=recording.id,
        )
