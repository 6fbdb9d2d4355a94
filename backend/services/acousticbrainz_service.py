"""AcousticBrainz high-level descriptor lookup.

Fetches ``/{mbid}/high-level`` and pulls out the mood classifier
probabilities the game scores against. A recording with no analysis
(404), an error response, or an empty ``highlevel`` block is reported as
``None`` so callers can move on to the next candidate.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from services.mood_scoring import (
    AcousticFeatures,
    MoodProbabilities,
    features_from_probabilities,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://acousticbrainz.org/api/v1"

# highlevel classifier name -> MoodProbabilities field
MOOD_CLASSIFIERS = {
    "mood_happy": "happy",
    "mood_relaxed": "relaxed",
    "mood_sad": "sad",
    "mood_acoustic": "acoustic",
    "mood_aggressive": "aggressive",
    "mood_party": "party",
}


def _probability(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


class AcousticBrainzService:
    """Client for the AcousticBrainz public API. No API key required."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = "MusicGuessGame/1.0",
        timeout: float = 10,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._headers = {"User-Agent": user_agent}

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self._headers)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, headers=self._headers)

    async def fetch_mood_probabilities(self, mbid: str) -> MoodProbabilities | None:
        """Fetch high-level mood probabilities for one recording id."""
        url = f"{self.base_url}/{mbid}/high-level"
        logger.info("[ACOUSTICBRAINZ] Fetching mood data for MBID %s", mbid)

        try:
            resp = await self._get(url)
            if not resp.is_success:
                logger.warning(
                    "[ACOUSTICBRAINZ] HTTP %d for %s: %s",
                    resp.status_code,
                    mbid,
                    resp.text[:100],
                )
                return None
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[ACOUSTICBRAINZ] Fetch ERROR for %s: %s", mbid, e)
            return None

        probs = self.parse_high_level(data)
        if probs is None:
            logger.warning("[ACOUSTICBRAINZ] No high-level data for %s", mbid)
            return None

        logger.info("[ACOUSTICBRAINZ] High-level mood data for %s: %s", mbid, probs.model_dump())
        return probs

    async def fetch_features(self, mbid: str) -> AcousticFeatures | None:
        probs = await self.fetch_mood_probabilities(mbid)
        if probs is None:
            return None
        return features_from_probabilities(probs)

    @staticmethod
    def parse_high_level(data: Any) -> MoodProbabilities | None:
        """Extract mood probabilities from a high-level response body.

        Any classifier missing from the block counts as probability 0.
        """
        highlevel = data.get("highlevel") if isinstance(data, dict) else None
        if not isinstance(highlevel, dict) or not highlevel:
            return None

        values: dict[str, float] = {}
        for classifier, field in MOOD_CLASSIFIERS.items():
            block = highlevel.get(classifier)
            if isinstance(block, dict):
                values[field] = _probability(block.get("probability"))

        voice = highlevel.get("voice_instrumental")
        if isinstance(voice, dict) and isinstance(voice.get("all"), dict):
            values["instrumental"] = _probability(voice["all"].get("instrumental"))

        return MoodProbabilities(**values)
