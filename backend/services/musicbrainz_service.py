"""MusicBrainz recording search. No authentication required.

Uses the public MusicBrainz web service (``/ws/2/recording``) with a Lucene
query restricted to exact ``artist`` and ``recording`` phrases. Results come
back in MusicBrainz's own relevance order and are never re-ranked here.

MusicBrainz asks every client to send a descriptive User-Agent.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://musicbrainz.org/ws/2"


class Recording(BaseModel):
    id: str
    title: str
    artist: str | None = None


def _quote_phrase(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_query(artist: str, title: str) -> str:
    return f"artist:{_quote_phrase(artist)} recording:{_quote_phrase(title)}"


class MusicBrainzService:
    """Stateless MusicBrainz search client.

    Pass ``client`` to share one ``httpx.AsyncClient`` (tests inject one
    built on ``httpx.MockTransport``); otherwise a client is opened per call.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = "MusicGuessGame/1.0",
        timeout: float = 10,
        limit: int = 10,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limit = limit
        self._client = client
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "application/json",
        }

    async def _get(self, url: str, params: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, params=params, headers=self._headers)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params, headers=self._headers)

    async def search_recordings(self, artist: str, title: str) -> list[Recording]:
        """Search recordings by exact artist and title phrases.

        Returns candidates in MusicBrainz relevance order, or an empty list
        when the call fails or nothing matches.
        """
        query = build_query(artist, title)
        logger.info("[MUSICBRAINZ] Searching: %s - %s", artist, title)

        try:
            resp = await self._get(
                f"{self.base_url}/recording/",
                {"query": query, "fmt": "json", "limit": self.limit},
            )
            if not resp.is_success:
                logger.error(
                    "[MUSICBRAINZ] Search FAILED: HTTP %d: %s",
                    resp.status_code,
                    resp.text[:200],
                )
                return []
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[MUSICBRAINZ] Search ERROR: %s", e)
            return []

        recordings = self.parse_recordings(data)
        logger.info("[MUSICBRAINZ] Search '%s': %d results", query, len(recordings))
        if not recordings:
            logger.warning("[MUSICBRAINZ] No recording found for: %s - %s", artist, title)
        return recordings

    @staticmethod
    def parse_recordings(data: Any) -> list[Recording]:
        """Normalize a search response body into ``Recording`` objects.

        Items without an id are dropped; a body of the wrong shape yields [].
        """
        raw = data.get("recordings") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            return []

        recordings: list[Recording] = []
        for item in raw:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                continue
            credits = item.get("artist-credit") or []
            artist = "".join(
                f"{credit.get('name', '')}{credit.get('joinphrase', '')}"
                for credit in credits
                if isinstance(credit, dict)
            )
            recordings.append(
                Recording(
                    id=item["id"],
                    title=str(item.get("title", "Unknown")),
                    artist=artist or None,
                )
            )
        return recordings
