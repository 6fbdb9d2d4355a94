"""JSON-file leaderboard.

The file holds every score ever submitted as one JSON array. Nothing is
edited or deleted; rankings are recomputed from the full history on each
read. Writes go to a temp file in the same directory and are moved over
the target with ``os.replace``, so a crash mid-write leaves the previous
file intact.

Read-modify-write is serialised with an ``asyncio.Lock``. That only
protects writers inside one process; run a single worker.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from services.mood_scoring import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 500
UNKNOWN_MOOD = "unknown"

_STRING_FIELDS = ("playerId", "playerName", "userGuess", "date")
_NUMBER_FIELDS = ("matchPercentage", "timestamp")


class InvalidScoreEntryError(ValueError):
    """Submitted payload is not a valid score entry."""


class LeaderboardWriteError(RuntimeError):
    """The leaderboard file could not be written."""


class ScoreEntry(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    player_id: str
    player_name: str
    mood: str
    user_guess: str
    match_percentage: int
    date: str
    timestamp: int


def clamp_percentage(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def clamp_limit(limit: int) -> int:
    return max(1, min(MAX_LIMIT, limit))


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def entry_from_payload(payload: Any) -> ScoreEntry:
    """Validate a submitted score and normalise it for storage.

    ``matchPercentage`` is rounded and clamped to 0-100; a missing or
    empty ``mood`` becomes ``"unknown"``.
    """
    if not isinstance(payload, dict):
        raise InvalidScoreEntryError("Invalid leaderboard payload")
    for field in _STRING_FIELDS:
        if not isinstance(payload.get(field), str):
            raise InvalidScoreEntryError(f"Invalid leaderboard payload: {field} must be a string")
    for field in _NUMBER_FIELDS:
        if not _is_number(payload.get(field)):
            raise InvalidScoreEntryError(f"Invalid leaderboard payload: {field} must be a number")

    mood = payload.get("mood")
    return ScoreEntry(
        player_id=payload["playerId"],
        player_name=payload["playerName"],
        mood=mood if isinstance(mood, str) and mood else UNKNOWN_MOOD,
        user_guess=payload["userGuess"],
        match_percentage=clamp_percentage(payload["matchPercentage"]),
        date=payload["date"],
        timestamp=int(payload["timestamp"]),
    )


def rank_best_per_player(entries: list[ScoreEntry], limit: int) -> list[ScoreEntry]:
    """Each player's best entry, highest score first, newest first on ties."""
    best: dict[str, ScoreEntry] = {}
    for entry in entries:
        current = best.get(entry.player_id)
        if (
            current is None
            or entry.match_percentage > current.match_percentage
            or (
                entry.match_percentage == current.match_percentage
                and entry.timestamp > current.timestamp
            )
        ):
            best[entry.player_id] = entry

    ranking = sorted(best.values(), key=lambda e: (-e.match_percentage, -e.timestamp))
    return ranking[:limit]


class LeaderboardStore:
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read_entries(self) -> list[ScoreEntry]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("[LEADERBOARD] Could not read %s, treating as empty: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning("[LEADERBOARD] %s is not a JSON array, treating as empty", self.path)
            return []

        entries: list[ScoreEntry] = []
        for i, item in enumerate(data):
            try:
                entries.append(entry_from_payload(item))
            except InvalidScoreEntryError as e:
                logger.warning("[LEADERBOARD] Skipping entry %d: %s", i, e)
        return entries

    def _write_entries(self, entries: list[ScoreEntry]) -> None:
        payload = [entry.model_dump(by_alias=True) for entry in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.stem}.",
                suffix=".tmp",
            )
        except OSError as e:
            raise LeaderboardWriteError(f"Could not write {self.path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise LeaderboardWriteError(f"Could not write {self.path}: {e}") from e

    async def load(self) -> list[ScoreEntry]:
        return await asyncio.to_thread(self._read_entries)

    async def append(self, payload: Any) -> ScoreEntry:
        """Validate ``payload``, append it, and persist the whole log."""
        entry = entry_from_payload(payload)
        async with self._lock:
            entries = await asyncio.to_thread(self._read_entries)
            entries.append(entry)
            await asyncio.to_thread(self._write_entries, entries)
        logger.info(
            "[LEADERBOARD] Saved %s (%s): %d%% on %s",
            entry.player_name,
            entry.player_id,
            entry.match_percentage,
            entry.date,
        )
        return entry

    async def query(self, limit: int = DEFAULT_LIMIT) -> list[ScoreEntry]:
        entries = await self.load()
        return rank_best_per_player(entries, clamp_limit(limit))

    async def ensure_file(self) -> bool:
        """Write an empty leaderboard if the file is missing or zero bytes.

        Returns True if the file was written.
        """
        async with self._lock:
            if self.path.exists() and self.path.stat().st_size > 0:
                return False
            await asyncio.to_thread(self._write_entries, [])
        logger.info("[LEADERBOARD] Created leaderboard file: %s", self.path)
        return True
