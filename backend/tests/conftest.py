"""Shared test fixtures and configuration."""

import sys
from pathlib import Path

import httpx
import pytest

# Add backend dir to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env for test runs
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / ".env")

from services.acousticbrainz_service import AcousticBrainzService
from services.leaderboard_store import LeaderboardStore
from services.match_engine import MatchEngine
from services.musicbrainz_service import MusicBrainzService

MB_BASE = "https://mb.test/ws/2"
AB_BASE = "https://ab.test/api/v1"
TEST_DAY = "2024-01-15"


def recording_search_body(*ids: str) -> dict:
    return {
        "count": len(ids),
        "recordings": [
            {
                "id": mbid,
                "title": f"Song {i}",
                "score": 100 - i,
                "artist-credit": [{"name": "Artist", "joinphrase": ""}],
            }
            for i, mbid in enumerate(ids)
        ],
    }


def high_level_body(**probabilities: float) -> dict:
    """AcousticBrainz high-level body; keys: happy, sad, party, ..., instrumental."""
    highlevel = {}
    for name, value in probabilities.items():
        if name == "instrumental":
            highlevel["voice_instrumental"] = {
                "all": {"instrumental": value, "voice": 1 - value},
                "probability": max(value, 1 - value),
                "value": "instrumental" if value >= 0.5 else "voice",
            }
        else:
            highlevel[f"mood_{name}"] = {
                "all": {name: value, f"not_{name}": 1 - value},
                "probability": value,
                "value": name,
            }
    return {"highlevel": highlevel, "metadata": {}}


def build_engine(handler, today: str = TEST_DAY) -> MatchEngine:
    """MatchEngine whose HTTP traffic goes to ``handler`` (an httpx MockTransport handler)."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MatchEngine(
        musicbrainz=MusicBrainzService(base_url=MB_BASE, user_agent="TestAgent/1.0", client=client),
        acousticbrainz=AcousticBrainzService(base_url=AB_BASE, user_agent="TestAgent/1.0", client=client),
        today_fn=lambda: today,
    )


@pytest.fixture
def store(tmp_path) -> LeaderboardStore:
    return LeaderboardStore(tmp_path / "leaderboard.json")
