"""Tests for MatchEngine: candidate walk, scoring and fallback."""

import httpx
import pytest

from services.match_engine import InvalidMatchRequestError, MatchEngine
from services.mood_scoring import AcousticFeatures, fallback_score
from services.musicbrainz_service import Recording
from tests.conftest import TEST_DAY, build_engine, high_level_body, recording_search_body


class StubMusicBrainz:
    def __init__(self, recordings):
        self.recordings = recordings
        self.calls = []

    async def search_recordings(self, artist, title):
        self.calls.append((artist, title))
        return self.recordings


class StubAcousticBrainz:
    def __init__(self, features_by_id):
        self.features_by_id = features_by_id
        self.calls = []

    async def fetch_features(self, mbid):
        self.calls.append(mbid)
        return self.features_by_id.get(mbid)


def _engine(recordings, features_by_id) -> MatchEngine:
    return MatchEngine(
        musicbrainz=StubMusicBrainz(recordings),
        acousticbrainz=StubAcousticBrainz(features_by_id),
        today_fn=lambda: TEST_DAY,
    )


@pytest.mark.asyncio
async def test_no_candidates_uses_fallback():
    engine = _engine([], {})
    result = await engine.match("Unknown Artist XYZ123", "Nonexistent Song ABC", "chill")

    assert result.source == "fallback"
    assert result.match_percentage == fallback_score("chill", TEST_DAY)
    assert result.message == "not found"
    assert result.features is None
    assert engine.acousticbrainz.calls == []


@pytest.mark.asyncio
async def test_energetic_scenario():
    features = AcousticFeatures(
        energy=0.9, danceability=0.8, valence=0.1, acousticness=0.1, instrumentalness=0.0
    )
    engine = _engine([Recording(id="rec-1", title="Song")], {"rec-1": features})

    result = await engine.match("Artist", "Song", "energetic")

    assert result.source == "acousticbrainz"
    assert result.match_percentage == 87
    assert result.recording_id == "rec-1"
    assert result.features == features


@pytest.mark.asyncio
async def test_first_candidate_with_features_wins():
    good = AcousticFeatures(energy=0.2, danceability=0.2, acousticness=0.9,
                            instrumentalness=0.1, valence=0.5)
    later = AcousticFeatures(energy=1, danceability=1, acousticness=0, instrumentalness=0, valence=1)
    recordings = [Recording(id=i, title=i) for i in ("a", "b", "c", "d")]
    engine = _engine(recordings, {"b": AcousticFeatures(), "c": good, "d": later})

    result = await engine.match("Artist", "Song", "chill")

    # "a" has no data, "b" has no energy; stop at "c" and never touch "d"
    assert engine.acousticbrainz.calls == ["a", "b", "c"]
    assert result.recording_id == "c"
    assert result.match_percentage == round((0.9 * 0.6 + 0.8 * 0.4) * 100)


@pytest.mark.asyncio
async def test_candidates_without_features_fall_back():
    recordings = [Recording(id="a", title="A"), Recording(id="b", title="B")]
    engine = _engine(recordings, {})

    result = await engine.match("Artist", "Song", "joyful")

    assert engine.acousticbrainz.calls == ["a", "b"]
    assert result.source == "fallback"
    assert result.match_percentage == fallback_score("joyful", TEST_DAY)


@pytest.mark.asyncio
async def test_unknown_mood_scores_zero():
    engine = _engine([Recording(id="a", title="A")], {"a": AcousticFeatures(energy=0.5)})
    result = await engine.match("Artist", "Song", "grumpy")
    assert result.source == "acousticbrainz"
    assert result.match_percentage == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("args", [("", "Song", "chill"), ("Artist", "", "chill"), ("Artist", "Song", "")])
async def test_missing_input_is_rejected_before_lookup(args):
    engine = _engine([Recording(id="a", title="A")], {})
    with pytest.raises(InvalidMatchRequestError):
        await engine.match(*args)
    assert engine.musicbrainz.calls == []


@pytest.mark.asyncio
async def test_end_to_end_with_mocked_services():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "mb.test":
            return httpx.Response(200, json=recording_search_body("no-data", "has-data"))
        if request.url.path.endswith("/no-data/high-level"):
            return httpx.Response(404, json={"message": "Not found"})
        return httpx.Response(200, json=high_level_body(happy=0.9, party=0.5, acoustic=0.2))

    result = await build_engine(handler).match("Artist", "Song", "joyful")

    assert result.source == "acousticbrainz"
    assert result.recording_id == "has-data"
    assert result.match_percentage == 78  # 0.9*0.7 + 0.5*0.3 = 0.78


@pytest.mark.asyncio
async def test_upstream_outage_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="Service Unavailable")

    result = await build_engine(handler, today="2024-01-15").match("Artist", "Song", "energetic")
    assert result.source == "fallback"
    assert result.match_percentage == 79


def test_match_result_serialises_camel_case():
    engine = _engine([], {})
    dumped = engine.fallback("chill").model_dump(by_alias=True, exclude_none=True)
    assert dumped == {"matchPercentage": 95, "source": "fallback", "message": "not found"}
