"""Tests for feature mapping, mood scores and the fallback score."""

import pytest

from services.mood_scoring import (
    AcousticFeatures,
    MoodProbabilities,
    calculate_mood_scores,
    fallback_score,
    features_from_probabilities,
    round_half_up,
    to_percentage,
)


def test_features_from_probabilities():
    probs = MoodProbabilities(happy=0.7, acoustic=0.2, aggressive=0.5, party=0.5, instrumental=0.9)
    features = features_from_probabilities(probs)
    assert features.energy == pytest.approx(0.5 * 0.8 + 0.5 * 0.2)
    assert features.danceability == 0.5
    assert features.acousticness == 0.2
    assert features.instrumentalness == 0.9
    assert features.valence == 0.7


def test_missing_probabilities_default_to_zero():
    features = features_from_probabilities(MoodProbabilities())
    assert features.energy == 0.0
    assert features.valence == 0.0


def test_mood_scores_formulas():
    features = AcousticFeatures(
        energy=0.9, danceability=0.8, acousticness=0.1, instrumentalness=0.0, valence=0.1
    )
    scores = calculate_mood_scores(features)
    assert scores["chill"] == pytest.approx(0.1 * 0.6 + 0.1 * 0.4)
    assert scores["energetic"] == pytest.approx(0.87)
    assert scores["melancholic"] == pytest.approx(0.9 * 0.6 + 0.1 * 0.4)
    assert scores["joyful"] == pytest.approx(0.1 * 0.7 + 0.8 * 0.3)
    assert scores["focus"] == pytest.approx(0.0 * 0.8 + 0.1 * 0.2)
    assert to_percentage(scores["energetic"]) == 87


def test_missing_features_are_neutral():
    scores = calculate_mood_scores(AcousticFeatures())
    assert set(scores) == {"chill", "energetic", "melancholic", "joyful", "focus"}
    for score in scores.values():
        assert score == pytest.approx(0.5)


def test_mood_scores_are_clamped():
    wild = AcousticFeatures(
        energy=2, danceability=-1, acousticness=3, instrumentalness=-5, valence=4
    )
    for score in calculate_mood_scores(wild).values():
        assert 0.0 <= score <= 1.0


def test_fallback_score_is_deterministic():
    first = fallback_score("chill", "2024-01-15")
    assert all(fallback_score("chill", "2024-01-15") == first for _ in range(5))
    assert 0 <= first < 100


def test_fallback_score_known_values():
    # Signed 32-bit "hash * 31 + code" over "mood|date", abs, mod 100.
    assert fallback_score("chill", "2024-01-15") == 95
    assert fallback_score("energetic", "2024-01-15") == 79
    assert fallback_score("focus", "2026-10-17") == 53


def test_fallback_score_depends_on_mood_and_date():
    days = [f"2024-02-{d:02d}" for d in range(1, 29)]
    assert len({fallback_score("joyful", day) for day in days}) > 1
    assert len({fallback_score(mood, "2024-01-15") for mood in ("chill", "energetic")}) == 2


def test_round_half_up():
    assert round_half_up(87.6) == 88
    assert round_half_up(86.5) == 87
    assert round_half_up(2.5) == 3
    assert round_half_up(0.4) == 0
