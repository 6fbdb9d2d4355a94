"""Request-scoped access to the services built at startup (see main.lifespan)."""

from __future__ import annotations

from fastapi import Request

from services.leaderboard_store import LeaderboardStore
from services.match_engine import MatchEngine


def get_match_engine(request: Request) -> MatchEngine:
    return request.app.state.match_engine


def get_leaderboard_store(request: Request) -> LeaderboardStore:
    return request.app.state.leaderboard_store
