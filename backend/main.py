import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from errors import setup_exception_handlers
from routers import debug, leaderboard, moods, music
from services.acousticbrainz_service import AcousticBrainzService
from services.leaderboard_store import LeaderboardStore, LeaderboardWriteError
from services.match_engine import MatchEngine
from services.musicbrainz_service import MusicBrainzService

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    http_client = httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_S)
    app.state.match_engine = MatchEngine(
        musicbrainz=MusicBrainzService(
            base_url=config.MUSICBRAINZ_URL,
            user_agent=config.USER_AGENT,
            timeout=config.HTTP_TIMEOUT_S,
            limit=config.MUSICBRAINZ_SEARCH_LIMIT,
            client=http_client,
        ),
        acousticbrainz=AcousticBrainzService(
            base_url=config.ACOUSTICBRAINZ_URL,
            user_agent=config.USER_AGENT,
            timeout=config.HTTP_TIMEOUT_S,
            client=http_client,
        ),
    )
    app.state.leaderboard_store = LeaderboardStore(config.LEADERBOARD_FILE)
    try:
        await app.state.leaderboard_store.ensure_file()
    except LeaderboardWriteError as e:
        logger.warning("Could not create leaderboard file %s: %s", config.LEADERBOARD_FILE, e)

    logger.info("Music Guess backend ready (leaderboard: %s)", config.LEADERBOARD_FILE)
    try:
        yield
    finally:
        await http_client.aclose()


app = FastAPI(title="Music Guess: Mood Match API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_exception_handlers(app)

app.include_router(music.router)
app.include_router(debug.router)
app.include_router(leaderboard.router)
app.include_router(moods.router)


@app.get("/api/health")
async def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return {"status": "ok", "timestamp": timestamp.replace("+00:00", "Z")}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
