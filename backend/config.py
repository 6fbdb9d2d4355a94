import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

FRONTEND_ORIGIN = os.environ.get("FRONTEND_ORIGIN", "*")
PORT = int(os.environ.get("PORT", "3001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LEADERBOARD_FILE = Path(
    os.environ.get("LEADERBOARD_FILE", Path(__file__).parent / "leaderboard.json")
)

MUSICBRAINZ_URL = os.environ.get("MUSICBRAINZ_URL", "https://musicbrainz.org/ws/2")
ACOUSTICBRAINZ_URL = os.environ.get("ACOUSTICBRAINZ_URL", "https://acousticbrainz.org/api/v1")
# Both services ask clients to identify themselves.
USER_AGENT = os.environ.get(
    "USER_AGENT", "MusicGuessGame/1.0 ( https://github.com/user/music-guess )"
)
HTTP_TIMEOUT_S = float(os.environ.get("HTTP_TIMEOUT_S", "10"))
MUSICBRAINZ_SEARCH_LIMIT = int(os.environ.get("MUSICBRAINZ_SEARCH_LIMIT", "10"))


def allowed_origins() -> list[str]:
    return [origin.strip() for origin in FRONTEND_ORIGIN.split(",") if origin.strip()]
