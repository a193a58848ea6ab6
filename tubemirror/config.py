"""Configuration: env, cache paths, catalog credentials, mirror options."""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Base paths (project root = parent of tubemirror package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so TUBEMIRROR_CLIENT_ID etc. are set
load_dotenv(BASE_DIR / ".env")

logger = logging.getLogger(__name__)

# API
API_HOST = os.getenv("TUBEMIRROR_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("TUBEMIRROR_API_PORT", "3030"))

# Video catalog (YouTube Data API v3)
API_KEY_VAR = "TUBEMIRROR_API_KEY"
CLIENT_ID_VAR = "TUBEMIRROR_CLIENT_ID"
CLIENT_SECRET_VAR = "TUBEMIRROR_CLIENT_SECRET"
CATALOG_BASE_URL = os.getenv("TUBEMIRROR_CATALOG_URL", "https://www.googleapis.com/youtube/v3")
CATALOG_SCOPES = ["https://www.googleapis.com/auth/youtube"]
CATALOG_TIMEOUT_SEC = float(os.getenv("TUBEMIRROR_CATALOG_TIMEOUT", "15"))

# Per-user cache dir holds the play history and the OAuth token
if os.name == "nt":
    _DEFAULT_CACHE_DIR = Path(os.getenv("LOCALAPPDATA", str(Path.home())))
else:
    _DEFAULT_CACHE_DIR = Path(os.getenv("XDG_CACHE_HOME", str(Path.home() / ".cache")))
CACHE_DIR = Path(os.getenv("TUBEMIRROR_CACHE_DIR", str(_DEFAULT_CACHE_DIR)))
TRACK_CACHE_FILE = ".tubemirror_tracks.json"
TOKEN_CACHE_FILE = "tubemirror_token_cache.json"

OPTIONS_PATH = Path(os.getenv("TUBEMIRROR_OPTIONS", str(Path.home() / ".tubemirror.json")))

# Player polling
POLL_INTERVAL_SEC = 30.0
# Set to 0 to run only the control server (no player discovery)
MONITOR_PLAYERS = os.getenv("TUBEMIRROR_MONITOR_PLAYERS", "1").lower() in ("1", "true", "yes")

# Playlist created for tracks heard on the speakers
LIVE_PLAYLIST_TITLE = "Tubemirror"
LIVE_PLAYLIST_DESCRIPTION = "Tracks played on your speakers"


@dataclass
class MirrorOptions:
    """User switches from the options file (camelCase keys, all optional)."""
    api_key: Optional[str] = field(default=None, repr=False)
    create_live_playlist: bool = False
    send_previous_tracks: bool = False
    create_manual_playlist: bool = True


def load_options(path: Path = OPTIONS_PATH) -> MirrorOptions:
    """Read the options file. Missing file means defaults; a malformed one raises."""
    if not path.exists():
        logger.info("Options file %s does not exist. Using defaults", path)
        return MirrorOptions()
    data = json.loads(path.read_text())
    options = MirrorOptions(
        api_key=data.get("apiKey"),
        create_live_playlist=bool(data.get("createLivePlaylist") or False),
        send_previous_tracks=bool(data.get("sendPreviousTracks") or False),
        create_manual_playlist=bool(data.get("createManualPlaylist", True)),
    )
    if options.api_key:
        os.environ[API_KEY_VAR] = options.api_key
    return options


def ensure_cache_dir() -> None:
    CACHE_DIR.mkdir(parents=True, exist_ok=True)
