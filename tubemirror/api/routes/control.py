"""Control surface: liveness, remote log lines, manual playlist batches."""
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from tubemirror.api.state import AppState, get_state
from tubemirror.models.track import SyncTrack

logger = logging.getLogger(__name__)

router = APIRouter()


class SyncTrackBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    artist: str
    video_id: Optional[str] = Field(default=None, alias="videoId")


class PlaylistBody(BaseModel):
    title: str
    description: str = ""
    tracks: List[SyncTrackBody] = []


@router.get("/status", response_class=PlainTextResponse)
def status():
    """Liveness check."""
    logger.info("Status request received")
    return "Server is running"


@router.post("/log")
async def log_message(request: Request):
    """Write the request body to the service log."""
    raw = (await request.body()).decode("utf-8", errors="replace")
    message = raw
    try:
        decoded = json.loads(raw)
        if isinstance(decoded, str):
            message = decoded
    except ValueError:
        pass
    logger.info("Received message: %s", message)
    return PlainTextResponse("")


@router.post("/playlists", status_code=201)
def create_playlist(body: PlaylistBody, state: AppState = Depends(get_state)):
    """Resolve and add a batch of tracks to the session playlist.

    Always answers 201; tracks that could not be resolved come back with
    videoId null.
    """
    logger.info("Create playlist request received")
    if not state.options.create_manual_playlist:
        logger.info("createManualPlaylist is off. Skipping playlist creation")
        return []
    tracks = [
        SyncTrack(id=t.id, title=t.title, artist=t.artist, video_id=t.video_id)
        for t in body.tracks
    ]
    processed = state.engine.create_playlist(body.title, body.description, tracks)
    return [t.to_dict() for t in processed]
