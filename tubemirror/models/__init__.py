"""Data models for tracks, play history, and catalog results."""
from tubemirror.models.catalog import (
    ApiError,
    ErrorItem,
    ItemInserted,
    PlaylistCreated,
    SearchHit,
)
from tubemirror.models.player import Player
from tubemirror.models.track import Observation, PlayHistoryEntry, SyncTrack, Track

__all__ = [
    "ApiError",
    "ErrorItem",
    "ItemInserted",
    "Observation",
    "PlayHistoryEntry",
    "Player",
    "PlaylistCreated",
    "SearchHit",
    "SyncTrack",
    "Track",
]
