"""Tracks observed on players and their play history."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


@dataclass(frozen=True)
class Track:
    """One playback event from a player. Identity is the provider uri."""
    title: str
    artist: str
    album: Optional[str]
    uri: str
    queue_position: int = 0
    duration: int = 0  # seconds
    running_time: int = 0  # seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "queuePosition": self.queue_position,
            "uri": self.uri,
            "duration": self.duration,
            "runningTime": self.running_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        return cls(
            title=data["title"],
            artist=data["artist"],
            album=data.get("album"),
            uri=data["uri"],
            queue_position=int(data.get("queuePosition") or 0),
            duration=int(data.get("duration") or 0),
            running_time=int(data.get("runningTime") or 0),
        )


@dataclass
class PlayHistoryEntry:
    """A track plus every time (UTC epoch seconds) it was seen playing."""
    track: Track
    play_history: List[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"track": self.track.to_dict(), "playHistory": list(self.play_history)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayHistoryEntry":
        # Older files may carry a null history
        history = data.get("playHistory") or []
        return cls(track=Track.from_dict(data["track"]), play_history=[int(t) for t in history])


class Observation(Enum):
    NEW_TRACK = "new_track"
    REPEAT_OBSERVATION = "repeat_observation"


@dataclass
class SyncTrack:
    """Track as sent to the playlist sync engine; id is the source uri."""
    id: str
    title: str
    artist: str
    video_id: Optional[str] = None

    @classmethod
    def from_track(cls, track: Track) -> "SyncTrack":
        return cls(id=track.uri, title=track.title, artist=track.artist)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "videoId": self.video_id,
        }
