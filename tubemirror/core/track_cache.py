"""Persist and load the play-history cache (JSON keyed by track uri)."""
import json
import logging
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from tubemirror.config import CACHE_DIR, TRACK_CACHE_FILE
from tubemirror.models.track import Observation, PlayHistoryEntry, Track

logger = logging.getLogger(__name__)


class TrackCacheError(Exception):
    """The cache file exists but cannot be parsed."""


def default_cache_path() -> Path:
    return CACHE_DIR / TRACK_CACHE_FILE


class TrackCache:
    """Map of track uri -> play history. Entries are only ever added or extended."""

    def __init__(self, entries: Optional[Dict[str, PlayHistoryEntry]] = None) -> None:
        self._entries: Dict[str, PlayHistoryEntry] = dict(entries or {})

    @classmethod
    def load(cls, path: Path) -> "TrackCache":
        """Load the cache from disk. A missing file gives an empty cache."""
        if not path.exists():
            logger.info("Track cache %s does not exist, starting empty", path)
            return cls()
        try:
            data = json.loads(path.read_text())
            entries = {uri: PlayHistoryEntry.from_dict(item) for uri, item in data.items()}
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            raise TrackCacheError(f"Unable to load tracks from {path}: {e}") from e
        logger.info("Loaded %d tracks from %s", len(entries), path)
        return cls(entries)

    def save(self, path: Path) -> bool:
        """Overwrite the cache file. Failures are logged; memory is left untouched."""
        data = {uri: entry.to_dict() for uri, entry in self._entries.items()}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2))
        except OSError:
            logger.exception("Unable to save tracks to %s", path)
            return False
        return True

    def record(self, track: Track, now: Optional[int] = None) -> Observation:
        """Note that track is playing now; returns whether it was seen before."""
        stamp = int(time.time()) if now is None else now
        entry = self._entries.get(track.uri)
        if entry is None:
            self._entries[track.uri] = PlayHistoryEntry(track=track, play_history=[stamp])
            return Observation.NEW_TRACK
        if entry.play_history and stamp < entry.play_history[-1]:
            # Clock went backwards; keep history non-decreasing
            stamp = entry.play_history[-1]
        entry.play_history.append(stamp)
        return Observation.REPEAT_OBSERVATION

    def get(self, uri: str) -> Optional[PlayHistoryEntry]:
        return self._entries.get(uri)

    def tracks(self) -> List[Track]:
        """All cached tracks in map order (insertion order, not play order)."""
        return [entry.track for entry in self._entries.values()]

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
