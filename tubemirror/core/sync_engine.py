"""Turn accepted tracks into entries of a remote playlist.

One engine serves both the live poller (through the SyncChannel) and manual
batches posted to the control server. Both paths share a single
PlaylistSession, so the playlist is created once and a track id is submitted
at most once per process. Callers mutate the session only while holding
``engine.lock``.

Known gap: the bearer token is fetched once and reused. A call that fails
with an authorization error does not trigger a new login.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Set

from tubemirror.config import LIVE_PLAYLIST_DESCRIPTION, LIVE_PLAYLIST_TITLE
from tubemirror.core.sync_channel import SyncChannel
from tubemirror.core.token_provider import TokenProvider
from tubemirror.core.video_catalog import VideoCatalog
from tubemirror.models.catalog import ApiError
from tubemirror.models.track import SyncTrack

logger = logging.getLogger(__name__)


@dataclass
class PlaylistSession:
    token: Optional[str] = None
    playlist_id: Optional[str] = None
    seen: Set[str] = field(default_factory=set)


class PlaylistSyncEngine:
    def __init__(
        self,
        catalog: VideoCatalog,
        token_provider: TokenProvider,
        title: str = LIVE_PLAYLIST_TITLE,
        description: str = LIVE_PLAYLIST_DESCRIPTION,
    ) -> None:
        self._catalog = catalog
        self._token_provider = token_provider
        self.title = title
        self.description = description
        self.session = PlaylistSession()
        self.lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    def _ensure_token(self) -> Optional[str]:
        if self.session.token is None:
            try:
                self.session.token = self._token_provider.get_token()
            except Exception as e:
                logger.warning("Failed to obtain access token: %s", e)
        return self.session.token

    def _ensure_playlist(self, title: str, description: str) -> Optional[str]:
        """Create the session playlist on first use. Returns its id or None."""
        if self.session.playlist_id is not None:
            return self.session.playlist_id
        token = self._ensure_token()
        if token is None:
            logger.warning("No access token; cannot create playlist %r", title)
            return None
        result = self._catalog.create_playlist(token, title, description)
        if isinstance(result, ApiError):
            logger.warning("Remote API error creating playlist %r: %s", title, result)
            return None
        logger.info("Created playlist %r (%s)", title, result.playlist_id)
        self.session.playlist_id = result.playlist_id
        return result.playlist_id

    def _resolve(self, track: SyncTrack) -> Optional[str]:
        query = f"{track.title} {track.artist}"
        result = self._catalog.search(query, self.session.token)
        if isinstance(result, ApiError):
            logger.warning("Remote API error searching %r: %s", query, result)
            return None
        if result is None:
            logger.info("No video found for %s by %s", track.title, track.artist)
            return None
        return result.video_id

    def process_track(
        self,
        track: SyncTrack,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[str]:
        """Submit one track to the session playlist; returns the resolved video id.

        title/description only matter if the playlist does not exist yet.
        Caller must hold self.lock.
        """
        logger.info("Received %s by %s", track.title, track.artist)
        playlist_id = self._ensure_playlist(title or self.title, description or self.description)
        if playlist_id is None:
            logger.warning("Dropping %s by %s: no playlist", track.title, track.artist)
            self.session.seen.add(track.id)
            return None

        if track.id in self.session.seen:
            logger.info("Ignoring %s by %s - already processed", track.title, track.artist)
            return None

        try:
            video_id = track.video_id or self._resolve(track)
            if video_id is None:
                return None
            result = self._catalog.insert_item(self.session.token, playlist_id, video_id)
            if isinstance(result, ApiError):
                logger.warning(
                    "Remote API error adding %s to playlist %s: %s", video_id, playlist_id, result
                )
            else:
                logger.info("Added %s by %s (%s)", track.title, track.artist, video_id)
            return video_id
        finally:
            self.session.seen.add(track.id)

    def create_playlist(
        self, title: str, description: str, tracks: List[SyncTrack]
    ) -> List[SyncTrack]:
        """Process a manual batch; each returned track carries its video id or None."""
        logger.info("Creating playlist %s with %d tracks", title, len(tracks))
        processed = []
        with self.lock:
            for track in tracks:
                try:
                    video_id = self.process_track(track, title, description)
                except Exception as e:
                    logger.warning("Playlist sync: %s", e)
                    self.session.seen.add(track.id)
                    video_id = None
                processed.append(
                    SyncTrack(
                        id=track.id,
                        title=track.title,
                        artist=track.artist,
                        video_id=video_id or track.video_id,
                    )
                )
        return processed

    def run(self, channel: SyncChannel) -> None:
        """Drain the channel until it is closed."""
        for track in channel:
            try:
                with self.lock:
                    self.process_track(SyncTrack.from_track(track))
            except Exception as e:
                logger.warning("Playlist sync: %s", e)
        logger.info("Playlist sync exiting...")

    def start(self, channel: SyncChannel) -> threading.Thread:
        self._thread = threading.Thread(
            target=self.run,
            args=(channel,),
            name="playlist-sync",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
