"""Poll players for the current track, record play history, forward new tracks."""
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from tubemirror.config import POLL_INTERVAL_SEC, MirrorOptions
from tubemirror.core.player_directory import (
    NowPlayingUnavailable,
    PlayerDirectory,
    PlayerDiscoveryError,
)
from tubemirror.core.sync_channel import ChannelClosed, SyncChannel
from tubemirror.core.track_cache import TrackCache, default_cache_path
from tubemirror.models.player import Player
from tubemirror.models.track import Observation

logger = logging.getLogger(__name__)


class PollerState(Enum):
    IDLE = "idle"
    POLLING = "polling"
    DISPATCHING = "dispatching"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


class PlayerPoller:
    """Sweeps every player once per interval. Owns the track cache."""

    def __init__(
        self,
        directory: PlayerDirectory,
        channel: SyncChannel,
        options: MirrorOptions,
        cache_path: Optional[Path] = None,
        interval_sec: float = POLL_INTERVAL_SEC,
    ) -> None:
        self._directory = directory
        self._channel = channel
        self._options = options
        self._cache_path = cache_path or default_cache_path()
        self._interval = interval_sec
        self._players: List[Player] = []
        self._cache: Optional[TrackCache] = None
        self._state = PollerState.IDLE
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def cache(self) -> Optional[TrackCache]:
        return self._cache

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    def prepare(self) -> None:
        """Discover players and load the cache. Both failures are fatal."""
        logger.info("Looking for players...")
        players = self._directory.discover()
        if not players:
            raise PlayerDiscoveryError("No players found")
        self._players = players
        logger.info("Found %d players on your network", len(players))
        self._cache = TrackCache.load(self._cache_path)

        if self._options.send_previous_tracks:
            logger.info("Replaying %d previously seen tracks", len(self._cache))
            for track in self._cache.tracks():
                self._channel.send(track)

    def poll_once(self, last_uri: str = "") -> Tuple[bool, str]:
        """One sweep over all players.

        last_uri is the track seen just before this sweep; a player reporting
        the same uri as the previous player is skipped. Returns (changed, last_uri).
        """
        if self._cache is None:
            raise RuntimeError("prepare() must run before polling")
        changed = False
        self._state = PollerState.POLLING
        for player in self._players:
            try:
                track = self._directory.now_playing(player)
            except NowPlayingUnavailable as e:
                logger.debug("No track from %s: %s", player.name, e)
                continue
            if track.uri == last_uri:
                continue
            last_uri = track.uri

            self._state = PollerState.DISPATCHING
            observation = self._cache.record(track)
            changed = True
            if observation is Observation.NEW_TRACK and self._options.create_live_playlist:
                logger.info("Adding %s by %s to playlist", track.title, track.artist)
                try:
                    self._channel.send(track)
                except ChannelClosed:
                    logger.info("Sync channel closed, not forwarding %s", track.uri)
            logger.info("%s by %s is playing on %s", track.title, track.artist, player.name)
            self._state = PollerState.POLLING
        return changed, last_uri

    def run(self, stop_event: threading.Event) -> None:
        """Poll until stop_event is set. The flag is only checked between sweeps."""
        last_uri = ""
        while not stop_event.is_set():
            changed, last_uri = self.poll_once(last_uri)
            if changed:
                self._cache.save(self._cache_path)
            self._state = PollerState.SLEEPING
            if stop_event.wait(timeout=self._interval):
                break
        self._state = PollerState.STOPPED
        logger.info("Track monitor exiting...")

    def start(self, stop_event: threading.Event) -> threading.Thread:
        """Prepare synchronously (so startup errors surface), then poll on a thread."""
        self.prepare()
        self._thread = threading.Thread(
            target=self.run,
            args=(stop_event,),
            name="player-poller",
            daemon=True,
        )
        self._thread.start()
        logger.info("Track monitor started (interval %.1fs)", self._interval)
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
