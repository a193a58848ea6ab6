"""Shared application state (injected into routes)."""
import threading
from typing import Optional

from tubemirror.config import MirrorOptions, load_options
from tubemirror.core.player_directory import SonosDirectory
from tubemirror.core.poller import PlayerPoller
from tubemirror.core.sync_channel import SyncChannel
from tubemirror.core.sync_engine import PlaylistSyncEngine
from tubemirror.core.token_provider import GoogleTokenProvider
from tubemirror.core.video_catalog import YouTubeCatalog


class AppState:
    def __init__(
        self,
        options: Optional[MirrorOptions] = None,
        engine: Optional[PlaylistSyncEngine] = None,
        poller: Optional[PlayerPoller] = None,
    ) -> None:
        self._options = options
        self._engine = engine
        self._poller = poller
        self.channel = SyncChannel()
        self.stop_event = threading.Event()

    @property
    def options(self) -> MirrorOptions:
        if self._options is None:
            self._options = load_options()
        return self._options

    @property
    def engine(self) -> PlaylistSyncEngine:
        if self._engine is None:
            self._engine = PlaylistSyncEngine(YouTubeCatalog(), GoogleTokenProvider())
        return self._engine

    @property
    def poller(self) -> PlayerPoller:
        if self._poller is None:
            self._poller = PlayerPoller(SonosDirectory(), self.channel, self.options)
        return self._poller


_state = AppState()


def get_state() -> AppState:
    return _state
