"""Core services: track cache, player poller, playlist sync."""
from tubemirror.core.poller import PlayerPoller
from tubemirror.core.sync_channel import SyncChannel
from tubemirror.core.sync_engine import PlaylistSyncEngine
from tubemirror.core.track_cache import TrackCache

__all__ = ["PlayerPoller", "PlaylistSyncEngine", "SyncChannel", "TrackCache"]
