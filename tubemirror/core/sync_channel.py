"""Unbounded FIFO handoff from the player poller to the playlist sync engine."""
import queue
import threading
from typing import Iterator

from tubemirror.models.track import Track

_CLOSED = object()


class ChannelClosed(Exception):
    """send() was called after close()."""


class SyncChannel:
    """Single producer, single consumer. Iteration ends once the channel is closed."""

    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, track: Track) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosed("sync channel is closed")
            self._queue.put(track)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Track]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item
