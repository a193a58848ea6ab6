"""Player discovery and now-playing lookup (Sonos via SoCo)."""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import soco
from soco import SoCo

from tubemirror.models.player import Player
from tubemirror.models.track import Track

logger = logging.getLogger(__name__)

DISCOVERY_TIMEOUT_SEC = 5


class PlayerDiscoveryError(Exception):
    """No players could be found on the network."""


class NowPlayingUnavailable(Exception):
    """Nothing is playing on the player, or it could not be reached."""


class PlayerDirectory(ABC):
    """Finds players and reports what each one is playing."""

    @abstractmethod
    def discover(self) -> List[Player]:
        ...

    @abstractmethod
    def now_playing(self, player: Player) -> Track:
        """Return the current track or raise NowPlayingUnavailable."""


def _parse_hms(value: Optional[str]) -> int:
    """'0:03:21' -> 201. Streams report NOT_IMPLEMENTED or empty strings."""
    if not value:
        return 0
    try:
        parts = [int(p) for p in value.split(":")]
    except ValueError:
        return 0
    seconds = 0
    for p in parts:
        seconds = seconds * 60 + p
    return seconds


def track_from_info(info: dict) -> Optional[Track]:
    """Map SoCo get_current_track_info() output to a Track, or None if idle."""
    uri = info.get("uri") or ""
    title = info.get("title") or ""
    if not uri or not title:
        return None
    try:
        queue_position = int(info.get("playlist_position") or 0)
    except (TypeError, ValueError):
        queue_position = 0
    return Track(
        title=title,
        artist=info.get("artist") or "",
        album=info.get("album") or None,
        uri=uri,
        queue_position=queue_position,
        duration=_parse_hms(info.get("duration")),
        running_time=_parse_hms(info.get("position")),
    )


class SonosDirectory(PlayerDirectory):
    """Sonos speakers found by SSDP discovery."""

    def __init__(self, timeout: int = DISCOVERY_TIMEOUT_SEC) -> None:
        self._timeout = timeout

    def discover(self) -> List[Player]:
        try:
            zones = soco.discover(timeout=self._timeout)
        except OSError as e:
            raise PlayerDiscoveryError(f"Sonos discovery failed: {e}") from e
        if not zones:
            raise PlayerDiscoveryError("Unable to find any Sonos players on your network")
        players = [Player(name=z.player_name, address=z.ip_address) for z in zones]
        # set order from discovery is arbitrary
        return sorted(players, key=lambda p: (p.name, p.address))

    def now_playing(self, player: Player) -> Track:
        try:
            info = SoCo(player.address).get_current_track_info()
        except Exception as e:
            raise NowPlayingUnavailable(f"{player.name}: {e}") from e
        track = track_from_info(info or {})
        if track is None:
            raise NowPlayingUnavailable(f"{player.name}: nothing playing")
        return track
