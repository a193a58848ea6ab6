"""Tagged results from the remote video catalog."""
from dataclasses import dataclass, field
from typing import List, Union


@dataclass(frozen=True)
class ErrorItem:
    domain: str
    reason: str
    message: str


@dataclass(frozen=True)
class ApiError:
    """Structured error body from the catalog. code 0 means no HTTP response."""
    code: int
    message: str
    errors: List[ErrorItem] = field(default_factory=list)

    @property
    def is_auth_error(self) -> bool:
        return self.code in (401, 403)

    def __str__(self) -> str:
        reasons = ", ".join(e.reason for e in self.errors if e.reason)
        if reasons:
            return f"{self.code} {self.message} ({reasons})"
        return f"{self.code} {self.message}"


@dataclass(frozen=True)
class PlaylistCreated:
    playlist_id: str


@dataclass(frozen=True)
class ItemInserted:
    item_id: str


@dataclass(frozen=True)
class SearchHit:
    video_id: str
    title: str = ""


CreateResult = Union[PlaylistCreated, ApiError]
InsertResult = Union[ItemInserted, ApiError]
SearchResult = Union[SearchHit, ApiError, None]
