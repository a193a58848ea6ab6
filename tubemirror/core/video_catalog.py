"""Video catalog: keyword search, playlist creation, playlist item insert.

YouTubeCatalog talks to the YouTube Data API v3 over plain REST. Every call
returns a tagged result (see tubemirror.models.catalog); HTTP and transport
failures come back as ApiError instead of raising.
"""
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from tubemirror.config import API_KEY_VAR, CATALOG_BASE_URL, CATALOG_TIMEOUT_SEC
from tubemirror.models.catalog import (
    ApiError,
    CreateResult,
    ErrorItem,
    InsertResult,
    ItemInserted,
    PlaylistCreated,
    SearchHit,
    SearchResult,
)

logger = logging.getLogger(__name__)


class VideoCatalog(ABC):
    @abstractmethod
    def create_playlist(self, token: str, title: str, description: str) -> CreateResult:
        ...

    @abstractmethod
    def search(self, query: str, token: Optional[str] = None) -> SearchResult:
        """First matching video, None when nothing matched."""

    @abstractmethod
    def insert_item(self, token: str, playlist_id: str, video_id: str) -> InsertResult:
        ...


def parse_error(status: int, body: Any) -> ApiError:
    """Build an ApiError from a {"error": {code, message, errors[]}} body."""
    err = body.get("error") if isinstance(body, dict) else None
    if not isinstance(err, dict):
        return ApiError(code=status, message=str(body) if body else f"HTTP {status}")
    items = [
        ErrorItem(
            domain=e.get("domain", ""),
            reason=e.get("reason", ""),
            message=e.get("message", ""),
        )
        for e in err.get("errors") or []
        if isinstance(e, dict)
    ]
    return ApiError(
        code=int(err.get("code") or status),
        message=err.get("message") or f"HTTP {status}",
        errors=items,
    )


class YouTubeCatalog(VideoCatalog):
    def __init__(
        self,
        base_url: str = CATALOG_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = CATALOG_TIMEOUT_SEC,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ):
        """Returns (body, None) on success or (None, ApiError)."""
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            resp = self._session.request(
                method,
                f"{self._base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            return None, ApiError(code=0, message=str(e))
        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        if not resp.ok:
            return None, parse_error(resp.status_code, body)
        if not isinstance(body, dict):
            return None, ApiError(code=resp.status_code, message="Unexpected response body")
        return body, None

    def create_playlist(self, token: str, title: str, description: str) -> CreateResult:
        payload = {
            "snippet": {"title": title, "description": description},
            "status": {"privacyStatus": "private"},
        }
        body, error = self._request(
            "POST", "/playlists", token=token, params={"part": "snippet,status"}, json=payload
        )
        if error is not None:
            return error
        playlist_id = body.get("id")
        if not playlist_id:
            return ApiError(code=200, message="Playlist response without id")
        return PlaylistCreated(playlist_id=playlist_id)

    def search(self, query: str, token: Optional[str] = None) -> SearchResult:
        api_key = os.getenv(API_KEY_VAR, "")
        if not api_key:
            logger.warning("%s not set; skipping search for %r", API_KEY_VAR, query)
            return None
        params = {
            "part": "snippet",
            "key": api_key,
            "q": query,
            "type": "video",
            "maxResults": 1,
        }
        body, error = self._request("GET", "/search", token=token, params=params)
        if error is not None:
            return error
        for item in body.get("items") or []:
            if not isinstance(item, dict) or not isinstance(item.get("id"), dict):
                return ApiError(code=200, message=f"Malformed search item: {item!r}")
            video_id = item["id"].get("videoId")
            if video_id:
                snippet = item.get("snippet") or {}
                return SearchHit(video_id=video_id, title=snippet.get("title", ""))
            # only the first result counts
            break
        return None

    def insert_item(self, token: str, playlist_id: str, video_id: str) -> InsertResult:
        payload = {
            "snippet": {
                "playlistId": playlist_id,
                "resourceId": {"kind": "youtube#video", "videoId": video_id},
            }
        }
        body, error = self._request(
            "POST", "/playlistItems", token=token, params={"part": "snippet"}, json=payload
        )
        if error is not None:
            return error
        return ItemInserted(item_id=body.get("id", ""))
