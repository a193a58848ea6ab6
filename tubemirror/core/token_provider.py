"""OAuth bearer tokens for the video catalog; cached credentials on disk."""
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from tubemirror.config import (
    CACHE_DIR,
    CATALOG_SCOPES,
    CLIENT_ID_VAR,
    CLIENT_SECRET_VAR,
    TOKEN_CACHE_FILE,
)

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"


class TokenProvider(ABC):
    @abstractmethod
    def get_token(self) -> Optional[str]:
        """Return a bearer token, or None if no credentials are available."""


class GoogleTokenProvider(TokenProvider):
    """Installed-app OAuth flow. Tokens are persisted and refreshed once expired."""

    def __init__(
        self,
        token_path: Optional[Path] = None,
        scopes: Optional[List[str]] = None,
        port: int = 0,
    ) -> None:
        self._token_path = token_path or CACHE_DIR / TOKEN_CACHE_FILE
        self._scopes = scopes or list(CATALOG_SCOPES)
        self._port = port

    def _client_config(self) -> Optional[dict]:
        client_id = os.getenv(CLIENT_ID_VAR, "")
        client_secret = os.getenv(CLIENT_SECRET_VAR, "")
        if not client_id or not client_secret:
            return None
        return {
            "installed": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": ["http://localhost"],
            }
        }

    def _load_cached(self) -> Optional[Credentials]:
        if not self._token_path.exists():
            return None
        try:
            return Credentials.from_authorized_user_file(str(self._token_path), self._scopes)
        except (ValueError, OSError) as e:
            logger.warning("Ignoring unreadable token cache %s: %s", self._token_path, e)
            return None

    def _store(self, creds: Credentials) -> None:
        try:
            self._token_path.parent.mkdir(parents=True, exist_ok=True)
            self._token_path.write_text(creds.to_json())
        except OSError as e:
            logger.warning("Unable to write token cache %s: %s", self._token_path, e)

    def get_token(self) -> Optional[str]:
        creds = self._load_cached()
        if creds and creds.valid:
            return creds.token
        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
                self._store(creds)
                return creds.token
            except RefreshError as e:
                logger.warning("Token refresh failed, starting a new login: %s", e)

        config = self._client_config()
        if config is None:
            logger.warning(
                "%s / %s not set; skipping catalog login", CLIENT_ID_VAR, CLIENT_SECRET_VAR
            )
            return None
        flow = InstalledAppFlow.from_client_config(config, self._scopes)
        creds = flow.run_local_server(port=self._port, prompt="consent")
        self._store(creds)
        return creds.token
