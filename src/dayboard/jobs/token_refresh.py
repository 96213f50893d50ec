"""Google access token refresh.

Access tokens expire after an hour, so this runs every half hour and
stores a fresh one in the settings table for the reconciler.
"""

import logging
from datetime import datetime
from typing import Callable

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from dayboard.config import ACCESS_TOKEN, CLIENT_ID, CLIENT_SECRET, REFRESH_TOKEN
from dayboard.exceptions import AuthenticationError
from dayboard.ports.settings_store import SettingsStore

from .base import ScheduledJob

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = ["https://www.googleapis.com/auth/calendar.events"]


class AccessTokenRefresher(ScheduledJob):
    """Exchanges the stored refresh token for a new access token."""

    name = "refresh_access_token"

    def __init__(
        self,
        settings: SettingsStore,
        timezone: str = "America/Toronto",
        clock: Callable[[], datetime] | None = None,
    ):
        super().__init__(timezone, clock)
        self.settings = settings

    def refresh(self) -> str:
        """Refresh now. Raises AuthenticationError if Google rejects it."""
        refresh_token = self.settings.get(REFRESH_TOKEN)
        client_id = self.settings.get(CLIENT_ID)
        client_secret = self.settings.get(CLIENT_SECRET)

        if not refresh_token:
            raise AuthenticationError("No refresh token stored.")
        if not client_id or not client_secret:
            raise AuthenticationError("Missing client_id or client_secret.")

        creds = Credentials(
            token=None,
            refresh_token=refresh_token,
            client_id=client_id,
            client_secret=client_secret,
            token_uri=TOKEN_URI,
            scopes=SCOPES,
        )
        try:
            creds.refresh(Request())
        except (RefreshError, TransportError) as e:
            raise AuthenticationError(f"Token refresh failed: {e}") from e

        self.settings.set(ACCESS_TOKEN, creds.token)
        return creds.token

    def run(self) -> bool:
        """Scheduled entry point: never raises for missing or rejected credentials."""
        if not self.settings.get(REFRESH_TOKEN):
            logger.info("No refresh token found. Skipping token refresh.")
            return False
        if not self.settings.get(CLIENT_ID) or not self.settings.get(CLIENT_SECRET):
            logger.info("Missing client_id or client_secret. Skipping token refresh.")
            return False

        try:
            self.refresh()
        except AuthenticationError as e:
            logger.error(f"Failed to refresh access token: {e}")
            return False

        logger.info("Successfully refreshed Google access token")
        return True
