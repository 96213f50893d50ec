"""Google Calendar API adapter."""

import logging
from datetime import datetime

from googleapiclient.errors import HttpError

from dayboard.core.calendar import CalendarEvent
from dayboard.exceptions import CalendarFetchError, CalendarNotFoundError

logger = logging.getLogger(__name__)

# Events per page; the API maximum
MAX_RESULTS = 2500


class GoogleCalendarAdapter:
    """
    Reads and annotates Google Calendar events with a bearer access token.

    Implements CalendarRepository protocol. The token is refreshed elsewhere
    and passed in as-is; requests are bounded by `timeout` seconds.
    """

    def __init__(self, access_token: str, timezone: str = "America/Toronto", timeout: float = 30.0):
        self.access_token = access_token
        self.timezone = timezone
        self.timeout = timeout
        self._service = None

    def _build_service(self):
        """Build a Google Calendar API service."""
        import google_auth_httplib2
        import httplib2
        from google.oauth2.credentials import Credentials
        from googleapiclient.discovery import build

        creds = Credentials(token=self.access_token)
        http = google_auth_httplib2.AuthorizedHttp(creds, http=httplib2.Http(timeout=self.timeout))
        return build("calendar", "v3", http=http, cache_discovery=False)

    def _get_service(self):
        if self._service is None:
            self._service = self._build_service()
        return self._service

    def fetch_events(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        """Fetch single (expanded) events starting in [time_min, time_max].

        Raises CalendarNotFoundError when the calendar does not exist (HTTP
        404/410) and CalendarFetchError for any other failure.
        """
        try:
            items = self._list_items(calendar_id, time_min, time_max)
        except HttpError as e:
            if e.resp.status in (404, 410):
                raise CalendarNotFoundError(calendar_id, f"HTTP {e.resp.status}") from e
            raise CalendarFetchError(calendar_id, str(e)) from e
        except Exception as e:
            raise CalendarFetchError(calendar_id, str(e)) from e

        events = []
        for item in items:
            event = CalendarEvent.from_api(item, self.timezone)
            if event is None:
                logger.debug(f"Skipping event {item.get('id')} without a start")
                continue
            events.append(event)
        return events

    def _list_items(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[dict]:
        service = self._get_service()
        items = []
        page_token = None
        while True:
            result = (
                service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=time_min.isoformat(),
                    timeMax=time_max.isoformat(),
                    maxResults=MAX_RESULTS,
                    singleEvents=True,
                    orderBy="startTime",
                    timeZone=self.timezone,
                    pageToken=page_token,
                )
                .execute()
            )
            items.extend(result.get("items", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return items

    def update_description(self, calendar_id: str, event_id: str, description: str) -> None:
        """Replace an event's description."""
        service = self._get_service()
        service.events().patch(
            calendarId=calendar_id,
            eventId=event_id,
            body={"description": description},
        ).execute()

    def get_event(self, calendar_id: str, event_id: str) -> CalendarEvent | None:
        """Fetch one event by id."""
        service = self._get_service()
        item = service.events().get(calendarId=calendar_id, eventId=event_id).execute()
        return CalendarEvent.from_api(item, self.timezone)

    def list_calendars(self) -> list[tuple[str, str]]:
        """List calendars as (id, summary) tuples."""
        service = self._get_service()
        result = service.calendarList().list().execute()
        return [(entry.get("id", ""), entry.get("summary", "")) for entry in result.get("items", [])]
