"""Tests for Google Calendar adapter."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from googleapiclient.errors import HttpError

from dayboard.adapters.google_calendar import MAX_RESULTS, GoogleCalendarAdapter
from dayboard.exceptions import CalendarFetchError, CalendarNotFoundError

from fakes import TZ

START = datetime(2025, 1, 15, 9, 0, tzinfo=TZ)
END = START + timedelta(days=30)


@pytest.fixture
def service():
    with patch("dayboard.adapters.google_calendar.GoogleCalendarAdapter._build_service") as mock_build:
        service = MagicMock()
        mock_build.return_value = service
        yield service


def list_call(service):
    return service.events.return_value.list


class TestFetchEvents:
    def test_parses_items(self, service):
        list_call(service).return_value.execute.return_value = {
            "items": [
                {
                    "id": "e1",
                    "summary": "Dentist",
                    "description": "@@task 1d",
                    "start": {"dateTime": "2025-01-20T10:00:00-05:00"},
                    "end": {"dateTime": "2025-01-20T11:00:00-05:00"},
                },
                {"id": "e2", "summary": "Holiday", "start": {"date": "2025-01-21"}, "end": {"date": "2025-01-22"}},
            ]
        }

        events = GoogleCalendarAdapter("token").fetch_events("primary", START, END)

        assert [e.id for e in events] == ["e1", "e2"]
        assert events[0].description == "@@task 1d"
        assert events[1].all_day is True

    def test_request_parameters(self, service):
        list_call(service).return_value.execute.return_value = {"items": []}

        GoogleCalendarAdapter("token", timezone="America/Toronto").fetch_events("work", START, END)

        kwargs = list_call(service).call_args.kwargs
        assert kwargs["calendarId"] == "work"
        assert kwargs["timeMin"] == START.isoformat()
        assert kwargs["timeMax"] == END.isoformat()
        assert kwargs["singleEvents"] is True
        assert kwargs["orderBy"] == "startTime"
        assert kwargs["maxResults"] == MAX_RESULTS
        assert kwargs["pageToken"] is None

    def test_follows_pages(self, service):
        list_call(service).return_value.execute.side_effect = [
            {"items": [{"id": "e1", "start": {"date": "2025-01-20"}}], "nextPageToken": "p2"},
            {"items": [{"id": "e2", "start": {"date": "2025-01-21"}}]},
        ]

        events = GoogleCalendarAdapter("token").fetch_events("primary", START, END)

        assert [e.id for e in events] == ["e1", "e2"]
        assert list_call(service).call_args_list[1].kwargs["pageToken"] == "p2"

    def test_skips_items_without_start(self, service):
        list_call(service).return_value.execute.return_value = {
            "items": [{"id": "gone", "status": "cancelled"}, {"id": "e1", "start": {"date": "2025-01-20"}}]
        }
        events = GoogleCalendarAdapter("token").fetch_events("primary", START, END)
        assert [e.id for e in events] == ["e1"]

    def test_keeps_cancelled_status(self, service):
        list_call(service).return_value.execute.return_value = {
            "items": [{"id": "e1", "status": "cancelled", "start": {"date": "2025-01-20"}}]
        }
        events = GoogleCalendarAdapter("token").fetch_events("primary", START, END)
        assert events[0].is_cancelled is True

    def test_api_error_becomes_fetch_error(self, service):
        list_call(service).return_value.execute.side_effect = RuntimeError("401 Unauthorized")

        with pytest.raises(CalendarFetchError) as exc_info:
            GoogleCalendarAdapter("token").fetch_events("work", START, END)

        assert exc_info.value.calendar_id == "work"
        assert "401" in str(exc_info.value)

    @pytest.mark.parametrize("status", [404, 410])
    def test_missing_calendar(self, service, status):
        list_call(service).return_value.execute.side_effect = HttpError(
            httplib2.Response({"status": status}), b"Not Found"
        )

        with pytest.raises(CalendarNotFoundError) as exc_info:
            GoogleCalendarAdapter("token").fetch_events("old-calendar-id", START, END)

        assert exc_info.value.calendar_id == "old-calendar-id"

    def test_server_error_is_transient(self, service):
        list_call(service).return_value.execute.side_effect = HttpError(
            httplib2.Response({"status": 503}), b"Backend Error"
        )

        with pytest.raises(CalendarFetchError) as exc_info:
            GoogleCalendarAdapter("token").fetch_events("work", START, END)

        assert not isinstance(exc_info.value, CalendarNotFoundError)

    def test_service_built_once(self, service):
        list_call(service).return_value.execute.return_value = {"items": []}
        adapter = GoogleCalendarAdapter("token")

        adapter.fetch_events("a", START, END)
        adapter.fetch_events("b", START, END)

        assert GoogleCalendarAdapter._build_service.call_count == 1


class TestWrites:
    def test_update_description(self, service):
        GoogleCalendarAdapter("token").update_description("primary", "e1", "Agenda\n\n@@task 1d")

        service.events.return_value.patch.assert_called_once_with(
            calendarId="primary", eventId="e1", body={"description": "Agenda\n\n@@task 1d"}
        )
        service.events.return_value.patch.return_value.execute.assert_called_once()

    def test_get_event(self, service):
        service.events.return_value.get.return_value.execute.return_value = {
            "id": "e1",
            "summary": "Dinner",
            "start": {"dateTime": "2025-01-20T19:00:00-05:00"},
        }
        event = GoogleCalendarAdapter("token").get_event("primary", "e1")
        assert event.summary == "Dinner"

    def test_list_calendars(self, service):
        service.calendarList.return_value.list.return_value.execute.return_value = {
            "items": [{"id": "primary@example.com", "summary": "Me"}, {"id": "team@example.com", "summary": "Team"}]
        }
        assert GoogleCalendarAdapter("token").list_calendars() == [
            ("primary@example.com", "Me"),
            ("team@example.com", "Team"),
        ]
