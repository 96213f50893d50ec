"""Errors raised by dayboard adapters and jobs."""


class TaskNotFoundError(KeyError):
    """Raised when a task id does not exist in the store."""

    pass


class CalendarFetchError(Exception):
    """Raised when events for one calendar could not be fetched."""

    def __init__(self, calendar_id: str, reason: str):
        super().__init__(f"Failed to fetch calendar {calendar_id}: {reason}")
        self.calendar_id = calendar_id
        self.reason = reason


class AuthenticationError(Exception):
    """Raised when the calendar access token cannot be refreshed."""

    pass


class CalendarNotFoundError(CalendarFetchError):
    """Raised when a calendar no longer exists or was never valid (HTTP 404/410)."""

    pass
