"""Settings storage interface."""

from typing import Protocol


class SettingsStore(Protocol):
    """Interface for key/value settings."""

    def get(self, key: str, default: str | None = None) -> str | None:
        """Read a setting. Returns default if not set."""
        ...

    def set(self, key: str, value: str) -> None:
        """Create or overwrite a setting."""
        ...
