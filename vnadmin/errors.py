"""
Exceptions raised by the administrative unit library.

Missing records are never errors: lookups return None or an empty list.
These exceptions cover programmer errors and unreadable data only.
"""


class VnAdminError(Exception):
    """Base class for all library errors."""


class UnknownLevelError(VnAdminError, KeyError):
    """Raised when a level name is not part of the active hierarchy."""

    def __init__(self, level: str, known=()):
        self.level = level
        self.known = tuple(known)
        super().__init__(level)

    def __str__(self) -> str:
        return f"Unknown level '{self.level}' (expected one of: {', '.join(self.known)})"


class DatasetError(VnAdminError):
    """Raised when a data source cannot be read or holds malformed rows."""
