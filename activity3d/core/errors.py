class ActivityError(Exception):
    """Base class for failures while building contribution activity."""


class RemoteApiError(ActivityError):
    """Raised when the GitHub request fails or returns a non-success status.

    `status_code` is None for transport failures such as timeouts, where no
    response was received at all.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseParseError(ActivityError):
    """Raised when the GitHub response does not match the expected schema."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Unexpected GitHub response: {detail}")
        self.detail = detail


class DomainError(ActivityError, ValueError):
    """Raised for an invalid date range (end before start)."""
