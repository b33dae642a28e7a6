"""Domain exceptions raised by services and mapped to HTTP responses in main.py"""

from typing import Optional


class JobTrackerError(Exception):
    """
    Base class for errors that map to a specific HTTP status.

    Attributes:
        message: Human-readable error description
        status_code: HTTP status the API responds with
    """

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AILimitExceededError(JobTrackerError):
    """
    Raised when a user has used up their AI requests for the current window.

    Attributes:
        limit: Requests allowed per window
        hours_until_reset: Whole hours until the window resets (rounded up)
    """

    status_code = 429

    def __init__(self, limit: int, hours_until_reset: int):
        self.limit = limit
        self.hours_until_reset = hours_until_reset
        super().__init__(
            f"You have reached your daily limit of {limit} AI requests. "
            f"Your limit will reset in {hours_until_reset} hours."
        )


class StorageFailureError(JobTrackerError):
    """
    Raised when the storage layer fails while serving a request.

    Attributes:
        original_error: The underlying exception, if any
    """

    status_code = 503

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)


class AIServiceError(JobTrackerError):
    """Raised when the completion backend fails to produce a result"""

    status_code = 502


class NotFoundError(JobTrackerError):
    status_code = 404


class PermissionDeniedError(JobTrackerError):
    status_code = 403


class AuthenticationError(JobTrackerError):
    status_code = 401
