"""Error taxonomy. Each error carries the HTTP status it maps to at the API boundary."""

from typing import Any, Optional


class PriceTrackerError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PriceTrackerError):
    status_code = 400
    default_message = "Invalid request"


class AuthorizationError(PriceTrackerError):
    """Missing key is 401, a key that does not match is 403."""

    status_code = 401
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None, details: Any = None, status_code: int = 401) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class NotFoundError(PriceTrackerError):
    status_code = 404
    default_message = "Not found"


class ConflictError(PriceTrackerError):
    status_code = 409
    default_message = "Already exists"


class NoActiveCoinsError(PriceTrackerError):
    status_code = 400
    default_message = "No active coins to refresh"


class UpstreamFetchError(PriceTrackerError):
    status_code = 500
    default_message = "Failed to fetch prices"


class StorageError(PriceTrackerError):
    status_code = 500
    default_message = "Database error"
