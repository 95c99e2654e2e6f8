from typing import Any


class BaseAppError(Exception):
    def __init__(self, message: str = "An error occured"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(BaseAppError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ValidationError(BaseAppError):
    def __init__(self, message: str = "Validation failed", details: Any = None):
        super().__init__(message)
        self.details = details


class AppNetworkError(BaseAppError):
    pass


class SourceUnavailableError(AppNetworkError):
    """An external data source could not be fetched or returned unusable data."""

    def __init__(self, source: str, reason: str | None = None):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not fetch data from {source}")
