"""Exceptions raised by dashboard services and backend adapters."""


class DashboardError(Exception):
    """Base class for failures surfaced to dashboard users."""

    title = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingAuthTokenError(DashboardError):
    """Raised before an admin call when no bearer token is available."""

    title = "Authentication required"

    def __init__(self, message: str = "Please sign in again to continue.") -> None:
        super().__init__(message)


class BackendRequestError(DashboardError):
    """The backend answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or {}


class BackendUnavailableError(DashboardError):
    """The backend could not be reached or returned an unreadable body."""

    def __init__(
        self, message: str = "Something went wrong. Please try again."
    ) -> None:
        super().__init__(message)


class ConfirmationRequiredError(DashboardError):
    """A destructive action was requested without explicit confirmation."""

    title = "Confirmation required"


class InvalidSqftRangesError(DashboardError):
    """Square footage tiers of a service are inverted or overlap."""

    title = "Invalid pricing tiers"
