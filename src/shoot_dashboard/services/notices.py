"""User-facing notices built from dashboard failures."""

from dataclasses import asdict, dataclass
from typing import Literal

from shoot_dashboard.errors import (
    BackendRequestError,
    BackendUnavailableError,
    ConfirmationRequiredError,
    DashboardError,
    InvalidSqftRangesError,
    MissingAuthTokenError,
)

NoticeVariant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notice:
    """A titled message shown to the dashboard user."""

    title: str
    description: str
    variant: NoticeVariant = "destructive"

    def as_dict(self) -> dict[str, str]:
        """Return the notice as a JSON-ready mapping."""
        return asdict(self)


def notice_for_error(exc: DashboardError) -> Notice:
    """Describe a failure the way the dashboard shows it."""
    return Notice(title=exc.title, description=exc.message)


def status_for_error(exc: DashboardError) -> int:
    """Return the HTTP status used to report a failure."""
    if isinstance(exc, MissingAuthTokenError):
        return 401
    if isinstance(exc, BackendRequestError):
        return exc.status_code if 400 <= exc.status_code < 500 else 502
    if isinstance(exc, BackendUnavailableError):
        return 502
    if isinstance(exc, ConfirmationRequiredError):
        return 409
    if isinstance(exc, InvalidSqftRangesError):
        return 422
    return 400


def success_notice(description: str, title: str = "Success") -> Notice:
    """Return a non-destructive confirmation notice."""
    return Notice(title=title, description=description, variant="default")
