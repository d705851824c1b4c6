"""Request-scoped FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from shoot_dashboard.domain.auth import AuthSession

if TYPE_CHECKING:
    from shoot_dashboard.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the application container."""
    return request.app.state.container


def get_session(
    authorization: str | None = Header(default=None),
    x_impersonate_user_id: str | None = Header(default=None),
) -> AuthSession:
    """Build the caller's auth session from request headers."""
    return AuthSession.from_authorization(authorization, x_impersonate_user_id)
