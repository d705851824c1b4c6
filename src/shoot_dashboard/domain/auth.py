"""Authentication context passed to backend calls."""

from dataclasses import dataclass

from shoot_dashboard.errors import MissingAuthTokenError


@dataclass(frozen=True)
class AuthSession:
    """Bearer token and optional impersonation target for one caller."""

    token: str | None = None
    impersonated_user_id: str | None = None

    @classmethod
    def from_authorization(
        cls, authorization: str | None, impersonate: str | None = None
    ) -> "AuthSession":
        """Build a session from an Authorization header value."""
        token = None
        if authorization:
            scheme, _, value = authorization.strip().partition(" ")
            if scheme.lower() == "bearer" and value.strip():
                token = value.strip()
        return cls(token=token, impersonated_user_id=impersonate or None)

    def headers(self, *, require_token: bool) -> dict[str, str]:
        """Return request headers, raising when a required token is missing."""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        elif require_token:
            raise MissingAuthTokenError
        if self.impersonated_user_id:
            headers["X-Impersonate-User-Id"] = self.impersonated_user_id
        return headers
