"""Domain models for authentication sessions."""

from typing import Any

from pydantic import BaseModel


class AuthSession(BaseModel):
    """Token bundle persisted after a successful sign-in."""

    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    expires_in: int | None = None
    token_type: str | None = None
    user: dict[str, Any] | None = None
