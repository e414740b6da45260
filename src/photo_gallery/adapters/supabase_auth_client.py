"""Supabase Auth (GoTrue) REST client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from photo_gallery.adapters.supabase_errors import raise_for_backend_error

_AUTH_MESSAGE_KEYS = ("error_description", "msg", "message")


class AuthClient(Protocol):
    """Interface for Supabase Auth interactions."""

    async def get_user(self, access_token: str) -> dict[str, object]:
        """Resolve the user that owns an access token."""

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> dict[str, object]:
        """Exchange credentials for a token bundle."""

    async def sign_up(self, email: str, password: str) -> dict[str, object]:
        """Create an account and return the signup payload."""

    async def logout(self, access_token: str) -> None:
        """Invalidate an access token."""


@dataclass
class HttpxSupabaseAuthClient(AuthClient):
    """Supabase Auth client implemented with httpx."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, api_key: str) -> "HttpxSupabaseAuthClient":
        """Create an auth client with a managed httpx session."""
        return cls(base_url=base_url, api_key=api_key, http_client=httpx.AsyncClient())

    async def get_user(self, access_token: str) -> dict[str, object]:
        """Fetch the current user via /auth/v1/user."""
        response = await self.http_client.get(
            f"{self.base_url}/auth/v1/user",
            headers=self._headers(access_token),
            timeout=10,
        )
        raise_for_backend_error(response, "Session is not valid", _AUTH_MESSAGE_KEYS)
        return response.json()

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> dict[str, object]:
        """Sign in using the password grant."""
        response = await self.http_client.post(
            f"{self.base_url}/auth/v1/token",
            params={"grant_type": "password"},
            headers=self._headers(),
            json={"email": email, "password": password},
            timeout=10,
        )
        raise_for_backend_error(response, "Could not sign in", _AUTH_MESSAGE_KEYS)
        return response.json()

    async def sign_up(self, email: str, password: str) -> dict[str, object]:
        """Register a new account."""
        response = await self.http_client.post(
            f"{self.base_url}/auth/v1/signup",
            headers=self._headers(),
            json={"email": email, "password": password},
            timeout=10,
        )
        raise_for_backend_error(
            response, "Could not create the account", _AUTH_MESSAGE_KEYS
        )
        return response.json()

    async def logout(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        response = await self.http_client.post(
            f"{self.base_url}/auth/v1/logout",
            headers=self._headers(access_token),
            timeout=10,
        )
        raise_for_backend_error(response, "Could not sign out", _AUTH_MESSAGE_KEYS)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.api_key}
        if access_token is not None:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers
