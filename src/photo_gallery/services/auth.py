"""Sign-in, registration and session persistence."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import ValidationError

from photo_gallery.adapters.supabase_auth_client import AuthClient
from photo_gallery.domain.auth import AuthSession
from photo_gallery.domain.errors import BackendRejectedError
from photo_gallery.domain.results import Failure, FailureKind, Result, Success

logger = logging.getLogger(__name__)

SESSION_STORAGE_KEY = "supabase.auth.token"
MIN_PASSWORD_LENGTH = 6
LOGIN_REDIRECT_DELAY_SECONDS = 1.0
REGISTER_REDIRECT_DELAY_SECONDS = 1.5
GALLERY_PAGE = "/"
LOGIN_PAGE = "/login"

EMPTY_FIELDS_MESSAGE = "Please fill in all fields"
SHORT_PASSWORD_MESSAGE = (
    f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
)
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
LOGIN_FAILED_MESSAGE = "Could not sign in. Check your credentials."
REGISTER_FAILED_MESSAGE = "Could not create the account. Please try again."


class KeyValueStorage(Protocol):
    """Interface for the local key/value store holding the session."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Delete a key if present."""


@dataclass(frozen=True)
class AuthOutcome:
    """What the page should do after a successful auth action."""

    message: str
    redirect_to: str | None = None
    redirect_delay_seconds: float = 0.0
    reset_form: bool = False


@dataclass
class AuthService:
    """Application service for the sign-in page and the shared session."""

    client: AuthClient
    storage: KeyValueStorage

    async def check_session(self) -> dict[str, object] | None:
        """Return the signed-in user, or None when there is no usable session."""
        token = self.get_access_token()
        if not token:
            return None
        try:
            return await self.client.get_user(token)
        except (BackendRejectedError, httpx.HTTPError, ValueError) as exc:
            logger.info("Stored session is not usable: %s", exc)
            return None

    async def login(self, email: str, password: str) -> Result[AuthOutcome]:
        """Sign in with email and password and persist the returned tokens."""
        email = email.strip()
        if not email or not password:
            return Failure(FailureKind.VALIDATION, EMPTY_FIELDS_MESSAGE)
        try:
            payload = await self.client.sign_in_with_password(email, password)
            session = AuthSession.model_validate(payload)
        except BackendRejectedError as exc:
            logger.warning("Sign-in rejected for %s: %s", email, exc.message)
            return Failure(FailureKind.BACKEND_REJECTED, exc.message)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Sign-in failed for %s: %s", email, exc)
            return Failure(FailureKind.TRANSPORT, LOGIN_FAILED_MESSAGE)
        self._save_session(session)
        return Success(
            AuthOutcome(
                message="Signed in! Redirecting...",
                redirect_to=GALLERY_PAGE,
                redirect_delay_seconds=LOGIN_REDIRECT_DELAY_SECONDS,
            )
        )

    async def register(
        self, email: str, password: str, password_confirm: str
    ) -> Result[AuthOutcome]:
        """Create an account, signing in right away when no confirmation is needed."""
        email = email.strip()
        if not email or not password or not password_confirm:
            return Failure(FailureKind.VALIDATION, EMPTY_FIELDS_MESSAGE)
        if len(password) < MIN_PASSWORD_LENGTH:
            return Failure(FailureKind.VALIDATION, SHORT_PASSWORD_MESSAGE)
        if password != password_confirm:
            return Failure(FailureKind.VALIDATION, PASSWORD_MISMATCH_MESSAGE)
        try:
            payload = await self.client.sign_up(email, password)
            if _needs_email_confirmation(payload):
                return Success(
                    AuthOutcome(
                        message=(
                            "Account created! Check your email to confirm "
                            "your account."
                        ),
                        reset_form=True,
                    )
                )
            session = AuthSession.model_validate(payload)
        except BackendRejectedError as exc:
            logger.warning("Sign-up rejected for %s: %s", email, exc.message)
            return Failure(FailureKind.BACKEND_REJECTED, exc.message)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Sign-up failed for %s: %s", email, exc)
            return Failure(FailureKind.TRANSPORT, REGISTER_FAILED_MESSAGE)
        self._save_session(session)
        return Success(
            AuthOutcome(
                message="Account created! Redirecting...",
                redirect_to=GALLERY_PAGE,
                redirect_delay_seconds=REGISTER_REDIRECT_DELAY_SECONDS,
            )
        )

    async def logout(self) -> str:
        """Revoke the token best-effort, clear the session and return the login page."""
        token = self.get_access_token()
        if token:
            try:
                await self.client.logout(token)
            except (BackendRejectedError, httpx.HTTPError) as exc:
                logger.warning("Sign-out request failed: %s", exc)
        self.storage.remove_item(SESSION_STORAGE_KEY)
        return LOGIN_PAGE

    def get_access_token(self) -> str:
        """Return the stored access token, or an empty string."""
        session = self._load_session()
        return session.access_token if session else ""

    def get_current_user(self) -> dict[str, object] | None:
        """Return the stored user profile snapshot."""
        session = self._load_session()
        return session.user if session else None

    def is_authenticated(self) -> bool:
        return bool(self.get_access_token())

    def _load_session(self) -> AuthSession | None:
        raw = self.storage.get_item(SESSION_STORAGE_KEY)
        if not raw:
            return None
        try:
            return AuthSession.model_validate_json(raw)
        except ValidationError:
            return None

    def _save_session(self, session: AuthSession) -> None:
        self.storage.set_item(SESSION_STORAGE_KEY, session.model_dump_json())


def _needs_email_confirmation(payload: dict[str, object]) -> bool:
    """Whether a signup payload describes an account that is not usable yet."""
    user = payload.get("user")
    if user is None and "access_token" not in payload:
        user = payload
    if not isinstance(user, dict):
        return False
    return not user.get("confirmed_at")
