"""Helpers for turning Supabase error responses into exceptions."""

import httpx

from photo_gallery.domain.errors import BackendRejectedError


def raise_for_backend_error(
    response: httpx.Response,
    default_message: str,
    message_keys: tuple[str, ...] = ("message",),
) -> None:
    """Raise BackendRejectedError with the body's message for non-2xx replies."""
    if response.is_success:
        return
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    message = None
    if isinstance(payload, dict):
        for key in message_keys:
            value = payload.get(key)
            if isinstance(value, str) and value:
                message = value
                break
    raise BackendRejectedError(
        message or default_message, status_code=response.status_code
    )
