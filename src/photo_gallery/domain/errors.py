"""Errors raised by backend adapters."""


class BackendRejectedError(Exception):
    """Raised when Supabase answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
