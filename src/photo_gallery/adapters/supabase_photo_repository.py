"""Supabase-backed gallery photo repository."""

from collections.abc import Callable
from dataclasses import dataclass

from postgrest.exceptions import APIError
from postgrest.types import ReturnMethod
from supabase import Client

from photo_gallery.domain.errors import BackendRejectedError
from photo_gallery.services.gallery import PhotoRepository


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for gallery photo rows."""

    client_factory: Callable[[str | None], Client]
    table_name: str = "gallery_photos"

    def list_photos(self) -> list[dict[str, object]]:
        """Return every photo row, newest first."""
        client = self.client_factory(None)
        try:
            response = (
                client.table(self.table_name)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as exc:
            raise BackendRejectedError(exc.message or "Failed to load photos") from exc
        return list(response.data or [])

    def insert_photo(
        self, row: dict[str, object], access_token: str | None = None
    ) -> None:
        """Insert one photo row without asking for it back."""
        client = self.client_factory(access_token)
        try:
            client.table(self.table_name).insert(
                row, returning=ReturnMethod.minimal
            ).execute()
        except APIError as exc:
            raise BackendRejectedError(
                exc.message or "Failed to save the photo details"
            ) from exc
