"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from photo_gallery.adapters.local_storage import JsonFileStorage
from photo_gallery.adapters.supabase_auth_client import HttpxSupabaseAuthClient
from photo_gallery.adapters.supabase_clients import SupabaseClientFactory
from photo_gallery.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_gallery.adapters.supabase_storage_client import (
    HttpxSupabaseStorageClient,
)
from photo_gallery.config import Settings
from photo_gallery.services.auth import AuthService
from photo_gallery.services.gallery import GalleryController
from photo_gallery.services.upload import UploadController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    gallery_controller: GalleryController
    upload_controller: UploadController
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    auth_client = HttpxSupabaseAuthClient.create(
        base_url=resolved_settings.supabase_url,
        api_key=resolved_settings.supabase_anon_key,
    )
    storage_client = HttpxSupabaseStorageClient.create(
        base_url=resolved_settings.supabase_url,
        api_key=resolved_settings.supabase_anon_key,
    )
    photo_repository = SupabasePhotoRepository(
        client_factory=SupabaseClientFactory(
            url=resolved_settings.supabase_url,
            anon_key=resolved_settings.supabase_anon_key,
        ),
        table_name=resolved_settings.gallery_table,
    )
    auth_service = AuthService(
        client=auth_client,
        storage=JsonFileStorage(Path(resolved_settings.session_storage_path)),
    )
    gallery_controller = GalleryController(
        repository=photo_repository,
        date_locale=resolved_settings.date_locale,
        configured=resolved_settings.is_configured,
    )
    upload_controller = UploadController(
        storage_client=storage_client,
        repository=photo_repository,
        auth_service=auth_service,
        anon_key=resolved_settings.supabase_anon_key,
        bucket=resolved_settings.storage_bucket,
        max_file_size=resolved_settings.max_upload_bytes,
    )

    async def close_resources() -> None:
        await auth_client.close()
        await storage_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        gallery_controller=gallery_controller,
        upload_controller=upload_controller,
        close_resources=close_resources,
    )
