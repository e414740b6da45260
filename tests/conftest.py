"""Shared test fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

from photo_gallery.adapters.supabase_auth_client import AuthClient
from photo_gallery.adapters.supabase_storage_client import StorageClient
from photo_gallery.config import Settings
from photo_gallery.containers import AppContainer
from photo_gallery.domain.errors import BackendRejectedError
from photo_gallery.services.auth import AuthService, KeyValueStorage
from photo_gallery.services.gallery import GalleryController, PhotoRepository
from photo_gallery.services.upload import UploadController

SUPABASE_URL = "https://example.supabase.co"

TOKEN_RESPONSE: dict[str, object] = {
    "access_token": "access-123",
    "refresh_token": "refresh-456",
    "expires_at": 1893456000,
    "expires_in": 3600,
    "token_type": "bearer",
    "user": {
        "id": "user-1",
        "email": "ana@example.com",
        "confirmed_at": "2024-01-01T00:00:00Z",
    },
}


@dataclass
class InMemoryStorage(KeyValueStorage):
    """In-memory key/value storage for tests."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass
class FakeAuthClient(AuthClient):
    """Fake auth client that records calls and replays canned payloads."""

    user: dict[str, object] | None = None
    sign_in_payload: dict[str, object] = field(
        default_factory=lambda: dict(TOKEN_RESPONSE)
    )
    sign_up_payload: dict[str, object] = field(
        default_factory=lambda: dict(TOKEN_RESPONSE)
    )
    error: Exception | None = None
    logout_error: Exception | None = None
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    async def get_user(self, access_token: str) -> dict[str, object]:
        self.calls.append(("get_user", (access_token,)))
        if self.user is None:
            raise BackendRejectedError("invalid JWT", status_code=401)
        return self.user

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> dict[str, object]:
        self.calls.append(("sign_in", (email, password)))
        if self.error:
            raise self.error
        return self.sign_in_payload

    async def sign_up(self, email: str, password: str) -> dict[str, object]:
        self.calls.append(("sign_up", (email, password)))
        if self.error:
            raise self.error
        return self.sign_up_payload

    async def logout(self, access_token: str) -> None:
        self.calls.append(("logout", (access_token,)))
        if self.logout_error:
            raise self.logout_error


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    rows: list[dict[str, object]] = field(default_factory=list)
    inserted: list[tuple[dict[str, object], str | None]] = field(
        default_factory=list
    )
    list_calls: int = 0
    list_error: Exception | None = None
    insert_error: Exception | None = None
    events: list[str] | None = None

    def list_photos(self) -> list[dict[str, object]]:
        self.list_calls += 1
        if self.list_error:
            raise self.list_error
        return list(self.rows)

    def insert_photo(
        self, row: dict[str, object], access_token: str | None = None
    ) -> None:
        if self.events is not None:
            self.events.append("insert")
        if self.insert_error:
            raise self.insert_error
        self.inserted.append((row, access_token))


@dataclass
class FakeStorageClient(StorageClient):
    """Fake storage client that records uploaded objects."""

    base_url: str = SUPABASE_URL
    uploads: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None
    events: list[str] | None = None

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        access_token: str,
    ) -> None:
        if self.events is not None:
            self.events.append("upload")
        if self.error:
            raise self.error
        self.uploads.append(
            {
                "bucket": bucket,
                "path": path,
                "content": content,
                "content_type": content_type,
                "access_token": access_token,
            }
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"


def photo_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "1",
        "title": "Sunset",
        "description": "Over the bay",
        "image_url": f"{SUPABASE_URL}/storage/v1/object/public/photos/sunset.jpg",
        "tags": ["beach"],
        "created_at": "2024-03-05T10:30:00+00:00",
        "user_id": None,
    }
    row.update(overrides)
    return row


def transport_error() -> httpx.HTTPError:
    return httpx.ConnectError("connection refused")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url=SUPABASE_URL,
        supabase_anon_key="anon-key",
        session_storage_path="/tmp/photo-gallery-test-session.json",
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def auth_service(auth_client: FakeAuthClient, storage: InMemoryStorage) -> AuthService:
    return AuthService(client=auth_client, storage=storage)


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def container(
    settings: Settings,
    auth_service: AuthService,
    photo_repository: InMemoryPhotoRepository,
    storage_client: FakeStorageClient,
) -> AppContainer:
    gallery_controller = GalleryController(
        repository=photo_repository,
        date_locale=settings.date_locale,
        configured=settings.is_configured,
    )
    upload_controller = UploadController(
        storage_client=storage_client,
        repository=photo_repository,
        auth_service=auth_service,
        anon_key=settings.supabase_anon_key,
        bucket=settings.storage_bucket,
        max_file_size=settings.max_upload_bytes,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=auth_service,
        gallery_controller=gallery_controller,
        upload_controller=upload_controller,
        close_resources=close_resources,
    )
