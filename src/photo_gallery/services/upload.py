"""Image selection and the two-step upload flow."""

import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import httpx

from photo_gallery.adapters.supabase_storage_client import StorageClient
from photo_gallery.domain.errors import BackendRejectedError
from photo_gallery.domain.photos import SelectedFile, UploadForm
from photo_gallery.domain.results import Failure, FailureKind, Result, Success
from photo_gallery.services.auth import AuthService
from photo_gallery.services.gallery import PhotoRepository

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
SUCCESS_HIDE_AFTER_SECONDS = 5.0
ERROR_HIDE_AFTER_SECONDS = 8.0
RESET_DELAY_SECONDS = 2.0

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class ProgressStep:
    """Presentational checkpoint of an upload."""

    percent: int
    label: str


PREPARING = ProgressStep(0, "Preparing upload...")
UPLOADING = ProgressStep(30, "Uploading image...")
SAVING = ProgressStep(70, "Saving details...")
DONE = ProgressStep(100, "Done!")

ProgressReporter = Callable[[ProgressStep], None]


@dataclass(frozen=True)
class UploadOutcome:
    """Result of a completed upload."""

    image_url: str
    object_path: str
    message: str = "Photo uploaded successfully!"
    hide_after_seconds: float = SUCCESS_HIDE_AFTER_SECONDS
    reset_after_seconds: float = RESET_DELAY_SECONDS


class _UploadStepError(Exception):
    def __init__(self, kind: FailureKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def random_suffix(length: int = 6) -> str:
    """Return a short random base36 string."""
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


def build_object_path(filename: str, now: datetime, suffix: str) -> str:
    """Name an object after the upload time, a random suffix and the extension."""
    millis = int(now.timestamp() * 1000)
    extension = filename.rsplit(".", 1)[-1]
    return f"{millis}-{suffix}.{extension}"


def parse_tags(raw: str) -> list[str]:
    """Split a comma-separated tags field, dropping blank entries."""
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


@dataclass
class UploadController:
    """Holds the selected file and drives storage upload then metadata insert."""

    storage_client: StorageClient
    repository: PhotoRepository
    auth_service: AuthService
    anon_key: str
    bucket: str = "photos"
    max_file_size: int = MAX_FILE_SIZE
    selected_file: SelectedFile | None = None
    submitting: bool = False
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))
    suffix_factory: Callable[[], str] = random_suffix

    def select_file(self, file: SelectedFile | None) -> Result[str | None]:
        """Validate and keep a chosen image; return its preview data URL."""
        if file is None:
            self.selected_file = None
            return Success(None)
        if not file.content_type.startswith("image/"):
            self.selected_file = None
            return Failure(
                FailureKind.VALIDATION, "Please choose a valid image file"
            )
        if file.size > self.max_file_size:
            self.selected_file = None
            limit_mb = self.max_file_size // (1024 * 1024)
            return Failure(
                FailureKind.VALIDATION,
                f"The image is too large. Maximum size: {limit_mb}MB",
            )
        self.selected_file = file
        return Success(file.to_data_url())

    async def submit(
        self, form: UploadForm, progress: ProgressReporter | None = None
    ) -> Result[UploadOutcome]:
        """Upload the selected image, then record its metadata."""
        report = progress or (lambda _step: None)
        file = self.selected_file
        if file is None:
            return Failure(FailureKind.VALIDATION, "Please choose an image")
        if not form.title.strip():
            return Failure(FailureKind.VALIDATION, "Please enter a title")

        self.submitting = True
        report(PREPARING)
        object_path = build_object_path(
            file.filename, self.clock(), self.suffix_factory()
        )
        try:
            report(UPLOADING)
            image_url = await self._upload_object(file, object_path)
            report(SAVING)
            self._save_metadata(form, image_url, object_path)
        except _UploadStepError as exc:
            self.submitting = False
            return Failure(exc.kind, exc.message)
        report(DONE)
        logger.info("Uploaded photo %s", object_path)
        return Success(UploadOutcome(image_url=image_url, object_path=object_path))

    def reset(self) -> None:
        """Forget the selected file and re-enable submission."""
        self.selected_file = None
        self.submitting = False

    async def _upload_object(self, file: SelectedFile, object_path: str) -> str:
        token = self.auth_service.get_access_token() or self.anon_key
        try:
            await self.storage_client.upload_object(
                bucket=self.bucket,
                path=object_path,
                content=file.content,
                content_type=file.content_type,
                access_token=token,
            )
        except BackendRejectedError as exc:
            logger.warning("Storage rejected %s: %s", object_path, exc.message)
            raise _UploadStepError(FailureKind.BACKEND_REJECTED, exc.message) from exc
        except httpx.HTTPError as exc:
            logger.warning("Storage upload of %s failed: %s", object_path, exc)
            raise _UploadStepError(
                FailureKind.TRANSPORT, "Failed to upload the image to storage"
            ) from exc
        return self.storage_client.public_url(self.bucket, object_path)

    def _save_metadata(
        self, form: UploadForm, image_url: str, object_path: str
    ) -> None:
        user = self.auth_service.get_current_user()
        description = form.description.strip()
        row: dict[str, object] = {
            "title": form.title.strip(),
            "description": description or None,
            "image_url": image_url,
            "tags": parse_tags(form.tags),
            "user_id": user.get("id") if user else None,
            "created_at": self.clock().isoformat(),
        }
        try:
            self.repository.insert_photo(
                row, access_token=self.auth_service.get_access_token() or None
            )
        except BackendRejectedError as exc:
            logger.warning(
                "Metadata insert rejected, object %s left orphaned: %s",
                object_path,
                exc.message,
            )
            raise _UploadStepError(FailureKind.BACKEND_REJECTED, exc.message) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Metadata insert failed, object %s left orphaned: %s", object_path, exc
            )
            raise _UploadStepError(
                FailureKind.TRANSPORT, "Failed to save the photo details"
            ) from exc
