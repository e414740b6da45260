"""Gallery listing, tag filtering and the photo detail overlay."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol

import httpx
from babel.dates import format_date, format_time

from photo_gallery.domain.errors import BackendRejectedError
from photo_gallery.domain.photos import PhotoRecord
from photo_gallery.domain.results import Failure, FailureKind, Result, Success
from photo_gallery.services.visibility import VisibilityObserver

logger = logging.getLogger(__name__)

ALL_TAGS = "all"
LOAD_FAILED_MESSAGE = "Could not load the photos. Please try again."
NOT_CONFIGURED_MESSAGE = (
    "Supabase configuration not found. Check the environment variables."
)


class PhotoRepository(Protocol):
    """Persistence interface for gallery photos."""

    def list_photos(self) -> list[dict[str, object]]:
        """Return all photo rows ordered by creation time, newest first."""

    def insert_photo(
        self, row: dict[str, object], access_token: str | None = None
    ) -> None:
        """Insert a photo row."""


class GalleryStatus(Enum):
    """Which block of the gallery page is shown."""

    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


class OverlayTrigger(Enum):
    """Ways the detail overlay can be dismissed."""

    CLOSE_BUTTON = "close_button"
    BACKDROP = "backdrop"
    ESCAPE = "escape"


@dataclass(eq=False)
class PhotoCard:
    """A rendered gallery card whose image loads on first visibility."""

    photo: PhotoRecord
    date_label: str
    image_src: str | None = None

    def reveal(self) -> None:
        self.image_src = self.photo.image_url


@dataclass
class PhotoOverlay:
    """Detail overlay with two states: closed and open on a photo."""

    photo: PhotoRecord | None = None
    date_label: str = ""

    @property
    def is_open(self) -> bool:
        return self.photo is not None

    def open(self, photo: PhotoRecord, date_label: str) -> None:
        self.photo = photo
        self.date_label = date_label

    def close(self, trigger: OverlayTrigger) -> bool:
        """Close the overlay; return False when it was not open."""
        if not self.is_open:
            return False
        logger.debug("Closing photo overlay via %s", trigger.value)
        self.photo = None
        self.date_label = ""
        return True


def derive_tags(photos: list[PhotoRecord]) -> list[str]:
    """Return the unique tags of the photos in first-seen order."""
    tags: dict[str, None] = {}
    for photo in photos:
        for tag in photo.tags:
            tags.setdefault(tag.strip(), None)
    return list(tags)


def filter_photos(photos: list[PhotoRecord], tag: str) -> list[PhotoRecord]:
    if tag == ALL_TAGS:
        return list(photos)
    return [photo for photo in photos if tag in photo.tags]


def format_card_date(value: datetime | None, locale: str) -> str:
    """Format a creation timestamp as a localized long date."""
    if value is None:
        return ""
    return format_date(value, format="long", locale=locale)


def format_overlay_date(value: datetime | None, locale: str) -> str:
    """Format a creation timestamp as a localized long date with hours and minutes."""
    if value is None:
        return ""
    time_label = format_time(value, "HH:mm", locale=locale)
    return f"{format_card_date(value, locale)}, {time_label}"


@dataclass
class GalleryController:
    """Owns the loaded photos, the active filter, the cards and the overlay."""

    repository: PhotoRepository
    date_locale: str = "es_ES"
    configured: bool = True
    photos: list[PhotoRecord] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    current_filter: str = ALL_TAGS
    status: GalleryStatus = GalleryStatus.LOADING
    error_message: str | None = None
    cards: list[PhotoCard] = field(default_factory=list)
    overlay: PhotoOverlay = field(default_factory=PhotoOverlay)
    observer: VisibilityObserver[PhotoCard] = field(
        default_factory=VisibilityObserver
    )

    def load(self) -> Result[list[PhotoRecord]]:
        """Fetch every photo and rebuild tags, filter buttons and cards."""
        self.status = GalleryStatus.LOADING
        self.error_message = None
        if not self.configured:
            logger.error("Supabase is not configured")
            return self._fail(FailureKind.TRANSPORT, NOT_CONFIGURED_MESSAGE)
        try:
            rows = self.repository.list_photos()
            photos = _records_from_rows(rows)
        except BackendRejectedError as exc:
            logger.error("Loading photos was rejected: %s", exc.message)
            return self._fail(FailureKind.BACKEND_REJECTED, LOAD_FAILED_MESSAGE)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Loading photos failed: %s", exc)
            return self._fail(FailureKind.TRANSPORT, LOAD_FAILED_MESSAGE)

        self.photos = photos
        self.tags = derive_tags(photos)
        self.overlay.close(OverlayTrigger.CLOSE_BUTTON)
        self.filter_by_tag(ALL_TAGS)
        return Success(photos)

    def filter_by_tag(self, tag: str) -> list[PhotoCard]:
        """Re-render cards from the loaded photos without fetching again."""
        self.current_filter = tag
        self._render(filter_photos(self.photos, tag))
        return self.cards

    def reveal(self, cards: list[PhotoCard]) -> int:
        """Report cards that scrolled into view; images load once per card."""
        return self.observer.notify_visible(cards)

    def open_detail(self, photo_id: str) -> PhotoRecord | None:
        """Open the overlay on a loaded photo."""
        for photo in self.photos:
            if photo.id == photo_id:
                self.overlay.open(
                    photo, format_overlay_date(photo.created_at, self.date_locale)
                )
                return photo
        return None

    def close_detail(self, trigger: OverlayTrigger) -> bool:
        return self.overlay.close(trigger)

    def _render(self, photos: list[PhotoRecord]) -> None:
        self.observer.disconnect()
        self.cards = [
            PhotoCard(
                photo=photo,
                date_label=format_card_date(photo.created_at, self.date_locale),
            )
            for photo in photos
        ]
        for card in self.cards:
            self.observer.observe(card, PhotoCard.reveal)
        self.status = GalleryStatus.READY if self.cards else GalleryStatus.EMPTY

    def _fail(self, kind: FailureKind, message: str) -> Failure:
        self.status = GalleryStatus.ERROR
        self.error_message = message
        return Failure(kind, message)


def _records_from_rows(rows: list[dict[str, object]]) -> list[PhotoRecord]:
    """Convert table rows, skipping ones without a title or image url.

    A malformed timestamp raises ValueError.
    """
    photos = []
    for row in rows:
        photo = PhotoRecord.from_row(row)
        if photo is None:
            logger.warning("Skipping photo row without title or image url")
            continue
        photos.append(photo)
    return photos
