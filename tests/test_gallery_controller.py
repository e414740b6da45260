"""Tests for the gallery controller."""

from datetime import UTC, datetime

from photo_gallery.domain.errors import BackendRejectedError
from photo_gallery.domain.photos import PhotoRecord
from photo_gallery.domain.results import Failure, FailureKind, Success
from photo_gallery.services.gallery import (
    ALL_TAGS,
    GalleryController,
    GalleryStatus,
    OverlayTrigger,
    derive_tags,
    filter_photos,
    format_card_date,
    format_overlay_date,
)
from tests.conftest import InMemoryPhotoRepository, photo_row, transport_error


def _controller(rows: list[dict[str, object]]) -> GalleryController:
    return GalleryController(repository=InMemoryPhotoRepository(rows=rows))


def test_empty_load_shows_empty_state_and_no_tags() -> None:
    controller = _controller([])

    result = controller.load()

    assert isinstance(result, Success)
    assert controller.status is GalleryStatus.EMPTY
    assert controller.tags == []
    assert controller.cards == []
    assert controller.current_filter == ALL_TAGS


def test_tag_vocabulary_and_filter() -> None:
    controller = _controller(
        [
            photo_row(id="1", tags=["a", "b"]),
            photo_row(id="2", tags=["b", "c"]),
        ]
    )
    controller.load()

    assert set(controller.tags) == {"a", "b", "c"}
    cards = controller.filter_by_tag("b")
    assert [card.photo.id for card in cards] == ["1", "2"]
    assert [card.photo.id for card in controller.filter_by_tag("a")] == ["1"]
    assert len(controller.filter_by_tag(ALL_TAGS)) == 2


def test_filtering_does_not_refetch() -> None:
    repository = InMemoryPhotoRepository(rows=[photo_row(tags=["x"])])
    controller = GalleryController(repository=repository)
    controller.load()

    controller.filter_by_tag("x")
    controller.filter_by_tag("missing")

    assert repository.list_calls == 1
    assert controller.status is GalleryStatus.EMPTY


def test_load_failure_switches_to_error_state() -> None:
    repository = InMemoryPhotoRepository(
        list_error=BackendRejectedError("permission denied", 401)
    )
    controller = GalleryController(repository=repository)

    result = controller.load()

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.BACKEND_REJECTED
    assert controller.status is GalleryStatus.ERROR
    assert controller.error_message


def test_load_transport_failure() -> None:
    repository = InMemoryPhotoRepository(list_error=transport_error())
    controller = GalleryController(repository=repository)

    result = controller.load()

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.TRANSPORT
    assert controller.status is GalleryStatus.ERROR


def test_unconfigured_gallery_reports_error_without_fetching() -> None:
    repository = InMemoryPhotoRepository(rows=[photo_row()])
    controller = GalleryController(repository=repository, configured=False)

    result = controller.load()

    assert isinstance(result, Failure)
    assert repository.list_calls == 0
    assert controller.status is GalleryStatus.ERROR


def test_rows_without_title_or_image_are_skipped() -> None:
    controller = _controller(
        [
            photo_row(id="1"),
            photo_row(id="2", title=""),
            photo_row(id="3", image_url=None),
            photo_row(id="4", tags=None),
        ]
    )
    controller.load()

    assert [photo.id for photo in controller.photos] == ["1", "4"]
    assert controller.photos[1].tags == []


def test_malformed_timestamp_ends_in_error_state() -> None:
    controller = _controller([photo_row(id="1"), photo_row(created_at="not-a-date")])

    result = controller.load()

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.TRANSPORT
    assert controller.status is GalleryStatus.ERROR
    assert controller.photos == []


def test_non_mapping_rows_are_skipped() -> None:
    controller = _controller([photo_row(id="1"), "garbage"])  # type: ignore[list-item]

    result = controller.load()

    assert isinstance(result, Success)
    assert [photo.id for photo in controller.photos] == ["1"]


def test_cards_load_images_once_when_visible() -> None:
    controller = _controller([photo_row(id="1"), photo_row(id="2")])
    controller.load()
    first, second = controller.cards

    assert first.image_src is None
    assert controller.reveal([first]) == 1
    assert first.image_src == first.photo.image_url
    assert second.image_src is None

    first.image_src = None
    assert controller.reveal([first]) == 0
    assert first.image_src is None


def test_overlay_opens_and_closes_on_each_trigger() -> None:
    controller = _controller([photo_row(id="1")])
    controller.load()

    for trigger in OverlayTrigger:
        assert controller.open_detail("1") is not None
        assert controller.overlay.is_open
        assert controller.close_detail(trigger) is True
        assert not controller.overlay.is_open


def test_escape_does_nothing_while_closed() -> None:
    controller = _controller([photo_row(id="1")])
    controller.load()

    assert controller.close_detail(OverlayTrigger.ESCAPE) is False
    assert controller.open_detail("unknown") is None
    assert not controller.overlay.is_open


def test_derive_tags_and_filter_helpers() -> None:
    photos = [
        PhotoRecord(title="A", image_url="u1", tags=["a", "b"]),
        PhotoRecord(title="B", image_url="u2", tags=["b", "c"]),
    ]

    assert derive_tags(photos) == ["a", "b", "c"]
    assert filter_photos(photos, "b") == photos
    assert filter_photos(photos, "c") == [photos[1]]


def test_dates_use_locale_rules() -> None:
    created = datetime(2024, 3, 5, 10, 30, tzinfo=UTC)

    assert format_card_date(created, "es_ES") == "5 de marzo de 2024"
    assert format_card_date(created, "en_US") == "March 5, 2024"
    assert format_overlay_date(created, "es_ES") == "5 de marzo de 2024, 10:30"
    assert format_card_date(None, "es_ES") == ""
