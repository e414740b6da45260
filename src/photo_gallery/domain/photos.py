"""Domain models for gallery photos."""

import base64
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PhotoRecord:
    """Photo metadata row as stored in the gallery table."""

    title: str
    image_url: str
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    user_id: str | None = None
    id: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, object]) -> "PhotoRecord | None":
        """Build a record from a table row, or None if it cannot be displayed."""
        if not isinstance(row, dict):
            return None
        title = row.get("title")
        image_url = row.get("image_url")
        if not isinstance(title, str) or not title:
            return None
        if not isinstance(image_url, str) or not image_url:
            return None
        raw_tags = row.get("tags")
        tags = (
            [tag.strip() for tag in raw_tags if isinstance(tag, str) and tag.strip()]
            if isinstance(raw_tags, list)
            else []
        )
        description = row.get("description")
        created_at_raw = row.get("created_at")
        user_id = row.get("user_id")
        photo_id = row.get("id")
        return cls(
            title=title,
            image_url=image_url,
            description=description if isinstance(description, str) else None,
            tags=tags,
            created_at=(
                datetime.fromisoformat(created_at_raw)
                if isinstance(created_at_raw, str) and created_at_raw
                else None
            ),
            user_id=str(user_id) if user_id else None,
            id=str(photo_id) if photo_id is not None else None,
        )


@dataclass(frozen=True)
class SelectedFile:
    """Image chosen for a single upload attempt."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1]

    def to_data_url(self) -> str:
        """Return a base64 data URL usable as a local preview."""
        encoded = base64.b64encode(self.content).decode("utf-8")
        return f"data:{self.content_type};base64,{encoded}"


@dataclass(frozen=True)
class UploadForm:
    """Free-text fields submitted with an upload."""

    title: str
    description: str = ""
    tags: str = ""
