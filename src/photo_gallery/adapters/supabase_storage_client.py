"""Supabase Storage REST client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from photo_gallery.adapters.supabase_errors import raise_for_backend_error


class StorageClient(Protocol):
    """Interface for object storage uploads."""

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        access_token: str,
    ) -> None:
        """Upload raw bytes to a bucket path."""

    def public_url(self, bucket: str, path: str) -> str:
        """Return the public URL for an object."""


@dataclass
class HttpxSupabaseStorageClient(StorageClient):
    """Supabase Storage client implemented with httpx."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, api_key: str) -> "HttpxSupabaseStorageClient":
        """Create a storage client with a managed httpx session."""
        return cls(base_url=base_url, api_key=api_key, http_client=httpx.AsyncClient())

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        access_token: str,
    ) -> None:
        """POST the object body to /storage/v1/object/{bucket}/{path}."""
        response = await self.http_client.post(
            f"{self.base_url}/storage/v1/object/{bucket}/{path}",
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {access_token}",
                "Content-Type": content_type,
            },
            content=content,
            timeout=60,
        )
        raise_for_backend_error(response, "Failed to upload the image to storage")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
