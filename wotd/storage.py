# wotd/storage.py
from __future__ import annotations

from urllib.parse import quote

import httpx

from .errors import ImageFetchError


class HttpImageStore:
    """Fetches word images from a publicly readable bucket: GET {base_url}/{bucket}/{key}."""

    def __init__(self, http: httpx.AsyncClient, bucket_name: str, logger, base_url: str = "https://storage.googleapis.com"):
        self.http = http
        self.bucket_name = bucket_name
        self.base_url = base_url.rstrip("/")
        self.logger = logger

    def object_url(self, key: str) -> str:
        return f"{self.base_url}/{quote(self.bucket_name)}/{quote(key.lstrip('/'))}"

    async def get_object(self, key: str) -> bytes:
        if not key:
            raise ImageFetchError("Image name is required", status_code=400)

        self.logger.debug("image_fetch", bucket_name=self.bucket_name, object_name=key)
        try:
            r = await self.http.get(self.object_url(key))
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self.logger.error("image_fetch_failed", bucket_name=self.bucket_name, object_name=key, status=status)
            raise (
                ImageFetchError("Failed to acquire image", status_code=404 if status == 404 else None, cause=e)
                .with_context("bucket_name", self.bucket_name)
                .with_context("object_name", key)
            ) from e
        except httpx.HTTPError as e:
            self.logger.error("image_fetch_failed", bucket_name=self.bucket_name, object_name=key, error=str(e))
            raise (
                ImageFetchError("Failed to acquire image", cause=e)
                .with_context("bucket_name", self.bucket_name)
                .with_context("object_name", key)
            ) from e

        self.logger.debug("image_fetched", object_name=key, media_size=len(r.content))
        return r.content
