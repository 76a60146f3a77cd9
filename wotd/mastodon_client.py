# wotd/mastodon_client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from .errors import PostingError
from .schema import DictionaryEntry


def toot_text(entry: DictionaryEntry) -> str:
    return f"{entry.word}: {entry.meaning}"


class MastodonClient:
    def __init__(self, http: httpx.AsyncClient, server: str, access_token: str, logger):
        if not server or not access_token:
            raise PostingError("Mastodon server or access token is not configured", status_code=500)
        self.http = http
        self.server = server.rstrip("/")
        self.access_token = access_token
        self.logger = logger

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def upload_media(self, media: bytes, description: str = "") -> str:
        data = {"description": description} if description else None
        try:
            r = await self.http.post(
                f"{self.server}/api/v2/media",
                headers=self._headers,
                files={"file": ("image", media, "application/octet-stream")},
                data=data,
            )
            r.raise_for_status()
            media_id = str(r.json()["id"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            self.logger.error("mastodon_media_upload_failed", error=str(e), attribution=description)
            raise PostingError("Failed sending the toot with media", cause=e).with_context(
                "operation", "mastodon_media_upload"
            ) from e

        self.logger.debug("mastodon_media_uploaded", attachment_id=media_id)
        return media_id

    async def toot(self, entry: DictionaryEntry, media: Optional[bytes] = None) -> str:
        """Post the word (with its image when given). Returns the status id."""
        content = toot_text(entry)
        media_ids: List[str] = []
        if media:
            media_ids.append(await self.upload_media(media, entry.photo_attribution))

        payload: Dict[str, Any] = {"status": content}
        if media_ids:
            payload["media_ids"] = media_ids

        try:
            r = await self.http.post(f"{self.server}/api/v1/statuses", headers=self._headers, json=payload)
            r.raise_for_status()
            status_id = str(r.json()["id"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            self.logger.error("toot_failed", word=entry.word, has_media=bool(media_ids), error=str(e))
            raise (
                PostingError("Failed sending the toot", cause=e)
                .with_context("word", entry.word)
                .with_context("has_media", bool(media_ids))
                .with_context("operation", "mastodon_post")
            ) from e

        self.logger.info("toot_sent", toot_id=status_id, word=entry.word, has_media=bool(media_ids))
        return status_id
