# wotd/twitter_client.py
from __future__ import annotations

import httpx

from .errors import PostingError
from .schema import DictionaryEntry

TWEETS_PATH = "/2/tweets"


def tweet_text(entry: DictionaryEntry) -> str:
    return f"{entry.word} : {entry.meaning}"


class TwitterClient:
    """Posts to the v2 tweets endpoint with an OAuth 2.0 user-context access token."""

    def __init__(self, http: httpx.AsyncClient, access_token: str, logger, api_base: str = "https://api.twitter.com"):
        if not access_token:
            raise PostingError("Twitter access token is not configured", status_code=500)
        self.http = http
        self.access_token = access_token
        self.api_base = api_base.rstrip("/")
        self.logger = logger

    async def tweet(self, entry: DictionaryEntry) -> str:
        """Returns the id of the new tweet."""
        text = tweet_text(entry)
        try:
            r = await self.http.post(
                f"{self.api_base}{TWEETS_PATH}",
                headers={"Authorization": f"Bearer {self.access_token}"},
                json={"text": text},
            )
            r.raise_for_status()
            tweet_id = str(r.json()["data"]["id"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            self.logger.error("tweet_failed", word=entry.word, error=str(e))
            raise (
                PostingError("Failed sending the tweet", cause=e)
                .with_context("word", entry.word)
                .with_context("operation", "twitter_post")
            ) from e

        self.logger.info("tweet_sent", tweet_id=tweet_id, word=entry.word)
        return tweet_id
