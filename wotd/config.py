# wotd/config.py
from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/words.db"
DEFAULT_DICTIONARY_PATH = "./dictionary.json"


class Settings(BaseModel):
    dictionary_path: str = DEFAULT_DICTIONARY_PATH
    timezone: str = "Pacific/Auckland"   # day boundaries follow this zone

    # image store (public bucket over HTTP)
    bucket_name: Optional[str] = None
    image_base_url: str = "https://storage.googleapis.com"

    # social destinations
    twitter_access_token: Optional[str] = None
    twitter_api_base: str = "https://api.twitter.com"
    mastodon_server: Optional[str] = None
    mastodon_access_token: Optional[str] = None

    http_timeout: float = 30.0

    log_level: str = "INFO"
    log_format: str = "json"

    database_url: str = DEFAULT_DATABASE_URL


def load_settings() -> Settings:
    return Settings(
        dictionary_path=os.getenv("WOTD_DICTIONARY_PATH", DEFAULT_DICTIONARY_PATH),
        timezone=os.getenv("WOTD_TIMEZONE", "Pacific/Auckland"),
        bucket_name=os.getenv("WOTD_BUCKET_NAME"),
        image_base_url=os.getenv("WOTD_IMAGE_BASE_URL", "https://storage.googleapis.com"),
        twitter_access_token=os.getenv("WOTD_TWITTER_ACCESS_TOKEN"),
        twitter_api_base=os.getenv("WOTD_TWITTER_API_BASE", "https://api.twitter.com"),
        mastodon_server=os.getenv("WOTD_MASTODON_SERVER"),
        mastodon_access_token=os.getenv("WOTD_MASTODON_ACCESS_TOKEN"),
        http_timeout=float(os.getenv("WOTD_HTTP_TIMEOUT", "30")),
        log_level=os.getenv("WOTD_LOG_LEVEL", "INFO"),
        log_format=os.getenv("WOTD_LOG_FORMAT", "json"),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
    )


@lru_cache
def get_settings() -> Settings:
    """FastAPI dependency; environment is read once per process."""
    return load_settings()
