# wotd/main.py
from __future__ import annotations

import re
from datetime import datetime
from typing import AsyncIterator, List, Optional

import httpx
import pytz
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from . import __version__
from .config import Settings, get_settings
from .dictionary import DictionaryLoader
from .errors import WotdError
from .log import configure_logging, get_logger
from .mastodon_client import MastodonClient
from .schema import DailyWord, DictionaryEntry, FriendlyError, PostResponse
from .selector import current_day_of_year, select_by_day_of_year, select_by_position
from .storage import HttpImageStore
from .twitter_client import TwitterClient

HEALTH_CHECK_ROUTE = "/__health-check"
MESSAGES_ROUTE = "/messages"
WORD_INDEX_RE = re.compile(r"[+-]?[0-9]+")

# ───────── App ─────────
app = FastAPI(title="Word of the Day", version=__version__)


@app.on_event("startup")
async def on_startup():
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)


@app.exception_handler(WotdError)
async def wotd_error_handler(request: Request, exc: WotdError):
    get_logger("wotd.http").error(
        "request_failed",
        path=request.url.path,
        status=exc.status_code,
        error=str(exc),
        context=exc.context,
    )
    return JSONResponse(status_code=exc.status_code, content=FriendlyError(message=exc.message).model_dump())


# ───────── Dependencies ─────────
def get_request_logger():
    return get_logger("wotd.http")


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield client


def get_dictionary(
    settings: Settings = Depends(get_settings),
    logger=Depends(get_request_logger),
) -> List[DictionaryEntry]:
    return DictionaryLoader(logger).load(settings.dictionary_path)


def get_day_of_year(settings: Settings = Depends(get_settings)) -> int:
    return current_day_of_year(settings.timezone)


def get_today(settings: Settings = Depends(get_settings)) -> str:
    return datetime.now(pytz.timezone(settings.timezone)).strftime("%Y-%m-%d")


def image_store(http: httpx.AsyncClient, settings: Settings, logger) -> HttpImageStore:
    if not settings.bucket_name:
        raise WotdError("Image bucket is not configured")
    return HttpImageStore(http, settings.bucket_name, logger, base_url=settings.image_base_url)


def parse_word_index(raw: Optional[str]) -> Optional[int]:
    """wordIndex selects by position only when it is a plain signed integer; anything else means today."""
    if raw is None or not WORD_INDEX_RE.fullmatch(raw):
        return None
    return int(raw)


def choose_word(entries: List[DictionaryEntry], word_index: Optional[int], day_of_year: int, logger) -> DictionaryEntry:
    if word_index is not None:
        entry = select_by_position(entries, word_index)
        logger.debug("word_selected_by_index", requested_index=word_index, word_count=len(entries), word=entry.word)
    else:
        entry = select_by_day_of_year(entries, day_of_year)
        logger.debug("word_selected_by_day", day_of_year=day_of_year, word_count=len(entries), word=entry.word)
    return entry


# ───────── Routes ─────────
@app.get(HEALTH_CHECK_ROUTE)
async def health_check(logger=Depends(get_request_logger)):
    logger.debug("health_check")
    return "OK"


@app.get("/daily-word", response_model=DailyWord)
async def daily_word(
    wordIndex: Optional[str] = Query(None, description="1-based position; wraps past the end"),
    entries: List[DictionaryEntry] = Depends(get_dictionary),
    day_of_year: int = Depends(get_day_of_year),
    today: str = Depends(get_today),
    logger=Depends(get_request_logger),
):
    entry = choose_word(entries, parse_word_index(wordIndex), day_of_year, logger)
    return DailyWord(
        date=today,
        day_of_year=day_of_year,
        index=entry.day_index or 0,
        word=entry.word,
        meaning=entry.meaning,
        link=entry.link,
        photo=entry.photo,
        photo_attribution=entry.photo_attribution,
    )


@app.post(MESSAGES_ROUTE, response_model=PostResponse)
async def post_message(
    dest: Optional[str] = Query(None, description="twitter | mastodon"),
    wordIndex: Optional[str] = Query(None, description="1-based position; defaults to today's word"),
    entries: List[DictionaryEntry] = Depends(get_dictionary),
    day_of_year: int = Depends(get_day_of_year),
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
    logger=Depends(get_request_logger),
):
    entry = choose_word(entries, parse_word_index(wordIndex), day_of_year, logger)
    destination = (dest or "").lower()

    if destination == "twitter":
        client = TwitterClient(http, settings.twitter_access_token or "", logger, api_base=settings.twitter_api_base)
        return PostResponse(tweetId=await client.tweet(entry))

    if destination == "mastodon":
        client = MastodonClient(http, settings.mastodon_server or "", settings.mastodon_access_token or "", logger)
        media = None
        if entry.has_media:
            media = await image_store(http, settings, logger).get_object(entry.photo)
        return PostResponse(tootId=await client.toot(entry, media))

    return PostResponse(message="No destination has been selected")


@app.get(MESSAGES_ROUTE)
async def get_image(
    fn: str = Query("", description="image object name"),
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
    logger=Depends(get_request_logger),
):
    content = await image_store(http, settings, logger).get_object(fn)
    return Response(content=content, media_type="application/octet-stream")
