import pytest
import structlog

from wotd.schema import DictionaryEntry


def make_entry(day, word=None, meaning=None, **kw):
    return DictionaryEntry(
        day_index=day,
        word=word or f"kupu-{day}",
        meaning=meaning or f"tikanga {day}",
        **kw,
    )


def full_schedule(count=366):
    return {day: make_entry(day) for day in range(1, count + 1)}


@pytest.fixture
def logger():
    return structlog.get_logger("wotd.tests")


@pytest.fixture
def schedule():
    """A complete, valid 366-day schedule with some non-ASCII words and media."""
    by_day = full_schedule()
    by_day[1] = make_entry(1, "āe", "yes", photo="ae.jpg", photo_attribution="Photo: Tāne Mahuta")
    by_day[2] = make_entry(2, "aha", "what?", link="https://example.org/aha")
    by_day[366] = make_entry(366, "whakamutunga", "the last one, ā-tau")
    return by_day
