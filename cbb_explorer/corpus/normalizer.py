"""Record normalizer: raw episode records -> chronologically indexed Episodes."""

import datetime as dt
import logging
import re
from collections.abc import Iterable

from dateutil import parser as dtparse

from cbb_explorer.models import Episode, RawEpisode

logger = logging.getLogger(__name__)

_NUMERIC_EPISODE = re.compile(r"^[0-9]+(\.[0-9]+)?$")
_LIVE_WORD = re.compile(r"\blive\b", re.IGNORECASE)

# Missing components of partial dates ("2009", "May 2009") fill from here
_PARSE_DEFAULT = dt.datetime(1970, 1, 1)


def is_live_episode(number: str | None, title: str | None) -> bool:
    """True for tour/live recordings.

    Either the episode number is not a plain integer or decimal
    ("from the road", "BO2013.1"), or the title has "live" as a standalone
    word ("Live from Austin", but not "alive" or "deliver").
    """
    if number and not _NUMERIC_EPISODE.match(number):
        return True
    return bool(_LIVE_WORD.search(title or ""))


def parse_date(value: str | None) -> dt.date | None:
    """Parse a date string. Returns None when it cannot be parsed."""
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return dtparse.parse(text, default=_PARSE_DEFAULT).date()
    except (dtparse.ParserError, OverflowError, ValueError, TypeError):
        return None


def week_of_year(d: dt.date) -> int:
    """0-based week of the year, counted from Jan 1."""
    return (d - dt.date(d.year, 1, 1)).days // 7


def normalize_episodes(raw_episodes: Iterable[RawEpisode]) -> tuple[list[Episode], int]:
    """Normalize raw records into a dense, chronologically indexed sequence.

    Records whose date does not parse are dropped. Ties on date keep input
    order. Returns (episodes, dropped_count).
    """
    parsed: list[tuple[dt.date, RawEpisode]] = []
    dropped = 0
    for raw in raw_episodes:
        d = parse_date(raw.date)
        if d is None:
            logger.debug("Dropping episode %r: unparseable date %r", raw.title, raw.date)
            dropped += 1
            continue
        parsed.append((d, raw))

    parsed.sort(key=lambda pair: pair[0])

    episodes: list[Episode] = []
    for idx, (d, raw) in enumerate(parsed):
        num_guests = len(raw.guests)
        num_characters = len(raw.characters)
        episodes.append(Episode(
            index=idx,
            title=raw.title,
            number=raw.number,
            date=d,
            guests=tuple(raw.guests),
            characters=tuple(raw.characters),
            image_url=raw.image_url or None,
            year=d.year,
            week=week_of_year(d),
            num_guests=num_guests,
            num_characters=num_characters,
            characters_per_guest=num_characters / num_guests if num_guests else None,
            is_live=is_live_episode(raw.number, raw.title),
        ))

    logger.info("Normalized %d episodes (%d dropped)", len(episodes), dropped)
    return episodes, dropped
