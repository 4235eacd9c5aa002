"""External link generators for entities and episodes."""

import re
from urllib.parse import quote

WIKI_BASE = "https://comedybangbang.fandom.com/wiki/"
AUDIO_BASE = "https://www.earwolf.com/episode/"


def wiki_url(name: str, base: str = WIKI_BASE) -> str:
    """Fandom wiki page for a guest, character or episode title."""
    return base + quote(name.replace(" ", "_"), safe="!*'()")


def slugify(title: str) -> str:
    slug = title.lower()
    slug = re.sub(r"['‘’]", "", slug)
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def audio_url(title: str, base: str = AUDIO_BASE) -> str:
    """Earwolf episode page, e.g. "Farewell, Mr. Gibbons" -> .../farewell-mr-gibbons/."""
    return f"{base}{slugify(title)}/"
