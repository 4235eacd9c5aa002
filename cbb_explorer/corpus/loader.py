"""Read a raw corpus file from disk.

Accepts plain JSON or the JS bundle the web explorer ships with
(``const CBB_DATA = {...};``).
"""

import json
import logging
import re
from pathlib import Path

from cbb_explorer.models import RawCorpus

logger = logging.getLogger(__name__)

_JS_ASSIGNMENT = re.compile(
    r"^\s*(?:(?:const|let|var)\s+)?[A-Za-z_$][\w$.]*\s*=\s*(?P<body>.*?)\s*;?\s*$",
    re.DOTALL,
)


def _strip_js_wrapper(text: str) -> str:
    """Return the object literal from a `const X = {...};` file, else the text unchanged."""
    stripped = text.strip()
    if stripped.startswith("{"):
        return stripped
    match = _JS_ASSIGNMENT.match(stripped)
    if match:
        return match.group("body")
    return stripped


def parse_raw_corpus(text: str) -> RawCorpus:
    """Parse corpus text (JSON or JS-wrapped JSON) into a RawCorpus."""
    body = _strip_js_wrapper(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValueError(f"Corpus is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Corpus must be a JSON object, got {type(data).__name__}")
    return RawCorpus.model_validate(data)


def load_raw_corpus(path: Path) -> RawCorpus:
    """Load a RawCorpus from a .json or .js file."""
    if not path.exists():
        raise FileNotFoundError(f"Corpus file does not exist: {path}")
    raw = parse_raw_corpus(path.read_text(encoding="utf-8"))
    logger.info("Loaded %d raw episodes from %s", len(raw.episodes), path)
    return raw
