#!/usr/bin/env python3
"""CBB explorer MCP server: query guests, characters and episodes."""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from cbb_explorer.config import Config, load_config
from cbb_explorer.corpus.builder import load_corpus
from cbb_explorer.models import Corpus, EntityKind, SortKey
from cbb_explorer.output import query_engine as qe
from cbb_explorer.output.links import audio_url, wiki_url

mcp = FastMCP("cbb_explorer")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_corpus: Corpus | None = None
_config: Config | None = None

_NO_DATA = json.dumps({"error": "no data"})


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_corpus() -> Corpus:
    global _corpus
    if _corpus is None:
        _corpus = load_corpus(_get_config().resolved_data_path)
    return _corpus


@mcp.tool()
def corpus_summary() -> str:
    """Episode, guest and character counts plus the year span of the corpus."""
    try:
        corpus = _get_corpus()
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})
    if not corpus.has_data:
        return _NO_DATA
    return json.dumps(qe.summarize_corpus(corpus))


@mcp.tool()
def get_stats() -> str:
    """Corpus-wide maxima used for scaling (episodes/year, guests, characters, chars per guest)."""
    try:
        corpus = _get_corpus()
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})
    if not corpus.has_data:
        return _NO_DATA
    return json.dumps(corpus.stats.model_dump())


@mcp.tool()
def list_entities(
    kind: str = "guest",
    search: str = "",
    sort: str = "most_appearances",
    limit: Optional[int] = None,
) -> str:
    """List guests or characters. kind: guest|character. sort: most_appearances|most_recent|first_appearance|alphabetical."""
    try:
        corpus = _get_corpus()
        if not corpus.has_data:
            return _NO_DATA
        entities = qe.query_entities(corpus, EntityKind(kind), search, SortKey(sort))
        if limit is None:
            limit = _get_config().interaction.list_limit
        return json.dumps([
            {
                "name": e.name,
                "appearances": e.appearances,
                "first_episode": corpus.episodes[e.first_index].title,
                "last_episode": corpus.episodes[e.last_index].title,
            }
            for e in entities[:limit]
        ])
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_entity(name: str, kind: str = "guest") -> str:
    """Detail for one guest or character: appearances by year, first/last episode, related names."""
    try:
        corpus = _get_corpus()
        if not corpus.has_data:
            return _NO_DATA
        config = _get_config()
        detail = qe.get_entity_detail(
            corpus, EntityKind(kind), name,
            related_limit=config.interaction.related_limit,
        )
        return json.dumps({
            "name": detail.entity.name,
            "kind": detail.entity.kind.value,
            "appearances": detail.entity.appearances,
            "first_episode": {"index": detail.first_episode.index, "title": detail.first_episode.title},
            "last_episode": {"index": detail.last_episode.index, "title": detail.last_episode.title},
            "year_counts": {str(y): n for y, n in detail.year_counts.items()},
            "related": [{"name": r.name, "kind": r.kind.value, "appearances": r.appearances} for r in detail.related],
            "image_url": detail.entity.image_url,
            "wiki_url": wiki_url(detail.entity.name, config.links.wiki_base),
        })
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_episode(index: int) -> str:
    """Get one episode by its chronological index (0 = oldest)."""
    try:
        corpus = _get_corpus()
        if not corpus.has_data:
            return _NO_DATA
        ep = qe.get_episode(corpus, index)
        result = ep.model_dump(mode="json")
        result["wiki_url"] = wiki_url(ep.title, _get_config().links.wiki_base)
        result["audio_url"] = audio_url(ep.title, _get_config().links.audio_base)
        return json.dumps(result)
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
