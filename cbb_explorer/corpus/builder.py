"""One-shot build pipeline: raw corpus -> normalized, indexed, summarized Corpus."""

import logging
from pathlib import Path
from typing import Any

from cbb_explorer.corpus.indexer import build_indices
from cbb_explorer.corpus.loader import load_raw_corpus
from cbb_explorer.corpus.normalizer import normalize_episodes
from cbb_explorer.corpus.statistics import compute_stats
from cbb_explorer.models import Corpus, RawCorpus

logger = logging.getLogger(__name__)


class CorpusBuildResult:
    """Summary of a corpus build."""

    def __init__(self, corpus: Corpus) -> None:
        self.episodes_kept: int = len(corpus.episodes)
        self.episodes_dropped: int = corpus.dropped
        self.guests: int = len(corpus.guests)
        self.characters: int = len(corpus.characters)
        self.years: int = len(corpus.years)

    def __repr__(self) -> str:
        return (
            f"CorpusBuildResult({self.episodes_kept} episodes "
            f"({self.episodes_dropped} dropped), "
            f"{self.guests} guests, {self.characters} characters, "
            f"{self.years} years)"
        )


def build_corpus(raw: RawCorpus | dict[str, Any] | None) -> Corpus:
    """Run normalizer -> indexer -> statistics once and bundle the outputs.

    A missing corpus yields an empty Corpus (``has_data`` is False) rather
    than an error.
    """
    if raw is None:
        logger.warning("No corpus supplied; nothing to display")
        return Corpus()
    if not isinstance(raw, RawCorpus):
        raw = RawCorpus.model_validate(raw)

    episodes, dropped = normalize_episodes(raw.episodes)
    index = build_indices(
        episodes,
        guest_images=raw.guest_images,
        character_images=raw.character_images,
        character_cast=raw.character_cast,
    )
    stats = compute_stats(episodes, index.episodes_by_year)

    corpus = Corpus(
        episodes=tuple(episodes),
        guests=index.guests,
        characters=index.characters,
        episodes_by_year=index.episodes_by_year,
        years=index.years,
        guest_characters={g: tuple(cs) for g, cs in raw.guest_characters.items()},
        stats=stats,
        dropped=dropped + raw.rejected,
    )
    if not corpus.has_data:
        logger.warning("Corpus has no usable episodes")
    logger.info("Corpus build complete: %s", CorpusBuildResult(corpus))
    return corpus


def load_corpus(path: Path) -> Corpus:
    """Load a corpus file and build it."""
    return build_corpus(load_raw_corpus(path))
