"""Cross-reference indexer: guests and characters -> the episodes they appear in."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from cbb_explorer.models import EntityKind, EntityRecord, Episode

logger = logging.getLogger(__name__)


@dataclass
class _EntityAccumulator:
    """Append-only record used while scanning; frozen into an EntityRecord afterwards."""
    name: str
    first_index: int
    last_index: int
    episode_indices: list[int] = field(default_factory=list)
    played_by: set[str] = field(default_factory=set)

    def add(self, idx: int) -> bool:
        """Record an appearance. Returns False for a repeat within the same episode."""
        if self.episode_indices and self.episode_indices[-1] == idx:
            return False
        self.episode_indices.append(idx)
        self.last_index = idx
        return True

    def freeze(self, kind: EntityKind, image_url: str | None) -> EntityRecord:
        return EntityRecord(
            name=self.name,
            kind=kind,
            episode_indices=tuple(self.episode_indices),
            first_index=self.first_index,
            last_index=self.last_index,
            image_url=image_url,
            played_by=frozenset(self.played_by),
        )


@dataclass
class IndexResult:
    guests: dict[str, EntityRecord]
    characters: dict[str, EntityRecord]
    episodes_by_year: dict[int, tuple[Episode, ...]]
    years: tuple[int, ...]


def build_indices(
    episodes: Sequence[Episode],
    guest_images: Mapping[str, str] | None = None,
    character_images: Mapping[str, str] | None = None,
    character_cast: Mapping[str, Sequence[str]] | None = None,
) -> IndexResult:
    """Index guests and characters in one pass over `episodes` (in index order).

    Every guest in an episode is credited as a player of every character in
    that episode. Where `character_cast` names the real cast of a character,
    that list is used instead.
    """
    guest_images = guest_images or {}
    character_images = character_images or {}
    character_cast = character_cast or {}

    guests: dict[str, _EntityAccumulator] = {}
    characters: dict[str, _EntityAccumulator] = {}
    by_year: dict[int, list[Episode]] = {}

    for ep in episodes:
        idx = ep.index
        by_year.setdefault(ep.year, []).append(ep)

        for g in ep.guests:
            acc = guests.get(g)
            if acc is None:
                acc = guests[g] = _EntityAccumulator(name=g, first_index=idx, last_index=idx)
            acc.add(idx)

        for c in ep.characters:
            acc = characters.get(c)
            if acc is None:
                acc = characters[c] = _EntityAccumulator(name=c, first_index=idx, last_index=idx)
            acc.add(idx)
            if c not in character_cast:
                acc.played_by.update(ep.guests)

    for name, cast in character_cast.items():
        if name in characters:
            characters[name].played_by = set(cast)

    result = IndexResult(
        guests={
            name: acc.freeze(EntityKind.GUEST, guest_images.get(name) or None)
            for name, acc in guests.items()
        },
        characters={
            name: acc.freeze(EntityKind.CHARACTER, character_images.get(name) or None)
            for name, acc in characters.items()
        },
        episodes_by_year={year: tuple(eps) for year, eps in by_year.items()},
        years=tuple(sorted(by_year)),
    )
    logger.info(
        "Indexed %d guests, %d characters across %d years",
        len(result.guests), len(result.characters), len(result.years),
    )
    return result
