"""Query engine: filtered/sorted entity views and detail lookups over a Corpus."""

import unicodedata
from dataclasses import dataclass, field

from cbb_explorer.models import Corpus, EntityKind, EntityRecord, Episode, SortKey


def _collation_key(name: str) -> tuple[str, str]:
    """Accent- and case-insensitive ordering, raw name as tie-break."""
    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), name)


def query_entities(
    corpus: Corpus,
    kind: EntityKind,
    search_text: str = "",
    sort_key: SortKey = SortKey.MOST_APPEARANCES,
) -> list[EntityRecord]:
    """Filter one entity index by substring and sort it.

    Returns a fresh list; the index itself is never touched. Ties keep
    first-appearance order (the index's insertion order).
    """
    entities = list(corpus.index_for(kind).values())

    if search_text:
        q = search_text.casefold()
        entities = [e for e in entities if q in e.name.casefold()]

    if sort_key == SortKey.MOST_APPEARANCES:
        entities.sort(key=lambda e: -e.appearances)
    elif sort_key == SortKey.MOST_RECENT:
        entities.sort(key=lambda e: -e.last_index)
    elif sort_key == SortKey.FIRST_APPEARANCE:
        entities.sort(key=lambda e: e.first_index)
    elif sort_key == SortKey.ALPHABETICAL:
        entities.sort(key=lambda e: _collation_key(e.name))
    else:
        raise ValueError(f"Invalid sort key: {sort_key}")

    return entities


def episode_has_entity(episode: Episode, kind: EntityKind, name: str) -> bool:
    if kind == EntityKind.GUEST:
        return name in episode.guests
    return name in episode.characters


def get_episode(corpus: Corpus, index: int) -> Episode:
    if not 0 <= index < len(corpus.episodes):
        raise ValueError(f"Episode not found: {index}")
    return corpus.episodes[index]


def get_entity(corpus: Corpus, kind: EntityKind, name: str) -> EntityRecord:
    entity = corpus.index_for(kind).get(name)
    if entity is None:
        raise ValueError(f"{kind.value.capitalize()} not found: {name}")
    return entity


@dataclass
class RelatedEntity:
    name: str
    kind: EntityKind
    appearances: int


@dataclass
class EntityDetail:
    """Everything the detail panel shows for one selected entity."""
    entity: EntityRecord
    first_episode: Episode
    last_episode: Episode
    year_counts: dict[int, int] = field(default_factory=dict)  # every year on the axis
    max_year_count: int = 0
    related: list[RelatedEntity] = field(default_factory=list)


def get_entity_detail(
    corpus: Corpus,
    kind: EntityKind,
    name: str,
    related_limit: int | None = 6,
) -> EntityDetail:
    """Per-year appearance counts and related entities for one guest or character.

    Guests relate to the characters listed for them in the corpus'
    guest-to-characters mapping; characters relate to the guests credited
    as playing them. Related entities are ordered by appearance count.
    """
    entity = get_entity(corpus, kind, name)

    year_counts = {year: 0 for year in corpus.years}
    for idx in entity.episode_indices:
        year_counts[corpus.episodes[idx].year] += 1

    related: list[RelatedEntity] = []
    if kind == EntityKind.GUEST:
        for c in corpus.guest_characters.get(name, ()):
            char = corpus.characters.get(c)
            if char is not None:
                related.append(RelatedEntity(c, EntityKind.CHARACTER, char.appearances))
    else:
        for g in sorted(entity.played_by):
            guest = corpus.guests.get(g)
            related.append(RelatedEntity(g, EntityKind.GUEST, guest.appearances if guest else 0))
    related.sort(key=lambda r: -r.appearances)
    if related_limit is not None:
        related = related[:related_limit]

    return EntityDetail(
        entity=entity,
        first_episode=corpus.episodes[entity.first_index],
        last_episode=corpus.episodes[entity.last_index],
        year_counts=year_counts,
        max_year_count=max(year_counts.values(), default=0),
        related=related,
    )


def summarize_corpus(corpus: Corpus) -> dict[str, object]:
    """Header counts: episodes, guests, characters, year span, stats."""
    return {
        "has_data": corpus.has_data,
        "episodes": len(corpus.episodes),
        "dropped": corpus.dropped,
        "guests": len(corpus.guests),
        "characters": len(corpus.characters),
        "first_year": corpus.years[0] if corpus.years else None,
        "last_year": corpus.years[-1] if corpus.years else None,
        "stats": corpus.stats.model_dump(),
    }
