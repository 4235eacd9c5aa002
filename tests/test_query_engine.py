"""Tests for entity queries, detail lookups and corpus summary."""

import pytest

from cbb_explorer.corpus.builder import build_corpus
from cbb_explorer.models import EntityKind, SortKey
from cbb_explorer.output.query_engine import (
    episode_has_entity,
    get_entity,
    get_entity_detail,
    get_episode,
    query_entities,
    summarize_corpus,
)


def _names(records):
    return [r.name for r in records]


@pytest.fixture()
def small_corpus():
    """Three episodes: A in 0 and 2, B in 1."""
    return build_corpus({"episodes": [
        {"t": "E0", "n": "1", "d": "2014-01-01", "g": ["A"]},
        {"t": "E1", "n": "2", "d": "2014-01-08", "g": ["B"]},
        {"t": "E2", "n": "3", "d": "2014-01-15", "g": ["A"]},
    ]})


class TestQueryEntities:
    def test_small_corpus_sorts(self, small_corpus):
        assert _names(query_entities(small_corpus, EntityKind.GUEST)) == ["A", "B"]
        assert _names(query_entities(small_corpus, EntityKind.GUEST, "", SortKey.MOST_RECENT)) == ["A", "B"]
        assert _names(query_entities(small_corpus, EntityKind.GUEST, "", SortKey.FIRST_APPEARANCE)) == ["A", "B"]

    def test_small_corpus_search(self, small_corpus):
        assert _names(query_entities(small_corpus, EntityKind.GUEST, "b")) == ["B"]

    def test_most_appearances_ties_keep_first_appearance_order(self, corpus):
        result = query_entities(corpus, EntityKind.GUEST, "", SortKey.MOST_APPEARANCES)
        assert _names(result) == ["Andy Daly", "Paul F. Tompkins", "Lauren Lapkus"]

    def test_most_recent(self, corpus):
        result = query_entities(corpus, EntityKind.GUEST, "", SortKey.MOST_RECENT)
        assert _names(result) == ["Andy Daly", "Lauren Lapkus", "Paul F. Tompkins"]

    def test_first_appearance(self, corpus):
        result = query_entities(corpus, EntityKind.CHARACTER, "", SortKey.FIRST_APPEARANCE)
        assert _names(result)[:2] == ["Don DiMello", "Traci Reardon"]

    def test_alphabetical(self, corpus):
        result = query_entities(corpus, EntityKind.GUEST, "", SortKey.ALPHABETICAL)
        assert _names(result) == ["Andy Daly", "Lauren Lapkus", "Paul F. Tompkins"]

    def test_alphabetical_ignores_case_and_accents(self):
        corpus = build_corpus({"episodes": [
            {"t": "E0", "n": "1", "d": "2014-01-01", "g": ["zed", "Émile", "Eddie", "bob"]},
        ]})
        result = query_entities(corpus, EntityKind.GUEST, "", SortKey.ALPHABETICAL)
        assert _names(result) == ["bob", "Eddie", "Émile", "zed"]

    def test_search_case_insensitive(self, corpus):
        assert _names(query_entities(corpus, EntityKind.GUEST, "LA")) == ["Lauren Lapkus"]

    def test_search_no_match(self, corpus):
        assert query_entities(corpus, EntityKind.GUEST, "zzz") == []

    def test_does_not_mutate_index(self, corpus):
        before = list(corpus.guests)
        query_entities(corpus, EntityKind.GUEST, "", SortKey.ALPHABETICAL)
        query_entities(corpus, EntityKind.GUEST, "a", SortKey.MOST_RECENT)
        assert list(corpus.guests) == before

    def test_invalid_sort_key(self, corpus):
        with pytest.raises(ValueError, match="Invalid sort key"):
            query_entities(corpus, EntityKind.GUEST, "", "loudest")

    def test_empty_corpus(self):
        assert query_entities(build_corpus(None), EntityKind.GUEST) == []


class TestLookups:
    def test_get_episode(self, corpus):
        assert get_episode(corpus, 2).title == "Live from Austin"

    def test_get_episode_out_of_range(self, corpus):
        with pytest.raises(ValueError, match="Episode not found: 99"):
            get_episode(corpus, 99)
        with pytest.raises(ValueError):
            get_episode(corpus, -1)

    def test_get_entity_unknown(self, corpus):
        with pytest.raises(ValueError, match="Guest not found: Nobody"):
            get_entity(corpus, EntityKind.GUEST, "Nobody")
        with pytest.raises(ValueError, match="Character not found: Nobody"):
            get_entity(corpus, EntityKind.CHARACTER, "Nobody")

    def test_episode_has_entity(self, corpus):
        ep = corpus.episodes[0]
        assert episode_has_entity(ep, EntityKind.GUEST, "Andy Daly")
        assert episode_has_entity(ep, EntityKind.CHARACTER, "Don DiMello")
        assert not episode_has_entity(ep, EntityKind.CHARACTER, "Andy Daly")


class TestEntityDetail:
    def test_guest_detail(self, corpus):
        detail = get_entity_detail(corpus, EntityKind.GUEST, "Andy Daly")
        assert detail.first_episode.title == "Welcome to Comedy Bang Bang"
        assert detail.last_episode.title == "Andy's Back"
        assert detail.year_counts == {2009: 1, 2010: 1, 2011: 1}
        assert detail.max_year_count == 1
        # "Not Indexed" never appears in an episode
        assert [(r.name, r.appearances) for r in detail.related] == [
            ("Don DiMello", 3), ("Dalton Wilcox", 1),
        ]

    def test_year_counts_cover_every_year(self, corpus):
        detail = get_entity_detail(corpus, EntityKind.GUEST, "Paul F. Tompkins")
        assert detail.year_counts == {2009: 1, 2010: 1, 2011: 0}

    def test_character_detail(self, corpus):
        detail = get_entity_detail(corpus, EntityKind.CHARACTER, "Don DiMello")
        assert [r.name for r in detail.related] == ["Andy Daly", "Lauren Lapkus", "Paul F. Tompkins"]
        assert all(r.kind == EntityKind.GUEST for r in detail.related)

    def test_related_limit(self, corpus):
        detail = get_entity_detail(corpus, EntityKind.CHARACTER, "Don DiMello", related_limit=1)
        assert [r.name for r in detail.related] == ["Andy Daly"]

    def test_unknown(self, corpus):
        with pytest.raises(ValueError):
            get_entity_detail(corpus, EntityKind.GUEST, "Nobody")


class TestSummarize:
    def test_summary(self, corpus):
        s = summarize_corpus(corpus)
        assert s["has_data"] is True
        assert s["episodes"] == 6
        assert s["dropped"] == 1
        assert s["guests"] == 3
        assert s["characters"] == 6
        assert (s["first_year"], s["last_year"]) == (2009, 2011)

    def test_empty(self):
        s = summarize_corpus(build_corpus(None))
        assert s["has_data"] is False
        assert s["first_year"] is None
