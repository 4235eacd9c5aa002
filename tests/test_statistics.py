"""Tests for corpus-wide aggregate statistics."""

from cbb_explorer.corpus.builder import build_corpus
from cbb_explorer.models import AggregateStats


class TestComputeStats:
    def test_maxima(self, corpus):
        stats = corpus.stats
        assert stats.max_episodes_per_year_with_live == 3
        assert stats.max_episodes_per_year_without_live == 2
        assert stats.max_guests_per_episode == 2
        assert stats.max_characters_per_episode == 3
        assert stats.max_characters_per_guest_per_episode == 3.0

    def test_row_cardinality(self, corpus):
        assert corpus.stats.max_row_cardinality(include_live=True) == 3
        assert corpus.stats.max_row_cardinality(include_live=False) == 2

    def test_guestless_episode_not_counted_in_ratio(self):
        corpus = build_corpus({"episodes": [
            {"t": "Clips", "n": "1", "d": "2012-01-01", "g": [], "c": ["X", "Y", "Z", "W"]},
            {"t": "Normal", "n": "2", "d": "2012-01-08", "g": ["A", "B"], "c": ["X"]},
        ]})
        assert corpus.stats.max_characters_per_guest_per_episode == 0.5
        assert corpus.stats.max_characters_per_episode == 4

    def test_empty_corpus(self):
        assert build_corpus({"episodes": []}).stats == AggregateStats()
