"""Tests for corpus file loading and the one-shot build."""

import json

import pytest

from cbb_explorer.corpus.builder import CorpusBuildResult, build_corpus, load_corpus
from cbb_explorer.corpus.loader import load_raw_corpus, parse_raw_corpus


class TestParseRawCorpus:
    def test_plain_json(self, raw_corpus):
        raw = parse_raw_corpus(json.dumps(raw_corpus))
        assert len(raw.episodes) == 7
        assert raw.guest_characters["Lauren Lapkus"] == ["Traci Reardon"]

    def test_js_wrapper(self, raw_corpus):
        text = "const CBB_DATA = " + json.dumps(raw_corpus) + ";\n"
        raw = parse_raw_corpus(text)
        assert len(raw.episodes) == 7
        assert raw.guest_images == {"Andy Daly": "https://img/andy.png"}

    def test_alternate_mapping_key(self):
        raw = parse_raw_corpus(json.dumps({"episodes": [], "guestToCharacters": {"A": ["X"]}}))
        assert raw.guest_characters == {"A": ["X"]}

    def test_null_mappings(self):
        raw = parse_raw_corpus(json.dumps({"episodes": None, "guestImages": None}))
        assert raw.episodes == []
        assert raw.guest_images == {}

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="not valid JSON"):
            parse_raw_corpus("{not json")

    def test_not_an_object(self):
        with pytest.raises(ValueError, match="JSON object"):
            parse_raw_corpus("[1, 2, 3]")


class TestLoadCorpus:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_raw_corpus(tmp_path / "nope.json")

    def test_load_js_file(self, tmp_path, raw_corpus):
        path = tmp_path / "cbb_data.js"
        path.write_text("var CBB_DATA = " + json.dumps(raw_corpus) + ";", encoding="utf-8")
        corpus = load_corpus(path)
        assert corpus.has_data
        assert len(corpus.episodes) == 6


class TestBuildCorpus:
    def test_none_is_empty(self):
        corpus = build_corpus(None)
        assert not corpus.has_data
        assert corpus.episodes == ()
        assert corpus.years == ()

    def test_all_dropped_is_empty(self):
        corpus = build_corpus({"episodes": [{"t": "X", "d": "unknown"}]})
        assert not corpus.has_data
        assert corpus.dropped == 1

    def test_malformed_guest_list_drops_only_that_record(self):
        corpus = build_corpus({"episodes": [
            {"t": "Good", "n": "1", "d": "2014-01-01", "g": ["A"]},
            {"t": "Null Guest", "n": "2", "d": "2014-01-08", "g": ["B", None]},
        ]})
        assert [e.title for e in corpus.episodes] == ["Good"]
        assert corpus.dropped == 1
        assert "B" not in corpus.guests

    def test_non_list_guests_and_non_object_record_dropped(self):
        corpus = build_corpus({"episodes": [
            {"t": "Solo", "n": "1", "d": "2014-01-01", "g": "Solo"},
            "not a record",
            {"t": "Kept", "n": "2", "d": "2014-01-08", "g": ["A"]},
            {"t": "Bad Date", "n": "3", "d": "unknown"},
        ]})
        assert [e.title for e in corpus.episodes] == ["Kept"]
        assert corpus.dropped == 3

    def test_malformed_record_in_file(self, tmp_path):
        path = tmp_path / "cbb_data.json"
        path.write_text(json.dumps({"episodes": [
            {"t": "Good", "n": "1", "d": "2014-01-01", "c": ["X"]},
            {"t": "Bad", "n": "2", "d": "2014-01-08", "c": [None]},
        ]}), encoding="utf-8")
        corpus = load_corpus(path)
        assert corpus.has_data
        assert corpus.dropped == 1

    def test_guest_characters_carried(self, corpus):
        assert corpus.guest_characters["Andy Daly"] == ("Don DiMello", "Dalton Wilcox", "Not Indexed")

    def test_build_result_repr(self, corpus):
        text = repr(CorpusBuildResult(corpus))
        assert "6 episodes" in text
        assert "1 dropped" in text
        assert "3 guests" in text
