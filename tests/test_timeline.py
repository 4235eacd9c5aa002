"""Tests for the HTML timeline and PNG renderer."""

from PIL import Image

from cbb_explorer.corpus.builder import build_corpus
from cbb_explorer.interaction.state import EntityRef, InteractionState
from cbb_explorer.models import EntityKind
from cbb_explorer.output.timeline import build_timeline_rows, generate_timeline
from cbb_explorer.output.timeline_image import render_timeline_png

ANDY = EntityRef(name="Andy Daly", kind=EntityKind.GUEST)


class TestTimelineRows:
    def test_live_hidden_by_default(self, corpus):
        rows = build_timeline_rows(corpus, InteractionState())
        assert [r.year for r in rows] == [2009, 2010, 2011]
        assert [r.total for r in rows] == [2, 2, 1]
        assert [e.index for e in rows[1].episodes] == [3, 4]

    def test_live_included(self, corpus):
        rows = build_timeline_rows(corpus, InteractionState(include_live=True))
        assert [r.total for r in rows] == [2, 3, 1]

    def test_highlight_counts(self, corpus):
        rows = build_timeline_rows(corpus, InteractionState(selected_entity=ANDY))
        assert [r.highlighted for r in rows] == [1, 1, 1]

    def test_no_selection(self, corpus):
        assert all(r.highlighted == 0 for r in build_timeline_rows(corpus, InteractionState()))


class TestGenerateTimeline:
    def test_writes_html(self, corpus, tmp_path):
        state = InteractionState(selected_entity=ANDY, pinned_episode=0)
        out = generate_timeline(corpus, state, tmp_path / "out" / "timeline.html")
        html = (tmp_path / "out" / "timeline.html").read_text(encoding="utf-8")
        assert out.endswith("timeline.html")
        assert html.count("data-timeline-cell") == 5
        assert "data-episode-summary" in html
        assert "Welcome to Comedy Bang Bang" in html
        assert "week 18 of 2009" in html
        assert "https://www.earwolf.com/episode/welcome-to-comedy-bang-bang/" in html

    def test_escapes_titles(self, tmp_path):
        corpus = build_corpus({"episodes": [
            {"t": "<script>x</script>", "n": "1", "d": "2014-01-01", "g": ["A"]},
        ]})
        generate_timeline(corpus, InteractionState(), tmp_path / "t.html")
        html = (tmp_path / "t.html").read_text(encoding="utf-8")
        assert "<script>x</script>" not in html

    def test_no_data(self, tmp_path):
        generate_timeline(build_corpus(None), InteractionState(), tmp_path / "t.html")
        assert "No episode data to display." in (tmp_path / "t.html").read_text(encoding="utf-8")


class TestRenderTimelinePng:
    def test_writes_png(self, corpus, tmp_path):
        path = render_timeline_png(
            corpus, InteractionState(selected_entity=ANDY), tmp_path / "grid.png", cell_size=12,
        )
        assert path.exists()
        with Image.open(path) as img:
            assert img.format == "PNG"
            assert img.width >= 480

    def test_empty_corpus(self, tmp_path):
        path = render_timeline_png(build_corpus(None), InteractionState(), tmp_path / "empty.png")
        assert path.exists()
