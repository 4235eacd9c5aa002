"""Generate a self-contained HTML timeline from a corpus and an interaction state."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from html import escape
from pathlib import Path

from cbb_explorer.config import Config
from cbb_explorer.interaction.state import InteractionState
from cbb_explorer.models import Corpus, EntityKind, EntityRecord, Episode
from cbb_explorer.output.colors import PINNED_COLOR, cell_color, recency_color
from cbb_explorer.output.links import audio_url, wiki_url
from cbb_explorer.output.query_engine import (
    EntityDetail,
    episode_has_entity,
    get_entity_detail,
    query_entities,
    summarize_corpus,
)

logger = logging.getLogger(__name__)


@dataclass
class TimelineRow:
    """One year of the grid: the cells shown and how many feature the selection."""
    year: int
    episodes: list[Episode] = field(default_factory=list)
    highlighted: int = 0

    @property
    def total(self) -> int:
        return len(self.episodes)


def build_timeline_rows(corpus: Corpus, state: InteractionState) -> list[TimelineRow]:
    """Rows in year-axis order. Live episodes are left out unless included."""
    selected = state.selected_entity
    rows: list[TimelineRow] = []
    for year in corpus.years:
        year_eps = corpus.episodes_by_year.get(year, ())
        shown = [ep for ep in year_eps if state.include_live or not ep.is_live]
        highlighted = 0
        if selected is not None:
            highlighted = sum(
                1 for ep in shown if episode_has_entity(ep, selected.kind, selected.name)
            )
        rows.append(TimelineRow(year=year, episodes=shown, highlighted=highlighted))
    return rows


def generate_timeline(
    corpus: Corpus,
    state: InteractionState,
    output_path: str | Path,
    config: Config | None = None,
) -> str:
    """Render the explorer view for `state` into a static HTML file."""
    config = config or Config()
    if not corpus.has_data:
        html = _render_no_data()
    else:
        detail = None
        ref = state.selected_entity
        if ref is not None and ref.name in corpus.index_for(ref.kind):
            detail = get_entity_detail(
                corpus, ref.kind, ref.name,
                related_limit=config.interaction.related_limit,
            )
        entities = query_entities(
            corpus, state.entity_kind, state.search_text, state.sort_key,
        )[: config.interaction.list_limit]
        html = _render_html(
            corpus=corpus,
            state=state,
            rows=build_timeline_rows(corpus, state),
            entities=entities,
            detail=detail,
            config=config,
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
        )

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    logger.info("Wrote timeline to %s", output_path)
    return str(output_path)


def _render_no_data() -> str:
    return """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Comedy Bang Bang Universe</title></head>
<body>
<h1>Comedy Bang Bang Universe</h1>
<p>No episode data to display.</p>
</body>
</html>"""


def _render_cells(corpus: Corpus, state: InteractionState, row: TimelineRow) -> str:
    size = f"{state.cell_size:.3f}px"
    cells = []
    for ep in row.episodes:
        pinned = state.pinned_episode == ep.index
        outline = f"outline:3px solid {PINNED_COLOR};" if pinned else ""
        cells.append(
            f'<div class="cell" data-timeline-cell data-idx="{ep.index}" '
            f'title="{escape(ep.title)} ({ep.date.isoformat()})" '
            f'style="width:{size};height:{size};background:{cell_color(ep, state, corpus.stats)};{outline}"></div>'
        )
    return "".join(cells)


def _render_count(row: TimelineRow) -> str:
    if row.highlighted:
        return f'<span class="hl">{row.highlighted}</span><span class="dim">/{row.total}</span>'
    return f'<span class="dim">{row.total}</span>'


def _render_summary(corpus: Corpus, state: InteractionState, config: Config) -> str:
    idx = state.display_episode
    if idx is None or not 0 <= idx < len(corpus.episodes):
        return '<div class="summary" data-episode-summary><p class="dim">Hover over a cell to see episode details. Click to pin.</p></div>'
    ep = corpus.episodes[idx]
    selected = state.selected_entity

    def chips(names: tuple[str, ...], kind: EntityKind) -> str:
        if not names:
            return '<span class="dim">None</span>'
        out = []
        for n in names:
            cls = "chip sel" if selected is not None and selected.name == n and selected.kind == kind else "chip"
            out.append(f'<a class="{cls}" href="{wiki_url(n, config.links.wiki_base)}">{escape(n)}</a>')
        return "".join(out)

    image = f'<img src="{escape(ep.image_url)}" alt="" referrerpolicy="no-referrer">' if ep.image_url else ""
    pin = ' <span class="pin">pinned</span>' if state.pinned_episode == ep.index else ""
    return f"""<div class="summary" data-episode-summary>
  {image}
  <div><a href="{wiki_url(ep.title, config.links.wiki_base)}"><strong>{escape(ep.title)}</strong></a>{pin}</div>
  <div class="dim">#{escape(ep.number or "")} &middot; {ep.date.isoformat()} &middot; week {ep.week + 1} of {ep.year}</div>
  <div><a href="{audio_url(ep.title, config.links.audio_base)}">Listen on Earwolf</a></div>
  <div class="cols">
    <div><div class="label">Guests ({ep.num_guests})</div>{chips(ep.guests, EntityKind.GUEST)}</div>
    <div><div class="label">Characters ({ep.num_characters})</div>{chips(ep.characters, EntityKind.CHARACTER)}</div>
  </div>
</div>"""


def _render_entity_list(corpus: Corpus, state: InteractionState, entities: list[EntityRecord]) -> str:
    if not entities:
        return '<p class="dim">No matches</p>'
    top = entities[0].appearances if entities else 1
    last = max(len(corpus.episodes) - 1, 1)
    selected = state.selected_entity
    items = []
    for e in entities:
        sel = " sel" if selected is not None and selected.name == e.name and selected.kind == e.kind else ""
        bar = e.appearances / (top or 1) * 100
        items.append(
            f'<div class="entity{sel}">'
            f'<span class="dot" style="background:{recency_color(e.last_index / last)}"></span>'
            f'<span class="name">{escape(e.name)}</span>'
            f'<span class="bar"><span style="width:{bar:.1f}%"></span></span>'
            f'<span class="n">{e.appearances}</span></div>'
        )
    return "".join(items)


def _render_detail(corpus: Corpus, detail: EntityDetail | None, kind: EntityKind) -> str:
    if detail is None:
        return f'<p class="dim">Select a {kind.value} to see details</p>'
    e = detail.entity
    bars = []
    for year, count in detail.year_counts.items():
        height = max(15, count / detail.max_year_count * 100) if count else 0
        bars.append(f'<div class="yb" title="{year}: {count}"><span style="height:{height:.0f}%"></span></div>')
    related_label = "Known characters" if e.kind == EntityKind.GUEST else "Played by"
    related = "".join(f'<span class="chip">{escape(r.name)} ({r.appearances})</span>' for r in detail.related)
    related_html = f'<div class="label">{related_label}</div>{related}' if detail.related else ""
    years = corpus.years
    return f"""<h3>{escape(e.name)}</h3>
<div class="dim">{e.appearances} appearances</div>
<div class="cols">
  <div><div class="label">First</div>{escape(detail.first_episode.title)}<div class="dim">{detail.first_episode.date.isoformat()}</div></div>
  <div><div class="label">Latest</div>{escape(detail.last_episode.title)}<div class="dim">{detail.last_episode.date.isoformat()}</div></div>
</div>
<div class="years">{"".join(bars)}</div>
<div class="dim axis"><span>{years[0]}</span><span>{years[-1]}</span></div>
{related_html}"""


def _render_html(
    *,
    corpus: Corpus,
    state: InteractionState,
    rows: list[TimelineRow],
    entities: list[EntityRecord],
    detail: EntityDetail | None,
    config: Config,
    generated_at: str,
) -> str:
    summary = summarize_corpus(corpus)
    layout = config.layout
    kind_label = "Guests" if state.entity_kind == EntityKind.GUEST else "Characters"
    rows_html = "".join(
        f'<div class="row"><div class="year">{row.year}</div>'
        f'<div class="cells" style="gap:{layout.gap:g}px">{_render_cells(corpus, state, row)}</div>'
        f'<div class="count">{_render_count(row)}</div></div>'
        for row in rows
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Comedy Bang Bang Universe</title>
<style>
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
         background: #f9fafb; color: #111827; padding: 20px; }}
  h1 {{ margin-bottom: 4px; }}
  .dim {{ color: #9ca3af; font-size: 12px; }}
  .hl {{ color: #d97706; font-weight: 700; }}
  .layout {{ display: flex; gap: 24px; }}
  .panel {{ background: #fff; border-radius: 12px; padding: {layout.padding // 2}px; box-shadow: 0 1px 3px #0001; }}
  .timeline {{ flex: 1; min-width: 0; }}
  .sidebar {{ width: 340px; flex-shrink: 0; }}
  .row {{ display: flex; align-items: center; margin-bottom: 2px; }}
  .year {{ width: {layout.year_label_width}px; flex-shrink: 0; font-size: 11px; font-weight: 700; color: #6b7280; text-align: right; padding-right: 4px; }}
  .cells {{ display: flex; }}
  .cell {{ border-radius: 2px; }}
  .count {{ width: {layout.count_label_width}px; flex-shrink: 0; font-size: 11px; padding-left: 4px; font-family: monospace; }}
  .summary {{ margin-top: 16px; padding-top: 16px; border-top: 1px solid #f3f4f6; }}
  .summary img {{ width: 96px; height: 96px; border-radius: 8px; object-fit: cover; float: left; margin-right: 12px; }}
  .cols {{ display: grid; grid-template-columns: 1fr 1fr; gap: 12px; margin-top: 8px; clear: both; }}
  .label {{ font-size: 11px; text-transform: uppercase; color: #6b7280; margin: 6px 0 4px; }}
  .chip {{ display: inline-block; background: #f3f4f6; border-radius: 4px; padding: 2px 6px; margin: 0 4px 4px 0; font-size: 12px; color: #374151; text-decoration: none; }}
  .chip.sel {{ background: #fef3c7; color: #92400e; }}
  .pin {{ color: #d97706; font-size: 11px; }}
  .entity {{ display: flex; align-items: center; gap: 6px; padding: 3px 4px; font-size: 13px; border-radius: 4px; }}
  .entity.sel {{ background: #fef3c7; }}
  .dot {{ width: 8px; height: 8px; border-radius: 50%; flex-shrink: 0; }}
  .name {{ flex: 1; overflow: hidden; text-overflow: ellipsis; white-space: nowrap; }}
  .bar {{ width: 60px; height: 4px; background: #f3f4f6; border-radius: 2px; }}
  .bar span {{ display: block; height: 100%; background: #93c5fd; border-radius: 2px; }}
  .n {{ width: 28px; text-align: right; font-family: monospace; color: #6b7280; }}
  .list {{ max-height: 480px; overflow-y: auto; }}
  .years {{ display: flex; align-items: flex-end; gap: 1px; height: 48px; margin-top: 8px; }}
  .yb {{ flex: 1; height: 100%; display: flex; align-items: flex-end; }}
  .yb span {{ display: block; width: 100%; background: #f59e0b; border-radius: 1px; }}
  .axis {{ display: flex; justify-content: space-between; }}
</style>
</head>
<body>

<h1>Comedy Bang Bang Universe</h1>
<p class="dim">{summary["episodes"]} episodes &middot; {summary["guests"]} guests &middot; {summary["characters"]} characters &middot; {summary["first_year"]}&ndash;{summary["last_year"]} &middot; generated {generated_at}</p>

<div class="layout">
  <div class="panel timeline">
    <p class="dim">Each cell = one episode. Color by: {state.color_mode.value.replace("_", " ")}{" &middot; live episodes included" if state.include_live else ""}</p>
    {rows_html}
    {_render_summary(corpus, state, config)}
  </div>
  <div class="sidebar">
    <div class="panel">
      <div class="label">{kind_label}{f" matching &ldquo;{escape(state.search_text)}&rdquo;" if state.search_text else ""} &middot; {state.sort_key.value.replace("_", " ")}</div>
      <div class="list">{_render_entity_list(corpus, state, entities)}</div>
    </div>
    <div class="panel" style="margin-top:16px">
      {_render_detail(corpus, detail, state.entity_kind)}
    </div>
  </div>
</div>

</body>
</html>"""
