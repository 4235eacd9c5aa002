"""Timeline image: the year-by-episode grid rendered to PNG.

Rows = years on the corpus' year axis.
Cells = episodes in chronological order, colored exactly like the HTML view.
"""

import logging
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont

from cbb_explorer.interaction.state import InteractionState
from cbb_explorer.models import Corpus, EntityKind
from cbb_explorer.output.colors import (
    EPISODE_HIGHLIGHT_COLOR,
    EPISODE_LIVE_COLOR,
    NO_DATA_COLOR,
    cell_color,
    scaled_color,
)
from cbb_explorer.output.query_engine import summarize_corpus
from cbb_explorer.output.timeline import build_timeline_rows

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
_FONT_MONO = "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf"


def _font(size: int, bold: bool = False, mono: bool = False) -> ImageFont.ImageFont:
    if mono:
        path = _FONT_MONO
    else:
        path = _FONT_BOLD if bold else _FONT_REGULAR
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        return ImageFont.load_default()


# --- Colors ---

BG = (255, 255, 255)
TEXT = (17, 24, 39)
TEXT_DIM = (107, 114, 128)
HIGHLIGHT_TEXT = (217, 119, 6)
DIVIDER = (229, 231, 235)

# --- Layout ---

CELL_GAP = 1
YEAR_LABEL_WIDTH = 48
COUNT_LABEL_WIDTH = 56
HEADER_HEIGHT = 56
PADDING = 16
LEGEND_HEIGHT = 28


def _rgb(color: str) -> tuple[int, int, int]:
    return ImageColor.getrgb(color)[:3]


def render_timeline_png(
    corpus: Corpus,
    state: InteractionState,
    output_path: Path,
    cell_size: int | None = None,
) -> Path:
    """Render the grid for `state` as a PNG image."""
    cell = cell_size if cell_size is not None else max(int(round(state.cell_size)), 1)
    step = cell + CELL_GAP
    rows = build_timeline_rows(corpus, state)
    n_cols = max((row.total for row in rows), default=0)

    width = PADDING + YEAR_LABEL_WIDTH + max(n_cols * step - CELL_GAP, 0) + COUNT_LABEL_WIDTH + PADDING
    width = max(width, 480)
    height = PADDING + HEADER_HEIGHT + len(rows) * (step + 1) + LEGEND_HEIGHT + PADDING

    img = Image.new("RGB", (width, height), BG)
    draw = ImageDraw.Draw(img)

    # --- Header ---
    y = PADDING
    draw.text((PADDING, y), "Comedy Bang Bang Universe", font=_font(18, bold=True), fill=TEXT)
    y += 24
    summary = summarize_corpus(corpus)
    if corpus.has_data:
        subtitle = (
            f"{summary['episodes']} episodes · {summary['guests']} guests · "
            f"{summary['characters']} characters · "
            f"{summary['first_year']}-{summary['last_year']}"
        )
    else:
        subtitle = "No episode data to display"
    selected = state.selected_entity
    if selected is not None:
        kind = "guest" if selected.kind == EntityKind.GUEST else "character"
        subtitle += f" · highlighting {kind} {selected.name}"
    draw.text((PADDING, y), subtitle, font=_font(11), fill=TEXT_DIM)
    y = PADDING + HEADER_HEIGHT

    # --- Grid ---
    year_font = _font(10, bold=True)
    count_font = _font(9, mono=True)
    grid_x0 = PADDING + YEAR_LABEL_WIDTH

    for row in rows:
        label = str(row.year)
        label_w = draw.textlength(label, font=year_font)
        draw.text((grid_x0 - label_w - 6, y), label, font=year_font, fill=TEXT_DIM)

        for j, ep in enumerate(row.episodes):
            x0 = grid_x0 + j * step
            draw.rounded_rectangle(
                [x0, y, x0 + cell, y + cell],
                radius=2 if cell >= 6 else 0,
                fill=_rgb(cell_color(ep, state, corpus.stats)),
            )

        cx = grid_x0 + n_cols * step + 6
        if row.highlighted:
            hl = str(row.highlighted)
            draw.text((cx, y), hl, font=count_font, fill=HIGHLIGHT_TEXT)
            cx += draw.textlength(hl, font=count_font)
            draw.text((cx, y), f"/{row.total}", font=count_font, fill=TEXT_DIM)
        else:
            draw.text((cx, y), str(row.total), font=count_font, fill=TEXT_DIM)

        y += step + 1

    # --- Legend ---
    y += 6
    draw.line([(PADDING, y), (width - PADDING, y)], fill=DIVIDER, width=1)
    y += 8
    legend_font = _font(9)
    lx = PADDING
    draw.text((lx, y), "Fewer", font=legend_font, fill=TEXT_DIM)
    lx += int(draw.textlength("Fewer", font=legend_font)) + 4
    for step_value in range(5):
        draw.rounded_rectangle(
            [lx, y, lx + 10, y + 10], radius=2, fill=_rgb(scaled_color(step_value, 4)),
        )
        lx += 13
    draw.text((lx, y), "More", font=legend_font, fill=TEXT_DIM)
    lx += int(draw.textlength("More", font=legend_font)) + 16
    for color, label in (
        (EPISODE_LIVE_COLOR, "Live"),
        (EPISODE_HIGHLIGHT_COLOR, "Selected"),
        (NO_DATA_COLOR, "No data"),
    ):
        draw.rounded_rectangle([lx, y, lx + 10, y + 10], radius=2, fill=_rgb(color))
        lx += 14
        draw.text((lx, y), label, font=legend_font, fill=TEXT_DIM)
        lx += int(draw.textlength(label, font=legend_font)) + 12

    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(output_path), "PNG")
    logger.info("Timeline image saved to %s (%dx%d)", output_path, width, height)
    return output_path
