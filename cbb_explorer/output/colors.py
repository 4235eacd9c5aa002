"""Color scaling for timeline cells and entity recency dots."""

from cbb_explorer.interaction.state import InteractionState
from cbb_explorer.models import AggregateStats, ColorMode, Episode
from cbb_explorer.output.query_engine import episode_has_entity

EPISODE_DEFAULT_COLOR = "hsl(210, 50%, 60%)"
EPISODE_LIVE_COLOR = "#EE6C4D"
EPISODE_HIGHLIGHT_COLOR = "hsl(45, 100%, 51%)"
ENTITY_HOVER_COLOR = "hsl(45, 100%, 51%)"
PINNED_COLOR = "hsl(38, 92%, 50%)"
NO_DATA_COLOR = "hsl(0, 0%, 88%)"


def recency_color(ratio: float) -> str:
    """Purple (long ago) -> green (recent). Power curve spreads out recent entities."""
    adjusted = ratio ** 4
    hue = 280 - adjusted * 160
    return f"hsl({hue:g}, 70%, 50%)"


def scaled_color(value: float | None, maximum: float) -> str:
    """Blue ramp: lighter for small values, darker toward the maximum.

    `None` means the metric has no value for this episode and is never
    treated as zero.
    """
    if value is None:
        return NO_DATA_COLOR
    if maximum == 0:
        return EPISODE_DEFAULT_COLOR
    lightness = 85 - (value / maximum) * 40
    return f"hsl(210, 50%, {lightness:g}%)"


def metric_value(episode: Episode, mode: ColorMode) -> float | None:
    if mode == ColorMode.CHARACTERS:
        return episode.num_characters
    if mode == ColorMode.CHARS_PER_GUEST:
        return episode.characters_per_guest
    return episode.num_guests


def metric_maximum(stats: AggregateStats, mode: ColorMode) -> float:
    if mode == ColorMode.CHARACTERS:
        return stats.max_characters_per_episode
    if mode == ColorMode.CHARS_PER_GUEST:
        return stats.max_characters_per_guest_per_episode
    return stats.max_guests_per_episode


def cell_color(episode: Episode, state: InteractionState, stats: AggregateStats) -> str:
    """Background for one timeline cell.

    Priority: pinned, hovered entity, selected entity, live, then the
    color-mode metric.
    """
    if state.pinned_episode == episode.index:
        return PINNED_COLOR
    hovered = state.hovered_entity
    if hovered is not None and episode_has_entity(episode, hovered.kind, hovered.name):
        return ENTITY_HOVER_COLOR
    selected = state.selected_entity
    if selected is not None and episode_has_entity(episode, selected.kind, selected.name):
        return EPISODE_HIGHLIGHT_COLOR
    if episode.is_live:
        return EPISODE_LIVE_COLOR
    mode = state.color_mode
    return scaled_color(metric_value(episode, mode), metric_maximum(stats, mode))
