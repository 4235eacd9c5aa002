"""Aggregate statistics: corpus-wide maxima for color and size scaling."""

import logging
from collections.abc import Mapping, Sequence

from cbb_explorer.models import AggregateStats, Episode

logger = logging.getLogger(__name__)


def compute_stats(
    episodes: Sequence[Episode],
    episodes_by_year: Mapping[int, Sequence[Episode]],
) -> AggregateStats:
    """Compute the five maxima once per corpus.

    Episodes with no guests have no characters-per-guest value and are left
    out of that maximum entirely.
    """
    max_with_live = 0
    max_without_live = 0
    for year_eps in episodes_by_year.values():
        max_with_live = max(max_with_live, len(year_eps))
        without_live = sum(1 for ep in year_eps if not ep.is_live)
        max_without_live = max(max_without_live, without_live)

    max_guests = 0
    max_characters = 0
    max_chars_per_guest = 0.0
    for ep in episodes:
        max_guests = max(max_guests, ep.num_guests)
        max_characters = max(max_characters, ep.num_characters)
        if ep.characters_per_guest is not None:
            max_chars_per_guest = max(max_chars_per_guest, ep.characters_per_guest)

    stats = AggregateStats(
        max_episodes_per_year_with_live=max_with_live,
        max_episodes_per_year_without_live=max_without_live,
        max_guests_per_episode=max_guests,
        max_characters_per_episode=max_characters,
        max_characters_per_guest_per_episode=max_chars_per_guest,
    )
    logger.debug("Aggregate stats: %s", stats)
    return stats
