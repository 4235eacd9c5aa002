"""CLI entry point for the CBB explorer."""

import argparse
import logging
from pathlib import Path

from cbb_explorer.config import Config, load_config
from cbb_explorer.corpus.builder import load_corpus
from cbb_explorer.interaction.controller import ExplorerController
from cbb_explorer.interaction.state import InteractionState
from cbb_explorer.interaction.timers import VirtualClock
from cbb_explorer.models import ColorMode, Corpus, EntityKind, SortKey
from cbb_explorer.output.links import audio_url, wiki_url
from cbb_explorer.output.query_engine import (
    get_entity_detail,
    get_episode,
    query_entities,
    summarize_corpus,
)


def _add_view_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("-o", "--output", help="Output file path")
    p.add_argument("--width", type=float, default=1200, help="Container width in px for cell sizing")
    p.add_argument("--include-live", action="store_true", help="Include live/tour episodes")
    p.add_argument(
        "--color-by", choices=[m.value for m in ColorMode], default=None,
        help="Metric used to shade episode cells",
    )
    p.add_argument(
        "--kind", choices=[k.value for k in EntityKind], default=EntityKind.GUEST.value,
        help="Entity kind for --select and the entity list",
    )
    p.add_argument("--select", help="Guest or character name to highlight")
    p.add_argument("--pin", type=int, default=None, help="Episode index to pin in the summary")


def _view_state(corpus: Corpus, config: Config, args: argparse.Namespace) -> InteractionState:
    """Drive a controller through the CLI options to get the state to render."""
    controller = ExplorerController(corpus, VirtualClock(), config)
    with controller:
        if args.color_by:
            controller.set_color_mode(ColorMode(args.color_by))
        if args.include_live:
            controller.set_live_inclusion(True)
        controller.container_resized(args.width)
        controller.set_kind(EntityKind(args.kind))
        if args.select:
            controller.select(args.select, EntityKind(args.kind))
        if args.pin is not None:
            controller.click_cell(args.pin)
        return controller.state


def main() -> None:
    parser = argparse.ArgumentParser(description="Comedy Bang Bang Universe Explorer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--data", help="Path to corpus file (.json or .js). Defaults to config data_path.")
    parser.add_argument("--config", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # summary command
    sub.add_parser("summary", help="Show corpus counts and scaling stats")

    # entities command
    entities_parser = sub.add_parser("entities", help="List guests or characters")
    entities_parser.add_argument(
        "--kind", choices=[k.value for k in EntityKind], default=EntityKind.GUEST.value,
    )
    entities_parser.add_argument("--search", default="", help="Case-insensitive name filter")
    entities_parser.add_argument(
        "--sort", choices=[s.value for s in SortKey], default=SortKey.MOST_APPEARANCES.value,
    )
    entities_parser.add_argument("--limit", type=int, default=None)

    # entity command
    entity_parser = sub.add_parser("entity", help="Show one guest or character in detail")
    entity_parser.add_argument("name")
    entity_parser.add_argument(
        "--kind", choices=[k.value for k in EntityKind], default=EntityKind.GUEST.value,
    )

    # episode command
    episode_parser = sub.add_parser("episode", help="Show one episode by chronological index")
    episode_parser.add_argument("index", type=int)

    # timeline command
    timeline_parser = sub.add_parser("timeline", help="Write the explorer view as static HTML")
    _add_view_options(timeline_parser)

    # image command
    image_parser = sub.add_parser("image", help="Render the year grid as PNG")
    _add_view_options(image_parser)
    image_parser.add_argument("--cell", type=int, default=None, help="Cell size in px (default: fitted)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path(args.config) if args.config else None)
    if args.command is None:
        parser.print_help()
        return

    data_path = Path(args.data) if args.data else config.resolved_data_path
    try:
        corpus = load_corpus(data_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Could not load corpus: {e}")
        return

    if not corpus.has_data:
        print("No episode data to display.")
        return

    if args.command == "summary":
        s = summarize_corpus(corpus)
        print(
            f"{s['episodes']} episodes ({s['dropped']} dropped), {s['guests']} guests, "
            f"{s['characters']} characters, {s['first_year']}-{s['last_year']}"
        )
        stats = corpus.stats
        print(f"  max episodes/year: {stats.max_episodes_per_year_with_live} with live, "
              f"{stats.max_episodes_per_year_without_live} without")
        print(f"  max guests/episode: {stats.max_guests_per_episode}")
        print(f"  max characters/episode: {stats.max_characters_per_episode}")
        print(f"  max characters/guest: {stats.max_characters_per_guest_per_episode:.2f}")

    elif args.command == "entities":
        entities = query_entities(
            corpus, EntityKind(args.kind), args.search, SortKey(args.sort),
        )
        limit = args.limit if args.limit is not None else config.interaction.list_limit
        for e in entities[:limit]:
            first = corpus.episodes[e.first_index].date.isoformat()
            last = corpus.episodes[e.last_index].date.isoformat()
            print(f"  {e.appearances:4d}  {e.name}  ({first} .. {last})")
        if len(entities) > limit:
            print(f"  ... {len(entities) - limit} more")

    elif args.command == "entity":
        try:
            detail = get_entity_detail(
                corpus, EntityKind(args.kind), args.name,
                related_limit=config.interaction.related_limit,
            )
        except ValueError as e:
            print(e)
            return
        ent = detail.entity
        print(f"{ent.name}: {ent.appearances} appearances")
        print(f"  first: #{detail.first_episode.number} {detail.first_episode.title} ({detail.first_episode.date})")
        print(f"  latest: #{detail.last_episode.number} {detail.last_episode.title} ({detail.last_episode.date})")
        print("  by year: " + ", ".join(f"{y}:{n}" for y, n in detail.year_counts.items() if n))
        if detail.related:
            label = "known characters" if ent.kind == EntityKind.GUEST else "played by"
            print(f"  {label}: " + ", ".join(f"{r.name} ({r.appearances})" for r in detail.related))
        print(f"  {wiki_url(ent.name, config.links.wiki_base)}")

    elif args.command == "episode":
        try:
            ep = get_episode(corpus, args.index)
        except ValueError as e:
            print(e)
            return
        live = " [live]" if ep.is_live else ""
        print(f"#{ep.number} {ep.title} ({ep.date}, week {ep.week + 1}){live}")
        print(f"  guests: {', '.join(ep.guests) or 'None'}")
        print(f"  characters: {', '.join(ep.characters) or 'None'}")
        print(f"  {audio_url(ep.title, config.links.audio_base)}")

    elif args.command == "timeline":
        from cbb_explorer.output.timeline import generate_timeline

        state = _view_state(corpus, config, args)
        output = args.output or str(config.resolved_output_dir / "timeline.html")
        print(f"Output: {generate_timeline(corpus, state, output, config)}")

    elif args.command == "image":
        from cbb_explorer.output.timeline_image import render_timeline_png

        state = _view_state(corpus, config, args)
        output = Path(args.output) if args.output else config.resolved_output_dir / "timeline.png"
        print(f"Output: {render_timeline_png(corpus, state, output, cell_size=args.cell)}")


if __name__ == "__main__":
    main()
