"""Explorer controller: owns the interaction state and its two async inputs.

The debounced episode hover and container-resize measurements are the
only entry points that are not a direct, synchronous state transition.
"""

import logging
from collections.abc import Callable

from cbb_explorer.config import Config
from cbb_explorer.interaction.grid import GridSizer
from cbb_explorer.interaction.state import (
    BackgroundClick,
    ClearHoveredEpisode,
    ClearPin,
    Event,
    HoverEntity,
    InteractionState,
    LeaveEntityRegion,
    Region,
    ResolveHoveredEpisode,
    SelectEntity,
    SetCellSize,
    SetColorMode,
    SetEntityKind,
    SetLiveInclusion,
    SetSearch,
    SetSort,
    TogglePin,
    reduce,
)
from cbb_explorer.interaction.timers import Scheduler, TimerHandle
from cbb_explorer.models import ColorMode, Corpus, EntityKind, EntityRecord, Episode, SortKey
from cbb_explorer.output.query_engine import EntityDetail, get_entity_detail, query_entities

logger = logging.getLogger(__name__)

Listener = Callable[[InteractionState], None]


class ExplorerController:
    """Named transitions over one session's InteractionState."""

    def __init__(
        self,
        corpus: Corpus,
        scheduler: Scheduler,
        config: Config | None = None,
        state: InteractionState | None = None,
    ) -> None:
        self.corpus = corpus
        self.scheduler = scheduler
        self.config = config or Config()
        self.state = state or InteractionState.from_config(self.config)
        self.sizer = GridSizer(self.config.layout, initial=self.state.cell_size)

        self._listeners: list[Listener] = []
        self._hover_timer: TimerHandle | None = None
        self._container_width: float | None = None
        self._query_key: tuple[EntityKind, str, SortKey] | None = None
        self._query_result: list[EntityRecord] = []
        self._closed = False

    # --- plumbing ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with the new state after every change. Returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: Event) -> InteractionState:
        if self._closed:
            logger.debug("Ignoring %s after close", type(event).__name__)
            return self.state
        new_state = reduce(self.state, event)
        if new_state != self.state:
            self.state = new_state
            for listener in list(self._listeners):
                # a listener may have dispatched; later ones see the newest state
                listener(self.state)
        return self.state

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Tear down: cancel the pending hover timer and stop taking measurements."""
        self._cancel_hover_timer()
        self._container_width = None
        self._listeners.clear()
        self._closed = True

    def __enter__(self) -> "ExplorerController":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # --- entity list / selection ---

    def select(self, name: str, kind: EntityKind) -> InteractionState:
        return self.dispatch(SelectEntity(name=name, kind=kind))

    def set_kind(self, kind: EntityKind) -> InteractionState:
        return self.dispatch(SetEntityKind(kind=kind))

    def set_search(self, text: str) -> InteractionState:
        return self.dispatch(SetSearch(text=text))

    def set_sort(self, sort_key: SortKey) -> InteractionState:
        return self.dispatch(SetSort(sort_key=sort_key))

    def hover_entity(self, name: str, kind: EntityKind) -> InteractionState:
        return self.dispatch(HoverEntity(name=name, kind=kind))

    def leave_entity_region(self) -> InteractionState:
        return self.dispatch(LeaveEntityRegion())

    # --- timeline ---

    def hover_episode(self, index: int) -> None:
        """Debounced: only the last hover in a burst lands, one quiet period later."""
        if self._closed:
            return
        self._cancel_hover_timer()
        self._hover_timer = self.scheduler.schedule(
            self.config.interaction.hover_debounce,
            lambda: self._resolve_hover(index),
        )

    def preview_episode(self, index: int | None) -> InteractionState:
        """Immediate hover, used by the first/last appearance cards."""
        self._cancel_hover_timer()
        if index is None:
            return self.dispatch(ClearHoveredEpisode())
        return self.dispatch(ResolveHoveredEpisode(index=index))

    def leave_timeline(self) -> InteractionState:
        self._cancel_hover_timer()
        return self.dispatch(ClearHoveredEpisode())

    def click_cell(self, index: int) -> InteractionState:
        return self.dispatch(TogglePin(index=index))

    def unpin(self) -> InteractionState:
        return self.dispatch(ClearPin())

    def click_background(self, region: Region = Region.OTHER) -> InteractionState:
        return self.dispatch(BackgroundClick(region=region))

    def set_color_mode(self, mode: ColorMode) -> InteractionState:
        return self.dispatch(SetColorMode(color_mode=mode))

    def set_live_inclusion(self, include_live: bool) -> InteractionState:
        state = self.dispatch(SetLiveInclusion(include_live=include_live))
        self._resize()
        return state

    def container_resized(self, width: float) -> InteractionState:
        """Entry point for the resize observer."""
        if self._closed:
            return self.state
        self._container_width = width
        self._resize()
        return self.state

    # --- derived views ---

    @property
    def row_cardinality(self) -> int:
        return self.corpus.stats.max_row_cardinality(self.state.include_live)

    @property
    def entities(self) -> list[EntityRecord]:
        """Current entity list, recomputed only when kind, search or sort change."""
        key = (self.state.entity_kind, self.state.search_text, self.state.sort_key)
        if key != self._query_key:
            self._query_result = query_entities(self.corpus, *key)
            self._query_key = key
        return self._query_result

    @property
    def display_episode(self) -> Episode | None:
        idx = self.state.display_episode
        if idx is None or not 0 <= idx < len(self.corpus.episodes):
            return None
        return self.corpus.episodes[idx]

    @property
    def selected_detail(self) -> EntityDetail | None:
        ref = self.state.selected_entity
        if ref is None or ref.name not in self.corpus.index_for(ref.kind):
            return None
        return get_entity_detail(
            self.corpus, ref.kind, ref.name,
            related_limit=self.config.interaction.related_limit,
        )

    # --- internals ---

    def _resolve_hover(self, index: int) -> None:
        self._hover_timer = None
        self.dispatch(ResolveHoveredEpisode(index=index))

    def _cancel_hover_timer(self) -> None:
        if self._hover_timer is not None:
            self._hover_timer.cancel()
            self._hover_timer = None

    def _resize(self) -> None:
        if self._container_width is None:
            return
        if self.sizer.update(self._container_width, self.row_cardinality):
            self.dispatch(SetCellSize(size=self.sizer.size))
