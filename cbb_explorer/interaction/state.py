"""Interaction state and the pure reducer that moves it between events.

`reduce(state, event)` never mutates its input and never schedules
anything; debouncing lives in the controller, which dispatches
`ResolveHoveredEpisode` once the quiet period has passed.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from cbb_explorer.config import Config
from cbb_explorer.models import ColorMode, EntityKind, SortKey


class Region(str, Enum):
    """Where a background click landed."""
    EPISODE_SUMMARY = "episode_summary"
    TIMELINE_CELL = "timeline_cell"
    OTHER = "other"


class EntityRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: EntityKind


class InteractionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    selected_entity: EntityRef | None = None
    hovered_entity: EntityRef | None = None
    hovered_episode: int | None = None
    pinned_episode: int | None = None
    search_text: str = ""
    sort_key: SortKey = SortKey.MOST_APPEARANCES
    entity_kind: EntityKind = EntityKind.GUEST
    color_mode: ColorMode = ColorMode.GUESTS
    include_live: bool = False
    cell_size: float = 11.0

    @property
    def display_episode(self) -> int | None:
        """Pinned episode wins over the hovered one."""
        if self.pinned_episode is not None:
            return self.pinned_episode
        return self.hovered_episode

    @classmethod
    def from_config(cls, config: Config) -> "InteractionState":
        ic = config.interaction
        return cls(
            sort_key=ic.sort_key,
            entity_kind=ic.entity_kind,
            color_mode=ic.color_mode,
            include_live=ic.include_live,
            cell_size=config.layout.initial_cell_size,
        )


# --- Events ---


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class SelectEntity(Event):
    name: str
    kind: EntityKind


class SetEntityKind(Event):
    kind: EntityKind


class HoverEntity(Event):
    name: str
    kind: EntityKind


class LeaveEntityRegion(Event):
    pass


class ResolveHoveredEpisode(Event):
    index: int


class ClearHoveredEpisode(Event):
    pass


class TogglePin(Event):
    index: int


class ClearPin(Event):
    pass


class BackgroundClick(Event):
    region: Region = Region.OTHER


class SetSearch(Event):
    text: str


class SetSort(Event):
    sort_key: SortKey


class SetColorMode(Event):
    color_mode: ColorMode


class SetLiveInclusion(Event):
    include_live: bool


class SetCellSize(Event):
    size: float


_PIN_SAFE_REGIONS = frozenset({Region.EPISODE_SUMMARY, Region.TIMELINE_CELL})


def reduce(state: InteractionState, event: Event) -> InteractionState:
    """Apply one event. Returns a new state (or `state` itself when nothing changes)."""
    if isinstance(event, SelectEntity):
        ref = EntityRef(name=event.name, kind=event.kind)
        if state.selected_entity == ref:
            return state.model_copy(update={"selected_entity": None})
        return state.model_copy(update={"selected_entity": ref, "entity_kind": event.kind})

    if isinstance(event, SetEntityKind):
        return state.model_copy(update={
            "entity_kind": event.kind,
            "selected_entity": None,
            "search_text": "",
        })

    if isinstance(event, HoverEntity):
        return state.model_copy(
            update={"hovered_entity": EntityRef(name=event.name, kind=event.kind)},
        )

    if isinstance(event, LeaveEntityRegion):
        return state.model_copy(update={"hovered_entity": None})

    if isinstance(event, ResolveHoveredEpisode):
        return state.model_copy(update={"hovered_episode": event.index})

    if isinstance(event, ClearHoveredEpisode):
        return state.model_copy(update={"hovered_episode": None})

    if isinstance(event, TogglePin):
        pinned = None if state.pinned_episode == event.index else event.index
        return state.model_copy(update={"pinned_episode": pinned})

    if isinstance(event, ClearPin):
        return state.model_copy(update={"pinned_episode": None})

    if isinstance(event, BackgroundClick):
        if state.pinned_episode is None or event.region in _PIN_SAFE_REGIONS:
            return state
        return state.model_copy(update={"pinned_episode": None})

    if isinstance(event, SetSearch):
        return state.model_copy(update={"search_text": event.text})

    if isinstance(event, SetSort):
        return state.model_copy(update={"sort_key": event.sort_key})

    if isinstance(event, SetColorMode):
        return state.model_copy(update={"color_mode": event.color_mode})

    if isinstance(event, SetLiveInclusion):
        return state.model_copy(update={"include_live": event.include_live})

    if isinstance(event, SetCellSize):
        return state.model_copy(update={"cell_size": event.size})

    raise ValueError(f"Unknown event: {type(event).__name__}")
