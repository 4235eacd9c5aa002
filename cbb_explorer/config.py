"""Configuration loading for the CBB explorer."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from cbb_explorer.models import ColorMode, EntityKind, SortKey


class LayoutConfig(BaseModel):
    padding: int = 32  # 16px each side
    year_label_width: int = 40
    count_label_width: int = 30
    gap: float = 1.0
    min_cell_size: float = 4.0
    min_size_delta: float = 0.1
    initial_cell_size: float = 11.0

    @property
    def fixed_overhead(self) -> float:
        return self.padding + self.year_label_width + self.count_label_width


class InteractionConfig(BaseModel):
    hover_debounce: float = 50
    entity_kind: EntityKind = EntityKind.GUEST
    sort_key: SortKey = SortKey.MOST_APPEARANCES
    color_mode: ColorMode = ColorMode.GUESTS
    include_live: bool = False
    list_limit: int = 100
    related_limit: int = 6


class LinksConfig(BaseModel):
    wiki_base: str = "https://comedybangbang.fandom.com/wiki/"
    audio_base: str = "https://www.earwolf.com/episode/"


class Config(BaseModel):
    data_path: str = "data/cbb_data.json"
    output_dir: str = "output"
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    interaction: InteractionConfig = Field(default_factory=InteractionConfig)
    links: LinksConfig = Field(default_factory=LinksConfig)

    @property
    def resolved_data_path(self) -> Path:
        """Resolve data_path relative to project root."""
        p = Path(self.data_path).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_output_dir(self) -> Path:
        p = Path(self.output_dir).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the explorer project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
