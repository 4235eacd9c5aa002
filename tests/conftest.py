"""Shared test fixtures for CBB explorer tests."""

import pytest

from cbb_explorer.config import Config, LayoutConfig
from cbb_explorer.corpus.builder import build_corpus
from cbb_explorer.interaction.controller import ExplorerController
from cbb_explorer.interaction.timers import VirtualClock


def sample_raw() -> dict:
    """Six dated episodes (one live, one guestless) plus one with a bad date, out of order."""
    return {
        "episodes": [
            {
                "t": "Live from Austin", "n": "from the road", "d": "2010-03-15",
                "g": ["Paul F. Tompkins"], "c": ["Cake Boss", "Ice-T"],
            },
            {
                "t": "Welcome to Comedy Bang Bang", "n": "1", "d": "2009-05-01",
                "g": ["Andy Daly", "Paul F. Tompkins"], "c": ["Don DiMello"],
                "i": "https://img/ep1.png",
            },
            {
                "t": "Lost Episode", "n": "3", "d": "unknown",
                "g": ["Nobody"], "c": ["Nothing"],
            },
            {
                "t": "Andy's Back", "n": "146", "d": "2011-01-05",
                "g": ["Andy Daly"], "c": ["Don DiMello", "Dalton Wilcox", "Ginger Dave"],
            },
            {
                "t": "Traci Returns", "n": "2", "d": "2009-06-10",
                "g": ["Lauren Lapkus"], "c": ["Traci Reardon", "Don DiMello"],
            },
            {
                "t": "The Best of CBB", "n": "145", "d": "2010-12-28",
            },
            {
                "t": "Hot Pie", "n": 100, "d": "2010-07-04",
                "g": ["Lauren Lapkus", "Andy Daly"], "c": ["Traci Reardon"],
            },
        ],
        "guestCharacters": {
            "Andy Daly": ["Don DiMello", "Dalton Wilcox", "Not Indexed"],
            "Lauren Lapkus": ["Traci Reardon"],
        },
        "guestImages": {"Andy Daly": "https://img/andy.png"},
        "characterImages": {"Don DiMello": "https://img/don.png"},
    }


@pytest.fixture()
def raw_corpus():
    return sample_raw()


@pytest.fixture()
def corpus(raw_corpus):
    """Built corpus. Chronological order:

    0 Welcome to Comedy Bang Bang (2009)
    1 Traci Returns (2009)
    2 Live from Austin (2010, live)
    3 Hot Pie (2010)
    4 The Best of CBB (2010, no guests)
    5 Andy's Back (2011)
    """
    return build_corpus(raw_corpus)


@pytest.fixture()
def config():
    """Round layout numbers: 100px fixed overhead, 2px gaps."""
    return Config(
        layout=LayoutConfig(
            padding=20, year_label_width=40, count_label_width=40, gap=2,
            min_cell_size=4, min_size_delta=0.1, initial_cell_size=11,
        ),
    )


@pytest.fixture()
def clock():
    return VirtualClock()


@pytest.fixture()
def controller(corpus, clock, config):
    ctrl = ExplorerController(corpus, clock, config)
    yield ctrl
    ctrl.close()
