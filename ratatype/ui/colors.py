"""Terminal color palette and heatmap band colors."""

from __future__ import annotations

import curses
from typing import Dict

from ratatype.core.heatmap import HeatBand
from ratatype.ui.widgets import CharState


class Palette:
    """curses color pair numbers used by the renderer.

    Pair 0 is reserved by curses for the default colors.
    """

    CORRECT = 1
    CORRECTED = 2
    WRONG = 3
    CURSOR = 4
    PENDING = 5

    TIMER = 6
    STATS = 7
    TITLE = 8
    HINT = 9

    # Heatmap keys: black text on a colored background
    HEAT_BEST = 10
    HEAT_GOOD = 11
    HEAT_MEDIUM = 12
    HEAT_POOR = 13
    HEAT_WORST = 14
    HEAT_NO_DATA = 15
    HEAT_UNUSED = 16


# (pair, foreground, background). -1 is the terminal default.
PAIR_DEFINITIONS = (
    (Palette.CORRECT, curses.COLOR_GREEN, -1),
    (Palette.CORRECTED, curses.COLOR_YELLOW, -1),
    (Palette.WRONG, curses.COLOR_RED, -1),
    (Palette.CURSOR, curses.COLOR_BLACK, curses.COLOR_WHITE),
    (Palette.PENDING, curses.COLOR_WHITE, -1),
    (Palette.TIMER, curses.COLOR_YELLOW, -1),
    (Palette.STATS, curses.COLOR_CYAN, -1),
    (Palette.TITLE, curses.COLOR_GREEN, -1),
    (Palette.HINT, curses.COLOR_YELLOW, -1),
    (Palette.HEAT_BEST, curses.COLOR_BLACK, curses.COLOR_GREEN),
    (Palette.HEAT_GOOD, curses.COLOR_BLACK, curses.COLOR_CYAN),
    (Palette.HEAT_MEDIUM, curses.COLOR_BLACK, curses.COLOR_YELLOW),
    (Palette.HEAT_POOR, curses.COLOR_BLACK, curses.COLOR_MAGENTA),
    (Palette.HEAT_WORST, curses.COLOR_BLACK, curses.COLOR_RED),
    (Palette.HEAT_NO_DATA, curses.COLOR_BLACK, curses.COLOR_WHITE),
    (Palette.HEAT_UNUSED, curses.COLOR_WHITE, curses.COLOR_BLACK),
)

CHAR_STATE_PAIRS: Dict[CharState, int] = {
    CharState.CORRECT: Palette.CORRECT,
    CharState.CORRECTED: Palette.CORRECTED,
    CharState.WRONG: Palette.WRONG,
    CharState.CURSOR: Palette.CURSOR,
    CharState.PENDING: Palette.PENDING,
}

BAND_PAIRS: Dict[HeatBand, int] = {
    HeatBand.FASTEST: Palette.HEAT_BEST,
    HeatBand.FAST: Palette.HEAT_GOOD,
    HeatBand.MEDIUM: Palette.HEAT_MEDIUM,
    HeatBand.SLOW: Palette.HEAT_POOR,
    HeatBand.SLOWEST: Palette.HEAT_WORST,
    HeatBand.HIGHEST: Palette.HEAT_BEST,
    HeatBand.HIGH: Palette.HEAT_GOOD,
    HeatBand.LOW: Palette.HEAT_POOR,
    HeatBand.LOWEST: Palette.HEAT_WORST,
    HeatBand.NO_DATA: Palette.HEAT_NO_DATA,
    HeatBand.UNUSED: Palette.HEAT_UNUSED,
}


def pair_for_state(state: CharState) -> int:
    return CHAR_STATE_PAIRS[state]


def pair_for_band(band: HeatBand) -> int:
    """Color pair for a heatmap band; unknown bands render as unused keys."""
    return BAND_PAIRS.get(band, Palette.HEAT_UNUSED)


def init_palette() -> None:
    """Register every color pair. Must run after ``curses.initscr``."""
    curses.start_color()
    curses.use_default_colors()
    for pair, fg, bg in PAIR_DEFINITIONS:
        curses.init_pair(pair, fg, bg)
