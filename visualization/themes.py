"""
Theme palettes for the scene and the error chart.

Themes only change backgrounds and text/grid colours. Track colours are
the fixed constants in ``common.constants.TRACK_COLORS``.
"""

from dataclasses import dataclass
from enum import Enum


class Theme(Enum):
    DARK = "dark"
    LIGHT = "light"

    def toggled(self) -> 'Theme':
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


@dataclass(frozen=True)
class Palette:
    """Colours for one theme."""
    bg_primary: str
    bg_secondary: str
    bg_card: str
    border: str
    text_primary: str
    text_secondary: str
    ocean: str
    land: str
    globe_background: str


@dataclass(frozen=True)
class ChartStyle:
    """Colours applied to the error chart's legend, ticks and grid."""
    text_color: str
    grid_color: str


PALETTES = {
    Theme.DARK: Palette(
        bg_primary="#0a0a1a",
        bg_secondary="#12122a",
        bg_card="rgba(255,255,255,0.05)",
        border="rgba(255,255,255,0.1)",
        text_primary="#ffffff",
        text_secondary="rgba(255,255,255,0.7)",
        ocean="#0a1628",
        land="rgba(40, 80, 60, 0.9)",
        globe_background="#050510",
    ),
    Theme.LIGHT: Palette(
        bg_primary="#f5f7fa",
        bg_secondary="#ffffff",
        bg_card="rgba(0,0,0,0.03)",
        border="rgba(0,0,0,0.1)",
        text_primary="#1a1a2e",
        text_secondary="rgba(0,0,0,0.7)",
        ocean="#a8d5e5",
        land="rgba(80, 140, 100, 0.9)",
        globe_background="#e8f4fc",
    ),
}

CHART_STYLES = {
    Theme.DARK: ChartStyle(text_color="rgba(255,255,255,0.7)", grid_color="rgba(255,255,255,0.1)"),
    Theme.LIGHT: ChartStyle(text_color="rgba(0,0,0,0.7)", grid_color="rgba(0,0,0,0.1)"),
}


def palette_for(theme: Theme) -> Palette:
    return PALETTES[theme]


def chart_style_for(theme: Theme) -> ChartStyle:
    return CHART_STYLES[theme]
