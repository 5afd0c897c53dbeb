"""
View models derived from the application state.

Everything here reads ``AppState`` and writes only the derived panel
fields (storm list, info panel, error chart) plus the drawn tracks.
"""

from datetime import datetime
from typing import List, Optional

from common.constants import TRACK_COLORS
from common.types import Storm
from common.units import convert
from validation.metrics import build_error_table, chart_labels
from visualization.themes import Theme, chart_style_for, palette_for
from visualization.timeline import index_for
from application.state import AppState, ErrorChart, StormInfo, StormListItem


def format_latitude(lat: float) -> str:
    return f"{abs(lat):.1f}°{'N' if lat >= 0 else 'S'}"


def format_longitude(lon: float) -> str:
    return f"{abs(lon):.1f}°{'E' if lon >= 0 else 'W'}"


def format_timestamp(ts: Optional[datetime]) -> str:
    """E.g. ``Jun 28, 2024, 12:00 PM``; empty when there is no timestamp."""
    if ts is None:
        return ""
    return ts.strftime("%b %d, %Y, %I:%M %p")


def build_storm_list(state: AppState) -> List[StormListItem]:
    return [
        StormListItem(
            index=i,
            name=storm.name,
            date_range=storm.date_range,
            basin=storm.basin,
            active=(i == state.current_storm),
        )
        for i, storm in enumerate(state.storms)
    ]


def build_storm_info(storm: Storm, index: int) -> StormInfo:
    """Info panel for the ground-truth point at ``index`` (clamped to the track)."""
    point = storm.track[min(max(index, 0), len(storm.track) - 1)]
    return StormInfo(
        name=storm.name,
        category=storm.category,
        wind_speed_kt=point.wind_speed,
        wind_speed_ms=convert(point.wind_speed, 'knot', 'm/s'),
        central_pressure_hpa=point.central_pressure,
        latitude_label=format_latitude(point.latitude),
        longitude_label=format_longitude(point.longitude),
        time_label=format_timestamp(point.timestamp),
    )


def build_error_chart(storm: Storm, theme: Theme) -> ErrorChart:
    table = build_error_table(storm)
    return ErrorChart(
        labels=chart_labels(table),
        table=table,
        style=chart_style_for(theme),
        colors={name: TRACK_COLORS[name] for name in table.data_vars},
    )


def apply_theme(state: AppState) -> None:
    """Push the active theme to the scene background and chart styling."""
    if state.scene is not None:
        state.scene.backend.set_background(palette_for(state.theme).globe_background)
    if state.error_chart is not None:
        state.error_chart.style = chart_style_for(state.theme)


def populate_panels(state: AppState) -> None:
    """Build the storm list and error chart for the selected storm."""
    state.storm_list = build_storm_list(state)
    state.error_chart = build_error_chart(state.storm, state.theme)


def update_visualization(state: AppState) -> None:
    """Redraw tracks and the info panel for the current timeline state.

    Runs synchronously so the scene reflects the timeline before control
    returns to the caller.
    """
    storm = state.storm
    max_index = index_for(state.timeline.scrub_percent, len(storm.track))

    if state.scene is not None:
        state.scene.update(storm, max_index, state.timeline.selected_model)

    state.storm_info = build_storm_info(storm, max_index)
