"""
Type Definitions for the Storm Track Viewer.

This module defines the dataclasses and enumerations exchanged between the
predictor, the timeline, the scene and the orchestrator. Units follow
``common.constants``: degrees, knots and hectopascals.

Design Rationale
----------------
Model names are a closed enumeration rather than free strings, so that an
unrecognized tag is rejected at the boundary instead of silently drawing
nothing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from common.errors import DatasetError


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``.

    Parameters
    ----------
    value : str, optional
        Timestamp such as ``"2024-06-28T12:00Z"``. Empty values yield None.

    Returns
    -------
    datetime, optional
        Timezone-aware datetime, or None when no timestamp was given.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise DatasetError(f"Invalid timestamp {value!r}") from e


@dataclass(frozen=True)
class TrackPoint:
    """A single observed or forecast storm fix.

    Attributes
    ----------
    longitude : float
        Longitude in degrees.
    latitude : float
        Latitude in degrees.
    wind_speed : float
        Maximum sustained wind in knots.
    central_pressure : float
        Minimum central pressure in hPa.
    timestamp : datetime, optional
        Valid time of the fix.
    """
    longitude: float
    latitude: float
    wind_speed: float
    central_pressure: float
    timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TrackPoint':
        """Create a point from a dataset record (``lon, lat, wind, pressure, time``)."""
        try:
            return cls(
                longitude=float(d["lon"]),
                latitude=float(d["lat"]),
                wind_speed=float(d["wind"]),
                central_pressure=float(d["pressure"]),
                timestamp=parse_timestamp(d.get("time")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DatasetError(f"Malformed track point {d!r}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dataset record layout."""
        return {
            "lon": self.longitude,
            "lat": self.latitude,
            "wind": self.wind_speed,
            "pressure": self.central_pressure,
            "time": self.timestamp.isoformat() if self.timestamp else "",
        }


class TrackSource(Enum):
    """A drawable track: one of the three forecasts or the ground truth."""
    AI = "ai"
    ECMWF = "ecmwf"
    GFS = "gfs"
    ACTUAL = "actual"


FORECAST_SOURCES: Tuple[TrackSource, ...] = (
    TrackSource.AI,
    TrackSource.ECMWF,
    TrackSource.GFS,
)


class ModelSelection(Enum):
    """Which forecast(s) the user has chosen to display."""
    AI = "ai"
    ECMWF = "ecmwf"
    GFS = "gfs"
    ALL = "all"

    @classmethod
    def parse(cls, tag: str) -> 'ModelSelection':
        """Map a UI tag to a selection.

        Raises
        ------
        ValueError
            If the tag is not one of ``ai``, ``ecmwf``, ``gfs`` or ``all``.
        """
        try:
            return cls(tag.strip().lower())
        except (AttributeError, ValueError):
            raise ValueError(
                f"Unknown model {tag!r}; expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None

    def sources(self) -> Tuple[TrackSource, ...]:
        """Forecast sources drawn for this selection (ground truth excluded)."""
        if self is ModelSelection.ALL:
            return FORECAST_SOURCES
        return (TrackSource(self.value),)


@dataclass(frozen=True)
class PredictionSet:
    """Forecast sequences for one storm, index-aligned with its track.

    Attributes
    ----------
    ai : tuple of TrackPoint
        Autoregressive forecast; the first five points equal the track.
    ecmwf : tuple of TrackPoint
        ECMWF-like comparison sequence.
    gfs : tuple of TrackPoint
        GFS-like comparison sequence.
    """
    ai: Tuple[TrackPoint, ...]
    ecmwf: Tuple[TrackPoint, ...]
    gfs: Tuple[TrackPoint, ...]

    def __post_init__(self):
        """Validate that all three sequences share one length."""
        lengths = {len(self.ai), len(self.ecmwf), len(self.gfs)}
        if len(lengths) != 1:
            raise ValueError(
                f"Prediction sequences must be equal length, got "
                f"ai={len(self.ai)} ecmwf={len(self.ecmwf)} gfs={len(self.gfs)}"
            )

    def __len__(self) -> int:
        return len(self.ai)

    def for_source(self, source: TrackSource) -> Tuple[TrackPoint, ...]:
        """Get the sequence for a forecast source."""
        if source is TrackSource.ACTUAL:
            raise ValueError("PredictionSet holds forecasts only")
        return getattr(self, source.value)


@dataclass
class Storm:
    """A historical storm with its ground-truth track.

    Attributes
    ----------
    id : str
        Stable identifier (e.g. ``"beryl2024"``).
    name : str
        Display name.
    category : str
        Peak category label.
    date_range : str
        Human-readable active period.
    basin : str
        Ocean basin.
    track : tuple of TrackPoint
        Ordered ground-truth fixes; at least one point.
    predictions : PredictionSet, optional
        Attached once after training; read-only afterwards.
    """
    id: str
    name: str
    category: str
    date_range: str
    basin: str
    track: Tuple[TrackPoint, ...]
    predictions: Optional[PredictionSet] = None

    def __post_init__(self):
        if len(self.track) < 1:
            raise DatasetError(f"Storm {self.id!r} has an empty track")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Storm':
        """Create a storm from a dataset record."""
        try:
            track = tuple(TrackPoint.from_dict(p) for p in d["track"])
            return cls(
                id=str(d["id"]),
                name=str(d["name"]),
                category=str(d.get("category", "")),
                date_range=str(d.get("dates", d.get("dateRange", ""))),
                basin=str(d.get("basin", "")),
                track=track,
            )
        except (KeyError, TypeError) as e:
            raise DatasetError(f"Malformed storm record: {e}") from e

    def points_for(self, source: TrackSource) -> Tuple[TrackPoint, ...]:
        """Get the sequence to draw for a source.

        Forecast sources return an empty tuple until predictions are attached.
        """
        if source is TrackSource.ACTUAL:
            return self.track
        if self.predictions is None:
            return ()
        return self.predictions.for_source(source)


@dataclass(frozen=True)
class City:
    """A city whose current weather is shown alongside the storms."""
    name: str
    country: str
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'City':
        try:
            return cls(
                name=str(d["name"]),
                country=str(d.get("country", "")),
                latitude=float(d["lat"]),
                longitude=float(d["lon"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DatasetError(f"Malformed city record {d!r}: {e}") from e


@dataclass
class TimelineState:
    """Scrubber, playback and model selection.

    Written only by the UI event layer; read by the timeline controller
    and the scene manager.
    """
    scrub_percent: int = 100
    is_playing: bool = False
    selected_model: ModelSelection = ModelSelection.AI


@dataclass
class StormDataset:
    """Storms and cities loaded at startup."""
    storms: list = field(default_factory=list)
    cities: list = field(default_factory=list)
    source: str = ""
