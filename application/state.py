"""
Application configuration and state.

``AppState`` is built once at startup and handed by reference to the
orchestrator and the controller. Each field has a single writer: the
orchestrator fills in data, predictions and components during startup;
afterwards only the controller mutates the timeline, selection and theme.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import xarray as xr

from common.logging_config import AuditLogger
from common.types import City, Storm, TimelineState
from data_ingestion.loaders import DatasetConfig
from data_ingestion.weather import WeatherConfig, WeatherOutcome
from temporal_model.lstm import RegressorConfig
from trajectory_prediction.track_predictor import PredictorConfig, TrackPredictor
from visualization.globe import GlobeConfig, GlobeView
from visualization.scene import SceneConfig, SceneTrackManager
from visualization.themes import ChartStyle, Theme
from visualization.timeline import TimelineConfig


@dataclass
class AppConfig:
    """All component configurations."""
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    regressor: RegressorConfig = field(default_factory=RegressorConfig)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    scene: SceneConfig = field(default_factory=SceneConfig)
    globe: GlobeConfig = field(default_factory=GlobeConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StormListItem:
    """One entry of the storm picker."""
    index: int
    name: str
    date_range: str
    basin: str
    active: bool


@dataclass(frozen=True)
class StormInfo:
    """Info panel contents for the ground-truth point at the current index."""
    name: str
    category: str
    wind_speed_kt: float
    wind_speed_ms: float
    central_pressure_hpa: float
    latitude_label: str
    longitude_label: str
    time_label: str


@dataclass
class ErrorChart:
    """Data and styling for the track error chart."""
    labels: List[str]
    table: xr.Dataset
    style: ChartStyle
    colors: Dict[str, str]


@dataclass
class StartupFailure:
    """Terminal startup error shown in place of the progress bar."""
    stage: str
    message: str


@dataclass
class AppState:
    """Explicit application state shared by reference.

    Attributes
    ----------
    config : AppConfig
        Component configuration.
    audit : AuditLogger
        Audit records for this session.
    storms : list of Storm
        Loaded storms; predictions attached during startup.
    cities : list of City
        Cities for the weather cards.
    dataset_source : str
        Where the storms came from (path, URL or ``embedded``).
    device : str
        Torch device the regressor runs on.
    predictor : TrackPredictor, optional
        Trained predictor.
    scene : SceneTrackManager, optional
        Owner of the drawn tracks.
    globe : GlobeView, optional
        Globe rotation and zoom.
    timeline : TimelineState
        Scrub position, playback and model selection.
    current_storm : int
        Index of the selected storm.
    theme : Theme
        Active theme.
    """
    config: AppConfig = field(default_factory=AppConfig)
    audit: AuditLogger = field(default_factory=AuditLogger)
    storms: List[Storm] = field(default_factory=list)
    cities: List[City] = field(default_factory=list)
    dataset_source: str = ""
    device: str = ""
    predictor: Optional[TrackPredictor] = None
    scene: Optional[SceneTrackManager] = None
    globe: Optional[GlobeView] = None
    timeline: TimelineState = field(default_factory=TimelineState)
    current_storm: int = 0
    theme: Theme = Theme.DARK
    storm_list: List[StormListItem] = field(default_factory=list)
    storm_info: Optional[StormInfo] = None
    error_chart: Optional[ErrorChart] = None
    weather: List[WeatherOutcome] = field(default_factory=list)
    is_ready: bool = False
    failure: Optional[StartupFailure] = None

    @property
    def storm(self) -> Storm:
        return self.storms[self.current_storm]

    @property
    def weather_cards(self) -> List[WeatherOutcome]:
        """Cities whose weather was fetched; failed cities are omitted."""
        return [o for o in self.weather if o.ok]
