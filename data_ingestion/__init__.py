"""
Data Ingestion Module for the Storm Track Viewer.

This module provides the storm dataset loader (with embedded fallback)
and the per-city current weather fetcher.
"""

from data_ingestion.loaders import (
    DatasetConfig,
    StormDatasetLoader,
    parse_dataset,
    load_embedded_dataset,
)

from data_ingestion.weather import (
    WeatherConfig,
    WeatherClient,
    WeatherReport,
    WeatherOutcome,
    WeatherIcon,
    weather_icon,
)

__all__ = [
    "DatasetConfig",
    "StormDatasetLoader",
    "parse_dataset",
    "load_embedded_dataset",
    "WeatherConfig",
    "WeatherClient",
    "WeatherReport",
    "WeatherOutcome",
    "WeatherIcon",
    "weather_icon",
]
