"""
Storm Dataset Loader.

This module reads the storm/city dataset consumed at startup. The dataset
is a JSON document ``{"storms": [...], "cities": [...]}`` where every storm
track is an ordered list of ``{lon, lat, wind, pressure, time?}`` records.

Sources
-------
1. A local JSON file path
2. An ``http(s)://`` URL fetched with httpx
3. The embedded dataset, substituted whenever (1)/(2) fail

A failed source is never fatal: the failure is logged as a warning and
the embedded dataset is returned instead.
"""

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from common.errors import DatasetError
from common.logging_config import get_logger
from common.types import City, Storm, StormDataset
from data_ingestion.embedded import EMBEDDED_DATASET, EMBEDDED_SOURCE

logger = get_logger(__name__)


@dataclass
class DatasetConfig:
    """Configuration for dataset loading.

    Attributes
    ----------
    source : str, optional
        File path or http(s) URL. None means use the embedded dataset.
    timeout_s : float
        HTTP timeout in seconds.
    """
    source: Optional[str] = None
    timeout_s: float = 10.0


def parse_dataset(raw: Dict[str, Any], source: str = "") -> StormDataset:
    """Validate and convert a raw dataset document.

    Parameters
    ----------
    raw : dict
        Decoded JSON document.
    source : str
        Where the document came from, kept for provenance.

    Returns
    -------
    StormDataset
        Parsed storms and cities.

    Raises
    ------
    DatasetError
        If the document does not follow the dataset layout.
    """
    if not isinstance(raw, dict):
        raise DatasetError(f"Dataset must be a JSON object, got {type(raw).__name__}")

    storms_raw = raw.get("storms")
    if not isinstance(storms_raw, list) or not storms_raw:
        raise DatasetError("Dataset has no storms")

    cities_raw = raw.get("cities", [])
    if not isinstance(cities_raw, list):
        raise DatasetError("Dataset 'cities' must be a list")

    storms = [Storm.from_dict(s) for s in storms_raw]
    cities = [City.from_dict(c) for c in cities_raw]

    return StormDataset(storms=storms, cities=cities, source=source)


def load_embedded_dataset() -> StormDataset:
    """Parse a fresh copy of the embedded dataset."""
    return parse_dataset(copy.deepcopy(EMBEDDED_DATASET), source=EMBEDDED_SOURCE)


class StormDatasetLoader:
    """Loads the storm dataset with embedded fallback.

    Parameters
    ----------
    config : DatasetConfig
        Loader configuration.
    client : httpx.AsyncClient, optional
        Client to use for URL sources; one is created per request if omitted.
    """

    def __init__(self, config: DatasetConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._client = client
        self._logger = get_logger("StormDatasetLoader")

    async def load(self) -> StormDataset:
        """Load the configured dataset, or the embedded one on any failure."""
        source = self.config.source
        if not source:
            return load_embedded_dataset()

        try:
            raw = await self._read(source)
            dataset = parse_dataset(raw, source=source)
        except (DatasetError, OSError, httpx.HTTPError) as e:
            self._logger.warning(
                f"Could not load dataset from {source} ({e}); using embedded dataset"
            )
            return load_embedded_dataset()

        self._logger.info(
            f"Loaded {len(dataset.storms)} storms and {len(dataset.cities)} cities from {source}"
        )
        return dataset

    async def _read(self, source: str) -> Any:
        """Read and decode ``source``; undecodable content raises ``DatasetError``."""
        try:
            if source.startswith(("http://", "https://")):
                if self._client is not None:
                    return await self._fetch(self._client, source)
                async with httpx.AsyncClient(timeout=self.config.timeout_s) as client:
                    return await self._fetch(client, source)

            path = Path(source)
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (ValueError, httpx.InvalidURL) as e:
            raise DatasetError(f"Unreadable dataset: {e}") from e

    @staticmethod
    async def _fetch(client: httpx.AsyncClient, url: str) -> Any:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()
