"""
Current Weather Fetcher.
Fetches current conditions per city from the Open-Meteo forecast API.

Cities are fetched one at a time. A failure for one city is logged and
recorded in that city's outcome; it never aborts the remaining cities.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import httpx

from common.errors import WeatherFetchError
from common.logging_config import get_logger
from common.types import City

logger = get_logger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
CURRENT_FIELDS = ("temperature_2m", "relative_humidity_2m", "wind_speed_10m", "weather_code")


class WeatherIcon(Enum):
    """Icon shown on a weather card."""
    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    FOG = "fog"
    RAIN = "rain"
    SNOW = "snow"
    STORM = "storm"
    MIXED = "mixed"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    WeatherIcon.CLEAR: "☀️",
    WeatherIcon.PARTLY_CLOUDY: "⛅",
    WeatherIcon.FOG: "\U0001f32b️",
    WeatherIcon.RAIN: "\U0001f327️",
    WeatherIcon.SNOW: "❄️",
    WeatherIcon.STORM: "⛈️",
    WeatherIcon.MIXED: "\U0001f324️",
}


def weather_icon(code: int) -> WeatherIcon:
    """Map a WMO weather code to an icon.

    Ordinal table: 0 clear, <=3 partly cloudy, <=49 fog, <=69 rain,
    <=79 snow, >=95 storm, anything else mixed.
    """
    if code == 0:
        return WeatherIcon.CLEAR
    if code <= 3:
        return WeatherIcon.PARTLY_CLOUDY
    if code <= 49:
        return WeatherIcon.FOG
    if code <= 69:
        return WeatherIcon.RAIN
    if code <= 79:
        return WeatherIcon.SNOW
    if code >= 95:
        return WeatherIcon.STORM
    return WeatherIcon.MIXED


@dataclass
class WeatherConfig:
    """Configuration for the weather fetcher."""
    api_url: str = OPEN_METEO_URL
    timeout_s: float = 10.0
    enabled: bool = True


@dataclass(frozen=True)
class WeatherReport:
    """Current conditions for one city."""
    temperature_c: float
    relative_humidity_pct: float
    wind_speed_kmh: float
    weather_code: int

    @property
    def icon(self) -> WeatherIcon:
        return weather_icon(self.weather_code)

    @property
    def rounded_temperature(self) -> int:
        return round(self.temperature_c)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'WeatherReport':
        """Read the four consumed fields from an Open-Meteo response.

        Raises
        ------
        WeatherFetchError
            If the ``current`` block or any consumed field is missing.
        """
        try:
            current = payload["current"]
            return cls(
                temperature_c=float(current["temperature_2m"]),
                relative_humidity_pct=float(current["relative_humidity_2m"]),
                wind_speed_kmh=float(current["wind_speed_10m"]),
                weather_code=int(current["weather_code"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherFetchError(f"Malformed weather payload: {e}") from e


@dataclass
class WeatherOutcome:
    """Result of fetching one city: a report or the error that prevented it."""
    city: City
    report: Optional[WeatherReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.report is not None


class WeatherClient:
    """Open-Meteo client.

    Parameters
    ----------
    config : WeatherConfig, optional
        Endpoint and timeout.
    client : httpx.AsyncClient, optional
        Shared client; one is created per ``fetch_all`` call if omitted.
    """

    def __init__(
        self,
        config: Optional[WeatherConfig] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config or WeatherConfig()
        self._client = client

    async def fetch_current(self, client: httpx.AsyncClient, city: City) -> WeatherReport:
        """Fetch current conditions for one city.

        Raises
        ------
        WeatherFetchError
            On transport errors, HTTP errors or malformed payloads.
        """
        params = {
            "latitude": city.latitude,
            "longitude": city.longitude,
            "current": ",".join(CURRENT_FIELDS),
            "timezone": "auto",
        }
        try:
            response = await client.get(self.config.api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise WeatherFetchError(f"Weather request for {city.name} failed: {e}") from e

        return WeatherReport.from_payload(payload)

    async def fetch_all(self, cities: Sequence[City]) -> List[WeatherOutcome]:
        """Fetch every city in turn, isolating per-city failures.

        Returns
        -------
        list of WeatherOutcome
            One outcome per city, in input order.
        """
        if self._client is not None:
            return await self._fetch_each(self._client, cities)
        async with httpx.AsyncClient(timeout=self.config.timeout_s) as client:
            return await self._fetch_each(client, cities)

    async def _fetch_each(
        self,
        client: httpx.AsyncClient,
        cities: Sequence[City]
    ) -> List[WeatherOutcome]:
        outcomes = []
        for city in cities:
            try:
                report = await self.fetch_current(client, city)
            except WeatherFetchError as e:
                logger.error(f"Weather fetch failed: {city.name}: {e}")
                outcomes.append(WeatherOutcome(city=city, error=str(e)))
                continue
            outcomes.append(WeatherOutcome(city=city, report=report))

        ok = sum(1 for o in outcomes if o.ok)
        logger.info(f"Fetched weather for {ok}/{len(outcomes)} cities")
        return outcomes
