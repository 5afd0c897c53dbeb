import asyncio

import httpx
import pytest

from common.errors import WeatherFetchError
from common.types import City
from data_ingestion.weather import (
    WeatherClient,
    WeatherIcon,
    WeatherReport,
    weather_icon,
)

CITIES = [
    City("Miami", "USA", 25.76, -80.19),
    City("Tokyo", "Japan", 35.68, 139.65),
    City("Manila", "Philippines", 14.60, 120.98),
]


def payload(temperature=28.4, code=2):
    return {
        "current": {
            "temperature_2m": temperature,
            "relative_humidity_2m": 74,
            "wind_speed_10m": 18.5,
            "weather_code": code,
        }
    }


def fetch_all(handler, cities=CITIES):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await WeatherClient(client=client).fetch_all(cities)
    return asyncio.run(run())


@pytest.mark.parametrize("code, icon", [
    (0, WeatherIcon.CLEAR),
    (1, WeatherIcon.PARTLY_CLOUDY),
    (3, WeatherIcon.PARTLY_CLOUDY),
    (45, WeatherIcon.FOG),
    (61, WeatherIcon.RAIN),
    (71, WeatherIcon.SNOW),
    (80, WeatherIcon.MIXED),
    (95, WeatherIcon.STORM),
    (99, WeatherIcon.STORM),
])
def test_weather_icon_table(code, icon):
    assert weather_icon(code) is icon


def test_report_from_payload():
    report = WeatherReport.from_payload(payload(temperature=27.6, code=63))

    assert report.rounded_temperature == 28
    assert report.relative_humidity_pct == 74.0
    assert report.icon is WeatherIcon.RAIN


def test_report_rejects_missing_fields():
    with pytest.raises(WeatherFetchError):
        WeatherReport.from_payload({"current": {"temperature_2m": 20.0}})


def test_request_parameters():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.params)
        return httpx.Response(200, json=payload())

    fetch_all(handler, CITIES[:1])

    params = seen[0]
    assert params["latitude"] == "25.76"
    assert params["longitude"] == "-80.19"
    assert params["current"] == "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code"
    assert params["timezone"] == "auto"


def test_one_failing_city_does_not_stop_the_others():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["latitude"] == "35.68":
            return httpx.Response(503)
        return httpx.Response(200, json=payload())

    outcomes = fetch_all(handler)

    assert [o.city.name for o in outcomes] == ["Miami", "Tokyo", "Manila"]
    assert [o.ok for o in outcomes] == [True, False, True]
    assert "Tokyo" in outcomes[1].error


def test_transport_and_payload_errors_are_isolated():
    def handler(request: httpx.Request) -> httpx.Response:
        lat = request.url.params["latitude"]
        if lat == "25.76":
            raise httpx.ConnectError("unreachable", request=request)
        if lat == "35.68":
            return httpx.Response(200, content=b"<html>")
        return httpx.Response(200, json={"current": {}})

    outcomes = fetch_all(handler)

    assert not any(o.ok for o in outcomes)
    assert all(o.error for o in outcomes)
