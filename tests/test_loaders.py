import asyncio
import json

import httpx
import pytest

from common.errors import DatasetError
from common.types import Storm, TrackPoint
from data_ingestion.embedded import EMBEDDED_SOURCE
from data_ingestion.loaders import (
    DatasetConfig,
    StormDatasetLoader,
    load_embedded_dataset,
    parse_dataset,
)

DATASET = {
    "storms": [{
        "id": "milton2024",
        "name": "Hurricane Milton",
        "category": "Category 5",
        "dates": "Oct 5 - Oct 10, 2024",
        "basin": "Atlantic",
        "track": [
            {"lon": -95.5, "lat": 22.0, "wind": 35, "pressure": 1006, "time": "2024-10-05T12:00Z"},
            {"lon": -94.8, "lat": 22.3, "wind": 50, "pressure": 997, "time": "2024-10-06T00:00Z"},
        ],
    }],
    "cities": [{"name": "Tampa", "country": "USA", "lat": 27.95, "lon": -82.46}],
}


def test_embedded_dataset():
    dataset = load_embedded_dataset()

    assert dataset.source == EMBEDDED_SOURCE
    assert [s.id for s in dataset.storms] == ["beryl2024", "otis2023", "lee2023", "ian2022"]
    assert len(dataset.storms[0].track) == 20
    assert len(dataset.cities) == 6


def test_embedded_dataset_is_a_fresh_copy():
    first = load_embedded_dataset()
    first.storms[0].predictions = object()

    assert load_embedded_dataset().storms[0].predictions is None


def test_parse_dataset_reads_records():
    dataset = parse_dataset(DATASET, source="test")

    storm = dataset.storms[0]
    assert storm.date_range == "Oct 5 - Oct 10, 2024"
    assert storm.track[1].wind_speed == 50.0
    assert storm.track[0].timestamp.hour == 12
    assert dataset.cities[0].name == "Tampa"


@pytest.mark.parametrize("raw", [
    [],
    {"storms": []},
    {"storms": [{"id": "x", "name": "X", "track": [{"lat": 1.0}]}]},
    {"storms": DATASET["storms"], "cities": "none"},
])
def test_parse_dataset_rejects_malformed(raw):
    with pytest.raises(DatasetError):
        parse_dataset(raw)


def test_track_point_dict_keys():
    point = TrackPoint.from_dict({"lon": -80.0, "lat": 25.0, "wind": 100, "pressure": 950})

    assert point.to_dict()["lon"] == -80.0
    assert point.timestamp is None


def test_storm_reads_date_range_alias():
    record = {k: v for k, v in DATASET["storms"][0].items() if k != "dates"}
    record["dateRange"] = "Oct 2024"

    assert Storm.from_dict(record).date_range == "Oct 2024"


def test_load_from_file(tmp_path):
    path = tmp_path / "storms.json"
    path.write_text(json.dumps(DATASET))

    dataset = asyncio.run(StormDatasetLoader(DatasetConfig(source=str(path))).load())

    assert dataset.source == str(path)
    assert dataset.storms[0].id == "milton2024"


def test_missing_file_falls_back_to_embedded(tmp_path):
    loader = StormDatasetLoader(DatasetConfig(source=str(tmp_path / "missing.json")))

    dataset = asyncio.run(loader.load())

    assert dataset.source == EMBEDDED_SOURCE


def test_invalid_json_falls_back_to_embedded(tmp_path):
    path = tmp_path / "storms.json"
    path.write_text("{not json")

    dataset = asyncio.run(StormDatasetLoader(DatasetConfig(source=str(path))).load())

    assert dataset.source == EMBEDDED_SOURCE


def test_load_from_url():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/storms.json"
        return httpx.Response(200, json=DATASET)

    async def load():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            loader = StormDatasetLoader(DatasetConfig(source="https://data.test/storms.json"), client)
            return await loader.load()

    dataset = asyncio.run(load())

    assert dataset.storms[0].name == "Hurricane Milton"


def test_http_error_falls_back_to_embedded():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    async def load():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            loader = StormDatasetLoader(DatasetConfig(source="https://data.test/storms.json"), client)
            return await loader.load()

    assert asyncio.run(load()).source == EMBEDDED_SOURCE


def test_non_utf8_file_falls_back_to_embedded(tmp_path):
    path = tmp_path / "storms.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    dataset = asyncio.run(StormDatasetLoader(DatasetConfig(source=str(path))).load())

    assert dataset.source == EMBEDDED_SOURCE


def test_non_utf8_response_falls_back_to_embedded():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\xff\xfe\x00garbage")

    async def load():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            loader = StormDatasetLoader(DatasetConfig(source="https://data.test/storms.json"), client)
            return await loader.load()

    assert asyncio.run(load()).source == EMBEDDED_SOURCE


def test_invalid_url_falls_back_to_embedded():
    loader = StormDatasetLoader(DatasetConfig(source="http://[::1"))

    assert asyncio.run(loader.load()).source == EMBEDDED_SOURCE
