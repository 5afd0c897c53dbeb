"""
Embedded fallback dataset.

Four recent Category 5 hurricanes and a handful of cities, used whenever
the configured dataset source cannot be read. Positions are in degrees,
wind in knots, pressure in hPa, times at 12-hourly (or finer) fixes.
"""

from typing import Any, Dict

EMBEDDED_SOURCE = "embedded"

EMBEDDED_DATASET: Dict[str, Any] = {
    "storms": [
        {
            "id": "beryl2024",
            "name": "Hurricane Beryl",
            "category": "Category 5",
            "dates": "Jun 28 - Jul 11, 2024",
            "basin": "Atlantic",
            "track": [
                {"lon": -45.4, "lat": 9.4, "wind": 45, "pressure": 1003, "time": "2024-06-28T12:00Z"},
                {"lon": -48.2, "lat": 10.1, "wind": 60, "pressure": 996, "time": "2024-06-29T00:00Z"},
                {"lon": -51.1, "lat": 10.6, "wind": 85, "pressure": 980, "time": "2024-06-29T12:00Z"},
                {"lon": -54.0, "lat": 10.9, "wind": 115, "pressure": 959, "time": "2024-06-30T00:00Z"},
                {"lon": -57.0, "lat": 11.1, "wind": 130, "pressure": 946, "time": "2024-06-30T12:00Z"},
                {"lon": -59.9, "lat": 11.3, "wind": 140, "pressure": 938, "time": "2024-07-01T00:00Z"},
                {"lon": -62.7, "lat": 11.9, "wind": 150, "pressure": 934, "time": "2024-07-01T12:00Z"},
                {"lon": -65.6, "lat": 12.6, "wind": 145, "pressure": 938, "time": "2024-07-02T00:00Z"},
                {"lon": -68.6, "lat": 13.5, "wind": 130, "pressure": 950, "time": "2024-07-02T12:00Z"},
                {"lon": -71.6, "lat": 14.3, "wind": 120, "pressure": 960, "time": "2024-07-03T00:00Z"},
                {"lon": -74.6, "lat": 15.2, "wind": 100, "pressure": 972, "time": "2024-07-03T12:00Z"},
                {"lon": -77.5, "lat": 16.0, "wind": 85, "pressure": 980, "time": "2024-07-04T00:00Z"},
                {"lon": -80.2, "lat": 16.8, "wind": 90, "pressure": 978, "time": "2024-07-04T12:00Z"},
                {"lon": -82.8, "lat": 17.5, "wind": 95, "pressure": 974, "time": "2024-07-05T00:00Z"},
                {"lon": -85.1, "lat": 18.1, "wind": 110, "pressure": 965, "time": "2024-07-05T12:00Z"},
                {"lon": -87.3, "lat": 18.7, "wind": 95, "pressure": 973, "time": "2024-07-06T00:00Z"},
                {"lon": -89.5, "lat": 19.4, "wind": 80, "pressure": 982, "time": "2024-07-06T12:00Z"},
                {"lon": -91.8, "lat": 20.2, "wind": 70, "pressure": 988, "time": "2024-07-07T00:00Z"},
                {"lon": -94.2, "lat": 21.4, "wind": 75, "pressure": 985, "time": "2024-07-07T12:00Z"},
                {"lon": -96.4, "lat": 23.1, "wind": 80, "pressure": 980, "time": "2024-07-08T00:00Z"},
            ],
        },
        {
            "id": "otis2023",
            "name": "Hurricane Otis",
            "category": "Category 5",
            "dates": "Oct 22-25, 2023",
            "basin": "East Pacific",
            "track": [
                {"lon": -96.3, "lat": 11.4, "wind": 35, "pressure": 1004, "time": "2023-10-22T12:00Z"},
                {"lon": -96.8, "lat": 12.4, "wind": 45, "pressure": 1000, "time": "2023-10-23T00:00Z"},
                {"lon": -97.3, "lat": 13.5, "wind": 65, "pressure": 991, "time": "2023-10-23T12:00Z"},
                {"lon": -97.8, "lat": 14.6, "wind": 100, "pressure": 968, "time": "2023-10-24T00:00Z"},
                {"lon": -98.2, "lat": 15.5, "wind": 140, "pressure": 937, "time": "2023-10-24T12:00Z"},
                {"lon": -99.0, "lat": 16.5, "wind": 165, "pressure": 923, "time": "2023-10-25T00:00Z"},
                {"lon": -99.5, "lat": 17.2, "wind": 135, "pressure": 945, "time": "2023-10-25T06:00Z"},
            ],
        },
        {
            "id": "lee2023",
            "name": "Hurricane Lee",
            "category": "Category 5",
            "dates": "Sep 5-16, 2023",
            "basin": "Atlantic",
            "track": [
                {"lon": -35.0, "lat": 11.5, "wind": 40, "pressure": 1005, "time": "2023-09-05T12:00Z"},
                {"lon": -38.5, "lat": 12.0, "wind": 70, "pressure": 988, "time": "2023-09-06T12:00Z"},
                {"lon": -42.0, "lat": 13.0, "wind": 105, "pressure": 963, "time": "2023-09-07T12:00Z"},
                {"lon": -46.0, "lat": 14.5, "wind": 145, "pressure": 935, "time": "2023-09-08T12:00Z"},
                {"lon": -50.5, "lat": 16.0, "wind": 160, "pressure": 926, "time": "2023-09-09T12:00Z"},
                {"lon": -55.0, "lat": 17.5, "wind": 140, "pressure": 940, "time": "2023-09-10T12:00Z"},
                {"lon": -59.0, "lat": 19.0, "wind": 130, "pressure": 948, "time": "2023-09-11T12:00Z"},
                {"lon": -62.5, "lat": 21.0, "wind": 115, "pressure": 958, "time": "2023-09-12T12:00Z"},
                {"lon": -65.5, "lat": 24.0, "wind": 100, "pressure": 968, "time": "2023-09-13T12:00Z"},
                {"lon": -67.5, "lat": 30.0, "wind": 85, "pressure": 975, "time": "2023-09-14T12:00Z"},
                {"lon": -68.0, "lat": 37.0, "wind": 75, "pressure": 982, "time": "2023-09-15T12:00Z"},
                {"lon": -67.0, "lat": 44.0, "wind": 65, "pressure": 988, "time": "2023-09-16T12:00Z"},
            ],
        },
        {
            "id": "ian2022",
            "name": "Hurricane Ian",
            "category": "Category 5",
            "dates": "Sep 23 - Oct 2, 2022",
            "basin": "Atlantic",
            "track": [
                {"lon": -74.0, "lat": 14.0, "wind": 30, "pressure": 1006, "time": "2022-09-23T12:00Z"},
                {"lon": -76.5, "lat": 15.0, "wind": 50, "pressure": 998, "time": "2022-09-24T12:00Z"},
                {"lon": -79.5, "lat": 16.5, "wind": 75, "pressure": 985, "time": "2022-09-25T12:00Z"},
                {"lon": -82.0, "lat": 18.0, "wind": 105, "pressure": 963, "time": "2022-09-26T12:00Z"},
                {"lon": -83.5, "lat": 20.0, "wind": 130, "pressure": 947, "time": "2022-09-27T12:00Z"},
                {"lon": -83.0, "lat": 23.0, "wind": 155, "pressure": 937, "time": "2022-09-28T06:00Z"},
                {"lon": -82.5, "lat": 26.5, "wind": 150, "pressure": 940, "time": "2022-09-28T18:00Z"},
                {"lon": -81.0, "lat": 30.0, "wind": 85, "pressure": 975, "time": "2022-09-29T18:00Z"},
                {"lon": -79.5, "lat": 33.0, "wind": 70, "pressure": 983, "time": "2022-09-30T12:00Z"},
            ],
        },
    ],
    "cities": [
        {"name": "Miami", "country": "USA", "lat": 25.76, "lon": -80.19},
        {"name": "Tokyo", "country": "Japan", "lat": 35.68, "lon": 139.65},
        {"name": "Seoul", "country": "Korea", "lat": 37.57, "lon": 126.98},
        {"name": "Manila", "country": "Philippines", "lat": 14.60, "lon": 120.98},
        {"name": "Hong Kong", "country": "China", "lat": 22.32, "lon": 114.17},
        {"name": "Sydney", "country": "Australia", "lat": -33.87, "lon": 151.21},
    ],
}
