import json
from pathlib import Path

import pytest

from timedroute.config import Waypoint
from timedroute.geometry import destination_point


def waypoint_from(origin, bearing, distance, index, speed=None):
    lon, lat = destination_point(origin.coordinate, bearing, distance)
    return Waypoint(longitude=lon, latitude=lat, index=index, speed_mph=speed)


def point_feature(lon, lat, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


@pytest.fixture
def write_geojson(tmp_path):
    def _write(features, name="route.geojson") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf8")
        return path

    return _write
