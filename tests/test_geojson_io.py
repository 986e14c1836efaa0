import json

import pytest

from conftest import point_feature
from timedroute.errors import InputParseError, InputReadError, OutputWriteError
from timedroute.geojson_io import (
    dumps_time_points,
    load_waypoints,
    read_geojson,
    waypoints_from_geojson,
    write_time_points,
)
from timedroute.interpolate import TimePoint

POINTS = [
    TimePoint(longitude=1.5, latitude=2.5, time=0, segment=0),
    TimePoint(longitude=1.6, latitude=2.6, time=1, segment=0),
]


def test_only_point_features_are_kept_in_file_order():
    data = {
        "type": "FeatureCollection",
        "features": [
            point_feature(1.0, 2.0, speed=20),
            {"type": "Feature", "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}, "properties": {}},
            {"type": "Feature", "geometry": None, "properties": {}},
            point_feature(3.0, 4.0),
        ],
    }

    waypoints = waypoints_from_geojson(data)

    assert [(w.longitude, w.latitude, w.index) for w in waypoints] == [(1.0, 2.0, 0), (3.0, 4.0, 1)]
    assert waypoints[0].speed_mph == 20.0
    assert waypoints[1].speed_mph is None


def test_null_properties_and_extra_coordinates():
    feature = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [5.0, 6.0, 120.0]}, "properties": None}

    (waypoint,) = waypoints_from_geojson({"features": [feature]})

    assert waypoint.coordinate == (5.0, 6.0)
    assert waypoint.speed_mph is None


def test_point_without_coordinates_is_a_parse_error():
    feature = {"type": "Feature", "geometry": {"type": "Point"}, "properties": {}}

    with pytest.raises(InputParseError):
        waypoints_from_geojson({"features": [feature]})


def test_load_waypoints(write_geojson):
    path = write_geojson([point_feature(1.0, 2.0), point_feature(1.0, 2.1, speed=0)])

    waypoints = load_waypoints(path)

    assert len(waypoints) == 2
    assert waypoints[1].speed_mph is None


def test_missing_input_file(tmp_path):
    with pytest.raises(InputReadError, match="Could not open file"):
        read_geojson(tmp_path / "missing.geojson")


def test_malformed_json(tmp_path):
    path = tmp_path / "broken.geojson"
    path.write_text("{not json", encoding="utf8")

    with pytest.raises(InputParseError, match="Could not parse input file"):
        read_geojson(path)


def test_document_without_features(tmp_path):
    path = tmp_path / "list.geojson"
    path.write_text("[1, 2, 3]", encoding="utf8")

    with pytest.raises(InputParseError):
        read_geojson(path)


def test_dumps_time_points_shape():
    text = dumps_time_points(POINTS)

    assert text.startswith('{\n  "type": "FeatureCollection"')
    data = json.loads(text)
    assert data["type"] == "FeatureCollection"
    assert data["features"][1] == {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [1.6, 2.6]},
        "properties": {"time": 1, "segment": 0},
    }


def test_output_round_trips_through_the_reader(tmp_path):
    path = tmp_path / "out.geojson"
    write_time_points(POINTS, path)

    waypoints = load_waypoints(path)

    assert [w.coordinate for w in waypoints] == [(1.5, 2.5), (1.6, 2.6)]


def test_write_to_stdout(capsys):
    write_time_points(POINTS, None)

    data = json.loads(capsys.readouterr().out)
    assert len(data["features"]) == 2


def test_write_to_unwritable_destination(tmp_path):
    with pytest.raises(OutputWriteError, match="Could not write to output file"):
        write_time_points(POINTS, tmp_path)
