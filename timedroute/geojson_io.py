"""Reading waypoint routes from GeoJSON and writing timed points back out."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .config import Waypoint
from .errors import InputParseError, InputReadError, OutputWriteError
from .interpolate import TimePoint

logger = logging.getLogger(__name__)


def read_geojson(path: Path) -> Dict[str, Any]:
    """Load the raw GeoJSON document at ``path``."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf8") as handle:
            content = handle.read()
    except OSError as exc:
        raise InputReadError(f"Could not open file [{path}], exiting...") from exc

    try:
        data = json.loads(content)
    except ValueError as exc:
        raise InputParseError("Could not parse input file, exiting...") from exc

    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        raise InputParseError("Input file is not a GeoJSON FeatureCollection, exiting...")
    return data


def is_point_feature(feature: Any) -> bool:
    if not isinstance(feature, dict):
        return False
    geometry = feature.get("geometry")
    return isinstance(geometry, dict) and geometry.get("type") == "Point"


def waypoints_from_geojson(data: Dict[str, Any]) -> List[Waypoint]:
    """Return the Point features of a FeatureCollection as waypoints, in file order."""

    points = [feature for feature in data.get("features", []) if is_point_feature(feature)]
    logger.info("Geojson total vertex count %d", len(points))
    try:
        return [Waypoint.from_feature(feature, index) for index, feature in enumerate(points)]
    except ValueError as exc:
        raise InputParseError(str(exc)) from exc


def load_waypoints(path: Path) -> List[Waypoint]:
    return waypoints_from_geojson(read_geojson(path))


def time_point_feature(point: TimePoint) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [point.longitude, point.latitude],
        },
        "properties": {
            "time": point.time,
            "segment": point.segment,
        },
    }


def to_feature_collection(points: Iterable[TimePoint]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [time_point_feature(point) for point in points],
    }


def dumps_time_points(points: Iterable[TimePoint], indent: Optional[int] = 2) -> str:
    """Serialise timed points as a GeoJSON FeatureCollection string."""

    return json.dumps(to_feature_collection(points), indent=indent)


def write_time_points(points: List[TimePoint], output_path: Optional[Path], indent: Optional[int] = 2) -> None:
    """Write ``points`` to ``output_path``, or to standard output when no path is given."""

    output = dumps_time_points(points, indent=indent)
    if output_path is None:
        print(output)
        return

    output_path = Path(output_path)
    try:
        output_path.write_text(output, encoding="utf8")
    except OSError as exc:
        raise OutputWriteError(f"Could not write to output file [{output_path}], exiting...") from exc
    logger.info("Wrote output file [%s] with %d timestamped points", output_path, len(points))
