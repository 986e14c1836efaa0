"""Geodesic helpers for stepping along a route on the WGS84 ellipsoid."""
from __future__ import annotations

from typing import Tuple

from pyproj import Geod

Coordinate = Tuple[float, float]  # (lon, lat)

METERS_PER_MILE = 1609.34
SECONDS_PER_HOUR = 3600.0

_GEOD = Geod(ellps="WGS84")


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Return the initial bearing from coordinate ``a`` to coordinate ``b`` in degrees [0, 360)."""

    forward_azimuth, _, _ = _GEOD.inv(a[0], a[1], b[0], b[1])
    return (forward_azimuth + 360.0) % 360.0


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Compute the geodesic distance between two lon/lat points in metres."""

    _, _, distance = _GEOD.inv(a[0], a[1], b[0], b[1])
    return float(distance)


def destination_point(origin: Coordinate, bearing: float, distance: float) -> Coordinate:
    """Return the point reached by travelling ``distance`` metres from ``origin`` along ``bearing``."""

    lon, lat, _ = _GEOD.fwd(origin[0], origin[1], bearing, distance)
    return float(lon), float(lat)


def metres_per_second(speed_mph: float) -> float:
    return speed_mph * METERS_PER_MILE / SECONDS_PER_HOUR
