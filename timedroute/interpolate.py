"""Expansion of a waypoint route into points spaced one second apart."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import DEFAULT_SPEED_MPH, Waypoint
from .errors import InsufficientWaypointsError
from .geometry import (
    METERS_PER_MILE,
    SECONDS_PER_HOUR,
    bearing_degrees,
    destination_point,
    distance_m,
    metres_per_second,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemainderState:
    """Travel left unconsumed after the last whole second of a segment."""

    distance_m: float = 0.0
    time_s: float = 0.0


@dataclass(frozen=True)
class TimePoint:
    longitude: float
    latitude: float
    time: int
    segment: int


@dataclass
class SegmentResult:
    """Points emitted for one segment plus the values they were derived from."""

    points: List[TimePoint]
    remainder: RemainderState
    segment_count: int
    bearing: float
    speed_mph: float
    start_distance_m: float
    full_distance_m: float
    effective_distance_m: float
    one_second_m: float

    @property
    def duration(self) -> int:
        """Seconds the running clock advances; a skipped segment does not move it back."""

        return max(self.segment_count, 0)

    @property
    def leftover_m(self) -> float:
        """Distance travelled past the last whole-second point of the segment."""

        return self.one_second_m - self.remainder.distance_m


def interpolate_segment(
    start: Waypoint,
    end: Waypoint,
    remainder: RemainderState,
    time_base: int,
    boundary_only: bool = False,
    default_speed_mph: float = DEFAULT_SPEED_MPH,
) -> SegmentResult:
    """Emit one point per second of travel from ``start`` towards ``end``.

    The carried ``remainder`` is the part of a second already spent when the
    previous segment finished; it is converted into a head start along this
    segment at this segment's speed. Points at both ``i = 0`` and the last
    whole second are always emitted, so consecutive segments sample their
    shared waypoint twice.
    """

    bearing = bearing_degrees(start.coordinate, end.coordinate)
    speed = start.speed_or(default_speed_mph)
    start_distance = speed * METERS_PER_MILE * remainder.time_s / SECONDS_PER_HOUR
    full_distance = distance_m(start.coordinate, end.coordinate)
    effective_distance = full_distance - start_distance
    one_second = metres_per_second(speed)
    segment_count = math.floor(effective_distance / one_second)

    points: List[TimePoint] = []
    for step in range(segment_count + 1):
        if boundary_only and step not in (0, segment_count):
            continue
        lon, lat = destination_point(start.coordinate, bearing, start_distance + step * one_second)
        points.append(TimePoint(longitude=lon, latitude=lat, time=time_base + step, segment=start.index))

    distance_left = one_second - (effective_distance - segment_count * one_second)
    updated = RemainderState(distance_m=distance_left, time_s=distance_left / one_second)

    logger.debug(
        "segment %d: bearing=%.3f speed=%.1f start=%.3f full=%.3f effective=%.3f "
        "one_second=%.3f count=%d remainder=(%.3f m, %.3f s)",
        start.index,
        bearing,
        speed,
        start_distance,
        full_distance,
        effective_distance,
        one_second,
        segment_count,
        updated.distance_m,
        updated.time_s,
    )

    return SegmentResult(
        points=points,
        remainder=updated,
        segment_count=segment_count,
        bearing=bearing,
        speed_mph=speed,
        start_distance_m=start_distance,
        full_distance_m=full_distance,
        effective_distance_m=effective_distance,
        one_second_m=one_second,
    )


def limit_vertices(route: Sequence[Waypoint], vertex_limit: Optional[int]) -> List[Waypoint]:
    """Return the first ``vertex_limit`` waypoints of ``route`` (all of them when no limit is set)."""

    if vertex_limit is None:
        return list(route)
    if vertex_limit < 2:
        raise ValueError(f"Vertex limit must be at least 2, got {vertex_limit}.")
    return list(route[:vertex_limit])


@dataclass
class Expansion:
    """Running state of a route expansion."""

    points: List[TimePoint] = field(default_factory=list)
    remainder: RemainderState = field(default_factory=RemainderState)
    time: int = 0
    segments: List[SegmentResult] = field(default_factory=list)


def expand_route_detailed(
    route: Sequence[Waypoint],
    vertex_limit: Optional[int] = None,
    boundary_only: bool = False,
    default_speed_mph: float = DEFAULT_SPEED_MPH,
) -> Expansion:
    """Expand ``route`` and keep the per-segment results alongside the points."""

    waypoints = limit_vertices(route, vertex_limit)
    if len(waypoints) < 2:
        raise InsufficientWaypointsError(len(waypoints))

    expansion = Expansion()
    for start, end in zip(waypoints[:-1], waypoints[1:]):
        result = interpolate_segment(
            start,
            end,
            expansion.remainder,
            expansion.time,
            boundary_only=boundary_only,
            default_speed_mph=default_speed_mph,
        )
        expansion.points.extend(result.points)
        expansion.remainder = result.remainder
        expansion.time += result.duration
        expansion.segments.append(result)

    logger.info(
        "Expanded %d waypoints into %d timed points covering %d seconds",
        len(waypoints),
        len(expansion.points),
        expansion.time,
    )
    return expansion


def expand_route(
    route: Sequence[Waypoint],
    vertex_limit: Optional[int] = None,
    boundary_only: bool = False,
    default_speed_mph: float = DEFAULT_SPEED_MPH,
) -> List[TimePoint]:
    """Expand ``route`` into points spaced one second apart."""

    return expand_route_detailed(
        route,
        vertex_limit=vertex_limit,
        boundary_only=boundary_only,
        default_speed_mph=default_speed_mph,
    ).points
