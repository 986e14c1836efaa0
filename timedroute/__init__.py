"""Expand waypoint routes into points spaced one second apart."""

from .config import ExpansionConfig, PreviewConfig, Waypoint, load_config
from .interpolate import RemainderState, TimePoint, expand_route, interpolate_segment

__all__ = [
    "ExpansionConfig",
    "PreviewConfig",
    "Waypoint",
    "load_config",
    "RemainderState",
    "TimePoint",
    "expand_route",
    "interpolate_segment",
]
