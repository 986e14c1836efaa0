"""Command line entry point for the route time expander."""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ExpansionConfig, Waypoint, load_config
from .errors import ConfigError, OutputWriteError, TimedRouteError, UsageError
from .geojson_io import load_waypoints, write_time_points
from .interpolate import TimePoint, expand_route, limit_vertices

logger = logging.getLogger(__name__)

USAGE = "Usage: timedroute input-file optional-output-file"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="timedroute",
        description="Expand a GeoJSON route of waypoints into points spaced one second apart.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="GeoJSON FeatureCollection whose Point features form the route.",
    )
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        help="Where to write the timed points. Defaults to standard output.",
    )
    parser.add_argument("--config", type=Path, help="JSON or YAML file with expansion options.")
    parser.add_argument("--vertex-limit", help="Only use the first N waypoints (N >= 2).")
    parser.add_argument(
        "--boundary-only",
        action="store_true",
        default=None,
        help="Emit only the first and last point of each segment.",
    )
    parser.add_argument("--default-speed", help="Speed in mph for waypoints without one.")
    parser.add_argument("--preview", type=Path, help="Render a playback preview (.gif, .mp4 or .webm).")
    parser.add_argument("--debug", action="store_true", default=None, help="Log per-segment diagnostics.")
    return parser.parse_args(argv)


def _option_value(name: str, value: str, convert):
    try:
        return convert(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc


def build_config(args: argparse.Namespace) -> ExpansionConfig:
    """Combine the optional configuration file with command line overrides."""

    config = load_config(args.config) if args.config else ExpansionConfig()
    overrides = {}
    if args.vertex_limit is not None:
        overrides["vertex_limit"] = _option_value("--vertex-limit", args.vertex_limit, int)
    if args.boundary_only is not None:
        overrides["boundary_only"] = args.boundary_only
    if args.default_speed is not None:
        overrides["default_speed_mph"] = _option_value("--default-speed", args.default_speed, float)
    if args.debug is not None:
        overrides["debug"] = args.debug
    if args.preview is not None:
        overrides["preview"] = dataclasses.replace(config.preview, output_path=args.preview)
    return dataclasses.replace(config, **overrides) if overrides else config


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def render_preview(config: ExpansionConfig, waypoints: Sequence[Waypoint], points: List[TimePoint]) -> None:
    from .preview import PlaybackRenderer

    output_path = config.preview.output_path
    try:
        renderer = PlaybackRenderer(config.preview, waypoints, points)
        renderer.render(output_path)
    except (OSError, ImportError, ValueError, RuntimeError) as exc:
        raise OutputWriteError(f"Could not write preview [{output_path}]: {exc}") from exc
    logger.info("Saved preview with %d frames to %s", renderer.frame_count, output_path)


def run(args: argparse.Namespace) -> None:
    if args.input is None:
        raise UsageError(USAGE)

    config = build_config(args)
    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    waypoints = load_waypoints(args.input)
    points = expand_route(
        waypoints,
        vertex_limit=config.vertex_limit,
        boundary_only=config.boundary_only,
        default_speed_mph=config.default_speed_mph,
    )
    write_time_points(points, args.output, indent=config.indent)

    if config.preview.output_path is not None:
        render_preview(config, limit_vertices(waypoints, config.vertex_limit), points)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(bool(args.debug))
    try:
        run(args)
    except UsageError as exc:
        logger.info("%s", exc)
    except TimedRouteError as exc:
        logger.error("%s", exc)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
