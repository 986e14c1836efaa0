"""Configuration loading utilities for the route time expander."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import math

from .errors import ConfigError


logger = logging.getLogger(__name__)

DEFAULT_SPEED_MPH = 35.0
PREVIEW_SUFFIXES = (".gif", ".mp4", ".webm", ".mkv", ".mov", ".avi")


def _coerce_speed(value: Any) -> Optional[float]:
    # Falsy speeds (absent, null, 0, "") are treated as unset.
    if not value:
        return None
    try:
        speed = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed speed value %r", value)
        return None
    if not math.isfinite(speed):
        logger.warning("Ignoring non-finite speed value %r", value)
        return None
    return speed


@dataclass(frozen=True)
class Waypoint:
    """A single point feature of the input route."""

    longitude: float
    latitude: float
    index: int
    speed_mph: Optional[float] = None

    @property
    def coordinate(self) -> tuple[float, float]:
        return self.longitude, self.latitude

    def speed_or(self, default: float = DEFAULT_SPEED_MPH) -> float:
        return self.speed_mph or default

    @staticmethod
    def from_feature(feature: Dict[str, Any], index: int) -> "Waypoint":
        """Build a waypoint from a GeoJSON Point feature."""

        try:
            coordinates = feature["geometry"]["coordinates"]
            longitude = float(coordinates[0])
            latitude = float(coordinates[1])
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ValueError(f"Point feature {index} has no usable coordinates.") from exc
        properties = feature.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        return Waypoint(
            longitude=longitude,
            latitude=latitude,
            index=index,
            speed_mph=_coerce_speed(properties.get("speed")),
        )


@dataclass
class PreviewConfig:
    """Settings for rendering a playback preview of the timed points."""

    output_path: Optional[Path] = None
    frame_rate: int = 10
    width: int = 960
    height: int = 720
    margin_degrees: float = 0.01
    title: str = ""

    def __post_init__(self) -> None:
        if self.output_path is not None and Path(self.output_path).suffix.lower() not in PREVIEW_SUFFIXES:
            raise ConfigError(
                f"Unsupported preview format [{self.output_path}], expected one of: {', '.join(PREVIEW_SUFFIXES)}."
            )

    @staticmethod
    def from_mapping(data: Optional[Dict[str, Any]]) -> "PreviewConfig":
        if not data:
            return PreviewConfig()
        if not isinstance(data, dict):
            raise ConfigError("Preview configuration must be a mapping.")
        output_path = data.get("output") or data.get("output_path")
        return PreviewConfig(
            output_path=Path(output_path) if output_path else None,
            frame_rate=int(data.get("frame_rate", data.get("fps", 10))),
            width=int(data.get("width", 960)),
            height=int(data.get("height", 720)),
            margin_degrees=float(data.get("margin_degrees", data.get("margin", 0.01))),
            title=str(data.get("title", "")),
        )


@dataclass
class ExpansionConfig:
    """Top-level configuration for a route expansion run."""

    default_speed_mph: float = DEFAULT_SPEED_MPH
    vertex_limit: Optional[int] = None
    boundary_only: bool = False
    indent: int = 2
    debug: bool = False
    preview: PreviewConfig = field(default_factory=PreviewConfig)

    def __post_init__(self) -> None:
        if self.vertex_limit is not None and self.vertex_limit < 2:
            raise ConfigError(f"Vertex limit must be at least 2, got {self.vertex_limit}.")
        if not self.default_speed_mph or not math.isfinite(self.default_speed_mph):
            raise ConfigError(f"Default speed must be a non-zero number, got {self.default_speed_mph}.")
        if self.preview.frame_rate < 1:
            raise ConfigError(f"Preview frame rate must be positive, got {self.preview.frame_rate}.")

    @staticmethod
    def from_mapping(data: Dict[str, Any]) -> "ExpansionConfig":
        vertex_limit = data.get("vertex_limit", data.get("vertexLimit"))
        try:
            if vertex_limit is not None:
                vertex_limit = int(vertex_limit)
            # -1 means no limit
            if vertex_limit == -1:
                vertex_limit = None
            return ExpansionConfig(
                default_speed_mph=float(data.get("default_speed_mph", data.get("default_speed", DEFAULT_SPEED_MPH))),
                vertex_limit=vertex_limit,
                boundary_only=bool(data.get("boundary_only", data.get("lastFirstOnly", False))),
                indent=int(data.get("indent", 2)),
                debug=bool(data.get("debug", False)),
                preview=PreviewConfig.from_mapping(data.get("preview")),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration value: {exc}") from exc


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:  # pragma: no cover - optional dependency
        import yaml  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dependency
        raise ConfigError(
            "YAML configuration requested but PyYAML is not available. Install with 'pip install pyyaml'."
        ) from exc
    with path.open("r", encoding="utf8") as handle:
        try:
            return yaml.safe_load(handle)  # type: ignore[no-any-return]
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse YAML configuration [{path}]: {exc}") from exc


def load_config(path: Path) -> ExpansionConfig:
    """Load an :class:`ExpansionConfig` from a JSON or YAML file."""

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file [{path}] does not exist.")

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = _load_yaml(path)
        else:
            with path.open("r", encoding="utf8") as handle:
                raw = json.load(handle)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not read configuration file [{path}]: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must contain a mapping at the top level.")

    return ExpansionConfig.from_mapping(raw)
