"""Rendering logic for a playback preview of an expanded route."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import imageio.v2 as imageio
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .config import PreviewConfig, Waypoint
from .geometry import bearing_degrees
from .interpolate import TimePoint

Coordinate = Tuple[float, float]  # (lon, lat)


@dataclass
class FrameState:
    time: int
    position: Coordinate
    trail_length: int
    bearing: float
    segment: int


def build_frames(points: Sequence[TimePoint]) -> Tuple[List[Coordinate], List[FrameState]]:
    """Return the travelled trail and one frame per second of route time.

    Each frame records how many leading trail positions it has covered.

    When several points share a timestamp (the doubled sample at a waypoint)
    the later one wins. Seconds without a point hold the previous position.
    """

    if not points:
        return [], []

    by_time = {}
    for point in points:
        by_time[point.time] = point

    first_time = min(by_time)
    last_time = max(by_time)
    frames: List[FrameState] = []
    traveled: List[Coordinate] = []
    current = by_time[first_time]
    bearing = 0.0

    for second in range(first_time, last_time + 1):
        if second in by_time:
            current = by_time[second]
        position = (current.longitude, current.latitude)
        if traveled and traveled[-1] != position:
            bearing = bearing_degrees(traveled[-1], position)
        if not traveled or traveled[-1] != position:
            traveled.append(position)
        frames.append(
            FrameState(
                time=second,
                position=position,
                trail_length=len(traveled),
                bearing=bearing,
                segment=current.segment,
            )
        )
    return traveled, frames


class PlaybackRenderer:
    """Draw the moving position of an expanded route, one frame per second."""

    def __init__(self, config: PreviewConfig, waypoints: Sequence[Waypoint], points: Sequence[TimePoint]) -> None:
        self.config = config
        self._waypoints = list(waypoints)
        self._trail, self._frame_states = build_frames(points)
        self._setup_canvas(points)

    @property
    def frame_count(self) -> int:
        return len(self._frame_states)

    def _setup_canvas(self, points: Sequence[TimePoint]) -> None:
        dpi = 100
        figsize = (self.config.width / dpi, self.config.height / dpi)
        self._fig, self._ax = plt.subplots(figsize=figsize, dpi=dpi)
        self._fig.patch.set_facecolor("#06142a")
        self._ax.set_facecolor("#0a1f3f")

        self._ax.set_xticks([])
        self._ax.set_yticks([])

        lons = [wp.longitude for wp in self._waypoints] + [p.longitude for p in points]
        lats = [wp.latitude for wp in self._waypoints] + [p.latitude for p in points]
        margin = self.config.margin_degrees
        if lons and lats:
            self._ax.set_xlim(min(lons) - margin, max(lons) + margin)
            self._ax.set_ylim(min(lats) - margin, max(lats) + margin)

        # Planned route through the source waypoints
        self._ax.plot(
            [wp.longitude for wp in self._waypoints],
            [wp.latitude for wp in self._waypoints],
            color="#66ff99",
            linewidth=1.5,
            linestyle="--",
            marker="o",
            markersize=4,
        )

        if self.config.title:
            self._ax.set_title(self.config.title, color="white", fontsize=16, pad=16)

        self._trail_line, = self._ax.plot([], [], color="#ff5555", linewidth=3, solid_capstyle="round")
        self._marker, = self._ax.plot([], [], linestyle="none", marker=(3, 0, 0), markersize=12, color="#ffffff")
        self._clock_text = self._ax.text(
            0.02,
            0.02,
            "",
            transform=self._ax.transAxes,
            color="#ffffff",
            fontsize=10,
            ha="left",
            va="bottom",
            bbox=dict(facecolor="#000000", alpha=0.7, boxstyle="round,pad=0.5"),
        )

        self._fig.tight_layout()

    def _draw_frame(self, frame: FrameState) -> None:
        traveled = self._trail[: frame.trail_length]
        self._trail_line.set_data([lon for lon, _ in traveled], [lat for _, lat in traveled])
        self._marker.set_data([frame.position[0]], [frame.position[1]])
        # Marker angles are counter-clockwise, bearings clockwise from north.
        self._marker.set_marker((3, 0, -frame.bearing))
        self._clock_text.set_text(f"t = {frame.time} s | segment {frame.segment}")

    def _frame_image(self) -> np.ndarray:
        self._fig.canvas.draw()
        image = np.asarray(self._fig.canvas.buffer_rgba())
        return np.ascontiguousarray(image[:, :, :3])

    def _open_writer(self, output_path: Path):
        fps = self.config.frame_rate
        if output_path.suffix.lower() == ".gif":
            return imageio.get_writer(output_path, mode="I", duration=1000.0 / fps, loop=0)
        try:
            return imageio.get_writer(
                output_path,
                fps=fps,
                codec="libx264",
                format="FFMPEG",
                macro_block_size=None,
                quality=8,
            )
        except ImportError as exc:
            raise ImportError(
                "FFMPEG support is required to export videos. Install the "
                "'imageio-ffmpeg' package (for example via 'pip install "
                "imageio-ffmpeg') or choose a '.gif' preview path."
            ) from exc

    def render(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self._open_writer(output_path) as writer:
                for frame in self._frame_states:
                    self._draw_frame(frame)
                    writer.append_data(self._frame_image())
        finally:
            plt.close(self._fig)
        return output_path
