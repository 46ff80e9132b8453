"""
PhonoField - Coordinate Transform
Maps logical (frequency, time) coordinates onto the wedge-shaped display
field and back.

Bilateral symmetry: the frequency axis is split at 0.5 and each half is
re-normalized to cover the FULL spectrum, so both sides of the wedge show
100 Hz .. top-of-band mirrored around the centerline. A finite mouth width
keeps the lateral mapping well defined at radius 0.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Optional

from config import FieldConfig


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class LogicalCoordinate:
    """Normalized field position"""
    frequency: float  # 0 = 100 Hz, 1 = top of band
    time: float       # 0 = at the mouth, 1 = max propagation distance

    def clamped(self) -> "LogicalCoordinate":
        return LogicalCoordinate(clamp01(self.frequency), clamp01(self.time))


@dataclass(frozen=True)
class DisplayCoordinate:
    """Position in display space"""
    x: float  # lateral offset
    y: float  # height (wave amplitude)
    z: float  # distance from the mouth


class CoordinateTransform:
    def __init__(self, config: Optional[FieldConfig] = None):
        self.config = config or FieldConfig()
        self.half_span = self.config.arc_span / 2
        self._tan_half = math.tan(self.half_span)

    def width_at_radius(self, radius: float) -> float:
        """Half-width of the wedge at a given display radius, mouth included."""
        return self.config.mouth_width + radius * self._tan_half

    def logical_to_display(self, logical: LogicalCoordinate) -> DisplayCoordinate:
        logical = logical.clamped()
        radius = logical.time * self.config.max_radius

        is_left = logical.frequency < 0.5
        # each half covers the full spectrum: 0.5 -> 0, outer edge -> 1
        if is_left:
            normalized = (0.5 - logical.frequency) * 2
            angle = -normalized * self.half_span
        else:
            normalized = (logical.frequency - 0.5) * 2
            angle = normalized * self.half_span

        x = self.width_at_radius(radius) * (angle / self.half_span)
        return DisplayCoordinate(x=x, y=0.0, z=radius)

    def display_to_logical(self, display: DisplayCoordinate) -> LogicalCoordinate:
        radius = max(0.0, display.z)
        time = radius / self.config.max_radius

        width = self.width_at_radius(radius)
        normalized = clamp01(abs(display.x) / width)

        if display.x < 0:
            frequency = 0.5 - normalized * 0.5
        else:
            frequency = 0.5 + normalized * 0.5

        return LogicalCoordinate(clamp01(frequency), clamp01(time))

    def generate_test_grid(self, frequency_steps: int = 21,
                           time_steps: int = 21) -> Iterator[DisplayCoordinate]:
        """Yield display points over a regular logical grid.
        Points nearer the mouth than grid_min_time are skipped."""
        f_div = max(1, frequency_steps - 1)
        t_div = max(1, time_steps - 1)
        for f in range(frequency_steps):
            for t in range(time_steps):
                time = t / t_div
                if time < self.config.grid_min_time:
                    continue
                yield self.logical_to_display(LogicalCoordinate(f / f_div, time))

    def is_within_bounds(self, logical: LogicalCoordinate) -> bool:
        return 0.0 <= logical.frequency <= 1.0 and 0.0 <= logical.time <= 1.0

    def get_max_width_at_time(self, time: float) -> float:
        """Wedge half-width at a logical time, excluding the mouth width."""
        radius = clamp01(time) * self.config.max_radius
        return radius * self._tan_half
