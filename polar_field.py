"""
PhonoField - Polar Field
Geometry of the spectrogram field: a 40 degree sector centered on the +Z
axis. Time slots map to radius, frequency bins map to angle within one
half, and every frame is drawn mirrored onto both halves.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from config import PolarFieldConfig, SynthConfig
from spectrogram_synth import SpectrogramFrame


@dataclass(frozen=True)
class PolarCoordinate:
    radius: float  # 0 = mouth, 1 = outer edge
    angle: float   # radians, -half_angle .. +half_angle


@dataclass
class CartesianCoordinate:
    x: float
    y: float
    z: float


class PolarField:
    def __init__(self, config: Optional[PolarFieldConfig] = None,
                 synth_config: Optional[SynthConfig] = None):
        self.config = config or PolarFieldConfig()
        self.frequency_bins = (synth_config or SynthConfig()).frequency_bins
        self.half_angle_span = math.radians(self.config.half_angle_deg)
        self.total_angle_span = 2 * self.half_angle_span
        self.max_radius = self.config.max_radius

    def polar_to_cartesian(self, polar: PolarCoordinate) -> CartesianCoordinate:
        radius = polar.radius * self.max_radius
        return CartesianCoordinate(
            x=radius * math.sin(polar.angle),
            y=0.0,
            z=radius * math.cos(polar.angle),
        )

    def cartesian_to_polar(self, cartesian: CartesianCoordinate) -> PolarCoordinate:
        radius = math.hypot(cartesian.x, cartesian.z) / self.max_radius
        angle = math.atan2(cartesian.x, cartesian.z)
        return PolarCoordinate(
            radius=max(0.0, min(1.0, radius)),
            angle=max(-self.half_angle_span, min(self.half_angle_span, angle)),
        )

    def frequency_to_angle(self, frequency_index: int) -> float:
        """Bin index -> angle within the right half (0 .. half_angle_span)."""
        normalized = frequency_index / (self.frequency_bins - 1)
        return max(0.0, min(1.0, normalized)) * self.half_angle_span

    def time_to_radius(self, time_index: int) -> float:
        """Time slot -> normalized radius."""
        normalized = time_index / (self.config.time_intervals - 1)
        return max(0.0, min(1.0, normalized))

    def generate_grid_points(self, arc_steps: int = 20, angle_steps: int = 50,
                             radial_steps: int = 10,
                             radius_steps: int = 50) -> list[CartesianCoordinate]:
        """Concentric arcs followed by radial lines."""
        points = []
        for r in range(arc_steps + 1):
            radius = r / arc_steps
            for a in range(angle_steps + 1):
                angle = (a / angle_steps) * self.total_angle_span - self.half_angle_span
                points.append(self.polar_to_cartesian(PolarCoordinate(radius, angle)))

        for a in range(radial_steps + 1):
            angle = (a / radial_steps) * self.total_angle_span - self.half_angle_span
            for r in range(radius_steps + 1):
                radius = r / radius_steps
                points.append(self.polar_to_cartesian(PolarCoordinate(radius, angle)))
        return points

    def create_bilateral_spectrogram(self, frame: SpectrogramFrame) -> np.ndarray:
        """Return an (2 * bins, 3) array of x/y/z points, right then left per bin.
        Both mirrored points carry the bin energy as height."""
        bins = frame.frequency_bins
        radius = self.time_to_radius(frame.time_index) * self.max_radius
        angles = np.clip(np.arange(len(bins)) / (self.frequency_bins - 1), 0.0, 1.0)
        angles = angles * self.half_angle_span

        points = np.empty((2 * len(bins), 3))
        points[0::2, 0] = radius * np.sin(angles)
        points[1::2, 0] = -radius * np.sin(angles)
        points[0::2, 1] = bins
        points[1::2, 1] = bins
        points[0::2, 2] = radius * np.cos(angles)
        points[1::2, 2] = radius * np.cos(angles)
        return points

    def get_field_dimensions(self) -> dict:
        return {
            'max_radius': self.max_radius,
            'total_angle_span': self.total_angle_span,
            'half_angle_span': self.half_angle_span,
            'max_width': self.max_radius * math.sin(self.half_angle_span) * 2,
            'max_depth': self.max_radius,
        }
