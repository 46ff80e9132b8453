"""
PhonoField - Field Mesh
Vertex grids the renderer deforms each tick.

FieldMesh    - polar sector mesh; spectrogram frames are splatted onto the
               nearest vertex of both mirrored halves (max height wins)
WedgeSurface - rectangular grid masked to the wedge; heights come from a
               sampler over logical coordinates
"""

from typing import Iterable, Optional

import numpy as np

from coordinate_transform import CoordinateTransform, DisplayCoordinate
from polar_field import PolarField
from spectrogram_synth import SpectrogramFrame


class FieldMesh:
    def __init__(self, polar_field: Optional[PolarField] = None,
                 radial_segments: int = 50, angular_segments: int = 100):
        self.field = polar_field or PolarField()
        self.radial_segments = radial_segments
        self.angular_segments = angular_segments
        self.spectrograms: dict[int, SpectrogramFrame] = {}

        dims = self.field.get_field_dimensions()
        radii = np.linspace(0.0, 1.0, radial_segments + 1) * dims['max_radius']
        angles = (np.linspace(0.0, 1.0, angular_segments + 1) * dims['total_angle_span']
                  - dims['half_angle_span'])
        rr, aa = np.meshgrid(radii, angles, indexing='ij')

        self.vertices = np.zeros((rr.size, 3))
        self.vertices[:, 0] = (rr * np.sin(aa)).ravel()
        self.vertices[:, 2] = (rr * np.cos(aa)).ravel()
        self.heights = np.zeros(rr.size)
        self.indices = self._build_indices()

    def _build_indices(self) -> np.ndarray:
        row = self.angular_segments + 1
        r, a = np.meshgrid(np.arange(self.radial_segments),
                           np.arange(self.angular_segments), indexing='ij')
        i1 = (r * row + a).ravel()
        i2 = ((r + 1) * row + a).ravel()
        i3 = ((r + 1) * row + a + 1).ravel()
        i4 = (r * row + a + 1).ravel()
        # two triangles per quad
        return np.concatenate([
            np.stack([i1, i2, i3], axis=1),
            np.stack([i1, i3, i4], axis=1),
        ])

    @property
    def positions(self) -> np.ndarray:
        out = self.vertices.copy()
        out[:, 1] = self.heights
        return out

    def nearest_vertex_indices(self, x: np.ndarray, z: np.ndarray) -> np.ndarray:
        """Nearest grid vertex in polar index space for display points."""
        dims = self.field.get_field_dimensions()
        radius = np.clip(np.hypot(x, z) / dims['max_radius'], 0.0, 1.0)
        angle = np.clip(np.arctan2(x, z), -dims['half_angle_span'], dims['half_angle_span'])
        r_idx = np.rint(radius * self.radial_segments).astype(int)
        a_idx = np.rint((angle + dims['half_angle_span']) / dims['total_angle_span']
                        * self.angular_segments).astype(int)
        return r_idx * (self.angular_segments + 1) + a_idx

    def add_spectrogram(self, frame: SpectrogramFrame) -> None:
        self.add_frames([frame])

    def add_frames(self, frames: Iterable[SpectrogramFrame]) -> None:
        """Store frames by time index (newest wins) and re-splat the surface."""
        changed = False
        for frame in frames:
            self.spectrograms[frame.time_index] = frame
            changed = True
        if changed:
            self.update_heights()

    def update_heights(self) -> None:
        self.heights[:] = 0.0
        for frame in self.spectrograms.values():
            points = self.field.create_bilateral_spectrogram(frame)
            idx = self.nearest_vertex_indices(points[:, 0], points[:, 2])
            np.maximum.at(self.heights, idx, points[:, 1])

    def clear(self) -> None:
        self.spectrograms.clear()
        self.heights[:] = 0.0


class WedgeSurface:
    def __init__(self, transform: Optional[CoordinateTransform] = None,
                 segments: int = 64, min_radius: float = 0.5):
        self.transform = transform or CoordinateTransform()
        cfg = self.transform.config
        half_width = self.transform.width_at_radius(cfg.max_radius)

        xs = np.linspace(-half_width, half_width, segments + 1)
        zs = np.linspace(0.0, cfg.max_radius, segments + 1)
        xx, zz = np.meshgrid(xs, zs, indexing='ij')
        self.vertices = np.zeros((xx.size, 3))
        self.vertices[:, 0] = xx.ravel()
        self.vertices[:, 2] = zz.ravel()

        widths = cfg.mouth_width + self.vertices[:, 2] * np.tan(cfg.arc_span / 2)
        self.mask = (self.vertices[:, 2] >= min_radius) & (np.abs(self.vertices[:, 0]) <= widths)

        self.frequencies = np.zeros(xx.size)
        self.times = np.zeros(xx.size)
        for i in np.flatnonzero(self.mask):
            logical = self.transform.display_to_logical(
                DisplayCoordinate(self.vertices[i, 0], 0.0, self.vertices[i, 2]))
            self.frequencies[i] = logical.frequency
            self.times[i] = logical.time

        self.heights = np.zeros(xx.size)

    @property
    def positions(self) -> np.ndarray:
        out = self.vertices[self.mask].copy()
        out[:, 1] = self.heights[self.mask]
        return out

    def update(self, engine) -> None:
        """Refresh heights from an engine exposing sample_heights()."""
        self.heights[:] = 0.0
        self.heights[self.mask] = engine.sample_heights(
            self.frequencies[self.mask], self.times[self.mask])

    def update_from_sampler(self, sampler) -> None:
        """Refresh heights one vertex at a time through a height_at-style callable."""
        self.heights[:] = 0.0
        for i in np.flatnonzero(self.mask):
            self.heights[i] = sampler(self.frequencies[i], self.times[i])
