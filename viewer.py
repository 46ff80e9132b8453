"""
PhonoField - Viewer
Top-down Qt view of the field. Keys A/R/S/P trigger vowel/trill/fricative/
plosive waves, Space resets. A QTimer drives the engine tick.
"""

import time

import numpy as np
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

import pyqtgraph as pg
pg.setConfigOptions(antialias=False, useOpenGL=False)

from config import Config, FieldStrategy
from coordinate_transform import CoordinateTransform
from field_mesh import FieldMesh, WedgeSurface
from logging_utils import log_event, set_log_level
from phonetic_profiles import KEY_BINDINGS, binding_for_key
from polar_field import PolarField
from wave_engine import WaveField, create_wave_field


class FieldCanvas(pg.PlotWidget):
    """Scatter of mesh vertices colored by height"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setBackground('#0a0a0a')
        self.setMouseEnabled(x=False, y=False)
        self.setMenuEnabled(False)
        self.setAspectLocked(True)
        self.hideAxis('bottom')
        self.hideAxis('left')

        self.colormap = pg.ColorMap(
            np.array([0.0, 0.5, 1.0]),
            np.array([[40, 40, 40, 255], [0, 188, 212, 255], [255, 255, 255, 255]], dtype=np.ubyte),
        )
        self.scatter = pg.ScatterPlotItem(pen=pg.mkPen(None), size=4)
        self.addItem(self.scatter)

    def set_points(self, positions: np.ndarray, scale: float = 1.0) -> None:
        level = np.clip(np.abs(positions[:, 1]) / max(scale, 1e-9), 0.0, 1.0)
        brushes = [pg.mkBrush(c) for c in self.colormap.map(level, mode='qcolor')]
        self.scatter.setData(x=positions[:, 0], y=positions[:, 2], brush=brushes)


class FieldWindow(QMainWindow):
    """Main viewer window"""

    def __init__(self, config: Config, engine: WaveField = None):
        super().__init__()
        self.config = config
        set_log_level(config.log_level)

        self.setWindowTitle("PhonoField")
        self.resize(600, 900)

        self.engine = engine or create_wave_field(config)
        if self.engine.strategy is FieldStrategy.SPECTROGRAM:
            self.mesh = FieldMesh(PolarField(config.polar, config.synth),
                                  config.viewer.radial_segments,
                                  config.viewer.angular_segments)
            self.surface = None
        else:
            self.mesh = None
            self.surface = WedgeSurface(CoordinateTransform(config.field),
                                        config.viewer.wedge_segments)

        central = QWidget()
        layout = QVBoxLayout(central)
        self.canvas = FieldCanvas()
        layout.addWidget(self.canvas, stretch=1)
        keys = "  ".join(f"{b.key}: {b.label} ({b.frequency_range})" for b in KEY_BINDINGS)
        layout.addWidget(QLabel(f"{keys}  Space: reset"))
        self.status_label = QLabel("Active waves: 0")
        layout.addWidget(self.status_label)
        self.setCentralWidget(central)

        self._last_tick = time.perf_counter()
        self.update_timer = QTimer()
        self.update_timer.timeout.connect(self._tick)
        self.update_timer.start(config.viewer.tick_ms)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Space:
            self.engine.reset()
            if self.mesh is not None:
                self.mesh.clear()
            return

        binding = binding_for_key(event.text())
        if binding is None:
            super().keyPressEvent(event)
            return
        if event.isAutoRepeat():
            return
        self.engine.generate_wave(binding.phonetic_type)

    def _tick(self):
        now = time.perf_counter()
        delta = now - self._last_tick
        self._last_tick = now

        frame = self.engine.produce_frame(delta)
        if self.mesh is not None:
            self.mesh.add_frames(frame.spectrograms)
            self.canvas.set_points(self.mesh.positions)
        else:
            self.surface.update(self.engine)
            self.canvas.set_points(self.surface.positions, scale=1.5)
        self.status_label.setText(f"Active waves: {frame.active_wave_count}")

    def closeEvent(self, event):
        self.update_timer.stop()
        log_event("INFO", "Viewer", "Closed", active_waves=self.engine.get_active_wave_count())
        super().closeEvent(event)
