# PhonoField Configuration
# All default values and constants

import math
import dataclasses
from dataclasses import dataclass, is_dataclass
from enum import Enum

from logging_utils import tagged

_log = tagged("Config")


CURRENT_CONFIG_VERSION = 2


class FieldStrategy(str, Enum):
    """Wave model used to drive the field surface"""
    SPECTROGRAM = "spectrogram"   # Pre-synthesized spectrogram frames splatted onto a polar field
    WEDGE = "wedge"               # Analytic height sampling over the wedge


@dataclass
class FieldConfig:
    """Wedge display transform (logical <-> display coordinates)"""
    arc_span: float = math.pi / 3     # Total wedge opening (radians), 60 degrees
    max_radius: float = 10.0          # Display distance reached at time=1
    mouth_width: float = 0.3          # Finite width at the mouth, avoids the origin singularity
    grid_min_time: float = 0.05       # Test grid skips points nearer the mouth than this


@dataclass
class PolarFieldConfig:
    """Polar spectrogram field geometry"""
    half_angle_deg: float = 20.0      # Each mirrored half spans this many degrees
    max_radius: float = 15.0          # Distance from mouth to outer edge
    time_intervals: int = 1000        # Time slots along the radius


@dataclass
class SynthConfig:
    """Spectrogram synthesis settings"""
    frequency_bins: int = 100         # Bins per frame
    min_frequency: float = 100.0      # Lowest bin (Hz)
    max_frequency: float = 8000.0     # Highest bin (Hz)
    hz_per_bin: float = 80.0          # Approximate spacing used to size peak bandwidths
    noise_scale: float = 0.1          # Fricative broadband noise, relative to envelope
    seed: int | None = None           # None = nondeterministic noise


@dataclass
class EngineConfig:
    """Wave engine selection and clocking"""
    strategy: FieldStrategy = FieldStrategy.SPECTROGRAM
    frame_rate: float = 10.0          # Spectrogram frames advanced per simulated second


@dataclass
class WedgeConfig:
    """Analytic wedge wave model"""
    wave_speed: float = 0.08          # Wave front speed (display units per second)
    min_frequency: float = 100.0      # Log-scale frequency -> angle mapping (Hz)
    max_frequency: float = 6000.0
    lifetime_scale: float = 25.0      # Profile duration (0-1) -> seconds
    influence_distance: float = 2.0   # Radial reach of a wave front
    radial_falloff: float = 0.8       # Exponential decay away from the front


@dataclass
class ViewerConfig:
    """Desktop viewer settings"""
    tick_ms: int = 16                 # Render loop interval
    radial_segments: int = 50
    angular_segments: int = 100
    wedge_segments: int = 64


@dataclass
class Config:
    """Master configuration"""
    version: int = CURRENT_CONFIG_VERSION
    field: FieldConfig = dataclasses.field(default_factory=FieldConfig)
    polar: PolarFieldConfig = dataclasses.field(default_factory=PolarFieldConfig)
    synth: SynthConfig = dataclasses.field(default_factory=SynthConfig)
    engine: EngineConfig = dataclasses.field(default_factory=EngineConfig)
    wedge: WedgeConfig = dataclasses.field(default_factory=WedgeConfig)
    viewer: ViewerConfig = dataclasses.field(default_factory=ViewerConfig)
    log_level: str = "INFO"           # Logging level (DEBUG/INFO/WARNING/ERROR)


def apply_dict_to_dataclass(target, data) -> None:
    """Recursively apply values from a dict onto a dataclass instance.
    Unknown keys are ignored; Enum fields are coerced when possible."""
    if not isinstance(data, dict):
        return

    for key, value in data.items():
        if not hasattr(target, key):
            continue

        current = getattr(target, key)

        if is_dataclass(current):
            # a section only ever takes a nested dict
            if isinstance(value, dict):
                apply_dict_to_dataclass(current, value)
            else:
                _log("WARNING", f"Ignoring non-object value for section {key}", value=value)
            continue

        if isinstance(current, Enum):
            try:
                setattr(target, key, current.__class__(value))
            except ValueError:
                _log("WARNING", f"Could not convert {key} to {current.__class__.__name__}, keeping default",
                     value=value)
            continue

        setattr(target, key, value)


def migrate_config(config: Config, loaded_version) -> None:
    """Upgrade older config structures to the current schema.
    Fills fields that older files stored as null and clamps unsafe values."""
    try:
        version = int(loaded_version) if loaded_version is not None else 0
    except (TypeError, ValueError):
        version = 0

    if version < 2:
        if getattr(config.engine, 'frame_rate', None) is None:
            config.engine.frame_rate = 10.0
        if getattr(config.synth, 'noise_scale', None) is None:
            config.synth.noise_scale = 0.1
        if getattr(config.field, 'grid_min_time', None) is None:
            config.field.grid_min_time = 0.05

    if getattr(config, 'log_level', None) is None:
        config.log_level = "INFO"

    try:
        rate = float(config.engine.frame_rate)
    except (TypeError, ValueError):
        rate = 10.0
    config.engine.frame_rate = rate if rate > 0 else 10.0

    try:
        bins = int(config.synth.frequency_bins)
    except (TypeError, ValueError):
        bins = 100
    config.synth.frequency_bins = max(2, bins)

    if config.synth.min_frequency >= config.synth.max_frequency:
        config.synth.min_frequency = 100.0
        config.synth.max_frequency = 8000.0
    if config.wedge.min_frequency >= config.wedge.max_frequency:
        config.wedge.min_frequency = 100.0
        config.wedge.max_frequency = 6000.0

    try:
        mouth_width = float(config.field.mouth_width)
    except (TypeError, ValueError):
        mouth_width = 0.3
    config.field.mouth_width = max(1e-3, mouth_width)

    config.version = CURRENT_CONFIG_VERSION


# Default config instance
DEFAULT_CONFIG = Config()
