"""
PhonoField - Wave Engine
Owns the active wave set and the simulation clock for one field.

Two wave models share the WaveField interface:
  PolarWaveEngine  - pre-synthesizes a spectrogram per wave and surfaces the
                     frame matching each wave's age on every tick
  WedgeWaveEngine  - analytic wave fronts, sampled per vertex via height_at()

Neither engine runs a timer; the render loop drives aging through
update_time(). The active set is guarded by one lock because update_time
both reads and compacts it.
"""

import math
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import numpy as np

from config import Config, EngineConfig, FieldConfig, FieldStrategy, SynthConfig, WedgeConfig
from logging_utils import log_event
from phonetic_profiles import (
    EnvelopeType,
    PhoneticType,
    WedgeProfile,
    get_profile,
    get_wedge_profile,
)
from spectrogram_synth import SpectrogramFrame, SpectrogramSynthesizer


class WaveState(str, Enum):
    PENDING = "pending"     # Created, not yet surfaced by a tick
    ACTIVE = "active"
    EXPIRED = "expired"     # Terminal; purged on the same tick


@dataclass
class Wave:
    """Spectrogram wave instance"""
    id: str
    birth_time: float
    type: PhoneticType
    spectrograms: list[SpectrogramFrame] = field(default_factory=list)
    current_time_index: int = 0
    max_time_index: int = 0
    state: WaveState = WaveState.PENDING

    @property
    def is_active(self) -> bool:
        return self.state is not WaveState.EXPIRED

    @property
    def current_frame(self) -> Optional[SpectrogramFrame]:
        if 0 <= self.current_time_index < len(self.spectrograms):
            return self.spectrograms[self.current_time_index]
        return None


@dataclass
class WedgeWave:
    """Analytic wave front instance"""
    id: str
    birth_time: float
    type: PhoneticType
    frequency: float        # Base oscillation frequency (Hz)
    amplitude: float
    decay: float
    center_angle: float     # Radians, signed
    spread: float           # Angular half-width (radians)
    state: WaveState = WaveState.PENDING

    @property
    def is_active(self) -> bool:
        return self.state is not WaveState.EXPIRED


@dataclass
class FieldFrame:
    """What one render tick hands to the presentation layer"""
    time: float
    active_wave_count: int
    spectrograms: list[SpectrogramFrame] = field(default_factory=list)
    sampler: Optional[Callable[[float, float], float]] = None


class WaveField(ABC):
    """Common clock, id and lifecycle handling for both wave models.

    Only the wedge model can be sampled at an arbitrary point; frame_sampler()
    returns None for models that hand over spectrogram frames instead."""

    strategy: FieldStrategy

    def __init__(self, start_time: float = 0.0):
        self._lock = threading.Lock()
        self._start_time = start_time
        self.time = start_time
        self._waves: list = []
        self._next_id = 0
        self._epoch = 0

    def _issue_id(self) -> str:
        # epoch survives reset() so a restarted counter never repeats an id
        wave_id = f"wave-{self._epoch}-{self._next_id}"
        self._next_id += 1
        return wave_id

    @abstractmethod
    def generate_wave(self, phonetic_type) -> str:
        ...

    @abstractmethod
    def update_time(self, delta_time: float) -> list:
        ...

    def frame_sampler(self) -> Optional[Callable[[float, float], float]]:
        return None

    def produce_frame(self, delta_time: float) -> FieldFrame:
        """Advance by one tick and package the result for rendering."""
        surfaced = self.update_time(delta_time)
        return FieldFrame(
            time=self.time,
            active_wave_count=self.get_active_wave_count(),
            spectrograms=list(surfaced) if self.strategy is FieldStrategy.SPECTROGRAM else [],
            sampler=self.frame_sampler(),
        )

    def get_active_wave_count(self) -> int:
        with self._lock:
            return sum(1 for wave in self._waves if wave.is_active)

    def get_waves(self) -> list:
        with self._lock:
            return list(self._waves)

    def reset(self) -> None:
        with self._lock:
            cleared = len(self._waves)
            self._waves = []
            self.time = self._start_time
            self._next_id = 0
            self._epoch += 1
        log_event("INFO", type(self).__name__, "Reset", cleared=cleared, epoch=self._epoch)

    def _advance_clock(self, delta_time: float) -> None:
        # the clock is monotonic; negative deltas are ignored
        self.time += max(0.0, delta_time)


class PolarWaveEngine(WaveField):
    strategy = FieldStrategy.SPECTROGRAM

    def __init__(self, engine_config: Optional[EngineConfig] = None,
                 synthesizer: Optional[SpectrogramSynthesizer] = None,
                 start_time: float = 0.0):
        super().__init__(start_time)
        self.config = engine_config or EngineConfig()
        self.synthesizer = synthesizer or SpectrogramSynthesizer()

    def generate_wave(self, phonetic_type) -> str:
        phonetic_type = PhoneticType(phonetic_type)
        profile = get_profile(phonetic_type)
        max_time_index = int(math.floor(profile.duration))

        spectrograms = [
            self.synthesizer.synthesize_frame(phonetic_type, t, profile)
            for t in range(max_time_index)
        ]

        with self._lock:
            wave = Wave(
                id=self._issue_id(),
                birth_time=self.time,
                type=phonetic_type,
                spectrograms=spectrograms,
                current_time_index=0,
                max_time_index=max_time_index,
            )
            self._waves.append(wave)

        log_event("INFO", "PolarWaveEngine", f"Generated {phonetic_type.value} wave",
                  id=wave.id, frames=len(spectrograms))
        return wave.id

    def update_time(self, delta_time: float) -> list[SpectrogramFrame]:
        """Advance the clock and return the current frame of every live wave."""
        surfaced: list[SpectrogramFrame] = []
        retired: list[str] = []

        with self._lock:
            self._advance_clock(delta_time)
            for wave in self._waves:
                if not wave.is_active:
                    continue

                age = self.time - wave.birth_time
                time_index = int(math.floor(age * self.config.frame_rate))

                if time_index >= wave.max_time_index:
                    wave.current_time_index = wave.max_time_index
                    wave.state = WaveState.EXPIRED
                    retired.append(wave.id)
                    continue

                wave.current_time_index = max(0, time_index)
                wave.state = WaveState.ACTIVE
                frame = wave.current_frame
                if frame is not None:
                    surfaced.append(frame)

            self._waves = [wave for wave in self._waves if wave.is_active]

        for wave_id in retired:
            log_event("DEBUG", "PolarWaveEngine", "Wave expired", id=wave_id)
        return surfaced


class WedgeWaveEngine(WaveField):
    strategy = FieldStrategy.WEDGE

    def __init__(self, wedge_config: Optional[WedgeConfig] = None,
                 field_config: Optional[FieldConfig] = None,
                 start_time: float = 0.0):
        super().__init__(start_time)
        self.config = wedge_config or WedgeConfig()
        self.field = field_config or FieldConfig()
        self.half_span = self.field.arc_span / 2

    def frequency_to_angle(self, frequency: float) -> float:
        """Log-scale Hz -> signed angle centered on the wedge axis."""
        log_min = math.log(self.config.min_frequency)
        log_max = math.log(self.config.max_frequency)
        normalized = (math.log(frequency) - log_min) / (log_max - log_min)
        return (normalized - 0.5) * self.field.arc_span

    def center_frequency_hz(self, position: float) -> float:
        """Normalized 0-1 position on the log axis -> Hz."""
        ratio = self.config.max_frequency / self.config.min_frequency
        return self.config.min_frequency * ratio ** max(0.0, min(1.0, position))

    def generate_wave(self, phonetic_type) -> str:
        phonetic_type = PhoneticType(phonetic_type)
        params = get_wedge_profile(phonetic_type)
        center_angle = self.frequency_to_angle(self.center_frequency_hz(params.center_freq))

        with self._lock:
            wave = WedgeWave(
                id=self._issue_id(),
                birth_time=self.time,
                type=phonetic_type,
                frequency=params.freq,
                amplitude=params.amplitude,
                decay=params.decay,
                center_angle=center_angle,
                spread=params.spread * params.frequency_bandwidth,
            )
            self._waves.append(wave)

        log_event("INFO", "WedgeWaveEngine", f"Generated {phonetic_type.value} wave",
                  id=wave.id, center_angle=f"{center_angle:.3f}")
        return wave.id

    def _lifetime(self, params: WedgeProfile) -> float:
        return params.duration * self.config.lifetime_scale

    def wave_radius(self, wave: WedgeWave) -> float:
        return (self.time - wave.birth_time) * self.config.wave_speed

    def update_time(self, delta_time: float) -> list[WedgeWave]:
        """Advance the clock, retire waves past their lifetime or the field edge."""
        retired: list[str] = []
        with self._lock:
            self._advance_clock(delta_time)
            for wave in self._waves:
                age = self.time - wave.birth_time
                params = get_wedge_profile(wave.type)
                if age >= self._lifetime(params) or self.wave_radius(wave) >= self.field.max_radius:
                    wave.state = WaveState.EXPIRED
                    retired.append(wave.id)
                else:
                    wave.state = WaveState.ACTIVE
            self._waves = [wave for wave in self._waves if wave.is_active]
            live = list(self._waves)

        for wave_id in retired:
            log_event("DEBUG", "WedgeWaveEngine", "Wave expired", id=wave_id)
        return live

    def envelope(self, wave: WedgeWave) -> float:
        params = get_wedge_profile(wave.type)
        age = self.time - wave.birth_time
        normalized_age = age / self._lifetime(params)

        if params.envelope_type is EnvelopeType.SUSTAINED:
            if normalized_age < params.attack_time:
                return params.amplitude * (normalized_age / params.attack_time)
            if normalized_age < 0.8:
                return params.amplitude * params.sustain_level
            return params.amplitude * params.sustain_level * (1 - normalized_age) / 0.2

        if params.envelope_type is EnvelopeType.MODULATED:
            base = params.amplitude * math.exp(-normalized_age * params.decay)
            return base * (1 + 0.5 * math.sin(2 * math.pi * params.modulation_rate * age))

        if params.envelope_type is EnvelopeType.BURST:
            if normalized_age < params.attack_time:
                return params.amplitude * (normalized_age / params.attack_time)
            return params.amplitude * params.sustain_level * math.exp(-normalized_age * params.decay * 10)

        # broadband
        sustained = params.amplitude * params.sustain_level
        return sustained * math.exp(-normalized_age * params.decay * 0.5)

    def sample_heights(self, frequencies, times) -> np.ndarray:
        """Vectorized height_at over broadcastable frequency/time arrays."""
        f = np.clip(np.asarray(frequencies, dtype=float), 0.0, 1.0)
        t = np.clip(np.asarray(times, dtype=float), 0.0, 1.0)
        f, t = np.broadcast_arrays(f, t)
        total = np.zeros(f.shape)

        # both mirrored halves respond to the same wave
        folded = np.where(f < 0.5, (0.5 - f) * 2, (f - 0.5) * 2)
        angle = folded * self.half_span
        position = t * self.field.max_radius

        with self._lock:
            waves = list(self._waves)

        for wave in waves:
            distance = np.abs(position - self.wave_radius(wave))
            angle_diff = np.abs(angle - abs(wave.center_angle))
            mask = (distance < self.config.influence_distance) & (angle_diff <= wave.spread)
            if not mask.any():
                continue

            envelope = self.envelope(wave)
            angular = np.cos(angle_diff / wave.spread * math.pi / 2)
            radial = np.exp(-distance * self.config.radial_falloff)
            ripple = np.sin(wave.frequency / 100 * distance * math.pi)
            total += np.where(mask, envelope * angular * radial * ripple, 0.0)

        return total

    def height_at(self, frequency: float, time: float) -> float:
        return float(self.sample_heights(frequency, time))

    def frame_sampler(self) -> Callable[[float, float], float]:
        return self.height_at


def create_wave_field(config: Optional[Config] = None, *,
                      rng: Optional[np.random.Generator] = None,
                      start_time: float = 0.0) -> WaveField:
    """Build the wave model selected by config.engine.strategy."""
    config = config or Config()
    strategy = FieldStrategy(config.engine.strategy)

    if strategy is FieldStrategy.WEDGE:
        engine = WedgeWaveEngine(config.wedge, config.field, start_time=start_time)
    else:
        synth_config: SynthConfig = config.synth
        synthesizer = SpectrogramSynthesizer(synth_config, rng)
        engine = PolarWaveEngine(config.engine, synthesizer, start_time=start_time)

    log_event("INFO", "WaveField", "Created", strategy=strategy.value)
    return engine
