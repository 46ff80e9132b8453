"""
PhonoField - Spectrogram Synthesizer
Builds synthetic spectrogram frames for a phonetic type: an attack/sustain/
decay envelope, Gaussian bumps at each peak frequency, broadband noise for
fricatives, then per-frame normalization to [0, 1].
"""

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from config import SynthConfig
from phonetic_profiles import PhoneticProfile, PhoneticType, get_profile


@dataclass(frozen=True, eq=False)
class SpectrogramFrame:
    """One time slice of normalized bin energies (read-only)"""
    time_index: int
    frequency_bins: np.ndarray
    peak_energy: float = 0.0      # Frame maximum before normalization
    envelope: float = 0.0         # Envelope scalar the frame was built with

    def __post_init__(self):
        bins = np.array(self.frequency_bins, dtype=float)
        bins.flags.writeable = False
        object.__setattr__(self, 'frequency_bins', bins)

    @property
    def is_silent(self) -> bool:
        return not bool(np.any(self.frequency_bins > 0.0))


def compute_envelope(profile: PhoneticProfile, time_index: int) -> float:
    """Piecewise linear attack -> sustain -> decay envelope."""
    if time_index < profile.attack_time:
        return time_index / profile.attack_time

    decay_start = profile.duration - profile.decay_time
    if time_index > decay_start:
        progress = (time_index - decay_start) / profile.decay_time
        return max(0.0, profile.sustain_level * (1.0 - progress))

    return profile.sustain_level


@dataclass
class SpectrogramSynthesizer:
    config: SynthConfig = field(default_factory=SynthConfig)
    rng: Optional[np.random.Generator] = None

    def __post_init__(self):
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)

    @property
    def bin_count(self) -> int:
        return self.config.frequency_bins

    def frequency_to_bin_index(self, frequency: float) -> int:
        """Linear map of [min_frequency, max_frequency] onto [0, bins - 1]."""
        span = self.config.max_frequency - self.config.min_frequency
        normalized = (frequency - self.config.min_frequency) / span
        normalized = max(0.0, min(1.0, normalized))
        return int(math.floor(normalized * (self.bin_count - 1)))

    def envelope_at(self, phonetic_type, time_index: int,
                    profile: PhoneticProfile) -> float:
        envelope = compute_envelope(profile, time_index)
        if PhoneticType(phonetic_type) is PhoneticType.TRILL and profile.modulation_rate:
            normalized_time = time_index / profile.duration
            modulation = math.sin(2 * math.pi * profile.modulation_rate * normalized_time)
            envelope *= 0.7 + 0.3 * modulation
        return envelope

    def spectral_peaks(self, profile: PhoneticProfile, envelope: float) -> np.ndarray:
        """Deterministic part of a frame: one Gaussian bump per peak frequency."""
        bins = np.zeros(self.bin_count)
        half_width = max(1, int(profile.bandwidth // self.config.hz_per_bin))
        sigma = half_width / 3

        for center_freq in profile.peak_frequencies:
            center = self.frequency_to_bin_index(center_freq)
            lo = max(0, center - half_width)
            hi = min(self.bin_count, center + half_width)
            distance = np.arange(lo, hi) - center
            bins[lo:hi] += profile.amplitude * envelope * np.exp(
                -(distance * distance) / (2 * sigma * sigma))
        return bins

    def synthesize_frame(self, phonetic_type, time_index: int,
                         profile: Optional[PhoneticProfile] = None) -> SpectrogramFrame:
        phonetic_type = PhoneticType(phonetic_type)
        if profile is None:
            profile = get_profile(phonetic_type)

        envelope = self.envelope_at(phonetic_type, time_index, profile)
        bins = self.spectral_peaks(profile, envelope)

        if phonetic_type is PhoneticType.FRICATIVE:
            bins += self.rng.random(self.bin_count) * self.config.noise_scale * envelope

        peak = float(bins.max()) if bins.size else 0.0
        if peak > 0:
            bins = np.maximum(0.0, bins / peak)

        return SpectrogramFrame(
            time_index=time_index,
            frequency_bins=bins,
            peak_energy=max(0.0, peak),
            envelope=envelope,
        )
