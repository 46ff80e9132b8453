# PhonoField phonetic profiles
# Static synthesis parameters per phonetic type, shared by reference.

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class PhoneticType(str, Enum):
    VOWEL = "vowel"
    TRILL = "trill"
    FRICATIVE = "fricative"
    PLOSIVE = "plosive"


class EnvelopeType(str, Enum):
    """Amplitude shape used by the wedge model"""
    SUSTAINED = "sustained"   # Small burst, long sustain, gradual trail-off
    MODULATED = "modulated"   # Steady periodic modulation
    BROADBAND = "broadband"   # Lower power, very slow decay
    BURST = "burst"           # Rapid peak then near silence


@dataclass(frozen=True)
class PhoneticProfile:
    """Spectrogram synthesis parameters (times in frames, frequencies in Hz)"""
    duration: int
    peak_frequencies: tuple[float, ...]
    bandwidth: float
    amplitude: float
    attack_time: int
    sustain_level: float
    decay_time: int
    modulation_rate: Optional[float] = None   # Trill oscillation (cycles over the duration)


@dataclass(frozen=True)
class WedgeProfile:
    """Wedge model parameters (duration/attack normalized to 0-1 of the wave lifetime)"""
    freq: float                  # Base oscillation frequency (Hz)
    amplitude: float
    decay: float
    spread: float
    center_freq: float           # Normalized position of the wave center
    duration: float
    frequency_bandwidth: float
    attack_time: float
    sustain_level: float
    modulation_rate: float
    envelope_type: EnvelopeType


PHONETIC_PROFILES: Mapping[PhoneticType, PhoneticProfile] = MappingProxyType({
    PhoneticType.VOWEL: PhoneticProfile(
        duration=800,                          # Long sustained sound
        peak_frequencies=(300.0, 1200.0, 2500.0),  # Formants
        bandwidth=200.0,                       # Narrow bands
        amplitude=0.8,
        attack_time=50,
        sustain_level=0.9,
        decay_time=200,
    ),
    PhoneticType.TRILL: PhoneticProfile(
        duration=600,
        peak_frequencies=(1000.0, 2000.0),
        bandwidth=300.0,
        amplitude=0.6,
        attack_time=20,
        sustain_level=0.7,
        decay_time=100,
        modulation_rate=25.0,
    ),
    PhoneticType.FRICATIVE: PhoneticProfile(
        duration=400,
        peak_frequencies=(3000.0, 5000.0, 7000.0),  # High frequency noise
        bandwidth=1000.0,                      # Broadband
        amplitude=0.4,
        attack_time=30,
        sustain_level=0.8,
        decay_time=150,
    ),
    PhoneticType.PLOSIVE: PhoneticProfile(
        duration=200,                          # Short burst
        peak_frequencies=(500.0, 1500.0, 4000.0),
        bandwidth=800.0,
        amplitude=1.0,
        attack_time=5,                         # Very fast attack
        sustain_level=0.3,
        decay_time=50,
    ),
})


WEDGE_PROFILES: Mapping[PhoneticType, WedgeProfile] = MappingProxyType({
    PhoneticType.VOWEL: WedgeProfile(
        freq=100.0, amplitude=0.8, decay=0.05, spread=0.2, center_freq=0.1,
        duration=0.9, frequency_bandwidth=0.1, attack_time=0.1,
        sustain_level=0.9, modulation_rate=0.0,
        envelope_type=EnvelopeType.SUSTAINED,
    ),
    PhoneticType.TRILL: WedgeProfile(
        freq=150.0, amplitude=0.7, decay=0.08, spread=0.4, center_freq=0.3,
        duration=0.9, frequency_bandwidth=0.3, attack_time=0.05,
        sustain_level=0.8, modulation_rate=8.0,
        envelope_type=EnvelopeType.MODULATED,
    ),
    PhoneticType.FRICATIVE: WedgeProfile(
        freq=3000.0, amplitude=0.3, decay=0.04, spread=0.9, center_freq=0.6,
        duration=0.95, frequency_bandwidth=0.8, attack_time=0.2,
        sustain_level=0.6, modulation_rate=0.0,
        envelope_type=EnvelopeType.BROADBAND,
    ),
    PhoneticType.PLOSIVE: WedgeProfile(
        freq=1000.0, amplitude=1.5, decay=0.4, spread=0.7, center_freq=0.5,
        duration=0.2, frequency_bandwidth=0.6, attack_time=0.02,
        sustain_level=0.1, modulation_rate=0.0,
        envelope_type=EnvelopeType.BURST,
    ),
})


@dataclass(frozen=True)
class KeyBinding:
    key: str
    phonetic_type: PhoneticType
    label: str
    frequency_range: str


KEY_BINDINGS = (
    KeyBinding("A", PhoneticType.VOWEL, "Vowel", "200-1000 Hz"),
    KeyBinding("R", PhoneticType.TRILL, "Trill", "100-3000 Hz"),
    KeyBinding("S", PhoneticType.FRICATIVE, "Fricative", "2000-6000 Hz"),
    KeyBinding("P", PhoneticType.PLOSIVE, "Plosive", "500-4000 Hz"),
)


def get_profile(phonetic_type) -> PhoneticProfile:
    return PHONETIC_PROFILES[PhoneticType(phonetic_type)]


def get_wedge_profile(phonetic_type) -> WedgeProfile:
    return WEDGE_PROFILES[PhoneticType(phonetic_type)]


def binding_for_key(key: str) -> Optional[KeyBinding]:
    """Look up a key binding by character, case-insensitive."""
    key = (key or "").upper()
    for binding in KEY_BINDINGS:
        if binding.key == key:
            return binding
    return None
