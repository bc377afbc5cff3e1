"""
Animation Module - Time-parameterized visual transforms.

Applied on top of a static Layout while the diagram is playing. Nothing
here feeds back into the amplification model or the layout.
"""

import math
import numpy as np
from dataclasses import dataclass

from .constants import FREQUENCY_RANGE

OSCILLATION_AMPLITUDE = 3.0  # degrees
OSCILLATION_PERIOD = 0.6     # seconds per -A → +A → -A swing

WAVE_SPACING_HZ = 200.0      # one particle per 200 Hz
PHASE_STEP = 0.1             # radians per tick
TICKS_PER_HZ = 0.1           # tick rate = frequency / 10


def _ease_in_out(u: float) -> float:
    """Sinusoidal ease, 0 → 1 over u in [0, 1]."""
    return 0.5 - 0.5 * math.cos(math.pi * u)


def oscillation_angle(t: float, amplitude: float = OSCILLATION_AMPLITUDE,
                      period: float = OSCILLATION_PERIOD, playing: bool = True) -> float:
    """
    Bone wobble (degrees) at time t (seconds).

    Starts at -amplitude, eases to +amplitude at half period and back.
    """
    if not playing or period <= 0:
        return 0.0
    u = (t % period) / period
    if u < 0.5:
        return -amplitude + 2 * amplitude * _ease_in_out(u * 2)
    return amplitude - 2 * amplitude * _ease_in_out(u * 2 - 1)


def sound_wave_phase(t: float, frequency: float) -> float:
    """Wave phase (radians) after t seconds of playback."""
    ticks = math.floor(t * frequency * TICKS_PER_HZ)
    return (ticks * PHASE_STEP) % (2 * math.pi)


@dataclass
class SoundWaveParticles:
    """Particles drawn along the ear canal entrance."""
    positions: np.ndarray  # (N, 2) px
    radius: float
    opacity: float


def sound_wave_particles(frequency: float, intensity: float, phase: float,
                         x: float, y: float, width: float, height: float) -> SoundWaveParticles:
    """
    Lay out the incoming sound wave: more particles at higher frequency,
    larger swing at higher intensity.
    """
    frequency = FREQUENCY_RANGE.clamp(frequency)
    intensity = min(max(intensity, 0.0), 1.0)

    count = int(frequency // WAVE_SPACING_HZ)
    amplitude = height * 0.3 * intensity

    i = np.arange(count)
    wave_phase = phase + i * 2 * np.pi / count
    xs = x + i * width / count
    ys = y + height / 2 + np.sin(wave_phase) * amplitude

    return SoundWaveParticles(
        positions=np.column_stack([xs, ys]),
        radius=3 * intensity,
        opacity=0.3 + intensity * 0.5,
    )
