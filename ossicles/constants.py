"""
Constants Module - Anatomical base measurements.

A multiplier of 1.0 on every parameter reproduces the textbook reference
anatomy described by these values. Units: mm, mm², px/mm.
"""

import math
from dataclasses import dataclass, field
from typing import Dict


PARAMETER_NAMES = ('malleus', 'incus', 'stapes', 'eardrum', 'oval_window')


@dataclass(frozen=True)
class ParameterRange:
    """Valid [min, max] span for one scale multiplier."""
    min: float = 0.5
    max: float = 2.0

    def __post_init__(self):
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise ValueError(f"Range bounds must be finite, got [{self.min}, {self.max}]")
        if self.min <= 0 or self.min > self.max:
            raise ValueError(f"Range must satisfy 0 < min <= max, got [{self.min}, {self.max}]")

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)


def _default_ranges() -> Dict[str, ParameterRange]:
    return {name: ParameterRange(0.5, 2.0) for name in PARAMETER_NAMES}


@dataclass(frozen=True)
class AnatomicalConstants:
    """
    Reference anatomy shared by the amplification model and the layout.

    The effective input lever arm is the mean of the malleus and incus arms,
    the output arm is the stapes arm: (9.5 + 8.7) / 2 / 7.0 = 1.3.
    """
    eardrum_area: float = 55.0        # mm²
    oval_window_area: float = 3.2     # mm² (stapes footplate area)
    malleus_lever_arm: float = 9.5    # mm
    incus_lever_arm: float = 8.7      # mm
    stapes_lever_arm: float = 7.0     # mm
    visual_scale: float = 10.0        # px per mm
    ranges: Dict[str, ParameterRange] = field(default_factory=_default_ranges)

    def __post_init__(self):
        for name in ('eardrum_area', 'oval_window_area', 'malleus_lever_arm',
                     'incus_lever_arm', 'stapes_lever_arm', 'visual_scale'):
            value = getattr(self, name)
            if not (isinstance(value, (int, float)) and math.isfinite(value) and value > 0):
                raise ValueError(f"{name} must be a finite positive number, got {value!r}")

        unknown = set(self.ranges) - set(PARAMETER_NAMES)
        if unknown:
            raise ValueError(f"Unknown parameter range(s): {sorted(unknown)}")
        # Fill in any parameter the caller left out
        merged = _default_ranges()
        merged.update(self.ranges)
        object.__setattr__(self, 'ranges', merged)

    def range_for(self, name: str) -> ParameterRange:
        return self.ranges[name]

    @property
    def input_lever_arm(self) -> float:
        """Effective input arm (mm) at reference anatomy."""
        return (self.malleus_lever_arm + self.incus_lever_arm) / 2

    @property
    def output_lever_arm(self) -> float:
        """Effective output arm (mm) at reference anatomy."""
        return self.stapes_lever_arm

    @property
    def reference_area_ratio(self) -> float:
        return self.eardrum_area / self.oval_window_area

    @property
    def reference_lever_ratio(self) -> float:
        return self.input_lever_arm / self.output_lever_arm


DEFAULT_CONSTANTS = AnatomicalConstants()

# Sound controls (presentation only, see animation.py)
DEFAULT_SOUND_FREQUENCY = 1000.0  # Hz
DEFAULT_SOUND_INTENSITY = 1.0     # arbitrary units
FREQUENCY_RANGE = ParameterRange(200.0, 5000.0)
SLIDER_STEP = 0.05
