"""
Parameters Module - Per-bone scale multipliers.

The single input record consumed by both the amplification model and the
geometry resolver.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Dict, Optional

from .constants import AnatomicalConstants, DEFAULT_CONSTANTS, PARAMETER_NAMES


# Keys accepted by from_dict in addition to the field names
_ALIASES = {
    'ovalWindow': 'oval_window',
}

# Hard limits on any multiplier reaching the model
MIN_MULTIPLIER = 1e-6
MAX_MULTIPLIER = 1e6


@dataclass(frozen=True)
class ScaleParameters:
    """
    Multipliers of the reference anatomy.

    malleus/incus/stapes scale each ossicle (size and lever arm).
    eardrum/oval_window scale the membrane areas; None means 1.0.
    """
    malleus: float = 1.0
    incus: float = 1.0
    stapes: float = 1.0
    eardrum: Optional[float] = None
    oval_window: Optional[float] = None

    @classmethod
    def from_dict(cls, values: Dict[str, float]) -> 'ScaleParameters':
        kwargs = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in PARAMETER_NAMES:
                raise ValueError(f"Unknown scale parameter: {key!r}")
            kwargs[name] = None if value is None else float(value)
        return cls(**kwargs)

    def resolved(self, name: str) -> float:
        """Effective multiplier, with absent optional ones read as 1.0."""
        if name not in PARAMETER_NAMES:
            raise ValueError(f"Unknown scale parameter: {name!r}")
        value = getattr(self, name)
        return 1.0 if value is None else value

    def as_dict(self) -> Dict[str, float]:
        return {name: self.resolved(name) for name in PARAMETER_NAMES}

    def replace(self, **changes) -> 'ScaleParameters':
        return dataclasses.replace(self, **changes)

    def sanitized(self, constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> 'ScaleParameters':
        """
        Replace non-positive or non-finite multipliers with the range minimum.

        Positive values outside the range are kept: range clamping belongs to
        the input controls, not the model. Extreme magnitudes are limited to
        [MIN_MULTIPLIER, MAX_MULTIPLIER] so areas and arms cannot overflow.
        """
        changes = {}
        for name in PARAMETER_NAMES:
            value = self.resolved(name)
            if not (math.isfinite(value) and value > 0):
                changes[name] = constants.range_for(name).min
            else:
                changes[name] = min(max(value, MIN_MULTIPLIER), MAX_MULTIPLIER)
        return dataclasses.replace(self, **changes)

    def clamped(self, constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> 'ScaleParameters':
        """Clamp every multiplier into its configured [min, max]."""
        sane = self.sanitized(constants)
        return dataclasses.replace(sane, **{
            name: constants.range_for(name).clamp(sane.resolved(name))
            for name in PARAMETER_NAMES
        })


DEFAULT_PARAMETERS = ScaleParameters()
