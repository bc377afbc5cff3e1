"""
Amplification Module - Middle-ear pressure gain.

Simplified mechanical model: pressure gain = area ratio × lever ratio.
Frequency-independent; no cochlear mechanics or neural processing.

Physiologically: ~17:1 (area) × ~1.3:1 (lever) ≈ 22× (~27 dB)
"""

import math
from dataclasses import dataclass, asdict
from typing import Dict

from .constants import AnatomicalConstants, DEFAULT_CONSTANTS
from .parameters import ScaleParameters


@dataclass(frozen=True)
class AmplificationResult:
    """Metrics for one set of scale parameters."""
    area_ratio: float                # eardrum / oval window
    lever_ratio: float               # input arm / output arm, >= 1
    amplification_factor: float      # area_ratio × lever_ratio
    decibel_gain: float              # dB, total
    lever_ratio_decibel_gain: float  # dB, lever contribution
    area_ratio_decibel_gain: float   # dB, area contribution
    input_pressure: float
    output_pressure: float
    # Resolved physical magnitudes
    eardrum_area: float              # mm²
    oval_window_area: float          # mm²
    input_lever_arm: float           # mm
    output_lever_arm: float          # mm

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def area_ratio(eardrum_area: float, oval_window_area: float) -> float:
    """Eardrum area / oval-window area, 1.0 when the divisor is not positive
    or the quotient is not finite."""
    if oval_window_area <= 0:
        return 1.0
    ratio = eardrum_area / oval_window_area
    return ratio if math.isfinite(ratio) else 1.0


def lever_ratio(input_arm: float, output_arm: float) -> float:
    """
    Mechanical advantage of the ossicular lever: input arm / output arm.

    Floored at 1.0, the model never reports de-amplification.
    """
    if output_arm <= 0:
        return 1.0
    ratio = input_arm / output_arm
    if not math.isfinite(ratio):
        return 1.0
    return max(1.0, ratio)


def bone_lever_arms(malleus: float, incus: float, stapes: float,
                    constants: AnatomicalConstants = DEFAULT_CONSTANTS):
    """
    Effective lever arms (mm) from per-bone multipliers.

    input  = (malleus·L_m + incus·L_i) / 2
    output = stapes·L_s
    """
    input_arm = (malleus * constants.malleus_lever_arm
                 + incus * constants.incus_lever_arm) / 2
    output_arm = stapes * constants.stapes_lever_arm
    return input_arm, output_arm


def bone_lever_ratio(malleus: float, incus: float, stapes: float,
                     constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> float:
    """Lever ratio from per-bone multipliers."""
    return lever_ratio(*bone_lever_arms(malleus, incus, stapes, constants))


def amplification_factor(area_ratio: float, lever_ratio: float) -> float:
    return area_ratio * lever_ratio


def decibel_gain(factor: float) -> float:
    """dB = 20·log10(factor); 0 for non-positive factors."""
    if factor <= 0:
        return 0.0
    return 20 * math.log10(factor)


def output_pressure(input_pressure: float, factor: float) -> float:
    return input_pressure * factor


def compute_metrics(params: ScaleParameters, input_pressure: float = 1.0,
                    constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> AmplificationResult:
    """
    Compute all amplification metrics for the given multipliers.

    Invalid multipliers (<= 0, NaN) fall back to the range minimum first,
    so the result is always finite for finite input pressure.
    """
    p = params.sanitized(constants)

    eardrum_area = p.resolved('eardrum') * constants.eardrum_area
    oval_window_area = p.resolved('oval_window') * constants.oval_window_area
    input_arm, output_arm = bone_lever_arms(p.malleus, p.incus, p.stapes, constants)

    areas = area_ratio(eardrum_area, oval_window_area)
    levers = lever_ratio(input_arm, output_arm)
    factor = amplification_factor(areas, levers)

    # Each component converted on its own so contributions can be shown separately
    return AmplificationResult(
        area_ratio=areas,
        lever_ratio=levers,
        amplification_factor=factor,
        decibel_gain=decibel_gain(factor),
        lever_ratio_decibel_gain=decibel_gain(levers),
        area_ratio_decibel_gain=decibel_gain(areas),
        input_pressure=input_pressure,
        output_pressure=output_pressure(input_pressure, factor),
        eardrum_area=eardrum_area,
        oval_window_area=oval_window_area,
        input_lever_arm=input_arm,
        output_lever_arm=output_arm,
    )
