"""
Analysis Module - Parameter sweeps and summaries.

Provides tools for:
- Sweeping one multiplier across its range
- Summarizing the metrics of one configuration
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence

from .constants import AnatomicalConstants, DEFAULT_CONSTANTS, PARAMETER_NAMES
from .parameters import ScaleParameters, DEFAULT_PARAMETERS
from .amplification import compute_metrics


@dataclass
class SweepCurves:
    """Metrics as one parameter varies, the others held fixed."""
    parameter: str
    multipliers: np.ndarray
    area_ratio: np.ndarray
    lever_ratio: np.ndarray
    amplification_factor: np.ndarray
    decibel_gain: np.ndarray
    lever_ratio_decibel_gain: np.ndarray
    area_ratio_decibel_gain: np.ndarray
    output_pressure: np.ndarray


def compute_sweep(parameter: str, values: Optional[Sequence[float]] = None,
                  n_points: int = 61, base: Optional[ScaleParameters] = None,
                  input_pressure: float = 1.0,
                  constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> SweepCurves:
    """
    Compute metric curves for one parameter.

    values defaults to n_points evenly spaced over the parameter's range.
    """
    if parameter not in PARAMETER_NAMES:
        raise ValueError(f"Unknown scale parameter: {parameter!r}")
    base = base if base is not None else DEFAULT_PARAMETERS

    if values is None:
        r = constants.range_for(parameter)
        values = np.linspace(r.min, r.max, n_points)
    multipliers = np.asarray(values, dtype=float)

    results = [compute_metrics(base.replace(**{parameter: float(v)}), input_pressure, constants)
               for v in multipliers]

    return SweepCurves(
        parameter=parameter,
        multipliers=multipliers,
        area_ratio=np.array([r.area_ratio for r in results]),
        lever_ratio=np.array([r.lever_ratio for r in results]),
        amplification_factor=np.array([r.amplification_factor for r in results]),
        decibel_gain=np.array([r.decibel_gain for r in results]),
        lever_ratio_decibel_gain=np.array([r.lever_ratio_decibel_gain for r in results]),
        area_ratio_decibel_gain=np.array([r.area_ratio_decibel_gain for r in results]),
        output_pressure=np.array([r.output_pressure for r in results]),
    )


def analyze_parameters(params: ScaleParameters = DEFAULT_PARAMETERS,
                       constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> dict:
    """
    Summary of one configuration.

    Returns dict with key metrics:
    - ratios, factor and gains
    - resolved areas (mm²) and lever arms (mm)
    - share of the total gain due to the lever (0..1)
    - lever_floored: True when the raw arm ratio fell below 1
    """
    m = compute_metrics(params, constants=constants)
    raw_lever = m.input_lever_arm / m.output_lever_arm
    lever_share = (m.lever_ratio_decibel_gain / m.decibel_gain) if m.decibel_gain > 0 else 0.0

    return {
        'area_ratio': m.area_ratio,
        'lever_ratio': m.lever_ratio,
        'amplification_factor': m.amplification_factor,
        'decibel_gain': m.decibel_gain,
        'area_ratio_decibel_gain': m.area_ratio_decibel_gain,
        'lever_ratio_decibel_gain': m.lever_ratio_decibel_gain,
        'eardrum_area': m.eardrum_area,
        'oval_window_area': m.oval_window_area,
        'input_lever_arm': m.input_lever_arm,
        'output_lever_arm': m.output_lever_arm,
        'lever_share': lever_share,
        'lever_floored': raw_lever < 1.0,
    }
