"""
Ossicles - Middle-ear amplification model

An educational model of how the middle ear amplifies pressure from the
eardrum to the oval window.

Modules:
- constants: Reference anatomy and parameter ranges
- parameters: Per-bone scale multipliers
- amplification: Area ratio, lever ratio, decibel gain
- geometry: Diagram layout (chain of anchors)
- animation: Oscillation and sound-wave transforms
- analysis: Parameter sweeps
- config: YAML constants loading
- visualization: Interactive plotting

Usage:
    from ossicles import ScaleParameters, compute_metrics, compute_layout

    metrics = compute_metrics(ScaleParameters(malleus=1.2))
    layout = compute_layout(ScaleParameters(malleus=1.2), canvas=(1200, 800))

Or run directly:
    python -m ossicles
    python -m ossicles --verify
"""

from .constants import (AnatomicalConstants, ParameterRange, DEFAULT_CONSTANTS,
                        PARAMETER_NAMES)
from .parameters import ScaleParameters, DEFAULT_PARAMETERS
from .amplification import (AmplificationResult, area_ratio, lever_ratio, bone_lever_arms,
                            bone_lever_ratio, amplification_factor, decibel_gain,
                            output_pressure, compute_metrics)
from .geometry import (Layout, AnchorLink, OSSICULAR_CHAIN, compute_layout, resolve_chain,
                       scaled_dimensions, membrane_radius)
from .animation import oscillation_angle, sound_wave_phase, sound_wave_particles
from .analysis import SweepCurves, compute_sweep, analyze_parameters
from .config import load_constants, save_constants


__all__ = [
    # Constants
    'AnatomicalConstants', 'ParameterRange', 'DEFAULT_CONSTANTS', 'PARAMETER_NAMES',
    # Parameters
    'ScaleParameters', 'DEFAULT_PARAMETERS',
    # Amplification
    'AmplificationResult', 'area_ratio', 'lever_ratio', 'bone_lever_arms',
    'bone_lever_ratio', 'amplification_factor', 'decibel_gain', 'output_pressure',
    'compute_metrics',
    # Geometry
    'Layout', 'AnchorLink', 'OSSICULAR_CHAIN', 'compute_layout', 'resolve_chain',
    'scaled_dimensions', 'membrane_radius',
    # Animation
    'oscillation_angle', 'sound_wave_phase', 'sound_wave_particles',
    # Analysis
    'SweepCurves', 'compute_sweep', 'analyze_parameters',
    # Config
    'load_constants', 'save_constants',
]
