"""
Main entry point for the ossicles amplification model.

Usage:
    python -m ossicles                             # Interactive visualization
    python -m ossicles --verify                    # Print calibration report
    python -m ossicles --config configs/default.yaml --malleus 1.5
"""

import argparse
import logging

from .constants import AnatomicalConstants, PARAMETER_NAMES
from .parameters import ScaleParameters
from .amplification import (area_ratio, lever_ratio, decibel_gain, compute_metrics)
from .geometry import compute_layout
from .analysis import compute_sweep, analyze_parameters
from .config import load_constants


def run_verification(params: ScaleParameters, constants: AnatomicalConstants):
    """Calibration report for the amplification model and layout."""
    print("=" * 70)
    print("MIDDLE-EAR AMPLIFICATION VERIFICATION")
    print("=" * 70)

    print(f"\n{'='*70}")
    print("CONSTANTS")
    print("=" * 70)
    print(f"  Eardrum area:     {constants.eardrum_area} mm²")
    print(f"  Oval window area: {constants.oval_window_area} mm²")
    print(f"  Lever arms:       malleus={constants.malleus_lever_arm}mm, "
          f"incus={constants.incus_lever_arm}mm, stapes={constants.stapes_lever_arm}mm")
    print(f"  Visual scale:     {constants.visual_scale} px/mm")

    # 1: Reference anatomy
    print(f"\n{'='*70}")
    print("1. REFERENCE CASE (all multipliers 1.0)")
    print("=" * 70)
    ref = compute_metrics(ScaleParameters(), constants=constants)
    print(f"  Area ratio:    {ref.area_ratio:6.2f}:1   ({ref.area_ratio_decibel_gain:5.2f} dB)")
    print(f"  Lever ratio:   {ref.lever_ratio:6.2f}:1   ({ref.lever_ratio_decibel_gain:5.2f} dB)")
    print(f"  Amplification: {ref.amplification_factor:6.2f}x    ({ref.decibel_gain:5.2f} dB)")
    print("  Expected: ~17:1 × ~1.3:1 ≈ 22x (~26-27 dB)")

    # 2: Guards
    print(f"\n{'='*70}")
    print("2. EDGE CASES")
    print("=" * 70)
    print(f"  area_ratio(55, 0)     = {area_ratio(55, 0):.2f}   (expected 1.00)")
    print(f"  lever_ratio(9.1, 0)   = {lever_ratio(9.1, 0):.2f}   (expected 1.00)")
    print(f"  lever_ratio(3.5, 7.0) = {lever_ratio(3.5, 7.0):.2f}   (floored at 1.00)")
    print(f"  decibel_gain(0)       = {decibel_gain(0):.2f}   (expected 0.00)")
    print(f"  decibel_gain(-5)      = {decibel_gain(-5):.2f}   (expected 0.00)")

    # 3: Current configuration
    print(f"\n{'='*70}")
    print("3. CURRENT CONFIGURATION")
    print("=" * 70)
    summary = analyze_parameters(params, constants)
    print("  " + ", ".join(f"{k}={v:.2f}" for k, v in params.as_dict().items()))
    print(f"  Eardrum:       {summary['eardrum_area']:.1f} mm²")
    print(f"  Oval window:   {summary['oval_window_area']:.2f} mm²")
    print(f"  Lever arms:    in={summary['input_lever_arm']:.2f}mm, "
          f"out={summary['output_lever_arm']:.2f}mm"
          + ("  (floored)" if summary['lever_floored'] else ""))
    print(f"  Amplification: {summary['amplification_factor']:.2f}x "
          f"({summary['decibel_gain']:.2f} dB, lever share {summary['lever_share']*100:.0f}%)")

    # 4: Sweeps
    print(f"\n{'='*70}")
    print("4. PARAMETER SWEEPS (others at current values)")
    print("=" * 70)
    for name in PARAMETER_NAMES:
        r = constants.range_for(name)
        curves = compute_sweep(name, [r.min, 1.0, r.max], base=params, constants=constants)
        cells = "   ".join(f"{m:4.2f}→{g:5.2f} dB"
                           for m, g in zip(curves.multipliers, curves.decibel_gain))
        print(f"  {name:12s} {cells}")

    # 5: Layout
    print(f"\n{'='*70}")
    print("5. LAYOUT ANCHORS (1200x800 canvas)")
    print("=" * 70)
    layout = compute_layout(params, constants=constants)
    for name, point in layout.anchors.items():
        print(f"  {name:20s} ({point[0]:7.1f}, {point[1]:7.1f})")
    print(f"  Eardrum radius:     {layout.eardrum.radius:.1f} px")
    print(f"  Oval window radius: {layout.oval_window.radius:.1f} px")

    print("\n" + "=" * 70)
    print("VERIFICATION COMPLETE")
    print("=" * 70)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Middle-ear ossicular amplification model")
    parser.add_argument("--verify", action="store_true", help="Print calibration report and exit")
    parser.add_argument("--config", default=None, help="YAML file with anatomical constants")
    parser.add_argument("--verbose", action="store_true", help="Show config loading messages")
    for name in PARAMETER_NAMES:
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, type=float, default=None,
                            help=f"{name} multiplier (default 1.0)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.config is None:
        print("Using default constants")
    constants = load_constants(args.config)

    params = ScaleParameters(**{
        name: getattr(args, name) for name in PARAMETER_NAMES
        if getattr(args, name) is not None
    })

    if args.verify:
        run_verification(params, constants)
    else:
        from .visualization import run_interactive

        print("Starting Ossicles Simulation...")
        print("Use sliders to adjust bone sizes and membrane areas.")
        print("'Animate' starts the ossicle oscillation and sound wave.")
        print("Run with --verify for the calibration report.\n")
        run_interactive(params, constants)


if __name__ == '__main__':
    main()
