"""
Config Module - Load anatomical constants from YAML.

File layout (see configs/default.yaml):

    anatomy:  eardrum_area, oval_window_area, *_lever_arm
    display:  visual_scale
    ranges:   <parameter>: {min, max}
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Union

from omegaconf import OmegaConf

from .constants import AnatomicalConstants, DEFAULT_CONSTANTS, ParameterRange, PARAMETER_NAMES

logger = logging.getLogger(__name__)

_SECTIONS = ('anatomy', 'display', 'ranges')


def load_constants(path: Optional[Union[str, Path]] = None) -> AnatomicalConstants:
    """
    Build AnatomicalConstants from a YAML file.

    Missing keys keep their defaults. path=None returns DEFAULT_CONSTANTS.
    """
    if path is None:
        return DEFAULT_CONSTANTS

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Constants file not found: {path}")

    logger.info(f"Loading anatomical constants from: {path}")
    cfg = OmegaConf.to_container(OmegaConf.load(path), resolve=True) or {}

    for key in cfg:
        if key not in _SECTIONS:
            logger.warning(f"Ignoring unknown config section '{key}' in {path}")

    # Filter to only AnatomicalConstants fields
    valid_fields = {f.name for f in dataclasses.fields(AnatomicalConstants)} - {'ranges'}
    kwargs = {}
    for section in ('anatomy', 'display'):
        for key, value in (cfg.get(section) or {}).items():
            if key in valid_fields:
                kwargs[key] = float(value)
            else:
                logger.warning(f"Ignoring unknown key '{section}.{key}' in {path}")

    ranges = {}
    for name, bounds in (cfg.get('ranges') or {}).items():
        if name not in PARAMETER_NAMES:
            raise ValueError(f"Unknown parameter range '{name}' in {path}")
        default = DEFAULT_CONSTANTS.range_for(name)
        bounds = bounds or {}
        ranges[name] = ParameterRange(
            min=float(bounds.get('min', default.min)),
            max=float(bounds.get('max', default.max)),
        )

    constants = AnatomicalConstants(ranges=ranges, **kwargs)
    logger.debug(f"Loaded constants: {constants}")
    return constants


def constants_to_dict(constants: AnatomicalConstants) -> dict:
    """Nested dict in the same layout load_constants reads."""
    return {
        'anatomy': {
            'eardrum_area': constants.eardrum_area,
            'oval_window_area': constants.oval_window_area,
            'malleus_lever_arm': constants.malleus_lever_arm,
            'incus_lever_arm': constants.incus_lever_arm,
            'stapes_lever_arm': constants.stapes_lever_arm,
        },
        'display': {
            'visual_scale': constants.visual_scale,
        },
        'ranges': {
            name: {'min': r.min, 'max': r.max}
            for name, r in constants.ranges.items()
        },
    }


def save_constants(constants: AnatomicalConstants, path: Union[str, Path]) -> Path:
    """Write constants as YAML, returning the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    OmegaConf.save(OmegaConf.create(constants_to_dict(constants)), path)
    logger.info(f"Saved anatomical constants to: {path}")
    return path
