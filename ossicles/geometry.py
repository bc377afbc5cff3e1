"""
Geometry Module - Pure layout, no physics.

Derives on-screen positions and sizes of the ear canal, eardrum, ossicles
and oval window from the scale multipliers. Coordinates are SVG-style
(x right, y DOWN) on a 1200×800 reference canvas, then fitted uniformly
onto the requested canvas.

The ossicles form a chain of anchors: each anchor is the previous anchor
plus an offset computed from one bone's scaled dimensions, so growing a bone
moves everything downstream of it.
"""

import math
import numpy as np
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .constants import AnatomicalConstants, DEFAULT_CONSTANTS
from .parameters import ScaleParameters


REFERENCE_CANVAS = (1200.0, 800.0)  # px

# Ear canal control points (reference px): curved channel toward the eardrum
EAR_CANAL_START = (100.0, 200.0)
EAR_CANAL_MID = (250.0, 300.0)
EAR_CANAL_END = (380.0, 400.0)
EAR_CANAL_START_WIDTH = 80.0  # Wider at entrance
EAR_CANAL_MID_WIDTH = 50.0
EAR_CANAL_END_WIDTH = 35.0    # Narrowest at eardrum

# Membranes are drawn side-on: tall and narrow
MEMBRANE_RX_FACTOR = 0.4
MEMBRANE_RY_FACTOR = 1.2
MEMBRANE_RADIUS_FACTOR = 0.5

EARDRUM_CONTACT_FRACTION = 0.7  # Malleus touches the membrane at 0.7·r
OSSICLE_CLEARANCE = 105.0       # px between membrane contact and handle base
STAPES_GAP = 15.0               # px between incus long process and stapes head
OVAL_WINDOW_OFFSET = 6.0        # px from footplate anchor to oval window

# Tuned visual angles (degrees), not derived from physics
BONE_ROTATIONS = {
    'malleus': -5.0,
    'incus': -45.0,
    'stapes': 90.0,
}

# Reference dimensions (px) at multiplier 1.0
BASE_DIMENSIONS = {
    'malleus': {
        'head_radius': 50.0,
        'handle_length': 100.0,
        'neck_length': 30.0,
        'handle_width': 12.0,
    },
    'incus': {
        'body_width': 65.0,
        'body_height': 40.0,
        'long_process_length': 80.0,
        'short_process_length': 40.0,
        'process_width': 10.0,
    },
    'stapes': {
        'head_radius': 25.0,
        'crura_length': 60.0,
        'footplate_width': 45.0,
        'footplate_height': 12.0,
        'crura_width': 8.0,
    },
}


@dataclass(frozen=True)
class AnchorLink:
    """
    One step of the ossicular chain.

    offset maps the driving bone's scaled dimensions to (dx, dy) from the
    previous anchor. bone=None means a fixed offset.
    """
    name: str
    bone: Optional[str]
    offset: Callable[[Dict[str, float]], Tuple[float, float]]


OSSICULAR_CHAIN: Tuple[AnchorLink, ...] = (
    AnchorLink('malleus_neck', 'malleus',
               lambda d: (d['handle_length'] * 0.65, -d['handle_length'] * 0.25)),
    AnchorLink('malleus_head', 'malleus',
               lambda d: (d['neck_length'], 0.0)),
    AnchorLink('incus_body', 'malleus',
               lambda d: (d['head_radius'] * 1.5, 0.0)),
    AnchorLink('incus_long_process', 'incus',
               lambda d: (d['long_process_length'] * 0.65, -d['long_process_length'] * 0.35)),
    AnchorLink('stapes_head', None,
               lambda d: (STAPES_GAP, 0.0)),
    AnchorLink('stapes_footplate', 'stapes',
               lambda d: (d['crura_length'] + d['footplate_height'] * 0.5, 0.0)),
    AnchorLink('oval_window', None,
               lambda d: (OVAL_WINDOW_OFFSET, 0.0)),
)

# Branch off incus_body, outside the transmission chain
INCUS_SHORT_PROCESS = AnchorLink('incus_short_process', 'incus',
                                 lambda d: (-d['short_process_length'] * 0.6,
                                            -d['short_process_length'] * 0.4))


def scaled_dimensions(params: ScaleParameters) -> Dict[str, Dict[str, float]]:
    """Bone dimensions (reference px) scaled by each bone's own multiplier."""
    return {
        bone: {key: value * params.resolved(bone) for key, value in dims.items()}
        for bone, dims in BASE_DIMENSIONS.items()
    }


def resolve_chain(links: Sequence[AnchorLink], root_name: str, root: Sequence[float],
                  dimensions: Dict[str, Dict[str, float]]) -> Dict[str, np.ndarray]:
    """
    Reduce an ordered chain of links into a flat name → anchor mapping.

    Anchors are produced in chain order starting from root.
    """
    anchors = {root_name: np.asarray(root, dtype=float)}
    current = anchors[root_name]
    for link in links:
        dims = dimensions[link.bone] if link.bone is not None else {}
        dx, dy = link.offset(dims)
        current = current + np.array([dx, dy])
        anchors[link.name] = current
    return anchors


def membrane_radius(area: float, visual_scale: float) -> float:
    """Display radius (px) of a membrane of the given area (mm²)."""
    return math.sqrt(area / math.pi) * visual_scale * MEMBRANE_RADIUS_FACTOR


def _quadratic_bezier(p0: np.ndarray, c: np.ndarray, p1: np.ndarray, n: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, n)[:, None]
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * c + t ** 2 * p1


@dataclass
class CanvasFrame:
    """Uniform fit of the reference canvas onto the target canvas."""
    fit: float
    offset: np.ndarray

    @classmethod
    def for_canvas(cls, width: float, height: float) -> 'CanvasFrame':
        if not (width > 0 and height > 0 and math.isfinite(width) and math.isfinite(height)):
            raise ValueError(f"Canvas dimensions must be finite and positive, got {width}x{height}")
        ref_w, ref_h = REFERENCE_CANVAS
        fit = min(width / ref_w, height / ref_h)
        offset = np.array([(width - ref_w * fit) / 2, (height - ref_h * fit) / 2])
        return cls(fit=fit, offset=offset)

    def point(self, p) -> np.ndarray:
        return self.offset + self.fit * np.asarray(p, dtype=float)

    def length(self, value: float) -> float:
        return self.fit * value


@dataclass
class EarCanalGeometry:
    """
    Closed canal outline as quadratic Bézier segments.

    segments: list of (start, control, end); a straight segment has its
    control point at the midpoint.
    """
    start: np.ndarray
    mid: np.ndarray
    end: np.ndarray
    start_width: float
    mid_width: float
    end_width: float
    segments: List[Tuple[np.ndarray, np.ndarray, np.ndarray]] = field(default_factory=list)

    def outline(self, samples_per_segment: int = 16) -> np.ndarray:
        """Polygon vertices (N, 2) along the closed outline."""
        pieces = [_quadratic_bezier(p0, c, p1, samples_per_segment)
                  for p0, c, p1 in self.segments]
        return np.vstack(pieces)


@dataclass
class MembraneGeometry:
    """Eardrum or oval window, drawn as a side-view ellipse."""
    center: np.ndarray
    radius: float  # px
    rx: float      # px
    ry: float      # px
    area: float    # mm²


@dataclass
class MalleusGeometry:
    handle: np.ndarray  # Chain root, touches the eardrum side
    neck: np.ndarray
    head: np.ndarray    # Articulates with the incus
    head_radius: float
    handle_length: float
    neck_length: float
    handle_width: float
    rotation: float     # degrees


@dataclass
class IncusGeometry:
    body: np.ndarray
    long_process_end: np.ndarray  # Lenticular process, articulates with the stapes
    short_process_end: np.ndarray
    body_width: float
    body_height: float
    long_process_length: float
    short_process_length: float
    process_width: float
    rotation: float


@dataclass
class StapesGeometry:
    head: np.ndarray
    footplate: np.ndarray  # Sits in the oval window
    head_radius: float
    crura_length: float
    footplate_width: float
    footplate_height: float
    crura_width: float
    rotation: float


@dataclass
class Layout:
    """Resolved positions (px) and sizes for every rendered part."""
    canvas: Tuple[float, float]
    fit: float
    ear_canal: EarCanalGeometry
    eardrum: MembraneGeometry
    malleus: MalleusGeometry
    incus: IncusGeometry
    stapes: StapesGeometry
    oval_window: MembraneGeometry
    connection: Tuple[np.ndarray, np.ndarray]  # Eardrum contact → malleus handle
    anchors: Dict[str, np.ndarray]

    def sizes(self) -> Dict[str, float]:
        """Every radius/length in the layout, keyed part.field."""
        out = {}
        for part in ('eardrum', 'oval_window', 'malleus', 'incus', 'stapes'):
            geom = getattr(self, part)
            for name, value in vars(geom).items():
                if isinstance(value, float) and name not in ('rotation', 'area'):
                    out[f'{part}.{name}'] = value
        for name in ('start_width', 'mid_width', 'end_width'):
            out[f'ear_canal.{name}'] = getattr(self.ear_canal, name)
        return out


def _ear_canal(frame: CanvasFrame) -> EarCanalGeometry:
    sx, sy = EAR_CANAL_START
    mx, my = EAR_CANAL_MID
    ex, ey = EAR_CANAL_END
    sw, mw, ew = EAR_CANAL_START_WIDTH, EAR_CANAL_MID_WIDTH, EAR_CANAL_END_WIDTH

    # Upper wall inward, lower wall back out (S-shaped channel)
    points = [
        ((sx, sy - sw / 2), (sx + 60, sy - 20), (mx, my - mw / 2)),
        ((mx, my - mw / 2), (mx + 50, my), (ex, ey - ew / 2)),
        ((ex, ey - ew / 2), (ex, ey), (ex, ey + ew / 2)),
        ((ex, ey + ew / 2), (mx + 50, my + mw), (mx, my + mw / 2)),
        ((mx, my + mw / 2), (sx + 60, sy + sw + 20), (sx, sy + sw / 2)),
    ]
    segments = [tuple(frame.point(p) for p in seg) for seg in points]

    return EarCanalGeometry(
        start=frame.point(EAR_CANAL_START),
        mid=frame.point(EAR_CANAL_MID),
        end=frame.point(EAR_CANAL_END),
        start_width=frame.length(sw),
        mid_width=frame.length(mw),
        end_width=frame.length(ew),
        segments=segments,
    )


def _membrane(center: np.ndarray, area: float, visual_scale: float,
              frame: CanvasFrame) -> MembraneGeometry:
    radius = frame.length(membrane_radius(area, visual_scale))
    return MembraneGeometry(
        center=center,
        radius=radius,
        rx=radius * MEMBRANE_RX_FACTOR,
        ry=radius * MEMBRANE_RY_FACTOR,
        area=area,
    )


def compute_layout(params: ScaleParameters,
                   canvas: Tuple[float, float] = REFERENCE_CANVAS,
                   constants: AnatomicalConstants = DEFAULT_CONSTANTS) -> Layout:
    """
    Resolve the full diagram layout.

    Chain: ear canal → eardrum → malleus → incus → stapes → oval window.
    Multipliers are sanitized (non-positive → range minimum) but not clamped.
    """
    width, height = canvas
    frame = CanvasFrame.for_canvas(width, height)
    p = params.sanitized(constants)

    ear_canal = _ear_canal(frame)

    # Eardrum sits at the end of the canal
    eardrum_area = p.resolved('eardrum') * constants.eardrum_area
    eardrum_anchor = np.array(EAR_CANAL_END)
    eardrum_r = membrane_radius(eardrum_area, constants.visual_scale)

    # A larger eardrum pushes the chain root outward
    contact = eardrum_anchor + np.array([eardrum_r * EARDRUM_CONTACT_FRACTION, 0.0])
    root = contact + np.array([OSSICLE_CLEARANCE, 0.0])

    dims = scaled_dimensions(p)
    ref_anchors = resolve_chain(OSSICULAR_CHAIN, 'malleus_handle', root, dims)
    ref_anchors = {'eardrum': eardrum_anchor, **ref_anchors}
    branch = resolve_chain((INCUS_SHORT_PROCESS,), 'incus_body', ref_anchors['incus_body'], dims)
    ref_anchors[INCUS_SHORT_PROCESS.name] = branch[INCUS_SHORT_PROCESS.name]
    anchors = {name: frame.point(pt) for name, pt in ref_anchors.items()}

    def sized(bone: str) -> Dict[str, float]:
        return {key: frame.length(value) for key, value in dims[bone].items()}

    m, i, s = sized('malleus'), sized('incus'), sized('stapes')

    oval_window_area = p.resolved('oval_window') * constants.oval_window_area

    return Layout(
        canvas=(float(width), float(height)),
        fit=frame.fit,
        ear_canal=ear_canal,
        eardrum=_membrane(anchors['eardrum'], eardrum_area, constants.visual_scale, frame),
        malleus=MalleusGeometry(
            handle=anchors['malleus_handle'],
            neck=anchors['malleus_neck'],
            head=anchors['malleus_head'],
            rotation=BONE_ROTATIONS['malleus'],
            **m,
        ),
        incus=IncusGeometry(
            body=anchors['incus_body'],
            long_process_end=anchors['incus_long_process'],
            short_process_end=anchors['incus_short_process'],
            rotation=BONE_ROTATIONS['incus'],
            **i,
        ),
        stapes=StapesGeometry(
            head=anchors['stapes_head'],
            footplate=anchors['stapes_footplate'],
            rotation=BONE_ROTATIONS['stapes'],
            **s,
        ),
        oval_window=_membrane(anchors['oval_window'], oval_window_area,
                              constants.visual_scale, frame),
        connection=(frame.point(contact), anchors['malleus_handle']),
        anchors=anchors,
    )
