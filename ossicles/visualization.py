"""
Visualization Module - Separate windows for different views.

Windows:
1. Ear View - Ear canal, membranes and ossicles from the resolved Layout
2. Analysis View - Amplification metrics and a sweep of the active parameter
3. Control Panel - Sliders for bone sizes, membrane areas and sound
"""

import time
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import Slider, Button
from matplotlib.patches import Ellipse, Polygon
from matplotlib.transforms import Affine2D
from typing import Dict, Optional

from .constants import (AnatomicalConstants, DEFAULT_CONSTANTS, DEFAULT_SOUND_FREQUENCY,
                        DEFAULT_SOUND_INTENSITY, FREQUENCY_RANGE, SLIDER_STEP)
from .parameters import ScaleParameters, DEFAULT_PARAMETERS
from .amplification import AmplificationResult, compute_metrics
from .geometry import Layout, compute_layout, REFERENCE_CANVAS
from .analysis import SweepCurves, compute_sweep
from .animation import oscillation_angle, sound_wave_phase, sound_wave_particles

BONE_FILL = '#A0522D'
BONE_DARK = '#8B4513'
BONE_EDGE = '#654321'
LABEL_COLOR = '#666666'


class EarView:
    """
    Anatomical diagram - draws a Layout in canvas pixels (y down).
    """

    def __init__(self, fig, ax):
        self.fig = fig
        self.ax = ax

    def draw(self, layout: Layout, wobble: float = 0.0,
             sound: Optional[dict] = None):
        """Draw the complete diagram; wobble (deg) rotates each bone about its anchor."""
        self.ax.clear()
        self.ax.set_aspect('equal')
        width, height = layout.canvas
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.ax.axis('off')
        self.ax.set_title('Middle Ear - Ossicular Chain', fontsize=12, fontweight='bold')

        # Back to front
        self._draw_ear_canal(layout)
        if sound is not None:
            self._draw_sound(layout, **sound)
        self._draw_membrane(layout.eardrum, 'Eardrum', '#F48FB1', '#C2185B', layout.fit)
        self._draw_connection(layout)
        self._draw_malleus(layout, wobble)
        self._draw_incus(layout, wobble)
        self._draw_stapes(layout, wobble)
        self._draw_membrane(layout.oval_window, 'Oval Window', '#90CAF9', '#1565C0', layout.fit)

    def _rotated(self, anchor: np.ndarray, angle: float):
        return Affine2D().rotate_deg_around(anchor[0], anchor[1], angle) + self.ax.transData

    def _draw_ear_canal(self, layout: Layout):
        canal = layout.ear_canal
        outline = Polygon(canal.outline(), closed=True, facecolor='#F3F4F6',
                          edgecolor='#9CA3AF', linewidth=2.5, zorder=1)
        self.ax.add_patch(outline)
        # Inner depth shadow
        self.ax.add_patch(Ellipse(canal.mid, canal.mid_width * 0.6, canal.mid_width * 0.4,
                                  facecolor='#9CA3AF', alpha=0.4, zorder=2))
        self.ax.text(canal.start[0] + 80 * layout.fit, canal.start[1] - 30 * layout.fit,
                     'Ear Canal', ha='center', fontsize=10, color=LABEL_COLOR,
                     fontweight='bold')

    def _draw_sound(self, layout: Layout, frequency: float, intensity: float, phase: float):
        canal = layout.ear_canal
        particles = sound_wave_particles(
            frequency, intensity, phase,
            x=canal.start[0] - 80 * layout.fit,
            y=canal.start[1] - canal.start_width / 2,
            width=canal.end[0] - canal.start[0],
            height=canal.start_width,
        )
        if len(particles.positions):
            self.ax.scatter(particles.positions[:, 0], particles.positions[:, 1],
                            s=(particles.radius * 2) ** 2, color=(0.39, 0.59, 1.0),
                            alpha=particles.opacity, zorder=3)

    def _draw_membrane(self, membrane, label: str, face: str, edge: str, fit: float):
        self.ax.add_patch(Ellipse(membrane.center, 2 * membrane.rx, 2 * membrane.ry,
                                  facecolor=face, edgecolor=edge, linewidth=2,
                                  alpha=0.85, zorder=4))
        x, y = membrane.center
        self.ax.text(x, y + membrane.ry + 20 * fit, label, ha='center', fontsize=9,
                     color=LABEL_COLOR, fontweight='bold')
        self.ax.text(x, y + membrane.ry + 35 * fit, f'{membrane.area:.1f} mm²',
                     ha='center', fontsize=8, color='#999999')

    def _draw_connection(self, layout: Layout):
        start, end = layout.connection
        self.ax.plot([start[0], end[0]], [start[1], end[1]], color=LABEL_COLOR,
                     linestyle=':', linewidth=1.5, alpha=0.4, zorder=4)

    def _draw_malleus(self, layout: Layout, wobble: float):
        m = layout.malleus
        tr = self._rotated(m.handle, wobble)

        self.ax.plot([m.handle[0], m.neck[0]], [m.handle[1], m.neck[1]], color=BONE_DARK,
                     linewidth=max(m.handle_width * 0.5, 1.0), solid_capstyle='round',
                     transform=tr, zorder=6)
        neck_mid = (m.neck + m.head) / 2
        self.ax.add_patch(Ellipse(neck_mid, m.neck_length * 1.6, m.handle_width * 1.6,
                                  facecolor=BONE_FILL, edgecolor=BONE_EDGE, linewidth=1.5,
                                  transform=tr, zorder=6))
        self.ax.add_patch(Ellipse(m.head, 2 * m.head_radius, 1.8 * m.head_radius,
                                  angle=m.rotation, facecolor=BONE_FILL, edgecolor=BONE_EDGE,
                                  linewidth=2, transform=tr, zorder=7))
        self.ax.text(m.head[0], m.head[1] + m.head_radius + 18 * layout.fit, 'Malleus',
                     ha='center', fontsize=9, color=LABEL_COLOR, fontweight='bold', zorder=10)

    def _draw_incus(self, layout: Layout, wobble: float):
        i = layout.incus
        tr = self._rotated(i.body, wobble)

        self.ax.plot([i.body[0], i.long_process_end[0]], [i.body[1], i.long_process_end[1]],
                     color=BONE_DARK, linewidth=max(i.process_width * 0.6, 1.0),
                     solid_capstyle='round', transform=tr, zorder=6)
        self.ax.plot([i.body[0], i.short_process_end[0]], [i.body[1], i.short_process_end[1]],
                     color=BONE_DARK, linewidth=max(i.process_width * 0.5, 1.0),
                     solid_capstyle='round', transform=tr, zorder=6)
        self.ax.add_patch(Ellipse(i.body, i.body_width, i.body_height, angle=i.rotation,
                                  facecolor=BONE_FILL, edgecolor=BONE_EDGE, linewidth=2,
                                  transform=tr, zorder=7))
        # Lenticular process
        self.ax.add_patch(Ellipse(i.long_process_end, i.process_width * 1.6, i.process_width * 1.2,
                                  facecolor=BONE_DARK, edgecolor=BONE_EDGE, linewidth=1.5,
                                  transform=tr, zorder=7))
        self.ax.text(i.body[0], i.body[1] - i.body_height - 10 * layout.fit, 'Incus',
                     ha='center', fontsize=9, color=LABEL_COLOR, fontweight='bold', zorder=10)

    def _draw_stapes(self, layout: Layout, wobble: float):
        s = layout.stapes
        tr = self._rotated(s.head, wobble)

        spread = s.footplate_width * 0.35
        for side in (-1, 1):
            self.ax.plot([s.head[0], s.footplate[0]], [s.head[1], s.footplate[1] + side * spread],
                         color=BONE_DARK, linewidth=max(s.crura_width * 0.5, 1.0),
                         solid_capstyle='round', transform=tr, zorder=6)
        self.ax.add_patch(Ellipse(s.head, 2 * s.head_radius, 1.5 * s.head_radius,
                                  facecolor=BONE_FILL, edgecolor=BONE_EDGE, linewidth=2,
                                  transform=tr, zorder=7))
        self.ax.add_patch(Ellipse(s.footplate, 2 * s.footplate_width, 2 * s.footplate_height,
                                  angle=s.rotation, facecolor=BONE_FILL, edgecolor=BONE_EDGE,
                                  linewidth=2, transform=tr, zorder=7))
        self.ax.text(s.head[0], s.head[1] + s.footplate_width + 20 * layout.fit, 'Stapes',
                     ha='center', fontsize=9, color=LABEL_COLOR, fontweight='bold', zorder=10)


class AnalysisView:
    """
    Metrics panel and parameter sweep.
    """

    def __init__(self, fig, axes):
        self.fig = fig
        self.axes = axes  # Dict with 'metrics', 'sweep'

    def draw(self, metrics: AmplificationResult, curves: SweepCurves, current: float):
        self._draw_metrics(metrics)
        self._draw_sweep(curves, current)

    def _draw_metrics(self, metrics: AmplificationResult):
        ax = self.axes['metrics']
        ax.clear()

        labels = ['Area', 'Lever', 'Total']
        values = [metrics.area_ratio_decibel_gain, metrics.lever_ratio_decibel_gain,
                  metrics.decibel_gain]
        colors = ['#2563EB', '#16A34A', '#9333EA']
        bars = ax.bar(labels, values, color=colors, alpha=0.8)
        for bar, value in zip(bars, values):
            ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.5,
                    f'{value:.1f} dB', ha='center', fontsize=9, fontweight='bold')
        ax.set_ylabel('Gain (dB)')
        ax.set_ylim(0, max(35.0, max(values) * 1.2))
        ax.set_title('Amplification Metrics', fontweight='bold')
        ax.grid(True, axis='y', alpha=0.3)

        info = (
            f"Area Ratio:  {metrics.area_ratio:.2f}:1\n"
            f"Lever Ratio: {metrics.lever_ratio:.2f}:1\n"
            f"Total:       {metrics.amplification_factor:.1f}x\n"
            f"Output:      {metrics.output_pressure:.2f} (input {metrics.input_pressure:.2f})\n"
            "Amplification = Area Ratio × Lever Ratio"
        )
        ax.text(0.02, 0.98, info, transform=ax.transAxes, fontsize=8,
                fontfamily='monospace', verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.8))

    def _draw_sweep(self, curves: SweepCurves, current: float):
        ax = self.axes['sweep']
        ax.clear()

        ax.plot(curves.multipliers, curves.decibel_gain, color='#9333EA', linewidth=2,
                label='Total')
        ax.plot(curves.multipliers, curves.area_ratio_decibel_gain, color='#2563EB',
                linestyle='--', linewidth=1.5, label='Area')
        ax.plot(curves.multipliers, curves.lever_ratio_decibel_gain, color='#16A34A',
                linestyle='--', linewidth=1.5, label='Lever')
        ax.axvline(x=current, color='gray', linestyle='--', alpha=0.7)

        ax.set_xlabel(f'{curves.parameter} multiplier')
        ax.set_ylabel('Gain (dB)')
        ax.set_title(f'Gain vs {curves.parameter}', fontweight='bold')
        ax.legend(loc='best', fontsize=8)
        ax.grid(True, alpha=0.3)


class OssicleSimulator:
    """
    Main simulator with multiple windows.
    """

    FRAME_INTERVAL_MS = 50

    def __init__(self, params: ScaleParameters = DEFAULT_PARAMETERS,
                 constants: AnatomicalConstants = DEFAULT_CONSTANTS):
        self.params = params.sanitized(constants)
        self.constants = constants

        self.ear_fig = None
        self.analysis_fig = None
        self.control_fig = None

        self.sliders: Dict[str, Slider] = {}
        self.active_parameter = 'malleus'
        self.is_animating = False
        self._start_time = 0.0
        self._timer = None

        self.metrics: Optional[AmplificationResult] = None
        self.layout: Optional[Layout] = None

    def setup(self):
        """Create all windows."""
        self.ear_fig, self.ear_ax = plt.subplots(figsize=(12, 8))
        self.ear_fig.canvas.manager.set_window_title('Ossicles - Ear View')
        self.ear_view = EarView(self.ear_fig, self.ear_ax)

        self.analysis_fig, axes = plt.subplots(1, 2, figsize=(12, 5))
        self.analysis_fig.canvas.manager.set_window_title('Ossicles - Analysis')
        self.analysis_view = AnalysisView(self.analysis_fig, {
            'metrics': axes[0],
            'sweep': axes[1],
        })

        self.control_fig = plt.figure(figsize=(8, 6))
        self.control_fig.canvas.manager.set_window_title('Ossicles - Controls')
        self._setup_controls()

        self.ear_fig.tight_layout()
        self.analysis_fig.tight_layout()

    def _setup_controls(self):
        """Create control sliders."""
        self.control_fig.text(0.5, 0.95, 'Bone Size Controls',
                              ha='center', fontsize=14, fontweight='bold')

        slider_configs = [
            ('malleus', 'Malleus (Hammer)'),
            ('incus', 'Incus (Anvil)'),
            ('stapes', 'Stapes (Stirrup)'),
            ('eardrum', 'Eardrum Area'),
            ('oval_window', 'Oval Window Area'),
        ]

        for i, (name, label) in enumerate(slider_configs):
            r = self.constants.range_for(name)
            ax = self.control_fig.add_axes([0.3, 0.85 - i * 0.08, 0.5, 0.04])
            self.sliders[name] = Slider(ax, label, r.min, r.max,
                                        valinit=r.clamp(self.params.resolved(name)),
                                        valstep=SLIDER_STEP)
            self.sliders[name].on_changed(self._make_handler(name))

        sound_configs = [
            ('frequency', 'Frequency (Hz)', FREQUENCY_RANGE.min, FREQUENCY_RANGE.max,
             DEFAULT_SOUND_FREQUENCY, 50),
            ('intensity', 'Intensity', 0.0, 1.0, DEFAULT_SOUND_INTENSITY, SLIDER_STEP),
        ]
        for j, (name, label, vmin, vmax, vinit, step) in enumerate(sound_configs):
            ax = self.control_fig.add_axes([0.3, 0.40 - j * 0.08, 0.5, 0.04])
            self.sliders[name] = Slider(ax, label, vmin, vmax, valinit=vinit, valstep=step)
            self.sliders[name].on_changed(self.update)

        btn_animate = self.control_fig.add_axes([0.25, 0.05, 0.2, 0.06])
        self.btn_animate = Button(btn_animate, 'Animate')
        self.btn_animate.on_clicked(self.toggle_animation)

        btn_reset = self.control_fig.add_axes([0.55, 0.05, 0.2, 0.06])
        self.btn_reset = Button(btn_reset, 'Reset to Defaults')
        self.btn_reset.on_clicked(self.reset)

    def _make_handler(self, name: str):
        def handler(val):
            self.active_parameter = name
            self.update()
        return handler

    def _elapsed(self) -> float:
        return time.monotonic() - self._start_time

    def update(self, val=None):
        """Recompute metrics and layout, then redraw all views."""
        if self.sliders:
            self.params = ScaleParameters(**{
                name: self.sliders[name].val
                for name in ('malleus', 'incus', 'stapes', 'eardrum', 'oval_window')
            })

        self.metrics = compute_metrics(self.params, constants=self.constants)
        self.layout = compute_layout(self.params, REFERENCE_CANVAS, self.constants)
        curves = compute_sweep(self.active_parameter, base=self.params, constants=self.constants)

        self._draw_ear()
        self.analysis_view.draw(self.metrics, curves, self.params.resolved(self.active_parameter))
        self.analysis_fig.canvas.draw_idle()

    def _draw_ear(self):
        t = self._elapsed()
        sound = None
        if self.is_animating:
            frequency = self.sliders['frequency'].val if self.sliders else DEFAULT_SOUND_FREQUENCY
            intensity = self.sliders['intensity'].val if self.sliders else DEFAULT_SOUND_INTENSITY
            sound = {
                'frequency': frequency,
                'intensity': intensity,
                'phase': sound_wave_phase(t, frequency),
            }
        wobble = oscillation_angle(t, playing=self.is_animating)
        self.ear_view.draw(self.layout, wobble=wobble, sound=sound)
        self.ear_fig.canvas.draw_idle()

    def toggle_animation(self, event=None):
        """Start or pause the oscillation."""
        self.is_animating = not self.is_animating
        if self.is_animating:
            self._start_time = time.monotonic()
            self.btn_animate.label.set_text('Pause')
            self._timer = self.ear_fig.canvas.new_timer(interval=self.FRAME_INTERVAL_MS)
            self._timer.add_callback(self._draw_ear)
            self._timer.start()
        else:
            self.btn_animate.label.set_text('Animate')
            if self._timer is not None:
                self._timer.stop()
                self._timer = None
            self._draw_ear()
        self.control_fig.canvas.draw_idle()

    def reset(self, event=None):
        """Reset multipliers to 1.0 clamped to their ranges, sound controls to start values."""
        for name, slider in self.sliders.items():
            if name in ('frequency', 'intensity'):
                slider.reset()
            else:
                slider.set_val(self.constants.range_for(name).clamp(1.0))

    def run(self):
        """Start simulation."""
        self.setup()
        self.update()
        plt.show()


def run_interactive(params: ScaleParameters = DEFAULT_PARAMETERS,
                    constants: AnatomicalConstants = DEFAULT_CONSTANTS):
    """Convenience function to run simulation."""
    sim = OssicleSimulator(params, constants)
    sim.run()
