"""Tests for parameter sweeps, summaries and animation transforms."""

import math

import numpy as np
import pytest

from ossicles.parameters import ScaleParameters
from ossicles.amplification import compute_metrics
from ossicles.analysis import compute_sweep, analyze_parameters
from ossicles.animation import (
    OSCILLATION_AMPLITUDE,
    OSCILLATION_PERIOD,
    oscillation_angle,
    sound_wave_phase,
    sound_wave_particles,
)


class TestSweep:
    def test_default_values_span_range(self):
        curves = compute_sweep('malleus', n_points=11)
        assert curves.multipliers[0] == pytest.approx(0.5)
        assert curves.multipliers[-1] == pytest.approx(2.0)
        assert curves.decibel_gain.shape == (11,)

    def test_matches_pointwise_metrics(self):
        base = ScaleParameters(incus=1.2)
        curves = compute_sweep('stapes', [0.6, 1.0, 1.4], base=base)
        for k, v in enumerate(curves.multipliers):
            m = compute_metrics(base.replace(stapes=v))
            assert curves.lever_ratio[k] == m.lever_ratio
            assert curves.decibel_gain[k] == m.decibel_gain

    def test_identities_hold(self):
        curves = compute_sweep('eardrum', input_pressure=2.0)
        np.testing.assert_allclose(curves.amplification_factor,
                                   curves.area_ratio * curves.lever_ratio)
        np.testing.assert_allclose(curves.output_pressure, 2.0 * curves.amplification_factor)
        assert np.all(curves.lever_ratio >= 1.0)

    def test_oval_window_growth_lowers_gain(self):
        curves = compute_sweep('oval_window')
        assert np.all(np.diff(curves.decibel_gain) < 0)

    def test_unknown_parameter(self):
        with pytest.raises(ValueError):
            compute_sweep('inputLeverArm')


class TestAnalyzeParameters:
    def test_reference_summary(self):
        summary = analyze_parameters(ScaleParameters())
        assert summary['amplification_factor'] == pytest.approx(22.34375)
        assert summary['lever_share'] == pytest.approx(2.279 / 26.983, abs=1e-3)
        assert summary['lever_floored'] is False

    def test_flags_floored_lever(self):
        summary = analyze_parameters(ScaleParameters(malleus=0.5, incus=0.5, stapes=2.0))
        assert summary['lever_floored'] is True
        assert summary['lever_ratio'] == 1.0
        assert summary['lever_ratio_decibel_gain'] == 0.0


class TestOscillation:
    def test_not_playing_is_still(self):
        assert oscillation_angle(0.123, playing=False) == 0.0

    def test_keyframes(self):
        assert oscillation_angle(0.0) == pytest.approx(-OSCILLATION_AMPLITUDE)
        assert oscillation_angle(OSCILLATION_PERIOD / 2) == pytest.approx(OSCILLATION_AMPLITUDE)
        assert oscillation_angle(OSCILLATION_PERIOD / 4) == pytest.approx(0.0, abs=1e-9)

    def test_periodic_and_bounded(self):
        for t in np.linspace(0.0, 3.0, 301):
            angle = oscillation_angle(t)
            assert -OSCILLATION_AMPLITUDE - 1e-9 <= angle <= OSCILLATION_AMPLITUDE + 1e-9
            assert oscillation_angle(t + OSCILLATION_PERIOD) == pytest.approx(angle, abs=1e-9)


class TestSoundWave:
    def test_particle_count_follows_frequency(self):
        assert len(sound_wave_particles(1000, 1.0, 0.0, 0, 0, 100, 50).positions) == 5
        assert len(sound_wave_particles(5000, 1.0, 0.0, 0, 0, 100, 50).positions) == 25

    def test_frequency_clamped_to_range(self):
        particles = sound_wave_particles(10, 1.0, 0.0, 0, 0, 100, 50)
        assert len(particles.positions) == 1

    def test_intensity_scales_amplitude(self):
        quiet = sound_wave_particles(1000, 0.0, 0.5, 0, 0, 100, 50)
        loud = sound_wave_particles(1000, 1.0, 0.5, 0, 0, 100, 50)
        np.testing.assert_allclose(quiet.positions[:, 1], 25.0)
        assert np.max(np.abs(loud.positions[:, 1] - 25.0)) <= 15.0 + 1e-9
        assert loud.radius == 3.0
        assert loud.opacity == pytest.approx(0.8)

    def test_phase_wraps(self):
        for t in (0.0, 0.5, 2.0, 60.0):
            phase = sound_wave_phase(t, 1000)
            assert 0.0 <= phase < 2 * math.pi
        assert sound_wave_phase(0.1, 1000) == pytest.approx(1.0)
