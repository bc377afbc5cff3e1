"""
Tests for the amplification model.

Covers the ratio/gain helpers, their degenerate-input guards, and the
reference calibration of compute_metrics.
"""

import math

import numpy as np
import pytest

from ossicles.constants import AnatomicalConstants, DEFAULT_CONSTANTS
from ossicles.parameters import ScaleParameters
from ossicles.amplification import (
    area_ratio,
    lever_ratio,
    bone_lever_arms,
    bone_lever_ratio,
    amplification_factor,
    decibel_gain,
    output_pressure,
    compute_metrics,
)


MULTIPLIERS = [0.5, 0.75, 1.0, 1.25, 1.5, 2.0]


class TestAreaRatio:
    def test_divides(self):
        assert area_ratio(55.0, 3.2) == pytest.approx(55.0 / 3.2)

    @pytest.mark.parametrize("divisor", [0.0, -1.0])
    def test_non_positive_divisor_is_neutral(self, divisor):
        assert area_ratio(55.0, divisor) == 1.0

    @pytest.mark.parametrize("areas", [(55.0, 3.2e-320), (math.inf, math.inf), (math.inf, 3.2)])
    def test_non_finite_quotient_is_neutral(self, areas):
        assert area_ratio(*areas) == 1.0


class TestLeverRatio:
    def test_divides(self):
        assert lever_ratio(9.1, 7.0) == pytest.approx(1.3)

    def test_floored_at_one(self):
        assert lever_ratio(3.0, 7.0) == 1.0

    @pytest.mark.parametrize("output_arm", [0.0, -2.0])
    def test_non_positive_output_arm_is_neutral(self, output_arm):
        assert lever_ratio(9.1, output_arm) == 1.0

    def test_non_finite_quotient_is_neutral(self):
        assert lever_ratio(9.1, 5e-324) == 1.0
        assert lever_ratio(math.inf, math.inf) == 1.0

    def test_bone_arms_at_reference(self):
        input_arm, output_arm = bone_lever_arms(1.0, 1.0, 1.0)
        assert input_arm == pytest.approx(9.1)
        assert output_arm == pytest.approx(7.0)

    def test_bone_form_averages_malleus_and_incus(self):
        input_arm, _ = bone_lever_arms(2.0, 1.0, 1.0)
        expected = (2.0 * DEFAULT_CONSTANTS.malleus_lever_arm + DEFAULT_CONSTANTS.incus_lever_arm) / 2
        assert input_arm == pytest.approx(expected)

    def test_never_below_one(self):
        for m in MULTIPLIERS:
            for i in MULTIPLIERS:
                for s in MULTIPLIERS:
                    assert bone_lever_ratio(m, i, s) >= 1.0

    def test_larger_stapes_reduces_ratio(self):
        assert bone_lever_ratio(1.0, 1.0, 1.2) < bone_lever_ratio(1.0, 1.0, 1.0)


class TestDecibelGain:
    @pytest.mark.parametrize("factor", [0.5, 1.0, 1.3, 17.1875, 1000.0])
    def test_matches_formula(self, factor):
        assert decibel_gain(factor) == pytest.approx(20 * math.log10(factor))

    @pytest.mark.parametrize("factor", [0.0, -1.0, -1e9])
    def test_non_positive_is_zero(self, factor):
        assert decibel_gain(factor) == 0.0

    def test_unity_is_zero(self):
        assert decibel_gain(1.0) == 0.0


def test_amplification_factor_is_product():
    assert amplification_factor(17.1875, 1.3) == pytest.approx(22.34375)


def test_output_pressure_is_linear():
    assert output_pressure(2.0, 22.0) == pytest.approx(44.0)
    assert output_pressure(0.0, 22.0) == 0.0


class TestComputeMetrics:
    def test_reference_calibration(self):
        m = compute_metrics(ScaleParameters())

        assert m.area_ratio == pytest.approx(17.1875)
        assert m.lever_ratio == pytest.approx(1.3)
        assert m.amplification_factor == pytest.approx(22.34375)
        assert m.decibel_gain == pytest.approx(26.98, abs=0.01)
        assert m.area_ratio_decibel_gain == pytest.approx(24.70, abs=0.01)
        assert m.lever_ratio_decibel_gain == pytest.approx(2.28, abs=0.01)
        assert m.input_pressure == 1.0
        assert m.output_pressure == pytest.approx(22.34375)

    def test_resolved_magnitudes(self):
        m = compute_metrics(ScaleParameters(eardrum=2.0, oval_window=0.5))
        assert m.eardrum_area == pytest.approx(110.0)
        assert m.oval_window_area == pytest.approx(1.6)
        assert m.area_ratio == pytest.approx(110.0 / 1.6)

    def test_identities_hold_across_grid(self):
        for m in MULTIPLIERS:
            for s in MULTIPLIERS:
                for ear in MULTIPLIERS:
                    result = compute_metrics(ScaleParameters(malleus=m, stapes=s, eardrum=ear),
                                             input_pressure=0.7)
                    assert result.amplification_factor == result.area_ratio * result.lever_ratio
                    assert result.output_pressure == 0.7 * result.amplification_factor
                    assert result.lever_ratio >= 1.0

    def test_component_gains_sum_to_total(self):
        m = compute_metrics(ScaleParameters(malleus=1.4, incus=0.8, eardrum=1.2))
        assert m.area_ratio_decibel_gain + m.lever_ratio_decibel_gain == pytest.approx(m.decibel_gain)

    def test_missing_optionals_default_to_one(self):
        explicit = compute_metrics(ScaleParameters(eardrum=1.0, oval_window=1.0))
        implicit = compute_metrics(ScaleParameters())
        assert explicit == implicit

    @pytest.mark.parametrize("bad", [0.0, -1.0, float('nan'), float('inf')])
    def test_invalid_multipliers_never_produce_nan(self, bad):
        params = ScaleParameters(malleus=bad, incus=bad, stapes=bad, eardrum=bad, oval_window=bad)
        m = compute_metrics(params)
        for value in m.as_dict().values():
            assert math.isfinite(value)

    @pytest.mark.parametrize("values", [
        {'oval_window': 1e-320},
        {'eardrum': 1e308, 'oval_window': 1e308},
        {'eardrum': 1e308},
        {'stapes': 5e-324},
        {'malleus': 1e308, 'incus': 1e308, 'stapes': 1e-300, 'eardrum': 1e300, 'oval_window': 1e-300},
    ])
    def test_extreme_positive_multipliers_stay_finite(self, values):
        m = compute_metrics(ScaleParameters(**values), input_pressure=2.0)
        for name, value in m.as_dict().items():
            assert math.isfinite(value), name
        assert m.lever_ratio >= 1.0
        assert m.amplification_factor == m.area_ratio * m.lever_ratio

    def test_invalid_multiplier_uses_range_minimum(self):
        assert compute_metrics(ScaleParameters(stapes=0.0)) == compute_metrics(ScaleParameters(stapes=0.5))

    def test_out_of_range_positive_is_not_clamped(self):
        m = compute_metrics(ScaleParameters(eardrum=3.0))
        assert m.eardrum_area == pytest.approx(165.0)

    def test_idempotent(self):
        params = ScaleParameters(malleus=1.37, incus=0.61, stapes=1.9, eardrum=0.8)
        assert compute_metrics(params, 0.3) == compute_metrics(params, 0.3)

    def test_custom_constants(self):
        constants = AnatomicalConstants(eardrum_area=60.0)
        m = compute_metrics(ScaleParameters(), constants=constants)
        assert m.area_ratio == pytest.approx(60.0 / 3.2)

    def test_gain_grows_with_eardrum(self):
        gains = [compute_metrics(ScaleParameters(eardrum=e)).decibel_gain for e in MULTIPLIERS]
        assert np.all(np.diff(gains) > 0)
