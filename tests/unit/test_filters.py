"""Tests for the cascaded RC band-pass filter and its primitives."""

import math

import pytest
import torch
import torch.nn as nn

from ephysforge.filters import (
    FILTER_MODE_CUTOFFS,
    BandPassFilter,
    FilterMode,
    high_pass,
    low_pass,
)
from ephysforge.filters.functional import smoothing_factor

DT = 0.0005


def _reference_bandpass(samples, low, high, dt=DT):
    """Scalar recurrence built from the functional primitives."""
    s_hp, s_lp, out = 0.0, 0.0, []
    for x in samples:
        s_hp = low_pass(x, s_hp, dt, low)
        s_lp = low_pass(x - s_hp, s_lp, dt, high)
        out.append(s_lp)
    return out


class TestFunctional:
    """Single-pole primitives."""

    def test_smoothing_factor(self):
        rc = 1.0 / (2.0 * math.pi * 300.0)
        assert smoothing_factor(DT, 300.0) == pytest.approx(DT / (rc + DT))

    def test_low_pass_moves_towards_input(self):
        alpha = smoothing_factor(DT, 300.0)
        assert low_pass(1.0, 0.0, DT, 300.0) == pytest.approx(alpha)

    def test_high_pass_is_input_minus_low_pass(self):
        y = high_pass(1.0, 0.0, DT, 300.0)
        assert y == pytest.approx(1.0 - low_pass(1.0, 0.0, DT, 300.0))

    @pytest.mark.parametrize("cutoff", [0, 0.0, None])
    def test_degenerate_cutoff_passes_through(self, cutoff):
        assert low_pass(0.7, 0.2, DT, cutoff) == 0.7
        assert high_pass(0.7, 0.2, DT, cutoff) == 0.7

    def test_tensor_input(self):
        x = torch.tensor([1.0, -2.0], dtype=torch.float64)
        prev = torch.zeros(2, dtype=torch.float64)
        out = low_pass(x, prev, DT, 300.0)
        assert torch.allclose(out, x * smoothing_factor(DT, 300.0))


class TestBandPassFilter:
    """Stateful multi-channel band-pass."""

    def test_is_nn_module(self):
        assert isinstance(BandPassFilter(), nn.Module)

    def test_zero_input_after_reset_gives_zero(self):
        bp = BandPassFilter(1.0, 300.0, DT)
        for _ in range(10):
            bp.process(0.5)
        bp.reset()
        assert bp.process(0.0) == 0.0

    def test_scalar_in_scalar_out(self):
        bp = BandPassFilter(300.0, 6000.0, DT)
        assert isinstance(bp.process(0.1), float)

    def test_sequence_in_list_out(self):
        bp = BandPassFilter(300.0, 6000.0, DT, num_channels=4)
        out = bp.process([0.1, 0.2, 0.3, 0.4])
        assert isinstance(out, list)
        assert len(out) == 4

    def test_matches_scalar_recurrence(self):
        gen = torch.Generator().manual_seed(3)
        samples = torch.randn(200, 4, generator=gen, dtype=torch.float64)
        bp = BandPassFilter(300.0, 6000.0, DT, num_channels=4)
        outputs = torch.stack([bp.forward(row) for row in samples])

        for c in range(4):
            expected = _reference_bandpass(samples[:, c].tolist(), 300.0, 6000.0)
            assert torch.allclose(outputs[:, c], torch.tensor(expected, dtype=torch.float64))

    def test_channels_are_independent(self):
        bp = BandPassFilter(300.0, 6000.0, DT, num_channels=2)
        for _ in range(20):
            out = bp.process([1.0, 0.0])
        assert out[1] == 0.0
        assert out[0] != 0.0

    def test_dc_input_converges_to_zero(self):
        bp = BandPassFilter(1.0, 300.0, DT)
        for _ in range(5000):
            out = bp.process(1.0)
        assert abs(out) < 1e-3

    def test_impulse_response_is_bounded(self):
        bp = BandPassFilter(300.0, 1e6, DT)
        first = bp.process(1.0)
        expected = (1.0 - smoothing_factor(DT, 300.0)) * smoothing_factor(DT, 1e6)
        assert first == pytest.approx(expected)
        for _ in range(200):
            assert abs(bp.process(0.0)) <= 1.0

    def test_cutoff_change_keeps_state(self):
        bp = BandPassFilter(1.0, 300.0, DT)
        for _ in range(5):
            bp.process(1.0)
        hp_state = bp.lp_high_state.clone()
        lp_state = bp.lp_low_state.clone()

        bp.set_cutoffs(300.0, 6000.0)
        assert torch.equal(bp.lp_high_state, hp_state)
        assert torch.equal(bp.lp_low_state, lp_state)
        assert math.isfinite(bp.process(1.0))

    def test_zero_cutoffs_pass_through(self):
        bp = BandPassFilter(0.0, 0.0, DT)
        assert bp.process(0.7) == pytest.approx(0.7)

    def test_missing_low_cutoff_is_pure_low_pass(self):
        bp = BandPassFilter(None, 300.0, DT)
        assert bp.process(1.0) == pytest.approx(smoothing_factor(DT, 300.0))

    def test_to_dict_and_from_config(self):
        bp = BandPassFilter(1.0, 300.0, DT, num_channels=4)
        clone = BandPassFilter.from_config(bp.to_dict())
        assert clone.to_dict() == bp.to_dict()


class TestFilterModes:
    """Mode to cutoff mapping."""

    def test_mode_cutoffs(self):
        assert FILTER_MODE_CUTOFFS[FilterMode.LFP] == (1.0, 300.0)
        assert FILTER_MODE_CUTOFFS[FilterMode.SPIKE] == (300.0, 6000.0)
        assert FilterMode.RAW not in FILTER_MODE_CUTOFFS

    @pytest.mark.parametrize("mode", ["lfp", "spike"])
    def test_apply_mode_resets_and_sets_cutoffs(self, mode):
        bp = BandPassFilter(5.0, 50.0, DT, num_channels=4)
        bp.process([1.0, 1.0, 1.0, 1.0])
        bp.apply_mode(mode)
        assert (bp.low_cutoff, bp.high_cutoff) == FILTER_MODE_CUTOFFS[FilterMode(mode)]
        assert torch.count_nonzero(bp.lp_high_state) == 0
        assert torch.count_nonzero(bp.lp_low_state) == 0

    def test_raw_mode_only_resets(self):
        bp = BandPassFilter(300.0, 6000.0, DT)
        bp.process(1.0)
        bp.apply_mode("raw")
        assert (bp.low_cutoff, bp.high_cutoff) == (300.0, 6000.0)
        assert bp.lp_low_state.item() == 0.0

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            BandPassFilter().apply_mode("gamma")
