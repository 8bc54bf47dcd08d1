"""Tests for frame conditioning: mean removal, Hamming window, pre-emphasis."""

import numpy as np
import pytest

from ezformant.conditioning import (
    apply_hamming_window,
    condition,
    downsample,
    pre_emphasis,
    subtract_mean,
)
from ezformant.errors import InvalidInputError


def _ascending_pre_emphasis(x, alpha):
    """The wrong loop order: each step sees an already emphasized sample."""
    x = list(x)
    for i in range(1, len(x)):
        x[i] -= alpha * x[i - 1]
    x[0] *= 1 - alpha
    return x


class TestSubtractMean:
    """Mean removal."""

    def test_removes_mean(self):
        frame = np.array([1.0, 2.0, 3.0])
        subtract_mean(frame)
        np.testing.assert_allclose(frame, [-1.0, 0.0, 1.0])

    def test_in_place(self):
        frame = np.array([4.0, 6.0])
        result = subtract_mean(frame)
        assert result is frame

    def test_empty_frame_raises(self):
        with pytest.raises(InvalidInputError):
            subtract_mean(np.zeros(0))


class TestHammingWindow:
    """Hamming window weights."""

    def test_five_point_weights(self):
        frame = np.ones(5)
        apply_hamming_window(frame)
        np.testing.assert_allclose(frame, [0.08, 0.54, 1.0, 0.54, 0.08], atol=1e-12)

    def test_single_sample_is_untouched(self):
        frame = np.array([3.0])
        apply_hamming_window(frame)
        assert frame[0] == 3.0

    def test_matches_formula(self):
        n = 17
        frame = np.ones(n)
        apply_hamming_window(frame)
        i = np.arange(n)
        np.testing.assert_allclose(frame, 0.54 - 0.46 * np.cos(2 * np.pi * i / (n - 1)))


class TestPreEmphasis:
    """Pre-emphasis must difference against unmodified samples."""

    def test_three_samples(self):
        frame = np.array([1.0, 2.0, 3.0])
        pre_emphasis(frame, 0.5)
        np.testing.assert_allclose(frame, [0.5, 1.5, 2.0])

    def test_differs_from_ascending_loop(self):
        frame = np.array([1.0, 2.0, 3.0])
        pre_emphasis(frame, 0.5)
        wrong = _ascending_pre_emphasis([1.0, 2.0, 3.0], 0.5)
        assert wrong == [0.5, 1.5, 2.25]
        assert not np.allclose(frame, wrong)

    def test_matches_descending_loop(self):
        rng = np.random.default_rng(3)
        x = rng.standard_normal(50)
        expected = x.copy()
        for i in range(len(expected) - 1, 0, -1):
            expected[i] -= 0.97 * expected[i - 1]
        expected[0] *= 1 - 0.97

        pre_emphasis(x, 0.97)
        np.testing.assert_allclose(x, expected)

    def test_alpha_zero_is_identity(self):
        frame = np.array([1.0, -2.0, 5.0])
        pre_emphasis(frame, 0.0)
        np.testing.assert_allclose(frame, [1.0, -2.0, 5.0])


class TestCondition:
    """The full conditioning chain."""

    def test_hand_computed_three_samples(self):
        # mean -> [-1, 0, 1]; window [0.08, 1, 0.08] -> [-0.08, 0, 0.08]
        # pre-emphasis (alpha 0.5) -> [-0.04, 0.04, 0.08]
        frame = np.array([1.0, 2.0, 3.0])
        condition(frame, 0.5)
        np.testing.assert_allclose(frame, [-0.04, 0.04, 0.08], atol=1e-12)

    def test_ascending_variant_rejected(self):
        frame = np.array([1.0, 2.0, 3.0])
        condition(frame, 0.5)
        assert frame[2] != pytest.approx(0.06)

    def test_single_sample(self):
        frame = np.array([5.0])
        condition(frame, 0.97)
        assert frame[0] == 0.0

    def test_empty_frame_raises(self):
        with pytest.raises(InvalidInputError):
            condition(np.zeros(0), 0.97)

    def test_list_input_raises(self):
        with pytest.raises(InvalidInputError):
            condition([1.0, 2.0, 3.0], 0.97)

    def test_integer_array_raises(self):
        with pytest.raises(InvalidInputError):
            condition(np.array([1, 2, 3]), 0.97)

    def test_no_nan_for_constant_frame(self):
        frame = np.full(32, 7.0)
        condition(frame, 0.97)
        assert np.all(np.isfinite(frame))
        np.testing.assert_allclose(frame, 0.0, atol=1e-12)


class TestDownsample:
    """Decimation by an integer factor."""

    def test_every_third_sample(self):
        np.testing.assert_array_equal(downsample(np.arange(10.0), 3), [0.0, 3.0, 6.0, 9.0])

    def test_factor_one_copies(self):
        x = np.arange(5.0)
        y = downsample(x, 1)
        np.testing.assert_array_equal(x, y)
        assert y is not x

    @pytest.mark.parametrize("factor", [0, -2, 1.5])
    def test_invalid_factor_raises(self, factor):
        with pytest.raises(InvalidInputError):
            downsample(np.arange(10.0), factor)
