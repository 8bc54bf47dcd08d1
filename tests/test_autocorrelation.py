"""Tests for the autocorrelation estimators."""

import numpy as np
import pytest

from ezformant.autocorrelation import autocorrelate, autocorrelate_fft
from ezformant.errors import InvalidInputError


class TestAutocorrelate:
    """Direct time-domain estimator."""

    def test_known_sequence(self, x7):
        r = autocorrelate(x7, 6)
        assert r.tolist() == [36.0, 11.0, -16.0, -7.0, 13.0, 11.0, 2.0]

    def test_length(self, x7):
        assert len(autocorrelate(x7, 3)) == 4

    def test_lags_beyond_signal_are_zero(self):
        r = autocorrelate([1.0, 2.0, 3.0], 5)
        np.testing.assert_array_equal(r, [14.0, 8.0, 3.0, 0.0, 0.0, 0.0])

    @pytest.mark.parametrize("seed", range(5))
    def test_zero_lag_bounds_every_lag(self, seed):
        rng = np.random.default_rng(seed)
        x = rng.standard_normal(256)
        r = autocorrelate(x, 40)
        assert r[0] >= 0.0
        assert np.all(np.abs(r[1:]) <= r[0])

    def test_silent_frame_has_zero_energy(self):
        assert autocorrelate(np.zeros(16), 4)[0] == 0.0

    def test_empty_signal_raises(self):
        with pytest.raises(InvalidInputError):
            autocorrelate([], 2)

    def test_negative_lag_raises(self, x7):
        with pytest.raises(InvalidInputError):
            autocorrelate(x7, -1)


class TestAutocorrelateFft:
    """Power-spectrum estimator agrees with the direct sum."""

    def test_known_sequence(self, x7):
        np.testing.assert_allclose(
            autocorrelate_fft(x7, 6),
            [36.0, 11.0, -16.0, -7.0, 13.0, 11.0, 2.0],
            atol=1e-9
        )

    @pytest.mark.parametrize("n,max_lag", [(1000, 14), (513, 30), (8, 7), (5, 9)])
    def test_matches_direct(self, n, max_lag):
        rng = np.random.default_rng(n)
        x = rng.standard_normal(n)
        np.testing.assert_allclose(
            autocorrelate_fft(x, max_lag),
            autocorrelate(x, max_lag),
            atol=1e-9 * n
        )

    def test_empty_signal_raises(self):
        with pytest.raises(InvalidInputError):
            autocorrelate_fft([], 2)
