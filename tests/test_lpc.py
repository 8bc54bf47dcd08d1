"""Tests for the Levinson-Durbin solver and LpcModel."""

import numpy as np
import pytest
from scipy.linalg import solve_toeplitz

from ezformant.autocorrelation import autocorrelate
from ezformant.errors import DegenerateSignalError, InvalidInputError, UnstableRecursionError
from ezformant.lpc import (
    LpcModel,
    levinson,
    levinson_recursive,
    levinson_with_reflections,
    lpc_from_signal,
    residual_energies,
)


EXPECTED_ORDER_3 = [1.0, -0.69190537, 0.76150628, -0.34575153]


class TestLevinson:
    """Iterative Levinson-Durbin recursion."""

    def test_known_coefficients(self, x7):
        r = autocorrelate(x7, 3)
        a, _ = levinson(3, r)
        np.testing.assert_allclose(a, EXPECTED_ORDER_3, atol=1e-6)

    def test_leading_coefficient_is_one(self, x7):
        a, _ = levinson(5, autocorrelate(x7, 6))
        assert a[0] == 1.0
        assert len(a) == 6

    def test_order_zero(self, x7):
        a, e = levinson(0, autocorrelate(x7, 0))
        np.testing.assert_array_equal(a, [1.0])
        assert e == 36.0

    def test_order_one(self, x7):
        a, e = levinson(1, autocorrelate(x7, 1))
        assert a[1] == pytest.approx(-11.0 / 36.0)
        assert e == pytest.approx(36.0 - 11.0 ** 2 / 36.0)

    @pytest.mark.parametrize("seed", range(4))
    def test_matches_toeplitz_solve(self, seed):
        rng = np.random.default_rng(seed)
        x = rng.standard_normal(400)
        order = 12
        r = autocorrelate(x, order)
        a, _ = levinson(order, r)
        expected = solve_toeplitz(r[:order], -r[1:order + 1])
        np.testing.assert_allclose(a[1:], expected, rtol=1e-8, atol=1e-10)

    @pytest.mark.parametrize("seed", range(4))
    def test_residual_energy_non_increasing(self, seed):
        rng = np.random.default_rng(100 + seed)
        x = np.cumsum(rng.standard_normal(300))
        energies = residual_energies(autocorrelate(x, 16), 16)
        assert len(energies) == 17
        assert all(later <= earlier for earlier, later in zip(energies, energies[1:]))
        assert energies[-1] > 0.0

    def test_reflection_coefficients_bounded(self):
        rng = np.random.default_rng(7)
        x = rng.standard_normal(200)
        _, _, k = levinson_with_reflections(10, autocorrelate(x, 10))
        assert len(k) == 10
        assert np.all(np.abs(k) <= 1.0)

    def test_last_coefficient_is_last_reflection(self, x7):
        a, _, k = levinson_with_reflections(3, autocorrelate(x7, 3))
        assert a[3] == k[2]

    def test_extra_lags_are_ignored(self, x7):
        a_short, e_short = levinson(3, autocorrelate(x7, 3))
        a_long, e_long = levinson(3, autocorrelate(x7, 6))
        np.testing.assert_array_equal(a_short, a_long)
        assert e_short == e_long


class TestLevinsonEdgeCases:
    """Degenerate and unstable input."""

    def test_silent_frame_raises(self):
        with pytest.raises(DegenerateSignalError):
            levinson(4, np.zeros(5))

    def test_tiny_energy_raises(self):
        with pytest.raises(DegenerateSignalError):
            levinson(2, [1e-40, 0.0, 0.0])

    def test_short_autocorrelation_raises(self, x7):
        with pytest.raises(InvalidInputError):
            levinson(4, autocorrelate(x7, 2))

    def test_non_finite_raises(self):
        with pytest.raises(InvalidInputError):
            levinson(2, [1.0, np.nan, 0.0])

    def test_perfectly_predictable_is_floored(self):
        # Constant signal: λ1 = -1 drives the error to zero
        a, e = levinson(2, [1.0, 1.0, 1.0])
        assert e == 1e-12
        np.testing.assert_allclose(a, [1.0, -1.0, 0.0])
        assert np.all(np.isfinite(a))

    def test_custom_floor(self):
        _, e = levinson(2, [1.0, 1.0, 1.0], energy_floor=1e-6)
        assert e == 1e-6

    def test_strict_raises(self):
        with pytest.raises(UnstableRecursionError):
            levinson(2, [1.0, 1.0, 1.0], strict=True)


class TestLevinsonRecursive:
    """Order-recursive reference form."""

    def test_known_coefficients(self, x7):
        a, _ = levinson_recursive(3, autocorrelate(x7, 3))
        np.testing.assert_allclose(a, EXPECTED_ORDER_3, atol=1e-6)

    @pytest.mark.parametrize("order", [1, 2, 5, 14])
    def test_matches_iterative(self, order):
        rng = np.random.default_rng(order)
        r = autocorrelate(rng.standard_normal(512), order)
        a_iter, e_iter = levinson(order, r)
        a_rec, e_rec = levinson_recursive(order, r)
        np.testing.assert_allclose(a_rec, a_iter, rtol=1e-10, atol=1e-12)
        assert e_rec == pytest.approx(e_iter, rel=1e-10)


class TestLpcModel:
    """LpcModel construction and delegation."""

    def test_from_signal(self, x7):
        model = lpc_from_signal(x7, 3, 8000.0)
        assert isinstance(model, LpcModel)
        assert model.order == 3
        assert model.sample_rate == 8000.0
        np.testing.assert_allclose(model.coefficients, EXPECTED_ORDER_3, atol=1e-6)
        assert len(model.reflection_coefficients) == 3
        assert model.gain == pytest.approx(np.sqrt(model.residual_energy))

    def test_frequency_response(self, x7):
        model = lpc_from_signal(x7, 3, 8000.0)
        response = model.frequency_response(64)
        assert response.n_points == 64
        assert response.sample_rate == 8000.0

    def test_formants(self, vowel_lpc):
        model = LpcModel(vowel_lpc, 1.0, 11025.0)
        assert len(model.formants()) == 5


class TestLevinsonLevel:
    """The recursion does not depend on the level of the frame."""

    @pytest.mark.parametrize("seed", range(4))
    def test_residual_energy_non_increasing_when_quiet(self, seed):
        rng = np.random.default_rng(100 + seed)
        x = np.cumsum(rng.standard_normal(300)) * 1e-9
        energies = residual_energies(autocorrelate(x, 16), 16)
        assert all(later <= earlier for earlier, later in zip(energies, energies[1:]))
        assert energies[1] < energies[0]

    @pytest.mark.parametrize("scale", [1e-6, 1e-9, 1e6])
    def test_coefficients_scale_invariant(self, scale):
        rng = np.random.default_rng(11)
        x = rng.standard_normal(400)
        a, e = levinson(12, autocorrelate(x, 12))
        a_scaled, e_scaled = levinson(12, autocorrelate(x * scale, 12))
        np.testing.assert_allclose(a_scaled, a, rtol=1e-8, atol=1e-10)
        assert e_scaled == pytest.approx(e * scale ** 2, rel=1e-8)

    def test_floor_is_relative_to_frame_energy(self):
        _, e = levinson(2, [1e-20, 1e-20, 1e-20])
        assert e == pytest.approx(1e-32)
        assert e < 1e-20

    def test_strict_raises_when_quiet(self):
        with pytest.raises(UnstableRecursionError):
            levinson(2, [1e-20, 1e-20, 1e-20], strict=True)
