"""
LPC - linear-prediction coefficients via the Levinson-Durbin recursion.

Documentation sources:
- Makhoul (1975): "Linear prediction: A tutorial review", Eq. 38a-38e
- Rabiner & Schafer (1978): "Digital Processing of Speech Signals", §8.3.2

Key facts:
- A(z) = 1 + a[1] z^-1 + ... + a[p] z^-p, with a[0] = 1 by convention
- The model is the all-pole filter H(z) = 1 / A(z)
- Reflection coefficient at order i:
      λ_i = -(Σ_{j=0}^{i-1} a[j] × r[i-j]) / E_{i-1}
- Order update (symmetric):
      a_i[j] = a_{i-1}[j] + λ_i × a_{i-1}[i-j],   j = 0 .. i
- Error update: E_i = E_{i-1} × (1 - λ_i²), with E_0 = r[0]

For a valid autocorrelation sequence |λ_i| ≤ 1, so E never increases. When
rounding drives E to (or below) energy_floor × r[0] it is floored there so
the next division stays finite; strict=True raises UnstableRecursionError
instead. The floor scales with r[0], so the coefficients do not depend on
the level of the frame.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .autocorrelation import autocorrelate
from .errors import DegenerateSignalError, InvalidInputError, UnstableRecursionError

logger = logging.getLogger(__name__)

# r[0] at or below this is treated as a silent frame
DEGENERATE_ENERGY = 1e-30

# Residual energy floor, relative to r[0]
DEFAULT_ENERGY_FLOOR = 1e-12


def _check_autocorrelation(order: int, r) -> np.ndarray:
    if order < 0:
        raise InvalidInputError(f"LPC order must be non-negative, got {order}")
    r = np.asarray(r, dtype=np.float64)
    if r.ndim != 1 or len(r) < order + 1:
        raise InvalidInputError(
            f"Need at least {order + 1} autocorrelation values for order {order}, got {r.size}"
        )
    if not np.all(np.isfinite(r[:order + 1])):
        raise InvalidInputError("Autocorrelation contains non-finite values")
    if not r[0] > DEGENERATE_ENERGY:
        raise DegenerateSignalError(f"Frame energy r[0] = {r[0]!r} is too small for LPC analysis")
    return r


def levinson_with_reflections(
    order: int,
    r,
    energy_floor: float = DEFAULT_ENERGY_FLOOR,
    strict: bool = False
) -> Tuple[np.ndarray, float, np.ndarray]:
    """
    Solve for LPC coefficients, also returning the reflection coefficients.

    Args:
        order: LPC order p
        r: Autocorrelation r[0..p] (extra lags are ignored)
        energy_floor: Smallest residual energy kept alive mid-recursion, as a
            fraction of r[0]
        strict: Raise UnstableRecursionError instead of flooring

    Returns:
        (a, e, k) - coefficients a[0..p], final residual energy, and
        reflection coefficients k[0..p-1] for orders 1..p

    Raises:
        DegenerateSignalError: If r[0] is (numerically) zero
        UnstableRecursionError: If strict and the residual energy collapses
        InvalidInputError: If r is too short or not finite
    """
    r = _check_autocorrelation(order, r)

    a = np.zeros(order + 1)
    a[0] = 1.0
    k = np.zeros(order)
    e = float(r[0])
    floor = energy_floor * e

    for i in range(1, order + 1):
        # r[i:0:-1] is r[i], r[i-1], ..., r[1]
        lam = -np.dot(a[:i], r[i:0:-1]) / e

        # Both sides of the palindrome are computed from a snapshot: the
        # reversed slice is copied before anything is written back.
        a[:i + 1] = a[:i + 1] + lam * a[i::-1].copy()

        k[i - 1] = lam
        e *= 1.0 - lam * lam

        if e <= floor:
            if strict:
                raise UnstableRecursionError(
                    f"Residual energy collapsed to {e!r} at order {i} (|λ| = {abs(lam):.6g})"
                )
            logger.debug("Residual energy %g floored to %g at order %d", e, floor, i)
            e = floor

    return a, e, k


def levinson(
    order: int,
    r,
    energy_floor: float = DEFAULT_ENERGY_FLOOR,
    strict: bool = False
) -> Tuple[np.ndarray, float]:
    """
    Levinson-Durbin recursion (iterative, in place).

    Args:
        order: LPC order p
        r: Autocorrelation r[0..p]
        energy_floor: Smallest residual energy kept alive mid-recursion, as a
            fraction of r[0]
        strict: Raise UnstableRecursionError instead of flooring

    Returns:
        (a, e) - coefficients a[0..p] with a[0] = 1, and the final
        prediction error energy
    """
    a, e, _ = levinson_with_reflections(order, r, energy_floor, strict)
    return a, e


def levinson_recursive(order: int, r) -> Tuple[np.ndarray, float]:
    """
    Order-recursive reference form of the Levinson-Durbin recursion.

    Builds a fresh coefficient vector per order:
        u = [a_{p-1}, 0],  a_p = u + λ × reversed(u)

    Mathematically identical to levinson(); slower, and does not floor the
    residual energy. Kept for cross-checking.
    """
    r = _check_autocorrelation(order, r)

    if order == 0:
        return np.array([1.0]), float(r[0])

    prev, prev_e = levinson_recursive(order - 1, r)
    lam = -np.dot(prev, r[order:0:-1]) / prev_e
    u = np.append(prev, 0.0)
    return u + lam * u[::-1], prev_e * (1.0 - lam * lam)


@dataclass
class LpcModel:
    """
    All-pole model of one frame.

    Attributes:
        coefficients: a[0..p] with a[0] = 1 (denominator of H(z) = 1/A(z))
        residual_energy: Final prediction error energy
        sample_rate: Sample rate the model was fitted at, in Hz
        reflection_coefficients: λ for orders 1..p
    """
    coefficients: np.ndarray
    residual_energy: float
    sample_rate: float
    reflection_coefficients: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @property
    def order(self) -> int:
        """LPC order p."""
        return len(self.coefficients) - 1

    @property
    def gain(self) -> float:
        """Model gain, sqrt of the residual energy."""
        return float(np.sqrt(self.residual_energy))

    def frequency_response(self, num_points: int = 1024) -> "FrequencyResponse":
        """Magnitude response of 1/A(z) from 0 to just under Nyquist."""
        from .response import compute_frequency_response
        return compute_frequency_response(self.coefficients, self.sample_rate, num_points)

    def formants(self, **kwargs) -> np.ndarray:
        """Formant frequencies in Hz (see formant.formant_detection for options)."""
        from .formant import formant_detection
        return formant_detection(self.coefficients, self.sample_rate, **kwargs)


def lpc_from_autocorrelation(
    r,
    order: int,
    sample_rate: float,
    energy_floor: float = DEFAULT_ENERGY_FLOOR,
    strict: bool = False
) -> LpcModel:
    """Fit an LpcModel from a precomputed autocorrelation vector."""
    a, e, k = levinson_with_reflections(order, r, energy_floor, strict)
    return LpcModel(a, e, float(sample_rate), k)


def lpc_from_signal(
    signal,
    order: int,
    sample_rate: float,
    energy_floor: float = DEFAULT_ENERGY_FLOOR,
    strict: bool = False
) -> LpcModel:
    """
    Fit an LpcModel to an already conditioned frame.

    Args:
        signal: Conditioned samples
        order: LPC order p (should be well below the frame length)
        sample_rate: Sample rate in Hz
        energy_floor: Residual energy floor, relative to r[0]
        strict: Raise instead of flooring

    Returns:
        LpcModel
    """
    r = autocorrelate(signal, order)
    return lpc_from_autocorrelation(r, order, sample_rate, energy_floor, strict)


def residual_energies(r, max_order: int, energy_floor: float = DEFAULT_ENERGY_FLOOR) -> List[float]:
    """Residual energy for every order 0..max_order (non-increasing)."""
    r = _check_autocorrelation(max_order, r)
    energies: List[float] = [float(r[0])]
    for order in range(1, max_order + 1):
        _, e = levinson(order, r, energy_floor)
        energies.append(e)
    return energies
