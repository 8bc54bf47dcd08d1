"""
Formant - resonance frequencies from the roots of the LPC polynomial.

Documentation sources:
- Markel & Gray (1976): root-to-formant conversion
- Rabiner & Schafer (1978), §8.9: formant estimation from LPC poles

Key facts:
- A(z) = 1 + a[1] z^-1 + ... + a[p] z^-p. Multiplying by z^p gives the
  monic polynomial z^p + a[1] z^{p-1} + ... + a[p], so the LPC vector
  a[0..p] is handed to the root finder unchanged, read highest degree first.
  Its roots are the poles of H(z) = 1/A(z).
- A pole z = r × e^{iθ} resonates at θ × fs / 2π Hz.
- Real coefficients give conjugate pole pairs; only the upper half-plane
  carries new information.
- Poles with |z| > 1 are unstable; the autocorrelation method never
  produces them except through rounding.
- Frequencies within 10 Hz of DC or Nyquist are discarded.
"""

import logging
import warnings
from typing import Optional

import numpy as np

from .errors import RootFindingError
from .roots import RootFinder, companion_roots

logger = logging.getLogger(__name__)

ROOT_TOLERANCE = 1e-3
ROOT_MAX_ITERATIONS = 15

# Margin, in Hz, kept away from DC and from Nyquist
EDGE_MARGIN_HZ = 10.0

# Poles further than this from the origin are dropped
MAX_POLE_RADIUS = 1.01


def _angles_to_hz(roots: np.ndarray, sample_rate: float) -> np.ndarray:
    """
    Convert root angles to frequencies in Hz.

    θ in [0, π] maps to θ × fs / 2π; θ in [-π, 0) is wrapped by 2π first,
    so every root maps into [0, fs).
    """
    theta = np.angle(roots)
    theta = np.where(theta < 0.0, theta + 2.0 * np.pi, theta)
    return theta * sample_rate / (2.0 * np.pi)


def _find_roots(coeffs, root_finder: RootFinder, tolerance: float, max_iterations: int) -> np.ndarray:
    coeffs = np.asarray(coeffs, dtype=np.float64)
    if coeffs.size < 2:
        return np.zeros(0, dtype=np.complex128)
    return np.asarray(root_finder(coeffs, tolerance, max_iterations), dtype=np.complex128)


def peak_detection(
    coeffs,
    sample_rate: float,
    root_finder: RootFinder = companion_roots,
    tolerance: float = ROOT_TOLERANCE,
    max_iterations: int = ROOT_MAX_ITERATIONS
) -> np.ndarray:
    """
    Frequencies of every root of the LPC polynomial, unfiltered.

    Conjugate roots appear twice (once above and once below Nyquist), and
    real roots map to 0 Hz or to Nyquist.

    Args:
        coeffs: LPC coefficients a[0..p]
        sample_rate: Sample rate in Hz
        root_finder: Root-finding capability
        tolerance: Root finder error tolerance
        max_iterations: Root finder iteration cap

    Returns:
        Array of p frequencies in [0, sample_rate), in root order

    Raises:
        RootFindingError: If the root finder fails
    """
    roots = _find_roots(coeffs, root_finder, tolerance, max_iterations)
    return _angles_to_hz(roots, sample_rate)


def formant_detection(
    coeffs,
    sample_rate: float,
    root_finder: RootFinder = companion_roots,
    tolerance: float = ROOT_TOLERANCE,
    max_iterations: int = ROOT_MAX_ITERATIONS,
    max_pole_radius: Optional[float] = MAX_POLE_RADIUS,
    upper_half_plane: bool = True
) -> np.ndarray:
    """
    Extract formant frequencies from LPC coefficients.

    Algorithm steps:
    1. Find the roots of the LPC polynomial
    2. Drop unstable roots (|z| > max_pole_radius) and, if upper_half_plane,
       roots with negative imaginary part
    3. Convert root angles to Hz (negative angles wrapped by 2π)
    4. Keep 10 < f < fs/2 - 10
    5. Sort ascending

    A root-finding failure is not fatal: a RuntimeWarning is issued and an
    empty array is returned.

    Args:
        coeffs: LPC coefficients a[0..p] (a[0] = 1)
        sample_rate: Sample rate in Hz
        root_finder: Root-finding capability
        tolerance: Root finder error tolerance
        max_iterations: Root finder iteration cap
        max_pole_radius: Largest pole modulus kept (None = keep all)
        upper_half_plane: Keep only roots with non-negative imaginary part

    Returns:
        Ascending array of formant frequencies in Hz (possibly empty)
    """
    try:
        roots = _find_roots(coeffs, root_finder, tolerance, max_iterations)
    except RootFindingError as e:
        warnings.warn(f"Root finding failed, no formants reported: {e}", RuntimeWarning)
        return np.zeros(0)

    if max_pole_radius is not None:
        roots = roots[np.abs(roots) <= max_pole_radius]
    if upper_half_plane:
        roots = roots[roots.imag >= 0.0]

    freqs = _angles_to_hz(roots, sample_rate)

    low_cutoff = EDGE_MARGIN_HZ
    high_cutoff = sample_rate / 2.0 - EDGE_MARGIN_HZ
    formants = np.sort(freqs[(freqs > low_cutoff) & (freqs < high_cutoff)])

    logger.debug("%d roots -> %d formants", len(roots), len(formants))
    return formants


def pad_formants(formants, slots: int = 4) -> np.ndarray:
    """
    Fit formants into a fixed number of slots.

    Missing formants are reported as 0.0; extra formants are dropped.

    Args:
        formants: Ascending formant frequencies
        slots: Number of slots (F1 .. F<slots>)

    Returns:
        Array of exactly `slots` values
    """
    formants = np.asarray(formants, dtype=np.float64)
    result = np.zeros(slots)
    n = min(slots, len(formants))
    result[:n] = formants[:n]
    return result
