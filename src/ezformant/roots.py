"""
Roots - default polynomial root-finding capability.

The formant extractor only needs *some* callable with the signature

    root_finder(coefficients, tolerance, max_iterations) -> complex ndarray

where coefficients are real and ordered highest degree first with a leading
1.0. Any simultaneous-iteration method (Aberth-Ehrlich, Durand-Kerner) fits
that contract and can be injected instead of companion_roots().

Reference: Numerical Recipes Ch. 9.5 (companion matrix, root polishing)

The default:
1. Build the companion matrix of z^p + c1 z^{p-1} + ... + cp
2. Take its eigenvalues (LAPACK via numpy)
3. Polish every root with at most max_iterations Newton-Raphson steps,
   stopping when |step| < tolerance × max(1, |z|)
"""

import logging
from typing import Callable, Tuple

import numpy as np

from .errors import RootFindingError

logger = logging.getLogger(__name__)

RootFinder = Callable[[np.ndarray, float, int], np.ndarray]


def _eval_polynomial(c: np.ndarray, z: complex) -> Tuple[complex, complex]:
    """
    Evaluate a monic polynomial and its derivative at z with Horner's method.

    The polynomial is P(z) = z^p + c[1] z^{p-1} + ... + c[p], with c[0] = 1.

    Returns:
        (P(z), P'(z))
    """
    p_val = complex(c[0])
    dp_val = 0j
    for coeff in c[1:]:
        dp_val = p_val + z * dp_val
        p_val = p_val * z + coeff
    return p_val, dp_val


def _polish_root(c: np.ndarray, z: complex, tolerance: float, max_iterations: int) -> complex:
    """Refine one root estimate with bounded Newton-Raphson iteration."""
    for _ in range(max_iterations):
        p_val, dp_val = _eval_polynomial(c, z)
        if abs(dp_val) < 1e-30:
            break

        delta = p_val / dp_val
        # Keep the eigenvalue estimate if Newton would jump away from it
        if abs(delta) > 0.5 * max(1.0, abs(z)):
            break
        z = z - delta

        if abs(delta) < tolerance * max(1.0, abs(z)):
            break
    return z


def companion_matrix(c: np.ndarray) -> np.ndarray:
    """
    Companion matrix of a monic polynomial (highest degree first).

    First row holds -c[1] .. -c[p], the subdiagonal holds ones.
    """
    order = len(c) - 1
    companion = np.zeros((order, order))
    companion[0, :] = -np.asarray(c[1:], dtype=np.float64)
    companion[np.arange(1, order), np.arange(order - 1)] = 1.0
    return companion


def companion_roots(coefficients, tolerance: float = 1e-3, max_iterations: int = 15) -> np.ndarray:
    """
    Find all complex roots of a real polynomial.

    Args:
        coefficients: Real coefficients, highest degree first. Normalized
            to monic form by the leading coefficient.
        tolerance: Relative Newton step size at which polishing stops
        max_iterations: Polishing iteration cap per root

    Returns:
        Complex array of len(coefficients) - 1 roots

    Raises:
        RootFindingError: If the leading coefficient is zero, the eigenvalue
            solver does not converge, or the roots are not finite
    """
    c = np.asarray(coefficients, dtype=np.float64)
    if c.ndim != 1:
        raise RootFindingError("Polynomial coefficients must be one-dimensional")
    if not np.all(np.isfinite(c)):
        raise RootFindingError("Polynomial coefficients must be finite")
    if len(c) < 2:
        return np.zeros(0, dtype=np.complex128)
    if c[0] == 0.0:
        raise RootFindingError("Leading coefficient is zero")
    c = c / c[0]

    try:
        roots = np.linalg.eigvals(companion_matrix(c)).astype(np.complex128)
    except np.linalg.LinAlgError as e:
        raise RootFindingError(f"Eigenvalue solver did not converge: {e}") from e

    for i in range(len(roots)):
        roots[i] = _polish_root(c, roots[i], tolerance, max_iterations)

    if not np.all(np.isfinite(roots)):
        raise RootFindingError("Root finder produced non-finite roots")

    logger.debug("Found %d roots of degree-%d polynomial", len(roots), len(c) - 1)
    return roots
