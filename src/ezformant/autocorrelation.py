"""
Autocorrelation - biased autocorrelation estimate of a frame.

Definition:
    r[lag] = Σ_{i=0}^{N-1-lag} x[i] × x[i+lag],   lag = 0 .. max_lag

No normalization and no windowing is done here; the frame is expected to be
conditioned already. r[0] is the frame energy and bounds every other lag
(Cauchy-Schwarz): r[0] ≥ |r[lag]|.

Two estimators are provided:
- autocorrelate(): direct time-domain summation, O(N × max_lag)
- autocorrelate_fft(): power-spectrum method (Wiener-Khinchin), O(N log N)

Both give the same vector up to floating-point rounding.
"""

import numpy as np

from .errors import InvalidInputError


def _check_signal(signal, max_lag: int) -> np.ndarray:
    signal = np.asarray(signal, dtype=np.float64)
    if signal.ndim != 1:
        raise InvalidInputError("Only mono frames supported. Got shape: {}".format(signal.shape))
    if signal.size == 0:
        raise InvalidInputError("Cannot autocorrelate an empty signal")
    if max_lag < 0:
        raise InvalidInputError(f"max_lag must be non-negative, got {max_lag}")
    return signal


def autocorrelate(signal, max_lag: int) -> np.ndarray:
    """
    Compute the biased autocorrelation up to max_lag by direct summation.

    Lags at or beyond the signal length have no terms and are zero.

    Args:
        signal: 1D sequence of samples
        max_lag: Largest lag to compute (usually the LPC order)

    Returns:
        Array of max_lag + 1 values, r[0] .. r[max_lag]

    Raises:
        InvalidInputError: If the signal is empty or max_lag is negative
    """
    signal = _check_signal(signal, max_lag)
    n = len(signal)
    r = np.zeros(max_lag + 1)

    for lag in range(min(max_lag + 1, n)):
        r[lag] = np.dot(signal[:n - lag], signal[lag:])

    return r


def autocorrelate_fft(signal, max_lag: int) -> np.ndarray:
    """
    Compute the biased autocorrelation via the power spectrum.

    The signal is zero-padded to at least 2N - 1 points so the circular
    correlation computed by the DFT equals the linear one:

        r = IDFT(|DFT(x)|²)[0 .. max_lag]

    Args:
        signal: 1D sequence of samples
        max_lag: Largest lag to compute

    Returns:
        Array of max_lag + 1 values, r[0] .. r[max_lag]

    Raises:
        InvalidInputError: If the signal is empty or max_lag is negative
    """
    from scipy import fft

    signal = _check_signal(signal, max_lag)
    n = len(signal)

    n_fft = fft.next_fast_len(2 * n - 1)
    spectrum = fft.fft(signal.astype(np.complex128), n_fft)
    power = spectrum.real ** 2 + spectrum.imag ** 2
    full = fft.ifft(power).real

    r = np.zeros(max_lag + 1)
    n_valid = min(max_lag + 1, n)
    r[:n_valid] = full[:n_valid]
    return r
