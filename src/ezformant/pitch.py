"""
Pitch - YIN-style fundamental frequency estimate of a single frame.

Documentation sources:
- de Cheveigné & Kawahara (2002): "YIN, a fundamental frequency estimator
  for speech and music", steps 2-4

Key documented facts:
- Difference function (Eq. 6):
      d(τ) = Σ_i (x[i] - x[i+τ])²
- Cumulative mean normalized difference (Eq. 8):
      d'(τ) = d(τ) × τ / Σ_{j=1}^{τ} d(j)
- Absolute threshold (step 4): the first τ with d'(τ) < threshold is the
  period

This is a single-pass simplification of YIN: the first lag under the
threshold is returned as is, without searching for the local minimum that
follows it and without parabolic interpolation. Results are therefore
quantized to fs / τ for integer τ. Failing to find a lag is a normal outcome
and is reported with PITCH_NOT_FOUND, not an exception.
"""

from typing import Optional

import numpy as np

# Returned when no lag crosses the threshold
PITCH_NOT_FOUND = -1.0

YIN_THRESHOLD = 0.1


def difference_function(signal, t: int) -> float:
    """
    Squared difference between a signal and itself shifted by t samples.

    Only pairs with both indices inside the signal contribute.

    Args:
        signal: 1D samples
        t: Lag in samples (t ≥ 0)

    Returns:
        d(t)
    """
    x = np.asarray(signal, dtype=np.float64)
    n = len(x)
    if t >= n:
        return 0.0
    diff = x[:n - t] - x[t:]
    return float(np.dot(diff, diff))


def cmnd_first_peak(signal, t_max: int, threshold: float = YIN_THRESHOLD) -> Optional[int]:
    """
    First lag whose cumulative mean normalized difference is below threshold.

    Lags 1 .. t_max - 1 are searched in order. While the running sum of
    d(t) is still zero (silence), no lag can qualify.

    Args:
        signal: 1D samples
        t_max: Exclusive upper bound on the lag
        threshold: Absolute threshold on d'(t)

    Returns:
        The lag in samples, or None
    """
    d_sum = 0.0
    for t in range(1, t_max):
        d = difference_function(signal, t)
        d_sum += d
        if d_sum <= 0.0:
            continue

        if d * t / d_sum < threshold:
            return t

    return None


def pitch_detection_yin(signal, sample_rate: float, threshold: float = YIN_THRESHOLD) -> float:
    """
    Estimate the fundamental frequency of a frame.

    Lags up to half the frame length are considered, so the lowest pitch
    that can be found is 2 × sample_rate / N.

    Args:
        signal: 1D samples (raw or conditioned)
        sample_rate: Sample rate in Hz
        threshold: YIN absolute threshold

    Returns:
        Pitch in Hz, or PITCH_NOT_FOUND
    """
    signal = np.asarray(signal, dtype=np.float64)
    lag = cmnd_first_peak(signal, len(signal) // 2, threshold)
    if lag is None:
        return PITCH_NOT_FOUND
    return sample_rate / lag
