"""
Conditioning - mean removal, Hamming window and pre-emphasis of a frame.

Every step works in place on a float64 numpy array. The steps are applied
in this order by condition():

1. Mean removal:  x[i] -= mean(x)
2. Hamming window: x[i] *= 0.54 - 0.46 × cos(2π × i / (N - 1))   (N ≥ 2)
3. Pre-emphasis:  x[i] -= α × x[i-1] for i = N-1 down to 1, then x[0] *= (1 - α)

Pre-emphasis must see the *unmodified* previous sample at every index. An
ascending loop would subtract an already emphasized value and give a
different (wrong) result.

The downsample() helper lives here as well: it is the only other operation
that reshapes a frame before LPC analysis.
"""

import logging

import numpy as np

from .errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_PREEMPHASIS = 0.97


def _check_mutable_frame(frame: np.ndarray) -> np.ndarray:
    """Validate that a frame can be conditioned in place."""
    if not isinstance(frame, np.ndarray) or frame.dtype != np.float64:
        raise InvalidInputError(
            "Frames are conditioned in place and must be float64 numpy arrays. "
            f"Got {type(frame).__name__}"
            + (f" with dtype {frame.dtype}" if isinstance(frame, np.ndarray) else "")
        )
    if frame.ndim != 1:
        raise InvalidInputError("Only mono frames supported. Got shape: {}".format(frame.shape))
    if frame.size == 0:
        raise InvalidInputError("Cannot condition an empty frame")
    return frame


def subtract_mean(frame: np.ndarray) -> np.ndarray:
    """
    Subtract the arithmetic mean from every sample (in place).

    Args:
        frame: 1D float64 array, modified in place

    Returns:
        The same array, for chaining

    Raises:
        InvalidInputError: If the frame is empty or not a float64 array
    """
    _check_mutable_frame(frame)
    frame -= frame.mean()
    return frame


def apply_hamming_window(frame: np.ndarray) -> np.ndarray:
    """
    Apply a Hamming window (in place).

    numpy's Hamming window uses exactly w[i] = 0.54 - 0.46 × cos(2πi/(N-1))
    and returns [1.0] for N = 1, so a single sample is left untouched.

    Args:
        frame: 1D float64 array, modified in place

    Returns:
        The same array, for chaining
    """
    _check_mutable_frame(frame)
    frame *= np.hamming(frame.size)
    return frame


def pre_emphasis(frame: np.ndarray, alpha: float) -> np.ndarray:
    """
    Apply a first-order pre-emphasis filter (in place).

    Equivalent to the descending loop

        for i in range(N - 1, 0, -1):
            x[i] -= alpha * x[i - 1]
        x[0] *= 1 - alpha

    Args:
        frame: 1D float64 array, modified in place
        alpha: Pre-emphasis coefficient (typically 0.95 - 0.97)

    Returns:
        The same array, for chaining
    """
    _check_mutable_frame(frame)
    # The right-hand side is materialized before the update, so every
    # sample is differenced against its unmodified predecessor.
    frame[1:] -= alpha * frame[:-1]
    frame[0] *= 1.0 - alpha
    return frame


def condition(frame: np.ndarray, preemphasis_alpha: float = DEFAULT_PREEMPHASIS) -> np.ndarray:
    """
    Prepare a frame for LPC analysis (in place).

    Steps: mean removal, Hamming window, pre-emphasis.

    Args:
        frame: 1D float64 array, modified in place
        preemphasis_alpha: Pre-emphasis coefficient

    Returns:
        The same array, for chaining

    Raises:
        InvalidInputError: If the frame is empty or cannot be modified in place
    """
    subtract_mean(frame)
    apply_hamming_window(frame)
    pre_emphasis(frame, preemphasis_alpha)
    return frame


def downsample(samples, factor: int) -> np.ndarray:
    """
    Keep every factor-th sample, starting with the first.

    The effective sample rate of the result is original_rate / factor. No
    anti-aliasing filter is applied.

    Args:
        samples: 1D sequence of samples
        factor: Decimation factor (1 = copy)

    Returns:
        New float64 array of length ceil(N / factor)

    Raises:
        InvalidInputError: If factor < 1
    """
    if int(factor) != factor or factor < 1:
        raise InvalidInputError(f"Downsample factor must be a positive integer, got {factor}")
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1:
        raise InvalidInputError("Only mono frames supported. Got shape: {}".format(samples.shape))
    result = samples[::int(factor)].copy()
    logger.debug("Downsampled %d samples by %d to %d", samples.size, factor, result.size)
    return result
