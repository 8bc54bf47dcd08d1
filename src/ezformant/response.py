"""
Frequency response - magnitude of the LPC all-pole filter 1/A(z).

For point i of num_points:
    f_i = i / num_points × fs / 2
    ω_i = 2π × f_i / fs
    A(e^{jω}) = Σ_k a[k] × e^{-jkω}
    |H(f_i)| = 1 / |A(e^{jω})|

The grid covers [0, fs/2) linearly; Nyquist itself is never sampled. A pole
sitting exactly on the unit circle gives |A| = 0, which is clamped to the
smallest positive double so the magnitude stays finite.
"""

from typing import Iterator, Tuple

import numpy as np

from .errors import InvalidInputError


class FrequencyResponse:
    """
    Sampled magnitude response of an all-pole filter.

    Attributes:
        frequencies: Frequencies in Hz, strictly increasing from 0
        magnitudes: |H(f)| at each frequency
        sample_rate: Sample rate of the model in Hz
    """

    def __init__(self, frequencies: np.ndarray, magnitudes: np.ndarray, sample_rate: float):
        self._frequencies = np.asarray(frequencies, dtype=np.float64)
        self._magnitudes = np.asarray(magnitudes, dtype=np.float64)
        self._sample_rate = float(sample_rate)

    @property
    def frequencies(self) -> np.ndarray:
        """Frequencies in Hz."""
        return self._frequencies

    @property
    def magnitudes(self) -> np.ndarray:
        """Linear magnitudes."""
        return self._magnitudes

    @property
    def sample_rate(self) -> float:
        """Sample rate in Hz."""
        return self._sample_rate

    @property
    def n_points(self) -> int:
        """Number of frequency points."""
        return len(self._frequencies)

    @property
    def df(self) -> float:
        """Frequency spacing in Hz."""
        return self._sample_rate / 2.0 / self.n_points

    def to_db(self) -> np.ndarray:
        """Magnitudes in dB (20 × log10)."""
        return 20.0 * np.log10(self._magnitudes)

    def peak_frequency(self) -> float:
        """Frequency of the largest magnitude."""
        return float(self._frequencies[int(np.argmax(self._magnitudes))])

    def __len__(self) -> int:
        return self.n_points

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for f, m in zip(self._frequencies, self._magnitudes):
            yield float(f), float(m)

    def __repr__(self) -> str:
        return f"FrequencyResponse({self.n_points} points, {self._sample_rate} Hz)"


def compute_frequency_response(coeffs, sample_rate: float, num_points: int) -> FrequencyResponse:
    """
    Evaluate the magnitude response of 1/A(z) on a linear grid.

    Args:
        coeffs: LPC coefficients a[0..p] (lowest lag first)
        sample_rate: Sample rate in Hz
        num_points: Number of points between 0 and Nyquist

    Returns:
        FrequencyResponse with num_points points

    Raises:
        InvalidInputError: If num_points < 1 or coeffs is empty
    """
    coeffs = np.asarray(coeffs, dtype=np.float64)
    if coeffs.ndim != 1 or coeffs.size == 0:
        raise InvalidInputError("LPC coefficients must be a non-empty 1D sequence")
    if num_points < 1:
        raise InvalidInputError(f"num_points must be at least 1, got {num_points}")

    freqs = np.arange(num_points) / num_points * sample_rate / 2.0
    omega = 2.0 * np.pi * freqs / sample_rate
    z = np.exp(-1j * omega)

    # A(z) = Σ a[k] z^k with z = e^{-jω}; polyval wants highest degree first
    denominator = np.polyval(coeffs[::-1], z)
    magnitude = 1.0 / np.maximum(np.abs(denominator), np.finfo(np.float64).tiny)

    return FrequencyResponse(freqs, magnitude, sample_rate)
