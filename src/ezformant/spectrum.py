"""
Spectrum - FFT magnitude spectrum of a single frame.

The raw spectrum is what a host draws underneath the LPC envelope. Only the
first N/2 bins are kept (the rest mirror them for a real signal) and a small
offset is added so the values can be put on a log scale directly.
"""

import numpy as np

from .errors import InvalidInputError

# Added to every magnitude so log10 never sees zero
MAGNITUDE_OFFSET = 1e-10


class Spectrum:
    """
    Magnitude spectrum from 0 Hz to just under Nyquist.

    Attributes:
        magnitudes: |X[k]| + offset for k = 0 .. N/2 - 1
        df: Bin width in Hz
        f_max: Nyquist frequency in Hz
    """

    def __init__(self, magnitudes: np.ndarray, df: float, f_max: float):
        self._magnitudes = np.asarray(magnitudes, dtype=np.float64)
        self._df = df
        self._f_max = f_max

    @property
    def magnitudes(self) -> np.ndarray:
        """Bin magnitudes."""
        return self._magnitudes

    @property
    def df(self) -> float:
        """Frequency resolution (bin width) in Hz."""
        return self._df

    @property
    def f_max(self) -> float:
        """Maximum frequency (Nyquist) in Hz."""
        return self._f_max

    @property
    def n_bins(self) -> int:
        """Number of frequency bins."""
        return len(self._magnitudes)

    def frequencies(self) -> np.ndarray:
        """Center frequency of every bin."""
        return np.arange(self.n_bins) * self._df

    def get_frequency(self, bin_index: int) -> float:
        """Get frequency for a bin index."""
        return bin_index * self._df

    def to_db(self) -> np.ndarray:
        """Magnitudes in dB (20 × log10)."""
        return 20.0 * np.log10(self._magnitudes)


def magnitude_spectrum(samples) -> np.ndarray:
    """
    |FFT| of the samples, first N/2 bins, plus MAGNITUDE_OFFSET.

    Args:
        samples: 1D samples

    Returns:
        Array of N // 2 magnitudes
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1 or samples.size == 0:
        raise InvalidInputError("Spectrum needs a non-empty mono frame")
    spectrum = np.fft.fft(samples)
    return np.abs(spectrum[:len(samples) // 2]) + MAGNITUDE_OFFSET


def frame_to_spectrum(samples, sample_rate: float) -> Spectrum:
    """
    Compute the magnitude spectrum of a frame.

    Args:
        samples: 1D samples
        sample_rate: Sample rate in Hz

    Returns:
        Spectrum with N // 2 bins of width sample_rate / N
    """
    magnitudes = magnitude_spectrum(samples)
    n = len(np.asarray(samples))
    return Spectrum(magnitudes, sample_rate / n, sample_rate / 2.0)
