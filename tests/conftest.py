"""Shared fixtures: synthetic frames with known content."""

import numpy as np
import pytest
from scipy import signal


def sine(frequency: float, sample_rate: float, n_samples: int, amplitude: float = 1.0) -> np.ndarray:
    """Pure tone starting at phase zero."""
    t = np.arange(n_samples) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def synthetic_vowel(
    formants,
    sample_rate: float,
    n_samples: int,
    pitch: float = 100.0,
    bandwidth: float = 80.0
) -> np.ndarray:
    """Impulse train filtered by a cascade of two-pole resonators."""
    excitation = np.zeros(n_samples)
    excitation[::int(round(sample_rate / pitch))] = 1.0

    denominator = np.array([1.0])
    for f in formants:
        r = np.exp(-np.pi * bandwidth / sample_rate)
        theta = 2 * np.pi * f / sample_rate
        denominator = np.convolve(denominator, [1.0, -2 * r * np.cos(theta), r * r])

    return signal.lfilter([1.0], denominator, excitation)


@pytest.fixture
def x7():
    """Short integer sequence with a hand-checked autocorrelation."""
    return np.array([2.0, 3.0, -1.0, -2.0, 1.0, 4.0, 1.0])


@pytest.fixture
def vowel_lpc():
    """12th-order LPC polynomial of a vowel frame sampled at 11025 Hz."""
    return np.array([
        1.0,
        -1.75325333,
        1.97953403,
        -1.80343314,
        1.20047156,
        0.00740131,
        -0.46918192,
        0.74669944,
        -0.81144139,
        0.5992474,
        -0.22257812,
        0.12155728,
        0.04168977,
    ])


@pytest.fixture
def make_sine():
    """Factory for pure tones."""
    return sine


@pytest.fixture
def make_vowel():
    """Factory for synthetic vowels."""
    return synthetic_vowel
