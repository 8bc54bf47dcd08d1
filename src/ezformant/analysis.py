"""
Host-facing analysis functions.

Each function takes a raw frame and scalar parameters and returns plain
numpy values, so a host (a UI worker, a streaming loop, a batch script) can
call it without touching the intermediate types. The caller's buffer is
copied before conditioning and is never modified.

Pipeline:
    [downsample] -> condition -> autocorrelate -> Levinson-Durbin
        -> frequency response and/or formants

Pitch is estimated independently on the raw, full-rate frame.

Silent frames raise DegenerateSignalError from every LPC path; the pitch
path reports PITCH_NOT_FOUND instead.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .autocorrelation import autocorrelate
from .conditioning import DEFAULT_PREEMPHASIS, condition, downsample
from .config import AnalysisSettings
from .errors import InvalidInputError
from .formant import formant_detection as _formants_from_lpc
from .formant import pad_formants
from .lpc import levinson
from .pitch import PITCH_NOT_FOUND, YIN_THRESHOLD, pitch_detection_yin
from .response import FrequencyResponse, compute_frequency_response

logger = logging.getLogger(__name__)
FORMANT_SLOTS = 4


@dataclass
class FrameAnalysis:
    """
    Formants, pitch and LPC envelope of one frame.

    Attributes:
        formants: Ascending formant frequencies in Hz
        pitch: Pitch in Hz, or PITCH_NOT_FOUND
        envelope: LPC frequency response the formants were read from
        slots: Number of formants reported by formant_slots()
    """
    formants: np.ndarray
    pitch: float
    envelope: Optional[FrequencyResponse] = None
    slots: int = FORMANT_SLOTS

    @property
    def voiced(self) -> bool:
        """Whether a pitch was found."""
        return self.pitch != PITCH_NOT_FOUND

    def formant_slots(self, slots: Optional[int] = None) -> np.ndarray:
        """Formants as F1..F<slots>, zero where missing."""
        return pad_formants(self.formants, self.slots if slots is None else slots)



def _copy_frame(data) -> np.ndarray:
    samples = np.array(data, dtype=np.float64)
    if samples.ndim != 1:
        raise InvalidInputError("Only mono frames supported. Got shape: {}".format(samples.shape))
    return samples


def _lpc_coefficients(samples: np.ndarray, lpc_order: int, preemphasis_alpha: float) -> np.ndarray:
    """Condition (in place) and solve for LPC coefficients."""
    condition(samples, preemphasis_alpha)
    r = autocorrelate(samples, lpc_order)
    a, e = levinson(lpc_order, r)
    logger.debug("LPC order %d on %d samples, residual energy %g", lpc_order, samples.size, e)
    return a


def lpc_filter_freq_response(
    data,
    lpc_order: int,
    sample_rate: float,
    num_points: int,
    preemphasis_alpha: float = DEFAULT_PREEMPHASIS
) -> np.ndarray:
    """
    LPC envelope magnitudes of a frame.

    Args:
        data: Raw samples
        lpc_order: LPC order
        sample_rate: Sample rate in Hz
        num_points: Number of points between 0 and Nyquist
        preemphasis_alpha: Pre-emphasis coefficient

    Returns:
        Array of num_points magnitudes
    """
    a = _lpc_coefficients(_copy_frame(data), lpc_order, preemphasis_alpha)
    return compute_frequency_response(a, sample_rate, num_points).magnitudes


def lpc_filter_freq_response_with_downsampling(
    original_data,
    lpc_order: int,
    original_sample_rate: float,
    downsample_factor: int,
    num_points: int,
    preemphasis_alpha: float = DEFAULT_PREEMPHASIS
) -> np.ndarray:
    """
    LPC envelope magnitudes of a frame after decimation.

    Same as lpc_filter_freq_response() on downsample(data, factor) at
    original_sample_rate / factor.
    """
    samples = downsample(original_data, downsample_factor)
    sample_rate = original_sample_rate / downsample_factor
    return lpc_filter_freq_response(samples, lpc_order, sample_rate, num_points, preemphasis_alpha)


def lpc_filter_freq_response_with_peaks(
    data,
    lpc_order: int,
    sample_rate: float,
    num_points: int,
    preemphasis_alpha: float = DEFAULT_PREEMPHASIS
) -> np.ndarray:
    """
    Formants and LPC envelope in one array.

    Returns:
        [F1, F2, F3, F4, magnitude_0, ..., magnitude_{num_points-1}], with
        missing formants reported as 0.0
    """
    a = _lpc_coefficients(_copy_frame(data), lpc_order, preemphasis_alpha)
    formants = pad_formants(_formants_from_lpc(a, sample_rate), FORMANT_SLOTS)
    magnitudes = compute_frequency_response(a, sample_rate, num_points).magnitudes
    return np.concatenate([formants, magnitudes])


def formant_detection(
    data,
    lpc_order: int,
    sample_rate: float,
    preemphasis_alpha: float = DEFAULT_PREEMPHASIS
) -> np.ndarray:
    """
    Formant frequencies of a frame.

    Args:
        data: Raw samples
        lpc_order: LPC order
        sample_rate: Sample rate in Hz
        preemphasis_alpha: Pre-emphasis coefficient

    Returns:
        Ascending formant frequencies in Hz
    """
    a = _lpc_coefficients(_copy_frame(data), lpc_order, preemphasis_alpha)
    return _formants_from_lpc(a, sample_rate)


def formant_detection_with_downsampling(
    original_data,
    lpc_order: int,
    original_sample_rate: float,
    downsample_factor: int,
    preemphasis_alpha: float = DEFAULT_PREEMPHASIS
) -> np.ndarray:
    """Formant frequencies of a frame after decimation by downsample_factor."""
    samples = downsample(original_data, downsample_factor)
    sample_rate = original_sample_rate / downsample_factor
    return formant_detection(samples, lpc_order, sample_rate, preemphasis_alpha)


def pitch_detection(data, sample_rate: float, threshold: float = YIN_THRESHOLD) -> float:
    """YIN pitch of a raw frame, or PITCH_NOT_FOUND."""
    return pitch_detection_yin(_copy_frame(data), sample_rate, threshold)


def analyze_frame(data, sample_rate: float, settings: Optional[AnalysisSettings] = None) -> FrameAnalysis:
    """
    Formants and envelope (on the decimated frame) and pitch (on the raw frame).

    Args:
        data: Raw samples
        sample_rate: Sample rate in Hz
        settings: Analysis settings (default: AnalysisSettings())

    Returns:
        FrameAnalysis with a settings.num_points envelope at the reduced
        rate, reporting settings.formant_slots formants from formant_slots()
    """
    if settings is None:
        settings = AnalysisSettings()

    samples = downsample(data, settings.downsample_factor)
    reduced_rate = sample_rate / settings.downsample_factor
    condition(samples, settings.preemphasis_alpha)
    r = autocorrelate(samples, settings.lpc_order)
    a, _ = levinson(settings.lpc_order, r, energy_floor=settings.energy_floor)
    formants = _formants_from_lpc(
        a,
        reduced_rate,
        tolerance=settings.root_tolerance,
        max_iterations=settings.root_max_iterations
    )
    envelope = compute_frequency_response(a, reduced_rate, settings.num_points)

    pitch = pitch_detection(data, sample_rate, settings.pitch_threshold)
    return FrameAnalysis(formants, pitch, envelope, settings.formant_slots)
