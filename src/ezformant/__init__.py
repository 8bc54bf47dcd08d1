"""
ezformant - formant and pitch analysis of short audio frames.

The pipeline fits an all-pole (LPC) model to a frame and reads formants off
the angles of its poles; pitch comes from a YIN-style difference function.

Usage:
    import numpy as np
    from ezformant import Frame

    frame = Frame(samples, sample_rate=44100)
    formants = frame.downsample(4).to_formants(lpc_order=14)
    envelope = frame.to_frequency_response(lpc_order=16, num_points=1024)
    pitch = frame.to_pitch()

Or through the flat host-facing functions:
    from ezformant import formant_detection_with_downsampling, pitch_detection

    formants = formant_detection_with_downsampling(samples, 14, 44100, 4)
    pitch = pitch_detection(samples, 44100)

The package logs through the standard logging module under the "ezformant"
logger and installs no handlers of its own.
"""

import logging

from .analysis import (
    FrameAnalysis,
    analyze_frame,
    formant_detection,
    formant_detection_with_downsampling,
    lpc_filter_freq_response,
    lpc_filter_freq_response_with_downsampling,
    lpc_filter_freq_response_with_peaks,
    pitch_detection,
)
from .autocorrelation import autocorrelate, autocorrelate_fft
from .conditioning import condition, downsample
from .config import AnalysisSettings, load_settings
from .errors import (
    ConfigError,
    DegenerateSignalError,
    EzformantError,
    InvalidInputError,
    RootFindingError,
    UnstableRecursionError,
)
from .frame import Frame
from .lpc import LpcModel, levinson
from .pitch import PITCH_NOT_FOUND
from .response import FrequencyResponse
from .spectrum import Spectrum

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "Frame",
    "FrameAnalysis",
    "LpcModel",
    "FrequencyResponse",
    "Spectrum",
    "AnalysisSettings",
    "load_settings",
    "analyze_frame",
    "autocorrelate",
    "autocorrelate_fft",
    "condition",
    "downsample",
    "levinson",
    "formant_detection",
    "formant_detection_with_downsampling",
    "lpc_filter_freq_response",
    "lpc_filter_freq_response_with_downsampling",
    "lpc_filter_freq_response_with_peaks",
    "pitch_detection",
    "PITCH_NOT_FOUND",
    "EzformantError",
    "InvalidInputError",
    "DegenerateSignalError",
    "UnstableRecursionError",
    "RootFindingError",
    "ConfigError",
]
