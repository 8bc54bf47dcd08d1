"""
Frame - a short window of mono audio with its sample rate.

A Frame is the unit of analysis: every method takes the frame as it is and
returns a fresh result. The stored samples are never modified; conditioning
works on a copy.

Design principles:
------------------
1. Mono only: 2D input is rejected.
2. Float64 samples.
3. Lazy imports: analysis modules are imported when their method is called.

Usage:
------
    from ezformant import Frame

    frame = Frame(samples, sample_rate=44100)
    formants = frame.downsample(4).to_formants(lpc_order=14)
    pitch = frame.to_pitch()
"""

from pathlib import Path
from typing import Union

import numpy as np

from .conditioning import DEFAULT_PREEMPHASIS
from .errors import InvalidInputError
from .pitch import YIN_THRESHOLD


class Frame:
    """
    Audio samples with sample rate.

    Attributes:
        samples: 1D float64 array
        sample_rate: Sample rate in Hz
    """

    def __init__(self, samples, sample_rate: float):
        """
        Create a Frame from samples and sample rate.

        Args:
            samples: 1D sequence of samples
            sample_rate: Sample rate in Hz

        Raises:
            InvalidInputError: If samples is not 1D or the rate is not positive
        """
        samples = np.array(samples, dtype=np.float64)
        if samples.ndim != 1:
            raise InvalidInputError("Only mono audio supported. Got shape: {}".format(samples.shape))
        if not sample_rate > 0:
            raise InvalidInputError(f"Sample rate must be positive, got {sample_rate}")

        samples.setflags(write=False)
        self._samples = samples
        self._sample_rate = float(sample_rate)

    @classmethod
    def from_file(cls, path: Union[str, Path], start: int = 0, length: int = 0) -> "Frame":
        """
        Load a mono audio file (or part of it) as a frame.

        Args:
            path: Path to an audio file readable by soundfile
            start: First sample to read
            length: Number of samples to read (0 = to the end)

        Returns:
            Frame

        Raises:
            InvalidInputError: If the file has more than one channel
        """
        import soundfile as sf

        stop = start + length if length > 0 else None
        data, sample_rate = sf.read(path, start=start, stop=stop, dtype='float64')

        if data.ndim > 1:
            raise InvalidInputError(
                f"Only mono audio supported. File has {data.shape[1]} channels."
            )

        return cls(data, sample_rate)

    @property
    def samples(self) -> np.ndarray:
        """Read-only samples."""
        return self._samples

    @property
    def sample_rate(self) -> float:
        """Sample rate in Hz."""
        return self._sample_rate

    @property
    def n_samples(self) -> int:
        """Number of samples."""
        return len(self._samples)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.n_samples / self._sample_rate

    def __len__(self) -> int:
        return self.n_samples

    def __repr__(self) -> str:
        return f"Frame({self.n_samples} samples, {self.sample_rate} Hz)"

    def downsample(self, factor: int) -> "Frame":
        """Keep every factor-th sample; the rate drops by the same factor."""
        from .conditioning import downsample
        return Frame(downsample(self._samples, factor), self._sample_rate / factor)

    def conditioned(self, preemphasis_alpha: float = DEFAULT_PREEMPHASIS) -> "Frame":
        """Copy with mean removed, Hamming window and pre-emphasis applied."""
        from .conditioning import condition
        return Frame(condition(self._samples.copy(), preemphasis_alpha), self._sample_rate)

    def autocorrelation(self, max_lag: int, fft: bool = False) -> np.ndarray:
        """Biased autocorrelation of the samples as they are."""
        from .autocorrelation import autocorrelate, autocorrelate_fft
        if fft:
            return autocorrelate_fft(self._samples, max_lag)
        return autocorrelate(self._samples, max_lag)

    def to_lpc(
        self,
        lpc_order: int = 14,
        preemphasis_alpha: float = DEFAULT_PREEMPHASIS,
        **kwargs
    ) -> "LpcModel":
        """
        Condition a copy of the frame and fit an LPC model.

        Args:
            lpc_order: LPC order
            preemphasis_alpha: Pre-emphasis coefficient
            **kwargs: energy_floor / strict, passed to the solver

        Returns:
            LpcModel at this frame's sample rate

        Raises:
            DegenerateSignalError: If the frame is silent
        """
        from .lpc import lpc_from_signal
        conditioned = self.conditioned(preemphasis_alpha)
        return lpc_from_signal(conditioned.samples, lpc_order, self._sample_rate, **kwargs)

    def to_frequency_response(
        self,
        lpc_order: int = 14,
        num_points: int = 1024,
        preemphasis_alpha: float = DEFAULT_PREEMPHASIS
    ) -> "FrequencyResponse":
        """LPC envelope of the frame."""
        return self.to_lpc(lpc_order, preemphasis_alpha).frequency_response(num_points)

    def to_formants(
        self,
        lpc_order: int = 14,
        preemphasis_alpha: float = DEFAULT_PREEMPHASIS,
        **kwargs
    ) -> np.ndarray:
        """
        Formant frequencies of the frame.

        Args:
            lpc_order: LPC order
            preemphasis_alpha: Pre-emphasis coefficient
            **kwargs: Options for formant.formant_detection

        Returns:
            Ascending formant frequencies in Hz
        """
        return self.to_lpc(lpc_order, preemphasis_alpha).formants(**kwargs)

    def to_pitch(self, threshold: float = YIN_THRESHOLD) -> float:
        """YIN pitch of the raw samples (or PITCH_NOT_FOUND)."""
        from .pitch import pitch_detection_yin
        return pitch_detection_yin(self._samples, self._sample_rate, threshold)

    def to_spectrum(self) -> "Spectrum":
        """FFT magnitude spectrum of the raw samples."""
        from .spectrum import frame_to_spectrum
        return frame_to_spectrum(self._samples, self._sample_rate)
