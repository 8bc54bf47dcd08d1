"""Exception types raised by the analysis pipeline.

Conditioning and autocorrelation fail fast on malformed input. The
Levinson-Durbin solver floors its residual energy unless asked to be strict.
Root-finding failures are recoverable: the formant extractor catches them and
returns an empty formant set.
"""


class EzformantError(Exception):
    """Base class for all ezformant errors."""
    pass


class InvalidInputError(EzformantError, ValueError):
    """Raised for malformed input: empty frames, negative lags, bad factors."""
    pass


class DegenerateSignalError(EzformantError):
    """Raised when a frame has (numerically) zero energy, i.e. r[0] ~ 0."""
    pass


class UnstableRecursionError(EzformantError):
    """Raised by a strict Levinson-Durbin solve when the residual energy collapses."""
    pass


class RootFindingError(EzformantError):
    """Raised when the root-finding capability cannot produce usable roots."""
    pass


class ConfigError(EzformantError):
    """Raised when a configuration value cannot be parsed or is out of range."""
    pass
