"""
Analysis settings and where they come from.

Settings are resolved in this order (later sources win):
  1. Defaults (the values of the AnalysisSettings dataclass)
  2. Config file: ./ezformant.toml, or ~/.ezformant/config.toml
  3. Environment variables: EZFORMANT_<FIELD>, e.g. EZFORMANT_LPC_ORDER=16

Config file format (keys may also sit at top level):

    [analysis]
    lpc_order = 16
    downsample_factor = 2

Nothing in the core reads settings implicitly; hosts call load_settings()
and pass the result (or individual values) to the analysis functions.
"""

import dataclasses
import logging
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .conditioning import DEFAULT_PREEMPHASIS
from .errors import ConfigError
from .lpc import DEFAULT_ENERGY_FLOOR
from .pitch import YIN_THRESHOLD

logger = logging.getLogger(__name__)

ENV_PREFIX = "EZFORMANT_"


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Parameters of one frame analysis.

    Attributes:
        lpc_order: LPC order (number of poles)
        preemphasis_alpha: Pre-emphasis coefficient in [0, 1)
        downsample_factor: Decimation applied before formant analysis
        num_points: Frequency response resolution
        pitch_threshold: YIN absolute threshold
        root_tolerance: Root finder error tolerance
        root_max_iterations: Root finder iteration cap
        formant_slots: Number of formants reported by fixed-slot outputs
        energy_floor: Levinson-Durbin residual energy floor, relative to r[0]
    """
    lpc_order: int = 14
    preemphasis_alpha: float = DEFAULT_PREEMPHASIS
    downsample_factor: int = 4
    num_points: int = 1024
    pitch_threshold: float = YIN_THRESHOLD
    root_tolerance: float = 1e-3
    root_max_iterations: int = 15
    formant_slots: int = 4
    energy_floor: float = DEFAULT_ENERGY_FLOOR

    def validate(self) -> "AnalysisSettings":
        """Check ranges; returns self so it can be chained."""
        for name in ("lpc_order", "downsample_factor", "num_points",
                     "root_max_iterations", "formant_slots"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1, got {getattr(self, name)}")
        if not 0.0 <= self.preemphasis_alpha < 1.0:
            raise ConfigError(f"preemphasis_alpha must be in [0, 1), got {self.preemphasis_alpha}")
        for name in ("pitch_threshold", "root_tolerance", "energy_floor"):
            if not getattr(self, name) > 0.0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        return self

    def replace(self, **changes) -> "AnalysisSettings":
        """Copy with some fields changed."""
        return dataclasses.replace(self, **changes).validate()


_FIELD_TYPES = {f.name: f.type for f in dataclasses.fields(AnalysisSettings)}


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw config value to the type of the named field."""
    kind = _FIELD_TYPES[name]
    target = int if kind in (int, "int") else float
    try:
        if target is int and isinstance(value, float) and not value.is_integer():
            raise ValueError(value)
        return target(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e


def _find_config_file() -> Optional[Path]:
    """
    Locate the config file.

    Checks for config files in this order:
      1. ./ezformant.toml (project-local config)
      2. ~/.ezformant/config.toml (user config)
    """
    local_config = Path("ezformant.toml")
    if local_config.exists():
        return local_config

    user_config = Path.home() / ".ezformant" / "config.toml"
    if user_config.exists():
        return user_config

    return None


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read analysis settings from a TOML file.

    Uses tomllib (Python 3.11+) or tomli.

    Args:
        path: Path to the TOML file

    Returns:
        Mapping of field name to raw value (unknown keys dropped with a warning)

    Raises:
        ConfigError: If the file is not valid TOML
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    section = config.get("analysis", config)
    values = {}
    for key, value in section.items():
        if key in _FIELD_TYPES:
            values[key] = value
        else:
            warnings.warn(f"Ignoring unknown setting '{key}' in {path}")
    return values


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for name in _FIELD_TYPES:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw:
            values[name] = raw
    return values


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None
) -> AnalysisSettings:
    """
    Resolve settings from defaults, a config file and the environment.

    Args:
        path: Explicit config file (default: search ./ezformant.toml then
            ~/.ezformant/config.toml)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated AnalysisSettings

    Raises:
        ConfigError: If a value cannot be converted or is out of range
    """
    if environ is None:
        environ = os.environ
    if path is None:
        path = _find_config_file()

    raw: Dict[str, Any] = {}
    if path is not None:
        logger.debug("Reading settings from %s", path)
        raw.update(read_config_file(Path(path)))
    raw.update(_read_environment(environ))

    values = {name: _coerce(name, value) for name, value in raw.items()}
    return AnalysisSettings(**values).validate()
