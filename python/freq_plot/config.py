"""
Configuration for FreqPlot

Remembers the analysis choices between sessions (JSON format).
"""

import json
import os
from pathlib import Path
from dataclasses import dataclass, asdict

from .analysis.analyst import Algorithm, WINDOW_SIZE_CHOICES
from .analysis.readout import MIN_DB_RANGE
from .analysis.windows import DEFAULT_WINDOW_FUNCTION, num_window_funcs


class SettingsValidationError(Exception):
    """Raised when stored settings are out of range."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory, creating it if necessary."""
    override = os.environ.get('FREQPLOT_CONFIG_DIR')
    if override:
        config_dir = Path(override)
    else:
        if os.name == 'nt':  # Windows
            base = Path(os.environ.get('APPDATA', Path.home()))
        else:
            base = Path.home() / '.config'
        config_dir = base / 'FreqPlot'

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the settings file path."""
    return get_config_dir() / 'config.json'


AXIS_LINEAR = 0
AXIS_LOG = 1

# Validation ranges for stored settings
VALIDATION_RANGES = {
    'algorithm': (0, len(Algorithm) - 1),
    'window_func': (0, num_window_funcs() - 1),
    'size_choice': (0, len(WINDOW_SIZE_CHOICES) - 1),
    'axis': (AXIS_LINEAR, AXIS_LOG),
    'db_range': (MIN_DB_RANGE, 240.0),
}


def _validate_range(value: float, min_val: float, max_val: float, param_name: str) -> float:
    """Validate and clamp a value to a range, raising error if way out of bounds."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise SettingsValidationError(f"Invalid {param_name}: {value!r} (expected a number)")
    # Allow small tolerance (10%) beyond range before rejecting
    tolerance = (max_val - min_val) * 0.1
    if value < min_val - tolerance or value > max_val + tolerance:
        raise SettingsValidationError(
            f"Invalid {param_name}: {value} "
            f"(must be between {min_val} and {max_val})"
        )
    # Clamp to exact range
    return max(min_val, min(max_val, value))


@dataclass
class AnalysisSettings:
    """Choices of the frequency analysis dialog."""
    algorithm: int = int(Algorithm.SPECTRUM)
    window_func: int = DEFAULT_WINDOW_FUNCTION  # Hann
    size_choice: int = 3  # 1024 samples
    axis: int = AXIS_LOG  # Log frequency (Spectrum only)
    draw_grid: bool = True
    db_range: float = MIN_DB_RANGE  # Depth of the dB scale, never below 90
    version: str = "1.0.0"

    @property
    def window_size(self) -> int:
        return WINDOW_SIZE_CHOICES[self.size_choice]

    @property
    def log_axis(self) -> bool:
        # Lag-domain plots are always linear
        return self.axis == AXIS_LOG and self.algorithm == Algorithm.SPECTRUM

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'AnalysisSettings':
        """Create settings from dictionary with validation."""
        defaults = cls()

        def _index(key):
            return int(round(_validate_range(
                data.get(key, getattr(defaults, key)),
                *VALIDATION_RANGES[key],
                key,
            )))

        # Ranges below the minimum are raised rather than rejected
        db_range = data.get('db_range', defaults.db_range)
        try:
            db_range = max(MIN_DB_RANGE, float(db_range))
        except (TypeError, ValueError):
            raise SettingsValidationError(f"Invalid db_range: {db_range!r} (expected a number)")

        draw_grid = data.get('draw_grid', defaults.draw_grid)
        if not isinstance(draw_grid, bool):
            raise SettingsValidationError(f"Invalid draw_grid: {draw_grid!r} (expected true or false)")

        return cls(
            algorithm=_index('algorithm'),
            window_func=_index('window_func'),
            size_choice=_index('size_choice'),
            axis=_index('axis'),
            draw_grid=draw_grid,
            db_range=_validate_range(db_range, *VALIDATION_RANGES['db_range'], 'db_range'),
            version=str(data.get('version', defaults.version)),
        )


def save_settings(settings: AnalysisSettings) -> Path:
    """Save analysis settings, returning the file written."""
    filepath = get_config_file()
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)
    return filepath


def load_settings() -> AnalysisSettings:
    """Load analysis settings, returning defaults if not found or unreadable."""
    filepath = get_config_file()

    if not filepath.exists():
        return AnalysisSettings()

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return AnalysisSettings.from_dict(data)
    except (json.JSONDecodeError, OSError, AttributeError, SettingsValidationError):
        return AnalysisSettings()
