"""Settings package for Mythforge.

- _paths.py: Path constants for the settings file
- _types.py: Thresholds record and log level names
- _validation.py: Settings validation functions
- _settings.py: Main Settings dataclass
"""

from mythforge.settings._paths import SETTINGS_FILE
from mythforge.settings._settings import Settings
from mythforge.settings._types import DEFAULT_THRESHOLDS, LOG_LEVELS, Thresholds

__all__ = [
    "DEFAULT_THRESHOLDS",
    "LOG_LEVELS",
    "SETTINGS_FILE",
    "Settings",
    "Thresholds",
]
