"""Main Settings dataclass for Mythforge.

Settings are stored in settings.json at the project root. Every field has a
default, so a missing file simply means factory defaults.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, ClassVar

from mythforge.settings import _validation as _validation_mod
from mythforge.settings._paths import SETTINGS_FILE
from mythforge.settings._types import Thresholds
from mythforge.utils.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _merge_with_defaults(data: dict[str, Any], settings_cls: type[Settings]) -> bool:
    """Merge loaded JSON data with dataclass defaults.

    - Adds missing keys with their default values
    - Removes keys that no longer exist in the dataclass

    Modifies *data* in place.

    Returns:
        True if any changes were made, False otherwise.
    """
    default_dict = asdict(settings_cls())
    known_fields = {f.name for f in fields(settings_cls)}
    changed = False

    for key in list(data):
        if key not in known_fields:
            logger.info("Removing obsolete setting: %s", key)
            del data[key]
            changed = True

    for key in known_fields:
        if key not in data:
            logger.info("Adding new setting with default: %s", key)
            data[key] = default_dict[key]
            changed = True

    return changed


def _atomic_write_json(path: Path | str, data: dict[str, Any]) -> None:
    """Write JSON to *path* atomically via a temp file + rename."""
    path = Path(path)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError as cleanup_err:
            logger.warning("Failed to remove temp settings file %s: %s", tmp_path, cleanup_err)
        raise


def _read_settings_file(path: Path) -> dict[str, Any]:
    """Read the settings file, returning {} when missing, unreadable, or corrupt."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Corrupted settings file (invalid JSON): %s", e)
        _backup_corrupt_file(path)
        return {}
    except OSError as e:
        logger.error("Cannot read settings file (may be locked or inaccessible): %s", e)
        return {}

    if not isinstance(data, dict):
        logger.error(
            "Corrupted settings file (expected JSON object, got %s)",
            type(data).__name__,
        )
        _backup_corrupt_file(path)
        return {}
    return data


def _backup_corrupt_file(path: Path) -> None:
    backup_path = path.with_suffix(".json.corrupt")
    try:
        shutil.copy(path, backup_path)
        logger.info("Backed up corrupted settings to %s", backup_path)
    except OSError as copy_err:
        logger.warning("Failed to backup corrupted settings: %s", copy_err)


@dataclass
class Settings:
    """Application settings."""

    # Logging
    log_level: str = "INFO"

    # Completeness thresholds (mirrors Thresholds)
    min_entities: int = 5
    min_locations: int = 5
    min_vocabulary: int = 10
    min_timeline_events: int = 5
    min_story_length: int = 50  # characters
    min_story_word_count: int = 600

    # Fidelity scoring
    min_fidelity_score: float = 85.0  # percent of constraint terms found
    min_term_length: int = 3  # shorter constraint words are ignored

    # Creativity checks
    min_entity_name_length: int = 3

    # Class-level cache for settings (speeds up repeated load() calls)
    _cached_instance: ClassVar[Settings | None] = None

    def thresholds(self) -> Thresholds:
        """Build the Thresholds record from the threshold fields."""
        return Thresholds(**{f.name: getattr(self, f.name) for f in fields(Thresholds)})

    def validate(self) -> None:
        """Validate all settings fields. Delegates to _validation module.

        Raises:
            ValueError: If any field contains an invalid value.
        """
        _validation_mod.validate(self)

    def save(self) -> None:
        """Save settings to JSON file.

        Raises:
            ValueError: If a field is invalid.
            ConfigError: If the file cannot be written.
        """
        self.validate()
        try:
            _atomic_write_json(SETTINGS_FILE, asdict(self))
        except OSError as e:
            raise ConfigError(f"Could not write settings to {SETTINGS_FILE}: {e}") from e
        logger.info("Settings saved to %s", SETTINGS_FILE)

    @classmethod
    def load(cls, use_cache: bool = True) -> Settings:
        """Load settings from JSON file, or create defaults.

        New settings get default values and removed settings are cleaned up;
        customized values are preserved. A corrupt or unreadable file falls
        back to defaults.

        Args:
            use_cache: If True, return cached instance if available. Set to False
                to force reload from disk (useful after save() or in tests).

        Returns:
            Settings instance.

        Raises:
            ValueError: If a stored value is out of range or has the wrong type.
        """
        if use_cache and cls._cached_instance is not None:
            return cls._cached_instance

        data = _read_settings_file(SETTINGS_FILE)
        loaded_from_file = bool(data)
        logger.debug("Settings load: loaded_from_file=%s, keys_read=%d", loaded_from_file, len(data))

        changed = _merge_with_defaults(data, cls)

        try:
            settings = cls(**data)
            settings.validate()
        except TypeError as e:
            raise ValueError(f"A setting has an invalid type: {e}") from e

        if changed and loaded_from_file:
            logger.info("Settings updated during load, saving to disk")
            try:
                _atomic_write_json(SETTINGS_FILE, asdict(settings))
            except OSError as write_err:
                logger.warning(
                    "Could not persist updated settings to disk: %s",
                    write_err,
                )

        cls._cached_instance = settings
        return settings

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the cached settings instance.

        Use this in tests that need to verify settings loading behavior,
        or after programmatically modifying settings files.
        """
        cls._cached_instance = None
