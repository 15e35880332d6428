"""Validation functions for Settings."""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import TYPE_CHECKING

from mythforge.settings._types import LOG_LEVELS, Thresholds
from mythforge.utils.validation import validate_in_range

if TYPE_CHECKING:
    from mythforge.settings._settings import Settings

logger = logging.getLogger(__name__)


def validate(settings: Settings) -> None:
    """Validate all settings fields.

    Raises:
        ValueError: If any field contains an invalid value.
        TypeError: If a numeric field holds a non-numeric value.
    """
    _validate_log_level(settings)
    _validate_thresholds(settings)
    _validate_fidelity(settings)
    _validate_creativity(settings)


def _validate_log_level(settings: Settings) -> None:
    """Validate log_level is a known logging level."""
    if settings.log_level not in LOG_LEVELS:
        raise ValueError(
            f"log_level must be one of {list(LOG_LEVELS.keys())}, got {settings.log_level}"
        )


def _validate_thresholds(settings: Settings) -> None:
    """Validate every threshold field is a non-negative integer."""
    for f in fields(Thresholds):
        value = getattr(settings, f.name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{f.name} must be an integer, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"{f.name} must be non-negative, got {value}")


def _validate_fidelity(settings: Settings) -> None:
    """Validate fidelity scoring settings."""
    validate_in_range(settings.min_fidelity_score, "min_fidelity_score", 0.0, 100.0)
    validate_in_range(settings.min_term_length, "min_term_length", min_val=1)


def _validate_creativity(settings: Settings) -> None:
    """Validate creativity check settings."""
    validate_in_range(settings.min_entity_name_length, "min_entity_name_length", min_val=1)
