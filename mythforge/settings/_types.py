"""Threshold records and logging level names."""

import logging
from dataclasses import dataclass, fields

from mythforge.utils.validation import validate_non_negative_int

logger = logging.getLogger(__name__)

LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass(frozen=True)
class Thresholds:
    """Minimum content counts a generation must reach to be usable.

    Overridable per call; pass a modified copy via ``dataclasses.replace``.
    """

    min_entities: int = 5
    min_locations: int = 5
    min_vocabulary: int = 10
    min_timeline_events: int = 5
    min_story_length: int = 50  # characters
    min_story_word_count: int = 600

    def __post_init__(self) -> None:
        """Reject negative or non-integer minimums.

        Raises:
            TypeError: If a minimum is not an integer.
            ValueError: If a minimum is negative.
        """
        for f in fields(self):
            validate_non_negative_int(getattr(self, f.name), f.name)


DEFAULT_THRESHOLDS = Thresholds()
