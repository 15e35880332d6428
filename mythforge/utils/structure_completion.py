"""Structural completion: backfill a partial response into the full shape.

Generated responses routinely miss sections, leave strings empty, or come
up short on list content. ``ensure_complete_structure`` deep-merges whatever
the source produced over the default skeleton so downstream code never sees
an absent field:

- Lists governed by a minimum count (entities, locations, vocabulary,
  timeline) are kept verbatim when they meet the minimum and replaced by the
  default list otherwise.
- Other lists are kept when non-empty.
- Strings are kept unless absent or empty.
- Nested objects merge recursively; keys the skeleton does not know are kept.
"""

import copy
import logging
from collections.abc import Callable, Mapping
from typing import Any

from mythforge.memory.default_content import DEFAULT_SKELETON
from mythforge.memory.myth_response import GenerationResponse
from mythforge.settings import DEFAULT_THRESHOLDS, Thresholds

logger = logging.getLogger(__name__)

KeyPath = tuple[str, ...]
EmptyPredicate = Callable[[Any, KeyPath], bool]

# Array fields whose content must reach a minimum count, by threshold name
MIN_COUNT_FIELDS: dict[KeyPath, str] = {
    ("entities",): "min_entities",
    ("worldMap", "locations"): "min_locations",
    ("ancientLanguage", "vocabulary"): "min_vocabulary",
    ("analysis", "timeline"): "min_timeline_events",
}


def is_blank(value: Any, path: KeyPath = ()) -> bool:
    """Default emptiness test: absent, empty string, or empty list."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, list):
        return len(value) == 0
    return False


def below_minimum_predicate(thresholds: Thresholds) -> EmptyPredicate:
    """Build an emptiness test that treats short governed lists as empty.

    Args:
        thresholds: Minimum counts for the governed list fields.

    Returns:
        Predicate for ``deep_merge``.
    """
    minimums = {path: getattr(thresholds, name) for path, name in MIN_COUNT_FIELDS.items()}

    def is_empty(value: Any, path: KeyPath) -> bool:
        minimum = minimums.get(path)
        if minimum is not None and isinstance(value, list):
            if len(value) < minimum:
                logger.debug(
                    "Field %s has %d items, below minimum %d",
                    ".".join(path),
                    len(value),
                    minimum,
                )
                return True
            return False
        return is_blank(value, path)

    return is_empty


def deep_merge(
    original: Any,
    base: Any,
    is_empty: EmptyPredicate = is_blank,
    path: KeyPath = (),
) -> Any:
    """Merge *original* over *base*, falling back to *base* where original is empty.

    Neither input is modified; values taken from *base* are deep copies.

    Args:
        original: Partial data from the generative source.
        base: Fully-populated fallback of the same shape.
        is_empty: Decides whether a value at a path should be replaced.
        path: Key path of the current values (used by is_empty).

    Returns:
        The merged value.
    """
    if isinstance(base, Mapping):
        if not isinstance(original, Mapping):
            if original is not None:
                logger.debug("Replacing non-object at %s with defaults", ".".join(path) or "<root>")
            return copy.deepcopy(dict(base))
        merged = {key: copy.deepcopy(value) for key, value in original.items()}
        for key, base_value in base.items():
            merged[key] = deep_merge(original.get(key), base_value, is_empty, (*path, key))
        return merged

    if isinstance(base, list):
        if isinstance(original, Mapping):
            # Arrays sometimes come back keyed by index or name
            original = list(original.values())
        if isinstance(original, list) and not is_empty(original, path):
            return copy.deepcopy(original)
        return copy.deepcopy(base)

    if is_empty(original, path):
        return base
    return copy.deepcopy(original)


def ensure_complete_structure(
    partial: Mapping[str, Any] | None,
    thresholds: Thresholds | None = None,
) -> dict[str, Any]:
    """Return a fully-populated response built from a partial one.

    Running this on its own output returns an equal structure.

    Args:
        partial: Parsed (possibly partial or malformed) response.
        thresholds: Minimum counts; defaults when None.

    Returns:
        Complete response dict in the camelCase wire shape.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    if partial is not None and not isinstance(partial, Mapping):
        logger.warning(
            "Expected a JSON object to complete, got %s - using defaults",
            type(partial).__name__,
        )
        partial = None

    completed: dict[str, Any] = deep_merge(
        partial or {}, DEFAULT_SKELETON, below_minimum_predicate(thresholds)
    )
    logger.debug(
        "Completed structure: %d entities, %d locations, %d words, %d timeline events",
        len(completed["entities"]),
        len(completed["worldMap"]["locations"]),
        len(completed["ancientLanguage"]["vocabulary"]),
        len(completed["analysis"]["timeline"]),
    )
    return completed


def complete_response(
    partial: Mapping[str, Any] | None,
    thresholds: Thresholds | None = None,
) -> GenerationResponse:
    """Complete a partial response and return it as a typed model."""
    return GenerationResponse.model_validate(ensure_complete_structure(partial, thresholds))
