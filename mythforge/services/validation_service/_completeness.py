"""Completeness checks: did a generation phase produce enough content?"""

import logging
from typing import Any

from mythforge.memory.myth_response import GenerationPhase
from mythforge.settings import DEFAULT_THRESHOLDS, Thresholds
from mythforge.utils.normalize import as_mapping, count_words, get_path, normalize_to_array

logger = logging.getLogger(__name__)

# Unphased generations may come in slightly short on vocabulary
UNPHASED_VOCABULARY_SLACK = 2


def _story_issues(response: Any, thresholds: Thresholds) -> list[str]:
    text = get_path(response, "story", "text")
    if not isinstance(text, str) or not text:
        return ["story text is missing"]
    if len(text) < thresholds.min_story_length:
        return [f"story is {len(text)} characters, need {thresholds.min_story_length}"]

    word_count = count_words(text)
    if word_count < thresholds.min_story_word_count:
        return [f"story is {word_count} words, need {thresholds.min_story_word_count}"]
    return []


def _count_issue(label: str, value: Any, minimum: int) -> list[str]:
    count = len(normalize_to_array(value))
    if count < minimum:
        return [f"{count} {label}, need {minimum}"]
    return []


def completeness_issues(
    response: Any,
    phase: GenerationPhase | None = None,
    thresholds: Thresholds | None = None,
) -> list[str]:
    """List the reasons a response falls short for its generation phase.

    PHASE1 checks the story and entities, PHASE2 the locations, vocabulary
    and timeline. An unphased response is checked for story, entities and
    locations, and for vocabulary against a relaxed minimum.

    Args:
        response: Parsed response (raw dict or GenerationResponse), not necessarily completed.
        phase: Generation phase, or None for a single-shot generation.
        thresholds: Minimum counts; defaults when None.

    Returns:
        Human-readable shortfalls, empty when the response is complete.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    data = as_mapping(response)

    entities = data.get("entities")
    locations = get_path(data, "worldMap", "locations")
    vocabulary = get_path(data, "ancientLanguage", "vocabulary")

    if phase == GenerationPhase.PHASE1:
        return _story_issues(data, thresholds) or _count_issue(
            "entities", entities, thresholds.min_entities
        )

    if phase == GenerationPhase.PHASE2:
        return (
            _count_issue("locations", locations, thresholds.min_locations)
            or _count_issue("vocabulary words", vocabulary, thresholds.min_vocabulary)
            or _count_issue(
                "timeline events",
                get_path(data, "analysis", "timeline"),
                thresholds.min_timeline_events,
            )
        )

    return (
        _story_issues(data, thresholds)
        or _count_issue("entities", entities, thresholds.min_entities)
        or _count_issue("locations", locations, thresholds.min_locations)
        or _count_issue(
            "vocabulary words",
            vocabulary,
            thresholds.min_vocabulary - UNPHASED_VOCABULARY_SLACK,
        )
    )


def is_complete(
    response: Any,
    phase: GenerationPhase | None = None,
    thresholds: Thresholds | None = None,
) -> bool:
    """Decide whether a response has enough content for its phase.

    Reasons for a rejection are logged, never raised.
    """
    issues = completeness_issues(response, phase, thresholds)
    phase_label = phase.value if phase else "unphased"
    if issues:
        logger.warning("Rejecting %s response: %s", phase_label, "; ".join(issues))
        return False
    logger.debug("Completeness check passed (%s)", phase_label)
    return True
