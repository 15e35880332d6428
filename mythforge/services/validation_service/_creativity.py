"""Creativity checks - borrowed mythology names and degenerate invented content."""

import logging
import re
from typing import Any

from mythforge.memory.myth_response import GenerationPhase
from mythforge.memory.name_lists import FORBIDDEN_MYTHOLOGICAL_NAMES, GENERIC_ENTITY_NAMES
from mythforge.utils.normalize import as_mapping, get_path, normalize_to_array

logger = logging.getLogger(__name__)

DEFAULT_MIN_ENTITY_NAME_LENGTH = 3

_FORBIDDEN_NAME_PATTERNS = tuple(
    (name, re.compile(rf"(?<![a-z]){re.escape(name)}(?![a-z])", re.IGNORECASE))
    for name in FORBIDDEN_MYTHOLOGICAL_NAMES
)
_WHITESPACE_RE = re.compile(r"\s")
_WORD_PART_SPLIT_RE = re.compile(r"[\s\-_]+")


def _record_names(records: Any) -> list[str]:
    names = []
    for record in normalize_to_array(records):
        if isinstance(record, dict):
            name = record.get("name")
            if name is None or name == "":
                continue
            # Numeric names are checked by their text
            names.append(name if isinstance(name, str) else str(name))
    return names


def _visible_names(data: Any) -> list[str]:
    """Story title plus entity, character and location names."""
    names = []
    title = get_path(data, "story", "title")
    if isinstance(title, str) and title:
        names.append(title)
    names.extend(_record_names(data.get("entities")))
    names.extend(_record_names(get_path(data, "analysis", "characters")))
    names.extend(_record_names(get_path(data, "worldMap", "locations")))
    return names


def _forbidden_name_issues(names: list[str]) -> list[str]:
    issues = []
    for text in names:
        for name, pattern in _FORBIDDEN_NAME_PATTERNS:
            if pattern.search(text):
                issues.append(f'mythological name "{name}" found in "{text}"')
    return issues


def _entity_name_issues(entities: Any, min_name_length: int) -> list[str]:
    issues = []
    for entity_name in _record_names(entities):
        stripped = entity_name.strip()
        if not stripped:
            continue
        if len(stripped) < min_name_length:
            issues.append(f'entity name "{stripped}" is too short')
            continue
        lowered = stripped.lower()
        if any(lowered in (generic, f"the {generic}") for generic in GENERIC_ENTITY_NAMES):
            issues.append(f'entity name "{stripped}" is too generic')
    return issues


def _vocabulary_issues(vocabulary: Any) -> list[str]:
    issues = []
    seen_scripts: set[str] = set()
    for entry in normalize_to_array(vocabulary):
        if not isinstance(entry, dict):
            continue
        word = entry.get("word")
        word = word.strip() if isinstance(word, str) else ""

        script = entry.get("runicScript")
        if isinstance(script, str) and script:
            script = script.strip()
            if script in seen_scripts:
                issues.append(f'"{word}" shares runes with another word: {script}')
            seen_scripts.add(script)

        if _WHITESPACE_RE.search(word):
            issues.append(f'"{word}" is a multi-word phrase')
        elif len(_WORD_PART_SPLIT_RE.split(word.lower())) > 1:
            issues.append(f'"{word}" looks like compound English')
    return issues


def creativity_issues(
    response: Any,
    phase: GenerationPhase | None = None,
    min_entity_name_length: int = DEFAULT_MIN_ENTITY_NAME_LENGTH,
) -> list[str]:
    """List originality problems in a response.

    PHASE2 output carries no names of its own, so it has no issues.

    Args:
        response: Parsed response (raw dict or GenerationResponse).
        phase: Generation phase, or None for a single-shot generation.
        min_entity_name_length: Shorter entity names are rejected.

    Returns:
        Human-readable problems, empty when the response is original enough.
    """
    if phase == GenerationPhase.PHASE2:
        return []

    data = as_mapping(response)
    return (
        _forbidden_name_issues(_visible_names(data))
        + _entity_name_issues(data.get("entities"), min_entity_name_length)
        + _vocabulary_issues(get_path(data, "ancientLanguage", "vocabulary"))
    )


def is_creative(
    response: Any,
    phase: GenerationPhase | None = None,
    min_entity_name_length: int = DEFAULT_MIN_ENTITY_NAME_LENGTH,
) -> bool:
    """Decide whether a response is original enough to accept.

    Which rule fired is only logged; the return value is a plain verdict.
    """
    issues = creativity_issues(response, phase, min_entity_name_length)
    for issue in issues:
        logger.warning("Creativity error: %s", issue)
    return not issues
