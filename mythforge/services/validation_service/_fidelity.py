"""Fidelity scoring - how much of the user's constraint text the story reflects."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from mythforge.memory.name_lists import CONSTRAINT_SYNONYMS
from mythforge.utils.normalize import as_mapping, get_path

logger = logging.getLogger(__name__)

DEFAULT_MIN_FIDELITY_SCORE = 85.0
DEFAULT_MIN_TERM_LENGTH = 3

_TERM_SPLIT_RE = re.compile(r"[.,!?;:\s]+")
_HAS_LETTER_RE = re.compile(r"[a-z]")

# Synonyms match whole words, allowing a plain inflection ("pursue" -> "pursues")
_SYNONYM_PATTERNS = {
    term: re.compile(
        r"\b(?:" + "|".join(re.escape(synonym) for synonym in synonyms) + r")(?:s|es|d|ed|ing)?\b"
    )
    for term, synonyms in CONSTRAINT_SYNONYMS.items()
}


class FidelityReport(BaseModel):
    """Result of scoring a story against user-supplied constraints."""

    accepted: bool = Field(description="Whether the story reflects the constraints closely enough")
    missing_terms: list[str] = Field(
        default_factory=list, description='Unmatched terms as "category: term"'
    )
    score: float = Field(ge=0.0, le=100.0, description="Percent of constraint terms found")
    total_terms: int = Field(default=0, ge=0, description="Number of constraint terms checked")


def extract_key_terms(text: str, min_term_length: int = DEFAULT_MIN_TERM_LENGTH) -> list[str]:
    """Split constraint text into lowercase terms worth looking for.

    Terms shorter than *min_term_length* or without any letter are dropped.
    Repeated terms are kept, so each occurrence is scored.
    """
    return [
        term
        for term in _TERM_SPLIT_RE.split(text.lower())
        if len(term) >= min_term_length and _HAS_LETTER_RE.search(term)
    ]


def term_in_story(term: str, story_text: str) -> bool:
    """Check a term, or one of its curated synonyms, appears in lowercased story text.

    The term itself may appear anywhere; a synonym must appear as a word.
    """
    if term in story_text:
        return True
    pattern = _SYNONYM_PATTERNS.get(term)
    return pattern is not None and pattern.search(story_text) is not None


def check_fidelity(
    response: Any,
    constraints: Mapping[str, str | None],
    min_score: float = DEFAULT_MIN_FIDELITY_SCORE,
    min_term_length: int = DEFAULT_MIN_TERM_LENGTH,
) -> FidelityReport:
    """Score how faithfully a story reflects user constraint descriptions.

    Args:
        response: Parsed response (raw dict or GenerationResponse).
        constraints: Category name to free-text constraint; empty entries are skipped.
        min_score: Minimum percent of terms that must be found.
        min_term_length: Shorter constraint words are ignored.

    Returns:
        FidelityReport. With no terms to check the score is 100 and the
        report is accepted.
    """
    story_text = get_path(as_mapping(response), "story", "text")
    story_text = story_text.lower() if isinstance(story_text, str) else ""

    missing_terms: list[str] = []
    total_terms = 0
    for category, description in constraints.items():
        if not description:
            continue
        for term in extract_key_terms(description, min_term_length):
            total_terms += 1
            if not term_in_story(term, story_text):
                missing_terms.append(f"{category}: {term}")

    if total_terms == 0:
        logger.debug("No constraint terms to check, fidelity accepted")
        return FidelityReport(accepted=True, missing_terms=[], score=100.0, total_terms=0)

    found_terms = total_terms - len(missing_terms)
    score = found_terms / total_terms * 100
    accepted = score >= min_score
    logger.debug(
        "Fidelity: %d/%d terms found (%.1f%%), missing: %s",
        found_terms,
        total_terms,
        score,
        missing_terms or "none",
    )
    if not accepted:
        logger.warning("Fidelity score %.1f%% below minimum %.1f%%", score, min_score)
    return FidelityReport(
        accepted=accepted, missing_terms=missing_terms, score=score, total_terms=total_terms
    )
