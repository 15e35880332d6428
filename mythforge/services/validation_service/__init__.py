"""Response validation service - completeness, fidelity and creativity gates.

Each gate is advisory: it returns a verdict and logs its reasons, and the
caller decides whether a rejection means regenerating, showing an error, or
accepting degraded content.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from mythforge.memory.myth_response import GenerationPhase
from mythforge.settings import Settings, Thresholds

from . import _completeness, _creativity, _fidelity
from ._completeness import completeness_issues, is_complete
from ._creativity import creativity_issues, is_creative
from ._fidelity import FidelityReport, check_fidelity, extract_key_terms

logger = logging.getLogger(__name__)


class ReviewVerdict(BaseModel):
    """Combined outcome of all validation gates for one response."""

    phase: GenerationPhase | None = Field(default=None, description="Phase that was reviewed")
    complete: bool = Field(description="Enough content for the phase")
    creative: bool = Field(description="No borrowed names or degenerate invented content")
    fidelity: FidelityReport = Field(description="Constraint term coverage")
    completeness_issues: list[str] = Field(default_factory=list)
    creativity_issues: list[str] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        """True only when every gate passed."""
        return self.complete and self.creative and self.fidelity.accepted

    @property
    def retry_hint(self) -> str:
        """Instruction amendment for a regeneration attempt, empty when accepted."""
        if self.accepted:
            return ""
        lines = []
        if self.completeness_issues:
            lines.append("Provide more content: " + "; ".join(self.completeness_issues) + ".")
        if self.creativity_issues:
            lines.append(
                "Invent original names and single-word vocabulary with unique runes: "
                + "; ".join(self.creativity_issues)
                + "."
            )
        if not self.fidelity.accepted:
            lines.append(
                "Reflect these requested elements in the story: "
                + ", ".join(self.fidelity.missing_terms)
                + "."
            )
        return "\n".join(lines)


class ResponseValidationService:
    """Service for judging generated responses against configured thresholds.

    Validates that:
    - Each generation phase produced enough content
    - The story reflects the user's constraint descriptions
    - Names and invented vocabulary are original
    """

    def __init__(self, settings: Settings):
        """Initialize response validation service.

        Args:
            settings: Application settings.
        """
        self.settings = settings
        logger.debug("Initialized ResponseValidationService")

    def is_complete(
        self,
        response: Any,
        phase: GenerationPhase | None = None,
        thresholds: Thresholds | None = None,
    ) -> bool:
        """Check completeness using the configured thresholds unless overridden."""
        return _completeness.is_complete(response, phase, thresholds or self.settings.thresholds())

    def check_fidelity(
        self, response: Any, constraints: Mapping[str, str | None]
    ) -> FidelityReport:
        """Score the story against constraint descriptions."""
        return _fidelity.check_fidelity(
            response,
            constraints,
            min_score=self.settings.min_fidelity_score,
            min_term_length=self.settings.min_term_length,
        )

    def is_creative(self, response: Any, phase: GenerationPhase | None = None) -> bool:
        """Check names and invented vocabulary for originality."""
        return _creativity.is_creative(
            response, phase, min_entity_name_length=self.settings.min_entity_name_length
        )

    def review(
        self,
        response: Any,
        phase: GenerationPhase | None = None,
        constraints: Mapping[str, str | None] | None = None,
        thresholds: Thresholds | None = None,
    ) -> ReviewVerdict:
        """Run every gate on a response.

        Args:
            response: Parsed response (raw dict or GenerationResponse).
            phase: Generation phase, or None for a single-shot generation.
            constraints: Category name to constraint description.
            thresholds: Override for the configured minimum counts.

        Returns:
            ReviewVerdict with each gate's result and the reasons behind it.
        """
        thresholds = thresholds or self.settings.thresholds()
        missing = completeness_issues(response, phase, thresholds)
        unoriginal = creativity_issues(
            response, phase, min_entity_name_length=self.settings.min_entity_name_length
        )
        verdict = ReviewVerdict(
            phase=phase,
            complete=not missing,
            creative=not unoriginal,
            fidelity=self.check_fidelity(response, constraints or {}),
            completeness_issues=missing,
            creativity_issues=unoriginal,
        )
        if verdict.accepted:
            logger.info("Response accepted (%s)", phase.value if phase else "unphased")
        else:
            logger.warning(
                "Response rejected (%s): complete=%s creative=%s fidelity=%.1f%%",
                phase.value if phase else "unphased",
                verdict.complete,
                verdict.creative,
                verdict.fidelity.score,
            )
        return verdict


__all__ = [
    "FidelityReport",
    "ResponseValidationService",
    "ReviewVerdict",
    "check_fidelity",
    "completeness_issues",
    "creativity_issues",
    "extract_key_terms",
    "is_complete",
    "is_creative",
]
