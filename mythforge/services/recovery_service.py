"""Recovery service - turns raw generative output into a complete response."""

import copy
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mythforge.memory.default_content import PLACEHOLDER_RESPONSE_JSON
from mythforge.memory.myth_response import GenerationResponse
from mythforge.settings import Settings, Thresholds
from mythforge.utils.json_parser import parse_with_strategies_info, salvage_sections
from mythforge.utils.normalize import as_mapping, get_path, normalize_to_array
from mythforge.utils.structure_completion import ensure_complete_structure

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("story", "entities", "worldMap", "analysis", "ancientLanguage")

# A recovered story shorter than this was most likely cut off mid-sentence
MIN_RECOVERED_STORY_LENGTH = 200

SALVAGE_STRATEGY = "section_salvage"
PLACEHOLDER_STRATEGY = "placeholder"

# (path to a record list, field identifying a record)
MERGE_KEYS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("entities",), "name"),
    (("worldMap", "locations"), "name"),
    (("ancientLanguage", "vocabulary"), "word"),
    (("analysis", "timeline"), "title"),
    (("analysis", "symbols"), "symbol"),
)

# Analysis lists without an identifying field; merged by concatenation
_CONCATENATED_ANALYSIS_LISTS = ("archetypeConflicts", "thematicDensity", "relationships")


@dataclass
class RecoveryStatus:
    """Which sections of a raw response survived recovery."""

    is_recovered: bool
    recovered_sections: list[str] = field(default_factory=list)
    missing_sections: list[str] = field(default_factory=list)
    incomplete_sections: list[str] = field(default_factory=list)


@dataclass
class RecoveryOutcome:
    """Complete response built from raw text, with how it was obtained.

    Attributes:
        response: Fully-populated response in the camelCase wire shape.
        status: Section-level recovery status of the raw text.
        strategy: Recovery strategy that produced the data.
        salvaged: True when the text did not parse as a whole and sections
            were extracted individually (or the placeholder was used).
        recovered: Sections as recovered from the text, before defaults
            were filled in (empty when nothing was recoverable).
    """

    response: dict[str, Any]
    status: RecoveryStatus
    strategy: str
    salvaged: bool = False
    recovered: dict[str, Any] = field(default_factory=dict)

    @property
    def model(self) -> GenerationResponse:
        """Typed view of the response."""
        return GenerationResponse.model_validate(self.response)


def _is_section_incomplete(name: str, section: Any, thresholds: Thresholds) -> bool:
    if name == "story":
        text = get_path(section, "text")
        return not isinstance(text, str) or len(text) < MIN_RECOVERED_STORY_LENGTH
    if name == "entities":
        return len(normalize_to_array(section)) < thresholds.min_entities
    if name == "worldMap":
        locations = normalize_to_array(get_path(section, "locations"))
        return len(locations) < thresholds.min_locations
    if name == "ancientLanguage":
        vocabulary = normalize_to_array(get_path(section, "vocabulary"))
        return len(vocabulary) < thresholds.min_vocabulary
    if name == "analysis":
        if not isinstance(section, Mapping) or "timeline" not in section or "symbols" not in section:
            return True
        if len(normalize_to_array(section["timeline"])) < thresholds.min_timeline_events:
            return True
        social_code = section.get("socialCode")
        return not (
            isinstance(social_code, Mapping) and "sacred" in social_code and "forbidden" in social_code
        )
    return False


def find_missing_sections(
    sections: Mapping[str, Any], thresholds: Thresholds
) -> tuple[list[str], list[str]]:
    """Classify required sections as missing or incomplete.

    Args:
        sections: Parsed or salvaged top-level sections.
        thresholds: Minimum counts for list content.

    Returns:
        (missing section names, incomplete section names)
    """
    missing: list[str] = []
    incomplete: list[str] = []
    for name in REQUIRED_SECTIONS:
        section = sections.get(name)
        if not section:
            missing.append(name)
        elif _is_section_incomplete(name, section, thresholds):
            incomplete.append(name)
    return missing, incomplete


def merge_by_key(original: Any, generated: Any, key: str) -> list[Any]:
    """Merge two record lists, deduplicating on *key*.

    When either list is empty the other is returned as is. Otherwise a
    generated record replaces the original record with the same key in its
    original position, new keys are appended, and records without the key
    are dropped.
    """
    original_items = normalize_to_array(original)
    generated_items = normalize_to_array(generated)
    if not original_items:
        return generated_items
    if not generated_items:
        return original_items

    merged: dict[Any, Any] = {}
    for item in (*original_items, *generated_items):
        item_key = item.get(key) if isinstance(item, Mapping) else None
        if item_key is not None:
            merged[item_key] = item
    return list(merged.values())


def merge_response_sections(generated: Any, original: Any) -> dict[str, Any]:
    """Merge sections regenerated on retry into a partially recovered response.

    Record lists are merged by their identifying field (see ``MERGE_KEYS``);
    the other analysis lists are concatenated. Single values and whole
    objects prefer the generated side when it has one, and extras are
    combined with generated keys winning. Neither input is modified.

    Args:
        generated: Sections produced by the retry (dict or GenerationResponse).
        original: Response recovered from the earlier attempt.

    Returns:
        The merged response. It is not backfilled; pass it through
        ``ensure_complete_structure`` for the full shape.
    """
    generated = as_mapping(generated)
    original = as_mapping(original)

    def newest(*keys: str, default: Any = "") -> Any:
        for source in (generated, original):
            value = get_path(source, *keys)
            if value:
                return value
        return default

    merged: dict[str, Any] = {
        "story": newest("story", default={"title": "", "text": "", "mood": "standard"}),
        "worldMap": {
            "paths": newest("worldMap", "paths", default=[]),
            "mapDescription": newest("worldMap", "mapDescription"),
            "totalArea": newest("worldMap", "totalArea"),
        },
        "analysis": {
            "socialCode": newest(
                "analysis",
                "socialCode",
                default={"sacred": "", "forbidden": "", "forgivable": ""},
            ),
        },
        "ancientLanguage": {
            "languageName": newest("ancientLanguage", "languageName"),
            "description": newest("ancientLanguage", "description"),
            "writingSystem": newest("ancientLanguage", "writingSystem"),
        },
        "extras": {
            **as_mapping(original.get("extras")),
            **as_mapping(generated.get("extras")),
        },
    }

    for path, key in MERGE_KEYS:
        records = merge_by_key(get_path(original, *path), get_path(generated, *path), key)
        *parents, name = path
        target = merged
        for parent in parents:
            target = target[parent]
        target[name] = records

    analysis = merged["analysis"]
    for name in _CONCATENATED_ANALYSIS_LISTS:
        analysis[name] = [
            *normalize_to_array(get_path(original, "analysis", name)),
            *normalize_to_array(get_path(generated, "analysis", name)),
        ]
    characters = newest("analysis", "characters", default=None)
    if characters is not None:
        analysis["characters"] = characters

    logger.debug(
        "Merged regenerated sections: %d entities, %d locations, %d words",
        len(merged["entities"]),
        len(merged["worldMap"]["locations"]),
        len(merged["ancientLanguage"]["vocabulary"]),
    )
    return copy.deepcopy(merged)


class RecoveryService:
    """Service for recovering complete responses from raw generative output.

    Never returns a null response: unparseable text is salvaged section by
    section, and text with nothing salvageable yields the placeholder
    response, always backfilled to the full shape.
    """

    def __init__(self, settings: Settings):
        """Initialize recovery service.

        Args:
            settings: Application settings.
        """
        self.settings = settings
        logger.debug("Initialized RecoveryService")

    def recover(self, raw_text: str | None, thresholds: Thresholds | None = None) -> RecoveryOutcome:
        """Recover a complete response from raw text.

        Sections are classified as recovered, missing or incomplete before
        any defaults are filled in.

        Args:
            raw_text: Raw generative-source output.
            thresholds: Override for the configured minimum counts.

        Returns:
            RecoveryOutcome with the completed response and recovery status.
        """
        thresholds = thresholds or self.settings.thresholds()
        result = parse_with_strategies_info(raw_text, thresholds)

        if result.success and result.raw_data is not None:
            sections: dict[str, Any] = result.raw_data
            strategy = result.repair_applied or "direct"
            salvaged = False
        else:
            sections = salvage_sections(raw_text)
            salvaged = True
            if sections:
                strategy = SALVAGE_STRATEGY
                logger.info("Salvaged sections from broken JSON: %s", sorted(sections))
            else:
                strategy = PLACEHOLDER_STRATEGY
                logger.warning("Nothing recoverable in response, using placeholder content")

        missing, incomplete = find_missing_sections(sections, thresholds)
        status = RecoveryStatus(
            is_recovered=not missing and not incomplete,
            recovered_sections=[name for name in sections if name not in missing],
            missing_sections=missing,
            incomplete_sections=incomplete,
        )
        logger.debug(
            "Recovery status: recovered=%s missing=%s incomplete=%s",
            status.recovered_sections,
            missing,
            incomplete,
        )

        base = sections if sections else json.loads(PLACEHOLDER_RESPONSE_JSON)
        response = ensure_complete_structure(base, thresholds)
        return RecoveryOutcome(
            response=response,
            status=status,
            strategy=strategy,
            salvaged=salvaged,
            recovered=sections,
        )
