"""Typed view of a generated mythology response.

Generative output is messy: numbers where text belongs, keyed objects where
arrays belong, nulls everywhere. These models accept all of that and coerce
it into the expected shape instead of failing. Field names are snake_case in
Python and camelCase on the wire (``worldMap``, ``runicScript``, ...).
"""

import json
import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from mythforge.utils.normalize import normalize_to_array

logger = logging.getLogger(__name__)


class GenerationPhase(StrEnum):
    """Stage of a two-step generation protocol.

    ``None`` stands for a single-shot (unphased) generation.
    """

    PHASE1 = "phase1"  # story + entities
    PHASE2 = "phase2"  # world map + ancient language + analysis


def _to_text(value: Any) -> str:
    """Coerce any JSON value into display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(_to_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _record_list(key: str) -> BeforeValidator:
    """Build a validator turning array-like input into a list of records.

    Bare strings become ``{key: string}`` so a list of names still yields
    named records.
    """

    def coerce(value: Any) -> list[Any]:
        records = []
        for item in normalize_to_array(value):
            if item is None:
                continue
            if isinstance(item, Mapping | BaseModel):
                records.append(item)
            else:
                logger.debug("Wrapping bare %s value %r into a record", key, item)
                records.append({key: _to_text(item)})
        return records

    return BeforeValidator(coerce)


Text = Annotated[str, BeforeValidator(_to_text)]
TextList = Annotated[list[Text], BeforeValidator(normalize_to_array)]
AnyList = Annotated[list[Any], BeforeValidator(normalize_to_array)]


class _LenientModel(BaseModel):
    """Base for response records: keeps unknown keys, ignores nulls."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Drop null values so field defaults apply; non-objects become empty records."""
        if isinstance(data, BaseModel):
            return data
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        logger.debug("Replacing non-object %s input with an empty record", cls.__name__)
        return {}


class Story(_LenientModel):
    """The narrative itself."""

    title: Text = ""
    text: Text = ""
    mood: Text = ""

    @property
    def word_count(self) -> int:
        """Number of whitespace-separated words in the story text."""
        return len(self.text.split())


class MythicalEntity(_LenientModel):
    """A god, hero, monster or other being of the mythology."""

    id: Text = ""
    name: Text = ""
    type: Text = ""
    archetype: Text = ""
    description: Text = ""
    powers: TextList = Field(default_factory=list)
    relationships: AnyList = Field(default_factory=list)


class Location(_LenientModel):
    """A place on the world map."""

    name: Text = ""
    type: Text = ""
    description: Text = ""


class WorldMap(_LenientModel):
    """Locations and the paths between them."""

    locations: Annotated[list[Location], _record_list("name")] = Field(default_factory=list)
    paths: AnyList = Field(default_factory=list)
    map_description: Text = ""
    total_area: Text = ""


class TimelineEvent(_LenientModel):
    """One step of the mythological timeline."""

    id: Text = ""
    step: int | Text = 0
    title: Text = ""
    description: Text = ""


class SymbolConnection(_LenientModel):
    symbol: Text = ""
    target: Text = ""


class CharacterNode(_LenientModel):
    name: Text = ""
    role: Text = ""
    archetype: Text = ""
    description: Text = ""


class ArchetypeConflict(_LenientModel):
    character1: Text = ""
    character2: Text = ""
    conflict: Text = ""


class ThematicDensity(_LenientModel):
    section: Text = ""
    theme: Text = ""


class SocialCode(_LenientModel):
    """What the culture holds sacred, forbids, and forgives."""

    sacred: Text = ""
    forbidden: Text = ""
    forgivable: Text = ""


class Analysis(_LenientModel):
    """Structural analysis of the story."""

    timeline: Annotated[list[TimelineEvent], _record_list("title")] = Field(default_factory=list)
    symbols: Annotated[list[SymbolConnection], _record_list("symbol")] = Field(
        default_factory=list
    )
    characters: Annotated[list[CharacterNode], _record_list("name")] = Field(
        default_factory=list
    )
    archetype_conflicts: Annotated[list[ArchetypeConflict], _record_list("conflict")] = Field(
        default_factory=list
    )
    thematic_density: Annotated[list[ThematicDensity], _record_list("theme")] = Field(
        default_factory=list
    )
    social_code: SocialCode = Field(default_factory=SocialCode)


class AncientWord(_LenientModel):
    """A word of the invented language."""

    word: Text = ""
    meaning: Text = ""
    pronunciation: Text = ""
    runic_script: Text = ""
    category: Text = ""
    rarity: Text = ""


class AncientLanguage(_LenientModel):
    """The invented language and its vocabulary."""

    vocabulary: Annotated[list[AncientWord], _record_list("word")] = Field(default_factory=list)
    language_name: Text = ""
    description: Text = ""
    writing_system: Text = ""


class Extras(_LenientModel):
    rituals: AnyList = Field(default_factory=list)
    temples: AnyList = Field(default_factory=list)
    prophecies: AnyList = Field(default_factory=list)
    artifacts: AnyList = Field(default_factory=list)


class GenerationResponse(_LenientModel):
    """A complete mythology: story, beings, world, language and analysis."""

    story: Story = Field(default_factory=Story)
    entities: Annotated[list[MythicalEntity], _record_list("name")] = Field(default_factory=list)
    world_map: WorldMap = Field(default_factory=WorldMap)
    analysis: Analysis = Field(default_factory=Analysis)
    ancient_language: AncientLanguage = Field(default_factory=AncientLanguage)
    extras: Extras = Field(default_factory=Extras)

    def to_payload(self) -> dict[str, Any]:
        """Serialize back to the camelCase wire shape, unknown keys included."""
        return self.model_dump(by_alias=True, mode="json")
