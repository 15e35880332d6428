"""Fallback content used to backfill incomplete mythology responses.

Every table here is treated as an immutable constant. Callers that hand the
content to consumers must deep-copy it first (see ``structure_completion``).
"""

from typing import Any

DEFAULT_STORY_TEXT = "A legend was born from the cosmic void..."
DEFAULT_STORY_TITLE = "The Unnamed Legend"
DEFAULT_STORY_MOOD = "mystical"

DEFAULT_ENTITIES: list[dict[str, Any]] = [
    {
        "id": "default-entity-1",
        "name": "The First Being",
        "type": "god",
        "archetype": "primordial",
        "description": "Born from the story's essence",
        "powers": [],
        "relationships": [],
        "rarity": "mythic",
    },
    {
        "id": "default-entity-2",
        "name": "The Cosmic Weaver",
        "type": "god",
        "archetype": "weaver",
        "description": "Shapes the threads of fate",
        "powers": [],
        "relationships": [],
        "rarity": "mythic",
    },
    {
        "id": "default-entity-3",
        "name": "The Eternal Guardian",
        "type": "spirit",
        "archetype": "guardian",
        "description": "Protects the sacred realms",
        "powers": [],
        "relationships": [],
        "rarity": "legendary",
    },
]

DEFAULT_LOCATIONS: list[dict[str, Any]] = [
    {"name": "The Origin Realm", "type": "mystical", "description": "Where the legend began"},
    {
        "name": "The Celestial Apex",
        "type": "sacred",
        "description": "The highest point of creation",
    },
    {"name": "The Void Between", "type": "liminal", "description": "The space between worlds"},
    {
        "name": "The Primordial Sea",
        "type": "elemental",
        "description": "Waters of pure potential",
    },
    {
        "name": "The Eternal Threshold",
        "type": "gateway",
        "description": "Portal to distant realms",
    },
]

DEFAULT_VOCABULARY: list[dict[str, Any]] = [
    {
        "word": "mythar",
        "meaning": "beginning",
        "pronunciation": "MIE-thar",
        "runicScript": "⟨ᛗᚤᚦᚨᚱ⟩",
        "category": "creation",
        "rarity": "common",
    },
    {
        "word": "zephros",
        "meaning": "spirit",
        "pronunciation": "ZEF-rohs",
        "runicScript": "⟨ᛉᛖᚺᚱᛟᛊ⟩",
        "category": "magic",
        "rarity": "common",
    },
    {
        "word": "lumina",
        "meaning": "light",
        "pronunciation": "loo-MEE-nah",
        "runicScript": "⟨ᛚᚢᛗᛁᚾᚨ⟩",
        "category": "gods",
        "rarity": "common",
    },
    {
        "word": "vorthal",
        "meaning": "power",
        "pronunciation": "VOR-thal",
        "runicScript": "⟨ᚹᛟᚱᚦᚨᛚ⟩",
        "category": "magic",
        "rarity": "rare",
    },
    {
        "word": "aethos",
        "meaning": "eternal",
        "pronunciation": "AY-thos",
        "runicScript": "⟨ᚨᛖᚦᛟᛊ⟩",
        "category": "gods",
        "rarity": "rare",
    },
    {
        "word": "nexura",
        "meaning": "connection",
        "pronunciation": "NEK-sur-ah",
        "runicScript": "⟨ᚾᛖᚲᛊᚢᚱᚨ⟩",
        "category": "magic",
        "rarity": "common",
    },
    {
        "word": "solmaris",
        "meaning": "sun and sea",
        "pronunciation": "sol-MAR-is",
        "runicScript": "⟨ᛊᛟᛚᛗᚨᚱᛁᛊ⟩",
        "category": "nature",
        "rarity": "rare",
    },
    {
        "word": "umbrath",
        "meaning": "shadow realm",
        "pronunciation": "UM-brath",
        "runicScript": "⟨ᚢᛗᛒᚱᚨᚦ⟩",
        "category": "death",
        "rarity": "rare",
    },
    {
        "word": "crystara",
        "meaning": "clarity",
        "pronunciation": "kris-TAR-ah",
        "runicScript": "⟨ᚲᚱᚤᛊᛏᚨᚱᚨ⟩",
        "category": "prophecy",
        "rarity": "sacred",
    },
    {
        "word": "drakon",
        "meaning": "ancient wisdom",
        "pronunciation": "DRAH-kon",
        "runicScript": "⟨ᛞᚱᚨᚲᛟᚾ⟩",
        "category": "gods",
        "rarity": "sacred",
    },
]

DEFAULT_TIMELINE: list[dict[str, Any]] = [
    {"id": "beginning", "step": 1, "title": "The Dawn", "description": "When all things began"},
    {
        "id": "rise",
        "step": 2,
        "title": "The Rising",
        "description": "When powers awakened and forces stirred",
    },
    {
        "id": "conflict",
        "step": 3,
        "title": "The Great Conflict",
        "description": "When opposing forces clashed and the world trembled",
    },
    {
        "id": "transformation",
        "step": 4,
        "title": "The Transformation",
        "description": "When the world changed forever",
    },
    {
        "id": "resolution",
        "step": 5,
        "title": "The New Order",
        "description": "When balance was restored and a new age began",
    },
]

DEFAULT_SYMBOLS: list[dict[str, Any]] = [{"symbol": "The Circle", "target": "Eternal cycles"}]
DEFAULT_CHARACTERS: list[dict[str, Any]] = [{"name": "The Protagonist", "role": "hero"}]
DEFAULT_SOCIAL_CODE: dict[str, str] = {
    "sacred": "Truth",
    "forbidden": "Falsehood",
    "forgivable": "Mistakes",
}

# Shape every completed response is backfilled towards.
DEFAULT_SKELETON: dict[str, Any] = {
    "story": {
        "title": DEFAULT_STORY_TITLE,
        "text": DEFAULT_STORY_TEXT,
        "mood": DEFAULT_STORY_MOOD,
    },
    "entities": DEFAULT_ENTITIES,
    "worldMap": {
        "locations": DEFAULT_LOCATIONS,
        "paths": [],
        "mapDescription": "A realm shaped by legend",
        "totalArea": "Infinite",
    },
    "analysis": {
        "timeline": DEFAULT_TIMELINE,
        "symbols": DEFAULT_SYMBOLS,
        "characters": DEFAULT_CHARACTERS,
        "archetypeConflicts": [],
        "thematicDensity": [],
        "socialCode": DEFAULT_SOCIAL_CODE,
    },
    "ancientLanguage": {
        "vocabulary": DEFAULT_VOCABULARY,
        "languageName": "Ancient Tongue",
        "description": "The language of legends",
        "writingSystem": "Symbolic",
    },
    "extras": {
        "rituals": [],
        "temples": [],
        "prophecies": [],
        "artifacts": [],
    },
}

# Returned when there is no opening brace at all to work with.
EMPTY_RESPONSE_JSON = (
    '{"story":{"title":"","text":"","mood":""},"entities":[],'
    '"worldMap":{"locations":[],"paths":[]},'
    '"analysis":{"timeline":[],"symbols":[],"characters":[]},'
    '"ancientLanguage":{"vocabulary":[],"languageName":""},'
    '"extras":{"rituals":[],"temples":[],"prophecies":[],"artifacts":[]}}'
)

# Returned when a fragment could not be repaired; clearly labelled as a placeholder.
PLACEHOLDER_RESPONSE_JSON = (
    '{"story":{"title":"Incomplete Legend","text":"Incomplete response received","mood":"mystical"},'
    '"entities":[{"type":"spirit","name":"Unknown","description":"Response was incomplete"}],'
    '"worldMap":{"locations":[{"name":"Unknown Land","type":"realm","description":"Mysterious realm"}],'
    '"paths":[]},'
    '"analysis":{"timeline":[{"id":"incomplete","step":1,"title":"Story incomplete",'
    '"description":"unknown"}],"symbols":[{"symbol":"...","target":"Incomplete"}],'
    '"characters":[{"name":"Unknown","role":"mysterious"}],'
    '"socialCode":{"sacred":"mystery","forbidden":"unknown","forgivable":"unknown"}},'
    '"ancientLanguage":{"vocabulary":[{"word":"mysteries","meaning":"unknown",'
    '"pronunciation":"unknown"}],"languageName":"Ancient Tongue"},'
    '"extras":{"rituals":[],"temples":[],"prophecies":[],"artifacts":[]}}'
)
