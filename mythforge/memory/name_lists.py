"""Static name and term lists used by the creativity and fidelity validators."""

# Real-world mythological names that generated content must not borrow.
FORBIDDEN_MYTHOLOGICAL_NAMES: tuple[str, ...] = (
    "atlas",
    "helios",
    "selene",
    "zeus",
    "thor",
    "odin",
    "anubis",
    "shiva",
    "apollo",
    "artemis",
    "aphrodite",
    "ares",
    "athena",
    "hades",
    "poseidon",
    "demeter",
    "hera",
    "hestia",
    "hermes",
    "dionysus",
)

# Entity names too generic to count as invented ("god", "the god", ...)
GENERIC_ENTITY_NAMES: frozenset[str] = frozenset(
    {"god", "hero", "monster", "spirit", "demon", "angel", "human"}
)

# Curated synonyms for words that commonly appear in user constraints.
# Entries are matched as whole words with an optional plain inflection.
CONSTRAINT_SYNONYMS: dict[str, tuple[str, ...]] = {
    "seeks": ("desires", "wants", "pursues", "yearns", "longs", "strives"),
    "seek": ("desire", "want", "pursue", "yearn", "strive"),
    "craves": ("desires", "wants", "yearns", "longs", "hungers", "thirsts"),
    "creates": (
        "generates",
        "makes",
        "forms",
        "produces",
        "brings",
        "manifests",
        "creates",
        "fashions",
        "shapes",
        "crafts",
    ),
    "create": (
        "generates",
        "makes",
        "forms",
        "produces",
        "brings",
        "manifests",
        "creates",
        "fashions",
        "shapes",
        "crafts",
    ),
    "become": ("transform", "turn", "evolve", "change", "develop"),
    "come": ("arrive", "appear", "emerge", "manifest", "surface"),
    "shapeshifting": ("transformation", "morphing", "changing", "shifting"),
    "overlapping": ("intersecting", "crossing", "merging", "blending"),
    "emotion": ("feeling", "sentiment", "mood", "affect"),
    "creatures": ("beings", "entities", "monsters", "beasts", "creatures"),
    "unique": ("distinct", "special", "original", "one-of-a-kind", "unprecedented", "novel"),
    "mythological": ("mythic", "legendary", "mythical", "ancient", "mythological"),
    "gods": ("deities", "divinities", "immortals"),
    "power": ("dominion", "might", "strength"),
    "world": ("realm", "cosmos", "land"),
}
