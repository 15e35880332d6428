"""JSON recovery for raw generative-text responses.

Generative sources truncate output, wrap JSON in prose or code fences, and
emit near-JSON with trailing commas or unquoted keys. ``parse_with_strategies``
tries escalating strategies, first success wins:

1. Greedy outer-brace match, parsed directly, then via advanced completion.
2. A fenced ```json (or bare ```) block, same two attempts.
3. The span from the first ``{`` to the last ``}``, same two attempts.
4. Common-issue text fixes applied to the whole text, then the brace match.
5. Truncated tail: everything from the first ``{`` through advanced completion.

Nothing here raises on bad input unless strict mode is requested.
"""

import json
import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from mythforge.memory.default_content import EMPTY_RESPONSE_JSON, PLACEHOLDER_RESPONSE_JSON
from mythforge.settings import Thresholds
from mythforge.utils.exceptions import JSONParseError
from mythforge.utils.structure_completion import ensure_complete_structure

logger = logging.getLogger(__name__)

SECTION_NAMES = ("story", "entities", "worldMap", "analysis", "ancientLanguage", "extras")

# Preambles generative sources put before the JSON, tried in order
_PREAMBLE_PATTERNS = (
    re.compile(r"^.*?```json\s*", re.IGNORECASE),
    re.compile(r"^.*?here's the json:?\s*", re.IGNORECASE),
    re.compile(r"^.*?json response:?\s*", re.IGNORECASE),
    re.compile(r"^.*?response:?\s*", re.IGNORECASE),
    re.compile(r"^[^{]*"),
)
_TRAILING_FENCE_RE = re.compile(r"```\s*$")
_OUTER_BRACES_RE = re.compile(r"\{[\s\S]*\}")
_CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)(\w+):")
_SINGLE_QUOTED_VALUE_RE = re.compile(r":\s*'([^']*)'")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


class Container(StrEnum):
    """Kind of bracket left open by a truncated fragment."""

    OBJECT = "object"
    ARRAY = "array"


_OPENERS = {"{": Container.OBJECT, "[": Container.ARRAY}
_CLOSERS = {Container.OBJECT: "}", Container.ARRAY: "]"}


@dataclass
class ParseResult:
    """Structured result from JSON recovery with diagnostic information.

    Records which strategies were attempted and which one succeeded.
    ``raw_data`` is the object as extracted or repaired; ``data`` is the same
    object after structural completion when a repair was needed.
    """

    data: dict[str, Any] | None = None
    raw_data: dict[str, Any] | None = None
    success: bool = False
    repair_applied: str | None = None
    strategies_tried: list[str] = field(default_factory=list)
    original_error: str | None = None

    def __bool__(self) -> bool:
        """Allow ParseResult to be used in boolean context."""
        return self.success


class CompletionOutcome(StrEnum):
    """How advanced completion produced its JSON text."""

    EMPTY_SKELETON = "empty_skeleton"  # no opening brace at all
    AS_IS = "as_is"  # parsed after stripping preamble
    BALANCED = "balanced"  # open strings and brackets were closed
    COMMA_TRUNCATED = "comma_truncated"  # cut at last comma, then closed
    PLACEHOLDER = "placeholder"  # unrepairable; placeholder response


def try_parse_json(candidate: str | None) -> dict[str, Any] | None:
    """Parse a candidate string as a JSON object.

    Args:
        candidate: String to parse.

    Returns:
        The parsed object, or None if parsing fails or the JSON is not an object.
    """
    if not candidate:
        return None
    try:
        parsed = json.loads(candidate.strip())
    except json.JSONDecodeError as e:
        logger.debug("try_parse failed: %s (input preview: %.100s...)", e, candidate)
        return None
    if not isinstance(parsed, dict):
        logger.debug("Parsed JSON is a %s, not an object", type(parsed).__name__)
        return None
    return parsed


def fix_common_json_issues(text: str) -> str:
    """Apply text fixes for frequent near-JSON mistakes.

    Strips trailing commas before closing brackets, quotes bare object keys,
    turns single-quoted values into double-quoted ones and removes control
    characters.
    """
    fixed = _TRAILING_COMMA_RE.sub(r"\1", text)
    fixed = _BARE_KEY_RE.sub(r'\1"\2":', fixed)
    fixed = _SINGLE_QUOTED_VALUE_RE.sub(r': "\1"', fixed)
    return _CONTROL_CHARS_RE.sub("", fixed)


def _iterate_json_chars(text: str, start: int = 0) -> Iterator[tuple[int, str, bool]]:
    """Iterate through JSON text characters, tracking string context.

    A backslash is yielded itself and consumes exactly the next character,
    which is never yielded. Quotes toggle string context and are reported as
    outside the string.

    Args:
        text: JSON text to iterate.
        start: Index to start scanning from (outside any string).

    Yields:
        Tuples of (index, character, in_string).
    """
    in_string = False
    escape_next = False

    for i in range(start, len(text)):
        char = text[i]
        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            yield i, char, in_string
            continue
        if char == '"':
            in_string = not in_string
            yield i, char, False
            continue
        yield i, char, in_string


def _scan_open_containers(text: str) -> tuple[list[Container], bool, bool]:
    """Scan text tracking open brackets, string context and pending escapes.

    Returns:
        (stack of open containers, ends inside a string, ends with a pending escape)
    """
    stack: list[Container] = []
    in_string = False
    last_index, last_char = -1, ""

    for i, char, inside in _iterate_json_chars(text):
        last_index, last_char = i, char
        if char == '"':
            in_string = not in_string
        elif inside:
            continue
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in "}]" and stack:
            stack.pop()

    escape_pending = last_char == "\\" and last_index == len(text) - 1
    return stack, in_string, escape_pending


def close_open_structures(text: str) -> str:
    """Close every string and bracket a truncated fragment left open.

    Open containers are closed innermost first. Before closing an object a
    dangling ``:`` gets an empty string value and a dangling ``,`` is
    dropped; before closing an array a dangling ``,`` is dropped.

    Args:
        text: JSON fragment, possibly truncated.

    Returns:
        The fragment with all open contexts closed (not necessarily valid JSON).
    """
    working = text.strip()
    stack, in_string, escape_pending = _scan_open_containers(working)

    if escape_pending:
        working = working[:-1]
    if in_string:
        working += '"'

    while stack:
        container = stack.pop()
        working = working.rstrip()
        if container is Container.OBJECT and working.endswith(":"):
            working += '""'
        elif working.endswith(","):
            working = working[:-1]
        working += _CLOSERS[container]

    return working


def _last_structural_comma(text: str) -> int:
    """Index of the last comma outside string literals, or -1."""
    return max(
        (i for i, char, in_string in _iterate_json_chars(text) if char == "," and not in_string),
        default=-1,
    )


def _canonical(data: dict[str, Any], thresholds: Thresholds | None) -> str:
    return json.dumps(
        ensure_complete_structure(data, thresholds),
        ensure_ascii=False,
        separators=(",", ":"),
    )


def _repair_fragment(fragment: str) -> tuple[dict[str, Any] | None, CompletionOutcome]:
    """Close a fragment's open structures and parse the result."""
    parsed = try_parse_json(close_open_structures(fragment))
    if parsed is not None:
        logger.debug("Repaired fragment by closing open structures")
        return parsed, CompletionOutcome.BALANCED

    # Drop the half-written member after the last comma and close again
    last_comma = _last_structural_comma(fragment)
    if last_comma > 0:
        parsed = try_parse_json(close_open_structures(fragment[:last_comma]))
        if parsed is not None:
            logger.debug("Repaired fragment by truncating at last comma")
            return parsed, CompletionOutcome.COMMA_TRUNCATED

    logger.warning("Could not repair fragment, using placeholder response")
    return None, CompletionOutcome.PLACEHOLDER


def _advanced_completion(text: str) -> tuple[str, dict[str, Any] | None, CompletionOutcome]:
    """Strip preambles and repair a fragment without backfilling it.

    Returns:
        (stripped text, repaired object or None, outcome). The object is None
        only for the placeholder outcome.
    """
    cleaned = text.strip()

    for pattern in _PREAMBLE_PATTERNS:
        match = pattern.match(cleaned)
        if match and match.group(0):
            remainder = cleaned[match.end() :].strip()
            if remainder.startswith("{"):
                cleaned = remainder
                break

    cleaned = _TRAILING_FENCE_RE.sub("", cleaned).strip()

    if not cleaned.startswith("{"):
        first_brace = cleaned.find("{")
        if first_brace == -1:
            logger.debug("No opening brace found, returning empty skeleton")
            return cleaned, json.loads(EMPTY_RESPONSE_JSON), CompletionOutcome.EMPTY_SKELETON
        cleaned = cleaned[first_brace:]

    parsed = try_parse_json(cleaned)
    if parsed is not None:
        return cleaned, parsed, CompletionOutcome.AS_IS

    repaired, outcome = _repair_fragment(cleaned)
    return cleaned, repaired, outcome


def perform_advanced_completion(text: str, thresholds: Thresholds | None = None) -> str:
    """Turn a raw, possibly truncated fragment into parseable JSON text.

    Strips preambles ("here's the json:", code fences, leading prose) and a
    trailing fence, then closes open strings and brackets. Never fails:

    - no opening brace at all gives a minimal empty skeleton;
    - a fragment that parses after stripping is returned as is;
    - a repaired fragment is completed and re-serialized canonically;
    - an unrepairable fragment gives a placeholder response.

    Args:
        text: Raw fragment.
        thresholds: Minimum counts used when completing a repaired fragment.

    Returns:
        JSON text that always parses to an object.
    """
    cleaned, repaired, outcome = _advanced_completion(text)
    if outcome is CompletionOutcome.EMPTY_SKELETON:
        return EMPTY_RESPONSE_JSON
    if outcome is CompletionOutcome.AS_IS:
        return cleaned
    if repaired is None:
        return PLACEHOLDER_RESPONSE_JSON
    return _canonical(repaired, thresholds)


def _extract_outer_braces(text: str) -> str | None:
    match = _OUTER_BRACES_RE.search(text)
    return match.group(0) if match else None


def _extract_code_block(text: str) -> str | None:
    match = _CODE_BLOCK_RE.search(text)
    return match.group(1) if match else None


def _extract_first_to_last_brace(text: str) -> str | None:
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    return text[first : last + 1]


def _extract_fixed_outer_braces(text: str) -> str | None:
    return _extract_outer_braces(fix_common_json_issues(text))


def _extract_truncated_tail(text: str) -> str | None:
    first = text.find("{")
    return text[first:] if first != -1 else None


# (name, extractor, try direct parse first)
_STRATEGIES: tuple[tuple[str, Callable[[str], str | None], bool], ...] = (
    ("outer_braces", _extract_outer_braces, True),
    ("code_block", _extract_code_block, True),
    ("first_to_last_brace", _extract_first_to_last_brace, True),
    ("common_fixes", _extract_fixed_outer_braces, True),
    ("truncated_tail", _extract_truncated_tail, False),
)


def parse_with_strategies_info(
    text: str | None, thresholds: Thresholds | None = None
) -> ParseResult:
    """Recover a JSON object from raw text with diagnostic information.

    Args:
        text: Raw generative-source output.
        thresholds: Minimum counts used when completing a repaired fragment.

    Returns:
        ParseResult with data, success status, and the strategy that worked.
        ``repair_applied`` is ``"<strategy>"`` for a direct parse and
        ``"<strategy>+<completion outcome>"`` when completion was needed.
        ``raw_data`` holds the object as recovered, before any backfilling.
    """
    trimmed = (text or "").strip()
    strategies_tried: list[str] = []

    for name, extract, try_direct in _STRATEGIES:
        candidate = extract(trimmed)
        if candidate is None:
            continue
        strategies_tried.append(name)

        if try_direct:
            parsed = try_parse_json(candidate)
            if parsed is not None:
                logger.debug("Recovered JSON with strategy %s", name)
                return ParseResult(
                    data=parsed,
                    raw_data=parsed,
                    success=True,
                    repair_applied=name,
                    strategies_tried=strategies_tried,
                )

        _cleaned, repaired, outcome = _advanced_completion(candidate)
        if repaired is not None:
            logger.info("Recovered JSON with strategy %s (%s)", name, outcome.value)
            if outcome in (CompletionOutcome.BALANCED, CompletionOutcome.COMMA_TRUNCATED):
                data = ensure_complete_structure(repaired, thresholds)
            else:
                data = repaired
            return ParseResult(
                data=data,
                raw_data=repaired,
                success=True,
                repair_applied=f"{name}+{outcome.value}",
                strategies_tried=strategies_tried,
            )
        logger.debug("Strategy %s failed", name)

    logger.warning("No recoverable JSON structure (tried: %s)", strategies_tried or "none")
    return ParseResult(
        data=None,
        success=False,
        repair_applied=None,
        strategies_tried=strategies_tried,
        original_error=f"No valid JSON found. Preview: {trimmed[:200]}",
    )


def parse_with_strategies(
    text: str | None, strict: bool = False, thresholds: Thresholds | None = None
) -> dict[str, Any] | None:
    """Recover a JSON object from raw generative-source text.

    Args:
        text: Raw generative-source output.
        strict: If True, raises JSONParseError instead of returning None.
        thresholds: Minimum counts used when completing a repaired fragment.

    Returns:
        The recovered object, or None when nothing is recoverable.

    Raises:
        JSONParseError: If strict=True and no structure could be recovered.
    """
    result = parse_with_strategies_info(text, thresholds)
    if result.success:
        return result.data
    if strict:
        raise JSONParseError(
            result.original_error or "No valid JSON found",
            response_preview=(text or "")[:500],
            expected_type="dict",
        )
    return None


def _find_matching_close(text: str, start: int, open_char: str, close_char: str) -> int:
    """Index of the bracket closing the one at *start*, ignoring string contents; -1 if none."""
    depth = 0
    for i, char, in_string in _iterate_json_chars(text, start):
        if in_string:
            continue
        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _extract_value_at(text: str, start: int) -> str | None:
    """Raw JSON text of the object, array or string value starting at *start*."""
    if start >= len(text):
        return None
    first_char = text[start]
    if first_char in "{[":
        close_char = "}" if first_char == "{" else "]"
        end = _find_matching_close(text, start, first_char, close_char)
        return text[start : end + 1] if end != -1 else None
    if first_char == '"':
        # The opening quote is yielded first; the next quote closes the string
        quotes = (i for i, char, _ in _iterate_json_chars(text, start) if char == '"')
        next(quotes)
        end = next(quotes, -1)
        return text[start : end + 1] if end != -1 else None
    return None


def salvage_sections(text: str | None) -> dict[str, Any]:
    """Pull whole top-level sections out of broken JSON one at a time.

    A response that fails to parse as a whole often still holds complete
    sections (a finished story before a truncated world map). Each section
    is located by its key and extracted with a string-aware bracket scan.

    Args:
        text: Raw generative-source output.

    Returns:
        The sections that parsed, keyed by section name (possibly empty).
    """
    if not text:
        return {}

    parsed = try_parse_json(text)
    if parsed is not None:
        return parsed

    sections: dict[str, Any] = {}
    for name in SECTION_NAMES:
        match = re.search(rf'"{name}"\s*:\s*', text)
        if not match:
            continue
        raw_value = _extract_value_at(text, match.end())
        if raw_value is None:
            logger.debug("Section %s is truncated, skipping", name)
            continue
        try:
            sections[name] = json.loads(raw_value)
        except json.JSONDecodeError as e:
            logger.debug("Section recovery failed: %s (%s)", name, e)
            continue
        logger.debug("Section recovered: %s", name)

    return sections
