"""Helpers for reading loosely-shaped generated data."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def normalize_to_array(value: Any) -> list[Any]:
    """Read an array-like field as an ordered list.

    Generated JSON sometimes turns an array into an object keyed by index or
    name; its values are used in enumeration order. Anything else that is not
    a list (absent, scalar) reads as empty.

    Args:
        value: Raw field value.

    Returns:
        The list itself, the mapping's values, or an empty list.
    """
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        return list(value.values())
    return []


def count_words(text: Any) -> int:
    """Count whitespace-separated words; non-strings count as zero."""
    if not isinstance(text, str):
        return 0
    return len(text.split())


def as_mapping(response: Any) -> Mapping[str, Any]:
    """Return a response as a plain mapping.

    Accepts raw parsed JSON or a ``GenerationResponse`` model (dumped with
    wire aliases). Anything that is not an object reads as empty.
    """
    if isinstance(response, BaseModel):
        return response.model_dump(by_alias=True)
    if isinstance(response, Mapping):
        return response
    return {}


def get_path(data: Any, *keys: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing."""
    current = data
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current
