# ABOUTME: Collection resolver locating entity collections under fallback root keys
# ABOUTME: Flattens list or id-keyed map containers into one ordered list of raw records

from collections.abc import Mapping, Sequence
from typing import Any

# Fallback root keys per entity collection, in lookup order. Dotted keys
# address nested containers.
STORY_ROOT_KEYS: tuple[str, ...] = ("story", "story_info")
CHARACTER_ROOT_KEYS: tuple[str, ...] = ("characters", "cast", "entities.characters")
CHAT_ROOT_KEYS: tuple[str, ...] = ("chats", "new_chats", "conversations", "rooms", "entities.chats")
BEAT_ROOT_KEYS: tuple[str, ...] = ("beats", "all_beats")

_MISSING = object()


def lookup_path(document: Mapping[str, Any], dotted_key: str) -> Any:
    """Follow a dotted key through nested mappings.

    Returns a private sentinel when any segment is absent so callers can tell
    a missing key apart from a key holding ``None``.
    """
    current: Any = document
    for segment in dotted_key.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return _MISSING
        current = current[segment]
    return current


def find_first_present(document: Mapping[str, Any], candidates: Sequence[str]) -> tuple[str | None, Any]:
    """Return ``(key, value)`` for the first candidate key present in the document.

    Presence is what counts: a key holding an empty list still wins over the
    candidates after it. A key holding ``None`` counts as absent, as it does in
    the field rewriter. Returns ``(None, None)`` when no candidate is present.
    """
    for key in candidates:
        value = lookup_path(document, key)
        if value is not _MISSING and value is not None:
            return key, value
    return None, None


def flatten_collection(value: Any) -> list[Any]:
    """Flatten a collection container into an ordered list.

    Lists are copied, mappings keyed by arbitrary ids yield their values in
    insertion order, and anything else yields an empty list.
    """
    if isinstance(value, list | tuple):
        return list(value)
    if isinstance(value, Mapping):
        return list(value.values())
    return []


def resolve_collection(document: Mapping[str, Any], candidates: Sequence[str]) -> list[Any]:
    """Select the first present candidate collection and flatten it.

    Collections found under different candidate keys are never merged.
    """
    _, value = find_first_present(document, candidates)
    return flatten_collection(value)
