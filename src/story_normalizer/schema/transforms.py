# ABOUTME: Field rewriter and per-entity normalizers for raw LLM story output
# ABOUTME: Renames aliased keys to canonical names and applies kind-specific coercions

"""
Transform layer: raw LLM records → canonical, still untyped, records.

Each normalizer renames fields through its entity's alias table and then applies
coercions with a defined fallback for every input. Normalizers never raise and
never mutate the record they are given; they always return a new dict.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from story_normalizer.schema.aliases import (
    BEAT_FIELD_MAPPINGS,
    CHARACTER_FIELD_MAPPINGS,
    CHAT_FIELD_MAPPINGS,
    FIELD_MAPPINGS,
    MESSAGE_FIELD_MAPPINGS,
    STORY_FIELD_MAPPINGS,
    EntityKind,
)
from story_normalizer.schema.resolver import flatten_collection

GENDERS = frozenset({"male", "female", "neutral"})
STORY_TYPES = frozenset({"story", "aula"})

CONVERSATION_TYPE_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "dm": "dm",
        "individual": "dm",
        "1:1": "dm",
        "one-on-one": "dm",
        "group": "group",
        "group_chat": "group",
    }
)
DEFAULT_CONVERSATION_TYPE = "dm"

# Raw beat keys that may hold the opening messages, in lookup order
BEAT_MESSAGE_SOURCES: tuple[str, ...] = ("premade_messages", "openingMessages", "messages", "content")


def rewrite_fields(record: Any, mapping: Mapping[str, str]) -> dict[str, Any]:
    """Rename aliased keys of a flat record to their canonical names.

    When several aliases of one canonical field are present, they are applied in
    the mapping's order and a later alias replaces an earlier one unless its
    value is ``None``; falsy values such as ``False`` or ``0`` still count.
    Unknown keys pass through unchanged and keep their position. A non-mapping
    input yields an empty record.

    Args:
        record: Raw record as produced by the model
        mapping: Alias table ``{alias: canonical}``

    Returns:
        New dict with canonical keys
    """
    if not isinstance(record, Mapping):
        return {}

    resolved: dict[str, Any] = {}
    for alias, canonical in mapping.items():
        if alias in record and (canonical not in resolved or record[alias] is not None):
            resolved[canonical] = record[alias]

    result: dict[str, Any] = {}
    for key, value in record.items():
        canonical = mapping.get(key)
        if canonical is None:
            result.setdefault(key, value)
        elif canonical not in result:
            result[canonical] = resolved[canonical]
    return result


def transform_entity(kind: EntityKind | str, record: Any) -> dict[str, Any]:
    """Rename a record's fields using the alias table for the given entity kind."""
    return rewrite_fields(record, FIELD_MAPPINGS[EntityKind(kind)])


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list | tuple):
        return [item for item in value if isinstance(item, str)]
    return []


def normalize_languages(value: Any) -> list[str]:
    """Normalize a language field to a list of codes.

    ``"es"`` → ``["es"]``, lists keep only their string elements, anything
    else (including ``None``) → ``[]``.
    """
    return _string_list(value)


def normalize_response_suggestions(value: Any) -> list[str]:
    """Normalize response suggestions with the same scalar-or-list rule as languages."""
    return _string_list(value)


def normalize_message(raw: Any) -> dict[str, Any]:
    """Normalize one scripted message."""
    message = rewrite_fields(raw, MESSAGE_FIELD_MAPPINGS)
    message["languages"] = normalize_languages(message.get("languages"))
    return message


def normalize_messages(container: Any) -> list[dict[str, Any]]:
    """Normalize a message container given either as a list or as an id-keyed map."""
    return [normalize_message(message) for message in flatten_collection(container)]


def normalize_character(raw: Any) -> dict[str, Any]:
    """Normalize a cast member."""
    character = rewrite_fields(raw, CHARACTER_FIELD_MAPPINGS)

    if not isinstance(character.get("isUser"), bool):
        character["isUser"] = False

    gender = character.get("gender")
    if isinstance(gender, str) and gender.lower() in GENDERS:
        character["gender"] = gender.lower()

    return character


def normalize_conversation_type(value: Any) -> str:
    """Map a raw conversation type onto ``dm`` or ``group``; unknown values become ``dm``."""
    if value is None:
        return DEFAULT_CONVERSATION_TYPE
    return CONVERSATION_TYPE_SYNONYMS.get(str(value).lower(), DEFAULT_CONVERSATION_TYPE)


def normalize_chat(raw: Any) -> dict[str, Any]:
    """Normalize a conversation (chat room)."""
    chat = rewrite_fields(raw, CHAT_FIELD_MAPPINGS)
    chat["conversationType"] = normalize_conversation_type(chat.get("conversationType"))

    if not isinstance(chat.get("participants"), list):
        chat["participants"] = []

    return chat


def _first_non_empty(raw: Any, keys: tuple[str, ...]) -> Any:
    if not isinstance(raw, Mapping):
        return None
    for key in keys:
        if raw.get(key):
            return raw[key]
    return None


def normalize_beat(raw: Any) -> dict[str, Any]:
    """Normalize a narrative beat and its opening messages."""
    beat = rewrite_fields(raw, BEAT_FIELD_MAPPINGS)

    beat["openingMessages"] = normalize_messages(_first_non_empty(raw, BEAT_MESSAGE_SOURCES))
    beat["responseSuggestions"] = normalize_response_suggestions(beat.get("responseSuggestions"))

    position = beat.get("sequencePosition")
    if isinstance(position, bool) or not isinstance(position, int | float):
        beat["sequencePosition"] = 0

    if not isinstance(beat.get("isActive"), bool):
        beat["isActive"] = True

    return beat


def normalize_story_type(value: Any) -> str | None:
    """Return ``story`` or ``aula`` for a case-insensitive match, otherwise ``None``."""
    if isinstance(value, str) and value.lower() in STORY_TYPES:
        return value.lower()
    return None


def normalize_story(raw: Any) -> dict[str, Any]:
    """Normalize the story header."""
    story = rewrite_fields(raw, STORY_FIELD_MAPPINGS)

    if isinstance(story.get("description"), str):
        story["description"] = {"summary": story["description"]}

    story_type = normalize_story_type(story.pop("storyType", None))
    if story_type is not None:
        story["storyType"] = story_type

    return story
