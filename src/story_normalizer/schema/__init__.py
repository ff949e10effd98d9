# ABOUTME: Schema layer: alias tables, field rewriting, entity normalizers and canonical models
# ABOUTME: Maps raw LLM field spellings to canonical camelCase records and typed entities

from .aliases import (
    BEAT_FIELD_MAPPINGS,
    CHARACTER_FIELD_MAPPINGS,
    CHAT_FIELD_MAPPINGS,
    FIELD_MAPPINGS,
    MESSAGE_FIELD_MAPPINGS,
    STORY_FIELD_MAPPINGS,
    EntityKind,
)
from .models import (
    Issue,
    IssueCode,
    NormalizedStoryOutput,
    StoryBeat,
    StoryCharacter,
    StoryChat,
    StoryInfo,
    StoryMessage,
    ValidationResult,
)
from .resolver import flatten_collection, resolve_collection
from .transforms import (
    normalize_beat,
    normalize_character,
    normalize_chat,
    normalize_languages,
    normalize_message,
    normalize_messages,
    normalize_response_suggestions,
    normalize_story,
    rewrite_fields,
    transform_entity,
)

__all__ = [
    # Alias tables
    "BEAT_FIELD_MAPPINGS",
    "CHARACTER_FIELD_MAPPINGS",
    "CHAT_FIELD_MAPPINGS",
    "FIELD_MAPPINGS",
    "MESSAGE_FIELD_MAPPINGS",
    "STORY_FIELD_MAPPINGS",
    "EntityKind",
    # Models
    "Issue",
    "IssueCode",
    "NormalizedStoryOutput",
    "StoryBeat",
    "StoryCharacter",
    "StoryChat",
    "StoryInfo",
    "StoryMessage",
    "ValidationResult",
    # Transforms
    "flatten_collection",
    "normalize_beat",
    "normalize_character",
    "normalize_chat",
    "normalize_languages",
    "normalize_message",
    "normalize_messages",
    "normalize_response_suggestions",
    "normalize_story",
    "resolve_collection",
    "rewrite_fields",
    "transform_entity",
]
