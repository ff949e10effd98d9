# ABOUTME: Static alias tables mapping raw LLM field spellings to canonical field names
# ABOUTME: One immutable table per entity kind; the canonical spelling is always listed last

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType


class EntityKind(str, Enum):
    """Entity kinds found in a generated story document."""

    STORY = "story"
    CHARACTER = "character"
    CHAT = "chat"
    BEAT = "beat"
    MESSAGE = "message"


# Precedence: aliases are applied in table order and a later entry replaces an
# earlier one unless its value is None. Canonical spellings come last so they
# win over every alias, which also makes normalized output a fixed point.

STORY_FIELD_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        # ID fields
        "story_id": "systemName",
        "system_name": "systemName",
        "systemName": "systemName",
        # Display name
        "title": "displayName",
        "display_name": "displayName",
        "displayName": "displayName",
        # Type
        "story_type": "storyType",
        "storyType": "storyType",
    }
)

CHARACTER_FIELD_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        # ID fields
        "id": "systemName",
        "character_id": "systemName",
        "system_name": "systemName",
        "systemName": "systemName",
        # Display name
        "name": "displayName",
        "display_name": "displayName",
        "displayName": "displayName",
        # Demographics
        "age_group": "ageGroup",
        "ageGroup": "ageGroup",
        "gender": "gender",
        "region": "region",
        # Voice configuration
        "voicePersonality": "voiceConfig",
        "voice_personality": "voiceConfig",
        "voice_config": "voiceConfig",
        "voiceConfig": "voiceConfig",
        # User flag
        "is_user": "isUser",
        "isUser": "isUser",
        # Role and backstory
        "role": "role",
        "backstory": "backgroundInfo",
        "background_info": "backgroundInfo",
        "backgroundInfo": "backgroundInfo",
        # Speaking style
        "typing_style": "speakingStyle",
        "typingStyle": "speakingStyle",
        "speaking_style": "speakingStyle",
        "speakingStyle": "speakingStyle",
    }
)

CHAT_FIELD_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        "chat_id": "systemName",
        "id": "systemName",
        "system_name": "systemName",
        "systemName": "systemName",
        "display_title": "displayName",
        "title": "displayName",
        "name": "displayName",
        "display_name": "displayName",
        "displayName": "displayName",
        "type": "conversationType",
        "conversation_type": "conversationType",
        "conversationType": "conversationType",
        "participants": "participants",
        "description": "description",
        "learning_environment": "learningEnvironment",
        "learningEnvironment": "learningEnvironment",
    }
)

BEAT_FIELD_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        # ID fields
        "beat_id": "systemName",
        "id": "systemName",
        "system_name": "systemName",
        "systemName": "systemName",
        # Display name
        "display_title": "displayName",
        "title": "displayName",
        "display_name": "displayName",
        "displayName": "displayName",
        # Conversation reference
        "chat_id": "conversationId",
        "room_id": "conversationId",
        "conversation_id": "conversationId",
        "conversationId": "conversationId",
        # Sequence
        "index": "sequencePosition",
        "sequence_number": "sequencePosition",
        "sequencePosition": "sequencePosition",
        # Messages
        "premade_messages": "openingMessages",
        "messages": "openingMessages",
        "content": "openingMessages",
        "openingMessages": "openingMessages",
        # Response suggestions
        "response_suggestion": "responseSuggestions",
        "response_suggestions": "responseSuggestions",
        "responseSuggestion": "responseSuggestions",
        "responseSuggestions": "responseSuggestions",
        # Problem type
        "problem_type": "problemType",
        "problemType": "problemType",
        # Participants
        "participantsIds": "participants",
        "participants": "participants",
        # Prompt context
        "prompt_context": "promptContext",
        "promptContext": "promptContext",
        # Activation
        "is_active": "isActive",
        "isActive": "isActive",
    }
)

MESSAGE_FIELD_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        "sender_id": "sender",
        "sender": "sender",
        "message": "content",
        "content": "content",
        "language": "languages",
        "languages": "languages",
        "message_note": "messageNote",
        "messageNote": "messageNote",
        "delay_seconds": "delaySeconds",
        "delaySeconds": "delaySeconds",
        "sender_name": "senderDisplayName",
        "senderDisplayName": "senderDisplayName",
    }
)

FIELD_MAPPINGS: Mapping[EntityKind, Mapping[str, str]] = MappingProxyType(
    {
        EntityKind.STORY: STORY_FIELD_MAPPINGS,
        EntityKind.CHARACTER: CHARACTER_FIELD_MAPPINGS,
        EntityKind.CHAT: CHAT_FIELD_MAPPINGS,
        EntityKind.BEAT: BEAT_FIELD_MAPPINGS,
        EntityKind.MESSAGE: MESSAGE_FIELD_MAPPINGS,
    }
)


def aliases_for(canonical: str, kind: EntityKind) -> list[str]:
    """Return every accepted spelling of a canonical field, in precedence order."""
    return [alias for alias, target in FIELD_MAPPINGS[kind].items() if target == canonical]
