# ABOUTME: Canonical Pydantic models for normalized story output and validation results
# ABOUTME: Typed entity fields plus an ordered `extra` mapping for unknown producer metadata

from enum import Enum
from functools import cache
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel


class CanonicalEntity(BaseModel):
    """Base for normalized entities.

    Fields are exposed in snake_case and (de)serialized under their camelCase
    canonical names. Keys the schema does not know about are kept verbatim in
    `extra`, in the order the producer wrote them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    extra: dict[str, Any] = Field(default_factory=dict, description="Unknown producer fields, passed through")

    def to_record(self) -> dict[str, Any]:
        """Serialize back to a flat canonical record.

        Typed fields use their canonical names and are omitted when ``None``.
        `extra` entries are merged at the top level but never replace a typed
        value, so a rejected raw value kept under a typed key only shows up
        when the typed field is empty.
        """
        record: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            if name == "extra":
                continue
            value = getattr(self, name)
            if value is not None:
                record[field.alias or name] = _to_plain(value)
        for key, value in self.extra.items():
            record.setdefault(key, value)
        return record


def _to_plain(value: Any) -> Any:
    if isinstance(value, CanonicalEntity):
        return value.to_record()
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


class StoryMessage(CanonicalEntity):
    """Scripted message shown when a beat opens."""

    sender: str | None = Field(default=None, description="systemName of the sending character")
    content: str | None = Field(default=None, description="Message text")
    languages: list[str] = Field(default_factory=list, description="Language codes used in the message")
    sender_display_name: str | None = None
    translation: str | None = None
    phonetic: str | None = None
    delay_seconds: float | None = Field(default=None, description="Delay before the message is shown")
    message_note: str | None = None


class StoryCharacter(CanonicalEntity):
    """Cast member of the story."""

    system_name: str = Field(description="Stable identifier")
    display_name: str = Field(description="Human readable label")
    is_user: bool = Field(default=False, description="Whether this character is played by the learner")
    role: str | None = None
    personality: str | None = None
    gender: str | None = Field(default=None, description="male, female, neutral, or the producer's value")
    age_group: str | None = None
    region: str | None = None
    voice_config: dict[str, Any] | None = Field(default=None, description="Voice synthesis parameters")
    background_info: str | None = None
    speaking_style: str | None = None


class StoryChat(CanonicalEntity):
    """Conversation (chat room) the learner takes part in."""

    system_name: str
    display_name: str
    conversation_type: Literal["dm", "group"] = "dm"
    participants: list[str] = Field(default_factory=list)
    description: str | None = None
    learning_environment: str | None = None


class StoryBeat(CanonicalEntity):
    """Narrative beat: a step of a conversation with its opening messages."""

    system_name: str
    display_name: str
    conversation_id: str | None = Field(default=None, description="systemName of the chat this beat belongs to")
    sequence_position: int | float = 0
    opening_messages: list[StoryMessage] = Field(default_factory=list)
    participants: list[str] | None = None
    problem_type: str | None = None
    response_suggestions: list[str] = Field(default_factory=list)
    prompt_context: str | dict[str, Any] | None = None
    is_active: bool = True


class StoryInfo(CanonicalEntity):
    """Story header."""

    system_name: str
    display_name: str
    story_type: Literal["story", "aula"] | None = None
    genre: str | None = None
    description: dict[str, Any] | None = Field(default=None, description="Summary and language blurbs")
    settings: dict[str, Any] | None = Field(default=None, description="Target language, level, region, ...")


class NormalizedStoryOutput(BaseModel):
    """Complete normalized story document."""

    story: StoryInfo
    characters: list[StoryCharacter] = Field(default_factory=list)
    chats: list[StoryChat] = Field(default_factory=list)
    beats: list[StoryBeat] = Field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the canonical document shape accepted by the pipeline."""
        return {
            "story": self.story.to_record(),
            "characters": [character.to_record() for character in self.characters],
            "chats": [chat.to_record() for chat in self.chats],
            "beats": [beat.to_record() for beat in self.beats],
        }


@cache
def _field_adapters(model: type[CanonicalEntity]) -> dict[str, tuple[str, TypeAdapter]]:
    adapters: dict[str, tuple[str, TypeAdapter]] = {}
    for name, field in model.model_fields.items():
        if name == "extra":
            continue
        adapters[field.alias or name] = (name, TypeAdapter(field.annotation))
    return adapters


def split_record(
    model: type[CanonicalEntity], record: dict[str, Any]
) -> tuple[dict[str, Any], dict[str, Any], list[tuple[str, Any]]]:
    """Split a canonical record into typed fields, extra fields and rejected values.

    Each value under a typed field's canonical name is checked strictly against
    the field's annotation. ``None`` counts as absent. Rejected values are
    returned as ``(key, value)`` pairs and also kept in the extra mapping under
    the same key so nothing the producer wrote is lost.

    Args:
        model: Target entity model
        record: Record with canonical keys, as produced by a normalizer

    Returns:
        Tuple of (typed, extra, rejected)
    """
    adapters = _field_adapters(model)
    typed: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    rejected: list[tuple[str, Any]] = []

    for key, value in record.items():
        if key not in adapters:
            extra[key] = value
            continue
        if value is None:
            continue
        _, adapter = adapters[key]
        try:
            adapter.validate_python(value, strict=True)
        except ValidationError:
            rejected.append((key, value))
            extra[key] = value
        else:
            typed[key] = value

    return typed, extra, rejected


class IssueCode(str, Enum):
    """Machine readable issue codes."""

    INVALID_JSON = "invalid_json"
    NOT_AN_OBJECT = "not_an_object"
    INVALID_ENTRY = "invalid_entry"
    MISSING_SYSTEM_NAME = "missing_system_name"
    MISSING_DISPLAY_NAME = "missing_display_name"
    MISSING_CONVERSATION_ID = "missing_conversation_id"
    MISSING_SENDER = "missing_sender"
    MISSING_CONTENT = "missing_content"
    UNEXPECTED_TYPE = "unexpected_type"
    UNRECOGNIZED_VALUE = "unrecognized_value"


class Issue(BaseModel):
    """A tolerated discrepancy (warning) or a blocking defect (error)."""

    path: str = Field(description="Locator into the normalized tree, e.g. beats[0].openingMessages[1].sender")
    message: str
    code: IssueCode
    value: Any = Field(default=None, description="Offending value, when useful")


T = TypeVar("T")


class ValidationResult(BaseModel, Generic[T]):
    """Outcome of a validation run.

    `data` is present whenever the input parsed to an object, even when
    `success` is false, so callers can inspect partially valid output.
    """

    success: bool
    data: T | None = None
    warnings: list[Issue] = Field(default_factory=list)
    errors: list[Issue] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def issue_count(self) -> int:
        return len(self.warnings) + len(self.errors)
