# ABOUTME: Validation orchestrator turning raw LLM story output into NormalizedStoryOutput
# ABOUTME: Parses, resolves collections, normalizes entities and accumulates warnings/errors

"""
Pipeline: raw document → resolved collections → normalized records → typed entities.

Only unparsable text and a non-object root stop the pipeline. Every other defect
is recorded as an issue and the pipeline continues, so callers always get the
full issue list and, once the input parsed, the normalized data.
"""

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from story_normalizer.schema.aliases import STORY_FIELD_MAPPINGS
from story_normalizer.schema.models import (
    CanonicalEntity,
    Issue,
    IssueCode,
    NormalizedStoryOutput,
    StoryBeat,
    StoryCharacter,
    StoryChat,
    StoryInfo,
    StoryMessage,
    ValidationResult,
    split_record,
)
from story_normalizer.schema.resolver import (
    BEAT_ROOT_KEYS,
    CHARACTER_ROOT_KEYS,
    CHAT_ROOT_KEYS,
    STORY_ROOT_KEYS,
    find_first_present,
    resolve_collection,
)
from story_normalizer.schema.transforms import (
    normalize_beat,
    normalize_character,
    normalize_chat,
    normalize_story,
    rewrite_fields,
)
from story_normalizer.utils.logging import get_logger, story_context

logger = get_logger(__name__)

UNTITLED_STORY_NAME = "untitled"
UNTITLED_STORY_TITLE = "Untitled"

StoryValidationResult = ValidationResult[NormalizedStoryOutput]


@dataclass
class _IssueLog:
    """Append-only warning and error lists for one run."""

    warnings: list[Issue] = field(default_factory=list)
    errors: list[Issue] = field(default_factory=list)

    def warn(self, path: str, code: IssueCode, message: str, value: Any = None) -> None:
        self.warnings.append(Issue(path=path, code=code, message=message, value=value))

    def error(self, path: str, code: IssueCode, message: str, value: Any = None) -> None:
        self.errors.append(Issue(path=path, code=code, message=message, value=value))


def _fatal(code: IssueCode, message: str, value: Any = None) -> StoryValidationResult:
    logger.warning("Rejected story output", code=code.value, reason=message)
    return StoryValidationResult(success=False, errors=[Issue(path="", code=code, message=message, value=value)])


def _parse_document(raw: Any) -> dict[str, Any] | StoryValidationResult:
    """Turn the caller's input into a private document dict, or a fatal result."""
    parsed = raw.to_record() if isinstance(raw, NormalizedStoryOutput) else raw
    if isinstance(parsed, bytes | bytearray):
        try:
            parsed = parsed.decode("utf-8")
        except UnicodeDecodeError as e:
            return _fatal(IssueCode.INVALID_JSON, f"Invalid JSON input: not UTF-8 text ({e.reason})")

    if isinstance(parsed, str):
        try:
            parsed = json.loads(parsed)
        except json.JSONDecodeError as e:
            return _fatal(
                IssueCode.INVALID_JSON, f"Invalid JSON input: {e.msg} (line {e.lineno}, column {e.colno})"
            )

    if not isinstance(parsed, Mapping):
        return _fatal(IssueCode.NOT_AN_OBJECT, "Input must be an object", value=type(parsed).__name__)

    # Private copy: nothing in the result aliases the caller's input
    return copy.deepcopy(dict(parsed))


def _entry_record(entry: Any, path: str, issues: _IssueLog) -> Any:
    if isinstance(entry, Mapping):
        return entry
    issues.warn(path, IssueCode.INVALID_ENTRY, f"Expected an object at {path}", value=entry)
    return {}


def _screen(model: type[CanonicalEntity], record: dict[str, Any], path: str, issues: _IssueLog):
    typed, extra, rejected = split_record(model, record)
    for key, value in rejected:
        issues.warn(
            f"{path}.{key}",
            IssueCode.UNEXPECTED_TYPE,
            f"Unexpected value type for {key}: {type(value).__name__}",
            value=value,
        )
    return typed, extra


def _build_story(document: dict[str, Any], issues: _IssueLog) -> StoryInfo:
    root_key, raw = find_first_present(document, STORY_ROOT_KEYS)
    if root_key is not None and not isinstance(raw, Mapping):
        issues.warn("story", IssueCode.INVALID_ENTRY, f"Expected an object under '{root_key}'", value=raw)
    if not isinstance(raw, Mapping):
        raw = {}

    record = normalize_story(raw)

    raw_type = rewrite_fields(raw, STORY_FIELD_MAPPINGS).get("storyType")
    if raw_type is not None and "storyType" not in record:
        issues.warn(
            "story.storyType",
            IssueCode.UNRECOGNIZED_VALUE,
            "Story type must be 'story' or 'aula'; value ignored",
            value=raw_type,
        )

    typed, extra = _screen(StoryInfo, record, "story", issues)

    system_name = typed.get("systemName")
    if not system_name:
        issues.error("story.systemName", IssueCode.MISSING_SYSTEM_NAME, "Story is missing systemName (story_id)")
    if not typed.get("displayName"):
        issues.warn("story.displayName", IssueCode.MISSING_DISPLAY_NAME, "Story is missing displayName (title)")
        typed["displayName"] = system_name or UNTITLED_STORY_TITLE
    if not system_name:
        typed["systemName"] = UNTITLED_STORY_NAME

    return StoryInfo.model_validate({**typed, "extra": extra})


def _build_character(entry: Any, index: int, issues: _IssueLog) -> StoryCharacter:
    path = f"characters[{index}]"
    record = normalize_character(_entry_record(entry, path, issues))
    typed, extra = _screen(StoryCharacter, record, path, issues)

    if not typed.get("systemName"):
        issues.warn(
            f"{path}.systemName",
            IssueCode.MISSING_SYSTEM_NAME,
            f"Character at index {index} missing systemName (id)",
        )
        typed["systemName"] = f"character_{index}"
    if not typed.get("displayName"):
        typed["displayName"] = typed["systemName"]

    return StoryCharacter.model_validate({**typed, "extra": extra})


def _build_chat(entry: Any, index: int, issues: _IssueLog) -> StoryChat:
    path = f"chats[{index}]"
    record = normalize_chat(_entry_record(entry, path, issues))
    typed, extra = _screen(StoryChat, record, path, issues)

    if not typed.get("systemName"):
        issues.warn(
            f"{path}.systemName",
            IssueCode.MISSING_SYSTEM_NAME,
            f"Chat at index {index} missing systemName (chat_id)",
        )
        typed["systemName"] = f"chat_{index}"
    if not typed.get("displayName"):
        typed["displayName"] = typed["systemName"]

    return StoryChat.model_validate({**typed, "extra": extra})


def _build_message(record: dict[str, Any], path: str, issues: _IssueLog) -> StoryMessage:
    typed, extra = _screen(StoryMessage, record, path, issues)

    if not typed.get("sender"):
        issues.warn(f"{path}.sender", IssueCode.MISSING_SENDER, "Message missing sender (sender_id)", value=record)
    if not typed.get("content"):
        issues.warn(f"{path}.content", IssueCode.MISSING_CONTENT, "Message missing content (message)", value=record)

    return StoryMessage.model_validate({**typed, "extra": extra})


def _build_beat(entry: Any, index: int, issues: _IssueLog) -> StoryBeat:
    path = f"beats[{index}]"
    record = normalize_beat(_entry_record(entry, path, issues))
    messages = record.pop("openingMessages")
    typed, extra = _screen(StoryBeat, record, path, issues)

    if not typed.get("systemName"):
        issues.warn(
            f"{path}.systemName",
            IssueCode.MISSING_SYSTEM_NAME,
            f"Beat at index {index} missing systemName (beat_id)",
        )
        typed["systemName"] = f"beat_{index}"
    if not typed.get("displayName"):
        typed["displayName"] = typed["systemName"]
    if not typed.get("conversationId"):
        issues.warn(
            f"{path}.conversationId",
            IssueCode.MISSING_CONVERSATION_ID,
            f"Beat {typed['systemName']} missing conversationId (chat_id)",
        )

    typed["openingMessages"] = [
        _build_message(message, f"{path}.openingMessages[{position}]", issues)
        for position, message in enumerate(messages)
    ]

    return StoryBeat.model_validate({**typed, "extra": extra})


def validate_story_output(raw: Any) -> StoryValidationResult:
    """Validate and normalize raw LLM story output.

    Accepts JSON text (``str`` or ``bytes``), an already parsed mapping, or a
    previously normalized `NormalizedStoryOutput`. The input is never mutated.

    Args:
        raw: Raw LLM output

    Returns:
        ValidationResult whose `data` is present unless the input could not be
        parsed into an object. `success` is true iff no errors were recorded.
    """
    with story_context(input_type=type(raw).__name__):
        document = _parse_document(raw)
        if isinstance(document, ValidationResult):
            return document

        issues = _IssueLog()
        story = _build_story(document, issues)

        with story_context(story=story.system_name):
            characters = [
                _build_character(entry, index, issues)
                for index, entry in enumerate(resolve_collection(document, CHARACTER_ROOT_KEYS))
            ]
            chats = [
                _build_chat(entry, index, issues)
                for index, entry in enumerate(resolve_collection(document, CHAT_ROOT_KEYS))
            ]
            beats = [
                _build_beat(entry, index, issues)
                for index, entry in enumerate(resolve_collection(document, BEAT_ROOT_KEYS))
            ]

            output = NormalizedStoryOutput(story=story, characters=characters, chats=chats, beats=beats)

            logger.debug(
                "Validated story output",
                characters=len(characters),
                chats=len(chats),
                beats=len(beats),
                warnings=len(issues.warnings),
                errors=len(issues.errors),
            )

    return StoryValidationResult(
        success=not issues.errors,
        data=output,
        warnings=issues.warnings,
        errors=issues.errors,
    )

