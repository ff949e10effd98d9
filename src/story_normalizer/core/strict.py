# ABOUTME: Strict re-validation and ingestion acceptance policy on top of the validator
# ABOUTME: Turns a ValidationResult into either accepted data or a StoryValidationError

from typing import Any

from pydantic import BaseModel, Field

from story_normalizer.config import get_config
from story_normalizer.core.validator import StoryValidationResult, validate_story_output
from story_normalizer.schema.models import Issue, NormalizedStoryOutput
from story_normalizer.utils.logging import with_operation_context


class StoryValidationError(Exception):
    """Raised when a story document is rejected by strict validation."""

    def __init__(self, message: str, issues: list[Issue]):
        super().__init__(message)
        self.issues = issues

    def __str__(self) -> str:
        details = "; ".join(f"{issue.path or '<root>'}: {issue.message}" for issue in self.issues[:5])
        if len(self.issues) > 5:
            details += f"; ... ({len(self.issues) - 5} more)"
        return f"{self.args[0]}: {details}" if details else self.args[0]


def validate_strict_story_output(raw: Any, *, allow_warnings: bool = True) -> NormalizedStoryOutput:
    """Validate raw story output and return the normalized data, or raise.

    Args:
        raw: Raw LLM output (JSON text, bytes or mapping)
        allow_warnings: When False, any warning also rejects the document

    Returns:
        NormalizedStoryOutput ready for persistence

    Raises:
        StoryValidationError: If the document has errors (or warnings, when not allowed)
    """
    result = validate_story_output(raw)

    if not result.success or result.data is None:
        raise StoryValidationError("Story output failed validation", result.errors)
    if not allow_warnings and result.warnings:
        raise StoryValidationError("Story output has warnings in strict mode", result.warnings)

    return result.data


class IngestionDecision(BaseModel):
    """Whether a document is accepted for persistence, and why."""

    accepted: bool
    strict_mode: bool = Field(description="Whether warnings were treated as rejections")
    reason: str
    result: StoryValidationResult


def _decision_summary(decision: IngestionDecision) -> dict[str, Any]:
    return {
        "accepted": decision.accepted,
        "strict_mode": decision.strict_mode,
        "warnings": len(decision.result.warnings),
        "errors": len(decision.result.errors),
    }


@with_operation_context("story_ingestion", summarize=_decision_summary)
def accept_story_output(raw: Any, strict_mode: bool | None = None) -> IngestionDecision:
    """Apply the ingestion policy to a raw story document.

    Documents with errors are always rejected. Documents with warnings but no
    errors are accepted unless strict mode is on.

    Args:
        raw: Raw LLM output
        strict_mode: Override for the configured strict mode, None to use config

    Returns:
        IngestionDecision with the full validation result attached
    """
    strict = get_config().strict_mode if strict_mode is None else strict_mode
    result = validate_story_output(raw)

    if not result.success:
        reason = f"Rejected: {len(result.errors)} error(s)"
        accepted = False
    elif strict and result.warnings:
        reason = f"Rejected in strict mode: {len(result.warnings)} warning(s)"
        accepted = False
    elif result.warnings:
        reason = f"Accepted with {len(result.warnings)} warning(s)"
        accepted = True
    else:
        reason = "Accepted"
        accepted = True

    return IngestionDecision(accepted=accepted, strict_mode=strict, reason=reason, result=result)
