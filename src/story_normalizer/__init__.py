# ABOUTME: Normalization and validation of LLM-generated language-lesson stories
# ABOUTME: Public API re-exports for the validator, strict policy and canonical models

from story_normalizer.core import (
    IngestionDecision,
    StoryValidationError,
    accept_story_output,
    validate_story_output,
    validate_strict_story_output,
)
from story_normalizer.schema import Issue, IssueCode, NormalizedStoryOutput, ValidationResult

__all__ = [
    "IngestionDecision",
    "Issue",
    "IssueCode",
    "NormalizedStoryOutput",
    "StoryValidationError",
    "ValidationResult",
    "accept_story_output",
    "validate_story_output",
    "validate_strict_story_output",
]
