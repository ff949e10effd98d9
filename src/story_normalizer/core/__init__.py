# ABOUTME: Validation orchestration layer
# ABOUTME: Raw LLM story document → ValidationResult[NormalizedStoryOutput] → ingestion decision

"""
Core Layer: Validation orchestration and acceptance policy

This layer handles:
- Parsing input and resolving entity collections
- Normalizing entities and recording every tolerated discrepancy
- Strict re-validation and the strict-mode ingestion policy

Data Flow: raw document → schema/ normalizers → typed result → caller policy
"""

from .strict import IngestionDecision, StoryValidationError, accept_story_output, validate_strict_story_output
from .validator import StoryValidationResult, validate_story_output

__all__ = [
    "IngestionDecision",
    "StoryValidationError",
    "StoryValidationResult",
    "accept_story_output",
    "validate_strict_story_output",
    "validate_story_output",
]
