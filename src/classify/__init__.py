"""Keyword management and subset classification."""

from src.classify.classifier import classify, classify_text
from src.classify.defaults import DEFAULT_KEYWORDS
from src.classify.keywords import (
    MAX_KEYWORDS,
    DuplicateKeywordError,
    KeywordCapacityError,
    KeywordError,
    KeywordSet,
    KeywordValidationError,
)

__all__ = [
    "DEFAULT_KEYWORDS",
    "MAX_KEYWORDS",
    "DuplicateKeywordError",
    "KeywordCapacityError",
    "KeywordError",
    "KeywordSet",
    "KeywordValidationError",
    "classify",
    "classify_text",
]
