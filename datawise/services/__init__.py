"""
External services for Datawise
"""

from .ai_mapping import (
    AIMappingSuggester,
    MappingSuggestionError,
    normalize_suggestions,
    suggestions_to_mapping,
)

__all__ = [
    'AIMappingSuggester',
    'MappingSuggestionError',
    'normalize_suggestions',
    'suggestions_to_mapping',
]
