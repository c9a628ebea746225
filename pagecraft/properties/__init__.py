"""Property value resolution for pagecraft."""

from .fuzzy import (
    FuzzyPropertyResolver, FuzzyResolution, fuzzy_resolver, string_similarity, find_best_match
)

__all__ = [
    "FuzzyPropertyResolver",
    "FuzzyResolution",
    "fuzzy_resolver",
    "string_similarity",
    "find_best_match",
]
