"""
Deterministic Parsers.

Keyword tables, string normalization and the keyword-based intent
detectors. No catalog or session state lives here.
"""

from .deterministic import (
    contains_keyword,
    extract_keywords,
    extract_numbers,
    find_keyword,
    get_chosung,
    normalize,
    remove_common_words,
    similarity,
    strip_set_single_suffix,
)
from .intents import (
    detect_confirmation,
    detect_more_order,
    detect_recommendation,
)

__all__ = [
    # Deterministic
    "normalize",
    "contains_keyword",
    "find_keyword",
    "remove_common_words",
    "strip_set_single_suffix",
    "get_chosung",
    "similarity",
    "extract_numbers",
    "extract_keywords",
    # Intents
    "detect_confirmation",
    "detect_more_order",
    "detect_recommendation",
]
