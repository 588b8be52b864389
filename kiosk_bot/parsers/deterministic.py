"""
Deterministic Parsing Functions.

This module contains the string-based helpers shared by the matching engine
and the intent detectors: normalization, keyword containment, the "cleaned"
string, the Hangul phonetic skeleton, edit-distance similarity and
number/qualifier extraction.

Nothing here depends on the catalog or the session; every function is a
pure transformation of its inputs.
"""

import logging
import re
from functools import lru_cache

from rapidfuzz.distance import Levenshtein

from ..schemas import MenuKeywords
from .constants import (
    COMMON_EXCLUDE_WORDS,
    ENGLISH_NUMBER_WORDS,
    KOREAN_NUMBER_WORDS,
    MAX_QUANTITY,
    NUMBER_COUNTERS,
    NUMBER_EXCLUDE_WORDS,
    SET_SINGLE_SUFFIX_WORDS,
    SET_WORDS,
    SINGLE_WORDS,
)

logger = logging.getLogger(__name__)

# Hangul syllables block: U+AC00 .. U+D7A3, 588 syllables per initial consonant
HANGUL_BASE = 0xAC00
HANGUL_SYLLABLE_COUNT = 11172
SYLLABLES_PER_INITIAL = 588
CHOSUNG = [
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ", "ㅅ",
    "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
]

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_SPLIT_RE = re.compile(r"[\s,.!?~]+")
_DIGITS_RE = re.compile(r"\d+")


# =============================================================================
# Normalization
# =============================================================================

def normalize(text: str | None) -> str:
    """Lowercase, trim and collapse whitespace."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.strip().lower())


def tokenize(text: str) -> list[str]:
    """Split on whitespace and light punctuation, dropping empties."""
    return [tok for tok in _TOKEN_SPLIT_RE.split(text) if tok]


def _is_latin(word: str) -> bool:
    return word.isascii()


def _is_single_syllable(word: str) -> bool:
    return len(word) == 1 and not word.isascii()


@lru_cache(maxsize=512)
def _latin_word_pattern(word: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(word) + r"(?![a-z0-9])")


def contains_keyword(text: str, keyword: str) -> bool:
    """
    Check whether a normalized text contains a keyword.

    Latin keywords match on word boundaries so "no" does not fire inside
    "know". Single-syllable Hangul keywords ("네", "안") only match as a
    standalone token. Longer Hangul keywords match as substrings, since
    Korean particles attach directly to words.
    """
    if not text or not keyword:
        return False
    if _is_latin(keyword):
        return _latin_word_pattern(keyword).search(text) is not None
    if _is_single_syllable(keyword):
        return keyword in tokenize(text)
    return keyword in text


def find_keyword(text: str, keywords: list[str]) -> str | None:
    """Return the first keyword contained in text, or None."""
    for keyword in keywords:
        if contains_keyword(text, keyword):
            return keyword
    return None


def remove_words(text: str, words: list[str]) -> str:
    """Remove words from a normalized text (Latin on word boundaries, Hangul as substrings)."""
    cleaned = text
    for word in words:
        if _is_latin(word):
            cleaned = _latin_word_pattern(word).sub(" ", cleaned)
        else:
            # Replace with a space; deleting outright can glue words together
            cleaned = cleaned.replace(word, " ")
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def remove_common_words(text: str) -> str:
    """Build the cleaned string: text without generic catalog words."""
    cleaned = remove_words(normalize(text), COMMON_EXCLUDE_WORDS)
    logger.debug("Cleaned '%s' -> '%s'", text, cleaned)
    return cleaned


def strip_set_single_suffix(name: str) -> str:
    """Base name of a product with set/single qualifiers removed."""
    return remove_words(normalize(name), SET_SINGLE_SUFFIX_WORDS)


# =============================================================================
# Phonetic Skeleton
# =============================================================================

def get_chosung(text: str) -> str:
    """
    Extract the initial consonant of every Hangul syllable in text.

    Non-Hangul characters are ignored, so "불고기 와퍼" -> "ㅂㄱㄱㅇㅍ".
    """
    result = []
    for char in text:
        code = ord(char) - HANGUL_BASE
        if 0 <= code < HANGUL_SYLLABLE_COUNT:
            result.append(CHOSUNG[code // SYLLABLES_PER_INITIAL])
    return "".join(result)


# =============================================================================
# Similarity
# =============================================================================

def similarity(a: str, b: str) -> float:
    """Normalized edit-distance similarity in [0, 1] (1.0 for two empty strings)."""
    return Levenshtein.normalized_similarity(a.lower(), b.lower())


# =============================================================================
# Keyword / Number Extraction
# =============================================================================

def _build_number_pattern() -> re.Pattern:
    # Longest words first so "두번째" wins over "두" at the same position
    words = sorted(
        list(KOREAN_NUMBER_WORDS) + list(ENGLISH_NUMBER_WORDS),
        key=len,
        reverse=True,
    )
    return re.compile("|".join(re.escape(w) for w in words))


NUMBER_WORD_PATTERN = _build_number_pattern()


def _is_standalone_number(text: str, start: int, end: int) -> bool:
    """The number word is not embedded in a longer word."""
    before_ok = start == 0 or not text[start - 1].isalnum()
    after = text[end:]
    after_ok = not after or not after[0].isalnum() or after.startswith(NUMBER_COUNTERS)
    return before_ok and after_ok


def _has_counter(text: str, start: int, end: int) -> bool:
    """A single-syllable number word starts a token and is followed by a counter."""
    if start > 0 and text[start - 1].isalnum():
        return False
    return text[end:].lstrip().startswith(NUMBER_COUNTERS)


def extract_numbers(text: str) -> list[int]:
    """
    Extract digits and number words, in order of appearance, deduplicated.

    Reserved terms from NUMBER_EXCLUDE_WORDS are blanked out first so the
    "세" of "세트" is not read as three.
    """
    text = normalize(text)
    for word in NUMBER_EXCLUDE_WORDS:
        text = text.replace(word, " " * len(word))

    found: list[tuple[int, int]] = []
    for match in _DIGITS_RE.finditer(text):
        found.append((match.start(), int(match.group())))

    for match in NUMBER_WORD_PATTERN.finditer(text):
        word, start, end = match.group(), match.start(), match.end()
        if word in ENGLISH_NUMBER_WORDS:
            if _is_standalone_number(text, start, end):
                found.append((start, ENGLISH_NUMBER_WORDS[word]))
        elif len(word) == 1:
            if _has_counter(text, start, end):
                found.append((start, KOREAN_NUMBER_WORDS[word]))
        elif start == 0 or not text[start - 1].isalnum():
            found.append((start, KOREAN_NUMBER_WORDS[word]))

    numbers: list[int] = []
    for _, value in sorted(found, key=lambda pair: pair[0]):
        if value not in numbers:
            numbers.append(value)
    return numbers


def extract_keywords(text: str) -> MenuKeywords:
    """Extract set/single qualifiers, spoken numbers and quantity from an utterance."""
    text = normalize(text)
    numbers = extract_numbers(text)
    quantity = numbers[0] if numbers and numbers[0] <= MAX_QUANTITY else 1
    keywords = MenuKeywords(
        is_set=find_keyword(text, SET_WORDS) is not None,
        is_single=find_keyword(text, SINGLE_WORDS) is not None,
        quantity=quantity,
        numbers=numbers,
    )
    logger.debug("Keywords for '%s': %s", text, keywords)
    return keywords
