"""
Menu Matching Engine.

This module scores free-text speech transcripts against the catalog and
resolves them to products and options.

Menu matching combines several signals per product:
- raw and "cleaned" substring containment (generic words such as
  "와퍼"/"burger"/"set" removed, so "불고기" hits "불고기 와퍼")
- Hangul initial-consonant containment, which survives most STT misspellings
- edit-distance similarity on the raw and cleaned strings
- per-word containment
- agreement between a spoken "set"/"single" qualifier and the product type

The scored list is then reduced to at most two candidates: a single clear
winner, or a pair the customer has to choose between.

Option matching tries, in order, a spoken item number, keyword shortcuts
(default / size / alias) and finally fuzzy text scoring with a confidence
bucket. Low-confidence results are returned but must not be committed.
"""

import logging
import re
from typing import Any, Iterable

from .catalog import Catalog
from .models import Candidate, Option, Product
from .parsers.constants import (
    DEFAULT_OPTION_KEYWORDS,
    LARGE_SIZE_KEYWORDS,
    LARGE_SIZE_MARKERS,
    OPTION_ALIASES,
    REGULAR_SIZE_KEYWORDS,
    REGULAR_SIZE_MARKERS,
    SET_WORDS,
)
from .parsers.deterministic import (
    contains_keyword,
    extract_keywords,
    extract_numbers,
    find_keyword,
    get_chosung,
    normalize,
    remove_common_words,
    remove_words,
    similarity,
    strip_set_single_suffix,
)
from .schemas import Confidence, MenuKeywords, MenuMatchResult, OptionMatchResult

logger = logging.getLogger(__name__)

# =============================================================================
# Scoring Weights
# =============================================================================

RAW_CONTAINMENT_SCORE = 100
CLEANED_CONTAINMENT_SCORE = 120
CHOSUNG_SCORE = 50
CLEANED_SIMILARITY_WEIGHT = 40
RAW_SIMILARITY_WEIGHT = 20
WORD_MATCH_SCORE = 25
WORD_MATCH_MIN_LENGTH = 2
SET_SINGLE_ALIGNMENT_SCORE = 30
MIN_MENU_SCORE = 10  # Candidates must score strictly above this

# =============================================================================
# Reduction Thresholds
# =============================================================================

EXACT_MATCH_SCORE = 100
PAIR_MAX_GAP = 50
CLEAR_WINNER_GAP = 30

# =============================================================================
# Option Matching
# =============================================================================

OPTION_CONTAINMENT_SCORE = 100
OPTION_SIMILARITY_WEIGHT = 50
MIN_OPTION_SCORE = 20
HIGH_CONFIDENCE_SCORE = 90
MEDIUM_CONFIDENCE_SCORE = 60

_LARGE_MARKER_RE = re.compile(LARGE_SIZE_MARKERS, re.IGNORECASE)
_REGULAR_MARKER_RE = re.compile(REGULAR_SIZE_MARKERS, re.IGNORECASE)


def _product_name(product: Product, language: str | None) -> str:
    return normalize(product.display_name(language))


def _is_set_product(product: Product, name: str) -> bool:
    return product.is_set or find_keyword(name, SET_WORDS) is not None


def score_product(text: str, product: Product, keywords: MenuKeywords, language: str | None = None) -> float:
    """
    Score one product against a normalized utterance.

    Args:
        text: Normalized utterance
        product: Product to score
        keywords: Keywords extracted from the utterance
        language: Active language; English names are used for "en"

    Returns:
        Sum of the weighted matching signals
    """
    name = _product_name(product, language)
    cleaned_input = remove_common_words(text)
    cleaned_name = remove_common_words(name)
    input_chosung = get_chosung(text)
    # The skeleton is always taken from the Korean name
    name_chosung = get_chosung(product.name)

    score = 0.0

    if text in name or name in text:
        score += RAW_CONTAINMENT_SCORE

    if cleaned_input and cleaned_name:
        if cleaned_input in cleaned_name or cleaned_name in cleaned_input:
            score += CLEANED_CONTAINMENT_SCORE

    if input_chosung and input_chosung in name_chosung:
        score += CHOSUNG_SCORE

    if cleaned_input and cleaned_name:
        score += similarity(cleaned_input, cleaned_name) * CLEANED_SIMILARITY_WEIGHT

    score += similarity(text, name) * RAW_SIMILARITY_WEIGHT

    for word in cleaned_input.split():
        if len(word) >= WORD_MATCH_MIN_LENGTH and word in cleaned_name:
            score += WORD_MATCH_SCORE

    is_set = _is_set_product(product, name)
    if keywords.is_set and is_set:
        score += SET_SINGLE_ALIGNMENT_SCORE
    elif keywords.is_single and not is_set:
        score += SET_SINGLE_ALIGNMENT_SCORE

    return score


def _reduce_candidates(
    candidates: list[Candidate], keywords: MenuKeywords, language: str | None
) -> list[Candidate]:
    """Cut a sorted candidate list down to one clear winner or a top-2 pair."""
    if not candidates:
        return []

    top_score = candidates[0].score
    second_score = candidates[1].score if len(candidates) > 1 else 0
    gap = top_score - second_score

    # "와퍼" with both "와퍼" and "와퍼 세트" on the menu: let the customer pick
    if not keywords.is_set and not keywords.is_single and len(candidates) >= 2:
        first_base = strip_set_single_suffix(candidates[0].product.display_name(language))
        second_base = strip_set_single_suffix(candidates[1].product.display_name(language))
        if first_base == second_base and gap < PAIR_MAX_GAP:
            logger.debug("Single/set pair for '%s' (gap %.1f)", first_base, gap)
            return candidates[:2]

    if top_score >= EXACT_MATCH_SCORE:
        return candidates[:1]
    if len(candidates) > 1 and gap >= CLEAR_WINNER_GAP:
        return candidates[:1]
    return candidates[:2]


def match_menu(utterance: str, products: Iterable[Product], language: str | None = "ko") -> MenuMatchResult:
    """
    Match an utterance against a list of products.

    Args:
        utterance: Finalized speech transcript
        products: Products to consider (the full catalog or a candidate subset)
        language: Active language code

    Returns:
        MenuMatchResult with at most two candidates, sorted by descending score
    """
    text = normalize(utterance)
    keywords = extract_keywords(text)
    if not text:
        return MenuMatchResult(candidates=[], keywords=keywords)

    scored: list[Candidate] = []
    for product in products:
        if not isinstance(product, Product) or not product.name:
            logger.warning("Skipping malformed product during matching: %r", product)
            continue
        score = score_product(text, product, keywords, language)
        if score > MIN_MENU_SCORE:
            scored.append(Candidate(product=product, score=score))

    # sort() is stable, so equal scores keep catalog order
    scored.sort(key=lambda c: c.score, reverse=True)

    candidates = _reduce_candidates(scored, keywords, language)
    logger.debug("Menu match for '%s'", text)
    logger.info("Menu match: %s", [(c.product.name, round(c.score, 1)) for c in candidates])
    return MenuMatchResult(candidates=candidates, keywords=keywords)


def select_candidate(utterance: str, candidates: list[Candidate], language: str | None = "ko") -> Candidate | None:
    """
    Resolve a disambiguation answer to one of the offered candidates.

    A spoken position k (1..N) picks candidate k-1; any other spoken number
    is treated as no match. Otherwise the utterance is matched against the
    candidate products and rank 1 wins.
    """
    numbers = extract_numbers(utterance)
    if numbers:
        position = numbers[0]
        if 1 <= position <= len(candidates):
            return candidates[position - 1]
        logger.info("Position %d out of range for %d candidates", position, len(candidates))
        return None

    result = match_menu(utterance, [c.product for c in candidates], language)
    if not result.candidates:
        return None
    return result.candidates[0]


# =============================================================================
# Option Matching
# =============================================================================

def _option_names(option: Option) -> list[str]:
    names = [option.name.lower()]
    if option.eng_name:
        names.append(option.eng_name.lower())
    return names


def _option_text_score(text: str, option: Option) -> float:
    """Best containment + similarity score over the option's names."""
    best = 0.0
    for name in _option_names(option):
        score = 0.0
        if text and (text in name or name in text):
            score += OPTION_CONTAINMENT_SCORE
        score += similarity(text, name) * OPTION_SIMILARITY_WEIGHT
        best = max(best, score)
    return best


def _confidence(score: float) -> Confidence:
    if score >= HIGH_CONFIDENCE_SCORE:
        return "high"
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return "medium"
    return "low"


def _default_option(options: list[Option]) -> Option:
    for option in options:
        if option.is_default:
            return option
    return options[0]


def _match_size(text: str, options: list[Option], size_words: list[str], marker_re: re.Pattern) -> Option | None:
    """Pick the option whose name carries the size marker the customer asked for."""
    if not find_keyword(text, size_words):
        return None
    marked = [
        option for option in options
        if option.name and any(marker_re.search(n) for n in [option.name] + [option.eng_name or ""])
    ]
    if not marked:
        return None
    if len(marked) == 1:
        return marked[0]
    # "콜라 큰 거" with both drinks in large: the rest of the utterance decides
    rest = remove_words(text, size_words)
    if not rest:
        return marked[0]
    return max(marked, key=lambda o: _option_text_score(rest, o))


def _match_option_keywords(text: str, options: list[Option]) -> OptionMatchResult | None:
    if find_keyword(text, DEFAULT_OPTION_KEYWORDS):
        return OptionMatchResult(
            selected_option=_default_option(options),
            confidence="high",
            match_type="default",
            score=EXACT_MATCH_SCORE,
        )

    for size_words, marker_re in (
        (LARGE_SIZE_KEYWORDS, _LARGE_MARKER_RE),
        (REGULAR_SIZE_KEYWORDS, _REGULAR_MARKER_RE),
    ):
        option = _match_size(text, options, size_words, marker_re)
        if option:
            return OptionMatchResult(
                selected_option=option,
                confidence="high",
                match_type="size",
                score=EXACT_MATCH_SCORE,
            )

    for term, targets in OPTION_ALIASES.items():
        if not contains_keyword(text, term):
            continue
        for target in targets:
            target = target.lower()
            for option in options:
                if any(target in name for name in _option_names(option)):
                    return OptionMatchResult(
                        selected_option=option,
                        confidence="medium",
                        match_type="alias",
                        score=MEDIUM_CONFIDENCE_SCORE,
                    )
    return None


def match_option(utterance: str, options: list[Option], allow_number_selection: bool = True) -> OptionMatchResult:
    """
    Match an utterance against the options of one group.

    Args:
        utterance: Finalized speech transcript
        options: Ordered options of the group being asked about
        allow_number_selection: Whether a spoken number selects by position

    Returns:
        OptionMatchResult; selected_option is None when nothing matched
    """
    text = normalize(utterance)
    options = [o for o in options if o is not None and o.name]
    if not text or not options:
        return OptionMatchResult()

    if allow_number_selection:
        numbers = extract_numbers(text)
        if numbers:
            index = numbers[0] - 1
            if 0 <= index < len(options):
                logger.debug("Option by number %d: %s", numbers[0], options[index].name)
                return OptionMatchResult(
                    selected_option=options[index],
                    confidence="high",
                    match_type="number",
                    score=EXACT_MATCH_SCORE,
                )
            logger.info("Option number %d out of range (1-%d)", numbers[0], len(options))
            return OptionMatchResult()

    keyword_match = _match_option_keywords(text, options)
    if keyword_match:
        logger.debug(
            "Option by %s keyword: %s", keyword_match.match_type, keyword_match.selected_option.name
        )
        return keyword_match

    best_option, best_score = None, 0.0
    for option in options:
        score = _option_text_score(text, option)
        if score > MIN_OPTION_SCORE and score > best_score:
            best_option, best_score = option, score

    if best_option is None:
        logger.debug("No option matched '%s'", text)
        return OptionMatchResult()

    confidence = _confidence(best_score)
    logger.info("Option match: %s (%.1f, %s)", best_option.name, best_score, confidence)
    return OptionMatchResult(
        selected_option=best_option,
        confidence=confidence,
        match_type="text",
        score=best_score,
    )


# =============================================================================
# Recommendations
# =============================================================================

def map_recommendations(recommendations: Iterable[Any], catalog: Catalog) -> list[Candidate]:
    """
    Turn recommender output into candidates.

    Each recommendation is a dict (or object) carrying ``product_id``
    (``productId`` is accepted too); ``recommendation_reason`` and
    ``similarity_score`` are logged but do not affect ranking. Recommended
    products are equally good, so every candidate scores EXACT_MATCH_SCORE.
    """
    candidates: list[Candidate] = []
    seen: set[int] = set()
    for rec in recommendations or []:
        if isinstance(rec, dict):
            product_id = rec.get("product_id", rec.get("productId"))
            reason = rec.get("recommendation_reason")
        else:
            product_id = getattr(rec, "product_id", None)
            reason = getattr(rec, "recommendation_reason", None)

        product = catalog.get_product(product_id) if product_id is not None else None
        if product is None:
            logger.warning("Recommended product %s is not in the catalog", product_id)
            continue
        if product.id in seen:
            continue
        seen.add(product.id)
        logger.debug("Recommending %s: %s", product.name, reason)
        candidates.append(Candidate(product=product, score=EXACT_MATCH_SCORE))
    return candidates
