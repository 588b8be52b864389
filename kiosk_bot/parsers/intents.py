"""
Intent Detectors.

Keyword-based classification of short customer replies: yes/no
confirmation, "anything else?" answers and recommendation requests.
Each detector takes the active language code; unknown codes use the
Korean tables.
"""

import logging
from typing import Literal

from .constants import (
    CONFIRM_NEGATIVE_KEYWORDS,
    CONFIRM_POSITIVE_KEYWORDS,
    DEFAULT_LANGUAGE,
    MORE_ORDER_KEYWORDS,
    MORE_ORDER_NEGATIVE_KEYWORDS,
    NO_MORE_PHRASES,
    PAYMENT_KEYWORDS,
    RECOMMENDATION_KEYWORDS,
)
from .deterministic import find_keyword, normalize

logger = logging.getLogger(__name__)

ConfirmationIntent = Literal["yes", "no", "unknown"]
MoreOrderIntent = Literal["yes", "pay", "no", "unknown"]


def _table(tables: dict[str, list[str]], language: str | None) -> list[str]:
    return tables.get(language or DEFAULT_LANGUAGE, tables[DEFAULT_LANGUAGE])


def detect_confirmation(text: str, language: str | None = DEFAULT_LANGUAGE) -> ConfirmationIntent:
    """
    Classify a reply to "is this order correct?".

    Negatives are checked first, so "no, that's not right" is "no" even
    though "right" is a positive word.
    """
    text = normalize(text)
    if not text:
        return "unknown"
    if find_keyword(text, _table(CONFIRM_NEGATIVE_KEYWORDS, language)):
        return "no"
    if find_keyword(text, _table(CONFIRM_POSITIVE_KEYWORDS, language)):
        return "yes"
    return "unknown"


def detect_more_order(text: str, language: str | None = DEFAULT_LANGUAGE) -> MoreOrderIntent:
    """
    Classify a reply to "anything else?".

    Returns:
        "pay" for payment words, explicit "no more" phrases and bare
        negatives; "yes" for more/add words; "unknown" otherwise.
        "No more items" and "pay now" both mean proceed to payment, so
        "no" is never produced.
    """
    text = normalize(text)
    if not text:
        return "unknown"

    keyword = find_keyword(text, _table(PAYMENT_KEYWORDS, language))
    if keyword:
        logger.debug("More-order '%s': payment keyword '%s'", text, keyword)
        return "pay"

    keyword = find_keyword(text, _table(NO_MORE_PHRASES, language))
    if keyword:
        logger.debug("More-order '%s': no-more phrase '%s'", text, keyword)
        return "pay"

    keyword = find_keyword(text, _table(MORE_ORDER_KEYWORDS, language))
    if keyword:
        logger.debug("More-order '%s': more keyword '%s'", text, keyword)
        return "yes"

    if find_keyword(text, _table(MORE_ORDER_NEGATIVE_KEYWORDS, language)):
        return "pay"

    return "unknown"


def detect_recommendation(text: str, language: str | None = DEFAULT_LANGUAGE) -> bool:
    """Check whether the customer is asking for a recommendation."""
    text = normalize(text)
    return find_keyword(text, _table(RECOMMENDATION_KEYWORDS, language)) is not None
