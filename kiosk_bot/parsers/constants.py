"""
Parser Constants.

This module contains the fixed keyword tables used by the deterministic
parsers and intent detectors: generic catalog words, set/single qualifiers,
number words, size and alias vocabularies, and the per-language intent
keyword sets.

Korean (``ko``) is the primary language of the kiosk; English (``en``) is
supported for product names and intent keywords. Unknown language codes
fall back to Korean.
"""

DEFAULT_LANGUAGE = "ko"

# =============================================================================
# Generic Catalog Words
# =============================================================================

# Words shared by many product names. They carry no discriminating power,
# so they are removed to build the "cleaned" string used for the
# higher-weighted containment test.
COMMON_EXCLUDE_WORDS = [
    "와퍼",
    "버거",
    "세트",
    "단품",
    "메뉴",
    "whopper",
    "burger",
    "set",
    "single",
    "menu",
]

# =============================================================================
# Set / Single Qualifiers
# =============================================================================

SET_WORDS = ["세트", "셋트", "set", "combo", "meal"]
SINGLE_WORDS = ["단품", "single"]

# Suffixes stripped from product names to detect single/set pairs
# ("몬스터와퍼" vs "몬스터와퍼 세트")
SET_SINGLE_SUFFIX_WORDS = ["세트", "단품", "set", "single", "combo", "meal"]

# =============================================================================
# Number Words
# =============================================================================

KOREAN_NUMBER_WORDS = {
    "첫번째": 1, "첫 번째": 1, "첫째": 1,
    "두번째": 2, "두 번째": 2, "둘째": 2,
    "세번째": 3, "세 번째": 3, "셋째": 3,
    "네번째": 4, "네 번째": 4, "넷째": 4,
    "다섯번째": 5, "다섯 번째": 5, "다섯째": 5,
    "하나": 1, "한": 1, "일": 1,
    "둘": 2, "두": 2, "이": 2,
    "셋": 3, "세": 3, "삼": 3,
    "넷": 4, "네": 4, "사": 4,
    "다섯": 5, "오": 5,
    "여섯": 6, "육": 6,
    "일곱": 7, "칠": 7,
    "여덟": 8, "팔": 8,
    "아홉": 9, "구": 9,
    "열": 10, "십": 10,
}

ENGLISH_NUMBER_WORDS = {
    "first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5,
    "sixth": 6, "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10,
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

# Counters that make a single-syllable Korean number unambiguous ("세 번", "두개").
# Without one, "네" is "yes" and "이" is "this".
NUMBER_COUNTERS = ("번", "개", "잔")

# Reserved terms containing syllables that sound like numbers
# ("세트" starts with "세" = three). Removed before number-word scanning.
NUMBER_EXCLUDE_WORDS = ["세트메뉴", "세트", "셋트", "이벤트", "네이버", "네트워크"]

# Quantities above this are treated as item numbers, not quantities
MAX_QUANTITY = 10

# =============================================================================
# Option Keyword Shortcuts
# =============================================================================

DEFAULT_OPTION_KEYWORDS = [
    "기본으로", "기본", "그냥", "그대로",
    "default", "no change", "as is", "standard",
]

LARGE_SIZE_KEYWORDS = [
    "큰거", "큰 거", "라지", "업사이즈", "크게", "큰", "엘", "업",
    "large", "big", "upsize", "l",
]

REGULAR_SIZE_KEYWORDS = [
    "작은거", "작은 거", "레귤러", "기본 사이즈", "작게", "작은", "알",
    "regular", "small", "r",
]

# Markers in option names that encode the size ("코카콜라(L)", "Coke Large")
LARGE_SIZE_MARKERS = r"\(L\)|\bL\b|large|라지"
REGULAR_SIZE_MARKERS = r"\(R\)|\bR\b|regular|레귤러"

# Canonical term -> colloquial synonyms found in option names
OPTION_ALIASES = {
    "감자": ["프렌치프라이", "감자튀김", "fries", "french fry"],
    "콜라": ["코카콜라", "coca cola", "coke"],
    "사이다": ["스프라이트", "sprite"],
    "햄버거": ["버거", "burger"],
    "치즈": ["cheese"],
    "어니언": ["양파", "onion"],
    "fries": ["프렌치프라이", "감자튀김", "french fries", "fries"],
    "coke": ["코카콜라", "coca cola", "coke", "콜라"],
    "cola": ["코카콜라", "coca cola", "coke", "콜라"],
    "sprite": ["사이다", "스프라이트", "sprite"],
    "onion": ["어니언", "양파", "onion"],
    "cheese": ["치즈", "cheese"],
}

# =============================================================================
# Intent Keywords
# =============================================================================

CONFIRM_POSITIVE_KEYWORDS = {
    "ko": ["네", "예", "응", "좋아", "맞아", "그래", "오케이", "ㅇㅋ", "ok", "확인"],
    "en": ["yes", "yeah", "yep", "sure", "ok", "okay", "confirm", "correct", "right"],
}

CONFIRM_NEGATIVE_KEYWORDS = {
    "ko": ["아니", "아뇨", "싫어", "다시", "취소", "안"],
    "en": ["no", "nope", "cancel", "wrong", "not", "again"],
}

# Checked first: the customer wants to go straight to payment
PAYMENT_KEYWORDS = {
    "ko": ["결제", "계산", "지불"],
    "en": ["pay", "checkout", "payment", "check out"],
}

# Explicit "nothing more" phrasing; checked before MORE_ORDER_KEYWORDS
# so "no more" is not read as "more"
NO_MORE_PHRASES = {
    "ko": ["없어", "없습니다", "없어요", "됐어", "됐습니다", "끝", "괜찮"],
    "en": [
        "no more", "nothing", "done", "finish", "finished",
        "thats all", "that's all", "that is all", "i'm good", "im good",
    ],
}

MORE_ORDER_KEYWORDS = {
    "ko": ["추가", "더", "또", "그리고", "네", "예", "응", "있어", "주세요", "주문"],
    "en": ["more", "add", "another", "also", "yes", "yeah", "and", "plus"],
}

# Bare negatives; only consulted after MORE_ORDER_KEYWORDS
MORE_ORDER_NEGATIVE_KEYWORDS = {
    "ko": ["아니요", "아니", "이제", "안"],
    "en": ["no", "nope"],
}

RECOMMENDATION_KEYWORDS = {
    "ko": [
        "추천", "뭐가 좋아", "뭐가 좋을까", "뭐 먹을까",
        "인기", "베스트", "맛있는거", "맛있는 거",
    ],
    "en": [
        "recommend", "suggestion", "suggest", "what should i get",
        "what is good", "what's good", "best", "popular",
    ],
}
