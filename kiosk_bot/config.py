"""
Configuration Module for Kiosk Bot
==================================

This module centralizes the settings and environment variables used by the
kiosk core and its console driver. Values are read once at import time;
tests override them by patching the module attributes.

Configuration Categories:
-------------------------
- **Language**: The default conversation language and the languages that have
  keyword tables and prompt translations.

- **Cart**: The duplicate-submission window used by the cart manager.

- **Input Validation**: Maximum transcript length accepted by the dispatcher.

- **Catalog**: Optional path to a JSON catalog for the console driver.

Environment Variables:
----------------------
- KIOSK_LANGUAGE: Default language code (default: "ko")
- DUPLICATE_ADD_WINDOW_SECONDS: Duplicate cart-add window (default: 2.0)
- MAX_TRANSCRIPT_LENGTH: Max transcript length in characters (default: 500)
- KIOSK_CATALOG_PATH: JSON catalog file (default: bundled sample menu)
- LOG_LEVEL: See logging_config.py

Usage:
------
    from kiosk_bot.config import (
        DEFAULT_LANGUAGE,
        DUPLICATE_ADD_WINDOW_SECONDS,
        MAX_TRANSCRIPT_LENGTH,
    )
"""

import os
from typing import List


# =============================================================================
# Language Configuration
# =============================================================================
# Keyword tables and prompt translations exist for these languages only.
# Unknown codes fall back to Korean everywhere.

SUPPORTED_LANGUAGES: List[str] = ["ko", "en"]

_language_env = os.getenv("KIOSK_LANGUAGE", "ko").strip().lower()
DEFAULT_LANGUAGE: str = _language_env if _language_env in SUPPORTED_LANGUAGES else "ko"


def resolve_language(language: str | None) -> str:
    """
    Map a requested language code to a supported one.

    Returns:
        The code itself when supported, else DEFAULT_LANGUAGE
    """
    if language and language.lower() in SUPPORTED_LANGUAGES:
        return language.lower()
    return DEFAULT_LANGUAGE


# =============================================================================
# Cart Configuration
# =============================================================================
# The same product with the same options added twice inside this window is
# treated as a double submission (e.g. a tap and a voice command racing).

DUPLICATE_ADD_WINDOW_SECONDS: float = float(os.getenv("DUPLICATE_ADD_WINDOW_SECONDS", "2.0"))


# =============================================================================
# Input Validation Configuration
# =============================================================================

# Transcripts longer than this are truncated before matching
MAX_TRANSCRIPT_LENGTH: int = int(os.getenv("MAX_TRANSCRIPT_LENGTH", "500"))


# =============================================================================
# Catalog Configuration
# =============================================================================

# Empty means the bundled sample menu
KIOSK_CATALOG_PATH: str = os.getenv("KIOSK_CATALOG_PATH", "")
