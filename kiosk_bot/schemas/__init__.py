"""
Kiosk Schemas.

This package contains the state/action enums and the result records shared
by the matching engine, the state machine and the dispatcher.
"""

from .phases import KioskAction, KioskState
from .result import (
    Confidence,
    MenuKeywords,
    MenuMatchResult,
    OptionMatchResult,
    OptionMatchType,
    TransitionResult,
)

__all__ = [
    # Phases
    "KioskState",
    "KioskAction",
    # Results
    "Confidence",
    "OptionMatchType",
    "MenuKeywords",
    "MenuMatchResult",
    "OptionMatchResult",
    "TransitionResult",
]
