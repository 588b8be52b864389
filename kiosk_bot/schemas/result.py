"""
Result Structures.

Defines the records returned by the state machine and the matching engine.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from .phases import KioskState

if TYPE_CHECKING:
    from ..models import Candidate, Option, OptionGroup, Product


Confidence = Literal["high", "medium", "low"]
OptionMatchType = Literal["number", "default", "size", "alias", "text"]


@dataclass
class MenuKeywords:
    """Qualifiers and numbers extracted from an utterance."""
    is_set: bool = False
    is_single: bool = False
    quantity: int = 1
    numbers: list[int] = field(default_factory=list)


@dataclass
class MenuMatchResult:
    """Ranked candidates for an utterance, plus the keywords found in it."""
    candidates: list["Candidate"]
    keywords: MenuKeywords


@dataclass
class OptionMatchResult:
    """Outcome of matching an utterance against one option group."""
    selected_option: "Option | None" = None
    confidence: Confidence = "low"
    match_type: OptionMatchType | None = None
    score: float = 0.0

    @property
    def is_committable(self) -> bool:
        """Low-confidence guesses are never committed; the caller re-prompts."""
        return self.selected_option is not None and self.confidence != "low"


@dataclass
class TransitionResult:
    """
    Result of one state machine transition.

    Fields other than new_state are updates for the session; None means
    "leave unchanged".
    """
    new_state: KioskState
    message: str | None = None
    selected_product: "Product | None" = None
    candidates: list["Candidate"] | None = None
    pending_options: list["OptionGroup"] | None = None
    selected_option: "Option | None" = None
