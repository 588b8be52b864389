"""
Kiosk Bot: conversational core of a voice-driven fast-food ordering kiosk.

Speech transcripts go in; state transitions and prompt text come out.

Usage:
    from kiosk_bot import KioskController, load_sample_catalog

    controller = KioskController(load_sample_catalog())
    controller.on_customer_detected()
    result = controller.handle_transcript("불고기 와퍼 세트 주세요")
    print(result.message)
"""

from .catalog import Catalog, load_catalog, load_catalog_file, load_sample_catalog
from .dispatcher import KioskController
from .errors import CatalogError, InvalidOptionSelection, KioskError
from .menu_matcher import map_recommendations, match_menu, match_option, select_candidate
from .models import (
    Candidate,
    CartItem,
    Category,
    CustomerProfile,
    Option,
    OptionGroup,
    Product,
    ProductType,
)
from .parsers import detect_confirmation, detect_more_order, detect_recommendation
from .schemas import KioskAction, KioskState, TransitionResult
from .services import KioskSession
from .state_machine import transition

__all__ = [
    # Catalog
    "Catalog",
    "load_catalog",
    "load_catalog_file",
    "load_sample_catalog",
    # Models
    "Candidate",
    "CartItem",
    "Category",
    "CustomerProfile",
    "Option",
    "OptionGroup",
    "Product",
    "ProductType",
    # Matching
    "match_menu",
    "match_option",
    "select_candidate",
    "map_recommendations",
    # Intents
    "detect_confirmation",
    "detect_more_order",
    "detect_recommendation",
    # State machine
    "KioskState",
    "KioskAction",
    "TransitionResult",
    "transition",
    # Session / dispatcher
    "KioskSession",
    "KioskController",
    # Errors
    "KioskError",
    "CatalogError",
    "InvalidOptionSelection",
]
