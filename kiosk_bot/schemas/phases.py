"""
Kiosk State and Action Definitions.

This module defines the KioskState enum (the conversation states of one
ordering session) and the KioskAction enum (the events that drive the
state machine between them).
"""

from enum import Enum


class KioskState(str, Enum):
    """Conversation states of the kiosk."""
    IDLE = "IDLE"  # Nobody in front of the kiosk
    GREETING = "GREETING"
    LISTENING = "LISTENING"
    PROCESSING = "PROCESSING"  # Transcript received, being interpreted
    PRODUCT_SELECTED = "PRODUCT_SELECTED"
    ASK_DISAMBIGUATION = "ASK_DISAMBIGUATION"
    ASK_OPTIONS = "ASK_OPTIONS"
    ASK_MORE = "ASK_MORE"
    CONFIRM = "CONFIRM"
    PAYMENT = "PAYMENT"
    COMPLETE = "COMPLETE"  # Terminal until RESET
    ERROR = "ERROR"


class KioskAction(str, Enum):
    """Events fed to the state machine."""
    CUSTOMER_DETECTED = "CUSTOMER_DETECTED"
    TTS_COMPLETED = "TTS_COMPLETED"
    SPEECH_RECEIVED = "SPEECH_RECEIVED"
    MENU_MATCHED = "MENU_MATCHED"
    PRODUCT_CLARIFIED = "PRODUCT_CLARIFIED"
    CHECK_OPTIONS = "CHECK_OPTIONS"
    OPTION_SELECTED = "OPTION_SELECTED"
    MORE_ORDER = "MORE_ORDER"
    NO_MORE_ORDER = "NO_MORE_ORDER"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    PAYMENT_COMPLETED = "PAYMENT_COMPLETED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    RESET = "RESET"
    RETRY = "RETRY"
