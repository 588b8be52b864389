"""
State Machine for the Kiosk Conversation.

This module provides the pure transition function of the ordering
conversation. It never touches the session: given the current state, an
action and its payload it returns the next state, the prompt to speak and
the field updates the dispatcher should apply.

Each state has its own handler that knows which actions it accepts.
Anything a handler does not accept is a no-op (same state, no message),
so a stray event from the UI or the speech layer can never break the
session.
"""

import logging
from typing import Any, Callable

from .message_builder import message_builder
from .models import Candidate, CustomerProfile, OptionGroup, Product
from .schemas import KioskAction, KioskState, TransitionResult

logger = logging.getLogger(__name__)

Handler = Callable[[KioskAction, dict, str, CustomerProfile | None], TransitionResult | None]


def _handle_menu_matched(
    payload: dict,
    language: str,
    not_found_state: KioskState,
    not_found_key: str,
) -> TransitionResult:
    """Shared branching for a menu match in PROCESSING and ASK_MORE."""
    candidates: list[Candidate] = payload.get("candidates") or []

    if not candidates:
        return TransitionResult(
            new_state=not_found_state,
            message=message_builder.t(not_found_key, language),
            candidates=[],
        )

    if len(candidates) == 1:
        # No message: the option or "anything else" prompt follows immediately
        return TransitionResult(
            new_state=KioskState.PRODUCT_SELECTED,
            selected_product=candidates[0].product,
            candidates=[],
        )

    return TransitionResult(
        new_state=KioskState.ASK_DISAMBIGUATION,
        message=message_builder.build_disambiguation_prompt(candidates, language),
        candidates=candidates,
    )


def _on_idle(action, payload, language, profile):
    if action == KioskAction.CUSTOMER_DETECTED:
        profile = payload.get("customer_profile") or profile
        return TransitionResult(
            new_state=KioskState.GREETING,
            message=message_builder.get_welcome_message(profile, language),
        )
    return None


def _on_greeting(action, payload, language, profile):
    if action == KioskAction.TTS_COMPLETED:
        return TransitionResult(
            new_state=KioskState.LISTENING,
            message=message_builder.t("how_can_i_help", language),
        )
    if action == KioskAction.SPEECH_RECEIVED:
        # The customer started talking over the greeting
        return TransitionResult(new_state=KioskState.PROCESSING)
    return None


def _on_listening(action, payload, language, profile):
    if action == KioskAction.SPEECH_RECEIVED:
        return TransitionResult(new_state=KioskState.PROCESSING)
    return None


def _on_processing(action, payload, language, profile):
    if action == KioskAction.MENU_MATCHED:
        return _handle_menu_matched(payload, language, KioskState.LISTENING, "menu_not_found")
    return None


def _on_disambiguation(action, payload, language, profile):
    if action == KioskAction.PRODUCT_CLARIFIED:
        product: Product | None = payload.get("product")
        if product is None:
            logger.warning("PRODUCT_CLARIFIED without a product")
            return None
        return TransitionResult(
            new_state=KioskState.PRODUCT_SELECTED,
            selected_product=product,
            candidates=[],
        )
    return None


def _on_product_selected(action, payload, language, profile):
    if action == KioskAction.CHECK_OPTIONS:
        product: Product | None = payload.get("product")
        if product is not None and product.option_groups:
            groups = list(product.option_groups)
            return TransitionResult(
                new_state=KioskState.ASK_OPTIONS,
                message=message_builder.build_option_prompt(groups[0], language, is_first_group=True),
                pending_options=groups,
            )
        return TransitionResult(
            new_state=KioskState.ASK_MORE,
            message=message_builder.get_more_order_message(profile, language),
            pending_options=[],
        )
    return None


def _on_ask_options(action, payload, language, profile):
    if action == KioskAction.OPTION_SELECTED:
        remaining: list[OptionGroup] = payload.get("remaining_options") or []
        selected = payload.get("selected_option")
        if remaining:
            return TransitionResult(
                new_state=KioskState.ASK_OPTIONS,
                message=message_builder.build_option_prompt(remaining[0], language, is_first_group=False),
                pending_options=remaining,
                selected_option=selected,
            )
        return TransitionResult(
            new_state=KioskState.ASK_MORE,
            message=message_builder.get_more_order_message(profile, language),
            pending_options=[],
            selected_option=selected,
        )
    return None


def _on_ask_more(action, payload, language, profile):
    if action == KioskAction.MENU_MATCHED:
        return _handle_menu_matched(payload, language, KioskState.ASK_MORE, "menu_not_found_ask_more")
    if action == KioskAction.MORE_ORDER:
        return TransitionResult(
            new_state=KioskState.LISTENING,
            message=message_builder.t("yes_please_speak", language),
        )
    if action == KioskAction.NO_MORE_ORDER:
        return TransitionResult(
            new_state=KioskState.CONFIRM,
            message=message_builder.build_confirmation_prompt(payload.get("cart") or [], language),
        )
    return None


def _on_confirm(action, payload, language, profile):
    if action == KioskAction.CONFIRMED:
        return TransitionResult(
            new_state=KioskState.PAYMENT,
            message=message_builder.t("proceed_payment", language),
        )
    if action == KioskAction.CANCELLED:
        return TransitionResult(
            new_state=KioskState.LISTENING,
            message=message_builder.t("modify_order", language),
        )
    return None


def _on_payment(action, payload, language, profile):
    if action == KioskAction.PAYMENT_COMPLETED:
        return TransitionResult(
            new_state=KioskState.COMPLETE,
            message=message_builder.t("payment_completed", language),
        )
    if action == KioskAction.PAYMENT_FAILED:
        return TransitionResult(
            new_state=KioskState.ERROR,
            message=message_builder.t("payment_failed", language),
        )
    return None


def _on_complete(action, payload, language, profile):
    if action == KioskAction.RESET:
        return TransitionResult(new_state=KioskState.IDLE)
    return None


def _on_error(action, payload, language, profile):
    if action == KioskAction.RETRY:
        return TransitionResult(
            new_state=KioskState.LISTENING,
            message=message_builder.t("please_order_again", language),
        )
    return None


STATE_HANDLERS: dict[KioskState, Handler] = {
    KioskState.IDLE: _on_idle,
    KioskState.GREETING: _on_greeting,
    KioskState.LISTENING: _on_listening,
    KioskState.PROCESSING: _on_processing,
    KioskState.ASK_DISAMBIGUATION: _on_disambiguation,
    KioskState.PRODUCT_SELECTED: _on_product_selected,
    KioskState.ASK_OPTIONS: _on_ask_options,
    KioskState.ASK_MORE: _on_ask_more,
    KioskState.CONFIRM: _on_confirm,
    KioskState.PAYMENT: _on_payment,
    KioskState.COMPLETE: _on_complete,
    KioskState.ERROR: _on_error,
}


def transition(
    state: KioskState | str,
    action: KioskAction | str,
    payload: dict[str, Any] | None = None,
    language: str | None = "ko",
    customer_profile: CustomerProfile | None = None,
) -> TransitionResult:
    """
    Compute the next state for an action.

    Args:
        state: Current state
        action: Incoming action (enum or its string value)
        payload: Action data, e.g. {"candidates": [...]} for MENU_MATCHED,
                 {"product": p} for PRODUCT_CLARIFIED / CHECK_OPTIONS,
                 {"remaining_options": [...], "selected_option": o} for
                 OPTION_SELECTED, {"cart": [...]} for NO_MORE_ORDER
        language: Active language for prompts
        customer_profile: Optional profile for personalized prompts

    Returns:
        TransitionResult; an unknown (state, action) pair returns the same
        state with no message
    """
    payload = payload or {}
    try:
        state = KioskState(state)
    except (ValueError, TypeError):
        logger.warning("Unknown state %r", state)
        return TransitionResult(new_state=state)
    try:
        action = KioskAction(action)
    except (ValueError, TypeError):
        logger.warning("Unknown action %r in %s", action, state.value)
        return TransitionResult(new_state=state)

    handler = STATE_HANDLERS.get(state)
    result = handler(action, payload, language, customer_profile) if handler else None
    if result is None:
        logger.debug("Ignoring %s in %s", action.value, state.value)
        return TransitionResult(new_state=state)

    logger.info("%s + %s -> %s", state.value, action.value, result.new_state.value)
    return result
