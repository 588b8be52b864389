"""
Kiosk Dispatcher (Session Controller).

This module provides KioskController, the single entry point that drives
one ordering session. It owns the KioskSession and is its only writer:

- ``dispatch(action, payload)`` runs the pure state machine and merges the
  result into the session, performing the side effects the state machine
  does not know about (committing a configured product to the cart,
  resetting the session after an order);
- the ``on_*`` helpers are what the UI layer calls on touch events;
- ``handle_transcript(text)`` interprets a finalized speech transcript in
  the context of the current state and turns it into actions.

Only one transcript is interpreted at a time. A transcript that arrives
while another is being handled is dropped, never queued.
"""

import logging
import threading
import time
from dataclasses import replace
from typing import Any, Callable, Iterable

from . import config
from .catalog import Catalog
from .errors import InvalidOptionSelection
from .menu_matcher import map_recommendations, match_menu, match_option, select_candidate
from .message_builder import message_builder
from .models import Candidate, CustomerProfile, Option, Product
from .parsers import detect_confirmation, detect_more_order, detect_recommendation
from .schemas import KioskAction, KioskState, TransitionResult
from .services.session import KioskSession
from .state_machine import transition

logger = logging.getLogger(__name__)

# recommender(utterance, customer_profile, language) -> [{"product_id": ..., ...}, ...]
Recommender = Callable[[str, CustomerProfile | None, str], Iterable[Any]]

# In ASK_MORE, a "yes" that also names a product this well is an order for it
ASK_MORE_MENU_SCORE = 100


class KioskController:
    """
    Drives one kiosk session.

    Args:
        catalog: Immutable catalog snapshot for the session
        language: Initial language (defaults to config.DEFAULT_LANGUAGE)
        recommender: Optional collaborator answering "what do you recommend?"
        clock: Time source in seconds, used for cart item ids and the
               duplicate-add window
    """

    def __init__(
        self,
        catalog: Catalog,
        language: str | None = None,
        recommender: Recommender | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._catalog = catalog
        self._recommender = recommender
        self._clock = clock
        self._session = KioskSession(catalog=catalog)
        self._session.language = config.resolve_language(language)
        self._transcript_lock = threading.Lock()

    @property
    def state(self) -> KioskSession:
        """Read model for collaborators. Do not mutate."""
        return self._session

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _add_to_cart(self) -> None:
        self._session.add_to_cart(now=self._clock())

    def dispatch(self, action: KioskAction | str, payload: dict[str, Any] | None = None) -> TransitionResult:
        """
        Apply one action to the session.

        Args:
            action: The action to apply
            payload: Action data; fields the session already knows (the
                     current product, remaining option groups, the cart)
                     are filled in when missing

        Returns:
            The TransitionResult; its message is what the kiosk should say
        """
        session = self._session
        payload = dict(payload or {})
        previous_state = session.current_state

        # A re-detection mid-order keeps the current customer's profile
        if (
            action == KioskAction.CUSTOMER_DETECTED
            and previous_state == KioskState.IDLE
            and payload.get("customer_profile") is not None
        ):
            profile = payload["customer_profile"]
            if isinstance(profile, dict):
                profile = CustomerProfile(**profile)
            session.customer_profile = profile
            payload["customer_profile"] = profile

        elif action == KioskAction.CHECK_OPTIONS:
            product = payload.setdefault("product", session.current_product)
            if (
                previous_state == KioskState.PRODUCT_SELECTED
                and product is not None
                and not product.option_groups
            ):
                # Nothing to configure: commit now, before moving on
                self._add_to_cart()

        elif action == KioskAction.OPTION_SELECTED:
            payload.setdefault("remaining_options", session.pending_options[1:])

        elif action == KioskAction.NO_MORE_ORDER:
            payload.setdefault("cart", list(session.cart))

        result = transition(
            previous_state,
            action,
            payload,
            language=session.language,
            customer_profile=session.customer_profile,
        )

        session.current_state = result.new_state
        if result.message is not None:
            session.last_message = result.message
        if result.selected_product is not None:
            session.current_product = result.selected_product
            session.candidates = []
        elif result.candidates is not None:
            session.candidates = list(result.candidates)
        if result.pending_options is not None:
            session.pending_options = list(result.pending_options)
        if result.selected_option is not None:
            session.selected_options.append(result.selected_option)

        if (
            action == KioskAction.OPTION_SELECTED
            and previous_state == KioskState.ASK_OPTIONS
            and result.new_state == KioskState.ASK_MORE
        ):
            # Last pending group resolved
            self._add_to_cart()

        if action == KioskAction.RESET and result.new_state == KioskState.IDLE:
            session.reset()

        return result

    # =========================================================================
    # UI helpers
    # =========================================================================

    def on_customer_detected(self, customer_profile: CustomerProfile | dict | None = None) -> TransitionResult:
        return self.dispatch(KioskAction.CUSTOMER_DETECTED, {"customer_profile": customer_profile})

    def on_tts_completed(self) -> TransitionResult:
        return self.dispatch(KioskAction.TTS_COMPLETED)

    def _check_options_if_selected(self, result: TransitionResult) -> TransitionResult:
        if result.new_state == KioskState.PRODUCT_SELECTED:
            return self.dispatch(KioskAction.CHECK_OPTIONS)
        return result

    def on_menu_matched(self, candidates: list[Candidate]) -> TransitionResult:
        """Feed match results; a single candidate continues straight to options."""
        result = self.dispatch(KioskAction.MENU_MATCHED, {"candidates": candidates})
        return self._check_options_if_selected(result)

    def on_product_clarified(self, product: Product) -> TransitionResult:
        result = self.dispatch(KioskAction.PRODUCT_CLARIFIED, {"product": product})
        return self._check_options_if_selected(result)

    def on_option_selected(self, option: Option) -> TransitionResult:
        """Resolve the first pending option group with one option."""
        return self.dispatch(KioskAction.OPTION_SELECTED, {"selected_option": option})

    def on_all_options_selected(self, options: list[Option]) -> TransitionResult:
        """
        Resolve every pending option group at once (touch option screen).

        Raises:
            InvalidOptionSelection: An option is not in any pending group, a
                group gets more than max_selection options, or a required
                group gets none
        """
        session = self._session
        if session.current_state != KioskState.ASK_OPTIONS:
            logger.warning("Options submitted in %s; ignoring", session.current_state.value)
            return TransitionResult(new_state=session.current_state)

        by_group: dict[int, list[Option]] = {g.id: [] for g in session.pending_options}
        for option in options:
            group = next(
                (g for g in session.pending_options if any(o.id == option.id for o in g.options)),
                None,
            )
            if group is None:
                raise InvalidOptionSelection(option.name, "option is not offered by any pending group")
            by_group[group.id].append(option)

        for group in session.pending_options:
            chosen = by_group[group.id]
            if len(chosen) > group.max_selection:
                raise InvalidOptionSelection(
                    group.name, f"{len(chosen)} options chosen, at most {group.max_selection} allowed"
                )
            if group.required and not chosen:
                raise InvalidOptionSelection(group.name, "a selection is required")

        # Catalog order, not tap order
        for group in session.pending_options:
            session.selected_options.extend(by_group[group.id])
        return self.dispatch(KioskAction.OPTION_SELECTED, {"remaining_options": []})

    def on_more_order(self, intent: str) -> TransitionResult:
        """'yes' asks for another item; 'pay' or 'no' goes to the order summary."""
        if intent == "yes":
            return self.dispatch(KioskAction.MORE_ORDER)
        if intent in ("pay", "no"):
            return self.dispatch(KioskAction.NO_MORE_ORDER)
        return TransitionResult(new_state=self._session.current_state)

    def on_confirm(self, confirmed: bool) -> TransitionResult:
        return self.dispatch(KioskAction.CONFIRMED if confirmed else KioskAction.CANCELLED)

    def on_payment_completed(self) -> TransitionResult:
        return self.dispatch(KioskAction.PAYMENT_COMPLETED)

    def on_payment_failed(self) -> TransitionResult:
        return self.dispatch(KioskAction.PAYMENT_FAILED)

    def retry(self) -> TransitionResult:
        return self.dispatch(KioskAction.RETRY)

    def set_error(self, error: str, message: str | None = None) -> TransitionResult:
        """Put the session into ERROR from any state (collaborator failure)."""
        session = self._session
        logger.error("Kiosk error in %s: %s", session.current_state.value, error)
        session.error = error
        session.current_state = KioskState.ERROR
        session.last_message = message or message_builder.t("error_occurred", session.language)
        return TransitionResult(new_state=KioskState.ERROR, message=session.last_message)

    def reset(self) -> TransitionResult:
        """Back to IDLE from any state (order completed or abandoned)."""
        if self._session.current_state == KioskState.COMPLETE:
            return self.dispatch(KioskAction.RESET)
        self._session.reset()
        return TransitionResult(new_state=KioskState.IDLE)

    def remove_from_cart(self, item_id: int) -> bool:
        return self._session.remove_from_cart(item_id)

    def set_language(self, language: str) -> str:
        self._session.language = config.resolve_language(language)
        return self._session.language

    # =========================================================================
    # Transcript handling
    # =========================================================================

    def handle_transcript(self, transcript: str) -> TransitionResult | None:
        """
        Interpret one finalized speech transcript.

        Returns:
            The last TransitionResult produced, or None when the transcript
            was empty or another transcript is still being interpreted
        """
        if not self._transcript_lock.acquire(blocking=False):
            logger.warning("Transcript dropped: another transcript is being interpreted")
            return None
        try:
            text = (transcript or "").strip()[: config.MAX_TRANSCRIPT_LENGTH]
            if not text:
                return None
            self._session.last_input = text
            return self._route_transcript(text)
        finally:
            self._transcript_lock.release()

    def _route_transcript(self, text: str) -> TransitionResult:
        state = self._session.current_state
        logger.debug("Transcript in %s: '%s'", state.value, text)

        if state in (KioskState.GREETING, KioskState.LISTENING):
            self.dispatch(KioskAction.SPEECH_RECEIVED)
            return self._handle_menu_request(text)
        if state == KioskState.PROCESSING:
            return self._handle_menu_request(text)
        if state == KioskState.ASK_DISAMBIGUATION:
            return self._handle_disambiguation(text)
        if state == KioskState.ASK_OPTIONS:
            return self._handle_option_answer(text)
        if state == KioskState.ASK_MORE:
            return self._handle_more_order_answer(text)
        if state == KioskState.CONFIRM:
            return self._handle_confirmation(text)

        logger.info("Ignoring transcript in %s", state.value)
        return TransitionResult(new_state=state)

    def _reprompt(self, message: str) -> TransitionResult:
        """Stay in the current state and ask again."""
        self._session.last_message = message
        return TransitionResult(new_state=self._session.current_state, message=message)

    def _handle_menu_request(self, text: str) -> TransitionResult:
        language = self._session.language
        if detect_recommendation(text, language):
            return self._handle_recommendation(text)
        match = match_menu(text, self._catalog.products, language)
        return self.on_menu_matched(match.candidates)

    def _handle_recommendation(self, text: str) -> TransitionResult:
        session = self._session
        candidates: list[Candidate] = []
        if self._recommender is not None:
            try:
                recommendations = self._recommender(text, session.customer_profile, session.language)
                candidates = map_recommendations(recommendations, self._catalog)
            except Exception:
                logger.exception("Recommender failed")
                candidates = []

        if candidates:
            return self.on_menu_matched(candidates)

        result = self.dispatch(KioskAction.MENU_MATCHED, {"candidates": []})
        hint = message_builder.get_recommendation_hint(session.customer_profile, session.language)
        message = hint or message_builder.t("recommendation_unavailable", session.language)
        session.last_message = message
        return replace(result, message=message)

    def _handle_disambiguation(self, text: str) -> TransitionResult:
        session = self._session
        candidate = select_candidate(text, session.candidates, session.language)
        if candidate is None:
            return self._reprompt(
                message_builder.build_disambiguation_prompt(session.candidates, session.language)
            )
        return self.on_product_clarified(candidate.product)

    def _handle_option_answer(self, text: str) -> TransitionResult:
        session = self._session
        if not session.pending_options:
            logger.error("ASK_OPTIONS with no pending option groups")
            return TransitionResult(new_state=session.current_state)

        group = session.pending_options[0]
        result = match_option(text, group.options)
        if not result.is_committable:
            logger.info("Option answer not committed (%s confidence)", result.confidence)
            prompt = message_builder.build_option_prompt(group, session.language, is_first_group=False)
            return self._reprompt(f"{message_builder.t('option_not_understood', session.language)} {prompt}")
        return self.on_option_selected(result.selected_option)

    def _handle_more_order_answer(self, text: str) -> TransitionResult:
        language = self._session.language
        intent = detect_more_order(text, language)

        if intent == "pay":
            return self.on_more_order("pay")

        if detect_recommendation(text, language):
            self.dispatch(KioskAction.MORE_ORDER)
            self.dispatch(KioskAction.SPEECH_RECEIVED)
            return self._handle_recommendation(text)

        match = match_menu(text, self._catalog.products, language)
        if intent == "yes":
            # "네, 콜라 하나 더" names the item outright
            if match.candidates and match.candidates[0].score >= ASK_MORE_MENU_SCORE:
                return self.on_menu_matched(match.candidates)
            return self.on_more_order("yes")

        return self.on_menu_matched(match.candidates)

    def _handle_confirmation(self, text: str) -> TransitionResult:
        intent = detect_confirmation(text, self._session.language)
        if intent == "yes":
            return self.on_confirm(True)
        if intent == "no":
            return self.on_confirm(False)
        return self._reprompt(message_builder.t("confirm_not_understood", self._session.language))
