"""
Message Builder for the Kiosk State Machine.

This module builds every prompt the kiosk speaks: fixed translated
phrases, prompts personalized by customer profile, and prompts generated
from the current product, candidates or cart.

All prompts exist in Korean and English; any other language code falls
back to Korean.
"""

from typing import Iterable

from .models import CartItem, Candidate, CustomerProfile, OptionGroup

# Groups with at least this many options are not read out one by one
MANY_OPTIONS_THRESHOLD = 5
MAX_SPOKEN_OPTIONS = 4
MAX_SPOKEN_CANDIDATES = 3

TRANSLATIONS = {
    "ko": {
        "welcome": "어서오세요! 주문 도와드릴게요",
        "how_can_i_help": "어떤 메뉴 드릴까요?",
        "menu_not_found": "아, 못 찾았어요. 다시 한 번 말씀해 주시겠어요?",
        "menu_not_found_ask_more": "음, 못 찾았네요. 다른 메뉴 더 주문하실 거 있으세요?",
        "which_menu": "어떤 걸로 드릴까요?",
        "select_option": "옵션을 선택해 주세요.",
        "option_not_understood": "잘 못 알아들었어요. 다시 말씀해 주시겠어요?",
        "additional_order": "추가 주문 있으세요?",
        "yes_please_speak": "네~ 말씀하세요!",
        "no_orders": "아직 주문하신 게 없네요.",
        "order_details": "주문하신 거는요,",
        "total_is": "전체",
        "order_confirm": "이에요. 주문할까요?",
        "confirm_not_understood": "주문할까요? 네 또는 아니요로 말씀해 주세요.",
        "proceed_payment": "네! 결제 도와드릴게요~",
        "modify_order": "주문 바꾸실래요?",
        "payment_completed": "결제 완료했어요! 감사합니다~",
        "payment_failed": "아, 결제가 안 됐어요. 다시 해볼까요?",
        "please_order_again": "다시 주문해 주세요~",
        "recommendation_unavailable": "지금은 추천을 드릴 수 없어요. 메뉴 이름을 말씀해 주세요.",
        "say_number_or_touch": "번호를 말씀하시거나 화면을 터치해 주세요.",
        "error_occurred": "죄송해요, 문제가 생겼어요. 다시 주문해 주세요.",
        "won": "원",
    },
    "en": {
        "welcome": "Welcome! Let's start your order.",
        "how_can_i_help": "How can I help you?",
        "menu_not_found": "Sorry, I couldn't find that menu. Could you say it again?",
        "menu_not_found_ask_more": "Sorry, I couldn't find that menu. Any other orders?",
        "which_menu": "Which menu would you like?",
        "select_option": "Please select your option.",
        "option_not_understood": "Sorry, I didn't catch that. Could you say it again?",
        "additional_order": "Any additional orders?",
        "yes_please_speak": "Yes, please go ahead.",
        "no_orders": "No items in order.",
        "order_details": "Your order is",
        "total_is": "Total",
        "order_confirm": ". Would you like to order?",
        "confirm_not_understood": "Would you like to order? Please say yes or no.",
        "proceed_payment": "Proceeding to payment.",
        "modify_order": "Would you like to modify your order?",
        "payment_completed": "Payment completed. Thank you!",
        "payment_failed": "Payment failed. Please try again.",
        "please_order_again": "Please order again.",
        "recommendation_unavailable": "Recommendations aren't available right now. Please tell me a menu name.",
        "say_number_or_touch": "Say the number or touch the screen.",
        "error_occurred": "Sorry, something went wrong. Please order again.",
        "won": " KRW",
    },
}


def _lang(language: str | None) -> str:
    return language if language in TRANSLATIONS else "ko"


def _topic_particle(word: str) -> str:
    """은 after a final consonant, 는 otherwise ("사이드는", "음료수는", "빵은")."""
    last = word.rstrip()[-1:] or " "
    code = ord(last) - 0xAC00
    if 0 <= code < 11172 and code % 28:
        return "은"
    return "는"


class MessageBuilder:
    """
    Builds kiosk prompts.

    Stateless; a single module-level instance is shared by the state
    machine and the dispatcher.
    """

    ORDINALS = {
        "ko": {1: "1번", 2: "2번", 3: "3번", 4: "4번", 5: "5번"},
        "en": {1: "1.", 2: "2.", 3: "3.", 4: "4.", 5: "5."},
    }

    def t(self, key: str, language: str | None = "ko") -> str:
        """Look up a fixed phrase, falling back to Korean, then to the key itself."""
        return TRANSLATIONS[_lang(language)].get(key) or TRANSLATIONS["ko"].get(key) or key

    def get_ordinal(self, n: int, language: str | None = "ko") -> str:
        """Position marker for a spoken list (1 -> '1번' / '1.')."""
        lang = _lang(language)
        return self.ORDINALS[lang].get(n, f"{n}번" if lang == "ko" else f"{n}.")

    def format_price(self, amount: int, language: str | None = "ko") -> str:
        """Format a won amount with thousands separators (15400 -> '15,400원')."""
        return f"{amount:,}{self.t('won', language)}"

    # =========================================================================
    # Personalized prompts
    # =========================================================================

    def get_welcome_message(self, profile: CustomerProfile | None, language: str | None = "ko") -> str:
        """Welcome prompt, personalized by age group and gender when known."""
        if profile is None or (profile.age_group is None and profile.gender is None):
            return self.t("welcome", language)

        age, gender = profile.age_group, profile.gender
        if _lang(language) == "ko":
            if age == "child":
                return "안녕! 어서와~ 맛있는 거 골라볼까?"
            if age == "teen":
                return "어서와! 인기 메뉴 확인해볼래?" if gender == "male" else "어서와! 맛있는 거 많아~"
            if age == "20s":
                return "어서오세요! 푸짐한 세트 어때요?" if gender == "male" else "어서오세요! 신메뉴도 있어요~"
            if age in ("30s", "40s"):
                if gender == "male":
                    return "어서오세요! 든든한 메뉴 준비됐어요!"
                return "어서오세요! 건강한 메뉴도 있답니다~"
            return "어서오세요! 편하게 주문하세요~"

        if age == "child":
            return "Hi there! Let's find something yummy!"
        if age == "teen":
            return "Welcome! Check out our popular items!"
        if age == "20s":
            if gender == "male":
                return "Welcome! Try our hearty combo meals!"
            return "Welcome! Don't miss our new menu!"
        if age in ("30s", "40s"):
            return "Welcome! We have great meal options for you!"
        return "Welcome! Please take your time ordering!"

    def get_recommendation_hint(self, profile: CustomerProfile | None, language: str | None = "ko") -> str | None:
        """Menu hint for the customer, or None without a profile."""
        if profile is None or (profile.age_group is None and profile.gender is None):
            return None

        age, gender = profile.age_group, profile.gender
        if _lang(language) == "ko":
            if age == "child":
                return "키즈 메뉴도 있어요!"
            if age in ("teen", "20s"):
                return "와퍼 더블이 인기예요!" if gender == "male" else "치킨버거 세트 추천드려요!"
            return "든든한 세트 메뉴 어떠세요?"

        if age == "child":
            return "We have a Kids Menu!"
        if age in ("teen", "20s"):
            return "Double Whopper is popular!" if gender == "male" else "Try our Chicken Burger Set!"
        return "How about a combo meal?"

    def get_more_order_message(self, profile: CustomerProfile | None, language: str | None = "ko") -> str:
        """'Anything else?' prompt, personalized by age group when known."""
        if profile is None or profile.age_group is None:
            return self.t("additional_order", language)

        young = profile.age_group in ("child", "teen")
        if _lang(language) == "ko":
            return "디저트나 음료 더 드릴까?" if young else "더 주문하실 거 있어요? 사이드 메뉴도 맛있어요!"
        return "How about dessert or drinks?" if young else "Any additional orders? We have side menus too!"

    # =========================================================================
    # Generated prompts
    # =========================================================================

    def build_option_prompt(
        self,
        group: OptionGroup | None,
        language: str | None = "ko",
        is_first_group: bool = True,
    ) -> str:
        """
        Prompt for one option group.

        Args:
            group: The group being asked about
            language: Active language
            is_first_group: Whether this is the first group asked for the
                current product. Only that prompt carries the "say the
                number or touch the screen" instruction.

        Returns:
            Prompt text; a generic prompt when the group or its options are missing
        """
        if group is None or not group.options:
            return self.t("select_option", language)

        lang = _lang(language)
        group_name = group.display_name(lang)

        if len(group.options) >= MANY_OPTIONS_THRESHOLD:
            if lang == "ko":
                prompt = f"{group_name} 골라주세요."
            else:
                prompt = f"Please choose your {group_name.lower()}."
            if is_first_group:
                prompt = f"{prompt} {self.t('say_number_or_touch', lang)}"
            return prompt

        choices = []
        for i, option in enumerate(group.options[:MAX_SPOKEN_OPTIONS], start=1):
            choice = f"{self.get_ordinal(i, lang)} {option.display_name(lang)}"
            if option.price > 0:
                choice += f" (+{self.format_price(option.price, lang)})"
            choices.append(choice)

        if lang == "ko":
            return f"{group_name}{_topic_particle(group_name)} 어떤 걸로 드릴까요? {', '.join(choices)}"
        return f"Which {group_name.lower()} would you like? {', '.join(choices)}"

    def build_disambiguation_prompt(self, candidates: list[Candidate], language: str | None = "ko") -> str:
        """Ask the customer to pick one of the first three candidates by position."""
        lang = _lang(language)
        choices = ", ".join(
            f"{self.get_ordinal(i, lang)} {c.product.display_name(lang)}"
            for i, c in enumerate(candidates[:MAX_SPOKEN_CANDIDATES], start=1)
        )
        return f"{self.t('which_menu', lang)} {choices}"

    def build_line_item(self, item: CartItem, language: str | None = "ko") -> str:
        """Cart line as 'name (option, option)'."""
        name = item.product.display_name(language)
        if not item.selected_options:
            return name
        options = ", ".join(o.display_name(language) for o in item.selected_options)
        return f"{name} ({options})"

    def build_confirmation_prompt(self, cart: Iterable[CartItem], language: str | None = "ko") -> str:
        """Read back the full cart with its grand total and ask to confirm."""
        cart = list(cart)
        lang = _lang(language)
        if not cart:
            return self.t("no_orders", lang)

        items = ", ".join(self.build_line_item(item, lang) for item in cart)
        total = self.format_price(sum(item.total_price for item in cart), lang)
        return f"{self.t('order_details', lang)} {items}. {self.t('total_is', lang)} {total}{self.t('order_confirm', lang)}"


message_builder = MessageBuilder()
