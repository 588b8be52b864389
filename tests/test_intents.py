"""
Tests for the keyword intent detectors.
"""
import pytest

from kiosk_bot.parsers import detect_confirmation, detect_more_order, detect_recommendation


# =============================================================================
# Confirmation
# =============================================================================

class TestDetectConfirmation:
    """Tests for detect_confirmation()."""

    @pytest.mark.parametrize("text", ["네", "네 좋아요", "맞아요", "응 그래", "오케이"])
    def test_korean_yes(self, text):
        """Test Korean affirmative replies."""
        assert detect_confirmation(text, "ko") == "yes"

    @pytest.mark.parametrize("text", ["아니요", "아뇨 다시 할게요", "취소해 주세요", "안 할래요"])
    def test_korean_no(self, text):
        """Test Korean negative replies."""
        assert detect_confirmation(text, "ko") == "no"

    @pytest.mark.parametrize("text", ["yes please", "Sure", "that's correct"])
    def test_english_yes(self, text):
        """Test English affirmative replies."""
        assert detect_confirmation(text, "en") == "yes"

    def test_negatives_checked_first(self):
        """Test that a negative wins over a positive word in the same reply."""
        assert detect_confirmation("no, that's not right", "en") == "no"

    def test_unknown(self):
        """Test that unrelated or empty input is unknown."""
        assert detect_confirmation("흠", "ko") == "unknown"
        assert detect_confirmation("", "ko") == "unknown"
        assert detect_confirmation("hmm", "en") == "unknown"

    def test_no_inside_longer_word_is_not_negative(self):
        """Test that 'know' does not count as 'no'."""
        assert detect_confirmation("yes I know", "en") == "yes"


# =============================================================================
# More Order
# =============================================================================

class TestDetectMoreOrder:
    """Tests for detect_more_order()."""

    @pytest.mark.parametrize("text", ["결제할게요", "계산해 주세요", "없어요", "괜찮아요", "아니요"])
    def test_korean_pay(self, text):
        """Test Korean replies that proceed to payment."""
        assert detect_more_order(text, "ko") == "pay"

    @pytest.mark.parametrize("text", ["콜라 하나 더 주세요", "추가할게요", "네"])
    def test_korean_yes(self, text):
        """Test Korean replies that continue ordering."""
        assert detect_more_order(text, "ko") == "yes"

    def test_no_more_is_not_more(self):
        """Test that 'no more' proceeds to payment despite containing 'more'."""
        assert detect_more_order("no more, thanks", "en") == "pay"

    @pytest.mark.parametrize("text", ["that's all", "I'm good", "checkout please", "no"])
    def test_english_pay(self, text):
        """Test English replies that proceed to payment."""
        assert detect_more_order(text, "en") == "pay"

    def test_english_more(self):
        """Test that an 'add' request continues ordering."""
        assert detect_more_order("add a coke", "en") == "yes"

    def test_unknown(self):
        """Test replies with no intent keyword."""
        assert detect_more_order("음...", "ko") == "unknown"
        assert detect_more_order("hmm", "en") == "unknown"
        assert detect_more_order("", "ko") == "unknown"

    def test_unknown_language_falls_back_to_korean(self):
        """Test that an unsupported language code uses the Korean tables."""
        assert detect_more_order("결제", "fr") == "pay"
        assert detect_more_order("결제", None) == "pay"


# =============================================================================
# Recommendation
# =============================================================================

class TestDetectRecommendation:
    """Tests for detect_recommendation()."""

    def test_korean_request(self):
        """Test Korean recommendation phrasing."""
        assert detect_recommendation("뭐가 좋을까요?", "ko") is True
        assert detect_recommendation("인기 메뉴 추천해 주세요", "ko") is True

    def test_english_request(self):
        """Test English recommendation phrasing."""
        assert detect_recommendation("what do you recommend?", "en") is True

    def test_plain_order_is_not_a_request(self):
        """Test that naming a product is not a recommendation request."""
        assert detect_recommendation("불고기 와퍼", "ko") is False
        assert detect_recommendation("", "ko") is False
