"""
Tests for menu and option matching.

Scenarios run against the bundled sample menu, which has three
single/set pairs: 와퍼, 불고기 와퍼 and 치킨버거.
"""
import logging

import pytest

from kiosk_bot.menu_matcher import (
    map_recommendations,
    match_menu,
    match_option,
    select_candidate,
)


def _ids(result):
    return [c.product.id for c in result.candidates]


# =============================================================================
# Menu Matching
# =============================================================================

class TestMatchMenu:
    """Tests for match_menu()."""

    def test_exact_english_name(self, whopper_catalog):
        """Test a one-product menu: raw containment plus full similarity."""
        result = match_menu("Whopper", whopper_catalog.products)
        assert len(result.candidates) == 1
        assert result.candidates[0].product.id == 1
        assert result.candidates[0].score == pytest.approx(120)

    def test_set_qualifier_picks_set(self, sample_catalog):
        """Test that '세트' in the utterance selects the set product alone."""
        result = match_menu("불고기 와퍼 세트 주세요", sample_catalog.products)
        assert _ids(result) == [4]
        assert result.keywords.is_set is True

    def test_single_qualifier_picks_single(self, sample_catalog):
        """Test that '단품' selects the single product alone."""
        result = match_menu("치킨버거 단품", sample_catalog.products)
        assert _ids(result) == [5]

    def test_bare_name_offers_single_set_pair(self, sample_catalog):
        """Test that a name with both variants on the menu yields a pair."""
        result = match_menu("와퍼", sample_catalog.products)
        assert _ids(result) == [1, 2]

    def test_cleaned_name_match_offers_pair(self, sample_catalog):
        """Test that '불고기' alone reaches both 불고기 와퍼 variants."""
        result = match_menu("불고기", sample_catalog.products)
        assert _ids(result) == [3, 4]

    def test_candidates_sorted_by_descending_score(self, sample_catalog):
        """Test ordering of returned candidates."""
        for utterance in ["와퍼", "치킨버거", "불고기"]:
            scores = [c.score for c in match_menu(utterance, sample_catalog.products).candidates]
            assert scores == sorted(scores, reverse=True)

    def test_at_most_two_candidates(self, sample_catalog):
        """Test that the result is always cut to one or two candidates."""
        assert len(match_menu("와퍼", sample_catalog.products).candidates) <= 2
        assert len(match_menu("버거", sample_catalog.products).candidates) <= 2

    def test_english_names(self, sample_catalog):
        """Test matching against English names in English mode."""
        result = match_menu("Bulgogi Whopper Set", sample_catalog.products, language="en")
        assert _ids(result) == [4]

    def test_english_sentence(self, sample_catalog):
        """Test a full English sentence resolving to one single product."""
        result = match_menu("I'd like a chicken burger", sample_catalog.products, language="en")
        assert _ids(result) == [5]

    def test_empty_utterance(self, sample_catalog):
        """Test that blank input yields no candidates."""
        assert match_menu("", sample_catalog.products).candidates == []
        assert match_menu("   ", sample_catalog.products).candidates == []

    def test_unrelated_utterance(self, sample_catalog):
        """Test that nothing scoring above the floor is returned."""
        assert match_menu("xyz", sample_catalog.products).candidates == []

    def test_malformed_products_skipped(self, whopper_catalog, caplog):
        """Test that non-product entries are logged and ignored."""
        products = [{"name": "broken"}, None] + whopper_catalog.products
        with caplog.at_level(logging.WARNING):
            result = match_menu("Whopper", products)
        assert _ids(result) == [1]
        assert "malformed product" in caplog.text


class TestSelectCandidate:
    """Tests for resolving a disambiguation answer."""

    @pytest.fixture
    def pair(self, sample_catalog):
        return match_menu("와퍼", sample_catalog.products).candidates

    @pytest.mark.parametrize("utterance,expected_id", [
        ("1번", 1),
        ("2번이요", 2),
        ("두 번째", 2),
        ("첫번째 거요", 1),
        ("the second one", 2),
    ])
    def test_by_position(self, pair, utterance, expected_id):
        """Test that a spoken position selects that candidate."""
        assert select_candidate(utterance, pair).product.id == expected_id

    def test_position_out_of_range(self, pair):
        """Test that a position past the list is no match."""
        assert select_candidate("세 번째", pair) is None
        assert select_candidate("5번", pair) is None

    def test_by_name(self, pair):
        """Test that a set qualifier without a number picks the set."""
        assert select_candidate("세트로 할게요", pair).product.id == 2

    def test_no_match(self, pair):
        """Test that an unrelated answer selects nothing."""
        assert select_candidate("xyz", pair) is None


# =============================================================================
# Option Matching
# =============================================================================

class TestMatchOption:
    """Tests for match_option()."""

    @pytest.fixture
    def sides(self, sample_catalog):
        return sample_catalog.get_product(2).option_groups[0].options

    @pytest.fixture
    def drinks(self, sample_catalog):
        return sample_catalog.get_product(2).option_groups[1].options

    def test_by_number(self, sides):
        """Test that a spoken number selects by position with high confidence."""
        result = match_option("2번", sides)
        assert result.selected_option.id == 12
        assert result.match_type == "number"
        assert result.confidence == "high"

    def test_number_selection_disabled(self, sides):
        """Test that numbers are ignored when number selection is off."""
        result = match_option("2번", sides, allow_number_selection=False)
        assert result.match_type != "number"

    def test_number_out_of_range(self, two_group_product):
        """Test that an out-of-range number is no match."""
        result = match_option("5번", two_group_product.option_groups[0].options)
        assert result.selected_option is None
        assert not result.is_committable

    def test_number_out_of_range_ignores_option_name(self, two_group_product):
        """Test that a bad position is not rescued by a name in the same answer."""
        result = match_option("3번 콜라", two_group_product.option_groups[1].options)
        assert result.selected_option is None

    def test_default_keyword(self, sides):
        """Test that 'default' selects the flagged default option."""
        result = match_option("기본으로 주세요", sides)
        assert result.selected_option.id == 11
        assert result.match_type == "default"
        assert result.confidence == "high"

    def test_default_keyword_without_flag_takes_first(self, shake_options):
        """Test the default fallback to the first option."""
        options = [o.model_copy(update={"is_default": False}) for o in reversed(shake_options)]
        assert match_option("그냥 주세요", options).selected_option.id == 2

    def test_large_size(self, sides):
        """Test that 'big' selects the one large-marked side."""
        result = match_option("감자튀김 큰 걸로", sides)
        assert result.selected_option.id == 12
        assert result.match_type == "size"

    def test_large_size_uses_rest_of_utterance(self, drinks):
        """Test that with several large options the named drink wins."""
        assert match_option("콜라 라지", drinks).selected_option.id == 22
        assert match_option("사이다 라지", drinks).selected_option.id == 24

    def test_regular_size(self, drinks):
        """Test regular-size selection."""
        result = match_option("사이다 레귤러", drinks)
        assert result.selected_option.id == 23
        assert result.match_type == "size"

    def test_alias(self, drinks):
        """Test that a colloquial name maps to the catalog name."""
        result = match_option("콜라 주세요", drinks)
        assert result.selected_option.id == 21
        assert result.match_type == "alias"
        assert result.confidence == "medium"
        assert result.is_committable

    def test_alias_korean_to_catalog_name(self, two_group_product):
        """Test '감자' resolving to '감자튀김'."""
        result = match_option("감자로 주세요", two_group_product.option_groups[0].options)
        assert result.selected_option.id == 11

    def test_alias_english(self, two_group_product):
        """Test English aliases against English option names."""
        drinks = two_group_product.option_groups[1].options
        assert match_option("coke please", drinks).selected_option.id == 21
        assert match_option("sprite", drinks).selected_option.id == 22

    def test_text_match_high(self, shake_options):
        """Test exact text containment."""
        result = match_option("초코 쉐이크", shake_options)
        assert result.selected_option.id == 2
        assert result.match_type == "text"
        assert result.confidence == "high"

    def test_text_match_low_is_not_committable(self, shake_options):
        """Test that a weak fuzzy match is reported but not committable."""
        result = match_option("밀크쉐이크", shake_options)
        assert result.selected_option.id == 2
        assert result.confidence == "low"
        assert not result.is_committable

    def test_nothing_matches(self, sides):
        """Test that unrelated speech yields no option."""
        result = match_option("음 글쎄요", sides)
        assert result.selected_option is None
        assert result.confidence == "low"

    def test_empty_inputs(self, sides):
        """Test empty utterance and empty option list."""
        assert match_option("", sides).selected_option is None
        assert match_option("1번", []).selected_option is None


# =============================================================================
# Recommendations
# =============================================================================

class TestMapRecommendations:
    """Tests for map_recommendations()."""

    def test_maps_known_products(self, sample_catalog):
        """Test that recommendations become equally scored candidates in order."""
        candidates = map_recommendations(
            [{"product_id": 6, "recommendation_reason": "popular"}, {"productId": 3}],
            sample_catalog,
        )
        assert [c.product.id for c in candidates] == [6, 3]
        assert all(c.score == 100 for c in candidates)

    def test_unknown_and_duplicate_ids_dropped(self, sample_catalog, caplog):
        """Test that missing products are logged and duplicates removed."""
        with caplog.at_level(logging.WARNING):
            candidates = map_recommendations(
                [{"product_id": 999}, {"product_id": 1}, {"product_id": 1}, {}],
                sample_catalog,
            )
        assert [c.product.id for c in candidates] == [1]
        assert "999" in caplog.text

    def test_objects_accepted(self, sample_catalog):
        """Test attribute-style recommendation records."""

        class Rec:
            product_id = 5
            recommendation_reason = "light"

        assert [c.product.id for c in map_recommendations([Rec()], sample_catalog)] == [5]

    def test_none(self, sample_catalog):
        assert map_recommendations(None, sample_catalog) == []
