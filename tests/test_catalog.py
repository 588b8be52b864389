"""
Tests for catalog loading and normalization.
"""
import json
import logging

import pytest

from kiosk_bot.catalog import load_catalog, load_catalog_file
from kiosk_bot.errors import CatalogError
from kiosk_bot.models import ProductType

BACKEND_PRODUCT = {
    "id": 10,
    "productName": "몬스터 와퍼 세트",
    "productEngName": "Monster Whopper Set",
    "price": 11900,
    "categories": [{"id": 1, "categoryName": "버거"}],
    "optionGroups": [
        {
            "id": 1,
            "groupName": "사이드",
            "isRequired": True,
            "maxSelection": 1,
            "options": [
                {"id": 101, "optionName": "어니언링", "optionEngName": "Onion Rings", "additionalPrice": 500},
                {"id": 102, "optionName": "감자튀김", "additionalPrice": 0},
            ],
        }
    ],
}


class TestSampleCatalog:
    """Tests for the bundled sample menu."""

    def test_products_and_categories(self, sample_catalog):
        assert len(sample_catalog) == 6
        assert sample_catalog.get_product(4).name == "불고기 와퍼 세트"
        assert [c.name for c in sample_catalog.categories] == ["버거", "치킨", "사이드", "음료"]

    def test_option_groups_keep_order(self, two_group_product):
        assert [g.name for g in two_group_product.option_groups] == ["사이드", "음료"]
        assert [o.name for o in two_group_product.option_groups[0].options] == ["감자튀김", "어니언링"]

    def test_first_free_option_flagged_default(self, two_group_product):
        """Test that groups without an explicit default get the first free option."""
        assert two_group_product.option_groups[0].default_option.id == 11
        assert two_group_product.option_groups[1].default_option.name == "콜라"

    def test_lookup(self, sample_catalog):
        assert sample_catalog.get_product(999) is None
        assert sample_catalog.get_category(2).eng_name == "Chicken"
        assert [p.id for p in sample_catalog.products_in_category(2)] == [5, 6]

    def test_set_types(self, sample_catalog):
        assert sample_catalog.get_product(1).type == ProductType.SINGLE
        assert sample_catalog.get_product(2).is_set


class TestLoadCatalog:
    """Tests for load_catalog() with raw payloads."""

    def test_backend_shape(self):
        """Test that camelCase backend fields are normalized."""
        catalog = load_catalog([BACKEND_PRODUCT])
        product = catalog.get_product(10)

        assert product.eng_name == "Monster Whopper Set"
        assert product.type == ProductType.SET
        assert product.category_id == 1
        assert product.category_name == "버거"
        group = product.option_groups[0]
        assert group.required is True
        assert [(o.id, o.price) for o in group.options] == [(101, 500), (102, 0)]
        assert group.options[0].eng_name == "Onion Rings"
        assert group.default_option.id == 102

    def test_dict_payload(self):
        catalog = load_catalog({
            "products": [BACKEND_PRODUCT],
            "categories": [{"id": 2, "name": "b", "display_order": 2}, {"id": 1, "name": "a", "display_order": 1}],
        })
        assert [c.id for c in catalog.categories] == [1, 2]

    def test_malformed_entries_dropped(self, caplog):
        """Test that bad products and options are skipped with warnings."""
        raw = [
            {"id": 1, "name": "와퍼", "price": 6500},
            {"id": 2, "name": "가격 없음"},
            {"id": 3, "price": 1000},
            {"id": 4, "name": "품절", "price": 5000, "isAvailable": False},
            {"id": 5, "name": "이상한 가격", "price": "abc"},
            {
                "id": 6,
                "name": "옵션 없는 세트",
                "price": 7000,
                "option_groups": [{"id": 1, "name": "음료", "options": []}],
            },
        ]
        with caplog.at_level(logging.WARNING):
            catalog = load_catalog(raw)

        assert [p.id for p in catalog.products] == [1, 6]
        assert catalog.get_product(6).option_groups == []
        assert "Dropped 4 of 6" in caplog.text

    def test_non_object_entries_dropped(self, caplog):
        """Test that nulls, strings and numbers anywhere in the payload are skipped."""
        raw = {
            "products": [
                None,
                "와퍼",
                {"id": 1, "name": "Whopper", "price": 6500, "categories": ["버거"]},
                {
                    "id": 2,
                    "name": "Whopper Set",
                    "price": 8900,
                    "option_groups": [
                        None,
                        {"id": 1, "name": "Drink", "options": [None, 7, {"id": 21, "name": "Coke"}]},
                        {"id": 2, "name": "Side", "options": 5},
                    ],
                },
            ],
            "categories": [None, {"id": 1, "name": "버거"}],
        }
        with caplog.at_level(logging.WARNING):
            catalog = load_catalog(raw)

        assert [p.id for p in catalog.products] == [1, 2]
        assert catalog.get_product(1).category_id is None
        groups = catalog.get_product(2).option_groups
        assert [g.name for g in groups] == ["Drink"]
        assert [o.id for o in groups[0].options] == [21]
        assert [c.id for c in catalog.categories] == [1]
        assert "not an object" in caplog.text

    def test_products_not_a_list(self):
        assert len(load_catalog({"products": "nope"})) == 0

    def test_option_without_name_dropped(self):
        raw = [{
            "id": 1,
            "name": "세트",
            "price": 7000,
            "option_groups": [{"id": 1, "name": "음료", "options": [{"id": 1}, {"id": 2, "name": "콜라"}]}],
        }]
        options = load_catalog(raw).get_product(1).option_groups[0].options
        assert [o.name for o in options] == ["콜라"]

    def test_explicit_default_kept(self):
        raw = [{
            "id": 1,
            "name": "세트",
            "price": 7000,
            "option_groups": [{
                "id": 1,
                "name": "음료",
                "options": [
                    {"id": 1, "name": "콜라", "price": 0},
                    {"id": 2, "name": "사이다", "price": 0, "isDefault": True},
                ],
            }],
        }]
        assert load_catalog(raw).get_product(1).option_groups[0].default_option.id == 2


class TestLoadCatalogFile:
    """Tests for load_catalog_file()."""

    def test_reads_json(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text(json.dumps([BACKEND_PRODUCT], ensure_ascii=False), encoding="utf-8")
        assert len(load_catalog_file(path)) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog_file(tmp_path / "missing.json")
        assert "missing.json" in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog_file(path)

    def test_not_a_catalog(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(CatalogError, match="expected a JSON object or array"):
            load_catalog_file(path)
