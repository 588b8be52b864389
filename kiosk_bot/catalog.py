"""
Catalog Loading and Lookup.

This module turns raw catalog payloads into validated Product / Category
models and provides id-based lookup over them.

Two payload shapes are accepted:
- the backend shape (``productName``, ``productEngName``, ``optionGroups``
  with ``groupName`` / ``isRequired`` / ``maxSelection``, options with
  ``optionName`` / ``additionalPrice``, ``categories`` per product);
- the normalized shape (``name``, ``eng_name``, ``price``, ``option_groups``).

Malformed entries are dropped with a warning and never abort the load.
Fuzzy matching does not belong here: lookup is by stable numeric id only.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import CatalogError
from .models import Category, Option, OptionGroup, Product, ProductType

logger = logging.getLogger(__name__)

SAMPLE_MENU_RESOURCE = "sample_menu.json"


def _first(raw: dict, *keys: str, default: Any = None) -> Any:
    """Return the first key present (and not None) in raw."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def _as_list(value: Any) -> list:
    """Return value when it is a list, else an empty list."""
    return value if isinstance(value, list) else []


def _normalize_option(raw: dict) -> Option | None:
    if not isinstance(raw, dict):
        logger.warning("Dropping option that is not an object: %r", raw)
        return None
    name = _first(raw, "optionName", "name")
    if not name or raw.get("id") is None:
        logger.warning("Dropping option without name or id: %s", raw)
        return None
    try:
        return Option(
            id=raw["id"],
            name=name,
            eng_name=_first(raw, "optionEngName", "engName", "eng_name"),
            price=_first(raw, "additionalPrice", "price", default=0),
            is_default=bool(_first(raw, "isDefault", "is_default", default=False)),
        )
    except ValidationError as e:
        logger.warning("Dropping malformed option '%s': %s", name, e)
        return None


def _normalize_option_group(raw: dict) -> OptionGroup | None:
    if not isinstance(raw, dict):
        logger.warning("Dropping option group that is not an object: %r", raw)
        return None
    name = _first(raw, "groupName", "name")
    options = [
        option
        for option in (_normalize_option(o) for o in _as_list(raw.get("options")))
        if option is not None
    ]
    if not options:
        logger.warning("Dropping option group '%s' with no options", name)
        return None

    # Without an explicit default, the first free option is the default
    if not any(o.is_default for o in options):
        for option in options:
            if option.price == 0:
                option.is_default = True
                break

    try:
        return OptionGroup(
            id=raw["id"],
            name=name or "옵션",
            eng_name=_first(raw, "groupEngName", "engName", "eng_name"),
            required=_first(raw, "isRequired", "required", default=True),
            max_selection=_first(raw, "maxSelection", "max_selection", default=1) or 1,
            options=options,
        )
    except (KeyError, ValidationError) as e:
        logger.warning("Dropping malformed option group '%s': %s", name, e)
        return None


def _normalize_product(raw: dict) -> Product | None:
    if not isinstance(raw, dict):
        logger.warning("Dropping product that is not an object: %r", raw)
        return None
    name = _first(raw, "productName", "name")
    price = raw.get("price")
    if not name or price is None:
        logger.warning("Dropping product without name or price: id=%s", raw.get("id"))
        return None
    if raw.get("isAvailable", raw.get("is_available", True)) is False:
        logger.info("Skipping unavailable product '%s'", name)
        return None

    groups = [
        group
        for group in (
            _normalize_option_group(g)
            for g in _as_list(_first(raw, "optionGroups", "option_groups"))
        )
        if group is not None
    ]

    category_id = _first(raw, "categoryId", "category_id")
    category_name = _first(raw, "categoryName", "category_name")
    categories = _as_list(raw.get("categories"))
    if category_id is None and categories and isinstance(categories[0], dict):
        category_id = categories[0].get("id")
        category_name = _first(categories[0], "categoryName", "name")

    try:
        if groups:
            product_type = ProductType.SET
        else:
            product_type = ProductType(raw.get("type") or ProductType.SINGLE.value)
        return Product(
            id=raw["id"],
            name=name,
            eng_name=_first(raw, "productEngName", "engName", "eng_name"),
            description=raw.get("description"),
            eng_description=_first(raw, "engDescription", "eng_description"),
            price=price,
            type=product_type,
            category_id=category_id,
            category_name=category_name,
            option_groups=groups,
        )
    except (KeyError, ValueError) as e:
        logger.warning("Dropping malformed product '%s': %s", name, e)
        return None


def _normalize_category(raw: dict) -> Category | None:
    if not isinstance(raw, dict):
        logger.warning("Dropping category that is not an object: %r", raw)
        return None
    name = _first(raw, "categoryName", "name")
    if not name or raw.get("id") is None:
        logger.warning("Dropping category without name or id: %s", raw)
        return None
    try:
        return Category(
            id=raw["id"],
            name=name,
            eng_name=_first(raw, "categoryEngName", "engName", "eng_name"),
            display_order=_first(raw, "displayOrder", "display_order", default=0),
        )
    except ValidationError as e:
        logger.warning("Dropping malformed category '%s': %s", name, e)
        return None


class Catalog:
    """
    Immutable catalog snapshot for one session.

    Products keep the order they were loaded in; categories are sorted by
    display_order.
    """

    def __init__(self, products: list[Product], categories: list[Category] | None = None):
        self._products = tuple(products)
        self._categories = tuple(sorted(categories or [], key=lambda c: c.display_order))
        self._products_by_id = {p.id: p for p in self._products}
        self._categories_by_id = {c.id: c for c in self._categories}

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    def get_product(self, product_id: int) -> Product | None:
        return self._products_by_id.get(product_id)

    def get_category(self, category_id: int) -> Category | None:
        return self._categories_by_id.get(category_id)

    def products_in_category(self, category_id: int) -> list[Product]:
        return [p for p in self._products if p.category_id == category_id]

    def __len__(self) -> int:
        return len(self._products)

    def __repr__(self) -> str:
        return f"Catalog(products={len(self._products)}, categories={len(self._categories)})"


def load_catalog(data: dict | list) -> Catalog:
    """
    Build a Catalog from a raw payload.

    Args:
        data: Either a list of product dicts or a dict with "products" and
              optional "categories" lists.

    Returns:
        Catalog with malformed entries filtered out
    """
    if isinstance(data, list):
        raw_products, raw_categories = data, []
    else:
        raw_products = _as_list(data.get("products"))
        raw_categories = _as_list(data.get("categories"))

    products = [p for p in (_normalize_product(r) for r in raw_products) if p is not None]
    categories = [c for c in (_normalize_category(r) for r in raw_categories) if c is not None]

    dropped = len(raw_products) - len(products)
    if dropped:
        logger.warning("Dropped %d of %d catalog products", dropped, len(raw_products))
    logger.info("Loaded catalog with %d products, %d categories", len(products), len(categories))
    return Catalog(products, categories)


def load_catalog_file(path: str | Path) -> Catalog:
    """Load a catalog from a JSON file, raising CatalogError when unreadable."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(str(path), str(e)) from e
    if not isinstance(data, (dict, list)):
        raise CatalogError(str(path), "expected a JSON object or array")
    return load_catalog(data)


def load_sample_catalog() -> Catalog:
    """Load the bundled sample menu."""
    text = resources.files("kiosk_bot.data").joinpath(SAMPLE_MENU_RESOURCE).read_text(encoding="utf-8")
    return load_catalog(json.loads(text))
