"""
Order Session / Cart Manager
============================

This module holds the state of one kiosk ordering session: the
conversation state, the product being configured, the candidates on
offer, the option groups still to ask about, the options chosen so far
and the cart.

Session lifecycle:
------------------
A session is created when the kiosk enters IDLE and is reset (everything
except the static catalog and the kiosk language) when an order completes or is cancelled. The
dispatcher is the only writer; collaborators read it through the
dispatcher's ``state`` property.

Duplicate-submission guard:
---------------------------
A touch on the option screen and a voice answer can race and commit the
same configured product twice. ``add_to_cart`` therefore rejects a line
whose product id and sorted option-id set equal a line created within
DUPLICATE_ADD_WINDOW_SECONDS. Either way the configuring fields are
cleared, so a second call without a new selection is a no-op.

Usage:
------
    from kiosk_bot.services.session import KioskSession

    session = KioskSession(catalog=catalog)
    session.current_product = product
    session.selected_options = [option]
    item = session.add_to_cart()
"""

import logging
import time

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .. import config
from ..catalog import Catalog
from ..models import Candidate, CartItem, CustomerProfile, Option, OptionGroup, Product
from ..schemas import KioskState

logger = logging.getLogger(__name__)

# Fields that describe the kiosk rather than the order
RESET_KEEPS = frozenset({"catalog", "language"})


class KioskSession(BaseModel):
    """In-memory state of one ordering session."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    current_state: KioskState = KioskState.IDLE
    current_product: Product | None = None
    candidates: list[Candidate] = Field(default_factory=list)
    pending_options: list[OptionGroup] = Field(default_factory=list)
    selected_options: list[Option] = Field(default_factory=list)
    cart: list[CartItem] = Field(default_factory=list)
    language: str = Field(default_factory=lambda: config.DEFAULT_LANGUAGE)
    customer_profile: CustomerProfile | None = None
    last_input: str = ""
    last_message: str = ""
    error: str | None = None

    # Static for the whole session; survives reset()
    catalog: Catalog | None = Field(default=None, exclude=True)

    _last_item_id: int = PrivateAttr(default=0)

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def cart_total(self) -> int:
        return sum(item.total_price for item in self.cart)

    @property
    def cart_count(self) -> int:
        return len(self.cart)

    # =========================================================================
    # Cart operations
    # =========================================================================

    def _next_item_id(self, now: float) -> int:
        """Creation timestamp in ms, bumped so ids stay strictly increasing."""
        item_id = max(int(now * 1000), self._last_item_id + 1)
        self._last_item_id = item_id
        return item_id

    def _find_duplicate(self, product: Product, option_key: tuple[int, ...], now: float) -> CartItem | None:
        window = config.DUPLICATE_ADD_WINDOW_SECONDS
        for item in reversed(self.cart):
            if now - item.created_at >= window:
                continue
            if item.product.id == product.id and item.option_key == option_key:
                return item
        return None

    def _clear_configuring(self) -> None:
        self.current_product = None
        self.selected_options = []
        self.pending_options = []

    def add_to_cart(self, now: float | None = None) -> CartItem | None:
        """
        Commit the product being configured to the cart.

        Args:
            now: Current time in seconds (defaults to time.time())

        Returns:
            The new CartItem, or None when no product is set or the line
            duplicates one added within the duplicate window
        """
        if self.current_product is None:
            logger.error("add_to_cart called without a current product")
            return None

        now = time.time() if now is None else now
        product = self.current_product
        options = list(self.selected_options)
        option_key = tuple(sorted(o.id for o in options))

        duplicate = self._find_duplicate(product, option_key, now)
        if duplicate is not None:
            logger.warning(
                "Rejected duplicate add of '%s' %s (matches cart item %d)",
                product.name, list(option_key), duplicate.id,
            )
            self._clear_configuring()
            return None

        item = CartItem(
            id=self._next_item_id(now),
            product=product,
            selected_options=options,
            total_price=product.price + sum(o.price for o in options),
            created_at=now,
        )
        self.cart.append(item)
        self._clear_configuring()
        logger.info(
            "Added '%s' to cart (%d won, %d options); cart has %d items",
            product.name, item.total_price, len(options), len(self.cart),
        )
        return item

    def remove_from_cart(self, item_id: int) -> bool:
        """Remove a cart line by id. Returns False when no line has that id."""
        before = len(self.cart)
        self.cart = [item for item in self.cart if item.id != item_id]
        removed = len(self.cart) < before
        if removed:
            logger.info("Removed cart item %d", item_id)
        else:
            logger.warning("No cart item with id %d", item_id)
        return removed

    def reset(self) -> None:
        """Return every field to its default, keeping the catalog and language."""
        for name, field in type(self).model_fields.items():
            if name in RESET_KEEPS:
                continue
            setattr(self, name, field.get_default(call_default_factory=True))
        logger.info("Session reset")
