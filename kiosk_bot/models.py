"""
Pydantic models for the kiosk catalog and cart.

The catalog hierarchy is:
- Category
- Product (belongs to a Category)
  - OptionGroup (ordered, e.g. "사이드", "음료")
    - Option (ordered, with a price delta)

Cart lines (CartItem) snapshot the Product and the Options chosen for it.
Prices are whole won amounts.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ProductType(str, Enum):
    """Whether a product is sold alone or as a set with sides/drinks."""
    SINGLE = "SINGLE"
    SET = "SET"


class Option(BaseModel):
    """A single choice within an option group."""
    id: int
    name: str
    eng_name: str | None = None
    price: int = 0  # Delta added to the product price
    is_default: bool = False

    def display_name(self, language: str | None = None) -> str:
        if language == "en" and self.eng_name:
            return self.eng_name
        return self.name


class OptionGroup(BaseModel):
    """An ordered group of options the customer picks from."""
    id: int
    name: str
    eng_name: str | None = None
    required: bool = True
    max_selection: int = Field(default=1, ge=1)
    options: list[Option] = Field(min_length=1)

    @property
    def default_option(self) -> Option:
        """The option flagged as default, else the first option."""
        for option in self.options:
            if option.is_default:
                return option
        return self.options[0]

    def display_name(self, language: str | None = None) -> str:
        if language == "en" and self.eng_name:
            return self.eng_name
        return self.name


class Category(BaseModel):
    """A menu category."""
    id: int
    name: str
    eng_name: str | None = None
    display_order: int = 0


class Product(BaseModel):
    """A product on the menu, with its ordered option groups."""
    id: int
    name: str
    eng_name: str | None = None
    description: str | None = None
    eng_description: str | None = None
    price: int
    type: ProductType = ProductType.SINGLE
    category_id: int | None = None
    category_name: str | None = None
    option_groups: list[OptionGroup] = Field(default_factory=list)

    @property
    def is_set(self) -> bool:
        return self.type == ProductType.SET or bool(self.option_groups)

    def display_name(self, language: str | None = None) -> str:
        """English name for 'en' when one exists, else the Korean name."""
        if language == "en" and self.eng_name:
            return self.eng_name
        return self.name


class Candidate(BaseModel):
    """A scored (product, score) pair produced by the matching engine."""
    product: Product
    score: float


class CustomerProfile(BaseModel):
    """
    Optional demographic hints used only to pick prompt variants.

    age_group is one of "child", "teen", "20s", "30s", "40s" (anything else
    is treated as an adult); gender is "male" or "female".
    """
    age_group: str | None = None
    gender: str | None = None


class CartItem(BaseModel):
    """One line in the cart."""
    id: int  # Creation timestamp in ms, strictly increasing within a session
    product: Product
    selected_options: list[Option] = Field(default_factory=list)
    total_price: int
    created_at: float  # Seconds since the epoch

    @model_validator(mode="after")
    def _check_total(self) -> "CartItem":
        expected = self.product.price + sum(o.price for o in self.selected_options)
        if self.total_price != expected:
            raise ValueError(
                f"total_price {self.total_price} does not match product + options ({expected})"
            )
        return self

    @property
    def option_key(self) -> tuple[int, ...]:
        """Sorted option ids; two lines with the same key are the same configuration."""
        return tuple(sorted(o.id for o in self.selected_options))
