import pytest

from kiosk_bot.catalog import load_catalog, load_sample_catalog
from kiosk_bot.dispatcher import KioskController
from kiosk_bot.models import Option, OptionGroup, Product


class FakeClock:
    """Controllable time source for the dispatcher and cart."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sample_catalog():
    """The bundled sample menu (와퍼 / 불고기 와퍼 / 치킨버거, single and set)."""
    return load_sample_catalog()


@pytest.fixture
def whopper_catalog():
    """A one-product catalog: Whopper, 6500 won, no option groups."""
    return load_catalog([{"id": 1, "name": "Whopper", "price": 6500, "option_groups": []}])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def controller(sample_catalog, clock):
    """Controller over the sample menu, in Korean, with a fake clock."""
    return KioskController(sample_catalog, language="ko", clock=clock)


@pytest.fixture
def listening_controller(controller):
    """Controller that has greeted a customer and is waiting for an order."""
    controller.on_customer_detected()
    controller.on_tts_completed()
    return controller


@pytest.fixture
def shake_options():
    return [
        Option(id=1, name="바닐라 쉐이크", price=0, is_default=True),
        Option(id=2, name="초코 쉐이크", price=300),
    ]


@pytest.fixture
def big_group():
    """An option group with enough options that they are not read out."""
    return OptionGroup(
        id=9,
        name="디저트",
        eng_name="Dessert",
        options=[Option(id=90 + i, name=f"디저트{i}", price=0) for i in range(1, 6)],
    )


@pytest.fixture
def two_group_product(sample_catalog) -> Product:
    """불고기 와퍼 세트: groups [사이드, 음료] with two options each."""
    return sample_catalog.get_product(4)
