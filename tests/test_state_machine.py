# tests/test_state_machine.py
import asyncio
from decimal import Decimal

from pos.database import MOCK_PRODUCTS
from pos.models import Product
from pos.services import CatalogService, OrderService, FixedOrderStrategy
from pos.state import (
    LOAD_ERROR_MESSAGE, ORDER_SUCCESS_MESSAGE, ORDER_REJECTED_MESSAGE, PosStateMachine
)
from conftest import make_machine

BANANAS = MOCK_PRODUCTS[0]
SALMON = MOCK_PRODUCTS[12]


def loaded(machine):
    asyncio.run(machine.load_catalog())
    return machine


def test_load_catalog_fills_products_and_categories(machine):
    loaded(machine)
    state = machine.state
    assert len(state.products) == 20
    assert state.categories == ["All", "Produce", "Dairy", "Meat", "Bakery", "Pantry", "Beverages"]
    assert state.is_loading is False
    assert state.status_message is None


def test_load_failure_sets_message_and_keeps_catalog():
    class BrokenCatalog:
        async def fetch_products(self):
            raise ConnectionError("offline")

        async def fetch_categories(self):
            return ["Produce"]

    m = PosStateMachine(catalog_service=BrokenCatalog(), order_service=make_machine().order_service)
    asyncio.run(m.load_catalog())
    assert m.state.products == []
    assert m.state.categories == []
    assert m.state.status_message == LOAD_ERROR_MESSAGE
    assert m.state.is_loading is False


def test_loading_flag_only_during_load(machine):
    seen = []
    machine.subscribe(lambda s: seen.append(s.is_loading))
    loaded(machine)
    assert seen[0] is True
    assert seen[-1] is False
    assert machine.state.is_loading is False


def test_category_filter(machine):
    loaded(machine)
    assert machine.visible_products == machine.state.products

    machine.select_category("Dairy")
    dairy = [p for p in MOCK_PRODUCTS if p.category == "Dairy"]
    assert machine.visible_products == dairy
    assert all(p.category == "Dairy" for p in machine.visible_products)

    machine.select_category("All")
    assert len(machine.visible_products) == 20


def test_toggle_cart_panel(machine):
    assert machine.state.is_cart_expanded is True
    machine.toggle_cart_panel()
    assert machine.state.is_cart_expanded is False
    machine.toggle_cart_panel()
    assert machine.state.is_cart_expanded is True


def test_add_to_cart_increments_and_appends_in_order(machine):
    loaded(machine)
    machine.add_to_cart(BANANAS)
    machine.add_to_cart(SALMON)
    machine.add_to_cart(BANANAS)
    assert [(i.product.id, i.quantity) for i in machine.state.cart] == [(1, 2), (13, 1)]
    assert machine.current_cart_quantity(1) == 2
    assert machine.current_cart_quantity(999) == 0


def test_add_to_cart_never_exceeds_stock(machine):
    loaded(machine)
    scarce = Product(id=99, name="Truffle", price=Decimal("30.00"), category="Produce", stock=2)
    for _ in range(5):
        machine.add_to_cart(scarce)
    assert machine.current_cart_quantity(99) == 2
    assert machine.remaining_stock(scarce) == 0

    empty = Product(id=100, name="Sold out", price=Decimal("1.00"), category="Produce", stock=0)
    machine.add_to_cart(empty)
    assert machine.current_cart_quantity(100) == 0


def test_update_quantity_clamps_and_removes(machine):
    loaded(machine)
    machine.add_to_cart(BANANAS)
    machine.add_to_cart(SALMON)

    machine.update_quantity(SALMON.id, 500)
    assert machine.current_cart_quantity(SALMON.id) == SALMON.stock

    machine.update_quantity(BANANAS.id, 3)
    assert [i.product.id for i in machine.state.cart] == [1, 13]

    machine.update_quantity(BANANAS.id, 0)
    assert machine.current_cart_quantity(BANANAS.id) == 0
    assert [i.product.id for i in machine.state.cart] == [13]

    # absent product is a no-op
    machine.update_quantity(BANANAS.id, -1)
    machine.update_quantity(BANANAS.id, 4)
    assert [i.product.id for i in machine.state.cart] == [13]


def test_update_quantity_unbounded_when_product_left_catalog(machine):
    machine.add_to_cart(SALMON)
    # nothing loaded, so the product is not in the catalog
    machine.update_quantity(SALMON.id, 500)
    assert machine.current_cart_quantity(SALMON.id) == 500


def test_cart_lines_stay_unique(machine):
    loaded(machine)
    for p in MOCK_PRODUCTS[:5] * 3:
        machine.add_to_cart(p)
    machine.update_quantity(MOCK_PRODUCTS[2].id, 7)
    ids = [i.product.id for i in machine.state.cart]
    assert len(ids) == len(set(ids)) == 5
    assert machine.cart_count == 5


def test_pricing_identity(machine):
    loaded(machine)
    machine.add_to_cart(BANANAS)
    machine.add_to_cart(BANANAS)
    machine.add_to_cart(SALMON)
    sub = machine.cart_subtotal()
    assert sub == Decimal("22.97")
    assert machine.cart_tax() == sub * Decimal("0.08875")
    assert machine.cart_grand_total() == sub + sub * Decimal("0.08875")
    assert machine.cart_totals().grand_total == Decimal("25.01")


def test_submit_success_empties_cart():
    m = make_machine(order_result=True)
    loaded(m)
    m.add_to_cart(BANANAS)
    m.add_to_cart(BANANAS)
    asyncio.run(m.submit_order())
    assert m.state.cart == []
    assert m.state.status_message == ORDER_SUCCESS_MESSAGE
    assert m.state.is_loading is False


def test_submit_rejection_preserves_cart():
    m = make_machine(order_result=False)
    loaded(m)
    m.add_to_cart(BANANAS)
    m.add_to_cart(BANANAS)
    before = list(m.state.cart)
    asyncio.run(m.submit_order())
    assert m.state.cart == before
    assert m.state.status_message == ORDER_REJECTED_MESSAGE
    assert m.state.is_loading is False


def test_submit_error_reports_detail():
    class ExplodingOrders:
        def __init__(self, exc):
            self.exc = exc

        async def submit_order(self, items):
            raise self.exc

    m = make_machine(order_service=ExplodingOrders(RuntimeError("gateway down")))
    m.add_to_cart(BANANAS)
    asyncio.run(m.submit_order())
    assert m.state.status_message == "Order failed: gateway down"
    assert len(m.state.cart) == 1

    m = make_machine(order_service=ExplodingOrders(RuntimeError()))
    m.add_to_cart(BANANAS)
    asyncio.run(m.submit_order())
    assert m.state.status_message == "Order failed: Unknown error"


def test_submit_empty_cart_is_noop(machine):
    seen = []
    machine.subscribe(seen.append)
    asyncio.run(machine.submit_order())
    assert seen == []
    assert machine.state.status_message is None


def test_submitted_cart_is_a_snapshot():
    received = []

    class RecordingOrders:
        async def submit_order(self, items):
            received.append(items)
            await asyncio.sleep(0)
            return False

    m = make_machine(order_service=RecordingOrders())
    m.add_to_cart(BANANAS)

    async def scenario():
        task = asyncio.create_task(m.submit_order())
        await asyncio.sleep(0)
        m.add_to_cart(BANANAS)
        m.add_to_cart(SALMON)
        await task

    asyncio.run(scenario())
    assert [(i.product.id, i.quantity) for i in received[0]] == [(1, 1)]
    assert [(i.product.id, i.quantity) for i in m.state.cart] == [(1, 2), (13, 1)]


def test_dismiss_is_idempotent():
    m = make_machine(order_result=False)
    m.add_to_cart(BANANAS)
    asyncio.run(m.submit_order())
    assert m.state.status_message is not None
    m.dismiss_status_message()
    assert m.state.status_message is None
    m.dismiss_status_message()
    assert m.state.status_message is None


def test_listeners_get_snapshots_and_can_unsubscribe(machine):
    loaded(machine)
    seen = []
    unsubscribe = machine.subscribe(seen.append)
    machine.add_to_cart(BANANAS)
    assert len(seen) == 1
    assert seen[0].cart[0].quantity == 1

    machine.add_to_cart(BANANAS)
    # earlier snapshot is not affected by later changes
    assert seen[0].cart[0].quantity == 1

    unsubscribe()
    machine.add_to_cart(BANANAS)
    assert len(seen) == 2


def test_failing_listener_does_not_break_mutation(machine):
    def boom(state):
        raise ValueError("renderer crashed")

    seen = []
    machine.subscribe(boom)
    machine.subscribe(seen.append)
    machine.add_to_cart(BANANAS)
    assert machine.current_cart_quantity(BANANAS.id) == 1
    assert len(seen) == 1


def test_update_quantity_removes_line_when_stock_dropped_to_zero():
    m = make_machine(products=[Product(id=5, name="Avocados", price=Decimal("6.99"), category="Produce", stock=0)])
    m.add_to_cart(Product(id=5, name="Avocados", price=Decimal("6.99"), category="Produce", stock=3))
    loaded(m)
    m.update_quantity(5, 2)
    assert m.state.cart == []
    assert all(i.quantity >= 1 for i in m.state.cart)


def _timed_out_machine():
    catalog = CatalogService(products_latency=1, categories_latency=0, timeout=0.01)
    orders = OrderService(FixedOrderStrategy(True), latency=1, timeout=0.01)
    return PosStateMachine(catalog_service=catalog, order_service=orders)


def test_load_timeout_reports_load_error():
    m = _timed_out_machine()
    asyncio.run(m.load_catalog())
    assert m.state.status_message == LOAD_ERROR_MESSAGE
    assert m.state.products == []
    assert m.state.is_loading is False


def test_submit_timeout_reports_unknown_error():
    m = _timed_out_machine()
    m.add_to_cart(BANANAS)
    asyncio.run(m.submit_order())
    assert m.state.status_message == "Order failed: Unknown error"
    assert len(m.state.cart) == 1
    assert m.state.is_loading is False


def test_loading_flag_only_during_submit(machine):
    machine.add_to_cart(BANANAS)
    seen = []
    machine.subscribe(lambda s: seen.append(s.is_loading))
    asyncio.run(machine.submit_order())
    assert seen == [True, False]
