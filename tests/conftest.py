# tests/conftest.py
import os

# Must be set before pos.config caches its settings
os.environ.setdefault("POS_PRODUCTS_LATENCY", "0")
os.environ.setdefault("POS_CATEGORIES_LATENCY", "0")
os.environ.setdefault("POS_ORDER_LATENCY", "0")
os.environ.setdefault("POS_ORDER_SUCCESS_RATE", "1")

import pytest

from pos.services import CatalogService, OrderService, FixedOrderStrategy
from pos.state import PosStateMachine


def make_machine(order_result=True, products=None, order_service=None):
    catalog = CatalogService(products=products, products_latency=0, categories_latency=0)
    orders = order_service or OrderService(strategy=FixedOrderStrategy(order_result), latency=0)
    return PosStateMachine(catalog_service=catalog, order_service=orders)


@pytest.fixture
def machine():
    return make_machine()
