"""
Simulated backend services the POS talks to.

- CatalogService: product and category lookups behind an artificial delay.
- OrderService: order placement behind an artificial delay; whether an
  order is accepted is decided by a pluggable OrderStrategy.

A real deployment would swap these for HTTP calls against the store
backend. The state machine only depends on the method signatures.
"""

import asyncio
import logging
import random
from typing import List, Optional, Sequence

from .config import Settings, get_settings
from .database import MOCK_PRODUCTS
from .models import CartItem, Product

logger = logging.getLogger(__name__)


async def _with_timeout(coro, timeout: Optional[float]):
    if timeout is None:
        return await coro
    return await asyncio.wait_for(coro, timeout)


# ---------- Order strategies ----------

class OrderStrategy:
    """Decides whether a submitted order is accepted."""
    def accept(self, items: Sequence[CartItem]) -> bool:
        raise NotImplementedError


class RandomOrderStrategy(OrderStrategy):
    """Accept orders with a fixed probability, independently per call."""
    def __init__(self, success_rate: float = 0.85, rng: Optional[random.Random] = None) -> None:
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    def accept(self, items: Sequence[CartItem]) -> bool:
        return self.rng.random() < self.success_rate


class FixedOrderStrategy(OrderStrategy):
    """Always return the same answer. Used by tests and demos."""
    def __init__(self, result: bool) -> None:
        self.result = result

    def accept(self, items: Sequence[CartItem]) -> bool:
        return self.result


# ---------- Services ----------

class CatalogService:
    def __init__(
        self,
        products: Optional[Sequence[Product]] = None,
        products_latency: float = 0.8,
        categories_latency: float = 0.3,
        timeout: Optional[float] = None,
    ) -> None:
        self._catalog = list(MOCK_PRODUCTS if products is None else products)
        self.products_latency = products_latency
        self.categories_latency = categories_latency
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CatalogService":
        settings = settings or get_settings()
        return cls(
            products_latency=settings.products_latency,
            categories_latency=settings.categories_latency,
            timeout=settings.service_timeout,
        )

    async def _products(self) -> List[Product]:
        await asyncio.sleep(self.products_latency)
        return list(self._catalog)

    async def _categories(self) -> List[str]:
        await asyncio.sleep(self.categories_latency)
        # distinct, first-occurrence order
        return list(dict.fromkeys(p.category for p in self._catalog))

    async def fetch_products(self) -> List[Product]:
        products = await _with_timeout(self._products(), self.timeout)
        logger.debug("fetched %d products", len(products))
        return products

    async def fetch_categories(self) -> List[str]:
        categories = await _with_timeout(self._categories(), self.timeout)
        logger.debug("fetched categories %s", categories)
        return categories


class OrderService:
    def __init__(
        self,
        strategy: Optional[OrderStrategy] = None,
        latency: float = 1.2,
        timeout: Optional[float] = None,
    ) -> None:
        self.strategy = strategy or RandomOrderStrategy()
        self.latency = latency
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, strategy: Optional[OrderStrategy] = None) -> "OrderService":
        settings = settings or get_settings()
        return cls(
            strategy=strategy or RandomOrderStrategy(settings.order_success_rate),
            latency=settings.order_latency,
            timeout=settings.service_timeout,
        )

    async def _place(self, items: Sequence[CartItem]) -> bool:
        await asyncio.sleep(self.latency)
        return self.strategy.accept(items)

    async def submit_order(self, items: Sequence[CartItem]) -> bool:
        """Place an order for ``items``.

        Returns False when the backend rejects the order. Transport
        problems (including a configured timeout) are raised.
        """
        accepted = await _with_timeout(self._place(items), self.timeout)
        logger.info(
            "order %s (%d lines)", "accepted" if accepted else "rejected", len(items)
        )
        return accepted
