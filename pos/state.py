"""Cart/order state machine behind one POS session.

``PosStateMachine`` owns the session's :class:`~pos.models.AppState`. Every
mutation goes through one of its methods; renderers read ``snapshot()`` or
subscribe to be handed a fresh snapshot after each change.

Only ``load_catalog`` and ``submit_order`` suspend (while awaiting the
catalog and order services). Their failures never escape: they are turned
into ``status_message`` and logged.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Callable, List, Optional

from . import pricing
from .models import ALL_CATEGORIES, AppState, CartItem, Product
from .services import CatalogService, OrderService

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading data. Check connection and retry."
ORDER_SUCCESS_MESSAGE = "Order submitted successfully!"
ORDER_REJECTED_MESSAGE = "Failed to submit order. Please try again."

Listener = Callable[[AppState], None]


class PosStateMachine:
    def __init__(
        self,
        catalog_service: Optional[CatalogService] = None,
        order_service: Optional[OrderService] = None,
    ) -> None:
        self.catalog_service = catalog_service or CatalogService.from_settings()
        self.order_service = order_service or OrderService.from_settings()
        self._state = AppState()
        self._listeners: List[Listener] = []

    # ---- read model ----

    @property
    def state(self) -> AppState:
        return self._state

    def snapshot(self) -> AppState:
        return self._state.model_copy(
            update={
                "products": list(self._state.products),
                "categories": list(self._state.categories),
                "cart": [item.model_copy() for item in self._state.cart],
            }
        )

    @property
    def visible_products(self) -> List[Product]:
        selected = self._state.selected_category
        if selected == ALL_CATEGORIES:
            return list(self._state.products)
        return [p for p in self._state.products if p.category == selected]

    @property
    def cart_count(self) -> int:
        return len(self._state.cart)

    # ---- change notification ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("state listener %r failed", listener)

    def _set(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self._state, name, value)
        self._notify()

    # ---- catalog ----

    async def load_catalog(self) -> None:
        self._set(is_loading=True)
        try:
            products, categories = await asyncio.gather(
                self.catalog_service.fetch_products(),
                self.catalog_service.fetch_categories(),
            )
            self._state.products = list(products)
            self._state.categories = [ALL_CATEGORIES] + list(categories)
            logger.info("catalog loaded: %d products, %d categories", len(products), len(categories))
        except Exception:
            logger.warning("catalog load failed", exc_info=True)
            self._state.status_message = LOAD_ERROR_MESSAGE
        finally:
            self._set(is_loading=False)

    def select_category(self, category: str) -> None:
        self._set(selected_category=category)

    def toggle_cart_panel(self) -> None:
        self._set(is_cart_expanded=not self._state.is_cart_expanded)

    # ---- cart ----

    def _find_product(self, product_id: int) -> Optional[Product]:
        return next((p for p in self._state.products if p.id == product_id), None)

    def _index_of(self, product_id: int) -> Optional[int]:
        for i, item in enumerate(self._state.cart):
            if item.product.id == product_id:
                return i
        return None

    def current_cart_quantity(self, product_id: int) -> int:
        i = self._index_of(product_id)
        return 0 if i is None else self._state.cart[i].quantity

    def remaining_stock(self, product: Product) -> int:
        return max(product.stock - self.current_cart_quantity(product.id), 0)

    def add_to_cart(self, product: Product) -> None:
        in_cart = self.current_cart_quantity(product.id)
        if in_cart >= product.stock:
            return
        cart = list(self._state.cart)
        i = self._index_of(product.id)
        if i is None:
            cart.append(CartItem(product=product, quantity=1))
        else:
            cart[i] = cart[i].model_copy(update={"quantity": in_cart + 1})
        self._set(cart=cart)

    def update_quantity(self, product_id: int, new_quantity: int) -> None:
        i = self._index_of(product_id)
        if i is None:
            return
        # products dropped from the catalog have no ceiling
        product = self._find_product(product_id)
        if product is not None:
            new_quantity = min(new_quantity, product.stock)
        cart = list(self._state.cart)
        if new_quantity <= 0:
            del cart[i]
        else:
            cart[i] = cart[i].model_copy(update={"quantity": new_quantity})
        self._set(cart=cart)

    # ---- pricing ----

    def cart_subtotal(self) -> Decimal:
        return pricing.subtotal(self._state.cart)

    def cart_tax(self) -> Decimal:
        return pricing.tax(self.cart_subtotal())

    def cart_grand_total(self) -> Decimal:
        return self.cart_subtotal() + self.cart_tax()

    def cart_totals(self) -> pricing.Totals:
        return pricing.totals(self._state.cart)

    # ---- orders ----

    async def submit_order(self) -> None:
        if not self._state.cart:
            return
        items = [item.model_copy() for item in self._state.cart]
        self._set(is_loading=True)
        try:
            accepted = await self.order_service.submit_order(items)
            if accepted:
                self._state.cart = []
                self._state.status_message = ORDER_SUCCESS_MESSAGE
            else:
                logger.warning("order rejected by backend")
                self._state.status_message = ORDER_REJECTED_MESSAGE
        except Exception as e:
            logger.exception("order submission failed")
            self._state.status_message = f"Order failed: {str(e) or 'Unknown error'}"
        finally:
            self._set(is_loading=False)

    def dismiss_status_message(self) -> None:
        self._set(status_message=None)
