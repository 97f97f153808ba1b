from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List

from .models import AppState, Product
from .pricing import Totals, format_currency
from .state import PosStateMachine

class SelectCategoryIn(BaseModel):
    category: str = Field(..., min_length=1)

class AddToCartIn(BaseModel):
    product_id: int

class UpdateQuantityIn(BaseModel):
    product_id: int
    quantity: int

class ProductView(BaseModel):
    product: Product
    display_price: str
    in_cart: int
    remaining_stock: int

class CartLineView(BaseModel):
    product: Product
    quantity: int
    subtotal: Decimal
    display_subtotal: str

class CartView(BaseModel):
    items: List[CartLineView]
    count: int
    totals: Totals

class SessionView(BaseModel):
    session_id: str
    state: AppState
    visible_products: List[ProductView]
    cart_count: int
    totals: Totals

def _make_product_view(machine: PosStateMachine, p: Product) -> ProductView:
    return ProductView(
        product=p,
        display_price=format_currency(p.price),
        in_cart=machine.current_cart_quantity(p.id),
        remaining_stock=machine.remaining_stock(p),
    )

def _make_cart_view(machine: PosStateMachine) -> CartView:
    items = []
    for it in machine.state.cart:
        items.append(CartLineView(
            product=it.product,
            quantity=it.quantity,
            subtotal=it.subtotal,
            display_subtotal=format_currency(it.subtotal),
        ))
    return CartView(items=items, count=machine.cart_count, totals=machine.cart_totals())

def _make_session_view(session_id: str, machine: PosStateMachine) -> SessionView:
    return SessionView(
        session_id=session_id,
        state=machine.snapshot(),
        visible_products=[_make_product_view(machine, p) for p in machine.visible_products],
        cart_count=machine.cart_count,
        totals=machine.cart_totals(),
    )
