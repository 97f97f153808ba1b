# pos/models.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Optional

ALL_CATEGORIES = "All"

class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Decimal = Field(ge=0, decimal_places=2)
    category: str
    description: str = ""
    emoji: str = ""
    stock: int = Field(ge=0)

class CartItem(BaseModel):
    product: Product
    quantity: int = Field(ge=1)

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

class AppState(BaseModel):
    products: List[Product] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    selected_category: str = ALL_CATEGORIES
    cart: List[CartItem] = Field(default_factory=list)
    is_loading: bool = False
    status_message: Optional[str] = None
    is_cart_expanded: bool = True
