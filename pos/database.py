import asyncio
from decimal import Decimal
from typing import Dict, List

from .models import Product

# This file holds all the in-memory data: the static catalog the mock
# backend serves, the live sessions and their locks.

MOCK_PRODUCTS: List[Product] = [
    Product(id=1, name="Organic Bananas", price=Decimal("2.99"), category="Produce", description="Per pound, organic yellow bananas", emoji="🍌", stock=85),
    Product(id=2, name="Roma Tomatoes", price=Decimal("3.49"), category="Produce", description="Fresh roma tomatoes per pound", emoji="🍅", stock=42),
    Product(id=3, name="Organic Spinach", price=Decimal("4.99"), category="Produce", description="5oz container fresh baby spinach", emoji="🥬", stock=28),
    Product(id=4, name="Red Bell Peppers", price=Decimal("5.99"), category="Produce", description="Per pound, fresh red bell peppers", emoji="🫑", stock=35),
    Product(id=5, name="Avocados", price=Decimal("6.99"), category="Produce", description="Package of 4 ripe avocados", emoji="🥑", stock=63),
    Product(id=6, name="Whole Milk", price=Decimal("4.49"), category="Dairy", description="1 gallon whole milk", emoji="🥛", stock=120),
    Product(id=7, name="Large Eggs", price=Decimal("3.99"), category="Dairy", description="Dozen large grade A eggs", emoji="🥚", stock=95),
    Product(id=8, name="Cheddar Cheese", price=Decimal("7.99"), category="Dairy", description="8oz sharp cheddar cheese block", emoji="🧀", stock=67),
    Product(id=9, name="Greek Yogurt", price=Decimal("5.99"), category="Dairy", description="32oz container plain Greek yogurt", emoji="🥛", stock=45),
    Product(id=10, name="Butter", price=Decimal("6.49"), category="Dairy", description="1 pound salted butter", emoji="🧈", stock=78),
    Product(id=11, name="Ground Beef", price=Decimal("8.99"), category="Meat", description="1 pound 85% lean ground beef", emoji="🥩", stock=32),
    Product(id=12, name="Chicken Breast", price=Decimal("12.99"), category="Meat", description="Per pound boneless skinless", emoji="🐔", stock=28),
    Product(id=13, name="Salmon Fillet", price=Decimal("16.99"), category="Meat", description="Per pound Atlantic salmon fillet", emoji="🐟", stock=18),
    Product(id=14, name="Whole Wheat Bread", price=Decimal("3.99"), category="Bakery", description="24oz loaf whole wheat bread", emoji="🍞", stock=55),
    Product(id=15, name="Bagels", price=Decimal("4.99"), category="Bakery", description="6-pack everything bagels", emoji="🥯", stock=40),
    Product(id=16, name="Pasta", price=Decimal("2.49"), category="Pantry", description="1 pound box penne pasta", emoji="🍝", stock=180),
    Product(id=17, name="Rice", price=Decimal("4.99"), category="Pantry", description="2 pound bag jasmine rice", emoji="🍚", stock=150),
    Product(id=18, name="Olive Oil", price=Decimal("8.99"), category="Pantry", description="500ml extra virgin olive oil", emoji="🫒", stock=75),
    Product(id=19, name="Cereal", price=Decimal("5.99"), category="Pantry", description="Family size honey nut cereal", emoji="🥣", stock=90),
    Product(id=20, name="Coffee", price=Decimal("12.99"), category="Beverages", description="12oz bag ground coffee medium roast", emoji="☕", stock=65),
]

# session id -> PosStateMachine
SESSIONS: Dict[str, "PosStateMachine"] = {}
_LOCKS: Dict[str, asyncio.Lock] = {}

def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]
