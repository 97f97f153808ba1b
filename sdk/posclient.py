# sdk/posclient.py
import requests
import httpx
from typing import Optional
from rich import print

from pos.config import get_settings

class PosClient:
    def __init__(self, base_url: Optional[str] = None, timeout: int = 10):
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _url(self, session_id: str, path: str = "") -> str:
        return f"{self.base_url}/sessions/{session_id}{path}"

    def reset(self):
        r = self.session.post(f"{self.base_url}/reset", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Sessions
    def start_session(self):
        r = self.session.post(f"{self.base_url}/sessions", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_session(self, session_id: str):
        r = self.session.get(self._url(session_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def end_session(self, session_id: str):
        r = self.session.delete(self._url(session_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def reload_catalog(self, session_id: str):
        r = self.session.post(self._url(session_id, "/load"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Catalog
    def list_products(self, session_id: str):
        r = self.session.get(self._url(session_id, "/products"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def select_category(self, session_id: str, category: str):
        r = self.session.post(self._url(session_id, "/category"), json={"category": category}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Cart
    def toggle_cart(self, session_id: str):
        r = self.session.post(self._url(session_id, "/cart/toggle"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def add_to_cart(self, session_id: str, product_id: int):
        r = self.session.post(self._url(session_id, "/cart/add"), json={"product_id": int(product_id)}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_quantity(self, session_id: str, product_id: int, quantity: int):
        payload = {"product_id": int(product_id), "quantity": int(quantity)}
        r = self.session.post(self._url(session_id, "/cart/update"), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def view_cart(self, session_id: str):
        r = self.session.get(self._url(session_id, "/cart"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Orders
    def submit_order(self, session_id: str):
        # the order service takes ~1.2s; leave room on top of it
        r = self.session.post(self._url(session_id, "/submit"), timeout=self.timeout + 5)
        r.raise_for_status()
        return r.json()

    async def submit_order_async(self, session_id: str):
        async with httpx.AsyncClient(timeout=self.timeout + 5) as client:
            r = await client.post(self._url(session_id, "/submit"))
            r.raise_for_status()
            return r.json()

    def dismiss_message(self, session_id: str):
        r = self.session.post(self._url(session_id, "/message/dismiss"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Grocery POS client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("start", help="Start a session and load the catalog")

    st = subparsers.add_parser("state", help="Show session state")
    st.add_argument("--session", required=True, help="Session ID")

    lp = subparsers.add_parser("list-products", help="List products in the selected category")
    lp.add_argument("--session", required=True, help="Session ID")

    cat = subparsers.add_parser("select-category", help="Filter products by category")
    cat.add_argument("--session", required=True, help="Session ID")
    cat.add_argument("--category", required=True, help="Category name or 'All'")

    add = subparsers.add_parser("add-to-cart", help="Add one unit of a product to the cart")
    add.add_argument("--session", required=True, help="Session ID")
    add.add_argument("--product-id", type=int, required=True, help="Product ID")

    up = subparsers.add_parser("update-quantity", help="Set a cart line quantity (0 removes it)")
    up.add_argument("--session", required=True, help="Session ID")
    up.add_argument("--product-id", type=int, required=True, help="Product ID")
    up.add_argument("--qty", type=int, required=True, help="New quantity")

    vc = subparsers.add_parser("view-cart", help="View cart contents and totals")
    vc.add_argument("--session", required=True, help="Session ID")

    so = subparsers.add_parser("submit", help="Submit the cart as an order")
    so.add_argument("--session", required=True, help="Session ID")

    args = parser.parse_args()
    c = PosClient()

    if args.command == "start":
        print(c.start_session())
    elif args.command == "state":
        print(c.get_session(args.session))
    elif args.command == "list-products":
        print(c.list_products(args.session))
    elif args.command == "select-category":
        print(c.select_category(args.session, args.category))
    elif args.command == "add-to-cart":
        print(c.add_to_cart(args.session, args.product_id))
    elif args.command == "update-quantity":
        print(c.update_quantity(args.session, args.product_id, args.qty))
    elif args.command == "view-cart":
        print(c.view_cart(args.session))
    elif args.command == "submit":
        print(c.submit_order(args.session))
