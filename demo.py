#!/usr/bin/env python
from sdk.posclient import PosClient

def main():
    c = PosClient()

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting sessions...")
    c.reset()

    # -----------------------------
    # Start a session (loads the catalog)
    # -----------------------------
    print("\nStarting session...")
    view = c.start_session()
    sid = view["session_id"]
    print(f"Session {sid}")
    print("Categories:", view["state"]["categories"])

    # -----------------------------
    # Filter by category
    # -----------------------------
    print("\nSelecting 'Dairy'...")
    view = c.select_category(sid, "Dairy")
    for p in view["visible_products"]:
        print(f"  {p['product']['emoji']} {p['product']['name']} {p['display_price']}")

    # -----------------------------
    # Add products to cart
    # -----------------------------
    print("\nAdding products to cart...")
    c.add_to_cart(sid, 1)
    c.add_to_cart(sid, 1)
    print(c.add_to_cart(sid, 8))

    # -----------------------------
    # Change a quantity (clamped to stock)
    # -----------------------------
    print("\nSetting cheddar to 500 units...")
    cart = c.update_quantity(sid, 8, 500)
    for it in cart["items"]:
        print(f"  {it['product']['name']} x{it['quantity']} = {it['display_subtotal']}")
    print("Totals:", cart["totals"])

    # -----------------------------
    # Submit order
    # -----------------------------
    print("\nSubmitting order...")
    view = c.submit_order(sid)
    print("Status:", view["state"]["status_message"])
    print("Cart lines left:", len(view["state"]["cart"]))
    c.dismiss_message(sid)

    c.end_session(sid)

if __name__ == "__main__":
    main()
