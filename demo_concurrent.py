import asyncio
import httpx
from sdk.posclient import PosClient

async def simulate_submit(client, session_id, label):
    try:
        view = await client.submit_order_async(session_id)
        state = view["state"]
        print(f"{label}: cart lines left={len(state['cart'])}, message={state['status_message']!r}")
    except httpx.HTTPStatusError as e:
        print(f"❌ {label} failed with HTTP {e.response.status_code}")
    except Exception as e:
        print(f"❌ {label} unexpected failure: {e}")

async def main():
    c = PosClient()

    view = c.start_session()
    sid = view["session_id"]
    print(f"\n🧾 Session {sid} with {len(view['state']['products'])} products")

    c.add_to_cart(sid, 1)
    c.add_to_cart(sid, 1)
    c.add_to_cart(sid, 20)
    print("🛒 Cart:", c.view_cart(sid)["totals"])

    # The second submit waits for the first one; if the first succeeds it
    # finds an empty cart and does nothing.
    print("\n⚡ Submitting the same cart twice at once...")
    await asyncio.gather(
        simulate_submit(c, sid, "first"),
        simulate_submit(c, sid, "second"),
    )

    print("\n📦 Final state:", c.get_session(sid)["state"]["status_message"])
    c.end_session(sid)

if __name__ == "__main__":
    asyncio.run(main())
