# pos/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from typing import List

from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .core import (
    SelectCategoryIn, AddToCartIn, UpdateQuantityIn,
    ProductView, CartView, SessionView
)
from .logging_config import configure_logging
from .sdk import (
    create_session_logic, get_session_logic, end_session_logic, load_catalog_logic,
    list_products_logic, select_category_logic, toggle_cart_logic,
    cart_add_logic, cart_update_logic, view_cart_logic,
    submit_order_logic, dismiss_message_logic, reset_logic
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield

app = FastAPI(title="grocery-pos (in-memory demo)", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Session endpoints
# ---------------------------
@app.post("/sessions", status_code=201, response_model=SessionView)
async def create_session():
    return await create_session_logic()

@app.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str):
    return await get_session_logic(session_id)

@app.delete("/sessions/{session_id}")
async def end_session(session_id: str):
    return await end_session_logic(session_id)

@app.post("/sessions/{session_id}/load", response_model=SessionView)
async def load_catalog(session_id: str):
    return await load_catalog_logic(session_id)

# ---------------------------
# Catalog endpoints
# ---------------------------
@app.get("/sessions/{session_id}/products", response_model=List[ProductView])
async def list_products(session_id: str):
    return await list_products_logic(session_id)

@app.post("/sessions/{session_id}/category", response_model=SessionView)
async def select_category(session_id: str, payload: SelectCategoryIn):
    return await select_category_logic(session_id, payload)

# ---------------------------
# Cart endpoints
# ---------------------------
@app.post("/sessions/{session_id}/cart/toggle")
async def toggle_cart(session_id: str):
    return await toggle_cart_logic(session_id)

@app.post("/sessions/{session_id}/cart/add", response_model=CartView)
async def cart_add(session_id: str, payload: AddToCartIn):
    return await cart_add_logic(session_id, payload)

@app.post("/sessions/{session_id}/cart/update", response_model=CartView)
async def cart_update(session_id: str, payload: UpdateQuantityIn):
    return await cart_update_logic(session_id, payload)

@app.get("/sessions/{session_id}/cart", response_model=CartView)
async def view_cart(session_id: str):
    return await view_cart_logic(session_id)

# ---------------------------
# Orders
# ---------------------------
@app.post("/sessions/{session_id}/submit", response_model=SessionView)
async def submit_order(session_id: str):
    return await submit_order_logic(session_id)

@app.post("/sessions/{session_id}/message/dismiss")
async def dismiss_message(session_id: str):
    return await dismiss_message_logic(session_id)

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    return await reset_logic()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8085)
