import logging
import uuid
from fastapi import HTTPException

# Import from other modules
from .core import (
    SelectCategoryIn, AddToCartIn, UpdateQuantityIn,
    _make_product_view, _make_cart_view, _make_session_view
)
from .database import SESSIONS, _LOCKS, _get_lock
from .models import ALL_CATEGORIES, AppState
from .state import PosStateMachine

# This file contains the core logic for all API endpoints.

logger = logging.getLogger(__name__)

def _get_machine(session_id: str) -> PosStateMachine:
    machine = SESSIONS.get(session_id)
    if machine is None:
        raise HTTPException(status_code=404, detail="session not found")
    return machine

def _log_change(session_id: str):
    def listener(state: AppState) -> None:
        logger.debug(
            "session %s: %d cart lines, loading=%s, message=%r",
            session_id, len(state.cart), state.is_loading, state.status_message,
        )
    return listener

# Session endpoints
async def create_session_logic():
    sid = uuid.uuid4().hex
    machine = PosStateMachine()
    machine.subscribe(_log_change(sid))
    SESSIONS[sid] = machine
    logger.info("session %s started", sid)
    await load_catalog_logic(sid)
    return _make_session_view(sid, machine)

async def get_session_logic(session_id: str):
    return _make_session_view(session_id, _get_machine(session_id))

async def end_session_logic(session_id: str):
    _get_machine(session_id)
    del SESSIONS[session_id]
    _LOCKS.pop(f"session:{session_id}", None)
    logger.info("session %s ended", session_id)
    return {"session_id": session_id, "status": "ended"}

async def load_catalog_logic(session_id: str):
    machine = _get_machine(session_id)
    async with _get_lock(f"session:{session_id}"):
        await machine.load_catalog()
    return _make_session_view(session_id, machine)

# Catalog endpoints
async def list_products_logic(session_id: str):
    machine = _get_machine(session_id)
    return [_make_product_view(machine, p) for p in machine.visible_products]

async def select_category_logic(session_id: str, payload: SelectCategoryIn):
    machine = _get_machine(session_id)
    known = machine.state.categories
    if payload.category != ALL_CATEGORIES and payload.category not in known:
        raise HTTPException(status_code=400, detail="unknown category")
    machine.select_category(payload.category)
    return _make_session_view(session_id, machine)

async def toggle_cart_logic(session_id: str):
    machine = _get_machine(session_id)
    machine.toggle_cart_panel()
    return {"session_id": session_id, "is_cart_expanded": machine.state.is_cart_expanded}

# Cart endpoints
async def cart_add_logic(session_id: str, payload: AddToCartIn):
    machine = _get_machine(session_id)
    product = next((p for p in machine.state.products if p.id == payload.product_id), None)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    machine.add_to_cart(product)
    return _make_cart_view(machine)

async def cart_update_logic(session_id: str, payload: UpdateQuantityIn):
    machine = _get_machine(session_id)
    machine.update_quantity(payload.product_id, payload.quantity)
    return _make_cart_view(machine)

async def view_cart_logic(session_id: str):
    return _make_cart_view(_get_machine(session_id))

# Order endpoints
async def submit_order_logic(session_id: str):
    machine = _get_machine(session_id)
    async with _get_lock(f"session:{session_id}"):
        await machine.submit_order()
    return _make_session_view(session_id, machine)

async def dismiss_message_logic(session_id: str):
    machine = _get_machine(session_id)
    machine.dismiss_status_message()
    return {"session_id": session_id, "status_message": machine.state.status_message}

async def reset_logic():
    SESSIONS.clear()
    _LOCKS.clear()
    return {"status": "reset"}
