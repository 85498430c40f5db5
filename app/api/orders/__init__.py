from typing import Any

from fastapi import APIRouter, Body

from app.services.orders import create_order


router = APIRouter()


@router.post("/orders", status_code=201)
def post_order(payload: Any = Body(...)) -> dict:
    """PUBLIC: Store an order exactly as sent."""
    order = create_order(payload)
    return {"success": True, "order": order.to_dict()}
