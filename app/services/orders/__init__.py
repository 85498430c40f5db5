from __future__ import annotations

import logging
from typing import Any

from bson.errors import BSONError
from mongoengine.errors import FieldDoesNotExist, OperationError
from mongoengine.errors import ValidationError as DocumentValidationError
from pymongo.errors import PyMongoError

from app.models.order import Order
from app.utils.base import PersistenceError, ValidationError


logger = logging.getLogger(__name__)


def _is_reserved(key: str) -> bool:
    return key.startswith(("_", "$")) or "." in key or hasattr(Order, key)


def create_order(payload: Any) -> Order:
    """Persist the payload verbatim as a new order."""
    if not isinstance(payload, dict):
        raise ValidationError("Order must be a JSON object")

    # Such keys would be dropped by the document or shadow its attributes
    reserved = sorted(key for key in payload if _is_reserved(key))
    if reserved:
        raise ValidationError(f"Order contains reserved keys: {', '.join(reserved)}")

    try:
        order = Order(**payload)
        order.save()
    except (OperationError, DocumentValidationError, FieldDoesNotExist, BSONError, PyMongoError, TypeError, ValueError) as exc:
        logger.error("Order save failed: %s", exc, exc_info=True)
        raise PersistenceError(str(exc))

    logger.info("Order saved: %s", order.id)
    return order
