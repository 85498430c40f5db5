from app.models.base import BaseDynamicDocument


class Order(BaseDynamicDocument):
    """Order document. Holds whatever fields the client sent, unvalidated."""

    meta = {
        "collection": "orders",
    }
