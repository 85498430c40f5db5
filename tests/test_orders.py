"""Tests for order creation and the liveness route."""
from app.models.order import Order


def test_liveness(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Backend is running"


def test_order_saved_verbatim(client):
    payload = {
        "customer": {"name": "Ann", "phone": "123"},
        "items": [{"sku": "TEA-1", "qty": 2}],
        "total": 499.5,
    }
    response = client.post("/api/orders", json=payload)
    assert response.status_code == 201
    order = response.json()["order"]
    assert order["customer"] == payload["customer"]
    assert order["items"] == payload["items"]
    assert order["total"] == 499.5
    assert order["id"]

    stored = Order.objects.get(id=order["id"])
    assert stored.items == payload["items"]


def test_non_object_rejected(client):
    response = client.post("/api/orders", json=[1, 2, 3])
    assert response.status_code == 400
    assert Order.objects.count() == 0


def test_store_error_surfaces_message(client, monkeypatch):
    from mongoengine.errors import OperationError

    def reject(self, *args, **kwargs):
        raise OperationError("schema violation")

    monkeypatch.setattr(Order, "save", reject)
    response = client.post("/api/orders", json={"total": 1})
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "schema violation"}


def test_underscore_keys_rejected(client):
    response = client.post("/api/orders", json={"_note": "gift", "total": 1})
    assert response.status_code == 400
    assert response.json()["message"] == "Order contains reserved keys: _note"
    assert Order.objects.count() == 0


def test_keys_shadowing_document_attributes_rejected(client):
    response = client.post("/api/orders", json={"save": True, "to_dict": 1, "id": "x", "total": 1})
    assert response.status_code == 400
    assert response.json()["message"] == "Order contains reserved keys: id, save, to_dict"
    assert Order.objects.count() == 0


def test_dotted_and_operator_keys_rejected(client):
    response = client.post("/api/orders", json={"a.b": 1, "$set": 2})
    assert response.status_code == 400
    assert response.json()["message"] == "Order contains reserved keys: $set, a.b"
