from decimal import Decimal

import pytest

from app.auth import UserContext
from app.gateway import SQLAlchemyGateway
from app.services.notifications import RecordingNotifier
from app.services.orders import OrderService, ValidationError, NotFound
from app.version import API_PREFIX
from models import db
from models.order import Order, OrderItem, Review

from conftest import login, make_product

USER = UserContext(user_id="user-1")


def _service(user=USER):
    notifier = RecordingNotifier()
    return OrderService(SQLAlchemyGateway(db.session), notifier, user), notifier


def _order(product_id, status="processing", payment_status="Cash on Delivery", user_id=USER.user_id):
    order = Order(user_id=user_id, total_amount=Decimal("105.00"), payment_method="Cash on Delivery",
                  payment_status=payment_status, status=status)
    db.session.add(order)
    db.session.flush()
    db.session.add(OrderItem(order_id=order.id, product_id=product_id, quantity=1, price=Decimal("100.00")))
    db.session.commit()
    return order.id


def test_history_filters(app):
    pillow = make_product(name="Neck Pillow")
    adapter = make_product(name="Power Adapter")
    _order(pillow, status="delivered")
    _order(adapter, payment_status="completed")
    _order(adapter, user_id="someone-else")
    service, _ = _service()

    assert len(service.history()) == 2
    assert [o["items"][0]["name"] for o in service.history(q="pillow")] == ["Neck Pillow"]
    assert [o["status"] for o in service.history(status="delivered")] == ["delivered"]
    assert [o["payment_status"] for o in service.history(payment_status="completed")] == ["completed"]


def test_cancel_open_order(app):
    oid = _order(make_product())
    service, notifier = _service()
    assert service.cancel(oid)
    assert db.session.get(Order, oid).status == "cancelled"
    assert notifier.last == ("success", "Order cancelled successfully")


def test_cannot_cancel_closed_or_foreign_order(app):
    pid = make_product()
    delivered = _order(pid, status="delivered")
    foreign = _order(pid, user_id="someone-else")
    service, notifier = _service()
    with pytest.raises(ValidationError):
        service.cancel(delivered)
    with pytest.raises(NotFound):
        service.cancel(foreign)
    assert notifier.last == ("error", "Failed to cancel order")


def test_review_delivered_order_once(app):
    pid = make_product()
    oid = _order(pid, status="delivered")
    service, notifier = _service()

    assert not service.already_reviewed(oid, pid)
    review = service.submit_review(oid, pid, 4, "Comfy")
    assert review["rating"] == 4
    assert notifier.last == ("success", "Review submitted successfully")
    assert service.already_reviewed(oid, pid)
    assert set(service.reviews()) == {f"{oid}-{pid}"}

    with pytest.raises(ValidationError):
        service.submit_review(oid, pid, 5)
    assert Review.query.count() == 1


def test_review_rules(app):
    pid = make_product()
    other = make_product(name="Other")
    processing = _order(pid)
    delivered = _order(pid, status="delivered")
    service, _ = _service()
    with pytest.raises(ValidationError):
        service.submit_review(processing, pid, 5)
    with pytest.raises(ValidationError):
        service.submit_review(delivered, other, 5)
    with pytest.raises(ValidationError):
        service.submit_review(delivered, pid, 6)
    assert Review.query.count() == 0


# --- HTTP ---

def test_cancel_and_review_over_http(client):
    pid = make_product()
    user_id, headers = login(client)
    open_order = _order(pid, user_id=user_id)
    done_order = _order(pid, status="delivered", user_id=user_id)

    resp = client.post(f"{API_PREFIX}/orders/{open_order}/cancel", headers=headers)
    assert resp.status_code == 200
    resp = client.post(f"{API_PREFIX}/orders/{done_order}/cancel", headers=headers)
    assert resp.status_code == 400

    resp = client.post(
        f"{API_PREFIX}/orders/{done_order}/reviews",
        json={"product_id": pid, "rating": 5, "review_text": "Great"},
        headers=headers,
    )
    assert resp.status_code == 201
    reviews = client.get(f"{API_PREFIX}/reviews", headers=headers).get_json()["data"]
    assert f"{done_order}-{pid}" in reviews

    resp = client.post(f"{API_PREFIX}/orders/missing/reviews", json={"product_id": pid}, headers=headers)
    assert resp.status_code == 404
