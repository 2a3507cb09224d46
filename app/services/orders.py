import logging
from typing import Optional

from app.auth import UserContext
from app.gateway import Gateway, GatewayError
from app.services.notifications import Notifier

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("processing", "shipped", "delivered", "cancelled")
CLOSED_STATUSES = ("cancelled", "delivered")


class ValidationError(Exception):
    pass


class NotFound(Exception):
    pass


def _iso(value):
    return value.isoformat() if value is not None else None


def serialize_order(row):
    items = []
    for oi in row.get("order_items") or []:
        product = oi.get("product") or {}
        items.append({
            "id": oi["id"],
            "product_id": oi["product_id"],
            "name": product.get("name"),
            "image_url": product.get("image_url"),
            "quantity": oi["quantity"],
            "price": float(oi["price"]),
        })
    return {
        "id": row["id"],
        "total_amount": float(row["total_amount"]),
        "payment_method": row["payment_method"],
        "payment_status": row["payment_status"],
        "status": row["status"],
        "created_at": _iso(row.get("created_at")),
        "items": items,
    }


def serialize_review(row):
    return {
        "id": row["id"],
        "order_id": row["order_id"],
        "product_id": row["product_id"],
        "rating": row["rating"],
        "review_text": row.get("review_text"),
        "created_at": _iso(row.get("created_at")),
    }


class OrderService:
    def __init__(self, gateway: Gateway, notifier: Notifier, user: Optional[UserContext]):
        self.gateway = gateway
        self.notifier = notifier
        self.user = user

    def history(self, q: str = "", status: str = "all", payment_status: str = "all"):
        """Own orders, newest first, with items and products."""
        if self.user is None:
            return []
        filters = {"user_id": self.user.user_id}
        if status and status != "all":
            filters["status"] = status
        if payment_status and payment_status != "all":
            filters["payment_status"] = payment_status
        try:
            rows = self.gateway.select(
                "orders",
                filters=filters,
                order=["-created_at"],
                joins=["order_items.product"],
            )
        except GatewayError:
            self.notifier.error("Failed to load orders")
            return []
        orders = [serialize_order(r) for r in rows]
        if q:
            needle = q.lower()
            orders = [
                o for o in orders
                if any(needle in (i["name"] or "").lower() for i in o["items"])
            ]
        return orders

    def _own_order(self, order_id):
        order = self.gateway.select_one(
            "orders", filters={"id": order_id, "user_id": self.user.user_id}, joins=["order_items"]
        )
        if order is None:
            raise NotFound("Order not found")
        return order

    def cancel(self, order_id: str) -> bool:
        try:
            order = self._own_order(order_id)
            if order["status"] in CLOSED_STATUSES:
                raise ValidationError("Order already closed")
            self.gateway.update(
                "orders", {"status": "cancelled"}, {"id": order_id, "user_id": self.user.user_id}
            )
        except (GatewayError, NotFound, ValidationError) as e:
            logger.info("cancel order %s refused: %s", order_id, e)
            self.notifier.error("Failed to cancel order")
            raise
        self.notifier.success("Order cancelled successfully")
        return True

    def reviews(self):
        """Own reviews keyed by ``"<order_id>-<product_id>"``."""
        if self.user is None:
            return {}
        try:
            rows = self.gateway.select("reviews", filters={"user_id": self.user.user_id})
        except GatewayError:
            logger.warning("Failed to load reviews for %s", self.user.user_id)
            return {}
        return {f"{r['order_id']}-{r['product_id']}": serialize_review(r) for r in rows}

    def already_reviewed(self, order_id: str, product_id: str) -> bool:
        # Not finding a review is the normal negative answer
        found = self.gateway.select_one(
            "reviews", filters={"order_id": order_id, "product_id": product_id}
        )
        return found is not None

    def submit_review(self, order_id: str, product_id: str, rating: int, review_text: Optional[str] = None):
        try:
            if not 1 <= rating <= 5:
                raise ValidationError("Rating must be between 1 and 5")
            order = self._own_order(order_id)
            if order["status"] != "delivered":
                raise ValidationError("Only delivered orders can be reviewed")
            if not any(oi["product_id"] == product_id for oi in order.get("order_items") or []):
                raise ValidationError("Product is not part of this order")
            if self.already_reviewed(order_id, product_id):
                raise ValidationError("You have already reviewed this product")
            review = self.gateway.insert(
                "reviews",
                {
                    "user_id": self.user.user_id,
                    "product_id": product_id,
                    "order_id": order_id,
                    "rating": rating,
                    "review_text": review_text or None,
                },
            )
        except (GatewayError, NotFound, ValidationError):
            self.notifier.error("Failed to submit review")
            raise
        self.notifier.success("Review submitted successfully")
        return serialize_review(review)
