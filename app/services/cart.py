"""Per-user cart backed by the ``cart_items`` table.

Every successful mutation is followed by a full refetch, so ``items`` always
mirrors what the store holds. Failures are reported through the notifier and
leave ``items`` untouched.
"""
import logging
from typing import List, Optional

from app.auth import UserContext
from app.gateway import Gateway, GatewayConflict, GatewayError
from app.schemas.cart import LineItem
from app.services.notifications import Notifier

logger = logging.getLogger(__name__)

CART_TABLE = "cart_items"


class CartStore:
    def __init__(self, gateway: Gateway, notifier: Notifier, user: Optional[UserContext]):
        self.gateway = gateway
        self.notifier = notifier
        self.user = user
        self.items: List[LineItem] = []

    def _mine(self, **filters):
        return {"user_id": self.user.user_id, **filters}

    def fetch_cart(self) -> List[LineItem]:
        """Load the cart joined with its products. Never raises."""
        if self.user is None:
            self.items = []
            return self.items
        try:
            return self.load()
        except GatewayError:
            self.notifier.error("Failed to load cart")
            return self.items

    def load(self) -> List[LineItem]:
        """Like :meth:`fetch_cart` but lets gateway errors through."""
        rows = self.gateway.select(
            CART_TABLE, filters=self._mine(), order=["created_at"], joins=["product"]
        )
        self.items = [LineItem.from_cart_row(row) for row in rows if row.get("product")]
        return self.items

    def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        if self.user is None:
            self.notifier.error("Please sign in to add items to cart")
            return False
        try:
            self._increment_or_insert(product_id, quantity)
        except GatewayError:
            self.notifier.error("Failed to add to cart")
            return False
        self.notifier.success("Added to cart")
        self.fetch_cart()
        return True

    def _increment_or_insert(self, product_id, quantity):
        existing = self.gateway.select_one(CART_TABLE, filters=self._mine(product_id=product_id))
        if existing:
            self._increment(existing, quantity)
            return
        try:
            self.gateway.insert(
                CART_TABLE,
                {"user_id": self.user.user_id, "product_id": product_id, "quantity": quantity},
            )
        except GatewayConflict:
            # Another session inserted the same product first; merge into its row.
            logger.info("Cart row for %s appeared concurrently, merging", product_id)
            existing = self.gateway.select_one(CART_TABLE, filters=self._mine(product_id=product_id))
            if existing is None:
                raise
            self._increment(existing, quantity)

    def _increment(self, row, quantity):
        self.gateway.update(
            CART_TABLE,
            {"quantity": row["quantity"] + quantity},
            self._mine(product_id=row["product_id"]),
        )

    def update_quantity(self, product_id: str, new_quantity: int) -> bool:
        """Overwrite a row's quantity; zero removes the row."""
        if self.user is None:
            return False
        try:
            if new_quantity == 0:
                self.gateway.delete(CART_TABLE, self._mine(product_id=product_id))
            else:
                self.gateway.update(
                    CART_TABLE, {"quantity": new_quantity}, self._mine(product_id=product_id)
                )
        except GatewayError:
            self.notifier.error("Failed to update cart")
            return False
        self.fetch_cart()
        return True

    def remove(self, product_id: str) -> bool:
        return self.update_quantity(product_id, 0)

    def clear(self) -> bool:
        """Delete every row of the user's cart."""
        if self.user is None:
            return False
        try:
            self.wipe()
        except GatewayError:
            self.notifier.error("Failed to clear cart")
            return False
        return True

    def wipe(self) -> None:
        """Delete every row of the user's cart, letting gateway errors through."""
        self.gateway.delete(CART_TABLE, self._mine())
        self.items = []

    def quantity_of(self, product_id: str) -> int:
        return sum(i.quantity for i in self.items if i.product_id == product_id)
