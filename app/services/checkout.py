"""Checkout: turn priced line items into an order and reconcile the cart.

One attempt walks ``IDLE -> VALIDATING -> SUBMITTING -> CREATE_ORDER ->
CREATE_ORDER_ITEMS -> CLEAR_CART -> DONE``; any failure lands in ``FAILED``.
Validation never touches the gateway. The three writes share one gateway
transaction, so a failure after the order insert leaves nothing behind.
"""
import logging
from enum import Enum
from typing import List, Optional, Sequence

from opentelemetry import trace

from app.auth import UserContext
from app.gateway import Gateway, GatewayError
from app.metrics import CHECKOUT_COUNTER
from app.schemas.cart import LineItem
from app.services import pricing
from app.services.cart import CartStore
from app.services.notifications import Notifier
from app.services.payments import COD, PaymentError, PaymentGateway, PaymentSelection
from app.utils.auth import SIGN_IN_PATH

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

ORDER_HISTORY_PATH = "/shopping/my-bookings"
CATALOG_PATH = "/shopping"


class CheckoutState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    CREATE_ORDER = "create_order"
    CREATE_ORDER_ITEMS = "create_order_items"
    CLEAR_CART = "clear_cart"
    DONE = "done"
    FAILED = "failed"


# failure kinds
UNAUTHENTICATED = "unauthenticated"
INVALID = "invalid"
EMPTY = "empty"
BUSY = "busy"
PAYMENT_FAILED = "payment_failed"
GATEWAY_FAILED = "gateway_failed"


class CheckoutResult:
    def __init__(self, state, message, order=None, items=None, quote=None, failure=None, redirect=None):
        self.state = state
        self.message = message
        self.order = order
        self.items = items or []
        self.quote = quote
        self.failure = failure
        self.redirect = redirect

    @property
    def ok(self):
        return self.state == CheckoutState.DONE

    def to_dict(self):
        data = {"state": self.state.value}
        if self.order:
            data["order"] = {
                "id": self.order["id"],
                "total_amount": float(self.order["total_amount"]),
                "payment_method": self.order["payment_method"],
                "payment_status": self.order["payment_status"],
                "status": self.order["status"],
                "items": [i.to_dict() for i in self.items],
            }
        if self.quote:
            data["quote"] = self.quote.to_dict()
        return data


class Checkout:
    def __init__(
        self,
        gateway: Gateway,
        cart: CartStore,
        payments: PaymentGateway,
        notifier: Notifier,
        user: Optional[UserContext],
    ):
        self.gateway = gateway
        self.cart = cart
        self.payments = payments
        self.notifier = notifier
        self.user = user
        self.state = CheckoutState.IDLE
        self.processing = False

    # -- read side --------------------------------------------------------
    def preview(self, items=None):
        """Items and price quote for the checkout view.

        Returns ``(items, quote)``; an empty item list means the view should
        send the user back to the catalog.
        """
        if items is None:
            resolved = self.cart.fetch_cart()
        else:
            try:
                resolved = self._resolve(items)
            except (GatewayError, LookupError):
                self.notifier.error("Failed to load product")
                resolved = []
        return resolved, pricing.quote(resolved)

    def _resolve(self, items) -> List[LineItem]:
        if items is None:
            return self.cart.load()
        wanted = [i for i in items if not isinstance(i, LineItem)]
        if not wanted:
            return list(items)
        ids = [i.product_id for i in wanted]
        rows = self.gateway.select("products", filters={"id": ("in", ids)})
        products = {row["id"]: row for row in rows}
        missing = [pid for pid in ids if pid not in products]
        if missing:
            raise LookupError(f"Unknown product {missing[0]}")
        return [
            i if isinstance(i, LineItem) else LineItem.from_product_row(products[i.product_id], i.quantity)
            for i in items
        ]

    # -- write side -------------------------------------------------------
    def _fail(self, message, failure, redirect=None, items=None, quote=None):
        self.state = CheckoutState.FAILED
        self.notifier.error(message)
        return CheckoutResult(
            self.state, message, items=items, quote=quote, failure=failure, redirect=redirect
        )

    def checkout(
        self,
        payment: PaymentSelection,
        items: Optional[Sequence] = None,
        direct_buy: bool = False,
    ) -> CheckoutResult:
        """Place an order for ``items`` (direct buy) or the persisted cart."""
        if self.processing:
            self.notifier.error("Checkout already in progress")
            return CheckoutResult(self.state, "Checkout already in progress", failure=BUSY)
        result = self._run(payment, items, direct_buy)
        CHECKOUT_COUNTER.labels(payment.method, result.state.value).inc()
        if not result.ok:
            logger.info("checkout failed: %s", result.failure)
        return result

    def _run(self, payment, items, direct_buy):
        self.state = CheckoutState.VALIDATING
        if self.user is None:
            return self._fail("Please sign in to continue", UNAUTHENTICATED, redirect=SIGN_IN_PATH)
        problem = payment.validation_error()
        if problem:
            return self._fail(problem, INVALID)

        try:
            resolved = [] if direct_buy and items is None else self._resolve(items)
        except LookupError as e:
            return self._fail(str(e), INVALID)
        except GatewayError:
            return self._fail("Order failed. Please try again.", GATEWAY_FAILED)
        if not resolved:
            return self._fail("Your cart is empty", EMPTY, redirect=CATALOG_PATH)

        quote = pricing.quote(resolved)
        self.processing = True
        try:
            self.state = CheckoutState.SUBMITTING
            try:
                receipt = self.payments.authorize(payment, pricing.to_money(quote.total))
            except PaymentError as e:
                logger.warning("payment rejected: %s", e)
                return self._fail("Payment failed. Please try again.", PAYMENT_FAILED, items=resolved, quote=quote)

            try:
                order = self._persist(receipt, resolved, quote, direct_buy)
            except GatewayError as e:
                logger.error("order creation failed at %s: %s", self.state.value, e.to_dict())
                return self._fail("Order failed. Please try again.", GATEWAY_FAILED, items=resolved, quote=quote)
        finally:
            self.processing = False

        self.state = CheckoutState.DONE
        if payment.method == COD:
            message = "Your order has been placed with Cash on Delivery!"
        else:
            message = "Payment successful! Your order has been placed."
        self.notifier.success(message)
        return CheckoutResult(
            self.state, message, order=order, items=resolved, quote=quote, redirect=ORDER_HISTORY_PATH
        )

    def _persist(self, receipt, items, quote, direct_buy):
        with tracer.start_as_current_span("checkout.persist_order"), self.gateway.atomic():
            self.state = CheckoutState.CREATE_ORDER
            order = self.gateway.insert(
                "orders",
                {
                    "user_id": self.user.user_id,
                    "total_amount": pricing.to_money(quote.total),
                    "payment_method": receipt.payment_method,
                    "payment_status": receipt.payment_status,
                    "status": "processing",
                },
            )

            self.state = CheckoutState.CREATE_ORDER_ITEMS
            self.gateway.insert(
                "order_items",
                [
                    {
                        "order_id": order["id"],
                        "product_id": item.product_id,
                        "quantity": item.quantity,
                        "price": item.unit_price,
                    }
                    for item in items
                ],
            )

            if not direct_buy:
                self.state = CheckoutState.CLEAR_CART
                self.cart.wipe()
        return order
