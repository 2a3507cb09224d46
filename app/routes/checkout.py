from flask import Blueprint, request, current_app
from flask_limiter.util import get_remote_address

from extensions import limiter
from app.gateway import get_gateway
from app.schemas.checkout import CheckoutRequest, DirectBuyItem
from app.services.cart import CartStore
from app.services.checkout import (
    Checkout,
    CATALOG_PATH,
    UNAUTHENTICATED,
    INVALID,
    EMPTY,
    BUSY,
    PAYMENT_FAILED,
)
from app.services.notifications import RequestNotifier
from app.services.payments import PaymentSelection
from app.utils import auth_required, current_user, ok, error, validate_schema
from app.version import API_PREFIX

checkout_bp = Blueprint("checkout", __name__, url_prefix=f"{API_PREFIX}/checkout")

FAILURE_STATUS = {
    UNAUTHENTICATED: 401,
    INVALID: 400,
    EMPTY: 400,
    BUSY: 409,
    PAYMENT_FAILED: 402,
}


def _checkout():
    gateway = get_gateway()
    notifier = RequestNotifier()
    user = current_user()
    return Checkout(
        gateway,
        CartStore(gateway, notifier, user),
        current_app.extensions["payment_gateway"],
        notifier,
        user,
    )


@checkout_bp.route("", methods=["GET"])
@auth_required
def preview_checkout():
    """Items and totals for the checkout page.

    ``?product_id=<id>&quantity=<n>`` previews a direct buy instead of the cart.
    """
    product_id = request.args.get("product_id")
    items = None
    if product_id:
        quantity = max(request.args.get("quantity", 1, type=int) or 1, 1)
        items = [DirectBuyItem(product_id=product_id, quantity=quantity)]

    resolved, quote = _checkout().preview(items)
    data = {"items": [i.to_dict() for i in resolved], "quote": quote.to_dict()}
    if not resolved:
        return ok(data, message="Your cart is empty", redirect=CATALOG_PATH)
    return ok(data)


@checkout_bp.route("", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["CHECKOUT_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many checkout attempts from this IP",
)
@auth_required
@validate_schema(CheckoutRequest)
def place_order():
    data: CheckoutRequest = request.validated_data
    payment = PaymentSelection(data.payment_method, data.upi_id)
    result = _checkout().checkout(
        payment,
        items=data.items if data.direct_buy else None,
        direct_buy=data.direct_buy,
    )
    if result.ok:
        return ok(result.to_dict(), message=result.message, status=201, redirect=result.redirect)
    return error(
        result.message,
        status=FAILURE_STATUS.get(result.failure, 503),
        code=result.failure,
        redirect=result.redirect,
    )
