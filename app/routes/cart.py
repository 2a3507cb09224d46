from flask import Blueprint, request

from app.gateway import get_gateway, GatewayError
from app.schemas.cart import AddToCartRequest, UpdateCartRequest, RemoveFromCartRequest
from app.services import pricing
from app.services.cart import CartStore
from app.services.notifications import RequestNotifier
from app.utils import auth_required, current_user, ok, error, validate_schema
from app.version import API_PREFIX

cart_bp = Blueprint("cart", __name__, url_prefix=f"{API_PREFIX}/cart")


def _store():
    return CartStore(get_gateway(), RequestNotifier(), current_user())


def _cart_payload(store):
    return {
        "items": [item.to_dict() for item in store.items],
        "quote": pricing.quote(store.items).to_dict(),
    }


@cart_bp.route("", methods=["GET"])
@auth_required
def view_cart():
    store = _store()
    store.fetch_cart()
    return ok(_cart_payload(store))


@cart_bp.route("/add", methods=["POST"])
@auth_required
@validate_schema(AddToCartRequest)
def add_to_cart():
    data: AddToCartRequest = request.validated_data
    try:
        product = get_gateway().select_one("products", filters={"id": data.product_id})
    except GatewayError:
        return error("Failed to add to cart", status=503)
    if product is None:
        return error("Product not found", status=404)
    if product["stock"] <= 0:
        return error("Out of stock", status=409)

    store = _store()
    if not store.add_to_cart(data.product_id, data.quantity):
        return error("Failed to add to cart", status=503)
    return ok(_cart_payload(store), message="Added to cart")


@cart_bp.route("/update", methods=["POST"])
@auth_required
@validate_schema(UpdateCartRequest)
def update_cart_quantity():
    data: UpdateCartRequest = request.validated_data
    store = _store()
    if not store.update_quantity(data.product_id, data.quantity):
        return error("Failed to update cart", status=503)
    return ok(_cart_payload(store), message="Cart updated")


@cart_bp.route("/remove", methods=["POST"])
@auth_required
@validate_schema(RemoveFromCartRequest)
def remove_from_cart():
    data: RemoveFromCartRequest = request.validated_data
    store = _store()
    if not store.remove(data.product_id):
        return error("Failed to update cart", status=503)
    return ok(_cart_payload(store), message="Item removed")


@cart_bp.route("/clear", methods=["POST"])
@auth_required
def clear_cart():
    store = _store()
    if not store.clear():
        return error("Failed to clear cart", status=503)
    return ok(_cart_payload(store), message="Cart cleared")
