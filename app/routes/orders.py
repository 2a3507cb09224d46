from flask import Blueprint, request

from app.gateway import get_gateway, GatewayError
from app.schemas.review import ReviewRequest
from app.services.notifications import RequestNotifier
from app.services.orders import OrderService, ValidationError, NotFound
from app.utils import auth_required, current_user, ok, error, validate_schema
from app.version import API_PREFIX

orders_bp = Blueprint("orders", __name__, url_prefix=API_PREFIX)


def _orders():
    return OrderService(get_gateway(), RequestNotifier(), current_user())


@orders_bp.route("/orders", methods=["GET"])
@auth_required
def order_history():
    orders = _orders().history(
        q=request.args.get("q", "").strip(),
        status=request.args.get("status", "all"),
        payment_status=request.args.get("payment_status", "all"),
    )
    return ok(orders)


@orders_bp.route("/orders/<order_id>/cancel", methods=["POST"])
@auth_required
def cancel_order(order_id):
    try:
        _orders().cancel(order_id)
    except NotFound as e:
        return error(str(e), status=404)
    except ValidationError as e:
        return error(str(e), status=400)
    except GatewayError:
        return error("Failed to cancel order", status=503)
    return ok({"id": order_id, "status": "cancelled"}, message="Order cancelled successfully")


@orders_bp.route("/reviews", methods=["GET"])
@auth_required
def my_reviews():
    return ok(_orders().reviews())


@orders_bp.route("/orders/<order_id>/reviews", methods=["POST"])
@auth_required
@validate_schema(ReviewRequest)
def submit_review(order_id):
    data: ReviewRequest = request.validated_data
    try:
        review = _orders().submit_review(order_id, data.product_id, data.rating, data.review_text)
    except NotFound as e:
        return error(str(e), status=404)
    except ValidationError as e:
        return error(str(e), status=400)
    except GatewayError:
        return error("Failed to submit review", status=503)
    return ok(review, message="Review submitted successfully", status=201)
