from flask import Blueprint, request, current_app
from flask_limiter.util import get_remote_address

from extensions import limiter
from app.gateway import get_gateway
from app.schemas.booking import TicketBookingRequest, PackageBookingRequest, HotelBookingRequest
from app.services.booking import BookingService
from app.services.notifications import RequestNotifier
from app.utils import auth_required, current_user, ok, error, validate_schema
from app.version import API_PREFIX

bookings_bp = Blueprint("bookings", __name__, url_prefix=f"{API_PREFIX}/bookings")

booking_limit = limiter.shared_limit(
    lambda: current_app.config["BOOKING_LIMIT_PER_IP"],
    scope="bookings",
    key_func=get_remote_address,
    error_message="Too many bookings from this IP",
)


def _bookings():
    return BookingService(get_gateway(), RequestNotifier(), current_user())


def _respond(result):
    if result.ok:
        return ok(result.booking, message=result.message, status=201, redirect=result.redirect)
    status = 404 if result.not_found else 503
    return error(result.message, status=status, redirect=result.redirect)


@bookings_bp.route("", methods=["GET"])
@auth_required
def my_bookings():
    return ok(_bookings().list_bookings())


@bookings_bp.route("/ticket", methods=["POST"])
@booking_limit
@auth_required
@validate_schema(TicketBookingRequest)
def book_ticket():
    data: TicketBookingRequest = request.validated_data
    result = _bookings().book_ticket(
        data.from_location,
        data.to_location,
        data.date,
        transport_type=data.transport_type,
        passengers=data.passengers,
    )
    return _respond(result)


@bookings_bp.route("/package", methods=["POST"])
@booking_limit
@auth_required
@validate_schema(PackageBookingRequest)
def book_package():
    data: PackageBookingRequest = request.validated_data
    return _respond(_bookings().book_package(data.package_id))


@bookings_bp.route("/hotel", methods=["POST"])
@booking_limit
@auth_required
@validate_schema(HotelBookingRequest)
def book_hotel():
    data: HotelBookingRequest = request.validated_data
    return _respond(_bookings().book_hotel(data.hotel_id))


@bookings_bp.route("/<booking_id>", methods=["DELETE"])
@auth_required
def cancel_booking(booking_id):
    if not _bookings().cancel_booking(booking_id):
        return error("Failed to cancel booking", status=404)
    return ok({"id": booking_id}, message="Booking cancelled")
