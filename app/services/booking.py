"""Ticket, package and hotel bookings: one insert into ``bookings`` each."""
import datetime as dt
import logging
from decimal import Decimal
from typing import NamedTuple, Optional

from app.auth import UserContext
from app.gateway import Gateway, GatewayError
from app.metrics import BOOKING_COUNTER
from app.services.notifications import Notifier
from app.services.pricing import to_money
from app.utils.auth import SIGN_IN_PATH

logger = logging.getLogger(__name__)

TICKET = "ticket"
PACKAGE = "package"
HOTEL = "hotel"

# Flat fare per passenger; anything not listed pays the vehicle rate
TRANSPORT_RATES = {"train": Decimal("50"), "bus": Decimal("30"), "vehicle": Decimal("100")}
DEFAULT_RATE = Decimal("100")
MAX_PASSENGERS = 6
DEFAULT_HOTEL_NIGHTS = 2
LEAD_TIME_DAYS = 7
PROFILE_PATH = "/profile"


class BookingResult(NamedTuple):
    ok: bool
    message: str
    booking: Optional[dict] = None
    redirect: Optional[str] = None
    not_found: bool = False


def ticket_price(transport_type: str, passengers: int) -> Decimal:
    return TRANSPORT_RATES.get(transport_type, DEFAULT_RATE) * passengers


def hotel_price(price_per_night, nights: int = DEFAULT_HOTEL_NIGHTS) -> Decimal:
    return Decimal(str(price_per_night)) * nights


def serialize_booking(row):
    return {
        "id": row["id"],
        "booking_type": row["booking_type"],
        "status": row["status"],
        "start_date": row["start_date"].isoformat() if row.get("start_date") else None,
        "end_date": row["end_date"].isoformat() if row.get("end_date") else None,
        "passengers": row.get("passengers"),
        "total_price": float(row["total_price"]),
        "ticket_details": row.get("ticket_details"),
        "package": {"name": row["package"]["name"]} if row.get("package") else None,
        "hotel": {"name": row["hotel"]["name"]} if row.get("hotel") else None,
        "created_at": row["created_at"].isoformat() if row.get("created_at") else None,
    }


class BookingService:
    def __init__(self, gateway: Gateway, notifier: Notifier, user: Optional[UserContext], today=None):
        self.gateway = gateway
        self.notifier = notifier
        self.user = user
        self._today = today or dt.date.today

    def _signed_out(self):
        self.notifier.error("Please sign in to continue")
        return BookingResult(False, "Please sign in to continue", redirect=SIGN_IN_PATH)

    def _book(self, row, success, failure):
        booking_type = row["booking_type"]
        try:
            booking = self.gateway.insert("bookings", row)
        except GatewayError:
            BOOKING_COUNTER.labels(booking_type, "failed").inc()
            self.notifier.error(failure)
            return BookingResult(False, failure)
        BOOKING_COUNTER.labels(booking_type, "done").inc()
        self.notifier.success(success)
        return BookingResult(True, success, booking=serialize_booking(booking), redirect=PROFILE_PATH)

    def book_ticket(self, origin: str, destination: str, travel_date: dt.date,
                    transport_type: str = "train", passengers: int = 1) -> BookingResult:
        if self.user is None:
            return self._signed_out()
        if not 1 <= passengers <= MAX_PASSENGERS:
            self.notifier.error(f"Passengers must be between 1 and {MAX_PASSENGERS}")
            return BookingResult(False, f"Passengers must be between 1 and {MAX_PASSENGERS}")
        return self._book(
            {
                "user_id": self.user.user_id,
                "booking_type": TICKET,
                "start_date": travel_date,
                "total_price": to_money(ticket_price(transport_type, passengers)),
                "passengers": passengers,
                "ticket_details": {
                    "from": origin,
                    "to": destination,
                    "transport_type": transport_type,
                },
            },
            "Booking confirmed successfully!",
            "Failed to create booking",
        )

    def book_package(self, package_id: str) -> BookingResult:
        if self.user is None:
            return self._signed_out()
        try:
            package = self.gateway.select_one("packages", filters={"id": package_id})
        except GatewayError:
            package = None
        if package is None:
            self.notifier.error("Failed to book package")
            return BookingResult(False, "Package not found", not_found=True)
        start = self._today() + dt.timedelta(days=LEAD_TIME_DAYS)
        return self._book(
            {
                "user_id": self.user.user_id,
                "booking_type": PACKAGE,
                "package_id": package["id"],
                "start_date": start,
                "end_date": start + dt.timedelta(days=package["duration_days"]),
                "total_price": to_money(package["price"]),
                "passengers": 1,
            },
            "Package booked successfully!",
            "Failed to book package",
        )

    def book_hotel(self, hotel_id: str) -> BookingResult:
        if self.user is None:
            return self._signed_out()
        try:
            hotel = self.gateway.select_one("hotels", filters={"id": hotel_id})
        except GatewayError:
            hotel = None
        if hotel is None:
            self.notifier.error("Failed to book hotel")
            return BookingResult(False, "Hotel not found", not_found=True)
        start = self._today() + dt.timedelta(days=LEAD_TIME_DAYS)
        return self._book(
            {
                "user_id": self.user.user_id,
                "booking_type": HOTEL,
                "hotel_id": hotel["id"],
                "start_date": start,
                "end_date": start + dt.timedelta(days=DEFAULT_HOTEL_NIGHTS),
                "total_price": to_money(hotel_price(hotel["price_per_night"])),
            },
            "Hotel booked successfully!",
            "Failed to book hotel",
        )

    def list_bookings(self):
        if self.user is None:
            return []
        try:
            rows = self.gateway.select(
                "bookings",
                filters={"user_id": self.user.user_id},
                order=["-created_at"],
                joins=["package", "hotel"],
            )
        except GatewayError:
            self.notifier.error("Failed to load profile data")
            return []
        return [serialize_booking(r) for r in rows]

    def cancel_booking(self, booking_id: str) -> bool:
        if self.user is None:
            return False
        try:
            removed = self.gateway.delete("bookings", {"id": booking_id, "user_id": self.user.user_id})
        except GatewayError:
            self.notifier.error("Failed to cancel booking")
            return False
        if not removed:
            self.notifier.error("Failed to cancel booking")
            return False
        self.notifier.success("Booking cancelled")
        return True
