import datetime as dt
from decimal import Decimal

import pytest

from app.auth import UserContext
from app.gateway import SQLAlchemyGateway
from app.services.booking import BookingService, ticket_price, hotel_price
from app.utils.auth import SIGN_IN_PATH
from app.services.notifications import RecordingNotifier
from app.version import API_PREFIX
from models import db
from models.booking import Booking
from models.travel import Destination, Hotel, Package

from conftest import login
from fakes import FlakyGateway, UntouchableGateway

USER = UserContext(user_id="user-1")
TODAY = dt.date(2024, 3, 1)


def _service(gateway=None, user=USER):
    notifier = RecordingNotifier()
    service = BookingService(gateway or SQLAlchemyGateway(db.session), notifier, user, today=lambda: TODAY)
    return service, notifier


def _destination():
    dest = Destination(name="Munnar", country="India")
    db.session.add(dest)
    db.session.commit()
    return dest.id


def _package(days=3, price="12999.00"):
    pkg = Package(destination_id=_destination(), name="Tea Garden Escape",
                  duration_days=days, duration_nights=days - 1, price=Decimal(price))
    db.session.add(pkg)
    db.session.commit()
    return pkg.id


def _hotel(rate="3500.00"):
    hotel = Hotel(destination_id=_destination(), name="Misty Hills", price_per_night=Decimal(rate))
    db.session.add(hotel)
    db.session.commit()
    return hotel.id


@pytest.mark.parametrize("transport,passengers,expected", [
    ("train", 2, Decimal("100")),
    ("bus", 3, Decimal("90")),
    ("vehicle", 2, Decimal("200")),
    ("flight", 1, Decimal("100")),
    ("ferry", 2, Decimal("200")),
])
def test_ticket_price(transport, passengers, expected):
    assert ticket_price(transport, passengers) == expected


def test_hotel_price_defaults_to_two_nights():
    assert hotel_price(Decimal("3500.00")) == Decimal("7000.00")


def test_book_ticket(app):
    service, notifier = _service()
    result = service.book_ticket("Kochi", "Munnar", dt.date(2024, 4, 2), "bus", 3)
    assert result.ok
    assert result.redirect == "/profile"
    booking = Booking.query.one()
    assert booking.booking_type == "ticket"
    assert booking.total_price == Decimal("90.00")
    assert booking.start_date == dt.date(2024, 4, 2)
    assert booking.ticket_details == {"from": "Kochi", "to": "Munnar", "transport_type": "bus"}
    assert notifier.last == ("success", "Booking confirmed successfully!")


def test_ticket_passenger_limit(app):
    service, notifier = _service(gateway=UntouchableGateway())
    result = service.book_ticket("Kochi", "Munnar", TODAY, "train", 7)
    assert not result.ok
    assert notifier.last[0] == "error"


def test_book_package_starts_a_week_out(app):
    pid = _package(days=3)
    service, notifier = _service()
    result = service.book_package(pid)
    assert result.ok
    booking = Booking.query.one()
    assert booking.start_date == dt.date(2024, 3, 8)
    assert booking.end_date == dt.date(2024, 3, 11)
    assert booking.total_price == Decimal("12999.00")
    assert booking.passengers == 1
    assert notifier.last == ("success", "Package booked successfully!")


def test_book_hotel_two_nights(app):
    hid = _hotel()
    service, notifier = _service()
    result = service.book_hotel(hid)
    assert result.ok
    booking = Booking.query.one()
    assert booking.total_price == Decimal("7000.00")
    assert booking.start_date == dt.date(2024, 3, 8)
    assert booking.end_date == dt.date(2024, 3, 10)
    assert notifier.last == ("success", "Hotel booked successfully!")


def test_missing_package(app):
    service, _ = _service()
    result = service.book_package("nope")
    assert not result.ok
    assert result.not_found
    assert Booking.query.count() == 0


def test_failed_insert_notifies(app):
    hid = _hotel()
    service, notifier = _service(FlakyGateway(db.session, fail_on={("insert", "bookings")}))
    result = service.book_hotel(hid)
    assert not result.ok
    assert notifier.last == ("error", "Failed to book hotel")


def test_signed_out_booking(app):
    gateway = UntouchableGateway()
    service, notifier = _service(gateway=gateway, user=None)
    result = service.book_ticket("A", "B", TODAY)
    assert result.redirect == SIGN_IN_PATH == "/auth"
    assert gateway.calls == []
    assert notifier.last == ("error", "Please sign in to continue")


def test_list_and_cancel_own_bookings(app):
    pid = _package()
    service, notifier = _service()
    booked = service.book_package(pid).booking
    other, _ = _service(user=UserContext(user_id="someone-else"))

    assert not other.cancel_booking(booked["id"])
    listed = service.list_bookings()
    assert [b["package"]["name"] for b in listed] == ["Tea Garden Escape"]

    assert service.cancel_booking(booked["id"])
    assert notifier.last == ("success", "Booking cancelled")
    assert service.list_bookings() == []


# --- HTTP ---

def test_ticket_booking_over_http(client):
    _, headers = login(client)
    resp = client.post(
        f"{API_PREFIX}/bookings/ticket",
        json={"from": "Kochi", "to": "Munnar", "date": "2030-01-15", "transport_type": "train", "passengers": 2},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["total_price"] == 100.0
    assert body["redirect"] == "/profile"

    listed = client.get(f"{API_PREFIX}/bookings", headers=headers).get_json()["data"]
    assert listed[0]["ticket_details"]["to"] == "Munnar"


def test_ticket_booking_validates_passengers(client):
    _, headers = login(client)
    resp = client.post(
        f"{API_PREFIX}/bookings/ticket",
        json={"from": "Kochi", "to": "Munnar", "date": "2030-01-15", "passengers": 9},
        headers=headers,
    )
    assert resp.status_code == 400


def test_unknown_hotel_is_404(client):
    _, headers = login(client)
    resp = client.post(f"{API_PREFIX}/bookings/hotel", json={"hotel_id": "missing"}, headers=headers)
    assert resp.status_code == 404


def test_vehicle_booking_over_http(client):
    _, headers = login(client)
    resp = client.post(
        f"{API_PREFIX}/bookings/ticket",
        json={"from": "Kochi", "to": "Alleppey", "date": "2030-01-15", "transport_type": "vehicle", "passengers": 2},
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["total_price"] == 200.0
    assert body["data"]["ticket_details"]["transport_type"] == "vehicle"


def test_unknown_transport_rejected_over_http(client):
    _, headers = login(client)
    resp = client.post(
        f"{API_PREFIX}/bookings/ticket",
        json={"from": "Kochi", "to": "Alleppey", "date": "2030-01-15", "transport_type": "flight"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert Booking.query.count() == 0
