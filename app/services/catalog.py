import logging
from typing import Optional

from app.auth import UserContext
from app.gateway import Gateway, GatewayError
from app.services.notifications import Notifier

logger = logging.getLogger(__name__)


def _money(value):
    return float(value) if value is not None else None


def serialize_product(row):
    return {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"],
        "category": row["category"],
        "price": _money(row["price"]),
        "stock": row["stock"],
        "in_stock": row["stock"] > 0,
        "image_url": row["image_url"],
    }


def serialize_destination(row, detail=False):
    data = {
        "id": row["id"],
        "name": row["name"],
        "country": row["country"],
        "description": row["description"],
        "image_url": row["image_url"],
        "featured": bool(row.get("featured")),
        "best_time_to_visit": row.get("best_time_to_visit"),
    }
    if detail:
        for key in (
            "images", "highlights", "transport_details", "distance_from_town",
            "travel_time", "visiting_hours", "entry_fee", "location_coordinates",
        ):
            data[key] = row.get(key)
    return data


def serialize_hotel(row):
    destination = row.get("destination")
    return {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"],
        "price_per_night": _money(row["price_per_night"]),
        "rating": row["rating"],
        "budget_category": row["budget_category"],
        "amenities": row.get("amenities") or [],
        "distance_from_center": row.get("distance_from_center"),
        "contact_number": row.get("contact_number"),
        "image_url": row["image_url"],
        "destination": {"id": destination["id"], "name": destination["name"]} if destination else None,
    }


def serialize_package(row, detail=False):
    destination = row.get("destination")
    data = {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"],
        "duration_days": row["duration_days"],
        "duration_nights": row["duration_nights"],
        "price": _money(row["price"]),
        "includes": row.get("includes") or [],
        "image_url": row["image_url"],
        "destination": {"id": destination["id"], "name": destination["name"]} if destination else None,
    }
    if detail:
        data["itinerary"] = [
            {
                "day_number": day["day_number"],
                "title": day["title"],
                "description": day["description"],
                "activities": day.get("activities") or [],
                "meals_included": day.get("meals_included") or [],
            }
            for day in row.get("itinerary") or []
        ]
    return data


def _contains(needle, *values):
    needle = needle.lower()
    return any(needle in (v or "").lower() for v in values)


class CatalogService:
    """Read side of the catalog: products, destinations, hotels, packages."""

    def __init__(self, gateway: Gateway, notifier: Notifier):
        self.gateway = gateway
        self.notifier = notifier

    def _load(self, table, failure, **kwargs):
        try:
            return self.gateway.select(table, **kwargs)
        except GatewayError:
            self.notifier.error(failure)
            return []

    def _one(self, table, item_id, failure, joins=None):
        try:
            return self.gateway.select_one(table, filters={"id": item_id}, joins=joins)
        except GatewayError:
            self.notifier.error(failure)
            return None

    def products(self, q: str = "", category: Optional[str] = None):
        filters = {"category": category} if category else None
        rows = self._load("products", "Failed to load products", filters=filters, order=["category", "name"])
        if q:
            rows = [r for r in rows if _contains(q, r["name"], r["category"])]
        return [serialize_product(r) for r in rows]

    def product(self, product_id):
        row = self._one("products", product_id, "Failed to load product")
        return serialize_product(row) if row else None

    def destinations(self, q: str = "", featured: bool = False):
        filters = {"featured": True} if featured else None
        rows = self._load("destinations", "Failed to load destinations", filters=filters, order=["name"])
        if q:
            rows = [r for r in rows if _contains(q, r["name"], r["country"])]
        return [serialize_destination(r) for r in rows]

    def destination(self, destination_id):
        row = self._one("destinations", destination_id, "Failed to load destination")
        return serialize_destination(row, detail=True) if row else None

    def hotels(self, q: str = "", destination_id: Optional[str] = None, budget: Optional[str] = None):
        filters = {}
        if destination_id:
            filters["destination_id"] = destination_id
        if budget and budget != "all":
            filters["budget_category"] = budget
        rows = self._load(
            "hotels", "Failed to load hotels", filters=filters, order=["-rating"], joins=["destination"]
        )
        if q:
            rows = [
                r for r in rows
                if _contains(q, r["name"], (r.get("destination") or {}).get("name"))
            ]
        return [serialize_hotel(r) for r in rows]

    def packages(self, destination_id: Optional[str] = None):
        filters = {"destination_id": destination_id} if destination_id else None
        rows = self._load(
            "packages", "Failed to load packages", filters=filters, order=["price"], joins=["destination"]
        )
        return [serialize_package(r) for r in rows]

    def package(self, package_id):
        row = self._one("packages", package_id, "Failed to load package", joins=["destination", "itinerary"])
        return serialize_package(row, detail=True) if row else None


class SavedDestinations:
    def __init__(self, gateway: Gateway, notifier: Notifier, user: Optional[UserContext]):
        self.gateway = gateway
        self.notifier = notifier
        self.user = user

    def is_saved(self, destination_id: str) -> bool:
        """Lookup failures and missing rows both read as "not saved"."""
        if self.user is None:
            return False
        try:
            row = self.gateway.select_one(
                "saved_destinations",
                filters={"user_id": self.user.user_id, "destination_id": destination_id},
            )
        except GatewayError:
            return False
        return row is not None

    def toggle(self, destination_id: str) -> Optional[bool]:
        """Save or unsave; returns the new saved state, None on failure."""
        mine = {"user_id": self.user.user_id, "destination_id": destination_id}
        try:
            if self.is_saved(destination_id):
                self.gateway.delete("saved_destinations", mine)
                self.notifier.success("Removed from saved destinations")
                return False
            self.gateway.insert("saved_destinations", mine)
        except GatewayError:
            self.notifier.error("Failed to update saved destinations")
            return None
        self.notifier.success("Added to saved destinations")
        return True

    def list(self):
        try:
            rows = self.gateway.select(
                "saved_destinations",
                filters={"user_id": self.user.user_id},
                order=["-created_at"],
                joins=["destination"],
            )
        except GatewayError:
            self.notifier.error("Failed to load profile data")
            return []
        return [
            {"id": r["id"], "destination": serialize_destination(r["destination"])}
            for r in rows
            if r.get("destination")
        ]

    def remove(self, saved_id: str) -> bool:
        try:
            removed = self.gateway.delete(
                "saved_destinations", {"id": saved_id, "user_id": self.user.user_id}
            )
        except GatewayError:
            removed = []
        if not removed:
            self.notifier.error("Failed to remove destination")
            return False
        self.notifier.success("Destination removed")
        return True
