# --- models/travel.py ---
from models import db, new_id
from datetime import datetime


class Destination(db.Model):
    __tablename__ = "destinations"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    country = db.Column(db.String(60), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    image_url = db.Column(db.String(255), nullable=False, default="")
    images = db.Column(db.JSON, nullable=True)
    highlights = db.Column(db.JSON, nullable=True)
    best_time_to_visit = db.Column(db.String(100), nullable=True)
    featured = db.Column(db.Boolean, default=False)

    # Travel info
    transport_details = db.Column(db.Text, nullable=True)
    distance_from_town = db.Column(db.String(100), nullable=True)
    travel_time = db.Column(db.String(100), nullable=True)
    visiting_hours = db.Column(db.String(100), nullable=True)
    entry_fee = db.Column(db.String(100), nullable=True)
    location_coordinates = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class SavedDestination(db.Model):
    __tablename__ = "saved_destinations"
    __table_args__ = (
        db.UniqueConstraint("user_id", "destination_id", name="uq_saved_destinations_user_destination"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), nullable=False, index=True)
    destination_id = db.Column(db.String(36), db.ForeignKey("destinations.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    destination = db.relationship("Destination")


class Hotel(db.Model):
    __tablename__ = "hotels"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    destination_id = db.Column(db.String(36), db.ForeignKey("destinations.id"), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    price_per_night = db.Column(db.Numeric(10, 2), nullable=False)
    rating = db.Column(db.Float, nullable=False, default=0)
    budget_category = db.Column(db.String(20), nullable=False, default="mid-range")  # budget, mid-range, luxury
    amenities = db.Column(db.JSON, nullable=True)
    contact_number = db.Column(db.String(20), nullable=True)
    distance_from_center = db.Column(db.String(50), nullable=True)
    image_url = db.Column(db.String(255), nullable=False, default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    destination = db.relationship("Destination")


class Package(db.Model):
    __tablename__ = "packages"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    destination_id = db.Column(db.String(36), db.ForeignKey("destinations.id"), nullable=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    duration_days = db.Column(db.Integer, nullable=False)
    duration_nights = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    includes = db.Column(db.JSON, nullable=True)
    image_url = db.Column(db.String(255), nullable=False, default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    destination = db.relationship("Destination")
    itinerary = db.relationship(
        "PackageItinerary",
        order_by="PackageItinerary.day_number",
        cascade="all, delete-orphan",
        lazy=True,
    )


class PackageItinerary(db.Model):
    __tablename__ = "package_itinerary"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    package_id = db.Column(db.String(36), db.ForeignKey("packages.id"), nullable=False)
    day_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    activities = db.Column(db.JSON, nullable=True)
    meals_included = db.Column(db.JSON, nullable=True)
