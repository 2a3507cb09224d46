from models import db, new_id
from datetime import datetime


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), nullable=False, index=True)
    booking_type = db.Column(db.String(20), nullable=False)  # ticket, package, hotel
    hotel_id = db.Column(db.String(36), db.ForeignKey("hotels.id"), nullable=True)
    package_id = db.Column(db.String(36), db.ForeignKey("packages.id"), nullable=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    passengers = db.Column(db.Integer, nullable=True)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="confirmed")
    # Type-specific payload, e.g. {"from": ..., "to": ..., "transport_type": ...}
    ticket_details = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    hotel = db.relationship("Hotel")
    package = db.relationship("Package")
