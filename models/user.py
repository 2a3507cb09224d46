# --- models/user.py ---
from models import db
from datetime import datetime


class Profile(db.Model):
    __tablename__ = "profiles"

    # Same id as the identity provider's user (JWT "sub")
    id = db.Column(db.String(36), primary_key=True)
    full_name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(15), nullable=True)
    avatar_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Profile id={self.id}>"
