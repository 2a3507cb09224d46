import uuid

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def new_id() -> str:
    return str(uuid.uuid4())


# Re-export common models for convenience
from .user import Profile  # noqa: F401,E402
from .travel import Destination, SavedDestination, Hotel, Package, PackageItinerary  # noqa: F401,E402
from .booking import Booking  # noqa: F401,E402
from .product import Product  # noqa: F401,E402
from .cart import CartItem  # noqa: F401,E402
from .order import Order, OrderItem, Review  # noqa: F401,E402

# Table name -> model, as addressed through the data gateway
TABLES = {
    model.__tablename__: model
    for model in (
        Profile,
        Destination,
        SavedDestination,
        Hotel,
        Package,
        PackageItinerary,
        Booking,
        Product,
        CartItem,
        Order,
        OrderItem,
        Review,
    )
}
