from .catalog import catalog_bp
from .cart import cart_bp
from .checkout import checkout_bp
from .orders import orders_bp
from .bookings import bookings_bp
from .profile import profile_bp


__all__ = [
    'catalog_bp',
    'cart_bp',
    'checkout_bp',
    'orders_bp',
    'bookings_bp',
    'profile_bp',
]
